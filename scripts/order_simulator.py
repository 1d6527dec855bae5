#!/usr/bin/env python3
"""
Order Simulator.

Drives client sessions against a running order API: each simulated
person picks a legal meal and submits, some change their mind and
resubmit (which updates their existing order), and a watcher prints the
live view as feed events arrive.

Usage:
    # Start the API first:
    python -m uvicorn server.order_api.main:app --port 8082

    python scripts/order_simulator.py --people 5
    python scripts/order_simulator.py --people 3 --resubmit 2 --interval 0.5
"""
import argparse
import asyncio
import contextlib
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

from ordering import (  # noqa: E402
    DEFAULT_MENU,
    FeedAdapter,
    HttpOrderStore,
    InvalidCombinationError,
    OrderSession,
    StoreError,
    TodayOrdersView,
)
from ordering.days import local_now  # noqa: E402
from ordering.menu import is_legal  # noqa: E402

NAMES = ["Amina", "Baraka", "Neema", "Juma", "Rehema", "Hamisi", "Zawadi", "Salim"]


def pick_meal(session: OrderSession, rng: random.Random) -> None:
    """Choose a random main, then a random side, retrying illegal pairs."""
    main = rng.choice(DEFAULT_MENU.mains)
    session.choose_main(main)
    if main in DEFAULT_MENU.standalone_mains:
        return
    sides = list(DEFAULT_MENU.sides)
    rng.shuffle(sides)
    for side in sides:
        try:
            session.choose_side(side)
            return
        except InvalidCombinationError:
            print(f"  [INFO] {side} is not served with {main}, trying another side")


async def run_person(store: HttpOrderStore, name: str, resubmits: int, interval: float, rng: random.Random):
    session = OrderSession(store, name=name)
    existing = await session.load(local_now())
    if existing:
        print(f"[INFO] {name} already ordered today: {existing.items}")

    for attempt in range(resubmits + 1):
        pick_meal(session, rng)
        try:
            order = await session.submit(local_now())
        except StoreError as e:
            print(f"[ERROR] {name}: {e}")
            return
        verb = "updated" if attempt or existing else "placed"
        print(f"[ORDER] {name} {verb} {order.items} ({session.draft_total} TZS incl. delivery)")
        await asyncio.sleep(interval)


async def watch(store: HttpOrderStore, view: TodayOrdersView, retry_delay: float = 2.0):
    """Keep the view live; after a dropped feed, refetch and subscribe again."""
    adapter = FeedAdapter(view)

    async def events():
        async for event in store.subscribe():
            yield event
            summary = view.summary()
            print(
                f"  [FEED] {event.event_type}: {summary.order_count} orders, "
                f"{summary.total_revenue} TZS"
            )

    while True:
        await adapter.run(events())
        print(f"  [WARN] Feed stopped ({adapter.last_error}), reconnecting in {retry_delay}s")
        await asyncio.sleep(retry_delay)
        try:
            await view.refresh(store, local_now())
        except StoreError as e:
            print(f"  [WARN] Refetch failed: {e}")


async def simulate(args):
    rng = random.Random(args.seed)
    async with HttpOrderStore(args.api_url) as store:
        view = TodayOrdersView()
        await view.refresh(store, local_now())
        print(f"[INFO] {len(view)} orders already placed today")

        watcher = asyncio.create_task(watch(store, view))
        await asyncio.sleep(0.5)
        try:
            for name in NAMES[: args.people]:
                await run_person(store, name, args.resubmit, args.interval, rng)
            await asyncio.sleep(1.0)
        finally:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher

        await view.refresh(store, local_now())
        print("\nToday's counts:")
        for label, count in view.food_counts.most_common():
            legal = is_legal(*label.partition(" + ")[::2]) if " + " in label else True
            print(f"  {count} x {label}{'' if legal else ' (no longer orderable)'}")
        print(f"Total: {view.total_revenue} TZS")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Simulate people ordering food",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--api-url", default="http://localhost:8082", help="Order API base URL")
    parser.add_argument("--people", type=int, default=4, help="Number of people (default: 4)")
    parser.add_argument("--resubmit", type=int, default=1, help="Times each person changes their order")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between submissions")
    parser.add_argument("--seed", type=int, help="Random seed")
    args = parser.parse_args()

    print("=" * 60)
    print("Food Order Simulator")
    print("=" * 60)

    try:
        asyncio.run(simulate(args))
        print("\n[INFO] Simulation complete")
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
    except StoreError as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
