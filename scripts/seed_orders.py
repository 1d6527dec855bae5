#!/usr/bin/env python3
"""
Seed the order database with demo orders.

Writes a handful of orders for today and yesterday straight into the
SQLite file the order API serves, so the summary and export endpoints
have something to show.

Usage:
    python scripts/seed_orders.py
    python scripts/seed_orders.py --db ./orders.db --clear
"""
import argparse
import asyncio
import random
import sys
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))
sys.path.insert(0, str(BASE_DIR))

from ordering.days import local_now, start_of_day  # noqa: E402
from ordering.menu import DEFAULT_MENU, all_combinations, is_legal  # noqa: E402
from ordering.models import OrderCreate  # noqa: E402
from server.order_api.database import SQLiteOrderStore  # noqa: E402

DEMO_NAMES = ["Amina", "Baraka", "Neema", "Juma", "Rehema", "Hamisi", "Zawadi", "Salim"]


def legal_labels() -> list[str]:
    """Every orderable label on the default menu."""
    labels = list(DEFAULT_MENU.standalone_mains)
    for label in all_combinations(DEFAULT_MENU):
        main, _, side = label.partition(" + ")
        if is_legal(main, side, DEFAULT_MENU):
            labels.append(label)
    return sorted(labels)


async def seed(store: SQLiteOrderStore, people: int, seed_value: int) -> int:
    """Insert one order per person for today and for yesterday."""
    rng = random.Random(seed_value)
    labels = legal_labels()
    now = local_now()
    inserted = 0
    for day_offset in (1, 0):
        base = start_of_day(now) - timedelta(days=day_offset) + timedelta(hours=11)
        for index, name in enumerate(DEMO_NAMES[:people]):
            timestamp = base + timedelta(minutes=7 * index)
            if timestamp > now:
                timestamp = now
            await store.insert(OrderCreate(name=name, items=[rng.choice(labels)], timestamp=timestamp))
            inserted += 1
    return inserted


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Seed the order database with demo orders")
    parser.add_argument("--db", help="SQLite file (default: FOOD_ORDER_DATA_PATH/orders.db)")
    parser.add_argument("--people", type=int, default=6, help="Number of people (default: 6)")
    parser.add_argument("--seed", type=int, default=7, help="Random seed (default: 7)")
    parser.add_argument("--clear", action="store_true", help="Delete today's orders first")
    args = parser.parse_args()

    store = SQLiteOrderStore(db_path=args.db)
    print(f"[INFO] Seeding {store.db_path}")

    if args.clear:
        removed = asyncio.run(store.delete_where(since=start_of_day(local_now())))
        print(f"[INFO] Removed {removed} orders from today")

    count = asyncio.run(seed(store, min(args.people, len(DEMO_NAMES)), args.seed))
    print(f"[INFO] Inserted {count} orders")


if __name__ == "__main__":
    main()
