"""Live order feed.

``OrderFeed`` fans order inserts and deletes out to every connected
viewer. ``FeedAdapter`` folds a stream of those events into a
``TodayOrdersView`` so viewers stay current without refetching.
"""

import asyncio
import logging
import threading
from collections import Counter, deque
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from .aggregation import TodayOrdersView
from .days import local_now
from .errors import StoreError
from .events import FeedEvent, OrderDeleted

logger = logging.getLogger(__name__)


class OrderFeed:
    """Fan-out of order changes to the viewers of the order list.

    Stores publish from request handlers; viewers read through
    ``subscribe``. A short replay buffer lets a viewer that just
    reconnected see the changes it missed before it refetches. A viewer
    that stops reading is disconnected once its queue fills, so one slow
    browser tab never holds up the stores.
    """

    def __init__(self, max_history: int = 100, queue_size: int = 100):
        """
        Args:
            max_history: Number of recent changes kept for replay.
            queue_size: Changes a viewer may fall behind by before it is disconnected.
        """
        self._recent: deque[FeedEvent] = deque(maxlen=max_history)
        self._viewers: list[asyncio.Queue] = []
        self._queue_size = queue_size
        self._lock = threading.Lock()
        self._published_by_type: Counter[str] = Counter()
        self._connections = 0

    def _deliver(self, event: FeedEvent) -> int:
        """Queue ``event`` for every viewer; returns how many were disconnected."""
        lagging = []
        for queue in self._viewers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                lagging.append(queue)
        for queue in lagging:
            self._viewers.remove(queue)
        return len(lagging)

    def publish(self, event: FeedEvent) -> None:
        """Record a committed insert or delete and pass it to every viewer."""
        with self._lock:
            self._recent.append(event)
            self._published_by_type[event.event_type] += 1
            dropped = self._deliver(event)
        if dropped:
            logger.warning(f"[FEED] Disconnected {dropped} viewer(s) that fell behind")

    async def subscribe(
        self,
        include_history: bool = False,
        history_count: int = 10
    ) -> AsyncIterator[FeedEvent]:
        """Yield order changes as they are published, until the caller stops.

        Args:
            include_history: Replay the last ``history_count`` changes first,
                oldest first.
            history_count: How many recent changes to replay.
        """
        queue: asyncio.Queue[FeedEvent] = asyncio.Queue(maxsize=self._queue_size)

        with self._lock:
            if include_history and history_count > 0:
                for event in list(self._recent)[-history_count:]:
                    queue.put_nowait(event)
            self._viewers.append(queue)
            self._connections += 1

        try:
            while True:
                yield await queue.get()
        finally:
            with self._lock:
                if queue in self._viewers:
                    self._viewers.remove(queue)

    def get_history(self, count: int = 50) -> list[FeedEvent]:
        """Recent changes, newest first."""
        with self._lock:
            return list(self._recent)[-count:][::-1]

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "total_published": sum(self._published_by_type.values()),
                "total_subscribers": self._connections,
                "events_by_type": dict(self._published_by_type),
                "current_subscribers": len(self._viewers),
                "history_size": len(self._recent),
            }


class FeedAdapter:
    """Drains feed events into a view, and into a session's order reference."""

    def __init__(
        self,
        view: TodayOrdersView,
        session=None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.view = view
        self.session = session
        self.clock = clock
        self.event_count = 0
        self.last_event_time: Optional[datetime] = None
        self.last_error: Optional[StoreError] = None

    def handle(self, event: FeedEvent) -> bool:
        """Apply one event. Returns whether the view changed."""
        now = self.clock()
        self.event_count += 1
        self.last_event_time = now
        changed = self.view.apply(event, now)
        if isinstance(event, OrderDeleted) and self.session is not None:
            self.session.forget(event.order_id)
        logger.debug(f"[FEED] {event.event_type} applied, changed={changed}")
        return changed

    async def run(self, stream: AsyncIterator[FeedEvent]) -> int:
        """Consume ``stream`` until it ends or fails.

        A failing stream is logged and kept in ``last_error`` rather than
        raised; the caller refetches the view and subscribes again.

        Returns:
            Number of events handled.
        """
        handled = 0
        self.last_error = None
        try:
            async for event in stream:
                self.handle(event)
                handled += 1
        except StoreError as e:
            self.last_error = e
            logger.error(f"[FEED] Stream stopped after {handled} events: {e}")
        return handled
