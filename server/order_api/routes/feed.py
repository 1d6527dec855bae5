"""Live order feed API routes (Server-Sent Events)."""
from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from ..models.order import FeedStats
from ..services.order_feed import format_sse, order_feed

router = APIRouter(prefix="/api/orders", tags=["Order Feed"])


@router.get("/stream")
async def stream_order_events(
    include_history: bool = Query(False, description="Replay recent events on connect"),
    history_count: int = Query(10, ge=0, le=100, description="Number of historical events"),
):
    """
    Stream order inserts and deletes via Server-Sent Events (SSE).

    Each message carries ``{"type": "insert" | "delete", "record": {...}}``.
    Updates are sent as inserts of the rewritten order.

    The stream never closes - clients should handle reconnection.

    Usage with curl:
        curl -N http://localhost:8082/api/orders/stream
    """
    async def event_generator():
        async for event in order_feed.subscribe(
            include_history=include_history,
            history_count=history_count
        ):
            yield format_sse(event)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        }
    )


@router.get("/stream/stats", response_model=FeedStats)
async def get_feed_stats():
    """Counts of published events by type and current subscribers."""
    return order_feed.get_stats()
