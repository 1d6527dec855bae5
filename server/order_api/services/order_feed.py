"""Process-wide live order feed and its Server-Sent Events framing."""
import json

from ordering.events import FeedEvent
from ordering.live_feed import OrderFeed

from ..config import get_settings

# Global singleton instance
order_feed = OrderFeed(max_history=get_settings().feed_history)


def format_sse(event: FeedEvent) -> str:
    """Frame one feed event as an SSE message."""
    data = json.dumps(event.to_dict(), ensure_ascii=False)
    return f"event: {event.event_type}\ndata: {data}\n\n"
