"""
HTTP order store.

Implements the store contract against the order API so client sessions
can run on any device. Every payload coming back is validated into an
``Order`` before it is handed on.
"""

import json
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import httpx

from .errors import NotFoundError, StoreError
from .events import FeedEvent, parse_feed_event
from .models import Order, OrderCreate, OrderPatch, parse_order

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8082"


def _filter_params(
    name: Optional[str] = None,
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> dict[str, str]:
    params: dict[str, str] = {}
    if name is not None:
        params["name"] = name
    if since is not None:
        params["since"] = since.isoformat()
    if until is not None:
        params["until"] = until.isoformat()
    return params


class HttpOrderStore:
    """Order store backed by the order API over HTTP."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpOrderStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self, method: str, url: str, order_id: Optional[str] = None, **kwargs
    ) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[ORDER STORE] {method} {url} failed: {e}")
            raise StoreError(f"Order API unreachable: {e}") from e

        if response.status_code == 404 and order_id is not None:
            raise NotFoundError(order_id)
        if response.is_error:
            logger.error(f"[ORDER STORE] {method} {url} returned {response.status_code}")
            raise StoreError(f"Order API error {response.status_code}: {response.text}")
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Order API returned invalid JSON: {e}") from e

    async def select(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Order]:
        params = _filter_params(name, since, until)
        params["descending"] = "true" if descending else "false"
        if limit is not None:
            params["limit"] = str(limit)
        payload = await self._request("GET", "/api/orders", params=params)
        if not isinstance(payload, list):
            raise StoreError(f"Expected a list of orders, got {type(payload).__name__}")
        return [parse_order(record) for record in payload]

    async def insert(self, record: OrderCreate) -> Order:
        payload = await self._request("POST", "/api/orders", json=record.model_dump(mode="json"))
        return parse_order(payload)

    async def update(self, order_id: str, patch: OrderPatch) -> Order:
        payload = await self._request(
            "PATCH",
            f"/api/orders/{order_id}",
            order_id=order_id,
            json=patch.model_dump(mode="json", exclude_none=True),
        )
        return parse_order(payload)

    async def delete(self, order_id: str) -> None:
        await self._request("DELETE", f"/api/orders/{order_id}", order_id=order_id)

    async def delete_where(
        self,
        name: Optional[str] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> int:
        payload = await self._request("DELETE", "/api/orders", params=_filter_params(name, since, until))
        try:
            return int(payload["deleted"])
        except (TypeError, KeyError, ValueError) as e:
            raise StoreError(f"Unexpected delete response: {payload!r}") from e

    async def subscribe(self) -> AsyncIterator[FeedEvent]:
        """Read the server-sent event stream of inserts and deletes.

        Malformed messages are logged and skipped. A lost connection ends
        the stream with StoreError.
        """
        try:
            async with self._client.stream(
                "GET",
                "/api/orders/stream",
                params={"include_history": "false"},
                timeout=httpx.Timeout(10.0, read=None),
            ) as response:
                if response.is_error:
                    raise StoreError(f"Order feed returned {response.status_code}")
                data_lines: list[str] = []
                async for line in response.aiter_lines():
                    if line.startswith("data:"):
                        data_lines.append(line[len("data:"):].strip())
                    elif not line and data_lines:
                        raw = "\n".join(data_lines)
                        data_lines = []
                        try:
                            event = parse_feed_event(json.loads(raw))
                        except (json.JSONDecodeError, StoreError) as e:
                            logger.warning(f"[FEED] Skipping malformed feed message: {e}")
                            continue
                        yield event
        except httpx.HTTPError as e:
            logger.error(f"[ORDER STORE] Feed connection lost: {e}")
            raise StoreError(f"Order feed unavailable: {e}") from e
