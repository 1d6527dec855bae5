"""Device-local key-value storage for the ordering client.

Holds the remembered name, so returning users are not asked again on the
same device, and the legacy full-order snapshot written for the older
flow that had no remote store.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .days import as_local
from .models import Order

logger = logging.getLogger(__name__)

NAME_KEY = "food-order-name"
SNAPSHOT_KEY = "food-order"


class SessionStorage:
    """JSON-file backed key-value store scoped to one device."""

    def __init__(self, path: str | Path = "~/.config/food-order/session.json") -> None:
        self._path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[SESSION] Ignoring unreadable session file {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()

    def remember_name(self, name: str) -> None:
        self.set(NAME_KEY, name)

    def remembered_name(self) -> Optional[str]:
        name = self.get(NAME_KEY)
        return name if isinstance(name, str) and name.strip() else None

    def save_snapshot(self, order: Order) -> None:
        """Write the legacy snapshot: name, items and ISO timestamp."""
        self.set(SNAPSHOT_KEY, {
            "name": order.name,
            "items": list(order.items),
            "timestamp": order.timestamp.isoformat(),
        })

    def load_snapshot(self) -> Optional[dict]:
        """Return the legacy snapshot with a parsed timestamp, or None."""
        snapshot = self.get(SNAPSHOT_KEY)
        if not isinstance(snapshot, dict):
            return None
        try:
            return {
                "name": str(snapshot["name"]),
                "items": [str(item) for item in snapshot["items"]],
                "timestamp": as_local(datetime.fromisoformat(snapshot["timestamp"])),
            }
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"[SESSION] Ignoring malformed order snapshot: {e}")
            return None
