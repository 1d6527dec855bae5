"""
Unit tests for device-local session storage.

Usage:
    pytest tests/test_session_storage.py -v
"""
import json

import pytest

from ordering.models import Order
from ordering.session_storage import NAME_KEY, SNAPSHOT_KEY, SessionStorage


@pytest.fixture
def storage(tmp_path):
    return SessionStorage(tmp_path / "nested" / "session.json")


class TestKeyValue:
    def test_missing_file_reads_empty(self, storage):
        assert storage.get("anything") is None
        assert storage.remembered_name() is None
        assert storage.load_snapshot() is None

    def test_set_get_remove(self, storage):
        storage.set("k", [1, 2])
        assert storage.get("k") == [1, 2]
        storage.remove("k")
        assert storage.get("k", "gone") == "gone"

    def test_clear(self, storage):
        storage.set("k", 1)
        storage.clear()
        assert storage.get("k") is None

    def test_unreadable_file_is_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert SessionStorage(path).get("k") is None


class TestNameAndSnapshot:
    def test_remember_name(self, storage):
        storage.remember_name("Amina")
        assert storage.remembered_name() == "Amina"

    def test_blank_name_is_not_remembered(self, storage):
        storage.set(NAME_KEY, "   ")
        assert storage.remembered_name() is None

    def test_snapshot_round_trip(self, storage, now):
        order = Order(id="o1", name="Amina", items=["Pilau"], timestamp=now)
        storage.save_snapshot(order)

        raw = json.loads(storage._path.read_text(encoding="utf-8"))[SNAPSHOT_KEY]
        assert raw == {"name": "Amina", "items": ["Pilau"], "timestamp": now.isoformat()}

        snapshot = storage.load_snapshot()
        assert snapshot["timestamp"] == now
        assert snapshot["items"] == ["Pilau"]

    def test_malformed_snapshot(self, storage):
        storage.set(SNAPSHOT_KEY, {"name": "Amina", "items": ["Pilau"], "timestamp": "yesterday"})
        assert storage.load_snapshot() is None
