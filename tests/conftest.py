"""
Pytest fixtures for Food Order tests.
"""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure src/ and the project root are on sys.path so tests can import
# the ordering core and the server package.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from ordering.live_feed import OrderFeed  # noqa: E402
from ordering.menu import MenuConfig  # noqa: E402
from ordering.store import MemoryOrderStore  # noqa: E402


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def now():
    """A fixed local noon, so day boundaries never depend on the real clock."""
    return datetime(2026, 10, 18, 12, 30).astimezone()


@pytest.fixture
def yesterday(now):
    return now - timedelta(days=1)


# ============================================================================
# Menu Fixtures
# ============================================================================

@pytest.fixture
def small_menu():
    """Two mains and one side: Pilau stands alone, Ugali takes Nyama."""
    return MenuConfig(
        mains=("Pilau", "Ugali"),
        sides=("Nyama",),
        standalone_mains=frozenset({"Pilau"}),
    )


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    return MemoryOrderStore(feed=OrderFeed())


@pytest.fixture
def sqlite_store(tmp_path):
    from server.order_api.database import SQLiteOrderStore

    return SQLiteOrderStore(db_path=str(tmp_path / "orders.db"), feed=OrderFeed())


@pytest.fixture
def api_client(sqlite_store, now):
    """TestClient wired to a temporary database and a fixed clock."""
    from fastapi.testclient import TestClient
    from server.order_api.database import get_order_store
    from server.order_api.dependencies import get_clock
    from server.order_api.main import app

    app.dependency_overrides[get_order_store] = lambda: sqlite_store
    app.dependency_overrides[get_clock] = lambda: (lambda: now)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
