import asyncio
import os
import tempfile
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("NOTIFICATION_PANE_LOG_DIR", tempfile.mkdtemp(prefix="notification-pane-logs-"))

from pane_core.store import NOTIFICATIONS_KEY, StoreError  # noqa: E402


class MemoryStore:
    """In-memory key-value store that records writes and can simulate failures."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})
        self.writes: List[Tuple[str, str]] = []
        self.reads: List[str] = []
        self.fail_reads = False
        self.fail_writes = False
        self.read_delay = 0.0

    async def get_item(self, key: str) -> Optional[str]:
        self.reads.append(key)
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if self.fail_reads:
            raise StoreError(f"cannot read {key}")
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StoreError(f"cannot write {key}")
        self.writes.append((key, value))
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def write_count(self, key: str = NOTIFICATIONS_KEY) -> int:
        return sum(1 for written_key, _ in self.writes if written_key == key)


class FakeEndpointClient:
    """Endpoint client returning a canned payload, raising, or stalling."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.payload = payload
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.cancelled = 0

    async def fetch_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        self.calls.append((url, dict(params or {})))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        if self.error is not None:
            raise self.error
        return self.payload


class ImmediateSpawner:
    """Runs each scheduled coroutine to completion on a private loop."""

    def __init__(self) -> None:
        self._loop = asyncio.new_event_loop()

    def __call__(self, coro):
        task = self._loop.create_task(coro)
        self._loop.run_until_complete(task)
        return task

    def close(self) -> None:
        self._loop.run_until_complete(asyncio.sleep(0))
        self._loop.close()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_client():
    def factory(payload: Any = None, error: Optional[Exception] = None, delay: float = 0.0) -> FakeEndpointClient:
        return FakeEndpointClient(payload=payload, error=error, delay=delay)

    return factory


@pytest.fixture
def immediate_spawn():
    spawner = ImmediateSpawner()
    yield spawner
    spawner.close()
