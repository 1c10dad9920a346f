"""
Pane controller orchestrating fetching, read-state sync and the dismiss lock.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set

from PySide6.QtCore import QObject, Signal

from pane_core.endpoint_client import EndpointClient
from pane_core.fetch_coordinator import FetchCoordinator
from pane_core.lock_timer import LockTimer
from pane_core.read_state import ReadStateSynchronizer
from pane_core.settings import PaneSettings
from pane_core.store import KeyValueStore
from pane_shared.notification import Notification
from notification_pane.notification_pane import logger as app_logger

Spawner = Callable[[Awaitable[Any]], "asyncio.Future[Any]"]


class PaneController(QObject):
    """
    Owns the notification list shown by the pane.

    A caller may supply its own list through ``external``; while that list is
    non-empty it is shown instead of the locally fetched one and network
    results never overwrite it.
    """

    notificationsChanged = Signal(object)
    lockChanged = Signal(int)
    closeRequested = Signal()

    def __init__(
        self,
        settings: PaneSettings,
        store: KeyValueStore,
        client: EndpointClient,
        *,
        external: Optional[Sequence[Notification]] = None,
        spawn: Optional[Spawner] = None,
    ) -> None:
        super().__init__()
        self._logger = app_logger.get_logger("pane")
        self._settings = settings
        self._external: List[Notification] = list(external or [])
        self._local: List[Notification] = []
        self._visible = False
        self._alive = True
        self._spawn: Spawner = spawn or asyncio.ensure_future
        self._tasks: Set[asyncio.Future[Any]] = set()

        self._fetch = FetchCoordinator(store, client, settings)
        self._sync = ReadStateSynchronizer(store)
        self._lock = LockTimer(settings.lock_duration_ms)
        self._lock.changed.connect(self.lockChanged)

    @property
    def settings(self) -> PaneSettings:
        return self._settings

    @property
    def notifications(self) -> List[Notification]:
        return list(self._external) if self._external else list(self._local)

    @property
    def uses_external(self) -> bool:
        return bool(self._external)

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def locked(self) -> bool:
        return self._lock.locked

    @property
    def lock_seconds_remaining(self) -> int:
        return self._lock.seconds_remaining

    @property
    def lock_timer(self) -> LockTimer:
        return self._lock

    def start(self) -> None:
        """Run the initial load while the pane is still hidden."""
        self._logger.info("Starting notification pane controller.")
        self._schedule_load()

    def set_visible(self, visible: bool) -> None:
        if not self._alive or visible == self._visible:
            return
        self._visible = visible
        self._logger.debug("Notification pane {}.", "opened" if visible else "hidden")

        self._lock.on_activate(visible, bool(self.notifications))
        if visible:
            self._run(
                self._sync.sync(self.notifications, self._replace_effective, is_alive=self._is_alive)
            )
        else:
            self._sync.reset()
        self._schedule_load()

    def set_external(self, notifications: Optional[Sequence[Notification]]) -> None:
        """Replace the caller-owned list."""
        if not self._alive:
            return
        was_external = self.uses_external
        before = self.notifications
        self._external = list(notifications or [])
        self._notify_changed(before)
        if was_external != self.uses_external:
            self._schedule_load()

    def apply_settings(self, settings: PaneSettings) -> None:
        if not self._alive or settings == self._settings:
            return
        self._logger.info("Applying updated notification pane settings.")
        self._settings = settings
        self._fetch.update_settings(settings)
        self._lock.lock_duration_ms = settings.lock_duration_ms
        self._lock.on_activate(self._visible, bool(self.notifications))
        self._schedule_load()

    def handle_back(self) -> bool:
        """Return ``True`` when the back event was consumed by the pane."""
        if not self._alive or not self._visible:
            return False
        if self._lock.locked:
            self._logger.debug("Back ignored; pane locked for {} more seconds.", self._lock.seconds_remaining)
            return True
        self.closeRequested.emit()
        return True

    def dismiss(self) -> bool:
        if not self._alive or self._lock.locked:
            return False
        self.closeRequested.emit()
        return True

    def dispose(self) -> None:
        """Stop all background work; later callbacks leave state untouched."""
        if not self._alive:
            return
        self._logger.debug("Disposing notification pane controller.")
        self._alive = False
        self._fetch.dispose()
        for task in list(self._tasks):
            task.cancel()
        self._lock.dispose()

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _is_alive(self) -> bool:
        return self._alive

    def _schedule_load(self) -> None:
        self._run(
            self._fetch.load(
                visible=self._visible,
                uses_external=self.uses_external,
                present=self._present_fetched,
            )
        )

    def _run(self, coro: Awaitable[Any]) -> None:
        task = self._spawn(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: "asyncio.Future[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.opt(exception=exc).error("Notification pane task failed.")

    def _present_fetched(self, notifications: List[Notification]) -> None:
        if not self._alive:
            return
        before = self.notifications
        self._local = list(notifications)
        self._notify_changed(before)

    def _replace_effective(self, notifications: List[Notification]) -> None:
        if not self._alive:
            return
        before = self.notifications
        if self._external:
            self._external = list(notifications)
        else:
            self._local = list(notifications)
        self._notify_changed(before)

    def _notify_changed(self, before: List[Notification]) -> None:
        after = self.notifications
        if after != before:
            self.notificationsChanged.emit(after)
        if bool(after) != bool(before):
            self._lock.on_activate(self._visible, bool(after))
