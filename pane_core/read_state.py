"""
Read/unread synchronisation performed once per pane activation.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from pane_core.store import KeyValueStore, StoreError, is_cleared, write_cached_notifications
from pane_shared.notification import Notification, mark_all_but_newest
from notification_pane.notification_pane import logger as app_logger

_LOGGER = app_logger.get_logger("sync")


class ReadStateSynchronizer:
    """
    Marks every notification but the newest as read and persists the result.

    The sync runs at most once between :meth:`reset` calls; the owner resets
    it whenever the pane is hidden so the next opening syncs again.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._synced = False
        self._generation = 0

    @property
    def synced(self) -> bool:
        return self._synced

    def reset(self) -> None:
        """End the current activation; syncs still in flight from it are discarded."""
        self._synced = False
        self._generation += 1

    async def sync(
        self,
        notifications: Sequence[Notification],
        apply: Callable[[List[Notification]], None],
        *,
        is_alive: Callable[[], bool] = lambda: True,
    ) -> bool:
        """Return ``True`` when the list was updated during this call."""
        if self._synced or not notifications:
            return False
        generation = self._generation

        try:
            cleared = await is_cleared(self._store)
        except StoreError as exc:
            _LOGGER.warning("Failed to read cleared flag; assuming not cleared: {}", exc)
            cleared = False
        if cleared:
            _LOGGER.debug("Notifications cleared; skipping read-state sync.")
            return False
        if self._synced or not self._current(generation, is_alive):
            return False

        updated = mark_all_but_newest(notifications)
        try:
            await write_cached_notifications(self._store, updated)
        except StoreError as exc:
            # In-memory state still follows so the pane reflects what the user saw.
            _LOGGER.warning("Failed to persist read state: {}", exc)

        if not self._current(generation, is_alive):
            return False
        apply(updated)
        self._synced = True
        _LOGGER.debug("Marked {} of {} notifications as read.", len(updated) - 1, len(updated))
        return True

    def _current(self, generation: int, is_alive: Callable[[], bool]) -> bool:
        return generation == self._generation and is_alive()
