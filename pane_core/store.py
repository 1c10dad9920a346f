"""
Persistence layer for the notification cache and the cleared flag.

The pipeline only depends on the small asynchronous key-value contract in
:class:`KeyValueStore`. :class:`SettingsStore` implements it on top of
``QSettings``, which maps to the registry on Windows and to plist/INI files
elsewhere.
"""

from __future__ import annotations

import json
from typing import List, Optional, Protocol, Sequence

from PySide6.QtCore import QSettings

from pane_shared.normalizer import normalize_notifications
from pane_shared.notification import Notification

NOTIFICATIONS_KEY = "notifications"
CLEARED_KEY = "notificationsCleared"
CLEARED_SENTINEL = "true"

ORGANIZATION_NAME = "NotificationPane"
APPLICATION_NAME = "Store"


class StoreError(OSError):
    """Raised when the backing store cannot be read or written."""


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class SettingsStore:
    """Thin wrapper over QSettings exposing the asynchronous store contract."""

    def __init__(self, settings: Optional[QSettings] = None) -> None:
        self._settings = settings or QSettings(ORGANIZATION_NAME, APPLICATION_NAME)

    async def get_item(self, key: str) -> Optional[str]:
        value = self._settings.value(key)
        self._check_status("read", key)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8")
        return str(value)

    async def set_item(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        self._check_status("write", key)

    async def remove_item(self, key: str) -> None:
        self._settings.remove(key)
        self._settings.sync()
        self._check_status("remove", key)

    def _check_status(self, operation: str, key: str) -> None:
        status = self._settings.status()
        if status != QSettings.Status.NoError:
            raise StoreError(f"Unable to {operation} {key!r}: {status.name}")


def serialize_notifications(notifications: Sequence[Notification]) -> str:
    return json.dumps([item.to_dict() for item in notifications], ensure_ascii=False)


def deserialize_notifications(blob: Optional[str]) -> Optional[List[Notification]]:
    """Decode a cache blob, returning ``None`` when it is missing or not JSON."""
    if not blob:
        return None
    try:
        payload = json.loads(blob)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, list):
        return None
    return normalize_notifications(payload)


async def read_cached_notifications(store: KeyValueStore) -> Optional[List[Notification]]:
    return deserialize_notifications(await store.get_item(NOTIFICATIONS_KEY))


async def write_cached_notifications(store: KeyValueStore, notifications: Sequence[Notification]) -> None:
    await store.set_item(NOTIFICATIONS_KEY, serialize_notifications(notifications))


async def is_cleared(store: KeyValueStore) -> bool:
    return await store.get_item(CLEARED_KEY) == CLEARED_SENTINEL


async def mark_cleared(store: KeyValueStore) -> None:
    """Suppress automatic read-state updates until :func:`unmark_cleared` runs."""
    await store.set_item(CLEARED_KEY, CLEARED_SENTINEL)


async def unmark_cleared(store: KeyValueStore) -> None:
    await store.remove_item(CLEARED_KEY)
