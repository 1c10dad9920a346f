"""
Cache-first loading of the notification list.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional

from pane_core.endpoint_client import EndpointClient, EndpointError
from pane_core.settings import PaneSettings
from pane_core.store import KeyValueStore, StoreError, read_cached_notifications, write_cached_notifications
from pane_shared.normalizer import normalize_notifications
from pane_shared.notification import Notification
from notification_pane.notification_pane import logger as app_logger

_LOGGER = app_logger.get_logger("fetch")

Presenter = Callable[[List[Notification]], None]


@dataclass
class LoadToken:
    """Captured at the start of a load; once cancelled the load stops mutating state."""

    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FetchCoordinator:
    """
    Presents the cached list immediately, then refreshes it from the endpoint.

    Only the newest load may present results: starting another load or
    disposing the coordinator cancels the token of the previous one.
    """

    def __init__(self, store: KeyValueStore, client: EndpointClient, settings: PaneSettings) -> None:
        self._store = store
        self._client = client
        self._settings = settings
        self._token: Optional[LoadToken] = None

    def update_settings(self, settings: PaneSettings) -> None:
        self._settings = settings

    async def load(self, *, visible: bool, uses_external: bool, present: Presenter) -> None:
        token = self._begin()
        settings = self._settings
        if not settings.fetch_enabled:
            return

        if not uses_external:
            cached = await self._read_cache()
            if cached is not None and not token.cancelled:
                _LOGGER.debug("Presenting {} cached notifications.", len(cached))
                present(cached)

        if token.cancelled:
            return
        if not visible and settings.force_refresh_on_open:
            _LOGGER.debug("Pane hidden; deferring network refresh until it opens.")
            return

        fresh = await self._fetch(settings)
        if fresh is None or token.cancelled or uses_external:
            return

        present(fresh)
        try:
            await write_cached_notifications(self._store, fresh)
        except StoreError as exc:
            _LOGGER.warning("Failed to cache fetched notifications: {}", exc)

    def dispose(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None

    def _begin(self) -> LoadToken:
        if self._token is not None:
            self._token.cancel()
        self._token = LoadToken()
        return self._token

    async def _read_cache(self) -> Optional[List[Notification]]:
        try:
            return await read_cached_notifications(self._store)
        except StoreError as exc:
            _LOGGER.warning("Failed to read notification cache: {}", exc)
            return None

    async def _fetch(self, settings: PaneSettings) -> Optional[List[Notification]]:
        timeout_seconds = settings.timeout_ms / 1000
        try:
            payload = await asyncio.wait_for(
                self._client.fetch_json(settings.endpoint_url, settings.query_params),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError:
            _LOGGER.warning(
                "Notification request to {} timed out after {} ms.",
                settings.endpoint_url,
                settings.timeout_ms,
            )
            return None
        except EndpointError as exc:
            _LOGGER.warning("Notification request failed: {}", exc)
            return None
        except Exception as exc:
            _LOGGER.warning("Notification client raised {}: {}", type(exc).__name__, exc)
            return None

        notifications = normalize_notifications(payload)
        _LOGGER.info("Fetched {} notifications from {}", len(notifications), settings.endpoint_url)
        return notifications
