"""
HTTP access to the notification endpoint.

Requests go through ``QNetworkAccessManager`` so they run on the same Qt
event loop as the pane. Each request is awaited through an asyncio future;
cancelling the awaiting task aborts the underlying reply.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Mapping, Optional, Protocol
from urllib.parse import quote

from PySide6.QtCore import QUrl
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from notification_pane.notification_pane import logger as app_logger

_LOGGER = app_logger.get_logger("endpoint")

FORMAT_PARAMS = {"as": "json"}


class EndpointError(RuntimeError):
    """Raised when the endpoint cannot be reached or answers with an unusable response."""


class EndpointClient(Protocol):
    async def fetch_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        ...


def build_url(base: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Append URL-encoded query parameters to ``base``.

    Parameters whose value is ``None`` or an empty string are skipped. The
    separator is ``&`` when ``base`` already carries a query string.
    """
    pairs = [
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in (params or {}).items()
        if value is not None and value != ""
    ]
    if not pairs:
        return base
    query = "&".join(pairs)
    return f"{base}&{query}" if "?" in base else f"{base}?{query}"


class QtEndpointClient:
    """Issues GET requests with caching disabled and decodes JSON bodies."""

    def __init__(self, manager: Optional[QNetworkAccessManager] = None) -> None:
        self._manager = manager

    async def fetch_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        target = build_url(url, {**FORMAT_PARAMS, **(params or {})})
        request = QNetworkRequest(QUrl(target))
        request.setRawHeader(b"Cache-Control", b"no-cache")
        request.setAttribute(
            QNetworkRequest.Attribute.CacheLoadControlAttribute,
            QNetworkRequest.CacheLoadControl.AlwaysNetwork,
        )

        loop = asyncio.get_running_loop()
        finished: asyncio.Future[None] = loop.create_future()

        def _on_finished() -> None:
            if not finished.done():
                finished.set_result(None)

        _LOGGER.debug("Requesting notifications from {}", target)
        reply = self._network().get(request)
        reply.finished.connect(_on_finished)
        try:
            await finished
        except asyncio.CancelledError:
            _LOGGER.debug("Aborting notification request to {}", target)
            reply.abort()
            raise
        finally:
            reply.deleteLater()

        return _decode_reply(reply, target)

    def _network(self) -> QNetworkAccessManager:
        if self._manager is None:
            self._manager = QNetworkAccessManager()
        return self._manager


def _decode_reply(reply: QNetworkReply, target: str) -> Any:
    status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
    if reply.error() != QNetworkReply.NetworkError.NoError and status is None:
        raise EndpointError(f"Request to {target} failed: {reply.errorString()}")
    if status is None or not 200 <= int(status) < 300:
        raise EndpointError(f"HTTP {status} from {target}")

    body = bytes(reply.readAll().data())
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise EndpointError(f"Response from {target} is not valid JSON") from exc
