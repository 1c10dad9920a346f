"""
Configuration for the notification pane.

Options can come from a caller-supplied mapping using the camelCase names
the pane has always accepted, or from the ``NotificationPane`` group of a
``QSettings`` store. Invalid data is clamped rather than rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from PySide6.QtCore import QSettings

from notification_pane.notification_pane import logger as app_logger

_LOGGER = app_logger.get_logger("settings")

SETTINGS_GROUP = "NotificationPane"
DEFAULT_LOCK_DURATION_MS = 15000
DEFAULT_TIMEOUT_MS = 8000
_MAX_TIMEOUT_MS = 120000
_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


@dataclass(eq=True)
class PaneSettings:
    lock_duration_ms: int = DEFAULT_LOCK_DURATION_MS
    auto_fetch: bool = False
    endpoint_url: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    force_refresh_on_open: bool = True
    show_time_ago: bool = False
    query_params: Dict[str, str] = field(default_factory=dict)

    @property
    def fetch_enabled(self) -> bool:
        return self.auto_fetch and bool(self.endpoint_url)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "PaneSettings":
        """Build settings from camelCase options, falling back to defaults."""
        endpoint = options.get("endpointUrl")
        endpoint_url = str(endpoint).strip() if endpoint is not None else ""
        return cls(
            lock_duration_ms=_clamp_lock_duration(_coerce_int(options.get("lockDurationMs"), "lockDurationMs")),
            auto_fetch=_coerce_bool(options.get("autoFetch"), "autoFetch", False),
            endpoint_url=endpoint_url or None,
            timeout_ms=_clamp_timeout(_coerce_int(options.get("timeoutMs"), "timeoutMs")),
            force_refresh_on_open=_coerce_bool(options.get("forceRefreshOnOpen"), "forceRefreshOnOpen", True),
            show_time_ago=_coerce_bool(options.get("showTimeAgo"), "showTimeAgo", False),
            query_params=_coerce_params(options.get("queryParams")),
        )


class PaneSettingsManager:
    """Loads persisted pane settings from QSettings and clamps invalid data."""

    _KEYS = (
        "lockDurationMs",
        "autoFetch",
        "endpointUrl",
        "timeoutMs",
        "forceRefreshOnOpen",
        "showTimeAgo",
    )

    def __init__(self, settings: Optional[QSettings] = None) -> None:
        self._settings = settings or QSettings("NotificationPane", "Settings")

    def read_settings(self) -> PaneSettings:
        self._settings.beginGroup(SETTINGS_GROUP)
        try:
            options = {key: self._settings.value(key) for key in self._KEYS if self._settings.contains(key)}
            params_group = "queryParams"
            self._settings.beginGroup(params_group)
            try:
                params = {key: self._settings.value(key) for key in self._settings.childKeys()}
            finally:
                self._settings.endGroup()
        finally:
            self._settings.endGroup()

        if params:
            options["queryParams"] = params
        return PaneSettings.from_options(options)

    def write_settings(self, settings: PaneSettings) -> None:
        self._settings.beginGroup(SETTINGS_GROUP)
        try:
            self._settings.setValue("lockDurationMs", settings.lock_duration_ms)
            self._settings.setValue("autoFetch", settings.auto_fetch)
            if settings.endpoint_url:
                self._settings.setValue("endpointUrl", settings.endpoint_url)
            else:
                self._settings.remove("endpointUrl")
            self._settings.setValue("timeoutMs", settings.timeout_ms)
            self._settings.setValue("forceRefreshOnOpen", settings.force_refresh_on_open)
            self._settings.setValue("showTimeAgo", settings.show_time_ago)
            self._settings.remove("queryParams")
            for key, value in settings.query_params.items():
                self._settings.setValue(f"queryParams/{key}", value)
        finally:
            self._settings.endGroup()
        self._settings.sync()


def _coerce_int(raw: Any, name: str) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        _LOGGER.warning("Setting {} has non-numeric value {!r}; using default.", name, raw)
        return None


def _coerce_bool(raw: Any, name: str, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    lowered = str(raw).strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    _LOGGER.warning("Setting {} has unexpected value {!r}; using default.", name, raw)
    return default


def _coerce_params(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): str(value) for key, value in raw.items() if value is not None}


def _clamp_lock_duration(raw: Optional[int]) -> int:
    if raw is None:
        return DEFAULT_LOCK_DURATION_MS
    if raw < 0:
        _LOGGER.warning("Negative lock duration {} found; disabling the lock.", raw)
        return 0
    return raw


def _clamp_timeout(raw: Optional[int]) -> int:
    if raw is None:
        return DEFAULT_TIMEOUT_MS
    if raw <= 0:
        _LOGGER.warning("Invalid timeout {} ms found; using {} ms.", raw, DEFAULT_TIMEOUT_MS)
        return DEFAULT_TIMEOUT_MS
    if raw > _MAX_TIMEOUT_MS:
        _LOGGER.warning("Timeout {} ms exceeds the maximum. Clamping to {} ms.", raw, _MAX_TIMEOUT_MS)
        return _MAX_TIMEOUT_MS
    return raw
