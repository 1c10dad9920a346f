"""
Conversion of raw notification payloads into canonical records.

Payloads arrive either from the notification endpoint or from the persisted
cache and may wrap the entries in one of several container shapes.
"""

from __future__ import annotations

import json
from typing import Any, Callable, List, Mapping, Optional, Sequence

from .notification import DEFAULT_TITLE, Notification

Extractor = Callable[[Any], Optional[List[Any]]]


def _bare_list(payload: Any) -> Optional[List[Any]]:
    return payload if isinstance(payload, list) else None


def _field(name: str) -> Extractor:
    def extract(payload: Any) -> Optional[List[Any]]:
        if not isinstance(payload, Mapping):
            return None
        value = payload.get(name)
        return value if isinstance(value, list) else None

    extract.__name__ = f"_field_{name}"
    return extract


# Priority order matters: the first extractor returning a list wins.
EXTRACTORS: Sequence[Extractor] = (
    _bare_list,
    _field("data"),
    _field("rows"),
    _field("notifications"),
)


def extract_entries(payload: Any) -> List[Any]:
    for extractor in EXTRACTORS:
        entries = extractor(payload)
        if entries is not None:
            return entries
    return []


def normalize_notifications(payload: Any) -> List[Notification]:
    """
    Normalize ``payload`` into an ordered list of :class:`Notification`.

    Entries that are ``None`` are dropped before ids are assigned, so a
    positional fallback id reflects the position among the kept entries.
    Malformed entries degrade to defaults instead of failing the batch.
    """
    entries = [entry for entry in extract_entries(payload) if entry is not None]
    return [_normalize_entry(entry, index) for index, entry in enumerate(entries)]


def _normalize_entry(entry: Any, index: int) -> Notification:
    fields: Mapping[str, Any] = entry if isinstance(entry, Mapping) else {}

    raw_id = fields.get("id")
    title = _first_present(fields, "title", "heading")
    message = _first_present(fields, "message", "body")
    timestamp = _first_present(fields, "timestamp", "time", "created_at")

    return Notification(
        id=_to_text(raw_id) if raw_id is not None else str(index),
        title=_to_text(title) if title is not None else DEFAULT_TITLE,
        message=_to_text(message) if message is not None else "",
        timestamp=_to_text(timestamp) if timestamp is not None else None,
        read=bool(fields.get("read")),
    )


def _first_present(fields: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = fields.get(key)
        if value is not None:
            return value
    return None


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(value)
    return str(value)
