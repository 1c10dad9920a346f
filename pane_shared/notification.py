"""
Canonical notification record shared by the fetch, cache and presentation layers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

DEFAULT_TITLE = "Untitled"


@dataclass(slots=True)
class Notification:
    """
    A single notification in canonical shape.

    Lists of notifications are kept oldest first; position, not ``id``,
    decides which entry is the newest.
    """

    id: str
    title: str = DEFAULT_TITLE
    message: str = ""
    timestamp: Optional[str] = None
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def marked_read(self) -> "Notification":
        return replace(self, read=True)


def mark_all_but_newest(notifications: Sequence[Notification]) -> List[Notification]:
    """Return a copy with every entry read except the last, which is left as delivered."""
    last = len(notifications) - 1
    return [item if index == last else item.marked_read() for index, item in enumerate(notifications)]


def display_order(notifications: Sequence[Notification]) -> List[Notification]:
    """Newest first, the order the pane lists them in."""
    return list(reversed(notifications))


def display_key(notification: Notification, index: int) -> str:
    return f"{notification.timestamp or 't'}-{notification.title or 'n'}-{index}"

