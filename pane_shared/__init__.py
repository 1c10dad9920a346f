"""
Shared notification model and pure helpers used by the pane runtime.
"""

from .normalizer import normalize_notifications  # noqa: F401
from .notification import Notification  # noqa: F401
from .time_ago import format_time_ago  # noqa: F401
