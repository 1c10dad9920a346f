"""
Core pipeline for the notification pane shared by the runtime and its tests.
"""

from .lock_timer import LockState, LockTimer  # noqa: F401
from .store import KeyValueStore, SettingsStore, StoreError  # noqa: F401
