"""
Countdown lock that keeps the pane open for a minimum time.
"""

from __future__ import annotations

import math
from enum import Enum

from PySide6.QtCore import QObject, QTimer, Signal

TICK_INTERVAL_MS = 1000


class LockState(Enum):
    UNLOCKED = "Unlocked"
    LOCKED = "Locked"


class LockTimer(QObject):
    """
    Counts down once per second while locked and unlocks at zero.

    ``changed`` carries the seconds remaining (0 once unlocked) and fires on
    every transition and tick. ``unlocked`` fires once when a lock ends,
    whether by countdown or by :meth:`release`.
    """

    changed = Signal(int)
    unlocked = Signal()

    def __init__(self, lock_duration_ms: int = 15000, tick_interval_ms: int = TICK_INTERVAL_MS) -> None:
        super().__init__()
        self.lock_duration_ms = lock_duration_ms
        self._seconds_remaining = 0
        self._disposed = False
        self._timer = QTimer(self)
        self._timer.setInterval(tick_interval_ms)
        self._timer.timeout.connect(self._tick)  # type: ignore[arg-type]

    @property
    def state(self) -> LockState:
        return LockState.LOCKED if self._seconds_remaining > 0 else LockState.UNLOCKED

    @property
    def locked(self) -> bool:
        return self.state is LockState.LOCKED

    @property
    def seconds_remaining(self) -> int:
        return self._seconds_remaining

    @property
    def ticking(self) -> bool:
        return self._timer.isActive()

    def on_activate(self, visible: bool, has_items: bool) -> None:
        """Recompute the lock from the current pane conditions."""
        if self._disposed:
            return
        self._timer.stop()
        if visible and has_items and self.lock_duration_ms > 0:
            self._seconds_remaining = math.ceil(self.lock_duration_ms / 1000)
            self._timer.start()
            self.changed.emit(self._seconds_remaining)
            return
        self.release()

    def release(self) -> None:
        """Unlock immediately, dropping any pending tick."""
        self._timer.stop()
        was_locked = self._seconds_remaining > 0
        self._seconds_remaining = 0
        if was_locked and not self._disposed:
            self.changed.emit(0)
            self.unlocked.emit()

    def dispose(self) -> None:
        self._timer.stop()
        self._seconds_remaining = 0
        self._disposed = True

    def _tick(self) -> None:
        if self._disposed or self._seconds_remaining <= 0:
            self._timer.stop()
            return
        if self._seconds_remaining <= 1:
            self.release()
            return
        self._seconds_remaining -= 1
        self.changed.emit(self._seconds_remaining)
