"""
Logging setup for the notification pane.

Every record carries a ``component`` tag (``fetch``, ``sync``, ``store`` ...)
so a single log file can be filtered per pipeline stage.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
LOG_DIR = Path(os.environ.get("NOTIFICATION_PANE_LOG_DIR", str(Path.home() / ".notification_pane" / "logs")))
DEFAULT_LOG_PATH = LOG_DIR / "pane.log"
DEFAULT_COMPONENT = "pane"
LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]: <8} | {message}"
)


def console_level() -> str:
    return os.environ.get("NOTIFICATION_PANE_LOG_LEVEL", "INFO").upper()


def configure(log_path: Optional[Path] = None) -> None:
    """Install the console and rotating file sinks once per process."""
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.configure(extra={"component": DEFAULT_COMPONENT})
    if sys.stderr is not None:
        _logger.add(sys.stderr, level=console_level(), format=LOG_FORMAT, enqueue=True)
    _logger.add(
        target,
        level="DEBUG",
        format=LOG_FORMAT,
        rotation="5 MB",
        retention=3,
        encoding="utf-8",
        enqueue=True,
        diagnose=False,
    )
    _LOG_INITIALISED = True


def get_logger(component: str = DEFAULT_COMPONENT):
    """Return the shared logger tagged with ``component``."""
    configure()
    return _logger.bind(component=component)
