"""
Entry point for the notification pane application.
"""

from __future__ import annotations

import os
import sys
from typing import Iterable

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication

from pane_core.app import PaneController
from pane_core.endpoint_client import QtEndpointClient
from pane_core.notification_pane import NotificationPane
from pane_core.settings import PaneSettings, PaneSettingsManager
from pane_core.store import SettingsStore
from notification_pane.notification_pane import logger as app_logger

_LOGGER = app_logger.get_logger("runtime")
ENDPOINT_ENV = "NOTIFICATION_PANE_ENDPOINT"


def load_settings() -> PaneSettings:
    """Read persisted settings, letting the environment override the endpoint."""
    settings = PaneSettingsManager().read_settings()
    endpoint = os.environ.get(ENDPOINT_ENV, "").strip()
    if endpoint:
        _LOGGER.info("Using endpoint {} from {}", endpoint, ENDPOINT_ENV)
        settings.endpoint_url = endpoint
        settings.auto_fetch = True
    return settings


def run(argv: Iterable[str]) -> int:
    """Show the pane and run the Qt event loop until the pane is closed."""
    app = QApplication(list(argv))
    app.setApplicationName("Notification Pane")

    controller = PaneController(load_settings(), SettingsStore(), QtEndpointClient())
    pane = NotificationPane(controller)
    controller.closeRequested.connect(app.quit)
    app.aboutToQuit.connect(controller.dispose)

    async def _open() -> None:
        controller.start()
        pane.show()

    # The controller schedules coroutines, so the pane opens once the Qt-backed loop runs.
    QtAsyncio.run(_open(), keep_running=True, quit_qapp=True)
    return 0


def main() -> int:
    try:
        return run(sys.argv)
    except Exception:  # pragma: no cover - defensive crash guard
        _LOGGER.exception("Notification pane crashed.")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
