"""
Notification pane window listing notifications newest first with a lockable close button.
"""

from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QFont, QHideEvent, QKeyEvent, QShowEvent
from PySide6.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pane_core.app import PaneController
from pane_shared.notification import Notification, display_key, display_order
from pane_shared.time_ago import format_time_ago

EMPTY_TEXT = "No notifications yet."
NEW_BADGE = "NEW"


def close_button_text(seconds_remaining: int) -> str:
    return f"Close ({seconds_remaining})" if seconds_remaining > 0 else "Close"


def close_button_accessible_name(seconds_remaining: int) -> str:
    if seconds_remaining > 0:
        return f"Close available in {seconds_remaining} seconds"
    return "Close Notifications"


class NotificationPane(QWidget):
    """Presents the controller's list and routes close/back input through it."""

    def __init__(self, controller: PaneController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("NotificationPane")
        self.setWindowTitle("Notifications")
        self.setAccessibleName("Notifications")
        self.setMinimumWidth(340)
        self.setMaximumWidth(460)

        self._controller = controller

        self._title_label = QLabel("Notifications")
        self._title_label.setObjectName("NotificationPaneTitle")
        self._title_label.setStyleSheet("font-weight: bold; font-size: 20px;")
        self._title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._list = QListWidget()
        self._list.setObjectName("NotificationList")
        self._list.setAccessibleName("Notification list")
        self._list.setWordWrap(True)
        self._list.setMaximumHeight(250)

        self._empty_label = QLabel(EMPTY_TEXT)
        self._empty_label.setObjectName("NotificationEmpty")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._close_button = QPushButton()
        self._close_button.setObjectName("NotificationClose")
        self._close_button.clicked.connect(self._on_close_clicked)  # type: ignore[arg-type]

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)
        layout.addWidget(self._title_label)
        layout.addWidget(self._list)
        layout.addWidget(self._empty_label)
        layout.addWidget(self._close_button, alignment=Qt.AlignmentFlag.AlignCenter)

        controller.notificationsChanged.connect(self._render)
        controller.lockChanged.connect(self._update_close_button)
        controller.closeRequested.connect(self.hide)

        self._render(controller.notifications)
        self._update_close_button(controller.lock_seconds_remaining)

    @property
    def close_button(self) -> QPushButton:
        return self._close_button

    @property
    def list_widget(self) -> QListWidget:
        return self._list

    def item_texts(self) -> List[str]:
        return [self._list.item(row).text() for row in range(self._list.count())]

    def _render(self, notifications: Optional[List[Notification]] = None) -> None:
        items = display_order(notifications if notifications is not None else self._controller.notifications)
        show_time_ago = self._controller.settings.show_time_ago

        self._list.clear()
        for index, note in enumerate(items):
            lines = [f"• {note.title}", note.message]
            footer = []
            if show_time_ago:
                age = format_time_ago(note.timestamp)
                if age:
                    footer.append(age)
            if not note.read:
                footer.append(NEW_BADGE)
            if footer:
                lines.append("  ".join(footer))

            item = QListWidgetItem("\n".join(lines))
            item.setData(Qt.ItemDataRole.UserRole, display_key(note, index))
            item.setData(Qt.ItemDataRole.AccessibleTextRole, f"Notification: {note.title}. {note.message}")
            if not note.read:
                font = QFont(item.font())
                font.setBold(True)
                item.setFont(font)
            self._list.addItem(item)

        has_items = bool(items)
        self._list.setVisible(has_items)
        self._empty_label.setVisible(not has_items)

    def _update_close_button(self, seconds_remaining: int) -> None:
        self._close_button.setText(close_button_text(seconds_remaining))
        self._close_button.setAccessibleName(close_button_accessible_name(seconds_remaining))
        self._close_button.setEnabled(seconds_remaining <= 0)

    def _on_close_clicked(self) -> None:
        self._controller.dismiss()

    def showEvent(self, event: QShowEvent) -> None:  # noqa: N802
        super().showEvent(event)
        self._controller.set_visible(True)

    def hideEvent(self, event: QHideEvent) -> None:  # noqa: N802
        self._controller.set_visible(False)
        super().hideEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.key() in (Qt.Key.Key_Escape, Qt.Key.Key_Back):
            if self._controller.handle_back():
                event.accept()
                return
        super().keyPressEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        # Window-manager close behaves like the back interaction.
        if self._controller.locked:
            event.ignore()
            return
        super().closeEvent(event)
