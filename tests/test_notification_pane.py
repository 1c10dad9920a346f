import pytest
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel

from pane_core.app import PaneController
from pane_core.notification_pane import (
    EMPTY_TEXT,
    NotificationPane,
    close_button_accessible_name,
    close_button_text,
)
from pane_core.settings import PaneSettings
from pane_shared.notification import Notification


@pytest.fixture
def build_pane(qtbot, memory_store, make_client, immediate_spawn):
    created = []

    def factory(external=None, **overrides):
        settings = PaneSettings(**overrides)
        controller = PaneController(
            settings,
            memory_store,
            make_client(payload=[]),
            external=external,
            spawn=immediate_spawn,
        )
        pane = NotificationPane(controller)
        qtbot.addWidget(pane)
        created.append(controller)
        return pane, controller

    yield factory
    for controller in created:
        controller.dispose()


def _notes():
    return [
        Notification(id="1", title="Older", message="First message", timestamp="2024-05-01T10:00:00Z"),
        Notification(id="2", title="Newer", message="Second message", timestamp="2024-05-01T11:00:00Z"),
    ]


def test_close_button_labels():
    assert close_button_text(0) == "Close"
    assert close_button_text(7) == "Close (7)"
    assert close_button_accessible_name(7) == "Close available in 7 seconds"
    assert close_button_accessible_name(0) == "Close Notifications"


def test_lists_newest_first_with_new_badge(build_pane):
    pane, controller = build_pane(external=_notes())

    pane.show()

    texts = pane.item_texts()
    assert texts[0].startswith("• Newer")
    assert texts[0].endswith("NEW")
    assert texts[1].startswith("• Older")
    assert "NEW" not in texts[1]
    assert controller.notifications[0].read is True


def test_close_button_is_inert_while_locked(qtbot, build_pane):
    pane, controller = build_pane(external=_notes())
    pane.show()

    assert pane.close_button.text() == "Close (15)"
    assert pane.close_button.isEnabled() is False

    qtbot.mouseClick(pane.close_button, Qt.MouseButton.LeftButton)
    qtbot.keyClick(pane, Qt.Key.Key_Escape)

    assert pane.isVisible() is True
    assert controller.visible is True


def test_close_after_unlock_hides_pane(qtbot, build_pane):
    pane, controller = build_pane(external=_notes())
    pane.show()

    controller.lock_timer.release()
    assert pane.close_button.text() == "Close"
    assert pane.close_button.isEnabled() is True

    qtbot.mouseClick(pane.close_button, Qt.MouseButton.LeftButton)

    assert pane.isVisible() is False
    assert controller.visible is False


def test_escape_closes_unlocked_pane(qtbot, build_pane):
    pane, controller = build_pane(external=_notes(), lock_duration_ms=0)
    pane.show()

    qtbot.keyClick(pane, Qt.Key.Key_Escape)

    assert pane.isVisible() is False


def test_empty_pane_shows_placeholder(build_pane):
    pane, controller = build_pane()
    pane.show()

    placeholder = pane.findChild(QLabel, "NotificationEmpty")
    assert pane.list_widget.count() == 0
    assert pane.list_widget.isVisibleTo(pane) is False
    assert placeholder.text() == EMPTY_TEXT
    assert placeholder.isVisibleTo(pane) is True
    assert pane.close_button.isEnabled() is True


def test_time_ago_is_shown_when_enabled(build_pane):
    pane, controller = build_pane(external=_notes(), show_time_ago=True)
    pane.show()

    assert all(" ago" in text for text in pane.item_texts())
