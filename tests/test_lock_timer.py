import pytest

from pane_core.lock_timer import LockState, LockTimer


@pytest.fixture
def lock_timer(qapp):
    timer = LockTimer(lock_duration_ms=15000)
    yield timer
    timer.dispose()


def _recorder(signal):
    received = []
    signal.connect(lambda *args: received.append(args[0] if args else None))
    return received


def test_starts_locked_for_rounded_up_seconds(lock_timer):
    lock_timer.on_activate(visible=True, has_items=True)

    assert lock_timer.state is LockState.LOCKED
    assert lock_timer.seconds_remaining == 15
    assert lock_timer.ticking is True


def test_partial_seconds_round_up(qapp):
    timer = LockTimer(lock_duration_ms=1500)
    timer.on_activate(visible=True, has_items=True)

    assert timer.seconds_remaining == 2
    timer.dispose()


@pytest.mark.parametrize(
    "visible, has_items, duration",
    [(False, True, 15000), (True, False, 15000), (True, True, 0)],
)
def test_unlocked_when_conditions_not_met(qapp, visible, has_items, duration):
    timer = LockTimer(lock_duration_ms=duration)
    timer.on_activate(visible=visible, has_items=has_items)

    assert timer.state is LockState.UNLOCKED
    assert timer.seconds_remaining == 0
    assert timer.ticking is False
    timer.dispose()


def test_unlocks_after_every_second_has_ticked(lock_timer):
    unlocked = _recorder(lock_timer.unlocked)
    changes = _recorder(lock_timer.changed)
    lock_timer.on_activate(visible=True, has_items=True)

    for _ in range(14):
        lock_timer._tick()
    assert lock_timer.seconds_remaining == 1
    assert unlocked == []

    lock_timer._tick()

    assert lock_timer.state is LockState.UNLOCKED
    assert lock_timer.ticking is False
    assert len(unlocked) == 1
    assert changes == list(range(15, 0, -1)) + [0]


def test_hiding_mid_countdown_unlocks_immediately(lock_timer):
    unlocked = _recorder(lock_timer.unlocked)
    lock_timer.on_activate(visible=True, has_items=True)
    for _ in range(3):
        lock_timer._tick()

    lock_timer.on_activate(visible=False, has_items=True)

    assert lock_timer.state is LockState.UNLOCKED
    assert lock_timer.ticking is False
    assert len(unlocked) == 1


def test_emptied_list_unlocks(lock_timer):
    lock_timer.on_activate(visible=True, has_items=True)

    lock_timer.on_activate(visible=True, has_items=False)

    assert lock_timer.locked is False


def test_reopening_restarts_the_countdown(lock_timer):
    lock_timer.on_activate(visible=True, has_items=True)
    for _ in range(10):
        lock_timer._tick()
    lock_timer.on_activate(visible=False, has_items=True)

    lock_timer.on_activate(visible=True, has_items=True)

    assert lock_timer.seconds_remaining == 15


def test_dispose_ignores_later_ticks(lock_timer):
    lock_timer.on_activate(visible=True, has_items=True)

    lock_timer.dispose()
    lock_timer._tick()
    lock_timer.on_activate(visible=True, has_items=True)

    assert lock_timer.locked is False
    assert lock_timer.ticking is False


def test_countdown_runs_on_the_event_loop(qtbot):
    timer = LockTimer(lock_duration_ms=3000, tick_interval_ms=10)

    with qtbot.waitSignal(timer.unlocked, timeout=2000):
        timer.on_activate(visible=True, has_items=True)

    assert timer.state is LockState.UNLOCKED
    timer.dispose()
