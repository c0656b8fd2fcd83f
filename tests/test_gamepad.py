import pytest

from sceneforge.gamepad import (
    LEFT_THUMB_DEADZONE,
    RIGHT_THUMB_DEADZONE,
    Button,
    Gamepad,
    GamepadState,
)


def test_centered_sticks_are_dead():
    pad = Gamepad(0)
    pad.update(GamepadState())
    assert pad.left_stick_dead()
    assert pad.right_stick_dead()


def test_deadzone_boundary_is_inclusive():
    pad = Gamepad(0)
    pad.update(GamepadState(thumb_lx=LEFT_THUMB_DEADZONE, thumb_ry=-RIGHT_THUMB_DEADZONE))
    assert pad.left_stick_dead()
    assert pad.right_stick_dead()
    pad.update(GamepadState(thumb_ly=LEFT_THUMB_DEADZONE + 1, thumb_rx=RIGHT_THUMB_DEADZONE + 1))
    assert not pad.left_stick_dead()
    assert not pad.right_stick_dead()


def test_deadzone_values_match_xinput():
    pad = Gamepad(0)
    pad.update(GamepadState(thumb_lx=7849, thumb_rx=8689))
    assert pad.left_stick_dead()
    assert pad.right_stick_dead()
    pad.update(GamepadState(thumb_lx=7850, thumb_rx=8690))
    assert not pad.left_stick_dead()
    assert not pad.right_stick_dead()


def test_stick_and_trigger_normalisation():
    pad = Gamepad(1)
    pad.update(GamepadState(thumb_lx=-32768, thumb_ly=16384, thumb_rx=0, thumb_ry=-16384,
                            left_trigger=255, right_trigger=0))
    assert pad.left_stick_x() == -1.0
    assert pad.left_stick_y() == 0.5
    assert pad.right_stick_x() == 0.0
    assert pad.right_stick_y() == -0.5
    assert pad.left_trigger() == 1.0
    assert pad.right_trigger() == 0.0


def test_rumble_is_clamped():
    pad = Gamepad(0)
    assert pad.set_rumble(2.0, -1.0) == (65535, 0)
    assert pad.rumble == (65535, 0)


def test_button_transitions():
    pad = Gamepad(0)
    pad.update(GamepadState(buttons=Button.A))
    assert pad.is_button_pressed(Button.A)
    assert pad.was_button_pressed(Button.A)
    assert not pad.is_button_pressed(Button.B)
    pad.update(GamepadState(buttons=Button.A))
    assert not pad.was_button_pressed(Button.A)
    pad.update(GamepadState())
    assert pad.was_button_released(Button.A)
    assert not pad.is_button_pressed(Button.A)


def test_missing_reading_keeps_state():
    pad = Gamepad(0)
    pad.update(GamepadState(buttons=Button.START))
    pad.update(None)
    assert pad.was_button_pressed(Button.START)


@pytest.mark.parametrize(
    "kwargs",
    [{"left_trigger": 256}, {"thumb_lx": 32768}, {"buttons": 0x10000}, {"right_trigger": -1}],
)
def test_invalid_state_rejected(kwargs):
    with pytest.raises(ValueError):
        GamepadState(**kwargs)