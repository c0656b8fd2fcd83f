"""Controller state: sticks, triggers, buttons and rumble."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

LEFT_THUMB_DEADZONE = 7849
RIGHT_THUMB_DEADZONE = 8689
_MOTOR_MAX = 65535


class Button(IntFlag):
    """Button bits of the controller's button word."""

    DPAD_UP = 0x0001
    DPAD_DOWN = 0x0002
    DPAD_LEFT = 0x0004
    DPAD_RIGHT = 0x0008
    START = 0x0010
    BACK = 0x0020
    LEFT_THUMB = 0x0040
    RIGHT_THUMB = 0x0080
    LEFT_SHOULDER = 0x0100
    RIGHT_SHOULDER = 0x0200
    A = 0x1000
    B = 0x2000
    X = 0x4000
    Y = 0x8000


@dataclass(frozen=True)
class GamepadState:
    """One snapshot of a controller."""

    buttons: int = 0
    left_trigger: int = 0
    right_trigger: int = 0
    thumb_lx: int = 0
    thumb_ly: int = 0
    thumb_rx: int = 0
    thumb_ry: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.buttons <= 0xFFFF:
            raise ValueError(f"buttons must fit in 16 bits, got {self.buttons!r}")
        for name in ("left_trigger", "right_trigger"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be in 0..255, got {value!r}")
        for name in ("thumb_lx", "thumb_ly", "thumb_rx", "thumb_ry"):
            value = getattr(self, name)
            if not -32768 <= value <= 32767:
                raise ValueError(f"{name} must be in -32768..32767, got {value!r}")


def _outside(value: int, deadzone: int) -> bool:
    return value > deadzone or value < -deadzone


class Gamepad:
    """Tracks the current and previous state of the controller on one port."""

    def __init__(self, id: int) -> None:
        self.id = id
        self._previous = GamepadState()
        self._current = GamepadState()
        self.rumble: tuple[int, int] = (0, 0)

    def update(self, state: GamepadState | None) -> None:
        """Take a new snapshot; ``None`` (no reading) keeps the old states."""
        if state is None:
            return
        self._previous, self._current = self._current, state

    def left_stick_dead(self) -> bool:
        s = self._current
        return not (_outside(s.thumb_lx, LEFT_THUMB_DEADZONE) or _outside(s.thumb_ly, LEFT_THUMB_DEADZONE))

    def right_stick_dead(self) -> bool:
        s = self._current
        return not (
            _outside(s.thumb_rx, RIGHT_THUMB_DEADZONE) or _outside(s.thumb_ry, RIGHT_THUMB_DEADZONE)
        )

    def left_stick_x(self) -> float:
        return self._current.thumb_lx / 32768.0

    def left_stick_y(self) -> float:
        return self._current.thumb_ly / 32768.0

    def right_stick_x(self) -> float:
        return self._current.thumb_rx / 32768.0

    def right_stick_y(self) -> float:
        return self._current.thumb_ry / 32768.0

    def left_trigger(self) -> float:
        return self._current.left_trigger / 255.0

    def right_trigger(self) -> float:
        return self._current.right_trigger / 255.0

    def set_rumble(self, left_motor: float, right_motor: float) -> tuple[int, int]:
        """Set motor speeds from values clamped to 0..1; returns the raw speeds."""
        left = min(max(left_motor, 0.0), 1.0)
        right = min(max(right_motor, 0.0), 1.0)
        self.rumble = (int(left * _MOTOR_MAX), int(right * _MOTOR_MAX))
        return self.rumble

    def is_button_pressed(self, button: int) -> bool:
        """True while the button is down."""
        return (self._current.buttons & button) != 0

    def was_button_pressed(self, button: int) -> bool:
        """True only on the frame the button went down."""
        return (self._previous.buttons & button) == 0 and (self._current.buttons & button) != 0

    def was_button_released(self, button: int) -> bool:
        """True only on the frame the button went up."""
        return (self._previous.buttons & button) != 0 and (self._current.buttons & button) == 0