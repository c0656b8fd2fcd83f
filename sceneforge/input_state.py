"""Keyboard and mouse state tracked across two consecutive frames."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

KEY_COUNT = 256
MOUSE_BUTTON_COUNT = 4
_DOWN = 0x80

MOUSE0 = 0
MOUSE1 = 1
MOUSE2 = 2
MOUSE3 = 3


class Key(IntEnum):
    """Keyboard scan codes, indexing the 256-entry keyboard state."""

    ESCAPE = 0x01
    BACKSPACE = 0x0E
    TAB = 0x0F
    W = 0x11
    Y = 0x15
    RETURN = 0x1C
    A = 0x1E
    S = 0x1F
    D = 0x20
    LSHIFT = 0x2A
    Z = 0x2C
    X = 0x2D
    C = 0x2E
    V = 0x2F
    SPACE = 0x39
    F1 = 0x3B
    F2 = 0x3C
    F8 = 0x42
    F9 = 0x43
    HOME = 0xC7
    UP = 0xC8
    PGUP = 0xC9
    LEFT = 0xCB
    RIGHT = 0xCD
    END = 0xCF
    DOWN = 0xD0
    PGDN = 0xD1
    INSERT = 0xD2
    DELETE = 0xD3


def _check_index(value: int, count: int, what: str) -> int:
    index = int(value)
    if not 0 <= index < count:
        raise IndexError(f"{what} {value!r} out of range 0..{count - 1}")
    return index


class InputState:
    """Holds this frame's and last frame's keyboard and mouse state.

    A key or button counts as down when bit 0x80 of its state byte is set.
    """

    def __init__(self) -> None:
        self._current_keys = bytes(KEY_COUNT)
        self._previous_keys = bytes(KEY_COUNT)
        self._current_mouse = bytes(MOUSE_BUTTON_COUNT)
        self._previous_mouse = bytes(MOUSE_BUTTON_COUNT)
        self._mouse_dx = 0.0
        self._mouse_dy = 0.0

    def update(
        self,
        keyboard: Sequence[int],
        mouse_dx: float = 0.0,
        mouse_dy: float = 0.0,
        mouse_buttons: Sequence[int] = (0, 0, 0, 0),
    ) -> None:
        """Advance one frame with a new 256-byte keyboard state and mouse state."""
        keys = bytes(keyboard)
        if len(keys) != KEY_COUNT:
            raise ValueError(f"keyboard state must hold {KEY_COUNT} bytes, got {len(keys)}")
        buttons = bytes(mouse_buttons)
        if len(buttons) != MOUSE_BUTTON_COUNT:
            raise ValueError(
                f"mouse state must hold {MOUSE_BUTTON_COUNT} buttons, got {len(buttons)}"
            )
        self._previous_keys, self._current_keys = self._current_keys, keys
        self._previous_mouse, self._current_mouse = self._current_mouse, buttons
        self._mouse_dx = float(mouse_dx)
        self._mouse_dy = float(mouse_dy)

    @property
    def mouse_x(self) -> float:
        """Horizontal mouse movement of this frame."""
        return self._mouse_dx

    @property
    def mouse_y(self) -> float:
        """Vertical mouse movement of this frame."""
        return self._mouse_dy

    def is_key_held(self, key: int) -> bool:
        i = _check_index(key, KEY_COUNT, "key")
        return bool(self._current_keys[i] & _DOWN)

    def is_key_pressed(self, key: int) -> bool:
        """True only on the frame the key went down."""
        i = _check_index(key, KEY_COUNT, "key")
        return bool(self._current_keys[i] & _DOWN) and not self._previous_keys[i] & _DOWN

    def is_key_released(self, key: int) -> bool:
        """True only on the frame the key went up."""
        i = _check_index(key, KEY_COUNT, "key")
        return not self._current_keys[i] & _DOWN and bool(self._previous_keys[i] & _DOWN)

    def is_mouse_held(self, button: int) -> bool:
        i = _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return bool(self._current_mouse[i] & _DOWN)

    def is_mouse_pressed(self, button: int) -> bool:
        i = _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return bool(self._current_mouse[i] & _DOWN) and not self._previous_mouse[i] & _DOWN

    def is_mouse_released(self, button: int) -> bool:
        i = _check_index(button, MOUSE_BUTTON_COUNT, "mouse button")
        return not self._current_mouse[i] & _DOWN and bool(self._previous_mouse[i] & _DOWN)