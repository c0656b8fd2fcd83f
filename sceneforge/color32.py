"""A 32-bit RGBA colour with saturating arithmetic."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar

_MAX = 255


@dataclass(frozen=True)
class Color32:
    """Four 8-bit channels; arithmetic clamps to the range 0..255."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    WHITE: ClassVar[Color32]
    BLACK: ClassVar[Color32]
    RED: ClassVar[Color32]
    GREEN: ClassVar[Color32]
    BLUE: ClassVar[Color32]

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not isinstance(value, int) or not 0 <= value <= _MAX:
                raise ValueError(f"channel {field.name} must be an int in 0..255, got {value!r}")

    def _channels(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def _combine(self, other: Color32, op) -> Color32:
        return Color32(*(op(x, y) for x, y in zip(self._channels(), other._channels())))

    def __add__(self, other: Color32) -> Color32:
        if not isinstance(other, Color32):
            return NotImplemented
        return self._combine(other, lambda x, y: min(x + y, _MAX))

    def __sub__(self, other: Color32) -> Color32:
        if not isinstance(other, Color32):
            return NotImplemented
        return self._combine(other, lambda x, y: max(x - y, 0))

    def __mul__(self, other: Color32) -> Color32:
        if not isinstance(other, Color32):
            return NotImplemented
        return self._combine(other, lambda x, y: min(x * y, _MAX))

    def __truediv__(self, other: Color32) -> Color32:
        """Integer division per channel; a zero channel raises ZeroDivisionError."""
        if not isinstance(other, Color32):
            return NotImplemented
        return self._combine(other, lambda x, y: x // y)


Color32.WHITE = Color32(255, 255, 255, 255)
Color32.BLACK = Color32(0, 0, 0, 255)
Color32.RED = Color32(255, 0, 0, 255)
Color32.BLUE = Color32(0, 0, 255, 255)
Color32.GREEN = Color32(0, 255, 0, 255)