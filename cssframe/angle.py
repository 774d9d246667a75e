# angle.py

import math
from typing import Union

_DEG_TO_RAD = math.pi / 180.0
_RAD_TO_DEG = 180.0 / math.pi


def to_radians(degrees: float) -> float:
    """Convert degrees to radians. No wrapping is performed."""
    return degrees * _DEG_TO_RAD


def to_degrees(radians: float) -> float:
    """Convert radians to degrees. No wrapping is performed."""
    return radians * _RAD_TO_DEG


class Angle:
    """
    An angle that remembers nothing but its value in radians.

    Use `Angle.degrees(45)` or `Angle.radians(math.pi / 4)` to build one.
    """
    __slots__ = ("_radians",)

    def __init__(self, radians: float = 0.0):
        self._radians = float(radians)

    @classmethod
    def degrees(cls, value: float) -> "Angle":
        return cls(to_radians(value))

    @classmethod
    def radians(cls, value: float) -> "Angle":
        return cls(value)

    @property
    def as_radians(self) -> float:
        return self._radians

    @property
    def as_degrees(self) -> float:
        return to_degrees(self._radians)

    def __neg__(self) -> "Angle":
        return self.__class__(-self._radians)

    def __add__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return self.__class__(self._radians + other._radians)

    def __sub__(self, other: "Angle") -> "Angle":
        if not isinstance(other, Angle):
            return NotImplemented
        return self.__class__(self._radians - other._radians)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Angle):
            return False
        return math.isclose(self._radians, other._radians, rel_tol=1e-12, abs_tol=1e-12)

    def __repr__(self) -> str:
        return f"Angle(degrees={self.as_degrees:.6g})"

    def __reduce__(self):
        return (self.__class__, (self._radians,))


AngleLike = Union[Angle, float]


def as_radians(angle: AngleLike, degrees: bool = True) -> float:
    """
    Resolve an `Angle` or a plain number to radians.

    Args:
        angle: an Angle (the `degrees` flag is ignored) or a number.
        degrees: if True, a plain number is in degrees, else radians.

    Returns:
        The angle in radians.
    """
    if isinstance(angle, Angle):
        return angle.as_radians
    if degrees:
        return to_radians(angle)
    return float(angle)
