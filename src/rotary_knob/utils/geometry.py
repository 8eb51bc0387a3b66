"""Geometry helpers shared by the engine and by hosts driving it."""

import math
from typing import Tuple


def point_on_circle(
    cx: float, cy: float, radius: float, angle_deg: float
) -> Tuple[float, float]:
    """Return the screen point ``angle_deg`` clockwise from 12 o'clock.

    Screen coordinates grow downward, so 0° is straight up from ``(cx, cy)``
    and 90° is to the right.
    """
    theta = math.radians(angle_deg)
    x = cx + radius * math.sin(theta)
    y = cy - radius * math.cos(theta)
    return x, y


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` to the inclusive range ``[lo, hi]``."""
    return max(lo, min(hi, value))


def require_finite(name: str, value: float) -> float:
    """Return ``value`` as a float, raising ``ValueError`` for NaN/inf."""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


__all__ = ["point_on_circle", "clamp", "require_finite"]
