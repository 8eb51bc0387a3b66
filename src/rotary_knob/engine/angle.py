"""Pointer position to clockwise angle conversion.

Angles throughout the engine are measured in degrees, clockwise, starting at
the 12 o'clock position, in screen coordinates where ``y`` grows downward.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

FULL_TURN = 360.0


def normalize_angle(angle: float) -> float:
    """Fold ``angle`` into ``[0, 360)``."""
    folded = math.fmod(angle, FULL_TURN)
    if folded < 0.0:
        folded += FULL_TURN
    # -1e-20 + 360 rounds back up to a full turn
    if folded >= FULL_TURN:
        folded = 0.0
    return folded


def angle_of(x: float, y: float, center_x: float, center_y: float) -> float:
    """Return the clockwise angle of ``(x, y)`` around the center point.

    A sample exactly on the center has no direction; it maps to ``0.0`` so
    callers always receive a finite, in-range angle.
    """
    dx = x - center_x
    dy = y - center_y
    if dx == 0 and dy == 0:
        return 0.0
    return normalize_angle(math.degrees(math.atan2(dy, dx)) + 90.0)


def angles_of(
    xs: ArrayLike, ys: ArrayLike, center_x: float, center_y: float
) -> np.ndarray:
    """Vectorised :func:`angle_of` for arrays of pointer samples."""
    dx = np.asarray(xs, dtype=np.float64) - center_x
    dy = np.asarray(ys, dtype=np.float64) - center_y
    raw = np.degrees(np.arctan2(dy, dx)) + 90.0
    angles = np.mod(raw, FULL_TURN)
    angles = np.where(angles >= FULL_TURN, 0.0, angles)
    return np.where((dx == 0) & (dy == 0), 0.0, angles)


def shortest_delta(previous: float, current: float) -> float:
    """Signed smallest rotation from ``previous`` to ``current``.

    The result lies in ``(-180, 180]``; positive is clockwise.
    """
    delta = normalize_angle(current - previous)
    if delta > FULL_TURN / 2.0:
        delta -= FULL_TURN
    return delta


__all__ = ["FULL_TURN", "normalize_angle", "angle_of", "angles_of", "shortest_delta"]
