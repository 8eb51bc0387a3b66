"""Utility helpers for rotary_knob."""

from .geometry import clamp, point_on_circle, require_finite

__all__ = ["clamp", "point_on_circle", "require_finite"]
