"""Angle-to-value engine behind rotary knob controls."""

from .angle import angle_of, angles_of, normalize_angle, shortest_delta
from .curves import (
    FunctionCurve,
    LinearCurve,
    LogCurve,
    PowerCurve,
    ResponseCurve,
    check_curve,
    curve_from_dict,
    curve_to_dict,
)
from .knob import Knob, KnobListener
from .rotation import (
    DEFAULT_ROTATION_RANGE,
    DEFAULT_SWEEP_RANGE,
    DeadZonePolicy,
    RotationModel,
    Topology,
)

__all__ = [
    "angle_of",
    "angles_of",
    "normalize_angle",
    "shortest_delta",
    "ResponseCurve",
    "LinearCurve",
    "PowerCurve",
    "LogCurve",
    "FunctionCurve",
    "check_curve",
    "curve_from_dict",
    "curve_to_dict",
    "Knob",
    "KnobListener",
    "RotationModel",
    "Topology",
    "DeadZonePolicy",
    "DEFAULT_SWEEP_RANGE",
    "DEFAULT_ROTATION_RANGE",
]
