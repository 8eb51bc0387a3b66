"""rotary_knob package: pointer-driven rotary control engine."""

from __future__ import annotations

import logging

from ._version import get_version
from .engine import (
    DeadZonePolicy,
    FunctionCurve,
    Knob,
    KnobListener,
    LinearCurve,
    LogCurve,
    PowerCurve,
    ResponseCurve,
    RotationModel,
    Topology,
    angle_of,
)
from .models import KnobConfig, load_config, save_config

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = get_version()

__all__ = [
    "Knob",
    "KnobListener",
    "KnobConfig",
    "load_config",
    "save_config",
    "Topology",
    "DeadZonePolicy",
    "RotationModel",
    "ResponseCurve",
    "LinearCurve",
    "PowerCurve",
    "LogCurve",
    "FunctionCurve",
    "angle_of",
    "__version__",
    "get_version",
]
