"""Response curves: invertible tapers between scale and value fraction.

A response curve maps the knob's linear scale onto ``[0, 1]`` the way the
taper of an analog potentiometer does. Both directions accept a float or a
NumPy array; floats come back as floats.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import math
from typing import Any, Callable, Dict, Optional, Union

import numpy as np
from numpy.typing import ArrayLike

CurveInput = Union[float, ArrayLike]
CurveOutput = Union[float, np.ndarray]


def _unit(values: CurveInput) -> np.ndarray:
    return np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)


def _result(values: np.ndarray) -> CurveOutput:
    clipped = np.clip(values, 0.0, 1.0)
    if clipped.ndim == 0:
        return float(clipped)
    return clipped


class ResponseCurve(ABC):
    """Strictly increasing map of ``[0, 1]`` onto itself with an inverse.

    Implementations must keep ``to_curve(0) == 0``, ``to_curve(1) == 1`` and
    ``to_scale(to_curve(s)) == s``.
    """

    kind = "custom"

    @abstractmethod
    def to_curve(self, scale: CurveInput) -> CurveOutput:
        """Map a linear scale to the curve value."""

    @abstractmethod
    def to_scale(self, curve: CurveInput) -> CurveOutput:
        """Map a curve value back to the linear scale."""

    def params(self) -> Dict[str, Any]:
        """Parameters needed to rebuild the curve with :func:`curve_from_dict`."""
        return {}


class LinearCurve(ResponseCurve):
    """Identity taper."""

    kind = "linear"

    def to_curve(self, scale: CurveInput) -> CurveOutput:
        return _result(_unit(scale))

    def to_scale(self, curve: CurveInput) -> CurveOutput:
        return _result(_unit(curve))

    def __repr__(self) -> str:
        return "LinearCurve()"


class PowerCurve(ResponseCurve):
    """``curve = scale ** exponent``.

    Exponents above 1 give fine control near the bottom of the range;
    exponents below 1 favour the top.
    """

    kind = "power"

    def __init__(self, exponent: float = 2.0) -> None:
        exponent = float(exponent)
        if not math.isfinite(exponent) or exponent <= 0.0:
            raise ValueError(f"exponent must be a positive number, got {exponent}")
        self.exponent = exponent

    def to_curve(self, scale: CurveInput) -> CurveOutput:
        return _result(np.power(_unit(scale), self.exponent))

    def to_scale(self, curve: CurveInput) -> CurveOutput:
        return _result(np.power(_unit(curve), 1.0 / self.exponent))

    def params(self) -> Dict[str, Any]:
        return {"exponent": self.exponent}

    def __repr__(self) -> str:
        return f"PowerCurve(exponent={self.exponent!r})"


class LogCurve(ResponseCurve):
    """Exponential "audio" taper, ``(base ** s - 1) / (base - 1)``.

    Its inverse is logarithmic. ``base > 1`` behaves like a log-taper volume
    pot; ``0 < base < 1`` gives the reverse taper.
    """

    kind = "log"

    def __init__(self, base: float = 10.0) -> None:
        base = float(base)
        if not math.isfinite(base) or base <= 0.0 or base == 1.0:
            raise ValueError(f"base must be positive and not 1, got {base}")
        self.base = base
        self._log_base = math.log(base)
        self._span = base - 1.0

    def to_curve(self, scale: CurveInput) -> CurveOutput:
        s = _unit(scale)
        return _result(np.expm1(s * self._log_base) / self._span)

    def to_scale(self, curve: CurveInput) -> CurveOutput:
        c = _unit(curve)
        return _result(np.log1p(c * self._span) / self._log_base)

    def params(self) -> Dict[str, Any]:
        return {"base": self.base}

    def __repr__(self) -> str:
        return f"LogCurve(base={self.base!r})"


class FunctionCurve(ResponseCurve):
    """Curve built from a host-supplied forward function and its inverse.

    The functions receive NumPy arrays (0-d for scalar input) clipped to
    ``[0, 1]``. Use :func:`check_curve` to validate the pair.
    """

    def __init__(
        self,
        forward: Callable[[np.ndarray], ArrayLike],
        inverse: Callable[[np.ndarray], ArrayLike],
    ) -> None:
        self._forward = forward
        self._inverse = inverse

    def to_curve(self, scale: CurveInput) -> CurveOutput:
        return _result(np.asarray(self._forward(_unit(scale)), dtype=np.float64))

    def to_scale(self, curve: CurveInput) -> CurveOutput:
        return _result(np.asarray(self._inverse(_unit(curve)), dtype=np.float64))

    def params(self) -> Dict[str, Any]:
        raise ValueError("FunctionCurve cannot be described as plain data")


CURVE_TYPES: Dict[str, Callable[..., ResponseCurve]] = {
    LinearCurve.kind: LinearCurve,
    PowerCurve.kind: PowerCurve,
    LogCurve.kind: LogCurve,
}


def check_curve(
    curve: ResponseCurve, samples: int = 257, tolerance: float = 1e-9
) -> None:
    """Raise ``ValueError`` unless ``curve`` is a valid response curve.

    Checks the fixed endpoints, strict monotonicity on an even grid and the
    round trip in both directions.
    """
    if samples < 2:
        raise ValueError("samples must be at least 2")
    grid = np.linspace(0.0, 1.0, samples)
    forward = np.asarray(curve.to_curve(grid), dtype=np.float64)
    if forward.shape != grid.shape or not np.all(np.isfinite(forward)):
        raise ValueError(f"{curve!r} returned invalid values for the sample grid")
    if abs(forward[0]) > tolerance or abs(forward[-1] - 1.0) > tolerance:
        raise ValueError(f"{curve!r} must map 0 to 0 and 1 to 1")
    if np.any(np.diff(forward) <= 0.0):
        raise ValueError(f"{curve!r} is not strictly increasing on [0, 1]")
    back = np.asarray(curve.to_scale(forward), dtype=np.float64)
    worst = float(np.max(np.abs(back - grid)))
    if worst > math.sqrt(tolerance):
        raise ValueError(
            f"{curve!r} to_scale is not the inverse of to_curve (error {worst:.3g})"
        )


def curve_to_dict(curve: Optional[ResponseCurve]) -> Optional[Dict[str, Any]]:
    """Describe a built-in curve as JSON-friendly data (``None`` stays ``None``)."""
    if curve is None:
        return None
    if curve.kind not in CURVE_TYPES:
        raise ValueError(f"{type(curve).__name__} cannot be described as plain data")
    data: Dict[str, Any] = {"kind": curve.kind}
    data.update(curve.params())
    return data


def curve_from_dict(data: Optional[Dict[str, Any]]) -> Optional[ResponseCurve]:
    """Rebuild a curve described by :func:`curve_to_dict`."""
    if data is None:
        return None
    params = dict(data)
    kind = str(params.pop("kind", LinearCurve.kind))
    factory = CURVE_TYPES.get(kind)
    if factory is None:
        raise ValueError(f"Unknown response curve kind {kind!r}")
    try:
        return factory(**params)
    except TypeError as exc:
        raise ValueError(f"Invalid parameters for {kind!r} curve: {params}") from exc


__all__ = [
    "ResponseCurve",
    "LinearCurve",
    "PowerCurve",
    "LogCurve",
    "FunctionCurve",
    "CURVE_TYPES",
    "check_curve",
    "curve_to_dict",
    "curve_from_dict",
]
