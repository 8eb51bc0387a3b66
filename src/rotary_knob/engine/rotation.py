"""Range-of-motion model converting between scale and rotation angle."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Optional

from ..utils import clamp, require_finite
from .angle import FULL_TURN, normalize_angle, shortest_delta

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_RANGE = 270.0
DEFAULT_ROTATION_RANGE = 720.0
ARC_TOLERANCE = 1e-9  # degrees; samples this close to a stop angle sit on it


class Topology(str, Enum):
    """How the range of motion is laid out around the circle."""

    BOUNDED = "bounded"  # hard stop, at most one turn
    CONTINUOUS = "continuous"  # multi-turn accumulator


class DeadZonePolicy(str, Enum):
    """What a bounded knob does with samples outside its valid arc."""

    HOLD = "hold"
    SNAP_NEAREST = "snap_nearest"


def default_range(topology: Topology) -> float:
    """Range of motion used when none is configured."""
    if Topology(topology) is Topology.CONTINUOUS:
        return DEFAULT_ROTATION_RANGE
    return DEFAULT_SWEEP_RANGE


def centered_start_angle(sweep_range: float) -> float:
    """Start angle that centers a sweep on 12 o'clock."""
    return normalize_angle(FULL_TURN - sweep_range / 2.0)


class RotationModel:
    """Maps scale in ``[0, 1]`` to rotation and back for one topology.

    Bounded knobs derive the scale from an absolute angle and reject angles
    that fall in the dead zone. Continuous knobs integrate per-sample deltas
    into an offset clamped to ``[0, range_degrees]``, since an absolute
    angle cannot tell turns apart.

    ``start_angle=None`` keeps the arc centered on 12 o'clock, following the
    range of motion whenever it changes.

    The two stop angles of a bounded arc border the dead zone. A sample
    landing exactly on a stop reads as that stop only while the knob is
    already within one dead-zone width of it; otherwise it is rejected like
    a dead-zone sample. A full-turn sweep has a zero-width dead zone at the
    seam, where both stops meet; a sample on the seam takes the endpoint
    nearer the current scale.

    ``max_step_degrees`` optionally caps how far one sample may carry the
    indicator along a bounded arc; larger steps are dropped.
    """

    def __init__(
        self,
        topology: Topology = Topology.BOUNDED,
        range_degrees: Optional[float] = None,
        start_angle: Optional[float] = None,
        dead_zone_policy: DeadZonePolicy = DeadZonePolicy.HOLD,
        max_step_degrees: Optional[float] = None,
    ) -> None:
        self._topology = Topology(topology)
        self._dead_zone_policy = DeadZonePolicy(dead_zone_policy)
        self._max_step = self._checked_step(max_step_degrees)
        self._range = self._checked_range(
            default_range(self._topology) if range_degrees is None else range_degrees
        )
        self._explicit_start: Optional[float] = None
        if start_angle is not None:
            self._explicit_start = normalize_angle(
                require_finite("start_angle", start_angle)
            )

    # ----------------------------- Properties ---------------------------------

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def dead_zone_policy(self) -> DeadZonePolicy:
        return self._dead_zone_policy

    @property
    def range_degrees(self) -> float:
        """Sweep range (bounded) or rotation range (continuous)."""
        return self._range

    @property
    def sweep_range(self) -> float:
        """Visible arc of motion, never more than one turn."""
        return min(self._range, FULL_TURN)

    @property
    def start_angle(self) -> float:
        if self._explicit_start is None:
            return centered_start_angle(self.sweep_range)
        return self._explicit_start

    @property
    def has_explicit_start(self) -> bool:
        return self._explicit_start is not None

    @property
    def is_bounded(self) -> bool:
        return self._topology is Topology.BOUNDED

    @property
    def is_full_turn(self) -> bool:
        """Bounded arc covering the whole circle, stops meeting at the seam."""
        return self.is_bounded and self._range >= FULL_TURN

    @property
    def dead_zone_width(self) -> float:
        if not self.is_bounded:
            return 0.0
        return FULL_TURN - self._range

    @property
    def max_step_degrees(self) -> Optional[float]:
        return self._max_step

    # ----------------------------- Configuration ------------------------------

    def _checked_range(self, degrees: float) -> float:
        degrees = require_finite("range_degrees", degrees)
        if degrees <= 0.0:
            raise ValueError(f"range of motion must be positive, got {degrees}")
        if self._topology is Topology.BOUNDED and degrees > FULL_TURN:
            logger.debug("sweep range %.3f clamped to a full turn", degrees)
            degrees = FULL_TURN
        return degrees

    @staticmethod
    def _checked_step(degrees: Optional[float]) -> Optional[float]:
        if degrees is None:
            return None
        degrees = require_finite("max_step_degrees", degrees)
        if degrees <= 0.0:
            raise ValueError(f"max_step_degrees must be positive, got {degrees}")
        return degrees

    def set_max_step_degrees(self, degrees: Optional[float]) -> None:
        self._max_step = self._checked_step(degrees)

    def set_range_degrees(self, degrees: float) -> None:
        self._range = self._checked_range(degrees)

    def set_start_angle(self, angle: Optional[float]) -> None:
        if angle is None:
            self._explicit_start = None
        else:
            self._explicit_start = normalize_angle(require_finite("start_angle", angle))

    def set_topology(self, topology: Topology) -> None:
        self._topology = Topology(topology)
        self._range = self._checked_range(self._range)

    def set_dead_zone_policy(self, policy: DeadZonePolicy) -> None:
        self._dead_zone_policy = DeadZonePolicy(policy)

    # ----------------------------- Conversions --------------------------------

    def to_rotation(self, scale: float) -> float:
        """Rotation for ``scale``; unbounded for continuous knobs."""
        if self.is_bounded:
            return normalize_angle(scale * self._range + self.start_angle)
        return self.start_angle + scale * self._range

    def sweep_of(self, angle: float) -> float:
        """Clockwise distance of ``angle`` from the start angle."""
        return normalize_angle(FULL_TURN + angle - self.start_angle)

    def stop_at(self, sweep: float) -> Optional[float]:
        """Endpoint whose stop angle ``sweep`` sits on, or ``None``."""
        if sweep <= ARC_TOLERANCE or sweep >= FULL_TURN - ARC_TOLERANCE:
            return 0.0
        if abs(sweep - self._range) <= ARC_TOLERANCE:
            return 1.0
        return None

    def in_dead_zone(self, angle: float) -> bool:
        if not self.is_bounded:
            return False
        sweep = self.sweep_of(angle)
        return self.stop_at(sweep) is None and sweep > self._range

    def entry_edge(self, sweep: float, current_scale: float) -> float:
        """Endpoint whose stop a dead-zone ``sweep`` lies nearer to."""
        to_end = sweep - self._range
        to_start = FULL_TURN - sweep
        if to_end < to_start:
            return 1.0
        if to_start < to_end:
            return 0.0
        return nearest_endpoint(current_scale)

    def to_scale(self, new_angle: float, old_angle: float) -> float:
        """Scale for the absolute ``new_angle`` on a bounded knob.

        Angles in the dead zone are rejected; ``old_angle`` (the rotation
        before this step) then decides the result according to the dead
        zone policy, so the value never jumps to the opposite end.
        """
        return self.scale_at(
            self.sweep_of(new_angle), self.scale_of_rotation(old_angle)
        )

    def scale_at(self, sweep: float, current_scale: float) -> float:
        """Scale for a sample ``sweep`` degrees along the arc from the start."""
        stop = self.stop_at(sweep)
        if stop is not None:
            return self.reach_stop(stop, current_scale)
        if sweep > self._range:
            return self.reject(current_scale)
        return clamp(sweep / self._range, 0.0, 1.0)

    def reach_stop(self, stop: float, current_scale: float) -> float:
        if self.is_full_turn:
            return nearest_endpoint(current_scale)
        if abs(stop - current_scale) * self._range <= self.dead_zone_width:
            return stop
        return self.reject(current_scale)

    def seam_stop(self, current_scale: float, sweep: float) -> Optional[float]:
        """Stop a full-turn sample ran into by crossing the seam, if it did."""
        if not self.is_full_turn or self.stop_at(sweep) is not None:
            return None
        current = current_scale * self._range
        along_arc = sweep - current
        shortest = shortest_delta(current, sweep)
        if abs(shortest - along_arc) <= ARC_TOLERANCE:
            return None
        return 1.0 if shortest > 0.0 else 0.0

    def exceeds_step(self, current_scale: float, scale: float) -> bool:
        if self._max_step is None:
            return False
        return abs(scale - current_scale) * self._range > self._max_step

    def reject(self, scale: float) -> float:
        """Apply the dead zone policy to the scale held before a rejection."""
        if self._dead_zone_policy is DeadZonePolicy.SNAP_NEAREST:
            return nearest_endpoint(scale)
        return scale

    def scale_of_rotation(self, rotation: float) -> float:
        """Scale of a rotation already on the valid arc of a bounded knob."""
        sweep = self.sweep_of(rotation)
        if sweep > self._range:
            # rotation is never left in the dead zone; fall back to the nearer stop
            return 0.0 if FULL_TURN - sweep < sweep - self._range else 1.0
        return clamp(sweep / self._range, 0.0, 1.0)

    def accumulate(self, offset: float, delta: float) -> float:
        """Add ``delta`` to a continuous offset, absorbing any overshoot."""
        return clamp(offset + delta, 0.0, self._range)

    def offset_of(self, scale: float) -> float:
        return scale * self._range

    def scale_of_offset(self, offset: float) -> float:
        return clamp(offset / self._range, 0.0, 1.0)

    def sweep_angle(self, scale: float) -> float:
        """Arc length drawn from the start angle for ``scale``."""
        return scale * self.sweep_range


def nearest_endpoint(scale: float) -> float:
    """The end of the range closest to ``scale`` (ties go to the top)."""
    return 1.0 if scale >= 0.5 else 0.0


__all__ = [
    "Topology",
    "DeadZonePolicy",
    "RotationModel",
    "DEFAULT_SWEEP_RANGE",
    "DEFAULT_ROTATION_RANGE",
    "default_range",
    "centered_start_angle",
    "nearest_endpoint",
]
