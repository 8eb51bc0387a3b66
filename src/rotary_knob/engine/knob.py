"""Rotary knob control state and pointer gesture tracking.

A :class:`Knob` is driven by a platform event layer calling
:meth:`Knob.pointer_down`, :meth:`Knob.pointer_move`, :meth:`Knob.pointer_up`
and :meth:`Knob.pointer_cancel` with coordinates in the host's space. The
knob turns each sample into a clockwise angle around its center, maps it
onto the range of motion and reports value changes to a
:class:`KnobListener`.

The knob is not thread safe. Hosts must deliver every call from a single
thread (or serialise them) and every call completes synchronously.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Optional, Tuple

from ..utils import clamp, require_finite
from .angle import angle_of, normalize_angle, shortest_delta
from .curves import ResponseCurve, check_curve, curve_from_dict, curve_to_dict
from .rotation import DeadZonePolicy, RotationModel, Topology

if TYPE_CHECKING:  # pragma: no cover - only for type checkers
    from ..models import KnobConfig

logger = logging.getLogger(__name__)


class KnobListener:
    """Receives knob notifications; override the methods you need.

    Mirrors the seek bar change listener: ``from_user`` tells gesture driven
    changes apart from programmatic ones.
    """

    def on_tracking_started(self, knob: "Knob") -> None:
        pass

    def on_tracking_stopped(self, knob: "Knob") -> None:
        pass

    def on_value_changed(self, knob: "Knob", value: float, from_user: bool) -> None:
        pass


@dataclass
class GestureState:
    """Reference angles for one pointer-down ... up/cancel sequence."""

    start_angle: float  # pointer angle the gesture is anchored at
    start_rotation: float  # knob rotation at the anchor
    start_scale: float
    last_angle: float  # pointer angle of the previous sample
    blocked_edge: Optional[float] = None  # stop the pointer left the arc by


class Knob:
    """Angle-to-value engine of one rotary control."""

    def __init__(
        self,
        minimum: float = 0.0,
        maximum: float = 100.0,
        topology: Topology = Topology.BOUNDED,
        range_degrees: Optional[float] = None,
        start_angle: Optional[float] = None,
        response_curve: Optional[ResponseCurve] = None,
        dead_zone_policy: DeadZonePolicy = DeadZonePolicy.HOLD,
        value: Optional[float] = None,
        listener: Optional[KnobListener] = None,
        max_step_degrees: Optional[float] = None,
    ) -> None:
        self._minimum, self._maximum = self._checked_bounds(minimum, maximum)
        self._model = RotationModel(
            topology, range_degrees, start_angle, dead_zone_policy, max_step_degrees
        )
        if response_curve is not None:
            check_curve(response_curve)
        self._curve = response_curve
        self._center: Tuple[float, float] = (0.0, 0.0)
        self._gesture: Optional[GestureState] = None
        self._listener = listener

        self._scale = 0.0
        self._offset = 0.0
        self._rotation = self._model.to_rotation(0.0)
        self._value = self.to_value(0.0)
        if value is not None:
            self._apply_scale(self.to_scale(self._clamped_value(value)), notify=False)

    @classmethod
    def from_config(
        cls, cfg: KnobConfig, listener: Optional[KnobListener] = None
    ) -> "Knob":
        cfg.validate()
        return cls(
            minimum=cfg.minimum,
            maximum=cfg.maximum,
            topology=cfg.topology,
            range_degrees=cfg.range_degrees,
            start_angle=cfg.start_angle,
            response_curve=curve_from_dict(cfg.response_curve),
            dead_zone_policy=cfg.dead_zone_policy,
            max_step_degrees=cfg.max_step_degrees,
            value=cfg.value,
            listener=listener,
        )

    def to_config(self) -> KnobConfig:
        """Snapshot of the configuration and current value."""
        from ..models import KnobConfig

        return KnobConfig(
            minimum=self._minimum,
            maximum=self._maximum,
            topology=self._model.topology,
            range_degrees=self._model.range_degrees,
            start_angle=(
                self._model.start_angle if self._model.has_explicit_start else None
            ),
            dead_zone_policy=self._model.dead_zone_policy,
            max_step_degrees=self._model.max_step_degrees,
            response_curve=curve_to_dict(self._curve),
            value=self._value,
        )

    # ----------------------------- Properties ---------------------------------

    @property
    def value(self) -> float:
        return self._value

    @property
    def scale(self) -> float:
        """Position within the range of motion, in ``[0, 1]``."""
        return self._scale

    @property
    def rotation(self) -> float:
        """Indicator angle; exceeds one turn on continuous knobs."""
        return self._rotation

    @property
    def display_rotation(self) -> float:
        """Rotation folded into ``[0, 360)`` for rotating an image."""
        return normalize_angle(self._rotation)

    @property
    def sweep_angle(self) -> float:
        """Arc from :attr:`start_angle` covered by the current scale."""
        return self._model.sweep_angle(self._scale)

    @property
    def start_angle(self) -> float:
        return self._model.start_angle

    @property
    def sweep_range(self) -> float:
        return self._model.sweep_range

    @property
    def range_degrees(self) -> float:
        return self._model.range_degrees

    @property
    def topology(self) -> Topology:
        return self._model.topology

    @property
    def dead_zone_policy(self) -> DeadZonePolicy:
        return self._model.dead_zone_policy

    @property
    def max_step_degrees(self) -> Optional[float]:
        return self._model.max_step_degrees

    @property
    def response_curve(self) -> Optional[ResponseCurve]:
        return self._curve

    @property
    def minimum(self) -> float:
        return self._minimum

    @property
    def maximum(self) -> float:
        return self._maximum

    @property
    def center(self) -> Tuple[float, float]:
        return self._center

    @property
    def is_tracking(self) -> bool:
        return self._gesture is not None

    @property
    def listener(self) -> Optional[KnobListener]:
        return self._listener

    def set_listener(self, listener: Optional[KnobListener]) -> None:
        self._listener = listener

    # ----------------------------- Conversions --------------------------------

    def to_value(self, scale: float) -> float:
        """Value shown for ``scale`` under the response curve."""
        scale = clamp(scale, 0.0, 1.0)
        if self._curve is not None:
            scale = float(self._curve.to_curve(scale))
        value = scale * (self._maximum - self._minimum) + self._minimum
        return clamp(value, self._minimum, self._maximum)

    def to_scale(self, value: float) -> float:
        """Scale that produces ``value``; values outside the range are clamped."""
        fraction = (self._clamped_value(value) - self._minimum) / (
            self._maximum - self._minimum
        )
        if self._curve is not None:
            fraction = float(self._curve.to_scale(fraction))
        return clamp(fraction, 0.0, 1.0)

    def _clamped_value(self, value: float) -> float:
        value = require_finite("value", value)
        clamped = clamp(value, self._minimum, self._maximum)
        if clamped != value:
            logger.debug(
                "value %.6g clamped to [%g, %g]", value, self._minimum, self._maximum
            )
        return clamped

    # ----------------------------- Geometry -----------------------------------

    def on_size_changed(self, center_x: float, center_y: float) -> None:
        """Record the knob center after the host's layout changed."""
        self._center = (
            require_finite("center_x", center_x),
            require_finite("center_y", center_y),
        )

    def angle_at(self, x: float, y: float) -> float:
        """Clockwise angle of a pointer sample around the knob center."""
        return angle_of(x, y, self._center[0], self._center[1])

    # ----------------------------- Pointer events -----------------------------

    def pointer_down(self, x: float, y: float) -> None:
        angle = self.angle_at(x, y)
        restarted = self._gesture is not None
        self._gesture = GestureState(
            start_angle=angle,
            start_rotation=self._rotation,
            start_scale=self._scale,
            last_angle=angle,
        )
        logger.debug(
            "gesture %s at angle %.3f, rotation %.3f",
            "re-anchored" if restarted else "started",
            angle,
            self._rotation,
        )
        if not restarted and self._listener is not None:
            self._listener.on_tracking_started(self)
        self._track(angle)

    def pointer_move(self, x: float, y: float) -> None:
        if self._gesture is None:
            logger.debug("pointer move ignored while idle")
            return
        self._track(self.angle_at(x, y))

    def pointer_up(self, x: float, y: float) -> None:
        if self._gesture is None:
            logger.debug("pointer up ignored while idle")
            return
        self._track(self.angle_at(x, y))
        self._stop_tracking("finished")

    def pointer_cancel(self) -> None:
        if self._gesture is None:
            return
        self._stop_tracking("cancelled")

    def _stop_tracking(self, how: str) -> None:
        self._gesture = None
        logger.debug("gesture %s at scale %.4f", how, self._scale)
        if self._listener is not None:
            self._listener.on_tracking_stopped(self)

    def _track(self, angle: float) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        if self._model.is_bounded:
            scale = self._track_bounded(gesture, angle)
        else:
            scale = self._track_continuous(gesture, angle)
        gesture.last_angle = angle
        self._apply_scale(scale, from_user=True)

    def _track_bounded(self, gesture: GestureState, angle: float) -> float:
        if angle == gesture.start_angle:
            return gesture.start_scale
        model = self._model
        candidate = gesture.start_rotation + (angle - gesture.start_angle)
        sweep = model.sweep_of(candidate)
        if model.in_dead_zone(candidate):
            if gesture.blocked_edge is None:
                gesture.blocked_edge = model.entry_edge(sweep, self._scale)
            scale = model.reject(self._scale)
            logger.debug("angle %.3f in dead zone, scale kept at %.4f", angle, scale)
            return scale
        stop = model.seam_stop(self._scale, sweep)
        if stop is not None:
            gesture.blocked_edge = stop
            logger.debug("seam crossed at angle %.3f, pinned to %.0f", angle, stop)
            return stop
        scale = model.scale_at(sweep, self._scale)
        if gesture.blocked_edge is not None:
            if abs(scale - gesture.blocked_edge) > 0.5:
                # came back through the stop opposite the one it left by
                return self._scale
            gesture.blocked_edge = None
        if model.exceeds_step(self._scale, scale):
            logger.debug(
                "step to angle %.3f exceeds %.3f degrees, dropped",
                angle,
                model.max_step_degrees,
            )
            return self._scale
        return scale

    def _track_continuous(self, gesture: GestureState, angle: float) -> float:
        delta = shortest_delta(gesture.last_angle, angle)
        self._offset = self._model.accumulate(self._offset, delta)
        return self._model.scale_of_offset(self._offset)

    # ----------------------------- State updates ------------------------------

    def _apply_scale(
        self, scale: float, from_user: bool = False, notify: bool = True
    ) -> None:
        scale = clamp(scale, 0.0, 1.0)
        old_value = self._value
        self._scale = scale
        if self._model.is_bounded:
            self._offset = self._model.offset_of(scale)
        elif not from_user:
            self._offset = self._model.offset_of(scale)
        self._rotation = self._model.to_rotation(scale)
        self._value = self.to_value(scale)
        if notify and self._value != old_value and self._listener is not None:
            self._listener.on_value_changed(self, self._value, from_user)

    def _reanchor(self) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        gesture.start_angle = gesture.last_angle
        gesture.start_rotation = self._rotation
        gesture.start_scale = self._scale
        gesture.blocked_edge = None

    def _refresh(self, scale: float) -> None:
        self._apply_scale(scale)
        self._reanchor()

    def set_value(self, value: float) -> None:
        """Move the knob to ``value`` (clamped to the range) programmatically.

        Allowed mid-gesture: the gesture continues from the new position on
        its next sample.
        """
        self._refresh(self.to_scale(value))

    def reset(self) -> None:
        """Return the knob to the start of its range."""
        self._refresh(0.0)

    # ----------------------------- Configuration ------------------------------

    def _require_idle(self, what: str) -> None:
        if self._gesture is not None:
            raise RuntimeError(f"cannot change {what} while a gesture is tracking")

    @staticmethod
    def _checked_bounds(minimum: float, maximum: float) -> Tuple[float, float]:
        minimum = require_finite("minimum", minimum)
        maximum = require_finite("maximum", maximum)
        if maximum <= minimum:
            raise ValueError(
                f"maximum ({maximum}) must be greater than minimum ({minimum})"
            )
        return minimum, maximum

    def set_range(self, minimum: float, maximum: float) -> None:
        """Change the value bounds, keeping the value where it still fits."""
        self._require_idle("the value range")
        value = self._value
        self._minimum, self._maximum = self._checked_bounds(minimum, maximum)
        logger.debug("value range set to [%g, %g]", self._minimum, self._maximum)
        self._apply_scale(self.to_scale(value))

    def set_range_degrees(self, degrees: float) -> None:
        """Set the sweep range (bounded) or rotation range (continuous)."""
        self._require_idle("the range of motion")
        self._model.set_range_degrees(degrees)
        logger.debug("range of motion set to %.3f", self._model.range_degrees)
        self._apply_scale(self._scale)

    set_rotation_range = set_range_degrees
    set_sweep_range = set_range_degrees

    def set_start_angle(self, angle: Optional[float]) -> None:
        """Set where scale 0 sits; ``None`` re-centers the arc on 12 o'clock."""
        self._require_idle("the start angle")
        self._model.set_start_angle(angle)
        self._apply_scale(self._scale)

    def set_topology(self, topology: Topology) -> None:
        self._require_idle("the topology")
        self._model.set_topology(topology)
        self._apply_scale(self._scale)

    def set_dead_zone_policy(self, policy: DeadZonePolicy) -> None:
        self._require_idle("the dead zone policy")
        self._model.set_dead_zone_policy(policy)

    def set_max_step_degrees(self, degrees: Optional[float]) -> None:
        """Cap how far one sample may move a bounded knob; ``None`` lifts it."""
        self._require_idle("the step limit")
        self._model.set_max_step_degrees(degrees)

    def set_response_curve(self, curve: Optional[ResponseCurve]) -> None:
        """Install a response curve (``None`` for linear); the scale is kept."""
        self._require_idle("the response curve")
        if curve is not None:
            check_curve(curve)
        self._curve = curve
        logger.debug("response curve set to %r", curve)
        self._apply_scale(self._scale)

    def __repr__(self) -> str:
        return (
            f"Knob(value={self._value:.6g}, scale={self._scale:.4f}, "
            f"rotation={self._rotation:.3f}, topology={self._model.topology.value})"
        )


__all__ = ["Knob", "KnobListener", "GestureState"]
