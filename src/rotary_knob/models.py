"""Dataclasses describing persisted knob configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import logging
import math
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .engine.curves import curve_from_dict
from .engine.rotation import DeadZonePolicy, Topology, default_range

logger = logging.getLogger(__name__)

PathType = Union[str, PathLike]


@dataclass
class KnobConfig:
    """Configuration and initial value of one knob."""

    minimum: float = 0.0
    maximum: float = 100.0
    topology: Topology = Topology.BOUNDED
    range_degrees: Optional[float] = None  # None -> topology default
    start_angle: Optional[float] = None  # None -> centered on 12 o'clock
    dead_zone_policy: DeadZonePolicy = DeadZonePolicy.HOLD
    max_step_degrees: Optional[float] = None  # None -> unlimited
    response_curve: Optional[Dict[str, Any]] = None  # see curve_to_dict
    value: Optional[float] = None  # None -> minimum

    def effective_range(self) -> float:
        if self.range_degrees is None:
            return default_range(self.topology)
        return float(self.range_degrees)

    def validate(self) -> None:
        """Raise ``ValueError`` for configurations no knob can honour."""
        for name in ("minimum", "maximum"):
            if not math.isfinite(float(getattr(self, name))):
                raise ValueError(f"{name} must be finite")
        if self.maximum <= self.minimum:
            raise ValueError(
                f"maximum ({self.maximum}) must be greater than minimum ({self.minimum})"
            )
        rng = self.effective_range()
        if not math.isfinite(rng) or rng <= 0.0:
            raise ValueError(f"range_degrees must be positive, got {self.range_degrees}")
        if self.start_angle is not None and not math.isfinite(float(self.start_angle)):
            raise ValueError("start_angle must be finite")
        if self.value is not None and not math.isfinite(float(self.value)):
            raise ValueError("value must be finite")
        if self.max_step_degrees is not None:
            step = float(self.max_step_degrees)
            if not math.isfinite(step) or step <= 0.0:
                raise ValueError(
                    f"max_step_degrees must be positive, got {self.max_step_degrees}"
                )
        Topology(self.topology)
        DeadZonePolicy(self.dead_zone_policy)
        curve_from_dict(self.response_curve)

    def to_json(self) -> str:
        data = asdict(self)
        data["topology"] = Topology(self.topology).value
        data["dead_zone_policy"] = DeadZonePolicy(self.dead_zone_policy).value
        return json.dumps(data, indent=2)

    @staticmethod
    def from_json(text: str) -> "KnobConfig":
        data: Dict = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("knob configuration must be a JSON object")
        rng = data.get("range_degrees")
        start = data.get("start_angle")
        value = data.get("value")
        step = data.get("max_step_degrees")
        curve = data.get("response_curve")
        cfg = KnobConfig(
            minimum=float(data.get("minimum", 0.0)),
            maximum=float(data.get("maximum", 100.0)),
            topology=Topology(data.get("topology", Topology.BOUNDED.value)),
            range_degrees=None if rng is None else float(rng),
            start_angle=None if start is None else float(start),
            dead_zone_policy=DeadZonePolicy(
                data.get("dead_zone_policy", DeadZonePolicy.HOLD.value)
            ),
            max_step_degrees=None if step is None else float(step),
            response_curve=None if curve is None else dict(curve),
            value=None if value is None else float(value),
        )
        cfg.validate()
        return cfg


def load_config(path: PathType) -> KnobConfig:
    """Read a configuration file; a missing file yields the defaults."""
    p = Path(path)
    if not p.exists():
        logger.debug("no knob configuration at %s, using defaults", p)
        return KnobConfig()
    return KnobConfig.from_json(p.read_text(encoding="utf-8"))


def save_config(cfg: KnobConfig, path: PathType) -> None:
    cfg.validate()
    Path(path).write_text(cfg.to_json(), encoding="utf-8")


__all__ = ["KnobConfig", "load_config", "save_config"]
