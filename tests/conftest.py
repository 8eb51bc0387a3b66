"""Shared fixtures for the knob engine tests."""

from __future__ import annotations

from typing import List, Tuple

import pytest

from rotary_knob import Knob, KnobListener, Topology
from rotary_knob.utils import point_on_circle

CENTER = (100.0, 100.0)
RADIUS = 80.0


class RecordingListener(KnobListener):
    """Collects every notification in arrival order."""

    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def on_tracking_started(self, knob: Knob) -> None:
        self.events.append(("started",))

    def on_tracking_stopped(self, knob: Knob) -> None:
        self.events.append(("stopped",))

    def on_value_changed(self, knob: Knob, value: float, from_user: bool) -> None:
        self.events.append(("value", value, from_user))

    @property
    def changes(self) -> List[Tuple[float, bool]]:
        return [(e[1], e[2]) for e in self.events if e[0] == "value"]

    def count(self, kind: str) -> int:
        return sum(1 for e in self.events if e[0] == kind)


def at(angle_deg: float) -> Tuple[float, float]:
    """Pointer position on the knob rim at ``angle_deg`` clockwise from 12."""
    return point_on_circle(CENTER[0], CENTER[1], RADIUS, angle_deg)


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def dial(recorder: RecordingListener) -> Knob:
    """0..100 bounded knob, 270° sweep starting at 135°."""
    knob = Knob(
        minimum=0.0,
        maximum=100.0,
        topology=Topology.BOUNDED,
        range_degrees=270.0,
        start_angle=135.0,
        listener=recorder,
    )
    knob.on_size_changed(*CENTER)
    return knob


@pytest.fixture
def encoder(recorder: RecordingListener) -> Knob:
    """0..100 continuous knob with two full turns of travel."""
    knob = Knob(
        minimum=0.0,
        maximum=100.0,
        topology=Topology.CONTINUOUS,
        range_degrees=720.0,
        listener=recorder,
    )
    knob.on_size_changed(*CENTER)
    return knob
