"""Programmatic value control, configuration changes and invariants."""

from __future__ import annotations

from conftest import CENTER, RecordingListener, at
from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from rotary_knob import (
    DeadZonePolicy,
    FunctionCurve,
    Knob,
    LinearCurve,
    LogCurve,
    PowerCurve,
    Topology,
)


def test_set_value_moves_indicator(dial: Knob, recorder: RecordingListener) -> None:
    dial.set_value(25.0)

    assert dial.value == 25.0
    assert dial.scale == pytest.approx(0.25)
    assert dial.rotation == pytest.approx(202.5)
    assert recorder.events == [("value", 25.0, False)]


def test_set_value_is_idempotent(dial: Knob, recorder: RecordingListener) -> None:
    dial.set_value(25.0)
    dial.set_value(25.0)

    assert recorder.count("value") == 1
    assert recorder.count("started") == 0
    assert recorder.count("stopped") == 0


@pytest.mark.parametrize(
    "requested, expected, scale", [(150.0, 100.0, 1.0), (-5.0, 0.0, 0.0)]
)
def test_set_value_clamps_to_range(
    dial: Knob, requested: float, expected: float, scale: float
) -> None:
    dial.set_value(requested)

    assert dial.value == expected
    assert dial.scale == scale


def test_set_value_rejects_nan(dial: Knob) -> None:
    with pytest.raises(ValueError):
        dial.set_value(float("nan"))


@pytest.mark.parametrize(
    "curve, value, scale",
    [(PowerCurve(2.0), 25.0, 0.5), (PowerCurve(0.5), 50.0, 0.25)],
)
def test_response_curve_maps_value_to_scale(
    curve: PowerCurve, value: float, scale: float
) -> None:
    knob = Knob(response_curve=curve)
    knob.set_value(value)

    assert knob.scale == pytest.approx(scale)
    assert knob.value == pytest.approx(value)


def test_initial_value_is_applied_silently() -> None:
    recorder = RecordingListener()
    knob = Knob(minimum=-10.0, maximum=10.0, value=5.0, listener=recorder)

    assert knob.value == 5.0
    assert knob.scale == pytest.approx(0.75)
    assert recorder.events == []


def test_default_knob_is_centered_on_top() -> None:
    knob = Knob()

    assert knob.topology is Topology.BOUNDED
    assert knob.range_degrees == 270.0
    assert knob.start_angle == pytest.approx(225.0)
    assert knob.value == 0.0
    assert knob.rotation == pytest.approx(225.0)


def test_centered_arc_follows_sweep_range() -> None:
    knob = Knob()
    knob.set_sweep_range(180.0)
    assert knob.start_angle == pytest.approx(270.0)

    knob.set_sweep_range(360.0)
    assert knob.start_angle == pytest.approx(180.0)


def test_bounded_range_is_limited_to_one_turn() -> None:
    assert Knob(range_degrees=500.0).range_degrees == 360.0


def test_set_sweep_range_keeps_scale(dial: Knob) -> None:
    dial.set_value(50.0)
    dial.set_sweep_range(180.0)

    assert dial.scale == pytest.approx(0.5)
    assert dial.value == pytest.approx(50.0)
    assert dial.rotation == pytest.approx(225.0)
    assert dial.sweep_angle == pytest.approx(90.0)


def test_set_start_angle_moves_arc(dial: Knob) -> None:
    dial.set_value(50.0)
    dial.set_start_angle(0.0)

    assert dial.start_angle == 0.0
    assert dial.rotation == pytest.approx(135.0)

    dial.set_start_angle(None)
    assert dial.start_angle == pytest.approx(225.0)


def test_set_range_keeps_value_when_it_fits(
    dial: Knob, recorder: RecordingListener
) -> None:
    dial.set_value(40.0)
    dial.set_range(0.0, 200.0)

    assert dial.value == pytest.approx(40.0)
    assert dial.scale == pytest.approx(0.2)
    assert recorder.count("value") == 1


def test_set_range_clamps_value(dial: Knob, recorder: RecordingListener) -> None:
    dial.set_value(40.0)
    dial.set_range(50.0, 100.0)

    assert dial.value == 50.0
    assert dial.scale == 0.0
    assert recorder.changes[-1] == (50.0, False)


def test_set_topology_keeps_scale(dial: Knob) -> None:
    dial.set_value(50.0)
    dial.set_topology(Topology.CONTINUOUS)

    assert dial.topology is Topology.CONTINUOUS
    assert dial.scale == pytest.approx(0.5)
    assert dial.rotation == pytest.approx(270.0)


def test_set_response_curve_keeps_scale(dial: Knob) -> None:
    dial.set_value(50.0)
    dial.set_response_curve(PowerCurve(2.0))

    assert dial.scale == pytest.approx(0.5)
    assert dial.value == pytest.approx(25.0)

    dial.set_response_curve(None)
    assert dial.value == pytest.approx(50.0)


def test_reset_returns_to_minimum(dial: Knob, recorder: RecordingListener) -> None:
    dial.set_value(60.0)
    dial.reset()

    assert dial.value == 0.0
    assert dial.scale == 0.0
    assert dial.rotation == pytest.approx(135.0)
    assert recorder.changes[-1] == (0.0, False)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"minimum": 5.0, "maximum": 5.0},
        {"minimum": 10.0, "maximum": 1.0},
        {"minimum": float("nan")},
        {"range_degrees": 0.0},
        {"range_degrees": -90.0},
        {"range_degrees": float("inf")},
        {"topology": Topology.CONTINUOUS, "range_degrees": float("inf")},
        {"start_angle": float("nan")},
        {"value": float("inf")},
        {"max_step_degrees": 0.0},
        {"max_step_degrees": float("nan")},
    ],
)
def test_degenerate_configuration_is_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        Knob(**kwargs)


def test_invalid_response_curve_is_rejected(dial: Knob) -> None:
    broken = FunctionCurve(lambda s: s, lambda c: c**2)

    with pytest.raises(ValueError):
        Knob(response_curve=broken)
    with pytest.raises(ValueError):
        dial.set_response_curve(broken)
    assert dial.response_curve is None


def test_set_range_rejects_empty_range(dial: Knob) -> None:
    dial.set_value(30.0)
    with pytest.raises(ValueError):
        dial.set_range(10.0, 1.0)

    assert (dial.minimum, dial.maximum) == (0.0, 100.0)
    assert dial.value == 30.0


@pytest.mark.parametrize(
    "change",
    [
        lambda k: k.set_range(0.0, 10.0),
        lambda k: k.set_sweep_range(180.0),
        lambda k: k.set_rotation_range(180.0),
        lambda k: k.set_start_angle(0.0),
        lambda k: k.set_topology(Topology.CONTINUOUS),
        lambda k: k.set_dead_zone_policy(DeadZonePolicy.SNAP_NEAREST),
        lambda k: k.set_response_curve(PowerCurve(2.0)),
        lambda k: k.set_max_step_degrees(45.0),
    ],
)
def test_configuration_is_frozen_while_tracking(dial: Knob, change) -> None:
    dial.pointer_down(*at(200.0))

    with pytest.raises(RuntimeError):
        change(dial)
    assert dial.is_tracking

    dial.pointer_up(*at(200.0))
    change(dial)


@pytest.mark.parametrize(
    "curve", [None, LinearCurve(), PowerCurve(2.0), PowerCurve(0.5), LogCurve(10.0)]
)
@given(scale=st.floats(0.0, 1.0))
def test_value_scale_round_trip(curve, scale: float) -> None:
    knob = Knob(minimum=-20.0, maximum=60.0, response_curve=curve)

    value = knob.to_value(scale)
    assert -20.0 <= value <= 60.0
    assert knob.to_scale(value) == pytest.approx(scale, abs=1e-6)


operations = st.one_of(
    st.tuples(st.just("down"), st.floats(0.0, 360.0)),
    st.tuples(st.just("move"), st.floats(0.0, 360.0)),
    st.tuples(st.just("up"), st.floats(0.0, 360.0)),
    st.tuples(st.just("cancel"), st.just(0.0)),
    st.tuples(st.just("set"), st.floats(-50.0, 150.0)),
)


@settings(max_examples=200, deadline=None)
@given(
    topology=st.sampled_from(list(Topology)),
    policy=st.sampled_from(list(DeadZonePolicy)),
    max_step=st.sampled_from([None, 180.0]),
    ops=st.lists(operations, max_size=40),
)
def test_random_event_sequences_keep_invariants(
    topology, policy, max_step, ops
) -> None:
    recorder = RecordingListener()
    knob = Knob(
        minimum=0.0,
        maximum=100.0,
        topology=topology,
        dead_zone_policy=policy,
        max_step_degrees=max_step,
        listener=recorder,
    )
    knob.on_size_changed(*CENTER)

    for kind, arg in ops:
        before = knob.scale
        if kind == "down":
            knob.pointer_down(*at(arg))
        elif kind == "move":
            knob.pointer_move(*at(arg))
        elif kind == "up":
            knob.pointer_up(*at(arg))
        elif kind == "cancel":
            knob.pointer_cancel()
        else:
            knob.set_value(arg)

        assert 0.0 <= knob.scale <= 1.0
        assert 0.0 <= knob.value <= 100.0
        assert knob.value == pytest.approx(knob.to_value(knob.scale))
        if topology is Topology.BOUNDED:
            assert 0.0 <= knob.rotation < 360.0
        limited = topology is Topology.CONTINUOUS or (
            max_step is not None and policy is DeadZonePolicy.HOLD
        )
        if kind != "set" and limited:
            # a single sample never carries the indicator more than half a turn
            assert abs(knob.scale - before) * knob.range_degrees <= 180.0 + 1e-6

    assert recorder.count("started") - recorder.count("stopped") in (0, 1)
    assert recorder.count("started") - recorder.count("stopped") == int(
        knob.is_tracking
    )
