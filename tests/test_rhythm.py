from __future__ import annotations

import pytest

from skiing_game.config import RhythmConfig
from skiing_game.rhythm import Beat, RhythmEngine, Side


@pytest.fixture
def rhythm() -> RhythmEngine:
    return RhythmEngine(RhythmConfig(), start_time=0.0)


def test_tolerance_narrows_as_quality_rises(rhythm):
    rhythm.quality = 0.0
    assert rhythm.tolerance == pytest.approx(200.0)
    rhythm.quality = 1.0
    assert rhythm.tolerance == pytest.approx(80.0)
    rhythm.quality = 0.5
    assert rhythm.tolerance == pytest.approx(140.0)


def test_perfect_alternation_climbs_to_cap(rhythm):
    previous = rhythm.quality
    now = 0.0
    sides = [Side.LEFT, Side.RIGHT]
    for i in range(5):
        now += 400.0
        assert rhythm.on_directional_input(sides[i % 2], now) is Beat.GOOD
        assert rhythm.quality > previous
        previous = rhythm.quality
    for i in range(5, 10):
        now += 400.0
        rhythm.on_directional_input(sides[i % 2], now)
    assert rhythm.quality == pytest.approx(1.0)


def test_off_beat_alternation_costs_half_the_gain(rhythm):
    rhythm.on_directional_input(Side.LEFT, 400.0)
    quality = rhythm.quality
    assert rhythm.on_directional_input(Side.RIGHT, 400.0 + 1000.0) is Beat.BAD
    assert rhythm.quality == pytest.approx(quality - 0.075)


def test_quality_never_drops_below_floor(rhythm):
    now = 0.0
    for i in range(30):
        now += 5.0
        rhythm.on_directional_input(Side.LEFT if i % 2 else Side.RIGHT, now)
    assert rhythm.quality == pytest.approx(0.1)


def test_repeated_side_is_ignored_but_recorded(rhythm):
    rhythm.on_directional_input(Side.LEFT, 400.0)
    quality = rhythm.quality
    for t in (800.0, 1200.0, 1600.0):
        assert rhythm.on_directional_input(Side.LEFT, t) is None
        assert rhythm.quality == quality
    assert rhythm.last_input_time == 1600.0
    assert rhythm.last_side is Side.LEFT


def test_first_input_measures_from_reset_time():
    rhythm = RhythmEngine(RhythmConfig(), start_time=500.0)
    assert rhythm.on_directional_input(Side.RIGHT, 900.0) is Beat.GOOD


def test_tolerance_window_edges(rhythm):
    # quality 0.3 -> tolerance 164 ms
    assert rhythm.on_directional_input(Side.LEFT, 400.0 + 160.0) is Beat.GOOD
    rhythm.quality = 0.3
    start = rhythm.last_input_time
    assert rhythm.on_directional_input(Side.RIGHT, start + 400.0 - 170.0) is Beat.BAD


def test_decay_only_after_stall(rhythm):
    quality = rhythm.quality
    assert not rhythm.decay(400.0)
    assert rhythm.quality == quality
    assert rhythm.decay(600.0)
    assert rhythm.quality == pytest.approx(quality - 0.01)


def test_decay_is_floored(rhythm):
    for _ in range(200):
        rhythm.decay(10_000.0)
    assert rhythm.quality == pytest.approx(0.1)


def test_speed_is_floored():
    rhythm = RhythmEngine(RhythmConfig(), 0.0)
    rhythm.quality = 0.1
    assert rhythm.speed(5.0) == pytest.approx(1.0)
    rhythm.quality = 1.0
    assert rhythm.speed(5.0) == pytest.approx(5.0)


def test_feedback_expires(rhythm):
    rhythm.on_directional_input(Side.LEFT, 400.0)
    assert rhythm.feedback.active
    for _ in range(20):
        rhythm.tick_feedback()
    assert not rhythm.feedback.active
    assert rhythm.feedback.beat is None


def test_side_parse():
    assert Side.parse("Left") is Side.LEFT
    assert Side.parse(Side.RIGHT) is Side.RIGHT
    with pytest.raises(ValueError):
        Side.parse("up")
