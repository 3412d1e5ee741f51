from __future__ import annotations

import pytest

from skiing_game.config import SkierConfig
from skiing_game.skier import Pose, Skier, SkierAnimation


@pytest.fixture
def skier() -> Skier:
    return Skier(SkierConfig())


def test_jump_arc_returns_to_ground(skier):
    assert skier.jump()
    assert skier.pose is Pose.JUMPING
    peak = skier.y
    frames = 0
    while skier.jumping:
        skier.update()
        peak = min(peak, skier.y)
        frames += 1
        assert frames < 200
    assert skier.y == skier.cfg.ground_y
    assert skier.y_velocity == 0.0
    assert peak < skier.cfg.ground_y - 100


def test_no_double_jump(skier):
    assert skier.jump()
    skier.update()
    velocity = skier.y_velocity
    assert not skier.jump()
    assert skier.y_velocity == velocity


def test_duck_lasts_exactly_duck_frames(skier):
    assert skier.duck()
    assert skier.height == 25.0
    for _ in range(44):
        skier.update()
        assert skier.ducking
        assert skier.height == 25.0
    skier.update()
    assert not skier.ducking
    assert skier.height == 60.0
    assert skier.pose is Pose.NORMAL


def test_duck_and_jump_are_exclusive(skier):
    assert skier.jump()
    assert not skier.duck()
    assert not skier.ducking

    skier.reset()
    assert skier.duck()
    assert not skier.jump()
    assert not skier.jumping


def test_duck_not_retriggered_while_ducking(skier):
    skier.duck()
    for _ in range(10):
        skier.update()
    assert not skier.duck()
    assert skier.duck_timer == 35


def test_standing_skier_stays_on_ground(skier):
    for _ in range(5):
        skier.update()
    assert skier.y == skier.cfg.ground_y
    assert skier.head_y == skier.cfg.ground_y + 12


def test_animation_is_cosmetic_and_bounded():
    anim = SkierAnimation()
    anim.stride()
    assert anim.frame == 1
    for _ in range(100):
        anim.update(5.0)
    assert anim.progress == 1.0
    assert anim.pole_angle == pytest.approx(-30.0, abs=0.1)
    assert anim.body_lean == pytest.approx(10.0, abs=0.1)
