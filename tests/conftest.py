from __future__ import annotations

import random

import pytest

from skiing_game.config import GameConfig
from skiing_game.engine import SkiingEngine


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def engine(config: GameConfig, clock: FakeClock) -> SkiingEngine:
    return SkiingEngine(config, clock=clock, rng=random.Random(1234))
