"""Session lifecycle and the fixed per-frame update order."""

from __future__ import annotations

import copy
import enum
import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .collision import find_collision
from .config import GameConfig
from .rhythm import Beat, RhythmEngine, Side
from .skier import Pose, Skier, SkierAnimation
from .world import Obstacle, SpectatorGroup, World

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GameState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    ENDED = "ended"


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of one frame for renderers and persistence."""

    state: GameState
    score: int
    cursor: float
    skier_x: float
    skier_y: float
    skier_height: float
    skier_speed: float
    pose: Pose
    rhythm_quality: float
    rhythm_tolerance: float
    beat: Optional[Beat]
    obstacles: tuple[Obstacle, ...]
    spectator_groups: tuple[SpectatorGroup, ...]
    animation: SkierAnimation


class SkiingEngine:
    """Drives one skiing session.

    ``NOT_STARTED -> RUNNING`` on :meth:`start_session`, ``RUNNING -> ENDED``
    on the first collision, ``ENDED -> NOT_STARTED`` on :meth:`dismiss_ended`.
    Frames only advance while running. Directional input is judged the
    moment it arrives, not batched per frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
        on_end: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.clock = clock or monotonic_ms
        self.rng = rng or random.Random()
        self.on_end = on_end
        self.state = GameState.NOT_STARTED
        self.frame = 0

        self.skier = Skier(self.config.skier)
        self.animation = SkierAnimation()
        self.rhythm = RhythmEngine(self.config.rhythm, self.clock())
        self.world = World(self.config.spawn, self.rng)
        self.crashed_into: Optional[Obstacle] = None

    @property
    def running(self) -> bool:
        return self.state is GameState.RUNNING

    @property
    def score(self) -> int:
        return math.floor(self.world.cursor / 10)

    def start_session(self) -> bool:
        if self.state is GameState.RUNNING:
            return False
        self.skier.reset()
        self.animation = SkierAnimation()
        self.rhythm.reset(self.clock())
        self.skier.speed = self.config.skier.max_speed * self.config.rhythm.speed_floor_ratio
        self.world.reset()
        self.crashed_into = None
        self.frame = 0
        self.state = GameState.RUNNING
        logger.info("session started")
        return True

    def dismiss_ended(self) -> bool:
        if self.state is not GameState.ENDED:
            return False
        self.state = GameState.NOT_STARTED
        return True

    def on_directional_input(self, side: Side | str, timestamp: Optional[float] = None) -> Optional[Beat]:
        if not self.running:
            return None
        side = Side.parse(side)
        now = self.clock() if timestamp is None else timestamp
        beat = self.rhythm.on_directional_input(side, now)
        if beat is not None:
            self.animation.stride()
            self.skier.speed = self.rhythm.speed(self.config.skier.max_speed)
        return beat

    def on_jump_input(self) -> bool:
        if not self.running:
            return False
        return self.skier.jump()

    def on_duck_input(self) -> bool:
        if not self.running:
            return False
        return self.skier.duck()

    def tick(self) -> None:
        if not self.running:
            return
        self.frame += 1

        if self.rhythm.decay(self.clock()):
            self.skier.speed = self.rhythm.speed(self.config.skier.max_speed)
        self.rhythm.tick_feedback()

        self.skier.update()
        self.animation.update(self.skier.speed)

        self.world.advance(self.skier.speed)

        obstacle = find_collision(self.skier, self.world.obstacles, self.world.cursor)
        if obstacle is not None:
            self._end(obstacle)

    def _end(self, obstacle: Obstacle) -> None:
        self.state = GameState.ENDED
        self.crashed_into = obstacle
        score = self.score
        logger.info("run ended on %s after %d frames, score %d", obstacle.kind, self.frame, score)
        if self.on_end is not None:
            self.on_end(score)

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            state=self.state,
            score=self.score,
            cursor=self.world.cursor,
            skier_x=self.skier.x,
            skier_y=self.skier.y,
            skier_height=self.skier.height,
            skier_speed=self.skier.speed,
            pose=self.skier.pose,
            rhythm_quality=self.rhythm.quality,
            rhythm_tolerance=self.rhythm.tolerance,
            beat=self.rhythm.feedback.beat,
            obstacles=tuple(copy.deepcopy(self.world.obstacles)),
            spectator_groups=tuple(copy.deepcopy(self.world.spectator_groups)),
            animation=copy.copy(self.animation),
        )
