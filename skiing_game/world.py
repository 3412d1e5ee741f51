"""World scrolling plus spawning and culling of obstacles and spectators."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from .config import SpawnConfig

logger = logging.getLogger(__name__)


@dataclass
class FallenSkier:
    """A crashed skier lying on the course. Only a jump clears it."""

    world_x: float
    y: float
    width: float
    height: float
    pose_index: int = 0
    rotation: float = 0.0
    skis_angle: float = 0.0
    pole_angle: float = 0.0
    kind: Literal["fallen_skier"] = "fallen_skier"


@dataclass
class BridgeSpectator:
    position: float  # 0..1 along the bridge span
    animation_offset: float
    waving: bool
    color: int


@dataclass
class Bridge:
    """Low bridge over the course. ``y``/``height`` describe the solid span."""

    world_x: float
    y: float
    width: float
    height: float
    clearance: float
    spectators: list[BridgeSpectator] = field(default_factory=list)
    kind: Literal["bridge"] = "bridge"


Obstacle = Union[FallenSkier, Bridge]


@dataclass
class GroupMember:
    offset_x: float
    offset_y: float
    waving: bool
    jumping: bool
    animation_offset: float
    color: int
    animation_speed: float
    left_arm_raised: bool
    right_arm_raised: bool


@dataclass
class SpectatorGroup:
    """Decorative cluster of fans beside the course."""

    world_x: float
    y: float
    side: Literal["left", "right"]
    members: list[GroupMember] = field(default_factory=list)
    has_campfire: bool = False
    has_tent: bool = False
    campfire_offset: float = 0.0


class World:
    """Owns the world cursor and every entity on the course.

    ``cursor`` is the total distance travelled and only grows. Entities drift
    left at ``base_drift + speed * drift_factor`` per frame on top of the
    cursor, so the on-screen scroll rate is decoupled from the score metric.
    """

    def __init__(self, config: SpawnConfig, rng: Optional[random.Random] = None) -> None:
        self.cfg = config
        self.rng = rng or random.Random()
        self.cursor = 0.0
        self.obstacles: list[Obstacle] = []
        self.spectator_groups: list[SpectatorGroup] = []
        self.obstacle_timer = 0
        self.spectator_timer = 0

    def reset(self) -> None:
        self.cursor = 0.0
        self.obstacles.clear()
        self.spectator_groups.clear()
        self.obstacle_timer = 0
        self.spectator_timer = 0

    def screen_x(self, world_x: float) -> float:
        return world_x - self.cursor

    def advance(self, speed: float) -> None:
        self.cursor += max(speed, self.cfg.min_forward)

        self.obstacle_timer += 1
        if self.obstacle_timer >= self.cfg.obstacle_interval:
            self.obstacles.append(self.spawn_obstacle())
            self.obstacle_timer = 0

        self.spectator_timer += 1
        if self.spectator_timer >= self.cfg.spectator_interval:
            self.spectator_groups.append(self.spawn_spectator_group())
            self.spectator_timer = 0

        drift = self.cfg.base_drift + speed * self.cfg.drift_factor
        for obstacle in self.obstacles:
            obstacle.world_x -= drift
        for group in self.spectator_groups:
            group.world_x -= drift

        self.obstacles = [o for o in self.obstacles if o.world_x > self.cursor - self.cfg.obstacle_cull]
        self.spectator_groups = [
            g for g in self.spectator_groups if g.world_x > self.cursor - self.cfg.spectator_cull
        ]

    def add_obstacle(self, obstacle: Obstacle) -> None:
        self.obstacles.append(obstacle)

    def spawn_obstacle(self) -> Obstacle:
        if self.rng.random() < self.cfg.bridge_probability:
            obstacle: Obstacle = self._spawn_bridge()
        else:
            obstacle = self._spawn_fallen_skier()
        logger.debug("spawned %s at %.1f (cursor %.1f)", obstacle.kind, obstacle.world_x, self.cursor)
        return obstacle

    def _frontier(self, max_offset: float) -> float:
        return self.cursor + self.cfg.viewport_width + self.rng.random() * max_offset

    def _spawn_fallen_skier(self) -> FallenSkier:
        cfg = self.cfg
        rng = self.rng
        return FallenSkier(
            world_x=self._frontier(cfg.fallen_max_offset),
            y=cfg.surface_y - cfg.fallen_height,
            width=cfg.fallen_width,
            height=cfg.fallen_height,
            pose_index=rng.randrange(cfg.fallen_poses),
            rotation=rng.uniform(-0.25, 0.25),
            skis_angle=rng.uniform(-25.0, 25.0),
            pole_angle=rng.uniform(-20.0, 20.0),
        )

    def _spawn_bridge(self) -> Bridge:
        cfg = self.cfg
        rng = self.rng
        world_x = self._frontier(cfg.bridge_max_offset)
        clearance = rng.uniform(cfg.bridge_clearance_min, cfg.bridge_clearance_max)
        bottom = cfg.surface_y - clearance

        count = rng.randint(cfg.bridge_spectators_min, cfg.bridge_spectators_max)
        spectators = [
            BridgeSpectator(
                position=i / (count - 1) if count > 1 else 0.5,
                animation_offset=rng.random() * 100.0,
                waving=rng.random() > 0.3,
                color=rng.randrange(cfg.outfit_colors),
            )
            for i in range(count)
        ]
        return Bridge(
            world_x=world_x,
            y=bottom - cfg.bridge_deck,
            width=cfg.bridge_width,
            height=cfg.bridge_deck,
            clearance=clearance,
            spectators=spectators,
        )

    def spawn_spectator_group(self) -> SpectatorGroup:
        cfg = self.cfg
        rng = self.rng
        side: Literal["left", "right"] = "left" if rng.random() < 0.5 else "right"
        # Groups sit well off the skier's lane, behind it or past the viewport.
        if side == "left":
            offset = -cfg.group_lateral_offset - rng.random() * cfg.group_lateral_jitter
        else:
            offset = cfg.viewport_width + rng.random() * cfg.group_lateral_jitter

        has_campfire = rng.random() < cfg.campfire_probability
        has_tent = not has_campfire and rng.random() < cfg.tent_probability
        size = rng.randint(cfg.group_size_min, cfg.group_size_max)

        members = []
        for i in range(size):
            if has_campfire:
                angle = (i / (size - 1) if size > 1 else 0.5) * math.pi
                offset_x = math.cos(angle) * 20.0
                offset_y = math.sin(angle) * 10.0
                if side == "right":
                    offset_x = -offset_x
            else:
                offset_x = (rng.random() - 0.5) * cfg.group_spread
                offset_y = (rng.random() - 0.5) * 20.0
            members.append(
                GroupMember(
                    offset_x=offset_x,
                    offset_y=offset_y,
                    waving=rng.random() > 0.3,
                    jumping=rng.random() > 0.7,
                    animation_offset=rng.random() * 100.0,
                    color=rng.randrange(cfg.outfit_colors),
                    animation_speed=0.5 + rng.random(),
                    left_arm_raised=rng.random() > 0.5,
                    right_arm_raised=rng.random() > 0.5,
                )
            )

        return SpectatorGroup(
            world_x=self.cursor + offset,
            y=cfg.surface_y - cfg.group_y_offset,
            side=side,
            members=members,
            has_campfire=has_campfire,
            has_tent=has_tent,
            campfire_offset=rng.random() * 100.0,
        )
