"""Skier physics: jumping, ducking and the pose-dependent hitbox."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .config import SkierConfig


class Pose(enum.Enum):
    NORMAL = "normal"
    JUMPING = "jumping"
    DUCKING = "ducking"


class Skier:
    """Gameplay state of the skier.

    The skier never moves along the scroll axis; ``x`` stays fixed and the
    world slides underneath. ``y`` is the top of the body in screen space,
    so jumping makes it smaller.
    """

    def __init__(self, config: SkierConfig) -> None:
        self.cfg = config
        self.reset()

    def reset(self) -> None:
        self.x = self.cfg.x
        self.y = self.cfg.ground_y
        self.y_velocity = 0.0
        self.speed = 0.0
        self.jumping = False
        self.ducking = False
        self.duck_timer = 0
        self.height = self.cfg.normal_height

    @property
    def pose(self) -> Pose:
        if self.jumping:
            return Pose.JUMPING
        if self.ducking:
            return Pose.DUCKING
        return Pose.NORMAL

    @property
    def head_y(self) -> float:
        """Head point used against bridges while ducked."""
        return self.y + self.cfg.duck_head_offset

    def jump(self) -> bool:
        if self.jumping or self.ducking:
            return False
        self.jumping = True
        self.y_velocity = self.cfg.jump_velocity
        return True

    def duck(self) -> bool:
        if self.ducking or self.jumping:
            return False
        self.ducking = True
        self.duck_timer = self.cfg.duck_frames
        self.height = self.cfg.duck_height
        return True

    def update(self) -> None:
        if self.jumping:
            self.y += self.y_velocity
            self.y_velocity += self.cfg.gravity
            if self.y >= self.cfg.ground_y:
                self.y = self.cfg.ground_y
                self.y_velocity = 0.0
                self.jumping = False
        else:
            self.y = self.cfg.ground_y

        if self.ducking:
            self.height = self.cfg.duck_height
            self.duck_timer -= 1
            if self.duck_timer <= 0:
                self.duck_timer = 0
                self.ducking = False
                self.height = self.cfg.normal_height
        else:
            self.height = self.cfg.normal_height


@dataclass
class SkierAnimation:
    """Render-only stride values. Nothing in the simulation reads these."""

    frame: int = 0  # alternating stride pose, 0 or 1
    progress: float = 0.0
    pole_angle: float = 0.0
    body_lean: float = 0.0

    def stride(self) -> None:
        self.frame = (self.frame + 1) % 2
        self.progress = 0.0

    def update(self, speed: float) -> None:
        self.progress = min(1.0, self.progress + 0.05 * speed)
        target_pole = 30.0 if self.frame == 0 else -30.0
        self.pole_angle = self.pole_angle * 0.9 + target_pole * 0.1
        target_lean = min(20.0, speed * 2.0)
        self.body_lean = self.body_lean * 0.95 + target_lean * 0.05
