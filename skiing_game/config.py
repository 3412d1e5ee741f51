"""Configuration data structures for the skiing game."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(ValueError):
    """Raised when a configuration value violates its contract."""


def _require_positive(owner: str, **values: float) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ConfigError(f"{owner}.{name} must be positive, got {value!r}")


def _require_range(owner: str, name: str, low: float, high: float) -> None:
    if low > high:
        raise ConfigError(f"{owner}.{name} range is inverted: {low!r} > {high!r}")


def _require_probability(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not 0.0 <= value <= 1.0:
            raise ConfigError(f"{owner}.{name} must be within [0, 1], got {value!r}")


@dataclass(frozen=True)
class RhythmConfig:
    """Timing rules that turn alternating taps into speed."""

    target_interval_ms: float = 400.0  # ideal gap between left/right taps
    base_tolerance_ms: float = 200.0  # window at zero rhythm
    min_tolerance_ms: float = 80.0  # window at full rhythm
    gain: float = 0.15
    decay: float = 0.01  # per tick when the player stalls
    initial_quality: float = 0.3
    quality_floor: float = 0.1
    speed_floor_ratio: float = 0.2
    feedback_frames: int = 20

    def __post_init__(self) -> None:
        _require_positive(
            "RhythmConfig",
            target_interval_ms=self.target_interval_ms,
            base_tolerance_ms=self.base_tolerance_ms,
            min_tolerance_ms=self.min_tolerance_ms,
            gain=self.gain,
            decay=self.decay,
            feedback_frames=self.feedback_frames,
        )
        _require_range("RhythmConfig", "tolerance", self.min_tolerance_ms, self.base_tolerance_ms)
        _require_probability(
            "RhythmConfig",
            quality_floor=self.quality_floor,
            speed_floor_ratio=self.speed_floor_ratio,
        )
        if not self.quality_floor <= self.initial_quality <= 1.0:
            raise ConfigError(
                f"RhythmConfig.initial_quality must be within [{self.quality_floor}, 1], "
                f"got {self.initial_quality!r}"
            )


@dataclass(frozen=True)
class SkierConfig:
    """Skier body and physics parameters, in screen pixels per frame."""

    x: float = 100.0  # fixed horizontal screen position
    ground_y: float = 335.0  # top of the standing skier on the snow
    max_speed: float = 5.0
    jump_velocity: float = -12.0
    gravity: float = 0.5
    normal_height: float = 60.0
    duck_height: float = 25.0
    duck_frames: int = 45
    footprint_width: float = 20.0
    duck_head_offset: float = 12.0  # head point below the top of the ducked pose

    def __post_init__(self) -> None:
        _require_positive(
            "SkierConfig",
            max_speed=self.max_speed,
            gravity=self.gravity,
            normal_height=self.normal_height,
            duck_height=self.duck_height,
            duck_frames=self.duck_frames,
            footprint_width=self.footprint_width,
        )
        if self.jump_velocity >= 0:
            raise ConfigError(f"SkierConfig.jump_velocity must be negative, got {self.jump_velocity!r}")
        if self.duck_height > self.normal_height:
            raise ConfigError("SkierConfig.duck_height must not exceed normal_height")


@dataclass(frozen=True)
class SpawnConfig:
    """Obstacle and spectator spawning, scrolling and culling."""

    viewport_width: float = 800.0
    surface_y: float = 400.0  # snow surface line
    min_forward: float = 0.5
    obstacle_interval: int = 120  # frames
    spectator_interval: int = 80  # frames
    bridge_probability: float = 0.7

    fallen_max_offset: float = 200.0
    fallen_width: float = 50.0
    fallen_height: float = 40.0
    fallen_poses: int = 3

    bridge_max_offset: float = 300.0
    bridge_width: float = 120.0
    bridge_deck: float = 50.0  # vertical thickness of the bridge span
    bridge_clearance_min: float = 55.0
    bridge_clearance_max: float = 62.0
    bridge_spectators_min: int = 2
    bridge_spectators_max: int = 4

    group_size_min: int = 3
    group_size_max: int = 5
    group_spread: float = 40.0
    group_lateral_offset: float = 150.0  # left groups sit at least this far behind
    group_lateral_jitter: float = 200.0
    group_y_offset: float = 90.0
    campfire_probability: float = 0.4
    tent_probability: float = 0.4
    outfit_colors: int = 6

    base_drift: float = 2.0
    drift_factor: float = 0.2
    obstacle_cull: float = 150.0
    spectator_cull: float = 600.0

    def __post_init__(self) -> None:
        _require_positive(
            "SpawnConfig",
            viewport_width=self.viewport_width,
            min_forward=self.min_forward,
            obstacle_interval=self.obstacle_interval,
            spectator_interval=self.spectator_interval,
            fallen_width=self.fallen_width,
            fallen_height=self.fallen_height,
            fallen_poses=self.fallen_poses,
            bridge_width=self.bridge_width,
            bridge_deck=self.bridge_deck,
            bridge_clearance_min=self.bridge_clearance_min,
            bridge_spectators_min=self.bridge_spectators_min,
            group_size_min=self.group_size_min,
            outfit_colors=self.outfit_colors,
            obstacle_cull=self.obstacle_cull,
            spectator_cull=self.spectator_cull,
            base_drift=self.base_drift,
            group_spread=self.group_spread,
            group_lateral_offset=self.group_lateral_offset,
        )
        if self.drift_factor < 0 or self.group_lateral_jitter < 0:
            raise ConfigError("SpawnConfig drift_factor and group_lateral_jitter must not be negative")
        _require_range("SpawnConfig", "bridge_clearance", self.bridge_clearance_min, self.bridge_clearance_max)
        _require_range("SpawnConfig", "bridge_spectators", self.bridge_spectators_min, self.bridge_spectators_max)
        _require_range("SpawnConfig", "group_size", self.group_size_min, self.group_size_max)
        _require_probability(
            "SpawnConfig",
            bridge_probability=self.bridge_probability,
            campfire_probability=self.campfire_probability,
            tent_probability=self.tent_probability,
        )
        if self.fallen_max_offset < 0 or self.bridge_max_offset < 0:
            raise ConfigError("SpawnConfig spawn offsets must not be negative")


@dataclass(frozen=True)
class LeaderboardConfig:
    """Local high score table."""

    path: Path = Path("highscores.json")
    capacity: int = 20
    min_score: int = 100
    max_name_length: int = 20
    max_attempts: int = 3

    def __post_init__(self) -> None:
        _require_positive(
            "LeaderboardConfig",
            capacity=self.capacity,
            max_name_length=self.max_name_length,
            max_attempts=self.max_attempts,
        )
        if self.min_score < 0:
            raise ConfigError("LeaderboardConfig.min_score must not be negative")


@dataclass(frozen=True)
class SocketInputConfig:
    """Settings for the JSON-over-TCP command interface."""

    host: str = "127.0.0.1"
    port: int = 5066
    backlog: int = 1
    read_timeout: float = 30.0  # idle clients are dropped after this many seconds

    def __post_init__(self) -> None:
        _require_positive("SocketInputConfig", backlog=self.backlog, read_timeout=self.read_timeout)
        if not 0 < self.port < 65536:
            raise ConfigError(f"SocketInputConfig.port out of range: {self.port!r}")


@dataclass(frozen=True)
class RenderingConfig:
    """Visual parameters for the 2D renderer."""

    sky_color: tuple[int, int, int] = (200, 225, 250)
    snow_color: tuple[int, int, int] = (245, 248, 255)
    skier_color: tuple[int, int, int] = (200, 40, 40)
    fallen_color: tuple[int, int, int] = (40, 70, 160)
    bridge_color: tuple[int, int, int] = (120, 80, 45)
    spectator_colors: tuple[tuple[int, int, int], ...] = (
        (220, 60, 60),
        (60, 120, 220),
        (60, 170, 90),
        (230, 180, 40),
        (150, 70, 190),
        (240, 130, 40),
    )
    campfire_color: tuple[int, int, int] = (250, 140, 30)
    tent_color: tuple[int, int, int] = (90, 140, 90)
    good_beat_color: tuple[int, int, int] = (40, 180, 60)
    bad_beat_color: tuple[int, int, int] = (210, 50, 50)
    ui_color: tuple[int, int, int] = (20, 30, 60)


@dataclass(frozen=True)
class GameConfig:
    """High-level configuration of the game."""

    window_size: tuple[int, int] = (800, 400)
    target_fps: int = 60
    rhythm: RhythmConfig = field(default_factory=RhythmConfig)
    skier: SkierConfig = field(default_factory=SkierConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)
    socket_input: SocketInputConfig = field(default_factory=SocketInputConfig)
    render: RenderingConfig = field(default_factory=RenderingConfig)

    def __post_init__(self) -> None:
        _require_positive("GameConfig", target_fps=self.target_fps)
