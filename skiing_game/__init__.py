"""Rhythm skier game package."""

from .config import ConfigError, GameConfig, LeaderboardConfig, SocketInputConfig
from .engine import EngineSnapshot, GameState, SkiingEngine
from .leaderboard import Leaderboard, LeaderboardError, ProfanityFilter
from .rhythm import Beat, Side

__all__ = [
    "SkiingEngine",
    "EngineSnapshot",
    "GameState",
    "GameConfig",
    "LeaderboardConfig",
    "SocketInputConfig",
    "ConfigError",
    "Leaderboard",
    "LeaderboardError",
    "ProfanityFilter",
    "Side",
    "Beat",
]
