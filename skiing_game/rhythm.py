"""Converts alternating left/right taps into a rhythm quality and skier speed."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .config import RhythmConfig

logger = logging.getLogger(__name__)


class Side(enum.Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: "Side | str") -> "Side":
        if isinstance(value, Side):
            return value
        return cls(str(value).strip().lower())


class Beat(enum.Enum):
    GOOD = "good"
    BAD = "bad"


@dataclass
class BeatFeedback:
    """Most recent beat judgement, kept visible for a few frames."""

    beat: Optional[Beat] = None
    frames_left: int = 0

    @property
    def active(self) -> bool:
        return self.beat is not None and self.frames_left > 0


class RhythmEngine:
    """Tracks how consistently the player alternates sides.

    Quality lives in ``[quality_floor, 1.0]``. An alternation landing inside
    ``target_interval_ms +/- tolerance`` raises it by ``gain``; any other
    alternation lowers it by half the gain. Same-side repeats only refresh
    the recorded side and timestamp.
    """

    def __init__(self, config: RhythmConfig, start_time: float = 0.0) -> None:
        self.cfg = config
        self.feedback = BeatFeedback()
        self.reset(start_time)

    def reset(self, start_time: float) -> None:
        self.quality = self.cfg.initial_quality
        self.last_input_time = float(start_time)
        self.last_side: Optional[Side] = None
        self.feedback = BeatFeedback()

    @property
    def tolerance(self) -> float:
        """Current timing window in milliseconds; narrows as quality rises."""
        span = self.cfg.base_tolerance_ms - self.cfg.min_tolerance_ms
        return self.cfg.base_tolerance_ms - span * self.quality

    def speed(self, max_speed: float) -> float:
        return max_speed * max(self.quality, self.cfg.speed_floor_ratio)

    def on_directional_input(self, side: Side, timestamp: float) -> Optional[Beat]:
        beat: Optional[Beat] = None
        if side is not self.last_side:
            delta = timestamp - self.last_input_time
            if abs(delta - self.cfg.target_interval_ms) <= self.tolerance:
                self.quality = min(self.quality + self.cfg.gain, 1.0)
                beat = Beat.GOOD
            else:
                self.quality = max(self.quality - self.cfg.gain * 0.5, self.cfg.quality_floor)
                beat = Beat.BAD
            self.feedback = BeatFeedback(beat=beat, frames_left=self.cfg.feedback_frames)
            logger.debug("%s beat after %.0f ms, quality %.2f", beat.value, delta, self.quality)

        self.last_side = side
        self.last_input_time = float(timestamp)
        return beat

    def decay(self, now: float) -> bool:
        """Bleed quality toward the floor when the player has stalled."""
        idle = now - self.last_input_time
        if idle <= self.cfg.target_interval_ms + self.tolerance:
            return False
        self.quality = max(self.quality - self.cfg.decay, self.cfg.quality_floor)
        return True

    def tick_feedback(self) -> None:
        if self.feedback.frames_left > 0:
            self.feedback.frames_left -= 1
            if self.feedback.frames_left == 0:
                self.feedback.beat = None
