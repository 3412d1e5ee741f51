"""Obstacle rules: which pose survives which obstacle."""

from __future__ import annotations

from typing import Iterable, Optional

from .skier import Skier
from .world import Bridge, FallenSkier, Obstacle


def _overlaps_horizontally(skier: Skier, screen_x: float, width: float) -> bool:
    return skier.x < screen_x + width and skier.x + skier.cfg.footprint_width > screen_x


def _overlaps_span(top: float, bottom: float, span_top: float, span_height: float) -> bool:
    return top < span_top + span_height and bottom > span_top


def hits_fallen_skier(skier: Skier, obstacle: FallenSkier, screen_x: float) -> bool:
    """Only a jump clears a fallen skier; ducking does not help."""
    if skier.jumping:
        return False
    if not _overlaps_horizontally(skier, screen_x, obstacle.width):
        return False
    return _overlaps_span(skier.y, skier.y + skier.height, obstacle.y, obstacle.height)


def hits_bridge(skier: Skier, obstacle: Bridge, screen_x: float) -> bool:
    """A ducked skier is tested by head point only; any other pose uses its full height."""
    if not _overlaps_horizontally(skier, screen_x, obstacle.width):
        return False
    if skier.ducking:
        head = skier.head_y
        return obstacle.y < head < obstacle.y + obstacle.height
    return _overlaps_span(skier.y, skier.y + skier.height, obstacle.y, obstacle.height)


def find_collision(skier: Skier, obstacles: Iterable[Obstacle], cursor: float) -> Optional[Obstacle]:
    """Return the first obstacle the skier runs into this frame, if any."""
    for obstacle in obstacles:
        screen_x = obstacle.world_x - cursor
        if isinstance(obstacle, FallenSkier):
            hit = hits_fallen_skier(skier, obstacle, screen_x)
        else:
            hit = hits_bridge(skier, obstacle, screen_x)
        if hit:
            return obstacle
    return None
