"""Pygame front end: event loop, screens and a simple shape renderer."""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

import pygame

from .config import GameConfig, RenderingConfig
from .engine import EngineSnapshot, GameState, SkiingEngine
from .input import Command, InputProvider, KeyboardInput
from .leaderboard import Leaderboard, NameVerdict, ProfanityFilter, validate_name
from .rhythm import Beat
from .skier import Pose
from .world import Bridge, FallenSkier, SpectatorGroup

logger = logging.getLogger(__name__)


class NameEntry:
    """Collects a leaderboard name from key presses after a good run."""

    def __init__(self, score: int, max_length: int, max_attempts: int) -> None:
        self.score = score
        self.max_length = max_length
        self.attempts_left = max_attempts
        self.text = ""
        self.message = f"You scored {score}! Enter your name (max {max_length} chars):"

    def handle_key(self, event: pygame.event.Event) -> Optional[str]:
        """Return "submit" on Enter, "cancel" on Escape, None otherwise."""
        if event.key == pygame.K_RETURN:
            return "submit"
        if event.key == pygame.K_ESCAPE:
            return "cancel"
        if event.key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
        elif event.unicode and event.unicode.isprintable() and len(self.text) <= self.max_length:
            self.text += event.unicode
        return None


class Renderer:
    """Draws an engine snapshot with plain pygame shapes."""

    def __init__(self, surface: pygame.Surface, config: GameConfig) -> None:
        self.surface = surface
        self.cfg: RenderingConfig = config.render
        self.surface_y = config.spawn.surface_y
        self.font = pygame.font.SysFont("arial", 18)
        self.large_font = pygame.font.SysFont("arial", 40, bold=True)

    def draw(self, snapshot: EngineSnapshot, frame: int, high_score: int = 0) -> None:
        width, height = self.surface.get_size()
        self.surface.fill(self.cfg.sky_color)
        pygame.draw.rect(
            self.surface,
            self.cfg.snow_color,
            pygame.Rect(0, int(self.surface_y - 60), width, height),
        )
        for group in snapshot.spectator_groups:
            self._draw_group(group, snapshot.cursor, frame)
        for obstacle in snapshot.obstacles:
            screen_x = obstacle.world_x - snapshot.cursor
            if isinstance(obstacle, Bridge):
                self._draw_bridge(obstacle, screen_x, frame)
            else:
                self._draw_fallen(obstacle, screen_x)
        self._draw_skier(snapshot)
        self._draw_hud(snapshot, high_score)

    def _draw_group(self, group: SpectatorGroup, cursor: float, frame: int) -> None:
        base_x = group.world_x - cursor
        if group.has_campfire:
            flicker = 4 + 2 * math.sin((frame + group.campfire_offset) * 0.3)
            pygame.draw.circle(self.surface, self.cfg.campfire_color, (int(base_x), int(group.y)), int(flicker))
        if group.has_tent:
            tent_x = base_x + (30 if group.side == "left" else -30)
            points = [(tent_x - 15, group.y + 5), (tent_x + 15, group.y + 5), (tent_x, group.y - 20)]
            pygame.draw.polygon(self.surface, self.cfg.tent_color, points)
        for member in group.members:
            bounce = 0.0
            if member.jumping:
                bounce = abs(math.sin((frame + member.animation_offset) * 0.1 * member.animation_speed)) * 5
            x = int(base_x + member.offset_x)
            y = int(group.y + member.offset_y - bounce)
            self._draw_figure(x, y, member.color, member.waving, frame + member.animation_offset)

    def _draw_figure(self, x: int, y: int, color: int, waving: bool, phase: float) -> None:
        colour = self.cfg.spectator_colors[color % len(self.cfg.spectator_colors)]
        pygame.draw.rect(self.surface, colour, pygame.Rect(x - 4, y - 16, 8, 16))
        pygame.draw.circle(self.surface, (240, 200, 170), (x, y - 20), 4)
        if waving:
            lift = int(6 * math.sin(phase * 0.2))
            pygame.draw.line(self.surface, colour, (x + 4, y - 14), (x + 9, y - 22 - lift), 2)

    def _draw_bridge(self, bridge: Bridge, screen_x: float, frame: int) -> None:
        rect = pygame.Rect(int(screen_x), int(bridge.y), int(bridge.width), int(bridge.height))
        pygame.draw.rect(self.surface, self.cfg.bridge_color, rect)
        pygame.draw.line(self.surface, self.cfg.bridge_color, rect.bottomleft, (rect.left, int(self.surface_y)), 4)
        pygame.draw.line(self.surface, self.cfg.bridge_color, rect.bottomright, (rect.right, int(self.surface_y)), 4)
        for spectator in bridge.spectators:
            x = int(screen_x + 10 + spectator.position * (bridge.width - 20))
            self._draw_figure(x, rect.top, spectator.color, spectator.waving, frame + spectator.animation_offset)

    def _draw_fallen(self, obstacle: FallenSkier, screen_x: float) -> None:
        rect = pygame.Rect(int(screen_x), int(obstacle.y), int(obstacle.width), int(obstacle.height))
        pygame.draw.ellipse(self.surface, self.cfg.fallen_color, rect.inflate(0, -20).move(0, 10))
        ski_dx = math.cos(math.radians(obstacle.skis_angle)) * obstacle.width * 0.5
        ski_dy = math.sin(math.radians(obstacle.skis_angle)) * 8
        centre = rect.center
        pygame.draw.line(
            self.surface,
            (30, 30, 30),
            (centre[0] - ski_dx, centre[1] + 12 - ski_dy),
            (centre[0] + ski_dx, centre[1] + 12 + ski_dy),
            3,
        )

    def _draw_skier(self, snapshot: EngineSnapshot) -> None:
        anim = snapshot.animation
        rect = pygame.Rect(int(snapshot.skier_x), int(snapshot.skier_y), 20, int(snapshot.skier_height))
        pygame.draw.rect(self.surface, self.cfg.skier_color, rect)
        pygame.draw.circle(self.surface, (240, 200, 170), (rect.centerx, rect.top - 6), 7)
        pole_rad = math.radians(anim.pole_angle - anim.body_lean)
        hand = (rect.centerx, rect.top + rect.height // 3)
        tip = (hand[0] - int(math.sin(pole_rad) * 30), hand[1] + int(math.cos(pole_rad) * 30))
        pygame.draw.line(self.surface, (60, 60, 60), hand, tip, 2)
        ski_y = rect.bottom + 2
        pygame.draw.line(self.surface, (30, 30, 30), (rect.left - 15, ski_y), (rect.right + 15, ski_y), 3)
        if snapshot.pose is Pose.DUCKING:
            pygame.draw.line(self.surface, self.cfg.ui_color, (rect.left, rect.top), (rect.right + 8, rect.top), 2)

    def _draw_hud(self, snapshot: EngineSnapshot, high_score: int) -> None:
        lines = [
            f"Score: {snapshot.score}",
            f"High score: {max(high_score, snapshot.score)}",
            f"Speed: {snapshot.skier_speed:.1f}",
            f"Tolerance: {snapshot.rhythm_tolerance:.0f} ms",
        ]
        for row, text in enumerate(lines):
            self.surface.blit(self.font.render(text, True, self.cfg.ui_color), (10, 10 + row * 22))
        bar = pygame.Rect(10, 10 + len(lines) * 22 + 4, 150, 12)
        pygame.draw.rect(self.surface, self.cfg.ui_color, bar, 1)
        fill = bar.inflate(-2, -2)
        fill.width = int(fill.width * snapshot.rhythm_quality)
        colour = self.cfg.ui_color
        if snapshot.beat is Beat.GOOD:
            colour = self.cfg.good_beat_color
        elif snapshot.beat is Beat.BAD:
            colour = self.cfg.bad_beat_color
        pygame.draw.rect(self.surface, colour, fill)
        if snapshot.pose is not Pose.NORMAL:
            label = self.font.render(snapshot.pose.name, True, self.cfg.ui_color)
            self.surface.blit(label, label.get_rect(topright=(self.surface.get_width() - 10, 10)))

    def draw_overlay(self, lines: list[str], title: Optional[str] = None) -> None:
        width, height = self.surface.get_size()
        shade = pygame.Surface((width, height), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 200))
        self.surface.blit(shade, (0, 0))
        y = height // 4
        if title:
            label = self.large_font.render(title, True, (220, 0, 0))
            self.surface.blit(label, label.get_rect(midtop=(width // 2, y)))
            y += 60
        for line in lines:
            label = self.font.render(line, True, (255, 255, 255))
            self.surface.blit(label, label.get_rect(midtop=(width // 2, y)))
            y += 28


class SkiingGame:
    """High-level game orchestration around a :class:`SkiingEngine`."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        engine: Optional[SkiingEngine] = None,
        leaderboard: Optional[Leaderboard] = None,
        input_provider: Optional[InputProvider] = None,
        profanity: Optional[ProfanityFilter] = None,
        name_rng: Optional[random.Random] = None,
    ) -> None:
        pygame.init()
        pygame.font.init()

        self.config = config or GameConfig()
        self.screen = pygame.display.set_mode(self.config.window_size)
        pygame.display.set_caption("Rhythm Skier")
        self.clock = pygame.time.Clock()

        self.engine = engine or SkiingEngine(self.config)
        self._chained_on_end = self.engine.on_end
        self.engine.on_end = self._on_run_ended
        self.leaderboard = leaderboard
        self.profanity = profanity or ProfanityFilter.default()
        self.input_provider = input_provider or KeyboardInput()
        self.renderer = Renderer(self.screen, self.config)

        self.running = True
        self.show_leaderboard = False
        self.name_entry: Optional[NameEntry] = None
        self.name_rng = name_rng or random.Random()

    def _on_run_ended(self, score: int) -> None:
        if self._chained_on_end is not None:
            self._chained_on_end(score)
        if self.leaderboard is not None and self.leaderboard.qualifies(score):
            logger.info("score %d qualifies for the leaderboard", score)
            lb = self.config.leaderboard
            self.name_entry = NameEntry(score, lb.max_name_length, lb.max_attempts)

    def apply(self, command: Command) -> None:
        engine = self.engine
        if command.kind == "quit":
            self.running = False
        elif command.kind == "leaderboard":
            self.show_leaderboard = not self.show_leaderboard
        elif command.kind == "start":
            self.show_leaderboard = False
            engine.start_session()
        elif command.kind == "dismiss":
            if self.show_leaderboard:
                self.show_leaderboard = False
            else:
                engine.dismiss_ended()
        elif command.kind == "direction" and command.side is not None:
            engine.on_directional_input(command.side)
        elif command.kind == "jump":
            engine.on_jump_input()
        elif command.kind == "duck":
            engine.on_duck_input()

    def handle_name_entry(self, events: list[pygame.event.Event]) -> list[pygame.event.Event]:
        entry = self.name_entry
        remaining = []
        for event in events:
            if entry is None or event.type != pygame.KEYDOWN:
                remaining.append(event)
                continue
            action = entry.handle_key(event)
            if action == "cancel":
                self.name_entry = entry = None
            elif action == "submit":
                verdict = validate_name(entry.text, self.profanity, entry.max_length)
                entry.attempts_left -= 1
                if verdict is NameVerdict.OK:
                    self.leaderboard.submit(entry.text, entry.score)
                    self.name_entry = entry = None
                elif entry.attempts_left <= 0:
                    fallback = f"Player{self.name_rng.randrange(1000)}"
                    self.leaderboard.submit(fallback, entry.score)
                    self.name_entry = entry = None
                else:
                    entry.message = verdict.value
                    entry.text = ""
        return remaining

    def run(self) -> None:
        while self.running:
            self.clock.tick(self.config.target_fps)
            events = pygame.event.get()
            if self.name_entry is not None:
                events = self.handle_name_entry(events)
            for command in self.input_provider.poll(events, self.engine.state):
                self.apply(command)

            self.engine.tick()
            self._draw()
            pygame.display.flip()

        if hasattr(self.input_provider, "shutdown"):
            self.input_provider.shutdown()  # type: ignore[attr-defined]

        pygame.quit()

    def _draw(self) -> None:
        snapshot = self.engine.snapshot()
        entries = self.leaderboard.entries() if self.leaderboard is not None else []
        self.renderer.draw(snapshot, self.engine.frame, entries[0].score if entries else 0)
        if self.show_leaderboard:
            self._draw_leaderboard()
        elif self.name_entry is not None:
            self.renderer.draw_overlay([self.name_entry.message, self.name_entry.text + "_"], "YOU DIED")
        elif snapshot.state is GameState.NOT_STARTED:
            lines = [
                "Alternate LEFT and RIGHT in rhythm to build speed",
                "SPACE to jump fallen skiers, DOWN to duck under bridges",
                "Press SPACE to start, L for the leaderboard",
            ]
            if entries:
                lines.append("Top scores:")
                lines.extend(f"{rank}. {entry.name}: {entry.score}" for rank, entry in enumerate(entries[:5], start=1))
            self.renderer.draw_overlay(lines, "RHYTHM SKIER")
        elif snapshot.state is GameState.ENDED:
            self.renderer.draw_overlay(
                [f"Score: {snapshot.score}", "Press SPACE to return to main menu", "Press L to view leaderboard"],
                "YOU DIED",
            )

    def _draw_leaderboard(self) -> None:
        entries = self.leaderboard.entries() if self.leaderboard is not None else []
        if not entries:
            lines = ["No scores yet. Be the first!"]
        else:
            lines = [f"{rank:>2}. {entry.name}: {entry.score}" for rank, entry in enumerate(entries[:10], start=1)]
        lines.append("Press SPACE to close")
        self.renderer.draw_overlay(lines, "LEADERBOARD")
