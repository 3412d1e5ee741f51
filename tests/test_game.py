from __future__ import annotations

import os
import random
import re

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from skiing_game.config import LeaderboardConfig
from skiing_game.engine import GameState, SkiingEngine
from skiing_game.game import NameEntry, SkiingGame
from skiing_game.input import Command
from skiing_game.leaderboard import Leaderboard
from skiing_game.rhythm import Side
from skiing_game.world import FallenSkier


def typed(char: str) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=0, unicode=char)


def pressed(key: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode="")


def type_name(game: SkiingGame, name: str) -> None:
    game.handle_name_entry([typed(char) for char in name] + [pressed(pygame.K_RETURN)])


def crash_with_score(game: SkiingGame, cursor: float = 2_000.0) -> None:
    engine = game.engine
    engine.start_session()
    engine.skier.reset()
    engine.world.cursor = cursor
    engine.world.add_obstacle(
        FallenSkier(world_x=engine.world.cursor + engine.skier.x, y=360.0, width=50.0, height=40.0)
    )
    engine.tick()
    assert engine.state is GameState.ENDED


@pytest.fixture
def ended_scores() -> list[int]:
    return []


@pytest.fixture
def game(config, clock, tmp_path, ended_scores):
    engine = SkiingEngine(config, clock=clock, rng=random.Random(1234), on_end=ended_scores.append)
    leaderboard = Leaderboard(LeaderboardConfig(path=tmp_path / "scores.json"))
    game = SkiingGame(config, engine=engine, leaderboard=leaderboard, name_rng=random.Random(7))
    yield game
    pygame.quit()


def test_name_entry_collects_text():
    entry = NameEntry(score=250, max_length=5, max_attempts=3)
    for char in "Anna":
        assert entry.handle_key(typed(char)) is None
    assert entry.text == "Anna"
    entry.handle_key(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_BACKSPACE, unicode="\b"))
    assert entry.text == "Ann"
    assert entry.handle_key(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_RETURN, unicode="\r")) == "submit"


def test_name_entry_cancel_and_limit():
    entry = NameEntry(score=250, max_length=2, max_attempts=1)
    for char in "abcd":
        entry.handle_key(typed(char))
    assert entry.text == "abc"
    assert entry.handle_key(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE, unicode="\x1b")) == "cancel"
    assert "250" in entry.message


def test_apply_routes_session_commands(game):
    game.apply(Command("leaderboard"))
    assert game.show_leaderboard
    game.apply(Command("start"))
    assert not game.show_leaderboard
    assert game.engine.state is GameState.RUNNING

    game.apply(Command("direction", Side.LEFT))
    assert game.engine.rhythm.last_side is Side.LEFT
    game.apply(Command("jump"))
    assert game.engine.skier.y_velocity < 0
    game.apply(Command("quit"))
    assert not game.running


def test_dismiss_closes_leaderboard_before_leaving_game_over(game):
    crash_with_score(game, cursor=0.0)
    game.apply(Command("leaderboard"))
    game.apply(Command("dismiss"))
    assert not game.show_leaderboard
    assert game.engine.state is GameState.ENDED
    game.apply(Command("dismiss"))
    assert game.engine.state is GameState.NOT_STARTED


def test_qualifying_run_opens_name_entry_and_keeps_caller_hook(game, ended_scores):
    crash_with_score(game)
    assert ended_scores == [game.engine.score]
    assert game.name_entry is not None
    assert game.name_entry.score == game.engine.score


def test_low_score_skips_name_entry(game, ended_scores):
    crash_with_score(game, cursor=0.0)
    assert ended_scores == [0]
    assert game.name_entry is None


def test_valid_name_is_recorded(game):
    crash_with_score(game)
    type_name(game, "Anna")
    assert game.name_entry is None
    assert [(e.name, e.score) for e in game.leaderboard.entries()] == [("Anna", game.engine.score)]


def test_inappropriate_name_asks_again(game):
    crash_with_score(game)
    type_name(game, "Hitler99")
    assert game.name_entry is not None
    assert game.name_entry.message == "Please use appropriate language for your name."
    assert game.name_entry.attempts_left == game.config.leaderboard.max_attempts - 1
    assert game.name_entry.text == ""
    assert game.leaderboard.entries() == []


def test_fallback_name_after_attempts_run_out(game):
    crash_with_score(game)
    engine_state = game.engine.rng.getstate()
    for _ in range(game.config.leaderboard.max_attempts):
        type_name(game, "damn")
    assert game.name_entry is None
    [entry] = game.leaderboard.entries()
    assert re.fullmatch(r"Player\d+", entry.name)
    assert entry.name == f"Player{random.Random(7).randrange(1000)}"
    assert game.engine.rng.getstate() == engine_state


def test_cancel_records_nothing(game):
    crash_with_score(game)
    game.handle_name_entry([typed("A"), pressed(pygame.K_ESCAPE)])
    assert game.name_entry is None
    assert game.leaderboard.entries() == []


def test_name_entry_passes_other_events_through(game):
    crash_with_score(game)
    click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(0, 0))
    assert game.handle_name_entry([click, typed("x")]) == [click]


def test_every_screen_draws(game):
    game.leaderboard.submit("Anna", 500)
    game._draw()
    game.apply(Command("start"))
    game.engine.on_duck_input()
    game.engine.tick()
    game._draw()
    crash_with_score(game)
    game._draw()
    game.name_entry = None
    game._draw()
    game.apply(Command("leaderboard"))
    game._draw()
