"""Entry point for the rhythm skier game."""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import replace
from pathlib import Path

from skiing_game import GameConfig, Leaderboard, ProfanityFilter, SkiingEngine
from skiing_game.game import SkiingGame
from skiing_game.input import KeyboardInput, SocketInput


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ski downhill by tapping LEFT/RIGHT in rhythm.")
    parser.add_argument(
        "--seed",
        type=int,
        help="Optional random seed for a reproducible course.",
    )
    parser.add_argument(
        "--max-speed",
        type=float,
        help="Override the skier's top speed (default: config value).",
    )
    parser.add_argument(
        "--bridge-probability",
        type=float,
        help="Chance that a spawned obstacle is a bridge rather than a fallen skier.",
    )
    parser.add_argument(
        "--scores",
        type=Path,
        help="Path of the local high score file (default: config value).",
    )
    parser.add_argument(
        "--bad-words",
        type=Path,
        nargs="*",
        help="Word list files used to reject leaderboard names.",
    )
    parser.add_argument(
        "--socket-input",
        action="store_true",
        help="Enable JSON-over-TCP control interface for external pipelines.",
    )
    parser.add_argument(
        "--socket-port",
        type=int,
        help="Override socket input port (default: config value).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig()
    if args.max_speed is not None:
        config = replace(config, skier=replace(config.skier, max_speed=args.max_speed))
    if args.bridge_probability is not None:
        config = replace(config, spawn=replace(config.spawn, bridge_probability=args.bridge_probability))
    if args.scores is not None:
        config = replace(config, leaderboard=replace(config.leaderboard, path=args.scores))
    if args.socket_port is not None:
        config = replace(config, socket_input=replace(config.socket_input, port=args.socket_port))

    rng = random.Random(args.seed)
    engine = SkiingEngine(config, rng=rng)
    leaderboard = Leaderboard(config.leaderboard)
    profanity = ProfanityFilter.from_files(args.bad_words) if args.bad_words else ProfanityFilter.default()

    input_provider = KeyboardInput()
    if args.socket_input:
        input_provider = SocketInput(base=input_provider, config=config.socket_input)

    game = SkiingGame(
        config=config,
        engine=engine,
        leaderboard=leaderboard,
        input_provider=input_provider,
        profanity=profanity,
    )
    game.run()


if __name__ == "__main__":
    main()
