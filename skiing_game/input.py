"""Input abstractions for the skiing game."""

from __future__ import annotations

import json
import logging
import socketserver
import threading
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Protocol

import pygame

from .config import SocketInputConfig
from .engine import GameState
from .rhythm import Side

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """Abstract player command, independent of the device it came from."""

    kind: str  # start, dismiss, direction, jump, duck, leaderboard, quit
    side: Optional[Side] = None


class InputProvider(Protocol):
    """Interface for supplying player commands to the game loop."""

    def poll(self, events: list[pygame.event.Event], state: GameState) -> list[Command]:
        """Return the commands produced since the previous frame."""


class KeyboardInput(InputProvider):
    """Arrows to ski, Space to jump or start, Down to duck, L for scores.

    A mouse click also starts a run and leaves the game-over screen.
    """

    def translate(self, event: pygame.event.Event, state: GameState) -> Optional[Command]:
        if event.type == pygame.QUIT:
            return Command("quit")
        if event.type == pygame.MOUSEBUTTONDOWN:
            if state is GameState.NOT_STARTED:
                return Command("start")
            if state is GameState.ENDED:
                return Command("dismiss")
            return None
        if event.type != pygame.KEYDOWN:
            return None
        key = event.key
        if key == pygame.K_ESCAPE:
            return Command("quit")

        if state is not GameState.RUNNING:
            if key == pygame.K_SPACE:
                return Command("start" if state is GameState.NOT_STARTED else "dismiss")
            if key == pygame.K_l:
                return Command("leaderboard")
            return None

        if key == pygame.K_LEFT:
            return Command("direction", Side.LEFT)
        if key == pygame.K_RIGHT:
            return Command("direction", Side.RIGHT)
        if key == pygame.K_SPACE:
            return Command("jump")
        if key == pygame.K_DOWN:
            return Command("duck")
        return None

    def poll(self, events: list[pygame.event.Event], state: GameState) -> list[Command]:
        commands = []
        for event in events:
            command = self.translate(event, state)
            if command is not None:
                commands.append(command)
        return commands


def parse_command(payload: object) -> list[Command]:
    """Turn one decoded JSON message into commands; unknown fields are ignored."""
    if not isinstance(payload, dict):
        return []
    commands: list[Command] = []
    if payload.get("start"):
        commands.append(Command("start"))
    if payload.get("dismiss"):
        commands.append(Command("dismiss"))
    if "side" in payload:
        try:
            commands.append(Command("direction", Side.parse(payload["side"])))
        except ValueError:
            pass
    if payload.get("jump"):
        commands.append(Command("jump"))
    if payload.get("duck"):
        commands.append(Command("duck"))
    return commands


class _CommandHandler(socketserver.StreamRequestHandler):
    """Reads newline-delimited JSON commands from one client."""

    server: "_CommandServer"

    def handle(self) -> None:
        provider = self.server.provider
        self.connection.settimeout(provider.cfg.read_timeout)
        try:
            for line in self.rfile:
                provider.feed_line(line.strip())
        except OSError as exc:
            logger.debug("command client %s dropped: %s", self.client_address, exc)


class _CommandServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, provider: "SocketInput") -> None:
        self.provider = provider
        self.request_queue_size = provider.cfg.backlog
        super().__init__((provider.cfg.host, provider.cfg.port), _CommandHandler)


class SocketInput(InputProvider):
    """Listens for JSON control messages over TCP alongside a base provider.

    Commands received between frames are queued in arrival order and handed
    out after the base provider's commands on the next :meth:`poll`.
    """

    def __init__(
        self,
        base: Optional[InputProvider] = None,
        config: Optional[SocketInputConfig] = None,
    ) -> None:
        self.base = base or KeyboardInput()
        self.cfg = config or SocketInputConfig()
        self._lock = threading.Lock()
        self._pending: Deque[Command] = deque()
        self._server: Optional[_CommandServer] = None
        self._thread: Optional[threading.Thread] = None
        try:
            self._server = _CommandServer(self)
        except OSError as exc:
            logger.warning("socket input disabled, cannot bind %s:%s: %s", self.cfg.host, self.cfg.port, exc)
            return
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": 0.5},
            name="SocketInput",
            daemon=True,
        )
        self._thread.start()
        logger.info("listening for commands on %s:%s", *self._server.server_address[:2])

    @property
    def listening(self) -> bool:
        return self._server is not None

    def poll(self, events: list[pygame.event.Event], state: GameState) -> list[Command]:
        commands = self.base.poll(events, state)
        with self._lock:
            commands.extend(self._pending)
            self._pending.clear()
        return commands

    def shutdown(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=1.5)
        if hasattr(self.base, "shutdown"):
            self.base.shutdown()  # type: ignore[attr-defined]

    def feed_line(self, raw: bytes) -> None:
        if not raw:
            return
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.debug("dropping malformed line %r", raw[:80])
            return
        commands = parse_command(payload)
        if commands:
            with self._lock:
                self._pending.extend(commands)
