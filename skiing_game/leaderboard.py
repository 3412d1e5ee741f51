"""Local high score table with player name checks."""

from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Sequence

from .config import LeaderboardConfig

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"</?[^>]+(>|$)")
_UNSAFE_RE = re.compile(r"[<>'\"&;]")

DEFAULT_BAD_WORDS = (
    "fuck", "shit", "ass", "bitch", "cunt", "dick", "cock", "pussy",
    "whore", "slut", "bastard", "damn", "hell", "piss", "crap", "fag",
    "nazi", "kill", "murder", "rape", "terrorist", "hitler", "penis",
)


class LeaderboardError(RuntimeError):
    """Raised when the score file exists but cannot be used."""


def sanitize_name(name: str, max_length: int = 20) -> str:
    cleaned = _UNSAFE_RE.sub("", _TAG_RE.sub("", name)).strip()
    return cleaned[:max_length]


class ProfanityFilter:
    """Case-insensitive substring match against a word list."""

    def __init__(self, words: Iterable[str]) -> None:
        self.words = tuple(word.strip().lower() for word in words if word.strip())

    @classmethod
    def default(cls) -> "ProfanityFilter":
        return cls(DEFAULT_BAD_WORDS)

    @classmethod
    def from_files(cls, paths: Sequence[Path]) -> "ProfanityFilter":
        words: list[str] = []
        try:
            for path in paths:
                words.extend(Path(path).read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("cannot load word lists (%s), using the built-in list", exc)
            return cls.default()
        return cls(words)

    def contains(self, name: str) -> bool:
        lowered = name.lower()
        return any(word in lowered for word in self.words)


class NameVerdict(enum.Enum):
    OK = "ok"
    EMPTY = "Please enter a name."
    TOO_LONG = "Name must be 20 characters or less."
    INAPPROPRIATE = "Please use appropriate language for your name."


def validate_name(raw: str, profanity: ProfanityFilter, max_length: int = 20) -> NameVerdict:
    if not raw.strip():
        return NameVerdict.EMPTY
    if len(raw) > max_length:
        return NameVerdict.TOO_LONG
    if profanity.contains(raw):
        return NameVerdict.INAPPROPRIATE
    return NameVerdict.OK


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int


class Leaderboard:
    """JSON file of the best scores, highest first."""

    def __init__(self, config: LeaderboardConfig) -> None:
        self.cfg = config
        self.path = Path(config.path)
        self._entries: list[ScoreEntry] = self._load()

    def _load(self) -> list[ScoreEntry]:
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            entries = [ScoreEntry(name=str(item["name"]), score=int(item["score"])) for item in payload]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise LeaderboardError(f"unreadable score file {self.path}: {exc}") from exc
        entries.sort(key=lambda entry: entry.score, reverse=True)
        logger.info("loaded %d scores from %s", len(entries), self.path)
        return entries[: self.cfg.capacity]

    def entries(self) -> list[ScoreEntry]:
        return list(self._entries)

    def qualifies(self, score: int) -> bool:
        if score <= self.cfg.min_score:
            return False
        if len(self._entries) < self.cfg.capacity:
            return True
        return score > self._entries[-1].score

    def submit(self, name: str, score: int) -> ScoreEntry:
        entry = ScoreEntry(name=sanitize_name(name, self.cfg.max_name_length), score=int(score))
        self._entries.append(entry)
        self._entries.sort(key=lambda item: item.score, reverse=True)
        del self._entries[self.cfg.capacity :]
        self._save()
        logger.info("recorded %s with %d", entry.name, entry.score)
        return entry

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [asdict(entry) for entry in self._entries]
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
