"""
Typing session state and transitions.

Transitions never mutate a Session, and nothing here touches the terminal.
"""

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


log = logging.getLogger(__name__)

CORPUS = (
    "hello world",
    "go is awesome",
    "bubbletea makes TUI easy",
    "practice makes perfect",
    "fast fingers win races",
)

CHARS_PER_WORD = 5


class Phase(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Session:
    target: str
    typed: str = ""
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    is_complete: bool = False
    blink: bool = False
    width: int = 0
    height: int = 0

    @property
    def cursor_index(self) -> int:
        return len(self.typed)

    @property
    def phase(self) -> Phase:
        if self.is_complete:
            return Phase.COMPLETE
        if self.started_at is None:
            return Phase.NOT_STARTED
        return Phase.IN_PROGRESS


# Events

@dataclass(frozen=True)
class TypeChar:
    char: str


@dataclass(frozen=True)
class DeleteChar:
    pass


@dataclass(frozen=True)
class DeleteWord:
    pass


@dataclass(frozen=True)
class Space:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class Quit:
    pass


def new_session(rng=random, width: int = 0, height: int = 0, blink: bool = False) -> Session:
    return Session(target=rng.choice(CORPUS), width=width, height=height, blink=blink)


def erase_word(typed: str) -> str:
    words = typed.split()
    if not words:
        return typed
    kept = " ".join(words[:-1])
    return kept + " " if kept else ""


def snap_to_word_end(typed: str, target: str) -> str:
    """Complete the current word with target's characters, through the next space.

    Left unchanged when target has no space at or after len(typed).
    """
    if not typed or typed.endswith(" "):
        return typed
    index = target.find(" ", len(typed))
    if index == -1:
        return typed
    return target[: index + 1]


def _check_complete(session: Session, now: float) -> Session:
    if session.typed != session.target:
        return session
    finished = replace(session, is_complete=True, finished_at=now)
    log.info(
        "session complete: wpm=%d accuracy=%.2f target=%r",
        wpm(finished, now),
        accuracy(finished),
        finished.target,
    )
    return finished


def update(session: Session, event, now: float, rng=random) -> Session:
    """Apply one event; unknown events leave the session untouched."""
    if isinstance(event, Tick):
        return replace(session, blink=not session.blink)
    if isinstance(event, Resize):
        return replace(session, width=event.width, height=event.height)
    if session.is_complete:
        if isinstance(event, Restart):
            fresh = new_session(rng, session.width, session.height, session.blink)
            log.info("restart: new target %r", fresh.target)
            return fresh
        return session

    if isinstance(event, TypeChar):
        started_at = session.started_at
        if started_at is None:
            started_at = now
            log.info("typing started on %r", session.target)
        typed = session.typed + event.char
        return _check_complete(replace(session, typed=typed, started_at=started_at), now)
    if isinstance(event, DeleteChar):
        return replace(session, typed=session.typed[:-1])
    if isinstance(event, DeleteWord):
        return replace(session, typed=erase_word(session.typed))
    if isinstance(event, Space):
        snapped = snap_to_word_end(session.typed, session.target)
        if snapped == session.typed:
            return session
        return _check_complete(replace(session, typed=snapped), now)
    return session


# Metrics

def elapsed_seconds(session: Session, now: float) -> float:
    if session.started_at is None:
        return 0.0
    end = session.finished_at if session.finished_at is not None else now
    return max(0.0, end - session.started_at)


def wpm(session: Session, now: float) -> int:
    minutes = elapsed_seconds(session, now) / 60.0
    if minutes == 0:
        return 0
    words = len(session.target) // CHARS_PER_WORD
    return int(words / minutes)


def accuracy(session: Session) -> float:
    if not session.target:
        return 100.0
    correct = sum(1 for typed, wanted in zip(session.typed, session.target) if typed == wanted)
    return correct / len(session.target) * 100.0
