"""
Session -> Frame rendering.

A Frame is a flat list of positioned text runs tagged with a style role.
The curses side maps roles to colour pairs; nothing here draws.
"""

import curses
from dataclasses import dataclass
from typing import Optional

from session import Session, accuracy, wpm


@dataclass(frozen=True)
class RoleStyle:
    pair: int
    fg: int
    bold: bool = False


@dataclass(frozen=True)
class Theme:
    correct: RoleStyle = RoleStyle(1, curses.COLOR_GREEN)
    incorrect: RoleStyle = RoleStyle(2, curses.COLOR_RED)
    title: RoleStyle = RoleStyle(3, curses.COLOR_WHITE, bold=True)
    result: RoleStyle = RoleStyle(4, curses.COLOR_BLUE, bold=True)
    cursor: RoleStyle = RoleStyle(5, curses.COLOR_WHITE, bold=True)
    border: RoleStyle = RoleStyle(6, curses.COLOR_WHITE)
    footer: RoleStyle = RoleStyle(7, curses.COLOR_CYAN)
    cursor_on: str = "|"
    cursor_off: str = " "
    padding_x: int = 2
    padding_y: int = 1
    prompt: str = "Type the following:"
    input_label: str = "Your input: "
    success: str = "You typed correctly!"
    restart_hint: str = "Press 'r' to restart"
    footer_text: str = "ctrl+c quit"


DEFAULT_THEME = Theme()

STYLED_ROLES = ("correct", "incorrect", "title", "result", "cursor", "border", "footer")


@dataclass(frozen=True)
class Run:
    y: int
    x: int
    text: str
    role: str = "plain"


@dataclass(frozen=True)
class Frame:
    runs: tuple


def diff_segments(session: Session, theme: Theme) -> list[tuple[str, str]]:
    segments: list[tuple[str, str]] = []
    typed = session.typed
    for i, wanted in enumerate(session.target):
        if i == session.cursor_index:
            glyph = theme.cursor_on if session.blink else theme.cursor_off
            segments.append((glyph, "cursor"))
        if i < len(typed):
            role = "correct" if typed[i] == wanted else "incorrect"
            segments.append((typed[i], role))
        else:
            segments.append((wanted, "plain"))
    return segments


def results_lines(session: Session, theme: Theme, now: float) -> list[list[tuple[str, str]]]:
    return [
        [(theme.success, "result")],
        [(f"WPM: {wpm(session, now)}", "plain")],
        [(f"Accuracy: {accuracy(session):.2f}%", "plain")],
        [(theme.restart_hint, "plain")],
    ]


def typing_lines(session: Session, theme: Theme) -> list[list[tuple[str, str]]]:
    return [
        [(theme.prompt, "title")],
        [(session.target, "title")],
        [],
        [(theme.input_label, "plain")] + diff_segments(session, theme),
    ]


def _line_width(line: list[tuple[str, str]]) -> int:
    return sum(len(text) for text, _ in line)


def render(session: Session, theme: Theme = DEFAULT_THEME, now: Optional[float] = None) -> Frame:
    """Build the frame for a session.

    `now` only matters for the results panel; a complete session carries its
    finish time, so any value gives the same WPM there.
    """
    if session.is_complete:
        lines = results_lines(session, theme, now if now is not None else 0.0)
    else:
        lines = typing_lines(session, theme)

    content_width = max(_line_width(line) for line in lines)
    box_width = content_width + theme.padding_x * 2 + 2
    box_height = len(lines) + theme.padding_y * 2 + 2
    start_y = max(0, (session.height - box_height) // 2)
    start_x = max(0, (session.width - box_width) // 2)

    runs: list[Run] = []
    runs.append(Run(start_y, start_x, "┌" + "─" * (box_width - 2) + "┐", "border"))
    for y in range(start_y + 1, start_y + box_height - 1):
        runs.append(Run(y, start_x, "│", "border"))
        runs.append(Run(y, start_x + box_width - 1, "│", "border"))
    runs.append(Run(start_y + box_height - 1, start_x, "└" + "─" * (box_width - 2) + "┘", "border"))

    text_y = start_y + 1 + theme.padding_y
    for i, line in enumerate(lines):
        x = start_x + (box_width - _line_width(line)) // 2
        for text, role in line:
            if text:
                runs.append(Run(text_y + i, x, text, role))
            x += len(text)

    if session.height >= 2:
        footer_x = max(0, (session.width - len(theme.footer_text)) // 2)
        runs.append(Run(session.height - 2, footer_x, theme.footer_text, "footer"))

    return Frame(tuple(runs))
