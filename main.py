"""
Fullscreen typing-speed trainer for the terminal.

Usage: python main.py
"""

import curses
import logging
import random
import sys
import time
from pathlib import Path
from typing import Optional, Union

from session import (
    DeleteChar,
    DeleteWord,
    Quit,
    Resize,
    Restart,
    Session,
    Space,
    Tick,
    TypeChar,
    new_session,
    update,
)
from view import DEFAULT_THEME, STYLED_ROLES, Frame, Theme, render


log = logging.getLogger(__name__)

# Cursor blink period, also the longest the screen goes without a repaint.
BLINK_INTERVAL = 0.5
POLL_MS = 50

LOG_PATH = Path("typespeed.log")

CTRL_C = "\x03"
CTRL_H = "\x08"  # what most terminals send for ctrl+backspace
CTRL_W = "\x17"
DEL = "\x7f"


def setup_logging(path: Path = LOG_PATH) -> None:
    # curses owns the terminal, so everything goes to the file
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.FileHandler(path, encoding="utf-8")],
    )


def safe_addstr(stdscr: curses.window, y: int, x: int, s: str, attr: int = 0) -> None:
    try:
        stdscr.addstr(y, x, s, attr)
    except curses.error:
        pass


def init_colors(theme: Theme) -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()
    for role in STYLED_ROLES:
        style = getattr(theme, role)
        curses.init_pair(style.pair, style.fg, -1)


def role_attrs(theme: Theme, colors: bool = True) -> dict[str, int]:
    attrs = {"plain": 0}
    for role in STYLED_ROLES:
        style = getattr(theme, role)
        attr = curses.color_pair(style.pair) if colors else 0
        if style.bold:
            attr |= curses.A_BOLD
        attrs[role] = attr
    return attrs


def paint(stdscr: curses.window, frame: Frame, attrs: dict[str, int]) -> None:
    stdscr.erase()
    for run in frame.runs:
        safe_addstr(stdscr, run.y, run.x, run.text, attrs.get(run.role, 0))
    stdscr.refresh()


def classify_key(key: Union[int, str], session: Session, stdscr=None):
    """Turn a raw key from get_wch/getch into a session event, or None.

    Ints are curses function keys (getch also hands back plain bytes as
    ints below 128); strs are characters and never match a KEY_* code.
    """
    if isinstance(key, int) and 0 <= key < 128:
        key = chr(key)
    if key == CTRL_C:
        return Quit()
    if key == curses.KEY_RESIZE:
        if stdscr is None:
            return None
        height, width = stdscr.getmaxyx()
        return Resize(width, height)
    if session.is_complete:
        return Restart() if key == "r" else None
    if key in (curses.KEY_BACKSPACE, DEL):
        return DeleteChar()
    if key in (CTRL_W, CTRL_H):
        return DeleteWord()
    if key == " ":
        return Space()
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        return TypeChar(key)
    return None


def read_key(stdscr: curses.window) -> Optional[Union[int, str]]:
    try:
        return stdscr.get_wch()
    except curses.error:
        # timeout with nothing pending
        return None


def run(stdscr: curses.window, theme: Theme = DEFAULT_THEME, rng=random) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    curses.raw()
    init_colors(theme)
    attrs = role_attrs(theme, curses.has_colors())
    stdscr.timeout(POLL_MS)

    height, width = stdscr.getmaxyx()
    session = new_session(rng, width, height)
    log.info("new session %dx%d, target %r", width, height, session.target)
    now = time.monotonic()
    next_blink = now + BLINK_INTERVAL
    paint(stdscr, render(session, theme, now), attrs)

    while True:
        key = read_key(stdscr)
        now = time.monotonic()
        if key is not None:
            event = classify_key(key, session, stdscr)
            if isinstance(event, Quit):
                log.info("quit")
                return
            if event is not None:
                session = update(session, event, now, rng)
                paint(stdscr, render(session, theme, now), attrs)

        if now >= next_blink:
            session = update(session, Tick(), now, rng)
            next_blink += BLINK_INTERVAL
            if next_blink <= now:
                next_blink = now + BLINK_INTERVAL
            paint(stdscr, render(session, theme, now), attrs)


def main() -> int:
    try:
        setup_logging()
    except OSError as e:
        print(f"Error starting program: cannot open log file: {e}", file=sys.stderr)
        return 1
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        log.error("not attached to a terminal")
        print("Error starting program: not attached to a terminal", file=sys.stderr)
        return 1
    try:
        curses.wrapper(run)
    except curses.error as e:
        log.exception("terminal setup failed")
        print(f"Error starting program: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
