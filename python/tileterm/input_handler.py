"""Single-keypress reader for the terminal frontend.

Arrow keys, WASD and a handful of command letters are mapped to action
names; Enter is not needed.  Uses tty+termios on macOS / Linux and
msvcrt on Windows.
"""

from __future__ import annotations

import os
import sys
import time

# Movement actions name the direction the *tile* slides.
KEY_ACTIONS: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "n": "next",
    "b": "back",
    "v": "solve",
    "r": "scramble",
    "h": "help",
    "?": "help",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "\r": "enter",
    "\n": "enter",
}

_ARROWS: dict[str, str] = {"A": "up", "B": "down", "C": "right", "D": "left"}


def resolve(ch: str) -> str:
    """Map a raw character to its action name ("" if unmapped)."""
    return KEY_ACTIONS.get(ch.lower(), "")


# -- Windows --------------------------------------------------------------------


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    end = None if timeout is None else time.monotonic() + timeout
    while end is None or time.monotonic() < end:
        if msvcrt.kbhit():
            ch = msvcrt.getwch()
            if ch in ("\x00", "\xe0"):  # arrow key prefix
                return {"H": "up", "P": "down", "M": "right", "K": "left"}.get(msvcrt.getwch(), "")
            return resolve(ch)
        time.sleep(0.02)
    return None


# -- Unix -----------------------------------------------------------------------


def _read_unix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def ready(wait: float | None) -> bool:
        return bool(select.select([fd], [], [], wait)[0])

    def read() -> str:
        # os.read is unbuffered, so select() still sees the rest of an
        # escape sequence.
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    try:
        tty.setraw(fd)
        if not ready(timeout):
            return None
        ch = read()
        if ch != "\x1b":
            return resolve(ch)

        # Arrow keys: ESC [ A/B/C/D; a bare Escape quits.
        if not ready(0.1) or read() != "[":
            return "quit"
        return _ARROWS.get(read(), "") if ready(0.1) else ""
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


_read = _read_windows if os.name == "nt" else _read_unix


# -- public API -----------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action name.

    Actions: "up", "down", "left", "right", "next", "back", "solve",
    "scramble", "help", "quit", "enter", or "" for anything else.
    """
    key = _read(None)
    return key if key is not None else ""


def get_key_timeout(timeout: float) -> str | None:
    """Like ``get_key`` but returns ``None`` after *timeout* seconds."""
    return _read(timeout)
