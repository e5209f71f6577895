"""ANSI colour helpers for console output."""

import os
import sys
from typing import TextIO

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
CYAN = "\033[0;36m"
GRAY = "\033[0;37m"
RESET = "\033[0m"


def colors_enabled(stream: TextIO | None = None) -> bool:
    """Colour only interactive terminals, and never when NO_COLOR is set."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def colorize(text: str, color: str, enabled: bool = True) -> str:
    if not enabled:
        return text
    return f"{color}{text}{RESET}"


def red(text: str, enabled: bool = True) -> str:
    return colorize(text, RED, enabled)


def green(text: str, enabled: bool = True) -> str:
    return colorize(text, GREEN, enabled)


def yellow(text: str, enabled: bool = True) -> str:
    return colorize(text, YELLOW, enabled)


def cyan(text: str, enabled: bool = True) -> str:
    return colorize(text, CYAN, enabled)


def gray(text: str, enabled: bool = True) -> str:
    return colorize(text, GRAY, enabled)
