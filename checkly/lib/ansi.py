import os
import re
from dataclasses import dataclass

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class Theme:
    red: str = "\033[38;5;203m"
    green: str = "\033[38;5;114m"
    yellow: str = "\033[38;5;221m"
    coral: str = "\033[38;5;209m"
    muted: str = "\033[90m"
    bold: str = "\033[1m"
    strikethrough: str = "\033[9m"
    reset: str = "\033[0m"


DEFAULT = Theme()
PLAIN = Theme(**{name: "" for name in Theme.__dataclass_fields__})

_active: Theme = PLAIN if os.environ.get("NO_COLOR") else DEFAULT


def use(theme: Theme) -> None:
    global _active
    _active = theme


def _wrap(code: str, text: str) -> str:
    if not code:
        return text
    return f"{code}{text}{_active.reset}"


def red(text: str) -> str:
    return _wrap(_active.red, text)


def green(text: str) -> str:
    return _wrap(_active.green, text)


def yellow(text: str) -> str:
    return _wrap(_active.yellow, text)


def coral(text: str) -> str:
    return _wrap(_active.coral, text)


def muted(text: str) -> str:
    return _wrap(_active.muted, text)


def bold(text: str) -> str:
    return _wrap(_active.bold, text)


def strike(text: str) -> str:
    return _wrap(_active.strikethrough, text)


def strip(text: str) -> str:
    return _ANSI_RE.sub("", text)
