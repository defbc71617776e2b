"""Shared types: log levels, modes, errors, source locations and messages."""

from __future__ import annotations

import enum
import os
import threading
import time
from dataclasses import dataclass, field

VERSION_MAJOR = 1
VERSION_MINOR = 4
VERSION_PATCH = 3
VERSION = VERSION_MAJOR * 10000 + VERSION_MINOR * 100 + VERSION_PATCH


class Level(enum.IntEnum):
    """Severity of a log message; higher is more severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    CRITICAL = 5
    OFF = 6


LEVEL_NAMES = ("trace", "debug", "info", "warning", "error", "critical", "off")
SHORT_LEVEL_NAMES = ("T", "D", "I", "W", "E", "C", "O")

_LEVEL_ALIASES = {"warn": Level.WARN, "err": Level.ERROR}


def level_to_string(level: Level) -> str:
    """Return the full name of a level, e.g. ``"warning"``."""
    return LEVEL_NAMES[Level(level)]


def level_to_short(level: Level) -> str:
    """Return the one-letter name of a level, e.g. ``"W"``."""
    return SHORT_LEVEL_NAMES[Level(level)]


def level_from_str(name: str) -> Level:
    """Parse a level name; unknown names map to ``Level.OFF``."""
    try:
        return Level(LEVEL_NAMES.index(name))
    except ValueError:
        return _LEVEL_ALIASES.get(name, Level.OFF)


class ColorMode(enum.Enum):
    """Colour mode used by sinks with colour support."""

    ALWAYS = "always"
    AUTOMATIC = "automatic"
    NEVER = "never"


class PatternTimeType(enum.Enum):
    """Whether formatted timestamps use local time or UTC."""

    LOCAL = "local"
    UTC = "utc"


class LogError(Exception):
    """Raised when a logger or sink cannot be set up or used."""

    def __init__(self, msg: str, last_errno: int | None = None) -> None:
        if last_errno is not None:
            msg = f"{msg}: {os.strerror(last_errno)}"
        super().__init__(msg)
        self.msg = msg
        self.errno = last_errno

    def __str__(self) -> str:
        return self.msg


@dataclass(frozen=True)
class SourceLoc:
    """Where in the source a log call was made."""

    filename: str | None = None
    line: int = 0
    funcname: str | None = None

    def empty(self) -> bool:
        """True when no location was recorded."""
        return self.line == 0


@dataclass
class LogMessage:
    """One log record as handed to sinks."""

    logger_name: str
    level: Level
    payload: str
    time: int = field(default_factory=time.time_ns)
    thread_id: int = field(default_factory=threading.get_native_id)
    source: SourceLoc = field(default_factory=SourceLoc)
    color_range_start: int = 0
    color_range_end: int = 0