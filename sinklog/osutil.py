"""Operating-system helpers: clocks, files, directories, process and terminal info."""

from __future__ import annotations

import calendar
import os
import sys
import threading
import time
from typing import IO

from sinklog.common import LogError

_IS_WINDOWS = sys.platform.startswith("win")

FOLDER_SEP = "\\" if _IS_WINDOWS else "/"
DEFAULT_EOL = "\r\n" if _IS_WINDOWS else "\n"

_COLOR_TERMS = (
    "ansi",
    "color",
    "console",
    "cygwin",
    "gnome",
    "konsole",
    "kterm",
    "linux",
    "msys",
    "putty",
    "rxvt",
    "screen",
    "vt100",
    "xterm",
)


def now() -> int:
    """Current wall-clock time as nanoseconds since the epoch."""
    return time.time_ns()


def localtime(timestamp: float | None = None) -> time.struct_time:
    """Break a timestamp in seconds (default: now) into local time."""
    return time.localtime(timestamp)


def gmtime(timestamp: float | None = None) -> time.struct_time:
    """Break a timestamp in seconds (default: now) into UTC time."""
    return time.gmtime(timestamp)


def open_file(filename: str | os.PathLike, mode: str) -> IO:
    """Open a file, raising ``LogError`` when it cannot be opened."""
    try:
        return open(filename, mode)
    except OSError as exc:
        raise LogError(f"Failed opening file {os.fspath(filename)}", exc.errno) from exc


def remove(filename: str | os.PathLike) -> None:
    """Delete a file; ``OSError`` propagates on failure."""
    os.remove(filename)


def remove_if_exists(filename: str | os.PathLike) -> None:
    """Delete a file if it exists; do nothing otherwise."""
    if path_exists(filename):
        remove(filename)


def rename(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Rename a file; ``OSError`` propagates on failure."""
    os.rename(src, dst)


def path_exists(filename: str | os.PathLike) -> bool:
    """True if the path names an existing file or directory."""
    try:
        os.stat(filename)
    except (OSError, ValueError):
        return False
    return True


def filesize(file: IO | None) -> int:
    """Size in bytes of the file behind an open file object."""
    if file is None:
        raise LogError("Failed getting file size. fd is null")
    try:
        return os.fstat(file.fileno()).st_size
    except OSError as exc:
        raise LogError("Failed getting file size from fd", exc.errno) from exc


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def utc_minutes_offset(tm: time.struct_time | None = None) -> int:
    """Offset of the given local time from UTC, in minutes."""
    if tm is None:
        tm = localtime()
    offset_seconds = getattr(tm, "tm_gmtoff", None)
    if offset_seconds is None:
        try:
            offset_seconds = calendar.timegm(tm) - int(time.mktime(tm))
        except (OverflowError, ValueError) as exc:
            raise LogError("Failed getting timezone info") from exc
    return _trunc_div(int(offset_seconds), 60)


def thread_id() -> int:
    """Native id of the calling thread."""
    return threading.get_native_id()


def sleep_for_millis(milliseconds: int) -> None:
    """Sleep for the given number of milliseconds."""
    time.sleep(milliseconds / 1000)


def pid() -> int:
    """Id of the current process."""
    return os.getpid()


def is_color_terminal() -> bool:
    """True if the terminal named by ``TERM`` is known to support colours."""
    if _IS_WINDOWS:
        return True
    term = os.environ.get("TERM")
    if term is None:
        return False
    return any(name in term for name in _COLOR_TERMS)


def in_terminal(file: IO) -> bool:
    """True if the file object is attached to a terminal."""
    try:
        return bool(file.isatty())
    except (OSError, ValueError, AttributeError):
        return False


def _mkdir(path: str) -> bool:
    try:
        os.mkdir(path, 0o755)
    except OSError:
        return False
    return True


def create_dir(path: str | os.PathLike) -> bool:
    """Create a directory and every directory leading to it.

    Returns True on success or if the directory already exists.
    """
    path = os.fspath(path)
    if path_exists(path):
        return True
    if not path:
        return False
    if _IS_WINDOWS:
        path = path.replace("/", FOLDER_SEP)

    separator_ends = [i for i, ch in enumerate(path) if ch == FOLDER_SEP]
    for end in (*separator_ends, len(path)):
        subdir = path[:end]
        if subdir and not path_exists(subdir) and not _mkdir(subdir):
            return False
    return True


def dir_name(path: str | os.PathLike) -> str:
    """Directory part of a path, or an empty string.

    ``"abc/file"`` gives ``"abc"``, ``"abc/"`` gives ``"abc"``,
    ``"abc"`` gives ``""`` and ``"abc///"`` gives ``"abc//"``.
    """
    path = os.fspath(path)
    if _IS_WINDOWS:
        path = path.replace("/", FOLDER_SEP)
    pos = path.rfind(FOLDER_SEP)
    return path[:pos] if pos != -1 else ""