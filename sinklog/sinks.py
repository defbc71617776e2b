"""Sinks: destinations that format log messages and write them somewhere."""

from __future__ import annotations

import abc
import copy
import datetime
import os
import sys
import threading
from collections.abc import Callable, Iterable
from typing import IO, Protocol

from sinklog import osutil
from sinklog.common import Level, LogError, LogMessage


class Formatter(Protocol):
    """Anything that turns a log message into the text a sink writes."""

    def format(self, msg: LogMessage) -> str: ...


class PayloadFormatter:
    """Formats a message as its payload followed by the platform end of line."""

    def __init__(self, eol: str = osutil.DEFAULT_EOL) -> None:
        self.eol = eol

    def format(self, msg: LogMessage) -> str:
        """Return the payload with the end-of-line marker appended."""
        return f"{msg.payload}{self.eol}"


class Sink(abc.ABC):
    """A destination for log messages with its own level threshold."""

    def __init__(self) -> None:
        self._level = Level.TRACE

    @property
    def level(self) -> Level:
        return self._level

    def should_log(self, level: Level) -> bool:
        """True if a message of the given level passes this sink's threshold."""
        return level >= self._level

    def set_level(self, level: Level) -> None:
        """Set the lowest level this sink accepts."""
        self._level = Level(level)

    @abc.abstractmethod
    def log(self, msg: LogMessage) -> None:
        """Write one message."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Flush buffered output."""

    @abc.abstractmethod
    def set_formatter(self, formatter: Formatter) -> None:
        """Replace the formatter used by this sink."""


class BaseSink(Sink):
    """Sink that serialises access with a lock; subclasses write the output.

    Subclasses implement ``_sink_it`` and ``_flush``; both are called with
    the lock held.
    """

    def __init__(self, formatter: Formatter | None = None) -> None:
        super().__init__()
        self._formatter: Formatter = formatter if formatter is not None else PayloadFormatter()
        self._lock = threading.RLock()

    def log(self, msg: LogMessage) -> None:
        with self._lock:
            self._sink_it(msg)

    def flush(self) -> None:
        with self._lock:
            self._flush()

    def set_formatter(self, formatter: Formatter) -> None:
        with self._lock:
            self._set_formatter(formatter)

    def _format(self, msg: LogMessage) -> str:
        return self._formatter.format(msg)

    def _set_formatter(self, formatter: Formatter) -> None:
        self._formatter = formatter

    @abc.abstractmethod
    def _sink_it(self, msg: LogMessage) -> None: ...

    @abc.abstractmethod
    def _flush(self) -> None: ...


def _split_by_extension(filename: str) -> tuple[str, str]:
    """Split ``"dir/name.ext"`` into ``("dir/name", ".ext")``."""
    ext_index = filename.rfind(".")
    if ext_index in (-1, 0) or ext_index == len(filename) - 1:
        return filename, ""
    folder_index = filename.rfind(osutil.FOLDER_SEP)
    if folder_index != -1 and folder_index >= ext_index - 1:
        return filename, ""
    return filename[:ext_index], filename[ext_index:]


class _LogFile:
    """An append-mode log file that creates its directory on open."""

    def __init__(self) -> None:
        self._file: IO[bytes] | None = None
        self.filename = ""

    def open(self, filename: str, truncate: bool = False) -> None:
        self.close()
        self.filename = filename
        directory = osutil.dir_name(filename)
        if directory:
            osutil.create_dir(directory)
        if truncate:
            osutil.open_file(filename, "wb").close()
        self._file = osutil.open_file(filename, "ab")

    def reopen(self, truncate: bool) -> None:
        if not self.filename:
            raise LogError("Failed re opening file - was not opened before")
        self.open(self.filename, truncate)

    def write(self, data: bytes) -> None:
        if self._file is None:
            raise LogError(f"Failed writing to file {self.filename}: file is closed")
        try:
            self._file.write(data)
        except OSError as exc:
            raise LogError(f"Failed writing to file {self.filename}", exc.errno) from exc

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def size(self) -> int:
        if self._file is None:
            raise LogError(f"Cannot use size() on closed file {self.filename}")
        self._file.flush()
        return osutil.filesize(self._file)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class _FileSinkMixin:
    _file: _LogFile

    @property
    def filename(self) -> str:
        return self._file.filename

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BasicFileSink(_FileSinkMixin, BaseSink):
    """Writes every message to a single file."""

    def __init__(self, filename: str | os.PathLike, truncate: bool = False) -> None:
        super().__init__()
        self._file = _LogFile()
        self._file.open(os.fspath(filename), truncate)

    def close(self) -> None:
        """Close the underlying file."""
        with self._lock:
            self._file.close()

    def _sink_it(self, msg: LogMessage) -> None:
        self._file.write(self._format(msg).encode("utf-8"))

    def _flush(self) -> None:
        self._file.flush()


class OstreamSink(BaseSink):
    """Writes formatted messages to a text stream."""

    def __init__(self, stream: IO[str], force_flush: bool = False) -> None:
        super().__init__()
        self._stream = stream
        self._force_flush = force_flush

    def _sink_it(self, msg: LogMessage) -> None:
        self._stream.write(self._format(msg))
        if self._force_flush:
            self._stream.flush()

    def _flush(self) -> None:
        self._stream.flush()


class RotatingFileSink(_FileSinkMixin, BaseSink):
    """Writes to a file and rotates it when it grows past ``max_size`` bytes.

    Rotation renames ``log.txt`` to ``log.1.txt``, ``log.1.txt`` to
    ``log.2.txt`` and so on, keeping at most ``max_files`` old files.
    """

    def __init__(
        self,
        base_filename: str | os.PathLike,
        max_size: int,
        max_files: int,
        rotate_on_open: bool = False,
    ) -> None:
        super().__init__()
        self._base_filename = os.fspath(base_filename)
        self._max_size = max_size
        self._max_files = max_files
        self._file = _LogFile()
        self._file.open(self.calc_filename(self._base_filename, 0))
        self._current_size = self._file.size()
        if rotate_on_open and self._current_size > 0:
            self._rotate()

    @staticmethod
    def calc_filename(filename: str, index: int) -> str:
        """Name of the rotated file with the given index.

        ``calc_filename("logs/mylog.txt", 3)`` gives ``"logs/mylog.3.txt"``.
        """
        if index == 0:
            return filename
        basename, ext = _split_by_extension(filename)
        return f"{basename}.{index}{ext}"

    def close(self) -> None:
        """Close the underlying file."""
        with self._lock:
            self._file.close()

    def _sink_it(self, msg: LogMessage) -> None:
        data = self._format(msg).encode("utf-8")
        self._current_size += len(data)
        if self._current_size > self._max_size:
            self._rotate()
            self._current_size = len(data)
        self._file.write(data)

    def _flush(self) -> None:
        self._file.flush()

    def _rotate(self) -> None:
        self._file.close()
        for i in range(self._max_files, 0, -1):
            src = self.calc_filename(self._base_filename, i - 1)
            if not osutil.path_exists(src):
                continue
            target = self.calc_filename(self._base_filename, i)
            if self._rename_file(src, target):
                continue
            # Retry once after a short delay; renames can fail transiently.
            osutil.sleep_for_millis(100)
            if not self._rename_file(src, target):
                self._file.reopen(True)
                self._current_size = 0
                raise LogError(f"rotating_file_sink: failed renaming {src} to {target}")
        self._file.reopen(True)

    @staticmethod
    def _rename_file(src: str, target: str) -> bool:
        try:
            osutil.remove(target)
        except OSError:
            pass
        try:
            osutil.rename(src, target)
        except OSError:
            return False
        return True


class DupFilterSink(BaseSink):
    """Forwards to other sinks, dropping repeats of the previous message.

    A message identical to the last one is skipped unless more than
    ``max_skip_duration`` has passed since it; the next message that is let
    through is preceded by a note of how many were skipped.
    """

    def __init__(
        self,
        max_skip_duration: datetime.timedelta | float,
        sinks: Iterable[Sink] | None = None,
    ) -> None:
        super().__init__()
        if isinstance(max_skip_duration, datetime.timedelta):
            seconds = max_skip_duration.total_seconds()
        else:
            seconds = float(max_skip_duration)
        self._max_skip_ns = int(seconds * 1_000_000) * 1000
        self._sinks: list[Sink] = list(sinks or ())
        self._last_msg_time = 0
        self._last_msg_payload = ""
        self._skip_counter = 0

    @property
    def sinks(self) -> list[Sink]:
        with self._lock:
            return list(self._sinks)

    def add_sink(self, sink: Sink) -> None:
        """Add a sink to forward messages to."""
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        """Stop forwarding to the given sink; unknown sinks are ignored."""
        with self._lock:
            self._sinks = [s for s in self._sinks if s is not sink]

    def _forward(self, msg: LogMessage) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                sink.log(msg)

    def _filter(self, msg: LogMessage) -> bool:
        elapsed = msg.time - self._last_msg_time
        return elapsed > self._max_skip_ns or msg.payload != self._last_msg_payload

    def _sink_it(self, msg: LogMessage) -> None:
        if not self._filter(msg):
            self._skip_counter += 1
            return
        if self._skip_counter > 0:
            skipped = LogMessage(
                msg.logger_name,
                msg.level,
                f"Skipped {self._skip_counter} duplicate messages..",
            )
            self._forward(skipped)
        self._forward(msg)
        self._last_msg_time = msg.time
        self._skip_counter = 0
        self._last_msg_payload = msg.payload

    def _flush(self) -> None:
        for sink in self._sinks:
            sink.flush()

    def _set_formatter(self, formatter: Formatter) -> None:
        self._formatter = formatter
        for sink in self._sinks:
            sink.set_formatter(copy.copy(formatter))


_CONSOLE_LOCK = threading.RLock()


class _ConsoleSink(Sink):
    """Writes to a standard stream, flushing after every message."""

    def __init__(self, stream_getter: Callable[[], IO[str]]) -> None:
        super().__init__()
        self._stream = stream_getter
        self._formatter: Formatter = PayloadFormatter()

    def log(self, msg: LogMessage) -> None:
        with _CONSOLE_LOCK:
            stream = self._stream()
            stream.write(self._formatter.format(msg))
            stream.flush()

    def flush(self) -> None:
        with _CONSOLE_LOCK:
            self._stream().flush()

    def set_formatter(self, formatter: Formatter) -> None:
        with _CONSOLE_LOCK:
            self._formatter = formatter


class StdoutSink(_ConsoleSink):
    """Writes messages to standard output."""

    def __init__(self) -> None:
        super().__init__(lambda: sys.stdout)


class StderrSink(_ConsoleSink):
    """Writes messages to standard error."""

    def __init__(self) -> None:
        super().__init__(lambda: sys.stderr)