"""The logger: filters messages by level and hands them to its sinks."""

from __future__ import annotations

import collections
import copy
import sys
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

from sinklog.common import Level, LogMessage, SourceLoc
from sinklog.sinks import Formatter, Sink

ErrorHandler = Callable[[str], Any]

_BACKTRACE_START = "****************** Backtrace Start ******************"
_BACKTRACE_END = "****************** Backtrace End ********************"


class _Backtracer:
    """Thread-safe ring buffer of the most recent log messages."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._messages: collections.deque[LogMessage] = collections.deque(maxlen=0)

    def __copy__(self) -> _Backtracer:
        other = _Backtracer()
        with self._lock:
            other._enabled = self._enabled
            other._messages = collections.deque(self._messages, maxlen=self._messages.maxlen)
        return other

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self, size: int) -> None:
        if size < 0:
            raise ValueError("backtrace size must not be negative")
        with self._lock:
            self._enabled = True
            self._messages = collections.deque(maxlen=size)

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def push_back(self, msg: LogMessage) -> None:
        with self._lock:
            self._messages.append(msg)

    def pop_all(self) -> list[LogMessage]:
        with self._lock:
            messages = list(self._messages)
            self._messages.clear()
        return messages


class _DefaultErrorReporter:
    """Prints logging errors to stderr at most once a second."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_report = 0.0
        self._counter = 0

    def report(self, logger_name: str, msg: str) -> None:
        with self._lock:
            now = time.time()
            self._counter += 1
            if now - self._last_report < 1.0:
                return
            self._last_report = now
            date = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))
            print(
                f"[*** LOG ERROR #{self._counter:04d} ***] [{date}] [{logger_name}] {{{msg}}}",
                file=sys.stderr,
            )


_default_reporter = _DefaultErrorReporter()


class Logger:
    """Named logger with a level, a list of sinks and optional backtrace.

    Each log call whose level passes the logger's threshold is formatted
    once and passed to every sink whose own level accepts it. Errors raised
    while formatting or writing are passed to the error handler rather than
    to the caller.
    """

    def __init__(self, name: str, sinks: Sink | Iterable[Sink] | None = None) -> None:
        self._name = name
        if sinks is None:
            self._sinks: list[Sink] = []
        elif isinstance(sinks, Sink):
            self._sinks = [sinks]
        else:
            self._sinks = list(sinks)
        self._level = Level.INFO
        self._flush_level = Level.OFF
        self._custom_err_handler: ErrorHandler | None = None
        self._tracer = _Backtracer()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, level={self._level.name})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> Level:
        return self._level

    @property
    def flush_level(self) -> Level:
        return self._flush_level

    @property
    def sinks(self) -> list[Sink]:
        """The logger's sinks; the list itself, so it may be changed in place."""
        return self._sinks

    def log(self, level: Level, msg: Any, *args: Any, source: SourceLoc | None = None) -> None:
        """Log a message at the given level.

        With arguments, ``msg`` is a ``str.format`` template. Without, a
        string is logged as is and any other object by its formatted value.
        """
        level = Level(level)
        log_enabled = self.should_log(level)
        traceback_enabled = self._tracer.enabled
        if not log_enabled and not traceback_enabled:
            return
        try:
            if args:
                payload = str(msg).format(*args)
            elif isinstance(msg, str):
                payload = msg
            else:
                payload = format(msg)
            log_msg = LogMessage(
                self._name, level, payload, source=source if source is not None else SourceLoc()
            )
            self._log_it(log_msg, log_enabled, traceback_enabled)
        except Exception as exc:
            self._err_handler(str(exc))

    def trace(self, msg: Any, *args: Any) -> None:
        self.log(Level.TRACE, msg, *args)

    def debug(self, msg: Any, *args: Any) -> None:
        self.log(Level.DEBUG, msg, *args)

    def info(self, msg: Any, *args: Any) -> None:
        self.log(Level.INFO, msg, *args)

    def warn(self, msg: Any, *args: Any) -> None:
        self.log(Level.WARN, msg, *args)

    def error(self, msg: Any, *args: Any) -> None:
        self.log(Level.ERROR, msg, *args)

    def critical(self, msg: Any, *args: Any) -> None:
        self.log(Level.CRITICAL, msg, *args)

    def should_log(self, level: Level) -> bool:
        """True if messages of the given level pass this logger's threshold."""
        return level >= self._level

    def should_backtrace(self) -> bool:
        """True if backtrace recording is on."""
        return self._tracer.enabled

    def set_level(self, level: Level) -> None:
        self._level = Level(level)

    def set_formatter(self, formatter: Formatter) -> None:
        """Give each sink its own copy of the formatter; the last sink gets the original."""
        for index, sink in enumerate(self._sinks):
            if index == len(self._sinks) - 1:
                sink.set_formatter(formatter)
            else:
                sink.set_formatter(copy.copy(formatter))

    def enable_backtrace(self, n_messages: int) -> None:
        """Keep the last ``n_messages`` messages of any level for a later dump."""
        self._tracer.enable(n_messages)

    def disable_backtrace(self) -> None:
        self._tracer.disable()

    def dump_backtrace(self) -> None:
        """Send the stored messages to the sinks, framed by start and end lines."""
        self._dump_backtrace()

    def flush(self) -> None:
        self._flush()

    def flush_on(self, level: Level) -> None:
        """Flush automatically after every message at or above this level."""
        self._flush_level = Level(level)

    def set_error_handler(self, handler: ErrorHandler | None) -> None:
        """Set the callable that receives error texts; None restores the default."""
        self._custom_err_handler = handler

    def clone(self, name: str) -> Logger:
        """New logger with the same sinks and configuration under another name."""
        cloned = copy.copy(self)
        cloned._name = name
        cloned._sinks = list(self._sinks)
        cloned._tracer = copy.copy(self._tracer)
        return cloned

    def _log_it(self, msg: LogMessage, log_enabled: bool, traceback_enabled: bool) -> None:
        if log_enabled:
            self._sink_it(msg)
        if traceback_enabled:
            self._tracer.push_back(msg)

    def _sink_it(self, msg: LogMessage) -> None:
        for sink in self._sinks:
            if sink.should_log(msg.level):
                try:
                    sink.log(msg)
                except Exception as exc:
                    self._err_handler(str(exc))
        if self._should_flush(msg):
            self._flush()

    def _flush(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as exc:
                self._err_handler(str(exc))

    def _dump_backtrace(self) -> None:
        if not self._tracer.enabled:
            return
        self._sink_it(LogMessage(self._name, Level.INFO, _BACKTRACE_START))
        for msg in self._tracer.pop_all():
            self._sink_it(msg)
        self._sink_it(LogMessage(self._name, Level.INFO, _BACKTRACE_END))

    def _should_flush(self, msg: LogMessage) -> bool:
        return msg.level >= self._flush_level and msg.level != Level.OFF

    def _err_handler(self, msg: str) -> None:
        if self._custom_err_handler is not None:
            self._custom_err_handler(msg)
        else:
            _default_reporter.report(self._name, msg)