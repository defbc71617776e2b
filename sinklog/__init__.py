"""Sink-based logging with levels, backtraces, flush policies and rotating files."""

__version__ = "1.4.3"

__all__ = ["common", "fmt_helper", "osutil", "sinks", "logger"]