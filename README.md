# sinklog

A logging library built around *sinks*. A `Logger` has a name, a level and
a list of sinks; every message that passes the logger's level is handed to
each sink whose own level accepts it, and the sink formats it and writes it
to its destination. Loggers can keep a ring buffer of recent messages for
later inspection and can flush automatically from a chosen level up.

## Installation

```
pip install .
```

## Quick start

```python
from sinklog.common import Level
from sinklog.logger import Logger
from sinklog.sinks import StdoutSink, BasicFileSink

console = StdoutSink()
console.set_level(Level.WARN)

logfile = BasicFileSink("logs/app.txt", truncate=True)

log = Logger("app", [console, logfile])
log.set_level(Level.DEBUG)
log.warn("disk usage at {}%", 91)      # console and file
log.info("only in the file")           # file only
log.flush()
logfile.close()
```

With arguments, the message is a `str.format` template; without, a string
is logged as is and any other object by its formatted value. A new logger
starts at `Level.INFO`. The convenience methods are `trace`, `debug`,
`info`, `warn`, `error` and `critical`; `log(level, msg, *args, source=...)`
takes the level explicitly and an optional `SourceLoc`.

## Levels

`sinklog.common.Level` is an `IntEnum`: `TRACE`, `DEBUG`, `INFO`, `WARN`,
`ERROR`, `CRITICAL`, `OFF`. `level_to_string(Level.WARN)` gives
`"warning"`, `level_to_short(Level.WARN)` gives `"W"`, and
`level_from_str("warn")` gives `Level.WARN`; unknown names map to
`Level.OFF`.

## Errors

Errors raised while formatting or writing a message do not reach the
caller. They go to the logger's error handler, a callable receiving the
error text, set with `Logger.set_error_handler`. The default handler prints
the error to standard error at most once a second. Passing `None` restores
the default.

`sinklog.common.LogError` is raised when a sink cannot be set up, for
example when a log file cannot be opened.

## Flushing

`Logger.flush()` flushes every sink. `Logger.flush_on(level)` makes the
logger flush after every message at or above that level.

## Backtrace

```python
log.set_level(Level.INFO)
log.enable_backtrace(10)
for i in range(100):
    log.debug("step {}", i)   # stored, not written
log.dump_backtrace()          # writes the last 10, between start and end lines
```

While backtrace is enabled, messages of every level are kept in a ring
buffer of the given size; `dump_backtrace` sends them to the sinks and
empties the buffer. `disable_backtrace` stops recording.

## Sinks

All in `sinklog.sinks`:

- `BasicFileSink(filename, truncate=False)` – appends to (or truncates) one
  file, creating its directory if needed.
- `RotatingFileSink(base_filename, max_size, max_files, rotate_on_open=False)`
  – once writing would take the file past `max_size` bytes, renames
  `log.txt` → `log.1.txt` → `log.2.txt` …, keeping at most `max_files` old
  files, and starts a fresh file. `RotatingFileSink.calc_filename("logs/mylog.txt", 3)`
  gives `"logs/mylog.3.txt"`.
- `OstreamSink(stream, force_flush=False)` – writes to any text stream.
- `StdoutSink()`, `StderrSink()` – console output, flushed after every
  message.
- `DupFilterSink(max_skip_duration, sinks=None)` – forwards to other sinks
  (`add_sink`, `remove_sink`), dropping a message identical to the previous
  one unless more than `max_skip_duration` (a `timedelta` or seconds) has
  passed; the next message let through is preceded by
  `"Skipped N duplicate messages.."`.

The two file sinks have `close()` and can be used as context managers.
Custom sinks subclass `BaseSink` and implement `_sink_it(msg)` and
`_flush()`, which are called with the sink's lock held.

## Formatting

Sinks format messages with `PayloadFormatter`, which writes the message
text followed by the platform end of line. Any object with a
`format(msg) -> str` method can be set with `Sink.set_formatter` or
`Logger.set_formatter`; the logger gives each sink its own copy. The
`LogMessage` passed in carries `logger_name`, `level`, `payload`, `time`
(nanoseconds since the epoch), `thread_id` and `source`.

`sinklog.fmt_helper` has helpers for building such formatters:
`pad2`, `pad3`, `pad6`, `pad9`, `pad_uint(n, width)`, `count_digits` and
`time_fraction(timestamp_ns, per_second)`.

## Operating-system helpers

`sinklog.osutil` covers what the sinks rely on: `create_dir(path)` creates a
directory and its parents and returns `True` on success or if it already
exists; `dir_name("dir/file.txt")` gives `"dir"`. It also has `path_exists`,
`filesize`, `open_file`, `remove`, `remove_if_exists`, `rename`,
`utc_minutes_offset`, `thread_id`, `pid`, `is_color_terminal` and
`in_terminal`.

## What this package does not do

- There is no pattern-based formatter: timestamps, logger names and levels
  are not added to the output unless you supply a formatter that does so.
- Logging is synchronous; there is no thread pool or queued delivery.
- There is no global registry of named loggers and no default logger;
  loggers are ordinary objects you create and keep yourself.
- There are no coloured console sinks and no daily-rotating file sink.