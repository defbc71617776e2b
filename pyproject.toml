[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sinklog"
version = "1.4.3"
description = "Sink-based logging with levels, backtraces, flush policies and rotating log files"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "logger", "sinks", "rotating-file", "backtrace"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sinklog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
