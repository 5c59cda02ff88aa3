from __future__ import annotations
from typing import Any, Protocol
import logging

from .const import DEFAULT_LOG_LEVEL


# ordered by increasing verbosity, a level passes itself and everything below it
LEVEL_WEIGHTS = {
    "silent": 0,
    "error": 1,
    "warn": 2,
    "info": 3,
    "debug": 4,
}


class Logger(Protocol):
    def debug(self, message: str, meta: dict[str, Any] | None = None) -> None: ...
    def info(self, message: str, meta: dict[str, Any] | None = None) -> None: ...
    def warning(self, message: str, meta: dict[str, Any] | None = None) -> None: ...
    def error(self, message: str, meta: dict[str, Any] | None = None) -> None: ...


def isValidLogLevel(level: Any) -> bool:
    return isinstance(level, str) and level in LEVEL_WEIGHTS


class ConsoleLogger():
    """Leveled logger writing through a stdlib logger.

    The threshold is applied here, before the record reaches logging, so the
    host's own logger configuration still filters on top of it.
    """

    def __init__(self, level: str | None = None, logger: logging.Logger | None = None):
        self._log = logger or logging.getLogger(__package__)
        self.level = DEFAULT_LOG_LEVEL
        self.setLevel(level)

    def setLevel(self, level: str | None):
        level = level.strip().lower() if isinstance(level, str) else level
        self.level = level if isValidLogLevel(level) else DEFAULT_LOG_LEVEL

    def shouldLog(self, level: str) -> bool:
        return LEVEL_WEIGHTS[level] <= LEVEL_WEIGHTS[self.level]

    def _emit(self, level: str, pyLevel: int, message: str, meta: dict[str, Any] | None):
        if not self.shouldLog(level):
            return
        self._log.log(pyLevel, "[%s] %s %s", level.upper(), message, meta if meta else "")

    def debug(self, message: str, meta: dict[str, Any] | None = None):
        self._emit("debug", logging.DEBUG, message, meta)

    def info(self, message: str, meta: dict[str, Any] | None = None):
        self._emit("info", logging.INFO, message, meta)

    def warning(self, message: str, meta: dict[str, Any] | None = None):
        self._emit("warn", logging.WARNING, message, meta)

    warn = warning

    def error(self, message: str, meta: dict[str, Any] | None = None):
        self._emit("error", logging.ERROR, message, meta)


class SingleMethodLogger():
    """Adapts an object exposing only log(message, meta)."""

    def __init__(self, target):
        self._target = target

    def debug(self, message: str, meta: dict[str, Any] | None = None):
        self._target.log(message, meta)

    def info(self, message: str, meta: dict[str, Any] | None = None):
        self._target.log(message, meta)

    def warning(self, message: str, meta: dict[str, Any] | None = None):
        self._target.log(f"WARN: {message}", meta)

    warn = warning

    def error(self, message: str, meta: dict[str, Any] | None = None):
        self._target.log(f"ERROR: {message}", meta)


class WarnLogger():
    """Adapts a logger that names its warning method warn()."""

    def __init__(self, target):
        self._target = target

    def debug(self, message: str, meta: dict[str, Any] | None = None):
        self._target.debug(message, meta)

    def info(self, message: str, meta: dict[str, Any] | None = None):
        self._target.info(message, meta)

    def warning(self, message: str, meta: dict[str, Any] | None = None):
        self._target.warn(message, meta)

    warn = warning

    def error(self, message: str, meta: dict[str, Any] | None = None):
        self._target.error(message, meta)


def _hasMethods(obj, *names) -> bool:
    return all(callable(getattr(obj, name, None)) for name in names)


def createLogger(level: str | None = None, logger: Any = None) -> Logger:
    """Return a facade for `logger`, or a ConsoleLogger at `level` if none is usable.

    A stdlib logging.Logger is wrapped so meta dicts are not taken as
    %-format arguments. Any other object with debug/info/warning/error is
    used as is. Objects with warn() in place of warning(), or with only
    log(), are adapted.
    """

    if isinstance(logger, logging.Logger):
        return ConsoleLogger(level, logger)

    if logger is not None and _hasMethods(logger, "debug", "info", "warning", "error"):
        return logger

    if logger is not None and _hasMethods(logger, "debug", "info", "warn", "error"):
        return WarnLogger(logger)

    if logger is not None and _hasMethods(logger, "log"):
        return SingleMethodLogger(logger)

    return ConsoleLogger(level)
