import logging

import pytest

from custom_components.lcmenu.logger import ConsoleLogger, SingleMethodLogger, WarnLogger, createLogger
from tests.helpers.fakes import RecordingLogger

LOGGER_NAME = "custom_components.lcmenu"


@pytest.fixture
def records(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    return caplog


def _messages(caplog):
    return [r.getMessage().rstrip() for r in caplog.records if r.name == LOGGER_NAME]


def test_default_level_is_info(records):
    logger = ConsoleLogger()
    logger.debug("test debug")
    logger.info("test info")

    assert logger.level == "info"
    assert _messages(records) == ["[INFO] test info"]


def test_filters_below_threshold(records):
    logger = ConsoleLogger("warn")
    logger.debug("test debug")
    logger.info("test info")
    logger.warn("test warn")
    logger.error("test error")

    assert _messages(records) == ["[WARN] test warn", "[ERROR] test error"]


def test_silent_logs_nothing(records):
    logger = ConsoleLogger("silent")
    logger.error("test error")

    assert _messages(records) == []


def test_debug_passes_everything(records):
    logger = ConsoleLogger("debug")
    for method in ("debug", "info", "warning", "error"):
        getattr(logger, method)(method)

    assert len(_messages(records)) == 4


def test_invalid_level_falls_back(records):
    logger = ConsoleLogger("verbose")
    assert logger.level == "info"

    logger.setLevel(" DEBUG ")
    assert logger.level == "debug"


def test_meta_is_included(records):
    logger = ConsoleLogger("debug")
    logger.info("test with meta", {"key": "value"})

    assert _messages(records) == ["[INFO] test with meta {'key': 'value'}"]


def test_python_levels_are_mapped(records):
    logger = ConsoleLogger("debug")
    logger.warning("careful")

    record = next(r for r in records.records if r.name == LOGGER_NAME)
    assert record.levelno == logging.WARNING


def test_create_logger_defaults_to_console():
    assert isinstance(createLogger(), ConsoleLogger)
    assert createLogger("error").level == "error"


def test_create_logger_keeps_full_logger():
    custom = RecordingLogger()

    logger = createLogger(None, custom)
    logger.info("test")

    assert logger is custom
    assert custom.records == [("info", "test", None)]


class _WarnOnly:
    def __init__(self):
        self.calls = []

    def debug(self, message, meta=None):
        self.calls.append(("debug", message, meta))

    def info(self, message, meta=None):
        self.calls.append(("info", message, meta))

    def warn(self, message, meta=None):
        self.calls.append(("warn", message, meta))

    def error(self, message, meta=None):
        self.calls.append(("error", message, meta))


def test_create_logger_adapts_warn_loggers():
    target = _WarnOnly()

    logger = createLogger(None, target)
    logger.info("test info")
    logger.warning("test warning", {"x": 1})
    logger.warn("test warn")

    assert isinstance(logger, WarnLogger)
    assert target.calls == [
        ("info", "test info", None),
        ("warn", "test warning", {"x": 1}),
        ("warn", "test warn", None),
    ]


def test_create_logger_wraps_stdlib_logger(records):
    stdlib = logging.getLogger(LOGGER_NAME)

    logger = createLogger("debug", stdlib)
    logger.debug("meta safe", {"a": 1})

    assert isinstance(logger, ConsoleLogger)
    assert _messages(records) == ["[DEBUG] meta safe {'a': 1}"]


class _LogOnly:
    def __init__(self):
        self.calls = []

    def log(self, message, meta=None):
        self.calls.append((message, meta))


def test_create_logger_adapts_log_only_objects():
    target = _LogOnly()

    logger = createLogger(None, target)
    logger.info("test info")
    logger.warn("test warning")
    logger.error("test error", {"x": 1})

    assert isinstance(logger, SingleMethodLogger)
    assert target.calls == [
        ("test info", None),
        ("WARN: test warning", None),
        ("ERROR: test error", {"x": 1}),
    ]
