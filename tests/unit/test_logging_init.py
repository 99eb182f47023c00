from __future__ import annotations

import logging
from io import StringIO

import src.logging.init
from src.logging.init import LabeledFormatter, get_logger, log_summary, setup_logging


def _capture(logger: logging.Logger) -> StringIO:
    out = StringIO()
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    handler.setStream(out)
    return out


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "excel_month_splitter"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    logger = setup_logging()
    out = _capture(logger)

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    log_summary("Test summary message")

    lines = out.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_child_loggers_share_the_handler():
    logger = setup_logging()
    out = _capture(logger)
    logging.getLogger("excel_month_splitter.grouping").info("from child")
    assert out.getvalue().strip() == "INFO from child"


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_setup_logging_debug_lowers_level():
    setup_logging()
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG


def test_get_logger_returns_configured_logger():
    configured = setup_logging()
    assert get_logger() is configured


def test_reset_logging_clears_global():
    setup_logging()
    src.logging.init.reset_logging()
    assert src.logging.init._logger is None
    # 再設定してもハンドラは 1 つ
    assert len(setup_logging().handlers) == 1
