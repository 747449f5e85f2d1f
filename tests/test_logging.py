"""Tests for runf.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from runf.logging import configure_logging, get_logger


def test_get_logger_is_namespaced() -> None:
    assert get_logger().name == "runf"
    assert get_logger("workspace").name == "runf.workspace"


def test_console_level_follows_verbose_flag() -> None:
    quiet = configure_logging()
    assert quiet.level == logging.INFO
    assert [handler.level for handler in quiet.handlers] == [logging.INFO]

    verbose = configure_logging(verbose=True)
    assert verbose.level == logging.DEBUG
    assert len(verbose.handlers) == 1


def test_log_file_records_debug_trail_without_verbose(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "runf.log"

    logger = configure_logging(log_file=log_file)
    get_logger("workspace").debug("Scratch workspace: /tmp/runf/abc")
    for handler in logger.handlers:
        handler.flush()

    console, file_sink = logger.handlers
    assert console.level == logging.INFO
    assert file_sink.level == logging.DEBUG
    assert "runf.workspace: Scratch workspace: /tmp/runf/abc" in log_file.read_text(encoding="utf-8")
