from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, log file rotation logic and log tail retrieval.
"""

import logging
import time
from logging.handlers import QueueListener
from pathlib import Path
from unittest.mock import patch

import pytest

from mvnexplorer.infra.logging import (
    configure_logging,
    get_recent_logs,
    LoggingConfig,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR
)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up root logger handlers before and after each test."""
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener and isinstance(listener, QueueListener):
        listener.stop()
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    if hasattr(root, "_mvnexplorer_configured"):
        delattr(root, "_mvnexplorer_configured")


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    root = logging.getLogger()
    initial_handler_count = len(root.handlers)

    configure_logging(cfg)
    assert len(root.handlers) == initial_handler_count, "Handlers were duplicated."


def test_force_reconfiguration_changes_level() -> None:
    """TC-02: force=True re-applies the configuration."""
    configure_logging(LoggingConfig(level="INFO", console=True))
    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)

    assert logging.getLogger().level == logging.DEBUG


def test_log_rotation(tmp_path: Path) -> None:
    """TC-03: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1
    )

    configure_logging(cfg)
    logger = logging.getLogger("test_rotate")

    for i in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)

    backup_file = tmp_path / "test_rotate.log.1"
    assert log_file.exists()
    assert backup_file.exists(), "Rotation backup file was not created."


def test_queue_listener_architecture() -> None:
    """TC-04: Verify that the root logger uses a QueueHandler-based architecture."""
    cfg = LoggingConfig(level="INFO", console=True)
    configure_logging(cfg)

    root = logging.getLogger()
    queue_handlers = [h for h in root.handlers if getattr(h, _HANDLER_TAG_ATTR, False)]

    assert len(queue_handlers) > 0
    assert getattr(root, _QUEUE_LISTENER_ATTR) is not None


def test_get_recent_logs_tail(tmp_path: Path) -> None:
    """TC-05: Only the requested number of trailing lines is returned."""
    log_file = tmp_path / "mvnexplorer.log"
    log_file.write_text("".join(f"line {i}\n" for i in range(10)), encoding="utf-8")

    with patch("mvnexplorer.infra.logging.core.get_default_log_path", return_value=str(log_file)):
        assert get_recent_logs(3) == "line 7\nline 8\nline 9\n"

    with patch("mvnexplorer.infra.logging.core.get_default_log_path", return_value=str(tmp_path / "none.log")):
        assert get_recent_logs() == "Log file not found."
