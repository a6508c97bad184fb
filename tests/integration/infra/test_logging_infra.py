from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, handler isolation and log file rotation.
"""

import logging
import time
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import pytest

from classpath_scanner.infra.logging import (
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
    LoggingConfig,
    configure_logging,
    get_logger,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up our root logger handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers() -> list:
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(_our_handlers())

    configure_logging(cfg)
    assert len(_our_handlers()) == initial == 1
    assert isinstance(_our_handlers()[0], QueueHandler)


def test_force_reconfiguration_replaces_listener() -> None:
    """TC-02: force=True tears down the previous listener."""
    configure_logging(LoggingConfig(level="INFO"))
    root = logging.getLogger()
    first_listener = getattr(root, _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG"), force=True)

    second_listener = getattr(root, _QUEUE_LISTENER_ATTR)
    assert isinstance(second_listener, QueueListener)
    assert second_listener is not first_listener
    assert root.level == logging.DEBUG
    assert len(_our_handlers()) == 1


def test_foreign_handlers_are_preserved() -> None:
    """TC-03: Handlers installed by the host application are never removed."""
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(LoggingConfig(level="INFO"), force=True)
        shutdown_logging()
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_no_handlers_requested() -> None:
    """TC-04: Without console or file output nothing is attached."""
    configure_logging(LoggingConfig(console=False, log_file=None))
    assert _our_handlers() == []
    assert not getattr(logging.getLogger(), _CONFIGURED_FLAG_ATTR, False)


def test_log_rotation(tmp_path: Path) -> None:
    """TC-05: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "logs" / "scan.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = get_logger("classpath_scanner.test_rotate")

    for _ in range(10):
        logger.debug("Scanned archive lib/some-long-archive-name.jar: 42 resources " * 3)

    # Stopping the listener flushes the queue
    shutdown_logging()
    time.sleep(0.1)

    assert log_file.exists()
    assert (tmp_path / "logs" / "scan.log.1").exists()


def test_package_level_only_affects_package_logger() -> None:
    """TC-06: package_level raises scanner verbosity without touching the root threshold."""
    configure_logging(LoggingConfig(level="WARNING", package_level="DEBUG"))

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("classpath_scanner").level == logging.DEBUG
    assert logging.getLogger("classpath_scanner.core.services.scanner").isEnabledFor(logging.DEBUG)

    shutdown_logging()
    assert logging.getLogger("classpath_scanner").level == logging.NOTSET
