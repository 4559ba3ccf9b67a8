import logging

import pytest

from newsletter.config import LogsSettings
from newsletter.telemetry import DEFAULT_LOG_FILENAME, LoggingGuard


@pytest.fixture
def guard():
    guard = LoggingGuard()
    yield guard
    guard.shutdown()


def test_setup_is_applied_only_once(guard):
    root = logging.getLogger()
    before = len(root.handlers)

    guard.setup(LogsSettings())
    after_first = len(root.handlers)
    guard.setup(LogsSettings())

    assert after_first == before + 1
    assert len(root.handlers) == after_first


def test_shutdown_flushes_the_log_file(guard, tmp_path):
    guard.setup(LogsSettings(path=str(tmp_path)))

    logging.getLogger("newsletter.tests").warning("written through the queue")
    guard.shutdown()

    content = (tmp_path / DEFAULT_LOG_FILENAME).read_text(encoding="utf-8")
    assert "written through the queue" in content


def test_shutdown_removes_the_handlers(guard, tmp_path):
    root = logging.getLogger()
    before = len(root.handlers)

    guard.setup(LogsSettings(path=str(tmp_path / "app.log")))
    assert len(root.handlers) == before + 2
    guard.shutdown()

    assert len(root.handlers) == before
    assert not guard.initialized
