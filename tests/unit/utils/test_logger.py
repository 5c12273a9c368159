import logging

import pytest
import structlog

from cascadefetch.utils.logger import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logging(restore_logging):
    setup_logging(log_level="debug", log_format="json")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_defaults_from_settings(restore_logging, monkeypatch):
    monkeypatch.setenv("CASCADEFETCH_LOG_LEVEL", "warning")

    setup_logging()

    assert logging.getLogger().level == logging.WARNING
