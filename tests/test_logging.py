"""Tests for structlog setup."""

import logging

import pytest
import structlog

from bopp.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_root_gets_single_handler_at_level() -> None:
    setup_logging("debug", "json")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)


def test_unknown_level_falls_back_to_info() -> None:
    setup_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_uvicorn_loggers_propagate_to_root() -> None:
    access = logging.getLogger("uvicorn.access")
    access.addHandler(logging.NullHandler())
    access.propagate = False

    setup_logging()

    assert access.handlers == []
    assert access.propagate is True
