"""Shared pytest fixtures for Paced Queue tests."""

import logging
from unittest.mock import MagicMock

import pytest

from paced_queue.config.base import EnvVars
from paced_queue.metrics import MetricsCollector, get_metrics


@pytest.fixture
def callback() -> MagicMock:
    """Processing callback that never asks for a retry."""
    return MagicMock(return_value=None)


@pytest.fixture
def complete() -> MagicMock:
    """Completion callback."""
    return MagicMock(return_value=None)


@pytest.fixture(scope="session")
def metrics_collector() -> MetricsCollector:
    """Process-wide metrics collector.

    Prometheus metrics are registered globally and cannot be re-registered,
    so every test shares the singleton.
    """
    return get_metrics()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all PACED_QUEUE_* variables for the duration of a test."""
    for name, value in vars(EnvVars).items():
        if not name.startswith("_") and isinstance(value, str):
            monkeypatch.delenv(value, raising=False)
    return monkeypatch



@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
