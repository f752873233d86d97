"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rulemock.logging as rulemock_logging


class Recorder:
    """Handler for create_proxy that records calls and returns a fixed value."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    def __call__(self, instance, method, arguments, keywords):
        self.calls.append((instance, method, arguments, dict(keywords)))
        return self.result


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture(autouse=True)
def _detach_logging():
    """Undo init_logging() so caplog keeps seeing records in later tests."""
    yield
    rulemock_logging.close_logging()
