"""Tests for log output and logging configuration."""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import rulemock.logging as rulemock_logging
from rulemock import UnconfiguredCallError, init_logging, mock


class Door(ABC):
    @abstractmethod
    def open(self) -> bool: ...


class TestLogRecords:
    """The mocker reports what it does through the rulemock logger."""

    def test_registration_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="rulemock")
        mocker = mock(Door)
        mocker.rule("x").function(Door.open).returns(True)
        mocker.rule("x").function(Door.open).returns(False)
        messages = [r.getMessage() for r in caplog.records]
        assert "Registered rule 'x'" in messages
        assert "Replaced rule 'x'" in messages

    def test_unconfigured_call_logged_at_info(self, caplog):
        caplog.set_level(logging.INFO, logger="rulemock")
        with pytest.raises(UnconfiguredCallError):
            mock(Door).target.open()
        records = [r for r in caplog.records if r.levelno == logging.INFO]
        assert len(records) == 1
        assert "Unconfigured call test_logging.Door.open() -> bool" in records[0].getMessage()
        assert records[0].name == "rulemock.mocker"

    def test_quiet_by_default(self, caplog):
        caplog.set_level(logging.WARNING, logger="rulemock")
        mocker = mock(Door)
        mocker.rule("x").function(Door.open).returns(True)
        mocker.enable("x")
        mocker.target.open()
        assert caplog.records == []


class TestInitLogging:
    """init_logging() follows RULEMOCK_LOG_FILE and RULEMOCK_VERBOSE."""

    def test_verbose_file_output(self, monkeypatch, tmp_path):
        log_file = tmp_path / "rulemock.log"
        monkeypatch.setattr(rulemock_logging, "LOG_FILE", str(log_file))
        monkeypatch.setattr(rulemock_logging, "VERBOSE", True)

        logger = init_logging()
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

        mocker = mock(Door)
        mocker.rule("written").function(Door.open).returns(True)
        rulemock_logging.close_logging()

        content = log_file.read_text()
        assert "rulemock.mocker DEBUG Registered rule 'written'" in content

    def test_warning_level_without_verbose(self, monkeypatch):
        monkeypatch.setattr(rulemock_logging, "LOG_FILE", None)
        monkeypatch.setattr(rulemock_logging, "VERBOSE", False)

        logger = init_logging()
        assert logger.level == logging.WARNING
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_init_twice_keeps_one_handler(self, monkeypatch):
        monkeypatch.setattr(rulemock_logging, "LOG_FILE", None)
        init_logging()
        logger = init_logging()
        added = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
        assert len(added) == 1

    def test_close_restores_propagation(self, monkeypatch):
        monkeypatch.setattr(rulemock_logging, "LOG_FILE", None)
        logger = init_logging()
        rulemock_logging.close_logging()
        assert logger.propagate is True
        assert all(isinstance(h, logging.NullHandler) for h in logger.handlers)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
