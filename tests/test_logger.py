"""Tests for file logging setup."""
import logging

import pytest

import tmpl.core.logger as tmpl_logger
from tmpl.core.logger import LOG_FILE_NAME, setup_file_logging


@pytest.fixture
def fresh_logging(monkeypatch):
    """Allow setup_file_logging to run again and drop the handlers it adds."""
    monkeypatch.setattr(tmpl_logger, "_file_logging_configured", False)
    package_logger = logging.getLogger("tmpl")
    before = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in package_logger.handlers[:]:
        if handler not in before:
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)


class TestFileLogging:
    """Test where run logs are written."""

    def test_logs_into_data_dir(self, tmp_path, fresh_logging):
        path = setup_file_logging(str(tmp_path / "data"))

        assert path == tmp_path / "data" / LOG_FILE_NAME
        assert "tmpl logging initialized" in path.read_text(encoding="utf-8")

    def test_explicit_log_file(self, tmp_path, fresh_logging):
        target = tmp_path / "logs" / "run.log"

        path = setup_file_logging(str(tmp_path / "data"), log_file=str(target), verbose=True)
        logging.getLogger("tmpl.test_logger").debug("debug line")

        assert path == target
        assert "debug line" in target.read_text(encoding="utf-8")
        assert not (tmp_path / "data").exists()

    def test_configured_once(self, tmp_path, fresh_logging):
        setup_file_logging(str(tmp_path / "first"))

        assert setup_file_logging(str(tmp_path / "second")) is None
        assert not (tmp_path / "second").exists()
