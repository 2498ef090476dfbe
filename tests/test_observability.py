"""
Tests for logging configuration.
"""

import logging

import pytest

from deploy_everything.core.observability.logging_config import resolve_level, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    @pytest.mark.parametrize(
        "flags, env, expected",
        [
            ((True, True, True), None, "DEBUG"),
            ((False, True, True), None, "INFO"),
            ((False, False, True), "DEBUG", "ERROR"),
            ((False, False, False), "INFO", "INFO"),
            ((False, False, False), None, "WARNING"),
        ],
    )
    def test_precedence(self, flags, env, expected):
        assert resolve_level(*flags, env) == expected


class TestSetupLogging:
    def test_console_level(self, restore_root_logger):
        setup_logging(level="INFO")
        root = restore_root_logger
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_unknown_level_falls_back(self, restore_root_logger):
        setup_logging(level="chatty")
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "run.log"
        setup_logging(level="WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        logging.getLogger("deploy_everything.test").debug("journal wiped")
        for handler in root.handlers:
            handler.flush()

        assert "journal wiped" in log_file.read_text()

    def test_third_party_quieted(self, restore_root_logger):
        logging.getLogger("urllib3").setLevel(logging.NOTSET)
        setup_logging(level="INFO")
        assert logging.getLogger("urllib3").level == logging.WARNING
