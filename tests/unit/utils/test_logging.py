"""Tests for the logging setup."""

import logging
from io import StringIO

from src.utils.logging import (
    LOGGER_NAME,
    configure_logging,
    get_logger,
    reset_logging,
)


class TestConfigureLogging:
    def test_returns_application_logger_without_propagation(self):
        logger = configure_logging()

        assert logger.name == "cv_scorer"
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert len(logger.handlers) == 1

    def test_level_can_be_changed_on_reconfigure(self):
        configure_logging(level="DEBUG")
        logger = configure_logging(level="warning")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        logger = configure_logging(level="chatty")

        assert logger.level == logging.INFO

    def test_records_carry_level_and_module_name(self):
        logger = configure_logging(level="INFO")
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        get_logger("batch.orchestrator").info("Skipping finalized status: hired")

        output = buffer.getvalue()
        assert " - cv_scorer.batch.orchestrator - INFO - " in output
        assert output.rstrip().endswith("Skipping finalized status: hired")


class TestLogFile:
    def test_records_are_appended_to_the_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        log_file.parent.mkdir()
        log_file.write_text("earlier run\n", encoding="utf-8")

        configure_logging(level="INFO", log_file=log_file)
        get_logger("batch.service").warning("Candidate c9 failed")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert content.startswith("earlier run\n")
        assert "WARNING - Candidate c9 failed" in content

    def test_missing_parent_directory_is_created(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "run.log"

        configure_logging(log_file=log_file)

        assert log_file.parent.is_dir()

    def test_same_file_is_attached_once(self, tmp_path):
        log_file = tmp_path / "run.log"

        configure_logging(log_file=log_file)
        logger = configure_logging(level="DEBUG", log_file=log_file)

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG


class TestGetLogger:
    def test_child_logger_is_namespaced(self):
        assert get_logger("store.repository").name == "cv_scorer.store.repository"

    def test_child_inherits_application_level(self):
        configure_logging(level="DEBUG")

        assert get_logger("scoring.service").getEffectiveLevel() == logging.DEBUG


class TestResetLogging:
    def test_reset_drops_handlers_and_restores_propagation(self, tmp_path):
        configure_logging(level="INFO", log_file=tmp_path / "run.log")

        reset_logging()

        logger = logging.getLogger(LOGGER_NAME)
        assert logger.handlers == []
        assert logger.level == logging.NOTSET
        assert logger.propagate is True

    def test_configure_after_reset_installs_one_console_handler(self):
        configure_logging()
        reset_logging()

        logger = configure_logging()

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)
