from __future__ import annotations

import logging

import pytest

from procguard import logging_config
from procguard.config import ConfigurationError


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    for handler in saved_handlers:
        root.removeHandler(handler)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_console_only_by_default(clean_root_logger):
    logging_config.setup_logging("DEBUG")
    assert clean_root_logger.level == logging.DEBUG
    assert len(clean_root_logger.handlers) == 1
    assert isinstance(clean_root_logger.handlers[0], logging.StreamHandler)


def test_level_comes_from_settings(clean_root_logger, monkeypatch):
    monkeypatch.setenv("PROCGUARD_LOG_LEVEL", "warning")
    logging_config.setup_logging()
    assert clean_root_logger.level == logging.WARNING


def test_file_handler_appends(clean_root_logger, tmp_path):
    log_path = tmp_path / "nested" / "procguard.log"
    log_path.parent.mkdir()
    log_path.write_text("earlier run\n", encoding="utf-8")

    logging_config.setup_logging("INFO", log_path=log_path)
    logging.getLogger("procguard.test").info("hello file")
    for handler in clean_root_logger.handlers:
        handler.flush()

    text = log_path.read_text(encoding="utf-8")
    assert text.startswith("earlier run\n")
    assert "procguard.test - INFO - hello file" in text


def test_reconfiguring_replaces_handlers(clean_root_logger):
    logging_config.setup_logging("INFO")
    logging_config.setup_logging("INFO", user_friendly=True)
    assert len(clean_root_logger.handlers) == 1
    assert clean_root_logger.handlers[0].formatter._fmt == "%(message)s"


def test_unknown_level_rejected(clean_root_logger):
    with pytest.raises(ConfigurationError):
        logging_config.setup_logging("CHATTY")
