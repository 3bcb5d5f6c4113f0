import logging
from logging.handlers import TimedRotatingFileHandler

from promport.core.config import settings
from promport.utils.logger import get_logger, setup_logger


def test_console_only_by_default():
    logger = setup_logger("promport.test.console", log_level="debug")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not logger.propagate


def test_log_to_file(tmp_path):
    """With file logging on, records land in <log_dir>/<name>.log"""
    logger = setup_logger(
        "promport.test.file", log_to_file=True, log_dir=str(tmp_path / "logs")
    )

    logger.info("export finished")
    for handler in logger.handlers:
        handler.flush()

    assert any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers)
    content = (tmp_path / "logs" / "promport.test.file.log").read_text()
    assert "| INFO | promport.test.file | export finished" in content

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_log_to_file_from_settings(tmp_path, monkeypatch):
    """LOG_TO_FILE=True in settings turns on the rotating file for new loggers"""
    monkeypatch.setattr(settings, "LOG_TO_FILE", True)
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path))

    logger = get_logger("promport.test.settings")
    try:
        assert any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers)
        assert (tmp_path / "promport.test.settings.log").exists()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()


def test_get_logger_reuses_configured_logger():
    first = get_logger("promport.test.reuse")

    assert get_logger("promport.test.reuse") is first
    assert len(first.handlers) == 1
