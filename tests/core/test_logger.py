import sys

import pytest
from loguru import logger

from playmode.core.logger import setup_logger


@pytest.fixture(autouse=True)
def restore_default_handler():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_sink_receives_context(tmp_path):
    log_file = tmp_path / "logs" / "playmode.log"
    setup_logger(level="DEBUG", log_file=str(log_file))

    logger.info("Play Mode session started", step_count=3)
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "Logger initialized with level=DEBUG" in content
    assert "Play Mode session started" in content
    assert "'step_count': 3" in content


def test_file_sink_respects_level(tmp_path):
    log_file = tmp_path / "playmode.log"
    setup_logger(level="WARNING", log_file=str(log_file))

    logger.info("hidden")
    logger.warning("shown")
    logger.remove()

    content = log_file.read_text(encoding="utf-8")
    assert "hidden" not in content
    assert "shown" in content


def test_console_level_is_independent(tmp_path, capsys):
    log_file = tmp_path / "playmode.log"
    setup_logger(level="DEBUG", log_file=str(log_file), console_level="WARNING")

    logger.info("file only")
    logger.remove()

    assert "file only" not in capsys.readouterr().err
    assert "file only" in log_file.read_text(encoding="utf-8")
