"""
Logging setup tests.
"""

import logging

import pytest
from rich.logging import RichHandler

from lc3_emulator.log_setup import setup_logging


@pytest.fixture
def logger_name(request):
    name = f"lc3_test_{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_file_and_rich_console(tmp_path, logger_name):
    logger = setup_logging(logger_name, log_dir=tmp_path, console_level=logging.ERROR)
    kinds = {type(h) for h in logger.handlers}
    assert kinds == {logging.FileHandler, RichHandler}

    logger.debug("trace line")
    for h in logger.handlers:
        h.flush()
    files = list(tmp_path.glob(f"{logger_name}_*.log"))
    assert len(files) == 1
    text = files[0].read_text(encoding="utf-8")
    assert "Logger initialized" in text
    assert "trace line" in text


def test_idempotent(tmp_path, logger_name):
    first = setup_logging(logger_name, log_dir=tmp_path)
    count = len(first.handlers)
    second = setup_logging(logger_name, log_dir=tmp_path)
    assert second is first
    assert len(second.handlers) == count


def test_plain_console_without_file(logger_name):
    logger = setup_logging(logger_name, log_to_file=False, rich_console=False,
                           console_level=logging.INFO)
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert type(handler) is logging.StreamHandler
    assert handler.level == logging.INFO
