"""
Tests for the logging setup.
"""
import logging

import pytest

from spritetab.logging_config import setup_logging


@pytest.fixture
def spritetab_logger():
    logger = logging.getLogger("spritetab")
    saved = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


def test_repeated_setup_replaces_handlers(spritetab_logger):
    setup_logging(logging.INFO)
    setup_logging(logging.INFO)

    assert len(spritetab_logger.handlers) == 1


def test_module_records_reach_log_file(spritetab_logger, tmp_path):
    log_file = tmp_path / "spritetab.log"
    setup_logging(logging.DEBUG, str(log_file))

    logging.getLogger("spritetab.controller.scene_client").info("Requesting scene 12")
    for handler in spritetab_logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "spritetab.controller.scene_client - INFO - Requesting scene 12" in text
