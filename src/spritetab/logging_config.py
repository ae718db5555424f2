"""
Logging Configuration
Routes the sprite tab's log records (scene fetches, sheet loads, media
discovery, synchronizer attach) to the console and optionally to a file.
"""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Attaches handlers to the 'spritetab' logger.

    Module loggers (`spritetab.controller.scene_client`, `spritetab.view...`)
    propagate here, so one call from `main()` covers the whole viewer. Calling
    it again replaces the handlers instead of stacking them.

    Args:
        level: Threshold for both handlers; `--log-level` maps onto it.
        log_file: `--log-file` path. The file is truncated on every start.
    """
    logger = logging.getLogger("spritetab")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    # Time - module - level - message; the module name shows which side spoke
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized (level={logging.getLevelName(level)}, file={log_file or '-'}).")
