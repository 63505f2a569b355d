# core/log_manager.py
"""
Application-wide logger.

Everything logs through the single `flashwise` logger exported here:
a console handler for development plus a rotating file handler (logs/flashwise.log).
"""

import os
import logging
import logging.handlers

from flashwise.config import LOG_LEVEL, LOG_DIR

LOGGER_NAME = 'flashwise'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(module)s: %(message)s'


def setup_logging(log_level: str = LOG_LEVEL, log_dir: str = LOG_DIR) -> logging.Logger:
    """
    Configures and returns the application logger.
    Safe to call more than once; existing handlers are replaced.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(level)
    _logger.handlers.clear()
    _logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    _logger.addHandler(console_handler)

    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, 'flashwise.log'),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        _logger.addHandler(file_handler)
    except OSError as e:
        # Read-only filesystems still get console logging
        _logger.warning(f"File logging disabled ({log_dir}): {e}")

    return _logger


logger = setup_logging()
