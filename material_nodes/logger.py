import logging
import sys

# Centralized logger name (parent of every module logger)
LOGGER_NAME = "MaterialNodes"

def get_logger() -> logging.Logger:
    """Get the standard logger for Material Nodes."""
    return logging.getLogger(LOGGER_NAME)

def setup_logger(level=logging.INFO):
    """
    Configure the Material Nodes logger.

    Args:
        level: Logging level (default: INFO)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to prevent duplicates
    if logger.handlers:
        logger.handlers.clear()

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)

    # Format: [MaterialNodes] [Level] Message
    formatter = logging.Formatter(f'[{LOGGER_NAME}] [%(levelname)s] %(message)s')
    ch.setFormatter(formatter)

    logger.addHandler(ch)

    return logger
