import logging
import os
import sys


def setup_logging():
    """Set up logging configuration for the pmflow package with environment-based levels."""
    env_level = os.getenv('PMFLOW_LOG_LEVEL', '').upper()
    is_debug = os.getenv('PMFLOW_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Default to WARNING so normal CLI use only shows fallbacks and errors
    if is_debug:
        level = logging.DEBUG
    elif env_level:
        level = getattr(logging, env_level, logging.WARNING)
    else:
        level = logging.WARNING

    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if is_debug
        else '%(levelname)s: %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    logger = logging.getLogger('pmflow')
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'pmflow.{name}')
    return logging.getLogger('pmflow')
