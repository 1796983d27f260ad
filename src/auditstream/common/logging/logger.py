"""Centralized logging configuration.

Library modules log through ``logging.getLogger(__name__)``; entry points
call ``get_logger("auditstream", level)`` once so every module under the
package shares one handler.
"""

import logging
import sys
from typing import Union

from auditstream.common.config.settings import LogLevel

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: Union[str, LogLevel] = LogLevel.INFO) -> logging.Logger:
    """Get a configured logger instance writing to stderr."""
    if isinstance(level, LogLevel):
        level = level.value
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    
    return logger
