"""
Logging setup for scripts driving an engine.

The library itself only creates module loggers under the ``chess_uci``
namespace; applications decide where the output goes.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


def setup_logger(debug: bool = False, log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the ``chess_uci`` logger.

    Args:
        debug: If True, log at DEBUG level (includes wire traffic);
            otherwise INFO level
        log_file: Write to this file instead of stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("chess_uci")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, mode='w')
    else:
        handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
