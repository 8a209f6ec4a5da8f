"""
Utilities Module

Helpers for applications and scripts built on the driver.
"""

from chess_uci.utils.log import setup_logger

__all__ = [
    'setup_logger',
]
