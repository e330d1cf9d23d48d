"""
Utility modules for paperchat.
"""

from .ids import new_id
from .logging import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "new_id",
]
