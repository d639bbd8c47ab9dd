"""
Base infrastructure shared by the API clients.
"""

from .logger import Logger

__all__ = [
    'Logger',
]
