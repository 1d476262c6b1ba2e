"""
Core utility functions.
"""

from .classnames import (
    clsx,
    tw_merge,
    cn,
)

__all__ = [
    'clsx',
    'tw_merge',
    'cn',
]
