"""
File loading helpers for the command-line interface.
"""

from .record_loader import RecordLoader

__all__ = [
    'RecordLoader',
]
