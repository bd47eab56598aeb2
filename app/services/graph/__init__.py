"""Graph persistence for crawled records.

Functions are re-exported at package level.
"""
from .lectures import save_or_update_lectures, get_lectures

__all__ = [
    'save_or_update_lectures', 'get_lectures',
]
