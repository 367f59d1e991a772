"""
Intelligence Module

Subject-tag classification into fiction type and genre.
"""

from bookish.intelligence.genre_classifier import (
    Classification,
    FictionType,
    GENRES,
    classify,
)

__all__ = [
    "Classification",
    "FictionType",
    "GENRES",
    "classify",
]
