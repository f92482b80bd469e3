"""Optimization patterns and the library that selects them."""

from .base import (
    Improvement,
    Pattern,
    PatternContext,
    PatternResult,
    applied,
    skipped,
)
from .library import DEFAULT_PATTERNS, PatternLibrary

__all__ = [
    "Improvement",
    "Pattern",
    "PatternContext",
    "PatternResult",
    "PatternLibrary",
    "DEFAULT_PATTERNS",
    "applied",
    "skipped",
]
