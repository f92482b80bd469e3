"""Text helpers shared by the analyzers and patterns."""

import math
import re
from functools import lru_cache
from typing import Iterable, List, Sequence

_WORD_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_'./-]*")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+(?:\s+|$)|\n+")
_HEADER_RE = re.compile(r"^\s*#{1,6}\s+\S", re.MULTILINE)
_BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\S", re.MULTILINE)


@lru_cache(maxsize=512)
def _keyword_regex(keyword: str) -> "re.Pattern[str]":
    # Whole word or phrase, tolerant of a plural suffix.
    return re.compile(r"(?<![\w-])" + re.escape(keyword) + r"(?:e?s)?(?![\w-])", re.IGNORECASE)


def has_keyword(text: str, keyword: str) -> bool:
    """Check whether ``keyword`` occurs in ``text`` as a word or phrase."""
    return bool(_keyword_regex(keyword).search(text))


def matched_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """Return the keywords that occur in ``text``, in the given order."""
    return [kw for kw in keywords if has_keyword(text, kw)]


def has_any(text: str, keywords: Iterable[str]) -> bool:
    """Check whether any keyword occurs in ``text``."""
    return any(has_keyword(text, kw) for kw in keywords)


def count_occurrences(text: str, keywords: Iterable[str]) -> int:
    """Count every occurrence of every keyword in ``text``."""
    return sum(len(_keyword_regex(kw).findall(text)) for kw in keywords)


def words(text: str) -> List[str]:
    """Split text into word tokens."""
    return _WORD_RE.findall(text)


def word_count(text: str) -> int:
    return len(words(text))


def extract_sentences(text: str) -> List[str]:
    """Split text into trimmed, non-empty sentences."""
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s and s.strip()]


def first_sentence(text: str) -> str:
    sentences = extract_sentences(text)
    return sentences[0] if sentences else ""


def has_headers(text: str) -> bool:
    return bool(_HEADER_RE.search(text))


def has_bullets(text: str) -> bool:
    return bool(_BULLET_RE.search(text))


def is_single_line(text: str) -> bool:
    return "\n" not in text.strip()


def clean_fragment(text: str, limit: int = 200) -> str:
    """Trim a captured phrase: strip trailing punctuation and collapse spaces."""
    cleaned = re.sub(r"\s+", " ", text.strip())
    cleaned = re.sub(r"[.!?,;:]+$", "", cleaned)
    return cleaned[:limit]


def dedupe(items: Sequence[str]) -> List[str]:
    """Remove duplicates while keeping first-seen order."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))
