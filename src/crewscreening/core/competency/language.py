"""Heuristic language detection for interview answers."""

from __future__ import annotations

import re

MIN_TEXT_LENGTH = 20

TR_CHARS: tuple[str, ...] = ("ç", "ğ", "ı", "ö", "ş", "ü")
TR_STOPWORDS: tuple[str, ...] = (
    "ve", "bir", "bu", "için", "ile", "ama", "çünkü",
    "gibi", "olarak", "olan", "ancak", "hem", "çok", "daha",
)

_CYRILLIC = re.compile(r"[\u0400-\u04FF]")
_TR_STOPWORD_PATTERNS = tuple(
    re.compile(rf"(?:^|\s){re.escape(word)}(?:\s|$|[,.])") for word in TR_STOPWORDS
)


def detect_language(text: str) -> tuple[str, float]:
    """Return ``(language, confidence)`` for ``text``.

    Recognizes Russian by Cyrillic share and Turkish by diacritics and
    stopwords; everything else is reported as English. Text shorter than
    20 characters, surrounding whitespace included, is ``unknown``.
    """
    if len(text) < MIN_TEXT_LENGTH:
        return "unknown", 0.3

    lowered = text.lower()
    cyrillic_ratio = len(_CYRILLIC.findall(text)) / len(text)
    if cyrillic_ratio > 0.3:
        return "ru", min(0.9, 0.5 + cyrillic_ratio)

    char_hits = sum(1 for char in TR_CHARS if char in lowered)
    stop_hits = sum(1 for pattern in _TR_STOPWORD_PATTERNS if pattern.search(lowered))

    if char_hits >= 2 or stop_hits >= 3:
        return "tr", min(0.95, 0.5 + char_hits * 0.15 + stop_hits * 0.1)
    if char_hits or stop_hits:
        return "tr", 0.5
    return "en", 0.8


__all__ = ["detect_language"]
