from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_SENTENCE_RE = re.compile(r"[.!?]+")
_PARAGRAPH_RE = re.compile(r"\n\n+")


def clean_text(text: str | None) -> str:
    """Collapse whitespace and drop control characters from extracted text."""
    if not text:
        return ""
    text = _WHITESPACE_RE.sub(" ", text)
    text = _CONTROL_RE.sub("", text)
    return text.strip()


def word_count(text: str) -> int:
    return len(text.split())


def sentence_count(text: str) -> int:
    return sum(1 for s in _SENTENCE_RE.split(text) if s.strip())


def paragraph_count(text: str) -> int:
    return sum(1 for p in _PARAGRAPH_RE.split(text) if p.strip())


def text_stats(text: str | None) -> dict:
    """Basic statistics over the cleaned form of ``text``."""
    cleaned = clean_text(text)
    words = word_count(cleaned)
    letters = len(_WHITESPACE_RE.sub("", cleaned))
    return {
        "word_count": words,
        "character_count": len(cleaned),
        "sentence_count": sentence_count(cleaned),
        "paragraph_count": paragraph_count(cleaned),
        "average_word_length": round(letters / words, 2) if words else 0,
    }
