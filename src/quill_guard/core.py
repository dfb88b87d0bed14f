# Rule-based content heuristics: AI phrasing density, filler-word density and
# intra-document repetition. Pure functions, no network calls.

from __future__ import annotations

import re
from dataclasses import dataclass

from quill_guard.rules import AI_PHRASING, DEFAULT_RULE_SET, FILLER, GENERIC_OPENING, PatternRule, RuleSet

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Thresholds:
    """Scaling constants and assessment cut-offs.

    The defaults are the historical values; they are tuning knobs, not
    calibrated truths.
    """

    ai_words_basis: float = 100.0
    ai_match_weight: float = 10.0
    ai_likelihood_cap: float = 100.0
    ai_high: float = 50.0
    ai_moderate: float = 25.0

    filler_high: float = 5.0
    filler_moderate: float = 2.0

    min_sentence_chars: int = 10
    repetition_high: float = 20.0
    repetition_medium: float = 10.0
    repetition_suggestion_min: float = 10.0


DEFAULT_THRESHOLDS = Thresholds()

AI_HIGH = "High likelihood of AI generation"
AI_MODERATE = "Moderate AI indicators detected"
AI_LOW = "Low AI indicators - likely human-written"

FILLER_HIGH = "High filler word usage - consider removing"
FILLER_MODERATE = "Moderate filler words detected"
FILLER_LOW = "Good - minimal filler words"

VARY_STRUCTURE = "Consider varying your sentence structure"
UNIQUE_OPENING = "Consider a more unique opening line"

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _word_count(text: str) -> int:
    return len(text.split())


def _collect(text: str, rules: tuple[PatternRule, ...]) -> tuple[list[str], int]:
    """Return the deduplicated matched substrings and the total match count."""
    matches: list[str] = []
    total = 0
    for rule in rules:
        for m in rule.pattern.finditer(text):
            matches.append(m.group(0))
            total += 1
    return _deduplicate(matches), total


def _deduplicate(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


# ---------------------------------------------------------------------------
# Sub-analyses
# ---------------------------------------------------------------------------


def detect_ai_patterns(text: str, rules: RuleSet | None = None, thresholds: Thresholds | None = None) -> dict:
    """Estimate how much ``text`` resembles generic LLM phrasing."""
    rs = rules or DEFAULT_RULE_SET
    th = thresholds or DEFAULT_THRESHOLDS
    found, total = _collect(text, rs.by_category(AI_PHRASING))
    wc = _word_count(text)

    likelihood = 0.0
    if wc > 0:
        likelihood = min(total / (wc / th.ai_words_basis) * th.ai_match_weight, th.ai_likelihood_cap)

    if likelihood > th.ai_high:
        assessment = AI_HIGH
    elif likelihood > th.ai_moderate:
        assessment = AI_MODERATE
    else:
        assessment = AI_LOW

    return {
        "likelihood": f"{likelihood:.1f}",
        "patterns_found": found,
        "match_count": total,
        "assessment": assessment,
    }


def detect_filler_words(text: str, rules: RuleSet | None = None, thresholds: Thresholds | None = None) -> dict:
    """Measure intensifier and hedge density as a percentage of words."""
    rs = rules or DEFAULT_RULE_SET
    th = thresholds or DEFAULT_THRESHOLDS
    found, total = _collect(text, rs.by_category(FILLER))
    wc = _word_count(text)

    percentage = total / wc * 100 if wc > 0 else 0.0

    if percentage > th.filler_high:
        assessment = FILLER_HIGH
    elif percentage > th.filler_moderate:
        assessment = FILLER_MODERATE
    else:
        assessment = FILLER_LOW

    return {
        "filler_percentage": f"{percentage:.2f}",
        "fillers_found": found,
        "match_count": total,
        "assessment": assessment,
    }


def detect_plagiarism_indicators(text: str, rules: RuleSet | None = None, thresholds: Thresholds | None = None) -> dict:
    """Flag repeated sentences and stock opening lines.

    This is intra-document repetition only; nothing is compared against
    outside sources.
    """
    rs = rules or DEFAULT_RULE_SET
    th = thresholds or DEFAULT_THRESHOLDS

    sentences = [s for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > th.min_sentence_chars]
    unique = {s.strip().lower() for s in sentences}
    duplicates = len(sentences) - len(unique)
    ratio = duplicates / len(sentences) * 100 if sentences else 0.0

    stripped = text.strip()
    has_generic_opening = any(r.pattern.match(stripped) for r in rs.by_category(GENERIC_OPENING))

    if ratio > th.repetition_high:
        risk = "High"
    elif ratio > th.repetition_medium:
        risk = "Medium"
    else:
        risk = "Low"

    suggestions: list[str] = []
    if ratio > th.repetition_suggestion_min:
        suggestions.append(VARY_STRUCTURE)
    if has_generic_opening:
        suggestions.append(UNIQUE_OPENING)

    return {
        "repetition_percentage": f"{ratio:.2f}",
        "duplicate_sentence_count": duplicates,
        "has_generic_opening": has_generic_opening,
        "plagiarism_risk": risk,
        "suggestions": suggestions,
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_content(text: str, rules: RuleSet | None = None, thresholds: Thresholds | None = None) -> dict:
    """Run all three heuristics over ``text``.

    Args:
        text: The prose to analyze. Empty input is valid and yields zero scores.
        rules: Optional replacement rule set. Uses ``DEFAULT_RULE_SET`` if omitted.
        thresholds: Optional tuning overrides. Uses the historical defaults if omitted.

    Returns:
        Dict with keys ``ai_detection``, ``filler_analysis`` and
        ``plagiarism_indicators``.
    """
    return {
        "ai_detection": detect_ai_patterns(text, rules, thresholds),
        "filler_analysis": detect_filler_words(text, rules, thresholds),
        "plagiarism_indicators": detect_plagiarism_indicators(text, rules, thresholds),
    }
