"""Glue between submitted text, the heuristics engine and the ledger.

A submission is cleaned, checked for minimum length, analyzed, optionally
scored by an external model, and then rewarded through ``LedgerService``.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Mapping

from quill_guard.core import analyze_content
from quill_guard.service import LedgerService
from quill_guard.text import clean_text, text_stats

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 50
PUBLISHED = "published"
DOCUMENT_EVALUATION = "Assignment evaluation"
TEXT_EVALUATION = "Text evaluation"

_LEADING_NUMBER_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Takes the cleaned text, returns a mapping with ``rating``, ``feedback``,
# ``strengths``, ``weaknesses``, ``suggestions`` and ``improved_version``.
Scorer = Callable[[str], Mapping[str, Any]]


class ContentTooShortError(ValueError):
    """Raised when text is below ``MIN_CONTENT_CHARS`` after cleaning."""

    def __init__(self, length: int, minimum: int = MIN_CONTENT_CHARS) -> None:
        super().__init__(f"content must be at least {minimum} characters long, got {length}")
        self.length = length
        self.minimum = minimum


def _parse_rating(rating: object) -> float:
    """Read the leading number of a model rating such as ``"8/10"``; 0 when there is none."""
    if isinstance(rating, bool):
        return 0.0
    if isinstance(rating, (int, float)):
        value = float(rating)
    else:
        m = _LEADING_NUMBER_RE.match(str(rating))
        if m is None:
            return 0.0
        value = float(m.group(0))
    return value if math.isfinite(value) else 0.0


def _detailed_feedback(evaluation: Mapping[str, Any]) -> dict:
    return {
        "rating": evaluation.get("rating"),
        "feedback": evaluation.get("feedback", ""),
        "strengths": list(evaluation.get("strengths") or []),
        "weaknesses": list(evaluation.get("weaknesses") or []),
        "suggestions": list(evaluation.get("suggestions") or []),
        "improved_version": evaluation.get("improved_version") or "",
    }


def evaluate_text(text: str, scorer: Scorer | None = None) -> dict:
    """Analyze a submission and, when a scorer is given, grade it.

    Raises:
        ContentTooShortError: If the cleaned text is shorter than ``MIN_CONTENT_CHARS``.
    """
    cleaned = clean_text(text)
    if len(cleaned) < MIN_CONTENT_CHARS:
        raise ContentTooShortError(len(cleaned))

    analysis = analyze_content(cleaned)
    evaluation: Mapping[str, Any] = {}
    if scorer is not None:
        logger.info(f"scoring {len(cleaned)} characters")
        evaluation = scorer(cleaned) or {}

    score = _parse_rating(evaluation.get("rating"))
    return {
        "score": score,
        "detailed_feedback": _detailed_feedback(evaluation),
        "plagiarism_analysis": {
            "ai_likelihood": analysis["ai_detection"]["likelihood"],
            "patterns_found": analysis["ai_detection"]["patterns_found"],
            "plagiarism_risk": analysis["plagiarism_indicators"]["plagiarism_risk"],
            "repetition_percentage": analysis["plagiarism_indicators"]["repetition_percentage"],
        },
        "content_analysis": analysis,
        "text_stats": text_stats(cleaned),
    }


def evaluate_and_record(
    service: LedgerService,
    user_id: str,
    text: str,
    scorer: Scorer | None = None,
    event_id: str | None = None,
    reason: str = DOCUMENT_EVALUATION,
) -> dict:
    """Evaluate ``text`` and credit the evaluation to ``user_id``.

    The score is clamped into the policy range before it reaches the ledger,
    since model ratings occasionally fall outside it. Pass
    ``reason=TEXT_EVALUATION`` for pasted text rather than an uploaded document.
    """
    report = evaluate_text(text, scorer)
    policy = service.policy
    score = min(max(report["score"], policy.min_score), policy.max_score)
    txn = service.record_assignment_evaluation(user_id, score, event_id=event_id, reason=reason)
    report["gamification"] = txn.to_payload()
    return report


def check_content(content: str) -> dict:
    """Plain heuristics check without grading or rewards."""
    if not content or len(content) < MIN_CONTENT_CHARS:
        raise ContentTooShortError(len(content or ""))

    analysis = analyze_content(content)
    ai = analysis["ai_detection"]
    plag = analysis["plagiarism_indicators"]
    filler = analysis["filler_analysis"]
    return {
        "ai_detection": {
            "likelihood": ai["likelihood"],
            "assessment": ai["assessment"],
            "patterns_found": ai["patterns_found"],
        },
        "plagiarism": {
            "risk": plag["plagiarism_risk"],
            "repetition_percentage": plag["repetition_percentage"],
            "suggestions": plag["suggestions"],
        },
        "filler": {
            "percentage": filler["filler_percentage"],
            "assessment": filler["assessment"],
            "found": filler["fillers_found"],
        },
    }


def is_publish_transition(previous_status: str | None, new_status: str) -> bool:
    return new_status == PUBLISHED and previous_status != PUBLISHED


def publish_blog(
    service: LedgerService,
    user_id: str,
    previous_status: str | None,
    new_status: str,
    event_id: str | None = None,
) -> dict | None:
    """Credit a blog publication when the status moves into ``published``.

    Returns the gamification payload, or ``None`` when no transition happened.
    """
    if not is_publish_transition(previous_status, new_status):
        return None
    return service.record_blog_publication(user_id, event_id=event_id).to_payload()
