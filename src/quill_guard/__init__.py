# SPDX-License-Identifier: Apache-2.0
"""Rule-based writing heuristics and a points/badges ledger.

Scores text for generic AI phrasing, filler words and sentence repetition
using compiled regex rules, and rewards writing activity with points, levels
and one-time badges. No LLM calls, no API dependencies.

Usage::

    from quill_guard import LedgerService, analyze_content

    analysis = analyze_content(essay)
    txn = LedgerService().record_assignment_evaluation("user-1", score=8.0)

A ``content-check`` column type is also registered for NeMo Data Designer::

    from quill_guard import ContentCheckColumnConfig

    builder.add_column(ContentCheckColumnConfig(
        name="content_check",
        target_columns=["essay"],
        max_ai_likelihood=25,
    ))
"""

from quill_guard.config import ContentCheckColumnConfig
from quill_guard.core import Thresholds, analyze_content
from quill_guard.ledger import LedgerError, LedgerState, add_points, apply_event
from quill_guard.rules import DEFAULT_RULE_SET, RuleSet, load_rule_set
from quill_guard.service import LedgerService

__all__ = [
    "ContentCheckColumnConfig",
    "analyze_content",
    "Thresholds",
    "RuleSet",
    "DEFAULT_RULE_SET",
    "load_rule_set",
    "LedgerState",
    "LedgerError",
    "add_points",
    "apply_event",
    "LedgerService",
]
