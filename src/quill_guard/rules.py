"""Pattern rule sets used by the content heuristics engine.

Detection rules are data, not code: a ``RuleSet`` maps rule ids to compiled
matchers tagged with a category, and can be rebuilt from a plain mapping or a
JSON file so the rules can change without touching the scoring formulas.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping

from pydantic import BaseModel, Field, field_validator

Category = Literal["ai_phrasing", "filler", "generic_opening"]

AI_PHRASING: Category = "ai_phrasing"
FILLER: Category = "filler"
GENERIC_OPENING: Category = "generic_opening"


class RuleSpec(BaseModel):
    """One externally supplied rule before compilation."""

    pattern: str = Field(min_length=1)
    category: Category
    ignore_case: bool = True

    @field_validator("pattern")
    @classmethod
    def _must_compile(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {value!r}: {exc}") from exc
        return value

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)


@dataclass(frozen=True)
class PatternRule:
    rule_id: str
    category: Category
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class RuleSet:
    """An ordered, versioned collection of pattern rules."""

    version: str
    rules: tuple[PatternRule, ...]

    def by_category(self, category: Category) -> tuple[PatternRule, ...]:
        return tuple(r for r in self.rules if r.category == category)

    @classmethod
    def from_mapping(cls, version: str, mapping: Mapping[str, Mapping[str, object]]) -> RuleSet:
        """Build a rule set from ``{rule_id: {"pattern", "category", "ignore_case"}}``.

        Raises:
            pydantic.ValidationError: If an entry has an unknown category or a
                pattern that does not compile.
        """
        rules = []
        for rule_id, raw in mapping.items():
            spec = RuleSpec.model_validate(raw)
            rules.append(PatternRule(rule_id=rule_id, category=spec.category, pattern=spec.compile()))
        return cls(version=str(version), rules=tuple(rules))


def load_rule_set(path: str | Path) -> RuleSet:
    """Load a rule set from a JSON document ``{"version": ..., "rules": {...}}``."""
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    return RuleSet.from_mapping(document.get("version", "custom"), document["rules"])


# ---------------------------------------------------------------------------
# Default rules
# ---------------------------------------------------------------------------

_DEFAULT_RULES: dict[str, dict[str, object]] = {
    # Generic LLM phrasing
    "in_conclusion": {"pattern": r"in conclusion,?\s", "category": AI_PHRASING},
    "important_to_note": {"pattern": r"it is important to note that", "category": AI_PHRASING},
    "worth_noting": {"pattern": r"it's worth noting that", "category": AI_PHRASING},
    "in_todays_world": {"pattern": r"in today's (world|society|age)", "category": AI_PHRASING},
    "end_of_the_day": {"pattern": r"at the end of the day", "category": AI_PHRASING},
    "when_it_comes_to": {"pattern": r"when it comes to", "category": AI_PHRASING},
    "in_this_piece": {"pattern": r"in this (article|essay|blog)", "category": AI_PHRASING},
    "first_and_foremost": {"pattern": r"first and foremost", "category": AI_PHRASING},
    "last_but_not_least": {"pattern": r"last but not least", "category": AI_PHRASING},
    "plays_a_role": {"pattern": r"plays a (crucial|vital|important|key) role", "category": AI_PHRASING},
    "in_order_to": {"pattern": r"in order to", "category": AI_PHRASING},
    "due_to_the_fact": {"pattern": r"due to the fact that", "category": AI_PHRASING},
    "goes_without_saying": {"pattern": r"it goes without saying", "category": AI_PHRASING},
    "needless_to_say": {"pattern": r"needless to say", "category": AI_PHRASING},
    "as_we_all_know": {"pattern": r"as we all know", "category": AI_PHRASING},
    "modern_era": {"pattern": r"in the (modern|digital) (era|age)", "category": AI_PHRASING},
    "increasingly": {"pattern": r"has become increasingly", "category": AI_PHRASING},
    "widely_known": {"pattern": r"it is (widely|generally) (known|accepted)", "category": AI_PHRASING},
    "one_of_the_most": {"pattern": r"one of the most (important|significant)", "category": AI_PHRASING},
    "many_ways": {"pattern": r"there are (many|several|numerous) (ways|reasons|factors)", "category": AI_PHRASING},
    # Intensifiers and hedges
    "very_x": {"pattern": r"very\s+\w+", "category": FILLER},
    "really_x": {"pattern": r"really\s+\w+", "category": FILLER},
    "basically": {"pattern": r"basically", "category": FILLER},
    "actually": {"pattern": r"actually", "category": FILLER},
    "literally": {"pattern": r"literally", "category": FILLER},
    "obviously": {"pattern": r"obviously", "category": FILLER},
    "clearly": {"pattern": r"clearly", "category": FILLER},
    "simply_put": {"pattern": r"simply put", "category": FILLER},
    "to_be_honest": {"pattern": r"to be honest", "category": FILLER},
    "in_my_opinion": {"pattern": r"in my opinion", "category": FILLER},
    # Openings, matched at the start of the text only
    "this_essay_will": {"pattern": r"(this|the) (essay|article|paper|blog) (will|is going to)", "category": GENERIC_OPENING},
    "in_this_essay": {"pattern": r"in this (essay|article|paper|blog)", "category": GENERIC_OPENING},
    "throughout_history": {"pattern": r"throughout history", "category": GENERIC_OPENING},
    "dawn_of_time": {"pattern": r"since the (beginning|dawn) of time", "category": GENERIC_OPENING},
    "according_to": {"pattern": r"according to", "category": GENERIC_OPENING},
}

DEFAULT_RULE_SET = RuleSet.from_mapping("1", _DEFAULT_RULES)
