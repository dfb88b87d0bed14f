# Points, levels and one-time badges attached to a user record.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Union

logger = logging.getLogger(__name__)


class LedgerError(ValueError):
    """Raised for point deltas or scores the ledger refuses to apply."""


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Badge:
    name: str
    description: str
    icon: str
    earned_at: datetime

    def to_payload(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "earned_at": self.earned_at.isoformat(),
        }


@dataclass
class LedgerState:
    """Gamification fields of a user.

    ``level`` is derived from ``points`` and is rewritten on every award; it is
    stored only so it can be read without recomputation.
    """

    points: int = 0
    level: int = 1
    badges: list[Badge] = field(default_factory=list)
    total_assignments_evaluated: int = 0
    total_blogs_published: int = 0
    average_score: float = 0.0

    def has_badge(self, name: str) -> bool:
        return any(b.name == name for b in self.badges)

    def copy(self) -> LedgerState:
        return replace(self, badges=list(self.badges))

    def to_payload(self) -> dict[str, object]:
        return {
            "points": self.points,
            "level": self.level,
            "badges": [b.to_payload() for b in self.badges],
            "total_assignments_evaluated": self.total_assignments_evaluated,
            "total_blogs_published": self.total_blogs_published,
            "average_score": self.average_score,
        }


@dataclass(frozen=True)
class PointPolicy:
    """Award amounts used by the calling workflow."""

    points_per_level: int = 100
    assignment_base_points: int = 10
    blog_publication_points: int = 20
    min_score: float = 0.0
    max_score: float = 10.0


DEFAULT_POLICY = PointPolicy()


def level_for_points(points: int, points_per_level: int = DEFAULT_POLICY.points_per_level) -> int:
    return points // points_per_level + 1


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BadgeRule:
    name: str
    description: str
    icon: str
    qualifies: Callable[[LedgerState], bool]

    def grant(self, now: datetime) -> Badge:
        return Badge(name=self.name, description=self.description, icon=self.icon, earned_at=now)


BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule("First Evaluation", "Completed your first assignment evaluation", "\U0001f3af",
              lambda s: s.total_assignments_evaluated >= 1),
    BadgeRule("Dedicated Learner", "Evaluated 10 assignments", "\U0001f4da",
              lambda s: s.total_assignments_evaluated >= 10),
    BadgeRule("Writing Master", "Evaluated 50 assignments", "\u2728",
              lambda s: s.total_assignments_evaluated >= 50),
    BadgeRule("Excellence", "Maintained average score of 8+", "\U0001f3c6",
              lambda s: s.average_score >= 8 and s.total_assignments_evaluated >= 5),
    BadgeRule("First Blog", "Published your first blog", "\u270d\ufe0f",
              lambda s: s.total_blogs_published >= 1),
    BadgeRule("Prolific Writer", "Published 10 blogs", "\U0001f4dd",
              lambda s: s.total_blogs_published >= 10),
)


def add_points(
    state: LedgerState,
    points_to_add: int,
    reason: str,
    now: datetime | None = None,
    policy: PointPolicy | None = None,
) -> list[Badge]:
    """Award points, recompute the level and grant any newly earned badges.

    Mutates ``state``. Counters the badge rules read (evaluations, blogs,
    average score) must already reflect the activity being rewarded.

    Args:
        state: The user's ledger state.
        points_to_add: Non-negative integer delta. Zero is allowed and simply
            re-checks level and badges.
        reason: Free-form audit label; only logged.
        now: Grant timestamp for new badges. Defaults to the current UTC time.
        policy: Optional award policy; only ``points_per_level`` is read here.

    Returns:
        The badges granted by this call, in rule order.

    Raises:
        LedgerError: If ``points_to_add`` is negative or not an integer.
    """
    if isinstance(points_to_add, bool) or not isinstance(points_to_add, int):
        raise LedgerError(f"points_to_add must be an integer, got {points_to_add!r}")
    if points_to_add < 0:
        raise LedgerError(f"points_to_add must be non-negative, got {points_to_add}")

    pol = policy or DEFAULT_POLICY
    state.points += points_to_add
    state.level = level_for_points(state.points, pol.points_per_level)

    granted_at = now or datetime.now(timezone.utc)
    granted = [rule.grant(granted_at) for rule in BADGE_RULES if not state.has_badge(rule.name) and rule.qualifies(state)]
    state.badges.extend(granted)

    logger.info(f"+{points_to_add} points ({reason}): total={state.points} level={state.level}")
    for badge in granted:
        logger.info(f"   badge granted: {badge.name}")
    return granted


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AssignmentEvaluated:
    score: float
    reason: str = "Assignment evaluation"


@dataclass(frozen=True)
class BlogPublished:
    reason: str = "Blog published"


LedgerEvent = Union[AssignmentEvaluated, BlogPublished]


@dataclass(frozen=True)
class LedgerTransaction:
    """Outcome of applying one event: the prior state, the new state and the delta."""

    prior: LedgerState
    state: LedgerState
    points_awarded: int
    granted_badges: tuple[Badge, ...]
    reason: str

    def to_payload(self) -> dict[str, object]:
        return {
            "points_earned": self.points_awarded,
            "total_points": self.state.points,
            "level": self.state.level,
            "new_badges": [b.to_payload() for b in self.granted_badges],
            "reason": self.reason,
        }


def _validate_score(score: float, policy: PointPolicy) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise LedgerError(f"score must be a number, got {score!r}")
    if not math.isfinite(score) or not policy.min_score <= score <= policy.max_score:
        raise LedgerError(f"score must be within [{policy.min_score}, {policy.max_score}], got {score}")
    return float(score)


def apply_event(
    state: LedgerState,
    event: LedgerEvent,
    policy: PointPolicy | None = None,
    now: datetime | None = None,
) -> LedgerTransaction:
    """Apply ``event`` to a copy of ``state``.

    Counter updates and the point award happen together here, so the badge
    rules always see counters that include the event being rewarded. The input
    state is left untouched.
    """
    pol = policy or DEFAULT_POLICY
    working = state.copy()

    if isinstance(event, AssignmentEvaluated):
        score = _validate_score(event.score, pol)
        working.total_assignments_evaluated += 1
        n = working.total_assignments_evaluated
        working.average_score = (working.average_score * (n - 1) + score) / n
        points = pol.assignment_base_points + math.floor(score)
    elif isinstance(event, BlogPublished):
        working.total_blogs_published += 1
        points = pol.blog_publication_points
    else:
        raise LedgerError(f"unsupported ledger event {event!r}")

    granted = add_points(working, points, event.reason, now=now, policy=pol)
    return LedgerTransaction(
        prior=state,
        state=working,
        points_awarded=points,
        granted_badges=tuple(granted),
        reason=event.reason,
    )
