"""Per-user serialized access to ledger state.

Every mutation for a given user runs under that user's lock, from reading the
stored state to persisting the result, so concurrent awards for one user can
neither lose points nor grant a badge twice. The lock is owned by the store,
so services sharing a store also share it. Users never share a lock.
"""

from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from quill_guard.ledger import (
    DEFAULT_POLICY,
    AssignmentEvaluated,
    BlogPublished,
    LedgerEvent,
    LedgerState,
    LedgerTransaction,
    PointPolicy,
    apply_event,
)

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    """Persistence for ledger states and the ids of events already applied.

    ``lock(user_id)`` must serialize every holder for that user id, including
    holders in other ``LedgerService`` instances using the same store.
    """

    def lock(self, user_id: str) -> ContextManager[None]: ...

    def get(self, user_id: str) -> LedgerState | None: ...

    def put(self, user_id: str, state: LedgerState) -> None: ...

    def has_event(self, user_id: str, event_id: str) -> bool: ...

    def mark_event(self, user_id: str, event_id: str) -> None: ...


class _UserLock:
    __slots__ = ("mutex", "__weakref__")

    def __init__(self) -> None:
        self.mutex = threading.Lock()


class InMemoryLedgerStore:
    def __init__(self) -> None:
        self._states: dict[str, LedgerState] = {}
        self._events: dict[str, set[str]] = {}
        self._lock = threading.Lock()
        # Entries disappear once no caller holds or waits on them.
        self._user_locks: weakref.WeakValueDictionary[str, _UserLock] = weakref.WeakValueDictionary()

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        with self._lock:
            user_lock = self._user_locks.get(user_id)
            if user_lock is None:
                user_lock = self._user_locks[user_id] = _UserLock()
        with user_lock.mutex:
            yield

    def get(self, user_id: str) -> LedgerState | None:
        with self._lock:
            state = self._states.get(user_id)
            return state.copy() if state is not None else None

    def put(self, user_id: str, state: LedgerState) -> None:
        with self._lock:
            self._states[user_id] = state.copy()

    def has_event(self, user_id: str, event_id: str) -> bool:
        with self._lock:
            return event_id in self._events.get(user_id, ())

    def mark_event(self, user_id: str, event_id: str) -> None:
        with self._lock:
            self._events.setdefault(user_id, set()).add(event_id)


class LedgerService:
    """Records qualifying activity for users, one writer per user id."""

    def __init__(self, store: LedgerStore | None = None, policy: PointPolicy | None = None) -> None:
        self.store = store if store is not None else InMemoryLedgerStore()
        self.policy = policy or DEFAULT_POLICY

    def _load_or_create(self, user_id: str) -> LedgerState:
        state = self.store.get(user_id)
        if state is None:
            state = LedgerState()
            self.store.put(user_id, state)
            logger.debug(f"created ledger for user {user_id!r}")
        return state

    def ensure_user(self, user_id: str) -> LedgerState:
        """Return the user's ledger, creating an empty one on first sight."""
        with self.store.lock(user_id):
            return self._load_or_create(user_id)

    def get(self, user_id: str) -> LedgerState | None:
        return self.store.get(user_id)

    def record(self, user_id: str, event: LedgerEvent, event_id: str | None = None) -> LedgerTransaction:
        """Apply ``event`` to the user's ledger and persist the result.

        When ``event_id`` was already recorded for this user nothing changes and
        the returned transaction awards zero points and no badges.
        """
        with self.store.lock(user_id):
            state = self._load_or_create(user_id)
            if event_id is not None and self.store.has_event(user_id, event_id):
                logger.info(f"event {event_id!r} already applied for user {user_id!r}; skipping")
                return LedgerTransaction(prior=state, state=state, points_awarded=0, granted_badges=(), reason=event.reason)

            txn = apply_event(state, event, policy=self.policy)
            self.store.put(user_id, txn.state)
            if event_id is not None:
                self.store.mark_event(user_id, event_id)
            return txn

    def record_assignment_evaluation(
        self,
        user_id: str,
        score: float,
        event_id: str | None = None,
        reason: str = "Assignment evaluation",
    ) -> LedgerTransaction:
        return self.record(user_id, AssignmentEvaluated(score=score, reason=reason), event_id)

    def record_blog_publication(self, user_id: str, event_id: str | None = None) -> LedgerTransaction:
        return self.record(user_id, BlogPublished(), event_id)
