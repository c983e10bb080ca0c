"""Per-(user, project) statistics ledger.

``StatsLedger`` is the only way the workflows read or create
``UserProjectStat`` rows.  Lookups go straight to the composite key; rows are
created lazily with the documented defaults.

Updates to one key are serialised by a process-wide ``KeyedLock``.  Callers
hold ``ledger.locked(user_id, project_id)`` across the whole
read-modify-write *including the commit*::

    with ledger.locked(user_id, project_id), transaction(db):
        stat = ledger.get_or_create(user_id, project_id)
        stat.total_approved += 1

Across processes the unique constraint on ``(user_id, project_id)``, the
``SELECT ... FOR UPDATE`` row lock and the row's ``version`` counter turn a
lost update into an ``IntegrityError`` / ``StaleDataError`` for the caller.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import UserProjectStat

logger = logging.getLogger(__name__)

StatKey = tuple[str, int]


class KeyedLock:
    """A registry of mutexes, one per key, dropped when no longer held."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


_STAT_LOCKS = KeyedLock()


class StatsLedger:
    """Keyed access to ``UserProjectStat`` rows bound to one session."""

    def __init__(self, db_session: Session, locks: KeyedLock | None = None) -> None:
        self.db = db_session
        self.locks = locks if locks is not None else _STAT_LOCKS

    @contextmanager
    def locked(self, user_id: str, project_id: int) -> Iterator[None]:
        """Serialise read-modify-write cycles on ``(user_id, project_id)``."""
        key: StatKey = (user_id, project_id)
        with self.locks.hold(key):
            yield

    def get(self, user_id: str, project_id: int, *, for_update: bool = False) -> UserProjectStat | None:
        """Return the row for ``(user_id, project_id)`` or ``None``."""
        stmt = select(UserProjectStat).where(
            UserProjectStat.user_id == user_id,
            UserProjectStat.project_id == project_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create(self, user_id: str, project_id: int) -> UserProjectStat:
        """Return the row for the key, inserting one with default scores if absent.

        Must be called while holding ``locked(user_id, project_id)``.
        """
        stat = self.get(user_id, project_id, for_update=True)
        if stat is not None:
            return stat

        stat = UserProjectStat(
            user_id=user_id,
            project_id=project_id,
            total_assigned=0,
            total_approved=0,
            total_rejected=0,
            total_reviewed_tasks=0,
            average_quality_score=100.0,
            efficiency_score=100.0,
            estimated_earnings=0.0,
            total_critical_errors=0,
            reviewer_quality_score=100.0,
            total_reviews_done=0,
            total_audited_reviews=0,
            total_correct_decisions=0,
        )
        self.db.add(stat)
        self.db.flush()
        logger.info("Stats row created: user=%s project=%s", user_id, project_id)
        return stat

    def list_for_project(self, project_id: int) -> list[UserProjectStat]:
        """Return every stats row of *project_id*, ordered by user id."""
        stmt = (
            select(UserProjectStat)
            .where(UserProjectStat.project_id == project_id)
            .order_by(UserProjectStat.user_id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())
