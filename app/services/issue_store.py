# File: app/services/issue_store.py
"""Issue store: owns the issue collection and every mutation applied to it.

Each operation takes the store lock and works inside its own session, so a
reader never sees a half-applied write. Callers only ever receive
``IssueOut`` snapshots, never live ORM rows.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from functools import lru_cache
from typing import Callable, Iterable, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, settings
from app.core.errors import NotFound, ValidationError, describe_errors
from app.db.seed import DEMO_ISSUES
from app.db.session import make_session_factory
from app.models.issue import Issue, IssuePriority, IssueStatus, IssueType
from app.schemas.issue import IssueCreate, IssueFilter, IssueOut, IssueSummary
from app.services.lifecycle import ORDERINGS, LifecyclePolicy, filter_issues

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _coerce(enum_cls, value, field: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}")


class IssueStore:
    def __init__(
        self,
        session_factory: sessionmaker,
        policy: Optional[LifecyclePolicy] = None,
        clock: Optional[Callable[[], int]] = None,
        seed: bool = False,
    ):
        self._session_factory = session_factory
        self._policy = policy or LifecyclePolicy()
        self._clock = clock or now_ms
        self._lock = threading.RLock()
        with self._lock, self._session_factory() as db:
            self._issued_ids: set[str] = set(db.scalars(select(Issue.id)))
        if seed:
            self.seed(DEMO_ISSUES)

    @classmethod
    def from_settings(cls, cfg: Settings = settings, **kwargs) -> "IssueStore":
        kwargs.setdefault("policy", LifecyclePolicy(allow_reversion=cfg.allow_status_reversion))
        kwargs.setdefault("seed", cfg.seed_demo_data)
        return cls(make_session_factory(cfg.database_url), **kwargs)

    @classmethod
    def in_memory(cls, **kwargs) -> "IssueStore":
        return cls(make_session_factory("sqlite+pysqlite:///:memory:"), **kwargs)

    @property
    def policy(self) -> LifecyclePolicy:
        return self._policy

    # --------- helpers ---------

    def _new_id(self) -> str:
        while True:
            issue_id = f"issue{self._clock()}{uuid.uuid4().hex[:8]}"
            if issue_id not in self._issued_ids:
                return issue_id

    @staticmethod
    def _get(db: Session, issue_id: str) -> Issue:
        obj = db.scalar(select(Issue).where(Issue.id == issue_id))
        if obj is None:
            raise NotFound(issue_id)
        return obj

    @staticmethod
    def validate(data: Union[IssueCreate, dict]) -> IssueCreate:
        if isinstance(data, IssueCreate):
            data = data.model_dump()
        try:
            return IssueCreate.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(describe_errors(e.errors())) from e

    # --------- operations ---------

    def seed(self, rows: Iterable[dict]) -> int:
        """Insert fixed-id rows, skipping ids already known. All or nothing."""
        new_ids: list[str] = []
        with self._lock, self._session_factory() as db:
            for row in rows:
                if row["id"] in self._issued_ids or row["id"] in new_ids:
                    continue
                status = _coerce(IssueStatus, row.get("status", "Pending"), "status")
                if (status == IssueStatus.resolved) != (row.get("resolved_at") is not None):
                    raise ValidationError(f"Issue {row['id']}: resolved_at must be set exactly when status is Resolved")
                db.add(Issue(
                    id=row["id"],
                    title=row["title"],
                    description=row["description"],
                    type=_coerce(IssueType, row["type"], "type"),
                    status=status,
                    priority=_coerce(IssuePriority, row.get("priority"), "priority"),
                    lat=row["lat"],
                    lng=row["lng"],
                    address=row.get("address"),
                    reported_by_id=row["reported_by_id"],
                    reported_at=row["reported_at"],
                    resolved_at=row.get("resolved_at"),
                    due_date=row.get("due_date"),
                    assigned_to=row.get("assigned_to"),
                    image_url=row.get("image_url"),
                ))
                new_ids.append(row["id"])
            db.commit()
            self._issued_ids.update(new_ids)
        logger.info("Seeded %d issues", len(new_ids))
        return len(new_ids)

    def create(self, data: Union[IssueCreate, dict]) -> IssueOut:
        payload = self.validate(data)
        with self._lock, self._session_factory() as db:
            issue_id = self._new_id()
            obj = Issue(
                id=issue_id,
                title=payload.title,
                description=payload.description,
                type=payload.type,
                status=IssueStatus.pending,
                priority=payload.priority,
                lat=payload.location.latitude,
                lng=payload.location.longitude,
                address=payload.location.address or None,
                reported_by_id=payload.reported_by_id,
                reported_at=self._clock(),
                resolved_at=None,
                due_date=payload.due_date,
                image_url=payload.image_url,
            )
            db.add(obj)
            db.commit()
            self._issued_ids.add(issue_id)
            logger.info("Created issue %s (%s) for %s", issue_id, payload.type.value, payload.reported_by_id)
            return IssueOut.from_model(obj)

    def list(self, flt: Union[IssueFilter, dict, None] = None, order: str = "newest") -> list[IssueOut]:
        if isinstance(flt, dict):
            try:
                flt = IssueFilter.model_validate(flt)
            except PydanticValidationError as e:
                raise ValidationError(describe_errors(e.errors())) from e
        sorter = ORDERINGS.get(order)
        if sorter is None:
            raise ValidationError(f"Invalid order: {order!r}")
        with self._lock, self._session_factory() as db:
            rows = db.scalars(select(Issue).order_by(Issue.seq)).all()
            snapshot = [IssueOut.from_model(r) for r in rows]
        return sorter(filter_issues(snapshot, flt))

    def get_by_id(self, issue_id: str) -> IssueOut:
        with self._lock, self._session_factory() as db:
            return IssueOut.from_model(self._get(db, issue_id))

    def update_status(self, issue_id: str, new_status: Union[IssueStatus, str]) -> IssueOut:
        new = _coerce(IssueStatus, new_status, "status")
        if new is None:
            raise ValidationError("status is required")
        with self._lock, self._session_factory() as db:
            obj = self._get(db, issue_id)
            old = obj.status
            if self._policy.apply(obj, new, self._clock()):
                db.commit()
                logger.info("Issue %s status %s -> %s", issue_id, old.value, new.value)
            return IssueOut.from_model(obj)

    @staticmethod
    def _clean_changes(changes: dict) -> dict:
        unknown = set(changes) - {"assigned_to", "priority", "due_date"}
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        clean = {}
        if "assigned_to" in changes:
            assignee = changes["assigned_to"]
            if assignee is not None:
                assignee = assignee.strip() or None
            if assignee is not None and len(assignee) > 120:
                raise ValidationError("assigned_to: must be at most 120 characters")
            clean["assigned_to"] = assignee
        if "priority" in changes:
            clean["priority"] = _coerce(IssuePriority, changes["priority"], "priority")
        if "due_date" in changes:
            due_date = changes["due_date"]
            if due_date is not None and (isinstance(due_date, bool) or not isinstance(due_date, int) or due_date < 0):
                raise ValidationError("due_date: must be a non-negative epoch milliseconds integer")
            clean["due_date"] = due_date
        return clean

    def update(self, issue_id: str, changes: dict) -> IssueOut:
        """Apply assigned_to / priority / due_date together in one commit.

        Every value is checked before anything is written, so a bad field
        leaves the issue untouched.
        """
        clean = self._clean_changes(changes)
        with self._lock, self._session_factory() as db:
            obj = self._get(db, issue_id)
            if clean:
                for field, value in clean.items():
                    setattr(obj, field, value)
                db.commit()
                logger.info("Issue %s updated: %s", issue_id, ", ".join(sorted(clean)))
            return IssueOut.from_model(obj)

    def update_assignment(self, issue_id: str, assignee: Optional[str]) -> IssueOut:
        return self.update(issue_id, {"assigned_to": assignee})

    def update_priority(self, issue_id: str, priority: Union[IssuePriority, str, None]) -> IssueOut:
        return self.update(issue_id, {"priority": priority})

    def update_due_date(self, issue_id: str, due_date: Optional[int]) -> IssueOut:
        return self.update(issue_id, {"due_date": due_date})

    def delete(self, issue_id: str) -> bool:
        with self._lock, self._session_factory() as db:
            obj = db.scalar(select(Issue).where(Issue.id == issue_id))
            if obj is None:
                return False
            db.delete(obj)
            db.commit()
            logger.info("Deleted issue %s", issue_id)
            return True

    def summary(self, reported_by_id: Optional[str] = None) -> IssueSummary:
        issues = self.list(IssueFilter(reported_by_id=reported_by_id))
        by_type = {t.value: 0 for t in IssueType}
        for i in issues:
            by_type[i.type.value] += 1
        return IssueSummary(
            total=len(issues),
            pending=sum(1 for i in issues if i.status == IssueStatus.pending),
            in_progress=sum(1 for i in issues if i.status == IssueStatus.in_progress),
            resolved=sum(1 for i in issues if i.status == IssueStatus.resolved),
            by_type=by_type,
        )

    def __len__(self) -> int:
        with self._lock, self._session_factory() as db:
            return db.scalar(select(func.count()).select_from(Issue)) or 0


@lru_cache
def get_store() -> IssueStore:
    return IssueStore.from_settings(settings)
