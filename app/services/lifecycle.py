# File: app/services/lifecycle.py
"""Issue lifecycle rules.

Status transitions and the timestamps they derive, plus the pure
filter/search/ordering helpers applied to issue snapshots before they reach a
caller.
"""
from __future__ import annotations

from typing import Iterable, Optional

from app.core.errors import InvalidTransition
from app.models.issue import IssuePriority, IssueStatus
from app.schemas.issue import IssueFilter, IssueOut

FORWARD_TRANSITIONS: dict[IssueStatus, frozenset[IssueStatus]] = {
    IssueStatus.pending: frozenset({IssueStatus.in_progress, IssueStatus.resolved}),
    IssueStatus.in_progress: frozenset({IssueStatus.resolved}),
    IssueStatus.resolved: frozenset(),
}

PRIORITY_RANK = {
    IssuePriority.high: 0,
    IssuePriority.medium: 1,
    IssuePriority.low: 2,
}


class LifecyclePolicy:
    def __init__(self, allow_reversion: bool = False):
        self.allow_reversion = allow_reversion

    def allowed(self, current: IssueStatus, new: IssueStatus) -> bool:
        if current == new or self.allow_reversion:
            return True
        return new in FORWARD_TRANSITIONS[current]

    def check(self, current: IssueStatus, new: IssueStatus) -> None:
        if not self.allowed(current, new):
            raise InvalidTransition(current, new)

    def apply(self, issue, new: IssueStatus, now_ms: int) -> bool:
        """Move ``issue`` (anything with status/resolved_at) to ``new``.

        Returns False when the status is unchanged; resolved_at is then left
        alone so re-resolving never restamps it.
        """
        self.check(issue.status, new)
        if issue.status == new:
            return False
        issue.status = new
        if new == IssueStatus.resolved:
            issue.resolved_at = now_ms
        else:
            issue.resolved_at = None
        return True


def _is_all(value) -> bool:
    return value is None or value == "all"


def matches_search(issue: IssueOut, term: str) -> bool:
    needle = term.lower()
    fields = [issue.title, issue.description, issue.id, issue.reported_by_id]
    if issue.location.address:
        fields.append(issue.location.address)
    return any(needle in f.lower() for f in fields)


def matches(issue: IssueOut, flt: IssueFilter) -> bool:
    if not _is_all(flt.status) and issue.status != flt.status:
        return False
    if not _is_all(flt.type) and issue.type != flt.type:
        return False
    if not _is_all(flt.priority) and issue.priority != flt.priority:
        return False
    if flt.reported_by_id and issue.reported_by_id != flt.reported_by_id:
        return False
    if flt.search and flt.search.strip() and not matches_search(issue, flt.search.strip()):
        return False
    return True


def filter_issues(issues: Iterable[IssueOut], flt: Optional[IssueFilter] = None) -> list[IssueOut]:
    if flt is None:
        return list(issues)
    return [i for i in issues if matches(i, flt)]


def newest_first(issues: Iterable[IssueOut]) -> list[IssueOut]:
    return sorted(issues, key=lambda i: i.reported_at, reverse=True)


def _triage_key(issue: IssueOut):
    resolved = issue.status == IssueStatus.resolved
    due = issue.due_date if issue.due_date is not None else float("inf")
    rank = PRIORITY_RANK.get(issue.priority, len(PRIORITY_RANK))
    return (resolved, due, rank, -issue.reported_at)


def triage_order(issues: Iterable[IssueOut]) -> list[IssueOut]:
    """Open issues first, then earliest due date, highest priority, newest."""
    return sorted(issues, key=_triage_key)


ORDERINGS = {
    "newest": newest_first,
    "triage": triage_order,
}
