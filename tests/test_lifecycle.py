"""
Tests for the lifecycle rules: transition table, filtering, search and ordering.
"""

from types import SimpleNamespace

import pytest

from app.core.errors import InvalidTransition
from app.models.issue import IssueStatus
from app.schemas.issue import IssueFilter, IssueOut, Location
from app.services.lifecycle import (
    LifecyclePolicy,
    filter_issues,
    matches_search,
    newest_first,
    triage_order,
)


def make_issue(id, status="Pending", type="Road", reported_at=0, **extra):
    return IssueOut(
        id=id,
        title=extra.pop("title", f"Issue {id}"),
        description=extra.pop("description", "Something is broken"),
        type=type,
        location=Location(latitude=1.0, longitude=2.0, address=extra.pop("address", None)),
        status=status,
        reported_by_id=extra.pop("reported_by_id", "citizen1"),
        reported_at=reported_at,
        **extra,
    )


@pytest.fixture
def mixed():
    return [
        make_issue("a", "Pending", "Road", 60),
        make_issue("b", "InProgress", "Road", 50),
        make_issue("c", "Pending", "Garbage", 40),
        make_issue("d", "Resolved", "Road", 30, resolved_at=35),
        make_issue("e", "Pending", "Road", 20),
        make_issue("f", "Resolved", "Garbage", 10, resolved_at=15),
    ]


# --- transitions ---

@pytest.mark.parametrize("current,new", [
    ("Pending", "InProgress"),
    ("Pending", "Resolved"),
    ("InProgress", "Resolved"),
    ("Pending", "Pending"),
    ("Resolved", "Resolved"),
])
def test_allowed_transitions(current, new):
    assert LifecyclePolicy().allowed(IssueStatus(current), IssueStatus(new))


@pytest.mark.parametrize("current,new", [
    ("InProgress", "Pending"),
    ("Resolved", "Pending"),
    ("Resolved", "InProgress"),
])
def test_disallowed_transitions(current, new):
    policy = LifecyclePolicy()
    assert not policy.allowed(IssueStatus(current), IssueStatus(new))
    with pytest.raises(InvalidTransition):
        policy.check(IssueStatus(current), IssueStatus(new))
    assert LifecyclePolicy(allow_reversion=True).allowed(IssueStatus(current), IssueStatus(new))


def test_apply_keeps_resolved_at_in_step():
    policy = LifecyclePolicy(allow_reversion=True)
    record = SimpleNamespace(status=IssueStatus.pending, resolved_at=None)

    assert policy.apply(record, IssueStatus.resolved, 100) is True
    assert record.resolved_at == 100
    assert policy.apply(record, IssueStatus.resolved, 200) is False
    assert record.resolved_at == 100
    assert policy.apply(record, IssueStatus.in_progress, 300) is True
    assert record.resolved_at is None


def test_apply_rejected_leaves_record_untouched():
    record = SimpleNamespace(status=IssueStatus.resolved, resolved_at=5)
    with pytest.raises(InvalidTransition):
        LifecyclePolicy().apply(record, IssueStatus.pending, 10)
    assert record.status == IssueStatus.resolved
    assert record.resolved_at == 5


# --- filtering ---

def test_filter_is_conjunctive_and_stable(mixed):
    out = filter_issues(mixed, IssueFilter(status="Pending", type="Road"))
    assert [i.id for i in out] == ["a", "e"]


def test_all_disables_a_filter(mixed):
    assert filter_issues(mixed, IssueFilter(status="all", type="all")) == mixed
    assert [i.id for i in filter_issues(mixed, IssueFilter(type="Garbage", status="all"))] == ["c", "f"]


def test_no_filter_returns_everything(mixed):
    assert filter_issues(mixed) == mixed
    assert filter_issues(mixed, IssueFilter()) == mixed


def test_priority_and_reporter_filters():
    issues = [
        make_issue("a", priority="High", reported_by_id="u1"),
        make_issue("b", priority="Low", reported_by_id="u2"),
        make_issue("c", reported_by_id="u1"),
    ]
    assert [i.id for i in filter_issues(issues, IssueFilter(priority="High"))] == ["a"]
    assert [i.id for i in filter_issues(issues, IssueFilter(reported_by_id="u1"))] == ["a", "c"]


# --- search ---

def test_search_is_case_insensitive_on_address():
    issue = make_issue("issue3", address="Oak Ave Bus Stop")
    assert matches_search(issue, "oak ave")
    assert matches_search(issue, "BUS STOP")


@pytest.mark.parametrize("term", ["pothole", "GATE", "issue9", "citizen7"])
def test_search_covers_every_field(term):
    issue = make_issue(
        "issue9",
        title="Pothole",
        description="Near the school gate",
        reported_by_id="citizen7",
    )
    assert matches_search(issue, term)


def test_search_without_address():
    issue = make_issue("x1", title="Broken bench")
    assert not matches_search(issue, "oak")


def test_search_combines_with_other_filters(mixed):
    issues = mixed + [make_issue("g", "Pending", "Road", 5, title="Oak tree down")]
    out = filter_issues(issues, IssueFilter(status="Pending", search="OAK"))
    assert [i.id for i in out] == ["g"]


def test_blank_search_matches_all(mixed):
    assert filter_issues(mixed, IssueFilter(search="   ")) == mixed


# --- ordering ---

def test_newest_first_is_stable():
    issues = [make_issue("x", reported_at=1), make_issue("y", reported_at=5), make_issue("z", reported_at=5)]
    assert [i.id for i in newest_first(issues)] == ["y", "z", "x"]


def test_triage_order():
    issues = [
        make_issue("resolved", "Resolved", reported_at=99, resolved_at=100, priority="High"),
        make_issue("low", priority="Low", reported_at=50),
        make_issue("high", priority="High", reported_at=10),
        make_issue("due-late", priority="Low", due_date=2000, reported_at=1),
        make_issue("due-soon", priority="Low", due_date=1000, reported_at=1),
        make_issue("none-new", reported_at=70),
        make_issue("none-old", reported_at=20),
    ]
    assert [i.id for i in triage_order(issues)] == [
        "due-soon", "due-late", "high", "low", "none-new", "none-old", "resolved",
    ]
