# File: app/models/issue.py
from __future__ import annotations
from enum import Enum as PyEnum
from sqlalchemy import String, Float, Enum, BigInteger, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base

class IssueStatus(str, PyEnum):
    pending = "Pending"
    in_progress = "InProgress"
    resolved = "Resolved"

class IssueType(str, PyEnum):
    road = "Road"
    garbage = "Garbage"
    streetlight = "Streetlight"
    park = "Park"
    other = "Other"

class IssuePriority(str, PyEnum):
    low = "Low"
    medium = "Medium"
    high = "High"

def _values(enum_cls):
    return [m.value for m in enum_cls]

class Issue(Base):
    __tablename__ = "issues"

    # insertion order; ids are opaque strings so they can't be used for ordering
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(100), index=True)
    description: Mapped[str] = mapped_column(String(500))
    type: Mapped[IssueType] = mapped_column(Enum(IssueType, values_callable=_values), index=True)
    status: Mapped[IssueStatus] = mapped_column(
        Enum(IssueStatus, values_callable=_values), default=IssueStatus.pending, index=True
    )
    priority: Mapped[IssuePriority | None] = mapped_column(
        Enum(IssuePriority, values_callable=_values), nullable=True
    )

    lat: Mapped[float] = mapped_column(Float)
    lng: Mapped[float] = mapped_column(Float)
    address: Mapped[str | None] = mapped_column(String(300), nullable=True)

    reported_by_id: Mapped[str] = mapped_column(String(120), index=True)
    assigned_to: Mapped[str | None] = mapped_column(String(120), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)

    # epoch milliseconds
    reported_at: Mapped[int] = mapped_column(BigInteger, index=True)
    resolved_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    due_date: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

Index("ix_issues_lat_lng", Issue.lat, Issue.lng)
