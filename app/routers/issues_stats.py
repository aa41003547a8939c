# app/routers/issues_stats.py
from fastapi import APIRouter, Depends, Query
from typing import Optional
from app.schemas.issue import IssueSummary
from app.services.issue_store import IssueStore, get_store

router = APIRouter(prefix="/issues/stats", tags=["issues:stats"])

@router.get("/summary", response_model=IssueSummary)
def summary(reported_by_id: Optional[str] = Query(None), store: IssueStore = Depends(get_store)):
    return store.summary(reported_by_id=reported_by_id)
