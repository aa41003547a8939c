# File: app/routers/issues.py
from fastapi import APIRouter, Depends, Query, UploadFile, File, Request, Form
from typing import List, Optional

from app.core.config import settings
from app.core.ratelimit import limiter
from app.schemas.issue import IssueCreate, IssueOut, IssueStatusPatch, IssueUpdate
from app.services.issue_store import IssueStore, get_store
from app.services.storage import upload_image, make_object_key

router = APIRouter(prefix="/issues", tags=["issues"])


@router.post("", response_model=IssueOut, status_code=201)
@limiter.limit(settings.create_rate_limit)
def create_issue(request: Request, body: IssueCreate, store: IssueStore = Depends(get_store)):
    return store.create(body)


@router.post("/report", response_model=IssueOut, status_code=201)
@limiter.limit(settings.create_rate_limit)
def report_issue(
    request: Request,
    title: str = Form(...),
    description: str = Form(...),
    type: str = Form(...),
    latitude: float = Form(...),
    longitude: float = Form(...),
    reported_by_id: str = Form(...),
    address: Optional[str] = Form(None),
    priority: Optional[str] = Form(None),
    photo: UploadFile | None = File(default=None),
    store: IssueStore = Depends(get_store),
):
    """Citizen report form: the form is validated first, then the optional
    photo is uploaded and the issue is created with its URL."""
    payload = IssueStore.validate({
        "title": title,
        "description": description,
        "type": type,
        "location": {"latitude": latitude, "longitude": longitude, "address": address},
        "reported_by_id": reported_by_id,
        "priority": priority or None,
    })
    if photo is not None and photo.filename:
        data = photo.file.read()
        content_type = photo.content_type or "image/jpeg"
        payload.image_url = upload_image(data, content_type, make_object_key(photo.filename))

    return store.create(payload)


@router.get("", response_model=List[IssueOut])
@limiter.limit(settings.list_rate_limit)
def list_issues(
    request: Request,
    status: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    reported_by_id: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    order: str = Query(default="newest", description="newest | triage"),
    store: IssueStore = Depends(get_store),
):
    flt = {
        "status": status,
        "type": type,
        "priority": priority,
        "reported_by_id": reported_by_id,
        "search": search,
    }
    return store.list(flt, order=order)


@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(issue_id: str, store: IssueStore = Depends(get_store)):
    return store.get_by_id(issue_id)


@router.patch("/{issue_id}/status", response_model=IssueOut)
def update_status(issue_id: str, body: IssueStatusPatch, store: IssueStore = Depends(get_store)):
    return store.update_status(issue_id, body.status)


@router.patch("/{issue_id}", response_model=IssueOut)
def update_issue(issue_id: str, body: IssueUpdate, store: IssueStore = Depends(get_store)):
    # only fields present in the body are applied, in one commit; null clears
    changes = body.model_dump(include=body.model_fields_set)
    return store.update(issue_id, changes)


@router.delete("/{issue_id}")
def delete_issue(issue_id: str, store: IssueStore = Depends(get_store)):
    return {"deleted": store.delete(issue_id)}
