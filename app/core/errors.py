# File: app/core/errors.py
"""Error kinds raised by the issue core and its collaborators.

Every error carries a stable ``kind`` string and a human readable message so
callers can branch on the kind and show the message as-is.
"""
from __future__ import annotations

import logging
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class ValidationError(AppError):
    """Missing or malformed input fields."""
    kind = "validation_error"
    status_code = 400


class NotFound(AppError):
    kind = "not_found"
    status_code = 404

    def __init__(self, issue_id: str):
        super().__init__(f"Issue {issue_id} not found")
        self.issue_id = issue_id


class InvalidTransition(AppError):
    kind = "invalid_transition"
    status_code = 409

    def __init__(self, current, requested):
        cur = getattr(current, "value", current)
        req = getattr(requested, "value", requested)
        super().__init__(f"Cannot change status from {cur} to {req}")
        self.current = current
        self.requested = requested


class LocationErrorKind(str, Enum):
    permission_denied = "PermissionDenied"
    unavailable = "Unavailable"
    timeout = "Timeout"
    unknown = "Unknown"


class LocationError(AppError):
    kind = "location_error"
    status_code = 503

    def __init__(self, reason: LocationErrorKind, message: str):
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["reason"] = self.reason.value
        return out


class UploadError(AppError):
    kind = "upload_error"
    status_code = 502


class AnalysisError(AppError):
    kind = "analysis_error"
    status_code = 502


def describe_errors(errors) -> str:
    """Flatten pydantic error dicts into ``loc: msg; loc: msg``."""
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or "Invalid input"


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # same payload and status as a ValidationError raised by the store
    err = ValidationError(describe_errors(exc.errors()))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
