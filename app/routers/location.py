# File: app/routers/location.py
from fastapi import APIRouter, Request

from app.schemas.issue import Coordinate
from app.services import geolocation

router = APIRouter(prefix="/location", tags=["location"])

LOCAL_HOSTS = {"127.0.0.1", "::1", "localhost", "testclient"}

@router.get("/current", response_model=Coordinate)
def current_location(request: Request):
    ip = request.client.host if request.client else None
    if ip in LOCAL_HOSTS:
        # let the provider resolve the server's own public address
        ip = None
    return geolocation.get_current_location(ip)

@router.get("/error/{code}")
def describe_location_error(code: int):
    """Translate a browser PositionError code into the API's error payload."""
    return geolocation.location_error_from_code(code).to_dict()
