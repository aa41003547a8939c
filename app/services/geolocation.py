# app/services/geolocation.py
"""Current-location lookup for issue reports.

Browsers report coordinates themselves; when they can't, the client may send
the PositionError code it got, or fall back to an IP based lookup here. Both
paths end in the same ``LocationError`` reasons.
"""
import logging
from typing import Optional

import requests

from app.core.config import settings
from app.core.errors import LocationError, LocationErrorKind
from app.schemas.issue import Coordinate

logger = logging.getLogger(__name__)

MESSAGES = {
    LocationErrorKind.permission_denied: "Location permission denied. Please enable it in your browser settings.",
    LocationErrorKind.unavailable: "Location information is unavailable.",
    LocationErrorKind.timeout: "The request to get user location timed out.",
}

# W3C GeolocationPositionError codes
BROWSER_CODES = {
    1: LocationErrorKind.permission_denied,
    2: LocationErrorKind.unavailable,
    3: LocationErrorKind.timeout,
}

def location_error_from_code(code: int) -> LocationError:
    reason = BROWSER_CODES.get(code, LocationErrorKind.unknown)
    message = MESSAGES.get(reason) or f"An unknown error occurred (Code: {code})."
    return LocationError(reason, message)

def _fail(reason: LocationErrorKind, message: Optional[str] = None) -> LocationError:
    return LocationError(reason, message or MESSAGES.get(reason, "Failed to retrieve location."))

def get_current_location(ip: Optional[str] = None) -> Coordinate:
    url = settings.geolocation_url
    if ip:
        url = url.rstrip("/") + "/" + ip
    try:
        r = requests.get(url, timeout=settings.geolocation_timeout)
    except requests.Timeout as e:
        logger.warning("Geolocation lookup timed out: %s", e)
        raise _fail(LocationErrorKind.timeout) from e
    except requests.ConnectionError as e:
        logger.warning("Geolocation service unreachable: %s", e)
        raise _fail(LocationErrorKind.unavailable) from e
    except requests.RequestException as e:
        logger.error("Geolocation lookup failed: %s", e, exc_info=True)
        raise _fail(LocationErrorKind.unknown, "Failed to retrieve location.") from e

    if r.status_code in (401, 403):
        raise _fail(LocationErrorKind.permission_denied)
    if r.status_code >= 400:
        raise _fail(LocationErrorKind.unavailable)

    try:
        body = r.json()
    except ValueError as e:
        raise _fail(LocationErrorKind.unknown, "Failed to retrieve location.") from e

    if body.get("status") == "fail":
        raise _fail(LocationErrorKind.unavailable)
    lat = body.get("lat", body.get("latitude"))
    lng = body.get("lon", body.get("lng", body.get("longitude")))
    if lat is None or lng is None:
        raise _fail(LocationErrorKind.unavailable)
    return Coordinate(latitude=float(lat), longitude=float(lng))
