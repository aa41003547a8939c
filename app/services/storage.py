# app/services/storage.py
import base64
import logging
import uuid

import requests
from app.core.config import settings
from app.core.errors import UploadError

logger = logging.getLogger(__name__)

MAX_BYTES = 2 * 1024 * 1024
ALLOWED = {"image/jpeg", "image/png", "image/webp", "image/gif"}

def check_image(data: bytes, content_type: str) -> None:
    if not data:
        raise UploadError("Image is empty")
    if content_type not in ALLOWED:
        raise UploadError(f"Unsupported image type: {content_type}")
    if len(data) > MAX_BYTES:
        raise UploadError("Image is larger than 2 MB")

def upload_image(data: bytes, content_type: str, path: str) -> str:
    """Uploads to Supabase Storage via REST; returns public URL (bucket must be public).

    Without Supabase credentials the image is returned inline as a data URL.
    """
    check_image(data, content_type)
    if not (settings.supabase_url and settings.supabase_service_role):
        b64 = base64.b64encode(data).decode("utf-8")
        return f"data:{content_type};base64,{b64}"
    base = settings.supabase_url.rstrip("/")
    bucket = settings.supabase_bucket
    url = f"{base}/storage/v1/object/{bucket}/{path}"
    try:
        r = requests.post(url, headers={
            "Authorization": f"Bearer {settings.supabase_service_role}",
            "Content-Type": content_type,
            "x-upsert": "true",
        }, data=data, timeout=30)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.error("Image upload to %s failed: %s", url, e, exc_info=True)
        raise UploadError("Image upload failed") from e
    # public URL pattern:
    return f"{base}/storage/v1/object/public/{bucket}/{path}"

def make_object_key(filename: str | None) -> str:
    ext = "jpg"
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower() or "jpg"
    return f"reports/{uuid.uuid4().hex}.{ext}"
