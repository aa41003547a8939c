# File: app/routers/ai.py
from fastapi import APIRouter, File, Request, UploadFile

from app.core.config import settings
from app.core.ratelimit import limiter
from app.schemas.issue import ImageSuggestion
from app.services import ai_analysis
from app.services.storage import check_image

router = APIRouter(prefix="/ai", tags=["ai"])

@router.post("/analyze-image", response_model=ImageSuggestion)
@limiter.limit(settings.analyze_rate_limit)
def analyze_image(request: Request, image: UploadFile = File(...)):
    data = image.file.read()
    content_type = image.content_type or "image/jpeg"
    check_image(data, content_type)
    return ai_analysis.analyze_image(data, content_type)
