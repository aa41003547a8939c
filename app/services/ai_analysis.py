# app/services/ai_analysis.py
import json
import logging
import re

import google.generativeai as genai
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.errors import AnalysisError
from app.models.issue import IssueType
from app.schemas.issue import ImageSuggestion

logger = logging.getLogger(__name__)

ISSUE_TYPES = [t.value for t in IssueType]
MAX_TITLE = 50
MAX_DESCRIPTION = 150

PROMPT = f"""Analyze the provided image of a potential civic issue. Based only on the visual content of the image, determine the most appropriate category from the following types: {", ".join(ISSUE_TYPES)}.

Also, provide a concise title (max {MAX_TITLE} chars) and a brief description (max {MAX_DESCRIPTION} chars) summarizing the issue shown in the image. Focus on what is visually evident.

Return JSON:
{{
  "detectedType": "{"|".join(ISSUE_TYPES)}",
  "suggestedTitle": string,
  "suggestedDescription": string
}}
"""

_MODEL = None

def _get_model():
    global _MODEL
    if _MODEL is not None:
        return _MODEL
    if not settings.gemini_api_key:
        raise AnalysisError("Image analysis is not configured")
    genai.configure(api_key=settings.gemini_api_key)
    _MODEL = genai.GenerativeModel(settings.gemini_model)
    return _MODEL

def parse_suggestion(text: str) -> ImageSuggestion:
    match = re.search(r"\{[\s\S]*\}", text or "")
    if not match:
        raise AnalysisError("AI analysis failed to produce an output.")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisError("AI analysis returned malformed output.") from e

    detected = str(parsed.get("detectedType") or "").strip().title()
    if detected not in ISSUE_TYPES:
        logger.info("Unknown detected type %r, using Other", detected)
        detected = IssueType.other.value
    try:
        return ImageSuggestion(
            detected_type=detected,
            suggested_title=str(parsed.get("suggestedTitle") or "").strip()[:MAX_TITLE],
            suggested_description=str(parsed.get("suggestedDescription") or "").strip()[:MAX_DESCRIPTION],
        )
    except PydanticValidationError as e:
        raise AnalysisError("AI analysis returned malformed output.") from e

def analyze_image(data: bytes, mime_type: str) -> ImageSuggestion:
    """Ask Gemini for a type/title/description suggestion for an issue photo."""
    if not data:
        raise AnalysisError("No image provided")
    model = _get_model()
    try:
        response = model.generate_content(
            [PROMPT, {"mime_type": mime_type, "data": data}],
            generation_config={"response_mime_type": "application/json"},
        )
        text = response.text
    except Exception as e:
        logger.error("Gemini image analysis failed: %s", e, exc_info=True)
        raise AnalysisError("AI analysis failed. Please fill in the details manually.") from e
    return parse_suggestion(text)
