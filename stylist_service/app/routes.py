"""
API Routes for Stylist Service v3.0.0
Thin ingress over the recommendation pipeline.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends

from stylist_service.core.orchestrator import Orchestrator
from stylist_service.core.validation import (
    ValidationError,
    validate_image_upload,
    validate_recommend_request,
    parse_context_blob,
)
from stylist_service.config import get_provider_status, get_settings
from stylist_service.observability import get_metrics, is_logging_enabled

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "3.0.0"

_orchestrator: Optional[Orchestrator] = None


def get_orchestrator() -> Orchestrator:
    """Shared orchestrator (lazy singleton)."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = Orchestrator()
    return _orchestrator


# ==================== PUBLIC ENDPOINTS ====================

@router.get("/api/health")
async def health_check():
    """Health check with provider and observability info."""
    metrics = get_metrics()
    return {
        "status": "ok",
        "version": VERSION,
        "providers": get_provider_status(),
        "settings": get_settings().to_dict(),
        "observability": {
            "logging_enabled": is_logging_enabled(),
            "total_requests": metrics["total_requests"],
            "fallbacks_by_stage": metrics["fallbacks_by_stage"],
        },
    }


@router.get("/metrics")
async def metrics():
    """Metrics snapshot."""
    return get_metrics()


# ==================== STYLIST ====================

@router.post("/api/stylist/recommend")
async def recommend_outfit(
    images: Optional[List[UploadFile]] = File(None, description="Garment photos (0-10)"),
    message: Optional[str] = Form(None, description="Free-text request"),
    location: Optional[str] = Form(None, description="City for weather and trends"),
    occasion: Optional[str] = Form(None, description="formal | business | casual | party"),
    context: Optional[str] = Form(None, description="Optional JSON object with location/occasion/country"),
    orchestrator: Orchestrator = Depends(get_orchestrator)
):
    """
    Generate an outfit recommendation.

    Form Parameters:
        - images: garment photos, repeated field
        - message: what the user wants help with
        - location: city name (e.g., Paris, Tokyo)
        - occasion: formal | business | casual | party
        - context: JSON blob; explicit form fields take precedence
    """
    uploads = images or []

    try:
        validate_recommend_request(len(uploads), message)
        extra = parse_context_blob(context)

        inputs = []
        for upload in uploads:
            content = await upload.read()
            inputs.append(validate_image_upload(content, upload.content_type, upload.filename))
    except ValidationError as ve:
        raise HTTPException(status_code=ve.status_code, detail=ve.message)

    request_context = {
        "location": location or extra.get("location"),
        "occasion": occasion or extra.get("occasion"),
        "country": extra.get("country"),
    }

    try:
        response = await orchestrator.orchestrate(inputs, message=message, context=request_context)
    except Exception as e:
        logger.error(f"Recommendation pipeline failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return {"success": True, **response.to_dict()}


@router.get("/api/stylist/sessions/{request_id}")
async def get_session(request_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Stored recommendation for a request id."""
    stored = orchestrator.get_session(request_id)
    if stored is None:
        raise HTTPException(status_code=404, detail=f"Session {request_id} not found")
    return stored
