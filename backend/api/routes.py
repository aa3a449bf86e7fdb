"""
REST API Routes

FastAPI routes for golf swing analysis.
Handles HTTP requests carrying pose frames and returns swing analyses.
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException

from .schemas import (
    AnalyzeFramesRequest,
    AnalysisResponse,
    HealthResponse,
    SwingMistakeSchema,
)
from core.domain.mistakes import SWING_MISTAKES
from core.services import SwingAnalyzer
from core.services.detectors import ALL_DETECTORS

API_VERSION = "1.0.0"

# Configure logging
logger = logging.getLogger(__name__)

# Engine traces go through the application's logging configuration
analyzer = SwingAnalyzer(logger=logging.getLogger("core.engine"))

# Create router
router = APIRouter()

# =============================================================================
# Health Check
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check endpoint"
)
async def health_check() -> HealthResponse:
    """
    Check if the API is running.

    Returns:
        Health status, version and the number of registered detectors
    """
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        detectors=len(ALL_DETECTORS),
    )


# =============================================================================
# Swing Analysis
# =============================================================================

@router.post(
    "/analysis/frames",
    response_model=AnalysisResponse,
    response_model_by_alias=True,
    tags=["Swing Analysis"],
    summary="Analyze a golf swing from pose frames"
)
def analyze_frames(request: AnalyzeFramesRequest) -> AnalysisResponse:
    """
    Analyze a golf swing from pose frames detected by the client.

    The frames are:
    1. Classified by camera angle and club type
    2. Split into swing phases
    3. Measured, scored and checked for common faults

    Args:
        request: Video id, time-ordered frames and an optional club choice

    Returns:
        Complete swing analysis
    """
    try:
        frames = [frame.to_domain() for frame in request.frames]
        override = request.club_type_override.value if request.club_type_override else None

        result = analyzer.analyze(frames, video_id=request.video_id, club_type_override=override)
        logger.info(
            f"Analyzed {request.video_id}: {len(frames)} frames, score {result.overall_score}"
        )
        return AnalysisResponse.model_validate(result.to_dict())

    except ValueError as e:
        logger.error(f"Invalid analysis request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.error(f"Swing analysis failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# Mistake Catalog
# =============================================================================

@router.get(
    "/mistakes",
    response_model=List[SwingMistakeSchema],
    tags=["Swing Analysis"],
    summary="List detectable swing mistakes"
)
async def list_mistakes() -> List[SwingMistakeSchema]:
    """
    Every fault the analyzer can report, grouped by swing section.
    """
    return [SwingMistakeSchema(**mistake.to_dict()) for mistake in SWING_MISTAKES]
