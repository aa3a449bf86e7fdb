"""
API Schemas

Pydantic models for request/response validation.
"""

from .pose import (
    LandmarkSchema,
    PoseFrameSchema,
    PoseFrameOutSchema,
)

from .analysis import (
    ClubTypeEnum,
    SwingPhaseEnum,
    CameraAngleEnum,
    AnalyzeFramesRequest,
    CameraAngleSchema,
    ClubTypeSchema,
    PhaseSegmentSchema,
    SwingMetricsSchema,
    TempoSchema,
    TempoEvaluationSchema,
    DetectorResultSchema,
    SwingFeedbackSchema,
    AnalysisResponse,
    SwingMistakeSchema,
    HealthResponse,
)

__all__ = [
    # Pose schemas
    "LandmarkSchema",
    "PoseFrameSchema",
    "PoseFrameOutSchema",
    # Analysis schemas
    "ClubTypeEnum",
    "SwingPhaseEnum",
    "CameraAngleEnum",
    "AnalyzeFramesRequest",
    "CameraAngleSchema",
    "ClubTypeSchema",
    "PhaseSegmentSchema",
    "SwingMetricsSchema",
    "TempoSchema",
    "TempoEvaluationSchema",
    "DetectorResultSchema",
    "SwingFeedbackSchema",
    "AnalysisResponse",
    "SwingMistakeSchema",
    "HealthResponse",
]
