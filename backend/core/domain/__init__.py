"""
Domain Models

Pure data structures representing golf swing analysis concepts.
No external dependencies - just Python dataclasses and enums.
"""

from .pose import PoseLandmark, PoseFrame, BodyPart, LANDMARK_COUNT, MISSING_LANDMARK
from .mistakes import (
    MistakeCategory,
    SwingMistake,
    SWING_MISTAKES,
    DetectorResult,
    get_mistake,
    get_category_from_mistake_id,
)
from .analysis import (
    SwingPhase,
    CameraAngle,
    ClubType,
    HandPosition,
    FrameMetrics,
    PhaseFrame,
    PhaseSegment,
    SwingPhaseResult,
    CameraAngleResult,
    ClubTypeSignals,
    ClubTypeResult,
    SwingMetrics,
    TempoMetrics,
    TempoEvaluation,
    SwingFeedback,
    AnalysisResult,
)

__all__ = [
    "PoseLandmark",
    "PoseFrame",
    "BodyPart",
    "LANDMARK_COUNT",
    "MISSING_LANDMARK",
    "MistakeCategory",
    "SwingMistake",
    "SWING_MISTAKES",
    "DetectorResult",
    "get_mistake",
    "get_category_from_mistake_id",
    "SwingPhase",
    "CameraAngle",
    "ClubType",
    "HandPosition",
    "FrameMetrics",
    "PhaseFrame",
    "PhaseSegment",
    "SwingPhaseResult",
    "CameraAngleResult",
    "ClubTypeSignals",
    "ClubTypeResult",
    "SwingMetrics",
    "TempoMetrics",
    "TempoEvaluation",
    "SwingFeedback",
    "AnalysisResult",
]
