"""
Analysis API Schemas

Pydantic models for swing analysis API requests and responses.
Field names are camelCase on the wire.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from enum import Enum

from .pose import PoseFrameSchema, PoseFrameOutSchema


class ClubTypeEnum(str, Enum):
    """Club families for API."""
    DRIVER = "driver"
    IRON = "iron"
    UNKNOWN = "unknown"


class SwingPhaseEnum(str, Enum):
    """Swing phases for API."""
    ADDRESS = "address"
    BACKSWING = "backswing"
    TOP = "top"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow-through"
    FINISH = "finish"


class CameraAngleEnum(str, Enum):
    FACE_ON = "face-on"
    DTL = "dtl"
    OBLIQUE = "oblique"


class CamelModel(BaseModel):
    class Config:
        populate_by_name = True


# =============================================================================
# Request
# =============================================================================

class AnalyzeFramesRequest(CamelModel):
    """
    Request to analyze pre-detected pose frames.

    Frames come from the pose model running in the client.
    """
    video_id: str = Field(..., alias="videoId", min_length=1, description="Source recording id")
    frames: List[PoseFrameSchema] = Field(..., description="Time-ordered pose frames")
    club_type_override: Optional[ClubTypeEnum] = Field(
        None, alias="clubTypeOverride", description="Club chosen by the player"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "videoId": "swing-001",
                "frames": [],
                "clubTypeOverride": "driver",
            }
        }


# =============================================================================
# Response parts
# =============================================================================

class CameraAngleSchema(CamelModel):
    angle: CameraAngleEnum
    confidence: float = Field(..., ge=0.0, le=1.0)
    ratio: float


class ClubSignalsSchema(CamelModel):
    stance_ratio: float = Field(..., alias="stanceRatio")
    hand_distance: float = Field(..., alias="handDistance")
    spine_angle: float = Field(..., alias="spineAngle")
    arm_extension: float = Field(..., alias="armExtension")
    knee_flex_angle: float = Field(..., alias="kneeFlexAngle")


class ClubTypeSchema(CamelModel):
    club_type: ClubTypeEnum = Field(..., alias="clubType")
    confidence: float = Field(..., ge=0.0, le=1.0)
    signals: ClubSignalsSchema


class PhaseSegmentSchema(CamelModel):
    """A contiguous run of frames sharing one swing phase."""
    phase: SwingPhaseEnum
    start_frame: int = Field(..., alias="startFrame")
    end_frame: int = Field(..., alias="endFrame")
    start_time: float = Field(..., alias="startTime")
    end_time: float = Field(..., alias="endTime")
    duration: float


class SwingMetricsSchema(CamelModel):
    """
    Whole-swing measurements (degrees unless noted).

    hipSway, headStability and impactExtension are null unless the swing
    was filmed face-on.
    """
    max_hip_rotation: float = Field(..., alias="maxHipRotation")
    max_shoulder_rotation: float = Field(..., alias="maxShoulderRotation")
    max_x_factor: float = Field(..., alias="maxXFactor")
    address_spine_angle: float = Field(..., alias="addressSpineAngle")
    top_spine_angle: float = Field(..., alias="topSpineAngle")
    impact_spine_angle: float = Field(..., alias="impactSpineAngle")
    top_lead_arm_extension: float = Field(..., alias="topLeadArmExtension")
    impact_lead_arm_extension: float = Field(..., alias="impactLeadArmExtension")
    address_knee_flex: float = Field(..., alias="addressKneeFlex")
    top_knee_flex: float = Field(..., alias="topKneeFlex")
    hip_sway: Optional[float] = Field(None, alias="hipSway")
    head_stability: Optional[float] = Field(None, alias="headStability")
    impact_extension: Optional[float] = Field(None, alias="impactExtension")


class TempoSchema(CamelModel):
    backswing_duration: float = Field(..., alias="backswingDuration", description="Seconds")
    downswing_duration: float = Field(..., alias="downswingDuration", description="Seconds")
    tempo_ratio: float = Field(..., alias="tempoRatio", description="Backswing / downswing")
    total_swing_duration: float = Field(..., alias="totalSwingDuration", description="Seconds")


class TempoEvaluationSchema(CamelModel):
    rating: str = Field(..., description="excellent | good | needs-work | poor")
    score: int = Field(..., ge=0, le=100)
    feedback: str
    ideal_ratio: float = Field(..., alias="idealRatio")
    actual_ratio: float = Field(..., alias="actualRatio")


class DetectorResultSchema(CamelModel):
    """
    Verdict of one fault detector.

    Detectors that could not judge the swing are omitted from responses.
    """
    mistake_id: str = Field(..., alias="mistakeId")
    detected: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    severity: float = Field(..., ge=0.0, le=100.0)
    message: str = ""
    details: Optional[str] = None
    affected_frames: Optional[List[int]] = Field(None, alias="affectedFrames")

    class Config:
        json_schema_extra = {
            "example": {
                "mistakeId": "CHICKEN_WING",
                "detected": True,
                "confidence": 0.8,
                "severity": 45.0,
                "message": "Slight chicken wing detected. Focus on keeping your lead arm extended through impact.",
                "details": "Min elbow angle: 128°",
                "affectedFrames": [41, 42, 43],
            }
        }


class SwingFeedbackSchema(CamelModel):
    category: str = Field(..., description="rotation | posture | arm | tempo")
    type: str = Field(..., description="positive | suggestion | warning")
    message: str


# =============================================================================
# Response
# =============================================================================

class AnalysisResponse(CamelModel):
    """
    Complete swing analysis result.

    This is the main response from the analyze endpoint.
    """
    # Identification
    id: str = Field(..., description="Analysis id, stable for identical input")
    video_id: str = Field(..., alias="videoId")

    # Input
    frames: List[PoseFrameOutSchema]

    # Classifications
    camera_angle: CameraAngleSchema = Field(..., alias="cameraAngle")
    club_type: ClubTypeSchema = Field(..., alias="clubType")
    club_type_overridden: bool = Field(..., alias="clubTypeOverridden")
    is_right_handed: bool = Field(..., alias="isRightHanded")

    # Timeline
    phase_segments: List[PhaseSegmentSchema] = Field(..., alias="phaseSegments")
    key_frames: Dict[str, int] = Field(..., alias="keyFrames", description="Phase -> frame index")

    # Measurements
    metrics: SwingMetricsSchema
    tempo: TempoSchema
    tempo_evaluation: Optional[TempoEvaluationSchema] = Field(None, alias="tempoEvaluation")

    # Scores
    base_score: int = Field(..., ge=0, le=100, alias="baseScore")
    penalty: int = Field(..., ge=0)
    overall_score: int = Field(..., ge=0, le=100, alias="overallScore")

    # Faults and coaching
    detector_results: List[DetectorResultSchema] = Field(..., alias="detectorResults")
    feedback: List[SwingFeedbackSchema]


class SwingMistakeSchema(CamelModel):
    """Catalog entry for a detectable fault."""
    id: str
    category: str
    name: str
    description: str


class HealthResponse(CamelModel):
    """Health check response."""
    status: str = Field(..., description="API status")
    version: str = Field(..., description="API version")
    detectors: int = Field(..., description="Registered fault detectors")
