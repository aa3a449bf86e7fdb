"""
Swing Analysis Domain Models

Data structures for every stage of the analysis pipeline: per-frame
metrics, phase labels and segments, the camera-angle and club-type
classifications, aggregate metrics, tempo, and the final result.

Every record serializes to plain JSON-compatible dicts with camelCase keys.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .pose import PoseFrame
from .mistakes import DetectorResult


class SwingPhase(Enum):
    """
    The seven phases of a golf swing, in temporal order.

    - ADDRESS: Setup position, weight balanced
    - BACKSWING: Club moving back, shoulder rotation
    - TOP: Top of backswing, maximum coil
    - DOWNSWING: Transition and acceleration
    - IMPACT: Club meets ball
    - FOLLOW_THROUGH: After impact, deceleration
    - FINISH: Final balanced position
    """
    ADDRESS = "address"
    BACKSWING = "backswing"
    TOP = "top"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow-through"
    FINISH = "finish"


class CameraAngle(Enum):
    """Recording viewpoint relative to the target line."""
    FACE_ON = "face-on"
    DTL = "dtl"
    OBLIQUE = "oblique"


class ClubType(Enum):
    """Club family - affects ideal ranges and tempo tolerance."""
    DRIVER = "driver"
    IRON = "iron"
    UNKNOWN = "unknown"


# =============================================================================
# Per-frame records
# =============================================================================

@dataclass(frozen=True)
class HandPosition:
    """Wrist position relative to the hip center."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class FrameMetrics:
    """
    Joint angles and positions derived from one frame.

    Angles are in degrees. Rotations come from the horizontal (x/z) plane,
    everything else is planar.
    """
    hip_rotation: float = 0.0
    shoulder_rotation: float = 0.0
    x_factor: float = 0.0
    spine_angle: float = 0.0
    left_arm_extension: float = 180.0
    right_arm_extension: float = 180.0
    left_knee_flex: float = 180.0
    right_knee_flex: float = 180.0
    left_wrist_hinge: float = 180.0
    right_wrist_hinge: float = 180.0
    left_hand_position: HandPosition = field(default_factory=HandPosition)
    right_hand_position: HandPosition = field(default_factory=HandPosition)

    def to_dict(self) -> dict:
        return {
            "hipRotation": self.hip_rotation,
            "shoulderRotation": self.shoulder_rotation,
            "xFactor": self.x_factor,
            "spineAngle": self.spine_angle,
            "leftArmExtension": self.left_arm_extension,
            "rightArmExtension": self.right_arm_extension,
            "leftKneeFlex": self.left_knee_flex,
            "rightKneeFlex": self.right_knee_flex,
            "leftWristHinge": self.left_wrist_hinge,
            "rightWristHinge": self.right_wrist_hinge,
            "leftHandPosition": self.left_hand_position.to_dict(),
            "rightHandPosition": self.right_hand_position.to_dict(),
        }


@dataclass(frozen=True)
class PhaseFrame:
    """FrameMetrics tagged with a phase label and a labelling confidence."""
    frame_index: int
    timestamp: float
    phase: SwingPhase
    metrics: FrameMetrics
    confidence: float


@dataclass(frozen=True)
class PhaseSegment:
    """A maximal run of consecutive frames sharing one phase label."""
    phase: SwingPhase
    start_frame: int
    end_frame: int
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def frame_count(self) -> int:
        return self.end_frame - self.start_frame + 1

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "startFrame": self.start_frame,
            "endFrame": self.end_frame,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class SwingPhaseResult:
    """Output of phase detection, before consolidation into segments."""
    phases: list[PhaseFrame]
    key_frames: dict[SwingPhase, int]
    is_right_handed: bool


# =============================================================================
# Classifications
# =============================================================================

@dataclass(frozen=True)
class CameraAngleResult:
    angle: CameraAngle
    confidence: float
    ratio: float

    def to_dict(self) -> dict:
        return {
            "angle": self.angle.value,
            "confidence": self.confidence,
            "ratio": self.ratio,
        }


@dataclass(frozen=True)
class ClubTypeSignals:
    """Raw address-position measurements the club vote is based on."""
    stance_ratio: float = 0.0
    hand_distance: float = 0.0
    spine_angle: float = 0.0
    arm_extension: float = 0.0
    knee_flex_angle: float = 0.0

    def to_dict(self) -> dict:
        return {
            "stanceRatio": self.stance_ratio,
            "handDistance": self.hand_distance,
            "spineAngle": self.spine_angle,
            "armExtension": self.arm_extension,
            "kneeFlexAngle": self.knee_flex_angle,
        }


@dataclass(frozen=True)
class ClubTypeResult:
    club_type: ClubType
    confidence: float
    signals: ClubTypeSignals = field(default_factory=ClubTypeSignals)

    def to_dict(self) -> dict:
        return {
            "clubType": self.club_type.value,
            "confidence": self.confidence,
            "signals": self.signals.to_dict(),
        }


# =============================================================================
# Aggregates
# =============================================================================

@dataclass(frozen=True)
class SwingMetrics:
    """
    Whole-swing measurements.

    hip_sway, head_stability and impact_extension are only measured from a
    face-on camera; None means "not applicable", not zero.
    """
    max_hip_rotation: float = 0.0
    max_shoulder_rotation: float = 0.0
    max_x_factor: float = 0.0
    address_spine_angle: float = 0.0
    top_spine_angle: float = 0.0
    impact_spine_angle: float = 0.0
    top_lead_arm_extension: float = 180.0
    impact_lead_arm_extension: float = 180.0
    address_knee_flex: float = 180.0
    top_knee_flex: float = 180.0
    hip_sway: Optional[float] = None
    head_stability: Optional[float] = None
    impact_extension: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "maxHipRotation": self.max_hip_rotation,
            "maxShoulderRotation": self.max_shoulder_rotation,
            "maxXFactor": self.max_x_factor,
            "addressSpineAngle": self.address_spine_angle,
            "topSpineAngle": self.top_spine_angle,
            "impactSpineAngle": self.impact_spine_angle,
            "topLeadArmExtension": self.top_lead_arm_extension,
            "impactLeadArmExtension": self.impact_lead_arm_extension,
            "addressKneeFlex": self.address_knee_flex,
            "topKneeFlex": self.top_knee_flex,
            "hipSway": self.hip_sway,
            "headStability": self.head_stability,
            "impactExtension": self.impact_extension,
        }


@dataclass(frozen=True)
class TempoMetrics:
    """Durations in seconds; tempo_ratio is backswing / downswing (0 if unknown)."""
    backswing_duration: float = 0.0
    downswing_duration: float = 0.0
    tempo_ratio: float = 0.0
    total_swing_duration: float = 0.0

    def to_dict(self) -> dict:
        return {
            "backswingDuration": self.backswing_duration,
            "downswingDuration": self.downswing_duration,
            "tempoRatio": self.tempo_ratio,
            "totalSwingDuration": self.total_swing_duration,
        }


@dataclass(frozen=True)
class TempoEvaluation:
    rating: str  # excellent | good | needs-work | poor
    score: int
    feedback: str
    ideal_ratio: float
    actual_ratio: float

    def to_dict(self) -> dict:
        return {
            "rating": self.rating,
            "score": self.score,
            "feedback": self.feedback,
            "idealRatio": self.ideal_ratio,
            "actualRatio": self.actual_ratio,
        }


@dataclass(frozen=True)
class SwingFeedback:
    """
    A piece of rule-based feedback.

    Attributes:
        category: rotation | posture | arm | tempo
        type: positive | suggestion | warning
        message: Human-readable text
    """
    category: str
    type: str
    message: str

    def to_dict(self) -> dict:
        return {"category": self.category, "type": self.type, "message": self.message}


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete analysis of a golf swing.

    This is the main result object returned by SwingAnalyzer.analyze().
    A club-type override produces a new AnalysisResult; results are never
    mutated in place.
    """
    # Identification
    id: str
    video_id: str

    # Input
    frames: list[PoseFrame]

    # Classifications
    camera_angle: CameraAngleResult
    club_type: ClubTypeResult
    club_type_overridden: bool
    is_right_handed: bool

    # Timeline
    phase_segments: list[PhaseSegment] = field(default_factory=list)
    key_frames: dict[SwingPhase, int] = field(default_factory=dict)

    # Measurements
    metrics: SwingMetrics = field(default_factory=SwingMetrics)
    tempo: TempoMetrics = field(default_factory=TempoMetrics)
    tempo_evaluation: Optional[TempoEvaluation] = None

    # Scores
    base_score: int = 0
    penalty: int = 0
    overall_score: int = 0

    # Faults and coaching
    detector_results: list[DetectorResult] = field(default_factory=list)
    feedback: list[SwingFeedback] = field(default_factory=list)

    @property
    def detected_mistakes(self) -> list[DetectorResult]:
        """Detected faults, most severe first."""
        detected = [r for r in self.detector_results if r.detected]
        return sorted(detected, key=lambda r: r.severity, reverse=True)

    def get_segment(self, phase: SwingPhase) -> Optional[PhaseSegment]:
        """Get the first segment for a specific phase."""
        for segment in self.phase_segments:
            if segment.phase == phase:
                return segment
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "videoId": self.video_id,
            "frames": [frame.to_dict() for frame in self.frames],
            "cameraAngle": self.camera_angle.to_dict(),
            "clubType": self.club_type.to_dict(),
            "clubTypeOverridden": self.club_type_overridden,
            "isRightHanded": self.is_right_handed,
            "phaseSegments": [segment.to_dict() for segment in self.phase_segments],
            "keyFrames": {phase.value: idx for phase, idx in self.key_frames.items()},
            "metrics": self.metrics.to_dict(),
            "tempo": self.tempo.to_dict(),
            "tempoEvaluation": self.tempo_evaluation.to_dict() if self.tempo_evaluation else None,
            "baseScore": self.base_score,
            "penalty": self.penalty,
            "overallScore": self.overall_score,
            "detectorResults": [result.to_dict() for result in self.detector_results],
            "feedback": [item.to_dict() for item in self.feedback],
        }
