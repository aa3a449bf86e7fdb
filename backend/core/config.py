"""
Analysis Configuration

Every tunable constant of the analysis engine lives here. Values that
depend on the recording viewpoint are grouped into one AngleProfile per
camera angle (ANGLE_PROFILES); components look their settings up in that
table rather than branching on the camera angle themselves.
"""

from dataclasses import dataclass
from enum import Enum

from .domain.analysis import CameraAngle, ClubType


# =============================================================================
# Table building blocks
# =============================================================================

@dataclass(frozen=True)
class MetricRange:
    """Score is 100 inside [ideal_min, ideal_max], 0 at the absolute bounds."""
    ideal_min: float
    ideal_max: float
    absolute_min: float
    absolute_max: float


@dataclass(frozen=True)
class MetricRanges:
    x_factor: MetricRange
    shoulder: MetricRange
    hip: MetricRange
    lead_arm: MetricRange


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of each score term; they sum to 1.0 per camera angle."""
    x_factor: float
    shoulder: float
    hip: float
    spine: float
    lead_arm: float
    tempo: float
    hip_sway: float = 0.0
    head_stability: float = 0.0
    impact_extension: float = 0.0


@dataclass(frozen=True)
class ClubSignalWeights:
    """Vote weight of each club-type signal; 0 disables the signal."""
    stance: float = 0.0
    hand_distance: float = 0.0
    spine: float = 0.0
    arm_drop: float = 0.0
    knee: float = 0.0


@dataclass(frozen=True)
class FeedbackBand:
    """A value is "good" up to `good`, acceptable up to `ok`, poor beyond."""
    good: float
    ok: float


class RotationModel(Enum):
    """How body rotation is estimated for a camera angle."""
    WIDTH = "width"          # apparent shoulder/hip width narrowing
    NONE = "none"            # not measurable, reported as 0
    RELATIVE = "relative"    # x/z heading relative to address


@dataclass(frozen=True)
class AngleProfile:
    rotation_model: RotationModel
    face_on_metrics: bool
    club_signals: ClubSignalWeights
    scoring_weights: ScoringWeights
    default_ranges: MetricRanges
    spine_tolerance: float
    spine_diff: FeedbackBand
    lead_arm: FeedbackBand
    measurement_confidence: float


# =============================================================================
# Scoring ranges
# =============================================================================

X_FACTOR_RANGE = MetricRange(35, 65, 20, 80)

_FACE_ON_RANGES = MetricRanges(
    x_factor=X_FACTOR_RANGE,
    shoulder=MetricRange(55, 95, 35, 130),
    hip=MetricRange(25, 55, 15, 75),
    lead_arm=MetricRange(140, 180, 100, 180),
)

_SIDE_RANGES = MetricRanges(
    x_factor=X_FACTOR_RANGE,
    shoulder=MetricRange(80, 110, 60, 130),
    hip=MetricRange(40, 60, 25, 75),
    lead_arm=MetricRange(160, 180, 120, 180),
)

# Face-on only terms; sway and head movement are scored as (1 - value)
HIP_SWAY_RANGE = MetricRange(0.60, 1.0, 0.3, 1.0)
HEAD_STABILITY_RANGE = MetricRange(0.65, 1.0, 0.3, 1.0)
IMPACT_EXTENSION_RANGE = MetricRange(0.7, 1.0, 0.3, 1.0)
FACE_ON_METRIC_DEFAULT = 0.5


def _by_angle(face_on: MetricRanges, other: MetricRanges) -> dict[CameraAngle, MetricRanges]:
    return {
        CameraAngle.FACE_ON: face_on,
        CameraAngle.DTL: other,
        CameraAngle.OBLIQUE: other,
    }


# Club-specific ranges replace the defaults when the club type is known
CLUB_RANGES: dict[ClubType, dict[CameraAngle, MetricRanges]] = {
    ClubType.DRIVER: _by_angle(
        MetricRanges(
            x_factor=MetricRange(40, 65, 25, 80),
            shoulder=MetricRange(60, 100, 40, 130),
            hip=MetricRange(30, 60, 20, 80),
            lead_arm=MetricRange(140, 180, 100, 180),
        ),
        MetricRanges(
            x_factor=MetricRange(40, 65, 25, 80),
            shoulder=MetricRange(85, 115, 65, 135),
            hip=MetricRange(45, 65, 30, 80),
            lead_arm=MetricRange(160, 180, 120, 180),
        ),
    ),
    ClubType.IRON: _by_angle(
        MetricRanges(
            x_factor=MetricRange(30, 55, 15, 70),
            shoulder=MetricRange(50, 90, 30, 120),
            hip=MetricRange(20, 50, 10, 70),
            lead_arm=MetricRange(145, 180, 110, 180),
        ),
        MetricRanges(
            x_factor=MetricRange(30, 55, 15, 70),
            shoulder=MetricRange(75, 105, 55, 125),
            hip=MetricRange(35, 55, 20, 70),
            lead_arm=MetricRange(165, 180, 130, 180),
        ),
    ),
}

# Tempo score: 100 within tolerance of the ideal ratio, then linear to 0
TEMPO_SCORING = {
    "ideal_ratio": 3.0,
    "falloff": 2.0,
    "tolerance": {
        ClubType.DRIVER: 0.4,
        ClubType.IRON: 0.3,
        ClubType.UNKNOWN: 0.3,
    },
}


# =============================================================================
# Per-camera-angle profiles
# =============================================================================

ANGLE_PROFILES: dict[CameraAngle, AngleProfile] = {
    CameraAngle.FACE_ON: AngleProfile(
        rotation_model=RotationModel.WIDTH,
        face_on_metrics=True,
        club_signals=ClubSignalWeights(stance=0.3, arm_drop=1.2),
        scoring_weights=ScoringWeights(
            x_factor=0.12,
            shoulder=0.10,
            hip=0.08,
            spine=0.08,
            lead_arm=0.12,
            tempo=0.20,
            hip_sway=0.10,
            head_stability=0.10,
            impact_extension=0.10,
        ),
        default_ranges=_FACE_ON_RANGES,
        spine_tolerance=1.0,
        spine_diff=FeedbackBand(good=20, ok=30),
        lead_arm=FeedbackBand(good=140, ok=120),
        measurement_confidence=0.7,
    ),
    CameraAngle.DTL: AngleProfile(
        rotation_model=RotationModel.NONE,
        face_on_metrics=False,
        club_signals=ClubSignalWeights(spine=1.0, knee=0.6),
        scoring_weights=ScoringWeights(
            x_factor=0.0,
            shoulder=0.0,
            hip=0.0,
            spine=0.30,
            lead_arm=0.35,
            tempo=0.35,
        ),
        default_ranges=_SIDE_RANGES,
        spine_tolerance=3.0,
        spine_diff=FeedbackBand(good=5, ok=10),
        lead_arm=FeedbackBand(good=160, ok=140),
        measurement_confidence=0.85,
    ),
    CameraAngle.OBLIQUE: AngleProfile(
        rotation_model=RotationModel.RELATIVE,
        face_on_metrics=False,
        club_signals=ClubSignalWeights(
            stance=1.0, hand_distance=0.7, spine=1.0, arm_drop=0.8, knee=0.6,
        ),
        scoring_weights=ScoringWeights(
            x_factor=0.20,
            shoulder=0.15,
            hip=0.10,
            spine=0.15,
            lead_arm=0.15,
            tempo=0.25,
        ),
        default_ranges=_SIDE_RANGES,
        spine_tolerance=3.0,
        spine_diff=FeedbackBand(good=5, ok=10),
        lead_arm=FeedbackBand(good=160, ok=140),
        measurement_confidence=0.85,
    ),
}


def get_profile(camera_angle: CameraAngle) -> AngleProfile:
    return ANGLE_PROFILES[camera_angle]


def get_metric_ranges(camera_angle: CameraAngle, club_type: ClubType) -> MetricRanges:
    """Club-specific ranges when the club is known, camera defaults otherwise."""
    club_ranges = CLUB_RANGES.get(club_type)
    if club_ranges is not None:
        return club_ranges[camera_angle]
    return ANGLE_PROFILES[camera_angle].default_ranges


# =============================================================================
# Classifiers and phase detection
# =============================================================================

CAMERA_ANGLE_DETECTION = {
    "face_on_threshold": 2.0,   # dx/dz above this = face-on
    "dtl_threshold": 0.5,       # dx/dz below this = down-the-line
    "sample_count": 10,
    "epsilon": 0.001,
    "oblique_confidence": 0.5,
}

# (driver_bound, iron_bound) per signal; values between the two are ambiguous
CLUB_DETECTION = {
    "stance_ratio": {"driver_min": 1.4, "iron_max": 1.25},
    "hand_distance": {"driver_min": 0.8, "iron_max": 0.65},
    "spine_angle": {"driver_max": 42.0, "iron_min": 50.0},
    "arm_extension": {"driver_max": 0.35, "iron_min": 0.42},
    "knee_flex": {"driver_min": 160.0, "iron_max": 150.0},
    "sample_frames": 5,
    "min_confidence": 0.6,
}

CLUB_SIGNAL_DEFAULTS = {
    "stance_ratio": 1.0,
    "hand_distance": 0.7,
    "arm_extension": 0.40,
    "knee_flex": 155.0,
}

PHASE_DETECTION = {
    "handedness_sample_frames": 5,
    "smoothing_window": 5,
    "min_peak_width": 2,
    "impact_search_start": 0.3,
    "impact_search_end": 0.85,
    "velocity_drop_threshold": 0.85,
    "velocity_drop_search_frames": 12,
    "hand_height_lookback": 3,
    "hand_height_search_frames": 15,
    "max_hand_height_offset": 10,
    "anchor_agreement_frames": 3,
    "top_search_start": 0.1,
    "address_search_end": 0.5,
    "address_baseline_frames": 5,
    "address_velocity_multiplier": 1.5,
    "address_peak_velocity_fraction": 0.04,
    "address_hand_movement_threshold": 0.015,
    "finish_start": 0.85,
}


# =============================================================================
# Tempo evaluation
# =============================================================================

TEMPO = {
    "ideal_ratio": 3.0,
    "excellent_tolerance": 0.3,
    "good_tolerance": 0.6,
}

# Upper bounds on |ln(actual / ideal)| for each rating
TEMPO_RATING_BANDS = {
    "excellent": 0.1,
    "good": 0.25,
    "needs-work": 0.5,
}


# =============================================================================
# Feedback and detectors
# =============================================================================

FEEDBACK_THRESHOLDS = {
    "x_factor": {"min": 35, "max": 55},
    "hip_sway": FeedbackBand(good=0.40, ok=0.55),
    "head_stability": FeedbackBand(good=0.35, ok=0.50),
    "impact_extension": FeedbackBand(good=0.75, ok=0.50),
}

PENALTY = {
    "high_severity": 70,
    "medium_severity": 40,
    "high_points": 5,
    "medium_points": 3,
    "low_points": 1,
    "max_penalty": 25,
}

DETECTOR_THRESHOLDS = {
    "POOR_POSTURE": {
        "ranges": {
            ClubType.DRIVER: (25, 45),
            ClubType.IRON: (30, 55),
            ClubType.UNKNOWN: (25, 55),
        },
        "severity_span": 15,
    },
    "STANCE_WIDTH_ISSUE": {
        "driver_min": 1.4,
        "iron_max": 1.45,
        "severity_span": 0.3,
    },
    "SWAYING": {"severe": 0.75},
    "REVERSE_PIVOT": {"threshold": 0.05, "severe": 0.2},
    "INSUFFICIENT_SHOULDER_TURN": {"min_x_factor": 35, "severity_span": 20},
    "OVER_ROTATION": {"max_x_factor": 65, "severity_span": 20},
    "BENT_LEAD_ARM": {"implausible_below": 90, "severe_span": 40},
    "LIFTING_HEAD": {"threshold": 0.10, "warning": 0.15, "severe": 0.25},
    "RUSHING_BACKSWING": {"min_ratio": 2.5, "very_rushed": 2.0, "severity_span": 1.0},
    "EARLY_EXTENSION": {"threshold": 0.12, "warning": 0.20, "severe": 0.28},
    "HANGING_BACK": {"min_shift": 0.03, "severity_span": 0.15, "implausible_above": 0.5},
    "LOSS_OF_SPINE_ANGLE": {"severe_span": 10},
    "SLIDING_HIPS": {
        "sway_threshold": 10,
        "sway_severe": 20,
        "impact_threshold": 5,
        "impact_severe": 15,
    },
    "CHICKEN_WING": {
        "elbow_threshold": 140,
        "elbow_severe": 110,
        "elbow_bend_frame": 150,
        "implausible_below": 90,
        "visibility": 0.7,
        "visibility_diff": 0.15,
        "min_elbow_only_frames": 2,
        "min_visibility_diff_frames": 3,
        "min_both_visible_frames": 3,
        "min_severity": 30,
    },
    "POOR_ARM_EXTENSION": {"limited_below": 0.5},
    "HEAD_MOVEMENT": {"implausible_above": 0.6, "severe_span": 0.3},
    "INCOMPLETE_FOLLOW_THROUGH": {"min_increase": 15, "ideal_finish_rotation": 80},
    "UNBALANCED_FINISH": {
        "over_rotation": 0.30,
        "falling_back": 0.25,
        "severe": 0.50,
        "severity_span": 0.70,
        "sample_frames": 5,
    },
    "REVERSE_C_FINISH": {"threshold": -10, "severe": -20, "severity_span": 30},
    "POOR_TEMPO_RATIO": {"very_rushed": 2.0, "very_slow": 4.5, "severity_span": 1.5},
}
