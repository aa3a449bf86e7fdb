"""
Club Type Classifier

Guesses whether the player is holding a driver or an iron from their
address posture. Five signals vote; which of them are trusted, and how
much, depends on the camera angle (see ANGLE_PROFILES).
"""

import logging
from typing import Optional, Sequence

from ..config import CLUB_DETECTION, CLUB_SIGNAL_DEFAULTS, get_profile
from ..domain.pose import PoseFrame, BodyPart
from ..domain.analysis import (
    CameraAngle,
    ClubType,
    ClubTypeSignals,
    ClubTypeResult,
)
from .angle_calculator import AngleCalculator
from .trace import resolve_logger


# =============================================================================
# Signals
# =============================================================================

def calculate_stance_ratio(frame: PoseFrame) -> float:
    """Ankle span / hip span. Drivers are played from a wider stance."""
    hip_width = AngleCalculator.calculate_body_width(frame, "hips")
    if frame.get_landmarks(BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE) is None or hip_width == 0:
        return CLUB_SIGNAL_DEFAULTS["stance_ratio"]
    return AngleCalculator.calculate_body_width(frame, "ankles") / hip_width


def calculate_hand_distance(frame: PoseFrame) -> float:
    """Distance from the hands center to the hip center, in shoulder widths."""
    hands = AngleCalculator.pair_midpoint(frame, "wrists")
    hips = AngleCalculator.pair_midpoint(frame, "hips")
    shoulder_width = AngleCalculator.calculate_body_width(frame, "shoulders")
    if hands is None or hips is None or shoulder_width == 0:
        return CLUB_SIGNAL_DEFAULTS["hand_distance"]

    distance = ((hands[0] - hips[0]) ** 2 + (hands[1] - hips[1]) ** 2) ** 0.5
    return distance / shoulder_width


def calculate_arm_drop(frame: PoseFrame) -> float:
    """
    Vertical drop from shoulders to hands, relative to shoulder-to-ankle height.

    Larger values mean the player is more bent over, typical of irons.
    """
    shoulders = AngleCalculator.pair_midpoint(frame, "shoulders")
    hands = AngleCalculator.pair_midpoint(frame, "wrists")
    ankles = AngleCalculator.pair_midpoint(frame, "ankles")
    if shoulders is None or hands is None or ankles is None:
        return CLUB_SIGNAL_DEFAULTS["arm_extension"]

    body_height = abs(ankles[1] - shoulders[1])
    if body_height == 0:
        return CLUB_SIGNAL_DEFAULTS["arm_extension"]
    return (hands[1] - shoulders[1]) / body_height


def calculate_average_knee_flex(frame: PoseFrame) -> float:
    parts = (
        BodyPart.LEFT_HIP, BodyPart.LEFT_KNEE, BodyPart.LEFT_ANKLE,
        BodyPart.RIGHT_HIP, BodyPart.RIGHT_KNEE, BodyPart.RIGHT_ANKLE,
    )
    if frame.get_landmarks(*parts) is None:
        return CLUB_SIGNAL_DEFAULTS["knee_flex"]
    return (
        AngleCalculator.calculate_knee_flex(frame, "left")
        + AngleCalculator.calculate_knee_flex(frame, "right")
    ) / 2


def calculate_signals(frame: PoseFrame) -> ClubTypeSignals:
    return ClubTypeSignals(
        stance_ratio=calculate_stance_ratio(frame),
        hand_distance=calculate_hand_distance(frame),
        spine_angle=abs(AngleCalculator.calculate_spine_angle(frame)),
        arm_extension=calculate_arm_drop(frame),
        knee_flex_angle=calculate_average_knee_flex(frame),
    )


def average_signals(frames: Sequence[PoseFrame]) -> ClubTypeSignals:
    signals = [calculate_signals(frame) for frame in frames]
    count = len(signals)
    return ClubTypeSignals(
        stance_ratio=sum(s.stance_ratio for s in signals) / count,
        hand_distance=sum(s.hand_distance for s in signals) / count,
        spine_angle=sum(s.spine_angle for s in signals) / count,
        arm_extension=sum(s.arm_extension for s in signals) / count,
        knee_flex_angle=sum(s.knee_flex_angle for s in signals) / count,
    )


# =============================================================================
# Voting
# =============================================================================

def _vote(is_driver: bool, is_iron: bool, weight: float) -> tuple[float, float]:
    """(score contribution, denominator contribution) for one signal."""
    if is_driver:
        return weight, weight
    if is_iron:
        return -weight, weight
    return 0.0, weight * 0.5


def classify_signals(signals: ClubTypeSignals, camera_angle: CameraAngle) -> ClubTypeResult:
    """
    Weighted driver/iron vote over the signals enabled for this camera angle.

    Positive score means driver. A signal in its ambiguous band adds half its
    weight to the denominator only, which pulls confidence down.
    """
    weights = get_profile(camera_angle).club_signals
    stance = CLUB_DETECTION["stance_ratio"]
    hand = CLUB_DETECTION["hand_distance"]
    spine = CLUB_DETECTION["spine_angle"]
    arm = CLUB_DETECTION["arm_extension"]
    knee = CLUB_DETECTION["knee_flex"]

    votes = []
    if weights.stance:
        votes.append(_vote(
            signals.stance_ratio >= stance["driver_min"],
            signals.stance_ratio <= stance["iron_max"],
            weights.stance,
        ))
    if weights.hand_distance:
        votes.append(_vote(
            signals.hand_distance >= hand["driver_min"],
            signals.hand_distance <= hand["iron_max"],
            weights.hand_distance,
        ))
    if weights.spine:
        votes.append(_vote(
            signals.spine_angle <= spine["driver_max"],
            signals.spine_angle >= spine["iron_min"],
            weights.spine,
        ))
    if weights.arm_drop:
        votes.append(_vote(
            signals.arm_extension <= arm["driver_max"],
            signals.arm_extension >= arm["iron_min"],
            weights.arm_drop,
        ))
    if weights.knee:
        votes.append(_vote(
            signals.knee_flex_angle >= knee["driver_min"],
            signals.knee_flex_angle <= knee["iron_max"],
            weights.knee,
        ))

    score = sum(v[0] for v in votes)
    count = sum(v[1] for v in votes)
    normalized = score / count if count > 0 else 0.0
    confidence = abs(normalized)

    if confidence < CLUB_DETECTION["min_confidence"]:
        club_type = ClubType.UNKNOWN
    elif normalized > 0:
        club_type = ClubType.DRIVER
    else:
        club_type = ClubType.IRON

    return ClubTypeResult(club_type=club_type, confidence=confidence, signals=signals)


def detect_club_type(frame: PoseFrame, camera_angle: CameraAngle) -> ClubTypeResult:
    """Classify from a single address frame."""
    return classify_signals(calculate_signals(frame), camera_angle)


def detect_club_type_from_frames(
    frames: Sequence[PoseFrame],
    camera_angle: CameraAngle,
    logger: Optional[logging.Logger] = None
) -> ClubTypeResult:
    """
    Classify from the address frames of a recording.

    Raw signal values are averaged over up to five frames before voting,
    which is steadier than voting per frame.
    """
    log = resolve_logger(logger)

    if not frames:
        return ClubTypeResult(club_type=ClubType.UNKNOWN, confidence=0.0)

    sample = frames[:CLUB_DETECTION["sample_frames"]]
    result = classify_signals(average_signals(sample), camera_angle)

    signals = result.signals
    log.debug(
        f"Club type: {result.club_type.value} (confidence={result.confidence:.2f}, "
        f"stance={signals.stance_ratio:.2f}, hands={signals.hand_distance:.2f}, "
        f"spine={signals.spine_angle:.1f}, armDrop={signals.arm_extension:.2f}, "
        f"knee={signals.knee_flex_angle:.1f})"
    )
    return result
