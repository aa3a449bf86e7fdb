"""
Swing Mistake Domain Models

The catalog of technique faults the engine can detect, and the verdict
record every detector returns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MistakeCategory(Enum):
    """Part of the swing a fault belongs to."""
    SETUP = "setup"
    BACKSWING = "backswing"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow-through"
    TEMPO = "tempo"


@dataclass(frozen=True)
class SwingMistake:
    """
    A catalog entry describing one detectable fault.

    Attributes:
        id: Stable identifier (e.g. "CHICKEN_WING")
        category: Swing section the fault belongs to
        name: Short display name
        description: One-sentence explanation for players
    """
    id: str
    category: MistakeCategory
    name: str
    description: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
        }


SWING_MISTAKES: tuple[SwingMistake, ...] = (
    # Setup
    SwingMistake(
        "POOR_POSTURE", MistakeCategory.SETUP, "Poor posture at address",
        "Standing too upright or hunched over the ball at setup.",
    ),
    SwingMistake(
        "STANCE_WIDTH_ISSUE", MistakeCategory.SETUP, "Improper stance width",
        "Stance too narrow or too wide for the club.",
    ),
    # Backswing
    SwingMistake(
        "SWAYING", MistakeCategory.BACKSWING, "Swaying",
        "Lateral hip movement away from the target instead of rotation.",
    ),
    SwingMistake(
        "REVERSE_PIVOT", MistakeCategory.BACKSWING, "Reverse pivot",
        "Weight shifts toward the target during the backswing.",
    ),
    SwingMistake(
        "INSUFFICIENT_SHOULDER_TURN", MistakeCategory.BACKSWING, "Insufficient shoulder turn",
        "Shoulders do not coil enough against the hips, losing power.",
    ),
    SwingMistake(
        "OVER_ROTATION", MistakeCategory.BACKSWING, "Over-rotation",
        "Excessive shoulder-hip separation causing loss of control.",
    ),
    SwingMistake(
        "BENT_LEAD_ARM", MistakeCategory.BACKSWING, "Bent lead arm at top",
        "Lead arm collapses at the top, reducing swing arc and power.",
    ),
    SwingMistake(
        "LIFTING_HEAD", MistakeCategory.BACKSWING, "Lifting head in backswing",
        "Head rises during the backswing.",
    ),
    SwingMistake(
        "RUSHING_BACKSWING", MistakeCategory.BACKSWING, "Rushing the backswing",
        "Backswing is too quick relative to the downswing.",
    ),
    # Downswing
    SwingMistake(
        "EARLY_EXTENSION", MistakeCategory.DOWNSWING, "Early extension",
        "Hips thrust toward the ball during the downswing.",
    ),
    SwingMistake(
        "HANGING_BACK", MistakeCategory.DOWNSWING, "Hanging back",
        "Weight stays on the trail side through the downswing.",
    ),
    SwingMistake(
        "LOSS_OF_SPINE_ANGLE", MistakeCategory.DOWNSWING, "Loss of spine angle",
        "Spine angle changes between address and impact.",
    ),
    SwingMistake(
        "SLIDING_HIPS", MistakeCategory.DOWNSWING, "Sliding hips",
        "Hips slide laterally instead of rotating.",
    ),
    # Impact
    SwingMistake(
        "CHICKEN_WING", MistakeCategory.IMPACT, "Chicken wing",
        "Lead elbow bends outward through impact.",
    ),
    SwingMistake(
        "POOR_ARM_EXTENSION", MistakeCategory.IMPACT, "Poor arm extension",
        "Arms do not extend toward the target after impact.",
    ),
    SwingMistake(
        "HEAD_MOVEMENT", MistakeCategory.IMPACT, "Excessive head movement",
        "Head moves significantly away from its address position.",
    ),
    # Follow-through
    SwingMistake(
        "INCOMPLETE_FOLLOW_THROUGH", MistakeCategory.FOLLOW_THROUGH, "Incomplete follow-through",
        "Body stops rotating after impact.",
    ),
    SwingMistake(
        "UNBALANCED_FINISH", MistakeCategory.FOLLOW_THROUGH, "Unbalanced finish",
        "Finish position is not balanced over the lead foot.",
    ),
    SwingMistake(
        "REVERSE_C_FINISH", MistakeCategory.FOLLOW_THROUGH, "Reverse C finish",
        "Excessive backward lean at the finish.",
    ),
    # Tempo
    SwingMistake(
        "POOR_TEMPO_RATIO", MistakeCategory.TEMPO, "Poor tempo ratio",
        "Backswing to downswing timing far from the 3:1 ideal.",
    ),
)

_MISTAKES_BY_ID = {mistake.id: mistake for mistake in SWING_MISTAKES}


def get_mistake(mistake_id: str) -> Optional[SwingMistake]:
    """Look up a catalog entry by id."""
    return _MISTAKES_BY_ID.get(mistake_id)


def get_category_from_mistake_id(mistake_id: str) -> Optional[MistakeCategory]:
    """Get the swing section a mistake id belongs to."""
    mistake = _MISTAKES_BY_ID.get(mistake_id)
    return mistake.category if mistake else None


@dataclass(frozen=True)
class DetectorResult:
    """
    Standardized verdict from one detector.

    A result with detected=False and confidence=0 is an abstention: the
    detector could not judge this swing (wrong camera angle, missing
    phase or landmarks, implausible measurement).

    Attributes:
        mistake_id: Catalog id of the fault
        detected: Whether the fault is present
        confidence: 0-1 trust in the verdict
        severity: 0-100, how bad the fault is (0 when not detected)
        message: Player-facing feedback (empty when not detected)
        details: Technical detail or abstention reason
        affected_frames: Frame indices where the fault shows
    """
    mistake_id: str
    detected: bool
    confidence: float
    severity: float
    message: str = ""
    details: Optional[str] = None
    affected_frames: Optional[list[int]] = field(default=None)

    @property
    def category(self) -> Optional[MistakeCategory]:
        return get_category_from_mistake_id(self.mistake_id)

    def to_dict(self) -> dict:
        return {
            "mistakeId": self.mistake_id,
            "detected": self.detected,
            "confidence": self.confidence,
            "severity": self.severity,
            "message": self.message,
            "details": self.details,
            "affectedFrames": list(self.affected_frames) if self.affected_frames else None,
        }
