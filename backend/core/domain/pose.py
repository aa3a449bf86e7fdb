"""
Pose Domain Models

Data structures for the body landmarks supplied by the upstream pose
provider.

The provider uses the 33-point BlazePose topology:
https://developers.google.com/mediapipe/solutions/vision/pose_landmarker

A missing detection is a landmark with visibility 0, never a shorter list.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


LANDMARK_COUNT = 33


class BodyPart(IntEnum):
    """
    Pose landmark indices.

    These map directly to the 33-point pose topology.
    """
    # Face
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10

    # Upper body
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16

    # Hands (for club tracking)
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22

    # Lower body
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28

    # Feet
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


@dataclass(frozen=True)
class PoseLandmark:
    """
    A single body landmark with 3D coordinates and visibility.

    Attributes:
        x: Horizontal position (0.0 = left edge, 1.0 = right edge)
        y: Vertical position (0.0 = top edge, 1.0 = bottom edge)
        z: Depth (smaller = closer to camera)
        visibility: Confidence score (0.0 to 1.0), 0 means not detected

    Note:
        Coordinates are normalized to image dimensions.
    """
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0

    @property
    def is_detected(self) -> bool:
        """A zero-visibility landmark stands in for a missing detection."""
        return self.visibility > 0

    def is_visible(self, threshold: float = 0.5) -> bool:
        """Check if landmark is visible above confidence threshold."""
        return self.visibility >= threshold

    def distance_to(self, other: "PoseLandmark") -> float:
        """Planar (x, y) Euclidean distance to another landmark."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z, self.visibility]

    @classmethod
    def from_list(cls, values) -> "PoseLandmark":
        x, y, z, visibility = (float(v) for v in values)
        return cls(x=x, y=y, z=z, visibility=visibility)


MISSING_LANDMARK = PoseLandmark(x=0.0, y=0.0, z=0.0, visibility=0.0)


@dataclass(frozen=True)
class PoseFrame:
    """
    All landmarks observed in one video frame.

    Attributes:
        frame_index: Position of the frame in the recording
        timestamp: Seconds since the start of the recording
        landmarks: Exactly 33 landmarks, indexed by BodyPart
    """
    frame_index: int
    timestamp: float
    landmarks: tuple[PoseLandmark, ...]

    def __post_init__(self):
        if len(self.landmarks) != LANDMARK_COUNT:
            raise ValueError(
                f"PoseFrame needs {LANDMARK_COUNT} landmarks, got {len(self.landmarks)}"
            )
        if not isinstance(self.landmarks, tuple):
            object.__setattr__(self, "landmarks", tuple(self.landmarks))

    def get_landmark(self, body_part: BodyPart) -> Optional[PoseLandmark]:
        """Get a specific landmark, or None when it was not detected."""
        landmark = self.landmarks[body_part.value]
        if landmark.is_detected:
            return landmark
        return None

    def get_landmarks(self, *body_parts: BodyPart) -> Optional[tuple[PoseLandmark, ...]]:
        """Get several landmarks at once; None if any of them is missing."""
        found = tuple(self.get_landmark(part) for part in body_parts)
        if any(lm is None for lm in found):
            return None
        return found

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "frameIndex": self.frame_index,
            "timestamp": self.timestamp,
            "landmarks": [lm.to_list() for lm in self.landmarks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PoseFrame":
        return cls(
            frame_index=int(data["frameIndex"]),
            timestamp=float(data["timestamp"]),
            landmarks=tuple(PoseLandmark.from_list(lm) for lm in data["landmarks"]),
        )
