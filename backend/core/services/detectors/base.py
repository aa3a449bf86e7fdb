"""
Detector contract.

Every fault detector receives the same DetectorInput bundle and returns a
DetectorResult. A detector that cannot judge the swing (unsupported camera
angle, missing phase or landmarks, implausible measurement) abstains with
create_not_detected_result() instead of guessing.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ...config import DETECTOR_THRESHOLDS
from ...domain.pose import PoseFrame, PoseLandmark, BodyPart
from ...domain.mistakes import DetectorResult
from ...domain.analysis import (
    CameraAngle,
    ClubType,
    PhaseSegment,
    SwingMetrics,
    SwingPhase,
    TempoMetrics,
)
from ..angle_calculator import AngleCalculator
from ..trace import resolve_logger


@dataclass(frozen=True)
class DetectorInput:
    """
    Everything a detector may look at.

    Attributes:
        frames: Original pose frames (position == frame_index)
        phase_segments: Consolidated phase segments
        metrics: Aggregate swing metrics
        tempo: Backswing/downswing timing
        is_right_handed: Decides the lead side
        camera_angle: Recording viewpoint
        club_type: Detected or user-chosen club
        club_type_overridden: True when the user chose the club
    """
    frames: Sequence[PoseFrame]
    phase_segments: Sequence[PhaseSegment]
    metrics: SwingMetrics
    tempo: TempoMetrics
    is_right_handed: bool
    camera_angle: CameraAngle
    club_type: ClubType
    club_type_overridden: bool = False

    def frame(self, index: int) -> Optional[PoseFrame]:
        if 0 <= index < len(self.frames):
            return self.frames[index]
        return None

    def segment(self, phase: SwingPhase) -> Optional[PhaseSegment]:
        return get_phase_frame_indices(self.phase_segments, phase)


def create_not_detected_result(mistake_id: str, details: Optional[str] = None) -> DetectorResult:
    """Abstention: the detector could not evaluate this swing."""
    return DetectorResult(
        mistake_id=mistake_id,
        detected=False,
        confidence=0.0,
        severity=0.0,
        message="",
        details=details,
    )


def get_phase_frame_indices(
    segments: Sequence[PhaseSegment],
    phase: SwingPhase
) -> Optional[PhaseSegment]:
    """First segment of the given phase, or None."""
    for segment in segments:
        if segment.phase == phase:
            return segment
    return None


# =============================================================================
# Shared geometry
# =============================================================================

def hip_center_x(frame: PoseFrame) -> Optional[float]:
    center = AngleCalculator.pair_midpoint(frame, "hips")
    return center[0] if center else None


def stance_width(frame: PoseFrame) -> float:
    """Ankle span at a frame; 0 if ankles are missing."""
    return AngleCalculator.calculate_body_width(frame, "ankles")


def target_is_higher_x(frame: PoseFrame, is_right_handed: bool) -> Optional[bool]:
    """Whether the target lies toward +x, judged from the lead and trail ankles."""
    ankles = frame.get_landmarks(BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE)
    if ankles is None:
        return None
    left, right = ankles
    lead, trail = (left, right) if is_right_handed else (right, left)
    return lead.x > trail.x


def lead_landmark(frame: PoseFrame, joint: str, is_right_handed: bool) -> Optional[PoseLandmark]:
    side = "left" if is_right_handed else "right"
    return frame.get_landmark(BodyPart[f"{side.upper()}_{joint.upper()}"])


# =============================================================================
# Detector base class
# =============================================================================

ALL_ANGLES = frozenset(CameraAngle)


class Detector:
    """
    Base class for fault detectors.

    Subclasses set mistake_id, optionally restrict supported_angles, and
    implement detect(). Calling a detector applies the camera-angle gate and
    clamps severity and confidence into range.
    """

    mistake_id: str = ""
    supported_angles: frozenset = ALL_ANGLES
    unsupported_reason: str = "Unsupported camera angle"

    @property
    def thresholds(self) -> dict:
        return DETECTOR_THRESHOLDS.get(self.mistake_id, {})

    def __call__(self, data: DetectorInput, logger: Optional[logging.Logger] = None) -> DetectorResult:
        log = resolve_logger(logger)

        if data.camera_angle not in self.supported_angles:
            log.debug(f"{self.mistake_id}: skipped ({data.camera_angle.value} camera)")
            return create_not_detected_result(self.mistake_id, self.unsupported_reason)

        result = self.detect(data, log)
        return DetectorResult(
            mistake_id=result.mistake_id,
            detected=result.detected,
            confidence=max(0.0, min(1.0, result.confidence)),
            severity=max(0.0, min(100.0, result.severity)) if result.detected else 0.0,
            message=result.message,
            details=result.details,
            affected_frames=result.affected_frames,
        )

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Result helpers
    # -------------------------------------------------------------------------

    def abstain(self, reason: str) -> DetectorResult:
        return create_not_detected_result(self.mistake_id, reason)

    def passed(self, confidence: float) -> DetectorResult:
        """Evaluated and not present."""
        return DetectorResult(
            mistake_id=self.mistake_id,
            detected=False,
            confidence=confidence,
            severity=0.0,
        )

    def found(
        self,
        severity: float,
        confidence: float,
        message: str,
        details: Optional[str] = None,
        affected_frames: Optional[list[int]] = None
    ) -> DetectorResult:
        return DetectorResult(
            mistake_id=self.mistake_id,
            detected=True,
            confidence=confidence,
            severity=severity,
            message=message,
            details=details,
            affected_frames=affected_frames,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.mistake_id})"
