"""Backswing faults: sway, pivot, coil, lead arm, head and pace."""

import logging
import math

from ...config import FEEDBACK_THRESHOLDS, get_profile
from ...domain.pose import BodyPart
from ...domain.analysis import CameraAngle, SwingPhase
from ...domain.mistakes import DetectorResult
from .base import (
    Detector,
    DetectorInput,
    hip_center_x,
    stance_width,
    target_is_higher_x,
)

FACE_ON_ONLY = frozenset({CameraAngle.FACE_ON})
NOT_DTL = frozenset({CameraAngle.FACE_ON, CameraAngle.OBLIQUE})


class SwayingDetector(Detector):
    """Lateral hip travel over the swing, from the face-on hip sway metric."""

    mistake_id = "SWAYING"
    supported_angles = FACE_ON_ONLY
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        hip_sway = data.metrics.hip_sway
        if hip_sway is None:
            return self.abstain("Hip sway metric not available")

        band = FEEDBACK_THRESHOLDS["hip_sway"]
        if hip_sway <= band.good:
            return self.passed(0.9)

        severity = min(100.0, hip_sway / self.thresholds["severe"] * 100)
        if hip_sway > band.ok:
            message = (
                f"Excessive hip sway detected ({hip_sway * 100:.0f}%). "
                "Focus on rotating around your spine instead of sliding laterally."
            )
        else:
            message = (
                "Slight hip sway detected. "
                "Work on keeping your lower body more stable during the backswing."
            )
        return self.found(severity, 0.9, message)


class ReversePivotDetector(Detector):
    """Hips drifting toward the target between address and the top."""

    mistake_id = "REVERSE_PIVOT"
    supported_angles = FACE_ON_ONLY
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        address = data.segment(SwingPhase.ADDRESS)
        top = data.segment(SwingPhase.TOP)
        if address is None or top is None:
            return self.abstain("Address or top phase not detected")

        address_frame = data.frame(address.end_frame)
        top_frame = data.frame(top.start_frame)
        if address_frame is None or top_frame is None:
            return self.abstain("No landmarks at address or top")

        address_x = hip_center_x(address_frame)
        top_x = hip_center_x(top_frame)
        if address_x is None or top_x is None:
            return self.abstain("Missing hip landmarks")

        width = stance_width(address_frame)
        toward_higher_x = target_is_higher_x(address_frame, data.is_right_handed)
        if toward_higher_x is None:
            return self.abstain("Missing ankle landmarks")
        if width == 0:
            return self.abstain("Invalid stance width")

        movement = (top_x - address_x) if toward_higher_x else (address_x - top_x)
        movement /= width

        log.debug(f"REVERSE_PIVOT: toward-target movement={movement * 100:.1f}% of stance")

        if movement < self.thresholds["threshold"]:
            return self.passed(0.8)

        return self.found(
            severity=min(100.0, movement / self.thresholds["severe"] * 100),
            confidence=0.75,
            message="Weight is moving toward the target during backswing. Focus on loading into your trail side.",
            details=f"Hip moved {movement * 100:.1f}% toward target",
        )


class InsufficientShoulderTurnDetector(Detector):
    mistake_id = "INSUFFICIENT_SHOULDER_TURN"
    supported_angles = NOT_DTL
    unsupported_reason = "Rotation metrics unreliable for DTL camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        x_factor = data.metrics.max_x_factor
        minimum = self.thresholds["min_x_factor"]
        if x_factor >= minimum:
            return self.passed(0.85)

        return self.found(
            severity=min(100.0, (minimum - x_factor) / self.thresholds["severity_span"] * 100),
            confidence=0.8,
            message=(
                f"X-factor of {int(x_factor + 0.5)}° is low. "
                "Try rotating your shoulders more while keeping hips stable."
            ),
            details=f"X-factor should be at least {minimum}°",
        )


class OverRotationDetector(Detector):
    mistake_id = "OVER_ROTATION"
    supported_angles = NOT_DTL
    unsupported_reason = "Rotation metrics unreliable for DTL camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        x_factor = data.metrics.max_x_factor
        maximum = self.thresholds["max_x_factor"]
        if x_factor <= maximum:
            return self.passed(0.85)

        return self.found(
            severity=min(100.0, (x_factor - maximum) / self.thresholds["severity_span"] * 100),
            confidence=0.8,
            message=(
                f"X-factor of {int(x_factor + 0.5)}° is very high. "
                "This may cause consistency issues and loss of control."
            ),
            details=f"X-factor exceeds ideal max of {maximum}°",
        )


class BentLeadArmDetector(Detector):
    """Lead elbow angle at the top, judged against camera-angle thresholds."""

    mistake_id = "BENT_LEAD_ARM"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        profile = get_profile(data.camera_angle)
        band = profile.lead_arm
        extension = data.metrics.top_lead_arm_extension

        if extension < self.thresholds["implausible_below"]:
            return self.abstain("Measurement unreliable (angle too low)")
        if extension >= band.good:
            return self.passed(0.85)

        if extension >= band.ok:
            severity = 30 + (band.good - extension) / (band.good - band.ok) * 30
            message = "Slightly bent lead arm at top. Work on keeping it straighter for more width in your swing."
        else:
            severity = 60 + min(40.0, (band.ok - extension) / self.thresholds["severe_span"] * 40)
            message = (
                f"Lead arm is quite bent at top ({int(extension + 0.5)}°). "
                "This reduces your swing arc and power."
            )

        return self.found(severity, profile.measurement_confidence, message)


class LiftingHeadDetector(Detector):
    """
    Head rising between address and the top, relative to torso height.

    Uses the ear midpoint when both ears are tracked at address, otherwise
    the nose height relative to the shoulders.
    """

    mistake_id = "LIFTING_HEAD"
    supported_angles = NOT_DTL
    unsupported_reason = "Requires face-on or oblique camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        address = data.segment(SwingPhase.ADDRESS)
        top = data.segment(SwingPhase.TOP)
        if address is None or top is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        if address_frame is None:
            return self.abstain("No landmarks at address")

        nose = address_frame.get_landmark(BodyPart.NOSE)
        left_shoulder = address_frame.get_landmark(BodyPart.LEFT_SHOULDER)
        left_hip = address_frame.get_landmark(BodyPart.LEFT_HIP)
        if nose is None or left_shoulder is None or left_hip is None:
            return self.abstain("Missing required landmarks at address")

        torso = abs(left_shoulder.y - left_hip.y)
        if torso == 0:
            return self.abstain("Invalid torso height")

        address_ears = _ears_y(address_frame)
        address_head_gap = nose.y - _shoulders_y(address_frame)

        min_ears = address_ears if address_ears is not None else math.inf
        min_head_gap = address_head_gap
        for i in range(address.end_frame, min(top.end_frame, len(data.frames) - 1) + 1):
            frame = data.frames[i]
            ears = _ears_y(frame)
            if ears is not None and ears < min_ears:
                min_ears = ears
            frame_nose = frame.get_landmark(BodyPart.NOSE)
            shoulders = _shoulders_y(frame)
            if frame_nose is not None and shoulders is not None:
                min_head_gap = min(min_head_gap, frame_nose.y - shoulders)

        if address_ears is not None:
            lift = (address_ears - min_ears) / torso
        else:
            lift = (address_head_gap - min_head_gap) / torso

        threshold = self.thresholds["threshold"]
        warning = self.thresholds["warning"]
        log.debug(f"LIFTING_HEAD: lift={lift * 100:.1f}% of torso")

        if lift < threshold:
            return self.passed(0.8)

        if lift > warning:
            message = "Significant head lifting during backswing. Keep your head level to maintain your spine angle."
        else:
            message = "Slight head lifting in backswing. Try to keep your head more still."
        return self.found(
            severity=min(100.0, lift / self.thresholds["severe"] * 100),
            confidence=0.75,
            message=message,
            details=f"Head lifted {lift * 100:.1f}% of torso height",
        )


def _ears_y(frame):
    ears = frame.get_landmarks(BodyPart.LEFT_EAR, BodyPart.RIGHT_EAR)
    if ears is None:
        return None
    return (ears[0].y + ears[1].y) / 2


def _shoulders_y(frame):
    left = frame.get_landmark(BodyPart.LEFT_SHOULDER)
    right = frame.get_landmark(BodyPart.RIGHT_SHOULDER)
    if left is not None and right is not None:
        return (left.y + right.y) / 2
    if left is not None:
        return left.y
    if right is not None:
        return right.y
    return None


class RushingBackswingDetector(Detector):
    """Backswing much quicker than the downswing allows for."""

    mistake_id = "RUSHING_BACKSWING"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        ratio = data.tempo.tempo_ratio
        if ratio <= 0:
            return self.abstain("Tempo could not be measured")

        min_ratio = self.thresholds["min_ratio"]
        very_rushed = self.thresholds["very_rushed"]
        if ratio >= min_ratio:
            return self.passed(0.85)

        severity = min(100.0, (min_ratio - ratio) / self.thresholds["severity_span"] * 100)
        if ratio < very_rushed:
            message = f"Backswing is much too fast ({ratio:.1f}:1 ratio). Slow down to allow proper loading."
        else:
            message = f"Backswing is slightly rushed ({ratio:.1f}:1 ratio). Aim for a smoother 3:1 tempo."
        return self.found(
            severity, 0.85, message,
            details=f"Tempo ratio: {ratio:.2f}, Ideal: ~3.0",
        )
