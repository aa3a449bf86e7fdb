"""Downswing faults."""

import logging

from ...config import get_profile
from ...domain.pose import BodyPart
from ...domain.analysis import CameraAngle, SwingPhase
from ...domain.mistakes import DetectorResult
from .base import (
    Detector,
    DetectorInput,
    hip_center_x,
    lead_landmark,
    stance_width,
    target_is_higher_x,
)


def _hip_ankle_offset(frame):
    """Vertical gap between hip center and ankle center, or None."""
    points = frame.get_landmarks(
        BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE
    )
    if points is None:
        return None
    left_hip, right_hip, left_ankle, right_ankle = points
    return (left_hip.y + right_hip.y) / 2 - (left_ankle.y + right_ankle.y) / 2


class EarlyExtensionDetector(Detector):
    """
    Hips thrusting toward the ball between the top and impact.

    Measured as the hip-to-ankle vertical offset shrinking relative to
    address, normalized by torso height.
    """

    mistake_id = "EARLY_EXTENSION"
    supported_angles = frozenset({CameraAngle.DTL, CameraAngle.OBLIQUE})
    unsupported_reason = "Requires DTL camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        address = data.segment(SwingPhase.ADDRESS)
        downswing = data.segment(SwingPhase.DOWNSWING)
        top = data.segment(SwingPhase.TOP)
        impact = data.segment(SwingPhase.IMPACT)
        if address is None or downswing is None or top is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        if address_frame is None:
            return self.abstain("No landmarks at address")

        address_offset = _hip_ankle_offset(address_frame)
        if address_offset is None:
            return self.abstain("Missing landmarks at address")

        shoulder = address_frame.get_landmark(BodyPart.LEFT_SHOULDER)
        hip = address_frame.get_landmark(BodyPart.LEFT_HIP)
        if shoulder is None:
            return self.abstain("Missing shoulder landmarks")
        torso = abs(shoulder.y - hip.y)
        if torso == 0:
            return self.abstain("Invalid torso height")

        end = impact.end_frame if impact is not None else downswing.end_frame
        max_thrust = 0.0
        for i in range(top.start_frame, min(end, len(data.frames) - 1) + 1):
            offset = _hip_ankle_offset(data.frames[i])
            if offset is not None:
                max_thrust = max(max_thrust, address_offset - offset)

        thrust = max_thrust / torso
        log.debug(f"EARLY_EXTENSION: thrust={thrust * 100:.1f}% of torso")

        if thrust < self.thresholds["threshold"]:
            return self.passed(0.75)

        if thrust > self.thresholds["warning"]:
            message = (
                "Significant early extension - hips thrusting toward the ball. "
                "Focus on maintaining your tush line."
            )
        else:
            message = "Slight early extension detected. Keep your hips back through the downswing."
        return self.found(
            severity=min(100.0, thrust / self.thresholds["severe"] * 100),
            confidence=0.7,
            message=message,
            details=f"Hips moved forward {thrust * 100:.1f}% of torso height",
        )


class HangingBackDetector(Detector):
    """Too little hip shift toward the target from the top to impact."""

    mistake_id = "HANGING_BACK"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        address = data.segment(SwingPhase.ADDRESS)
        top = data.segment(SwingPhase.TOP)
        impact = data.segment(SwingPhase.IMPACT)
        if address is None or top is None or impact is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        top_frame = data.frame(top.start_frame)
        impact_frame = data.frame(impact.start_frame)
        if address_frame is None or top_frame is None or impact_frame is None:
            return self.abstain("Missing frames")

        width = stance_width(address_frame)
        toward_higher_x = target_is_higher_x(address_frame, data.is_right_handed)
        if toward_higher_x is None or width == 0:
            return self.abstain("Invalid stance width")

        top_x = hip_center_x(top_frame)
        impact_x = hip_center_x(impact_frame)
        if top_x is None or impact_x is None:
            return self.abstain("Missing hip landmarks")

        shift = (impact_x - top_x) if toward_higher_x else (top_x - impact_x)
        shift /= width
        log.debug(f"HANGING_BACK: shift={shift * 100:.1f}% of stance")

        if abs(shift) > self.thresholds["implausible_above"]:
            return self.abstain("Measurement unreliable (shift too large)")

        min_shift = self.thresholds["min_shift"]
        if shift >= min_shift:
            return self.passed(0.8)

        if shift < 0:
            message = (
                "Weight is moving away from target during downswing. "
                "Initiate with lateral hip shift toward target."
            )
        else:
            message = "Insufficient weight transfer toward target. Focus on shifting pressure to your lead foot."
        return self.found(
            severity=min(100.0, (min_shift - shift) / self.thresholds["severity_span"] * 100),
            confidence=0.75,
            message=message,
            details=f"Hip shift: {shift * 100:.1f}% of stance width",
        )


class LossOfSpineAngleDetector(Detector):
    mistake_id = "LOSS_OF_SPINE_ANGLE"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        profile = get_profile(data.camera_angle)
        band = profile.spine_diff
        diff = abs(data.metrics.address_spine_angle - data.metrics.impact_spine_angle)

        if diff < band.good:
            return self.passed(0.85)

        if diff < band.ok:
            severity = 30 + (diff - band.good) / (band.ok - band.good) * 30
            message = "Minor posture change during swing. Focus on maintaining spine angle."
        else:
            severity = 60 + min(40.0, (diff - band.ok) / self.thresholds["severe_span"] * 40)
            message = (
                f"Spine angle changed {int(diff + 0.5)}° from address to impact. "
                "Work on maintaining your posture through the ball."
            )
        return self.found(
            severity, profile.measurement_confidence, message,
            details=f"Address: {data.metrics.address_spine_angle:.1f}°, Impact: {data.metrics.impact_spine_angle:.1f}°",
        )


class SlidingHipsDetector(Detector):
    """
    Lateral hip slide, in the backswing or past the lead ankle at impact.

    Backswing sway is the largest hip-center drift from address up to the
    top; the impact slide is how far the lead hip sits past the lead ankle
    toward the target. Both are percentages of stance width.
    """

    mistake_id = "SLIDING_HIPS"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        address = data.segment(SwingPhase.ADDRESS)
        top = data.segment(SwingPhase.TOP)
        impact = data.segment(SwingPhase.IMPACT)
        if address is None or top is None or impact is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        if address_frame is None:
            return self.abstain("No landmarks at address")

        address_x = hip_center_x(address_frame)
        toward_higher_x = target_is_higher_x(address_frame, data.is_right_handed)
        if address_x is None or toward_higher_x is None:
            return self.abstain("Missing landmarks at address")
        width = stance_width(address_frame)
        if width == 0:
            return self.abstain("Invalid stance width")

        max_sway = 0.0
        for i in range(address.end_frame + 1, min(top.end_frame, len(data.frames) - 1) + 1):
            x = hip_center_x(data.frames[i])
            if x is not None:
                max_sway = max(max_sway, abs(x - address_x))
        sway_pct = max_sway / width * 100

        slide_pct = 0.0
        impact_frame = data.frame(impact.start_frame)
        if impact_frame is not None:
            lead_hip = lead_landmark(impact_frame, "hip", data.is_right_handed)
            lead_ankle = lead_landmark(impact_frame, "ankle", data.is_right_handed)
            if lead_hip is not None and lead_ankle is not None:
                past = lead_hip.x - lead_ankle.x if toward_higher_x else lead_ankle.x - lead_hip.x
                slide_pct = past / width * 100

        t = self.thresholds
        log.debug(f"SLIDING_HIPS: backswing sway={sway_pct:.1f}%, impact slide={slide_pct:.1f}%")

        sway_issue = sway_pct > t["sway_threshold"]
        slide_issue = slide_pct > t["impact_threshold"]
        if not sway_issue and not slide_issue:
            return self.passed(0.85)

        severity = 0.0
        messages = []
        details = []
        if sway_issue:
            excess = sway_pct - t["sway_threshold"]
            severity = max(severity, min(100.0, excess / (t["sway_severe"] - t["sway_threshold"]) * 100))
            if sway_pct > t["sway_severe"]:
                messages.append(
                    "Excessive hip sway during backswing. Keep your lower body stable and rotate around your spine."
                )
            else:
                messages.append("Hip sway detected in backswing. Focus on rotating rather than sliding laterally.")
            details.append(f"Backswing sway: {sway_pct:.0f}%")
        if slide_issue:
            excess = slide_pct - t["impact_threshold"]
            severity = max(severity, min(100.0, excess / (t["impact_severe"] - t["impact_threshold"]) * 100))
            if slide_pct > t["impact_severe"]:
                messages.append(
                    "Lead hip sliding well past lead ankle at impact. Rotate hips rather than sliding toward target."
                )
            else:
                messages.append(
                    "Lead hip moving past lead ankle. Keep lead hip stacked over ankle while rotating."
                )
            details.append(f"Impact slide: {slide_pct:.0f}% past ankle")

        return self.found(severity, 0.85, " ".join(messages), details=", ".join(details))
