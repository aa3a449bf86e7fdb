"""Follow-through and finish faults."""

import logging

from ...domain.pose import BodyPart
from ...domain.analysis import CameraAngle, SwingPhase
from ...domain.mistakes import DetectorResult
from ..angle_calculator import AngleCalculator
from .base import Detector, DetectorInput, lead_landmark, stance_width


class IncompleteFollowThroughDetector(Detector):
    """
    Body rotation stalling after impact.

    Shoulder rotation comes from shoulder width narrowing relative to
    address; a full finish turns well past impact and approaches 90°.
    """

    mistake_id = "INCOMPLETE_FOLLOW_THROUGH"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        impact = data.segment(SwingPhase.IMPACT)
        address = data.segment(SwingPhase.ADDRESS)
        if impact is None or address is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        impact_frame = data.frame(impact.start_frame)
        if address_frame is None or impact_frame is None:
            return self.abstain("No landmarks at address or impact")
        if AngleCalculator.calculate_body_width(address_frame, "shoulders") == 0:
            return self.abstain("Missing shoulder landmarks at address")

        impact_rotation = AngleCalculator.calculate_rotation_from_width(
            impact_frame, address_frame, "shoulders"
        )

        finish = data.segment(SwingPhase.FINISH)
        follow_through = data.segment(SwingPhase.FOLLOW_THROUGH)
        if finish is not None:
            search_end = finish.end_frame
        elif follow_through is not None:
            search_end = follow_through.end_frame
        else:
            search_end = len(data.frames) - 1

        max_rotation = impact_rotation
        for i in range(impact.start_frame, min(search_end, len(data.frames) - 1) + 1):
            frame = data.frames[i]
            if AngleCalculator.calculate_body_width(frame, "shoulders") == 0:
                continue
            rotation = AngleCalculator.calculate_rotation_from_width(frame, address_frame, "shoulders")
            max_rotation = max(max_rotation, rotation)

        increase = max_rotation - impact_rotation
        ideal = self.thresholds["ideal_finish_rotation"]
        turned_through = increase >= self.thresholds["min_increase"]
        full_finish = max_rotation >= ideal

        log.debug(
            f"INCOMPLETE_FOLLOW_THROUGH: impact rotation={impact_rotation:.1f}°, "
            f"max={max_rotation:.1f}°"
        )

        if turned_through and full_finish:
            return self.passed(0.8)

        if not turned_through:
            severity = 70.0
            message = "Swing is stopping at impact. Let the club release naturally through to a full finish."
        else:
            severity = min(70.0, (ideal - max_rotation) / 30 * 70)
            message = (
                f"Follow-through is cut short ({int(max_rotation + 0.5)}° rotation). "
                "Complete your swing with full body rotation."
            )
        return self.found(
            severity, 0.75, message,
            details=f"Impact rotation: {int(impact_rotation + 0.5)}°, Max finish: {int(max_rotation + 0.5)}°",
        )


class UnbalancedFinishDetector(Detector):
    """Hips over-rotated past the lead foot, or left behind center, at the finish."""

    mistake_id = "UNBALANCED_FINISH"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        finish = data.segment(SwingPhase.FINISH)
        address = data.segment(SwingPhase.ADDRESS)
        if finish is None or address is None:
            return self.abstain("Required phases not detected")

        address_frame = data.frame(address.end_frame)
        if address_frame is None:
            return self.abstain("No landmarks at address")
        width = stance_width(address_frame)
        if width == 0:
            return self.abstain("Invalid stance width")

        t = self.thresholds
        end = min(finish.end_frame, len(data.frames) - 1)
        start = max(finish.start_frame, end - t["sample_frames"])
        rh = data.is_right_handed

        over_rotation = 0.0
        falling_back = 0.0
        for i in range(start, end + 1):
            frame = data.frames[i]
            points = frame.get_landmarks(
                BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP, BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE
            )
            if points is None:
                continue
            left_hip, right_hip, left_ankle, right_ankle = points
            hip_x = (left_hip.x + right_hip.x) / 2
            lead_ankle_x = lead_landmark(frame, "ankle", rh).x
            ankle_center_x = (left_ankle.x + right_ankle.x) / 2

            past_lead = hip_x - lead_ankle_x if rh else lead_ankle_x - hip_x
            behind_center = ankle_center_x - hip_x if rh else hip_x - ankle_center_x
            over_rotation = max(over_rotation, past_lead / width)
            falling_back = max(falling_back, behind_center / width)

        log.debug(
            f"UNBALANCED_FINISH: over-rotation={over_rotation * 100:.0f}%, "
            f"falling back={falling_back * 100:.0f}% of stance"
        )

        if over_rotation <= t["over_rotation"] and falling_back <= t["falling_back"]:
            return self.passed(0.75)

        severe = t["severe"]
        if over_rotation > falling_back:
            offset = over_rotation
            if over_rotation > severe:
                message = "Finish position is very unbalanced - rotating too far past lead foot."
            else:
                message = "Slight over-rotation at finish. Focus on stopping with weight centered over lead foot."
            details = f"Over-rotation past lead foot: {over_rotation * 100:.0f}% of stance width"
        else:
            offset = falling_back
            if falling_back > severe:
                message = "Falling back at finish - weight staying on trail foot. Work on transferring weight forward."
            else:
                message = (
                    "Weight not fully transferred to lead foot at finish. "
                    "Focus on driving through to a balanced finish."
                )
            details = f"Weight behind center: {falling_back * 100:.0f}% of stance width"

        return self.found(
            severity=min(100.0, offset / t["severity_span"] * 100),
            confidence=0.7,
            message=message,
            details=details,
        )


class ReverseCFinishDetector(Detector):
    mistake_id = "REVERSE_C_FINISH"
    supported_angles = frozenset({CameraAngle.DTL, CameraAngle.OBLIQUE})
    unsupported_reason = "More reliable for DTL camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        finish = data.segment(SwingPhase.FINISH)
        if finish is None:
            return self.abstain("Finish phase not detected")

        # Most negative spine angle is the deepest backward lean
        lean = 0.0
        for i in range(finish.start_frame, min(finish.end_frame, len(data.frames) - 1) + 1):
            lean = min(lean, AngleCalculator.calculate_spine_angle(data.frames[i]))

        log.debug(f"REVERSE_C_FINISH: max backward lean={lean:.1f}°")

        if lean > self.thresholds["threshold"]:
            return self.passed(0.75)

        backward = abs(lean)
        if lean < self.thresholds["severe"]:
            message = (
                f"Significant reverse C finish ({int(backward + 0.5)}° backward lean). "
                "This can strain your lower back."
            )
        else:
            message = "Slight reverse C tendency at finish. Work on a more stacked, balanced finish position."
        return self.found(
            severity=min(100.0, backward / self.thresholds["severity_span"] * 100),
            confidence=0.7,
            message=message,
        )
