"""Impact faults: chicken wing, arm extension and head movement."""

import logging
from typing import Optional

from ...config import FEEDBACK_THRESHOLDS
from ...domain.analysis import CameraAngle, PhaseSegment, SwingPhase
from ...domain.mistakes import DetectorResult
from ..angle_calculator import AngleCalculator, lead_side, side_part
from .base import Detector, DetectorInput


class ChickenWingDetector(Detector):
    """
    Lead elbow breaking down through impact.

    Face-on and oblique recordings measure the lead elbow angle directly.
    Down-the-line recordings cannot see the angle, so the lead arm's
    emergence from behind the body is tracked through landmark visibility:
    an elbow showing before the wrist, or ahead of it toward the target,
    reads as a chicken wing.
    """

    mistake_id = "CHICKEN_WING"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        impact = data.segment(SwingPhase.IMPACT)
        if impact is None:
            return self.abstain("Impact phase not detected")
        follow_through = data.segment(SwingPhase.FOLLOW_THROUGH)

        if data.camera_angle == CameraAngle.DTL:
            return self._detect_from_visibility(data, impact, follow_through, log)
        return self._detect_from_elbow_angle(data, impact, follow_through, log)

    # -------------------------------------------------------------------------
    # Face-on / oblique
    # -------------------------------------------------------------------------

    def _detect_from_elbow_angle(
        self,
        data: DetectorInput,
        impact: PhaseSegment,
        follow_through: Optional[PhaseSegment],
        log: logging.Logger
    ) -> DetectorResult:
        t = self.thresholds
        side = lead_side(data.is_right_handed)
        last = len(data.frames) - 1
        anchor = follow_through.start_frame if follow_through else impact.end_frame
        end = min(anchor + 5, last)

        min_angle = 180.0
        measured = 0
        bent_frames = []
        for i in range(impact.start_frame, end + 1):
            frame = data.frames[i]
            angle = AngleCalculator.calculate_angle(
                frame.get_landmark(side_part(side, "shoulder")),
                frame.get_landmark(side_part(side, "elbow")),
                frame.get_landmark(side_part(side, "wrist")),
            )
            if angle == 0:
                continue
            measured += 1
            min_angle = min(min_angle, angle)
            if angle < t["elbow_bend_frame"]:
                bent_frames.append(i)

        if measured == 0:
            return self.abstain("Lead arm not visible through impact")

        if min_angle < t["implausible_below"]:
            log.debug(f"CHICKEN_WING: skipped, min elbow angle {min_angle:.1f}° implausible")
            return self.abstain("Measurement unreliable (angle too low)")

        log.debug(
            f"CHICKEN_WING: min elbow angle={min_angle:.1f}° over frames "
            f"{impact.start_frame}-{end}, bent frames={len(bent_frames)}"
        )

        threshold = t["elbow_threshold"]
        severe = t["elbow_severe"]
        if min_angle >= threshold:
            return self.passed(0.85)

        if min_angle < severe:
            message = (
                f"Lead arm collapsing through impact ({int(min_angle + 0.5)}°). "
                "Maintain extension for straighter shots."
            )
        else:
            message = "Slight chicken wing detected. Focus on keeping your lead arm extended through impact."
        return self.found(
            severity=min(100.0, (threshold - min_angle) / (threshold - severe + 20) * 100),
            confidence=0.8,
            message=message,
            details=f"Min elbow angle: {int(min_angle + 0.5)}°",
            affected_frames=bent_frames or None,
        )

    # -------------------------------------------------------------------------
    # Down-the-line
    # -------------------------------------------------------------------------

    def _detect_from_visibility(
        self,
        data: DetectorInput,
        impact: PhaseSegment,
        follow_through: Optional[PhaseSegment],
        log: logging.Logger
    ) -> DetectorResult:
        t = self.thresholds
        visible = t["visibility"]
        side = lead_side(data.is_right_handed)
        elbow_idx = side_part(side, "elbow").value
        wrist_idx = side_part(side, "wrist").value

        last = len(data.frames) - 1
        start = max(0, impact.start_frame - 3)
        anchor = follow_through.start_frame if follow_through else impact.end_frame
        end = min(anchor + 10, last)

        wrist_emerged = None
        elbow_emerged = None
        lead_distances = []
        elbow_only = 0
        elbow_ahead_diffs = []

        for i in range(start, end + 1):
            # Raw landmarks: an occluded joint is exactly what is being tracked
            elbow = data.frames[i].landmarks[elbow_idx]
            wrist = data.frames[i].landmarks[wrist_idx]
            elbow_visible = elbow.visibility >= visible
            wrist_visible = wrist.visibility >= visible

            if wrist_visible and wrist_emerged is None:
                wrist_emerged = i
            if elbow_visible and elbow_emerged is None:
                elbow_emerged = i

            if elbow_visible and wrist_visible:
                # Positive: wrist is nearer the target than the elbow
                lead = elbow.x - wrist.x if data.is_right_handed else wrist.x - elbow.x
                lead_distances.append(lead)

            if elbow_visible:
                diff = round(elbow.visibility - wrist.visibility, 3)
                if diff >= t["visibility_diff"]:
                    elbow_ahead_diffs.append(diff)
                if not wrist_visible:
                    elbow_only += 1

        avg_lead = sum(lead_distances) / len(lead_distances) if lead_distances else 0.0
        elbow_first = (
            wrist_emerged is not None and elbow_emerged is not None and elbow_emerged < wrist_emerged
        )

        has_elbow_only = elbow_only >= t["min_elbow_only_frames"]
        has_visibility_diff = len(elbow_ahead_diffs) >= t["min_visibility_diff_frames"]
        elbow_leading = avg_lead <= 0 and len(lead_distances) >= t["min_both_visible_frames"]

        signals = []
        if has_elbow_only:
            signals.append(f"elbow_only_visible({elbow_only} frames)")
        if has_visibility_diff:
            signals.append(f"visibility_diff({len(elbow_ahead_diffs)} frames)")
        if elbow_leading:
            signals.append(f"elbow_leading({avg_lead:.3f})")

        log.debug(
            f"CHICKEN_WING (DTL): frames {start}-{end}, wrist emerged={wrist_emerged}, "
            f"elbow emerged={elbow_emerged}, signals={', '.join(signals) or 'none'}"
        )

        if not signals:
            return self.passed(0.75)

        severity = 0.0
        confidence = 0.7
        if has_elbow_only:
            severity = max(severity, min(100.0, elbow_only * 20))
            confidence = max(confidence, 0.85)
        if has_visibility_diff:
            avg_diff = sum(elbow_ahead_diffs) / len(elbow_ahead_diffs)
            severity = max(severity, min(100.0, avg_diff * 300))
            confidence = max(confidence, 0.8)
        if elbow_leading:
            severity = max(severity, min(100.0, abs(avg_lead) * 1000))
            if elbow_first:
                confidence = max(confidence, 0.85)
        severity = max(severity, t["min_severity"])

        if has_elbow_only:
            message = (
                "Lead elbow is sticking out while hands stay behind body. "
                "Focus on keeping arms extended with hands leading through impact."
            )
        elif has_visibility_diff:
            message = "Lead elbow is breaking outward through impact. Maintain arm extension for straighter shots."
        else:
            message = "Slight chicken wing tendency detected. Keep your lead arm extended through the ball."

        return self.found(severity, confidence, message, details=f"Signals: {', '.join(signals)}")


class PoorArmExtensionDetector(Detector):
    mistake_id = "POOR_ARM_EXTENSION"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        extension = data.metrics.impact_extension
        if extension is None:
            return self.abstain("Impact extension metric not available")

        if extension >= FEEDBACK_THRESHOLDS["impact_extension"].good:
            return self.passed(0.85)

        if extension >= self.thresholds["limited_below"]:
            message = "Could improve arm extension through impact. Focus on reaching toward the target post-impact."
        else:
            message = "Limited arm extension through impact. Work on releasing the club fully toward the target."
        return self.found(
            severity=(1 - extension) * 100,
            confidence=0.8,
            message=message,
            details=f"Extension score: {extension * 100:.0f}%",
        )


class HeadMovementDetector(Detector):
    """Head displacement over the swing, from the face-on head stability metric."""

    mistake_id = "HEAD_MOVEMENT"
    supported_angles = frozenset({CameraAngle.FACE_ON})
    unsupported_reason = "Requires face-on camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        movement = data.metrics.head_stability
        if movement is None:
            return self.abstain("Head stability metric not available")
        if movement > self.thresholds["implausible_above"]:
            return self.abstain("Measurement unreliable (movement too large)")

        band = FEEDBACK_THRESHOLDS["head_stability"]
        if movement < band.good:
            return self.passed(0.85)

        if movement < band.ok:
            severity = 30 + (movement - band.good) / (band.ok - band.good) * 30
            message = "Minor head movement detected. Try to keep your head steadier for more consistent contact."
        else:
            severity = 60 + min(40.0, (movement - band.ok) / self.thresholds["severe_span"] * 40)
            message = (
                "Significant head movement during swing. "
                "Focus on keeping your head still for better consistency."
            )
        return self.found(severity, 0.85, message)
