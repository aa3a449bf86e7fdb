"""Setup faults: posture and stance width at address."""

import logging

from ...domain.analysis import CameraAngle, ClubType, SwingPhase
from ...domain.mistakes import DetectorResult
from ..angle_calculator import AngleCalculator
from .base import Detector, DetectorInput


class PoorPostureDetector(Detector):
    """
    Spine bend at address outside the club's ideal range.

    Face-on views show lateral tilt rather than forward bend, so only
    down-the-line and oblique recordings are judged.
    """

    mistake_id = "POOR_POSTURE"
    supported_angles = frozenset({CameraAngle.DTL, CameraAngle.OBLIQUE})
    unsupported_reason = "Requires DTL or oblique camera angle for reliable detection"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        spine = abs(data.metrics.address_spine_angle)
        ideal_min, ideal_max = self.thresholds["ranges"][data.club_type]
        span = self.thresholds["severity_span"]

        log.debug(
            f"POOR_POSTURE: spine={spine:.1f}, ideal={ideal_min}-{ideal_max} ({data.club_type.value})"
        )

        if ideal_min <= spine <= ideal_max:
            return self.passed(0.85)

        if spine < ideal_min:
            return self.found(
                severity=min(100.0, (ideal_min - spine) / span * 100),
                confidence=0.75,
                message=f"Posture is too upright ({int(spine + 0.5)}°). Try bending more from the hips.",
            )
        return self.found(
            severity=min(100.0, (spine - ideal_max) / span * 100),
            confidence=0.75,
            message=(
                f"Posture is too bent over ({int(spine + 0.5)}°). "
                "Stand a bit more upright at address."
            ),
        )


class StanceWidthDetector(Detector):
    """
    Stance too narrow for a driver or too wide for an iron.

    Stance width is itself a club-type signal, so unless the player chose
    the club, judging it against the detected club would be circular.
    """

    mistake_id = "STANCE_WIDTH_ISSUE"
    supported_angles = frozenset({CameraAngle.FACE_ON, CameraAngle.OBLIQUE})
    unsupported_reason = "Requires face-on or oblique camera angle"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        if not data.club_type_overridden:
            return self.abstain("Club type was inferred from stance width; set the club to evaluate stance")
        if data.club_type == ClubType.UNKNOWN:
            return self.abstain("Club type unknown - cannot evaluate stance width")

        address = data.segment(SwingPhase.ADDRESS)
        if address is None:
            return self.abstain("No address phase detected")

        frame = data.frame((address.start_frame + address.end_frame) // 2)
        if frame is None:
            return self.abstain("No landmarks available")

        hip_width = AngleCalculator.calculate_body_width(frame, "hips")
        ankle_width = AngleCalculator.calculate_body_width(frame, "ankles")
        if ankle_width == 0:
            return self.abstain("Missing ankle or hip landmarks")
        if hip_width == 0:
            return self.abstain("Invalid hip width")

        ratio = ankle_width / hip_width
        driver_min = self.thresholds["driver_min"]
        iron_max = self.thresholds["iron_max"]
        span = self.thresholds["severity_span"]

        log.debug(f"STANCE_WIDTH_ISSUE: ratio={ratio:.2f}, club={data.club_type.value}")

        if data.club_type == ClubType.DRIVER and ratio < driver_min:
            return self.found(
                severity=min(100.0, (driver_min - ratio) / span * 100),
                confidence=0.75,
                message=(
                    f"Stance is too narrow for driver ({ratio:.2f}x hip width). "
                    "Widen your stance for better stability."
                ),
            )
        if data.club_type == ClubType.IRON and ratio > iron_max:
            return self.found(
                severity=min(100.0, (ratio - iron_max) / span * 100),
                confidence=0.75,
                message=(
                    f"Stance is too wide for iron ({ratio:.2f}x hip width). "
                    "A narrower stance gives better control."
                ),
            )
        return self.passed(0.8)
