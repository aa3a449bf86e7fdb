"""Tempo fault."""

import logging

from ...config import TEMPO
from ...domain.mistakes import DetectorResult
from .base import Detector, DetectorInput


class PoorTempoRatioDetector(Detector):
    """Backswing to downswing ratio outside the good band around 3:1."""

    mistake_id = "POOR_TEMPO_RATIO"

    def detect(self, data: DetectorInput, log: logging.Logger) -> DetectorResult:
        ratio = data.tempo.tempo_ratio
        if ratio <= 0:
            return self.abstain("Tempo could not be measured")

        ideal = TEMPO["ideal_ratio"]
        tolerance = TEMPO["good_tolerance"]
        deviation = abs(ratio - ideal)
        log.debug(
            f"POOR_TEMPO_RATIO: ratio={ratio:.2f}, deviation={deviation:.2f} "
            f"(backswing {data.tempo.backswing_duration:.2f}s, downswing {data.tempo.downswing_duration:.2f}s)"
        )

        if deviation <= tolerance:
            return self.passed(0.9)

        if ratio < ideal - tolerance:
            if ratio < self.thresholds["very_rushed"]:
                message = f"Tempo is very rushed ({ratio:.1f}:1). Slow down your backswing for better rhythm."
            else:
                message = (
                    f"Tempo is slightly quick ({ratio:.1f}:1). "
                    "Aim for a smoother 3:1 backswing to downswing ratio."
                )
        elif ratio > self.thresholds["very_slow"]:
            message = f"Tempo is very slow ({ratio:.1f}:1). A quicker transition may help generate power."
        else:
            message = f"Tempo is slightly slow ({ratio:.1f}:1). Consider a slightly quicker transition."

        return self.found(
            severity=min(100.0, (deviation - tolerance) / self.thresholds["severity_span"] * 100),
            confidence=0.85,
            message=message,
            details=f"Ratio: {ratio:.2f}, Ideal: ~{ideal}:1",
        )
