"""
Detector registry and runner.

Detectors are independent; each one sees the same DetectorInput and the
order below only fixes the order of the returned results.
"""

import logging
from typing import Optional

from ...domain.mistakes import DetectorResult
from ..trace import resolve_logger
from .base import Detector, DetectorInput
from .setup import PoorPostureDetector, StanceWidthDetector
from .backswing import (
    BentLeadArmDetector,
    InsufficientShoulderTurnDetector,
    LiftingHeadDetector,
    OverRotationDetector,
    ReversePivotDetector,
    RushingBackswingDetector,
    SwayingDetector,
)
from .downswing import (
    EarlyExtensionDetector,
    HangingBackDetector,
    LossOfSpineAngleDetector,
    SlidingHipsDetector,
)
from .impact import ChickenWingDetector, HeadMovementDetector, PoorArmExtensionDetector
from .follow_through import (
    IncompleteFollowThroughDetector,
    ReverseCFinishDetector,
    UnbalancedFinishDetector,
)
from .tempo import PoorTempoRatioDetector


ALL_DETECTORS: tuple[Detector, ...] = (
    # Setup
    PoorPostureDetector(),
    StanceWidthDetector(),
    # Backswing
    SwayingDetector(),
    ReversePivotDetector(),
    InsufficientShoulderTurnDetector(),
    OverRotationDetector(),
    BentLeadArmDetector(),
    LiftingHeadDetector(),
    RushingBackswingDetector(),
    # Downswing
    EarlyExtensionDetector(),
    HangingBackDetector(),
    LossOfSpineAngleDetector(),
    SlidingHipsDetector(),
    # Impact
    ChickenWingDetector(),
    PoorArmExtensionDetector(),
    HeadMovementDetector(),
    # Follow-through
    IncompleteFollowThroughDetector(),
    UnbalancedFinishDetector(),
    ReverseCFinishDetector(),
    # Tempo
    PoorTempoRatioDetector(),
)


def run_all_detectors(
    data: DetectorInput,
    logger: Optional[logging.Logger] = None
) -> list[DetectorResult]:
    """
    Run every registered detector.

    Returns:
        Results that were either detected or evaluated with non-zero
        confidence; abstentions are dropped.
    """
    log = resolve_logger(logger)
    log.info(
        f"Running {len(ALL_DETECTORS)} detectors "
        f"({data.camera_angle.value}, {data.club_type.value}, "
        f"{'right' if data.is_right_handed else 'left'}-handed, {len(data.frames)} frames)"
    )

    results = [detector(data, log) for detector in ALL_DETECTORS]
    results = [r for r in results if r.detected or r.confidence > 0]

    detected = [r for r in results if r.detected]
    log.info(
        f"Detectors evaluated {len(results)}/{len(ALL_DETECTORS)}, detected {len(detected)}: "
        + (", ".join(f"{r.mistake_id}({r.severity:.0f})" for r in detected) or "none")
    )
    return results


def get_detected_mistakes(data: DetectorInput, logger: Optional[logging.Logger] = None) -> list[DetectorResult]:
    return [r for r in run_all_detectors(data, logger) if r.detected]


def get_detected_mistakes_by_severity(
    data: DetectorInput,
    logger: Optional[logging.Logger] = None
) -> list[DetectorResult]:
    """Detected mistakes, most severe first."""
    return sorted(get_detected_mistakes(data, logger), key=lambda r: r.severity, reverse=True)


def get_top_mistakes(
    data: DetectorInput,
    count: int = 3,
    logger: Optional[logging.Logger] = None
) -> list[DetectorResult]:
    return get_detected_mistakes_by_severity(data, logger)[:count]
