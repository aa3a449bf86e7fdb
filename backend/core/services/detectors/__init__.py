"""
Fault Detectors

One detector per swing mistake, grouped by the part of the swing they judge.
"""

from .base import (
    Detector,
    DetectorInput,
    create_not_detected_result,
    get_phase_frame_indices,
)
from .registry import (
    ALL_DETECTORS,
    run_all_detectors,
    get_detected_mistakes,
    get_detected_mistakes_by_severity,
    get_top_mistakes,
)

__all__ = [
    "Detector",
    "DetectorInput",
    "create_not_detected_result",
    "get_phase_frame_indices",
    "ALL_DETECTORS",
    "run_all_detectors",
    "get_detected_mistakes",
    "get_detected_mistakes_by_severity",
    "get_top_mistakes",
]
