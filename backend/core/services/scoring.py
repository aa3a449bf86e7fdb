"""
Scoring Engine

Weighted 0-100 score from swing metrics and tempo, minus a bounded
penalty for detected faults.
"""

import logging
import math
from typing import Optional, Sequence

from ..config import (
    FACE_ON_METRIC_DEFAULT,
    HEAD_STABILITY_RANGE,
    HIP_SWAY_RANGE,
    IMPACT_EXTENSION_RANGE,
    PENALTY,
    MetricRange,
    get_metric_ranges,
    get_profile,
)
from ..domain.analysis import CameraAngle, ClubType, SwingMetrics
from ..domain.mistakes import DetectorResult
from .trace import resolve_logger


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_in_range(value: float, metric_range: MetricRange) -> float:
    """
    100 inside the ideal band, falling linearly to 0 at the absolute bound.

    Each side of the ideal band is evaluated independently. A side whose
    absolute bound equals its ideal bound drops straight to 0.
    """
    if metric_range.ideal_min <= value <= metric_range.ideal_max:
        return 100.0

    if value < metric_range.ideal_min:
        span = metric_range.ideal_min - metric_range.absolute_min
        distance = metric_range.ideal_min - value
    else:
        span = metric_range.absolute_max - metric_range.ideal_max
        distance = value - metric_range.ideal_max

    if span <= 0:
        return 0.0
    return max(0.0, min(100.0, 100 - distance / span * 100))


def calculate_spine_consistency(metrics: SwingMetrics, tolerance: float) -> float:
    """100 minus the address-to-impact spine change scaled by tolerance."""
    change = abs(metrics.address_spine_angle - metrics.impact_spine_angle)
    return 100 - min(100.0, change * tolerance)


def calculate_overall_score(
    metrics: SwingMetrics,
    tempo_score: float,
    camera_angle: CameraAngle,
    club_type: ClubType = ClubType.UNKNOWN,
    logger: Optional[logging.Logger] = None
) -> int:
    """
    Base score before fault penalties.

    Weights come from the camera angle profile; ideal bands from the club
    type when known.
    """
    log = resolve_logger(logger)

    profile = get_profile(camera_angle)
    weights = profile.scoring_weights
    ranges = get_metric_ranges(camera_angle, club_type)

    terms = {
        "xFactor": score_in_range(metrics.max_x_factor, ranges.x_factor) * weights.x_factor,
        "shoulder": score_in_range(metrics.max_shoulder_rotation, ranges.shoulder) * weights.shoulder,
        "hip": score_in_range(metrics.max_hip_rotation, ranges.hip) * weights.hip,
        "spine": calculate_spine_consistency(metrics, profile.spine_tolerance) * weights.spine,
        "leadArm": score_in_range(metrics.top_lead_arm_extension, ranges.lead_arm) * weights.lead_arm,
        "tempo": max(0.0, min(100.0, tempo_score)) * weights.tempo,
    }

    if profile.face_on_metrics:
        hip_sway = metrics.hip_sway if metrics.hip_sway is not None else FACE_ON_METRIC_DEFAULT
        head = metrics.head_stability if metrics.head_stability is not None else FACE_ON_METRIC_DEFAULT
        extension = (
            metrics.impact_extension if metrics.impact_extension is not None else FACE_ON_METRIC_DEFAULT
        )
        # Sway and head movement are "lower is better"; score their complement
        terms["hipSway"] = score_in_range(1 - hip_sway, HIP_SWAY_RANGE) * weights.hip_sway
        terms["headStability"] = score_in_range(1 - head, HEAD_STABILITY_RANGE) * weights.head_stability
        terms["impactExtension"] = (
            score_in_range(extension, IMPACT_EXTENSION_RANGE) * weights.impact_extension
        )

    score = _round(sum(terms.values()))
    log.debug(
        f"Base score {score} ({camera_angle.value}, {club_type.value}): "
        + ", ".join(f"{name}={value:.1f}" for name, value in terms.items())
    )
    return max(0, min(100, score))


def calculate_penalty(results: Sequence[DetectorResult]) -> int:
    """
    Fault penalty: tier points by severity, weighted by confidence, capped.

    severity >= 70 -> 5 points, >= 40 -> 3 points, otherwise 1 point.
    """
    total = 0.0
    for result in results:
        if not result.detected:
            continue
        if result.severity >= PENALTY["high_severity"]:
            points = PENALTY["high_points"]
        elif result.severity >= PENALTY["medium_severity"]:
            points = PENALTY["medium_points"]
        else:
            points = PENALTY["low_points"]
        total += points * result.confidence
    return min(PENALTY["max_penalty"], _round(total))


def apply_penalty(base_score: int, penalty: int) -> int:
    return max(0, min(100, _round(base_score - penalty)))
