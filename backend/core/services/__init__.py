"""
Services Layer

Analysis stages for golf swings. Each stage is a pure function over domain
records; SwingAnalyzer chains them into the full pipeline.
"""

from .angle_calculator import AngleCalculator
from .camera_angle import detect_camera_angle, detect_camera_angle_from_frames
from .club_detector import detect_club_type, detect_club_type_from_frames
from .phase_detector import detect_handedness, detect_swing_phases
from .tempo_analyzer import (
    consolidate_phases,
    calculate_tempo_metrics,
    evaluate_tempo,
    format_tempo_ratio,
    format_duration,
)
from .metrics_aggregator import calculate_swing_metrics
from .scoring import calculate_overall_score, calculate_penalty
from .feedback import generate_swing_feedback
from .swing_analyzer import SwingAnalyzer, parse_club_type

__all__ = [
    "AngleCalculator",
    "detect_camera_angle",
    "detect_camera_angle_from_frames",
    "detect_club_type",
    "detect_club_type_from_frames",
    "detect_handedness",
    "detect_swing_phases",
    "consolidate_phases",
    "calculate_tempo_metrics",
    "evaluate_tempo",
    "format_tempo_ratio",
    "format_duration",
    "calculate_swing_metrics",
    "calculate_overall_score",
    "calculate_penalty",
    "generate_swing_feedback",
    "SwingAnalyzer",
    "parse_club_type",
]
