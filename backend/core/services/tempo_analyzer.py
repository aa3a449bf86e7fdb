"""
Tempo Analysis

Turns per-frame phase labels into contiguous segments, measures backswing
and downswing timing, and rates the tempo against the classic 3:1 ratio.
"""

import math
from typing import Optional, Sequence

from ..config import TEMPO, TEMPO_RATING_BANDS, TEMPO_SCORING
from ..domain.analysis import (
    ClubType,
    PhaseFrame,
    PhaseSegment,
    SwingPhase,
    TempoEvaluation,
    TempoMetrics,
)


def consolidate_phases(phases: Sequence[PhaseFrame]) -> list[PhaseSegment]:
    """Merge runs of consecutive frames with the same phase into segments."""
    segments: list[PhaseSegment] = []
    if not phases:
        return segments

    first = previous = phases[0]
    for current in phases[1:]:
        if current.phase != first.phase:
            segments.append(_segment(first, previous))
            first = current
        previous = current
    segments.append(_segment(first, phases[-1]))
    return segments


def _segment(first: PhaseFrame, last: PhaseFrame) -> PhaseSegment:
    return PhaseSegment(
        phase=first.phase,
        start_frame=first.frame_index,
        end_frame=last.frame_index,
        start_time=first.timestamp,
        end_time=last.timestamp,
    )


def find_segment(segments: Sequence[PhaseSegment], phase: SwingPhase) -> Optional[PhaseSegment]:
    for segment in segments:
        if segment.phase == phase:
            return segment
    return None


def calculate_tempo_metrics(segments: Sequence[PhaseSegment]) -> TempoMetrics:
    """
    Backswing and downswing durations and their ratio.

    Total duration runs from the start of the backswing to the end of
    impact, or across the whole recording when those phases are missing.
    """
    backswing = find_segment(segments, SwingPhase.BACKSWING)
    downswing = find_segment(segments, SwingPhase.DOWNSWING)
    impact = find_segment(segments, SwingPhase.IMPACT)
    address = find_segment(segments, SwingPhase.ADDRESS)
    finish = find_segment(segments, SwingPhase.FINISH)

    backswing_duration = backswing.duration if backswing else 0.0
    downswing_duration = downswing.duration if downswing else 0.0

    total = 0.0
    if backswing and impact:
        total = impact.end_time - backswing.start_time
    elif address and finish:
        total = finish.end_time - address.start_time

    ratio = backswing_duration / downswing_duration if downswing_duration > 0 else 0.0

    return TempoMetrics(
        backswing_duration=backswing_duration,
        downswing_duration=downswing_duration,
        tempo_ratio=ratio,
        total_swing_duration=total,
    )


def evaluate_tempo(tempo: TempoMetrics) -> TempoEvaluation:
    """
    Rate the tempo ratio by its log distance from the ideal.

    Log distance treats 1.5:1 and 6:1 as equally far from 3:1.
    """
    ideal = TEMPO["ideal_ratio"]
    actual = tempo.tempo_ratio

    if actual <= 0:
        return TempoEvaluation(
            rating="poor",
            score=0,
            feedback="Unable to calculate tempo. Make sure the full swing is visible.",
            ideal_ratio=ideal,
            actual_ratio=actual,
        )

    difference = abs(math.log(actual) - math.log(ideal))
    rushed = actual < ideal

    if difference <= TEMPO_RATING_BANDS["excellent"]:
        rating = "excellent"
        score = 95 - difference * 30
        feedback = "Excellent tempo! Your backswing to downswing ratio is near ideal."
    elif difference <= TEMPO_RATING_BANDS["good"]:
        rating = "good"
        score = 85 - (difference - 0.1) * 50
        feedback = "Good tempo. Minor adjustment could improve consistency."
    elif difference <= TEMPO_RATING_BANDS["needs-work"]:
        rating = "needs-work"
        score = 70 - (difference - 0.25) * 60
        if rushed:
            feedback = "Your backswing is too quick. Try slowing down your takeaway."
        else:
            feedback = "Your downswing is relatively slow. Focus on accelerating through the ball."
    else:
        rating = "poor"
        score = max(40, 55 - (difference - 0.5) * 30)
        if rushed:
            feedback = "Rushing your backswing significantly. Practice a slower, smoother takeaway."
        else:
            feedback = "Unusual tempo detected. This may indicate slow-motion video or phase detection limits."

    return TempoEvaluation(
        rating=rating,
        score=int(math.floor(max(0, min(100, score)) + 0.5)),
        feedback=feedback,
        ideal_ratio=ideal,
        actual_ratio=actual,
    )


def calculate_tempo_score(tempo_ratio: float, club_type: ClubType) -> float:
    """
    Tempo term of the overall score (0-100).

    Full marks within the club's tolerance of the ideal ratio, then a
    linear falloff to 0.
    """
    if tempo_ratio <= 0:
        return 0.0
    deviation = abs(tempo_ratio - TEMPO_SCORING["ideal_ratio"])
    tolerance = TEMPO_SCORING["tolerance"][club_type]
    if deviation <= tolerance:
        return 100.0
    score = 100 * (1 - (deviation - tolerance) / TEMPO_SCORING["falloff"])
    return max(0.0, min(100.0, score))


def format_tempo_ratio(ratio: float) -> str:
    if ratio == 0 or not math.isfinite(ratio):
        return "N/A"
    return f"{ratio:.1f}:1"


def format_duration(seconds: float) -> str:
    if not math.isfinite(seconds):
        return "N/A"
    if seconds < 1:
        return f"{int(math.floor(seconds * 1000 + 0.5))}ms"
    return f"{seconds:.2f}s"
