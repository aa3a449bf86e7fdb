"""
Phase Detection Service

Labels every frame of a swing with one of the seven swing phases.

Detection is retrospective rather than a running state machine:
1. Build lead-hand height, horizontal position and speed series
2. Anchor impact on the most robust hand-speed peak, refined by the
   deceleration after it and by the lowest hand position
3. Anchor the top of the backswing on the highest hand position before impact
4. Find where address ends from the first sustained rise in hand speed
5. Label every frame by its position relative to those anchors
"""

import logging
import math
from typing import Optional, Sequence

from ..config import PHASE_DETECTION
from ..domain.pose import PoseFrame
from ..domain.analysis import SwingPhase, PhaseFrame, SwingPhaseResult
from .angle_calculator import AngleCalculator, lead_side
from .trace import resolve_logger


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Signal helpers
# =============================================================================

def detect_handedness(frames: Sequence[PoseFrame]) -> bool:
    """
    Right-handed when the left hand sits higher than the right in most of
    the first few frames (image y grows downward).
    """
    if not frames:
        return True

    sample = frames[:PHASE_DETECTION["handedness_sample_frames"]]
    left_higher = 0
    for frame in sample:
        left = AngleCalculator.get_hand_position(frame, "left")
        right = AngleCalculator.get_hand_position(frame, "right")
        if left.y < right.y:
            left_higher += 1

    return left_higher > len(sample) / 2


def smooth(values: Sequence[float], window: int) -> list[float]:
    """Centered moving average; the window shrinks at the edges."""
    half = window // 2
    n = len(values)
    smoothed = []
    for i in range(n):
        start = max(0, i - half)
        end = min(n - 1, i + half)
        segment = values[start:end + 1]
        smoothed.append(sum(segment) / len(segment))
    return smoothed


def find_robust_peak_index(values: Sequence[float], start: int, end: int, min_peak_width: int) -> int:
    """
    Index of the highest local maximum in [start, end) that no neighbor
    within min_peak_width exceeds. Returns start if none qualifies.
    """
    if not values:
        return 0

    best_idx = start
    best_value = -math.inf
    for i in range(start, end):
        is_local_max = True
        for offset in range(1, min_peak_width + 1):
            left = i - offset
            right = i + offset
            if left >= 0 and values[left] > values[i]:
                is_local_max = False
                break
            if right < len(values) and values[right] > values[i]:
                is_local_max = False
                break
        if is_local_max and values[i] > best_value:
            best_value = values[i]
            best_idx = i
    return best_idx


def find_min_index(values: Sequence[float], start: int, end: int) -> int:
    min_idx = start
    min_value = math.inf
    for i in range(start, min(end, len(values))):
        if values[i] < min_value:
            min_value = values[i]
            min_idx = i
    return min_idx


# =============================================================================
# Anchors
# =============================================================================

def _find_impact(velocities: list[float], heights: list[float], n: int) -> int:
    config = PHASE_DETECTION
    search_start = int(n * config["impact_search_start"])
    search_end = int(n * config["impact_search_end"])

    impact = find_robust_peak_index(velocities, search_start, search_end, config["min_peak_width"])

    # No robust peak: plain maximum over the window
    if impact == search_start:
        max_velocity = 0.0
        for i in range(search_start, search_end):
            if velocities[i] > max_velocity:
                max_velocity = velocities[i]
                impact = i

    # Speed peaks a little before contact; take the frame before it drops off
    drop_threshold = velocities[impact] * config["velocity_drop_threshold"]
    for i in range(impact, min(impact + config["velocity_drop_search_frames"], search_end)):
        if velocities[i] < drop_threshold:
            impact = max(impact, i - 1)
            break

    # Lowest hand position (max y) near the peak marks ball contact
    check_start = max(0, impact - config["hand_height_lookback"])
    check_end = min(n, impact + config["hand_height_search_frames"])
    lowest_y = -math.inf
    lowest_idx = impact
    for i in range(check_start, check_end):
        if heights[i] > lowest_y:
            lowest_y = heights[i]
            lowest_idx = i

    max_offset = config["max_hand_height_offset"]
    if impact < lowest_idx <= impact + max_offset:
        impact = lowest_idx
    elif lowest_idx > impact + max_offset:
        impact = round_half_up(impact + max_offset * 0.7)
    elif abs(lowest_idx - impact) <= config["anchor_agreement_frames"]:
        impact = round_half_up((impact + lowest_idx) / 2)

    return min(impact, n - 1)


def _find_top(velocities: list[float], heights: list[float], impact: int, n: int) -> int:
    config = PHASE_DETECTION
    search_start = int(n * config["top_search_start"])
    search_end = min(n, max(search_start + 3, impact - 3))

    top = find_min_index(heights, search_start, search_end)
    velocity_dip = find_min_index(velocities, search_start, search_end)
    if abs(velocity_dip - top) <= config["anchor_agreement_frames"]:
        top = round_half_up((velocity_dip + top) / 2)

    if top >= impact - 2:
        top = max(search_start, impact - 4)
    return top


def _find_address_end(
    velocities: list[float],
    heights: list[float],
    hand_x: list[float],
    impact: int,
    top: int,
    n: int
) -> int:
    config = PHASE_DETECTION
    search_end = min(top, int(n * config["address_search_end"]))

    baseline_frames = min(config["address_baseline_frames"], int(n * config["top_search_start"]))
    baseline = sum(velocities[:baseline_frames]) / baseline_frames if baseline_frames > 0 else 0.0

    threshold = max(
        baseline * config["address_velocity_multiplier"],
        velocities[impact] * config["address_peak_velocity_fraction"],
    )

    address_end = 0
    for i in range(2, search_end):
        if i + 1 < n and velocities[i] > threshold and velocities[i + 1] > threshold:
            address_end = max(0, i - 1)
            break

    # No sustained speed-up: fall back to raw hand displacement
    if address_end < 3:
        for i in range(3, search_end):
            delta = abs(heights[i] - heights[0]) + abs(hand_x[i] - hand_x[0])
            if delta > config["address_hand_movement_threshold"]:
                address_end = max(0, i - 2)
                break

    if address_end < 2:
        address_end = min(5, int(top * 0.2))
    return address_end


def _label(i: int, n: int, address_end: int, top: int, impact: int, finish_start: int) -> tuple[SwingPhase, float]:
    if i <= address_end:
        return SwingPhase.ADDRESS, 0.9 if i == 0 else 0.7
    if i < top:
        return SwingPhase.BACKSWING, 0.8
    if top <= i <= top + 1:
        return SwingPhase.TOP, 0.9
    if i < impact:
        return SwingPhase.DOWNSWING, 0.8
    if impact <= i < impact + 2:
        return SwingPhase.IMPACT, 0.9 if i == impact else 0.7
    if i < finish_start:
        return SwingPhase.FOLLOW_THROUGH, 0.75
    return SwingPhase.FINISH, 0.9 if i == n - 1 else 0.7


# =============================================================================
# Public API
# =============================================================================

def detect_swing_phases(
    frames: Sequence[PoseFrame],
    logger: Optional[logging.Logger] = None
) -> SwingPhaseResult:
    """
    Detect swing phases for all frames.

    Args:
        frames: Time-ordered pose frames of one swing
        logger: Optional tracing handle

    Returns:
        SwingPhaseResult with one PhaseFrame per input frame, the key frame
        indices (address, top, impact, finish) and handedness
    """
    log = resolve_logger(logger)

    if not frames:
        return SwingPhaseResult(phases=[], key_frames={}, is_right_handed=True)

    n = len(frames)
    is_right_handed = detect_handedness(frames)
    lead = lead_side(is_right_handed)

    heights: list[float] = []
    hand_x: list[float] = []
    velocities: list[float] = []
    metrics = []

    previous = None
    for i, frame in enumerate(frames):
        metrics.append(AngleCalculator.calculate_frame_metrics(frame))
        hand = AngleCalculator.get_hand_position(frame, lead)
        heights.append(hand.y)
        hand_x.append(hand.x)

        if previous is None:
            velocities.append(0.0)
        else:
            dt = frame.timestamp - frames[i - 1].timestamp
            distance = math.hypot(hand.x - previous.x, hand.y - previous.y)
            velocities.append(distance / dt if dt > 0 else 0.0)
        previous = hand

    window = PHASE_DETECTION["smoothing_window"]
    smoothed_velocities = smooth(velocities, window)
    smoothed_heights = smooth(heights, window)

    impact = _find_impact(smoothed_velocities, smoothed_heights, n)
    top = _find_top(smoothed_velocities, smoothed_heights, impact, n)
    address_end = _find_address_end(smoothed_velocities, smoothed_heights, hand_x, impact, top, n)
    finish_start = int(n * PHASE_DETECTION["finish_start"])

    log.debug(
        f"Phase anchors: addressEnd={address_end}, top={top}, impact={impact}, "
        f"finishStart={finish_start}, frames={n}"
    )

    phases = []
    for i, frame in enumerate(frames):
        phase, confidence = _label(i, n, address_end, top, impact, finish_start)
        phases.append(PhaseFrame(
            frame_index=frame.frame_index,
            timestamp=frame.timestamp,
            phase=phase,
            metrics=metrics[i],
            confidence=confidence,
        ))

    key_frames = {SwingPhase.ADDRESS: phases[0].frame_index}
    key_frames[SwingPhase.TOP] = phases[top].frame_index
    key_frames[SwingPhase.IMPACT] = phases[impact].frame_index
    key_frames[SwingPhase.FINISH] = phases[-1].frame_index

    return SwingPhaseResult(phases=phases, key_frames=key_frames, is_right_handed=is_right_handed)
