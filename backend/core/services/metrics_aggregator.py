"""
Swing Metrics Aggregation

Reduces per-frame metrics into one SwingMetrics record. How rotation is
measured depends on the camera angle's rotation model:

- WIDTH (face-on): shoulders/hips narrow as they turn; rotation is
  acos(width / address width), measured from address through impact
- NONE (down-the-line): rotation cannot be seen; reported as exactly 0
- RELATIVE (oblique): x/z heading change relative to address
"""

import logging
from typing import Optional, Sequence

from ..config import RotationModel, get_profile
from ..domain.pose import PoseFrame
from ..domain.analysis import (
    CameraAngle,
    PhaseFrame,
    PhaseSegment,
    SwingMetrics,
    SwingPhase,
)
from .angle_calculator import AngleCalculator, median
from .tempo_analyzer import find_segment
from .trace import resolve_logger


def angular_difference(angle: float, reference: float) -> float:
    """Shortest signed difference angle - reference, in [-180, 180]."""
    diff = angle - reference
    while diff > 180:
        diff -= 360
    while diff < -180:
        diff += 360
    return diff


def _frames_in(frames: Sequence[PoseFrame], start: int, end: int) -> list[PoseFrame]:
    """Frames with positions in [start, end], clipped to the recording."""
    return list(frames[max(0, start):min(end, len(frames) - 1) + 1])


def _frame_at(frames: Sequence[PoseFrame], index: int) -> Optional[PoseFrame]:
    if 0 <= index < len(frames):
        return frames[index]
    return None


# =============================================================================
# Rotation
# =============================================================================

def _width_rotation(
    frames: Sequence[PoseFrame],
    segments: Sequence[PhaseSegment],
    address_frame: PoseFrame
) -> tuple[float, float, float]:
    address = find_segment(segments, SwingPhase.ADDRESS)
    impact = find_segment(segments, SwingPhase.IMPACT)
    start = address.start_frame if address else 0
    end = impact.end_frame if impact else len(frames) - 1

    max_hip = max_shoulder = max_x_factor = 0.0
    for frame in _frames_in(frames, start, end):
        shoulder = AngleCalculator.calculate_rotation_from_width(frame, address_frame, "shoulders")
        hip = AngleCalculator.calculate_rotation_from_width(frame, address_frame, "hips")
        max_shoulder = max(max_shoulder, shoulder)
        max_hip = max(max_hip, hip)
        max_x_factor = max(max_x_factor, abs(shoulder - hip))
    return max_hip, max_shoulder, max_x_factor


def _relative_rotation(phases: Sequence[PhaseFrame]) -> tuple[float, float, float]:
    baseline = next((p for p in phases if p.phase == SwingPhase.ADDRESS), None)
    base_hip = baseline.metrics.hip_rotation if baseline else 0.0
    base_shoulder = baseline.metrics.shoulder_rotation if baseline else 0.0

    max_hip = max_shoulder = max_x_factor = 0.0
    for phase in phases:
        hip = angular_difference(phase.metrics.hip_rotation, base_hip)
        shoulder = angular_difference(phase.metrics.shoulder_rotation, base_shoulder)
        max_hip = max(max_hip, abs(hip))
        max_shoulder = max(max_shoulder, abs(shoulder))
        max_x_factor = max(max_x_factor, abs(shoulder - hip))
    return max_hip, max_shoulder, max_x_factor


# =============================================================================
# Public API
# =============================================================================

def calculate_swing_metrics(
    frames: Sequence[PoseFrame],
    phases: Sequence[PhaseFrame],
    segments: Sequence[PhaseSegment],
    camera_angle: CameraAngle,
    is_right_handed: bool,
    logger: Optional[logging.Logger] = None
) -> SwingMetrics:
    """
    Aggregate whole-swing measurements.

    Args:
        frames: Original pose frames
        phases: Per-frame metrics with phase labels
        segments: Consolidated phase segments
        camera_angle: Decides the rotation model and the face-on extras
        is_right_handed: Picks the lead arm and knee

    Returns:
        SwingMetrics; hip_sway, head_stability and impact_extension stay
        None unless the camera angle supports them
    """
    log = resolve_logger(logger)

    if not frames or not phases:
        return SwingMetrics()

    profile = get_profile(camera_angle)
    address = find_segment(segments, SwingPhase.ADDRESS)
    top = find_segment(segments, SwingPhase.TOP)
    impact = find_segment(segments, SwingPhase.IMPACT)

    address_frame = _frame_at(frames, address.end_frame) if address else None
    top_frame = _frame_at(frames, top.start_frame) if top else None
    impact_frame = _frame_at(frames, impact.start_frame) if impact else None

    # Rotation
    if profile.rotation_model == RotationModel.WIDTH and address_frame is not None:
        max_hip, max_shoulder, max_x_factor = _width_rotation(frames, segments, address_frame)
    elif profile.rotation_model == RotationModel.RELATIVE:
        max_hip, max_shoulder, max_x_factor = _relative_rotation(phases)
    else:
        max_hip = max_shoulder = max_x_factor = 0.0

    # Spine: medians resist single-frame pose glitches
    address_spine = 0.0
    if address:
        address_spine = median([
            AngleCalculator.calculate_spine_angle(f)
            for f in _frames_in(frames, address.start_frame, address.end_frame)
        ])
    impact_spine = 0.0
    if impact:
        impact_spine = median([
            AngleCalculator.calculate_spine_angle(f)
            for f in _frames_in(frames, impact.start_frame - 2, impact.start_frame + 2)
        ])
    top_spine = AngleCalculator.calculate_spine_angle(top_frame) if top_frame else 0.0

    lead = "left" if is_right_handed else "right"

    def lead_arm(frame: Optional[PoseFrame]) -> float:
        return AngleCalculator.calculate_arm_extension(frame, lead) if frame else 180.0

    def lead_knee(frame: Optional[PoseFrame]) -> float:
        return AngleCalculator.calculate_knee_flex(frame, lead) if frame else 180.0

    hip_sway = head_stability = impact_extension = None
    if profile.face_on_metrics and address_frame is not None:
        swing_frames = [
            frames[p.frame_index] for p in phases
            if p.phase not in (SwingPhase.ADDRESS, SwingPhase.FINISH) and p.frame_index < len(frames)
        ]
        address_frames = _frames_in(frames, address.start_frame, address.end_frame)
        hip_sway = AngleCalculator.calculate_hip_sway(swing_frames, address_frame)
        head_stability = AngleCalculator.calculate_head_stability(
            swing_frames, address_frames, address_frame
        )
        if impact_frame is not None:
            follow_through = find_segment(segments, SwingPhase.FOLLOW_THROUGH)
            post_impact = (
                _frames_in(frames, follow_through.start_frame, follow_through.end_frame)
                if follow_through else []
            )
            impact_extension = AngleCalculator.calculate_impact_extension(
                impact_frame, post_impact, is_right_handed
            )

    metrics = SwingMetrics(
        max_hip_rotation=max_hip,
        max_shoulder_rotation=max_shoulder,
        max_x_factor=max_x_factor,
        address_spine_angle=address_spine,
        top_spine_angle=top_spine,
        impact_spine_angle=impact_spine,
        top_lead_arm_extension=lead_arm(top_frame),
        impact_lead_arm_extension=lead_arm(impact_frame),
        address_knee_flex=lead_knee(address_frame),
        top_knee_flex=lead_knee(top_frame),
        hip_sway=hip_sway,
        head_stability=head_stability,
        impact_extension=impact_extension,
    )

    log.debug(
        f"Swing metrics ({camera_angle.value}, {profile.rotation_model.value} rotation): "
        f"xFactor={max_x_factor:.1f}, shoulder={max_shoulder:.1f}, hip={max_hip:.1f}, "
        f"addressSpine={address_spine:.1f}, impactSpine={impact_spine:.1f}"
    )
    return metrics
