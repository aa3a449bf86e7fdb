import pytest

from core.domain.analysis import SwingPhase
from core.domain.pose import BodyPart, PoseFrame
from core.services.phase_detector import (
    detect_handedness,
    detect_swing_phases,
    find_robust_peak_index,
    smooth,
)
from core.services.tempo_analyzer import consolidate_phases

PHASE_ORDER = list(SwingPhase)


def _swap_wrists(frame: PoseFrame) -> PoseFrame:
    landmarks = list(frame.landmarks)
    left, right = BodyPart.LEFT_WRIST.value, BodyPart.RIGHT_WRIST.value
    landmarks[left], landmarks[right] = landmarks[right], landmarks[left]
    return PoseFrame(frame.frame_index, frame.timestamp, tuple(landmarks))


def test_every_frame_gets_a_phase(face_on_swing):
    result = detect_swing_phases(face_on_swing)

    assert len(result.phases) == len(face_on_swing)
    assert [p.frame_index for p in result.phases] == [f.frame_index for f in face_on_swing]
    assert all(0 < p.confidence <= 1 for p in result.phases)


def test_phases_follow_swing_order(face_on_swing):
    result = detect_swing_phases(face_on_swing)
    segments = consolidate_phases(result.phases)

    assert [s.phase for s in segments] == PHASE_ORDER
    for previous, current in zip(segments, segments[1:]):
        assert current.start_frame == previous.end_frame + 1


def test_key_frames(face_on_swing):
    result = detect_swing_phases(face_on_swing)
    key = result.key_frames

    assert key[SwingPhase.ADDRESS] == 0
    assert key[SwingPhase.FINISH] == len(face_on_swing) - 1
    assert 0 < key[SwingPhase.TOP] < key[SwingPhase.IMPACT] < len(face_on_swing) - 1


def test_top_near_highest_hands(face_on_swing):
    # Hands peak at frame 34 and return to the ball at frame 42
    result = detect_swing_phases(face_on_swing)
    assert abs(result.key_frames[SwingPhase.TOP] - 34) <= 3
    assert abs(result.key_frames[SwingPhase.IMPACT] - 42) <= 4


def test_top_and_impact_span_two_frames(face_on_swing):
    result = detect_swing_phases(face_on_swing)
    segments = {s.phase: s for s in consolidate_phases(result.phases)}

    assert segments[SwingPhase.TOP].frame_count == 2
    assert segments[SwingPhase.IMPACT].frame_count == 2


def test_finish_starts_at_85_percent(face_on_swing):
    result = detect_swing_phases(face_on_swing)
    finish_start = int(len(face_on_swing) * 0.85)

    assert result.phases[finish_start].phase == SwingPhase.FINISH
    assert result.phases[finish_start - 1].phase != SwingPhase.FINISH


def test_deterministic(dtl_swing):
    assert detect_swing_phases(dtl_swing) == detect_swing_phases(dtl_swing)


def test_empty_input():
    result = detect_swing_phases([])
    assert result.phases == []
    assert result.key_frames == {}
    assert result.is_right_handed


class TestHandedness:

    def test_right_handed(self, face_on_swing):
        assert detect_handedness(face_on_swing)

    def test_left_handed(self, face_on_swing):
        assert not detect_handedness([_swap_wrists(f) for f in face_on_swing])

    def test_no_frames(self):
        assert detect_handedness([])


class TestSignalHelpers:

    def test_smooth_shrinks_window_at_edges(self):
        assert smooth([0.0, 3.0, 6.0], 5) == pytest.approx([3.0, 3.0, 3.0])
        assert smooth([1.0, 2.0, 3.0, 4.0, 5.0], 3) == pytest.approx([1.5, 2.0, 3.0, 4.0, 4.5])

    def test_robust_peak_ignores_edge_spike(self):
        values = [0, 1, 5, 1, 0, 2, 3, 4, 3, 2]
        assert find_robust_peak_index(values, 3, 9, 2) == 7

    def test_robust_peak_none_qualifies(self):
        values = [0, 1, 2, 3, 4, 5]
        assert find_robust_peak_index(values, 1, 4, 2) == 1
