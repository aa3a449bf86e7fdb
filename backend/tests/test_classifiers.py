"""Camera angle and club type classification."""

import pytest

from core.domain.analysis import CameraAngle, ClubType, ClubTypeSignals
from core.domain.pose import BodyPart
from core.services.camera_angle import (
    NO_SIGNAL,
    classify_ratio,
    detect_camera_angle,
    detect_camera_angle_from_frames,
)
from core.services.club_detector import (
    calculate_signals,
    classify_signals,
    detect_club_type,
    detect_club_type_from_frames,
)


# =============================================================================
# Camera angle
# =============================================================================

class TestCameraAngle:

    def test_face_on(self, face_on_swing):
        result = detect_camera_angle_from_frames(face_on_swing)
        assert result.angle == CameraAngle.FACE_ON
        assert result.confidence == pytest.approx(1.0)

    def test_down_the_line(self, dtl_swing):
        result = detect_camera_angle_from_frames(dtl_swing)
        assert result.angle == CameraAngle.DTL
        assert result.ratio < 0.5

    def test_oblique(self, oblique_swing):
        result = detect_camera_angle_from_frames(oblique_swing)
        assert result.angle == CameraAngle.OBLIQUE
        assert result.confidence == 0.5

    def test_missing_torso_is_no_signal(self, address_frame, drop_landmarks):
        frame = drop_landmarks(address_frame, BodyPart.LEFT_SHOULDER)
        assert detect_camera_angle(frame) == NO_SIGNAL

    def test_no_usable_frames_defaults_to_face_on(self, address_frame, drop_landmarks):
        frames = [drop_landmarks(address_frame, BodyPart.RIGHT_HIP)] * 3
        result = detect_camera_angle_from_frames(frames)
        assert result.angle == CameraAngle.FACE_ON
        assert result.confidence == 0.0

    @pytest.mark.parametrize("ratio, expected", [
        (2.5, CameraAngle.FACE_ON),
        (2.0, CameraAngle.OBLIQUE),
        (0.5, CameraAngle.OBLIQUE),
        (0.3, CameraAngle.DTL),
    ])
    def test_thresholds(self, ratio, expected):
        assert classify_ratio(ratio).angle == expected

    def test_confidence_is_capped(self):
        assert classify_ratio(50.0).confidence == 1.0
        assert classify_ratio(0.0).confidence == 1.0
        assert classify_ratio(2.3).confidence == pytest.approx(0.8)


# =============================================================================
# Club type
# =============================================================================

def _signals(**overrides) -> ClubTypeSignals:
    values = dict(
        stance_ratio=1.3,
        hand_distance=0.7,
        spine_angle=46.0,
        arm_extension=0.38,
        knee_flex_angle=155.0,
    )
    values.update(overrides)
    return ClubTypeSignals(**values)


class TestClubType:

    def test_dtl_driver(self):
        result = classify_signals(_signals(spine_angle=30.0, knee_flex_angle=170.0), CameraAngle.DTL)
        assert result.club_type == ClubType.DRIVER
        assert result.confidence == pytest.approx(1.0)

    def test_dtl_iron(self):
        result = classify_signals(_signals(spine_angle=55.0, knee_flex_angle=140.0), CameraAngle.DTL)
        assert result.club_type == ClubType.IRON

    def test_ambiguous_signals_are_unknown(self):
        result = classify_signals(_signals(), CameraAngle.OBLIQUE)
        assert result.club_type == ClubType.UNKNOWN
        assert result.confidence == 0.0

    def test_dtl_ignores_stance(self):
        # Very wide stance, but DTL only trusts spine and knee
        result = classify_signals(_signals(stance_ratio=3.0), CameraAngle.DTL)
        assert result.club_type == ClubType.UNKNOWN

    def test_split_vote_lowers_confidence(self):
        result = classify_signals(
            _signals(stance_ratio=1.6, hand_distance=0.9, spine_angle=55.0, arm_extension=0.5),
            CameraAngle.OBLIQUE,
        )
        assert result.confidence < 0.6
        assert result.club_type == ClubType.UNKNOWN

    def test_signals_from_address_frame(self, address_frame):
        signals = calculate_signals(address_frame)

        assert signals.stance_ratio == pytest.approx(2.0)
        assert signals.spine_angle == pytest.approx(0.0)
        assert signals.arm_extension == pytest.approx(0.38 / 0.60)

    def test_missing_ankles_use_defaults(self, address_frame, drop_landmarks):
        frame = drop_landmarks(address_frame, BodyPart.LEFT_ANKLE)
        signals = calculate_signals(frame)
        assert signals.stance_ratio == pytest.approx(1.0)

    def test_no_frames(self):
        result = detect_club_type_from_frames([], CameraAngle.FACE_ON)
        assert result.club_type == ClubType.UNKNOWN
        assert result.confidence == 0.0

    def test_result_confidence_in_range(self, face_on_swing):
        result = detect_club_type_from_frames(face_on_swing[:5], CameraAngle.FACE_ON)
        assert 0.0 <= result.confidence <= 1.0

    def test_single_frame_matches_one_frame_sample(self, address_frame):
        single = detect_club_type(address_frame, CameraAngle.FACE_ON)
        sampled = detect_club_type_from_frames([address_frame], CameraAngle.FACE_ON)
        assert single == sampled
