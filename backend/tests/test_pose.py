import pytest

from core.domain.pose import BodyPart, PoseFrame, PoseLandmark, MISSING_LANDMARK, LANDMARK_COUNT


def test_frame_requires_full_landmark_set():
    with pytest.raises(ValueError):
        PoseFrame(frame_index=0, timestamp=0.0, landmarks=tuple([MISSING_LANDMARK] * 32))


def test_missing_landmark_reads_as_none(address_frame, drop_landmarks):
    frame = drop_landmarks(address_frame, BodyPart.NOSE)

    assert frame.get_landmark(BodyPart.NOSE) is None
    assert frame.get_landmarks(BodyPart.NOSE, BodyPart.LEFT_HIP) is None
    assert frame.get_landmark(BodyPart.LEFT_HIP) is not None


def test_landmarks_are_stored_as_tuple():
    frame = PoseFrame(frame_index=3, timestamp=0.1, landmarks=[MISSING_LANDMARK] * LANDMARK_COUNT)
    assert isinstance(frame.landmarks, tuple)


def test_frame_dict_round_trip(address_frame):
    data = address_frame.to_dict()

    assert data["frameIndex"] == 0
    assert len(data["landmarks"]) == LANDMARK_COUNT
    assert PoseFrame.from_dict(data) == address_frame


def test_landmark_visibility():
    landmark = PoseLandmark(x=0.1, y=0.2, visibility=0.4)

    assert landmark.is_detected
    assert not landmark.is_visible()
    assert landmark.is_visible(0.3)
    assert not MISSING_LANDMARK.is_detected
