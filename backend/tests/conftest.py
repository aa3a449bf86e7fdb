"""
Shared fixtures: synthetic, fully visible golf swings.

A right-handed player at address with hands below the hips, a slow
backswing to the top, a quick downswing back to the ball, a follow-through
that rises to the target side and a still finish. The same body is
projected for a face-on, down-the-line or oblique camera.
"""

import math

import pytest

from core.domain.pose import BodyPart, PoseFrame, PoseLandmark, MISSING_LANDMARK, LANDMARK_COUNT

FPS = 30.0

# Address pose for a face-on camera (x, y); the player's left side is +x.
BASE_POINTS = {
    BodyPart.NOSE: (0.50, 0.20),
    BodyPart.LEFT_EYE_INNER: (0.51, 0.19),
    BodyPart.LEFT_EYE: (0.515, 0.19),
    BodyPart.LEFT_EYE_OUTER: (0.52, 0.19),
    BodyPart.RIGHT_EYE_INNER: (0.49, 0.19),
    BodyPart.RIGHT_EYE: (0.485, 0.19),
    BodyPart.RIGHT_EYE_OUTER: (0.48, 0.19),
    BodyPart.LEFT_EAR: (0.53, 0.20),
    BodyPart.RIGHT_EAR: (0.47, 0.20),
    BodyPart.MOUTH_LEFT: (0.51, 0.22),
    BodyPart.MOUTH_RIGHT: (0.49, 0.22),
    BodyPart.LEFT_HIP: (0.55, 0.55),
    BodyPart.RIGHT_HIP: (0.45, 0.55),
    BodyPart.LEFT_KNEE: (0.57, 0.72),
    BodyPart.RIGHT_KNEE: (0.43, 0.72),
    BodyPart.LEFT_ANKLE: (0.60, 0.90),
    BodyPart.RIGHT_ANKLE: (0.40, 0.90),
    BodyPart.LEFT_HEEL: (0.59, 0.92),
    BodyPart.RIGHT_HEEL: (0.41, 0.92),
    BodyPart.LEFT_FOOT_INDEX: (0.62, 0.93),
    BodyPart.RIGHT_FOOT_INDEX: (0.38, 0.93),
}

SHOULDER_HALF_WIDTH = 0.08
SHOULDER_Y = 0.30
HIP_HALF_WIDTH = 0.05

ADDRESS_HANDS = (0.50, 0.68)
TOP_HANDS = (0.38, 0.22)
FINISH_HANDS = (0.62, 0.25)

MAX_SHOULDER_TURN = 80.0
MAX_HIP_TURN = 40.0


def _ease(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t * t * (3 - 2 * t)


def _lerp(a: tuple, b: tuple, t: float) -> tuple:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def swing_timeline(address=10, backswing=25, downswing=8, follow=10, finish=7):
    """
    Per-frame (hands, turn) pairs.

    turn is 0 at address, 1 at the top and back to 0 at impact; hands move
    between the address, top and finish positions.
    """
    timeline = []
    for _ in range(address):
        timeline.append((ADDRESS_HANDS, 0.0))
    for i in range(backswing):
        t = _ease((i + 1) / backswing)
        timeline.append((_lerp(ADDRESS_HANDS, TOP_HANDS, t), t))
    for i in range(downswing):
        t = _ease((i + 1) / downswing)
        timeline.append((_lerp(TOP_HANDS, ADDRESS_HANDS, t), 1 - t))
    for i in range(follow):
        t = _ease((i + 1) / follow)
        timeline.append((_lerp(ADDRESS_HANDS, FINISH_HANDS, t), 0.6 * t))
    for _ in range(finish):
        timeline.append((FINISH_HANDS, 0.6))
    return timeline


def _project(x: float, y: float, view: str) -> PoseLandmark:
    """Place a face-on point as seen from the given camera."""
    offset = x - 0.5
    if view == "face-on":
        return PoseLandmark(x=x, y=y, z=0.0, visibility=0.99)
    if view == "dtl":
        return PoseLandmark(x=0.5 + offset * 0.1, y=y, z=offset, visibility=0.99)
    if view == "oblique":
        return PoseLandmark(x=0.5 + offset * 0.7, y=y, z=offset * 0.7, visibility=0.99)
    raise ValueError(f"Unknown view {view}")


def make_frame(index: int, hands: tuple, turn: float, view: str = "face-on") -> PoseFrame:
    """One frame of the synthetic player."""
    points = dict(BASE_POINTS)

    shoulder_half = SHOULDER_HALF_WIDTH * math.cos(math.radians(MAX_SHOULDER_TURN * turn))
    hip_half = HIP_HALF_WIDTH * math.cos(math.radians(MAX_HIP_TURN * turn))
    points[BodyPart.LEFT_SHOULDER] = (0.5 + shoulder_half, SHOULDER_Y)
    points[BodyPart.RIGHT_SHOULDER] = (0.5 - shoulder_half, SHOULDER_Y)
    points[BodyPart.LEFT_HIP] = (0.5 + hip_half, 0.55)
    points[BodyPart.RIGHT_HIP] = (0.5 - hip_half, 0.55)

    # Lead (left) wrist sits slightly higher than the trail wrist
    hx, hy = hands
    points[BodyPart.LEFT_WRIST] = (hx + 0.01, hy - 0.01)
    points[BodyPart.RIGHT_WRIST] = (hx - 0.01, hy + 0.01)

    # Straight arms: elbows halfway between shoulder and wrist
    for side in ("LEFT", "RIGHT"):
        shoulder = points[BodyPart[f"{side}_SHOULDER"]]
        wrist = points[BodyPart[f"{side}_WRIST"]]
        points[BodyPart[f"{side}_ELBOW"]] = _lerp(shoulder, wrist, 0.5)
        points[BodyPart[f"{side}_PINKY"]] = (wrist[0], wrist[1] + 0.02)
        points[BodyPart[f"{side}_INDEX"]] = (wrist[0], wrist[1] + 0.025)
        points[BodyPart[f"{side}_THUMB"]] = (wrist[0], wrist[1] + 0.015)

    landmarks = tuple(_project(*points[part], view) for part in BodyPart)
    assert len(landmarks) == LANDMARK_COUNT
    return PoseFrame(frame_index=index, timestamp=index / FPS, landmarks=landmarks)


def build_swing(view: str = "face-on", **timeline_options) -> list[PoseFrame]:
    return [
        make_frame(i, hands, turn, view)
        for i, (hands, turn) in enumerate(swing_timeline(**timeline_options))
    ]


def with_missing(frame: PoseFrame, *parts: BodyPart) -> PoseFrame:
    """Copy of a frame with some landmarks undetected."""
    landmarks = list(frame.landmarks)
    for part in parts:
        landmarks[part.value] = MISSING_LANDMARK
    return PoseFrame(frame_index=frame.frame_index, timestamp=frame.timestamp, landmarks=tuple(landmarks))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def face_on_swing():
    return build_swing("face-on")


@pytest.fixture
def dtl_swing():
    return build_swing("dtl")


@pytest.fixture
def oblique_swing():
    return build_swing("oblique")


@pytest.fixture
def swing_builder():
    return build_swing


@pytest.fixture
def address_frame():
    return make_frame(0, ADDRESS_HANDS, 0.0)


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def drop_landmarks():
    return with_missing
