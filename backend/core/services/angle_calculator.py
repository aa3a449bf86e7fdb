"""
Angle Calculator Service

Geometric primitives for golf swing analysis and the per-frame metrics
calculator built on them.

All joint angles are planar (x/y only): depth from the pose model is not
trusted, so z is used for horizontal rotation estimates only. Missing
landmarks and zero-length vectors never raise; they yield a neutral
default (0 degrees, or 180 for joint extension) that callers read as
"no signal".
"""

import math
from typing import Optional, Sequence, Tuple
import numpy as np

from ..domain.pose import PoseLandmark, PoseFrame, BodyPart
from ..domain.analysis import FrameMetrics, HandPosition


_SIDE_PARTS = {
    "left": {
        "shoulder": BodyPart.LEFT_SHOULDER,
        "elbow": BodyPart.LEFT_ELBOW,
        "wrist": BodyPart.LEFT_WRIST,
        "index": BodyPart.LEFT_INDEX,
        "hip": BodyPart.LEFT_HIP,
        "knee": BodyPart.LEFT_KNEE,
        "ankle": BodyPart.LEFT_ANKLE,
    },
    "right": {
        "shoulder": BodyPart.RIGHT_SHOULDER,
        "elbow": BodyPart.RIGHT_ELBOW,
        "wrist": BodyPart.RIGHT_WRIST,
        "index": BodyPart.RIGHT_INDEX,
        "hip": BodyPart.RIGHT_HIP,
        "knee": BodyPart.RIGHT_KNEE,
        "ankle": BodyPart.RIGHT_ANKLE,
    },
}

_PAIRS = {
    "shoulders": (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER),
    "hips": (BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP),
    "ankles": (BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE),
    "wrists": (BodyPart.LEFT_WRIST, BodyPart.RIGHT_WRIST),
    "ears": (BodyPart.LEFT_EAR, BodyPart.RIGHT_EAR),
}


def lead_side(is_right_handed: bool) -> str:
    """The side closer to the target at address."""
    return "left" if is_right_handed else "right"


def trail_side(is_right_handed: bool) -> str:
    return "right" if is_right_handed else "left"


def side_part(side: str, joint: str) -> BodyPart:
    """BodyPart for a joint on a given side, e.g. side_part("left", "elbow")."""
    return _SIDE_PARTS[side][joint]


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence."""
    return float(np.median(np.asarray(values, dtype=float)))


class AngleCalculator:
    """
    Calculates biomechanical angles from pose landmarks.

    Golf-specific measures include:
    - Spine angle (tilt from vertical)
    - Shoulder and hip rotation, X-factor
    - Arm extension, knee flex, wrist hinge
    - Hand position relative to the hips

    All methods are static - no state needed.
    """

    # -------------------------------------------------------------------------
    # Core Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_angle(
        p1: Optional[PoseLandmark],
        p2: Optional[PoseLandmark],  # Vertex point
        p3: Optional[PoseLandmark]
    ) -> float:
        """
        Calculate the planar angle at p2 formed by p1-p2-p3.

        Args:
            p1: First point
            p2: Vertex point (where angle is measured)
            p3: Third point

        Returns:
            Angle in degrees (0-180), or 0 if a point is missing or a
            vector has zero length

        Example:
            For elbow angle: shoulder -> elbow -> wrist
            angle = calculate_angle(shoulder, elbow, wrist)
        """
        if p1 is None or p2 is None or p3 is None:
            return 0.0

        v1 = np.array([p1.x - p2.x, p1.y - p2.y])
        v2 = np.array([p3.x - p2.x, p3.y - p2.y])

        norm = np.linalg.norm(v1) * np.linalg.norm(v2)
        if norm == 0:
            return 0.0

        cos_angle = np.clip(np.dot(v1, v2) / norm, -1.0, 1.0)
        return float(np.degrees(np.arccos(cos_angle)))

    @staticmethod
    def calculate_horizontal_rotation(left: PoseLandmark, right: PoseLandmark) -> float:
        """
        Heading of the left->right segment in the horizontal (x/z) plane.

        Returns:
            Signed angle in degrees (-180 to 180); 0 when square to camera
        """
        return math.degrees(math.atan2(right.z - left.z, right.x - left.x))

    # -------------------------------------------------------------------------
    # Golf-Specific Angle Calculations
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_hip_rotation(frame: PoseFrame) -> float:
        pair = frame.get_landmarks(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP)
        if pair is None:
            return 0.0
        return AngleCalculator.calculate_horizontal_rotation(*pair)

    @staticmethod
    def calculate_shoulder_rotation(frame: PoseFrame) -> float:
        pair = frame.get_landmarks(BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER)
        if pair is None:
            return 0.0
        return AngleCalculator.calculate_horizontal_rotation(*pair)

    @staticmethod
    def calculate_spine_angle(frame: PoseFrame) -> float:
        """
        Calculate spine tilt from vertical.

        Measured from the hip midpoint to the shoulder midpoint. Image y grows
        downward, so "up" is -y.

        Returns:
            Signed angle in degrees (0 = upright, positive = shoulders toward +x),
            or 0 if landmarks are missing
        """
        shoulders = AngleCalculator.pair_midpoint(frame, "shoulders")
        hips = AngleCalculator.pair_midpoint(frame, "hips")
        if shoulders is None or hips is None:
            return 0.0

        dx = shoulders[0] - hips[0]
        dy = shoulders[1] - hips[1]
        return math.degrees(math.atan2(dx, -dy))

    @staticmethod
    def calculate_arm_extension(frame: PoseFrame, side: str = "left") -> float:
        """
        Elbow angle shoulder -> elbow -> wrist.

        Returns:
            Degrees (180 = straight arm); 180 if landmarks are missing
        """
        joints = frame.get_landmarks(
            side_part(side, "shoulder"), side_part(side, "elbow"), side_part(side, "wrist")
        )
        if joints is None:
            return 180.0
        return AngleCalculator.calculate_angle(*joints)

    @staticmethod
    def calculate_knee_flex(frame: PoseFrame, side: str = "left") -> float:
        """
        Knee angle hip -> knee -> ankle.

        Returns:
            Degrees (180 = straight leg); 180 if landmarks are missing
        """
        joints = frame.get_landmarks(
            side_part(side, "hip"), side_part(side, "knee"), side_part(side, "ankle")
        )
        if joints is None:
            return 180.0
        return AngleCalculator.calculate_angle(*joints)

    @staticmethod
    def calculate_wrist_hinge(frame: PoseFrame, side: str = "left") -> float:
        """Wrist angle elbow -> wrist -> index finger; 180 if landmarks are missing."""
        joints = frame.get_landmarks(
            side_part(side, "elbow"), side_part(side, "wrist"), side_part(side, "index")
        )
        if joints is None:
            return 180.0
        return AngleCalculator.calculate_angle(*joints)

    @staticmethod
    def get_hand_position(frame: PoseFrame, side: str = "left") -> HandPosition:
        """Wrist position relative to the hip center; origin if landmarks are missing."""
        wrist = frame.get_landmark(side_part(side, "wrist"))
        hips = frame.get_landmarks(BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP)
        if wrist is None or hips is None:
            return HandPosition()

        left_hip, right_hip = hips
        return HandPosition(
            x=wrist.x - (left_hip.x + right_hip.x) / 2,
            y=wrist.y - (left_hip.y + right_hip.y) / 2,
            z=wrist.z - (left_hip.z + right_hip.z) / 2,
        )

    # -------------------------------------------------------------------------
    # Complete Frame Analysis
    # -------------------------------------------------------------------------

    @classmethod
    def calculate_frame_metrics(cls, frame: PoseFrame) -> FrameMetrics:
        """
        Calculate every per-frame measure used by the analysis.

        Never raises; missing landmarks produce the documented defaults.
        """
        hip_rotation = cls.calculate_hip_rotation(frame)
        shoulder_rotation = cls.calculate_shoulder_rotation(frame)
        return FrameMetrics(
            hip_rotation=hip_rotation,
            shoulder_rotation=shoulder_rotation,
            x_factor=shoulder_rotation - hip_rotation,
            spine_angle=cls.calculate_spine_angle(frame),
            left_arm_extension=cls.calculate_arm_extension(frame, "left"),
            right_arm_extension=cls.calculate_arm_extension(frame, "right"),
            left_knee_flex=cls.calculate_knee_flex(frame, "left"),
            right_knee_flex=cls.calculate_knee_flex(frame, "right"),
            left_wrist_hinge=cls.calculate_wrist_hinge(frame, "left"),
            right_wrist_hinge=cls.calculate_wrist_hinge(frame, "right"),
            left_hand_position=cls.get_hand_position(frame, "left"),
            right_hand_position=cls.get_hand_position(frame, "right"),
        )

    # -------------------------------------------------------------------------
    # Face-On Width Model and Multi-Frame Measures
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate_body_width(frame: PoseFrame, pair: str) -> float:
        """Apparent horizontal width of "shoulders", "hips" or "ankles"; 0 if missing."""
        landmarks = frame.get_landmarks(*_PAIRS[pair])
        if landmarks is None:
            return 0.0
        left, right = landmarks
        return abs(right.x - left.x)

    @staticmethod
    def calculate_rotation_from_width(
        frame: PoseFrame,
        address_frame: PoseFrame,
        pair: str
    ) -> float:
        """
        Rotation estimated from apparent width narrowing (face-on camera).

        rotation = acos(current_width / address_width), 0 at address and
        approaching 90 as the body turns edge-on.
        """
        address_width = AngleCalculator.calculate_body_width(address_frame, pair)
        if address_width == 0:
            return 0.0
        current_width = AngleCalculator.calculate_body_width(frame, pair)
        ratio = max(0.0, min(1.0, current_width / address_width))
        return math.degrees(math.acos(ratio))

    @staticmethod
    def calculate_hip_sway(frames: Sequence[PoseFrame], address_frame: PoseFrame) -> float:
        """
        Horizontal travel of the hip center over the swing.

        Returns:
            (max - min hip-center x) / stance width; 0 if not measurable
        """
        if not frames:
            return 0.0

        address_hips = AngleCalculator.pair_midpoint(address_frame, "hips")
        stance_width = AngleCalculator.calculate_body_width(address_frame, "ankles")
        if address_hips is None or stance_width == 0:
            return 0.0

        min_x = max_x = address_hips[0]
        for frame in frames:
            hips = AngleCalculator.pair_midpoint(frame, "hips")
            if hips is None:
                continue
            min_x = min(min_x, hips[0])
            max_x = max(max_x, hips[0])

        return (max_x - min_x) / stance_width

    @staticmethod
    def calculate_head_stability(
        swing_frames: Sequence[PoseFrame],
        address_frames: Sequence[PoseFrame],
        address_frame: PoseFrame
    ) -> float:
        """
        Head movement relative to body height (lower is steadier).

        Uses the 95th-percentile nose displacement from its address position,
        divided by the median shoulder-to-ankle height over the address frames.
        """
        if not swing_frames:
            return 0.0

        address_nose = address_frame.get_landmark(BodyPart.NOSE)
        if address_nose is None:
            return 0.0

        heights = []
        for frame in address_frames:
            landmarks = frame.get_landmarks(BodyPart.LEFT_SHOULDER, BodyPart.LEFT_ANKLE)
            if landmarks is None:
                continue
            height = abs(landmarks[0].y - landmarks[1].y)
            if height > 0:
                heights.append(height)
        if not heights:
            return 0.0

        body_height = median(heights)
        if body_height == 0:
            return 0.0

        deviations = sorted(
            nose.distance_to(address_nose)
            for nose in (frame.get_landmark(BodyPart.NOSE) for frame in swing_frames)
            if nose is not None
        )
        if not deviations:
            return 0.0

        index = min(int(len(deviations) * 0.95), len(deviations) - 1)
        return deviations[index] / body_height

    @staticmethod
    def calculate_impact_extension(
        impact_frame: PoseFrame,
        post_impact_frames: Sequence[PoseFrame],
        is_right_handed: bool
    ) -> float:
        """
        How far the hands reach toward the target after impact (0-1, higher is better).

        Compares the median post-impact reach (lead shoulder to hands center)
        with the reach at impact. Without post-impact frames, falls back to
        impact reach relative to shoulder width. Returns 0.5 when neither can
        be measured.
        """
        impact_reach = AngleCalculator._hand_reach(impact_frame, is_right_handed)
        if impact_reach is None:
            return 0.5

        reaches = [
            reach for reach in
            (AngleCalculator._hand_reach(frame, is_right_handed) for frame in post_impact_frames)
            if reach is not None
        ]
        if reaches and impact_reach > 0:
            ratio = median(reaches) / impact_reach
            return min(1.0, max(0.0, ratio - 0.5) * 2)

        shoulder_width = AngleCalculator.calculate_body_width(impact_frame, "shoulders")
        if shoulder_width > 0:
            ratio = impact_reach / shoulder_width
            return min(1.0, max(0.0, (ratio - 1) / 1.5))

        return 0.5

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _hand_reach(frame: PoseFrame, is_right_handed: bool) -> Optional[float]:
        lead = lead_side(is_right_handed)
        trail = trail_side(is_right_handed)
        landmarks = frame.get_landmarks(
            side_part(lead, "shoulder"), side_part(lead, "wrist"), side_part(trail, "wrist")
        )
        if landmarks is None:
            return None
        shoulder, lead_wrist, trail_wrist = landmarks
        hands_x = (lead_wrist.x + trail_wrist.x) / 2
        hands_y = (lead_wrist.y + trail_wrist.y) / 2
        return math.hypot(hands_x - shoulder.x, hands_y - shoulder.y)

    @staticmethod
    def calculate_midpoint(
        p1: Optional[PoseLandmark],
        p2: Optional[PoseLandmark]
    ) -> Optional[Tuple[float, float]]:
        """Calculate midpoint between two landmarks."""
        if p1 is None or p2 is None:
            return None
        return ((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)

    @staticmethod
    def pair_midpoint(frame: PoseFrame, pair: str) -> Optional[Tuple[float, float]]:
        """Midpoint of a left/right landmark pair ("shoulders", "hips", ...)."""
        landmarks = frame.get_landmarks(*_PAIRS[pair])
        if landmarks is None:
            return None
        return AngleCalculator.calculate_midpoint(*landmarks)
