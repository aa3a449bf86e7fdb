"""
Camera Angle Classifier

Decides whether a swing was filmed face-on, down-the-line or from an
oblique angle by comparing how wide the shoulders and hips appear (x)
against how deep they appear (z).
"""

import logging
from typing import Optional, Sequence

from ..config import CAMERA_ANGLE_DETECTION
from ..domain.pose import PoseFrame, BodyPart
from ..domain.analysis import CameraAngle, CameraAngleResult
from .trace import resolve_logger


NO_SIGNAL = CameraAngleResult(angle=CameraAngle.FACE_ON, confidence=0.0, ratio=1.0)


def classify_ratio(ratio: float) -> CameraAngleResult:
    """
    Map an averaged width/depth ratio to a camera angle.

    Confidence grows linearly past each threshold and is capped at 1.0;
    oblique views get a fixed, lower confidence.
    """
    face_on_threshold = CAMERA_ANGLE_DETECTION["face_on_threshold"]
    dtl_threshold = CAMERA_ANGLE_DETECTION["dtl_threshold"]

    if ratio > face_on_threshold:
        confidence = min(1.0, (ratio - face_on_threshold) / 3 + 0.7)
        return CameraAngleResult(CameraAngle.FACE_ON, confidence, ratio)
    if ratio < dtl_threshold:
        confidence = min(1.0, (dtl_threshold - ratio) / 0.4 + 0.7)
        return CameraAngleResult(CameraAngle.DTL, confidence, ratio)
    return CameraAngleResult(
        CameraAngle.OBLIQUE, CAMERA_ANGLE_DETECTION["oblique_confidence"], ratio
    )


def detect_camera_angle(frame: PoseFrame) -> CameraAngleResult:
    """Classify a single frame. Returns the no-signal result if torso landmarks are missing."""
    landmarks = frame.get_landmarks(
        BodyPart.LEFT_SHOULDER,
        BodyPart.RIGHT_SHOULDER,
        BodyPart.LEFT_HIP,
        BodyPart.RIGHT_HIP,
    )
    if landmarks is None:
        return NO_SIGNAL

    left_shoulder, right_shoulder, left_hip, right_hip = landmarks
    epsilon = CAMERA_ANGLE_DETECTION["epsilon"]

    shoulder_ratio = abs(right_shoulder.x - left_shoulder.x) / (
        abs(right_shoulder.z - left_shoulder.z) + epsilon
    )
    hip_ratio = abs(right_hip.x - left_hip.x) / (abs(right_hip.z - left_hip.z) + epsilon)

    return classify_ratio((shoulder_ratio + hip_ratio) / 2)


def detect_camera_angle_from_frames(
    frames: Sequence[PoseFrame],
    logger: Optional[logging.Logger] = None
) -> CameraAngleResult:
    """
    Classify a recording from its first few frames.

    Per-frame ratios are averaged (skipping frames with no signal) and the
    average is classified once, which damps single-frame noise.
    """
    log = resolve_logger(logger)

    sample = frames[:CAMERA_ANGLE_DETECTION["sample_count"]]
    ratios = [
        result.ratio for result in (detect_camera_angle(frame) for frame in sample)
        if result.confidence > 0
    ]
    if not ratios:
        log.debug("Camera angle: no usable frames, defaulting to face-on")
        return NO_SIGNAL

    result = classify_ratio(sum(ratios) / len(ratios))
    log.debug(
        f"Camera angle: {result.angle.value} "
        f"(ratio={result.ratio:.2f}, confidence={result.confidence:.2f}, samples={len(ratios)})"
    )
    return result
