"""
Rule-based swing feedback.

Short coaching messages derived from the aggregate metrics and tempo of a
finished analysis.
"""

from ..config import FEEDBACK_THRESHOLDS, get_profile
from ..domain.analysis import AnalysisResult, CameraAngle, SwingFeedback


def _x_factor_feedback(x_factor: float) -> SwingFeedback:
    limits = FEEDBACK_THRESHOLDS["x_factor"]
    degrees = int(x_factor + 0.5)
    if limits["min"] <= x_factor <= limits["max"]:
        return SwingFeedback(
            "rotation", "positive",
            f"Great X-factor of {degrees}°. Good separation between shoulders and hips.",
        )
    if x_factor < limits["min"]:
        return SwingFeedback(
            "rotation", "suggestion",
            f"X-factor of {degrees}° is low. Try rotating your shoulders more while keeping hips stable.",
        )
    return SwingFeedback(
        "rotation", "warning",
        f"X-factor of {degrees}° is very high. This may cause consistency issues.",
    )


def generate_swing_feedback(result: AnalysisResult) -> list[SwingFeedback]:
    """
    Build feedback for rotation, posture, lead arm and tempo.

    Rotation feedback is skipped for down-the-line recordings, where
    rotation is not measured.
    """
    metrics = result.metrics
    camera_angle = result.camera_angle.angle
    tempo_evaluation = result.tempo_evaluation
    profile = get_profile(camera_angle)
    feedback = []

    if camera_angle != CameraAngle.DTL:
        feedback.append(_x_factor_feedback(metrics.max_x_factor))

    spine_diff = abs(metrics.address_spine_angle - metrics.impact_spine_angle)
    if spine_diff < profile.spine_diff.good:
        feedback.append(SwingFeedback(
            "posture", "positive", "Excellent posture maintenance through the swing.",
        ))
    elif spine_diff < profile.spine_diff.ok:
        feedback.append(SwingFeedback(
            "posture", "suggestion",
            "Minor posture change during swing. Focus on maintaining spine angle.",
        ))
    else:
        feedback.append(SwingFeedback(
            "posture", "warning",
            "Significant posture change during swing. "
            "Work on maintaining your spine angle from address to impact.",
        ))

    lead_arm = metrics.top_lead_arm_extension
    if lead_arm >= profile.lead_arm.good:
        feedback.append(SwingFeedback(
            "arm", "positive", "Good lead arm extension at the top of the backswing.",
        ))
    elif lead_arm >= profile.lead_arm.ok:
        feedback.append(SwingFeedback(
            "arm", "suggestion",
            "Slightly bent lead arm at top. Work on keeping it straighter for more width.",
        ))
    else:
        feedback.append(SwingFeedback(
            "arm", "warning", "Lead arm is quite bent at top. This reduces swing arc and power.",
        ))

    if tempo_evaluation is not None:
        positive = tempo_evaluation.rating in ("excellent", "good")
        feedback.append(SwingFeedback(
            "tempo", "positive" if positive else "suggestion", tempo_evaluation.feedback,
        ))

    return feedback
