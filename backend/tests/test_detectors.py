import pytest

from core.domain.analysis import CameraAngle, ClubType, SwingMetrics, TempoMetrics
from core.domain.mistakes import (
    SWING_MISTAKES,
    DetectorResult,
    MistakeCategory,
    get_category_from_mistake_id,
    get_mistake,
)
from core.domain.pose import BodyPart
from core.services.detectors import (
    ALL_DETECTORS,
    DetectorInput,
    create_not_detected_result,
    get_detected_mistakes,
    get_top_mistakes,
    run_all_detectors,
)
from core.services.detectors.backswing import (
    BentLeadArmDetector,
    InsufficientShoulderTurnDetector,
    RushingBackswingDetector,
    SwayingDetector,
)
from core.services.detectors.downswing import LossOfSpineAngleDetector
from core.services.detectors.impact import ChickenWingDetector, HeadMovementDetector
from core.services.detectors.setup import PoorPostureDetector, StanceWidthDetector
from core.services.detectors.tempo import PoorTempoRatioDetector
from core.services.phase_detector import detect_swing_phases
from core.services.tempo_analyzer import consolidate_phases


@pytest.fixture
def make_input(face_on_swing):
    segments = consolidate_phases(detect_swing_phases(face_on_swing).phases)

    def build(
        camera_angle=CameraAngle.FACE_ON,
        frames=None,
        metrics=None,
        tempo=None,
        club_type=ClubType.UNKNOWN,
        overridden=False,
    ) -> DetectorInput:
        return DetectorInput(
            frames=frames if frames is not None else face_on_swing,
            phase_segments=segments,
            metrics=metrics if metrics is not None else SwingMetrics(),
            tempo=tempo if tempo is not None else TempoMetrics(),
            is_right_handed=True,
            camera_angle=camera_angle,
            club_type=club_type,
            club_type_overridden=overridden,
        )

    return build


def test_registry_covers_catalog():
    registered = [detector.mistake_id for detector in ALL_DETECTORS]
    assert len(registered) == len(set(registered)) == 20
    assert set(registered) == {mistake.id for mistake in SWING_MISTAKES}


def test_catalog_lookup():
    assert get_mistake("CHICKEN_WING").name == "Chicken wing"
    assert get_mistake("NOT_A_MISTAKE") is None
    assert get_category_from_mistake_id("REVERSE_C_FINISH") == MistakeCategory.FOLLOW_THROUGH
    assert get_category_from_mistake_id("NOT_A_MISTAKE") is None


def test_result_category_and_serialization():
    result = DetectorResult(
        mistake_id="HANGING_BACK", detected=True, confidence=0.8, severity=42.0,
        message="m", affected_frames=[40, 41],
    )
    assert result.category == MistakeCategory.DOWNSWING
    assert result.to_dict()["mistakeId"] == "HANGING_BACK"
    assert result.to_dict()["affectedFrames"] == [40, 41]


def test_not_detected_result():
    result = create_not_detected_result("SWAYING", "no data")
    assert not result.detected
    assert result.confidence == 0.0
    assert result.severity == 0.0
    assert result.details == "no data"


# =============================================================================
# Camera angle gating
# =============================================================================

class TestAngleGating:

    def test_face_on_only_detector_abstains_for_dtl(self, make_input):
        result = SwayingDetector()(make_input(CameraAngle.DTL, metrics=SwingMetrics(hip_sway=0.9)))
        assert not result.detected
        assert result.confidence == 0.0
        assert result.details == "Requires face-on camera angle"

    def test_rotation_detectors_skip_dtl(self, make_input):
        result = InsufficientShoulderTurnDetector()(make_input(CameraAngle.DTL))
        assert result.confidence == 0.0
        assert "DTL" in result.details

    def test_posture_needs_side_view(self, make_input):
        face_on = PoorPostureDetector()(make_input(CameraAngle.FACE_ON))
        dtl = PoorPostureDetector()(make_input(CameraAngle.DTL, metrics=SwingMetrics(address_spine_angle=10)))

        assert face_on.confidence == 0.0
        assert dtl.detected

    def test_stance_width_not_judged_from_dtl(self, make_input):
        result = StanceWidthDetector()(make_input(CameraAngle.DTL, club_type=ClubType.IRON, overridden=True))
        assert result.confidence == 0.0


# =============================================================================
# Individual detectors
# =============================================================================

class TestStanceWidth:

    def test_abstains_when_club_was_inferred(self, make_input):
        result = StanceWidthDetector()(make_input(club_type=ClubType.IRON))
        assert not result.detected
        assert result.confidence == 0.0

    def test_wide_stance_is_fine_for_driver(self, make_input):
        result = StanceWidthDetector()(make_input(club_type=ClubType.DRIVER, overridden=True))
        assert not result.detected
        assert result.confidence > 0

    def test_wide_stance_is_too_wide_for_iron(self, make_input):
        # Synthetic stance is twice the hip width
        result = StanceWidthDetector()(make_input(club_type=ClubType.IRON, overridden=True))
        assert result.detected
        assert result.severity == 100.0
        assert "too wide" in result.message

    def test_unknown_club_abstains(self, make_input):
        result = StanceWidthDetector()(make_input(club_type=ClubType.UNKNOWN, overridden=True))
        assert result.confidence == 0.0


class TestSwaying:

    def test_missing_metric(self, make_input):
        assert SwayingDetector()(make_input()).confidence == 0.0

    def test_stable_hips_pass(self, make_input):
        result = SwayingDetector()(make_input(metrics=SwingMetrics(hip_sway=0.3)))
        assert not result.detected
        assert result.confidence == 0.9
        assert result.severity == 0.0

    def test_slight_and_excessive(self, make_input):
        slight = SwayingDetector()(make_input(metrics=SwingMetrics(hip_sway=0.5)))
        excessive = SwayingDetector()(make_input(metrics=SwingMetrics(hip_sway=0.9)))

        assert slight.detected and slight.message.startswith("Slight")
        assert excessive.detected and excessive.message.startswith("Excessive")
        assert excessive.severity == 100.0
        assert slight.severity < excessive.severity


class TestTempoDetectors:

    @pytest.mark.parametrize("detector", [PoorTempoRatioDetector(), RushingBackswingDetector()])
    def test_abstain_without_tempo(self, make_input, detector):
        result = detector(make_input(tempo=TempoMetrics(tempo_ratio=0.0)))
        assert result.confidence == 0.0

    def test_good_tempo_passes(self, make_input):
        result = PoorTempoRatioDetector()(make_input(tempo=TempoMetrics(tempo_ratio=3.4)))
        assert not result.detected
        assert result.confidence == 0.9

    def test_severity_grows_with_deviation(self, make_input):
        detector = PoorTempoRatioDetector()
        severities = [
            detector(make_input(tempo=TempoMetrics(tempo_ratio=ratio))).severity
            for ratio in (3.7, 4.0, 4.5, 5.0, 6.0)
        ]
        assert all(s > 0 for s in severities)
        assert severities == sorted(severities)

    def test_rushed_message(self, make_input):
        result = PoorTempoRatioDetector()(make_input(tempo=TempoMetrics(tempo_ratio=1.5)))
        assert result.detected
        assert "very rushed" in result.message

    def test_rushing_backswing(self, make_input):
        detector = RushingBackswingDetector()
        assert not detector(make_input(tempo=TempoMetrics(tempo_ratio=3.0))).detected

        rushed = detector(make_input(tempo=TempoMetrics(tempo_ratio=2.2)))
        assert rushed.detected
        assert rushed.severity == pytest.approx(30.0)


class TestAngleBands:

    def test_bent_lead_arm_uses_camera_bands(self, make_input):
        metrics = SwingMetrics(top_lead_arm_extension=150)
        face_on = BentLeadArmDetector()(make_input(CameraAngle.FACE_ON, metrics=metrics))
        dtl = BentLeadArmDetector()(make_input(CameraAngle.DTL, metrics=metrics))

        assert not face_on.detected
        assert dtl.detected
        assert dtl.confidence == 0.85

    def test_bent_lead_arm_implausible(self, make_input):
        result = BentLeadArmDetector()(make_input(metrics=SwingMetrics(top_lead_arm_extension=60)))
        assert result.confidence == 0.0

    def test_loss_of_spine_angle(self, make_input):
        metrics = SwingMetrics(address_spine_angle=35, impact_spine_angle=27)
        dtl = LossOfSpineAngleDetector()(make_input(CameraAngle.DTL, metrics=metrics))
        face_on = LossOfSpineAngleDetector()(make_input(CameraAngle.FACE_ON, metrics=metrics))

        assert dtl.detected
        assert dtl.severity == pytest.approx(48.0)
        assert not face_on.detected

    def test_spine_severity_grows_with_change(self, make_input):
        detector = LossOfSpineAngleDetector()
        severities = [
            detector(make_input(
                CameraAngle.DTL,
                metrics=SwingMetrics(address_spine_angle=35, impact_spine_angle=35 - diff),
            )).severity
            for diff in (6, 8, 12, 15, 19)
        ]
        assert all(s > 0 for s in severities)
        assert severities == sorted(severities)
        assert severities[0] < severities[-1]

    def test_sway_severity_grows_with_drift(self, make_input):
        detector = SwayingDetector()
        severities = [
            detector(make_input(metrics=SwingMetrics(hip_sway=sway))).severity
            for sway in (0.45, 0.55, 0.65, 0.75, 0.9)
        ]
        assert all(s > 0 for s in severities)
        assert severities == sorted(severities)

    def test_head_movement_implausible(self, make_input):
        result = HeadMovementDetector()(make_input(metrics=SwingMetrics(head_stability=0.7)))
        assert result.confidence == 0.0

    def test_head_movement_bands(self, make_input):
        minor = HeadMovementDetector()(make_input(metrics=SwingMetrics(head_stability=0.4)))
        major = HeadMovementDetector()(make_input(metrics=SwingMetrics(head_stability=0.55)))
        assert 30 <= minor.severity < 60
        assert major.severity >= 60


class TestChickenWing:

    def test_straight_arms_pass(self, make_input):
        result = ChickenWingDetector()(make_input())
        assert not result.detected
        assert result.confidence > 0

    def test_unseen_lead_arm_abstains(self, make_input, face_on_swing, drop_landmarks):
        frames = [
            drop_landmarks(f, BodyPart.LEFT_ELBOW, BodyPart.RIGHT_ELBOW) for f in face_on_swing
        ]
        result = ChickenWingDetector()(make_input(frames=frames))

        assert not result.detected
        assert result.confidence == 0.0
        assert result.details == "Lead arm not visible through impact"

    def test_dtl_uses_visibility(self, make_input, dtl_swing, drop_landmarks):
        # Lead arm vanishes through impact
        frames = [
            drop_landmarks(f, BodyPart.LEFT_ELBOW, BodyPart.LEFT_WRIST) if 38 <= f.frame_index <= 50 else f
            for f in dtl_swing
        ]
        result = ChickenWingDetector()(make_input(CameraAngle.DTL, frames=frames))
        assert result.severity >= 0.0
        assert 0.0 <= result.confidence <= 1.0


# =============================================================================
# Runner
# =============================================================================

class TestRunner:

    def test_drops_abstentions(self, make_input):
        results = run_all_detectors(make_input())

        assert all(r.detected or r.confidence > 0 for r in results)
        assert "STANCE_WIDTH_ISSUE" not in {r.mistake_id for r in results}

    def test_results_are_clamped(self, make_input):
        metrics = SwingMetrics(max_x_factor=200, hip_sway=5.0, top_lead_arm_extension=95)
        for result in run_all_detectors(make_input(metrics=metrics, tempo=TempoMetrics(tempo_ratio=40))):
            assert 0.0 <= result.confidence <= 1.0
            assert 0.0 <= result.severity <= 100.0
            if not result.detected:
                assert result.severity == 0.0

    def test_results_keep_registry_order(self, make_input):
        order = [d.mistake_id for d in ALL_DETECTORS]
        ids = [r.mistake_id for r in run_all_detectors(make_input())]
        assert ids == sorted(ids, key=order.index)

    def test_top_mistakes(self, make_input):
        data = make_input(
            metrics=SwingMetrics(max_x_factor=10, hip_sway=0.9),
            tempo=TempoMetrics(tempo_ratio=1.2),
        )
        detected = get_detected_mistakes(data)
        top = get_top_mistakes(data, count=2)

        assert len(detected) >= 3
        assert len(top) == 2
        assert top[0].severity >= top[1].severity
        assert top[0].severity == max(r.severity for r in detected)
