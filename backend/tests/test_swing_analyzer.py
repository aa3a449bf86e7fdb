import dataclasses
import logging

import pytest

from core.domain.analysis import CameraAngle, ClubType, SwingPhase
from core.services import SwingAnalyzer, parse_club_type
from core.services.swing_analyzer import check_frame_order
from core.services.trace import NULL_LOGGER_NAME, resolve_logger


@pytest.fixture
def analyzer():
    return SwingAnalyzer()


class TestParseClubType:

    def test_strings(self):
        assert parse_club_type("driver") == ClubType.DRIVER
        assert parse_club_type(" Iron ") == ClubType.IRON

    def test_passthrough(self):
        assert parse_club_type(None) is None
        assert parse_club_type(ClubType.UNKNOWN) == ClubType.UNKNOWN

    def test_unknown_string(self):
        with pytest.raises(ValueError):
            parse_club_type("putter")


class TestAnalyze:

    def test_full_result(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="swing-001")

        assert result.id == "analysis_swing-001"
        assert result.camera_angle.angle == CameraAngle.FACE_ON
        assert result.is_right_handed
        assert not result.club_type_overridden
        assert [s.phase for s in result.phase_segments] == list(SwingPhase)
        assert result.tempo.tempo_ratio > 0
        assert result.tempo_evaluation is not None
        assert 0 <= result.overall_score <= result.base_score <= 100
        assert result.overall_score == max(0, result.base_score - result.penalty)
        assert 0 <= result.penalty <= 25
        assert result.feedback

    def test_face_on_measures_width_rotation(self, analyzer, face_on_swing):
        metrics = analyzer.analyze(face_on_swing, video_id="v").metrics

        # Synthetic turn: shoulders 80 degrees, hips 40
        assert metrics.max_shoulder_rotation == pytest.approx(80.0, abs=1.0)
        assert metrics.max_hip_rotation == pytest.approx(40.0, abs=1.0)
        assert metrics.hip_sway == pytest.approx(0.0)
        assert metrics.head_stability == pytest.approx(0.0)
        assert metrics.impact_extension is not None

    def test_dtl_has_no_rotation_or_face_on_metrics(self, analyzer, dtl_swing):
        result = analyzer.analyze(dtl_swing, video_id="v")
        metrics = result.metrics

        assert result.camera_angle.angle == CameraAngle.DTL
        assert metrics.max_hip_rotation == 0.0
        assert metrics.max_shoulder_rotation == 0.0
        assert metrics.max_x_factor == 0.0
        assert metrics.hip_sway is None
        assert metrics.head_stability is None
        assert metrics.impact_extension is None

    def test_dtl_skips_face_on_detectors(self, analyzer, dtl_swing):
        result = analyzer.analyze(dtl_swing, video_id="v")
        evaluated = {r.mistake_id for r in result.detector_results}
        assert not evaluated & {"SWAYING", "REVERSE_PIVOT", "OVER_ROTATION", "HEAD_MOVEMENT"}

    def test_oblique_uses_relative_rotation(self, analyzer, oblique_swing):
        result = analyzer.analyze(oblique_swing, video_id="v")
        assert result.camera_angle.angle == CameraAngle.OBLIQUE
        assert result.metrics.hip_sway is None
        assert result.metrics.max_shoulder_rotation >= 0.0

    def test_deterministic(self, analyzer, face_on_swing):
        first = analyzer.analyze(face_on_swing, video_id="v")
        second = SwingAnalyzer().analyze(face_on_swing, video_id="v")
        assert first.to_dict() == second.to_dict()

    def test_key_frames_match_segments(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v")

        assert result.key_frames[SwingPhase.TOP] == result.get_segment(SwingPhase.TOP).start_frame
        assert result.key_frames[SwingPhase.IMPACT] == result.get_segment(SwingPhase.IMPACT).start_frame
        assert result.to_dict()["keyFrames"]["finish"] == len(face_on_swing) - 1

    def test_detected_mistakes_sorted(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v")
        severities = [r.severity for r in result.detected_mistakes]
        assert severities == sorted(severities, reverse=True)

    def test_abstentions_are_not_reported(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v")
        assert all(r.detected or r.confidence > 0 for r in result.detector_results)


class TestClubOverride:

    def test_override_changes_id_and_confidence(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v", club_type_override="iron")

        assert result.id == "analysis_v_iron"
        assert result.club_type.club_type == ClubType.IRON
        assert result.club_type.confidence == 1.0
        assert result.club_type_overridden

    def test_override_enables_stance_check(self, analyzer, face_on_swing):
        inferred = analyzer.analyze(face_on_swing, video_id="v")
        chosen = analyzer.analyze(face_on_swing, video_id="v", club_type_override=ClubType.IRON)

        assert "STANCE_WIDTH_ISSUE" not in {r.mistake_id for r in inferred.detector_results}
        stance = [r for r in chosen.detector_results if r.mistake_id == "STANCE_WIDTH_ISSUE"]
        assert stance and stance[0].detected

    def test_invalid_override(self, analyzer, face_on_swing):
        with pytest.raises(ValueError):
            analyzer.analyze(face_on_swing, video_id="v", club_type_override="wedge")

    def test_reanalyze_matches_direct_override(self, analyzer, face_on_swing):
        original = analyzer.analyze(face_on_swing, video_id="v")
        reanalyzed = analyzer.reanalyze_with_club(original, "driver")
        direct = analyzer.analyze(face_on_swing, video_id="v", club_type_override="driver")

        assert reanalyzed.to_dict() == direct.to_dict()
        assert original.id == "analysis_v"

    def test_reanalyze_keeps_camera_angle(self, analyzer, dtl_swing):
        original = analyzer.analyze(dtl_swing, video_id="v")
        reanalyzed = analyzer.reanalyze_with_club(original, ClubType.DRIVER)
        assert reanalyzed.camera_angle == original.camera_angle


class TestFrameOrder:

    def test_in_order_frames_pass(self, face_on_swing):
        check_frame_order(face_on_swing)
        check_frame_order([])

    def test_offset_frame_index_rejected(self, analyzer, face_on_swing):
        frames = [dataclasses.replace(f, frame_index=f.frame_index + 3) for f in face_on_swing]
        with pytest.raises(ValueError, match="frameIndex 3"):
            analyzer.analyze(frames, video_id="v")

    def test_repeated_timestamp_rejected(self, analyzer, face_on_swing):
        frames = list(face_on_swing)
        frames[5] = dataclasses.replace(frames[5], timestamp=frames[4].timestamp)
        with pytest.raises(ValueError, match="strictly increase"):
            analyzer.analyze(frames, video_id="v")


class TestEmptyInput:

    def test_empty_result(self, analyzer):
        result = analyzer.analyze([], video_id="empty")

        assert result.id == "analysis_empty"
        assert result.frames == []
        assert result.phase_segments == []
        assert result.overall_score == 0
        assert result.club_type.club_type == ClubType.UNKNOWN
        assert result.camera_angle.confidence == 0.0

    def test_empty_result_keeps_override(self, analyzer):
        result = analyzer.analyze([], video_id="empty", club_type_override="driver")
        assert result.club_type.club_type == ClubType.DRIVER
        assert result.club_type_overridden

    def test_serializes(self, analyzer):
        data = analyzer.analyze([], video_id="empty").to_dict()
        assert data["videoId"] == "empty"
        assert data["tempoEvaluation"] is None
        assert data["keyFrames"] == {}


class TestLogging:

    def test_silent_by_default(self):
        log = resolve_logger(None)
        assert log.name == NULL_LOGGER_NAME
        assert not log.propagate

    def test_traces_to_given_logger(self, face_on_swing, caplog):
        logger = logging.getLogger("swing.test")
        with caplog.at_level(logging.DEBUG, logger="swing.test"):
            SwingAnalyzer(logger=logger).analyze(face_on_swing, video_id="traced")

        messages = [r.getMessage() for r in caplog.records if r.name == "swing.test"]
        assert any("traced" in m for m in messages)
        assert any(m.startswith("Phase anchors") for m in messages)


class TestFeedback:

    def test_face_on_feedback_categories(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v")
        categories = [item.category for item in result.feedback]

        assert categories[:3] == ["rotation", "posture", "arm"]
        assert "tempo" in categories

    def test_no_rotation_feedback_for_dtl(self, analyzer, dtl_swing):
        result = analyzer.analyze(dtl_swing, video_id="v")
        assert "rotation" not in {item.category for item in result.feedback}

    def test_good_x_factor_is_positive(self, analyzer, face_on_swing):
        result = analyzer.analyze(face_on_swing, video_id="v")
        rotation = next(item for item in result.feedback if item.category == "rotation")
        assert rotation.type == "positive"
