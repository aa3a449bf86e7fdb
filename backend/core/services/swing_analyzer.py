"""
Swing Analyzer Service

High-level service that runs the full analysis pipeline over one recorded
swing and returns a complete AnalysisResult.

Pipeline:
1. Camera angle from the first frames
2. Handedness and swing phases
3. Club type from the address frames (unless the player chose the club)
4. Phase segments and tempo
5. Aggregate metrics and the base score
6. Fault detectors and their penalty
7. Coaching feedback

This is the main entry point for analyzing golf swings.
"""

import dataclasses
import logging
from typing import Optional, Sequence, Union

from ..config import CLUB_DETECTION
from ..domain.pose import PoseFrame
from ..domain.analysis import (
    AnalysisResult,
    CameraAngleResult,
    ClubType,
    ClubTypeResult,
    SwingPhase,
    SwingPhaseResult,
)
from .camera_angle import NO_SIGNAL, detect_camera_angle_from_frames
from .club_detector import detect_club_type_from_frames
from .phase_detector import detect_swing_phases
from .tempo_analyzer import (
    calculate_tempo_metrics,
    calculate_tempo_score,
    consolidate_phases,
    evaluate_tempo,
    find_segment,
)
from .metrics_aggregator import calculate_swing_metrics
from .scoring import apply_penalty, calculate_overall_score, calculate_penalty
from .detectors import DetectorInput, run_all_detectors
from .feedback import generate_swing_feedback
from .trace import resolve_logger


def parse_club_type(value: Union[ClubType, str, None]) -> Optional[ClubType]:
    """
    Normalize a club override.

    Raises:
        ValueError: If a string does not name a club type
    """
    if value is None or isinstance(value, ClubType):
        return value
    try:
        return ClubType(value.strip().lower())
    except ValueError:
        valid = ", ".join(club.value for club in ClubType)
        raise ValueError(f"Unknown club type '{value}' (expected one of: {valid})")


def check_frame_order(frames: Sequence[PoseFrame]) -> None:
    """
    Phase segments index frames by frame_index, so it must equal list position.

    Raises:
        ValueError: If a frame_index is out of place or timestamps do not increase
    """
    previous = None
    for position, frame in enumerate(frames):
        if frame.frame_index != position:
            raise ValueError(
                f"Frame at position {position} has frameIndex {frame.frame_index}; "
                "frames must be numbered 0, 1, 2, ... in recording order"
            )
        if previous is not None and frame.timestamp <= previous:
            raise ValueError(
                f"Frame {position} timestamp {frame.timestamp} does not follow {previous}; "
                "timestamps must strictly increase"
            )
        previous = frame.timestamp


class SwingAnalyzer:
    """
    Analyzes golf swings from pose frame sequences.

    The analyzer holds no state between calls, so one instance can serve any
    number of analyses. Pass a logger to trace each stage; without one the
    engine stays silent.

    Usage:
        analyzer = SwingAnalyzer(logger=logging.getLogger("core.engine"))

        result = analyzer.analyze(frames, video_id="swing-001")
        print(f"Overall score: {result.overall_score}")

        # Same swing, judged as a driver swing
        driver = analyzer.reanalyze_with_club(result, ClubType.DRIVER)
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = resolve_logger(logger)

    # -------------------------------------------------------------------------
    # Main Analysis Methods
    # -------------------------------------------------------------------------

    def analyze(
        self,
        frames: Sequence[PoseFrame],
        video_id: str,
        club_type_override: Union[ClubType, str, None] = None,
    ) -> AnalysisResult:
        """
        Analyze a golf swing from pose frames.

        Args:
            frames: Time-ordered pose frames, frame_index matching position
            video_id: Identifier of the source recording
            club_type_override: Club chosen by the player; skips club detection

        Returns:
            Complete AnalysisResult. Empty input yields an empty result
            with score 0 rather than an error.

        Raises:
            ValueError: If club_type_override is not a known club type, or
                frames are out of order
        """
        override = parse_club_type(club_type_override)
        frames = list(frames)
        check_frame_order(frames)
        log = self.logger

        if not frames:
            log.info(f"Analysis {video_id}: no frames, returning empty result")
            return self._empty_result(video_id, override)

        log.info(f"Analysis {video_id}: {len(frames)} frames")

        camera = detect_camera_angle_from_frames(frames, logger=log)
        phase_result = detect_swing_phases(frames, logger=log)
        return self._analyze_from_phases(frames, video_id, camera, phase_result, override)

    def reanalyze_with_club(
        self,
        result: AnalysisResult,
        club_type: Union[ClubType, str],
    ) -> AnalysisResult:
        """
        Re-judge an existing analysis for a player-chosen club.

        Camera angle is reused; the remaining stages run again on the same
        frames and a new AnalysisResult is returned.
        """
        club = parse_club_type(club_type)
        if not result.frames:
            return self._empty_result(result.video_id, club)

        phase_result = detect_swing_phases(result.frames, logger=self.logger)
        return self._analyze_from_phases(
            result.frames, result.video_id, result.camera_angle, phase_result, club
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _analyze_from_phases(
        self,
        frames: list[PoseFrame],
        video_id: str,
        camera: CameraAngleResult,
        phase_result: SwingPhaseResult,
        override: Optional[ClubType],
    ) -> AnalysisResult:
        log = self.logger
        angle = camera.angle
        segments = consolidate_phases(phase_result.phases)

        if override is not None:
            club = ClubTypeResult(club_type=override, confidence=1.0)
            log.info(f"Club type set by player: {override.value}")
        else:
            club = self._detect_club(frames, segments, angle)

        tempo = calculate_tempo_metrics(segments)
        metrics = calculate_swing_metrics(
            frames,
            phase_result.phases,
            segments,
            angle,
            phase_result.is_right_handed,
            logger=log,
        )

        tempo_score = calculate_tempo_score(tempo.tempo_ratio, club.club_type)
        base_score = calculate_overall_score(
            metrics, tempo_score, angle, club.club_type, logger=log
        )

        detector_results = run_all_detectors(
            DetectorInput(
                frames=frames,
                phase_segments=segments,
                metrics=metrics,
                tempo=tempo,
                is_right_handed=phase_result.is_right_handed,
                camera_angle=angle,
                club_type=club.club_type,
                club_type_overridden=override is not None,
            ),
            logger=log,
        )
        penalty = calculate_penalty(detector_results)
        overall = apply_penalty(base_score, penalty)

        log.info(
            f"Analysis {video_id}: {angle.value} camera, {club.club_type.value}, "
            f"tempo {tempo.tempo_ratio:.2f}, score {base_score} - {penalty} = {overall}"
        )

        result = AnalysisResult(
            id=self._result_id(video_id, override),
            video_id=video_id,
            frames=frames,
            camera_angle=camera,
            club_type=club,
            club_type_overridden=override is not None,
            is_right_handed=phase_result.is_right_handed,
            phase_segments=segments,
            key_frames=dict(phase_result.key_frames),
            metrics=metrics,
            tempo=tempo,
            tempo_evaluation=evaluate_tempo(tempo),
            base_score=base_score,
            penalty=penalty,
            overall_score=overall,
            detector_results=detector_results,
        )
        return dataclasses.replace(result, feedback=generate_swing_feedback(result))

    def _detect_club(self, frames, segments, angle) -> ClubTypeResult:
        """Club type from the first address frames."""
        address = find_segment(segments, SwingPhase.ADDRESS)
        if address is None:
            self.logger.debug("Club type: no address phase, unknown")
            return ClubTypeResult(club_type=ClubType.UNKNOWN, confidence=0.0)

        last = min(address.end_frame, address.start_frame + CLUB_DETECTION["sample_frames"] - 1)
        address_frames = frames[address.start_frame:last + 1]
        return detect_club_type_from_frames(address_frames, angle, logger=self.logger)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _result_id(video_id: str, override: Optional[ClubType]) -> str:
        if override is None:
            return f"analysis_{video_id}"
        return f"analysis_{video_id}_{override.value}"

    def _empty_result(self, video_id: str, override: Optional[ClubType]) -> AnalysisResult:
        club = ClubTypeResult(
            club_type=override if override is not None else ClubType.UNKNOWN,
            confidence=1.0 if override is not None else 0.0,
        )
        return AnalysisResult(
            id=self._result_id(video_id, override),
            video_id=video_id,
            frames=[],
            camera_angle=NO_SIGNAL,
            club_type=club,
            club_type_overridden=override is not None,
            is_right_handed=True,
        )
