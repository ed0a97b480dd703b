"""Request/response handling around the analysis engine.

One request message in, exactly one response message out: either
``{"type": "SUCCESS", "result": {...}}`` or ``{"type": "ERROR", "error": "..."}``.
"""

import logging

from bandbeat.analysis.engine import analyze_bands
from bandbeat.analysis.models import AnalysisResult, BandFrame
from bandbeat.api.schemas import (
    AnalysisRequest,
    AnalysisResultResponse,
    BandFrameResponse,
    BandSnapshotResponse,
    BeatGridResponse,
    ErrorMessage,
    EventResponse,
    KeyCandidateResponse,
    SegmentResponse,
    SuccessMessage,
)
from bandbeat.config import Settings

logger = logging.getLogger(__name__)


def _frame_response(frame: BandFrame) -> BandFrameResponse:
    return BandFrameResponse(
        rms=frame.rms,
        spectral_centroid=frame.spectral_centroid,
        spectral_rolloff=frame.spectral_rolloff,
        spectral_flux=frame.spectral_flux,
    )


def _result_model(result: AnalysisResult) -> AnalysisResultResponse:
    grid = result.beat_grid
    return AnalysisResultResponse(
        duration=result.duration,
        bpm=result.bpm,
        beat_grid=BeatGridResponse(
            bpm=grid.bpm,
            offset=grid.offset,
            beats=list(grid.beats),
            downbeats=list(grid.downbeats),
        ),
        segments=[
            SegmentResponse(
                label=s.label,
                start_time=s.start_time,
                end_time=s.end_time,
                start_bar=s.start_bar,
                end_bar=s.end_bar,
            )
            for s in result.segments
        ],
        key_candidates=[
            KeyCandidateResponse(key=k.key, score=k.score)
            for k in result.key_candidates
        ],
        features_by_time={
            time: BandSnapshotResponse(
                low=_frame_response(snap.low),
                mid=_frame_response(snap.mid),
                high=_frame_response(snap.high),
            )
            for time, snap in result.features_by_time.items()
        },
        events=[EventResponse(time=e.time, label=e.label) for e in result.events],
    )


def result_to_response(result: AnalysisResult) -> dict:
    """Convert AnalysisResult to a plain dict with wire (camelCase) keys."""
    return _result_model(result).model_dump(by_alias=True)


def handle_message(message: dict, config: Settings | None = None) -> dict:
    """Validate a request, run the analysis and wrap the outcome.

    Every failure, whether a malformed request or an exception raised inside
    the engine, becomes an ERROR message; a SUCCESS message is only built
    from a complete result.
    """
    try:
        request = AnalysisRequest.model_validate(message)
        result = analyze_bands(
            request.low_buffer,
            request.mid_buffer,
            request.high_buffer,
            request.sample_rate,
            request.duration,
            request.min_bpm,
            request.max_bpm,
            config=config,
        )
        response = SuccessMessage(result=_result_model(result))
    except Exception as e:
        logger.exception(f"Analysis failed: {e}")
        return ErrorMessage(error=str(e)).model_dump(by_alias=True)
    return response.model_dump(by_alias=True)
