"""Pydantic models for the analysis message contract."""

from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _Message(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisRequest(_Message):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    low_buffer: np.ndarray
    mid_buffer: np.ndarray
    high_buffer: np.ndarray
    sample_rate: int = Field(gt=0)
    duration: float = Field(ge=0)
    min_bpm: int = Field(gt=0)
    max_bpm: int = Field(gt=0)

    @field_validator("low_buffer", "mid_buffer", "high_buffer", mode="before")
    @classmethod
    def _to_array(cls, value):
        # float64 arrays pass through without a copy
        array = np.asarray(value, dtype=np.float64)
        if array.ndim != 1:
            raise ValueError(f"expected a 1-D sample buffer, got shape {array.shape}")
        return array

    @model_validator(mode="after")
    def _check_consistency(self) -> "AnalysisRequest":
        lengths = {len(self.low_buffer), len(self.mid_buffer), len(self.high_buffer)}
        if len(lengths) != 1:
            raise ValueError("lowBuffer, midBuffer and highBuffer must have equal length")
        if self.min_bpm > self.max_bpm:
            raise ValueError("minBpm must not exceed maxBpm")
        return self


class BandFrameResponse(_Message):
    rms: float
    spectral_centroid: float
    spectral_rolloff: float
    spectral_flux: float


class BandSnapshotResponse(_Message):
    low: BandFrameResponse
    mid: BandFrameResponse
    high: BandFrameResponse


class BeatGridResponse(_Message):
    bpm: int
    offset: float
    beats: list[float]
    downbeats: list[float]


class SegmentResponse(_Message):
    label: Literal["INTRO", "BREAK", "DROP", "OUTRO", "SECTION"]
    start_time: float
    end_time: float
    start_bar: int
    end_bar: int


class KeyCandidateResponse(_Message):
    key: str
    score: float


class EventResponse(_Message):
    time: float
    label: str


class AnalysisResultResponse(_Message):
    duration: float
    bpm: int
    beat_grid: BeatGridResponse
    segments: list[SegmentResponse]
    key_candidates: list[KeyCandidateResponse]
    features_by_time: dict[float, BandSnapshotResponse] = {}
    events: list[EventResponse] = []


class SuccessMessage(_Message):
    type: Literal["SUCCESS"] = "SUCCESS"
    result: AnalysisResultResponse


class ErrorMessage(_Message):
    type: Literal["ERROR"] = "ERROR"
    error: str
