"""Core data models for band analysis."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

# Segment labels, assigned only by the segmentation state machine
INTRO = "INTRO"
BREAK = "BREAK"
DROP = "DROP"
OUTRO = "OUTRO"
SECTION = "SECTION"

SegmentLabel = Literal["INTRO", "BREAK", "DROP", "OUTRO", "SECTION"]


@dataclass(frozen=True)
class BandFrame:
    """Descriptors for one windowed frame of one band."""
    rms: float
    spectral_centroid: float  # Hz
    spectral_rolloff: float  # Hz
    spectral_flux: float

    @classmethod
    def zero(cls) -> "BandFrame":
        return cls(rms=0.0, spectral_centroid=0.0, spectral_rolloff=0.0, spectral_flux=0.0)


@dataclass(frozen=True)
class BandSnapshot:
    """Features of all three bands at one hop."""
    low: BandFrame
    mid: BandFrame
    high: BandFrame


@dataclass(frozen=True)
class TempoEstimate:
    """Autocorrelation tempo and beat phase."""
    bpm: int
    offset: float  # seconds
    raw_bpm: float  # octave-corrected, before rounding
    lag: int  # winning lag in decimated hops


@dataclass(frozen=True)
class BeatGrid:
    """Fixed-tempo beat timeline, 4/4 assumed."""
    bpm: int
    offset: float
    beats: tuple[float, ...] = ()
    downbeats: tuple[float, ...] = ()


@dataclass(frozen=True)
class Segment:
    """A contiguous run of bars sharing one structural label."""
    label: SegmentLabel
    start_time: float
    end_time: float
    start_bar: int  # 1-based
    end_bar: int  # inclusive


@dataclass(frozen=True)
class KeyCandidate:
    key: str
    score: float  # 0.0-1.0


@dataclass(frozen=True)
class Event:
    """A labelled point on the timeline."""
    time: float
    label: str


@dataclass(frozen=True)
class AnalysisResult:
    """Complete analysis of one track."""
    duration: float
    bpm: int
    beat_grid: BeatGrid
    segments: tuple[Segment, ...]
    key_candidates: tuple[KeyCandidate, ...]
    # hop start time (seconds) -> features, decimated for charting
    features_by_time: Mapping[float, BandSnapshot] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(self, "features_by_time", MappingProxyType(dict(self.features_by_time)))

    @property
    def events(self) -> tuple[Event, ...]:
        """Segment starts projected onto the timeline."""
        return tuple(Event(time=s.start_time, label=s.label) for s in self.segments)
