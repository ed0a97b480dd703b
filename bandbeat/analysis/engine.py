"""Analysis orchestrator - combines all analysis modules."""

import logging

import numpy as np

from bandbeat.analysis.beat_grid import build_beat_grid
from bandbeat.analysis.features import extract_band_frames
from bandbeat.analysis.key import estimate_key
from bandbeat.analysis.models import AnalysisResult
from bandbeat.analysis.onset import build_onset_envelope, decimate_features
from bandbeat.analysis.segmentation import segment_track
from bandbeat.analysis.tempo import estimate_tempo
from bandbeat.config import Settings, settings

logger = logging.getLogger(__name__)


def _as_band(name: str, buffer) -> np.ndarray:
    band = np.asarray(buffer, dtype=np.float64)
    if band.ndim != 1:
        raise ValueError(f"{name} band must be one-dimensional, got shape {band.shape}")
    if not np.all(np.isfinite(band)):
        raise ValueError(f"{name} band contains non-finite samples")
    return band


def analyze_bands(
    low,
    mid,
    high,
    sample_rate: int,
    duration: float,
    min_bpm: int,
    max_bpm: int,
    config: Settings | None = None,
) -> AnalysisResult:
    """Analyze three band-split copies of one track.

    Pure function of its arguments: the buffers are read, never modified,
    and *config* (the module settings by default) is only consulted.
    """
    cfg = config or settings

    low = _as_band("low", low)
    mid = _as_band("mid", mid)
    high = _as_band("high", high)
    if not len(low) == len(mid) == len(high):
        raise ValueError(
            f"Band lengths differ: low={len(low)}, mid={len(mid)}, high={len(high)}"
        )
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if duration < 0:
        raise ValueError(f"duration must be non-negative, got {duration}")
    if min_bpm <= 0 or min_bpm > max_bpm:
        raise ValueError(f"Invalid BPM range [{min_bpm}, {max_bpm}]")

    logger.info(f"Analyzing {duration:.1f}s of audio at {sample_rate}Hz "
                f"({min_bpm}-{max_bpm} BPM)")

    # Step 1: Frame features per band
    logger.info("Step 1: Feature extraction")
    frames = {
        name: extract_band_frames(
            band,
            sample_rate,
            frame_size=cfg.frame_size,
            hop_size=cfg.hop_size,
            rolloff_percent=cfg.rolloff_percent,
        )
        for name, band in (("low", low), ("mid", mid), ("high", high))
    }
    logger.info(f"  {len(frames['low'])} hops per band")

    # Step 2: Onset envelope + decimated feature map
    logger.info("Step 2: Onset envelope")
    envelope = build_onset_envelope(frames["low"], frames["mid"], frames["high"])
    features_by_time = decimate_features(
        frames["low"], frames["mid"], frames["high"],
        sample_rate,
        hop_size=cfg.hop_size,
        stride=cfg.feature_stride,
    )

    # Step 3: Tempo and phase
    logger.info("Step 3: Tempo estimation")
    tempo = estimate_tempo(
        envelope,
        sample_rate,
        cfg.hop_size,
        min_bpm,
        max_bpm,
        duration,
        decimation=cfg.decimation_factor,
    )
    logger.info(f"  Tempo: {tempo.bpm} BPM, offset {tempo.offset:.3f}s")

    # Step 4: Beat grid
    logger.info("Step 4: Beat grid")
    beat_grid = build_beat_grid(
        tempo.bpm, tempo.offset, duration, beats_per_bar=cfg.beats_per_bar,
    )
    logger.info(f"  {len(beat_grid.beats)} beats, {len(beat_grid.downbeats)} downbeats")

    # Step 5: Segmentation on low-band bar energy
    logger.info("Step 5: Segmentation")
    segments = segment_track(
        low,
        sample_rate,
        beat_grid.downbeats,
        threshold_ratio=cfg.segment_threshold_ratio,
        sample_stride=cfg.bar_energy_stride,
    )

    # Step 6: Key (fixed placeholder)
    logger.info("Step 6: Key estimation")
    key_candidates = estimate_key(low, mid, high, sample_rate)

    return AnalysisResult(
        duration=float(duration),
        bpm=tempo.bpm,
        beat_grid=beat_grid,
        segments=tuple(segments),
        key_candidates=tuple(key_candidates),
        features_by_time=features_by_time,
    )


class AnalysisEngine:
    """Runs ``analyze_bands`` with a fixed configuration."""

    def __init__(self, config: Settings | None = None):
        self.config = config or settings

    def analyze(
        self,
        low,
        mid,
        high,
        sample_rate: int,
        duration: float,
        min_bpm: int | None = None,
        max_bpm: int | None = None,
    ) -> AnalysisResult:
        """Analyze one track; BPM bounds default to the configured range."""
        return analyze_bands(
            low, mid, high,
            sample_rate,
            duration,
            self.config.min_bpm if min_bpm is None else min_bpm,
            self.config.max_bpm if max_bpm is None else max_bpm,
            config=self.config,
        )
