"""Autocorrelation tempo estimation and beat phase search."""

import logging
import math

import numpy as np

from bandbeat.analysis.models import TempoEstimate

logger = logging.getLogger(__name__)


def lag_range(ds_rate: float, min_bpm: float, max_bpm: float) -> tuple[int, int]:
    """Inclusive lag range (decimated hops) covering [min_bpm, max_bpm].

    Lower BPM means a longer lag, so ``max_bpm`` sets the shortest lag.
    """
    min_lag = max(1, round(60.0 * ds_rate / max_bpm))
    max_lag = max(min_lag, round(60.0 * ds_rate / min_bpm))
    return min_lag, max_lag


def autocorrelation(signal: np.ndarray, lag: int) -> float:
    """Raw (unnormalized) dot product of the signal with itself shifted by *lag*."""
    if lag >= len(signal):
        return 0.0
    return float(np.dot(signal[:len(signal) - lag], signal[lag:]))


def find_best_lag(signal: np.ndarray, min_lag: int, max_lag: int) -> int:
    """Lag of maximum autocorrelation; ties keep the lowest lag.

    An all-zero signal correlates to 0 everywhere, so ``min_lag`` wins.
    """
    best_lag = min_lag
    best_corr = -math.inf
    for lag in range(min_lag, max_lag + 1):
        corr = autocorrelation(signal, lag)
        if corr > best_corr:
            best_corr = corr
            best_lag = lag
    return best_lag


def correct_octave(bpm: float, min_bpm: float, max_bpm: float) -> float:
    """Fold an out-of-range tempo once: double if too slow, halve if too fast."""
    if bpm < min_bpm:
        return bpm * 2
    if bpm > max_bpm:
        return bpm / 2
    return bpm


def find_phase(envelope: np.ndarray, beat_interval: float) -> int:
    """Starting hop within one beat interval that collects the most onset energy.

    For each integer offset ``o < beat_interval`` the envelope is summed at
    ``floor(o + k * beat_interval)``; ties keep the earliest offset.
    """
    n = len(envelope)
    best_offset = 0
    best_energy = -math.inf
    for offset in range(int(math.ceil(beat_interval))):
        positions = np.floor(np.arange(offset, n, beat_interval)).astype(int)
        positions = positions[positions < n]
        energy = float(envelope[positions].sum()) if len(positions) else 0.0
        if energy > best_energy:
            best_energy = energy
            best_offset = offset
    return best_offset


def estimate_tempo(
    envelope: np.ndarray,
    sample_rate: int,
    hop_size: int,
    min_bpm: float,
    max_bpm: float,
    duration: float,
    decimation: int = 4,
) -> TempoEstimate:
    """Estimate BPM and beat offset from an onset envelope.

    The envelope is stride-decimated (no anti-alias filter) before the lag
    search; the phase search runs on the full-rate envelope.
    """
    if sample_rate <= 0 or hop_size <= 0:
        raise ValueError("sample_rate and hop_size must be positive")
    if min_bpm <= 0 or min_bpm > max_bpm:
        raise ValueError(f"Invalid BPM range [{min_bpm}, {max_bpm}]")
    if decimation < 1:
        raise ValueError("decimation must be >= 1")

    envelope = np.asarray(envelope, dtype=np.float64)
    frame_rate = sample_rate / hop_size
    ds_envelope = envelope[::decimation]
    ds_rate = frame_rate / decimation

    min_lag, max_lag = lag_range(ds_rate, min_bpm, max_bpm)
    lag = find_best_lag(ds_envelope, min_lag, max_lag)
    bpm = correct_octave(60.0 * ds_rate / lag, min_bpm, max_bpm)

    beat_interval = 60.0 / bpm * frame_rate  # in hops
    offset_hops = find_phase(envelope, beat_interval)
    offset = offset_hops * hop_size / sample_rate

    logger.info(f"  Lag {lag} in [{min_lag}, {max_lag}] -> {bpm:.2f} BPM, "
                f"offset {offset:.3f}s over {duration:.1f}s")

    return TempoEstimate(bpm=int(round(bpm)), offset=offset, raw_bpm=bpm, lag=lag)
