"""Multi-band onset envelope from frame-to-frame RMS increases."""

import numpy as np

from bandbeat.analysis.models import BandFrame, BandSnapshot


def build_onset_envelope(
    low: list[BandFrame],
    mid: list[BandFrame],
    high: list[BandFrame],
) -> np.ndarray:
    """Sum of half-wave rectified RMS deltas across the three bands.

    One value per hop; the first hop has no predecessor and is 0.
    """
    n = min(len(low), len(mid), len(high))
    if n == 0:
        return np.zeros(0)

    rms = np.array([
        [f.rms for f in low[:n]],
        [f.rms for f in mid[:n]],
        [f.rms for f in high[:n]],
    ])
    deltas = np.maximum(np.diff(rms, axis=1), 0.0)

    envelope = np.zeros(n)
    envelope[1:] = deltas.sum(axis=0)
    return envelope


def decimate_features(
    low: list[BandFrame],
    mid: list[BandFrame],
    high: list[BandFrame],
    sample_rate: int,
    hop_size: int = 512,
    stride: int = 10,
) -> dict[float, BandSnapshot]:
    """Keep every ``stride``-th hop, keyed by hop start time in seconds."""
    n = min(len(low), len(mid), len(high))
    return {
        t * hop_size / sample_rate: BandSnapshot(low=low[t], mid=mid[t], high=high[t])
        for t in range(0, n, stride)
    }
