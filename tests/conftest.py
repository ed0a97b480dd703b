"""Shared test fixtures for band analysis tests."""

import numpy as np
import pytest
from scipy.signal import butter, sosfilt

from bandbeat.config import Settings


def generate_click_track(
    bpm: float,
    duration_seconds: float = 10.0,
    sr: int = 44100,
    start: float = 0.0,
) -> np.ndarray:
    """Generate a synthetic drum-like click track.

    Every beat carries a 60 Hz kick, a 1 kHz click and a short noise hat so
    that all three bands see an attack. Returns mono audio at *sr*.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)

    hit_samples = int(0.05 * sr)  # 50ms
    t_hit = np.arange(hit_samples) / sr
    rng = np.random.RandomState(0)
    kick = np.sin(2 * np.pi * 60 * t_hit) * np.exp(-t_hit * 40)
    click = np.sin(2 * np.pi * 1000 * t_hit) * np.exp(-t_hit * 100)
    hat = rng.uniform(-1, 1, hit_samples) * np.exp(-t_hit * 200)
    hit = kick + 0.5 * click + 0.3 * hat

    beat_interval = 60.0 / bpm
    time = start
    while time < duration_seconds:
        pos = int(time * sr)
        end = min(pos + hit_samples, n_samples)
        if end > pos:
            audio[pos:end] += hit[:end - pos]
        time += beat_interval

    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak
    return audio


def split_bands(
    audio: np.ndarray,
    sr: int,
    config: Settings | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Butterworth low/mid/high split at the configured cutoffs."""
    cfg = config or Settings()
    low_sos = butter(N=4, Wn=cfg.low_cutoff_hz, btype="low", fs=sr, output="sos")
    mid_sos = butter(N=4, Wn=[cfg.low_cutoff_hz, cfg.high_cutoff_hz], btype="band", fs=sr, output="sos")
    high_sos = butter(N=4, Wn=cfg.high_cutoff_hz, btype="high", fs=sr, output="sos")
    return sosfilt(low_sos, audio), sosfilt(mid_sos, audio), sosfilt(high_sos, audio)


def impulse_envelope(length: int, period: int, offset: int) -> np.ndarray:
    """Unit impulses every *period* hops starting at hop *offset*."""
    envelope = np.zeros(length)
    envelope[offset::period] = 1.0
    return envelope


@pytest.fixture
def impulse_factory():
    return impulse_envelope


@pytest.fixture
def click_128_bands():
    """30 s click track at 128 BPM split into three bands, 44.1 kHz."""
    sr = 44100
    audio = generate_click_track(bpm=128, duration_seconds=30.0, sr=sr)
    low, mid, high = split_bands(audio, sr)
    return low, mid, high, sr, 30.0


@pytest.fixture
def short_click_bands():
    """8 s click track at 128 BPM split into three bands, 22.05 kHz."""
    sr = 22050
    audio = generate_click_track(bpm=128, duration_seconds=8.0, sr=sr)
    low, mid, high = split_bands(audio, sr)
    return low, mid, high, sr, 8.0
