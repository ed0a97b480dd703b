"""Tests for autocorrelation tempo estimation and phase search."""

import numpy as np
import pytest

from bandbeat.analysis.tempo import (
    autocorrelation,
    correct_octave,
    estimate_tempo,
    find_best_lag,
    find_phase,
    lag_range,
)

# 40960 / 512 = 80 hops per second, 20 after decimation by 4.
SR = 40960
HOP = 512


def test_periodic_impulses_give_exact_tempo_and_offset(impulse_factory):
    """Impulses every 40 hops (0.5 s) starting at hop 12 mean 120 BPM at 0.15 s."""
    envelope = impulse_factory(length=2001, period=40, offset=12)

    estimate = estimate_tempo(envelope, SR, HOP, 100, 140, duration=25.0)

    assert estimate.lag == 10
    assert estimate.bpm == 120
    assert estimate.offset == pytest.approx(0.15, abs=HOP / SR)


def test_reversed_envelope_keeps_tempo_and_moves_phase(impulse_factory):
    envelope = impulse_factory(length=2001, period=40, offset=12)

    estimate = estimate_tempo(envelope[::-1], SR, HOP, 100, 140, duration=25.0)

    assert estimate.bpm == 120
    # Last impulse at hop 1972 becomes hop 28
    assert estimate.offset == pytest.approx(28 * HOP / SR)


def test_silent_envelope_picks_shortest_lag():
    estimate = estimate_tempo(np.zeros(2000), SR, HOP, 100, 140, duration=25.0)

    # round(1200 / 140) = 9
    assert estimate.lag == 9
    assert estimate.bpm == 133
    assert estimate.offset == 0.0


def test_bpm_is_integer():
    estimate = estimate_tempo(np.zeros(100), 44100, 512, 120, 150, duration=1.0)
    assert isinstance(estimate.bpm, int)


def test_lag_range_rounds_and_orders():
    assert lag_range(20.0, 100, 140) == (9, 12)
    assert lag_range(1.0, 120, 150) == (1, 1)


def test_autocorrelation_beyond_signal_is_zero():
    assert autocorrelation(np.ones(5), 5) == 0.0
    assert autocorrelation(np.ones(5), 2) == 3.0


def test_best_lag_ties_keep_lowest():
    signal = np.zeros(50)
    assert find_best_lag(signal, 4, 9) == 4


def test_best_lag_finds_period():
    signal = np.zeros(60)
    signal[::7] = 1.0
    assert find_best_lag(signal, 5, 9) == 7


@pytest.mark.parametrize("bpm, expected", [
    (60.0, 120.0),
    (130.0, 130.0),
    (280.0, 140.0),
    (400.0, 200.0),  # folded once only
])
def test_correct_octave(bpm, expected):
    assert correct_octave(bpm, 100, 150) == expected


def test_find_phase_ties_keep_earliest():
    assert find_phase(np.zeros(100), 10.0) == 0


def test_find_phase_fractional_interval():
    envelope = np.zeros(100)
    positions = np.floor(np.arange(3, 100, 10.5)).astype(int)
    envelope[positions] = 1.0
    assert find_phase(envelope, 10.5) == 3


@pytest.mark.parametrize("kwargs", [
    {"sample_rate": 0},
    {"hop_size": 0},
    {"min_bpm": 0},
    {"min_bpm": 160, "max_bpm": 150},
    {"decimation": 0},
])
def test_invalid_parameters_raise(kwargs):
    params = dict(sample_rate=44100, hop_size=512, min_bpm=120, max_bpm=150, duration=1.0)
    params.update(kwargs)
    with pytest.raises(ValueError):
        estimate_tempo(np.zeros(10), **params)
