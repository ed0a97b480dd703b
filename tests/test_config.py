"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from bandbeat.config import Settings


def test_defaults():
    s = Settings()
    assert s.frame_size == 2048
    assert s.hop_size == 512
    assert s.decimation_factor == 4
    assert s.feature_stride == 10
    assert s.segment_threshold_ratio == 0.4
    assert s.bar_energy_stride == 100
    assert (s.min_bpm, s.max_bpm) == (120, 150)


def test_env_override(monkeypatch):
    monkeypatch.setenv("BANDBEAT_HOP_SIZE", "256")
    monkeypatch.setenv("BANDBEAT_SEGMENT_THRESHOLD_RATIO", "0.5")

    s = Settings()

    assert s.hop_size == 256
    assert s.segment_threshold_ratio == 0.5


@pytest.mark.parametrize("kwargs", [
    {"hop_size": 0},
    {"rolloff_percent": 1.5},
    {"rolloff_percent": 1.0},
    {"segment_threshold_ratio": 0.0},
    {"min_bpm": 160, "max_bpm": 150},
    {"low_cutoff_hz": 3000.0},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)
