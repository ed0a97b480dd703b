"""Engine configuration."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Analysis constants with env var overrides."""

    # Framing
    frame_size: int = 2048  # samples per analysis frame
    hop_size: int = 512  # samples between frame starts
    rolloff_percent: float = 0.99

    # Tempo
    decimation_factor: int = 4  # onset envelope stride before autocorrelation
    min_bpm: int = 120
    max_bpm: int = 150

    # Feature map retained for charting
    feature_stride: int = 10  # keep every Nth hop

    # Segmentation
    segment_threshold_ratio: float = 0.4  # fraction of the loudest bar
    bar_energy_stride: int = 100  # samples skipped between bar RMS reads
    beats_per_bar: int = 4

    # Band split boundaries, applied upstream of the engine
    low_cutoff_hz: float = 150.0
    high_cutoff_hz: float = 2000.0

    model_config = {"env_prefix": "BANDBEAT_"}

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        for name in (
            "frame_size", "hop_size", "decimation_factor", "feature_stride",
            "bar_energy_stride", "beats_per_bar", "min_bpm",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0 < self.rolloff_percent < 1:
            raise ValueError("rolloff_percent must be in (0, 1)")
        if not 0 < self.segment_threshold_ratio <= 1:
            raise ValueError("segment_threshold_ratio must be in (0, 1]")
        if self.low_cutoff_hz >= self.high_cutoff_hz:
            raise ValueError("low_cutoff_hz must be below high_cutoff_hz")
        if self.min_bpm > self.max_bpm:
            raise ValueError("min_bpm must not exceed max_bpm")
        return self


settings = Settings()
