"""Per-hop spectral and temporal descriptors for one band."""

import logging

import librosa
import numpy as np

from bandbeat.analysis.models import BandFrame

logger = logging.getLogger(__name__)


def _frame_features(
    frame: np.ndarray,
    sample_rate: int,
    prev_mag: np.ndarray | None,
    rolloff_percent: float,
) -> tuple[BandFrame, np.ndarray]:
    """Compute one BandFrame and return it with the frame's magnitude spectrum."""
    n_fft = len(frame)

    # One frame exactly: no centering, hop covers the whole frame
    rms = float(librosa.feature.rms(
        y=frame, frame_length=n_fft, hop_length=n_fft, center=False, dtype=np.float64,
    )[0, 0])

    S = np.abs(librosa.stft(frame, n_fft=n_fft, hop_length=n_fft, window="hann", center=False))
    centroid = float(librosa.feature.spectral_centroid(S=S, sr=sample_rate, n_fft=n_fft)[0, 0])
    rolloff = float(librosa.feature.spectral_rolloff(
        S=S, sr=sample_rate, n_fft=n_fft, roll_percent=rolloff_percent,
    )[0, 0])

    mag = S[:, 0]
    if prev_mag is None:
        flux = 0.0
    else:
        flux = float(np.sum(np.maximum(mag - prev_mag, 0.0)))

    values = (rms, centroid, rolloff, flux)
    if not all(np.isfinite(v) for v in values):
        raise FloatingPointError(f"non-finite features {values}")

    return BandFrame(
        rms=max(rms, 0.0),
        spectral_centroid=max(centroid, 0.0),
        spectral_rolloff=max(rolloff, 0.0),
        spectral_flux=max(flux, 0.0),
    ), mag


def extract_band_frames(
    samples: np.ndarray,
    sample_rate: int,
    frame_size: int = 2048,
    hop_size: int = 512,
    rolloff_percent: float = 0.99,
) -> list[BandFrame]:
    """Extract one BandFrame per hop of a single band.

    Frames running past the end of the buffer are zero-padded to
    ``frame_size``. A hop whose features cannot be computed is replaced by
    ``BandFrame.zero()`` and extraction carries on; the flux of the next hop
    then starts over from zero.
    """
    samples = np.asarray(samples, dtype=np.float64)
    n_hops = len(samples) // hop_size
    if n_hops == 0:
        return []

    # Pad once so every frame slice has full length
    padded = np.concatenate([samples, np.zeros(frame_size, dtype=np.float64)])

    frames: list[BandFrame] = []
    prev_mag: np.ndarray | None = None
    failures = 0
    for t in range(n_hops):
        start = t * hop_size
        frame = padded[start:start + frame_size]
        try:
            band_frame, prev_mag = _frame_features(frame, sample_rate, prev_mag, rolloff_percent)
        except Exception as e:
            logger.debug(f"Feature extraction failed at hop {t}: {e}")
            band_frame = BandFrame.zero()
            prev_mag = None
            failures += 1
        frames.append(band_frame)

    if failures:
        logger.info(f"  {failures}/{n_hops} frames fell back to zero features")
    return frames
