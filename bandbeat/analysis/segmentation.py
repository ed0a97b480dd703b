"""Bar-energy segmentation into intro/break/drop/outro sections."""

import logging
from dataclasses import replace

import numpy as np

from bandbeat.analysis.models import BREAK, DROP, INTRO, OUTRO, SECTION, Segment

logger = logging.getLogger(__name__)

# (current label, bar energy above threshold) -> next label.
# Pure silence gives threshold 0 and no bar is ever above it, so INTRO never
# moves on and the whole track stays one INTRO segment.
TRANSITIONS: dict[tuple[str, bool], str] = {
    (INTRO, True): SECTION,
    (INTRO, False): INTRO,
    (SECTION, True): SECTION,
    (SECTION, False): BREAK,
    (DROP, True): DROP,
    (DROP, False): BREAK,
    (BREAK, True): DROP,
    (BREAK, False): BREAK,
}


def next_label(label: str, energy: float, threshold: float) -> str:
    """Look up the state machine; *energy* counts as above only when strictly greater."""
    return TRANSITIONS[(label, energy > threshold)]


def compute_bar_energies(
    low: np.ndarray,
    sample_rate: int,
    downbeats: list[float] | tuple[float, ...],
    sample_stride: int = 100,
) -> np.ndarray:
    """Strided RMS of the low band between each pair of consecutive downbeats."""
    low = np.asarray(low)
    energies = np.zeros(max(len(downbeats) - 1, 0))
    for i in range(len(downbeats) - 1):
        start = int(np.floor(downbeats[i] * sample_rate))
        end = int(np.floor(downbeats[i + 1] * sample_rate))
        if end - start <= 0:
            continue
        subset = low[start:min(end, len(low)):sample_stride]
        if len(subset) == 0:
            continue
        energies[i] = float(np.sqrt(np.mean(np.square(subset, dtype=np.float64))))
    return energies


def label_bars(
    energies: np.ndarray,
    downbeats: list[float] | tuple[float, ...],
    threshold: float,
) -> list[Segment]:
    """Run the transition table over bars and cut a segment at every change.

    The bar that triggers a change still belongs to the segment it closes;
    the new segment starts on the following bar. A change on the last bar
    has no following bar, so the last bar is split off as a one-bar segment
    with the new label, or the running segment is relabelled when it
    already covers only that bar.
    """
    n_bars = len(energies)
    segments: list[Segment] = []
    label = INTRO
    start_time = float(downbeats[0])
    start_bar = 1

    for i, energy in enumerate(energies):
        new_label = next_label(label, float(energy), threshold)
        if new_label == label:
            continue
        if i == n_bars - 1:
            if start_bar < n_bars:
                boundary = float(downbeats[i])
                segments.append(Segment(
                    label=label,
                    start_time=start_time,
                    end_time=boundary,
                    start_bar=start_bar,
                    end_bar=i,
                ))
                start_time = boundary
                start_bar = n_bars
            label = new_label
            break
        boundary = float(downbeats[i + 1])
        segments.append(Segment(
            label=label,
            start_time=start_time,
            end_time=boundary,
            start_bar=start_bar,
            end_bar=i + 1,
        ))
        label = new_label
        start_time = boundary
        start_bar = i + 2

    segments.append(Segment(
        label=label,
        start_time=start_time,
        end_time=float(downbeats[-1]),
        start_bar=start_bar,
        end_bar=n_bars,
    ))
    return segments


def segment_track(
    low: np.ndarray,
    sample_rate: int,
    downbeats: list[float] | tuple[float, ...],
    threshold_ratio: float = 0.4,
    sample_stride: int = 100,
) -> list[Segment]:
    """Split a track into labelled, contiguous bar ranges.

    Never returns an empty list: no downbeats gives a single zero-length
    SECTION, a single downbeat (no complete bar) a single INTRO.
    """
    if len(downbeats) == 0:
        return [Segment(label=SECTION, start_time=0.0, end_time=0.0, start_bar=1, end_bar=1)]

    energies = compute_bar_energies(low, sample_rate, downbeats, sample_stride)
    if len(energies) == 0:
        t = float(downbeats[0])
        return [Segment(label=INTRO, start_time=t, end_time=t, start_bar=1, end_bar=1)]

    threshold = threshold_ratio * float(energies.max())
    segments = label_bars(energies, downbeats, threshold)

    if energies[-1] < threshold:
        segments[-1] = replace(segments[-1], label=OUTRO)

    logger.info(f"  {len(energies)} bars, threshold {threshold:.4f}: "
                + ", ".join(f"{s.label} {s.start_bar}-{s.end_bar}" for s in segments))
    return segments
