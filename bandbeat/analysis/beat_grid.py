"""Fixed-tempo beat and downbeat timeline."""

from bandbeat.analysis.models import BeatGrid


def build_beat_grid(
    bpm: int,
    offset: float,
    duration: float,
    beats_per_bar: int = 4,
) -> BeatGrid:
    """Lay beats every 60/bpm seconds from *offset* until *duration*.

    Every ``beats_per_bar``-th beat, starting with the first, is a downbeat.
    No meter detection: 4/4 unless told otherwise.
    """
    if bpm <= 0:
        raise ValueError(f"bpm must be positive, got {bpm}")
    if beats_per_bar <= 0:
        raise ValueError("beats_per_bar must be positive")

    step = 60.0 / bpm
    beats = []
    i = 0
    t = offset
    while t < duration:
        beats.append(t)
        i += 1
        t = offset + i * step

    return BeatGrid(
        bpm=bpm,
        offset=offset,
        beats=tuple(beats),
        downbeats=tuple(beats[::beats_per_bar]),
    )
