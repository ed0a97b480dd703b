"""Key estimation placeholder.

No chroma analysis happens here: the same three candidates come back for
every input. A real estimator (chroma correlated against key profiles)
can replace ``estimate_key`` as long as it returns ``KeyCandidate`` objects
sorted by descending score.
"""

import numpy as np

from bandbeat.analysis.models import KeyCandidate

_FIXED_CANDIDATES = (
    ("F Minor", 0.85),
    ("C Minor", 0.60),
    ("G# Major", 0.45),
)


def estimate_key(
    low: np.ndarray,
    mid: np.ndarray,
    high: np.ndarray,
    sample_rate: int,
) -> list[KeyCandidate]:
    """Return the fixed candidate list; the audio is ignored."""
    return [KeyCandidate(key=key, score=score) for key, score in _FIXED_CANDIDATES]
