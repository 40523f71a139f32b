"""
Score fusion and confidence-to-label mapping
"""
import math
from typing import Optional

from core.signals import ImageSignals

LIKELY_AI = 'likely_ai'
UNCLEAR = 'unclear'
LIKELY_REAL = 'likely_real'

# (lower bound inclusive, label), evaluated top-down
LABEL_BANDS = (
    (0.75, LIKELY_AI),
    (0.45, UNCLEAR),
    (0.0, LIKELY_REAL),
)

BASE_WEIGHT = 0.35
IMAGE_WEIGHT = 0.65

ENTROPY_SCALE = 7.0
EDGE_SCALE = 0.6
NOISE_SCALE = 0.35

ENTROPY_WEIGHT = 0.35
EDGE_WEIGHT = 0.35
NOISE_WEIGHT = 0.25

EXIF_BONUS = 0.05
NO_EXIF_PENALTY = -0.03


def clamp01(value: float) -> float:
    """Clamp to [0, 1]; NaN and infinities map to 0."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))


def score_from_signals(signals: ImageSignals) -> float:
    entropy_score = clamp01(signals.entropy / ENTROPY_SCALE)
    edge_score = clamp01(signals.edge_density / EDGE_SCALE)
    noise_score = clamp01(signals.noise / NOISE_SCALE)
    exif_bonus = EXIF_BONUS if signals.exif_present else NO_EXIF_PENALTY

    combined = (
        entropy_score * ENTROPY_WEIGHT
        + edge_score * EDGE_WEIGHT
        + noise_score * NOISE_WEIGHT
        + exif_bonus
    )
    return clamp01(combined)


def fuse(base_confidence: float, signals: Optional[ImageSignals]) -> float:
    """
    Combine the fingerprint score with the image-signal score.

    Without image signals the base confidence is used on its own.
    """
    if signals is None:
        return clamp01(base_confidence)
    image_score = score_from_signals(signals)
    return clamp01(base_confidence * BASE_WEIGHT + image_score * IMAGE_WEIGHT)


def map_confidence_to_label(confidence: float) -> str:
    for lower_bound, label in LABEL_BANDS:
        if confidence >= lower_bound:
            return label
    return LABEL_BANDS[-1][1]
