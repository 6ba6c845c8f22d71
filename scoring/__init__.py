from scoring.core import (
    DEFAULT_SCORING_SCALE,
    MAX_SCORING_SCALE,
    MAX_WEIGHT,
    MIN_SCORING_SCALE,
    normalized_score,
    weighted_score,
)

__all__ = [
    "DEFAULT_SCORING_SCALE",
    "MAX_SCORING_SCALE",
    "MAX_WEIGHT",
    "MIN_SCORING_SCALE",
    "normalized_score",
    "weighted_score",
]
