from __future__ import annotations

import math
from typing import Mapping

DEFAULT_SCORING_SCALE = 5
MIN_SCORING_SCALE = 1
MAX_SCORING_SCALE = 10
MAX_WEIGHT = 10


def normalized_score(
    rating_value: int,
    criterion_weight: int,
    max_weight: int,
    scale: int = DEFAULT_SCORING_SCALE,
) -> float:
    """Score of one rating in [0, 1] relative to the heaviest criterion.

    Degenerate input (non-positive max_weight or scale, non-finite result)
    scores 0.0 instead of raising.
    """
    if max_weight <= 0 or scale <= 0:
        return 0.0

    denominator = float(scale) * float(max_weight)
    score = (float(rating_value) * float(criterion_weight)) / denominator
    if not math.isfinite(score):
        return 0.0
    return score


def weighted_score(
    ratings: Mapping[str, int],
    criterion_weights: Mapping[str, int],
    max_weight: int,
    scale: int = DEFAULT_SCORING_SCALE,
) -> float:
    """Sum of normalized scores over the rated criteria of one option.

    Ratings for criteria without a weight are skipped.
    """
    if max_weight <= 0:
        return 0.0

    total = 0.0
    for criterion_id, rating in ratings.items():
        weight = criterion_weights.get(criterion_id)
        if weight is None:
            continue
        total += normalized_score(rating, weight, max_weight, scale)

    if not math.isfinite(total):
        return 0.0
    return total
