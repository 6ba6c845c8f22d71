from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from models import Criterion, Decision, Option, Result
from scoring.core import normalized_score, weighted_score

logger = logging.getLogger(__name__)


def max_weight(criteria: Sequence[Criterion]) -> int:
    """Largest criterion weight, or 1 for a decision without criteria."""
    return max((criterion.weight for criterion in criteria), default=1)


def option_score(decision: Decision, option: Option) -> float:
    """Weighted score of one option, normalized by the decision's scoring scale."""
    return weighted_score(
        option.ratings,
        decision.criterion_weights(),
        max_weight(decision.criteria),
        scale=decision.scoring_scale,
    )


def rank_options(decision: Decision) -> List[Result]:
    results = [Result(option=option.name, score=option_score(decision, option)) for option in decision.options]
    # sort is stable, ties keep the decision's option order
    results.sort(key=lambda item: item.score, reverse=True)
    logger.debug("Ranked %d options for '%s'", len(results), decision.title)
    return results


def refresh_results(decision: Decision) -> List[Result]:
    """Re-rank the decision in place; an empty decision has no results."""
    if decision.options and decision.criteria:
        decision.results = rank_options(decision)
    else:
        decision.results = []
    return decision.results


def best_option(decision: Decision) -> Result | None:
    ranked = rank_options(decision)
    if not ranked or ranked[0].score <= 0:
        return None
    return ranked[0]


def score_breakdown(decision: Decision) -> np.ndarray:
    """Per-criterion normalized scores, one row per option.

    Cells for criteria the option has not been rated on are nan.
    """
    ceiling = max_weight(decision.criteria)
    breakdown = np.full((len(decision.options), len(decision.criteria)), np.nan, dtype=float)
    for row, option in enumerate(decision.options):
        for col, criterion in enumerate(decision.criteria):
            rating = option.ratings.get(criterion.name)
            if rating is None:
                continue
            breakdown[row, col] = normalized_score(
                rating, criterion.weight, ceiling, scale=decision.scoring_scale
            )
    return breakdown
