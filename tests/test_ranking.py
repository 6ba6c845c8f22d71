import math
import unittest

from models import Decision
from scoring.ranking import (
    best_option,
    max_weight,
    option_score,
    rank_options,
    refresh_results,
    score_breakdown,
)


def build_decision(scale: int = 5) -> Decision:
    decision = Decision(title="Laptop", scoring_scale=scale)
    decision.add_criterion("Price", weight=3)
    decision.add_criterion("Battery", weight=2)
    decision.add_option("Option A")
    decision.add_option("Option B")
    return decision


class TestRanking(unittest.TestCase):
    def test_max_weight_defaults_to_one(self) -> None:
        self.assertEqual(max_weight([]), 1)
        self.assertEqual(max_weight(build_decision().criteria), 3)

    def test_option_score_uses_decision_weights(self) -> None:
        decision = build_decision()
        decision.set_rating("Option A", "Price", 5)
        decision.set_rating("Option A", "Battery", 3)

        score = option_score(decision, decision.find_option("Option A"))
        self.assertAlmostEqual(score, (5 * 3 + 3 * 2) / (5 * 3), places=9)

    def test_rank_options_orders_best_first(self) -> None:
        decision = build_decision()
        decision.set_rating("Option A", "Price", 1)
        decision.set_rating("Option B", "Price", 4)

        ranked = rank_options(decision)
        self.assertEqual([result.option for result in ranked], ["Option B", "Option A"])
        self.assertGreater(ranked[0].score, ranked[1].score)

    def test_rank_options_keeps_order_on_ties(self) -> None:
        decision = build_decision()
        ranked = rank_options(decision)
        self.assertEqual([result.option for result in ranked], ["Option A", "Option B"])
        self.assertEqual([result.score for result in ranked], [0.0, 0.0])

    def test_rank_options_applies_scoring_scale(self) -> None:
        decision = build_decision(scale=10)
        decision.set_rating("Option A", "Price", 10)
        decision.set_rating("Option A", "Battery", 10)

        ranked = rank_options(decision)
        self.assertAlmostEqual(ranked[0].score, 1.0 + 2.0 / 3.0, places=9)

    def test_best_option_none_without_ratings(self) -> None:
        decision = build_decision()
        self.assertIsNone(best_option(decision))
        decision.set_rating("Option B", "Battery", 2)
        self.assertEqual(best_option(decision).option, "Option B")

    def test_score_breakdown_marks_unrated_cells(self) -> None:
        decision = build_decision()
        decision.set_rating("Option A", "Price", 5)

        breakdown = score_breakdown(decision)
        self.assertEqual(breakdown.shape, (2, 2))
        self.assertAlmostEqual(breakdown[0, 0], 1.0, places=9)
        self.assertTrue(math.isnan(breakdown[0, 1]))
        self.assertTrue(math.isnan(breakdown[1, 0]))

    def test_refresh_results_tracks_edits(self) -> None:
        decision = build_decision()
        decision.set_rating("Option A", "Price", 2)
        refresh_results(decision)
        self.assertEqual(decision.results[0].option, "Option A")

        decision.set_rating("Option B", "Price", 5)
        decision.set_weight("Battery", 5)
        refresh_results(decision)
        self.assertEqual([result.option for result in decision.results], ["Option B", "Option A"])
        self.assertAlmostEqual(decision.results[0].score, (5 * 3) / (5 * 5), places=9)

        decision.remove_option("Option B")
        refresh_results(decision)
        self.assertEqual([result.option for result in decision.results], ["Option A"])

        decision.remove_criterion("Price")
        decision.remove_criterion("Battery")
        self.assertEqual(refresh_results(decision), [])
