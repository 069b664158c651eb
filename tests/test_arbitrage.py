"""
Tests for arbitrage scoring and market matching.
"""

import pytest

from arbwatch.engine.arbitrage import (
    calculate_prediction_arbitrage,
    calculate_sports_arbitrage,
)
from arbwatch.engine.matcher import QuestionMatcher
from arbwatch.models import BookmakerOdds, MatchedMarket, VenueType

from conftest import make_event, make_quote


def _match(central, decentral):
    return MatchedMarket(
        match_id=f"{central.platform}-{decentral.platform}-{central.question}",
        question=central.question,
        centralized=central,
        decentralized=decentral,
    )


class TestSportsArbitrage:
    """Tests for calculate_sports_arbitrage."""

    def test_best_odds_taken_independently(self, arbitrage_event):
        """Each outcome uses its own best bookmaker."""
        arb = calculate_sports_arbitrage(arbitrage_event)

        assert arb.best_odds1 == 2.10
        assert arb.best_bookmaker1 == "BookmakerA"
        assert arb.best_odds2 == 2.05
        assert arb.best_bookmaker2 == "BookmakerB"

    def test_arbitrage_profit_and_stakes(self, arbitrage_event):
        """1/2.10 + 1/2.05 < 1 locks in a profit."""
        arb = calculate_sports_arbitrage(arbitrage_event)

        implied_total = 1 / 2.10 + 1 / 2.05
        assert arb.is_arbitrage
        assert arb.implied_total == pytest.approx(implied_total)
        assert arb.profit_pct == pytest.approx((1 / implied_total - 1) * 100)
        assert arb.profit_pct == pytest.approx(3.735, abs=1e-3)
        assert arb.stake1_pct == pytest.approx(49.40, abs=0.01)
        assert arb.stake2_pct == pytest.approx(50.60, abs=0.01)
        assert arb.stake1_pct + arb.stake2_pct == pytest.approx(100.0, abs=0.02)

    def test_no_arbitrage_when_book_is_overround(self):
        """Typical bookmaker margins leave nothing to lock in."""
        event = make_event(odds={
            "BookmakerA": BookmakerOdds(outcome1=1.90, outcome2=1.90),
            "BookmakerB": BookmakerOdds(outcome1=1.85, outcome2=1.95),
        })

        arb = calculate_sports_arbitrage(event)

        assert not arb.is_arbitrage
        assert arb.profit_pct == 0.0
        assert arb.stake1_pct == 0.0
        assert arb.implied_total > 1

    def test_exact_break_even_is_not_arbitrage(self):
        """Implied probabilities summing to exactly 1 are not an arbitrage."""
        event = make_event(odds={"BookmakerA": BookmakerOdds(outcome1=2.0, outcome2=2.0)})

        arb = calculate_sports_arbitrage(event)

        assert not arb.is_arbitrage
        assert arb.profit_pct == 0.0

    def test_event_without_odds(self):
        """An event nobody quotes cannot be an arbitrage."""
        arb = calculate_sports_arbitrage(make_event(odds={}))

        assert not arb.is_arbitrage
        assert arb.best_bookmaker1 == ""
        assert arb.profit_pct == 0.0


class TestPredictionArbitrage:
    """Tests for calculate_prediction_arbitrage."""

    def test_strategy1_net_of_costs(self, matched_quotes):
        """YES centralized (0.40) + NO decentralized (0.40) costs 0.80."""
        central, decentral = matched_quotes

        arb = calculate_prediction_arbitrage(_match(central, decentral), centralized_fee=0.02)

        assert arb.strategy == "strategy1"
        assert arb.raw_profit_pct == pytest.approx(25.0)
        assert arb.estimated_costs == pytest.approx(0.04)
        assert arb.profit_pct == pytest.approx(21.0)
        assert arb.is_arbitrage
        assert arb.buy_platform == "Kalshi"
        assert arb.buy_price == pytest.approx(0.40)
        assert arb.sell_platform == "Augur"
        assert arb.sell_price == pytest.approx(0.40)

    def test_strategy2_mirrors_strategy1(self):
        """NO centralized + YES decentralized when that side is cheaper."""
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.60, no_price=0.45)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.45, no_price=0.60)

        arb = calculate_prediction_arbitrage(_match(central, decentral))

        assert arb.strategy == "strategy2"
        assert arb.buy_platform == "Augur"
        assert arb.sell_platform == "Kalshi"
        assert arb.raw_profit_pct == pytest.approx((1 / 0.90 - 1) * 100)

    def test_tie_goes_to_strategy2(self):
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.45, no_price=0.45)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.45, no_price=0.45)

        arb = calculate_prediction_arbitrage(_match(central, decentral))

        assert arb.strategy == "strategy2"

    def test_missing_gas_uses_default(self):
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.40, no_price=0.60)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.60, no_price=0.40)

        arb = calculate_prediction_arbitrage(
            _match(central, decentral), centralized_fee=0.02, default_gas=0.01
        )

        assert arb.estimated_costs == pytest.approx(0.03)
        assert arb.profit_pct == pytest.approx(22.0)

    def test_costs_can_erase_raw_profit(self):
        """A 1% raw edge does not survive 3% of costs."""
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.50, no_price=0.55)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.55, no_price=0.49)

        arb = calculate_prediction_arbitrage(_match(central, decentral))

        assert arb.raw_profit_pct > 0
        assert not arb.is_arbitrage
        assert arb.profit_pct == 0.0

    @pytest.mark.parametrize("gas", [0.01, 0.02, 0.03])
    def test_five_percent_edge_net_of_fee_and_gas(self, gas):
        """YES 0.45 + NO 0.50 pays 1 for 0.95, then loses 2% fee plus gas."""
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.45, no_price=0.60)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.55, no_price=0.50, gas_price=gas)

        arb = calculate_prediction_arbitrage(_match(central, decentral), centralized_fee=0.02)

        net = (1 / 0.95 - 1) * 100 - (0.02 + gas) * 100
        assert arb.strategy == "strategy1"
        assert arb.raw_profit_pct == pytest.approx(5.263, abs=1e-3)
        assert arb.estimated_costs == pytest.approx(0.02 + gas)
        assert arb.is_arbitrage == (net > 0)
        assert arb.profit_pct == pytest.approx(max(0.0, net))

    def test_no_arbitrage_when_both_pairs_cost_at_least_one(self):
        central = make_quote("Kalshi", VenueType.CENTRALIZED, yes_price=0.55, no_price=0.55)
        decentral = make_quote("Augur", VenueType.DECENTRALIZED, yes_price=0.50, no_price=0.50)

        arb = calculate_prediction_arbitrage(_match(central, decentral))

        assert arb.raw_profit_pct == 0.0
        assert not arb.is_arbitrage
        assert arb.profit_pct == 0.0


class TestQuestionMatcher:
    """Tests for QuestionMatcher."""

    def test_normalize(self):
        assert QuestionMatcher.normalize("  Will  Bitcoin reach $100,000?! ") == "will bitcoin reach $100 000"

    def test_pairs_every_venue_combination(self):
        question = "Will it rain tomorrow?"
        centralized = [
            make_quote("Kalshi", VenueType.CENTRALIZED, 0.5, 0.5, question),
            make_quote("PredictIt", VenueType.CENTRALIZED, 0.5, 0.5, question),
        ]
        decentralized = [
            make_quote("Augur", VenueType.DECENTRALIZED, 0.5, 0.5, question),
            make_quote("Omen", VenueType.DECENTRALIZED, 0.5, 0.5, question),
        ]

        matched = QuestionMatcher().match(centralized, decentralized)

        assert [m.match_id for m in matched] == [
            f"Kalshi-Augur-{question}",
            f"Kalshi-Omen-{question}",
            f"PredictIt-Augur-{question}",
            f"PredictIt-Omen-{question}",
        ]

    def test_different_questions_not_matched(self):
        centralized = [make_quote("Kalshi", VenueType.CENTRALIZED, 0.5, 0.5, "Will it rain tomorrow?")]
        decentralized = [make_quote("Augur", VenueType.DECENTRALIZED, 0.5, 0.5, "Will Team A win the championship?")]

        assert QuestionMatcher().match(centralized, decentralized) == []

    def test_case_and_punctuation_ignored(self):
        centralized = [make_quote("Kalshi", VenueType.CENTRALIZED, 0.5, 0.5, "Will it rain tomorrow?")]
        decentralized = [make_quote("Augur", VenueType.DECENTRALIZED, 0.5, 0.5, "will it RAIN tomorrow")]

        assert len(QuestionMatcher().match(centralized, decentralized)) == 1

    def test_fuzzy_matching_with_lower_threshold(self):
        matcher = QuestionMatcher(min_similarity=0.85)

        assert matcher.similarity("Will it rain tomorrow?", "Will it rain tomorow?") >= 0.85
        assert matcher.similarity("Will it rain tomorrow?", "Will Bitcoin reach $100,000 in 2026?") < 0.85
