"""
Decision rules for acting on an opportunity.

Deterministic and free of side effects. Malformed input yields a
non-acting decision instead of an exception.
"""

import math
from typing import Any, Callable, Dict, Optional

from arbwatch.models import Decision, Opportunity, OpportunityKind
from arbwatch.sources.crypto import SEC_EDGAR


# Crypto confidence thresholds
CRYPTO_TRUSTED_SOURCE_CONFIDENCE = 0.75
CRYPTO_ANY_SOURCE_CONFIDENCE = 0.85

# Sports profit thresholds (percent)
SPORTS_HIGH_PROFIT = 2.0
SPORTS_MODERATE_PROFIT = 1.0

# Prediction market profit thresholds (percent, net of costs)
PREDICTION_HIGH_PROFIT = 5.0
PREDICTION_MODERATE_PROFIT = 2.0
PREDICTION_SMALL_PROFIT = 0.5


def _numeric_score(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return float(value)


def evaluate_crypto(opportunity: Opportunity) -> Decision:
    score = _numeric_score(opportunity.score)
    if score is None:
        return Decision(False, "Missing confidence score", 0.0)

    source = getattr(opportunity.payload, "source", None)

    if score >= CRYPTO_TRUSTED_SOURCE_CONFIDENCE and source == SEC_EDGAR:
        return Decision(True, "High confidence SEC filing detected", score)
    if score >= CRYPTO_ANY_SOURCE_CONFIDENCE:
        return Decision(True, "High confidence signal from trusted source", score)
    return Decision(False, "Confidence threshold not met", score)


def evaluate_sports(opportunity: Opportunity) -> Decision:
    profit = _numeric_score(opportunity.score)
    if profit is None:
        return Decision(False, "Missing profit score", 0.0)

    if profit >= SPORTS_HIGH_PROFIT:
        return Decision(True, f"High profit arbitrage opportunity: {profit:.2f}%", profit)
    if profit >= SPORTS_MODERATE_PROFIT:
        return Decision(True, f"Moderate profit arbitrage opportunity: {profit:.2f}%", profit)
    return Decision(False, "Profit margin too small after transaction costs", profit)


def evaluate_prediction(opportunity: Opportunity) -> Decision:
    profit = _numeric_score(opportunity.score)
    if profit is None:
        return Decision(False, "Missing profit score", 0.0)

    if profit >= PREDICTION_HIGH_PROFIT:
        return Decision(True, f"High profit arbitrage: {profit:.2f}% after costs", profit)
    if profit >= PREDICTION_MODERATE_PROFIT:
        return Decision(True, f"Moderate profit arbitrage: {profit:.2f}% after costs", profit)
    if profit >= PREDICTION_SMALL_PROFIT:
        return Decision(True, f"Small but positive arbitrage: {profit:.2f}% after costs", profit)
    return Decision(False, "Profit margin too small or negative after costs", profit)


EVALUATORS: Dict[OpportunityKind, Callable[[Opportunity], Decision]] = {
    OpportunityKind.CRYPTO: evaluate_crypto,
    OpportunityKind.SPORTS: evaluate_sports,
    OpportunityKind.PREDICTION: evaluate_prediction,
}


def evaluate_opportunity(opportunity: Opportunity) -> Decision:
    """Dispatch to the rule set for the opportunity's kind."""
    evaluator = EVALUATORS.get(getattr(opportunity, "kind", None))
    if evaluator is None:
        return Decision(False, "Unknown opportunity kind", 0.0)
    return evaluator(opportunity)
