"""
Arbitrage scoring strategies.

Pure functions: given one sports event or one matched prediction market
pair, compute whether a guaranteed-profit position exists and how to
build it.
"""

from arbwatch.models import (
    MatchedMarket,
    PredictionArbitrage,
    SportsArbitrage,
    SportsEvent,
)


DEFAULT_CENTRALIZED_FEE = 0.02
DEFAULT_GAS_COST = 0.01


def calculate_sports_arbitrage(event: SportsEvent) -> SportsArbitrage:
    """
    Score a two-way event across bookmakers.

    The best price for each outcome is taken independently, so the two
    legs may sit with different bookmakers. With implied probabilities
    p1 = 1/best1 and p2 = 1/best2, an arbitrage exists when p1 + p2 < 1.
    Staking p_i / (p1 + p2) of the bankroll on each leg pays the same
    amount whichever outcome wins.
    """
    best_odds1, best_bookmaker1 = 0.0, ""
    best_odds2, best_bookmaker2 = 0.0, ""

    for bookmaker, odds in event.odds.items():
        if odds.outcome1 > best_odds1:
            best_odds1, best_bookmaker1 = odds.outcome1, bookmaker
        if odds.outcome2 > best_odds2:
            best_odds2, best_bookmaker2 = odds.outcome2, bookmaker

    if best_odds1 <= 0 or best_odds2 <= 0:
        # One side has no quote at all
        return SportsArbitrage(
            event_id=event.event_id,
            event=event.description,
            sport=event.sport,
            start_time=event.start_time,
            is_arbitrage=False,
            profit_pct=0.0,
            implied_total=0.0,
            best_odds1=best_odds1,
            best_bookmaker1=best_bookmaker1,
            best_odds2=best_odds2,
            best_bookmaker2=best_bookmaker2,
        )

    implied1 = 1 / best_odds1
    implied2 = 1 / best_odds2
    implied_total = implied1 + implied2

    is_arbitrage = implied_total < 1
    profit_pct = (1 / implied_total - 1) * 100 if is_arbitrage else 0.0

    return SportsArbitrage(
        event_id=event.event_id,
        event=event.description,
        sport=event.sport,
        start_time=event.start_time,
        is_arbitrage=is_arbitrage,
        profit_pct=profit_pct,
        implied_total=implied_total,
        best_odds1=best_odds1,
        best_bookmaker1=best_bookmaker1,
        best_odds2=best_odds2,
        best_bookmaker2=best_bookmaker2,
        stake1_pct=round(implied1 / implied_total * 100, 2) if is_arbitrage else 0.0,
        stake2_pct=round(implied2 / implied_total * 100, 2) if is_arbitrage else 0.0,
    )


def _raw_profit_pct(cost: float) -> float:
    if cost <= 0 or cost >= 1:
        return 0.0
    return (1 / cost - 1) * 100


def calculate_prediction_arbitrage(
    match: MatchedMarket,
    centralized_fee: float = DEFAULT_CENTRALIZED_FEE,
    default_gas: float = DEFAULT_GAS_COST,
) -> PredictionArbitrage:
    """
    Score one question listed on a centralized and a decentralized venue.

    Strategy 1 buys YES on the centralized venue and NO on the decentralized
    one; strategy 2 is the mirror. A pair costing less than 1 pays 1 no
    matter how the question resolves. The flat cost model (centralized fee
    plus decentralized gas, both fractions of notional) is subtracted in
    percentage points from the better strategy's raw profit.
    """
    central = match.centralized
    decentral = match.decentralized

    strategy1_profit = _raw_profit_pct(central.yes_price + decentral.no_price)
    strategy2_profit = _raw_profit_pct(central.no_price + decentral.yes_price)

    gas = decentral.gas_price or default_gas
    total_costs = centralized_fee + gas

    if strategy1_profit > strategy2_profit:
        raw_profit = strategy1_profit
        strategy = "strategy1"
        buy_platform, buy_price = central.platform, central.yes_price
        sell_platform, sell_price = decentral.platform, decentral.no_price
    else:
        raw_profit = strategy2_profit
        strategy = "strategy2"
        buy_platform, buy_price = decentral.platform, decentral.yes_price
        sell_platform, sell_price = central.platform, central.no_price

    net_profit = raw_profit - total_costs * 100

    return PredictionArbitrage(
        market_id=match.match_id,
        question=match.question,
        is_arbitrage=net_profit > 0,
        profit_pct=max(0.0, net_profit),
        raw_profit_pct=raw_profit,
        estimated_costs=total_costs,
        strategy=strategy,
        buy_platform=buy_platform,
        buy_outcome="YES",
        buy_price=buy_price,
        sell_platform=sell_platform,
        sell_outcome="NO",
        sell_price=sell_price,
    )
