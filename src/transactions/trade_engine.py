"""
Trade Engine

Entry points for the rest of the game:

- generate_offers: offers for players on the user's trade block
- generate_counters: what a team wants for players the user requests
- run_cpu_trade_round: one day of CPU-to-CPU trading

Each function accepts an optional rating_fn; without one, ratings come from
league.ratings.overall_rating. Callers that need shared state (one RNG across
days, custom thresholds) should build the generator classes directly.
"""

from datetime import date
import random
from typing import List, Optional, Sequence

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from transactions.counter_offer_generator import CounterOfferGenerator
from transactions.cpu_trade_simulator import CPUTradeSimulator
from transactions.models import CPUTradeRoundResult, TradeOffer
from transactions.trade_counter import DailyTradeCounter
from transactions.trade_offer_generator import TradeOfferGenerator


def generate_offers(
    shopped_players: Sequence[Player],
    my_team: Team,
    all_teams: Sequence[Team],
    desired_positions: Sequence[str] = (),
    rating_fn: RatingFunction = overall_rating
) -> List[TradeOffer]:
    """Up to five offers for the shopped players, best value first"""
    generator = TradeOfferGenerator(rating_fn=rating_fn)
    return generator.generate_offers(shopped_players, my_team, all_teams, desired_positions)


def generate_counters(
    requested_players: Sequence[Player],
    target_team: Team,
    my_team: Team,
    all_teams: Sequence[Team] = (),
    rating_fn: RatingFunction = overall_rating
) -> List[TradeOffer]:
    """Balanced and alternative counters built from the user's roster"""
    generator = CounterOfferGenerator(rating_fn=rating_fn)
    return generator.generate_counters(requested_players, target_team, my_team, all_teams)


def run_cpu_trade_round(
    all_teams: List[Team],
    user_team_id: Optional[str],
    current_date: date,
    counter: Optional[DailyTradeCounter] = None,
    rng: Optional[random.Random] = None,
    rating_fn: RatingFunction = overall_rating,
    seed_salt: Optional[str] = None
) -> CPUTradeRoundResult:
    """
    One day of CPU trading.

    Args:
        all_teams: Every team in the league (mutated for executed trades)
        user_team_id: Team the CPU never trades for
        current_date: Current simulated date
        counter: Counter returned by an earlier call today, if any
        rng: Random source (takes precedence over seed_salt)
        rating_fn: Overall rating source
        seed_salt: Session salt; seeds the round from the salt and the date

    Returns:
        CPUTradeRoundResult; pass its counter to the next call on the same day
    """
    simulator = CPUTradeSimulator(rng=rng, rating_fn=rating_fn, seed_salt=seed_salt)
    return simulator.run_cpu_trade_round(all_teams, user_team_id, current_date, counter)
