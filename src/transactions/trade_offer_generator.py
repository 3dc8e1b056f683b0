"""
Trade Offer Generator

Generates offers for players the user puts on the trade block. Every other
team's interest is scored from its needs; interested teams build the best
legal return package they are willing to give up.
"""

from typing import List, Optional, Sequence
import logging

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from salary_cap.cap_validator import TradeSalaryValidator
from team_management.team_needs_analyzer import TeamNeedsAnalyzer
from transactions.interest_scoring import NeedMatchScorer, unique_reasons
from transactions.models import OfferType, TradeOffer
from transactions.trade_value_calculator import TradeValueCalculator
from transactions.transaction_constants import OfferParameters


class TradeOfferGenerator:
    """
    Generates ranked offers for a user's trade block.

    Process:
    1. Value the shopped players as a package
    2. Score each other team's interest from its needs
    3. Skip teams with no interest
    4. Greedily build a legal return package (best value first) under an
       interest-scaled ceiling
    5. Keep packages worth at least 95% of the shopped value
    6. Rank by value differential, best first
    """

    MAX_OFFERS = OfferParameters.MAX_OFFERS
    MAX_PACKAGE_SIZE = OfferParameters.MAX_PACKAGE_SIZE

    def __init__(
        self,
        calculator: Optional[TradeValueCalculator] = None,
        needs_analyzer: Optional[TeamNeedsAnalyzer] = None,
        salary_validator: Optional[TradeSalaryValidator] = None,
        rating_fn: RatingFunction = overall_rating
    ):
        """
        Initialize offer generator.

        Args:
            calculator: Trade value calculator
            needs_analyzer: Team needs analyzer
            salary_validator: Salary matching rules
            rating_fn: Overall rating source
        """
        self.rating_fn = rating_fn
        self.calculator = calculator or TradeValueCalculator(rating_fn)
        self.needs_analyzer = needs_analyzer or TeamNeedsAnalyzer(rating_fn)
        self.salary_validator = salary_validator or TradeSalaryValidator()
        self.scorer = NeedMatchScorer(rating_fn)
        self.logger = logging.getLogger(__name__)

    def generate_offers(
        self,
        shopped_players: Sequence[Player],
        my_team: Team,
        all_teams: Sequence[Team],
        desired_positions: Sequence[str] = ()
    ) -> List[TradeOffer]:
        """
        Generate offers for the shopped players.

        Args:
            shopped_players: User players on the trade block
            my_team: The user's team
            all_teams: Every team in the league (the user's team is skipped)
            desired_positions: Positions the user would like back

        Returns:
            Up to MAX_OFFERS offers ranked by diff_value (best first);
            empty for malformed input
        """
        if not shopped_players or my_team is None or not my_team.roster:
            return []

        shopped = list(shopped_players)
        outgoing_value = self.calculator.calculate_package_value(shopped)
        offers = []

        for other_team in all_teams:
            if other_team.team_id == my_team.team_id or not other_team.roster:
                continue

            # Step 1: Interest from the other team's needs
            interest, reasons = self._score_interest(shopped, other_team, desired_positions)
            if interest <= 0:
                continue

            # Step 2: Build the return package
            package = self._build_return_package(
                shopped, outgoing_value, interest, my_team, other_team
            )
            if not package:
                continue

            package_value = self.calculator.calculate_package_value(package)
            if package_value < outgoing_value * OfferParameters.MIN_VALUE_RATIO:
                self.logger.debug(
                    f"{other_team.name}: best package {package_value:,.0f} below "
                    f"{OfferParameters.MIN_VALUE_RATIO:.0%} of {outgoing_value:,.0f}"
                )
                continue

            offers.append(TradeOffer(
                team_id=other_team.team_id,
                team_name=other_team.name,
                players=tuple(package),
                diff_value=package_value - outgoing_value,
                analysis=tuple([f"Interest: {interest}/10"] + unique_reasons(reasons)),
                offer_type=OfferType.TRADE_BLOCK,
                package_value=package_value,
                target_value=outgoing_value,
            ))

        offers.sort(key=lambda offer: offer.diff_value, reverse=True)
        self.logger.info(
            f"Trade block for {my_team.name}: {len(offers)} offer(s) for "
            f"{', '.join(p.name for p in shopped)}"
        )
        return offers[:self.MAX_OFFERS]

    def _score_interest(
        self,
        shopped: List[Player],
        other_team: Team,
        desired_positions: Sequence[str]
    ):
        needs = self.needs_analyzer.analyze(other_team)
        interest, reasons = self.scorer.score_players(shopped, needs)

        if desired_positions and any(
            self.rating_fn(p) >= OfferParameters.DESIRED_POSITION_OVR
            and any(p.plays_position(pos) for pos in desired_positions)
            for p in other_team.roster
        ):
            interest += OfferParameters.DESIRED_POSITION_INTEREST

        return interest, reasons

    def _build_return_package(
        self,
        shopped: List[Player],
        outgoing_value: float,
        interest: int,
        my_team: Team,
        other_team: Team
    ) -> List[Player]:
        """
        Greedy package from the other team's tradeable players.

        A candidate is admitted only when salary matching holds for both
        teams and the package stays under the interest-scaled ceiling.
        """
        tradeable = self.calculator.rank_by_value(
            p for p in other_team.roster
            if self.rating_fn(p) < OfferParameters.SUPERSTAR_PROTECTION_OVR
        )
        ceiling = outgoing_value * (1.0 + interest * OfferParameters.INTEREST_VALUE_MARGIN)

        package = []
        for candidate in tradeable:
            if len(package) >= self.MAX_PACKAGE_SIZE:
                break

            potential = package + [candidate]
            if not self.salary_validator.is_legal(other_team, incoming=shopped, outgoing=potential):
                continue
            if not self.salary_validator.is_legal(my_team, incoming=potential, outgoing=shopped):
                continue

            if self.calculator.calculate_package_value(potential) < ceiling:
                package.append(candidate)

        return package
