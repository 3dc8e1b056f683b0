"""
Counter Offer Generator

When the user asks a team for specific players, builds what that team would
want back from the user's roster: a balanced package just above parity and
an alternative package at a higher multiplier.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from salary_cap.cap_validator import TradeSalaryValidator
from team_management.team_needs_analyzer import TeamNeeds, TeamNeedsAnalyzer
from transactions.interest_scoring import NeedMatchScorer, unique_reasons
from transactions.models import OfferType, ScoredAsset, TradeOffer
from transactions.trade_value_calculator import TradeValueCalculator
from transactions.transaction_constants import CounterParameters


@dataclass(frozen=True)
class _CounterPackage:
    players: Tuple[Player, ...]
    value: float
    reasons: Tuple[str, ...]


_EMPTY_PACKAGE = _CounterPackage(players=(), value=0.0, reasons=())


class CounterOfferGenerator:
    """
    Builds counter offers from the user's roster.

    Star protection: asking for an 88+ OVR player requires at least one
    premium asset (82+ OVR or 88+ potential) in return. Non-premium assets
    are scored down and any package without a premium asset is discarded.
    """

    def __init__(
        self,
        calculator: Optional[TradeValueCalculator] = None,
        needs_analyzer: Optional[TeamNeedsAnalyzer] = None,
        salary_validator: Optional[TradeSalaryValidator] = None,
        rating_fn: RatingFunction = overall_rating
    ):
        self.rating_fn = rating_fn
        self.calculator = calculator or TradeValueCalculator(rating_fn)
        self.needs_analyzer = needs_analyzer or TeamNeedsAnalyzer(rating_fn)
        self.salary_validator = salary_validator or TradeSalaryValidator()
        self.scorer = NeedMatchScorer(rating_fn)
        self.logger = logging.getLogger(__name__)

    def generate_counters(
        self,
        requested_players: Sequence[Player],
        target_team: Team,
        my_team: Team,
        all_teams: Sequence[Team] = ()
    ) -> List[TradeOffer]:
        """
        Generate counter offers for a trade request.

        Args:
            requested_players: Players the user wants from target_team
            target_team: Team that owns the requested players
            my_team: The user's team
            all_teams: League teams (accepted for interface symmetry)

        Returns:
            Zero, one or two offers (balanced first); empty for malformed input
        """
        if not requested_players or target_team is None or my_team is None:
            return []
        if not target_team.roster or not my_team.roster:
            return []

        requested = list(requested_players)
        target_value = self.calculator.calculate_package_value(requested)
        needs = self.needs_analyzer.analyze(target_team)

        require_premium = (
            max(self.rating_fn(p) for p in requested) >= CounterParameters.STAR_PROTECTION_OVR
        )
        assets = self.score_assets(my_team, needs, require_premium)

        offers = []

        # Balanced counter
        balanced = self._build_package(
            assets, requested, target_value, CounterParameters.BALANCED_MULTIPLIER,
            require_premium, my_team, target_team
        )
        if balanced.players and balanced.value >= target_value:
            offers.append(self._to_offer(
                balanced, target_team, target_value, OfferType.COUNTER_BALANCED,
                "Counter offer (balanced)"
            ))

        # Alternative counter without the balanced package's centerpiece
        if balanced.players:
            centerpiece_id = balanced.players[0].player_id
            alternative_assets = [a for a in assets if a.player.player_id != centerpiece_id]
            alternative = self._build_package(
                alternative_assets, requested, target_value,
                CounterParameters.ALTERNATIVE_MULTIPLIER,
                require_premium, my_team, target_team
            )
            if alternative.players and alternative.value >= target_value:
                offers.append(self._to_offer(
                    alternative, target_team, target_value,
                    OfferType.COUNTER_ALTERNATIVE, "Counter offer (alternative)"
                ))

        self.logger.info(
            f"Counter request to {target_team.name} for "
            f"{', '.join(p.name for p in requested)}: {len(offers)} counter(s)"
        )
        return offers

    def is_premium_asset(self, player: Player) -> bool:
        return (
            self.rating_fn(player) >= CounterParameters.PREMIUM_ASSET_OVR
            or player.potential >= CounterParameters.PREMIUM_ASSET_POTENTIAL
        )

    def score_assets(
        self,
        my_team: Team,
        needs: TeamNeeds,
        require_premium: bool
    ) -> List[ScoredAsset]:
        """
        Score the user's healthy players by desirability to the target team.

        Returns:
            Assets sorted by score, most desirable first
        """
        assets = []
        for player in my_team.roster:
            if player.is_injured:
                continue

            score, reasons = self.scorer.score_player(player, needs)
            if require_premium and not self.is_premium_asset(player):
                score -= CounterParameters.NON_PREMIUM_PENALTY

            value = self.calculator.calculate_player_value(player)
            assets.append(ScoredAsset(
                player=player,
                score=score + value / CounterParameters.VALUE_SCORE_DIVISOR,
                trade_value=value,
                reasons=tuple(reasons),
            ))

        assets.sort(key=lambda asset: asset.score, reverse=True)
        return assets

    def _build_package(
        self,
        assets: List[ScoredAsset],
        requested: List[Player],
        target_value: float,
        value_multiplier: float,
        require_premium: bool,
        my_team: Team,
        target_team: Team
    ) -> _CounterPackage:
        """
        Greedily add assets until the package reaches target × multiplier.

        Skips assets that break salary matching for either team or push the
        package past the overpay ceiling.
        """
        package = []
        value = 0.0
        reasons = []
        has_premium = False

        for asset in assets:
            potential = package + [asset.player]

            if not self.salary_validator.is_legal(my_team, incoming=requested, outgoing=potential):
                continue
            if not self.salary_validator.is_legal(target_team, incoming=potential, outgoing=requested):
                continue

            if len(package) >= CounterParameters.MAX_PACKAGE_SIZE:
                break

            potential_value = self.calculator.calculate_package_value(potential)
            if potential_value > target_value * CounterParameters.OVERPAY_CEILING:
                continue

            if require_premium and self.is_premium_asset(asset.player):
                has_premium = True

            package.append(asset.player)
            value = potential_value
            reasons.extend(asset.reasons)

            if value >= target_value * value_multiplier:
                break

        if require_premium and not has_premium:
            self.logger.debug("Counter package discarded: no premium asset for a protected star")
            return _EMPTY_PACKAGE

        return _CounterPackage(players=tuple(package), value=value, reasons=tuple(reasons))

    def _to_offer(
        self,
        package: _CounterPackage,
        target_team: Team,
        target_value: float,
        offer_type: OfferType,
        label: str
    ) -> TradeOffer:
        return TradeOffer(
            team_id=target_team.team_id,
            team_name=target_team.name,
            players=package.players,
            diff_value=package.value - target_value,
            analysis=tuple([label] + unique_reasons(list(package.reasons))),
            offer_type=offer_type,
            package_value=package.value,
            target_value=target_value,
        )
