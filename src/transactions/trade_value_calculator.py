"""
Trade Value Calculator

Calculates market trade values for basketball players and weighted values
for multi-player packages.
"""

import math
from typing import Iterable, List

from league.player import HealthStatus, Player
from league.ratings import RatingFunction, overall_rating
from transactions.transaction_constants import PackageParameters, ValuationParameters


class TradeValueCalculator:
    """
    Calculates trade values for players and packages.

    Value Units (healthy, prime-age, fair contract):
    - ~0.4M = rotation player (70 OVR)
    - ~1.2M = quality starter (80 OVR)
    - ~2.3M = All-Star (85 OVR, includes star premium)
    - ~5.1M = superstar (90 OVR, includes superstar premium)

    The curve is steep on purpose: one 90 OVR player is worth more than
    four 80 OVR players.
    """

    def __init__(self, rating_fn: RatingFunction = overall_rating):
        """
        Initialize calculator.

        Args:
            rating_fn: Overall rating source
        """
        self.rating_fn = rating_fn

    def calculate_player_value(self, player: Player) -> int:
        """
        Calculate trade value for a player.

        Value Formula:
        base_value = (max(ovr, 40) - 40) ^ 3.8
        final_value = base_value × star × age × contract × health, floored at 1

        Args:
            player: Player to value

        Returns:
            Trade value (integer, at least 1)
        """
        ovr = self.rating_fn(player)

        # Step 1: Base value from overall rating
        above_replacement = max(ovr, ValuationParameters.REPLACEMENT_LEVEL_OVR) - ValuationParameters.REPLACEMENT_LEVEL_OVR
        value = float(above_replacement) ** ValuationParameters.VALUE_EXPONENT

        # Step 2: Star premium
        value *= self._get_star_multiplier(ovr)

        # Step 3: Age curve
        value *= self._get_age_multiplier(player, ovr)

        # Step 4: Contract adjustment
        value *= self._get_contract_multiplier(player, ovr)

        # Step 5: Health
        value *= self._get_health_multiplier(player.health)

        return max(ValuationParameters.MIN_VALUE, int(math.floor(value)))

    def _get_star_multiplier(self, ovr: int) -> float:
        if ovr >= ValuationParameters.SUPERSTAR_OVR:
            return ValuationParameters.SUPERSTAR_MULTIPLIER
        if ovr >= ValuationParameters.STAR_OVR:
            return ValuationParameters.STAR_MULTIPLIER
        return 1.0

    def _get_age_multiplier(self, player: Player, ovr: int) -> float:
        """
        Young players with upside gain value; veterans lose it.

        Returns 1.0 between the two age thresholds.
        """
        if player.age <= ValuationParameters.YOUNG_PREMIUM_AGE:
            upside = player.potential - ovr
            if upside > 0:
                return 1.0 + upside * ValuationParameters.YOUNG_PREMIUM_RATE
            return 1.0

        if player.age >= ValuationParameters.DECLINE_START_AGE:
            years_declining = player.age - ValuationParameters.DECLINE_START_AGE + 1
            return max(
                ValuationParameters.DECLINE_FLOOR,
                1.0 - years_declining * ValuationParameters.DECLINE_RATE
            )

        return 1.0

    def _get_contract_multiplier(self, player: Player, ovr: int) -> float:
        """Bad contracts are penalized, quality expiring deals get a small bonus"""
        multiplier = 1.0

        is_bad_contract = (
            ovr < ValuationParameters.BAD_CONTRACT_OVR
            and player.salary > ValuationParameters.BAD_CONTRACT_SALARY
        )
        if is_bad_contract:
            multiplier *= ValuationParameters.BAD_CONTRACT_PENALTY
            if player.contract_years >= ValuationParameters.LONG_BAD_CONTRACT_YEARS:
                multiplier *= ValuationParameters.LONG_BAD_CONTRACT_PENALTY

        if player.contract_years == 1 and ovr >= ValuationParameters.EXPIRING_CONTRACT_OVR:
            multiplier *= ValuationParameters.EXPIRING_CONTRACT_BONUS

        return multiplier

    def _get_health_multiplier(self, health: HealthStatus) -> float:
        if health == HealthStatus.INJURED:
            return ValuationParameters.INJURED_MULTIPLIER
        if health == HealthStatus.DAY_TO_DAY:
            return ValuationParameters.DAY_TO_DAY_MULTIPLIER
        return 1.0

    def calculate_package_value(self, players: Iterable[Player]) -> float:
        """
        Calculate weighted value of a multi-player package.

        Players are ranked by individual value; the best counts 100%, the
        second 80%, the third 20% and everyone after 5%.

        Args:
            players: Players in the package

        Returns:
            Weighted package value (0 for an empty package)
        """
        values = sorted(
            (self.calculate_player_value(p) for p in players), reverse=True
        )
        weights = PackageParameters.PACKAGE_WEIGHTS
        total = 0.0
        for rank, value in enumerate(values):
            weight = weights[rank] if rank < len(weights) else PackageParameters.OVERFLOW_WEIGHT
            total += value * weight
        return total

    def rank_by_value(self, players: Iterable[Player]) -> List[Player]:
        """Players sorted by individual value, most valuable first"""
        return sorted(players, key=self.calculate_player_value, reverse=True)


_default_calculator = TradeValueCalculator()


def calculate_player_value(player: Player) -> int:
    """Player value using the default rating function"""
    return _default_calculator.calculate_player_value(player)


def calculate_package_value(players: Iterable[Player]) -> float:
    """Package value using the default rating function"""
    return _default_calculator.calculate_package_value(players)
