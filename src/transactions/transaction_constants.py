"""
Transaction Constants

Centralized constants for the basketball trade engine to eliminate magic numbers.
All valuation curves, salary thresholds, generator limits, CPU trade
probabilities and calendar dates are defined here.

Usage:
    from transactions.transaction_constants import (
        ValuationParameters,
        SalaryThresholds,
        CPUTradeParameters
    )

    if player.overall >= CPUTradeParameters.UNTOUCHABLE_OVR:
        # Franchise player, never offered by a CPU team
"""

from datetime import date


class ValuationParameters:
    """
    Constants for single-player trade value.

    value = (max(ovr, REPLACEMENT_LEVEL_OVR) - REPLACEMENT_LEVEL_OVR) ** VALUE_EXPONENT
    followed by the multipliers below, floored at 1.
    """

    REPLACEMENT_LEVEL_OVR = 40
    """Overall at which a player is worth nothing on the market"""

    VALUE_EXPONENT = 3.8
    """
    Power exponent for the value curve.

    Calibration examples (no other modifiers):
    - 70 OVR ≈ 0.4M value units
    - 80 OVR ≈ 1.2M value units
    - 90 OVR ≈ 5.1M value units (includes superstar multiplier)
    """

    SUPERSTAR_OVR = 90
    SUPERSTAR_MULTIPLIER = 1.8
    """90+ OVR players carry an 80% premium"""

    STAR_OVR = 85
    STAR_MULTIPLIER = 1.2
    """85-89 OVR players carry a 20% premium"""

    YOUNG_PREMIUM_AGE = 23
    YOUNG_PREMIUM_RATE = 0.08
    """Age 23 and under: +8% per point of potential above overall"""

    DECLINE_START_AGE = 30
    DECLINE_RATE = 0.12
    DECLINE_FLOOR = 0.15
    """
    Age 30 and over: -12% per year starting at 30 (age 30 = -12%).

    The multiplier never drops below 0.15.
    """

    BAD_CONTRACT_OVR = 78
    BAD_CONTRACT_SALARY = 15.0
    BAD_CONTRACT_PENALTY = 0.6
    """Below 78 OVR earning more than 15M: value x0.6"""

    LONG_BAD_CONTRACT_YEARS = 3
    LONG_BAD_CONTRACT_PENALTY = 0.85
    """Bad contract with 3+ years remaining: additional x0.85"""

    EXPIRING_CONTRACT_OVR = 75
    EXPIRING_CONTRACT_BONUS = 1.05
    """Final contract year and 75+ OVR: value x1.05"""

    INJURED_MULTIPLIER = 0.10
    DAY_TO_DAY_MULTIPLIER = 0.90

    MIN_VALUE = 1
    """Every player is worth at least one value unit"""


class PackageParameters:
    """
    Diminishing weights for multi-player packages.

    Players are sorted by individual value; the best counts fully and
    depth pieces count progressively less, so three mid-level players
    never equal one star.
    """

    PACKAGE_WEIGHTS = (1.0, 0.8, 0.2, 0.05, 0.05)
    OVERFLOW_WEIGHT = 0.05
    """Weight for every player beyond the weight table"""

    MIN_ROSTER_SIZE = 13
    """No trade may leave a team below this many players"""


class SalaryThresholds:
    """
    League salary lines (millions).

    Matching rules tighten as payroll crosses each line:
    - Under CAP_LINE: absorb up to remaining cap space
    - CAP_LINE to TAX_LINE: take back 125% + 0.25M
    - TAX_LINE to FIRST_APRON: take back 110%
    - FIRST_APRON to SECOND_APRON: take back 100%
    - SECOND_APRON and above: 100% and no salary aggregation
    """

    CAP_LINE = 141.0
    TAX_LINE = 171.0
    FIRST_APRON = 178.0
    SECOND_APRON = 189.0

    OVER_CAP_MATCH_RATE = 1.25
    OVER_CAP_CUSHION = 0.25
    TAX_MATCH_RATE = 1.10


class TeamNeedThresholds:
    """Thresholds used to read a roster's strengths and holes."""

    WEAK_POSITION_OVR = 75
    """Best player at a position below this: the position is weak"""

    MIN_POSITION_DEPTH = 2
    """Fewer players than this at a position: the position is weak"""

    STRONG_POSITION_OVR = 85

    ROTATION_SIZE = 8
    STAT_NEED_THRESHOLD = 70
    """Rotation average below this for a stat: the stat is a need"""

    DEFAULT_STAT_RATING = 50

    CONTENDER_CORE_SIZE = 3
    CONTENDER_CORE_OVR = 85
    RECORD_MARGIN = 5
    """Wins above losses + 5 makes a contender; below losses - 5 a seller"""


class OfferParameters:
    """Constants for offers generated against a user's trade block."""

    MAX_OFFERS = 5
    MAX_PACKAGE_SIZE = 3

    MIN_VALUE_RATIO = 0.95
    """Offer value must reach 95% of the shopped players' value"""

    INTEREST_VALUE_MARGIN = 0.05
    """Each interest point lets a team go 5% above the shopped value"""

    SUPERSTAR_PROTECTION_OVR = 92
    """CPU teams never offer 92+ OVR players"""

    STAT_MATCH_RATING = 75
    YOUNG_PROSPECT_AGE = 24
    CONTENDER_TARGET_OVR = 80
    DESIRED_POSITION_OVR = 72

    WEAK_POSITION_INTEREST = 2
    STAT_NEED_INTEREST = 1
    SELLER_YOUTH_INTEREST = 2
    CONTENDER_STAR_INTEREST = 2
    DESIRED_POSITION_INTEREST = 1

    MAX_ANALYSIS_REASONS = 3


class CounterParameters:
    """Constants for counter offers built from the user's roster."""

    BALANCED_MULTIPLIER = 1.05
    ALTERNATIVE_MULTIPLIER = 1.15
    OVERPAY_CEILING = 1.3
    """A counter never asks for more than 130% of the requested value"""

    STAR_PROTECTION_OVR = 88
    """Requesting an 88+ OVR player requires a premium asset in return"""

    PREMIUM_ASSET_OVR = 82
    PREMIUM_ASSET_POTENTIAL = 88
    NON_PREMIUM_PENALTY = 5.0

    VALUE_SCORE_DIVISOR = 1000.0
    """Trade value / 1000 is added to an asset's desirability score"""

    MAX_PACKAGE_SIZE = 4


class CPUTradeParameters:
    """
    Constants for autonomous CPU-to-CPU trades.

    Daily trade chance:
        BASE_PROBABILITY + (MAX_PROBABILITY - BASE_PROBABILITY) * progress ** PROBABILITY_EXPONENT
    where progress runs 0 -> 1 from season start to the trade deadline.
    """

    BASE_PROBABILITY = 0.05
    MAX_PROBABILITY = 0.40
    PROBABILITY_EXPONENT = 2.2

    MIN_VALUE_RATIO = 0.95
    MAX_VALUE_RATIO = 1.10
    """Both sides must be within 95%-110% of each other's value"""

    IMPROVEMENT_THRESHOLD = 0.02
    """Each team must improve its roster strength by at least 2%"""

    WEAK_POSITION_RESOLVED_BONUS = 0.01

    UNTOUCHABLE_OVR = 88
    EXCESS_DEPTH_THRESHOLD = 3
    DEEP_POSITION_THRESHOLD = 4
    LOW_VALUE_DUMP_OVR = 72
    BAD_CONTRACT_SALARY_FLOOR = 12.0
    DEEP_BENCH_RANK = 12
    """Players ranked 12th or lower by overall are expendable"""

    DEEP_SURPLUS_WILLINGNESS = 5
    THIN_SURPLUS_WILLINGNESS = 3
    BAD_CONTRACT_WILLINGNESS = 4
    DEEP_BENCH_WILLINGNESS = 2

    WEAK_POSITION_MIN_OVR = 73
    WEAK_POSITION_PRIORITY = 5
    STAT_NEED_MIN_OVR = 70
    STAT_NEED_PRIORITY = 3
    DEPTH_NEED_MIN_OVR = 68
    DEPTH_NEED_PRIORITY = 2
    STAT_PREFERENCE_RATING = 75

    POSITION_NEED_BONUS = 3.0
    STAT_NEED_BONUS = 1.5

    MAX_CANDIDATE_PAIRS = 15
    SHUFFLE_SWAP_PROBABILITY = 0.3
    MAX_PACKAGE_SIZE = 3

    NEAR_DEADLINE_DAYS = 14
    MAX_TRADES_PER_DAY = 2
    """Trades allowed per day within NEAR_DEADLINE_DAYS of the deadline (else 1)"""

    MAX_TRADES_PER_TEAM_PER_DAY = 1

    STARTER_COUNT = 5
    BENCH_COUNT = 3
    BENCH_WEIGHT = 0.6


class SeasonCalendarDates:
    """Regular season trade window."""

    SEASON_START = date(2025, 10, 20)
    TRADE_DEADLINE = date(2026, 2, 6)


class UserTradeLimits:
    """Limits applied to trade actions initiated by the human player."""

    MAX_DAILY_TRADE_ACTIONS = 5
    """Offer searches and counter requests per day (executing a trade is free)"""

    MAX_SELECTED_PLAYERS = 5
    """Players selectable on a trade block or a proposal"""


# Backwards compatibility - export key constants at module level
CAP_LINE = SalaryThresholds.CAP_LINE
TAX_LINE = SalaryThresholds.TAX_LINE
FIRST_APRON = SalaryThresholds.FIRST_APRON
SECOND_APRON = SalaryThresholds.SECOND_APRON

MIN_ROSTER_SIZE = PackageParameters.MIN_ROSTER_SIZE
MAX_OFFERS = OfferParameters.MAX_OFFERS

SEASON_START = SeasonCalendarDates.SEASON_START
TRADE_DEADLINE = SeasonCalendarDates.TRADE_DEADLINE
