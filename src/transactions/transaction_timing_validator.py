"""
Transaction Timing Validator

Decides whether trades are allowed on a given simulated day and how far
the season has progressed toward the trade deadline.

League trade window:
- Opens on the first day of the regular season
- Closes after the trade deadline day (the deadline day itself is open)
- Closed for the rest of the regular season and the playoffs
"""

from datetime import date
from typing import Tuple

from transactions.transaction_constants import CPUTradeParameters, SeasonCalendarDates


class TransactionTimingValidator:
    """
    Trade window checks for daily simulation.

    This validator uses date-only checks; there is no time-of-day handling.

    Example:
        >>> validator = TransactionTimingValidator()
        >>> validator.is_trade_allowed(date(2025, 12, 1))
        (True, 'Trade window open (67 days until deadline)')
        >>> validator.is_trade_allowed(date(2026, 3, 1))[0]
        False
    """

    def __init__(
        self,
        season_start: date = SeasonCalendarDates.SEASON_START,
        trade_deadline: date = SeasonCalendarDates.TRADE_DEADLINE,
        near_deadline_days: int = CPUTradeParameters.NEAR_DEADLINE_DAYS
    ):
        """
        Initialize validator.

        Args:
            season_start: First day of the regular season
            trade_deadline: Last day trades are allowed
            near_deadline_days: Days before the deadline that count as deadline week(s)
        """
        if trade_deadline <= season_start:
            raise ValueError(
                f"Trade deadline {trade_deadline} must be after season start {season_start}"
            )
        self.season_start = season_start
        self.trade_deadline = trade_deadline
        self.near_deadline_days = near_deadline_days

    def is_trade_allowed(self, current_date: date) -> Tuple[bool, str]:
        """
        Check if trades are allowed.

        Args:
            current_date: Current simulated date

        Returns:
            Tuple of (is_allowed, reason)
        """
        if current_date < self.season_start:
            return (
                False,
                f"Trade window opens {self.season_start.isoformat()}"
            )
        if current_date > self.trade_deadline:
            return (
                False,
                f"Trade deadline passed ({self.trade_deadline.isoformat()})"
            )
        return (
            True,
            f"Trade window open ({self.days_until_deadline(current_date)} days until deadline)"
        )

    def trade_progress(self, current_date: date) -> float:
        """Fraction of the trade window elapsed, clamped to 0.0-1.0"""
        window_days = (self.trade_deadline - self.season_start).days
        elapsed = (current_date - self.season_start).days
        return min(1.0, max(0.0, elapsed / window_days))

    def days_until_deadline(self, current_date: date) -> int:
        """Whole days until the deadline (0 on or after it)"""
        return max(0, (self.trade_deadline - current_date).days)

    def is_near_deadline(self, current_date: date) -> bool:
        return self.days_until_deadline(current_date) <= self.near_deadline_days

    def calculate_trade_chance(self, current_date: date) -> float:
        """
        Daily probability that CPU teams attempt a trade.

        Rises from BASE_PROBABILITY at season start to MAX_PROBABILITY at the
        deadline along progress ** PROBABILITY_EXPONENT; zero outside the window.
        """
        is_allowed, _ = self.is_trade_allowed(current_date)
        if not is_allowed:
            return 0.0

        base = CPUTradeParameters.BASE_PROBABILITY
        peak = CPUTradeParameters.MAX_PROBABILITY
        progress = self.trade_progress(current_date)
        return base + (peak - base) * progress ** CPUTradeParameters.PROBABILITY_EXPONENT

    def max_trades_for_day(self, current_date: date) -> int:
        """CPU trades allowed today (more in the final stretch before the deadline)"""
        if self.is_near_deadline(current_date):
            return CPUTradeParameters.MAX_TRADES_PER_DAY
        return 1
