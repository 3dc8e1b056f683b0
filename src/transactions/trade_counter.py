"""
Daily Trade Counter

Tracks how many trades (or user trade actions) each team has made on one
simulated day. The counter is an immutable value: callers pass it into a
daily round and get the updated counter back, so it lives in the calling
session instead of global state.

Usage:
    counter = DailyTradeCounter.for_date(current_date, previous=counter)
    result = simulator.run_cpu_trade_round(teams, user_team_id, current_date, counter)
    counter = result.counter
"""

from dataclasses import dataclass, field, replace
from datetime import date
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True)
class DailyTradeCounter:
    """
    Per-team trade counts for a single day.

    Attributes:
        day: The day being counted
        counts: team_id -> number of trades recorded today
        trade_count: Number of trades recorded today (one per record() call)
    """

    day: date
    counts: Mapping[str, int] = field(default_factory=dict)
    trade_count: int = 0

    def __post_init__(self):
        # Read-only view so the frozen counter cannot be changed through its dict
        object.__setattr__(self, 'counts', MappingProxyType(dict(self.counts)))

    @classmethod
    def for_date(cls, day: date, previous: Optional["DailyTradeCounter"] = None) -> "DailyTradeCounter":
        """
        Counter for a day, continuing from previous if it covers the same day.

        Args:
            day: Current simulated day
            previous: Counter returned by an earlier call (may be for another day)

        Returns:
            previous when it is for this day, otherwise a fresh counter
        """
        if previous is not None and previous.day == day:
            return previous
        return cls(day=day)

    def count_for(self, team_id: str) -> int:
        return self.counts.get(team_id, 0)

    def has_capacity(self, team_id: str, limit: int) -> bool:
        """True if the team has made fewer than limit trades today"""
        return self.count_for(team_id) < limit

    def record(self, team_ids: Iterable[str]) -> "DailyTradeCounter":
        """Return a new counter with one more trade involving each team"""
        updated = dict(self.counts)
        for team_id in team_ids:
            updated[team_id] = updated.get(team_id, 0) + 1
        return replace(self, counts=updated, trade_count=self.trade_count + 1)
