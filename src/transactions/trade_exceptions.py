"""
Trade Exception Hierarchy

Exceptions raised when a user-initiated trade action cannot proceed.

Exception Hierarchy:
    TradeException (base)
    ├── TradeWindowClosedError
    ├── TradeLimitReachedError
    ├── TooManyPlayersSelectedError
    ├── InvalidTradeError
    ├── SalaryMatchingError
    └── RosterSizeError

CPU trade rounds never raise these; a CPU candidate that fails a check is
simply rejected. The generators return empty lists for malformed input.
"""

from datetime import datetime
from typing import Any, Dict, Optional


class TradeException(Exception):
    """
    Base exception for all trade errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error code
        trade_context: Trade information (teams, players, date)
        operation: What operation was being performed
    """

    def __init__(
        self,
        message: str,
        error_code: str = "TRADE_000",
        trade_context: Optional[Dict[str, Any]] = None,
        operation: Optional[str] = None
    ):
        self.message = message
        self.error_code = error_code
        self.trade_context = trade_context or {}
        self.operation = operation
        self.timestamp = datetime.now().isoformat()

        super().__init__(self._build_error_message())

    def _build_error_message(self) -> str:
        lines = [f"[{self.error_code}] {self.message}"]

        if self.operation:
            lines.append(f"Operation: {self.operation}")

        if self.trade_context:
            lines.append("Trade Context:")
            for key, value in self.trade_context.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "operation": self.operation,
            "trade_context": self.trade_context,
            "timestamp": self.timestamp,
        }


class TradeWindowClosedError(TradeException):
    """Raised when a trade action is attempted outside the trade window."""

    def __init__(self, current_date, reason: str, operation: Optional[str] = None):
        super().__init__(
            message=reason,
            error_code="TRADE_WINDOW_001",
            trade_context={"date": current_date.isoformat()},
            operation=operation,
        )
        self.current_date = current_date


class TradeLimitReachedError(TradeException):
    """Raised when the user team has used all of today's trade actions."""

    def __init__(self, team_id: str, limit: int, operation: Optional[str] = None):
        super().__init__(
            message=f"Team {team_id} has used all {limit} trade actions today",
            error_code="TRADE_LIMIT_001",
            trade_context={"team_id": team_id, "limit": limit},
            operation=operation,
        )
        self.team_id = team_id
        self.limit = limit


class TooManyPlayersSelectedError(TradeException):
    """Raised when more players are selected than a trade action allows."""

    def __init__(self, selected: int, limit: int, operation: Optional[str] = None):
        super().__init__(
            message=f"{selected} players selected (maximum {limit})",
            error_code="TRADE_SELECTION_001",
            trade_context={"selected": selected, "limit": limit},
            operation=operation,
        )
        self.selected = selected
        self.limit = limit


class InvalidTradeError(TradeException):
    """
    Raised when a proposed trade is malformed.

    Examples:
    - A team trading with itself
    - A player who is not on the sending team's roster
    - Nothing moving in either direction
    """

    def __init__(self, message: str, trade_context: Optional[Dict[str, Any]] = None,
                 operation: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="TRADE_INVALID_001",
            trade_context=trade_context,
            operation=operation,
        )


class SalaryMatchingError(TradeException):
    """Raised when a trade breaks salary matching for either team."""

    def __init__(self, reason: str, trade_context: Optional[Dict[str, Any]] = None,
                 operation: Optional[str] = None):
        super().__init__(
            message=reason,
            error_code="TRADE_SALARY_001",
            trade_context=trade_context,
            operation=operation,
        )
        self.reason = reason


class RosterSizeError(TradeException):
    """Raised when a trade would leave a team below the minimum roster size."""

    def __init__(self, team_id: str, roster_size: int, minimum: int,
                 operation: Optional[str] = None):
        super().__init__(
            message=f"Team {team_id} would have {roster_size} players (minimum {minimum})",
            error_code="TRADE_ROSTER_001",
            trade_context={"team_id": team_id, "roster_size": roster_size, "minimum": minimum},
            operation=operation,
        )
        self.team_id = team_id
        self.roster_size = roster_size
        self.minimum = minimum
