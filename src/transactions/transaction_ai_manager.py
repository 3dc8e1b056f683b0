"""
Transaction AI Manager

Daily orchestrator for CPU-driven in-season trades.
Runs the CPU trade round once per simulated day, carries the daily trade
counter between calls, and writes every executed trade to the transaction log.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

from config.simulation_settings import SimulationSettings
from league.team import Team
from persistence.transaction_log import InMemoryTransactionLog, TransactionLog
from transactions.cpu_trade_simulator import CPUTradeSimulator
from transactions.models import CPUTradeRoundResult
from transactions.trade_counter import DailyTradeCounter


@dataclass
class TransactionAIManager:
    """
    Daily orchestrator for CPU-to-CPU trades.

    Attributes:
        user_team_id: The human player's team, never traded by the CPU
        simulator: CPU trade simulator instance
        transaction_log: Sink for executed trades
        skip_transaction_ai: Skip the daily round (defaults to SimulationSettings)
        seed_salt: Session salt for a date-seeded default simulator (None = unseeded)
    """

    user_team_id: Optional[str] = None

    # Component instances (created in __post_init__ if not provided)
    simulator: Optional[CPUTradeSimulator] = None
    transaction_log: Optional[TransactionLog] = None

    # Configuration
    skip_transaction_ai: Optional[bool] = None
    seed_salt: Optional[str] = None

    # Today's counter, carried between calls on the same day
    counter: Optional[DailyTradeCounter] = field(default=None, init=False)

    # Performance metrics
    _round_count: int = field(default=0, init=False)
    _trade_count: int = field(default=0, init=False)
    _skipped_count: int = field(default=0, init=False)
    _total_round_time_ms: float = field(default=0.0, init=False)

    logger: Optional[logging.Logger] = field(default=None, init=False)

    def __post_init__(self):
        """Initialize components if not provided."""
        self.logger = logging.getLogger(__name__)

        if self.simulator is None:
            self.simulator = CPUTradeSimulator(seed_salt=self.seed_salt)

        if self.transaction_log is None:
            self.transaction_log = InMemoryTransactionLog()

        if self.skip_transaction_ai is None:
            self.skip_transaction_ai = SimulationSettings.SKIP_TRANSACTION_AI

    def run_daily_trades(self, teams: List[Team], current_date: date) -> CPUTradeRoundResult:
        """
        Run today's CPU trade round.

        Args:
            teams: Every team in the league (rosters mutated for executed trades)
            current_date: Current simulated date

        Returns:
            The round result; executed trades are already in the transaction log
        """
        self.counter = DailyTradeCounter.for_date(current_date, previous=self.counter)

        if self.skip_transaction_ai:
            self._skipped_count += 1
            self.logger.debug(f"Transaction AI skipped on {current_date.isoformat()}")
            return CPUTradeRoundResult(
                teams=teams,
                transactions=(),
                counter=self.counter,
                reason="Transaction AI disabled",
            )

        start_time = datetime.now()
        result = self.simulator.run_cpu_trade_round(
            teams, self.user_team_id, current_date, self.counter
        )
        self.counter = result.counter

        for transaction in result.transactions:
            self.transaction_log.append(transaction)

        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
        self._round_count += 1
        self._trade_count += len(result.transactions)
        self._total_round_time_ms += elapsed_ms

        if result.trade_occurred:
            self.logger.info(
                f"{current_date.isoformat()}: {len(result.transactions)} CPU trade(s) "
                f"in {elapsed_ms:.1f}ms"
            )
        else:
            self.logger.debug(f"{current_date.isoformat()}: {result.reason}")

        return result

    def get_performance_metrics(self) -> Dict[str, Any]:
        """
        Get performance metrics for monitoring.

        Returns:
            Dict with round/trade counts and timing
        """
        avg_time = (
            self._total_round_time_ms / self._round_count
            if self._round_count > 0
            else 0.0
        )
        trades_per_round = (
            self._trade_count / self._round_count
            if self._round_count > 0
            else 0.0
        )

        return {
            "round_count": self._round_count,
            "trade_count": self._trade_count,
            "skipped_count": self._skipped_count,
            "total_time_ms": self._total_round_time_ms,
            "avg_time_ms": avg_time,
            "trades_per_round": trades_per_round,
        }

    def reset_metrics(self) -> None:
        """Reset performance metrics to zero."""
        self._round_count = 0
        self._trade_count = 0
        self._skipped_count = 0
        self._total_round_time_ms = 0.0
