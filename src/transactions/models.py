"""
Trade Engine Data Models

Defines the value types produced while generating and executing trades:
scored assets, trade offers, CPU trade packages, team trade profiles and
the immutable transaction record.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import uuid

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from team_management.team_needs_analyzer import StatNeed, TeamNeeds
from transactions.trade_counter import DailyTradeCounter


@dataclass(frozen=True)
class ScoredAsset:
    """
    A player paired with a desirability score and its justification.

    The score means "how much the other side wants this player" in the
    offer and counter generators, and "how willing the owner is to move
    this player" in the CPU simulator.
    """

    player: Player
    score: float
    trade_value: int
    reasons: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.player} score={self.score:.2f}"


class OfferType(Enum):
    """Where a trade offer came from"""
    TRADE_BLOCK = "TRADE_BLOCK"
    COUNTER_BALANCED = "COUNTER_BALANCED"
    COUNTER_ALTERNATIVE = "COUNTER_ALTERNATIVE"


@dataclass(frozen=True)
class TradeOffer:
    """
    Players one team is willing to exchange for a target package.

    Attributes:
        team_id: Trade partner (the offering team, or the counter-offer target)
        team_name: Display name of that team
        players: Players offered in exchange for the target package
        diff_value: Offered package value minus target package value
        analysis: Human-readable justification, most important first
        offer_type: Trade block offer or counter variant
        package_value: Weighted value of the offered players
        target_value: Weighted value of the players being asked for
    """

    team_id: str
    team_name: str
    players: Tuple[Player, ...]
    diff_value: float
    analysis: Tuple[str, ...]
    offer_type: OfferType = OfferType.TRADE_BLOCK
    package_value: float = 0.0
    target_value: float = 0.0

    def __post_init__(self):
        if not self.players:
            raise ValueError("Trade offer must contain at least one player")

    @property
    def total_salary(self) -> float:
        return sum(player.salary for player in self.players)

    @property
    def value_ratio(self) -> float:
        """Offered value / target value (1.0 = even)"""
        if self.target_value <= 0:
            return 0.0
        return self.package_value / self.target_value

    def get_summary(self) -> str:
        """
        Get human-readable offer summary.

        Returns:
            Multi-line string with offer details
        """
        lines = [
            f"TRADE OFFER ({self.offer_type.value}) from {self.team_name}:",
            f"  Players: {', '.join(str(p) for p in self.players)}",
            f"  Salary: {self.total_salary:.1f}M",
            f"  Value: {self.package_value:,.0f} vs {self.target_value:,.0f} "
            f"({self.diff_value:+,.0f})",
        ]
        lines.extend(f"  - {reason}" for reason in self.analysis)
        return "\n".join(lines)


@dataclass(frozen=True)
class AcquisitionTarget:
    """A kind of player a CPU team wants to acquire"""

    position: str
    min_overall: int
    priority: int
    stat_preference: Optional[StatNeed] = None

    def describe(self) -> str:
        text = f"{self.position} {self.min_overall}+ OVR"
        if self.stat_preference:
            text += f" ({self.stat_preference.value})"
        return text


@dataclass(frozen=True)
class TeamTradeProfile:
    """
    A CPU team's trade posture for one round.

    Attributes:
        team: The team (roster read at profile time)
        needs: Needs analysis snapshot
        assets: Tradeable players scored by willingness, most willing first
        targets: Acquisition priorities, highest priority first
    """

    team: Team
    needs: TeamNeeds
    assets: Tuple[ScoredAsset, ...]
    targets: Tuple[AcquisitionTarget, ...]

    @property
    def team_id(self) -> str:
        return self.team.team_id

    @property
    def has_assets(self) -> bool:
        return bool(self.assets)


@dataclass(frozen=True)
class TradePackage:
    """
    A candidate CPU-to-CPU trade.

    a_sends go from team A to team B and b_sends the other way. Improvement
    deltas are relative roster strength changes after the swap.
    """

    team_a_id: str
    team_b_id: str
    a_sends: Tuple[Player, ...]
    b_sends: Tuple[Player, ...]
    a_value: float
    b_value: float
    a_improvement: float = 0.0
    b_improvement: float = 0.0
    analysis: Tuple[str, ...] = ()

    @property
    def value_ratio(self) -> float:
        """Value B sends / value A sends"""
        if self.a_value <= 0:
            return 0.0
        return self.b_value / self.a_value


@dataclass(frozen=True)
class TransactionPlayer:
    """Player snapshot stored on a transaction"""

    player_id: str
    name: str
    position: str
    overall: int

    @classmethod
    def from_player(cls, player: Player, rating_fn: RatingFunction = overall_rating) -> "TransactionPlayer":
        """Snapshot a player, recording the rating the trade was judged on"""
        return cls(
            player_id=player.player_id,
            name=player.name,
            position=player.position,
            overall=rating_fn(player),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.position}, {self.overall})"


class TransactionType(Enum):
    TRADE = "TRADE"


class TradeInitiator(Enum):
    CPU = "CPU"
    USER = "USER"


@dataclass(frozen=True)
class Transaction:
    """
    Immutable record of an executed trade.

    Recorded from team_id's perspective: ``acquired`` arrived from the
    partner, ``traded`` left for the partner.
    """

    date: date
    team_id: str
    team_name: str
    partner_team_id: str
    partner_team_name: str
    acquired: Tuple[TransactionPlayer, ...]
    traded: Tuple[TransactionPlayer, ...]
    analysis: Tuple[str, ...] = ()
    initiated_by: TradeInitiator = TradeInitiator.CPU
    transaction_type: TransactionType = TransactionType.TRADE
    transaction_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.team_id == self.partner_team_id:
            raise ValueError(f"Team {self.team_id} cannot trade with itself")
        if not self.acquired and not self.traded:
            raise ValueError("Transaction must move at least one player")

    @property
    def description(self) -> str:
        """e.g. "[CPU] Boston ↔ Denver" """
        return f"[{self.initiated_by.value}] {self.team_name} ↔ {self.partner_team_name}"

    @property
    def team_ids(self) -> Tuple[str, str]:
        return (self.team_id, self.partner_team_id)

    def involves(self, team_id: str) -> bool:
        return team_id in self.team_ids

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict for the transaction log"""
        return {
            'transaction_id': self.transaction_id,
            'transaction_type': self.transaction_type.value,
            'date': self.date.isoformat(),
            'team_id': self.team_id,
            'team_name': self.team_name,
            'partner_team_id': self.partner_team_id,
            'partner_team_name': self.partner_team_name,
            'initiated_by': self.initiated_by.value,
            'description': self.description,
            'acquired': [vars(p).copy() for p in self.acquired],
            'traded': [vars(p).copy() for p in self.traded],
            'analysis': list(self.analysis),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Rebuild a transaction from to_dict() output"""
        return cls(
            date=date.fromisoformat(data['date']),
            team_id=data['team_id'],
            team_name=data['team_name'],
            partner_team_id=data['partner_team_id'],
            partner_team_name=data['partner_team_name'],
            acquired=tuple(TransactionPlayer(**p) for p in data['acquired']),
            traded=tuple(TransactionPlayer(**p) for p in data['traded']),
            analysis=tuple(data.get('analysis', ())),
            initiated_by=TradeInitiator(data['initiated_by']),
            transaction_type=TransactionType(data.get('transaction_type', 'TRADE')),
            transaction_id=data['transaction_id'],
        )

    def get_summary(self) -> str:
        """
        Get human-readable transaction summary.

        Returns:
            Multi-line string with trade details
        """
        lines = [
            f"{self.date.isoformat()} {self.description}",
            f"  {self.team_name} acquire: {', '.join(str(p) for p in self.acquired) or 'nothing'}",
            f"  {self.partner_team_name} acquire: {', '.join(str(p) for p in self.traded) or 'nothing'}",
        ]
        lines.extend(f"  - {reason}" for reason in self.analysis)
        return "\n".join(lines)


@dataclass(frozen=True)
class CPUTradeRoundResult:
    """
    Outcome of one daily CPU trade round.

    The counter is always returned, whether or not a trade happened, so the
    caller can carry it into the next call on the same day.
    """

    teams: List[Team]
    transactions: Tuple[Transaction, ...]
    counter: DailyTradeCounter
    reason: str = ""

    @property
    def trade_occurred(self) -> bool:
        return bool(self.transactions)
