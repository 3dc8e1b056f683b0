"""
Team model for the basketball league.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from league.player import Player


@dataclass
class Team:
    """
    A franchise and its current roster.

    Payroll is always derived from the roster, so it can never drift out of
    sync after a trade swaps players.
    """

    team_id: str
    name: str
    conference: str = ""
    wins: int = 0
    losses: int = 0
    roster: List[Player] = field(default_factory=list)

    def __post_init__(self):
        if not self.team_id:
            raise ValueError("team_id cannot be empty")
        if self.wins < 0 or self.losses < 0:
            raise ValueError(
                f"Record cannot be negative, got {self.wins}-{self.losses}"
            )

    @property
    def payroll(self) -> float:
        """Sum of roster salaries in millions"""
        return sum(player.salary for player in self.roster)

    @property
    def roster_size(self) -> int:
        return len(self.roster)

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.roster:
            if player.player_id == player_id:
                return player
        return None

    def has_players(self, players: Iterable[Player]) -> bool:
        """True if every given player is on this roster"""
        roster_ids = {player.player_id for player in self.roster}
        return all(player.player_id in roster_ids for player in players)

    def swap_players(self, outgoing: Iterable[Player], incoming: Iterable[Player]) -> None:
        """
        Replace outgoing players with incoming ones.

        Args:
            outgoing: Players leaving this roster
            incoming: Players joining this roster
        """
        outgoing_ids = {player.player_id for player in outgoing}
        self.roster = [p for p in self.roster if p.player_id not in outgoing_ids]
        self.roster.extend(incoming)

    def __str__(self) -> str:
        return f"{self.name} ({self.record})"
