"""
Player model for the basketball league.

A Player is an immutable snapshot of everything the trade engine reads:
identity, position eligibility, ratings, contract and health. Trades move
Player objects between rosters; they never modify them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List


class HealthStatus(Enum):
    """Availability of a player."""
    HEALTHY = "Healthy"
    DAY_TO_DAY = "Day-to-Day"
    INJURED = "Injured"


class Position:
    """Basketball position codes"""

    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"

    ALL = (PG, SG, SF, PF, C)

    @classmethod
    def normalize(cls, position: str) -> str:
        """
        Normalize a position string to upper-case codes joined by '/'.

        Converts: "pg-sg", "PG / SG", "pg,sg" -> "PG/SG"
        """
        if not position:
            return ""
        cleaned = position.upper().replace('-', '/').replace(',', '/')
        return "/".join(part.strip() for part in cleaned.split('/') if part.strip())


def _validate_rating(name: str, value: int) -> None:
    if not 0 <= value <= 99:
        raise ValueError(f"{name} must be between 0 and 99, got {value}")


@dataclass(frozen=True)
class Player:
    """
    A basketball player as seen by the trade engine.

    Attributes:
        player_id: Unique identifier
        name: Display name
        position: One or more codes, e.g. "PG" or "SG/SF"
        age: Age in years
        overall: Overall rating (0-99)
        potential: Potential rating (0-99)
        salary: Current salary in millions
        contract_years: Contract years remaining (including this season)
        health: Availability status
        defense: Composite defensive rating used for needs matching
        rebounding: Composite rebounding rating used for needs matching
        outside: Composite three-point rating used for needs matching
    """

    player_id: str
    name: str
    position: str
    age: int
    overall: int
    potential: int
    salary: float
    contract_years: int = 1
    health: HealthStatus = HealthStatus.HEALTHY
    defense: int = 50
    rebounding: int = 50
    outside: int = 50

    def __post_init__(self):
        """Validate ratings and contract data"""
        if not self.player_id:
            raise ValueError("player_id cannot be empty")

        normalized = Position.normalize(self.position)
        codes = normalized.split('/') if normalized else []
        if not codes or any(code not in Position.ALL for code in codes):
            raise ValueError(
                f"Invalid position '{self.position}'. Valid codes: {Position.ALL}"
            )
        object.__setattr__(self, 'position', normalized)

        for rating in ('overall', 'potential', 'defense', 'rebounding', 'outside'):
            _validate_rating(rating, getattr(self, rating))

        if self.age < 0:
            raise ValueError(f"age must be non-negative, got {self.age}")
        if self.salary < 0:
            raise ValueError(f"salary must be non-negative, got {self.salary}")
        if self.contract_years < 0:
            raise ValueError(
                f"contract_years must be non-negative, got {self.contract_years}"
            )

    @property
    def positions(self) -> List[str]:
        """Position codes this player is eligible at"""
        return self.position.split('/')

    @property
    def is_injured(self) -> bool:
        return self.health == HealthStatus.INJURED

    def plays_position(self, position: str) -> bool:
        """True if the position code appears in this player's position string."""
        return position in self.position

    def to_summary(self) -> Dict[str, Any]:
        """Compact representation stored on transactions"""
        return {
            'player_id': self.player_id,
            'name': self.name,
            'position': self.position,
            'ovr': self.overall,
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.position}, {self.overall} OVR)"
