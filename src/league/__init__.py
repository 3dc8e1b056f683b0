"""
Basketball League Data Model

Players, teams and the rating utility consumed by the trade engine.
"""

from .player import HealthStatus, Player, Position
from .ratings import RatingFunction, overall_rating
from .team import Team

__all__ = [
    "HealthStatus",
    "Player",
    "Position",
    "RatingFunction",
    "Team",
    "overall_rating",
]
