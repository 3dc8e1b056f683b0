"""
Player rating utility.

The trade engine treats overall rating as an opaque input. Every engine
component accepts a ``rating_fn`` so a different rating model (for example
one that blends in recent form) can be plugged in without touching trade
logic.
"""

from typing import Callable

from league.player import Player


RatingFunction = Callable[[Player], int]


def overall_rating(player: Player) -> int:
    """Default rating: the player's stored overall."""
    return player.overall
