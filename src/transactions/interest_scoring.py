"""
Need-Match Interest Scoring

Scores how well a player fits another team's needs. Shared by the trade
block offer generator (how interested is a team in the user's players) and
the counter offer generator (which of the user's players the target team
would ask for).
"""

from typing import List, Tuple

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from team_management.team_needs_analyzer import StatNeed, TeamNeeds
from transactions.transaction_constants import OfferParameters


STAT_NEED_LABELS = {
    StatNeed.DEFENSE: "adds defense",
    StatNeed.THREE_POINT: "adds outside shooting",
    StatNeed.REBOUNDING: "adds rebounding",
}


class NeedMatchScorer:
    """
    Scores a player against a team's needs.

    Scoring (per player):
    - +2 plays a position the team is weak at
    - +1 per stat need the player's matching rating exceeds 75
    - +2 team is selling and the player is 24 or younger
    - +2 team is contending and the player is 80+ OVR
    """

    def __init__(self, rating_fn: RatingFunction = overall_rating):
        self.rating_fn = rating_fn

    def score_player(self, player: Player, needs: TeamNeeds) -> Tuple[int, List[str]]:
        """
        Score one player's fit.

        Args:
            player: Candidate player
            needs: Needs of the team that would receive the player

        Returns:
            Tuple of (score, reasons)
        """
        score = 0
        reasons = []

        if any(player.plays_position(pos) for pos in needs.weak_positions):
            score += OfferParameters.WEAK_POSITION_INTEREST
            reasons.append(f"{player.name}: fills weak {player.position} spot")

        for need in needs.stat_needs:
            if need.rating_for(player) > OfferParameters.STAT_MATCH_RATING:
                score += OfferParameters.STAT_NEED_INTEREST
                reasons.append(f"{player.name}: {STAT_NEED_LABELS[need]}")

        if needs.is_seller and player.age <= OfferParameters.YOUNG_PROSPECT_AGE:
            score += OfferParameters.SELLER_YOUTH_INTEREST
            reasons.append(f"{player.name}: young core piece for a rebuild")

        if needs.is_contender and self.rating_fn(player) >= OfferParameters.CONTENDER_TARGET_OVR:
            score += OfferParameters.CONTENDER_STAR_INTEREST
            reasons.append(f"{player.name}: ready-now piece for a contender")

        return score, reasons

    def score_players(self, players: List[Player], needs: TeamNeeds) -> Tuple[int, List[str]]:
        """Total score and combined reasons for a group of players"""
        total = 0
        reasons = []
        for player in players:
            score, player_reasons = self.score_player(player, needs)
            total += score
            reasons.extend(player_reasons)
        return total, reasons


def unique_reasons(reasons: List[str], limit: int = OfferParameters.MAX_ANALYSIS_REASONS) -> List[str]:
    """First `limit` distinct reasons, order preserved"""
    seen = []
    for reason in reasons:
        if reason not in seen:
            seen.append(reason)
    return seen[:limit]
