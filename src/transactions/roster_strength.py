"""
Roster Strength Model

Estimates how good a roster is from its best starting five and top bench
players, and how much a trade would change that.
"""

from typing import List, Optional, Sequence

from league.player import Player, Position
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from team_management.team_needs_analyzer import TeamNeedsAnalyzer
from transactions.transaction_constants import CPUTradeParameters


class RosterStrengthCalculator:
    """
    Roster strength and trade improvement.

    Strength = best available player at each of the five positions (a
    player fills at most one slot) + BENCH_WEIGHT × the best three players
    left over.

    Improvement = (after - before) / before, plus a small bonus for each
    weak position the trade resolves.
    """

    def __init__(
        self,
        rating_fn: RatingFunction = overall_rating,
        needs_analyzer: Optional[TeamNeedsAnalyzer] = None
    ):
        self.rating_fn = rating_fn
        self.needs_analyzer = needs_analyzer or TeamNeedsAnalyzer(rating_fn)

    def calculate_strength(self, roster: Sequence[Player]) -> float:
        used_ids = set()
        strength = 0.0

        # Starting five: best remaining player at each position
        for position in Position.ALL:
            candidates = [
                p for p in roster
                if p.plays_position(position) and p.player_id not in used_ids
            ]
            if candidates:
                starter = max(candidates, key=self.rating_fn)
                strength += self.rating_fn(starter)
                used_ids.add(starter.player_id)

        # Bench: best players not starting
        bench = sorted(
            (p for p in roster if p.player_id not in used_ids),
            key=self.rating_fn,
            reverse=True
        )[:CPUTradeParameters.BENCH_COUNT]
        strength += sum(self.rating_fn(p) for p in bench) * CPUTradeParameters.BENCH_WEIGHT

        return strength

    @staticmethod
    def hypothetical_roster(
        team: Team,
        incoming: Sequence[Player],
        outgoing: Sequence[Player]
    ) -> List[Player]:
        """Roster after a trade, without touching the team"""
        outgoing_ids = {p.player_id for p in outgoing}
        return [p for p in team.roster if p.player_id not in outgoing_ids] + list(incoming)

    def calculate_improvement(
        self,
        team: Team,
        incoming: Sequence[Player],
        outgoing: Sequence[Player]
    ) -> float:
        """
        Relative strength change if the team made this trade.

        Args:
            team: Team before the trade
            incoming: Players the team would receive
            outgoing: Players the team would send

        Returns:
            Improvement ratio (0.02 = 2% stronger); 0.0 for an empty roster
        """
        before = self.calculate_strength(team.roster)
        if before == 0:
            return 0.0

        roster_after = self.hypothetical_roster(team, incoming, outgoing)
        after = self.calculate_strength(roster_after)
        improvement = (after - before) / before

        weak_before = self.needs_analyzer.analyze(team).weak_positions
        team_after = Team(
            team_id=team.team_id,
            name=team.name,
            conference=team.conference,
            wins=team.wins,
            losses=team.losses,
            roster=roster_after,
        )
        weak_after = self.needs_analyzer.analyze(team_after).weak_positions
        resolved = [pos for pos in weak_before if pos not in weak_after]
        improvement += len(resolved) * CPUTradeParameters.WEAK_POSITION_RESOLVED_BONUS

        return improvement
