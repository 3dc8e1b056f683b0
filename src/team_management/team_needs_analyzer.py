"""
Team Needs Analyzer

Reads a roster to identify positional holes, statistical weaknesses,
competitive posture and cap situation. Used by the trade generators and the
CPU trade simulator to decide which players a team wants and which it can
spare.

Every call recomputes from the current roster; results are never cached
across days because rosters, records and payroll change daily.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from league.player import Player, Position
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from salary_cap.cap_calculator import CapCalculator
from transactions.transaction_constants import TeamNeedThresholds


class StatNeed(Enum):
    """Team-level statistical weaknesses."""
    DEFENSE = "DEF"
    REBOUNDING = "REB"
    THREE_POINT = "3PT"

    @property
    def rating_attribute(self) -> str:
        """Player attribute that addresses this need"""
        return _STAT_ATTRIBUTES[self]

    def rating_for(self, player: Player) -> int:
        return getattr(player, self.rating_attribute)


_STAT_ATTRIBUTES = {
    StatNeed.DEFENSE: "defense",
    StatNeed.REBOUNDING: "rebounding",
    StatNeed.THREE_POINT: "outside",
}


class CompetitivePosture(Enum):
    """
    Where a team sits in the standings race.

    A single posture field makes contender and seller mutually exclusive.
    """
    CONTENDER = "contender"
    NEUTRAL = "neutral"
    SELLER = "seller"


@dataclass(frozen=True)
class PositionDepth:
    """Best rating and head count at one position"""
    position: str
    best_overall: int
    count: int


@dataclass(frozen=True)
class TeamNeeds:
    """
    Snapshot of a team's needs.

    Attributes:
        team_id: Team analyzed
        weak_positions: Positions with a sub-par starter or thin depth
        strong_positions: Positions with a star-level starter
        stat_needs: Rotation-level statistical weaknesses
        posture: Contender, neutral or seller
        cap_space: Cap line minus payroll (negative when over the cap)
        is_tax_payer: Payroll above the tax line
        position_depth: Best rating and count per position
    """

    team_id: str
    weak_positions: Tuple[str, ...]
    strong_positions: Tuple[str, ...]
    stat_needs: Tuple[StatNeed, ...]
    posture: CompetitivePosture
    cap_space: float
    is_tax_payer: bool
    position_depth: Tuple[PositionDepth, ...] = ()

    @property
    def is_contender(self) -> bool:
        return self.posture == CompetitivePosture.CONTENDER

    @property
    def is_seller(self) -> bool:
        return self.posture == CompetitivePosture.SELLER

    def is_weak_at(self, position: str) -> bool:
        return position in self.weak_positions

    def depth_at(self, position: str) -> Optional[PositionDepth]:
        for depth in self.position_depth:
            if depth.position == position:
                return depth
        return None

    def get_summary(self) -> str:
        """Short human-readable summary"""
        weak = ", ".join(self.weak_positions) or "none"
        stats = ", ".join(need.value for need in self.stat_needs) or "none"
        return (
            f"{self.team_id}: {self.posture.value}, weak at {weak}, "
            f"stat needs {stats}, cap space {self.cap_space:.1f}M"
            f"{' (taxpayer)' if self.is_tax_payer else ''}"
        )


class TeamNeedsAnalyzer:
    """
    Analyzes a roster and returns a TeamNeeds snapshot.

    Evaluates:
    - Starter quality and depth at each of the five positions
    - Rotation (top 8) defense, rebounding and outside shooting
    - Contender / seller posture from star power and record
    - Cap space and tax status
    """

    def __init__(
        self,
        rating_fn: RatingFunction = overall_rating,
        cap_calculator: Optional[CapCalculator] = None,
        weak_position_ovr: int = TeamNeedThresholds.WEAK_POSITION_OVR,
        min_position_depth: int = TeamNeedThresholds.MIN_POSITION_DEPTH,
        strong_position_ovr: int = TeamNeedThresholds.STRONG_POSITION_OVR,
        rotation_size: int = TeamNeedThresholds.ROTATION_SIZE,
        stat_need_threshold: float = TeamNeedThresholds.STAT_NEED_THRESHOLD
    ):
        """
        Initialize analyzer.

        Args:
            rating_fn: Overall rating source
            cap_calculator: Salary line calculator
            weak_position_ovr: Best rating below this marks a position weak
            min_position_depth: Fewer players than this marks a position weak
            strong_position_ovr: Best rating at/above this marks a position strong
            rotation_size: Players counted for stat averages
            stat_need_threshold: Rotation average below this is a stat need
        """
        self.rating_fn = rating_fn
        self.cap_calculator = cap_calculator or CapCalculator()
        self.weak_position_ovr = weak_position_ovr
        self.min_position_depth = min_position_depth
        self.strong_position_ovr = strong_position_ovr
        self.rotation_size = rotation_size
        self.stat_need_threshold = stat_need_threshold

    def analyze(self, team: Team) -> TeamNeeds:
        """
        Analyze a team's roster.

        Args:
            team: Team to analyze

        Returns:
            TeamNeeds snapshot (identical for identical rosters and records)
        """
        depth = self.get_position_depth(team.roster)

        weak_positions = []
        strong_positions = []
        for position_depth in depth:
            if (position_depth.best_overall < self.weak_position_ovr
                    or position_depth.count < self.min_position_depth):
                weak_positions.append(position_depth.position)
            elif position_depth.best_overall >= self.strong_position_ovr:
                strong_positions.append(position_depth.position)

        payroll = team.payroll

        return TeamNeeds(
            team_id=team.team_id,
            weak_positions=tuple(weak_positions),
            strong_positions=tuple(strong_positions),
            stat_needs=tuple(self._find_stat_needs(team.roster)),
            posture=self._classify_posture(team),
            cap_space=self.cap_calculator.calculate_cap_space(payroll),
            is_tax_payer=self.cap_calculator.is_tax_payer(payroll),
            position_depth=tuple(depth),
        )

    def get_position_depth(self, roster: List[Player]) -> List[PositionDepth]:
        """Best rating and count at each position (0 / 0 when nobody plays it)"""
        depth = []
        for position in Position.ALL:
            ratings = [self.rating_fn(p) for p in roster if p.plays_position(position)]
            depth.append(PositionDepth(
                position=position,
                best_overall=max(ratings) if ratings else 0,
                count=len(ratings),
            ))
        return depth

    def get_rotation(self, roster: List[Player]) -> List[Player]:
        """Top players by rating, best first"""
        return sorted(roster, key=self.rating_fn, reverse=True)[:self.rotation_size]

    def _find_stat_needs(self, roster: List[Player]) -> List[StatNeed]:
        rotation = self.get_rotation(roster)
        if not rotation:
            return []

        needs = []
        for need in StatNeed:
            average = sum(need.rating_for(p) for p in rotation) / len(rotation)
            if average < self.stat_need_threshold:
                needs.append(need)
        return needs

    def _classify_posture(self, team: Team) -> CompetitivePosture:
        core = sorted(
            (self.rating_fn(p) for p in team.roster), reverse=True
        )[:TeamNeedThresholds.CONTENDER_CORE_SIZE]
        # Missing core slots count as zero
        core_average = sum(core) / TeamNeedThresholds.CONTENDER_CORE_SIZE

        margin = TeamNeedThresholds.RECORD_MARGIN
        if core_average >= TeamNeedThresholds.CONTENDER_CORE_OVR or team.wins > team.losses + margin:
            return CompetitivePosture.CONTENDER
        if team.wins < team.losses - margin:
            return CompetitivePosture.SELLER
        return CompetitivePosture.NEUTRAL

    def analyze_league(self, teams: List[Team]) -> Dict[str, TeamNeeds]:
        """Analyze every team; keyed by team_id"""
        return {team.team_id: self.analyze(team) for team in teams}
