"""
CPU Trade Simulator

Runs one day of autonomous trading between CPU-controlled teams.

Pipeline per simulated day:
    gate → profile → compatibility → select → construct → validate → execute

1. Gate: trades only happen inside the trade window, and only when a random
   draw beats a chance that rises toward the deadline.
2. Profile: each CPU team lists the players it is willing to move and the
   kinds of players it wants.
3. Compatibility: pairs of teams are scored on how well each side's
   tradeable players fit the other's wants; both directions must be positive.
4. Select: best pairs first, with a light random shuffle.
5. Construct: pick players for each side and converge the values.
6. Validate: value band, salary matching, roster size and improvement for
   both teams.
7. Execute: swap rosters, record the transaction, and look for another
   trade among teams that have not traded today.

Rosters are only touched in step 7; a rejected candidate never mutates
anything.
"""

from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple
import hashlib
import logging
import random

from config.simulation_settings import SimulationSettings
from league.player import Player, Position
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from salary_cap.cap_validator import TradeSalaryValidator
from team_management.team_needs_analyzer import StatNeed, TeamNeedsAnalyzer
from transactions.models import (
    AcquisitionTarget,
    CPUTradeRoundResult,
    ScoredAsset,
    TeamTradeProfile,
    TradeInitiator,
    TradePackage,
    Transaction,
    TransactionPlayer,
)
from transactions.roster_strength import RosterStrengthCalculator
from transactions.trade_counter import DailyTradeCounter
from transactions.trade_value_calculator import TradeValueCalculator
from transactions.transaction_constants import CPUTradeParameters, PackageParameters
from transactions.transaction_timing_validator import TransactionTimingValidator


# Positions that address each statistical need
STAT_NEED_POSITIONS = {
    StatNeed.REBOUNDING: (Position.PF, Position.C),
    StatNeed.THREE_POINT: (Position.SG, Position.SF),
    StatNeed.DEFENSE: Position.ALL,
}

CandidatePair = Tuple[TeamTradeProfile, TeamTradeProfile, float]


def derive_daily_seed(current_date: date, salt: str) -> int:
    """
    Deterministic seed for a simulated day within one seeded session.

    Python's hash() is salted per process, so the seed is taken from SHA-256.
    """
    raw = f"{salt}|{current_date.isoformat()}"
    digest = hashlib.sha256(raw.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


class CPUTradeSimulator:
    """
    Autonomous daily trading between CPU teams.

    Randomness (the daily gate and the candidate shuffle) comes from an
    injected random.Random. With a seed_salt instead, each round seeds a
    generator from the salt and the date, so replaying a day of a saved
    session replays its trades. With neither, rounds draw from an unseeded
    generator.

    Example:
        >>> simulator = CPUTradeSimulator(rng=random.Random(7))
        >>> result = simulator.run_cpu_trade_round(teams, user_team_id, date(2026, 1, 30))
        >>> if result.trade_occurred:
        ...     for transaction in result.transactions:
        ...         print(transaction.get_summary())
    """

    def __init__(
        self,
        calculator: Optional[TradeValueCalculator] = None,
        needs_analyzer: Optional[TeamNeedsAnalyzer] = None,
        salary_validator: Optional[TradeSalaryValidator] = None,
        strength_calculator: Optional[RosterStrengthCalculator] = None,
        timing_validator: Optional[TransactionTimingValidator] = None,
        rng: Optional[random.Random] = None,
        rating_fn: RatingFunction = overall_rating,
        max_trades_per_team_per_day: int = CPUTradeParameters.MAX_TRADES_PER_TEAM_PER_DAY,
        seed_salt: Optional[str] = None
    ):
        """
        Initialize simulator.

        Args:
            calculator: Trade value calculator
            needs_analyzer: Team needs analyzer
            salary_validator: Salary matching rules
            strength_calculator: Roster strength / improvement model
            timing_validator: Trade window and daily chance
            rng: Random source (takes precedence over seed_salt)
            rating_fn: Overall rating source
            max_trades_per_team_per_day: Trades a single team may make per day
            seed_salt: Session salt for date-seeded rounds (e.g. a save id)
        """
        self.rating_fn = rating_fn
        self.calculator = calculator or TradeValueCalculator(rating_fn)
        self.needs_analyzer = needs_analyzer or TeamNeedsAnalyzer(rating_fn)
        self.salary_validator = salary_validator or TradeSalaryValidator()
        self.strength_calculator = strength_calculator or RosterStrengthCalculator(
            rating_fn, self.needs_analyzer
        )
        self.timing_validator = timing_validator or TransactionTimingValidator()
        if rng is None and seed_salt is None:
            rng = random.Random()
        self.rng = rng
        self.seed_salt = seed_salt
        self.max_trades_per_team_per_day = max_trades_per_team_per_day
        self.logger = logging.getLogger(__name__)

    # ========================================================================
    # MAIN ENTRY POINT
    # ========================================================================

    def run_cpu_trade_round(
        self,
        all_teams: List[Team],
        excluded_team_id: Optional[str],
        current_date: date,
        counter: Optional[DailyTradeCounter] = None
    ) -> CPUTradeRoundResult:
        """
        Run one day of CPU-to-CPU trading.

        Args:
            all_teams: Every team in the league (rosters are mutated in place
                for executed trades)
            excluded_team_id: The user's team, never traded by the CPU
            current_date: Current simulated date
            counter: Today's trade counter from an earlier call, if any

        Returns:
            CPUTradeRoundResult with the teams, the transactions executed
            (possibly none) and the updated counter
        """
        counter = DailyTradeCounter.for_date(current_date, previous=counter)

        # Step 1: Gate
        is_allowed, reason = self.timing_validator.is_trade_allowed(current_date)
        if not is_allowed:
            return self._no_trade(all_teams, counter, reason)

        if self.rng is not None:
            rng = self.rng
        else:
            rng = random.Random(derive_daily_seed(current_date, self.seed_salt))
        chance = self.timing_validator.calculate_trade_chance(current_date)
        draw = rng.random()
        if draw > chance:
            return self._no_trade(
                all_teams, counter, f"No trade attempt today (draw {draw:.3f} > chance {chance:.3f})"
            )

        trades_allowed = self.timing_validator.max_trades_for_day(current_date) - counter.trade_count
        if trades_allowed <= 0:
            return self._no_trade(all_teams, counter, "Daily CPU trade limit reached")

        cpu_teams = [t for t in all_teams if t.team_id != excluded_team_id]
        traded_today: Set[str] = {
            t.team_id for t in cpu_teams
            if not counter.has_capacity(t.team_id, self.max_trades_per_team_per_day)
        }
        transactions = []

        while len(transactions) < trades_allowed:
            # Step 2: Profile teams that can still trade today
            profiles = [
                self.build_team_profile(t) for t in cpu_teams
                if t.team_id not in traded_today
            ]

            # Steps 3-4: Compatibility and selection
            candidates = self.select_candidate_pairs(profiles, rng)
            if not candidates:
                break

            # Steps 5-6: Construct and validate, best candidate first
            executed = None
            for profile_a, profile_b, score in candidates:
                package = self.construct_trade_package(profile_a, profile_b)
                if package is None:
                    continue
                executed = (profile_a, profile_b, package)
                break

            if executed is None:
                break

            # Step 7: Execute
            profile_a, profile_b, package = executed
            transaction = self.execute_trade(profile_a.team, profile_b.team, package, current_date)
            transactions.append(transaction)
            counter = counter.record(transaction.team_ids)
            traded_today.update(transaction.team_ids)

        if not transactions:
            return self._no_trade(all_teams, counter, "No convergent trade between CPU teams")

        return CPUTradeRoundResult(
            teams=all_teams,
            transactions=tuple(transactions),
            counter=counter,
            reason=f"{len(transactions)} CPU trade(s) executed",
        )

    def _no_trade(self, teams: List[Team], counter: DailyTradeCounter, reason: str) -> CPUTradeRoundResult:
        self.logger.debug(f"CPU trade round on {counter.day.isoformat()}: {reason}")
        return CPUTradeRoundResult(teams=teams, transactions=(), counter=counter, reason=reason)

    # ========================================================================
    # PROFILES
    # ========================================================================

    def build_team_profile(self, team: Team) -> TeamTradeProfile:
        """
        Build a team's tradeable assets and acquisition targets.

        Teams at or below the minimum roster size have neither.
        """
        needs = self.needs_analyzer.analyze(team)
        if len(team.roster) <= PackageParameters.MIN_ROSTER_SIZE:
            return TeamTradeProfile(team=team, needs=needs, assets=(), targets=())

        return TeamTradeProfile(
            team=team,
            needs=needs,
            assets=tuple(self._find_tradeable_assets(team)),
            targets=tuple(self._build_acquisition_targets(team, needs)),
        )

    def _depth_chart(self, roster: Sequence[Player]) -> Dict[str, List[Player]]:
        """Players at each position, best first"""
        return {
            position: sorted(
                (p for p in roster if p.plays_position(position)),
                key=self.rating_fn,
                reverse=True
            )
            for position in Position.ALL
        }

    def _find_tradeable_assets(self, team: Team) -> List[ScoredAsset]:
        """
        Players the team would move, scored by willingness.

        Willingness:
        - +5 bottom two at a position four or more deep
        - +3 last at a position three deep
        - +4 bad contract (under 72 OVR, over 12M)
        - +2 ranked 12th or lower on the roster
        Untouchable (88+ OVR) and injured players are never offered.
        """
        depth_chart = self._depth_chart(team.roster)
        overall_order = [
            p.player_id for p in sorted(team.roster, key=self.rating_fn, reverse=True)
        ]

        assets = []
        for player in team.roster:
            ovr = self.rating_fn(player)
            if ovr >= CPUTradeParameters.UNTOUCHABLE_OVR or player.is_injured:
                continue

            willingness = 0
            reasons = []

            for position in Position.ALL:
                if not player.plays_position(position):
                    continue
                depth = depth_chart[position]
                rank = [p.player_id for p in depth].index(player.player_id)

                if len(depth) >= CPUTradeParameters.DEEP_POSITION_THRESHOLD and rank >= len(depth) - 2:
                    willingness += CPUTradeParameters.DEEP_SURPLUS_WILLINGNESS
                    reasons.append(f"Surplus depth at {position} ({len(depth)} players)")
                elif len(depth) >= CPUTradeParameters.EXCESS_DEPTH_THRESHOLD and rank == len(depth) - 1:
                    willingness += CPUTradeParameters.THIN_SURPLUS_WILLINGNESS
                    reasons.append(f"Spare depth at {position}")

            if (ovr < CPUTradeParameters.LOW_VALUE_DUMP_OVR
                    and player.salary > CPUTradeParameters.BAD_CONTRACT_SALARY_FLOOR):
                willingness += CPUTradeParameters.BAD_CONTRACT_WILLINGNESS
                reasons.append(f"Bad contract ({ovr} OVR, {player.salary:.1f}M)")

            if overall_order.index(player.player_id) >= CPUTradeParameters.DEEP_BENCH_RANK:
                willingness += CPUTradeParameters.DEEP_BENCH_WILLINGNESS
                reasons.append("End of bench")

            if willingness > 0:
                assets.append(ScoredAsset(
                    player=player,
                    score=willingness,
                    trade_value=self.calculator.calculate_player_value(player),
                    reasons=tuple(reasons),
                ))

        assets.sort(key=lambda asset: asset.score, reverse=True)
        return assets

    def _build_acquisition_targets(self, team: Team, needs) -> List[AcquisitionTarget]:
        """
        Kinds of players the team wants, in priority order.

        - Weak positions: 73+ OVR, priority 5
        - Stat needs at the positions that supply them: 70+ OVR, priority 3
        - Thin but not weak positions: 68+ OVR, priority 2
        """
        targets = [
            AcquisitionTarget(
                position=position,
                min_overall=CPUTradeParameters.WEAK_POSITION_MIN_OVR,
                priority=CPUTradeParameters.WEAK_POSITION_PRIORITY,
            )
            for position in needs.weak_positions
        ]

        for need in needs.stat_needs:
            for position in STAT_NEED_POSITIONS[need]:
                already_wanted = any(
                    t.position == position and t.priority >= CPUTradeParameters.STAT_NEED_PRIORITY
                    for t in targets
                )
                if not already_wanted:
                    targets.append(AcquisitionTarget(
                        position=position,
                        min_overall=CPUTradeParameters.STAT_NEED_MIN_OVR,
                        priority=CPUTradeParameters.STAT_NEED_PRIORITY,
                        stat_preference=need,
                    ))

        for position in Position.ALL:
            depth = needs.depth_at(position)
            count = depth.count if depth else 0
            if not needs.is_weak_at(position) and count < 2:
                targets.append(AcquisitionTarget(
                    position=position,
                    min_overall=CPUTradeParameters.DEPTH_NEED_MIN_OVR,
                    priority=CPUTradeParameters.DEPTH_NEED_PRIORITY,
                ))

        return targets

    # ========================================================================
    # COMPATIBILITY AND SELECTION
    # ========================================================================

    def _matches(self, player: Player, target: AcquisitionTarget) -> bool:
        return player.plays_position(target.position) and self.rating_fn(player) >= target.min_overall

    def _fit_score(self, assets: Sequence[ScoredAsset], targets: Sequence[AcquisitionTarget]) -> float:
        score = 0.0
        for asset in assets:
            for target in targets:
                if not self._matches(asset.player, target):
                    continue
                score += target.priority * CPUTradeParameters.POSITION_NEED_BONUS
                if (target.stat_preference is not None
                        and target.stat_preference.rating_for(asset.player) >= CPUTradeParameters.STAT_PREFERENCE_RATING):
                    score += CPUTradeParameters.STAT_NEED_BONUS
        return score

    def calculate_compatibility(self, profile_a: TeamTradeProfile, profile_b: TeamTradeProfile) -> float:
        """
        Two-way fit between two teams.

        Returns:
            Sum of both directions, or 0 unless both directions are positive
        """
        a_to_b = self._fit_score(profile_a.assets, profile_b.targets)
        b_to_a = self._fit_score(profile_b.assets, profile_a.targets)
        if a_to_b <= 0 or b_to_a <= 0:
            return 0.0
        return a_to_b + b_to_a

    def select_candidate_pairs(
        self,
        profiles: Sequence[TeamTradeProfile],
        rng: random.Random
    ) -> List[CandidatePair]:
        """
        Compatible team pairs, best first, lightly shuffled.

        Keeps the top MAX_CANDIDATE_PAIRS, then walks from the bottom up
        swapping each pair with its neighbour above with probability 0.3.
        """
        pairs = []
        for i, profile_a in enumerate(profiles):
            if not profile_a.has_assets:
                continue
            for profile_b in profiles[i + 1:]:
                if not profile_b.has_assets:
                    continue
                score = self.calculate_compatibility(profile_a, profile_b)
                if score > 0:
                    pairs.append((profile_a, profile_b, score))

        pairs.sort(key=lambda pair: pair[2], reverse=True)
        candidates = pairs[:CPUTradeParameters.MAX_CANDIDATE_PAIRS]

        for i in range(len(candidates) - 1, 0, -1):
            if rng.random() < CPUTradeParameters.SHUFFLE_SWAP_PROBABILITY:
                candidates[i], candidates[i - 1] = candidates[i - 1], candidates[i]

        return candidates

    # ========================================================================
    # CONSTRUCTION AND VALIDATION
    # ========================================================================

    def select_players_for_needs(
        self,
        assets: Sequence[ScoredAsset],
        targets: Sequence[AcquisitionTarget]
    ) -> List[Player]:
        """Most willing assets that each fill a different target (max 3)"""
        selected = []
        used_targets = set()

        for asset in assets:
            if len(selected) >= CPUTradeParameters.MAX_PACKAGE_SIZE:
                break
            for index, target in enumerate(targets):
                if index in used_targets:
                    continue
                if self._matches(asset.player, target):
                    selected.append(asset.player)
                    used_targets.add(index)
                    break

        return selected

    def build_matching_package(
        self,
        assets: Sequence[ScoredAsset],
        targets: Sequence[AcquisitionTarget],
        target_value: float
    ) -> List[Player]:
        """
        Package worth 95%-110% of target_value, best effort.

        Starts from need-matched players, then adds assets (most willing
        first) when short, or drops the cheapest players when over, then
        falls back to a single need-matching asset in range.

        Returns:
            The package, or an empty list if nothing converges
        """
        low = target_value * CPUTradeParameters.MIN_VALUE_RATIO
        high = target_value * CPUTradeParameters.MAX_VALUE_RATIO
        package_value = self.calculator.calculate_package_value

        need_matched = self.select_players_for_needs(assets, targets)
        matched_value = package_value(need_matched)

        if low <= matched_value <= high:
            return need_matched

        if matched_value < low:
            package = list(need_matched)
            used_ids = {p.player_id for p in package}
            for asset in assets:
                if asset.player.player_id in used_ids:
                    continue
                if len(package) >= CPUTradeParameters.MAX_PACKAGE_SIZE:
                    break
                package.append(asset.player)
                value = package_value(package)
                if value >= low:
                    if value <= high:
                        return package
                    package.pop()
                    continue
                used_ids.add(asset.player.player_id)
            return []

        # Over the band: drop the cheapest pieces first
        package = self.calculator.rank_by_value(need_matched)
        while len(package) > 1:
            package.pop()
            value = package_value(package)
            if low <= value <= high:
                return package
            if value < low:
                break

        for asset in assets:
            single_value = self.calculator.calculate_player_value(asset.player)
            if low <= single_value <= high and any(self._matches(asset.player, t) for t in targets):
                return [asset.player]

        return []

    def construct_trade_package(
        self,
        profile_a: TeamTradeProfile,
        profile_b: TeamTradeProfile
    ) -> Optional[TradePackage]:
        """
        Build and validate a trade between two CPU teams.

        Returns:
            A TradePackage that passed every check, or None
        """
        team_a, team_b = profile_a.team, profile_b.team

        a_sends = self.select_players_for_needs(profile_a.assets, profile_b.targets)
        if not a_sends:
            return None
        a_value = self.calculator.calculate_package_value(a_sends)

        b_sends = self.build_matching_package(profile_b.assets, profile_a.targets, a_value)
        if not b_sends:
            self._reject(team_a, team_b, "no value-matched return package")
            return None
        b_value = self.calculator.calculate_package_value(b_sends)

        is_valid, reason = self.validate_trade_package(team_a, team_b, a_sends, b_sends, a_value, b_value)
        if not is_valid:
            self._reject(team_a, team_b, reason)
            return None

        a_improvement = self.strength_calculator.calculate_improvement(team_a, b_sends, a_sends)
        b_improvement = self.strength_calculator.calculate_improvement(team_b, a_sends, b_sends)
        threshold = CPUTradeParameters.IMPROVEMENT_THRESHOLD
        if a_improvement < threshold or b_improvement < threshold:
            self._reject(
                team_a, team_b,
                f"improvement below {threshold:.0%} ({a_improvement:+.3f} / {b_improvement:+.3f})"
            )
            return None

        return TradePackage(
            team_a_id=team_a.team_id,
            team_b_id=team_b.team_id,
            a_sends=tuple(a_sends),
            b_sends=tuple(b_sends),
            a_value=a_value,
            b_value=b_value,
            a_improvement=a_improvement,
            b_improvement=b_improvement,
            analysis=tuple(self._build_analysis(profile_a, profile_b, a_sends, b_sends)),
        )

    def validate_trade_package(
        self,
        team_a: Team,
        team_b: Team,
        a_sends: Sequence[Player],
        b_sends: Sequence[Player],
        a_value: float,
        b_value: float
    ) -> Tuple[bool, str]:
        """
        Value band, salary matching and roster size checks.

        Returns:
            Tuple of (is_valid, reason)
        """
        if a_value <= 0 or b_value <= 0:
            return (False, "empty side")

        for ratio in (b_value / a_value, a_value / b_value):
            if not CPUTradeParameters.MIN_VALUE_RATIO <= ratio <= CPUTradeParameters.MAX_VALUE_RATIO:
                return (False, f"value ratio {ratio:.3f} outside band")

        is_legal, reason = self.salary_validator.validate_trade(team_a, team_b, a_sends, b_sends)
        if not is_legal:
            return (False, reason)

        min_size = PackageParameters.MIN_ROSTER_SIZE
        if len(team_a.roster) - len(a_sends) + len(b_sends) < min_size:
            return (False, f"{team_a.name} would drop below {min_size} players")
        if len(team_b.roster) - len(b_sends) + len(a_sends) < min_size:
            return (False, f"{team_b.name} would drop below {min_size} players")

        return (True, "OK")

    def _build_analysis(
        self,
        profile_a: TeamTradeProfile,
        profile_b: TeamTradeProfile,
        a_sends: Sequence[Player],
        b_sends: Sequence[Player]
    ) -> List[str]:
        """First willingness reason for each player moved, de-duplicated"""
        analysis = []
        for profile, players in ((profile_a, a_sends), (profile_b, b_sends)):
            reasons_by_id = {asset.player.player_id: asset.reasons for asset in profile.assets}
            for player in players:
                reasons = reasons_by_id.get(player.player_id)
                if reasons and reasons[0] not in analysis:
                    analysis.append(reasons[0])
        return analysis

    def _reject(self, team_a: Team, team_b: Team, reason: str) -> None:
        level = logging.INFO if SimulationSettings.LOG_REJECTED_CANDIDATES else logging.DEBUG
        self.logger.log(level, f"Rejected {team_a.name} / {team_b.name}: {reason}")

    # ========================================================================
    # EXECUTION
    # ========================================================================

    def execute_trade(
        self,
        team_a: Team,
        team_b: Team,
        package: TradePackage,
        current_date: date
    ) -> Transaction:
        """
        Swap rosters and record the trade.

        Returns:
            Transaction from team A's perspective
        """
        team_a.swap_players(outgoing=package.a_sends, incoming=package.b_sends)
        team_b.swap_players(outgoing=package.b_sends, incoming=package.a_sends)

        transaction = Transaction(
            date=current_date,
            team_id=team_a.team_id,
            team_name=team_a.name,
            partner_team_id=team_b.team_id,
            partner_team_name=team_b.name,
            acquired=tuple(TransactionPlayer.from_player(p, self.rating_fn) for p in package.b_sends),
            traded=tuple(TransactionPlayer.from_player(p, self.rating_fn) for p in package.a_sends),
            analysis=package.analysis,
            initiated_by=TradeInitiator.CPU,
        )

        self.logger.info(
            f"{transaction.description}: {team_a.name} get "
            f"{', '.join(p.name for p in package.b_sends)}; {team_b.name} get "
            f"{', '.join(p.name for p in package.a_sends)} "
            f"(improvement {package.a_improvement:+.1%} / {package.b_improvement:+.1%})"
        )
        return transaction
