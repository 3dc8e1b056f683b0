"""
Tests for CPUTradeSimulator

Covers the daily gate, team profiles, pair selection, package validation
and the full mutual-benefit trade between two mirror-image CPU teams.
"""

from datetime import date, timedelta
from unittest import mock
import random

import pytest

from transactions.cpu_trade_simulator import CPUTradeSimulator, derive_daily_seed
from transactions.models import TradeInitiator
from transactions.trade_counter import DailyTradeCounter
from conftest import fixed_rng, make_mirror_team, make_roster, make_team


DEADLINE_WEEK = date(2026, 1, 30)
EARLY_SEASON = date(2025, 11, 15)


def roster_ids(teams):
    return {team.team_id: sorted(p.player_id for p in team.roster) for team in teams}


# ===== FIXTURES =====

@pytest.fixture
def simulator():
    return CPUTradeSimulator(rng=fixed_rng(0.0))


class TestDailyGate:
    """Test when the simulator is allowed to trade at all"""

    def test_no_trades_after_deadline(self, trade_partners):
        """Outside the window nothing happens, whatever the random draw"""
        before = roster_ids(trade_partners)
        for seed in range(20):
            sim = CPUTradeSimulator(rng=random.Random(seed))
            result = sim.run_cpu_trade_round(trade_partners, None, date(2026, 2, 10))
            assert not result.trade_occurred
            assert "deadline passed" in result.reason
        assert roster_ids(trade_partners) == before

    def test_no_trades_before_season(self, simulator, trade_partners):
        result = simulator.run_cpu_trade_round(trade_partners, None, date(2025, 10, 1))
        assert not result.trade_occurred
        assert "opens" in result.reason

    def test_missed_draw(self, trade_partners):
        sim = CPUTradeSimulator(rng=fixed_rng(0.99))
        before = roster_ids(trade_partners)

        result = sim.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)

        assert not result.trade_occurred
        assert result.reason.startswith("No trade attempt today")
        assert roster_ids(trade_partners) == before

    def test_counter_returned_without_trade(self, trade_partners):
        sim = CPUTradeSimulator(rng=fixed_rng(0.99))
        result = sim.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)
        assert result.counter.day == DEADLINE_WEEK
        assert result.counter.trade_count == 0


class TestTeamProfiles:

    def test_minimum_roster_has_nothing_to_trade(self, simulator):
        team = make_team("MIN", make_roster("MIN", [("PG", 75)] * 13))
        profile = simulator.build_team_profile(team)
        assert profile.assets == ()
        assert profile.targets == ()
        assert not profile.has_assets

    def test_willingness_and_reasons(self, simulator, guard_rich_team):
        profile = simulator.build_team_profile(guard_rich_team)
        by_id = {asset.player.player_id: asset for asset in profile.assets}

        assert profile.assets[0].player.player_id == "AAA-3"
        assert by_id["AAA-3"].reasons == ("Surplus depth at PG (5 players)",)
        assert by_id["AAA-4"].score == 5
        assert by_id["AAA-7"].reasons == ("Spare depth at SG",)
        assert by_id["AAA-10"].reasons == ("Spare depth at SF", "End of bench")
        assert by_id["AAA-10"].score == 5
        assert by_id["AAA-14"].reasons == ("End of bench",)
        assert "AAA-0" not in by_id, "The best point guard is not surplus"

    def test_untouchable_and_injured_never_offered(self, simulator):
        from league.player import HealthStatus
        from conftest import make_player

        roster = make_roster("T", [("PG", 72)] * 12) + [
            make_player("T-star", position="PG", overall=90),
            make_player("T-hurt", position="PG", overall=60, health=HealthStatus.INJURED),
        ]
        profile = simulator.build_team_profile(make_team("T", roster))
        offered = {asset.player.player_id for asset in profile.assets}

        assert "T-star" not in offered
        assert "T-hurt" not in offered

    def test_bad_contract_is_tradeable(self, simulator):
        from conftest import make_player

        layout = [(pos, 78) for pos in ("PG", "SG", "SF", "PF", "C")] * 2 + [("PG", 77), ("SG", 77), ("SF", 77)]
        roster = make_roster("T", layout) + [make_player("T-bad", position="C", overall=70, salary=20.0)]
        profile = simulator.build_team_profile(make_team("T", roster))
        bad = next(a for a in profile.assets if a.player.player_id == "T-bad")
        assert "Bad contract (70 OVR, 20.0M)" in bad.reasons

    def test_acquisition_targets(self, simulator, guard_rich_team):
        profile = simulator.build_team_profile(guard_rich_team)
        assert [(t.position, t.min_overall, t.priority) for t in profile.targets] == [("C", 73, 5)]


class TestPairSelection:

    def test_compatibility_is_two_way(self, simulator, guard_rich_team, center_rich_team):
        a = simulator.build_team_profile(guard_rich_team)
        b = simulator.build_team_profile(center_rich_team)
        assert simulator.calculate_compatibility(a, b) == pytest.approx(60.0)
        assert simulator.calculate_compatibility(b, a) == pytest.approx(60.0)

    def test_one_way_interest_scores_zero(self, simulator, guard_rich_team):
        """Two guard-rich teams both want a center; neither has one to give"""
        a = simulator.build_team_profile(guard_rich_team)
        twin = simulator.build_team_profile(make_mirror_team("TWN", deep="PG", thin="C"))
        assert simulator.calculate_compatibility(a, twin) == 0.0

    def _three_profiles(self, sim):
        return [
            sim.build_team_profile(make_mirror_team(team_id, deep="PG", thin="C"))
            for team_id in ("A", "B", "C")
        ]

    def test_pairs_sorted_by_score(self):
        sim = CPUTradeSimulator()
        profiles = self._three_profiles(sim)
        scores = {("A", "B"): 10.0, ("A", "C"): 30.0, ("B", "C"): 0.0}

        with mock.patch.object(sim, "calculate_compatibility",
                               side_effect=lambda a, b: scores[(a.team_id, b.team_id)]):
            pairs = sim.select_candidate_pairs(profiles, fixed_rng(0.99))

        assert [(a.team_id, b.team_id, score) for a, b, score in pairs] == [
            ("A", "C", 30.0), ("A", "B", 10.0)
        ]

    def test_shuffle_swaps_neighbours(self):
        sim = CPUTradeSimulator()
        profiles = self._three_profiles(sim)
        scores = {("A", "B"): 10.0, ("A", "C"): 30.0, ("B", "C"): 0.0}

        with mock.patch.object(sim, "calculate_compatibility",
                               side_effect=lambda a, b: scores[(a.team_id, b.team_id)]):
            pairs = sim.select_candidate_pairs(profiles, fixed_rng(0.0))

        assert [(a.team_id, b.team_id) for a, b, _ in pairs] == [("A", "B"), ("A", "C")]


class TestMutualBenefitTrade:
    """A guard-rich team and a center-rich team swap surplus for need"""

    def test_trade_executes(self, simulator, trade_partners):
        result = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)

        assert len(result.transactions) == 1, result.reason
        transaction = result.transactions[0]
        assert transaction.team_id == "AAA"
        assert transaction.partner_team_id == "BBB"
        assert [p.player_id for p in transaction.acquired] == ["BBB-3"]
        assert [p.player_id for p in transaction.traded] == ["AAA-3"]
        assert transaction.initiated_by == TradeInitiator.CPU
        assert transaction.description == "[CPU] AAA Club ↔ BBB Club"
        assert "Surplus depth at PG (5 players)" in transaction.analysis
        assert "Surplus depth at C (5 players)" in transaction.analysis

    def test_rosters_swapped(self, simulator, guard_rich_team, center_rich_team):
        simulator.run_cpu_trade_round([guard_rich_team, center_rich_team], None, DEADLINE_WEEK)

        assert guard_rich_team.get_player("BBB-3") is not None
        assert guard_rich_team.get_player("AAA-3") is None
        assert center_rich_team.get_player("AAA-3") is not None
        assert guard_rich_team.roster_size == 15
        assert center_rich_team.roster_size == 15

    def test_counter_updated(self, simulator, trade_partners):
        result = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)
        assert result.counter.trade_count == 1
        assert result.counter.count_for("AAA") == 1
        assert result.counter.count_for("BBB") == 1

    def test_no_second_trade_same_day(self, simulator, trade_partners):
        first = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)
        after_first = roster_ids(trade_partners)

        second = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK, first.counter)

        assert not second.trade_occurred
        assert roster_ids(trade_partners) == after_first

    def test_deadline_week_allows_two_trades(self, simulator):
        """Four CPU teams near the deadline: two trades, each team at most once"""
        teams = [
            make_mirror_team("AAA", "PG", "C"), make_mirror_team("BBB", "C", "PG"),
            make_mirror_team("CCC", "PG", "C"), make_mirror_team("DDD", "C", "PG"),
        ]
        result = simulator.run_cpu_trade_round(teams, None, DEADLINE_WEEK)

        assert len(result.transactions) == 2, result.reason
        traded = [team_id for t in result.transactions for team_id in t.team_ids]
        assert sorted(traded) == ["AAA", "BBB", "CCC", "DDD"]
        assert result.counter.trade_count == 2

    def test_early_season_allows_one_trade(self, simulator):
        teams = [
            make_mirror_team("AAA", "PG", "C"), make_mirror_team("BBB", "C", "PG"),
            make_mirror_team("CCC", "PG", "C"), make_mirror_team("DDD", "C", "PG"),
        ]
        result = simulator.run_cpu_trade_round(teams, None, EARLY_SEASON)

        assert len(result.transactions) == 1, result.reason
        assert result.counter.trade_count == 1

    def test_counter_resets_next_day(self, simulator, trade_partners):
        stale = DailyTradeCounter(day=DEADLINE_WEEK - timedelta(days=1)).record(["AAA", "BBB"])
        result = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK, stale)
        assert result.trade_occurred
        assert result.counter.day == DEADLINE_WEEK

    def test_user_team_never_traded(self, simulator, trade_partners):
        before = roster_ids(trade_partners)
        result = simulator.run_cpu_trade_round(trade_partners, "AAA", DEADLINE_WEEK)

        assert not result.trade_occurred
        assert result.reason == "No convergent trade between CPU teams"
        assert roster_ids(trade_partners) == before

    def test_salary_rejection_leaves_rosters_alone(self, simulator, trade_partners):
        before = roster_ids(trade_partners)
        with mock.patch.object(simulator.salary_validator, "validate_trade",
                               return_value=(False, "blocked")):
            result = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)

        assert not result.trade_occurred
        assert roster_ids(trade_partners) == before

    def test_improvement_threshold(self, simulator, trade_partners):
        with mock.patch.object(simulator.strength_calculator, "calculate_improvement",
                               return_value=0.01):
            result = simulator.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)
        assert not result.trade_occurred

    def test_package_passes_value_band(self, simulator, guard_rich_team, center_rich_team):
        package = simulator.construct_trade_package(
            simulator.build_team_profile(guard_rich_team),
            simulator.build_team_profile(center_rich_team)
        )
        assert package is not None
        assert 0.95 <= package.value_ratio <= 1.10
        assert package.a_improvement >= 0.02
        assert package.b_improvement >= 0.02

    def test_transaction_records_injected_rating(self, simulator, guard_rich_team, center_rich_team):
        package = simulator.construct_trade_package(
            simulator.build_team_profile(guard_rich_team),
            simulator.build_team_profile(center_rich_team)
        )
        boosted = CPUTradeSimulator(rng=fixed_rng(0.0), rating_fn=lambda p: p.overall + 1)

        transaction = boosted.execute_trade(guard_rich_team, center_rich_team, package, DEADLINE_WEEK)

        assert [p.overall for p in transaction.acquired] == [p.overall + 1 for p in package.b_sends]
        assert [p.overall for p in transaction.traded] == [p.overall + 1 for p in package.a_sends]


class TestValidation:

    def test_value_band(self, simulator, guard_rich_team, center_rich_team):
        a_sends = [guard_rich_team.get_player("AAA-0")]
        b_sends = [center_rich_team.get_player("BBB-4")]
        is_valid, reason = simulator.validate_trade_package(
            guard_rich_team, center_rich_team, a_sends, b_sends,
            simulator.calculator.calculate_package_value(a_sends),
            simulator.calculator.calculate_package_value(b_sends)
        )
        assert not is_valid
        assert "value ratio" in reason

    def test_roster_minimum(self, simulator):
        small = make_team("S", make_roster("S", [("PG", 75)] * 13))
        big = make_team("L", make_roster("L", [("C", 75)] * 15))
        a_sends = small.roster[:2]
        b_sends = big.roster[:1]
        value = simulator.calculator.calculate_package_value

        is_valid, reason = simulator.validate_trade_package(
            small, big, a_sends, b_sends, value(a_sends) / 2, value(a_sends) / 2
        )
        assert not is_valid
        assert "below 13" in reason


class TestDeterminism:

    def test_daily_seed_is_stable(self):
        seed = derive_daily_seed(DEADLINE_WEEK, "save-1")
        assert seed == derive_daily_seed(date(2026, 1, 30), "save-1")
        assert seed != derive_daily_seed(EARLY_SEASON, "save-1")
        assert seed != derive_daily_seed(DEADLINE_WEEK, "save-2")
        assert 0 <= seed < 2 ** 64

    def test_default_simulator_is_unseeded(self):
        sim = CPUTradeSimulator()
        assert isinstance(sim.rng, random.Random)
        assert sim.seed_salt is None

    def test_rng_takes_precedence_over_salt(self, trade_partners):
        sim = CPUTradeSimulator(rng=fixed_rng(0.99), seed_salt="save-1")
        result = sim.run_cpu_trade_round(trade_partners, None, DEADLINE_WEEK)
        assert not result.trade_occurred
        assert result.reason.startswith("No trade attempt today")

    def test_same_day_replays_identically(self):
        """With a session salt the round is seeded from the salt and the date"""
        outcomes = []
        for _ in range(2):
            teams = [make_mirror_team("AAA", "PG", "C"), make_mirror_team("BBB", "C", "PG")]
            result = CPUTradeSimulator(seed_salt="save-1").run_cpu_trade_round(
                teams, None, DEADLINE_WEEK
            )
            outcomes.append((result.reason, roster_ids(teams)))
        assert outcomes[0] == outcomes[1]
