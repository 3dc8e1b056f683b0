"""
Tests for TradeExecutor

Covers the trade window, the daily action limit, selection size and the
checks made before a user trade is executed.
"""

from datetime import date, timedelta
from unittest.mock import Mock

import pytest

from transactions.models import TradeInitiator
from transactions.trade_exceptions import (
    InvalidTradeError,
    RosterSizeError,
    SalaryMatchingError,
    TooManyPlayersSelectedError,
    TradeException,
    TradeLimitReachedError,
    TradeWindowClosedError,
)
from transactions.trade_executor import TradeExecutor
from conftest import make_player, team_with_payroll


TRADE_DAY = date(2025, 12, 1)


# ===== FIXTURES =====

@pytest.fixture
def offer_generator():
    generator = Mock()
    generator.generate_offers.return_value = []
    return generator


@pytest.fixture
def counter_generator():
    generator = Mock()
    generator.generate_counters.return_value = []
    return generator


@pytest.fixture
def desk(offer_generator, counter_generator):
    return TradeExecutor(
        user_team_id="USR",
        offer_generator=offer_generator,
        counter_generator=counter_generator,
    )


class TestTradeWindow:

    def test_offers_closed_after_deadline(self, desk, franchise_center, user_team):
        with pytest.raises(TradeWindowClosedError) as exc_info:
            desk.request_offers([franchise_center], user_team, [user_team], date(2026, 3, 1))

        assert exc_info.value.error_code == "TRADE_WINDOW_001"
        assert exc_info.value.operation == "request_offers"

    def test_execute_closed_before_season(self, desk, user_team, rebuilding_team):
        with pytest.raises(TradeWindowClosedError):
            desk.execute_trade(
                user_team, rebuilding_team,
                [user_team.get_player("USR-0")], [rebuilding_team.get_player("SEL-0")],
                date(2025, 9, 1)
            )

    def test_closed_window_uses_no_action(self, desk, franchise_center, user_team):
        with pytest.raises(TradeWindowClosedError):
            desk.request_offers([franchise_center], user_team, [user_team], date(2026, 3, 1))
        assert desk.actions_used(date(2026, 3, 1)) == 0


class TestActionLimit:

    def test_five_actions_per_day(self, desk, offer_generator, franchise_center, user_team):
        for _ in range(5):
            desk.request_offers([franchise_center], user_team, [user_team], TRADE_DAY)

        with pytest.raises(TradeLimitReachedError) as exc_info:
            desk.request_offers([franchise_center], user_team, [user_team], TRADE_DAY)

        assert offer_generator.generate_offers.call_count == 5
        assert exc_info.value.error_code == "TRADE_LIMIT_001"
        assert desk.remaining_actions(TRADE_DAY) == 0

    def test_counters_share_the_daily_limit(self, desk, counter_generator, franchise_center,
                                       user_team, rebuilding_team):
        requested = [rebuilding_team.get_player("SEL-y1")]
        for _ in range(3):
            desk.request_offers([franchise_center], user_team, [user_team], TRADE_DAY)
        for _ in range(2):
            desk.request_counters(requested, rebuilding_team, user_team, TRADE_DAY)

        with pytest.raises(TradeLimitReachedError):
            desk.request_counters(requested, rebuilding_team, user_team, TRADE_DAY)
        assert counter_generator.generate_counters.call_count == 2

    def test_limit_resets_next_day(self, desk, franchise_center, user_team):
        for _ in range(5):
            desk.request_offers([franchise_center], user_team, [user_team], TRADE_DAY)

        next_day = TRADE_DAY + timedelta(days=1)
        assert desk.remaining_actions(next_day) == 5
        desk.request_offers([franchise_center], user_team, [user_team], next_day)
        assert desk.actions_used(next_day) == 1

    def test_empty_request_is_free(self, desk, offer_generator, user_team):
        assert desk.request_offers([], user_team, [user_team], TRADE_DAY) == []
        assert desk.actions_used(TRADE_DAY) == 0
        offer_generator.generate_offers.assert_not_called()

    def test_execution_is_free(self, desk, user_team, rebuilding_team):
        desk.execute_trade(
            user_team, rebuilding_team,
            [user_team.get_player("USR-0")], [rebuilding_team.get_player("SEL-0")],
            TRADE_DAY
        )
        assert desk.actions_used(TRADE_DAY) == 0


class TestSelection:

    def test_too_many_players(self, desk, user_team):
        with pytest.raises(TooManyPlayersSelectedError) as exc_info:
            desk.request_offers(user_team.roster[:6], user_team, [user_team], TRADE_DAY)

        assert exc_info.value.error_code == "TRADE_SELECTION_001"
        assert desk.actions_used(TRADE_DAY) == 0

    def test_five_players_allowed(self, desk, offer_generator, user_team):
        desk.request_offers(user_team.roster[:5], user_team, [user_team], TRADE_DAY)
        offer_generator.generate_offers.assert_called_once()


class TestExecution:

    def test_successful_trade(self, desk, user_team, rebuilding_team):
        outgoing = [user_team.get_player("USR-0")]
        incoming = [rebuilding_team.get_player("SEL-0")]

        transaction = desk.execute_trade(
            user_team, rebuilding_team, outgoing, incoming, TRADE_DAY, analysis=["Interest: 4/10"]
        )

        assert user_team.get_player("SEL-0") is not None
        assert rebuilding_team.get_player("USR-0") is not None
        assert user_team.roster_size == 13
        assert transaction.initiated_by == TradeInitiator.USER
        assert transaction.description == "[USER] User Club ↔ Rebuilding Club"
        assert transaction.analysis == ("Interest: 4/10",)

    def test_snapshot_uses_desk_rating(self, offer_generator, counter_generator, user_team, rebuilding_team):
        desk = TradeExecutor(
            user_team_id="USR",
            offer_generator=offer_generator,
            counter_generator=counter_generator,
            rating_fn=lambda p: p.overall - 5,
        )
        outgoing = [user_team.get_player("USR-0")]
        incoming = [rebuilding_team.get_player("SEL-0")]

        transaction = desk.execute_trade(user_team, rebuilding_team, outgoing, incoming, TRADE_DAY)

        assert transaction.acquired[0].overall == incoming[0].overall - 5
        assert transaction.traded[0].overall == outgoing[0].overall - 5

    def test_salary_mismatch(self, desk, user_team):
        """A second-apron team cannot absorb salary without sending any back"""
        rich = team_with_payroll("RICH", 195.0)
        before = list(user_team.roster)

        with pytest.raises(SalaryMatchingError) as exc_info:
            desk.execute_trade(user_team, rich, [user_team.get_player("USR-0")], [], TRADE_DAY)

        assert exc_info.value.error_code == "TRADE_SALARY_001"
        assert user_team.roster == before

    def test_roster_minimum(self, desk, user_team, rebuilding_team):
        outgoing = [user_team.get_player("USR-0"), user_team.get_player("USR-1")]
        incoming = [rebuilding_team.get_player("SEL-0")]

        with pytest.raises(RosterSizeError) as exc_info:
            desk.execute_trade(user_team, rebuilding_team, outgoing, incoming, TRADE_DAY)

        assert exc_info.value.error_code == "TRADE_ROSTER_001"
        assert user_team.roster_size == 13

    def test_player_not_on_roster(self, desk, user_team, rebuilding_team):
        ghost = make_player("ghost", salary=5.0)
        with pytest.raises(InvalidTradeError):
            desk.execute_trade(
                user_team, rebuilding_team, [ghost], [rebuilding_team.get_player("SEL-0")], TRADE_DAY
            )

    def test_only_user_team_may_execute(self, desk, user_team, rebuilding_team):
        with pytest.raises(InvalidTradeError):
            desk.execute_trade(
                rebuilding_team, user_team,
                [rebuilding_team.get_player("SEL-0")], [user_team.get_player("USR-0")], TRADE_DAY
            )

    def test_empty_trade(self, desk, user_team, rebuilding_team):
        with pytest.raises(InvalidTradeError):
            desk.execute_trade(user_team, rebuilding_team, [], [], TRADE_DAY)

    def test_errors_share_base_class(self, desk, user_team, rebuilding_team):
        with pytest.raises(TradeException) as exc_info:
            desk.execute_trade(user_team, rebuilding_team, [], [], TRADE_DAY)

        details = exc_info.value.to_dict()
        assert details["error_code"] == "TRADE_INVALID_001"
        assert details["operation"] == "execute_trade"
        assert details["trade_context"]["partner_team_id"] == "SEL"
