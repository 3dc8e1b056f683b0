"""
Unit tests for trade engine models
"""

from datetime import date

import pytest

from transactions.models import (
    OfferType,
    TradeInitiator,
    TradeOffer,
    Transaction,
    TransactionPlayer,
)
from conftest import make_player


def snapshot(player_id, name="Someone", position="PG", overall=80):
    return TransactionPlayer(player_id=player_id, name=name, position=position, overall=overall)


@pytest.fixture
def transaction():
    return Transaction(
        date=date(2026, 1, 30),
        team_id="AAA",
        team_name="AAA Club",
        partner_team_id="BBB",
        partner_team_name="BBB Club",
        acquired=(snapshot("BBB-3", "Big Man", "C", 76),),
        traded=(snapshot("AAA-3", "Point Guard", "PG", 76),),
        analysis=("Surplus depth at PG (5 players)",),
    )


class TestTransaction:

    def test_description_and_team_ids(self, transaction):
        assert transaction.description == "[CPU] AAA Club ↔ BBB Club"
        assert transaction.team_ids == ("AAA", "BBB")
        assert transaction.involves("BBB")
        assert not transaction.involves("CCC")

    def test_cannot_trade_with_itself(self):
        with pytest.raises(ValueError):
            Transaction(
                date=date(2026, 1, 30), team_id="AAA", team_name="A",
                partner_team_id="AAA", partner_team_name="A",
                acquired=(snapshot("x"),), traded=(),
            )

    def test_must_move_a_player(self):
        with pytest.raises(ValueError):
            Transaction(
                date=date(2026, 1, 30), team_id="AAA", team_name="A",
                partner_team_id="BBB", partner_team_name="B",
                acquired=(), traded=(),
            )

    def test_dict_round_trip(self, transaction):
        data = transaction.to_dict()
        assert data["date"] == "2026-01-30"
        assert data["initiated_by"] == "CPU"
        assert data["acquired"][0]["player_id"] == "BBB-3"
        assert Transaction.from_dict(data) == transaction

    def test_summary(self, transaction):
        summary = transaction.get_summary()
        assert summary.splitlines()[0] == "2026-01-30 [CPU] AAA Club ↔ BBB Club"
        assert "AAA Club acquire: Big Man (C, 76)" in summary
        assert "- Surplus depth at PG (5 players)" in summary

    def test_unique_ids(self, transaction):
        other = Transaction(
            date=transaction.date, team_id="AAA", team_name="A",
            partner_team_id="BBB", partner_team_name="B",
            acquired=transaction.acquired, traded=transaction.traded,
            initiated_by=TradeInitiator.USER,
        )
        assert other.transaction_id != transaction.transaction_id
        assert other.description.startswith("[USER]")


class TestTransactionPlayer:

    def test_snapshot_defaults_to_stored_overall(self):
        player = make_player("p", position="C", overall=76, name="Big Man")
        assert TransactionPlayer.from_player(player) == snapshot("p", "Big Man", "C", 76)

    def test_snapshot_uses_rating_function(self):
        player = make_player("p", position="C", overall=76, name="Big Man")
        assert TransactionPlayer.from_player(player, lambda p: 81).overall == 81


class TestTradeOffer:

    def test_empty_offer_rejected(self):
        with pytest.raises(ValueError):
            TradeOffer(team_id="T", team_name="T", players=(), diff_value=0.0, analysis=())

    def test_offer_properties(self):
        offer = TradeOffer(
            team_id="T",
            team_name="Trade Club",
            players=(make_player("a", salary=6.0), make_player("b", salary=4.5)),
            diff_value=100.0,
            analysis=("Interest: 3/10",),
            offer_type=OfferType.COUNTER_BALANCED,
            package_value=1100.0,
            target_value=1000.0,
        )
        assert offer.total_salary == pytest.approx(10.5)
        assert offer.value_ratio == pytest.approx(1.1)
        assert "TRADE OFFER (COUNTER_BALANCED) from Trade Club" in offer.get_summary()
