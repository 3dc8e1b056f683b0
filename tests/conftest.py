"""
Pytest configuration for test discovery and imports.

Provides fixtures for testing including:
- Player and team factories
- Mirrored CPU trade partners (deep at one position, thin at another)
- The trade block example league
"""

import sys
from pathlib import Path
from unittest import mock
import random

import pytest


# Determine paths
project_root = Path(__file__).parent.parent
src_path = project_root / "src"

if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


from league.player import HealthStatus, Player  # noqa: E402
from league.team import Team  # noqa: E402


# ============================================================================
# FACTORIES
# ============================================================================

def make_player(
    player_id,
    position="SF",
    overall=75,
    age=27,
    potential=None,
    salary=8.0,
    contract_years=2,
    health=HealthStatus.HEALTHY,
    defense=70,
    rebounding=70,
    outside=70,
    name=None
):
    """Build a player; potential defaults to overall (no upside)."""
    return Player(
        player_id=player_id,
        name=name or f"Player {player_id}",
        position=position,
        age=age,
        overall=overall,
        potential=overall if potential is None else potential,
        salary=salary,
        contract_years=contract_years,
        health=health,
        defense=defense,
        rebounding=rebounding,
        outside=outside,
    )


def make_team(team_id, roster=None, wins=0, losses=0, name=None):
    return Team(
        team_id=team_id,
        name=name or f"Team {team_id}",
        wins=wins,
        losses=losses,
        roster=list(roster or []),
    )


def make_roster(team_id, layout, **player_kwargs):
    """
    Build a roster from (position, overall) pairs.

    Player ids are "<team_id>-<index>".
    """
    return [
        make_player(f"{team_id}-{i}", position=position, overall=overall, **player_kwargs)
        for i, (position, overall) in enumerate(layout)
    ]


def team_with_payroll(team_id, payroll):
    """One-player team whose payroll is exactly `payroll`"""
    return make_team(team_id, [make_player(f"{team_id}-cap", salary=payroll)])


def fixed_rng(value=0.0):
    """random.Random double whose random() always returns value"""
    rng = mock.Mock(spec=random.Random)
    rng.random.return_value = value
    return rng


# ============================================================================
# CPU TRADE FIXTURES
# ============================================================================

# Deep at the first position (five players), a lone 65 OVR at the second
MIRROR_TEMPLATE = (
    ("{deep}", 82), ("{deep}", 79), ("{deep}", 77), ("{deep}", 76), ("{deep}", 75),
    ("SG", 80), ("SG", 74), ("SG", 72),
    ("SF", 80), ("SF", 74), ("SF", 72),
    ("PF", 80), ("PF", 74), ("PF", 72),
    ("{thin}", 65),
)


def make_mirror_team(team_id, deep, thin):
    layout = [(pos.format(deep=deep, thin=thin), ovr) for pos, ovr in MIRROR_TEMPLATE]
    return make_team(team_id, make_roster(team_id, layout), name=f"{team_id} Club")


@pytest.fixture
def guard_rich_team():
    """Five point guards, one weak center"""
    return make_mirror_team("AAA", deep="PG", thin="C")


@pytest.fixture
def center_rich_team():
    """Five centers, one weak point guard"""
    return make_mirror_team("BBB", deep="C", thin="PG")


@pytest.fixture
def trade_partners(guard_rich_team, center_rich_team):
    return [guard_rich_team, center_rich_team]


# ============================================================================
# TRADE BLOCK FIXTURES
# ============================================================================

@pytest.fixture
def franchise_center():
    """95 OVR 23-year-old on an expiring deal"""
    return make_player(
        "USR-star", position="C", overall=95, age=23, potential=95,
        salary=10.0, contract_years=1, name="Franchise Center"
    )


@pytest.fixture
def user_team(franchise_center):
    """Under the cap: 10M star + 12 x 7M"""
    fillers = make_roster(
        "USR",
        [("PG", 76), ("PG", 72), ("SG", 76), ("SG", 72), ("SF", 76), ("SF", 72),
         ("PF", 76), ("PF", 72), ("C", 74), ("SG", 70), ("SF", 70), ("PF", 70)],
        salary=7.0
    )
    return make_team("USR", [franchise_center] + fillers, wins=20, losses=20, name="User Club")


@pytest.fixture
def rebuilding_team():
    """Seller with three young high-upside players and a weak center spot"""
    young = [
        make_player("SEL-y1", position="PG", overall=86, age=21, potential=99,
                    salary=9.0, contract_years=3, name="Young Guard"),
        make_player("SEL-y2", position="SG", overall=84, age=20, potential=99,
                    salary=8.0, contract_years=3, name="Young Wing"),
        make_player("SEL-y3", position="SF", overall=84, age=20, potential=99,
                    salary=8.0, contract_years=3, name="Young Forward"),
        make_player("SEL-c1", position="C", overall=73, age=29, salary=5.0, name="Backup Center"),
    ]
    fillers = make_roster(
        "SEL",
        [("PG", 72), ("SG", 72), ("SF", 72), ("PF", 74), ("PF", 72),
         ("PG", 70), ("SG", 70), ("SF", 70), ("PF", 70)],
        age=29, salary=5.0
    )
    return make_team("SEL", young + fillers, wins=8, losses=30, name="Rebuilding Club")


@pytest.fixture
def contending_team():
    roster = make_roster(
        "CON",
        [("PG", 88), ("SG", 86), ("SF", 85), ("PF", 80), ("C", 80),
         ("PG", 75), ("SG", 75), ("SF", 75), ("PF", 75), ("C", 75),
         ("SG", 70), ("SF", 70), ("PF", 70)],
        salary=12.0
    )
    return make_team("CON", roster, wins=30, losses=8, name="Contending Club")
