"""
Trade Salary Validator

Enforces the league's salary-matching rules for trades:
- Teams under the cap may absorb salary up to their remaining cap space
- Teams over the cap take back at most 125% of outgoing salary + 0.25M
- Taxpaying teams take back at most 110%
- Teams above the first apron may not take back more than they send
- Teams above the second apron additionally may not aggregate salaries
  (send two or more players to take back exactly one)

Each side of a trade is judged independently; a trade is legal only when
both partners pass.
"""

from typing import Optional, Sequence, Tuple
import logging

from league.player import Player
from league.team import Team
from transactions.transaction_constants import SalaryThresholds

from .cap_calculator import CapCalculator, CapStanding


class TradeSalaryValidator:
    """
    Validates salary matching for one side (or both sides) of a trade.

    Example:
        >>> validator = TradeSalaryValidator()
        >>> validator.is_legal(team, incoming=[star], outgoing=[p1, p2])
        True
    """

    def __init__(
        self,
        calculator: Optional[CapCalculator] = None,
        over_cap_match_rate: float = SalaryThresholds.OVER_CAP_MATCH_RATE,
        over_cap_cushion: float = SalaryThresholds.OVER_CAP_CUSHION,
        tax_match_rate: float = SalaryThresholds.TAX_MATCH_RATE
    ):
        """
        Initialize validator.

        Args:
            calculator: Cap calculator holding the salary lines
            over_cap_match_rate: Take-back rate between cap and tax lines
            over_cap_cushion: Flat allowance (millions) between cap and tax lines
            tax_match_rate: Take-back rate between tax line and first apron
        """
        self.calculator = calculator or CapCalculator()
        self.over_cap_match_rate = over_cap_match_rate
        self.over_cap_cushion = over_cap_cushion
        self.tax_match_rate = tax_match_rate
        self.logger = logging.getLogger(__name__)

    # ========================================================================
    # SINGLE-SIDE VALIDATION
    # ========================================================================

    def validate(
        self,
        team: Team,
        incoming: Sequence[Player],
        outgoing: Sequence[Player]
    ) -> Tuple[bool, str]:
        """
        Check whether a team may make this exchange.

        Args:
            team: Team whose payroll determines the rule
            incoming: Players the team receives
            outgoing: Players the team sends

        Returns:
            Tuple of (is_legal, reason)
        """
        payroll = team.payroll
        incoming_salary = self.calculator.total_salary(incoming)
        outgoing_salary = self.calculator.total_salary(outgoing)
        standing = self.calculator.get_cap_standing(payroll)

        if standing == CapStanding.UNDER_CAP:
            allowed = outgoing_salary + self.calculator.calculate_cap_space(payroll)
            rule = "cap space"
        elif standing == CapStanding.OVER_CAP:
            allowed = outgoing_salary * self.over_cap_match_rate + self.over_cap_cushion
            rule = f"{self.over_cap_match_rate:.0%} + {self.over_cap_cushion}M"
        elif standing == CapStanding.TAX:
            allowed = outgoing_salary * self.tax_match_rate
            rule = f"taxpayer {self.tax_match_rate:.0%}"
        else:
            allowed = outgoing_salary
            rule = "apron 100%"

        if standing == CapStanding.SECOND_APRON and len(outgoing) > 1 and len(incoming) == 1:
            return (
                False,
                f"{team.name} is above the second apron and cannot aggregate "
                f"{len(outgoing)} salaries into one player"
            )

        if incoming_salary > allowed:
            return (
                False,
                f"{team.name} ({standing.value}, payroll {payroll:.1f}M) cannot take back "
                f"{incoming_salary:.1f}M for {outgoing_salary:.1f}M outgoing "
                f"(limit {allowed:.1f}M, {rule})"
            )

        return (
            True,
            f"{team.name} salary matching OK: {incoming_salary:.1f}M in, "
            f"{outgoing_salary:.1f}M out ({rule})"
        )

    def is_legal(
        self,
        team: Team,
        incoming: Sequence[Player],
        outgoing: Sequence[Player]
    ) -> bool:
        """Boolean form of validate()."""
        is_legal, _ = self.validate(team, incoming, outgoing)
        return is_legal

    # ========================================================================
    # TWO-SIDED VALIDATION
    # ========================================================================

    def validate_trade(
        self,
        team_a: Team,
        team_b: Team,
        a_sends: Sequence[Player],
        b_sends: Sequence[Player]
    ) -> Tuple[bool, str]:
        """
        Check both partners of a trade independently.

        Returns:
            Tuple of (is_legal, reason); the reason names the failing side
        """
        a_legal, a_reason = self.validate(team_a, incoming=b_sends, outgoing=a_sends)
        if not a_legal:
            return (False, a_reason)

        b_legal, b_reason = self.validate(team_b, incoming=a_sends, outgoing=b_sends)
        if not b_legal:
            return (False, b_reason)

        return (True, "Salary matching OK for both teams")

    def is_trade_legal(
        self,
        team_a: Team,
        team_b: Team,
        a_sends: Sequence[Player],
        b_sends: Sequence[Player]
    ) -> bool:
        is_legal, reason = self.validate_trade(team_a, team_b, a_sends, b_sends)
        if not is_legal:
            self.logger.debug(f"Salary check failed: {reason}")
        return is_legal
