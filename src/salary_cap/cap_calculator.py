"""
Salary Cap Calculator

Core payroll arithmetic for the league's soft cap:
- Payroll totals for rosters and trade packages
- Cap standing (under cap, over cap, taxpayer, first apron, second apron)
- Cap space and taxpayer status

All amounts are in millions. Thresholds come from SalaryThresholds and can
be overridden per instance (e.g. for a future season's cap numbers).
"""

from enum import Enum
from typing import Iterable

from league.player import Player
from transactions.transaction_constants import SalaryThresholds


class CapStanding(Enum):
    """Payroll band; each band has its own salary-matching rule."""
    UNDER_CAP = "under_cap"
    OVER_CAP = "over_cap"
    TAX = "tax"
    FIRST_APRON = "first_apron"
    SECOND_APRON = "second_apron"


class CapCalculator:
    """
    Pure payroll calculations.

    Example:
        >>> calc = CapCalculator()
        >>> calc.get_cap_standing(175.0)
        <CapStanding.TAX: 'tax'>
    """

    def __init__(
        self,
        cap_line: float = SalaryThresholds.CAP_LINE,
        tax_line: float = SalaryThresholds.TAX_LINE,
        first_apron: float = SalaryThresholds.FIRST_APRON,
        second_apron: float = SalaryThresholds.SECOND_APRON
    ):
        if not cap_line <= tax_line <= first_apron <= second_apron:
            raise ValueError(
                "Salary lines must be ordered cap <= tax <= first apron <= second apron, "
                f"got {cap_line}, {tax_line}, {first_apron}, {second_apron}"
            )
        self.cap_line = cap_line
        self.tax_line = tax_line
        self.first_apron = first_apron
        self.second_apron = second_apron

    @staticmethod
    def total_salary(players: Iterable[Player]) -> float:
        """Sum of salaries for a roster or trade package"""
        return sum(player.salary for player in players)

    def get_cap_standing(self, payroll: float) -> CapStanding:
        """
        Classify a payroll into its band.

        Bands are checked from the top down, so a payroll exactly on a
        line belongs to the stricter band.
        """
        if payroll >= self.second_apron:
            return CapStanding.SECOND_APRON
        if payroll >= self.first_apron:
            return CapStanding.FIRST_APRON
        if payroll >= self.tax_line:
            return CapStanding.TAX
        if payroll >= self.cap_line:
            return CapStanding.OVER_CAP
        return CapStanding.UNDER_CAP

    def calculate_cap_space(self, payroll: float) -> float:
        """Room under the cap line; negative when over"""
        return self.cap_line - payroll

    def is_tax_payer(self, payroll: float) -> bool:
        return payroll > self.tax_line
