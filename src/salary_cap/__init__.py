"""
Basketball Salary Cap System

Payroll arithmetic and trade salary-matching rules for a soft-cap league
with a luxury tax line and two aprons.

Core Components:
- CapCalculator: Payroll totals, cap standing, cap space
- TradeSalaryValidator: Salary matching for each side of a trade
"""

from .cap_calculator import CapCalculator, CapStanding
from .cap_validator import TradeSalaryValidator

__version__ = "1.0.0"

__all__ = [
    "CapCalculator",
    "CapStanding",
    "TradeSalaryValidator",
]
