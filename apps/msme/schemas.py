"""
Input structures for the MSME credit assessment calculators.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class MSMEInput:
    """Working-capital inputs; current liabilities exclude bank borrowing."""

    turnover: Optional[Any] = None
    current_assets: Optional[Any] = None
    current_liabilities: Optional[Any] = None


@dataclass
class FinancialStatement:
    """Figures from the borrower's financials used by the ratio battery."""

    pat: Any = 0
    depreciation: Any = 0
    interest: Any = 0
    obligation: Any = 0  # current portion of long-term debt plus interest
    current_assets: Any = 0
    current_liabilities: Any = 0
    inventory: Any = 0
    total_outside_liabilities: Any = 0
    tangible_net_worth: Any = 0
    fixed_cost: Any = 0
    variable_cost: Any = 0
    sales: Any = 0


@dataclass
class DrawingPowerInput:
    """Stock statement; margins are percentages (25 for 25%)."""

    stock: Any = 0
    creditors: Any = 0
    stock_margin: Any = 25
    debtors: Any = 0
    debtor_margin: Any = 40
