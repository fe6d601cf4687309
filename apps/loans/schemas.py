"""
Input structures for the loan calculators.

Fields accept loosely-typed values (str, int, float or Decimal); engines
parse them with ``to_decimal`` so an invalid value behaves as zero.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.conf import settings
from django.db import models


class RepaymentMethod(models.TextChoices):
    REDUCING = 'reducing', 'Reducing balance'
    FLAT = 'flat', 'Flat rate'
    FIXED = 'fixed', 'Fixed rate (annual rest)'
    BULLET = 'bullet', 'Bullet repayment'


def default_repayment_method() -> str:
    return getattr(settings, 'DEFAULT_REPAYMENT_METHOD', RepaymentMethod.REDUCING)


@dataclass
class LoanInput:
    """
    Parameters of a single loan.

    Attributes:
        principal: Loan amount.
        annual_rate: Annual interest rate as a percentage (12 for 12%).
        tenure_months: Repayment period in months.
        method: One of RepaymentMethod; defaults to the configured
            DEFAULT_REPAYMENT_METHOD (reducing balance).
    """

    principal: Any
    annual_rate: Any
    tenure_months: Any
    method: str = field(default_factory=default_repayment_method)


# -------------------- Gold loan --------------------

class GoldLoanType(models.TextChoices):
    EMI = 'EMI', 'EMI'
    BULLET = 'BULLET', 'Bullet'
    OVERDRAFT = 'OVERDRAFT', 'Overdraft'


class ChargeType(models.TextChoices):
    PERCENTAGE = 'percentage', 'Percentage of loan'
    FIXED = 'fixed', 'Fixed amount'


@dataclass
class Ornament:
    description: str = ''
    gross_weight: Any = 0
    deductions: Any = 0
    purity: Any = 22  # karat
    is_net_entry: bool = False


@dataclass
class Charge:
    name: str
    value: Any
    type: str = ChargeType.FIXED


@dataclass
class GoldLoanInput:
    """
    Gold loan appraisal request.

    ``gold_rate`` is the price per gram of 22 karat gold. ``custom_ltv``
    and ``requested_amount`` are optional overrides; when left empty the
    scheme's LTV cap and the full eligible amount are used.
    """

    ornaments: List[Ornament]
    gold_rate: Any
    interest_rate: Any
    tenure_months: Any = 12
    loan_type: str = GoldLoanType.EMI
    custom_ltv: Optional[Any] = None
    credit_score: Optional[Any] = 750
    requested_amount: Optional[Any] = None
    charges: List[Charge] = field(default_factory=list)


# -------------------- Kisan Credit Card --------------------

class LandUnit(models.TextChoices):
    ACRES = 'acres', 'Acres'
    HECTARES = 'hectares', 'Hectares'


@dataclass
class Crop:
    name: str
    area: Any
    scale_of_finance: Any  # per unit of area


@dataclass
class TermLoan:
    year: int
    amount: Any
    description: str = ''


@dataclass
class KCCInput:
    crops: List[Crop]
    land_unit: str = LandUnit.ACRES
    post_harvest_percent: Any = 10
    maintenance_percent: Any = 20
    escalation_percent: Any = 10
    insurance_premium: Any = 0
    term_loans: List[TermLoan] = field(default_factory=list)
