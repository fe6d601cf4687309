"""
Input structures for the deposit calculators.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from django.conf import settings
from django.db import models


class DepositProduct(models.TextChoices):
    FD = 'FD', 'Fixed Deposit'
    RD = 'RD', 'Recurring Deposit'
    MIS = 'MIS', 'Monthly Income Scheme'
    QIS = 'QIS', 'Quarterly Income Scheme'


def default_compounding_frequency() -> int:
    return getattr(settings, 'DEFAULT_COMPOUNDING_FREQUENCY', 4)


@dataclass
class DepositInput:
    """
    Parameters of a fixed or recurring deposit.

    Attributes:
        principal: Deposit amount (the monthly installment for an RD).
        annual_rate: Annual interest rate as a percentage.
        tenure_months: Term in months.
        compounding_frequency: Compounding periods per year; defaults to
            DEFAULT_COMPOUNDING_FREQUENCY (4, quarterly).
    """

    principal: Any
    annual_rate: Any
    tenure_months: Any
    compounding_frequency: Any = field(default_factory=default_compounding_frequency)


@dataclass
class PrematureInput:
    """
    Parameters of an early closure.

    ``completed_installments`` applies to RD only and
    ``interest_already_paid`` to MIS/QIS only.
    """

    product: str
    principal: Any
    booked_rate: Any
    card_rate_for_tenure: Any
    penalty: Any
    completed_months: Any
    completed_installments: Optional[Any] = None
    interest_already_paid: Optional[Any] = None
    compounding_frequency: Any = field(default_factory=default_compounding_frequency)
