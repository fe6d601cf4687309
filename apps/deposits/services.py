"""
Deposit service layer.

Fixed and recurring deposit maturity, periodic payouts of income schemes
(MIS/QIS) and premature withdrawal payouts shared by all four products.
"""

import logging
from decimal import Decimal

from apps.core.utils import (
    HUNDRED,
    ONE,
    ZERO,
    round_currency,
    to_decimal,
    whole_months,
)
from apps.deposits.schemas import (
    DepositInput,
    DepositProduct,
    PrematureInput,
    default_compounding_frequency,
)

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = Decimal('12')

PAYOUTS_PER_YEAR = {
    DepositProduct.MIS: Decimal('12'),
    DepositProduct.QIS: Decimal('4'),
}


def compound(principal: Decimal, annual_rate: Decimal, frequency: Decimal, months: Decimal) -> Decimal:
    """A = P × (1 + r/n)^(n×t) with r as a percentage and t = months / 12."""
    rate_per_period = annual_rate / HUNDRED / frequency
    periods = frequency * months / MONTHS_IN_YEAR
    return principal * (ONE + rate_per_period) ** periods


def resolve_frequency(value) -> Decimal:
    """Compounding periods per year; non-positive values use the configured default."""
    frequency = to_decimal(value)
    if frequency <= 0:
        frequency = Decimal(default_compounding_frequency())
    return frequency


def resolve_product(product) -> DepositProduct:
    try:
        return DepositProduct(str(product).strip().upper())
    except ValueError:
        logger.warning("Unknown deposit product %r, treating as FD", product)
        return DepositProduct.FD


class DepositService:
    """Service for deposit maturity and income-scheme payouts."""

    @classmethod
    def calculate_fd_maturity(cls, deposit_input: DepositInput) -> dict:
        """
        Calculate fixed deposit maturity.

        maturity = P × (1 + r/n)^(n×t), where n is the compounding frequency
        and t the tenure in years. The effective annual yield is
        ((1 + r/n)^n - 1) × 100.

        Args:
            deposit_input: Deposit parameters.

        Returns:
            Dict with maturity_value, interest_earned and eay (%), rounded
            to 2 places. All zero when principal or tenure is not positive.
        """
        principal = to_decimal(deposit_input.principal)
        annual_rate = max(ZERO, to_decimal(deposit_input.annual_rate))
        months = to_decimal(deposit_input.tenure_months)
        frequency = resolve_frequency(deposit_input.compounding_frequency)

        if principal <= 0 or months <= 0:
            return {'maturity_value': ZERO, 'interest_earned': ZERO, 'eay': ZERO}

        maturity_value = compound(principal, annual_rate, frequency, months)
        eay = ((ONE + annual_rate / HUNDRED / frequency) ** frequency - ONE) * HUNDRED

        logger.debug(
            "FD maturity: principal=%s, rate=%s%%, months=%s, n=%s, maturity=%s",
            principal,
            annual_rate,
            months,
            frequency,
            maturity_value,
        )

        return {
            'maturity_value': round_currency(maturity_value),
            'interest_earned': round_currency(maturity_value - principal),
            'eay': round_currency(eay),
        }

    @classmethod
    def calculate_rd_maturity(cls, deposit_input: DepositInput) -> dict:
        """
        Calculate recurring deposit maturity.

        Each monthly installment is treated as its own deposit compounding
        for the months left until maturity (the first for the full tenure,
        the last for one month); the maturity value is their sum.

        Args:
            deposit_input: ``principal`` is the monthly installment.

        Returns:
            Dict with maturity_value and interest_earned.
        """
        installment = to_decimal(deposit_input.principal)
        annual_rate = max(ZERO, to_decimal(deposit_input.annual_rate))
        months = whole_months(deposit_input.tenure_months)
        frequency = resolve_frequency(deposit_input.compounding_frequency)

        if installment <= 0 or months <= 0:
            return {'maturity_value': ZERO, 'interest_earned': ZERO}

        maturity_value = sum(
            (
                compound(installment, annual_rate, frequency, Decimal(months - month + 1))
                for month in range(1, months + 1)
            ),
            ZERO,
        )
        interest_earned = maturity_value - installment * months

        logger.debug(
            "RD maturity: installment=%s, rate=%s%%, months=%d, maturity=%s",
            installment,
            annual_rate,
            months,
            maturity_value,
        )

        return {
            'maturity_value': round_currency(maturity_value),
            'interest_earned': round_currency(interest_earned),
        }

    @staticmethod
    def calculate_periodic_payout(product, principal, annual_rate) -> dict:
        """
        Interest paid out each period by an income scheme.

        MIS pays monthly (P × R / 100 / 12), QIS quarterly (P × R / 100 / 4).
        Cumulative products (FD, RD) pay nothing out and yield zeros.
        """
        product = resolve_product(product)
        principal = to_decimal(principal)
        annual_rate = max(ZERO, to_decimal(annual_rate))
        periods = PAYOUTS_PER_YEAR.get(product)

        if periods is None or principal <= 0:
            return {
                'product': product,
                'periods_per_year': 0,
                'periodic_payout': ZERO,
                'annual_payout': ZERO,
            }

        annual_payout = principal * annual_rate / HUNDRED
        return {
            'product': product,
            'periods_per_year': int(periods),
            'periodic_payout': round_currency(annual_payout / periods),
            'annual_payout': round_currency(annual_payout),
        }


class PrematureWithdrawalService:
    """
    Service for early closure of deposits.

    The deposit is re-rated at the lower of the booked rate and the card
    rate for the period actually run, less the penalty.
    """

    @classmethod
    def calculate_payout(cls, premature_input: PrematureInput) -> dict:
        """
        Calculate the amount paid out on premature withdrawal.

        RD: each completed installment is compounded at the effective rate
        for the months it actually stayed in the account; the payout is the
        whole reconstructed value.

        FD/MIS/QIS: the principal is compounded for the completed months.
        For MIS and QIS, periodic interest already paid beyond what was
        earned at the effective rate is recovered from the principal.

        Args:
            premature_input: Product, amounts, rates and elapsed period.

        Returns:
            Dict with effective_rate, interest_earned, interest_recovery,
            net_payout and maturity_before_recovery, rounded to 2 places.
        """
        product = resolve_product(premature_input.product)
        principal = to_decimal(premature_input.principal)
        booked_rate = to_decimal(premature_input.booked_rate)
        card_rate = to_decimal(premature_input.card_rate_for_tenure)
        penalty = to_decimal(premature_input.penalty)
        completed_months = max(ZERO, to_decimal(premature_input.completed_months))
        frequency = resolve_frequency(premature_input.compounding_frequency)

        effective_rate = max(ZERO, min(booked_rate, card_rate) - penalty)

        interest_recovery = ZERO

        if product == DepositProduct.RD:
            installments = max(0, whole_months(premature_input.completed_installments))
            maturity_before_recovery = ZERO
            for i in range(installments):
                months_in_account = completed_months - i
                if months_in_account > 0:
                    maturity_before_recovery += compound(
                        principal, effective_rate, frequency, months_in_account
                    )
                else:
                    maturity_before_recovery += principal
            interest_earned = maturity_before_recovery - principal * installments
            net_payout = maturity_before_recovery

        else:
            maturity_before_recovery = compound(
                principal, effective_rate, frequency, completed_months
            )
            interest_earned = maturity_before_recovery - principal

            if product in (DepositProduct.MIS, DepositProduct.QIS):
                interest_paid = to_decimal(premature_input.interest_already_paid)
                if interest_paid > interest_earned:
                    interest_recovery = interest_paid - interest_earned

            net_payout = principal - interest_recovery

        logger.debug(
            "Premature payout: product=%s, effective_rate=%s%%, months=%s, net=%s",
            product,
            effective_rate,
            completed_months,
            net_payout,
        )

        return {
            'effective_rate': round_currency(effective_rate),
            'interest_earned': round_currency(interest_earned),
            'interest_recovery': round_currency(interest_recovery),
            'net_payout': round_currency(net_payout),
            'maturity_before_recovery': round_currency(maturity_before_recovery),
        }
