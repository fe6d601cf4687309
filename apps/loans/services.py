"""
Loan service layer.

Contains EMI computation for the four repayment methods, month-by-month
amortization schedules, the reverse solver (principal, tenure or rate from
a known EMI) and loan comparison / takeover analysis. All arithmetic is
done in Decimal; figures are rounded to currency precision on the way out.
"""

import logging
from decimal import Decimal

from django.conf import settings

from apps.core.exceptions import NegativeAmortizationError
from apps.core.utils import (
    HUNDRED,
    ONE,
    ZERO,
    round_currency,
    round_to,
    to_decimal,
    whole_months,
)
from apps.loans.schemas import LoanInput, RepaymentMethod, default_repayment_method

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = Decimal('12')
BISECTION_STEPS = 50


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual percentage rate into a monthly fraction."""
    return annual_rate / MONTHS_IN_YEAR / HUNDRED


class EMIService:
    """
    Service for EMI and loan totals.

    Monthly rate r = annual_rate / 12 / 100, n = tenure in months,
    P = principal.
    """

    @classmethod
    def calculate_totals(cls, loan_input: LoanInput) -> dict:
        """
        Calculate EMI and totals for a loan, rounded to currency precision.

        Principal <= 0 or tenure <= 0 yields all zeros rather than an error.

        Args:
            loan_input: The loan parameters.

        Returns:
            Dict with emi, monthly_interest, total_interest, total_payable
            and final_payment (Decimal, 2 places).

        Raises:
            NegativeAmortizationError: For a reducing-balance loan whose EMI
                does not exceed the first month's interest.
        """
        totals = cls.compute(loan_input)
        return {key: round_currency(value) for key, value in totals.items()}

    @classmethod
    def compute(cls, loan_input: LoanInput) -> dict:
        """Same as ``calculate_totals`` but without the final rounding."""
        principal = to_decimal(loan_input.principal)
        annual_rate = max(ZERO, to_decimal(loan_input.annual_rate))
        tenure = to_decimal(loan_input.tenure_months)
        method = cls.resolve_method(loan_input.method)

        if principal <= 0 or tenure <= 0:
            return cls._build_response()

        r = monthly_rate(annual_rate)

        if method == RepaymentMethod.FLAT:
            total_interest = principal * (annual_rate / HUNDRED) * (tenure / MONTHS_IN_YEAR)
            total_payable = principal + total_interest
            result = cls._build_response(
                emi=total_payable / tenure,
                total_interest=total_interest,
                total_payable=total_payable,
            )

        elif method == RepaymentMethod.FIXED:
            emi = cls.annual_rest_emi(principal, annual_rate, tenure)
            total_payable = emi * tenure
            result = cls._build_response(
                emi=emi,
                total_interest=total_payable - principal,
                total_payable=total_payable,
            )

        elif method == RepaymentMethod.BULLET:
            final_payment = principal * (ONE + r) ** tenure
            result = cls._build_response(
                monthly_interest=principal * r,
                total_interest=final_payment - principal,
                total_payable=final_payment,
                final_payment=final_payment,
            )

        else:
            emi = cls.annuity_emi(principal, r, tenure)
            cls.check_amortization(principal, r, emi)
            total_payable = emi * tenure
            result = cls._build_response(
                emi=emi,
                total_interest=total_payable - principal,
                total_payable=total_payable,
            )

        logger.debug(
            "Loan totals: principal=%s, rate=%s%%, tenure=%s, method=%s, emi=%s",
            principal,
            annual_rate,
            tenure,
            method,
            result['emi'],
        )
        return result

    @staticmethod
    def annuity_emi(principal: Decimal, rate: Decimal, periods: Decimal) -> Decimal:
        """
        Level installment for a loan compounding once per period.

        EMI = P × r × (1+r)^n / ((1+r)^n - 1), or P / n when r is zero.
        """
        if rate == 0:
            return principal / periods
        power_term = (ONE + rate) ** periods
        return principal * rate * power_term / (power_term - ONE)

    @staticmethod
    def annual_rest_emi(principal: Decimal, annual_rate: Decimal, tenure: Decimal) -> Decimal:
        """
        Monthly figure of an annual-rest installment.

        The annual installment P × R / (1 - (1+R)^-years) is divided by 12.
        """
        rate = annual_rate / HUNDRED
        if rate == 0:
            return principal / tenure
        years = tenure / MONTHS_IN_YEAR
        annual_emi = principal * rate / (ONE - (ONE + rate) ** (-years))
        return annual_emi / MONTHS_IN_YEAR

    @staticmethod
    def check_amortization(principal, rate, emi) -> None:
        """
        Reject an installment that cannot reduce the balance.

        Raises:
            NegativeAmortizationError: If rate > 0 and emi <= principal × rate.
        """
        principal = to_decimal(principal)
        rate = to_decimal(rate)
        if not isinstance(emi, Decimal):
            emi = to_decimal(emi)

        first_interest = principal * rate
        if rate > 0 and emi <= first_interest:
            logger.info(
                "Negative amortization: emi=%s <= first month interest=%s",
                emi,
                first_interest,
            )
            raise NegativeAmortizationError()

    @staticmethod
    def resolve_method(method) -> RepaymentMethod:
        """Map a raw method value onto RepaymentMethod, falling back to reducing."""
        if not method:
            method = default_repayment_method()
        try:
            return RepaymentMethod(str(method).strip().lower())
        except ValueError:
            logger.warning("Unknown repayment method %r, using reducing balance", method)
            return RepaymentMethod.REDUCING

    @staticmethod
    def _build_response(
        emi: Decimal = ZERO,
        monthly_interest: Decimal = ZERO,
        total_interest: Decimal = ZERO,
        total_payable: Decimal = ZERO,
        final_payment: Decimal = ZERO,
    ) -> dict:
        """Build a standardized loan totals dict."""
        return {
            'emi': emi,
            'monthly_interest': monthly_interest,
            'total_interest': total_interest,
            'total_payable': total_payable,
            'final_payment': final_payment,
        }


class AmortizationService:
    """Service for month-by-month repayment schedules."""

    @classmethod
    def generate_schedule(cls, loan_input: LoanInput) -> list:
        """
        Simulate a loan month by month.

        Every figure is rounded to currency precision as it is produced.
        Rounding drift is not corrected along the way; the final month
        settles whatever balance remains so the schedule always closes at
        exactly zero.

        Args:
            loan_input: The loan parameters.

        Returns:
            List of dicts with month, emi, principal, interest and balance.
            Empty when principal <= 0 or tenure is under one month.
        """
        principal = to_decimal(loan_input.principal)
        tenure = whole_months(loan_input.tenure_months)

        if principal <= 0 or tenure <= 0:
            return []

        method = EMIService.resolve_method(loan_input.method)
        r = monthly_rate(max(ZERO, to_decimal(loan_input.annual_rate)))
        totals = EMIService.compute(loan_input)
        emi = round_currency(totals['emi'])

        schedule = []
        balance = principal

        for month in range(1, tenure + 1):
            is_last_month = month == tenure

            if method == RepaymentMethod.FLAT:
                # straight-line interest, not balance based
                interest = round_currency(totals['total_interest'] / tenure)
                if is_last_month:
                    principal_paid = balance
                    payment = principal_paid + interest
                else:
                    principal_paid = round_currency(emi - interest)
                    payment = emi

            elif method == RepaymentMethod.BULLET:
                interest = round_currency(balance * r)
                principal_paid = balance if is_last_month else ZERO
                payment = principal_paid + interest

            else:
                interest = round_currency(balance * r)
                if is_last_month:
                    principal_paid = balance
                else:
                    principal_paid = min(emi - interest, balance)
                payment = principal_paid + interest

            balance = ZERO if is_last_month else balance - principal_paid

            schedule.append(cls._build_entry(month, payment, principal_paid, interest, balance))

        logger.debug(
            "Amortization schedule: principal=%s, months=%d, method=%s, emi=%s",
            principal,
            tenure,
            method,
            emi,
        )
        return schedule

    @staticmethod
    def _build_entry(month, payment, principal_paid, interest, balance) -> dict:
        return {
            'month': month,
            'emi': round_currency(payment),
            'principal': round_currency(principal_paid),
            'interest': round_currency(interest),
            'balance': round_currency(balance),
        }


class ReverseLoanService:
    """
    Service for solving one loan parameter from a known EMI.

    All solvers assume a reducing-balance loan.
    """

    @staticmethod
    def solve_principal(emi, annual_rate, tenure_months) -> Decimal:
        """
        Largest principal that the given EMI repays over the tenure.

        P = E × ((1+r)^n - 1) / (r × (1+r)^n), or E × n when r is zero.
        """
        emi = to_decimal(emi)
        tenure = to_decimal(tenure_months)
        r = monthly_rate(max(ZERO, to_decimal(annual_rate)))

        if emi <= 0 or tenure <= 0:
            return ZERO
        if r == 0:
            return round_currency(emi * tenure)

        factor = (ONE + r) ** tenure
        return round_currency(emi * (factor - ONE) / (r * factor))

    @staticmethod
    def solve_tenure(principal, annual_rate, emi) -> Decimal:
        """
        Months needed to repay ``principal`` with the given EMI.

        n = -ln(1 - r×P/E) / ln(1+r), or P / E when r is zero.

        Returns:
            Tenure in months, rounded to 2 places.

        Raises:
            NegativeAmortizationError: If the EMI does not exceed the first
                month's interest, so the loan would never close.
        """
        principal = to_decimal(principal)
        emi = to_decimal(emi)
        r = monthly_rate(max(ZERO, to_decimal(annual_rate)))

        if principal <= 0 or emi <= 0:
            return ZERO
        if r == 0:
            return round_to(principal / emi, 2)

        EMIService.check_amortization(principal, r, emi)

        months = -(ONE - r * principal / emi).ln() / (ONE + r).ln()
        return round_to(months, 2)

    @staticmethod
    def solve_rate(principal, emi, tenure_months) -> Decimal:
        """
        Annual rate (%) at which ``principal`` is repaid by ``emi``.

        Found by bisection between 0% and REVERSE_RATE_CEILING. An EMI that
        does not even return the principal has no positive rate and yields 0.
        """
        principal = to_decimal(principal)
        emi = to_decimal(emi)
        tenure = to_decimal(tenure_months)

        if principal <= 0 or emi <= 0 or tenure <= 0:
            return ZERO
        if emi * tenure <= principal:
            return ZERO

        low = ZERO
        high = Decimal(getattr(settings, 'REVERSE_RATE_CEILING', 500))
        for _ in range(BISECTION_STEPS):
            mid = (low + high) / 2
            if EMIService.annuity_emi(principal, monthly_rate(mid), tenure) < emi:
                low = mid
            else:
                high = mid

        return round_to((low + high) / 2, 2)


class LoanComparisonService:
    """Service for comparing two loan offers and evaluating takeovers."""

    @classmethod
    def compare(cls, option_a: LoanInput, option_b: LoanInput) -> dict:
        """
        Compare two loan offers side by side.

        Returns:
            Dict with the totals of each option under keys ``a`` and ``b``,
            absolute emi_difference and interest_difference, and
            ``preferred`` ('A', 'B' or None) naming the cheaper option by
            total payable.
        """
        totals_a = EMIService.calculate_totals(option_a)
        totals_b = EMIService.calculate_totals(option_b)

        payable_a = totals_a['total_payable']
        payable_b = totals_b['total_payable']
        preferred = None
        if 0 < payable_a < payable_b:
            preferred = 'A'
        elif 0 < payable_b < payable_a:
            preferred = 'B'

        return {
            'a': totals_a,
            'b': totals_b,
            'emi_difference': abs(totals_a['emi'] - totals_b['emi']),
            'interest_difference': abs(totals_a['total_interest'] - totals_b['total_interest']),
            'preferred': preferred,
        }

    @classmethod
    def takeover(cls, principal, current_rate, new_rate, tenure_months, charges=()) -> dict:
        """
        Evaluate moving an outstanding loan to a lender with a new rate.

        Args:
            principal: Outstanding amount being taken over.
            current_rate: Existing annual rate (%).
            new_rate: Offered annual rate (%).
            tenure_months: Remaining tenure in months.
            charges: Upfront amounts payable on takeover (processing fee...).

        Returns:
            Dict with current_emi, new_emi, monthly_savings, total_charges,
            net_savings and is_beneficial.
        """
        tenure = to_decimal(tenure_months)
        current = EMIService.compute(
            LoanInput(principal, current_rate, tenure_months, RepaymentMethod.REDUCING)
        )
        offered = EMIService.compute(
            LoanInput(principal, new_rate, tenure_months, RepaymentMethod.REDUCING)
        )
        total_charges = sum((to_decimal(c) for c in charges), ZERO)

        if current['emi'] == 0:
            net_savings = ZERO
        else:
            net_savings = current['emi'] * tenure - (offered['emi'] * tenure + total_charges)

        logger.debug(
            "Takeover: principal=%s, current=%s%%, new=%s%%, net_savings=%s",
            principal,
            current_rate,
            new_rate,
            net_savings,
        )

        return {
            'current_emi': round_currency(current['emi']),
            'new_emi': round_currency(offered['emi']),
            'monthly_savings': round_currency(current['emi'] - offered['emi']),
            'total_charges': round_currency(total_charges),
            'net_savings': round_currency(net_savings),
            'is_beneficial': net_savings > 0,
        }
