"""
MSME service layer.

Working-capital assessment (Nayak Committee turnover method and Tandon
Committee MPBF Method II), the financial ratio battery, drawing power
against stock and book debts, and CGTMSE guarantee fees.
"""

import logging
from decimal import Decimal

from apps.core.utils import HUNDRED, ONE, ZERO, round_currency, to_decimal
from apps.msme.schemas import DrawingPowerInput, FinancialStatement

logger = logging.getLogger(__name__)

NAYAK_REQUIREMENT_SHARE = Decimal('0.25')
NAYAK_MARGIN_SHARE = Decimal('0.05')
NAYAK_LIMIT_SHARE = Decimal('0.20')
TANDON_FINANCE_SHARE = Decimal('0.75')

# (upper limit inclusive, annual guarantee fee %)
CGTMSE_FEE_SLABS = (
    (Decimal('1000000'), Decimal('0.37')),
    (Decimal('5000000'), Decimal('0.55')),
    (Decimal('10000000'), Decimal('0.60')),
    (Decimal('20000000'), Decimal('1.20')),
)
CGTMSE_TOP_RATE = Decimal('1.35')
SOCIAL_CATEGORY_FACTOR = Decimal('0.90')
QUARTERS_IN_YEAR = Decimal('4')


class WorkingCapitalService:
    """Service for working-capital limit assessment."""

    @staticmethod
    def calculate_nayak(turnover) -> dict:
        """
        Nayak Committee turnover method, for limits up to Rs. 5 crore.

        Requirement is 25% of projected turnover, of which 5% is the
        borrower's margin and 20% the bank-financeable limit.

        Args:
            turnover: Projected annual turnover.

        Returns:
            Dict with requirement, margin and limit; zeros when turnover
            is not positive.
        """
        turnover = to_decimal(turnover)

        if turnover <= 0:
            return {'requirement': ZERO, 'margin': ZERO, 'limit': ZERO}

        return {
            'requirement': round_currency(turnover * NAYAK_REQUIREMENT_SHARE),
            'margin': round_currency(turnover * NAYAK_MARGIN_SHARE),
            'limit': round_currency(turnover * NAYAK_LIMIT_SHARE),
        }

    @staticmethod
    def calculate_tandon_mpbf(current_assets, current_liabilities) -> dict:
        """
        Tandon Committee Method II (Maximum Permissible Bank Finance).

        gap = CA - CL, MPBF = 75% of the gap (never negative) and the
        borrower's margin is whatever part of the gap the bank does not fund.

        Returns:
            Dict with gap, margin and mpbf; zeros when current assets are
            not positive.
        """
        ca = to_decimal(current_assets)
        cl = to_decimal(current_liabilities)

        if ca <= 0:
            return {'gap': ZERO, 'margin': ZERO, 'mpbf': ZERO}

        gap = ca - cl
        mpbf = max(ZERO, gap * TANDON_FINANCE_SHARE)

        return {
            'gap': round_currency(gap),
            'margin': round_currency(gap - mpbf),
            'mpbf': round_currency(mpbf),
        }


class RatioService:
    """Service for the credit appraisal ratio battery."""

    @classmethod
    def calculate(cls, statement: FinancialStatement) -> dict:
        """
        Compute DSCR, liquidity, leverage and break-even ratios.

        Each ratio guards its own denominator and is 0 when that
        denominator is zero or negative.

            DSCR          = (PAT + Depreciation + Interest) / Obligation
            Current ratio = CA / CL
            Quick ratio   = (CA - Inventory) / CL
            Leverage      = TOL / TNW
            BEP %         = Fixed cost / (Sales - Variable cost) × 100

        Returns:
            Dict with dscr, current_ratio, quick_ratio, leverage and
            bep_percent rounded to 2 places.
        """
        pat = to_decimal(statement.pat)
        depreciation = to_decimal(statement.depreciation)
        interest = to_decimal(statement.interest)
        ca = to_decimal(statement.current_assets)
        cl = to_decimal(statement.current_liabilities)
        inventory = to_decimal(statement.inventory)
        contribution = to_decimal(statement.sales) - to_decimal(statement.variable_cost)

        ratios = {
            'dscr': cls._ratio(pat + depreciation + interest, to_decimal(statement.obligation)),
            'current_ratio': cls._ratio(ca, cl),
            'quick_ratio': cls._ratio(ca - inventory, cl),
            'leverage': cls._ratio(
                to_decimal(statement.total_outside_liabilities),
                to_decimal(statement.tangible_net_worth),
            ),
            'bep_percent': cls._ratio(to_decimal(statement.fixed_cost), contribution) * HUNDRED,
        }
        return {name: round_currency(value) for name, value in ratios.items()}

    @staticmethod
    def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
        if denominator <= 0:
            return ZERO
        return numerator / denominator


class DrawingPowerService:
    """Service for drawing power against hypothecated stock and debtors."""

    @staticmethod
    def calculate(dp_input: DrawingPowerInput) -> dict:
        """
        Drawing power from a stock statement.

        Stock is taken net of trade creditors (only paid stock counts) and
        both stock and debtors are reduced by their margins.

        Returns:
            Dict with paid_stock, stock_value, debtors_value and
            drawing_power (never negative).
        """
        stock = to_decimal(dp_input.stock)
        creditors = to_decimal(dp_input.creditors)
        debtors = to_decimal(dp_input.debtors)
        stock_margin = to_decimal(dp_input.stock_margin) / HUNDRED
        debtor_margin = to_decimal(dp_input.debtor_margin) / HUNDRED

        paid_stock = max(ZERO, stock - creditors)
        stock_value = paid_stock * (ONE - stock_margin)
        debtors_value = debtors * (ONE - debtor_margin)
        drawing_power = max(ZERO, stock_value + debtors_value)

        return {
            'paid_stock': round_currency(paid_stock),
            'stock_value': round_currency(stock_value),
            'debtors_value': round_currency(debtors_value),
            'drawing_power': round_currency(drawing_power),
        }


class CGTMSEService:
    """Service for CGTMSE annual guarantee fee."""

    @staticmethod
    def fee_rate(loan_amount, is_social_category: bool = False) -> Decimal:
        """Annual guarantee fee rate (%) for the loan's slab."""
        amount = to_decimal(loan_amount)

        rate = CGTMSE_TOP_RATE
        for limit, slab_rate in CGTMSE_FEE_SLABS:
            if amount <= limit:
                rate = slab_rate
                break

        if is_social_category:
            rate = rate * SOCIAL_CATEGORY_FACTOR
        return rate

    @classmethod
    def calculate_fee(cls, loan_amount, is_social_category: bool = False) -> dict:
        """
        Calculate the annual guarantee fee for a CGTMSE-covered loan.

        Slabs: up to 10 lakh 0.37%, up to 50 lakh 0.55%, up to 1 crore
        0.60%, up to 2 crore 1.20%, above that 1.35%. Loans to social
        category borrowers get a 10% concession on the rate.

        Returns:
            Dict with rate (%), fee and quarterly_installment.
        """
        amount = to_decimal(loan_amount)

        if amount <= 0:
            return {'rate': ZERO, 'fee': ZERO, 'quarterly_installment': ZERO}

        rate = cls.fee_rate(amount, is_social_category)
        fee = amount * rate / HUNDRED

        logger.debug(
            "CGTMSE fee: amount=%s, social=%s, rate=%s%%, fee=%s",
            amount,
            is_social_category,
            rate,
            fee,
        )

        return {
            'rate': rate,
            'fee': round_currency(fee),
            'quarterly_installment': round_currency(fee / QUARTERS_IN_YEAR),
        }
