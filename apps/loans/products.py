"""
Product-specific loan assessments: gold loans and Kisan Credit Card limits.
"""

import logging
from decimal import Decimal

from apps.core.utils import HUNDRED, ZERO, round_currency, to_decimal
from apps.loans.schemas import (
    ChargeType,
    GoldLoanInput,
    GoldLoanType,
    KCCInput,
    LandUnit,
    LoanInput,
    RepaymentMethod,
)
from apps.loans.services import MONTHS_IN_YEAR, EMIService

logger = logging.getLogger(__name__)

# Valuation is expressed in 22 karat equivalent weight
BASE_PURITY = Decimal('22')

GOLD_MAX_LTV = {
    GoldLoanType.EMI: Decimal('75'),
    GoldLoanType.OVERDRAFT: Decimal('75'),
    GoldLoanType.BULLET: Decimal('65'),
}
DEFAULT_CREDIT_SCORE = Decimal('750')
LOW_SCORE_THRESHOLD = Decimal('650')
LOW_SCORE_LTV_CUT = Decimal('10')
LTV_FLOOR = Decimal('50')
HIGH_VALUE_THRESHOLD = Decimal('500000')
HIGH_DEDUCTION_PERCENT = Decimal('20')

ACRES_PER_HECTARE = Decimal('2.471')
KCC_PROJECTION_YEARS = 5


class GoldLoanService:
    """Service for gold ornament appraisal and loan eligibility."""

    @classmethod
    def assess(cls, gold_input: GoldLoanInput) -> dict:
        """
        Value the pledged ornaments and size the loan against them.

        Steps:
            1. Net weight per ornament (gross less stone/wastage deductions)
            2. Convert to 22K equivalent and value at the gold rate
            3. Apply the scheme LTV cap, custom override and credit score cut
            4. Cap the requested amount at the eligible amount
            5. Deduct upfront charges
            6. Compute repayment under the chosen loan type

        Args:
            gold_input: Ornaments, rates and scheme options.

        Returns:
            Dict with the ornament valuation rows, LTV, eligible and
            sanctioned amounts, charges, repayment figures and warning flags.
        """
        gold_rate = to_decimal(gold_input.gold_rate)
        loan_type = cls._resolve_loan_type(gold_input.loan_type)

        ornaments = [cls._value_ornament(o, gold_rate) for o in gold_input.ornaments]
        total_net_weight = sum((o['net_weight'] for o in ornaments), ZERO)
        total_valuation = sum((o['value'] for o in ornaments), ZERO)

        ltv = GOLD_MAX_LTV[loan_type]
        custom_ltv = to_decimal(gold_input.custom_ltv)
        if custom_ltv > 0:
            ltv = custom_ltv

        ltv_reduced = False
        # zero, missing or unparsable scores fall back to the default
        score = to_decimal(gold_input.credit_score) or DEFAULT_CREDIT_SCORE
        if score < LOW_SCORE_THRESHOLD:
            ltv = max(ltv - LOW_SCORE_LTV_CUT, LTV_FLOOR)
            ltv_reduced = True

        max_eligible = total_valuation * ltv / HUNDRED
        requested = to_decimal(gold_input.requested_amount)
        loan_amount = min(requested, max_eligible) if requested > 0 else max_eligible

        charges = []
        for charge in gold_input.charges:
            value = to_decimal(charge.value)
            if charge.type == ChargeType.PERCENTAGE:
                amount = loan_amount * value / HUNDRED
            else:
                amount = value
            charges.append({'name': charge.name, 'amount': round_currency(amount)})
        total_charges = sum((c['amount'] for c in charges), ZERO)

        repayment = cls._repayment(
            loan_type,
            loan_amount,
            to_decimal(gold_input.interest_rate),
            to_decimal(gold_input.tenure_months) or MONTHS_IN_YEAR,
        )

        logger.debug(
            "Gold loan: valuation=%s, ltv=%s%%, eligible=%s, sanctioned=%s",
            total_valuation,
            ltv,
            max_eligible,
            loan_amount,
        )

        return {
            'ornaments': ornaments,
            'total_net_weight': total_net_weight,
            'total_valuation': round_currency(total_valuation),
            'applicable_ltv': ltv,
            'max_eligible_loan': round_currency(max_eligible),
            'loan_amount': round_currency(loan_amount),
            'charges': charges,
            'total_charges': round_currency(total_charges),
            'net_disbursement': round_currency(loan_amount - total_charges),
            **repayment,
            'amount_capped': requested > max_eligible,
            'ltv_reduced': ltv_reduced,
            'high_value': total_valuation > HIGH_VALUE_THRESHOLD,
            'high_deduction': any(
                o['deduction_percent'] > HIGH_DEDUCTION_PERCENT for o in ornaments
            ),
        }

    @staticmethod
    def _value_ornament(ornament, gold_rate: Decimal) -> dict:
        gross = to_decimal(ornament.gross_weight)
        deductions = to_decimal(ornament.deductions)

        if ornament.is_net_entry:
            net_weight = gross
            deduction_percent = ZERO
        else:
            net_weight = max(ZERO, gross - deductions)
            deduction_percent = deductions / gross * HUNDRED if gross > 0 else ZERO

        equivalent_22k = net_weight * to_decimal(ornament.purity) / BASE_PURITY
        return {
            'description': ornament.description,
            'net_weight': net_weight,
            'deduction_percent': deduction_percent,
            'equivalent_22k': equivalent_22k,
            'value': equivalent_22k * gold_rate,
        }

    @staticmethod
    def _repayment(loan_type, loan_amount: Decimal, annual_rate: Decimal, tenure: Decimal) -> dict:
        emi = total_interest = total_payable = ZERO

        if loan_amount > 0:
            if loan_type == GoldLoanType.EMI:
                totals = EMIService.compute(
                    LoanInput(loan_amount, annual_rate, tenure, RepaymentMethod.REDUCING)
                )
                emi = totals['emi']
                total_interest = totals['total_interest']
                total_payable = totals['total_payable']
            elif loan_type == GoldLoanType.BULLET:
                total_interest = loan_amount * annual_rate * (tenure / MONTHS_IN_YEAR) / HUNDRED
                total_payable = loan_amount + total_interest
            else:
                # overdraft: interest serviced monthly, principal on demand
                total_interest = loan_amount * annual_rate / MONTHS_IN_YEAR / HUNDRED
                total_payable = loan_amount

        return {
            'emi': round_currency(emi),
            'total_interest': round_currency(total_interest),
            'total_payable': round_currency(total_payable),
        }

    @staticmethod
    def _resolve_loan_type(loan_type) -> GoldLoanType:
        try:
            return GoldLoanType(str(loan_type).strip().upper())
        except ValueError:
            logger.warning("Unknown gold loan type %r, using EMI", loan_type)
            return GoldLoanType.EMI


class KCCService:
    """Service for Kisan Credit Card limit assessment."""

    @classmethod
    def assess(cls, kcc_input: KCCInput) -> dict:
        """
        Build the five-year KCC limit.

        Year 1 limit = cost of cultivation (area × scale of finance) plus
        post-harvest and maintenance components and crop insurance. The
        short-term limit escalates every following year; term loans are
        added in the year they fall due. The maximum permissible limit is
        the fifth-year short-term limit plus all term loans.

        Args:
            kcc_input: Crops, land unit, component percentages and term loans.

        Returns:
            Dict with farmer_category, area figures, year-1 components,
            yearly projections and max_permissible_limit.
        """
        total_area = sum((to_decimal(c.area) for c in kcc_input.crops), ZERO)
        if str(kcc_input.land_unit).lower() == LandUnit.HECTARES:
            total_acres = total_area * ACRES_PER_HECTARE
        else:
            total_acres = total_area
        total_hectares = total_acres / ACRES_PER_HECTARE

        base_cost = sum(
            (to_decimal(c.area) * to_decimal(c.scale_of_finance) for c in kcc_input.crops),
            ZERO,
        )
        post_harvest = base_cost * to_decimal(kcc_input.post_harvest_percent) / HUNDRED
        maintenance = base_cost * to_decimal(kcc_input.maintenance_percent) / HUNDRED
        insurance = to_decimal(kcc_input.insurance_premium)
        escalation = to_decimal(kcc_input.escalation_percent) / HUNDRED

        projections = []
        short_term_limit = base_cost + post_harvest + maintenance + insurance
        for year in range(1, KCC_PROJECTION_YEARS + 1):
            if year > 1:
                short_term_limit += short_term_limit * escalation
            term_loan = sum(
                (to_decimal(t.amount) for t in kcc_input.term_loans if t.year == year),
                ZERO,
            )
            projections.append({
                'year': year,
                'short_term_limit': round_currency(short_term_limit),
                'term_loan': round_currency(term_loan),
                'total_drawable': round_currency(short_term_limit + term_loan),
            })

        total_term_loans = sum((to_decimal(t.amount) for t in kcc_input.term_loans), ZERO)
        max_permissible_limit = short_term_limit + total_term_loans

        logger.debug(
            "KCC: hectares=%s, base_cost=%s, mpl=%s",
            total_hectares,
            base_cost,
            max_permissible_limit,
        )

        return {
            'farmer_category': cls._farmer_category(total_hectares),
            'total_acres': total_acres,
            'total_hectares': total_hectares,
            'base_cultivation_cost': round_currency(base_cost),
            'post_harvest': round_currency(post_harvest),
            'maintenance': round_currency(maintenance),
            'insurance_premium': round_currency(insurance),
            'year1_limit': projections[0]['short_term_limit'],
            'projections': projections,
            'total_term_loans': round_currency(total_term_loans),
            'max_permissible_limit': round_currency(max_permissible_limit),
        }

    @staticmethod
    def _farmer_category(hectares: Decimal) -> str:
        if hectares <= 1:
            return 'Marginal'
        if hectares <= 2:
            return 'Small'
        return 'Other'
