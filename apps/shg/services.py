"""
SHG service layer.

Slab-based interest resolution, calendar-month arithmetic, date-anchored
amortization schedules and outstanding-balance reconstruction as of a
review date, plus reconciliation of a group sanction against the loans
its members actually hold.
"""

import logging
from datetime import date, datetime

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from django.conf import settings

from apps.core.utils import TWO_PLACES, ZERO, round_currency, to_decimal, whole_months
from apps.loans.schemas import LoanInput, RepaymentMethod
from apps.loans.services import AmortizationService
from apps.shg.schemas import InterestSlab, SHGGroup

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12
BALANCE_TOLERANCE = TWO_PLACES


def parse_date(value):
    """
    Coerce a date, datetime or ISO 8601 string into a ``date``.

    Returns None when the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def sorted_slabs(slabs) -> list:
    return sorted(slabs, key=lambda slab: to_decimal(slab.limit))


class SHGService:
    """Service for individual SHG loan calculations."""

    @staticmethod
    def calculate_slab_rate(amount, slabs, manual_rate=None):
        """
        Resolve the interest rate for a loan amount from a slab table.

        A positive manual rate overrides the table. Otherwise slabs are
        checked in ascending ``limit`` order and the first slab whose limit
        covers the amount wins; amounts above every limit take the rate of
        the highest slab.

        Args:
            amount: Loan or sanction amount.
            slabs: Iterable of InterestSlab.
            manual_rate: Optional override rate (%).

        Returns:
            The annual rate (%) as a Decimal; 0 for an empty table.
        """
        if manual_rate is not None and to_decimal(manual_rate) > 0:
            return to_decimal(manual_rate)

        index = SHGService.applied_slab_index(amount, slabs)
        if index is None:
            return ZERO
        return to_decimal(sorted_slabs(slabs)[index].rate)

    @staticmethod
    def applied_slab_index(amount, slabs):
        """Position of the winning slab in the ascending table, or None if empty."""
        ordered = sorted_slabs(slabs)
        if not ordered:
            return None

        amount = to_decimal(amount)
        for index, slab in enumerate(ordered):
            if amount <= to_decimal(slab.limit):
                return index
        return len(ordered) - 1

    @staticmethod
    def calculate_months_elapsed(start, end, tenure_cap=None) -> int:
        """
        Whole calendar months between two dates.

        Only year and month take part; the day of month is ignored, so
        1 Jan to 28 Jan is 0 months and 31 Jan to 1 Feb is 1 month.

        Args:
            start: Start date (date, datetime or ISO string).
            end: End date.
            tenure_cap: Optional upper bound in months.

        Returns:
            Non-negative month count; 0 when either date is unparsable.
        """
        start_date = parse_date(start)
        end_date = parse_date(end)

        if start_date is None or end_date is None:
            logger.warning("Cannot count months between %r and %r", start, end)
            return 0

        months = (end_date.year - start_date.year) * MONTHS_IN_YEAR
        months += end_date.month - start_date.month
        if tenure_cap is not None:
            months = min(months, whole_months(tenure_cap))
        return max(0, months)

    @staticmethod
    def generate_amortization(principal, annual_rate, tenure_months, start_date) -> list:
        """
        Reducing-balance schedule with a due date on every row.

        The n-th installment falls due n calendar months after the start
        date; short months clamp to their last day (31 Jan + 1 month is
        28 or 29 Feb).

        Returns:
            List of schedule entries with an added ``due_date``; empty when
            the start date is invalid or the loan is degenerate.
        """
        start = parse_date(start_date)
        if start is None:
            logger.warning("SHG schedule skipped: invalid start date %r", start_date)
            return []

        schedule = AmortizationService.generate_schedule(
            LoanInput(
                principal=principal,
                annual_rate=annual_rate,
                tenure_months=tenure_months,
                method=RepaymentMethod.REDUCING,
            )
        )

        return [
            {'due_date': start + relativedelta(months=entry['month']), **entry}
            for entry in schedule
        ]

    @classmethod
    def calculate_outstanding_at_date(
        cls,
        principal,
        annual_rate,
        tenure_months,
        start_date,
        review_date,
        missed_emis=0,
        partial_payments=0,
    ) -> dict:
        """
        Reconstruct a loan's position as of a review date.

        Steps:
            1. Build the full schedule once.
            2. Count calendar months elapsed, capped at the tenure.
            3. Missed EMIs push the borrower back in the schedule:
               months_paid = max(0, elapsed - missed).
            4. With nothing paid, outstanding is principal less partial
               payments.
            5. Otherwise outstanding is the balance after the last paid row
               less partial payments, and total_paid is the sum of the
               paid rows' EMIs plus partial payments.
            6. Outstanding is floored at zero.

        Args:
            principal: Amount disbursed.
            annual_rate: Annual interest rate (%).
            tenure_months: Loan term in months.
            start_date: Disbursement date.
            review_date: Date the position is taken at.
            missed_emis: Installments not paid so far.
            partial_payments: Lump sums paid outside the schedule.

        Returns:
            Dict with outstanding, emi_due, months_paid, months_elapsed,
            months_remaining, total_interest and total_paid.
        """
        principal = to_decimal(principal)
        tenure = whole_months(tenure_months)
        missed = max(0, whole_months(missed_emis))
        partial = to_decimal(partial_payments)

        schedule = cls.generate_amortization(principal, annual_rate, tenure, start_date)
        months_elapsed = cls.calculate_months_elapsed(start_date, review_date, tenure)

        emi_due = schedule[0]['emi'] if schedule else ZERO
        total_interest = sum((row['interest'] for row in schedule), ZERO)

        months_paid = max(0, months_elapsed - missed)
        months_remaining = max(0, tenure - months_elapsed)

        if months_paid == 0:
            outstanding = principal - partial
            total_paid = partial
        else:
            row_index = min(months_paid, len(schedule)) - 1
            balance = schedule[row_index]['balance'] if row_index >= 0 else ZERO
            outstanding = balance - partial
            total_paid = sum((row['emi'] for row in schedule[:months_paid]), ZERO) + partial

        logger.debug(
            "SHG outstanding: principal=%s, elapsed=%d, paid=%d, missed=%d, outstanding=%s",
            principal,
            months_elapsed,
            months_paid,
            missed,
            outstanding,
        )

        return {
            'outstanding': round_currency(max(ZERO, outstanding)),
            'emi_due': round_currency(emi_due),
            'months_paid': months_paid,
            'months_elapsed': months_elapsed,
            'months_remaining': months_remaining,
            'total_interest': round_currency(total_interest),
            'total_paid': round_currency(total_paid),
        }


class SHGGroupService:
    """Service for group-level sanction tracking."""

    @staticmethod
    def default_slabs() -> list:
        return [InterestSlab(limit=to_decimal(limit), rate=to_decimal(rate))
                for limit, rate in settings.SHG_DEFAULT_SLABS]

    @classmethod
    def reconcile(cls, group: SHGGroup, members, review_date) -> dict:
        """
        Compare the group's sanction position with its members' loans.

        The sanction is priced from the group's slab table (or manual rate)
        and rolled forward to the review date; each member loan is rolled
        forward on its own terms. The group is balanced when the two
        outstanding totals agree to the paisa.

        Args:
            group: Sanction-level terms.
            members: Iterable of SHGMember.
            review_date: Date the position is taken at.

        Returns:
            Dict with the group rate and slab index, the sanction's
            outstanding figures, a per-member breakdown and the
            reconciliation totals.
        """
        sanctioned = to_decimal(group.sanctioned_amount)
        slabs = group.slabs or cls.default_slabs()
        group_rate = SHGService.calculate_slab_rate(sanctioned, slabs, group.manual_rate)

        master = SHGService.calculate_outstanding_at_date(
            sanctioned, group_rate, group.tenure, group.start_date, review_date
        )

        total_disbursed = ZERO
        total_member_outstanding = ZERO
        breakdown = []

        for member in members:
            member_outstanding = ZERO
            loans = []
            for loan in member.loans:
                position = SHGService.calculate_outstanding_at_date(
                    loan.amount,
                    loan.rate,
                    loan.tenure,
                    loan.start_date,
                    review_date,
                    loan.missed_emis,
                    loan.partial_payments,
                )
                member_outstanding += position['outstanding']
                total_disbursed += to_decimal(loan.amount)
                loans.append({
                    'amount': round_currency(loan.amount),
                    'rate': to_decimal(loan.rate),
                    'tenure': whole_months(loan.tenure),
                    'start_date': parse_date(loan.start_date),
                    'outstanding': position['outstanding'],
                    'emi_due': position['emi_due'],
                })

            total_member_outstanding += member_outstanding
            breakdown.append({
                'name': member.name,
                'total_outstanding': round_currency(member_outstanding),
                'loans': loans,
            })

        difference = abs(master['outstanding'] - total_member_outstanding)
        is_balanced = difference < BALANCE_TOLERANCE

        if not is_balanced:
            logger.info(
                "SHG group %r does not reconcile: group=%s, members=%s, difference=%s",
                group.name,
                master['outstanding'],
                total_member_outstanding,
                difference,
            )

        return {
            'group_name': group.name,
            'group_rate': group_rate,
            'applied_slab_index': SHGService.applied_slab_index(sanctioned, slabs),
            'group_outstanding': master['outstanding'],
            'group_emi_due': master['emi_due'],
            'months_elapsed': master['months_elapsed'],
            'months_remaining': master['months_remaining'],
            'total_interest': master['total_interest'],
            'total_paid': master['total_paid'],
            'total_disbursed': round_currency(total_disbursed),
            'total_member_outstanding': round_currency(total_member_outstanding),
            'difference': round_currency(difference),
            'is_balanced': is_balanced,
            'members': breakdown,
        }
