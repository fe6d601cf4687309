"""
Tests for Decimal parsing and the currency rounding policy.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from apps.core.utils import (
    round_currency,
    round_to,
    to_decimal,
    to_number,
    whole_months,
)
from apps.deposits.schemas import DepositInput
from apps.deposits.services import DepositService
from apps.loans.schemas import LoanInput
from apps.loans.serializers import validate_loan_input
from apps.loans.services import EMIService


class ToDecimalTests(SimpleTestCase):
    """to_decimal never raises and never returns a non-finite value."""

    def test_numeric_string(self):
        self.assertEqual(to_decimal('1500.50'), Decimal('1500.50'))

    def test_surrounding_whitespace(self):
        self.assertEqual(to_decimal('  42 '), Decimal('42'))

    def test_integer(self):
        self.assertEqual(to_decimal(100000), Decimal('100000'))

    def test_float_goes_through_str(self):
        """0.1 must not carry binary representation noise."""
        self.assertEqual(to_decimal(0.1), Decimal('0.1'))

    def test_decimal_passthrough(self):
        value = Decimal('7.25')
        self.assertIs(to_decimal(value), value)

    def test_garbage_is_zero(self):
        self.assertEqual(to_decimal('abc'), Decimal('0'))
        self.assertEqual(to_decimal(''), Decimal('0'))
        self.assertEqual(to_decimal([1, 2]), Decimal('0'))

    def test_none_is_zero(self):
        self.assertEqual(to_decimal(None), Decimal('0'))

    def test_bool_is_zero(self):
        self.assertEqual(to_decimal(True), Decimal('0'))

    def test_non_finite_is_zero(self):
        """NaN and infinities from any source collapse to zero."""
        self.assertEqual(to_decimal(float('nan')), Decimal('0'))
        self.assertEqual(to_decimal(float('inf')), Decimal('0'))
        self.assertEqual(to_decimal('-Infinity'), Decimal('0'))
        self.assertEqual(to_decimal(Decimal('NaN')), Decimal('0'))

    def test_out_of_range_magnitude_is_zero(self):
        """Values of 1e18 and above are treated like unparsable input."""
        self.assertEqual(to_decimal('1e999999'), Decimal('0'))
        self.assertEqual(to_decimal('1e27'), Decimal('0'))
        self.assertEqual(to_decimal(Decimal('-1e18')), Decimal('0'))
        self.assertEqual(to_decimal('1000000000000000000'), Decimal('0'))

    def test_large_in_range_value_kept(self):
        self.assertEqual(to_decimal('999999999999999.99'), Decimal('999999999999999.99'))


class RoundingTests(SimpleTestCase):
    """Half-up rounding to currency and arbitrary precision."""

    def test_round_half_up(self):
        self.assertEqual(round_currency(Decimal('10.005')), Decimal('10.01'))
        self.assertEqual(round_currency(Decimal('10.004')), Decimal('10.00'))

    def test_float_input_rounds_on_decimal_digits(self):
        """2.675 is 2.67499... in binary; parsed via str it rounds up."""
        self.assertEqual(round_currency(2.675), Decimal('2.68'))

    def test_always_two_places(self):
        self.assertEqual(str(round_currency(7)), '7.00')

    def test_negative_half_rounds_away_from_zero(self):
        self.assertEqual(round_currency(Decimal('-1.005')), Decimal('-1.01'))

    def test_round_to_places(self):
        self.assertEqual(round_to('1.23456', 3), Decimal('1.235'))
        self.assertEqual(round_to('12.5', 0), Decimal('13'))

    def test_to_number_returns_float(self):
        number = to_number(Decimal('12667.5834'))
        self.assertIsInstance(number, float)
        self.assertEqual(number, 12667.58)

    def test_whole_months_floors(self):
        self.assertEqual(whole_months('12.9'), 12)
        self.assertEqual(whole_months(None), 0)

    def test_round_large_result_keeps_every_digit(self):
        """Quantizing past 28 significant digits must not raise."""
        self.assertEqual(round_currency(Decimal('1e30')), Decimal('1e30'))
        self.assertEqual(
            str(round_currency(Decimal('123456789012345678901234567890.125'))),
            '123456789012345678901234567890.13',
        )
        self.assertEqual(round_to(Decimal('1e40'), 4), Decimal('1e40'))


class OutOfRangeInputTests(SimpleTestCase):
    """Huge inputs reach the engines as zero instead of raising."""

    def test_loan_totals(self):
        totals = EMIService.calculate_totals(LoanInput('1e27', 10, 12))
        self.assertEqual(totals['emi'], Decimal('0.00'))
        self.assertEqual(totals['total_payable'], Decimal('0.00'))

        totals = EMIService.calculate_totals(LoanInput('1e999999', 10, 12))
        self.assertEqual(totals['emi'], Decimal('0.00'))

    def test_fd_maturity(self):
        result = DepositService.calculate_fd_maturity(DepositInput('1e30', 7, 12))
        self.assertEqual(result['maturity_value'], Decimal('0'))

    def test_validation_rejects(self):
        result = validate_loan_input(LoanInput('1e27', 10, 12))
        self.assertFalse(result.is_valid)
        self.assertEqual(
            result.messages_for('principal'),
            ['Principal amount must be greater than zero.'],
        )
