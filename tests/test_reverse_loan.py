"""
Tests for solving principal, tenure or rate from a known EMI.
"""

from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from apps.core.exceptions import NegativeAmortizationError
from apps.loans.services import ReverseLoanService


class SolvePrincipalTests(SimpleTestCase):

    def test_inverts_emi(self):
        """An EMI of 23536.74 at 12% for 24 months services about 5 lakh."""
        principal = ReverseLoanService.solve_principal(Decimal('23536.74'), 12, 24)
        self.assertAlmostEqual(float(principal), 500000, delta=1)

    def test_zero_rate(self):
        self.assertEqual(ReverseLoanService.solve_principal(10000, 0, 12), Decimal('120000.00'))

    def test_degenerate(self):
        self.assertEqual(ReverseLoanService.solve_principal(0, 12, 24), Decimal('0'))
        self.assertEqual(ReverseLoanService.solve_principal(10000, 12, 0), Decimal('0'))


class SolveTenureTests(SimpleTestCase):

    def test_inverts_emi(self):
        months = ReverseLoanService.solve_tenure(500000, 12, Decimal('23536.74'))
        self.assertAlmostEqual(float(months), 24, places=1)

    def test_zero_rate(self):
        self.assertEqual(ReverseLoanService.solve_tenure(120000, 0, 10000), Decimal('12.00'))

    def test_emi_equal_to_interest_raises(self):
        """100000 at 12% accrues 1000 a month; an EMI of 1000 never repays it."""
        with self.assertRaises(NegativeAmortizationError):
            ReverseLoanService.solve_tenure(100000, 12, 1000)

    def test_emi_below_interest_raises(self):
        with self.assertRaises(NegativeAmortizationError):
            ReverseLoanService.solve_tenure(100000, 12, 500)

    def test_degenerate(self):
        self.assertEqual(ReverseLoanService.solve_tenure(0, 12, 1000), Decimal('0'))


class SolveRateTests(SimpleTestCase):

    def test_inverts_emi(self):
        rate = ReverseLoanService.solve_rate(500000, Decimal('23536.74'), 24)
        self.assertAlmostEqual(float(rate), 12, places=1)

    def test_home_loan_rate(self):
        rate = ReverseLoanService.solve_rate(1000000, Decimal('12667.58'), 120)
        self.assertAlmostEqual(float(rate), 9, places=1)

    def test_emi_not_covering_principal(self):
        """No positive rate exists when EMI × n does not exceed the principal."""
        self.assertEqual(ReverseLoanService.solve_rate(120000, 10000, 12), Decimal('0'))
        self.assertEqual(ReverseLoanService.solve_rate(120000, 9000, 12), Decimal('0'))

    @override_settings(REVERSE_RATE_CEILING=20)
    def test_rate_bounded_by_ceiling(self):
        rate = ReverseLoanService.solve_rate(100000, 50000, 12)
        self.assertLessEqual(rate, Decimal('20'))

    def test_degenerate(self):
        self.assertEqual(ReverseLoanService.solve_rate(0, 1000, 12), Decimal('0'))
