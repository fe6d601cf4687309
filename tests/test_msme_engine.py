"""
Tests for MSME working capital, ratios, drawing power and CGTMSE fees.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from apps.msme.schemas import DrawingPowerInput, FinancialStatement
from apps.msme.services import (
    CGTMSEService,
    DrawingPowerService,
    RatioService,
    WorkingCapitalService,
)


class NayakTests(SimpleTestCase):
    """Turnover method: 25% requirement, 5% margin, 20% limit."""

    def test_one_crore_turnover(self):
        result = WorkingCapitalService.calculate_nayak(10000000)
        self.assertEqual(result['requirement'], Decimal('2500000.00'))
        self.assertEqual(result['margin'], Decimal('500000.00'))
        self.assertEqual(result['limit'], Decimal('2000000.00'))

    def test_margin_plus_limit_is_requirement(self):
        result = WorkingCapitalService.calculate_nayak('3456789.10')
        self.assertEqual(result['margin'] + result['limit'], result['requirement'])

    def test_non_positive_turnover(self):
        for turnover in (0, -100, 'abc'):
            result = WorkingCapitalService.calculate_nayak(turnover)
            self.assertEqual(result['limit'], Decimal('0'))


class TandonTests(SimpleTestCase):
    """MPBF Method II: 75% of the working capital gap."""

    def test_positive_gap(self):
        result = WorkingCapitalService.calculate_tandon_mpbf(1000000, 400000)
        self.assertEqual(result['gap'], Decimal('600000.00'))
        self.assertEqual(result['mpbf'], Decimal('450000.00'))
        self.assertEqual(result['margin'], Decimal('150000.00'))

    def test_negative_gap_gives_no_finance(self):
        result = WorkingCapitalService.calculate_tandon_mpbf(300000, 500000)
        self.assertEqual(result['gap'], Decimal('-200000.00'))
        self.assertEqual(result['mpbf'], Decimal('0.00'))
        self.assertEqual(result['margin'], Decimal('-200000.00'))

    def test_no_current_assets(self):
        result = WorkingCapitalService.calculate_tandon_mpbf(0, 400000)
        self.assertEqual(result, {'gap': Decimal('0'), 'margin': Decimal('0'), 'mpbf': Decimal('0')})


class RatioTests(SimpleTestCase):

    def setUp(self):
        self.statement = FinancialStatement(
            pat=100000,
            depreciation=20000,
            interest=30000,
            obligation=100000,
            current_assets=500000,
            current_liabilities=250000,
            inventory=200000,
            total_outside_liabilities=300000,
            tangible_net_worth=100000,
            fixed_cost=200000,
            variable_cost=600000,
            sales=1000000,
        )

    def test_ratios(self):
        result = RatioService.calculate(self.statement)
        self.assertEqual(result['dscr'], Decimal('1.50'))
        self.assertEqual(result['current_ratio'], Decimal('2.00'))
        self.assertEqual(result['quick_ratio'], Decimal('1.20'))
        self.assertEqual(result['leverage'], Decimal('3.00'))
        self.assertEqual(result['bep_percent'], Decimal('50.00'))

    def test_zero_denominators(self):
        """Each ratio guards its own denominator."""
        result = RatioService.calculate(FinancialStatement(pat=100000, current_assets=500000))
        for value in result.values():
            self.assertEqual(value, Decimal('0'))

    def test_negative_contribution(self):
        self.statement.variable_cost = 1200000
        result = RatioService.calculate(self.statement)
        self.assertEqual(result['bep_percent'], Decimal('0.00'))
        self.assertEqual(result['dscr'], Decimal('1.50'))


class DrawingPowerTests(SimpleTestCase):

    def test_stock_and_debtors(self):
        result = DrawingPowerService.calculate(DrawingPowerInput(
            stock=1000000, creditors=200000, stock_margin=25,
            debtors=500000, debtor_margin=40,
        ))
        self.assertEqual(result['paid_stock'], Decimal('800000.00'))
        self.assertEqual(result['stock_value'], Decimal('600000.00'))
        self.assertEqual(result['debtors_value'], Decimal('300000.00'))
        self.assertEqual(result['drawing_power'], Decimal('900000.00'))

    def test_creditors_exceed_stock(self):
        result = DrawingPowerService.calculate(DrawingPowerInput(
            stock=100000, creditors=150000, debtors=100000,
        ))
        self.assertEqual(result['paid_stock'], Decimal('0.00'))
        self.assertEqual(result['drawing_power'], Decimal('60000.00'))


class CGTMSEFeeTests(SimpleTestCase):
    """Slab-wise annual guarantee fee."""

    def test_first_slab(self):
        result = CGTMSEService.calculate_fee(1000000)
        self.assertEqual(result['rate'], Decimal('0.37'))
        self.assertEqual(result['fee'], Decimal('3700.00'))
        self.assertEqual(result['quarterly_installment'], Decimal('925.00'))

    def test_slab_boundaries(self):
        self.assertEqual(CGTMSEService.calculate_fee(1000001)['rate'], Decimal('0.55'))
        self.assertEqual(CGTMSEService.calculate_fee(5000000)['rate'], Decimal('0.55'))
        self.assertEqual(CGTMSEService.calculate_fee(5000001)['rate'], Decimal('0.60'))
        self.assertEqual(CGTMSEService.calculate_fee(20000000)['rate'], Decimal('1.20'))

    def test_top_slab(self):
        result = CGTMSEService.calculate_fee(30000000)
        self.assertEqual(result['rate'], Decimal('1.35'))
        self.assertEqual(result['fee'], Decimal('405000.00'))

    def test_social_category_concession(self):
        result = CGTMSEService.calculate_fee(1000000, is_social_category=True)
        self.assertEqual(result['rate'], Decimal('0.333'))
        self.assertEqual(result['fee'], Decimal('3330.00'))
        self.assertEqual(result['quarterly_installment'], Decimal('832.50'))

    def test_zero_amount(self):
        result = CGTMSEService.calculate_fee(0)
        self.assertEqual(result['fee'], Decimal('0'))
        self.assertEqual(result['rate'], Decimal('0'))
