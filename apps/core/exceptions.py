"""
Custom exceptions for the Banking Calculators suite.

Calculation engines never raise on bad numeric input; they normalize it to
zero-valued results. The exceptions here are reserved for the few domain
violations that make a single calculation meaningless.
"""


class CalculationError(Exception):
    """Base class for domain failures raised by a calculation engine."""

    default_detail = 'Calculation failed.'
    default_code = 'calculation_error'

    def __init__(self, detail: str = None, code: str = None):
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)


class NegativeAmortizationError(CalculationError):
    """Raised when an installment does not cover the first month's interest."""

    default_detail = 'EMI too low: negative amortization'
    default_code = 'negative_amortization'
