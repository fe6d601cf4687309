"""
Loan serializers for the Banking Calculators suite.

Input serializers carry the validation rules; output serializers render
engine results as plain numbers for export and sharing.
"""

from django.conf import settings
from rest_framework import serializers

from apps.core.serializers import SafeDecimalField, ValidationResult, run_validation
from apps.loans.schemas import RepaymentMethod


class LoanInputSerializer(serializers.Serializer):
    """Range rules for loan calculator inputs."""

    principal = SafeDecimalField(help_text="Loan amount.")
    annual_rate = SafeDecimalField(help_text="Annual interest rate (%).")
    tenure_months = SafeDecimalField(help_text="Loan tenure in months.")
    method = serializers.ChoiceField(
        choices=RepaymentMethod.choices,
        required=False,
        allow_null=True,
        allow_blank=True,
        error_messages={'invalid_choice': 'Repayment method "{input}" is not supported.'},
    )

    def validate_principal(self, value):
        if value <= 0:
            raise serializers.ValidationError('Principal amount must be greater than zero.')
        return value

    def validate_annual_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError('Annual interest rate must be between 0 and 100.')
        return value

    def validate_tenure_months(self, value):
        max_tenure = settings.LOAN_MAX_TENURE_MONTHS
        if value < 1 or value > max_tenure:
            raise serializers.ValidationError(
                f'Tenure must be between 1 and {max_tenure} months.'
            )
        return value


def validate_loan_input(loan_input) -> ValidationResult:
    """
    Validate loan parameters without raising.

    Args:
        loan_input: A LoanInput or a mapping with the same keys.

    Returns:
        ValidationResult listing every failing field.
    """
    return run_validation(LoanInputSerializer, loan_input)


class LoanTotalsSerializer(serializers.Serializer):
    """Serializer for EMI calculation results."""

    emi = serializers.FloatField()
    monthly_interest = serializers.FloatField()
    total_interest = serializers.FloatField()
    total_payable = serializers.FloatField()
    final_payment = serializers.FloatField()


class AmortizationEntrySerializer(serializers.Serializer):
    """Serializer for a single amortization schedule row."""

    month = serializers.IntegerField()
    emi = serializers.FloatField()
    principal = serializers.FloatField()
    interest = serializers.FloatField()
    balance = serializers.FloatField()
