"""
Deposit serializers for the Banking Calculators suite.
"""

from django.conf import settings
from rest_framework import serializers

from apps.core.serializers import SafeDecimalField, ValidationResult, run_validation


class DepositInputSerializer(serializers.Serializer):
    """Range rules for FD/RD calculator inputs."""

    principal = SafeDecimalField(help_text="Deposit amount or monthly installment.")
    annual_rate = SafeDecimalField(help_text="Annual interest rate (%).")
    tenure_months = SafeDecimalField(help_text="Deposit term in months.")

    def validate_principal(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero.')
        return value

    def validate_annual_rate(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError('Interest rate must be between 0 and 100.')
        return value

    def validate_tenure_months(self, value):
        max_tenure = settings.DEPOSIT_MAX_TENURE_MONTHS
        if value < 1 or value > max_tenure:
            raise serializers.ValidationError(
                f'Tenure must be between 1 and {max_tenure} months.'
            )
        return value


def validate_deposit_input(deposit_input) -> ValidationResult:
    """Validate deposit parameters without raising."""
    return run_validation(DepositInputSerializer, deposit_input)


class FDMaturitySerializer(serializers.Serializer):
    maturity_value = serializers.FloatField()
    interest_earned = serializers.FloatField()
    eay = serializers.FloatField()


class PrematurePayoutSerializer(serializers.Serializer):
    effective_rate = serializers.FloatField()
    interest_earned = serializers.FloatField()
    interest_recovery = serializers.FloatField()
    net_payout = serializers.FloatField()
    maturity_before_recovery = serializers.FloatField()
