"""
MSME serializers for the Banking Calculators suite.
"""

from rest_framework import serializers

from apps.core.serializers import SafeDecimalField, ValidationResult, run_validation


class MSMEInputSerializer(serializers.Serializer):
    """Sign rules for working-capital inputs; absent fields are not checked."""

    turnover = SafeDecimalField(allow_null=True, help_text="Projected annual turnover.")
    current_assets = SafeDecimalField(allow_null=True, help_text="Current assets.")

    def validate_turnover(self, value):
        if value < 0:
            raise serializers.ValidationError('Turnover cannot be negative.')
        return value

    def validate_current_assets(self, value):
        if value < 0:
            raise serializers.ValidationError('Current Assets cannot be negative.')
        return value


def validate_msme_input(msme_input) -> ValidationResult:
    """Validate MSME parameters without raising."""
    return run_validation(MSMEInputSerializer, msme_input)
