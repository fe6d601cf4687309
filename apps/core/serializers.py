"""
Shared validation plumbing for calculator inputs.

Validation is advisory: it reports structured field errors and never raises.
The engines normalize degenerate input on their own, so a failed validation
is the caller's cue to reject the form, not a guarantee of an engine error.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import List

from rest_framework import serializers
from rest_framework.fields import empty

from apps.core.utils import ZERO, to_decimal


@dataclass(frozen=True)
class FieldError:
    """A single validation failure for one input field."""

    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a calculator input."""

    is_valid: bool
    errors: List[FieldError] = field(default_factory=list)

    def messages_for(self, field_name: str) -> List[str]:
        return [e.message for e in self.errors if e.field == field_name]


class SafeDecimalField(serializers.Field):
    """
    Serializer field that parses through ``to_decimal``.

    Unparsable values (including None) become zero instead of producing a
    parse error, so the range rules on the serializer report them with the
    same message as a genuine zero.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('default', ZERO)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if data is empty:
            return super().validate_empty_values(data)
        return (False, data)

    def to_internal_value(self, data):
        return to_decimal(data)

    def to_representation(self, value):
        return float(to_decimal(value))


def run_validation(serializer_class, data) -> ValidationResult:
    """
    Validate ``data`` with ``serializer_class`` and flatten the errors.

    Args:
        serializer_class: A DRF Serializer class holding the range rules.
        data: A dataclass instance or a mapping of raw field values.

    Returns:
        ValidationResult with one FieldError per reported message, in
        serializer field order.
    """
    if is_dataclass(data):
        data = asdict(data)
    serializer = serializer_class(data=dict(data or {}))

    if serializer.is_valid():
        return ValidationResult(is_valid=True)

    errors = [
        FieldError(field=name, message=str(message))
        for name, messages in serializer.errors.items()
        for message in messages
    ]
    return ValidationResult(is_valid=False, errors=errors)
