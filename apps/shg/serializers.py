"""
SHG serializers for the Banking Calculators suite.

Render schedule rows and outstanding positions as plain numbers and ISO
dates for report and share collaborators.
"""

from rest_framework import serializers


class SHGAmortizationEntrySerializer(serializers.Serializer):
    month = serializers.IntegerField()
    due_date = serializers.DateField()
    emi = serializers.FloatField()
    principal = serializers.FloatField()
    interest = serializers.FloatField()
    balance = serializers.FloatField()


class OutstandingSerializer(serializers.Serializer):
    outstanding = serializers.FloatField()
    emi_due = serializers.FloatField()
    months_paid = serializers.IntegerField()
    months_elapsed = serializers.IntegerField()
    months_remaining = serializers.IntegerField()
    total_interest = serializers.FloatField()
    total_paid = serializers.FloatField()
