"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting
"""

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class TimeRangeQuerySerializer(serializers.Serializer):
    """
    Validate the reporting window query parameter.

    Query Parameters:
        timeRange (str): '7days', '30days', '90days' or 'year'
        time_range (str): Alias of timeRange

    Note:
        Unknown windows are not rejected; they fall back to '30days'.
    """

    timeRange = serializers.CharField(required=False, allow_blank=True, max_length=20)
    time_range = serializers.CharField(required=False, allow_blank=True, max_length=20)

    def validate(self, attrs):
        attrs['window'] = attrs.get('timeRange') or attrs.get('time_range') or ''
        return attrs


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class ScanMethodSerializer(serializers.Serializer):
    method = serializers.CharField()
    count = serializers.IntegerField()
    percentage = serializers.IntegerField()


class DeviceTypeSerializer(serializers.Serializer):
    device = serializers.CharField()
    count = serializers.IntegerField()
    percentage = serializers.IntegerField()


class ScanActivitySerializer(serializers.Serializer):
    date = serializers.DateField()
    count = serializers.IntegerField()


class TopCardSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    scans = serializers.IntegerField()


class ScanReportSerializer(serializers.Serializer):
    """Dashboard scan report of the current user."""

    time_range = serializers.CharField()
    start_date = serializers.DateTimeField()
    total_cards = serializers.IntegerField()
    new_cards = serializers.IntegerField()
    total_scans = serializers.IntegerField()
    qr_scans = serializers.IntegerField()
    nfc_scans = serializers.IntegerField()
    scan_methods = ScanMethodSerializer(many=True)
    device_types = DeviceTypeSerializer(many=True)
    scan_activity = ScanActivitySerializer(many=True)
    top_cards = TopCardSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
