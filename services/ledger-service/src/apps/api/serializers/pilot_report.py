# services/ledger-service/src/apps/api/serializers/pilot_report.py
"""
Pilot Report Serializers
"""

from rest_framework import serializers

from apps.core.models import PilotReport


class PilotReportSerializer(serializers.ModelSerializer):
    """Serializer for PilotReport."""

    severity_display = serializers.CharField(
        source='get_severity_display',
        read_only=True
    )
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )

    class Meta:
        model = PilotReport
        fields = [
            'id', 'aircraft_id', 'flight_log_id', 'work_order_id', 'reported_by',
            'title', 'description', 'affected_system', 'affected_component',
            'severity', 'severity_display', 'status', 'status_display', 'is_aog',
            'resolution', 'resolved_at', 'resolved_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PilotReportCreateSerializer(serializers.Serializer):
    """Serializer for filing a pilot report."""

    aircraft_id = serializers.UUIDField()
    flight_log_id = serializers.UUIDField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    severity = serializers.ChoiceField(
        choices=PilotReport.Severity.choices,
        default=PilotReport.Severity.LOW
    )
    is_aog = serializers.BooleanField(default=False)
    affected_system = serializers.CharField(required=False, allow_blank=True, max_length=100)
    affected_component = serializers.CharField(required=False, allow_blank=True, max_length=100)


class PilotReportUpdateSerializer(serializers.ModelSerializer):
    """Serializer for editing a pilot report."""

    class Meta:
        model = PilotReport
        fields = [
            'title', 'description', 'affected_system', 'affected_component', 'severity',
        ]


class PilotReportStatusSerializer(serializers.Serializer):
    """Serializer for moving a pilot report."""

    status = serializers.ChoiceField(choices=PilotReport.Status.choices)
    resolution = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PilotReportLinkSerializer(serializers.Serializer):
    """Serializer for linking a work order."""

    work_order_id = serializers.UUIDField()
