# services/ledger-service/src/apps/api/serializers/release_record.py
"""
Release Record Serializers
"""

from rest_framework import serializers

from apps.core.models import ReleaseRecord


class ReleaseRecordSerializer(serializers.ModelSerializer):
    """Serializer for ReleaseRecord."""

    release_status_display = serializers.CharField(
        source='get_release_status_display',
        read_only=True
    )
    is_signed = serializers.BooleanField(read_only=True)
    is_current = serializers.BooleanField(read_only=True)

    class Meta:
        model = ReleaseRecord
        fields = [
            'id', 'aircraft_id', 'work_order_id', 'release_certificate_number',
            'release_status', 'release_status_display',
            'work_description', 'conditions', 'limitations',
            'issued_by', 'signature_hash', 'signed_by', 'signed_at', 'is_signed',
            'is_valid', 'superseded_by_id', 'superseded_at', 'is_current',
            'version', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ReleaseIssueSerializer(serializers.Serializer):
    """Serializer for issuing a release."""

    aircraft_id = serializers.UUIDField()
    release_status = serializers.ChoiceField(choices=ReleaseRecord.ReleaseStatus.choices)
    work_order_id = serializers.UUIDField(required=False, allow_null=True)
    work_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    limitations = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReleaseUpdateSerializer(serializers.Serializer):
    """Serializer for editing an unsigned release."""

    expected_version = serializers.IntegerField(required=False, min_value=1)
    release_status = serializers.ChoiceField(
        choices=ReleaseRecord.ReleaseStatus.choices,
        required=False
    )
    work_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    limitations = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReleaseSignSerializer(serializers.Serializer):
    """Serializer for signing a release."""

    signature_hash = serializers.CharField(max_length=255)
