# services/ledger-service/src/apps/api/serializers/component.py
"""
Component Serializers
"""

from rest_framework import serializers

from apps.core.models import Component, ComponentInstallation


class ComponentInstallationSerializer(serializers.ModelSerializer):
    """Serializer for one installation period."""

    aircraft_registration = serializers.CharField(
        source='aircraft.registration',
        read_only=True
    )
    is_installed = serializers.BooleanField(read_only=True)

    class Meta:
        model = ComponentInstallation
        fields = [
            'id', 'component_id', 'aircraft_id', 'aircraft_registration',
            'location', 'inherited_flight_hours', 'inherited_flight_cycles',
            'flight_hours', 'flight_cycles', 'is_installed',
            'installed_at', 'installed_by', 'install_notes',
            'removed_at', 'removed_by', 'remove_notes',
        ]
        read_only_fields = fields


class ComponentSerializer(serializers.ModelSerializer):
    """Serializer for Component."""

    installed_on = serializers.SerializerMethodField()

    class Meta:
        model = Component
        fields = [
            'id', 'part_number', 'serial_number', 'name', 'description',
            'manufacturer', 'total_flight_hours', 'total_flight_cycles',
            'is_life_limited', 'max_flight_hours', 'max_cycles',
            'is_airworthy', 'is_active', 'installed_on',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'total_flight_hours', 'total_flight_cycles',
            'created_at', 'updated_at',
        ]

    def get_installed_on(self, obj):
        installation = obj.current_installation
        return str(installation.aircraft_id) if installation else None


class ComponentCreateSerializer(serializers.ModelSerializer):
    """Serializer for registering components."""

    class Meta:
        model = Component
        fields = [
            'part_number', 'serial_number', 'name', 'description',
            'manufacturer', 'is_airworthy',
            'is_life_limited', 'max_flight_hours', 'max_cycles',
        ]
        # Uniqueness is checked by the service
        extra_kwargs = {'serial_number': {'validators': []}}


class ComponentInstallSerializer(serializers.Serializer):
    """Serializer for installing a component."""

    aircraft_id = serializers.UUIDField()
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ComponentRemoveSerializer(serializers.Serializer):
    """Serializer for removing a component."""

    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
