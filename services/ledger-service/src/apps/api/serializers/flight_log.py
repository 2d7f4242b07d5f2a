# services/ledger-service/src/apps/api/serializers/flight_log.py
"""
Flight Log Serializers
"""

from rest_framework import serializers

from apps.core.models import FlightLog


class FlightLogSerializer(serializers.ModelSerializer):
    """Serializer for FlightLog."""

    flight_type_display = serializers.CharField(
        source='get_flight_type_display',
        read_only=True
    )
    total_cycles = serializers.IntegerField(read_only=True)

    class Meta:
        model = FlightLog
        fields = [
            'id', 'aircraft_id', 'pilot_id', 'copilot_id',
            'flight_type', 'flight_type_display', 'flight_date',
            'departure_location', 'arrival_location',
            'departure_time', 'arrival_time', 'flight_duration',
            'flight_hours', 'takeoff_cycles', 'landing_cycles', 'total_cycles',
            'aircraft_hours_before', 'aircraft_hours_after',
            'aircraft_cycles_before', 'aircraft_cycles_after',
            'mission_description', 'payload_weight',
            'pre_flight_check_completed', 'pre_flight_check_by',
            'post_flight_notes', 'discrepancies',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class FlightLogCreateSerializer(serializers.Serializer):
    """Serializer for recording a flight."""

    aircraft_id = serializers.UUIDField()
    pilot_id = serializers.UUIDField(required=False)
    copilot_id = serializers.UUIDField(required=False, allow_null=True)
    flight_type = serializers.ChoiceField(
        choices=FlightLog.FlightType.choices,
        required=False
    )
    flight_date = serializers.DateField()
    flight_hours = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=0
    )
    takeoff_cycles = serializers.IntegerField(required=False, min_value=0)
    landing_cycles = serializers.IntegerField(required=False, min_value=0)

    departure_location = serializers.CharField(required=False, allow_blank=True, max_length=100)
    arrival_location = serializers.CharField(required=False, allow_blank=True, max_length=100)
    departure_time = serializers.DateTimeField(required=False, allow_null=True)
    arrival_time = serializers.DateTimeField(required=False, allow_null=True)
    flight_duration = serializers.IntegerField(required=False, allow_null=True, min_value=0)

    mission_description = serializers.CharField(required=False, allow_blank=True)
    payload_weight = serializers.DecimalField(
        max_digits=8, decimal_places=2, required=False, allow_null=True
    )
    pre_flight_check_completed = serializers.BooleanField(required=False)
    pre_flight_check_by = serializers.UUIDField(required=False, allow_null=True)
    post_flight_notes = serializers.CharField(required=False, allow_blank=True)
    discrepancies = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        departure = attrs.get('departure_time')
        arrival = attrs.get('arrival_time')
        if departure and arrival and arrival < departure:
            raise serializers.ValidationError({'arrival_time': 'Arrival must be after departure'})
        return attrs


class FlightLogUpdateSerializer(serializers.ModelSerializer):
    """Serializer for correcting a flight log. Snapshot fields are excluded."""

    class Meta:
        model = FlightLog
        fields = [
            'pilot_id', 'copilot_id', 'flight_type', 'flight_date',
            'departure_location', 'arrival_location',
            'departure_time', 'arrival_time', 'flight_duration',
            'flight_hours', 'takeoff_cycles', 'landing_cycles',
            'mission_description', 'payload_weight',
            'pre_flight_check_completed', 'pre_flight_check_by',
            'post_flight_notes', 'discrepancies',
        ]


class FlightLogQuerySerializer(serializers.Serializer):
    """Query parameters for listing flight logs."""

    aircraft_id = serializers.UUIDField(required=False)
    pilot_id = serializers.UUIDField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
