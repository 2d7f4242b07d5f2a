# services/ledger-service/src/apps/api/serializers/aircraft.py
"""
Aircraft Serializers
"""

from rest_framework import serializers

from apps.core.models import Aircraft


class AircraftSerializer(serializers.ModelSerializer):
    """Serializer for Aircraft. Usage counters are read-only."""

    class Meta:
        model = Aircraft
        fields = [
            'id', 'registration', 'serial_number', 'manufacturer', 'model',
            'total_flight_hours', 'total_flight_cycles', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'total_flight_hours', 'total_flight_cycles',
            'created_at', 'updated_at',
        ]


class AircraftStatisticsSerializer(serializers.Serializer):
    """Flight statistics for one aircraft."""

    aircraft_id = serializers.UUIDField()
    registration = serializers.CharField()
    total_flights = serializers.IntegerField()
    total_hours = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_cycles = serializers.IntegerField()
    last_flight_date = serializers.DateField(allow_null=True)
    aircraft_total_flight_hours = serializers.DecimalField(max_digits=10, decimal_places=2)
    aircraft_total_flight_cycles = serializers.IntegerField()
