# services/ledger-service/src/apps/core/models/flight_log.py
"""
Flight Log Model

One record per flight, with a snapshot of the aircraft counters
before and after the flight.
"""

from django.db import models

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin


class FlightLog(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, models.Model):
    """
    A logged flight.

    Created once per flight. Deleting only marks the record deleted and
    never reverses the counters it propagated.
    """

    class FlightType(models.TextChoices):
        OPERATION = 'operation', 'Operation'
        TRAINING = 'training', 'Training'
        TEST = 'test', 'Test Flight'
        FERRY = 'ferry', 'Ferry'
        DELIVERY = 'delivery', 'Delivery'

    aircraft = models.ForeignKey(
        'core.Aircraft',
        on_delete=models.PROTECT,
        related_name='flight_logs'
    )
    pilot_id = models.UUIDField(db_index=True)
    copilot_id = models.UUIDField(blank=True, null=True)

    flight_type = models.CharField(
        max_length=20,
        choices=FlightType.choices,
        default=FlightType.OPERATION
    )
    flight_date = models.DateField(db_index=True)

    # ==========================================================================
    # Route
    # ==========================================================================

    departure_location = models.CharField(max_length=100, blank=True, null=True)
    arrival_location = models.CharField(max_length=100, blank=True, null=True)
    departure_time = models.DateTimeField(blank=True, null=True)
    arrival_time = models.DateTimeField(blank=True, null=True)

    # ==========================================================================
    # Usage
    # ==========================================================================

    flight_duration = models.PositiveIntegerField(
        blank=True,
        null=True,
        help_text='Block time in minutes'
    )
    flight_hours = models.DecimalField(max_digits=6, decimal_places=2)
    takeoff_cycles = models.PositiveIntegerField(default=1)
    landing_cycles = models.PositiveIntegerField(default=1)

    # ==========================================================================
    # Counter Snapshot
    # ==========================================================================

    aircraft_hours_before = models.DecimalField(max_digits=10, decimal_places=2)
    aircraft_hours_after = models.DecimalField(max_digits=10, decimal_places=2)
    aircraft_cycles_before = models.PositiveIntegerField()
    aircraft_cycles_after = models.PositiveIntegerField()

    # ==========================================================================
    # Mission
    # ==========================================================================

    mission_description = models.TextField(blank=True, null=True)
    payload_weight = models.DecimalField(
        max_digits=8, decimal_places=2, blank=True, null=True
    )
    pre_flight_check_completed = models.BooleanField(default=False)
    pre_flight_check_by = models.UUIDField(blank=True, null=True)
    post_flight_notes = models.TextField(blank=True, null=True)
    discrepancies = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'flight_logs'
        ordering = ['-flight_date', '-created_at']
        indexes = [
            models.Index(fields=['aircraft', 'flight_date']),
            models.Index(fields=['pilot_id', 'flight_date']),
        ]

    def __str__(self):
        return f"{self.aircraft_id} {self.flight_date} ({self.flight_hours}h)"

    @property
    def total_cycles(self) -> int:
        return self.takeoff_cycles + self.landing_cycles
