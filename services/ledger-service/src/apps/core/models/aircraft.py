# services/ledger-service/src/apps/core/models/aircraft.py
"""
Aircraft Model

Airframe identity and cumulative usage counters.
"""

from django.db import models

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class Aircraft(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin, models.Model):
    """
    An airframe operated by the fleet.

    Counters are written only by the metrics propagator. Airworthiness is
    derived from the current release record, it is not stored here.
    """

    registration = models.CharField(max_length=20, unique=True)
    serial_number = models.CharField(max_length=50, blank=True, null=True)
    manufacturer = models.CharField(max_length=100, blank=True, null=True)
    model = models.CharField(max_length=100, blank=True, null=True)

    # ==========================================================================
    # Usage Counters
    # ==========================================================================

    total_flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0
    )
    total_flight_cycles = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'aircraft'
        ordering = ['registration']
        verbose_name = 'Aircraft'
        verbose_name_plural = 'Aircraft'

    def __str__(self):
        return self.registration
