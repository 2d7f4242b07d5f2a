# services/ledger-service/src/apps/core/models/component.py
"""
Component Models

Removable parts and their installation periods on aircraft.
"""

import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class Component(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin, models.Model):
    """
    A serialised, removable part.

    A component never points at an aircraft. Where it is installed is
    answered by its open ComponentInstallation, if any.
    """

    part_number = models.CharField(max_length=50)
    serial_number = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    manufacturer = models.CharField(max_length=100, blank=True, null=True)

    total_flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0
    )
    total_flight_cycles = models.PositiveIntegerField(default=0)

    # ==========================================================================
    # Life Limits
    # ==========================================================================

    is_life_limited = models.BooleanField(default=False)
    max_flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        blank=True,
        null=True,
        help_text="Hours at which the part must be replaced"
    )
    max_cycles = models.PositiveIntegerField(
        blank=True,
        null=True,
        help_text="Cycles at which the part must be replaced"
    )

    is_airworthy = models.BooleanField(default=True)

    class Meta:
        db_table = 'components'
        ordering = ['part_number', 'serial_number']
        indexes = [
            models.Index(fields=['part_number']),
        ]

    def __str__(self):
        return f"{self.part_number} S/N {self.serial_number}"

    @property
    def current_installation(self):
        return self.installations.filter(removed_at__isnull=True).first()


class ComponentInstallation(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    One installation period of a component on an aircraft.

    An open period (removed_at is null) means the component is currently
    installed and accrues every flight of that aircraft.
    """

    component = models.ForeignKey(
        Component,
        on_delete=models.PROTECT,
        related_name='installations'
    )
    aircraft = models.ForeignKey(
        'core.Aircraft',
        on_delete=models.PROTECT,
        related_name='installations'
    )
    location = models.CharField(max_length=100, blank=True, null=True)

    # Component totals at install time
    inherited_flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0
    )
    inherited_flight_cycles = models.PositiveIntegerField(default=0)

    # Accrued during this installation
    flight_hours = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0
    )
    flight_cycles = models.PositiveIntegerField(default=0)

    installed_at = models.DateTimeField(default=timezone.now)
    installed_by = models.UUIDField(blank=True, null=True)
    install_notes = models.TextField(blank=True, null=True)

    removed_at = models.DateTimeField(blank=True, null=True)
    removed_by = models.UUIDField(blank=True, null=True)
    remove_notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'component_installations'
        ordering = ['-installed_at']
        indexes = [
            models.Index(fields=['aircraft', 'removed_at']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['component'],
                condition=Q(removed_at__isnull=True),
                name='unique_open_installation_per_component',
            ),
        ]

    def __str__(self):
        return f"{self.component} on {self.aircraft}"

    @property
    def is_installed(self) -> bool:
        return self.removed_at is None

    def close(self, removed_by: uuid.UUID = None, notes: str = None) -> None:
        """End this installation period."""
        self.removed_at = timezone.now()
        self.removed_by = removed_by
        self.remove_notes = notes
        self.save(update_fields=['removed_at', 'removed_by', 'remove_notes', 'updated_at'])

