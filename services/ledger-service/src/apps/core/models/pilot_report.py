# services/ledger-service/src/apps/core/models/pilot_report.py
"""
Pilot Report Model

Defects reported by flight crew (PIREPs). A report can put the
aircraft on ground (AOG) until it is resolved.
"""

import uuid
from typing import Optional

from django.db import models
from django.utils import timezone

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin


class PilotReport(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, models.Model):
    """
    A pilot-reported defect.
    """

    class Severity(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        CRITICAL = 'critical', 'Critical'

    class Status(models.TextChoices):
        OPEN = 'open', 'Open'
        ACKNOWLEDGED = 'acknowledged', 'Acknowledged'
        INVESTIGATING = 'investigating', 'Investigating'
        WORK_ORDER_CREATED = 'work_order_created', 'Work Order Created'
        RESOLVED = 'resolved', 'Resolved'
        CANCELLED = 'cancelled', 'Cancelled'

    TERMINAL_STATUSES = (Status.RESOLVED, Status.CANCELLED)

    aircraft = models.ForeignKey(
        'core.Aircraft',
        on_delete=models.PROTECT,
        related_name='pilot_reports'
    )
    flight_log = models.ForeignKey(
        'core.FlightLog',
        on_delete=models.SET_NULL,
        related_name='pilot_reports',
        blank=True,
        null=True
    )
    reported_by = models.UUIDField(db_index=True)

    title = models.CharField(max_length=255)
    description = models.TextField()
    affected_system = models.CharField(max_length=100, blank=True, null=True)
    affected_component = models.CharField(max_length=100, blank=True, null=True)

    severity = models.CharField(
        max_length=20,
        choices=Severity.choices,
        default=Severity.LOW
    )
    status = models.CharField(
        max_length=30,
        choices=Status.choices,
        default=Status.OPEN,
        db_index=True
    )
    is_aog = models.BooleanField(default=False, db_index=True)

    work_order = models.ForeignKey(
        'core.WorkOrder',
        on_delete=models.SET_NULL,
        related_name='pilot_reports',
        blank=True,
        null=True
    )

    # Resolution
    resolution = models.TextField(blank=True, null=True)
    resolved_at = models.DateTimeField(blank=True, null=True)
    resolved_by = models.UUIDField(blank=True, null=True)

    class Meta:
        db_table = 'pilot_reports'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['aircraft', 'status']),
            models.Index(fields=['severity']),
        ]

    def __str__(self):
        return f"PIREP {self.title} ({self.get_severity_display()})"

    @property
    def is_closed(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def resolve(self, resolved_by: uuid.UUID, resolution: Optional[str] = None) -> None:
        """Resolve the report and lift any AOG it imposed."""
        self.status = self.Status.RESOLVED
        self.is_aog = False
        self.resolved_at = timezone.now()
        self.resolved_by = resolved_by
        if resolution:
            self.resolution = resolution
        self.save(update_fields=[
            'status', 'is_aog', 'resolved_at', 'resolved_by', 'resolution', 'updated_at'
        ])
