# services/ledger-service/src/apps/core/models/work_order.py
"""
Work Order Model

Maintenance work orders and their tasks, including Required
Inspection Items (RII) that only an inspector may close.
"""

import uuid
from typing import Optional

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin
from .numbering import next_document_number


class WorkOrder(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, models.Model):
    """
    A maintenance job against one aircraft.

    DRAFT -> OPEN -> IN_PROGRESS -> COMPLETED -> RELEASED, with CANCELLED
    reachable from DRAFT, OPEN and IN_PROGRESS.
    """

    class Status(models.TextChoices):
        DRAFT = 'draft', 'Draft'
        OPEN = 'open', 'Open'
        IN_PROGRESS = 'in_progress', 'In Progress'
        COMPLETED = 'completed', 'Completed'
        RELEASED = 'released', 'Released'
        CANCELLED = 'cancelled', 'Cancelled'

    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        CRITICAL = 'critical', 'Critical'

    class WorkOrderType(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled Maintenance'
        INSPECTION = 'inspection', 'Inspection'
        REPAIR = 'repair', 'Repair'
        MODIFICATION = 'modification', 'Modification'
        EMERGENCY = 'emergency', 'Emergency'

    OPEN_STATUSES = (Status.DRAFT, Status.OPEN, Status.IN_PROGRESS)
    CLOSED_STATUSES = (Status.COMPLETED, Status.RELEASED, Status.CANCELLED)

    aircraft = models.ForeignKey(
        'core.Aircraft',
        on_delete=models.PROTECT,
        related_name='work_orders'
    )

    # ==========================================================================
    # Identification
    # ==========================================================================

    order_number = models.CharField(max_length=50, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    reason = models.TextField(blank=True, null=True)

    work_order_type = models.CharField(
        max_length=20,
        choices=WorkOrderType.choices
    )
    priority = models.CharField(
        max_length=20,
        choices=Priority.choices,
        default=Priority.MEDIUM
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True
    )

    # ==========================================================================
    # Planning
    # ==========================================================================

    scheduled_start = models.DateTimeField(blank=True, null=True)
    scheduled_end = models.DateTimeField(blank=True, null=True)

    # ==========================================================================
    # Assignment
    # ==========================================================================

    assigned_to = models.UUIDField(blank=True, null=True, db_index=True)
    assigned_at = models.DateTimeField(blank=True, null=True)

    # ==========================================================================
    # Aircraft counters when the order was raised
    # ==========================================================================

    aircraft_hours_at_creation = models.DecimalField(
        max_digits=10, decimal_places=2, blank=True, null=True
    )
    aircraft_cycles_at_creation = models.PositiveIntegerField(blank=True, null=True)

    # ==========================================================================
    # Result
    # ==========================================================================

    started_at = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    completed_by = models.UUIDField(blank=True, null=True)
    completion_notes = models.TextField(blank=True, null=True)
    discrepancies = models.TextField(blank=True, null=True)

    released_at = models.DateTimeField(blank=True, null=True)
    released_by = models.UUIDField(blank=True, null=True)

    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancellation_reason = models.TextField(blank=True, null=True)

    created_by = models.UUIDField(blank=True, null=True)

    class Meta:
        db_table = 'work_orders'
        ordering = ['-created_at']
        verbose_name = 'Work Order'
        verbose_name_plural = 'Work Orders'
        indexes = [
            models.Index(fields=['aircraft', 'status']),
            models.Index(fields=['priority']),
        ]

    def __str__(self):
        return f"{self.order_number}: {self.title}"

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = next_document_number(
                WorkOrder, 'order_number', settings.WORK_ORDER_NUMBER_PREFIX
            )
        super().save(*args, **kwargs)

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES

    # ==========================================================================
    # Workflow Methods
    # ==========================================================================

    def assign(self, user_id: uuid.UUID) -> None:
        """Assign the work order; a draft becomes open."""
        self.assigned_to = user_id
        self.assigned_at = timezone.now()
        if self.status == self.Status.DRAFT:
            self.status = self.Status.OPEN
        self.save(update_fields=['assigned_to', 'assigned_at', 'status', 'updated_at'])

    def start(self) -> None:
        """Start work on the work order."""
        self.status = self.Status.IN_PROGRESS
        self.started_at = timezone.now()
        self.save(update_fields=['status', 'started_at', 'updated_at'])

    def complete(self, completed_by: uuid.UUID, notes: Optional[str] = None) -> None:
        """Complete the work order."""
        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.completed_by = completed_by
        self.completion_notes = notes
        self.save(update_fields=[
            'status', 'completed_at', 'completed_by', 'completion_notes', 'updated_at'
        ])

    def release(self, released_by: uuid.UUID) -> None:
        """Release the completed work order."""
        self.status = self.Status.RELEASED
        self.released_at = timezone.now()
        self.released_by = released_by
        self.save(update_fields=['status', 'released_at', 'released_by', 'updated_at'])

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel the work order."""
        self.status = self.Status.CANCELLED
        self.cancelled_at = timezone.now()
        self.cancellation_reason = reason
        self.save(update_fields=['status', 'cancelled_at', 'cancellation_reason', 'updated_at'])


class WorkOrderTask(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Individual task within a work order.

    signed_off_by / signed_off_at are only ever set on RII tasks,
    and only by sign_off().
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        IN_PROGRESS = 'in_progress', 'In Progress'
        COMPLETED = 'completed', 'Completed'

    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.CASCADE,
        related_name='tasks'
    )

    # Task details
    sequence = models.PositiveIntegerField(default=0)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    instructions = models.TextField(blank=True, null=True)
    required_tools = models.JSONField(default=list, blank=True)

    is_rii = models.BooleanField(
        default=False,
        help_text='Required Inspection Item: must be signed off by an inspector'
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    result = models.TextField(blank=True, null=True)
    notes = models.TextField(blank=True, null=True)

    started_at = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    completed_by = models.UUIDField(blank=True, null=True)

    # RII sign-off
    signed_off_by = models.UUIDField(blank=True, null=True)
    signed_off_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'work_order_tasks'
        ordering = ['work_order', 'sequence']

    def __str__(self):
        return f"{self.work_order.order_number} - {self.sequence}: {self.title}"

    @property
    def is_signed_off(self) -> bool:
        return self.signed_off_by is not None

    def start(self) -> None:
        """Move the task to in progress."""
        self.status = self.Status.IN_PROGRESS
        if self.started_at is None:
            self.started_at = timezone.now()
        self.save(update_fields=['status', 'started_at', 'updated_at'])

    def reset(self) -> None:
        """Return the task to pending."""
        self.status = self.Status.PENDING
        self.completed_at = None
        self.completed_by = None
        self.save(update_fields=['status', 'completed_at', 'completed_by', 'updated_at'])

    def complete(self, completed_by: uuid.UUID) -> None:
        """Mark a non-RII task as completed."""
        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.completed_by = completed_by
        self.save(update_fields=['status', 'completed_at', 'completed_by', 'updated_at'])

    def sign_off(self, inspector_id: uuid.UUID) -> None:
        """Inspector sign-off; closes an RII task."""
        now = timezone.now()
        self.status = self.Status.COMPLETED
        self.signed_off_by = inspector_id
        self.signed_off_at = now
        self.completed_at = now
        if self.started_at is None:
            self.started_at = now
        self.save(update_fields=[
            'status', 'signed_off_by', 'signed_off_at', 'completed_at',
            'started_at', 'updated_at'
        ])
