# services/ledger-service/src/apps/core/models/release_record.py
"""
Release Record Model

Release-to-service certificates. Unsigned records may be edited or
deleted; a signed record is immutable. Issuing a new release retires
the aircraft's previous one through the superseded_by chain.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin, VersionedMixin
from .numbering import next_document_number


class ReleaseRecordQuerySet(models.QuerySet):

    def current(self):
        """Records that are the live release of their aircraft."""
        return self.filter(is_valid=True, superseded_by__isnull=True)


class ReleaseRecord(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin, VersionedMixin, models.Model):
    """
    A release-to-service statement for one aircraft.
    """

    class ReleaseStatus(models.TextChoices):
        GROUNDED = 'grounded', 'Grounded'
        CONDITIONAL = 'conditional', 'Conditional Release'
        FULL = 'full', 'Full Release'

    EDITABLE_FIELDS = ('release_status', 'work_description', 'conditions', 'limitations')

    aircraft = models.ForeignKey(
        'core.Aircraft',
        on_delete=models.PROTECT,
        related_name='release_records'
    )
    work_order = models.ForeignKey(
        'core.WorkOrder',
        on_delete=models.PROTECT,
        related_name='release_records',
        blank=True,
        null=True
    )

    release_certificate_number = models.CharField(max_length=50, unique=True)
    release_status = models.CharField(
        max_length=20,
        choices=ReleaseStatus.choices
    )

    work_description = models.TextField(blank=True, null=True)
    conditions = models.TextField(blank=True, null=True)
    limitations = models.TextField(blank=True, null=True)

    issued_by = models.UUIDField()

    # ==========================================================================
    # Signature
    # ==========================================================================

    signature_hash = models.CharField(max_length=255, blank=True, null=True)
    signed_by = models.UUIDField(blank=True, null=True)
    signed_at = models.DateTimeField(blank=True, null=True)

    # ==========================================================================
    # Supersession
    # ==========================================================================

    is_valid = models.BooleanField(default=True)
    superseded_by = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        related_name='supersedes',
        blank=True,
        null=True
    )
    superseded_at = models.DateTimeField(blank=True, null=True)

    objects = ReleaseRecordQuerySet.as_manager()

    class Meta:
        db_table = 'release_records'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['aircraft', 'is_valid']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['aircraft'],
                condition=Q(is_valid=True, superseded_by__isnull=True),
                name='unique_current_release_per_aircraft',
            ),
        ]

    def __str__(self):
        return f"{self.release_certificate_number} ({self.get_release_status_display()})"

    def save(self, *args, **kwargs):
        if not self.release_certificate_number:
            self.release_certificate_number = next_document_number(
                ReleaseRecord,
                'release_certificate_number',
                settings.RELEASE_CERTIFICATE_PREFIX
            )
        super().save(*args, **kwargs)

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def is_signed(self) -> bool:
        return bool(self.signature_hash)

    @property
    def is_current(self) -> bool:
        return self.is_valid and self.superseded_by_id is None

    # ==========================================================================
    # Workflow Methods
    # ==========================================================================

    def invalidate(self) -> None:
        """Retire this record ahead of its replacement being inserted."""
        self.is_valid = False
        self.superseded_at = timezone.now()
        self.save(update_fields=['is_valid', 'superseded_at', 'updated_at'])

    def link_successor(self, successor: 'ReleaseRecord') -> None:
        self.superseded_by = successor
        self.save(update_fields=['superseded_by', 'updated_at'])

    def sign(self, signature_hash: str, signed_by: uuid.UUID) -> None:
        """Apply the electronic signature; the record is immutable afterwards."""
        self.signature_hash = signature_hash
        self.signed_by = signed_by
        self.signed_at = timezone.now()
        self.save(update_fields=['signature_hash', 'signed_by', 'signed_at', 'updated_at'])

    def deactivate(self) -> None:
        """Delete an unsigned record; it also stops being the aircraft's release."""
        self.is_active = False
        self.is_valid = False
        self.save(update_fields=['is_active', 'is_valid', 'updated_at'])
