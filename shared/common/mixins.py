# shared/common/mixins.py
"""
Abstract model bases shared by ledger records.
"""

import uuid
from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyMixin(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveMixin(models.Model):
    """Records that can be taken out of use without being deleted."""

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Ledger history is never physically removed.

    Deleting a record only hides it from queries that filter on
    ``is_deleted=False``; the row and anything derived from it (usage totals,
    audit trails) stay in place.
    """

    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.UUIDField(null=True, blank=True)

    class Meta:
        abstract = True

    def soft_delete(self, deleted_by=None):
        self.is_deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by = deleted_by
        self.save(update_fields=['is_deleted', 'deleted_at', 'deleted_by', 'updated_at'])


class VersionedMixin(models.Model):
    """
    Optimistic concurrency counter.

    Every save of an existing row bumps ``version``; writers that read a
    version earlier compare it before saving and refuse on mismatch.
    """

    version = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            self.version += 1
            update_fields = kwargs.get('update_fields')
            if update_fields is not None and 'version' not in update_fields:
                kwargs['update_fields'] = [*update_fields, 'version']
        super().save(*args, **kwargs)
