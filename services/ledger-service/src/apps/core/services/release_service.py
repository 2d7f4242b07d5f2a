# services/ledger-service/src/apps/core/services/release_service.py
"""
Release Service

Release-to-service records: issuing, signing and supersession. The
current signed release is the single answer to whether an aircraft
may fly.
"""

import uuid
import logging
from typing import Optional, Dict, Any, List

from django.db import transaction

from common.constants import UserRole
from apps.core.events import event_publisher
from apps.core.models import Aircraft, WorkOrder, ReleaseRecord, PilotReport
from .authorization import Authorizer, DenyAllAuthorizer, require_any_role

logger = logging.getLogger(__name__)


class ReleaseService:
    """
    Service for release records.

    Handles:
    - Issuing (supersedes the current release)
    - Editing and deleting unsigned records
    - Signing
    - Airworthiness queries
    """

    ISSUER_ROLES = (UserRole.INSPECTOR, UserRole.MANAGER, UserRole.ADMIN)
    SIGNER_ROLES = (UserRole.INSPECTOR, UserRole.ADMIN)

    def __init__(self, authorizer: Authorizer = None):
        self.authorizer = authorizer or DenyAllAuthorizer()

    # ==========================================================================
    # Issue
    # ==========================================================================

    @transaction.atomic
    def issue_release(
        self,
        aircraft_id: uuid.UUID,
        issued_by: uuid.UUID,
        release_status: str,
        work_order_id: uuid.UUID = None,
        work_description: str = None,
        conditions: Optional[str] = None,
        limitations: Optional[str] = None
    ) -> ReleaseRecord:
        """Issue a new unsigned release, superseding the current one."""
        from . import AircraftNotFoundError, LedgerValidationError

        require_any_role(self.authorizer, issued_by, self.ISSUER_ROLES, 'Issuing a release')

        if release_status not in ReleaseRecord.ReleaseStatus.values:
            raise LedgerValidationError(f"Unknown release status: {release_status}")

        try:
            aircraft = Aircraft.objects.select_for_update().get(id=aircraft_id, is_active=True)
        except Aircraft.DoesNotExist:
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        work_order = None
        if work_order_id:
            work_order = self._get_release_work_order(work_order_id, aircraft)

        if release_status == ReleaseRecord.ReleaseStatus.FULL:
            self._check_no_active_aog(aircraft)

        previous = (
            ReleaseRecord.objects
            .select_for_update()
            .current()
            .filter(aircraft=aircraft)
            .first()
        )

        # The old record must leave the current set before the new one enters it
        if previous is not None:
            previous.invalidate()

        release = ReleaseRecord.objects.create(
            aircraft=aircraft,
            work_order=work_order,
            release_status=release_status,
            work_description=work_description,
            conditions=conditions,
            limitations=limitations,
            issued_by=issued_by,
        )

        if previous is not None:
            previous.link_successor(release)
            event_publisher.release_superseded(previous, release)
            logger.info(
                f"Release {previous.release_certificate_number} superseded by "
                f"{release.release_certificate_number}"
            )

        event_publisher.release_issued(release)
        logger.info(
            f"Issued release {release.release_certificate_number} "
            f"({release.release_status}) for {aircraft.registration}"
        )
        return release

    # ==========================================================================
    # Edit / Delete
    # ==========================================================================

    @transaction.atomic
    def update_release(
        self,
        release_id: uuid.UUID,
        expected_version: Optional[int] = None,
        **kwargs
    ) -> ReleaseRecord:
        """Update an unsigned release."""
        from . import ConflictError, LedgerValidationError

        unknown = sorted(set(kwargs) - set(ReleaseRecord.EDITABLE_FIELDS))
        if unknown:
            raise LedgerValidationError(f"Fields cannot be set: {', '.join(unknown)}")

        release = self._lock(release_id)
        self._require_unsigned(release, 'updated')

        if expected_version is not None and expected_version != release.version:
            logger.warning(
                f"Stale update of release {release.release_certificate_number}: "
                f"expected version {expected_version}, found {release.version}"
            )
            raise ConflictError(
                f"Release {release.release_certificate_number} was modified "
                f"(version {release.version}, expected {expected_version})"
            )

        new_status = kwargs.get('release_status')
        if new_status is not None:
            if new_status not in ReleaseRecord.ReleaseStatus.values:
                raise LedgerValidationError(f"Unknown release status: {new_status}")
            if new_status == ReleaseRecord.ReleaseStatus.FULL and release.is_current:
                self._check_no_active_aog(release.aircraft)

        for field, value in kwargs.items():
            setattr(release, field, value)

        release.save()
        return release

    @transaction.atomic
    def delete_release(self, release_id: uuid.UUID) -> None:
        """Deactivate an unsigned release."""
        release = self._lock(release_id)
        self._require_unsigned(release, 'deleted')

        release.deactivate()
        logger.info(f"Deleted release {release.release_certificate_number}")

    # ==========================================================================
    # Sign
    # ==========================================================================

    @transaction.atomic
    def sign_release(
        self,
        release_id: uuid.UUID,
        signature_hash: str,
        signed_by: uuid.UUID
    ) -> ReleaseRecord:
        """Sign the current release. Signed records are immutable."""
        from . import LedgerValidationError, ReleaseStateError

        release = self._lock(release_id)
        self._require_unsigned(release, 'signed again')

        require_any_role(self.authorizer, signed_by, self.SIGNER_ROLES, 'Signing a release')

        if not signature_hash:
            raise LedgerValidationError("Signature hash is required")

        if not release.is_current:
            logger.warning(
                f"Rejected signature of non-current release {release.release_certificate_number}"
            )
            raise ReleaseStateError(
                f"Release {release.release_certificate_number} has been superseded",
                required_state='current',
                current_state='superseded'
            )

        release.sign(signature_hash, signed_by)
        event_publisher.release_signed(release)
        logger.info(f"Release {release.release_certificate_number} signed by {signed_by}")
        return release

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_release(self, release_id: uuid.UUID) -> ReleaseRecord:
        """Get an active release by ID."""
        try:
            return ReleaseRecord.objects.select_related('aircraft').get(
                id=release_id, is_active=True
            )
        except ReleaseRecord.DoesNotExist:
            from . import ReleaseNotFoundError
            raise ReleaseNotFoundError(f"Release {release_id} not found")

    def get_current_release(self, aircraft_id: uuid.UUID) -> Optional[ReleaseRecord]:
        """The aircraft's current release, signed or not."""
        return ReleaseRecord.objects.current().filter(aircraft_id=aircraft_id).first()

    def is_aircraft_released(self, aircraft_id: uuid.UUID) -> bool:
        """True when the current release exists and is signed."""
        release = self.get_current_release(aircraft_id)
        return release is not None and release.is_signed

    def list_releases(self, aircraft_id: uuid.UUID = None) -> List[ReleaseRecord]:
        """Active releases, newest first."""
        queryset = ReleaseRecord.objects.filter(is_active=True)
        if aircraft_id:
            queryset = queryset.filter(aircraft_id=aircraft_id)
        return list(queryset.order_by('-created_at'))

    def list_for_work_order(self, work_order_id: uuid.UUID) -> List[ReleaseRecord]:
        return list(
            ReleaseRecord.objects.filter(work_order_id=work_order_id, is_active=True)
            .order_by('-created_at')
        )

    def get_airworthiness(self, aircraft_id: uuid.UUID) -> Dict[str, Any]:
        """
        Derived airworthiness of an aircraft.

        Airworthy means the current release is signed, is not GROUNDED and
        no pilot report holds the aircraft on ground.
        """
        if not Aircraft.objects.filter(id=aircraft_id).exists():
            from . import AircraftNotFoundError
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        release = self.get_current_release(aircraft_id)
        released = release is not None and release.is_signed
        aog_reports = list(self._active_aog_reports(aircraft_id))

        return {
            'aircraft_id': aircraft_id,
            'released': released,
            'release_status': release.release_status if release else None,
            'current_release': release,
            'aog_reports': aog_reports,
            'airworthy': (
                released
                and release.release_status != ReleaseRecord.ReleaseStatus.GROUNDED
                and not aog_reports
            ),
        }

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _lock(self, release_id: uuid.UUID) -> ReleaseRecord:
        try:
            return ReleaseRecord.objects.select_for_update().get(id=release_id, is_active=True)
        except ReleaseRecord.DoesNotExist:
            from . import ReleaseNotFoundError
            raise ReleaseNotFoundError(f"Release {release_id} not found")

    def _require_unsigned(self, release: ReleaseRecord, action: str) -> None:
        if release.is_signed:
            from . import ReleaseSignedError
            logger.warning(
                f"Rejected change to signed release {release.release_certificate_number}"
            )
            raise ReleaseSignedError(
                f"Release {release.release_certificate_number} is signed and cannot be {action}"
            )

    def _get_release_work_order(self, work_order_id: uuid.UUID, aircraft: Aircraft) -> WorkOrder:
        from . import LedgerValidationError, WorkOrderNotFoundError, WorkOrderStateError

        try:
            work_order = WorkOrder.objects.get(id=work_order_id, is_deleted=False)
        except WorkOrder.DoesNotExist:
            raise WorkOrderNotFoundError(f"Work order {work_order_id} not found")

        if work_order.aircraft_id != aircraft.id:
            raise LedgerValidationError(
                f"Work order {work_order.order_number} belongs to a different aircraft"
            )

        if work_order.status not in (WorkOrder.Status.COMPLETED, WorkOrder.Status.RELEASED):
            raise WorkOrderStateError(
                f"Work order {work_order.order_number} is {work_order.status}",
                required_state='completed or released',
                current_state=work_order.status
            )

        return work_order

    def _active_aog_reports(self, aircraft_id: uuid.UUID):
        return (
            PilotReport.objects
            .filter(aircraft_id=aircraft_id, is_aog=True, is_deleted=False)
            .exclude(status__in=PilotReport.TERMINAL_STATUSES)
            .order_by('-created_at')
        )

    def _check_no_active_aog(self, aircraft: Aircraft) -> None:
        if self._active_aog_reports(aircraft.id).exists():
            from . import ReleaseStateError
            logger.warning(f"Refused full release of {aircraft.registration}: active AOG report")
            raise ReleaseStateError(
                f"Aircraft {aircraft.registration} has an active AOG pilot report",
                required_state='no active AOG',
                current_state='aog'
            )
