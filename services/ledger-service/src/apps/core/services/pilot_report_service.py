# services/ledger-service/src/apps/core/services/pilot_report_service.py
"""
Pilot Report Service

Defect reports from flight crew and their escalation to AOG.
"""

import uuid
import logging
from typing import Optional, List

from django.db import transaction

from apps.core.events import event_publisher
from apps.core.models import Aircraft, FlightLog, WorkOrder, PilotReport

logger = logging.getLogger(__name__)


class PilotReportService:
    """
    Service for pilot reports (PIREPs).

    A CRITICAL report always grounds the aircraft; resolving the report
    lifts the AOG in the same transaction.
    """

    EDITABLE_FIELDS = [
        'title', 'description', 'affected_system', 'affected_component', 'severity',
    ]

    # ==========================================================================
    # Reporting
    # ==========================================================================

    @transaction.atomic
    def report_defect(
        self,
        aircraft_id: uuid.UUID,
        reported_by: uuid.UUID,
        title: str,
        description: str,
        severity: str = PilotReport.Severity.LOW,
        is_aog: bool = False,
        flight_log_id: uuid.UUID = None,
        affected_system: Optional[str] = None,
        affected_component: Optional[str] = None
    ) -> PilotReport:
        """File a new pilot report."""
        from . import AircraftNotFoundError, FlightLogNotFoundError, LedgerValidationError

        if not title or not description:
            raise LedgerValidationError("Title and description are required")
        if severity not in PilotReport.Severity.values:
            raise LedgerValidationError(f"Unknown severity: {severity}")

        try:
            aircraft = Aircraft.objects.get(id=aircraft_id, is_active=True)
        except Aircraft.DoesNotExist:
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        flight_log = None
        if flight_log_id:
            try:
                flight_log = FlightLog.objects.get(id=flight_log_id, is_deleted=False)
            except FlightLog.DoesNotExist:
                raise FlightLogNotFoundError(f"Flight log {flight_log_id} not found")
            if flight_log.aircraft_id != aircraft.id:
                raise LedgerValidationError("Flight log belongs to a different aircraft")

        report = PilotReport.objects.create(
            aircraft=aircraft,
            flight_log=flight_log,
            reported_by=reported_by,
            title=title,
            description=description,
            severity=severity,
            is_aog=is_aog or severity == PilotReport.Severity.CRITICAL,
            affected_system=affected_system,
            affected_component=affected_component,
        )

        if report.is_aog:
            event_publisher.aog_raised(report)
            logger.warning(f"AOG raised on {aircraft.registration} by pilot report {report.id}")

        logger.info(f"Pilot report {report.id} filed for {aircraft.registration} ({severity})")
        return report

    # ==========================================================================
    # Workflow
    # ==========================================================================

    @transaction.atomic
    def update_status(
        self,
        report_id: uuid.UUID,
        status: str,
        actor_id: uuid.UUID,
        resolution: Optional[str] = None
    ) -> PilotReport:
        """Move a report through its workflow."""
        from . import LedgerValidationError, PilotReportStateError

        if status not in PilotReport.Status.values:
            raise LedgerValidationError(f"Unknown pilot report status: {status}")

        report = self._lock(report_id)
        # a cancelled report may still be resolved so its AOG can be lifted
        if not (status == PilotReport.Status.RESOLVED and report.status == PilotReport.Status.CANCELLED):
            self._require_not_closed(report)

        if status == PilotReport.Status.WORK_ORDER_CREATED:
            raise PilotReportStateError(
                "Link a work order to move the report to work_order_created",
                current_state=report.status
            )

        if status == PilotReport.Status.RESOLVED:
            was_aog = report.is_aog
            report.resolve(resolved_by=actor_id, resolution=resolution)
            if was_aog:
                event_publisher.aog_cleared(report)
                logger.info(f"AOG cleared on aircraft {report.aircraft_id} by report {report.id}")
        else:
            report.status = status
            update_fields = ['status', 'updated_at']
            if resolution:
                report.resolution = resolution
                update_fields.append('resolution')
            report.save(update_fields=update_fields)

        logger.info(f"Pilot report {report.id} is now {report.status}")
        return report

    @transaction.atomic
    def link_to_work_order(self, report_id: uuid.UUID, work_order_id: uuid.UUID) -> PilotReport:
        """Attach the work order that addresses this report."""
        from . import LedgerValidationError, WorkOrderNotFoundError

        report = self._lock(report_id)
        self._require_not_closed(report)

        try:
            work_order = WorkOrder.objects.get(id=work_order_id, is_deleted=False)
        except WorkOrder.DoesNotExist:
            raise WorkOrderNotFoundError(f"Work order {work_order_id} not found")

        if work_order.aircraft_id != report.aircraft_id:
            raise LedgerValidationError(
                f"Work order {work_order.order_number} belongs to a different aircraft"
            )

        report.work_order = work_order
        report.status = PilotReport.Status.WORK_ORDER_CREATED
        report.save(update_fields=['work_order', 'status', 'updated_at'])

        logger.info(f"Linked pilot report {report.id} to {work_order.order_number}")
        return report

    # ==========================================================================
    # Edit / Delete
    # ==========================================================================

    @transaction.atomic
    def update_report(self, report_id: uuid.UUID, **kwargs) -> PilotReport:
        """Update report details."""
        from . import LedgerValidationError

        unknown = sorted(set(kwargs) - set(self.EDITABLE_FIELDS))
        if unknown:
            raise LedgerValidationError(f"Fields cannot be set: {', '.join(unknown)}")

        severity = kwargs.get('severity')
        if severity is not None and severity not in PilotReport.Severity.values:
            raise LedgerValidationError(f"Unknown severity: {severity}")

        report = self._lock(report_id)
        self._require_not_closed(report)
        was_aog = report.is_aog

        for field, value in kwargs.items():
            setattr(report, field, value)

        if report.severity == PilotReport.Severity.CRITICAL:
            report.is_aog = True

        report.save()

        if report.is_aog and not was_aog:
            event_publisher.aog_raised(report)
            logger.warning(
                f"AOG raised on aircraft {report.aircraft_id} by escalated report {report.id}"
            )

        return report

    @transaction.atomic
    def delete_report(self, report_id: uuid.UUID, deleted_by: uuid.UUID = None) -> None:
        """Soft delete a report. An active AOG report must be resolved first."""
        report = self._lock(report_id)

        if report.is_aog and not report.is_closed:
            from . import PilotReportStateError
            raise PilotReportStateError(
                "Resolve the AOG report before deleting it",
                required_state=PilotReport.Status.RESOLVED,
                current_state=report.status
            )

        report.soft_delete(deleted_by)
        logger.info(f"Deleted pilot report {report.id}")

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_report(self, report_id: uuid.UUID) -> PilotReport:
        """Get a live report by ID."""
        try:
            return PilotReport.objects.get(id=report_id, is_deleted=False)
        except PilotReport.DoesNotExist:
            from . import PilotReportNotFoundError
            raise PilotReportNotFoundError(f"Pilot report {report_id} not found")

    def list_reports(
        self,
        aircraft_id: uuid.UUID = None,
        status: str = None,
        is_aog: bool = None
    ) -> List[PilotReport]:
        """List live reports with filters."""
        queryset = PilotReport.objects.filter(is_deleted=False)

        if aircraft_id:
            queryset = queryset.filter(aircraft_id=aircraft_id)
        if status:
            queryset = queryset.filter(status=status)
        if is_aog is not None:
            queryset = queryset.filter(is_aog=is_aog)

        return list(queryset.order_by('-created_at'))

    def find_open(self, aircraft_id: uuid.UUID = None) -> List[PilotReport]:
        """Reports not yet resolved or cancelled."""
        queryset = PilotReport.objects.filter(is_deleted=False).exclude(
            status__in=PilotReport.TERMINAL_STATUSES
        )
        if aircraft_id:
            queryset = queryset.filter(aircraft_id=aircraft_id)
        return list(queryset.order_by('-created_at'))

    def find_aog(self, aircraft_id: uuid.UUID = None) -> List[PilotReport]:
        """Open reports holding an aircraft on ground."""
        return [report for report in self.find_open(aircraft_id) if report.is_aog]

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _lock(self, report_id: uuid.UUID) -> PilotReport:
        try:
            return PilotReport.objects.select_for_update().get(id=report_id, is_deleted=False)
        except PilotReport.DoesNotExist:
            from . import PilotReportNotFoundError
            raise PilotReportNotFoundError(f"Pilot report {report_id} not found")

    def _require_not_closed(self, report: PilotReport) -> None:
        if report.is_closed:
            from . import PilotReportStateError
            logger.warning(f"Rejected change to closed pilot report {report.id}")
            raise PilotReportStateError(
                f"Pilot report is {report.status}",
                current_state=report.status
            )
