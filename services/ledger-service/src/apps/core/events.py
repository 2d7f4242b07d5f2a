# services/ledger-service/src/apps/core/events.py
"""
Ledger Service Events

Domain events raised by the ledger. Services hand them to
transaction.on_commit so a rolled-back unit never publishes.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Any
from uuid import UUID

from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


class DecimalEncoder(json.JSONEncoder):
    """Custom JSON encoder for Decimal types."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


class LedgerEventTypes:
    """Event type constants for the ledger service."""

    # Flight Events
    FLIGHT_RECORDED = 'ledger.flight.recorded'

    # Work Order Events
    WORK_ORDER_CREATED = 'ledger.work_order.created'
    WORK_ORDER_ASSIGNED = 'ledger.work_order.assigned'
    WORK_ORDER_STARTED = 'ledger.work_order.started'
    WORK_ORDER_COMPLETED = 'ledger.work_order.completed'
    WORK_ORDER_RELEASED = 'ledger.work_order.released'
    WORK_ORDER_CANCELLED = 'ledger.work_order.cancelled'

    # Task Events
    TASK_SIGNED_OFF = 'ledger.task.signed_off'

    # Release Events
    RELEASE_ISSUED = 'ledger.release.issued'
    RELEASE_SIGNED = 'ledger.release.signed'
    RELEASE_SUPERSEDED = 'ledger.release.superseded'

    # Aircraft Status Events
    AOG_RAISED = 'ledger.aircraft.aog_raised'
    AOG_CLEARED = 'ledger.aircraft.aog_cleared'


class LedgerEventPublisher:
    """
    Publisher for ledger events.

    Events are serialized to JSON and written to the service log.
    """

    service_name = 'ledger-service'

    def _serialize_event(self, event_type: str, data: Dict[str, Any]) -> str:
        """Serialize event to JSON."""
        event = {
            'event_type': event_type,
            'timestamp': timezone.now().isoformat(),
            'service': self.service_name,
            'data': data,
        }
        return json.dumps(event, cls=DecimalEncoder)

    def publish(self, event_type: str, data: Dict[str, Any]) -> bool:
        """Publish an event."""
        try:
            message = self._serialize_event(event_type, data)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize event {event_type}: {e}")
            return False

        logger.info(f"Publishing event: {event_type}")
        logger.debug(f"Event data: {message}")
        return True

    def publish_on_commit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Publish once the surrounding transaction commits."""
        transaction.on_commit(lambda: self.publish(event_type, data))

    # ==========================================================================
    # Flight Events
    # ==========================================================================

    def flight_recorded(self, flight_log, propagation) -> None:
        self.publish_on_commit(LedgerEventTypes.FLIGHT_RECORDED, {
            'flight_log_id': flight_log.id,
            'aircraft_id': flight_log.aircraft_id,
            'pilot_id': flight_log.pilot_id,
            'flight_date': flight_log.flight_date,
            'flight_hours': flight_log.flight_hours,
            'cycles': propagation.cycles,
            'aircraft_hours_after': flight_log.aircraft_hours_after,
            'aircraft_cycles_after': flight_log.aircraft_cycles_after,
            'components_updated': propagation.components_updated,
        })

    # ==========================================================================
    # Work Order Events
    # ==========================================================================

    def work_order_changed(self, event_type: str, work_order) -> None:
        self.publish_on_commit(event_type, {
            'work_order_id': work_order.id,
            'order_number': work_order.order_number,
            'aircraft_id': work_order.aircraft_id,
            'status': work_order.status,
            'assigned_to': work_order.assigned_to,
        })

    def task_signed_off(self, task) -> None:
        self.publish_on_commit(LedgerEventTypes.TASK_SIGNED_OFF, {
            'task_id': task.id,
            'work_order_id': task.work_order_id,
            'signed_off_by': task.signed_off_by,
            'signed_off_at': task.signed_off_at,
        })

    # ==========================================================================
    # Release Events
    # ==========================================================================

    def release_issued(self, release) -> None:
        self.publish_on_commit(LedgerEventTypes.RELEASE_ISSUED, {
            'release_id': release.id,
            'aircraft_id': release.aircraft_id,
            'certificate_number': release.release_certificate_number,
            'release_status': release.release_status,
            'work_order_id': release.work_order_id,
            'issued_by': release.issued_by,
        })

    def release_superseded(self, previous, successor) -> None:
        self.publish_on_commit(LedgerEventTypes.RELEASE_SUPERSEDED, {
            'release_id': previous.id,
            'aircraft_id': previous.aircraft_id,
            'superseded_by': successor.id,
        })

    def release_signed(self, release) -> None:
        self.publish_on_commit(LedgerEventTypes.RELEASE_SIGNED, {
            'release_id': release.id,
            'aircraft_id': release.aircraft_id,
            'release_status': release.release_status,
            'signed_by': release.signed_by,
            'signed_at': release.signed_at,
        })

    # ==========================================================================
    # Aircraft Status Events
    # ==========================================================================

    def aog_raised(self, report) -> None:
        self.publish_on_commit(LedgerEventTypes.AOG_RAISED, {
            'aircraft_id': report.aircraft_id,
            'pilot_report_id': report.id,
            'severity': report.severity,
            'title': report.title,
        })

    def aog_cleared(self, report) -> None:
        self.publish_on_commit(LedgerEventTypes.AOG_CLEARED, {
            'aircraft_id': report.aircraft_id,
            'pilot_report_id': report.id,
            'resolved_by': report.resolved_by,
        })


# Singleton instance
event_publisher = LedgerEventPublisher()
