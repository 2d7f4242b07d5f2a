# services/ledger-service/src/apps/core/services/flight_log_service.py
"""
Flight Log Service

Records flights and propagates their usage to the aircraft and its
installed components.
"""

import uuid
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Dict, Any, List, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, Max, Sum

from common.validators import validate_date_range, validate_flight_hours, validate_cycle_count
from apps.core.events import event_publisher
from apps.core.models import Aircraft, FlightLog
from .metrics_service import MetricsPropagator

logger = logging.getLogger(__name__)


class FlightLogService:
    """
    Service for flight logs.

    A flight is recorded, snapshotted and propagated in one transaction.
    Later corrections and deletes never touch the counters; they return
    warnings instead.
    """

    DETAIL_FIELDS = [
        'copilot_id', 'flight_type', 'departure_location', 'arrival_location',
        'departure_time', 'arrival_time', 'flight_duration', 'mission_description',
        'payload_weight', 'pre_flight_check_completed', 'pre_flight_check_by',
        'post_flight_notes', 'discrepancies',
    ]

    UPDATABLE_FIELDS = DETAIL_FIELDS + [
        'pilot_id', 'flight_date', 'flight_hours', 'takeoff_cycles', 'landing_cycles',
    ]

    METRIC_FIELDS = ('flight_hours', 'takeoff_cycles', 'landing_cycles')

    # precision of the flight_hours column
    MAX_FLIGHT_HOURS = Decimal('9999.99')

    def __init__(self, propagator: MetricsPropagator = None):
        self.propagator = propagator or MetricsPropagator()

    # ==========================================================================
    # Recording
    # ==========================================================================

    @transaction.atomic
    def record_flight(
        self,
        aircraft_id: uuid.UUID,
        pilot_id: uuid.UUID,
        flight_date: date,
        flight_hours,
        takeoff_cycles: Optional[int] = None,
        landing_cycles: Optional[int] = None,
        **kwargs
    ) -> FlightLog:
        """Record a flight and accrue its usage."""
        from . import AircraftNotFoundError

        flight_hours = self._validate_hours(flight_hours)
        takeoff_cycles = self._validate_cycles(
            1 if takeoff_cycles is None else takeoff_cycles, 'takeoff_cycles'
        )
        landing_cycles = self._validate_cycles(
            1 if landing_cycles is None else landing_cycles, 'landing_cycles'
        )
        self._check_fields(kwargs, self.DETAIL_FIELDS)

        try:
            aircraft = Aircraft.objects.select_for_update().get(id=aircraft_id, is_active=True)
        except Aircraft.DoesNotExist:
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        cycles = self.propagator.cycles_for(takeoff_cycles, landing_cycles)
        hours_before = aircraft.total_flight_hours
        cycles_before = aircraft.total_flight_cycles

        flight_log = FlightLog.objects.create(
            aircraft=aircraft,
            pilot_id=pilot_id,
            flight_date=flight_date,
            flight_hours=flight_hours,
            takeoff_cycles=takeoff_cycles,
            landing_cycles=landing_cycles,
            aircraft_hours_before=hours_before,
            aircraft_hours_after=hours_before + flight_hours,
            aircraft_cycles_before=cycles_before,
            aircraft_cycles_after=cycles_before + cycles,
            **kwargs
        )

        result = self.propagator.propagate(aircraft.id, flight_hours, cycles)
        event_publisher.flight_recorded(flight_log, result)

        logger.info(
            f"Recorded flight {flight_log.id} for {aircraft.registration}: "
            f"{flight_hours}h/{cycles}c"
        )
        return flight_log

    # ==========================================================================
    # Corrections
    # ==========================================================================

    @transaction.atomic
    def update_flight(self, flight_id: uuid.UUID, **kwargs) -> Tuple[FlightLog, List[str]]:
        """Update a flight log. Counters are not adjusted."""
        self._check_fields(kwargs, self.UPDATABLE_FIELDS)
        flight_log = self._get_for_update(flight_id)

        if 'flight_hours' in kwargs:
            kwargs['flight_hours'] = self._validate_hours(kwargs['flight_hours'])
        for field in ('takeoff_cycles', 'landing_cycles'):
            if field in kwargs:
                kwargs[field] = self._validate_cycles(kwargs[field], field)

        warnings = []
        for field in self.METRIC_FIELDS:
            if field in kwargs and kwargs[field] != getattr(flight_log, field):
                warnings.append(
                    f"{field} changed from {getattr(flight_log, field)} to {kwargs[field]}; "
                    f"aircraft and component counters were not adjusted"
                )

        for field, value in kwargs.items():
            setattr(flight_log, field, value)
        flight_log.save()

        for warning in warnings:
            logger.warning(f"Flight {flight_log.id}: {warning}")

        return flight_log, warnings

    @transaction.atomic
    def delete_flight(self, flight_id: uuid.UUID, deleted_by: uuid.UUID = None) -> List[str]:
        """Soft delete a flight log. Counters are not reversed."""
        flight_log = self._get_for_update(flight_id)
        flight_log.soft_delete(deleted_by)

        warning = (
            f"Flight log deleted; {flight_log.flight_hours}h and "
            f"{flight_log.total_cycles} cycles were not reversed on the aircraft "
            f"or its components"
        )
        logger.warning(f"Flight {flight_log.id}: {warning}")
        return [warning]

    # ==========================================================================
    # Queries
    # ==========================================================================

    def get_flight_log(self, flight_id: uuid.UUID) -> FlightLog:
        """Get a live flight log by ID."""
        try:
            return FlightLog.objects.select_related('aircraft').get(id=flight_id, is_deleted=False)
        except FlightLog.DoesNotExist:
            from . import FlightLogNotFoundError
            raise FlightLogNotFoundError(f"Flight log {flight_id} not found")

    def list_flight_logs(
        self,
        aircraft_id: uuid.UUID = None,
        pilot_id: uuid.UUID = None,
        start_date: date = None,
        end_date: date = None
    ) -> List[FlightLog]:
        """List live flight logs with filters."""
        if start_date and end_date:
            try:
                validate_date_range(start_date, end_date, field_name='flight dates')
            except DjangoValidationError as e:
                from . import LedgerValidationError
                raise LedgerValidationError(e.messages[0])

        queryset = FlightLog.objects.filter(is_deleted=False)

        if aircraft_id:
            queryset = queryset.filter(aircraft_id=aircraft_id)
        if pilot_id:
            queryset = queryset.filter(pilot_id=pilot_id)
        if start_date:
            queryset = queryset.filter(flight_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(flight_date__lte=end_date)

        return list(queryset.order_by('-flight_date', '-created_at'))

    def get_aircraft_statistics(self, aircraft_id: uuid.UUID) -> Dict[str, Any]:
        """Usage totals over the aircraft's live flight logs."""
        try:
            aircraft = Aircraft.objects.get(id=aircraft_id)
        except Aircraft.DoesNotExist:
            from . import AircraftNotFoundError
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        stats = FlightLog.objects.filter(
            aircraft_id=aircraft_id,
            is_deleted=False
        ).aggregate(
            total_flights=Count('id'),
            total_hours=Sum('flight_hours'),
            total_takeoffs=Sum('takeoff_cycles'),
            total_landings=Sum('landing_cycles'),
            last_flight_date=Max('flight_date'),
        )

        return {
            'aircraft_id': aircraft.id,
            'registration': aircraft.registration,
            'total_flights': stats['total_flights'],
            'total_hours': stats['total_hours'] or Decimal('0.00'),
            'total_cycles': (stats['total_takeoffs'] or 0) + (stats['total_landings'] or 0),
            'last_flight_date': stats['last_flight_date'],
            'aircraft_total_flight_hours': aircraft.total_flight_hours,
            'aircraft_total_flight_cycles': aircraft.total_flight_cycles,
        }

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _get_for_update(self, flight_id: uuid.UUID) -> FlightLog:
        try:
            return FlightLog.objects.select_for_update().get(id=flight_id, is_deleted=False)
        except FlightLog.DoesNotExist:
            from . import FlightLogNotFoundError
            raise FlightLogNotFoundError(f"Flight log {flight_id} not found")

    def _check_fields(self, values: Dict[str, Any], allowed: List[str]) -> None:
        unknown = sorted(set(values) - set(allowed))
        if unknown:
            from . import LedgerValidationError
            raise LedgerValidationError(f"Fields cannot be set: {', '.join(unknown)}")

    def _validate_hours(self, value) -> Decimal:
        try:
            return validate_flight_hours(value, max_hours=self.MAX_FLIGHT_HOURS, field_name='flight_hours')
        except DjangoValidationError as e:
            from . import LedgerValidationError
            raise LedgerValidationError(e.messages[0])

    def _validate_cycles(self, value, field_name: str) -> int:
        try:
            return validate_cycle_count(value, field_name=field_name)
        except DjangoValidationError as e:
            from . import LedgerValidationError
            raise LedgerValidationError(e.messages[0])
