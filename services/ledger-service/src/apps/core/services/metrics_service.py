# services/ledger-service/src/apps/core/services/metrics_service.py
"""
Metrics Propagator

Applies flight hour and cycle deltas to an aircraft and to every
component currently installed on it.
"""

import uuid
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.validators import validate_positive_decimal, validate_cycle_count
from apps.core.models import Aircraft, Component, ComponentInstallation

logger = logging.getLogger(__name__)


@dataclass
class PropagationResult:
    """Outcome of one propagation."""

    aircraft_id: uuid.UUID
    flight_hours: Decimal
    cycles: int
    components_updated: int


class MetricsPropagator:
    """
    Accrues usage counters.

    Every component with an open installation on the aircraft receives
    the full delta. Increments are applied with F() expressions so
    concurrent writers never overwrite each other.
    """

    @staticmethod
    def cycles_for(takeoff_cycles: Optional[int] = None, landing_cycles: Optional[int] = None) -> int:
        """Total cycles for a flight; each side counts 1 when not given."""
        takeoff = 1 if takeoff_cycles is None else takeoff_cycles
        landing = 1 if landing_cycles is None else landing_cycles
        return takeoff + landing

    @transaction.atomic
    def propagate(
        self,
        aircraft_id: uuid.UUID,
        flight_hours,
        cycles: int
    ) -> PropagationResult:
        """Increment aircraft and installed component counters."""
        from . import LedgerValidationError, AircraftNotFoundError

        try:
            flight_hours = validate_positive_decimal(flight_hours, field_name='flight_hours')
            cycles = validate_cycle_count(cycles, field_name='cycles')
        except DjangoValidationError as e:
            raise LedgerValidationError(e.messages[0])

        updated = Aircraft.objects.filter(id=aircraft_id).update(
            total_flight_hours=F('total_flight_hours') + flight_hours,
            total_flight_cycles=F('total_flight_cycles') + cycles,
            updated_at=timezone.now(),
        )
        if not updated:
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        open_installations = ComponentInstallation.objects.filter(
            aircraft_id=aircraft_id,
            removed_at__isnull=True,
        )
        component_ids = list(open_installations.values_list('component_id', flat=True))

        if component_ids:
            Component.objects.filter(id__in=component_ids).update(
                total_flight_hours=F('total_flight_hours') + flight_hours,
                total_flight_cycles=F('total_flight_cycles') + cycles,
                updated_at=timezone.now(),
            )
            open_installations.update(
                flight_hours=F('flight_hours') + flight_hours,
                flight_cycles=F('flight_cycles') + cycles,
                updated_at=timezone.now(),
            )

        logger.info(
            f"Propagated {flight_hours}h/{cycles}c to aircraft {aircraft_id} "
            f"and {len(component_ids)} installed components"
        )

        return PropagationResult(
            aircraft_id=aircraft_id,
            flight_hours=flight_hours,
            cycles=cycles,
            components_updated=len(component_ids),
        )
