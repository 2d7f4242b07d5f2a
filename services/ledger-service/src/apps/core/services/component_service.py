# services/ledger-service/src/apps/core/services/component_service.py
"""
Component Service

Component registry and installation periods.
"""

import uuid
import logging
from decimal import Decimal
from typing import Optional, List

from django.conf import settings
from django.db import models, transaction
from django.db.models import ExpressionWrapper, F, Q, Value

from apps.core.models import Aircraft, Component, ComponentInstallation

logger = logging.getLogger(__name__)


class ComponentService:
    """
    Service for components and where they are installed.

    Handles:
    - Component registration
    - Install / remove
    - Installation queries
    - Life-limited parts nearing their limits
    """

    # ==========================================================================
    # Component CRUD
    # ==========================================================================

    @transaction.atomic
    def create_component(
        self,
        part_number: str,
        serial_number: str,
        name: str,
        **kwargs
    ) -> Component:
        """Register a new component."""
        from . import LedgerValidationError

        if Component.objects.filter(serial_number=serial_number).exists():
            raise LedgerValidationError(
                f"Component with serial number {serial_number} already exists"
            )
        if kwargs.get('is_life_limited') and not (
            kwargs.get('max_flight_hours') or kwargs.get('max_cycles')
        ):
            raise LedgerValidationError("A life-limited component needs an hour or cycle limit")

        component = Component.objects.create(
            part_number=part_number,
            serial_number=serial_number,
            name=name,
            **kwargs
        )

        logger.info(f"Registered component {component}")
        return component

    def get_component(self, component_id: uuid.UUID) -> Component:
        """Get a component by ID."""
        try:
            return Component.objects.get(id=component_id)
        except Component.DoesNotExist:
            from . import ComponentNotFoundError
            raise ComponentNotFoundError(f"Component {component_id} not found")

    def _get_aircraft(self, aircraft_id: uuid.UUID) -> Aircraft:
        try:
            return Aircraft.objects.get(id=aircraft_id, is_active=True)
        except Aircraft.DoesNotExist:
            from . import AircraftNotFoundError
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

    # ==========================================================================
    # Installation
    # ==========================================================================

    @transaction.atomic
    def install(
        self,
        component_id: uuid.UUID,
        aircraft_id: uuid.UUID,
        installed_by: uuid.UUID,
        location: Optional[str] = None,
        notes: Optional[str] = None
    ) -> ComponentInstallation:
        """Install a component on an aircraft."""
        from . import ComponentNotFoundError, InvalidStateTransitionError

        try:
            component = Component.objects.select_for_update().get(id=component_id)
        except Component.DoesNotExist:
            raise ComponentNotFoundError(f"Component {component_id} not found")

        aircraft = self._get_aircraft(aircraft_id)

        if not component.is_active or not component.is_airworthy:
            raise InvalidStateTransitionError(
                f"Component {component} is not airworthy",
                required_state='airworthy',
                current_state='unairworthy'
            )

        current = component.current_installation
        if current is not None:
            raise InvalidStateTransitionError(
                f"Component {component} is already installed on aircraft {current.aircraft_id}",
                required_state='removed',
                current_state='installed'
            )

        installation = ComponentInstallation.objects.create(
            component=component,
            aircraft=aircraft,
            location=location,
            inherited_flight_hours=component.total_flight_hours,
            inherited_flight_cycles=component.total_flight_cycles,
            installed_by=installed_by,
            install_notes=notes,
        )

        logger.info(f"Installed component {component} on {aircraft.registration}")
        return installation

    @transaction.atomic
    def remove(
        self,
        component_id: uuid.UUID,
        removed_by: uuid.UUID,
        notes: Optional[str] = None
    ) -> ComponentInstallation:
        """Close the component's open installation."""
        from . import InvalidStateTransitionError

        component = self.get_component(component_id)

        installation = (
            ComponentInstallation.objects
            .select_for_update()
            .filter(component_id=component.id, removed_at__isnull=True)
            .first()
        )
        if installation is None:
            raise InvalidStateTransitionError(
                f"Component {component} is not installed",
                required_state='installed',
                current_state='removed'
            )

        installation.close(removed_by=removed_by, notes=notes)

        logger.info(f"Removed component {component} from aircraft {installation.aircraft_id}")
        return installation

    # ==========================================================================
    # Queries
    # ==========================================================================

    def installed_components(self, aircraft_id: uuid.UUID) -> List[Component]:
        """Components with an open installation on the aircraft."""
        return list(
            Component.objects.filter(
                installations__aircraft_id=aircraft_id,
                installations__removed_at__isnull=True,
            ).order_by('part_number', 'serial_number')
        )

    def installation_history(self, component_id: uuid.UUID) -> List[ComponentInstallation]:
        """All installation periods of a component, newest first."""
        component = self.get_component(component_id)
        return list(
            component.installations.select_related('aircraft').order_by('-installed_at')
        )

    def find_due_for_maintenance(self) -> List[Component]:
        """
        Life-limited components at or past COMPONENT_DUE_THRESHOLD of their
        hour or cycle limit.

        Totals are the ones the metrics propagator accrues, so a component
        becomes due as soon as the flight that crosses the threshold is
        recorded.
        """
        threshold = Value(Decimal(settings.COMPONENT_DUE_THRESHOLD))
        limit_field = models.DecimalField(max_digits=12, decimal_places=2)

        due = (
            Component.objects
            .filter(is_life_limited=True, is_active=True)
            .annotate(
                hours_due_at=ExpressionWrapper(F('max_flight_hours') * threshold, output_field=limit_field),
                cycles_due_at=ExpressionWrapper(F('max_cycles') * threshold, output_field=limit_field),
            )
            .filter(
                Q(max_flight_hours__isnull=False, total_flight_hours__gte=F('hours_due_at'))
                | Q(max_cycles__isnull=False, total_flight_cycles__gte=F('cycles_due_at'))
            )
            .order_by('part_number', 'serial_number')
        )
        return list(due)
