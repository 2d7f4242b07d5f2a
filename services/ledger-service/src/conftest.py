# services/ledger-service/src/conftest.py
"""
Pytest configuration for Ledger Service
"""

import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from common.constants import UserRole


# =============================================================================
# Actors
# =============================================================================

@pytest.fixture
def admin_id():
    return uuid.uuid4()


@pytest.fixture
def manager_id():
    return uuid.uuid4()


@pytest.fixture
def inspector_id():
    return uuid.uuid4()


@pytest.fixture
def mechanic_id():
    return uuid.uuid4()


@pytest.fixture
def pilot_id():
    return uuid.uuid4()


@pytest.fixture
def authorizer(admin_id, manager_id, inspector_id, mechanic_id, pilot_id):
    """Static role table for the fixture actors."""
    from apps.core.services import StaticRoleAuthorizer

    return StaticRoleAuthorizer({
        admin_id: [UserRole.ADMIN],
        manager_id: [UserRole.MANAGER],
        inspector_id: [UserRole.INSPECTOR],
        mechanic_id: [UserRole.MECHANIC],
        pilot_id: [UserRole.PILOT],
    })


# =============================================================================
# Assets
# =============================================================================

@pytest.fixture
def aircraft(db):
    """Aircraft with 100 hours and 200 cycles."""
    from apps.core.models import Aircraft

    return Aircraft.objects.create(
        registration='LN-ABC',
        serial_number='SN-1001',
        manufacturer='Cessna',
        model='172S',
        total_flight_hours=Decimal('100.00'),
        total_flight_cycles=200,
    )


@pytest.fixture
def other_aircraft(db):
    from apps.core.models import Aircraft

    return Aircraft.objects.create(
        registration='LN-XYZ',
        total_flight_hours=Decimal('50.00'),
        total_flight_cycles=80,
    )


@pytest.fixture
def make_component(db):
    """Factory for components."""
    from apps.core.models import Component

    def _make(serial_number, part_number='PN-100', **kwargs):
        kwargs.setdefault('name', f'Component {serial_number}')
        return Component.objects.create(
            part_number=part_number,
            serial_number=serial_number,
            **kwargs
        )

    return _make


@pytest.fixture
def install(db):
    """Open an installation period directly."""
    from apps.core.models import ComponentInstallation

    def _install(component, aircraft, **kwargs):
        return ComponentInstallation.objects.create(
            component=component,
            aircraft=aircraft,
            inherited_flight_hours=component.total_flight_hours,
            inherited_flight_cycles=component.total_flight_cycles,
            **kwargs
        )

    return _install


@pytest.fixture
def engine(make_component, install, aircraft):
    """Engine installed on the fixture aircraft with 10h/20c."""
    component = make_component(
        'ENG-001',
        part_number='IO-360',
        name='Engine',
        total_flight_hours=Decimal('10.00'),
        total_flight_cycles=20,
    )
    install(component, aircraft, location='nose')
    return component


@pytest.fixture
def propeller(make_component, install, aircraft):
    """Propeller installed on the fixture aircraft with 5h/10c."""
    component = make_component(
        'PROP-001',
        part_number='MCCAULEY-1',
        name='Propeller',
        total_flight_hours=Decimal('5.00'),
        total_flight_cycles=10,
    )
    install(component, aircraft, location='nose')
    return component


# =============================================================================
# Maintenance
# =============================================================================

@pytest.fixture
def work_order(aircraft, manager_id):
    """Draft work order on the fixture aircraft."""
    from apps.core.models import WorkOrder

    return WorkOrder.objects.create(
        aircraft=aircraft,
        title='100 hour inspection',
        work_order_type=WorkOrder.WorkOrderType.INSPECTION,
        created_by=manager_id,
    )


@pytest.fixture
def completed_work_order(aircraft, mechanic_id):
    from apps.core.models import WorkOrder
    from django.utils import timezone

    return WorkOrder.objects.create(
        aircraft=aircraft,
        title='Replace brake pads',
        work_order_type=WorkOrder.WorkOrderType.REPAIR,
        status=WorkOrder.Status.COMPLETED,
        assigned_to=mechanic_id,
        completed_by=mechanic_id,
        completed_at=timezone.now(),
    )


# =============================================================================
# API
# =============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_token():
    """Mint a signed access token for a user and roles."""
    from common.authentication import issue_access_token

    def _make(user_id, *roles):
        return issue_access_token(user_id, roles)

    return _make


@pytest.fixture
def client_as(api_client, make_token):
    """API client authenticated as the given user and roles."""

    def _client_as(user_id, *roles):
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {make_token(user_id, *roles)}')
        return api_client

    return _client_as
