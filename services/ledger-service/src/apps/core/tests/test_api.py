# services/ledger-service/src/apps/core/tests/test_api.py
"""
Tests for Ledger Service API Endpoints
"""

import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from common.authentication import issue_access_token
from common.constants import UserRole
from apps.core.models import (
    Aircraft,
    Component,
    ComponentInstallation,
    FlightLog,
    WorkOrder,
    WorkOrderTask,
    ReleaseRecord,
    PilotReport,
)


class LedgerAPITestCase(TestCase):
    """Authenticated client helpers."""

    def setUp(self):
        self.client = APIClient()
        self.admin_id = uuid.uuid4()
        self.manager_id = uuid.uuid4()
        self.inspector_id = uuid.uuid4()
        self.mechanic_id = uuid.uuid4()
        self.pilot_id = uuid.uuid4()

        self.aircraft = Aircraft.objects.create(
            registration='LN-API',
            total_flight_hours=Decimal('100.00'),
            total_flight_cycles=200,
        )

    def authenticate(self, user_id, *roles):
        token = issue_access_token(user_id, roles)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def error_code(self, response):
        return response.data['error']['code']


class HealthAPITest(TestCase):
    """Tests for the probe endpoints."""

    def test_health(self):
        response = self.client.get(reverse('health_check'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')

    def test_ready(self):
        response = self.client.get(reverse('readiness_check'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ready')


class AuthenticationAPITest(LedgerAPITestCase):
    """Tests for token handling."""

    def test_missing_token(self):
        response = self.client.get(reverse('api:aircraft-list'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_invalid_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

        response = self.client.get(reverse('api:aircraft-list'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_subject_must_be_uuid(self):
        token = issue_access_token('pilot-7', [UserRole.PILOT])
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get(reverse('api:aircraft-list'))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unknown_roles_grant_nothing(self):
        token = issue_access_token(self.manager_id, ['superuser'])
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.post(
            reverse('api:aircraft-list'), {'registration': 'LN-NEW'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_any_role_can_read(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.get(reverse('api:aircraft-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)


class AircraftAPITest(LedgerAPITestCase):
    """Tests for Aircraft API endpoints."""

    def test_create_requires_manager(self):
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.client.post(
            reverse('api:aircraft-list'), {'registration': 'LN-NEW'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.error_code(response), 'FORBIDDEN')

    def test_create(self):
        self.authenticate(self.manager_id, UserRole.MANAGER)

        response = self.client.post(
            reverse('api:aircraft-list'),
            {'registration': 'LN-NEW', 'total_flight_hours': '999.00'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_flight_hours'], '0.00')

    def test_release_status_without_release(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        url = reverse('api:aircraft-release-status', kwargs={'pk': self.aircraft.id})
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['released'])
        self.assertFalse(response.data['airworthy'])
        self.assertIsNone(response.data['current_release'])

    def test_release_status_with_signed_release(self):
        release = ReleaseRecord.objects.create(
            aircraft=self.aircraft,
            release_status=ReleaseRecord.ReleaseStatus.FULL,
            issued_by=self.inspector_id,
        )
        release.sign('sha256:abc', self.inspector_id)
        self.authenticate(self.pilot_id, UserRole.PILOT)

        url = reverse('api:aircraft-release-status', kwargs={'pk': self.aircraft.id})
        response = self.client.get(url)

        self.assertTrue(response.data['released'])
        self.assertTrue(response.data['airworthy'])
        self.assertEqual(response.data['release_status'], 'full')

    def test_components(self):
        component = Component.objects.create(
            part_number='PN-1', serial_number='SN-1', name='Magneto'
        )
        ComponentInstallation.objects.create(component=component, aircraft=self.aircraft)
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        url = reverse('api:aircraft-components', kwargs={'pk': self.aircraft.id})
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['serial_number'], 'SN-1')


class ComponentAPITest(LedgerAPITestCase):
    """Tests for Component API endpoints."""

    def test_due_for_maintenance(self):
        Component.objects.create(
            part_number='PN-2', serial_number='LLP-9', name='Propeller hub',
            is_life_limited=True, max_cycles=100, total_flight_cycles=95,
        )
        Component.objects.create(part_number='PN-3', serial_number='SN-9', name='Radio')
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.client.get(reverse('api:component-due-for-maintenance'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['serial_number'] for c in response.data], ['LLP-9'])

    def test_register_life_limited(self):
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.client.post(reverse('api:component-list'), {
            'part_number': 'PN-4',
            'serial_number': 'LLP-10',
            'name': 'Crankshaft',
            'is_life_limited': True,
            'max_flight_hours': '2000.00',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_life_limited'])
        self.assertEqual(response.data['max_flight_hours'], '2000.00')


class FlightLogAPITest(LedgerAPITestCase):
    """Tests for Flight Log API endpoints."""

    def test_record_flight(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(self.aircraft.id),
            'flight_date': '2026-06-01',
            'flight_hours': '1.50',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['pilot_id'], str(self.pilot_id))
        self.assertEqual(response.data['aircraft_hours_after'], '101.50')
        self.assertEqual(response.data['aircraft_cycles_after'], 202)

        self.aircraft.refresh_from_db()
        self.assertEqual(self.aircraft.total_flight_hours, Decimal('101.50'))

    def test_record_flight_negative_hours(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(self.aircraft.id),
            'flight_date': '2026-06-01',
            'flight_hours': '-1.00',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.error_code(response), 'VALIDATION_ERROR')
        self.assertEqual(FlightLog.objects.count(), 0)

    def test_record_long_flight(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(self.aircraft.id),
            'flight_date': '2026-06-01',
            'flight_hours': '30.00',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['aircraft_hours_after'], '130.00')

    def test_record_flight_unknown_aircraft(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(uuid.uuid4()),
            'flight_date': '2026-06-01',
            'flight_hours': '1.00',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.error_code(response), 'NOT_FOUND')

    def test_correction_returns_warnings(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)
        created = self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(self.aircraft.id),
            'flight_date': '2026-06-01',
            'flight_hours': '1.50',
        }, format='json')
        url = reverse('api:flight-log-detail', kwargs={'pk': created.data['id']})

        self.authenticate(self.pilot_id, UserRole.PILOT)
        forbidden = self.client.patch(url, {'flight_hours': '2.00'}, format='json')
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.authenticate(self.manager_id, UserRole.MANAGER)
        response = self.client.patch(url, {'flight_hours': '2.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['flight_log']['flight_hours'], '2.00')
        self.assertEqual(len(response.data['warnings']), 1)

        self.aircraft.refresh_from_db()
        self.assertEqual(self.aircraft.total_flight_hours, Decimal('101.50'))

    def test_list_by_aircraft(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)
        self.client.post(reverse('api:flight-log-list'), {
            'aircraft_id': str(self.aircraft.id),
            'flight_date': '2026-06-01',
            'flight_hours': '1.00',
        }, format='json')

        response = self.client.get(
            reverse('api:flight-log-list'), {'aircraft_id': str(self.aircraft.id)}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)


class WorkOrderAPITest(LedgerAPITestCase):
    """Tests for Work Order API endpoints."""

    def setUp(self):
        super().setUp()
        self.work_order = WorkOrder.objects.create(
            aircraft=self.aircraft,
            title='Brake replacement',
            work_order_type=WorkOrder.WorkOrderType.REPAIR,
            status=WorkOrder.Status.OPEN,
            assigned_to=self.mechanic_id,
        )
        self.rii_task = WorkOrderTask.objects.create(
            work_order=self.work_order,
            sequence=1,
            title='Brake line torque',
            is_rii=True,
        )

    def url(self, name):
        return reverse(name, kwargs={'pk': self.work_order.id})

    def test_create(self):
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.client.post(reverse('api:work-order-list'), {
            'aircraft_id': str(self.aircraft.id),
            'work_order_type': WorkOrder.WorkOrderType.INSPECTION,
            'title': 'Annual',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], WorkOrder.Status.DRAFT)
        self.assertEqual(response.data['created_by'], str(self.mechanic_id))

    def test_pilot_cannot_create(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:work-order-list'), {
            'aircraft_id': str(self.aircraft.id),
            'work_order_type': WorkOrder.WorkOrderType.INSPECTION,
            'title': 'Annual',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_start_draft_is_invalid_transition(self):
        draft = WorkOrder.objects.create(
            aircraft=self.aircraft,
            title='Draft',
            work_order_type=WorkOrder.WorkOrderType.REPAIR,
        )
        self.authenticate(self.manager_id, UserRole.MANAGER)

        response = self.client.post(reverse('api:work-order-start', kwargs={'pk': draft.id}))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(response), 'INVALID_STATE_TRANSITION')
        self.assertEqual(response.data['error']['details']['current_state'], 'draft')

    def test_assign(self):
        self.authenticate(self.manager_id, UserRole.MANAGER)
        new_assignee = uuid.uuid4()

        response = self.client.post(
            self.url('api:work-order-assign'), {'user_id': str(new_assignee)}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assigned_to'], str(new_assignee))

    def test_rii_workflow(self):
        task_url = reverse('api:work-order-task-status', kwargs={'pk': self.rii_task.id})
        sign_url = reverse('api:work-order-task-sign-off', kwargs={'pk': self.rii_task.id})

        self.authenticate(self.mechanic_id, UserRole.MECHANIC)
        response = self.client.post(self.url('api:work-order-start'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(task_url, {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.post(sign_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.post(self.url('api:work-order-complete'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        self.authenticate(self.inspector_id, UserRole.INSPECTOR)
        response = self.client.post(sign_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['signed_off_by'], str(self.inspector_id))

        self.authenticate(self.mechanic_id, UserRole.MECHANIC)
        response = self.client.post(
            self.url('api:work-order-complete'), {'notes': 'Done'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], WorkOrder.Status.COMPLETED)

        self.authenticate(self.inspector_id, UserRole.INSPECTOR)
        response = self.client.post(self.url('api:work-order-release'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], WorkOrder.Status.RELEASED)

    def test_add_and_list_tasks(self):
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.client.post(
            self.url('api:work-order-tasks'), {'title': 'Bleed brakes'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sequence'], 2)

        response = self.client.get(self.url('api:work-order-tasks'))
        self.assertEqual(len(response.data), 2)


class ReleaseAPITest(LedgerAPITestCase):
    """Tests for Release Record API endpoints."""

    def issue(self, release_status='full'):
        return self.client.post(reverse('api:release-list'), {
            'aircraft_id': str(self.aircraft.id),
            'release_status': release_status,
        }, format='json')

    def test_issue_and_supersede(self):
        self.authenticate(self.inspector_id, UserRole.INSPECTOR)

        first = self.issue()
        second = self.issue('conditional')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)

        response = self.client.get(
            reverse('api:release-current'), {'aircraft_id': str(self.aircraft.id)}
        )
        self.assertEqual(response.data['release']['id'], second.data['id'])
        self.assertFalse(response.data['released'])

    def test_current_requires_aircraft(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.get(reverse('api:release-current'))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mechanic_cannot_issue(self):
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        response = self.issue()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_signed_release_is_immutable(self):
        self.authenticate(self.inspector_id, UserRole.INSPECTOR)
        release_id = self.issue().data['id']

        sign_url = reverse('api:release-sign', kwargs={'pk': release_id})
        response = self.client.post(sign_url, {'signature_hash': 'sha256:abc'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_signed'])

        detail_url = reverse('api:release-detail', kwargs={'pk': release_id})
        response = self.client.patch(detail_url, {'conditions': 'Changed'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.error_code(response), 'RECORD_SIGNED')

    def test_stale_version_conflict(self):
        self.authenticate(self.inspector_id, UserRole.INSPECTOR)
        release_id = self.issue().data['id']
        detail_url = reverse('api:release-detail', kwargs={'pk': release_id})

        self.client.patch(detail_url, {'conditions': 'A', 'expected_version': 1}, format='json')
        response = self.client.patch(
            detail_url, {'conditions': 'B', 'expected_version': 1}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(response), 'CONFLICT')

    def test_full_release_blocked_by_aog(self):
        PilotReport.objects.create(
            aircraft=self.aircraft,
            reported_by=self.pilot_id,
            title='Engine fire warning',
            description='Fire warning light on climb out',
            severity=PilotReport.Severity.CRITICAL,
            is_aog=True,
        )
        self.authenticate(self.inspector_id, UserRole.INSPECTOR)

        response = self.issue()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.error_code(response), 'INVALID_STATE_TRANSITION')


class PilotReportAPITest(LedgerAPITestCase):
    """Tests for Pilot Report API endpoints."""

    def test_pilot_files_critical_report(self):
        self.authenticate(self.pilot_id, UserRole.PILOT)

        response = self.client.post(reverse('api:pilot-report-list'), {
            'aircraft_id': str(self.aircraft.id),
            'title': 'Vibration',
            'description': 'Severe vibration at 2300 rpm',
            'severity': 'critical',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_aog'])
        self.assertEqual(response.data['reported_by'], str(self.pilot_id))

    def test_pilot_cannot_resolve(self):
        report = PilotReport.objects.create(
            aircraft=self.aircraft,
            reported_by=self.pilot_id,
            title='Radio static',
            description='COM1 static',
        )
        self.authenticate(self.pilot_id, UserRole.PILOT)

        url = reverse('api:pilot-report-status', kwargs={'pk': report.id})
        response = self.client.post(url, {'status': 'resolved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_mechanic_resolves(self):
        report = PilotReport.objects.create(
            aircraft=self.aircraft,
            reported_by=self.pilot_id,
            title='Radio static',
            description='COM1 static',
            is_aog=True,
        )
        self.authenticate(self.mechanic_id, UserRole.MECHANIC)

        url = reverse('api:pilot-report-status', kwargs={'pk': report.id})
        response = self.client.post(
            url, {'status': 'resolved', 'resolution': 'Reseated connector'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'resolved')
        self.assertFalse(response.data['is_aog'])
