# services/ledger-service/src/apps/core/tests/test_models.py
"""
Tests for Ledger Service Models
"""

import uuid
from datetime import date
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

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


class ComponentInstallationModelTest(TestCase):
    """Tests for ComponentInstallation."""

    def setUp(self):
        self.aircraft = Aircraft.objects.create(registration='LN-AAA')
        self.other = Aircraft.objects.create(registration='LN-BBB')
        self.component = Component.objects.create(
            part_number='PN-1', serial_number='SN-1', name='Magneto'
        )

    def test_current_installation(self):
        """Test the open installation is the current one."""
        self.assertIsNone(self.component.current_installation)

        installation = ComponentInstallation.objects.create(
            component=self.component, aircraft=self.aircraft
        )

        self.assertTrue(installation.is_installed)
        self.assertEqual(self.component.current_installation, installation)

    def test_close_installation(self):
        """Test closing ends the installation period."""
        installation = ComponentInstallation.objects.create(
            component=self.component, aircraft=self.aircraft
        )
        removed_by = uuid.uuid4()

        installation.close(removed_by=removed_by, notes='Sent for overhaul')
        installation.refresh_from_db()

        self.assertFalse(installation.is_installed)
        self.assertEqual(installation.removed_by, removed_by)
        self.assertIsNone(self.component.current_installation)

    def test_only_one_open_installation(self):
        """Test a component cannot be open on two aircraft."""
        ComponentInstallation.objects.create(component=self.component, aircraft=self.aircraft)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                ComponentInstallation.objects.create(
                    component=self.component, aircraft=self.other
                )

    def test_closed_installations_do_not_conflict(self):
        """Test history may hold many closed periods."""
        first = ComponentInstallation.objects.create(
            component=self.component, aircraft=self.aircraft
        )
        first.close()

        second = ComponentInstallation.objects.create(
            component=self.component, aircraft=self.other
        )

        self.assertEqual(self.component.installations.count(), 2)
        self.assertEqual(self.component.current_installation, second)


class FlightLogModelTest(TestCase):
    """Tests for FlightLog."""

    def test_total_cycles(self):
        aircraft = Aircraft.objects.create(registration='LN-CCC')
        flight_log = FlightLog.objects.create(
            aircraft=aircraft,
            pilot_id=uuid.uuid4(),
            flight_date=date(2026, 5, 1),
            flight_hours=Decimal('1.20'),
            takeoff_cycles=3,
            landing_cycles=3,
            aircraft_hours_before=Decimal('0.00'),
            aircraft_hours_after=Decimal('1.20'),
            aircraft_cycles_before=0,
            aircraft_cycles_after=6,
        )

        self.assertEqual(flight_log.total_cycles, 6)
        self.assertEqual(flight_log.flight_type, FlightLog.FlightType.OPERATION)


class WorkOrderModelTest(TestCase):
    """Tests for WorkOrder."""

    def setUp(self):
        self.aircraft = Aircraft.objects.create(registration='LN-DDD')

    def _create(self, **kwargs):
        return WorkOrder.objects.create(
            aircraft=self.aircraft,
            title='Annual inspection',
            work_order_type=WorkOrder.WorkOrderType.INSPECTION,
            **kwargs
        )

    def test_order_number_generated(self):
        """Test order numbers are sequential within the year."""
        first = self._create()
        second = self._create()
        year = timezone.now().year

        self.assertEqual(first.order_number, f'WO-{year}-00001')
        self.assertEqual(second.order_number, f'WO-{year}-00002')

    def test_defaults(self):
        work_order = self._create()

        self.assertEqual(work_order.status, WorkOrder.Status.DRAFT)
        self.assertEqual(work_order.priority, WorkOrder.Priority.MEDIUM)
        self.assertTrue(work_order.is_open)

    def test_assign_opens_draft(self):
        """Test assigning a draft moves it to open."""
        work_order = self._create()
        user_id = uuid.uuid4()

        work_order.assign(user_id)
        work_order.refresh_from_db()

        self.assertEqual(work_order.status, WorkOrder.Status.OPEN)
        self.assertEqual(work_order.assigned_to, user_id)
        self.assertIsNotNone(work_order.assigned_at)

    def test_workflow_methods(self):
        """Test the happy path through the workflow methods."""
        work_order = self._create()
        user_id = uuid.uuid4()

        work_order.assign(user_id)
        work_order.start()
        self.assertEqual(work_order.status, WorkOrder.Status.IN_PROGRESS)
        self.assertIsNotNone(work_order.started_at)

        work_order.complete(completed_by=user_id, notes='All good')
        self.assertEqual(work_order.status, WorkOrder.Status.COMPLETED)
        self.assertFalse(work_order.is_open)

        work_order.release(released_by=user_id)
        work_order.refresh_from_db()
        self.assertEqual(work_order.status, WorkOrder.Status.RELEASED)
        self.assertEqual(work_order.released_by, user_id)


class WorkOrderTaskModelTest(TestCase):
    """Tests for WorkOrderTask."""

    def setUp(self):
        aircraft = Aircraft.objects.create(registration='LN-EEE')
        self.work_order = WorkOrder.objects.create(
            aircraft=aircraft,
            title='Repair',
            work_order_type=WorkOrder.WorkOrderType.REPAIR,
        )

    def test_sign_off_completes_task(self):
        """Test sign-off completes the task and records the inspector."""
        task = WorkOrderTask.objects.create(
            work_order=self.work_order, sequence=1, title='Torque check', is_rii=True
        )
        inspector_id = uuid.uuid4()

        task.sign_off(inspector_id)
        task.refresh_from_db()

        self.assertEqual(task.status, WorkOrderTask.Status.COMPLETED)
        self.assertEqual(task.signed_off_by, inspector_id)
        self.assertIsNotNone(task.signed_off_at)
        self.assertIsNotNone(task.completed_at)
        self.assertTrue(task.is_signed_off)

    def test_reset_clears_completion(self):
        task = WorkOrderTask.objects.create(
            work_order=self.work_order, sequence=1, title='Lubricate'
        )
        task.complete(completed_by=uuid.uuid4())
        task.reset()

        self.assertEqual(task.status, WorkOrderTask.Status.PENDING)
        self.assertIsNone(task.completed_at)
        self.assertIsNone(task.completed_by)


class ReleaseRecordModelTest(TestCase):
    """Tests for ReleaseRecord."""

    def setUp(self):
        self.aircraft = Aircraft.objects.create(registration='LN-FFF')

    def _create(self, **kwargs):
        return ReleaseRecord.objects.create(
            aircraft=self.aircraft,
            release_status=ReleaseRecord.ReleaseStatus.FULL,
            issued_by=uuid.uuid4(),
            **kwargs
        )

    def test_certificate_number_generated(self):
        release = self._create()

        self.assertTrue(release.release_certificate_number.startswith('RTS-'))
        self.assertTrue(release.is_current)
        self.assertFalse(release.is_signed)
        self.assertEqual(release.version, 1)

    def test_one_current_release_per_aircraft(self):
        """Test two current releases cannot coexist."""
        self._create()

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self._create()

    def test_invalidated_release_leaves_current_set(self):
        first = self._create()
        first.invalidate()

        second = self._create()
        first.link_successor(second)
        first.refresh_from_db()

        self.assertFalse(first.is_current)
        self.assertEqual(first.superseded_by, second)
        self.assertEqual(list(ReleaseRecord.objects.current()), [second])

    def test_version_increments_on_save(self):
        release = self._create()

        release.conditions = 'Day VFR only'
        release.save()
        release.refresh_from_db()

        self.assertEqual(release.version, 2)

    def test_sign(self):
        release = self._create()
        signer = uuid.uuid4()

        release.sign('sha256:abc', signer)
        release.refresh_from_db()

        self.assertTrue(release.is_signed)
        self.assertEqual(release.signed_by, signer)
        self.assertIsNotNone(release.signed_at)


class PilotReportModelTest(TestCase):
    """Tests for PilotReport."""

    def test_resolve_clears_aog(self):
        aircraft = Aircraft.objects.create(registration='LN-GGG')
        report = PilotReport.objects.create(
            aircraft=aircraft,
            reported_by=uuid.uuid4(),
            title='Oil leak',
            description='Oil on the cowling after landing',
            severity=PilotReport.Severity.CRITICAL,
            is_aog=True,
        )
        mechanic = uuid.uuid4()

        report.resolve(resolved_by=mechanic, resolution='Replaced gasket')
        report.refresh_from_db()

        self.assertEqual(report.status, PilotReport.Status.RESOLVED)
        self.assertFalse(report.is_aog)
        self.assertEqual(report.resolved_by, mechanic)
        self.assertTrue(report.is_closed)
