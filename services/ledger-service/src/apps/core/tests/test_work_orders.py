# services/ledger-service/src/apps/core/tests/test_work_orders.py
"""
Tests for WorkOrderService
"""

import uuid
from decimal import Decimal

import pytest

from apps.core.models import WorkOrder, WorkOrderTask
from apps.core.services import (
    WorkOrderService,
    AircraftNotFoundError,
    ForbiddenError,
    LedgerValidationError,
    TaskNotFoundError,
    WorkOrderNotFoundError,
    WorkOrderStateError,
)


@pytest.fixture
def service(authorizer):
    return WorkOrderService(authorizer=authorizer)


@pytest.fixture
def open_order(service, aircraft, manager_id, mechanic_id):
    """Work order assigned to the mechanic."""
    return service.create_work_order(
        aircraft_id=aircraft.id,
        work_order_type=WorkOrder.WorkOrderType.SCHEDULED,
        title='Oil change',
        created_by=manager_id,
        assigned_to=mechanic_id,
    )


@pytest.fixture
def started_order(service, open_order, mechanic_id):
    return service.start(open_order.id, actor_id=mechanic_id)


@pytest.mark.django_db
class TestCreateWorkOrder:

    def test_draft_without_assignee(self, service, aircraft, manager_id):
        work_order = service.create_work_order(
            aircraft_id=aircraft.id,
            work_order_type=WorkOrder.WorkOrderType.INSPECTION,
            title='Annual',
            created_by=manager_id,
            description='Annual inspection',
        )

        assert work_order.status == WorkOrder.Status.DRAFT
        assert work_order.order_number.startswith('WO-')
        assert work_order.aircraft_hours_at_creation == Decimal('100.00')
        assert work_order.aircraft_cycles_at_creation == 200

    def test_assignee_opens_order(self, open_order, mechanic_id):
        assert open_order.status == WorkOrder.Status.OPEN
        assert open_order.assigned_to == mechanic_id

    def test_unknown_type(self, service, aircraft):
        with pytest.raises(LedgerValidationError):
            service.create_work_order(
                aircraft_id=aircraft.id, work_order_type='overhaul_all', title='X'
            )

    def test_unknown_aircraft(self, service, db):
        with pytest.raises(AircraftNotFoundError):
            service.create_work_order(
                aircraft_id=uuid.uuid4(),
                work_order_type=WorkOrder.WorkOrderType.REPAIR,
                title='X',
            )

    def test_status_not_settable(self, service, aircraft):
        with pytest.raises(LedgerValidationError):
            service.create_work_order(
                aircraft_id=aircraft.id,
                work_order_type=WorkOrder.WorkOrderType.REPAIR,
                title='X',
                status=WorkOrder.Status.RELEASED,
            )


@pytest.mark.django_db
class TestWorkflow:

    def test_full_lifecycle(self, service, open_order, mechanic_id, inspector_id):
        task = service.add_task(open_order.id, 'Drain oil')
        rii = service.add_task(open_order.id, 'Safety wire drain plug', is_rii=True)

        service.start(open_order.id, actor_id=mechanic_id)
        service.update_task_status(task.id, WorkOrderTask.Status.COMPLETED, actor_id=mechanic_id)
        service.sign_off_rii(rii.id, inspector_id=inspector_id)
        completed = service.complete(open_order.id, actor_id=mechanic_id, notes='Done')
        released = service.release(open_order.id, actor_id=inspector_id)

        assert completed.completion_notes == 'Done'
        assert released.status == WorkOrder.Status.RELEASED
        assert released.released_by == inspector_id

    def test_assign_requires_supervisor(self, service, work_order, mechanic_id):
        with pytest.raises(ForbiddenError):
            service.assign(work_order.id, user_id=mechanic_id, actor_id=mechanic_id)

    def test_assign_closed_order(self, service, completed_work_order, manager_id, mechanic_id):
        with pytest.raises(WorkOrderStateError):
            service.assign(completed_work_order.id, user_id=mechanic_id, actor_id=manager_id)

    def test_reassign_keeps_status(self, service, started_order, manager_id):
        other = uuid.uuid4()

        work_order = service.assign(started_order.id, user_id=other, actor_id=manager_id)

        assert work_order.status == WorkOrder.Status.IN_PROGRESS
        assert work_order.assigned_to == other

    def test_start_requires_open(self, service, work_order, manager_id):
        with pytest.raises(WorkOrderStateError) as exc_info:
            service.start(work_order.id, actor_id=manager_id)

        assert exc_info.value.required_state == WorkOrder.Status.OPEN
        assert exc_info.value.current_state == WorkOrder.Status.DRAFT

    def test_start_by_stranger_forbidden(self, service, open_order, pilot_id):
        with pytest.raises(ForbiddenError):
            service.start(open_order.id, actor_id=pilot_id)

    def test_start_by_supervisor(self, service, open_order, manager_id):
        work_order = service.start(open_order.id, actor_id=manager_id)

        assert work_order.status == WorkOrder.Status.IN_PROGRESS

    def test_complete_requires_in_progress(self, service, open_order, mechanic_id):
        with pytest.raises(WorkOrderStateError):
            service.complete(open_order.id, actor_id=mechanic_id)

    def test_complete_with_pending_task(self, service, started_order, mechanic_id):
        service.add_task(started_order.id, 'Inspect filter')

        with pytest.raises(WorkOrderStateError):
            service.complete(started_order.id, actor_id=mechanic_id)

        started_order.refresh_from_db()
        assert started_order.status == WorkOrder.Status.IN_PROGRESS

    def test_release_requires_inspector(self, service, completed_work_order, manager_id):
        with pytest.raises(ForbiddenError):
            service.release(completed_work_order.id, actor_id=manager_id)

    def test_release_requires_completed(self, service, started_order, inspector_id):
        with pytest.raises(WorkOrderStateError):
            service.release(started_order.id, actor_id=inspector_id)

    def test_cancel(self, service, started_order, manager_id):
        work_order = service.cancel(started_order.id, actor_id=manager_id, reason='Aircraft sold')

        assert work_order.status == WorkOrder.Status.CANCELLED
        assert work_order.cancellation_reason == 'Aircraft sold'

    def test_cancel_requires_supervisor(self, service, started_order, mechanic_id):
        with pytest.raises(ForbiddenError):
            service.cancel(started_order.id, actor_id=mechanic_id)

    def test_cancel_closed_order(self, service, completed_work_order, manager_id):
        with pytest.raises(WorkOrderStateError):
            service.cancel(completed_work_order.id, actor_id=manager_id)


@pytest.mark.django_db
class TestWorkOrderCrud:

    def test_update(self, service, work_order):
        updated = service.update_work_order(work_order.id, priority=WorkOrder.Priority.HIGH)

        assert updated.priority == WorkOrder.Priority.HIGH

    def test_update_released_rejected(self, service, completed_work_order, inspector_id):
        service.release(completed_work_order.id, actor_id=inspector_id)

        with pytest.raises(WorkOrderStateError):
            service.update_work_order(completed_work_order.id, title='New title')

    def test_delete_draft(self, service, work_order):
        service.delete_work_order(work_order.id)

        with pytest.raises(WorkOrderNotFoundError):
            service.get_work_order(work_order.id)

    def test_delete_active_rejected(self, service, open_order):
        with pytest.raises(WorkOrderStateError):
            service.delete_work_order(open_order.id)

    def test_list_filters(self, service, work_order, open_order, completed_work_order, mechanic_id):
        assert set(service.list_work_orders(is_open=True)) == {work_order, open_order}
        assert service.list_work_orders(is_open=False) == [completed_work_order]
        assert set(service.list_work_orders(assigned_to=mechanic_id)) == {
            open_order, completed_work_order
        }
        assert service.list_work_orders(status=WorkOrder.Status.DRAFT) == [work_order]


@pytest.mark.django_db
class TestTasks:

    def test_sequence_assigned(self, service, work_order):
        first = service.add_task(work_order.id, 'Remove cowling')
        second = service.add_task(work_order.id, 'Inspect mounts')

        assert first.sequence == 1
        assert second.sequence == 2

    def test_add_tasks(self, service, work_order):
        tasks = service.add_tasks(work_order.id, [
            {'title': 'Borescope'},
            {'title': 'Control cable tension', 'is_rii': True, 'instructions': 'Use tensiometer'},
        ])

        assert [task.sequence for task in tasks] == [1, 2]
        assert tasks[1].is_rii
        assert tasks[1].instructions == 'Use tensiometer'

    def test_add_task_to_closed_order(self, service, completed_work_order):
        with pytest.raises(WorkOrderStateError):
            service.add_task(completed_work_order.id, 'Late task')

    def test_add_task_without_title(self, service, work_order):
        with pytest.raises(LedgerValidationError):
            service.add_task(work_order.id, '')

    def test_update_task(self, service, work_order):
        task = service.add_task(work_order.id, 'Check tyres')

        updated = service.update_task(task.id, notes='Left main worn')

        assert updated.notes == 'Left main worn'

    def test_task_status_moves(self, service, started_order, mechanic_id):
        task = service.add_task(started_order.id, 'Check tyres')

        task = service.update_task_status(task.id, WorkOrderTask.Status.IN_PROGRESS, mechanic_id)
        assert task.status == WorkOrderTask.Status.IN_PROGRESS
        assert task.started_at is not None

        task = service.update_task_status(task.id, WorkOrderTask.Status.COMPLETED, mechanic_id)
        assert task.completed_by == mechanic_id

        task = service.update_task_status(task.id, WorkOrderTask.Status.PENDING, mechanic_id)
        assert task.status == WorkOrderTask.Status.PENDING
        assert task.completed_at is None

    def test_task_status_unknown(self, service, started_order, mechanic_id):
        task = service.add_task(started_order.id, 'Check tyres')

        with pytest.raises(LedgerValidationError):
            service.update_task_status(task.id, 'skipped', mechanic_id)

    def test_task_status_by_stranger(self, service, started_order, pilot_id):
        task = service.add_task(started_order.id, 'Check tyres')

        with pytest.raises(ForbiddenError):
            service.update_task_status(task.id, WorkOrderTask.Status.IN_PROGRESS, pilot_id)

    def test_delete_task(self, service, work_order):
        task = service.add_task(work_order.id, 'Obsolete')

        service.delete_task(task.id)

        with pytest.raises(TaskNotFoundError):
            service.get_task(task.id)


@pytest.mark.django_db
class TestRequiredInspectionItems:

    @pytest.fixture
    def rii_task(self, service, started_order):
        return service.add_task(started_order.id, 'Flight control rigging', is_rii=True)

    def test_direct_completion_rejected(self, service, rii_task, mechanic_id):
        with pytest.raises(WorkOrderStateError):
            service.update_task_status(rii_task.id, WorkOrderTask.Status.COMPLETED, mechanic_id)

        rii_task.refresh_from_db()
        assert rii_task.status == WorkOrderTask.Status.PENDING
        assert rii_task.completed_at is None

    def test_non_inspector_sign_off_forbidden(self, service, rii_task, mechanic_id):
        with pytest.raises(ForbiddenError):
            service.sign_off_rii(rii_task.id, inspector_id=mechanic_id)

        rii_task.refresh_from_db()
        assert rii_task.signed_off_by is None
        assert rii_task.status == WorkOrderTask.Status.PENDING

    def test_inspector_sign_off(self, service, rii_task, inspector_id):
        task = service.sign_off_rii(rii_task.id, inspector_id=inspector_id)

        assert task.status == WorkOrderTask.Status.COMPLETED
        assert task.signed_off_by == inspector_id
        assert task.signed_off_at is not None

    def test_double_sign_off_rejected(self, service, rii_task, inspector_id, admin_id):
        service.sign_off_rii(rii_task.id, inspector_id=inspector_id)

        with pytest.raises(WorkOrderStateError):
            service.sign_off_rii(rii_task.id, inspector_id=admin_id)

        rii_task.refresh_from_db()
        assert rii_task.signed_off_by == inspector_id

    def test_sign_off_non_rii_rejected(self, service, started_order, inspector_id):
        task = service.add_task(started_order.id, 'Wash aircraft')

        with pytest.raises(WorkOrderStateError):
            service.sign_off_rii(task.id, inspector_id=inspector_id)

    def test_signed_off_task_is_frozen(self, service, rii_task, inspector_id, manager_id):
        service.sign_off_rii(rii_task.id, inspector_id=inspector_id)

        with pytest.raises(WorkOrderStateError):
            service.update_task_status(rii_task.id, WorkOrderTask.Status.PENDING, manager_id)
        with pytest.raises(WorkOrderStateError):
            service.delete_task(rii_task.id)

    def test_complete_blocked_until_signed(
        self, service, started_order, rii_task, mechanic_id, inspector_id
    ):
        with pytest.raises(WorkOrderStateError):
            service.complete(started_order.id, actor_id=mechanic_id)

        service.sign_off_rii(rii_task.id, inspector_id=inspector_id)
        work_order = service.complete(started_order.id, actor_id=mechanic_id)

        assert work_order.status == WorkOrder.Status.COMPLETED

    def test_deny_all_by_default(self, started_order, rii_task, inspector_id):
        with pytest.raises(ForbiddenError):
            WorkOrderService().sign_off_rii(rii_task.id, inspector_id=inspector_id)
