# services/ledger-service/src/apps/core/services/work_order_service.py
"""
Work Order Service

Manages the work order lifecycle, its tasks and RII sign-off.
"""

import uuid
import logging
from typing import Optional, Dict, Any, List

from django.db import transaction

from common.constants import UserRole
from apps.core.events import event_publisher, LedgerEventTypes
from apps.core.models import Aircraft, WorkOrder, WorkOrderTask
from .authorization import Authorizer, DenyAllAuthorizer, require_any_role

logger = logging.getLogger(__name__)


class WorkOrderService:
    """
    Service for managing work orders.

    Handles:
    - Work order CRUD
    - Workflow transitions
    - Task management
    - RII sign-off
    """

    SUPERVISOR_ROLES = (UserRole.MANAGER, UserRole.ADMIN)
    TASK_STATUS_ROLES = (UserRole.MANAGER, UserRole.ADMIN, UserRole.INSPECTOR)
    INSPECTION_ROLES = (UserRole.INSPECTOR, UserRole.ADMIN)

    EDITABLE_FIELDS = [
        'title', 'description', 'reason', 'priority', 'work_order_type',
        'scheduled_start', 'scheduled_end', 'discrepancies',
    ]

    TASK_DETAIL_FIELDS = [
        'title', 'description', 'instructions', 'required_tools', 'result', 'notes',
        'sequence',
    ]

    def __init__(self, authorizer: Authorizer = None):
        self.authorizer = authorizer or DenyAllAuthorizer()

    # ==========================================================================
    # Work Order CRUD
    # ==========================================================================

    @transaction.atomic
    def create_work_order(
        self,
        aircraft_id: uuid.UUID,
        work_order_type: str,
        title: str,
        created_by: uuid.UUID = None,
        assigned_to: uuid.UUID = None,
        priority: str = WorkOrder.Priority.MEDIUM,
        **kwargs
    ) -> WorkOrder:
        """Create a new work order."""
        from . import AircraftNotFoundError, LedgerValidationError

        if not title:
            raise LedgerValidationError("Work order title is required")
        if work_order_type not in WorkOrder.WorkOrderType.values:
            raise LedgerValidationError(f"Unknown work order type: {work_order_type}")

        self._check_fields(kwargs, self.EDITABLE_FIELDS)

        try:
            aircraft = Aircraft.objects.get(id=aircraft_id, is_active=True)
        except Aircraft.DoesNotExist:
            raise AircraftNotFoundError(f"Aircraft {aircraft_id} not found")

        work_order = WorkOrder(
            aircraft=aircraft,
            work_order_type=work_order_type,
            title=title,
            priority=priority,
            created_by=created_by,
            aircraft_hours_at_creation=aircraft.total_flight_hours,
            aircraft_cycles_at_creation=aircraft.total_flight_cycles,
            **kwargs
        )
        work_order.save()

        if assigned_to:
            work_order.assign(assigned_to)

        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_CREATED, work_order)
        logger.info(f"Created work order: {work_order.order_number} ({work_order.status})")
        return work_order

    def get_work_order(self, work_order_id: uuid.UUID) -> WorkOrder:
        """Get a work order by ID."""
        try:
            return WorkOrder.objects.prefetch_related('tasks').get(
                id=work_order_id, is_deleted=False
            )
        except WorkOrder.DoesNotExist:
            from . import WorkOrderNotFoundError
            raise WorkOrderNotFoundError(f"Work order {work_order_id} not found")

    def list_work_orders(
        self,
        aircraft_id: uuid.UUID = None,
        status: str = None,
        assigned_to: uuid.UUID = None,
        is_open: bool = None
    ) -> List[WorkOrder]:
        """List work orders with filters."""
        queryset = WorkOrder.objects.filter(is_deleted=False)

        if aircraft_id:
            queryset = queryset.filter(aircraft_id=aircraft_id)
        if status:
            queryset = queryset.filter(status=status)
        if assigned_to:
            queryset = queryset.filter(assigned_to=assigned_to)
        if is_open is True:
            queryset = queryset.filter(status__in=WorkOrder.OPEN_STATUSES)
        elif is_open is False:
            queryset = queryset.filter(status__in=WorkOrder.CLOSED_STATUSES)

        return list(queryset.order_by('-created_at'))

    @transaction.atomic
    def update_work_order(self, work_order_id: uuid.UUID, **kwargs) -> WorkOrder:
        """Update a work order."""
        self._check_fields(kwargs, self.EDITABLE_FIELDS)
        work_order = self._lock(work_order_id)

        if work_order.status in (WorkOrder.Status.RELEASED, WorkOrder.Status.CANCELLED):
            from . import WorkOrderStateError
            raise WorkOrderStateError(
                f"Cannot update work order in {work_order.status} status",
                current_state=work_order.status
            )

        for field, value in kwargs.items():
            setattr(work_order, field, value)

        work_order.save()
        return work_order

    @transaction.atomic
    def delete_work_order(self, work_order_id: uuid.UUID, deleted_by: uuid.UUID = None) -> None:
        """Soft delete a work order."""
        work_order = self._lock(work_order_id)

        if work_order.status in (WorkOrder.Status.OPEN, WorkOrder.Status.IN_PROGRESS):
            from . import WorkOrderStateError
            raise WorkOrderStateError(
                f"Cannot delete work order in {work_order.status} status",
                current_state=work_order.status
            )

        work_order.soft_delete(deleted_by)
        logger.info(f"Deleted work order {work_order.order_number}")

    # ==========================================================================
    # Workflow
    # ==========================================================================

    @transaction.atomic
    def assign(self, work_order_id: uuid.UUID, user_id: uuid.UUID, actor_id: uuid.UUID) -> WorkOrder:
        """Assign the work order to a user."""
        require_any_role(self.authorizer, actor_id, self.SUPERVISOR_ROLES, 'Assigning a work order')
        work_order = self._lock(work_order_id)

        if work_order.status in WorkOrder.CLOSED_STATUSES:
            self._reject(work_order, 'assign', required_state='draft, open or in_progress')

        work_order.assign(user_id)
        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_ASSIGNED, work_order)
        logger.info(f"Assigned work order {work_order.order_number} to {user_id}")
        return work_order

    @transaction.atomic
    def start(self, work_order_id: uuid.UUID, actor_id: uuid.UUID) -> WorkOrder:
        """Start work on the work order."""
        work_order = self._lock(work_order_id)

        if not self._is_assignee(work_order, actor_id):
            require_any_role(self.authorizer, actor_id, self.SUPERVISOR_ROLES, 'Starting a work order')

        if work_order.status != WorkOrder.Status.OPEN:
            self._reject(work_order, 'start', required_state=WorkOrder.Status.OPEN)

        work_order.start()
        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_STARTED, work_order)
        logger.info(f"Started work order {work_order.order_number}")
        return work_order

    @transaction.atomic
    def complete(
        self,
        work_order_id: uuid.UUID,
        actor_id: uuid.UUID,
        notes: Optional[str] = None
    ) -> WorkOrder:
        """Complete the work order."""
        from . import WorkOrderStateError

        work_order = self._lock(work_order_id)

        if work_order.status != WorkOrder.Status.IN_PROGRESS:
            self._reject(work_order, 'complete', required_state=WorkOrder.Status.IN_PROGRESS)

        incomplete_tasks = work_order.tasks.exclude(status=WorkOrderTask.Status.COMPLETED).count()
        if incomplete_tasks > 0:
            raise WorkOrderStateError(
                f"{incomplete_tasks} tasks are not completed",
                required_state='all tasks completed',
                current_state=work_order.status
            )

        unsigned_rii = work_order.tasks.filter(is_rii=True, signed_off_by__isnull=True).count()
        if unsigned_rii > 0:
            raise WorkOrderStateError(
                f"{unsigned_rii} RII tasks are not signed off",
                required_state='all RII tasks signed off',
                current_state=work_order.status
            )

        work_order.complete(completed_by=actor_id, notes=notes)
        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_COMPLETED, work_order)
        logger.info(f"Completed work order {work_order.order_number}")
        return work_order

    @transaction.atomic
    def release(self, work_order_id: uuid.UUID, actor_id: uuid.UUID) -> WorkOrder:
        """Release a completed work order."""
        require_any_role(self.authorizer, actor_id, self.INSPECTION_ROLES, 'Releasing a work order')
        work_order = self._lock(work_order_id)

        if work_order.status != WorkOrder.Status.COMPLETED:
            self._reject(work_order, 'release', required_state=WorkOrder.Status.COMPLETED)

        work_order.release(released_by=actor_id)
        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_RELEASED, work_order)
        logger.info(f"Released work order {work_order.order_number}")
        return work_order

    @transaction.atomic
    def cancel(
        self,
        work_order_id: uuid.UUID,
        actor_id: uuid.UUID,
        reason: Optional[str] = None
    ) -> WorkOrder:
        """Cancel the work order."""
        require_any_role(self.authorizer, actor_id, self.SUPERVISOR_ROLES, 'Cancelling a work order')
        work_order = self._lock(work_order_id)

        if work_order.status not in WorkOrder.OPEN_STATUSES:
            self._reject(work_order, 'cancel', required_state='draft, open or in_progress')

        work_order.cancel(reason)
        event_publisher.work_order_changed(LedgerEventTypes.WORK_ORDER_CANCELLED, work_order)
        logger.info(f"Cancelled work order {work_order.order_number}: {reason}")
        return work_order

    # ==========================================================================
    # Task Management
    # ==========================================================================

    @transaction.atomic
    def add_task(
        self,
        work_order_id: uuid.UUID,
        title: str,
        is_rii: bool = False,
        sequence: int = None,
        **kwargs
    ) -> WorkOrderTask:
        """Add a task to a work order."""
        work_order = self._lock(work_order_id)
        return self._create_task(work_order, title, is_rii, sequence, **kwargs)

    @transaction.atomic
    def add_tasks(self, work_order_id: uuid.UUID, tasks: List[Dict[str, Any]]) -> List[WorkOrderTask]:
        """Add several tasks in one go."""
        work_order = self._lock(work_order_id)
        return [
            self._create_task(
                work_order,
                task.get('title'),
                task.get('is_rii', False),
                task.get('sequence'),
                **{k: v for k, v in task.items() if k not in ('title', 'is_rii', 'sequence')}
            )
            for task in tasks
        ]

    def get_task(self, task_id: uuid.UUID) -> WorkOrderTask:
        """Get a task by ID."""
        try:
            return WorkOrderTask.objects.select_related('work_order').get(id=task_id)
        except WorkOrderTask.DoesNotExist:
            from . import TaskNotFoundError
            raise TaskNotFoundError(f"Task {task_id} not found")

    @transaction.atomic
    def update_task(self, task_id: uuid.UUID, **kwargs) -> WorkOrderTask:
        """Update a task's descriptive fields."""
        self._check_fields(kwargs, self.TASK_DETAIL_FIELDS)
        task = self._lock_task(task_id)
        self._require_open_order(task.work_order, 'update a task')

        for field, value in kwargs.items():
            setattr(task, field, value)

        task.save()
        return task

    @transaction.atomic
    def update_task_status(self, task_id: uuid.UUID, status: str, actor_id: uuid.UUID) -> WorkOrderTask:
        """Move a task between pending, in progress and completed."""
        from . import LedgerValidationError, WorkOrderStateError

        task = self._lock_task(task_id)
        work_order = task.work_order

        if not self._is_assignee(work_order, actor_id):
            require_any_role(self.authorizer, actor_id, self.TASK_STATUS_ROLES, 'Updating task status')

        self._require_open_order(work_order, 'change task status')

        if status not in WorkOrderTask.Status.values:
            raise LedgerValidationError(f"Unknown task status: {status}")

        if task.is_signed_off:
            raise WorkOrderStateError(
                "Signed-off RII task cannot change status",
                current_state=task.status
            )

        if status == WorkOrderTask.Status.COMPLETED:
            if task.is_rii:
                logger.warning(f"Rejected direct completion of RII task {task.id}")
                raise WorkOrderStateError(
                    "RII task can only be completed by inspector sign-off",
                    required_state='signed off',
                    current_state=task.status
                )
            task.complete(completed_by=actor_id)
        elif status == WorkOrderTask.Status.IN_PROGRESS:
            task.start()
        else:
            task.reset()

        logger.info(f"Task {task.id} of {work_order.order_number} is now {task.status}")
        return task

    @transaction.atomic
    def sign_off_rii(self, task_id: uuid.UUID, inspector_id: uuid.UUID) -> WorkOrderTask:
        """Inspector sign-off of a Required Inspection Item."""
        from . import WorkOrderStateError

        require_any_role(self.authorizer, inspector_id, self.INSPECTION_ROLES, 'RII sign-off')
        task = self._lock_task(task_id)

        if not task.is_rii:
            raise WorkOrderStateError(
                "Only RII tasks require inspector sign-off",
                required_state='rii'
            )

        if task.is_signed_off:
            raise WorkOrderStateError(
                "RII task is already signed off",
                current_state='signed off'
            )

        self._require_open_order(task.work_order, 'sign off a task')

        task.sign_off(inspector_id)
        event_publisher.task_signed_off(task)
        logger.info(f"RII task {task.id} signed off by {inspector_id}")
        return task

    @transaction.atomic
    def delete_task(self, task_id: uuid.UUID) -> None:
        """Delete a task."""
        from . import WorkOrderStateError

        task = self._lock_task(task_id)

        if task.is_signed_off:
            raise WorkOrderStateError(
                "Signed-off RII task cannot be deleted",
                current_state='signed off'
            )

        self._require_open_order(task.work_order, 'delete a task')
        task.delete()

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _lock(self, work_order_id: uuid.UUID) -> WorkOrder:
        try:
            return WorkOrder.objects.select_for_update().get(id=work_order_id, is_deleted=False)
        except WorkOrder.DoesNotExist:
            from . import WorkOrderNotFoundError
            raise WorkOrderNotFoundError(f"Work order {work_order_id} not found")

    def _lock_task(self, task_id: uuid.UUID) -> WorkOrderTask:
        try:
            return WorkOrderTask.objects.select_for_update().select_related('work_order').get(
                id=task_id, work_order__is_deleted=False
            )
        except WorkOrderTask.DoesNotExist:
            from . import TaskNotFoundError
            raise TaskNotFoundError(f"Task {task_id} not found")

    def _create_task(
        self,
        work_order: WorkOrder,
        title: str,
        is_rii: bool,
        sequence: Optional[int],
        **kwargs
    ) -> WorkOrderTask:
        from . import LedgerValidationError

        self._require_open_order(work_order, 'add a task')
        self._check_fields(kwargs, self.TASK_DETAIL_FIELDS)

        if not title:
            raise LedgerValidationError("Task title is required")

        if sequence is None:
            last = work_order.tasks.order_by('-sequence').values_list('sequence', flat=True).first()
            sequence = (last or 0) + 1

        task = WorkOrderTask.objects.create(
            work_order=work_order,
            title=title,
            is_rii=is_rii,
            sequence=sequence,
            **kwargs
        )
        return task

    def _require_open_order(self, work_order: WorkOrder, action: str) -> None:
        if work_order.status not in WorkOrder.OPEN_STATUSES:
            self._reject(work_order, action, required_state='draft, open or in_progress')

    def _reject(self, work_order: WorkOrder, action: str, required_state: str) -> None:
        from . import WorkOrderStateError

        logger.warning(
            f"Rejected {action} on work order {work_order.order_number} in {work_order.status} status"
        )
        raise WorkOrderStateError(
            f"Cannot {action}: work order {work_order.order_number} is {work_order.status}",
            required_state=required_state,
            current_state=work_order.status
        )

    def _is_assignee(self, work_order: WorkOrder, actor_id: uuid.UUID) -> bool:
        return work_order.assigned_to is not None and str(work_order.assigned_to) == str(actor_id)

    def _check_fields(self, values: Dict[str, Any], allowed: List[str]) -> None:
        unknown = sorted(set(values) - set(allowed))
        if unknown:
            from . import LedgerValidationError
            raise LedgerValidationError(f"Fields cannot be set: {', '.join(unknown)}")
