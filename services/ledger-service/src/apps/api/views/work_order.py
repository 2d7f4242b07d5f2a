# services/ledger-service/src/apps/api/views/work_order.py
"""
Work Order API Views
"""

from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from common.constants import UserRole
from apps.core.models import WorkOrder, WorkOrderTask
from apps.core.services import WorkOrderService
from apps.api.serializers import (
    WorkOrderSerializer,
    WorkOrderListSerializer,
    WorkOrderDetailSerializer,
    WorkOrderCreateSerializer,
    WorkOrderUpdateSerializer,
    WorkOrderAssignSerializer,
    WorkOrderCompleteSerializer,
    WorkOrderCancelSerializer,
    WorkOrderTaskSerializer,
    WorkOrderTaskCreateSerializer,
    WorkOrderTaskUpdateSerializer,
    WorkOrderTaskStatusSerializer,
)
from .base import LedgerViewMixin
from .filters import WorkOrderFilter

ALL_MAINTENANCE = (UserRole.ADMIN, UserRole.MANAGER, UserRole.MECHANIC, UserRole.INSPECTOR)
HANDS_ON = (UserRole.ADMIN, UserRole.MANAGER, UserRole.MECHANIC)
SUPERVISORS = (UserRole.ADMIN, UserRole.MANAGER)
INSPECTORS = (UserRole.INSPECTOR, UserRole.ADMIN)


class WorkOrderViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for Work Orders.

    Provides CRUD operations and workflow actions.
    """

    queryset = WorkOrder.objects.filter(is_deleted=False)
    serializer_class = WorkOrderSerializer
    filterset_class = WorkOrderFilter
    ordering_fields = ['created_at', 'priority', 'scheduled_start']
    ordering = ['-created_at']

    action_roles = {
        'create': ALL_MAINTENANCE,
        'update': ALL_MAINTENANCE,
        'partial_update': ALL_MAINTENANCE,
        'destroy': (UserRole.ADMIN,),
        'assign': SUPERVISORS,
        'start': HANDS_ON,
        'complete': HANDS_ON,
        'release': INSPECTORS,
        'cancel': SUPERVISORS,
        'add_task': ALL_MAINTENANCE,
    }

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.service = WorkOrderService(authorizer=self.authorizer)

    def get_serializer_class(self):
        if self.action == 'list':
            return WorkOrderListSerializer
        elif self.action == 'retrieve':
            return WorkOrderDetailSerializer
        elif self.action == 'create':
            return WorkOrderCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return WorkOrderUpdateSerializer
        return WorkOrderSerializer

    def create(self, request, *args, **kwargs):
        """Create a new work order."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        work_order = self.service.create_work_order(
            created_by=self.actor_id,
            **serializer.validated_data
        )
        return Response(
            WorkOrderDetailSerializer(work_order).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """Update a work order."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        work_order = self.service.update_work_order(instance.id, **serializer.validated_data)
        return Response(WorkOrderDetailSerializer(work_order).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete a work order."""
        instance = self.get_object()
        self.service.delete_work_order(instance.id, deleted_by=self.actor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ==========================================================================
    # Workflow Actions
    # ==========================================================================

    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        """Assign the work order."""
        serializer = WorkOrderAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        work_order = self.service.assign(
            work_order_id=pk,
            user_id=serializer.validated_data['user_id'],
            actor_id=self.actor_id
        )
        return Response(WorkOrderDetailSerializer(work_order).data)

    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        """Start work."""
        work_order = self.service.start(work_order_id=pk, actor_id=self.actor_id)
        return Response(WorkOrderDetailSerializer(work_order).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Complete the work order."""
        serializer = WorkOrderCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        work_order = self.service.complete(
            work_order_id=pk,
            actor_id=self.actor_id,
            notes=serializer.validated_data.get('notes')
        )
        return Response(WorkOrderDetailSerializer(work_order).data)

    @action(detail=True, methods=['post'])
    def release(self, request, pk=None):
        """Release the completed work order."""
        work_order = self.service.release(work_order_id=pk, actor_id=self.actor_id)
        return Response(WorkOrderDetailSerializer(work_order).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Cancel the work order."""
        serializer = WorkOrderCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        work_order = self.service.cancel(
            work_order_id=pk,
            actor_id=self.actor_id,
            reason=serializer.validated_data.get('reason')
        )
        return Response(WorkOrderDetailSerializer(work_order).data)

    # ==========================================================================
    # Tasks
    # ==========================================================================

    @action(detail=True, methods=['get'])
    def tasks(self, request, pk=None):
        """List the work order's tasks."""
        work_order = self.get_object()
        return Response(WorkOrderTaskSerializer(work_order.tasks.all(), many=True).data)

    @tasks.mapping.post
    def add_task(self, request, pk=None):
        """Add a task."""
        serializer = WorkOrderTaskCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = self.service.add_task(work_order_id=pk, **serializer.validated_data)
        return Response(
            WorkOrderTaskSerializer(task).data,
            status=status.HTTP_201_CREATED
        )


class WorkOrderTaskViewSet(
    LedgerViewMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for work order tasks.

    Tasks are created through their work order; RII tasks are closed
    only by inspector sign-off.
    """

    queryset = WorkOrderTask.objects.filter(work_order__is_deleted=False)
    serializer_class = WorkOrderTaskSerializer

    action_roles = {
        'update': ALL_MAINTENANCE,
        'partial_update': ALL_MAINTENANCE,
        'destroy': (UserRole.ADMIN, UserRole.MANAGER, UserRole.INSPECTOR),
        'update_status': ALL_MAINTENANCE,
        'sign_off': INSPECTORS,
    }

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.service = WorkOrderService(authorizer=self.authorizer)

    def get_queryset(self):
        queryset = super().get_queryset()
        work_order_id = self.request.query_params.get('work_order_id')
        if work_order_id:
            queryset = queryset.filter(work_order_id=work_order_id)
        return queryset.order_by('work_order', 'sequence')

    def get_serializer_class(self):
        if self.action in ['update', 'partial_update']:
            return WorkOrderTaskUpdateSerializer
        return WorkOrderTaskSerializer

    def update(self, request, *args, **kwargs):
        """Update task details."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        task = self.service.update_task(instance.id, **serializer.validated_data)
        return Response(WorkOrderTaskSerializer(task).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a task."""
        instance = self.get_object()
        self.service.delete_task(instance.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='status', url_name='status')
    def update_status(self, request, pk=None):
        """Move the task to pending, in progress or completed."""
        serializer = WorkOrderTaskStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = self.service.update_task_status(
            task_id=pk,
            status=serializer.validated_data['status'],
            actor_id=self.actor_id
        )
        return Response(WorkOrderTaskSerializer(task).data)

    @action(detail=True, methods=['post'], url_path='sign-off')
    def sign_off(self, request, pk=None):
        """Inspector sign-off of an RII task."""
        task = self.service.sign_off_rii(task_id=pk, inspector_id=self.actor_id)
        return Response(WorkOrderTaskSerializer(task).data)
