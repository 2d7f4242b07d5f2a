# services/ledger-service/src/apps/api/views/pilot_report.py
"""
Pilot Report API Views
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from common.constants import UserRole
from apps.core.models import PilotReport
from apps.core.services import PilotReportService
from apps.api.serializers import (
    PilotReportSerializer,
    PilotReportCreateSerializer,
    PilotReportUpdateSerializer,
    PilotReportStatusSerializer,
    PilotReportLinkSerializer,
)
from .base import LedgerViewMixin
from .filters import PilotReportFilter

MAINTENANCE_STAFF = (UserRole.ADMIN, UserRole.MANAGER, UserRole.MECHANIC, UserRole.INSPECTOR)


class PilotReportViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for pilot reports (PIREPs).

    Any authenticated user may file a report. A critical report grounds
    the aircraft until it is resolved.
    """

    queryset = PilotReport.objects.filter(is_deleted=False)
    serializer_class = PilotReportSerializer
    filterset_class = PilotReportFilter
    ordering_fields = ['created_at', 'severity']
    ordering = ['-created_at']

    action_roles = {
        'update': MAINTENANCE_STAFF,
        'partial_update': MAINTENANCE_STAFF,
        'update_status': MAINTENANCE_STAFF,
        'link_work_order': (UserRole.ADMIN, UserRole.MANAGER, UserRole.MECHANIC),
        'destroy': (UserRole.ADMIN, UserRole.MANAGER),
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = PilotReportService()

    def get_serializer_class(self):
        if self.action == 'create':
            return PilotReportCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return PilotReportUpdateSerializer
        return PilotReportSerializer

    def create(self, request, *args, **kwargs):
        """File a pilot report."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = self.service.report_defect(
            reported_by=self.actor_id,
            **serializer.validated_data
        )
        return Response(
            PilotReportSerializer(report).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """Update report details."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        report = self.service.update_report(instance.id, **serializer.validated_data)
        return Response(PilotReportSerializer(report).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete a report."""
        instance = self.get_object()
        self.service.delete_report(instance.id, deleted_by=self.actor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='status', url_name='status')
    def update_status(self, request, pk=None):
        """Move the report through its workflow."""
        serializer = PilotReportStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = self.service.update_status(
            report_id=pk,
            actor_id=self.actor_id,
            **serializer.validated_data
        )
        return Response(PilotReportSerializer(report).data)

    @action(detail=True, methods=['post'], url_path='link-work-order')
    def link_work_order(self, request, pk=None):
        """Link the work order that addresses this report."""
        serializer = PilotReportLinkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = self.service.link_to_work_order(
            report_id=pk,
            work_order_id=serializer.validated_data['work_order_id']
        )
        return Response(PilotReportSerializer(report).data)
