# services/ledger-service/src/apps/api/views/component.py
"""
Component API Views
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from common.constants import UserRole
from apps.core.models import Component
from apps.core.services import ComponentService
from apps.api.serializers import (
    ComponentSerializer,
    ComponentCreateSerializer,
    ComponentInstallationSerializer,
    ComponentInstallSerializer,
    ComponentRemoveSerializer,
)
from .base import LedgerViewMixin
from .filters import ComponentFilter

MAINTENANCE_ROLES = (UserRole.ADMIN, UserRole.MANAGER, UserRole.MECHANIC)


class ComponentViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for components.

    Custom actions:
    - install: Install on an aircraft
    - remove: Remove from its aircraft
    - installations: Installation history
    - due_for_maintenance: Life-limited parts nearing a limit
    """

    queryset = Component.objects.all()
    serializer_class = ComponentSerializer
    filterset_class = ComponentFilter
    ordering_fields = ['part_number', 'serial_number', 'total_flight_hours']
    ordering = ['part_number', 'serial_number']
    http_method_names = ['get', 'post', 'head', 'options']

    action_roles = {
        'create': MAINTENANCE_ROLES,
        'install': MAINTENANCE_ROLES,
        'remove': MAINTENANCE_ROLES,
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = ComponentService()

    def get_serializer_class(self):
        if self.action == 'create':
            return ComponentCreateSerializer
        return ComponentSerializer

    def create(self, request, *args, **kwargs):
        """Register a component."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        component = self.service.create_component(**serializer.validated_data)
        return Response(
            ComponentSerializer(component).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'])
    def install(self, request, pk=None):
        """Install the component on an aircraft."""
        serializer = ComponentInstallSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        installation = self.service.install(
            component_id=pk,
            installed_by=self.actor_id,
            **serializer.validated_data
        )
        return Response(
            ComponentInstallationSerializer(installation).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'])
    def remove(self, request, pk=None):
        """Remove the component from its aircraft."""
        serializer = ComponentRemoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        installation = self.service.remove(
            component_id=pk,
            removed_by=self.actor_id,
            notes=serializer.validated_data.get('notes')
        )
        return Response(ComponentInstallationSerializer(installation).data)

    @action(detail=True, methods=['get'])
    def installations(self, request, pk=None):
        """Installation history, newest first."""
        history = self.service.installation_history(pk)
        return Response(ComponentInstallationSerializer(history, many=True).data)

    @action(detail=False, methods=['get'], url_path='due-for-maintenance')
    def due_for_maintenance(self, request):
        """Life-limited components at or near their hour or cycle limit."""
        components = self.service.find_due_for_maintenance()
        return Response(ComponentSerializer(components, many=True).data)
