# services/ledger-service/src/apps/api/views/aircraft.py
"""
Aircraft API Views
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.constants import UserRole
from apps.core.models import Aircraft
from apps.core.services import ComponentService, FlightLogService, ReleaseService
from apps.api.serializers import (
    AircraftSerializer,
    AircraftStatisticsSerializer,
    ComponentSerializer,
    PilotReportSerializer,
    ReleaseRecordSerializer,
)
from .base import LedgerViewMixin
from .filters import AircraftFilter


class AircraftViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for aircraft.

    Custom actions:
    - components: Components currently installed
    - release_status: Derived airworthiness
    - statistics: Flight totals
    """

    queryset = Aircraft.objects.all()
    serializer_class = AircraftSerializer
    filterset_class = AircraftFilter
    ordering_fields = ['registration', 'total_flight_hours', 'created_at']
    ordering = ['registration']
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    action_roles = {
        'create': (UserRole.ADMIN, UserRole.MANAGER),
        'partial_update': (UserRole.ADMIN, UserRole.MANAGER),
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.component_service = ComponentService()
        self.flight_service = FlightLogService()
        self.release_service = ReleaseService()

    @action(detail=True, methods=['get'])
    def components(self, request, pk=None):
        """Components with an open installation on this aircraft."""
        aircraft = self.get_object()
        components = self.component_service.installed_components(aircraft.id)
        return Response(ComponentSerializer(components, many=True).data)

    @action(detail=True, methods=['get'], url_path='release-status')
    def release_status(self, request, pk=None):
        """Whether the aircraft is released and airworthy."""
        aircraft = self.get_object()
        status_data = self.release_service.get_airworthiness(aircraft.id)
        release = status_data['current_release']

        return Response({
            'aircraft_id': str(aircraft.id),
            'registration': aircraft.registration,
            'released': status_data['released'],
            'airworthy': status_data['airworthy'],
            'release_status': status_data['release_status'],
            'current_release': ReleaseRecordSerializer(release).data if release else None,
            'aog_reports': PilotReportSerializer(status_data['aog_reports'], many=True).data,
        })

    @action(detail=True, methods=['get'])
    def statistics(self, request, pk=None):
        """Flight totals over live flight logs."""
        aircraft = self.get_object()
        stats = self.flight_service.get_aircraft_statistics(aircraft.id)
        return Response(AircraftStatisticsSerializer(stats).data)
