# services/ledger-service/src/apps/api/views/flight_log.py
"""
Flight Log API Views
"""

from rest_framework import viewsets, status
from rest_framework.response import Response

from common.constants import UserRole
from apps.core.models import FlightLog
from apps.core.services import FlightLogService
from apps.api.serializers import (
    FlightLogSerializer,
    FlightLogCreateSerializer,
    FlightLogUpdateSerializer,
    FlightLogQuerySerializer,
)
from .base import LedgerViewMixin


class FlightLogViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for flight logs.

    Recording a flight updates aircraft and component counters.
    Corrections and deletes do not, and say so in ``warnings``.
    """

    queryset = FlightLog.objects.filter(is_deleted=False)
    serializer_class = FlightLogSerializer

    action_roles = {
        'update': (UserRole.ADMIN, UserRole.MANAGER),
        'partial_update': (UserRole.ADMIN, UserRole.MANAGER),
        'destroy': (UserRole.ADMIN,),
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = FlightLogService()

    def get_serializer_class(self):
        if self.action == 'create':
            return FlightLogCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return FlightLogUpdateSerializer
        return FlightLogSerializer

    def list(self, request, *args, **kwargs):
        """List flight logs by aircraft, pilot and date range."""
        query = FlightLogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        flight_logs = self.service.list_flight_logs(**query.validated_data)

        page = self.paginate_queryset(flight_logs)
        if page is not None:
            return self.get_paginated_response(FlightLogSerializer(page, many=True).data)
        return Response(FlightLogSerializer(flight_logs, many=True).data)

    def create(self, request, *args, **kwargs):
        """Record a flight."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        data.setdefault('pilot_id', self.actor_id)

        flight_log = self.service.record_flight(**data)
        return Response(
            FlightLogSerializer(flight_log).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """Correct a flight log."""
        partial = kwargs.pop('partial', False)
        instance = self.get_object()

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        flight_log, warnings = self.service.update_flight(
            instance.id,
            **serializer.validated_data
        )
        return Response({
            'flight_log': FlightLogSerializer(flight_log).data,
            'warnings': warnings,
        })

    def destroy(self, request, *args, **kwargs):
        """Soft delete a flight log."""
        instance = self.get_object()
        warnings = self.service.delete_flight(instance.id, deleted_by=self.actor_id)
        return Response({'deleted': True, 'warnings': warnings})
