# services/ledger-service/src/apps/api/views/release_record.py
"""
Release Record API Views
"""

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from common.constants import UserRole
from common.exceptions import ValidationException
from apps.core.models import ReleaseRecord
from apps.core.services import ReleaseService
from apps.api.serializers import (
    ReleaseRecordSerializer,
    ReleaseIssueSerializer,
    ReleaseUpdateSerializer,
    ReleaseSignSerializer,
)
from .base import LedgerViewMixin
from .filters import ReleaseRecordFilter

ISSUERS = (UserRole.ADMIN, UserRole.MANAGER, UserRole.INSPECTOR)


class ReleaseRecordViewSet(LedgerViewMixin, viewsets.ModelViewSet):
    """
    ViewSet for release-to-service records.

    Custom actions:
    - sign: Apply the inspector signature
    - current: The aircraft's current release
    """

    queryset = ReleaseRecord.objects.filter(is_active=True)
    serializer_class = ReleaseRecordSerializer
    filterset_class = ReleaseRecordFilter
    ordering_fields = ['created_at', 'signed_at']
    ordering = ['-created_at']

    action_roles = {
        'create': ISSUERS,
        'update': ISSUERS,
        'partial_update': ISSUERS,
        'destroy': (UserRole.ADMIN,),
        'sign': (UserRole.INSPECTOR, UserRole.ADMIN),
    }

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.service = ReleaseService(authorizer=self.authorizer)

    def get_serializer_class(self):
        if self.action == 'create':
            return ReleaseIssueSerializer
        elif self.action in ['update', 'partial_update']:
            return ReleaseUpdateSerializer
        return ReleaseRecordSerializer

    def create(self, request, *args, **kwargs):
        """Issue a release; the aircraft's current one is superseded."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        release = self.service.issue_release(
            issued_by=self.actor_id,
            **serializer.validated_data
        )
        return Response(
            ReleaseRecordSerializer(release).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """Edit an unsigned release."""
        instance = self.get_object()

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        release = self.service.update_release(instance.id, **serializer.validated_data)
        return Response(ReleaseRecordSerializer(release).data)

    def destroy(self, request, *args, **kwargs):
        """Delete an unsigned release."""
        instance = self.get_object()
        self.service.delete_release(instance.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def sign(self, request, pk=None):
        """Sign the release."""
        serializer = ReleaseSignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        release = self.service.sign_release(
            release_id=pk,
            signature_hash=serializer.validated_data['signature_hash'],
            signed_by=self.actor_id
        )
        return Response(ReleaseRecordSerializer(release).data)

    @action(detail=False, methods=['get'])
    def current(self, request):
        """Current release of ?aircraft_id=."""
        aircraft_id = request.query_params.get('aircraft_id')
        if not aircraft_id:
            raise ValidationException(errors={'aircraft_id': ['This parameter is required.']})

        release = self.service.get_current_release(aircraft_id)
        return Response({
            'aircraft_id': aircraft_id,
            'released': release is not None and release.is_signed,
            'release': ReleaseRecordSerializer(release).data if release else None,
        })
