# services/ledger-service/src/apps/api/serializers/__init__.py
"""
API Serializers
"""

from .aircraft import AircraftSerializer, AircraftStatisticsSerializer
from .component import (
    ComponentSerializer,
    ComponentCreateSerializer,
    ComponentInstallationSerializer,
    ComponentInstallSerializer,
    ComponentRemoveSerializer,
)
from .flight_log import (
    FlightLogSerializer,
    FlightLogCreateSerializer,
    FlightLogUpdateSerializer,
    FlightLogQuerySerializer,
)
from .work_order import (
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
from .release_record import (
    ReleaseRecordSerializer,
    ReleaseIssueSerializer,
    ReleaseUpdateSerializer,
    ReleaseSignSerializer,
)
from .pilot_report import (
    PilotReportSerializer,
    PilotReportCreateSerializer,
    PilotReportUpdateSerializer,
    PilotReportStatusSerializer,
    PilotReportLinkSerializer,
)

__all__ = [
    # Aircraft
    'AircraftSerializer',
    'AircraftStatisticsSerializer',

    # Components
    'ComponentSerializer',
    'ComponentCreateSerializer',
    'ComponentInstallationSerializer',
    'ComponentInstallSerializer',
    'ComponentRemoveSerializer',

    # Flight Logs
    'FlightLogSerializer',
    'FlightLogCreateSerializer',
    'FlightLogUpdateSerializer',
    'FlightLogQuerySerializer',

    # Work Orders
    'WorkOrderSerializer',
    'WorkOrderListSerializer',
    'WorkOrderDetailSerializer',
    'WorkOrderCreateSerializer',
    'WorkOrderUpdateSerializer',
    'WorkOrderAssignSerializer',
    'WorkOrderCompleteSerializer',
    'WorkOrderCancelSerializer',
    'WorkOrderTaskSerializer',
    'WorkOrderTaskCreateSerializer',
    'WorkOrderTaskUpdateSerializer',
    'WorkOrderTaskStatusSerializer',

    # Releases
    'ReleaseRecordSerializer',
    'ReleaseIssueSerializer',
    'ReleaseUpdateSerializer',
    'ReleaseSignSerializer',

    # Pilot Reports
    'PilotReportSerializer',
    'PilotReportCreateSerializer',
    'PilotReportUpdateSerializer',
    'PilotReportStatusSerializer',
    'PilotReportLinkSerializer',
]
