# services/ledger-service/src/apps/api/views/__init__.py
"""
API Views
"""

from .aircraft import AircraftViewSet
from .component import ComponentViewSet
from .flight_log import FlightLogViewSet
from .work_order import WorkOrderViewSet, WorkOrderTaskViewSet
from .release_record import ReleaseRecordViewSet
from .pilot_report import PilotReportViewSet

__all__ = [
    'AircraftViewSet',
    'ComponentViewSet',
    'FlightLogViewSet',
    'WorkOrderViewSet',
    'WorkOrderTaskViewSet',
    'ReleaseRecordViewSet',
    'PilotReportViewSet',
]
