# services/ledger-service/src/apps/core/models/__init__.py
"""
Ledger Service Models

Aircraft, components, flights, maintenance, releases and pilot reports.
"""

from .aircraft import Aircraft
from .component import Component, ComponentInstallation
from .flight_log import FlightLog
from .work_order import WorkOrder, WorkOrderTask
from .release_record import ReleaseRecord
from .pilot_report import PilotReport

__all__ = [
    'Aircraft',
    'Component',
    'ComponentInstallation',
    'FlightLog',
    'WorkOrder',
    'WorkOrderTask',
    'ReleaseRecord',
    'PilotReport',
]
