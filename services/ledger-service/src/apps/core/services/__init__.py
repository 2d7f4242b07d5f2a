# services/ledger-service/src/apps/core/services/__init__.py
"""
Ledger Service Business Logic

All services for the airworthiness ledger.
"""

from .authorization import (
    Authorizer,
    TokenRoleAuthorizer,
    StaticRoleAuthorizer,
    DenyAllAuthorizer,
    require_any_role,
)
from .metrics_service import MetricsPropagator, PropagationResult
from .component_service import ComponentService
from .flight_log_service import FlightLogService
from .work_order_service import WorkOrderService
from .release_service import ReleaseService
from .pilot_report_service import PilotReportService


# Custom Exceptions
class LedgerServiceError(Exception):
    """Base exception for ledger service errors."""
    pass


# Not found

class NotFoundError(LedgerServiceError):
    """Requested record does not exist."""
    pass


class AircraftNotFoundError(NotFoundError):
    """Aircraft not found or inactive."""
    pass


class ComponentNotFoundError(NotFoundError):
    """Component not found."""
    pass


class FlightLogNotFoundError(NotFoundError):
    """Flight log not found."""
    pass


class WorkOrderNotFoundError(NotFoundError):
    """Work order not found."""
    pass


class TaskNotFoundError(NotFoundError):
    """Work order task not found."""
    pass


class ReleaseNotFoundError(NotFoundError):
    """Release record not found."""
    pass


class PilotReportNotFoundError(NotFoundError):
    """Pilot report not found."""
    pass


# State

class InvalidStateTransitionError(LedgerServiceError):
    """The record is not in a state that allows the operation."""

    def __init__(self, message: str, required_state=None, current_state=None):
        super().__init__(message)
        self.required_state = required_state
        self.current_state = current_state


class WorkOrderStateError(InvalidStateTransitionError):
    """Invalid work order or task state transition."""
    pass


class ReleaseStateError(InvalidStateTransitionError):
    """Invalid release record state."""
    pass


class PilotReportStateError(InvalidStateTransitionError):
    """Invalid pilot report state transition."""
    pass


# Authority

class ForbiddenError(LedgerServiceError):
    """Actor lacks the authority for the operation."""
    pass


class ReleaseSignedError(ForbiddenError):
    """Signed release records are immutable."""
    pass


class LedgerValidationError(LedgerServiceError):
    """Input rejected."""
    pass


class ConflictError(LedgerServiceError):
    """Record changed since it was read."""
    pass


__all__ = [
    # Services
    'MetricsPropagator',
    'PropagationResult',
    'ComponentService',
    'FlightLogService',
    'WorkOrderService',
    'ReleaseService',
    'PilotReportService',

    # Authorization
    'Authorizer',
    'TokenRoleAuthorizer',
    'StaticRoleAuthorizer',
    'DenyAllAuthorizer',
    'require_any_role',

    # Exceptions
    'LedgerServiceError',
    'NotFoundError',
    'AircraftNotFoundError',
    'ComponentNotFoundError',
    'FlightLogNotFoundError',
    'WorkOrderNotFoundError',
    'TaskNotFoundError',
    'ReleaseNotFoundError',
    'PilotReportNotFoundError',
    'InvalidStateTransitionError',
    'WorkOrderStateError',
    'ReleaseStateError',
    'PilotReportStateError',
    'ForbiddenError',
    'ReleaseSignedError',
    'LedgerValidationError',
    'ConflictError',
]
