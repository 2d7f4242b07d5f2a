# shared/common/exceptions.py
"""
API exceptions and the DRF exception handler.

Every error leaves the service in the same envelope:

    {"success": false,
     "error": {"code": ..., "message": ..., "details": ..., "request_id": ...}}

`code` is the stable, machine-readable part clients branch on.
"""

import logging
import traceback
from typing import Dict, Any, Optional
from rest_framework import status
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.conf import settings

logger = logging.getLogger(__name__)

# Codes for DRF's own exceptions (serializer errors, auth failures, throttling)
STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: 'VALIDATION_ERROR',
    status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
    status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    status.HTTP_409_CONFLICT: 'CONFLICT',
    status.HTTP_429_TOO_MANY_REQUESTS: 'RATE_LIMITED',
}


class LedgerAPIException(APIException):
    """Base for API exceptions that carry their own error code and details."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(self, detail: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(detail=detail)
        self.details = details or {}


class ValidationException(LedgerAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation error.'
    default_code = 'validation_error'
    error_code = 'VALIDATION_ERROR'

    def __init__(self, errors: Dict[str, Any] = None, detail: str = None):
        super().__init__(detail=detail, details=errors)


class ForbiddenException(LedgerAPIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'
    error_code = 'FORBIDDEN'


class RecordSignedException(ForbiddenException):
    """Signed release records are immutable."""
    default_detail = 'The record has been signed and can no longer be modified.'
    default_code = 'record_signed'
    error_code = 'RECORD_SIGNED'


class NotFoundException(LedgerAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class ConflictException(LedgerAPIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A conflict occurred with the current state of the resource.'
    default_code = 'conflict'
    error_code = 'CONFLICT'


class InvalidStateTransitionException(ConflictException):
    """Operation attempted from a workflow state that forbids it."""
    default_detail = 'The resource is not in a state that allows this operation.'
    default_code = 'invalid_state_transition'
    error_code = 'INVALID_STATE_TRANSITION'

    def __init__(
        self,
        detail: Optional[str] = None,
        required_state: Optional[str] = None,
        current_state: Optional[str] = None
    ):
        details = {
            key: value
            for key, value in (('required_state', required_state), ('current_state', current_state))
            if value
        }
        super().__init__(detail=detail, details=details)


def _envelope(code: str, message: str, request_id: Optional[str], details=None, **extra) -> Dict:
    error = {'code': code, 'message': message, 'request_id': request_id}
    if details:
        error['details'] = details
    error.update(extra)
    return {'success': False, 'error': error}


def _message(exc, data) -> str:
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        return str(detail.get('detail', 'Invalid input.'))
    if isinstance(data, dict):
        return str(data.get('detail', data))
    return str(data)


def custom_exception_handler(exc, context) -> Optional[Response]:
    """Render every exception reaching DRF in the ledger error envelope."""
    request = context.get('request')
    request_id = getattr(request, 'request_id', None)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, LedgerAPIException):
            details = exc.details
        elif isinstance(response.data, dict) and 'detail' not in response.data:
            # field-level serializer errors
            details = response.data
        else:
            details = None

        code = getattr(exc, 'error_code', None) or STATUS_ERROR_CODES.get(response.status_code, 'ERROR')
        response.data = _envelope(code, _message(exc, response.data), request_id, details)
        return response

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'detail': exc.messages}
        return Response(
            _envelope('VALIDATION_ERROR', 'Validation error', request_id, details),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            _envelope('NOT_FOUND', str(exc) or 'Resource not found', request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    logger.exception(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={'request_id': request_id}
    )

    if settings.DEBUG:
        body = _envelope(
            'INTERNAL_ERROR', str(exc), request_id,
            type=type(exc).__name__,
            traceback=traceback.format_exc().splitlines(),
        )
    else:
        body = _envelope('INTERNAL_ERROR', 'An unexpected error occurred. Please try again later.', request_id)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
