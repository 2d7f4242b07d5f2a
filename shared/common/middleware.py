# shared/common/middleware.py
"""
Request tracing middleware.
"""

import re
import uuid
import time
import logging
from typing import Callable
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'
# Probes are polled constantly by the orchestrator
QUIET_PATHS = ('/health/', '/ready/')
_VALID_REQUEST_ID = re.compile(r'^[A-Za-z0-9._-]{1,64}$')


class RequestIDMiddleware:
    """
    Tag each request with an id, echoed back in the response header and in
    every error envelope. A caller-supplied id is kept when it looks sane.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = request.headers.get(REQUEST_ID_HEADER, '')
        request.request_id = incoming if _VALID_REQUEST_ID.match(incoming) else str(uuid.uuid4())

        response = self.get_response(request)
        response[REQUEST_ID_HEADER] = request.request_id
        return response


class LoggingMiddleware:
    """One log line per request, at WARNING for 4xx/5xx responses."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in QUIET_PATHS:
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        user = getattr(request, 'user', None)
        logger.log(
            level,
            f"{request.method} {request.path} -> {response.status_code} ({duration_ms}ms)",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'status_code': response.status_code,
                'duration_ms': duration_ms,
                'actor_id': getattr(user, 'id', None),
                'ip_address': client_ip(request),
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response


def client_ip(request: HttpRequest) -> str:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')
