# services/ledger-service/src/config/urls.py
"""
URL configuration for Ledger Service
"""

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView


def health_check(request):
    return JsonResponse({'status': 'ok', 'service': 'ledger-service'})


def readiness_check(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        return JsonResponse({'status': 'ready', 'service': 'ledger-service'})
    except DatabaseError as e:
        return JsonResponse({'status': 'not_ready', 'error': str(e)}, status=503)


urlpatterns = [
    path('health/', health_check, name='health_check'),
    path('ready/', readiness_check, name='readiness_check'),
    path(settings.API_BASE_PATH, include('apps.api.urls', namespace='api')),

    # OpenAPI Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
