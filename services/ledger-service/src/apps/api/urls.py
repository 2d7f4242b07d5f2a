# services/ledger-service/src/apps/api/urls.py
"""
Ledger Service API URL Configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.api.views import (
    AircraftViewSet,
    ComponentViewSet,
    FlightLogViewSet,
    WorkOrderViewSet,
    WorkOrderTaskViewSet,
    ReleaseRecordViewSet,
    PilotReportViewSet,
)

app_name = 'api'

router = DefaultRouter()

# Assets
router.register(r'aircraft', AircraftViewSet, basename='aircraft')
router.register(r'components', ComponentViewSet, basename='component')

# Flights
router.register(r'flight-logs', FlightLogViewSet, basename='flight-log')

# Work Orders
router.register(r'work-orders', WorkOrderViewSet, basename='work-order')
router.register(r'tasks', WorkOrderTaskViewSet, basename='work-order-task')

# Airworthiness
router.register(r'releases', ReleaseRecordViewSet, basename='release')
router.register(r'pilot-reports', PilotReportViewSet, basename='pilot-report')

urlpatterns = [
    path('', include(router.urls)),
]
