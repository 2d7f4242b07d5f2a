# services/ledger-service/src/apps/api/views/filters.py
"""
API Filters

Django Filter classes for the ledger API.
"""

import django_filters

from apps.core.models import Aircraft, Component, WorkOrder, ReleaseRecord, PilotReport


class AircraftFilter(django_filters.FilterSet):
    """Filter for aircraft queries."""

    registration = django_filters.CharFilter(lookup_expr='icontains')
    manufacturer = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = Aircraft
        fields = ['registration', 'manufacturer', 'model', 'is_active']


class ComponentFilter(django_filters.FilterSet):
    """Filter for component queries."""

    part_number = django_filters.CharFilter()
    serial_number = django_filters.CharFilter(lookup_expr='icontains')
    installed_on = django_filters.UUIDFilter(method='filter_installed_on')
    installed = django_filters.BooleanFilter(method='filter_installed')

    class Meta:
        model = Component
        fields = ['part_number', 'serial_number', 'is_airworthy', 'is_life_limited', 'is_active']

    def filter_installed_on(self, queryset, name, value):
        return queryset.filter(
            installations__aircraft_id=value,
            installations__removed_at__isnull=True
        )

    def filter_installed(self, queryset, name, value):
        open_installation = {'installations__removed_at__isnull': True}
        if value:
            return queryset.filter(**open_installation).distinct()
        return queryset.exclude(**open_installation)


class WorkOrderFilter(django_filters.FilterSet):
    """Filter for work order queries."""

    aircraft_id = django_filters.UUIDFilter()
    assigned_to = django_filters.UUIDFilter()
    status = django_filters.ChoiceFilter(choices=WorkOrder.Status.choices)
    priority = django_filters.ChoiceFilter(choices=WorkOrder.Priority.choices)
    work_order_type = django_filters.ChoiceFilter(choices=WorkOrder.WorkOrderType.choices)
    is_open = django_filters.BooleanFilter(method='filter_is_open')

    class Meta:
        model = WorkOrder
        fields = ['aircraft_id', 'assigned_to', 'status', 'priority', 'work_order_type']

    def filter_is_open(self, queryset, name, value):
        if value:
            return queryset.filter(status__in=WorkOrder.OPEN_STATUSES)
        return queryset.filter(status__in=WorkOrder.CLOSED_STATUSES)


class ReleaseRecordFilter(django_filters.FilterSet):
    """Filter for release record queries."""

    aircraft_id = django_filters.UUIDFilter()
    work_order_id = django_filters.UUIDFilter()
    release_status = django_filters.ChoiceFilter(choices=ReleaseRecord.ReleaseStatus.choices)
    current = django_filters.BooleanFilter(method='filter_current')
    signed = django_filters.BooleanFilter(method='filter_signed')

    class Meta:
        model = ReleaseRecord
        fields = ['aircraft_id', 'work_order_id', 'release_status', 'is_valid']

    def filter_current(self, queryset, name, value):
        current = queryset.current()
        if value:
            return current
        return queryset.exclude(id__in=current.values('id'))

    def filter_signed(self, queryset, name, value):
        return queryset.filter(signed_at__isnull=not value)


class PilotReportFilter(django_filters.FilterSet):
    """Filter for pilot report queries."""

    aircraft_id = django_filters.UUIDFilter()
    reported_by = django_filters.UUIDFilter()
    status = django_filters.ChoiceFilter(choices=PilotReport.Status.choices)
    severity = django_filters.ChoiceFilter(choices=PilotReport.Severity.choices)
    is_aog = django_filters.BooleanFilter()
    open = django_filters.BooleanFilter(method='filter_open')

    class Meta:
        model = PilotReport
        fields = ['aircraft_id', 'reported_by', 'status', 'severity', 'is_aog']

    def filter_open(self, queryset, name, value):
        if value:
            return queryset.exclude(status__in=PilotReport.TERMINAL_STATUSES)
        return queryset.filter(status__in=PilotReport.TERMINAL_STATUSES)
