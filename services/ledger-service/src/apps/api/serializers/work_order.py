# services/ledger-service/src/apps/api/serializers/work_order.py
"""
Work Order Serializers
"""

from rest_framework import serializers

from apps.core.models import WorkOrder, WorkOrderTask


class WorkOrderTaskSerializer(serializers.ModelSerializer):
    """Serializer for WorkOrderTask."""

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    is_signed_off = serializers.BooleanField(read_only=True)

    class Meta:
        model = WorkOrderTask
        fields = [
            'id', 'work_order_id', 'sequence', 'title', 'description',
            'instructions', 'required_tools', 'is_rii',
            'status', 'status_display', 'result', 'notes',
            'started_at', 'completed_at', 'completed_by',
            'signed_off_by', 'signed_off_at', 'is_signed_off',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class WorkOrderTaskCreateSerializer(serializers.ModelSerializer):
    """Serializer for adding tasks."""

    sequence = serializers.IntegerField(required=False, min_value=0)

    class Meta:
        model = WorkOrderTask
        fields = [
            'sequence', 'title', 'description', 'instructions',
            'required_tools', 'is_rii',
        ]


class WorkOrderTaskUpdateSerializer(serializers.ModelSerializer):
    """Serializer for editing task details."""

    class Meta:
        model = WorkOrderTask
        fields = [
            'sequence', 'title', 'description', 'instructions',
            'required_tools', 'result', 'notes',
        ]


class WorkOrderTaskStatusSerializer(serializers.Serializer):
    """Serializer for moving a task."""

    status = serializers.ChoiceField(choices=WorkOrderTask.Status.choices)


class WorkOrderSerializer(serializers.ModelSerializer):
    """Base serializer for WorkOrder."""

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    priority_display = serializers.CharField(
        source='get_priority_display',
        read_only=True
    )
    work_order_type_display = serializers.CharField(
        source='get_work_order_type_display',
        read_only=True
    )
    task_count = serializers.SerializerMethodField()
    completed_task_count = serializers.SerializerMethodField()

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'aircraft_id', 'order_number', 'title', 'description', 'reason',
            'work_order_type', 'work_order_type_display',
            'status', 'status_display',
            'priority', 'priority_display',
            'scheduled_start', 'scheduled_end',
            'assigned_to', 'assigned_at',
            'aircraft_hours_at_creation', 'aircraft_cycles_at_creation',
            'started_at', 'completed_at', 'completed_by', 'completion_notes',
            'discrepancies', 'released_at', 'released_by',
            'cancelled_at', 'cancellation_reason',
            'task_count', 'completed_task_count',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_task_count(self, obj):
        return obj.tasks.count()

    def get_completed_task_count(self, obj):
        return obj.tasks.filter(status=WorkOrderTask.Status.COMPLETED).count()


class WorkOrderListSerializer(serializers.ModelSerializer):
    """List serializer with essential fields."""

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    priority_display = serializers.CharField(
        source='get_priority_display',
        read_only=True
    )

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'aircraft_id', 'order_number', 'title',
            'work_order_type', 'status', 'status_display',
            'priority', 'priority_display', 'assigned_to',
            'scheduled_start', 'created_at',
        ]


class WorkOrderDetailSerializer(WorkOrderSerializer):
    """Detail serializer including tasks."""

    tasks = WorkOrderTaskSerializer(many=True, read_only=True)

    class Meta(WorkOrderSerializer.Meta):
        fields = WorkOrderSerializer.Meta.fields + ['tasks']
        read_only_fields = fields


class WorkOrderCreateSerializer(serializers.Serializer):
    """Serializer for creating work orders."""

    aircraft_id = serializers.UUIDField()
    work_order_type = serializers.ChoiceField(choices=WorkOrder.WorkOrderType.choices)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    reason = serializers.CharField(required=False, allow_blank=True)
    priority = serializers.ChoiceField(
        choices=WorkOrder.Priority.choices,
        default=WorkOrder.Priority.MEDIUM
    )
    assigned_to = serializers.UUIDField(required=False, allow_null=True)
    scheduled_start = serializers.DateTimeField(required=False, allow_null=True)
    scheduled_end = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        start = attrs.get('scheduled_start')
        end = attrs.get('scheduled_end')
        if start and end and end < start:
            raise serializers.ValidationError({'scheduled_end': 'End must be after start'})
        return attrs


class WorkOrderUpdateSerializer(serializers.ModelSerializer):
    """Serializer for editing work orders."""

    class Meta:
        model = WorkOrder
        fields = [
            'title', 'description', 'reason', 'priority', 'work_order_type',
            'scheduled_start', 'scheduled_end', 'discrepancies',
        ]


class WorkOrderAssignSerializer(serializers.Serializer):
    """Serializer for assigning a work order."""

    user_id = serializers.UUIDField()


class WorkOrderCompleteSerializer(serializers.Serializer):
    """Serializer for completing a work order."""

    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class WorkOrderCancelSerializer(serializers.Serializer):
    """Serializer for cancelling a work order."""

    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
