from rest_framework import serializers
from .models import Job
from apps.users.serializers import PublicUserSerializer
from core.constants import JOB_STATUS_CHOICES, ESCROW_STATUS_CHOICES


class JobSerializer(serializers.ModelSerializer):
    customer = PublicUserSerializer(read_only=True)
    selected_worker = PublicUserSerializer(read_only=True)
    status = serializers.ChoiceField(choices=JOB_STATUS_CHOICES, read_only=True)
    escrow_status = serializers.ChoiceField(choices=ESCROW_STATUS_CHOICES, read_only=True)
    title = serializers.CharField(max_length=200, trim_whitespace=True)
    description = serializers.CharField(trim_whitespace=True)

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'description', 'customer', 'status', 'selected_worker',
            'total_price', 'commission_amount', 'worker_payout', 'escrow_status',
            'created_at', 'updated_at'
        ]
        read_only_fields = [
            'id', 'customer', 'status', 'selected_worker', 'total_price',
            'commission_amount', 'worker_payout', 'escrow_status',
            'created_at', 'updated_at'
        ]

    def create(self, validated_data):
        validated_data.pop('customer', None)
        return Job.objects.create(customer=self.context['request'].user, **validated_data)


class JobListSerializer(serializers.ModelSerializer):
    customer_id = serializers.ReadOnlyField(source='customer.id')
    selected_worker_name = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'description', 'customer_id', 'status',
            'selected_worker_name', 'total_price', 'escrow_status', 'created_at'
        ]
        read_only_fields = fields

    def get_selected_worker_name(self, obj):
        return obj.selected_worker.name if obj.selected_worker else None
