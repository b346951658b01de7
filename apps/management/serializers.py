from rest_framework import serializers
from django.contrib.auth import get_user_model
from apps.management.models import ManagementLog
from apps.jobs.models import Job
from apps.payments.models import Payment
from apps.users.serializers import PublicUserSerializer

User = get_user_model()


class ManagementUserSerializer(serializers.ModelSerializer):
    """Serializer for the admin user table."""

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'name', 'account_type', 'status',
            'phone_number', 'location', 'is_active', 'created_at'
        ]
        read_only_fields = fields


class ManagementJobSerializer(serializers.ModelSerializer):
    customer = PublicUserSerializer(read_only=True)
    selected_worker = PublicUserSerializer(read_only=True)

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'customer', 'selected_worker', 'status', 'escrow_status',
            'total_price', 'commission_amount', 'worker_payout', 'created_at'
        ]
        read_only_fields = fields


class ManagementPaymentSerializer(serializers.ModelSerializer):
    job_title = serializers.ReadOnlyField(source='job.title')
    customer_email = serializers.ReadOnlyField(source='customer.email')

    class Meta:
        model = Payment
        fields = [
            'id', 'job', 'job_title', 'customer_email', 'amount', 'service_fee',
            'total_amount', 'currency', 'reference', 'status', 'created_at', 'paid_at'
        ]
        read_only_fields = fields


class ManagementLogSerializer(serializers.ModelSerializer):
    admin = PublicUserSerializer(read_only=True)

    class Meta:
        model = ManagementLog
        fields = ['id', 'admin', 'action', 'details', 'timestamp']
        read_only_fields = ['id', 'admin', 'timestamp']


class DashboardStatsSerializer(serializers.Serializer):
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    platform_commission = serializers.DecimalField(max_digits=14, decimal_places=2)
    active_jobs = serializers.IntegerField()
    completed_jobs = serializers.IntegerField()
    total_workers = serializers.IntegerField()
