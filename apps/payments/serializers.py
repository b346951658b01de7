from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    job_title = serializers.ReadOnlyField(source='job.title')

    class Meta:
        model = Payment
        fields = [
            'id', 'job', 'job_title', 'customer', 'amount', 'service_fee', 'total_amount',
            'currency', 'reference', 'status', 'authorization_url', 'created_at', 'paid_at'
        ]
        read_only_fields = fields


class PaymentSummarySerializer(serializers.Serializer):
    job_id = serializers.IntegerField()
    job_title = serializers.CharField()
    worker_name = serializers.CharField(allow_null=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    escrow_status = serializers.CharField()
