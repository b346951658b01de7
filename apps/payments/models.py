from decimal import Decimal
from django.db import models
from django.conf import settings
from django.utils import timezone
from apps.jobs.models import Job
from core.constants import PAYMENT_STATUS_CHOICES


class Payment(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='payments')
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    service_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default='NGN')
    reference = models.CharField(max_length=100, unique=True)
    status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending')
    authorization_url = models.URLField(max_length=500, blank=True, default='')
    gateway_response = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Payment {self.reference} for {self.job.title} ({self.status})"

    @property
    def amount_in_minor_units(self):
        return int((self.total_amount * 100).to_integral_value())

    def mark_paid(self, gateway_data):
        self.status = 'paid'
        self.paid_at = timezone.now()
        self.gateway_response = gateway_data
        self.save(update_fields=['status', 'paid_at', 'gateway_response'])

    def mark_failed(self, gateway_data):
        self.status = 'failed'
        self.gateway_response = gateway_data
        self.save(update_fields=['status', 'gateway_response'])
