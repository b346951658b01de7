from decimal import Decimal, ROUND_HALF_UP
from django.db import models
from django.conf import settings
from core.constants import JOB_STATUS_CHOICES, ESCROW_STATUS_CHOICES


class Job(models.Model):
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='jobs')
    title = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default='open')
    selected_worker = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_jobs'
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    commission_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    worker_payout = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    escrow_status = models.CharField(max_length=10, choices=ESCROW_STATUS_CHOICES, default='unpaid')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.title} - {self.customer.username}"

    @property
    def is_escrow_funded(self):
        return self.escrow_status in ('paid', 'released')

    def hire(self, worker, amount):
        """Assign the worker at the agreed price and split out the platform commission."""
        amount = Decimal(amount)
        rate = Decimal(str(settings.SERVICE_FEE_RATE))
        self.selected_worker = worker
        self.total_price = amount
        self.commission_amount = (amount * rate).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        self.worker_payout = amount
        self.status = 'in_progress'
        self.save()

    def can_be_paid(self):
        return (
            self.status == 'in_progress' and
            self.selected_worker_id is not None and
            self.escrow_status == 'unpaid'
        )

    def can_be_completed(self):
        return self.status == 'in_progress' and self.escrow_status == 'paid'

    def mark_completed(self):
        self.status = 'completed'
        self.escrow_status = 'released'
        self.save()
