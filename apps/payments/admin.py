from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('reference', 'job', 'customer', 'total_amount', 'currency', 'status', 'paid_at')
    list_filter = ('status', 'currency')
    search_fields = ('reference', 'job__title', 'customer__email')
    readonly_fields = ('gateway_response',)
