from django.contrib import admin
from .models import Job


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'customer', 'status', 'selected_worker', 'total_price', 'escrow_status', 'created_at')
    list_filter = ('status', 'escrow_status')
    search_fields = ('title', 'customer__username', 'selected_worker__username')
