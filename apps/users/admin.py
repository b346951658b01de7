from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'name', 'account_type', 'status', 'is_superuser', 'created_at')
    list_filter = ('account_type', 'status', 'is_superuser')
    search_fields = ('username', 'email', 'name', 'phone_number')
