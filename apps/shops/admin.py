from django.contrib import admin
from .models import Shop, Product


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ('name', 'seller', 'address', 'created_at')
    search_fields = ('name', 'seller__email')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'shop', 'price', 'created_at')
    search_fields = ('name', 'shop__name')
