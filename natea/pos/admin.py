from django.contrib import admin
from .models import Cart, CartItem, Sale, SaleItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'status', 'created_at', 'updated_at']
    list_filter = ['status']
    search_fields = ['user__username']
    inlines = [CartItemInline]


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ['line_total']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'created_at', 'payment_method', 'total_quantity', 'total_tax', 'amount', 'created_by']
    list_filter = ['payment_method', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    inlines = [SaleItemInline]
