from django.contrib import admin
from .models import InventoryItem, StockAdjustment


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'category', 'size', 'unit', 'initial_stock', 'reject', 'final_stock', 'minimum_stock', 'updated_at']
    list_filter = ['category', 'size', 'unit']
    search_fields = ['item_name']
    ordering = ['item_name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['item_name', 'item_size', 'adjustment_type', 'quantity', 'final_stock_after', 'created_by', 'created_at']
    list_filter = ['adjustment_type', 'created_at']
    search_fields = ['item_name', 'description']
    ordering = ['-created_at']
    readonly_fields = ['created_at']
