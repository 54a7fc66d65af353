from django.urls import path
from .views import (
    inventory_list_create, inventory_detail, inventory_adjust,
    inventory_low_stock, inventory_reports, inventory_options
)

urlpatterns = [
    # InventoryItem endpoints
    path('inventory/', inventory_list_create, name='inventory-list-create'),
    path('inventory/options/', inventory_options, name='inventory-options'),
    path('inventory/low-stock/', inventory_low_stock, name='inventory-low-stock'),
    path('inventory/reports/', inventory_reports, name='inventory-reports'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/adjust/', inventory_adjust, name='inventory-adjust'),
]
