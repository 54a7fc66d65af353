from django.urls import path
from .views import (
    dashboard_summary,
    sales_report, sales_report_export,
    inventory_report, inventory_report_export,
    expense_report, expense_report_export,
)

urlpatterns = [
    path('reports/dashboard/', dashboard_summary, name='report-dashboard'),
    path('reports/sales/', sales_report, name='report-sales'),
    path('reports/sales/export/', sales_report_export, name='report-sales-export'),
    path('reports/inventory/', inventory_report, name='report-inventory'),
    path('reports/inventory/export/', inventory_report_export, name='report-inventory-export'),
    path('reports/expenses/', expense_report, name='report-expenses'),
    path('reports/expenses/export/', expense_report_export, name='report-expenses-export'),
]
