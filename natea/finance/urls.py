from django.urls import path
from .views import (
    cash_transaction_list_create, cash_transaction_detail, cash_summary,
    expense_list_create, expense_detail, expense_options
)

urlpatterns = [
    # Cash ledger endpoints
    path('cash-transactions/', cash_transaction_list_create, name='cash-transaction-list-create'),
    path('cash-transactions/summary/', cash_summary, name='cash-summary'),
    path('cash-transactions/<int:pk>/', cash_transaction_detail, name='cash-transaction-detail'),

    # Expense endpoints
    path('expenses/', expense_list_create, name='expense-list-create'),
    path('expenses/options/', expense_options, name='expense-options'),
    path('expenses/<int:pk>/', expense_detail, name='expense-detail'),
]
