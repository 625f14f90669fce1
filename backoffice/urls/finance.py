"""Finance URL patterns: expenses, invoices."""

from django.urls import path
from backoffice.views import ExpenseListView, ExpenseStatusView, InvoiceStatsView, InvoiceExportView

urlpatterns = [
    path('api/<slug:company_code>/expenses/', ExpenseListView.as_view(), name='expense_list'),
    path('api/<slug:company_code>/expenses/<int:pk>/status/', ExpenseStatusView.as_view(), name='expense_status'),

    path('api/<slug:company_code>/invoices/stats/', InvoiceStatsView.as_view(), name='invoice_stats'),
    path('api/<slug:company_code>/invoices/export/', InvoiceExportView.as_view(), name='invoice_export'),
]
