"""Report URL patterns: revenue, revenue export, occupancy."""

from django.urls import path
from backoffice.views import RevenueReportView, RevenueExportView, OccupancyReportView

urlpatterns = [
    path('api/<slug:company_code>/reports/revenue/', RevenueReportView.as_view(), name='revenue_report'),
    path('api/<slug:company_code>/reports/revenue/export/', RevenueExportView.as_view(), name='revenue_export'),
    path('api/<slug:company_code>/reports/occupancy/', OccupancyReportView.as_view(), name='occupancy_report'),
]
