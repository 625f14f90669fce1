"""HR URL patterns: employees, payroll."""

from django.urls import path
from backoffice.views import EmployeeListView, EmployeeDetailView, PayrollView

urlpatterns = [
    path('api/<slug:company_code>/employees/', EmployeeListView.as_view(), name='employee_list'),
    path('api/<slug:company_code>/employees/<int:pk>/', EmployeeDetailView.as_view(), name='employee_detail'),
    path('api/<slug:company_code>/payroll/', PayrollView.as_view(), name='payroll'),
]
