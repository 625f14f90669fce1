"""
Services package.

Re-exports all service classes so existing imports work:
    from backoffice.services import RevenueReportService
"""

from .revenue_service import RevenueReportService, get_revenue_report, invalidate_company_reports
from .export_service import RevenueExportService
from .occupancy_service import OccupancyReportService
from .booking_service import BookingService, GuestStayService
from .expense_service import ExpenseService
from .delivery_service import DeliveryChargeService
from .employee_service import EmployeeService
from .payroll_service import PayrollService
from .invoice_service import InvoiceReportService

__all__ = [
    'RevenueReportService',
    'get_revenue_report',
    'invalidate_company_reports',
    'RevenueExportService',
    'OccupancyReportService',
    'BookingService',
    'GuestStayService',
    'ExpenseService',
    'DeliveryChargeService',
    'EmployeeService',
    'PayrollService',
    'InvoiceReportService',
]
