"""
Views package.

Re-exports all views so URL modules can import them directly:
    from backoffice.views import RevenueReportView, etc.
"""

# Mixins
from .mixins import (
    CompanyMixin,
    ApiMixin,
    ApiView,
)

# Core views
from .core import CompanyOverviewView

# Retreat views
from .retreats import (
    BookingListView,
    BookingDetailView,
    BookingPaymentView,
    GuestListView,
    GuestDetailView,
    CheckInView,
    CheckOutView,
)

# Report views
from .reports import (
    RevenueReportView,
    RevenueExportView,
    OccupancyReportView,
)

# Finance views
from .finance import (
    ExpenseListView,
    ExpenseStatusView,
    InvoiceStatsView,
    InvoiceExportView,
)

# Delivery views
from .delivery import (
    DeliveryChargeListView,
    DeliveryChargeDetailView,
    DeliveryQuoteView,
)

# HR views
from .hr import (
    EmployeeListView,
    EmployeeDetailView,
    PayrollView,
)

# Upload views
from .uploads import ImageUploadView
