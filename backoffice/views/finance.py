"""
Finance views: retreat expenses and real-estate invoice reporting.
"""

import logging
from datetime import datetime, time

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone

from backoffice.models import RetreatFinancialTransaction, Retreat, RetreatFacility
from backoffice.services import ExpenseService, InvoiceReportService
from backoffice.utils.validation import parse_decimal_field, parse_int_field, parse_date_field, clean_text
from .mixins import ApiView

logger = logging.getLogger(__name__)


def serialize_expense(expense):
    booking = expense.booking
    return {
        'id': expense.id,
        'category': expense.category,
        'department': expense.department,
        'amount': float(expense.amount),
        'taxAmount': float(expense.tax_amount),
        'description': expense.description,
        'vendor': expense.vendor_name or 'N/A',
        'date': expense.transaction_date.isoformat(),
        'status': expense.status,
        'reference': expense.reference,
        'paymentMethod': expense.payment_method,
        'approvedBy': expense.approved_by,
        'approvedAt': expense.approved_at.isoformat() if expense.approved_at else None,
        'retreat': {
            'id': expense.retreat.id,
            'title': expense.retreat.title,
            'type': expense.retreat.retreat_type,
        } if expense.retreat_id else None,
        'facility': {
            'id': expense.facility.id,
            'name': expense.facility.name,
        } if expense.facility_id else None,
        'booking': {
            'id': booking.id,
            'guestName': booking.guest.full_name,
        } if booking else None,
        'createdAt': expense.created_at.isoformat(),
    }


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseListView(ApiView):
    """API: Expense summary and expense creation."""

    error_message = 'Failed to process expenses'

    def get(self, request, *args, **kwargs):
        summary = ExpenseService(self.get_company()).get_summary(
            period=request.GET.get('period'),
            category=request.GET.get('category'),
            status=request.GET.get('status'),
            department=request.GET.get('department'),
        )
        summary['expenses'] = [serialize_expense(e) for e in summary['expenses']]
        summary['success'] = True
        return self.json_response(summary)

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        company = self.get_company()

        extra = {
            'department': clean_text(data.get('department')),
            'vendor_name': clean_text(data.get('vendorName')),
            'payment_method': clean_text(data.get('paymentMethod')),
            'reference': clean_text(data.get('reference')),
        }
        tax_amount = parse_decimal_field(data.get('taxAmount'), 'Tax amount')
        if tax_amount is not None:
            extra['tax_amount'] = tax_amount
        if data.get('retreatId'):
            extra['retreat'] = get_object_or_404(
                Retreat, pk=parse_int_field(data['retreatId'], 'Retreat ID'), company=company
            )
        if data.get('facilityId'):
            extra['facility'] = get_object_or_404(
                RetreatFacility, pk=parse_int_field(data['facilityId'], 'Facility ID'), company=company
            )
        expense_date = parse_date_field(data.get('date'), 'Date')
        if expense_date:
            extra['transaction_date'] = timezone.make_aware(datetime.combine(expense_date, time(12, 0)))

        expense = ExpenseService(company).create_expense(
            category=clean_text(data.get('category')),
            amount=parse_decimal_field(data.get('amount'), 'Amount', positive=True, allow_none=False),
            description=clean_text(data.get('description')),
            **extra
        )
        return self.success_response(data=serialize_expense(expense), message='Expense recorded', status=201)


class ExpenseStatusView(ApiView):
    """API: Approve or reject an expense."""

    error_message = 'Failed to update expense'

    def post(self, request, *args, **kwargs):
        expense = get_object_or_404(
            RetreatFinancialTransaction,
            pk=kwargs['pk'],
            company=self.get_company(),
            transaction_type='EXPENSE'
        )
        data = self.parse_json_body()
        if not data.get('status'):
            return self.error_response('Status is required')

        expense = ExpenseService.set_status(expense, data['status'], approved_by=clean_text(data.get('approvedBy')))
        return self.success_response(data=serialize_expense(expense), message=f'Expense {expense.status.lower()}')


# =============================================================================
# INVOICES
# =============================================================================

class InvoiceFilterMixin:

    def get_invoice_filters(self):
        return {
            'agreement_id': self.parse_int(self.request.GET.get('agreementId'), None),
            'tenant_id': self.parse_int(self.request.GET.get('tenantId'), None),
            'property_id': self.parse_int(self.request.GET.get('propertyId'), None),
        }


class InvoiceStatsView(InvoiceFilterMixin, ApiView):
    """API: Invoice statistics."""

    error_message = 'Failed to fetch invoice statistics'

    def get(self, request, *args, **kwargs):
        stats = InvoiceReportService(self.get_company()).get_stats(**self.get_invoice_filters())
        return self.json_response({'success': True, 'stats': stats})


class InvoiceExportView(InvoiceFilterMixin, ApiView):
    """API: Export matching invoices as CSV."""

    error_message = 'Failed to export invoices'

    def get(self, request, *args, **kwargs):
        service = InvoiceReportService(self.get_company())
        invoices = service.search(
            status=request.GET.get('status'),
            search=request.GET.get('search'),
            start_date=self.parse_date(request.GET.get('startDate')),
            end_date=self.parse_date(request.GET.get('endDate')),
            **self.get_invoice_filters()
        )
        content = service.export_csv(invoices)

        response = HttpResponse(content, content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = (
            f'attachment; filename="invoices-export-{timezone.localdate().isoformat()}.csv"'
        )
        return response
