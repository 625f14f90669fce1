"""
Invoice services: InvoiceReportService (statistics and CSV export).
"""

import csv
import io
import logging
from datetime import timedelta
from decimal import Decimal

from django.db.models import Q, Sum
from django.utils import timezone

from backoffice.models import Invoice

logger = logging.getLogger(__name__)


class InvoiceReportService:
    """
    Rent invoice statistics for one company.

    Filters narrow by agreement first, then tenant, then property.
    """

    EXPORT_HEADERS = [
        'Invoice Number',
        'Status',
        'Tenant Name',
        'Tenant Email',
        'Property Name',
        'Property Address',
        'Unit Number',
        'Amount',
        'Tax Amount',
        'Total Amount',
        'Issue Date',
        'Due Date',
        'Paid Date',
        'Description',
        'Days Overdue',
        'Created Date',
    ]

    def __init__(self, company, today=None):
        self.company = company
        self.today = today or timezone.localdate()

    def get_queryset(self, agreement_id=None, tenant_id=None, property_id=None):
        queryset = Invoice.objects.filter(
            agreement__property__company=self.company
        ).select_related('agreement__tenant', 'agreement__property')

        if agreement_id:
            queryset = queryset.filter(agreement_id=agreement_id)
        elif tenant_id:
            queryset = queryset.filter(agreement__tenant_id=tenant_id)
        elif property_id:
            queryset = queryset.filter(agreement__property_id=property_id)
        return queryset

    @staticmethod
    def _total(queryset):
        return queryset.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')

    def get_stats(self, **filters):
        """
        Invoice statistics.

        Returns:
            Dict with counts, amounts, rates (whole percentages) and metrics
        """
        queryset = self.get_queryset(**filters)
        now = timezone.now()
        thirty_days_ago = now - timedelta(days=30)

        total_invoices = queryset.count()
        paid = queryset.filter(status='PAID')
        paid_invoices = paid.count()
        overdue_invoices = queryset.filter(status='PENDING', due_date__lt=self.today).count()
        pending_amount = self._total(queryset.filter(status__in=['PENDING', 'OVERDUE']))
        total_revenue = self._total(paid)

        # Days from issue to payment, at least one
        payment_days = [
            max((invoice.paid_date or timezone.localdate(invoice.updated_at)) - invoice.issue_date,
                timedelta(days=1)).days
            for invoice in paid.select_related(None).only('issue_date', 'paid_date', 'updated_at')
        ]
        avg_payment_time = round(sum(payment_days) / len(payment_days)) if payment_days else 0

        last_thirty = queryset.filter(created_at__gte=thirty_days_ago).count()
        previous_thirty = queryset.filter(
            created_at__gte=thirty_days_ago - timedelta(days=30),
            created_at__lt=thirty_days_ago,
        ).count()
        if previous_thirty:
            monthly_growth = round((last_thirty - previous_thirty) / previous_thirty * 100)
        else:
            monthly_growth = 100 if last_thirty else 0

        payment_success_rate = round(paid_invoices / total_invoices * 100) if total_invoices else 0
        overdue_rate = round(overdue_invoices / total_invoices * 100) if total_invoices else 0

        return {
            'totalInvoices': total_invoices,
            'paidInvoices': paid_invoices,
            'pendingAmount': float(pending_amount),
            'overdueInvoices': overdue_invoices,
            'totalRevenue': float(total_revenue),
            'avgPaymentTime': avg_payment_time,
            'monthlyGrowth': monthly_growth,
            'paymentSuccessRate': payment_success_rate,
            'overdueRate': overdue_rate,
            'recentActivity': queryset.filter(created_at__gte=now - timedelta(days=7)).count(),
            'metrics': {
                'pendingInvoicesCount': total_invoices - paid_invoices,
                'collectionEfficiency': payment_success_rate,
                'averageInvoiceValue': round(total_revenue / total_invoices) if total_invoices else 0,
                'lastUpdated': now.isoformat(),
            },
        }

    def search(self, status=None, search=None, start_date=None, end_date=None, **filters):
        queryset = self.get_queryset(**filters)

        if status and status.lower() != 'all':
            queryset = queryset.filter(status=status.upper())
        if search:
            queryset = queryset.filter(
                Q(invoice_number__icontains=search)
                | Q(description__icontains=search)
                | Q(agreement__tenant__first_name__icontains=search)
                | Q(agreement__tenant__last_name__icontains=search)
                | Q(agreement__property__name__icontains=search)
            )
        if start_date and end_date:
            queryset = queryset.filter(due_date__gte=start_date, due_date__lte=end_date)

        return queryset.order_by('-created_at')

    def export_csv(self, invoices):
        """Render invoices as CSV text."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(self.EXPORT_HEADERS)

        count = 0
        for invoice in invoices:
            agreement = invoice.agreement
            prop = agreement.property
            address = ', '.join(part for part in [prop.address, prop.city] if part)
            writer.writerow([
                invoice.invoice_number,
                invoice.status,
                agreement.tenant.full_name,
                agreement.tenant.email,
                prop.name,
                address,
                agreement.unit_number,
                invoice.amount,
                invoice.tax_amount,
                invoice.total_amount,
                invoice.issue_date.isoformat(),
                invoice.due_date.isoformat(),
                invoice.paid_date.isoformat() if invoice.paid_date else '',
                invoice.description,
                invoice.days_overdue(self.today),
                invoice.created_at.isoformat(),
            ])
            count += 1

        logger.info("Exported %d invoices for %s", count, self.company.code)
        return output.getvalue()
