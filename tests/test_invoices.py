import csv
import io
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from backoffice.models import RealEstateProperty, Tenant, RentalAgreement, Invoice
from backoffice.services import InvoiceReportService

pytestmark = pytest.mark.django_db


def make_agreement(company, tenant_name, property_name):
    first, last = tenant_name.split()
    prop = RealEstateProperty.objects.create(
        company=company, name=property_name, address='12 Palm Street', city='Dubai',
    )
    tenant = Tenant.objects.create(
        company=company, first_name=first, last_name=last, email=f'{first.lower()}@example.com',
    )
    return RentalAgreement.objects.create(
        property=prop, tenant=tenant, unit_number='4B',
        monthly_rent=Decimal('1000.00'), start_date=timezone.localdate() - timedelta(days=365),
    )


def make_invoice(agreement, number, total, status='PENDING', issue=None, due=None, paid=None):
    today = timezone.localdate()
    return Invoice.objects.create(
        agreement=agreement, invoice_number=number,
        amount=Decimal(total), total_amount=Decimal(total),
        issue_date=issue or today - timedelta(days=20),
        due_date=due or today + timedelta(days=10),
        paid_date=paid, status=status, description=f'Rent {number}',
    )


@pytest.fixture
def agreement(company):
    return make_agreement(company, 'Sam Carter', 'Palm Residences')


@pytest.fixture
def invoices(agreement, today):
    return [
        make_invoice(agreement, 'INV-1', '1200.00', status='PAID', paid=today - timedelta(days=10)),
        make_invoice(agreement, 'INV-2', '1050.00', due=today - timedelta(days=5)),
        make_invoice(agreement, 'INV-3', '500.00'),
        make_invoice(agreement, 'INV-4', '200.00', status='OVERDUE'),
    ]


def test_days_overdue(invoices, today):
    assert invoices[1].days_overdue(today) == 5
    assert invoices[2].days_overdue(today) == 0
    assert invoices[0].days_overdue(today) == 0


def test_stats(company, invoices):
    stats = InvoiceReportService(company).get_stats()

    assert stats['totalInvoices'] == 4
    assert stats['paidInvoices'] == 1
    assert stats['overdueInvoices'] == 1
    assert stats['pendingAmount'] == 1750.0
    assert stats['totalRevenue'] == 1200.0
    assert stats['avgPaymentTime'] == 10
    assert stats['monthlyGrowth'] == 100
    assert stats['paymentSuccessRate'] == 25
    assert stats['overdueRate'] == 25
    assert stats['recentActivity'] == 4
    assert stats['metrics']['pendingInvoicesCount'] == 3
    assert stats['metrics']['averageInvoiceValue'] == 300


def test_stats_without_invoices(company):
    stats = InvoiceReportService(company).get_stats()

    assert stats['totalInvoices'] == 0
    assert stats['paymentSuccessRate'] == 0
    assert stats['monthlyGrowth'] == 0
    assert stats['avgPaymentTime'] == 0


def test_stats_filters(company, invoices):
    other = make_agreement(company, 'Dana White', 'Marina Towers')
    make_invoice(other, 'INV-9', '900.00')
    service = InvoiceReportService(company)

    assert service.get_stats()['totalInvoices'] == 5
    assert service.get_stats(tenant_id=other.tenant_id)['totalInvoices'] == 1
    assert service.get_stats(property_id=other.property_id)['totalInvoices'] == 1
    # agreement takes precedence over tenant
    assert service.get_stats(agreement_id=invoices[0].agreement_id, tenant_id=other.tenant_id)['totalInvoices'] == 4


def test_stats_are_scoped_to_company(other_company, invoices):
    assert InvoiceReportService(other_company).get_stats()['totalInvoices'] == 0


def test_search(company, invoices, today):
    service = InvoiceReportService(company)

    assert [i.invoice_number for i in service.search(status='paid')] == ['INV-1']
    assert service.search(search='carter').count() == 4
    assert [i.invoice_number for i in service.search(
        start_date=today - timedelta(days=6), end_date=today,
    )] == ['INV-2']


def test_export_csv(company, invoices, today):
    service = InvoiceReportService(company, today=today)

    rows = list(csv.reader(io.StringIO(service.export_csv(service.search(status='PENDING')))))

    assert rows[0] == InvoiceReportService.EXPORT_HEADERS
    by_number = {row[0]: row for row in rows[1:]}
    assert set(by_number) == {'INV-2', 'INV-3'}
    assert by_number['INV-2'][2] == 'Sam Carter'
    assert by_number['INV-2'][5] == '12 Palm Street, Dubai'
    assert by_number['INV-2'][9] == '1050.00'
    assert by_number['INV-2'][14] == '5'


# =============================================================================
# API
# =============================================================================

def test_stats_endpoint(client, company, invoices):
    body = client.get('/api/acme/invoices/stats/').json()

    assert body['success'] is True
    assert body['stats']['totalInvoices'] == 4


def test_export_endpoint(client, company, invoices, today):
    response = client.get('/api/acme/invoices/export/?status=OVERDUE')

    assert response.status_code == 200
    assert response['Content-Type'] == 'text/csv; charset=utf-8'
    assert response['Content-Disposition'] == (
        f'attachment; filename="invoices-export-{today.isoformat()}.csv"'
    )
    lines = response.content.decode('utf-8').strip().splitlines()
    assert len(lines) == 2
    assert lines[1].startswith('INV-4,OVERDUE,')
