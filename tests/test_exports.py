from datetime import datetime
from io import BytesIO
from urllib.parse import urlencode

import pandas as pd
import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from backoffice.services import RevenueReportService, RevenueExportService

pytestmark = pytest.mark.django_db

EXPORT_URL = '/api/acme/reports/revenue/export/'


@pytest.fixture
def report(company, rooms, make_booking, yoga_retreat):
    make_booking(total='1000.00')
    make_booking(total='300.00', booking_retreat=yoga_retreat)
    return RevenueReportService(company, period='3m').build_report(RevenueReportService.SECTIONS)


def test_filename_carries_period_type_and_timestamp(report):
    now = timezone.make_aware(datetime(2024, 3, 5, 9, 7))
    service = RevenueExportService(report)

    assert service.get_filename('csv', now=now) == 'revenue-report-3m-ALL-2024-03-05-0907.csv'


def test_unsupported_format_raises(report):
    with pytest.raises(ValidationError):
        RevenueExportService(report).export('xml')


def test_csv_contains_summary_and_sections(report):
    content, content_type, filename = RevenueExportService(report, company_name='Acme Retreats').export('csv')
    text = content.decode('utf-8')

    assert content_type == 'text/csv; charset=utf-8'
    assert filename.endswith('.csv')
    assert 'Company,Acme Retreats' in text
    assert 'Total Revenue,1300.0' in text
    assert 'Revenue by Retreat Type' in text
    assert 'WELLNESS,1000.0' in text
    assert 'Revenue Forecast' in text


def test_excel_has_one_sheet_per_section(report):
    content, content_type, filename = RevenueExportService(report).export('excel')
    sheets = pd.read_excel(BytesIO(content), sheet_name=None, engine='openpyxl')

    assert content[:2] == b'PK'
    assert filename.endswith('.xlsx')
    assert list(sheets) == ['Summary', 'By Type', 'Monthly', 'Costs', 'Forecast']
    assert list(sheets['By Type']['Retreat Type']) == ['WELLNESS', 'YOGA']
    assert len(sheets['Forecast']) == 3


def test_pdf_renders(report):
    content, content_type, filename = RevenueExportService(report, company_name='Acme').export('pdf')

    assert content.startswith(b'%PDF')
    assert content_type == 'application/pdf'
    assert filename.endswith('.pdf')


def test_pdf_renders_for_empty_report(company):
    report = RevenueReportService(company, period='3m').build_report(RevenueReportService.SECTIONS)

    content, _, _ = RevenueExportService(report).export('pdf')

    assert content.startswith(b'%PDF')


# =============================================================================
# API
# =============================================================================

def test_export_endpoint_rejects_unknown_format(client, company):
    response = client.post(EXPORT_URL + '?format=xml')

    assert response.status_code == 400
    assert response.json() == {
        'success': False,
        'error': 'Invalid format. Supported formats: csv, excel, pdf',
    }


def test_export_endpoint_returns_csv_attachment(client, report):
    response = client.post(EXPORT_URL + '?format=csv&period=3m&retreatType=YOGA')

    assert response.status_code == 200
    assert response['Content-Type'] == 'text/csv; charset=utf-8'
    assert response['Content-Disposition'].startswith('attachment; filename="revenue-report-3m-YOGA-')
    assert response['Cache-Control'] == 'no-cache, no-store, must-revalidate'
    assert 'Total Revenue,300.0' in response.content.decode('utf-8')


@pytest.mark.parametrize('export_format, magic', [('excel', b'PK'), ('pdf', b'%PDF')])
def test_export_endpoint_binary_formats(client, report, export_format, magic):
    response = client.post(EXPORT_URL + f'?format={export_format}&period=3m')

    assert response.status_code == 200
    assert response.content.startswith(magic)


def test_export_endpoint_requires_post(client, company):
    assert client.get(EXPORT_URL + '?format=csv').status_code == 405


def test_pdf_escapes_markup_in_header_text(report):
    content, _, _ = RevenueExportService(report, company_name='<b>Sun & Sand').export('pdf')

    assert content.startswith(b'%PDF')


@pytest.mark.parametrize('retreat_type', ['<b', 'a";x=".exe', 'SPA'])
def test_export_endpoint_rejects_unknown_retreat_type(client, company, retreat_type):
    response = client.post(EXPORT_URL + '?' + urlencode({'format': 'pdf', 'retreatType': retreat_type}))

    assert response.status_code == 400
    assert response.json()['error'].startswith('Invalid retreat type. Use one of: ALL, WELLNESS')
    assert 'Content-Disposition' not in response


def test_export_filename_uses_normalised_period(client, report):
    response = client.post(EXPORT_URL + '?' + urlencode({'format': 'csv', 'period': 'x";y=".exe'}))

    assert response.status_code == 200
    assert response['Content-Disposition'].startswith('attachment; filename="revenue-report-3m-ALL-')
