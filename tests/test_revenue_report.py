import time
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from dateutil.relativedelta import relativedelta
from django.core.cache.backends import locmem
from django.utils import timezone

from backoffice.models import RetreatBooking, RetreatFinancialTransaction
from backoffice.services import RevenueReportService, get_revenue_report

pytestmark = pytest.mark.django_db


def month_ago(today, months):
    """The 15th of the month ``months`` before the current one."""
    return today.replace(day=1) - relativedelta(months=months) + timedelta(days=14)


def test_total_revenue_counts_confirmed_and_completed_only(company, rooms, make_booking):
    make_booking(total='1000.00', status='CONFIRMED', nights=2)
    make_booking(total='500.00', status='COMPLETED', nights=1)
    make_booking(total='700.00', status='PENDING')
    make_booking(total='900.00', status='CANCELLED')

    report = RevenueReportService(company, period='3m').build_report(['metrics', 'trends'])
    metrics = report['data']['metrics']

    assert report['success'] is True
    assert metrics['totalRevenue'] == 1500.0
    assert metrics['monthlyRevenue'] == 1500.0
    assert metrics['totalBookings'] == 2
    assert metrics['roomNights'] == 3
    assert metrics['averageDailyRate'] == 500.0
    assert metrics['averageBookingValue'] == 750.0
    assert report['meta']['totalRecords'] == 2
    assert report['meta']['currency'] == 'AED'


def test_monthly_revenue_sums_to_total(company, rooms, make_booking, today, at_noon):
    make_booking(total='1200.00')
    make_booking(total='800.00', created=at_noon(month_ago(today, 1)))
    make_booking(total='400.00', created=at_noon(month_ago(today, 5)))

    report = RevenueReportService(company, period='6m').build_report(['metrics', 'trends'])
    monthly = report['data']['monthlyData']

    assert len(monthly) == 6
    assert monthly[-1]['month'] == today.strftime('%Y-%m')
    assert sum(m['revenue'] for m in monthly) == pytest.approx(report['data']['metrics']['totalRevenue'])
    assert report['data']['metrics']['totalRevenue'] == 2400.0


def test_window_spans_calendar_months_including_current(company, today):
    start, end = RevenueReportService(company, period='3m').get_window()

    assert start == today.replace(day=1) - relativedelta(months=2)
    assert end.month == today.month
    assert (end + timedelta(days=1)).day == 1


def test_unknown_period_falls_back_to_three_months(company):
    service = RevenueReportService(company, period='bogus')
    assert service.months_back == 3


def test_revpar_and_occupancy_use_available_room_nights(company, rooms, make_booking):
    make_booking(total='1500.00', nights=3)

    service = RevenueReportService(company, period='3m')
    metrics = service.build_report()['data']['metrics']
    start, end = service.get_window()
    available = len(rooms) * ((end - start).days + 1)

    assert metrics['revPAR'] == pytest.approx(1500 / available, abs=0.01)
    assert metrics['occupancyRate'] == pytest.approx(3 / available * 100, abs=0.01)


def test_costs_estimated_without_expenses(company, rooms, make_booking):
    make_booking(total='1000.00')

    report = RevenueReportService(company, period='3m').build_report(['metrics', 'costs'])
    metrics = report['data']['metrics']

    assert metrics['totalCosts'] == 300.0
    assert metrics['grossProfit'] == 700.0
    assert metrics['profitMargin'] == 70.0
    assert report['data']['costAnalysis'][0]['estimated'] is True


def test_costs_use_actual_expense_transactions(company, rooms, make_booking):
    make_booking(total='1000.00')
    RetreatFinancialTransaction.objects.create(
        company=company, transaction_type='EXPENSE', category='STAFF',
        amount=Decimal('150.00'), status='APPROVED', transaction_date=timezone.now(),
    )
    RetreatFinancialTransaction.objects.create(
        company=company, transaction_type='EXPENSE', category='MARKETING',
        amount=Decimal('50.00'), status='REJECTED', transaction_date=timezone.now(),
    )

    report = RevenueReportService(company, period='3m').build_report(['metrics', 'costs'])
    costs = report['data']['costAnalysis']

    assert report['data']['metrics']['totalCosts'] == 150.0
    assert [c['category'] for c in costs] == ['STAFF']
    assert costs[0]['percentage'] == 100.0
    assert costs[0]['estimated'] is False


def test_growth_against_previous_and_year_ago_windows(company, rooms, make_booking, today, at_noon):
    make_booking(total='1500.00')
    make_booking(total='1000.00', created=at_noon(month_ago(today, 3)))
    make_booking(total='750.00', created=at_noon(month_ago(today, 12)))

    metrics = RevenueReportService(company, period='3m').build_report()['data']['metrics']

    assert metrics['totalRevenue'] == 1500.0
    assert metrics['revenueGrowth'] == 50.0
    assert metrics['yearOverYearGrowth'] == 100.0


def test_growth_is_zero_without_previous_revenue(company, rooms, make_booking):
    make_booking(total='1500.00')

    metrics = RevenueReportService(company, period='3m').build_report()['data']['metrics']

    assert metrics['revenueGrowth'] == 0.0
    assert metrics['yearOverYearGrowth'] == 0.0


def test_retreat_type_filter_and_breakdown(company, rooms, make_booking, yoga_retreat):
    make_booking(total='1000.00')
    make_booking(total='300.00', booking_retreat=yoga_retreat)

    all_types = RevenueReportService(company, period='3m').build_report()['data']
    yoga_only = RevenueReportService(company, period='3m', retreat_type='yoga').build_report()['data']

    breakdown = all_types['retreatTypeRevenue']
    assert [t['retreatType'] for t in breakdown] == ['WELLNESS', 'YOGA']
    assert breakdown[0]['marketShare'] == 76.92
    assert breakdown[1]['marketShare'] == 23.08
    assert breakdown[0]['costs'] == 300.0
    assert yoga_only['metrics']['totalRevenue'] == 300.0


def test_linear_forecast_follows_trend(company, rooms, make_booking):
    # Revenue only in the current month: [0, 0, 1500] -> slope 750
    make_booking(total='1500.00')

    data = RevenueReportService(company, period='3m').build_report(['metrics', 'forecasts'])['data']
    forecast = data['forecastData']

    assert [f['forecast'] for f in forecast] == [2000.0, 2750.0, 3500.0]
    assert [f['confidence'] for f in forecast] == [80, 70, 60]
    assert forecast[0]['lowerBound'] == 1700.0
    assert forecast[0]['upperBound'] == 2300.0
    assert data['metrics']['forecastedRevenue'] == 2000.0


def test_forecast_never_negative(company, rooms, make_booking, today, at_noon):
    make_booking(total='1500.00', created=at_noon(month_ago(today, 2)))

    forecast = RevenueReportService(company, period='3m').build_report(['forecasts'])['data']['forecastData']

    assert all(f['forecast'] == 0.0 for f in forecast)


def test_unrequested_sections_are_empty(company, rooms, make_booking):
    make_booking(total='1000.00')

    data = RevenueReportService(company, period='3m').build_report(['metrics'])['data']

    assert data['monthlyData'] == []
    assert data['costAnalysis'] == []
    assert data['forecastData'] == []
    assert data['retreatTypeRevenue']


def test_report_is_scoped_to_company(company, other_company, rooms, make_booking):
    make_booking(total='1000.00')

    metrics = RevenueReportService(other_company, period='3m').build_report()['data']['metrics']

    assert metrics['totalRevenue'] == 0.0
    assert metrics['averageDailyRate'] == 0.0


# =============================================================================
# CACHE
# =============================================================================

def test_cached_report_is_reused_within_expiry(company, rooms, make_booking):
    booking = make_booking(total='1000.00')

    first = get_revenue_report(company, period='3m')
    RetreatBooking.objects.filter(pk=booking.pk).update(total_amount=Decimal('5000.00'))
    second = get_revenue_report(company, period='3m')

    assert second['data']['metrics']['totalRevenue'] == 1000.0
    assert second['data']['lastUpdated'] == first['data']['lastUpdated']


def test_cache_key_includes_request_parameters(company, rooms, make_booking):
    make_booking(total='1000.00')

    metrics_only = get_revenue_report(company, period='3m', include=['metrics'])
    with_trends = get_revenue_report(company, period='3m', include=['metrics', 'trends'])

    assert metrics_only['data']['monthlyData'] == []
    assert len(with_trends['data']['monthlyData']) == 3


def test_saving_booking_invalidates_cached_report(company, rooms, make_booking):
    booking = make_booking(total='1000.00')
    get_revenue_report(company, period='3m')

    booking.total_amount = Decimal('2500.00')
    booking.save()

    assert get_revenue_report(company, period='3m')['data']['metrics']['totalRevenue'] == 2500.0


def test_expense_change_invalidates_cached_report(company, rooms, make_booking):
    make_booking(total='1000.00')
    assert get_revenue_report(company, period='3m')['data']['metrics']['totalCosts'] == 300.0

    RetreatFinancialTransaction.objects.create(
        company=company, transaction_type='EXPENSE', category='STAFF',
        amount=Decimal('120.00'), transaction_date=timezone.now(),
    )

    assert get_revenue_report(company, period='3m')['data']['metrics']['totalCosts'] == 120.0


def test_retreat_type_change_invalidates_cached_report(company, rooms, retreat, make_booking):
    make_booking(total='1000.00')
    assert get_revenue_report(company, period='3m', retreat_type='WELLNESS')['data']['metrics']['totalRevenue'] == 1000.0

    retreat.retreat_type = 'DETOX'
    retreat.save()

    assert get_revenue_report(company, period='3m', retreat_type='WELLNESS')['data']['metrics']['totalRevenue'] == 0.0


def test_room_deactivation_invalidates_cached_report(company, rooms, make_booking):
    make_booking(total='1000.00')
    before = get_revenue_report(company, period='3m')['data']['metrics']['revPAR']

    rooms[0].is_active = False
    rooms[0].save()

    assert get_revenue_report(company, period='3m')['data']['metrics']['revPAR'] > before


def test_cached_report_expires_after_five_minutes(company, rooms, make_booking, settings, monkeypatch):
    assert settings.BACKOFFICE['REPORT_CACHE_TIMEOUT'] == 300
    booking = make_booking(total='1000.00')
    get_revenue_report(company, period='3m')
    RetreatBooking.objects.filter(pk=booking.pk).update(total_amount=Decimal('5000.00'))
    cached_at = time.time()
    clock = SimpleNamespace(time=lambda: cached_at + 290)
    monkeypatch.setattr(locmem, 'time', clock)

    assert get_revenue_report(company, period='3m')['data']['metrics']['totalRevenue'] == 1000.0

    clock.time = lambda: cached_at + 310

    assert get_revenue_report(company, period='3m')['data']['metrics']['totalRevenue'] == 5000.0


def test_zero_timeout_disables_caching(company, rooms, make_booking, settings):
    settings.BACKOFFICE = dict(settings.BACKOFFICE, REPORT_CACHE_TIMEOUT=0)
    booking = make_booking(total='1000.00')

    get_revenue_report(company, period='3m')
    RetreatBooking.objects.filter(pk=booking.pk).update(total_amount=Decimal('5000.00'))

    assert get_revenue_report(company, period='3m')['data']['metrics']['totalRevenue'] == 5000.0


# =============================================================================
# API
# =============================================================================

def test_revenue_endpoint_returns_report(client, company, rooms, make_booking):
    make_booking(total='1000.00')

    response = client.get('/api/acme/reports/revenue/?period=3m&include=metrics,trends')
    body = response.json()

    assert response.status_code == 200
    assert body['success'] is True
    assert body['data']['metrics']['totalRevenue'] == 1000.0
    assert len(body['data']['monthlyData']) == 3
    assert body['meta']['period'] == '3m'


def test_revenue_endpoint_unknown_company_is_404(client, db):
    response = client.get('/api/missing/reports/revenue/')

    assert response.status_code == 404
    assert response.json()['success'] is False


def test_revenue_endpoint_reports_failures(client, company, monkeypatch):
    def explode(self, include=None):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(RevenueReportService, 'build_report', explode)
    response = client.get('/api/acme/reports/revenue/')
    body = response.json()

    assert response.status_code == 500
    assert body == {
        'success': False,
        'error': 'Failed to fetch revenue data',
        'message': 'database unavailable',
    }


def test_revenue_endpoint_rejects_unknown_retreat_type(client, company):
    response = client.get('/api/acme/reports/revenue/?retreatType=spa')

    assert response.status_code == 400
    assert response.json() == {
        'success': False,
        'error': 'Invalid retreat type. Use one of: ALL, WELLNESS, YOGA, MEDITATION, CORPORATE, DETOX, ADVENTURE, CUSTOM',
    }
