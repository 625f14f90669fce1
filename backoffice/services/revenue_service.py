"""
Revenue services: RevenueReportService and the per-company report cache.
"""

import calendar
import logging
from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def to_money(value):
    """Round a Decimal/number to two places and return a float for JSON."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def percent(part, whole):
    """part / whole * 100, or 0 when whole is empty."""
    if not whole:
        return Decimal('0.00')
    return (Decimal(str(part)) / Decimal(str(whole)) * 100).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def growth(current, previous):
    """Percentage change from previous to current, 0 without a baseline."""
    if not previous:
        return Decimal('0.00')
    return percent(Decimal(str(current)) - Decimal(str(previous)), previous)


class RevenueReportService:
    """
    Revenue analysis for retreat bookings.

    Bookings count toward a month by their creation date. Only CONFIRMED and
    COMPLETED bookings are counted.

    Sections (selected via ``include``):
    - metrics: headline metrics plus revenue by retreat type
    - trends: monthly performance
    - costs: cost breakdown by expense category
    - forecasts: linear revenue forecast for the next months
    """

    PERIOD_MONTHS = {'12m': 12, '6m': 6, '3m': 3}
    SECTIONS = ('metrics', 'trends', 'costs', 'forecasts')
    FORECAST_MONTHS = 3
    FORECAST_FACTORS = [
        'Historical trends',
        'Seasonal patterns',
    ]

    def __init__(self, company, period='12m', retreat_type='ALL', today=None):
        """
        Args:
            company: Company whose bookings are analysed
            period: '12m', '6m' or '3m' (anything else means 3 months)
            retreat_type: Retreat type code or 'ALL'
            today: Reference date (default: today in the active timezone)
        """
        self.company = company
        self.period = period if period in self.PERIOD_MONTHS else '3m'
        self.months_back = self.PERIOD_MONTHS[self.period]
        self.retreat_type = (retreat_type or 'ALL').upper()
        self.today = today or timezone.localdate()
        self.cost_rate = settings.BACKOFFICE['OPERATIONAL_COST_RATE']
        self.currency = company.currency or settings.BACKOFFICE['CURRENCY']

    # =========================================================================
    # WINDOWS & QUERYSETS
    # =========================================================================

    def get_window(self, months_offset=0):
        """
        Return (start_date, end_date) of the reporting window.

        The window spans ``months_back`` calendar months ending with the
        current month, shifted back by ``months_offset`` months.
        """
        current_month = self.today.replace(day=1)
        last_month = current_month - relativedelta(months=months_offset)
        start = last_month - relativedelta(months=self.months_back - 1)
        end = last_month + relativedelta(day=31)
        return start, end

    def _get_bookings(self, start, end):
        from backoffice.models import RetreatBooking, ACTIVE_BOOKING_STATUSES

        queryset = RetreatBooking.objects.filter(
            company=self.company,
            status__in=ACTIVE_BOOKING_STATUSES,
            created_at__date__gte=start,
            created_at__date__lte=end,
        ).select_related('retreat', 'guest')

        if self.retreat_type != 'ALL':
            queryset = queryset.filter(retreat__retreat_type=self.retreat_type)

        return list(queryset.order_by('-created_at'))

    def _get_expenses(self, start, end):
        from backoffice.models import RetreatFinancialTransaction

        queryset = RetreatFinancialTransaction.objects.filter(
            company=self.company,
            transaction_type='EXPENSE',
            transaction_date__date__gte=start,
            transaction_date__date__lte=end,
        ).exclude(status='REJECTED')

        if self.retreat_type != 'ALL':
            queryset = queryset.filter(retreat__retreat_type=self.retreat_type)

        return list(queryset)

    def _get_total_rooms(self):
        return self.company.total_rooms

    # =========================================================================
    # REPORT
    # =========================================================================

    def build_report(self, include=None):
        """
        Build the full revenue report.

        Args:
            include: Iterable of section names; unknown names are ignored.
                     Defaults to ['metrics'].

        Returns:
            Dict shaped as the API response (``success``, ``data``, ``meta``).
        """
        include = [s for s in (include or ['metrics']) if s in self.SECTIONS]

        start, end = self.get_window()
        prev_start, prev_end = self.get_window(months_offset=self.months_back)
        ya_start, ya_end = self.get_window(months_offset=12)

        bookings = self._get_bookings(start, end)
        previous_bookings = self._get_bookings(prev_start, prev_end)
        year_ago_bookings = self._get_bookings(ya_start, ya_end)
        expenses = self._get_expenses(start, end)
        previous_expenses = self._get_expenses(prev_start, prev_end)

        total_rooms = self._get_total_rooms()
        current_revenue = self._sum_revenue(bookings)
        previous_revenue = self._sum_revenue(previous_bookings)

        uses_actual_costs = bool(expenses)
        if uses_actual_costs:
            total_costs = sum((e.amount for e in expenses), Decimal('0.00'))
        else:
            total_costs = (current_revenue * self.cost_rate).quantize(TWO_PLACES)

        monthly_data = self._calculate_monthly_data(
            bookings, expenses, uses_actual_costs, total_rooms, current_revenue
        )
        forecast_data = self._calculate_forecast(monthly_data)

        metrics = self._calculate_metrics(
            bookings, current_revenue, previous_revenue,
            self._sum_revenue(year_ago_bookings),
            total_costs, total_rooms, (end - start).days + 1,
            forecast_data,
        )

        logger.debug(
            "Revenue report for %s (%s, %s): %d bookings, revenue %s",
            self.company.code, self.period, self.retreat_type, len(bookings), current_revenue
        )

        return {
            'success': True,
            'data': {
                'metrics': metrics,
                'retreatTypeRevenue': (
                    self._calculate_type_revenue(bookings, previous_bookings, current_revenue, total_costs)
                    if 'metrics' in include else []
                ),
                'monthlyData': monthly_data if 'trends' in include else [],
                'costAnalysis': (
                    self._calculate_cost_analysis(expenses, previous_expenses, total_costs, uses_actual_costs)
                    if 'costs' in include else []
                ),
                'forecastData': forecast_data if 'forecasts' in include else [],
                'lastUpdated': timezone.now().isoformat(),
            },
            'meta': {
                'period': self.period,
                'retreatType': self.retreat_type,
                'dateRange': {
                    'start': start.isoformat(),
                    'end': end.isoformat(),
                },
                'totalRecords': len(bookings),
                'currency': self.currency,
            },
        }

    # =========================================================================
    # CALCULATIONS
    # =========================================================================

    @staticmethod
    def _sum_revenue(bookings):
        return sum((b.total_amount or Decimal('0.00') for b in bookings), Decimal('0.00'))

    @staticmethod
    def _sum_nights(bookings):
        return sum(b.nights for b in bookings)

    def _calculate_metrics(self, bookings, current_revenue, previous_revenue, year_ago_revenue,
                           total_costs, total_rooms, days_in_window, forecast_data):
        """
        Calculate headline metrics.

        ADR = revenue / room nights sold
        Occupancy = room nights sold / available room nights
        RevPAR = revenue / available room nights
        """
        total_bookings = len(bookings)
        room_nights = self._sum_nights(bookings)
        available = total_rooms * days_in_window

        month_start = self.today.replace(day=1)
        monthly_revenue = self._sum_revenue(
            b for b in bookings if timezone.localdate(b.created_at) >= month_start
        )

        adr = current_revenue / room_nights if room_nights else Decimal('0.00')
        revpar = current_revenue / available if available else Decimal('0.00')
        gross_profit = current_revenue - total_costs

        return {
            'totalRevenue': to_money(current_revenue),
            'monthlyRevenue': to_money(monthly_revenue),
            'revenueGrowth': float(growth(current_revenue, previous_revenue)),
            'averageDailyRate': to_money(adr),
            'revPAR': to_money(revpar),
            'grossProfit': to_money(gross_profit),
            'totalCosts': to_money(total_costs),
            'profitMargin': float(percent(gross_profit, current_revenue)),
            'forecastedRevenue': forecast_data[0]['forecast'] if forecast_data else 0.0,
            'yearOverYearGrowth': float(growth(current_revenue, year_ago_revenue)),
            'totalBookings': total_bookings,
            'roomNights': room_nights,
            'averageBookingValue': to_money(current_revenue / total_bookings if total_bookings else 0),
            'occupancyRate': float(percent(room_nights, available)),
        }

    def _calculate_type_revenue(self, bookings, previous_bookings, current_revenue, total_costs):
        """Revenue by retreat type, sorted by revenue descending."""
        cost_ratio = total_costs / current_revenue if current_revenue else self.cost_rate

        type_map = OrderedDict()
        for booking in bookings:
            retreat_type = booking.retreat.retreat_type
            data = type_map.setdefault(retreat_type, {'revenue': Decimal('0.00'), 'bookings': 0})
            data['revenue'] += booking.total_amount
            data['bookings'] += 1

        previous_by_type = {}
        for booking in previous_bookings:
            retreat_type = booking.retreat.retreat_type
            previous_by_type[retreat_type] = previous_by_type.get(retreat_type, Decimal('0.00')) + booking.total_amount

        result = []
        for retreat_type, data in type_map.items():
            costs = (data['revenue'] * cost_ratio).quantize(TWO_PLACES)
            net_profit = data['revenue'] - costs
            result.append({
                'retreatType': retreat_type,
                'revenue': to_money(data['revenue']),
                'bookings': data['bookings'],
                'averageValue': to_money(data['revenue'] / data['bookings']),
                'costs': to_money(costs),
                'netProfit': to_money(net_profit),
                'profitMargin': float(percent(net_profit, data['revenue'])),
                'growthRate': float(growth(data['revenue'], previous_by_type.get(retreat_type))),
                'marketShare': float(percent(data['revenue'], current_revenue)),
            })

        result.sort(key=lambda t: t['revenue'], reverse=True)
        return result

    def _calculate_monthly_data(self, bookings, expenses, uses_actual_costs, total_rooms, current_revenue):
        """
        Calculate monthly breakdown, oldest month first.

        Returns:
            List of dicts with month, revenue, costs, profit, bookings, ADR,
            occupancy, target and variance vs target
        """
        current_month = self.today.replace(day=1)
        target = current_revenue / self.months_back

        monthly_data = []
        for offset in range(self.months_back - 1, -1, -1):
            month_start = current_month - relativedelta(months=offset)
            month_end = month_start + relativedelta(day=31)
            days_in_month = calendar.monthrange(month_start.year, month_start.month)[1]

            month_bookings = [
                b for b in bookings
                if month_start <= timezone.localdate(b.created_at) <= month_end
            ]
            revenue = self._sum_revenue(month_bookings)
            room_nights = self._sum_nights(month_bookings)

            if uses_actual_costs:
                costs = sum(
                    (e.amount for e in expenses
                     if month_start <= timezone.localdate(e.transaction_date) <= month_end),
                    Decimal('0.00')
                )
            else:
                costs = (revenue * self.cost_rate).quantize(TWO_PLACES)

            monthly_data.append({
                'month': month_start.strftime('%Y-%m'),
                'revenue': to_money(revenue),
                'costs': to_money(costs),
                'profit': to_money(revenue - costs),
                'bookings': len(month_bookings),
                'roomNights': room_nights,
                'averageDailyRate': to_money(revenue / room_nights if room_nights else 0),
                'occupancyRate': float(percent(room_nights, total_rooms * days_in_month)),
                'target': to_money(target),
                'variance': float(growth(revenue, target)),
            })

        return monthly_data

    def _calculate_cost_analysis(self, expenses, previous_expenses, total_costs, uses_actual_costs):
        """Cost breakdown by expense category with trend vs previous window."""
        if not uses_actual_costs:
            if not total_costs:
                return []
            return [{
                'category': 'Operational Costs (estimated)',
                'amount': to_money(total_costs),
                'percentage': 100.0,
                'trend': 0.0,
                'count': 0,
                'estimated': True,
            }]

        previous_by_category = {}
        for expense in previous_expenses:
            previous_by_category[expense.category] = (
                previous_by_category.get(expense.category, Decimal('0.00')) + expense.amount
            )

        by_category = OrderedDict()
        for expense in expenses:
            data = by_category.setdefault(expense.category, {'amount': Decimal('0.00'), 'count': 0})
            data['amount'] += expense.amount
            data['count'] += 1

        result = [{
            'category': category,
            'amount': to_money(data['amount']),
            'percentage': float(percent(data['amount'], total_costs)),
            'trend': float(growth(data['amount'], previous_by_category.get(category))),
            'count': data['count'],
            'estimated': False,
        } for category, data in by_category.items()]

        result.sort(key=lambda c: c['amount'], reverse=True)
        return result

    def _calculate_forecast(self, monthly_data):
        """
        Forecast the next months with a least-squares line through monthly revenue.

        Confidence drops 10 points per month ahead (floor 60); the range is
        +/-15% around the forecast.
        """
        revenues = [m['revenue'] for m in monthly_data]
        n = len(revenues)
        if n == 0:
            return []

        mean_x = (n - 1) / 2
        mean_y = sum(revenues) / n
        denominator = sum((x - mean_x) ** 2 for x in range(n))
        slope = (
            sum((x - mean_x) * (y - mean_y) for x, y in enumerate(revenues)) / denominator
            if denominator else 0.0
        )
        intercept = mean_y - slope * mean_x

        current_month = self.today.replace(day=1)
        forecast_data = []
        for i in range(1, self.FORECAST_MONTHS + 1):
            forecast = max(intercept + slope * (n - 1 + i), 0.0)
            factors = list(self.FORECAST_FACTORS)
            factors.append('Current bookings' if i == 1 else 'Market conditions')
            factors.append('Marketing campaigns' if i <= 2 else 'Economic factors')
            forecast_data.append({
                'month': (current_month + relativedelta(months=i)).strftime('%Y-%m'),
                'forecast': round(forecast, 2),
                'confidence': max(60, 90 - i * 10),
                'factors': factors,
                'lowerBound': round(forecast * 0.85, 2),
                'upperBound': round(forecast * 1.15, 2),
            })

        return forecast_data


# =============================================================================
# REPORT CACHE
# =============================================================================

def _version_key(company_id):
    return f'revenue-report-version:{company_id}'


def get_report_cache_version(company_id):
    return cache.get(_version_key(company_id), 1)


def invalidate_company_reports(company_id):
    """Bump the company's cache version so older report entries are never read."""
    key = _version_key(company_id)
    if cache.add(key, 2, timeout=None):
        return
    try:
        cache.incr(key)
    except ValueError:
        cache.set(key, 2, timeout=None)


def get_revenue_report(company, period='12m', retreat_type='ALL', include=None):
    """
    Return the revenue report from cache or build and cache it.

    Entries live for BACKOFFICE['REPORT_CACHE_TIMEOUT'] seconds.
    """
    include = list(include or ['metrics'])
    retreat_type = (retreat_type or 'ALL').upper()
    key = 'revenue:{company}:v{version}:{period}:{type}:{include}'.format(
        company=company.pk,
        version=get_report_cache_version(company.pk),
        period=period,
        type=retreat_type,
        include=','.join(include),
    )

    cached = cache.get(key)
    if cached is not None:
        logger.debug("Revenue report cache hit: %s", key)
        return cached

    data = RevenueReportService(company, period=period, retreat_type=retreat_type).build_report(include)
    cache.set(key, data, timeout=settings.BACKOFFICE['REPORT_CACHE_TIMEOUT'])
    return data
