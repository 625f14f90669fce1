"""
Occupancy services: OccupancyReportService.
"""

import calendar
import logging
from collections import OrderedDict, defaultdict
from datetime import timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.db.models import Q
from django.utils import timezone

from backoffice.models import RetreatBooking, RetreatRoom, ACTIVE_BOOKING_STATUSES
from .revenue_service import to_money, percent, TWO_PLACES

logger = logging.getLogger(__name__)


class OccupancyReportService:
    """
    Room occupancy for the last ``days`` days.

    A booking occupies one room for each night between check-in (inclusive)
    and check-out (exclusive); its total is spread evenly over those nights.

    Usage:
        service = OccupancyReportService(company, days=30)
        data = service.build_report()
    """

    SEASONAL_MONTHS = 12

    def __init__(self, company, days=30, facility_id=None, today=None):
        self.company = company
        self.days = days
        self.facility_id = facility_id
        self.today = today or timezone.localdate()
        self.end = self.today
        self.start = self.today - timedelta(days=days - 1)

    # =========================================================================
    # QUERYSETS
    # =========================================================================

    def _get_rooms(self):
        queryset = RetreatRoom.objects.filter(
            facility__company=self.company,
            facility__is_active=True,
            is_active=True,
        )
        if self.facility_id:
            queryset = queryset.filter(facility_id=self.facility_id)
        return queryset

    def _get_bookings(self, start, end):
        """Active bookings with at least one night in [start, end]."""
        queryset = RetreatBooking.objects.filter(
            company=self.company,
            status__in=ACTIVE_BOOKING_STATUSES,
            check_in_date__lte=end,
            check_out_date__gte=start,
        ).select_related('room', 'retreat')

        if self.facility_id:
            queryset = queryset.filter(
                Q(room__facility_id=self.facility_id)
                | Q(room__isnull=True, retreat__facility_id=self.facility_id)
            )
        return list(queryset)

    @staticmethod
    def _nightly_rate(booking):
        return booking.total_amount / booking.nights

    def _nights_by_day(self, bookings, start, end):
        """Map each day in [start, end] to the bookings occupying that night."""
        nights = defaultdict(list)
        for booking in bookings:
            day = max(booking.check_in_date, start)
            last = min(booking.check_out_date, end)
            if booking.check_in_date == booking.check_out_date:
                if start <= booking.check_in_date <= end:
                    nights[booking.check_in_date].append(booking)
                continue
            while day < booking.check_out_date and day <= last:
                nights[day].append(booking)
                day += timedelta(days=1)
        return nights

    # =========================================================================
    # REPORT
    # =========================================================================

    def build_report(self):
        """
        Build the occupancy report.

        Returns:
            Dict with dailyOccupancy, roomTypeOccupancy, seasonalTrends,
            metrics and meta
        """
        rooms = list(self._get_rooms())
        total_rooms = len(rooms)

        seasonal_start = self.today.replace(day=1) - relativedelta(months=self.SEASONAL_MONTHS - 1)
        previous_start = self.start - timedelta(days=self.days)
        bookings = self._get_bookings(min(seasonal_start, previous_start), self.end)
        nights = self._nights_by_day(bookings, min(seasonal_start, previous_start), self.end)

        daily = self._calculate_daily(nights, total_rooms)
        logger.debug(
            "Occupancy report for %s: %d rooms, %d bookings over %d days",
            self.company.code, total_rooms, len(bookings), self.days
        )
        window_bookings = [
            b for b in bookings
            if b.check_in_date <= self.end and (
                b.check_out_date > self.start or b.check_in_date == b.check_out_date >= self.start
            )
        ]

        return {
            'success': True,
            'data': {
                'dailyOccupancy': daily,
                'roomTypeOccupancy': self._calculate_room_types(rooms, nights, previous_start),
                'seasonalTrends': self._calculate_seasonal(nights, bookings, total_rooms, seasonal_start),
                'metrics': self._calculate_metrics(daily, window_bookings, rooms),
            },
            'meta': {
                'period': self.days,
                'facilityId': self.facility_id,
                'dateRange': {
                    'start': self.start.isoformat(),
                    'end': self.end.isoformat(),
                },
            },
        }

    def _calculate_daily(self, nights, total_rooms):
        daily = []
        day = self.start
        while day <= self.end:
            occupying = nights.get(day, [])
            occupied = min(len(occupying), total_rooms) if total_rooms else len(occupying)
            revenue = sum((self._nightly_rate(b) for b in occupying), Decimal('0.00'))
            daily.append({
                'date': day.isoformat(),
                'totalRooms': total_rooms,
                'occupiedRooms': occupied,
                'occupancyRate': float(percent(occupied, total_rooms)),
                'revenue': to_money(revenue),
                'averageDailyRate': to_money(revenue / len(occupying) if occupying else 0),
                'revPAR': to_money(revenue / total_rooms if total_rooms else 0),
            })
            day += timedelta(days=1)
        return daily

    def _room_type_nights(self, nights, start, end):
        sold = defaultdict(int)
        revenue = defaultdict(lambda: Decimal('0.00'))
        day = start
        while day <= end:
            for booking in nights.get(day, []):
                if booking.room_id:
                    sold[booking.room.room_type] += 1
                    revenue[booking.room.room_type] += self._nightly_rate(booking)
            day += timedelta(days=1)
        return sold, revenue

    def _calculate_room_types(self, rooms, nights, previous_start):
        """Occupancy per room type with the change vs the previous window (points)."""
        room_counts = OrderedDict()
        for room in sorted(rooms, key=lambda r: r.room_type):
            room_counts[room.room_type] = room_counts.get(room.room_type, 0) + 1

        sold, revenue = self._room_type_nights(nights, self.start, self.end)
        prev_sold, _ = self._room_type_nights(nights, previous_start, self.start - timedelta(days=1))

        result = []
        for room_type, count in room_counts.items():
            available = count * self.days
            occupancy = percent(sold[room_type], available)
            previous = percent(prev_sold[room_type], available)
            result.append({
                'roomType': room_type,
                'totalRooms': count,
                'roomNights': sold[room_type],
                'occupancyRate': float(occupancy),
                'revenue': to_money(revenue[room_type]),
                'averageDailyRate': to_money(revenue[room_type] / sold[room_type] if sold[room_type] else 0),
                'trend': float(occupancy - previous),
            })
        return result

    def _calculate_seasonal(self, nights, bookings, total_rooms, seasonal_start):
        trends = []
        for offset in range(self.SEASONAL_MONTHS):
            month_start = seasonal_start + relativedelta(months=offset)
            days_in_month = calendar.monthrange(month_start.year, month_start.month)[1]
            month_end = month_start + relativedelta(day=31)

            room_nights = 0
            revenue = Decimal('0.00')
            day = month_start
            while day <= month_end:
                for booking in nights.get(day, []):
                    room_nights += 1
                    revenue += self._nightly_rate(booking)
                day += timedelta(days=1)

            trends.append({
                'month': month_start.strftime('%b'),
                'year': month_start.year,
                'occupancy': float(percent(room_nights, total_rooms * days_in_month)),
                'revenue': to_money(revenue),
                'bookings': sum(1 for b in bookings if month_start <= b.check_in_date <= month_end),
                'averageDailyRate': to_money(revenue / room_nights if room_nights else 0),
            })
        return trends

    def _calculate_metrics(self, daily, window_bookings, rooms):
        total_rooms = len(rooms)
        rates = [d['occupancyRate'] for d in daily]
        total_revenue = sum(Decimal(str(d['revenue'])) for d in daily)
        occupied_nights = sum(d['occupiedRooms'] for d in daily)
        stay_lengths = [b.nights for b in window_bookings]

        return {
            'currentOccupancy': rates[-1] if rates else 0.0,
            'averageOccupancy': round(sum(rates) / len(rates), 2) if rates else 0.0,
            'peakOccupancy': max(rates) if rates else 0.0,
            'totalRevenue': to_money(total_revenue),
            'revPAR': to_money(total_revenue / (total_rooms * self.days) if total_rooms else 0),
            'averageDailyRate': to_money(total_revenue / occupied_nights if occupied_nights else 0),
            'totalBookings': len(window_bookings),
            'averageStayLength': (
                float((Decimal(sum(stay_lengths)) / len(stay_lengths)).quantize(TWO_PLACES))
                if stay_lengths else 0.0
            ),
            'totalRooms': total_rooms,
            'totalCapacity': sum(r.capacity for r in rooms),
        }
