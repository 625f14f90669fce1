"""
Core views: company overview.
"""

from django.db.models import Count, Q

from backoffice.models import ACTIVE_BOOKING_STATUSES
from .mixins import ApiView


class CompanyOverviewView(ApiView):
    """API: Company details with record counts."""

    error_message = 'Failed to fetch company'

    def get(self, request, *args, **kwargs):
        company = self.get_company()
        counts = company.bookings.aggregate(
            total=Count('id'),
            active=Count('id', filter=Q(status__in=ACTIVE_BOOKING_STATUSES)),
        )
        return self.success_response(data={
            'name': company.name,
            'code': company.code,
            'industry': company.industry,
            'currency': company.currency,
            'facilities': company.facilities.filter(is_active=True).count(),
            'rooms': company.total_rooms,
            'retreats': company.retreats.filter(is_active=True).count(),
            'guests': company.guests.count(),
            'bookings': counts['total'],
            'activeBookings': counts['active'],
            'employees': company.employees.count(),
            'deliveryZones': company.delivery_charges.count(),
        })
