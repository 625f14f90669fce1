"""
Pytest fixtures for the back-office test suite.

Every test gets an empty cache; database fixtures build one company with a
facility, two rooms, two retreats and a guest.
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone

from backoffice.models import (
    Company, RetreatFacility, RetreatRoom, Retreat, RetreatGuest, RetreatBooking,
)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def at_noon():
    """Aware datetime at noon on a date in the current timezone."""

    def _at_noon(day):
        return timezone.make_aware(datetime.combine(day, time(12, 0)))

    return _at_noon


@pytest.fixture
def company(db):
    return Company.objects.create(name='Acme Retreats', code='acme', industry='Hospitality')


@pytest.fixture
def other_company(db):
    return Company.objects.create(name='Other Co', code='other')


@pytest.fixture
def facility(company):
    return RetreatFacility.objects.create(company=company, name='Main Lodge', capacity=20)


@pytest.fixture
def rooms(facility):
    return [
        RetreatRoom.objects.create(facility=facility, room_number='101', room_type='Standard'),
        RetreatRoom.objects.create(facility=facility, room_number='201', room_type='Suite', capacity=4),
    ]


@pytest.fixture
def retreat(company, facility):
    return Retreat.objects.create(
        company=company, facility=facility, title='Wellness Week',
        retreat_type='WELLNESS', price=Decimal('500.00'), capacity=4,
    )


@pytest.fixture
def yoga_retreat(company, facility):
    return Retreat.objects.create(
        company=company, facility=facility, title='Yoga Weekend',
        retreat_type='YOGA', price=Decimal('300.00'), capacity=10,
    )


@pytest.fixture
def guest(company):
    return RetreatGuest.objects.create(
        company=company, first_name='Lena', last_name='Novak', email='lena@example.com',
    )


@pytest.fixture
def make_booking(company, retreat, guest, today):
    """Factory: create a booking, optionally backdating created_at."""

    def _make(total='1000.00', status='CONFIRMED', nights=2, guests=1, created=None,
              check_in=None, booking_retreat=None, room=None, **extra):
        check_in = check_in or today + timedelta(days=30)
        booking = RetreatBooking.objects.create(
            company=company,
            retreat=booking_retreat or retreat,
            guest=extra.pop('booking_guest', guest),
            room=room,
            check_in_date=check_in,
            check_out_date=check_in + timedelta(days=nights),
            number_of_guests=guests,
            total_amount=Decimal(total),
            status=status,
            **extra
        )
        if created is not None:
            RetreatBooking.objects.filter(pk=booking.pk).update(created_at=created)
            booking.refresh_from_db()
        return booking

    return _make
