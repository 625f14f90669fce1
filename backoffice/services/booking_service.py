"""
Booking services: BookingService (create/update/payment) and GuestStayService (check-in/out).
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum, Q
from django.utils import timezone

from backoffice.models import (
    RetreatBooking, RetreatGuest, RetreatFinancialTransaction,
    RetreatLoyaltyTransaction, RetreatReview, ACTIVE_BOOKING_STATUSES,
)

logger = logging.getLogger(__name__)

PAYMENT_CATEGORY = 'RETREAT_BOOKING'


def derive_payment_status(paid_amount, total_amount):
    """PAID when fully covered, PARTIAL when something is paid, else PENDING."""
    if paid_amount >= total_amount and total_amount > 0:
        return 'PAID'
    if paid_amount > 0:
        return 'PARTIAL'
    return 'PENDING'


def append_note(existing, note):
    if not note:
        return existing
    return f"{existing}\n{note}" if existing else note


class BookingService:
    """
    Create and maintain retreat bookings for one company.

    Usage:
        service = BookingService(company)
        booking = service.create_booking(retreat=..., guest=..., ...)
    """

    def __init__(self, company):
        self.company = company

    # =========================================================================
    # CAPACITY
    # =========================================================================

    def booked_guests(self, retreat, check_in, check_out, exclude_id=None):
        """Guests on active bookings of ``retreat`` overlapping the stay."""
        queryset = RetreatBooking.objects.filter(
            retreat=retreat,
            status__in=ACTIVE_BOOKING_STATUSES,
            check_in_date__lt=check_out,
            check_out_date__gt=check_in,
        )
        if exclude_id:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.aggregate(total=Sum('number_of_guests'))['total'] or 0

    def check_capacity(self, retreat, check_in, check_out, number_of_guests, exclude_id=None):
        booked = self.booked_guests(retreat, check_in, check_out, exclude_id=exclude_id)
        if booked + number_of_guests > retreat.capacity:
            remaining = max(retreat.capacity - booked, 0)
            raise ValidationError(
                f"Retreat capacity exceeded: {remaining} of {retreat.capacity} spots available"
            )

    @staticmethod
    def validate_dates(check_in, check_out):
        if not check_in or not check_out:
            raise ValidationError('Valid check-in and check-out dates are required')
        if check_out <= check_in:
            raise ValidationError('Check-out date must be after check-in date')

    # =========================================================================
    # GUESTS
    # =========================================================================

    def create_guest(self, data):
        first_name = (data.get('firstName') or '').strip()
        if not first_name:
            raise ValidationError('Guest first name is required')
        return RetreatGuest.objects.create(
            company=self.company,
            first_name=first_name,
            last_name=(data.get('lastName') or '').strip(),
            email=(data.get('email') or '').strip(),
            phone=(data.get('phone') or '').strip(),
            country=(data.get('country') or '').strip(),
            loyalty_program_active=bool(data.get('loyaltyProgramActive', False)),
        )

    @staticmethod
    def update_guest(guest, data):
        field_map = {
            'firstName': 'first_name',
            'lastName': 'last_name',
            'email': 'email',
            'phone': 'phone',
            'country': 'country',
        }
        for key, field in field_map.items():
            if key in data:
                setattr(guest, field, (data[key] or '').strip())
        if not guest.first_name:
            raise ValidationError('Guest first name is required')
        guest.save()
        return guest

    # =========================================================================
    # BOOKINGS
    # =========================================================================

    @transaction.atomic
    def create_booking(self, retreat, check_in, check_out, number_of_guests,
                       guest=None, guest_data=None, total_amount=None, **extra):
        """
        Create a booking after date and capacity checks.

        Args:
            retreat: Retreat being booked
            check_in, check_out: Stay dates (check_out after check_in)
            number_of_guests: At least 1
            guest: Existing RetreatGuest, or
            guest_data: Dict used to create a new guest
            total_amount: Defaults to retreat.price * number_of_guests
            **extra: Optional booking fields (status, room, notes, ...)

        Returns:
            RetreatBooking
        """
        self.validate_dates(check_in, check_out)
        if number_of_guests is None or number_of_guests < 1:
            raise ValidationError('Number of guests must be at least 1')

        if extra.get('status', 'PENDING') != 'CANCELLED':
            self.check_capacity(retreat, check_in, check_out, number_of_guests)

        if guest is None:
            if not guest_data:
                raise ValidationError('Guest is required')
            guest = self.create_guest(guest_data)

        if total_amount is None:
            total_amount = retreat.price * number_of_guests
        if total_amount < 0:
            raise ValidationError('Total amount cannot be negative')

        booking = RetreatBooking.objects.create(
            company=self.company,
            retreat=retreat,
            guest=guest,
            check_in_date=check_in,
            check_out_date=check_out,
            number_of_guests=number_of_guests,
            total_amount=total_amount,
            **extra
        )
        logger.info("Created booking %s for %s", booking.confirmation_number, guest)
        return booking

    @transaction.atomic
    def update_booking(self, booking, guest_data=None, **changes):
        """
        Apply field changes to a booking, re-running the capacity check.

        Returns:
            RetreatBooking
        """
        for field, value in changes.items():
            setattr(booking, field, value)

        self.validate_dates(booking.check_in_date, booking.check_out_date)
        if booking.number_of_guests < 1:
            raise ValidationError('Number of guests must be at least 1')

        if booking.status != 'CANCELLED':
            self.check_capacity(
                booking.retreat, booking.check_in_date, booking.check_out_date,
                booking.number_of_guests, exclude_id=booking.pk
            )

        if guest_data:
            self.update_guest(booking.guest, guest_data)

        booking.save()
        return booking

    def cancel_booking(self, booking, reason=''):
        booking.status = 'CANCELLED'
        booking.notes = append_note(booking.notes, f"Cancelled: {reason}" if reason else '')
        booking.save()
        logger.info("Cancelled booking %s", booking.confirmation_number)
        return booking

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    @transaction.atomic
    def update_payment(self, booking, paid_amount, payment_status=None, payment_method='', notes=''):
        """
        Record a payment amount on a booking.

        The payment status is derived from the amounts unless given; a PAID
        booking is confirmed. When the paid amount changes the booking's
        income transaction is updated or created.

        Returns:
            (booking, payment_difference)
        """
        if paid_amount is None or paid_amount < 0:
            raise ValidationError('Paid amount must be zero or more')

        valid_statuses = [code for code, _ in RetreatBooking.PAYMENT_STATUS_CHOICES]
        if payment_status and payment_status not in valid_statuses:
            raise ValidationError(f"Invalid payment status. Use one of: {', '.join(valid_statuses)}")

        difference = paid_amount - booking.paid_amount

        booking.paid_amount = paid_amount
        booking.payment_status = payment_status or derive_payment_status(paid_amount, booking.total_amount)
        if payment_method:
            booking.payment_method = payment_method
        if booking.payment_status == 'PAID' and booking.status == 'PENDING':
            booking.status = 'CONFIRMED'
        booking.notes = append_note(booking.notes, notes)
        booking.save()

        if difference != 0:
            self.sync_payment_transaction(booking)

        return booking, difference

    def sync_payment_transaction(self, booking):
        """Keep one INCOME transaction per booking mirroring the paid amount."""
        payment = RetreatFinancialTransaction.objects.filter(
            booking=booking,
            transaction_type='INCOME',
            category=PAYMENT_CATEGORY,
        ).first()

        if payment is None:
            payment = RetreatFinancialTransaction(
                company=booking.company,
                booking=booking,
                retreat=booking.retreat,
                transaction_type='INCOME',
                category=PAYMENT_CATEGORY,
                description=f"Payment for booking {booking.confirmation_number}",
                reference=booking.confirmation_number,
                status='PROCESSED',
                transaction_date=timezone.now(),
            )

        payment.amount = booking.paid_amount
        payment.payment_method = booking.payment_method
        payment.save()
        return payment

    # =========================================================================
    # LISTING
    # =========================================================================

    def filter_bookings(self, status=None, search=None, start_date=None, end_date=None):
        queryset = RetreatBooking.objects.filter(company=self.company).select_related('retreat', 'guest', 'room')

        if status and status != 'ALL':
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(
                Q(guest__first_name__icontains=search)
                | Q(guest__last_name__icontains=search)
                | Q(guest__email__icontains=search)
                | Q(confirmation_number__icontains=search)
            )
        if start_date:
            queryset = queryset.filter(check_in_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(check_in_date__lte=end_date)

        return queryset

    def get_stats(self, today=None):
        """Company-wide booking statistics."""
        today = today or timezone.localdate()
        bookings = RetreatBooking.objects.filter(company=self.company)

        by_status = {code: 0 for code, _ in RetreatBooking.STATUS_CHOICES}
        for row in bookings.values('status').annotate(count=Count('id')).order_by():
            by_status[row['status']] = row['count']

        active = bookings.filter(status__in=ACTIVE_BOOKING_STATUSES)
        revenue = active.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')
        active_count = active.count()

        return {
            'totalBookings': bookings.count(),
            'byStatus': by_status,
            'totalRevenue': float(revenue),
            'upcomingBookings': active.filter(check_in_date__gt=today).count(),
            'currentGuests': active.filter(
                check_in_date__lte=today, check_out_date__gte=today
            ).aggregate(total=Sum('number_of_guests'))['total'] or 0,
            'averageBookingValue': float((revenue / active_count).quantize(Decimal('0.01'))) if active_count else 0.0,
        }


class GuestStayService:
    """
    Check-in and check-out of booked guests.

    Loyalty members earn one point per 10 currency units of the booking total
    at check-in, plus a review bonus for a rating of 4 or 5 left at check-out;
    tiers are re-evaluated at check-out.
    """

    POINTS_DIVISOR = 10
    REVIEW_BONUS_POINTS = 50
    REVIEW_BONUS_MIN_RATING = 4

    def __init__(self, company):
        self.company = company

    def arrivals(self, day):
        return RetreatBooking.objects.filter(
            company=self.company,
            check_in_date=day,
            status__in=['CONFIRMED', 'PENDING'],
        ).select_related('guest', 'retreat', 'room').order_by('guest__last_name')

    def departures(self, day):
        return RetreatBooking.objects.filter(
            company=self.company,
            check_out_date=day,
            status='CONFIRMED',
            actual_check_in_time__isnull=False,
            actual_check_out_time__isnull=True,
        ).select_related('guest', 'retreat', 'room').order_by('guest__last_name')

    @transaction.atomic
    def check_in(self, booking, room_number='', staff='', notes=''):
        """
        Record arrival.

        Returns:
            (booking, points_earned)
        """
        if booking.actual_check_in_time:
            raise ValidationError('Guest is already checked in')
        if booking.status not in ('CONFIRMED', 'PENDING'):
            raise ValidationError(f"Cannot check in a {booking.get_status_display().lower()} booking")

        booking.actual_check_in_time = timezone.now()
        booking.check_in_staff = staff
        if room_number:
            booking.room_number = room_number
        if booking.status == 'PENDING':
            booking.status = 'CONFIRMED'
        booking.notes = append_note(booking.notes, f"Check-in notes: {notes}" if notes else '')
        booking.save()

        points = 0
        guest = booking.guest
        if guest.loyalty_program_active:
            points = int(booking.total_amount // self.POINTS_DIVISOR)
            if points > 0:
                guest.loyalty_points += points
                guest.save(update_fields=['loyalty_points', 'updated_at'])
                RetreatLoyaltyTransaction.objects.create(
                    guest=guest,
                    booking=booking,
                    points=points,
                    description=f"Points earned for booking {booking.confirmation_number}",
                )

        logger.info("Checked in %s (%d loyalty points)", booking.confirmation_number, points)
        return booking, points

    @transaction.atomic
    def check_out(self, booking, additional_charges=Decimal('0.00'), damage_charges=Decimal('0.00'),
                  payment_processed=False, staff='', notes='', feedback=None):
        """
        Record departure and complete the booking.

        ``feedback`` is an optional dict with rating (0 means no review),
        comment, service_rating, facilities_rating, food_rating and
        would_recommend.

        Returns:
            (booking, tier_upgraded, review or None)
        """
        if booking.actual_check_out_time:
            raise ValidationError('Guest is already checked out')
        if not booking.actual_check_in_time:
            raise ValidationError('Guest has not checked in')
        if additional_charges < 0 or damage_charges < 0:
            raise ValidationError('Charges cannot be negative')

        booking.total_amount += additional_charges + damage_charges
        booking.actual_check_out_time = timezone.now()
        booking.check_out_staff = staff
        booking.status = 'COMPLETED'

        if payment_processed:
            booking.paid_amount = booking.total_amount
            booking.payment_status = 'PAID'
        else:
            booking.payment_status = derive_payment_status(booking.paid_amount, booking.total_amount)

        charge_notes = []
        if additional_charges:
            charge_notes.append(f"Additional charges: {additional_charges}")
        if damage_charges:
            charge_notes.append(f"Damage charges: {damage_charges}")
        if notes:
            charge_notes.append(f"Check-out notes: {notes}")
        booking.notes = append_note(booking.notes, '\n'.join(charge_notes))
        booking.save()

        if payment_processed:
            BookingService(self.company).sync_payment_transaction(booking)

        review = None
        if feedback and feedback.get('rating'):
            review = self.record_review(booking, feedback)

        guest = booking.guest
        upgraded = False
        if guest.loyalty_program_active:
            upgraded = guest.refresh_tier()
            if upgraded:
                guest.save(update_fields=['loyalty_tier', 'updated_at'])
                logger.info("Guest %s upgraded to %s", guest, guest.loyalty_tier)

        return booking, upgraded, review

    def record_review(self, booking, feedback):
        """Store check-out feedback and award the review bonus."""
        rating = feedback['rating']
        extra = [feedback.get(key) or 0 for key in ('service_rating', 'facilities_rating', 'food_rating')]

        review = RetreatReview(
            retreat=booking.retreat,
            guest=booking.guest,
            booking=booking,
            rating=rating,
            title=f"Review for {booking.retreat.title}",
            comment=feedback.get('comment', ''),
            service_rating=feedback.get('service_rating'),
            facilities_rating=feedback.get('facilities_rating'),
            food_rating=feedback.get('food_rating'),
            # halves round up
            value_rating=(rating + sum(extra) + 2) // 4,
            would_recommend=feedback.get('would_recommend', False),
        )

        guest = booking.guest
        if guest.loyalty_program_active and rating >= self.REVIEW_BONUS_MIN_RATING:
            review.bonus_points = self.REVIEW_BONUS_POINTS
            guest.loyalty_points += self.REVIEW_BONUS_POINTS
            guest.save(update_fields=['loyalty_points', 'updated_at'])
            RetreatLoyaltyTransaction.objects.create(
                guest=guest,
                booking=booking,
                points=self.REVIEW_BONUS_POINTS,
                description='Review bonus - Thank you for your feedback!',
            )

        review.save()
        logger.info("Review %d/5 recorded for %s", rating, booking.confirmation_number)
        return review
