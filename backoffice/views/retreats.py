"""
Retreat views: bookings, payments, guests, check-in and check-out.
"""

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import Http404
from django.shortcuts import get_object_or_404
from django.utils import timezone

from backoffice.models import RetreatBooking, RetreatGuest, Retreat, RetreatRoom
from backoffice.services import BookingService, GuestStayService
from backoffice.utils.validation import (
    parse_decimal_field, parse_int_field, parse_date_field, parse_bool_field, clean_text,
)
from .mixins import ApiView

logger = logging.getLogger(__name__)


def serialize_guest(guest, with_stats=False):
    data = {
        'id': guest.id,
        'firstName': guest.first_name,
        'lastName': guest.last_name,
        'fullName': guest.full_name,
        'email': guest.email,
        'phone': guest.phone,
        'country': guest.country,
        'loyaltyProgramActive': guest.loyalty_program_active,
        'loyaltyPoints': guest.loyalty_points,
        'loyaltyTier': guest.loyalty_tier,
        'createdAt': guest.created_at.isoformat(),
    }
    if with_stats:
        stats = guest.booking_stats()
        data['totalBookings'] = stats['total_bookings']
        data['totalSpent'] = float(stats['total_spent'])
    return data


def serialize_booking(booking):
    return {
        'id': booking.id,
        'confirmationNumber': booking.confirmation_number,
        'status': booking.status,
        'paymentStatus': booking.payment_status,
        'checkInDate': booking.check_in_date.isoformat(),
        'checkOutDate': booking.check_out_date.isoformat(),
        'nights': booking.nights,
        'numberOfGuests': booking.number_of_guests,
        'totalAmount': float(booking.total_amount),
        'paidAmount': float(booking.paid_amount),
        'balanceDue': float(booking.balance_due),
        'paymentMethod': booking.payment_method,
        'roomNumber': booking.room_number or (booking.room.room_number if booking.room_id else ''),
        'specialRequests': booking.special_requests,
        'notes': booking.notes,
        'actualCheckInTime': booking.actual_check_in_time.isoformat() if booking.actual_check_in_time else None,
        'actualCheckOutTime': booking.actual_check_out_time.isoformat() if booking.actual_check_out_time else None,
        'retreat': {
            'id': booking.retreat.id,
            'title': booking.retreat.title,
            'type': booking.retreat.retreat_type,
            'location': booking.retreat.location,
        },
        'guest': serialize_guest(booking.guest),
        'createdAt': booking.created_at.isoformat(),
        'updatedAt': booking.updated_at.isoformat(),
    }


def serialize_review(review):
    return {
        'id': review.id,
        'rating': review.rating,
        'serviceRating': review.service_rating,
        'facilitiesRating': review.facilities_rating,
        'foodRating': review.food_rating,
        'valueRating': review.value_rating,
        'comment': review.comment,
        'wouldRecommend': review.would_recommend,
        'bonusPoints': review.bonus_points,
    }


class BookingPayloadMixin:
    """Map a booking JSON payload onto model values."""

    def get_booking(self, pk):
        pk = self.parse_int(pk, None)
        if pk is None:
            raise Http404('Booking not found')
        return get_object_or_404(
            RetreatBooking.objects.select_related('retreat', 'guest', 'room'),
            pk=pk,
            company=self.get_company()
        )

    def clean_booking_fields(self, data):
        company = self.get_company()
        fields = {}

        if 'retreatId' in data:
            fields['retreat'] = get_object_or_404(
                Retreat, pk=parse_int_field(data['retreatId'], 'Retreat ID', allow_none=False), company=company
            )
        if 'checkInDate' in data:
            fields['check_in_date'] = parse_date_field(data['checkInDate'], 'Check-in date', allow_none=False)
        if 'checkOutDate' in data:
            fields['check_out_date'] = parse_date_field(data['checkOutDate'], 'Check-out date', allow_none=False)
        if 'numberOfGuests' in data:
            fields['number_of_guests'] = parse_int_field(data['numberOfGuests'], 'Number of guests', minimum=1)
        if 'totalAmount' in data:
            fields['total_amount'] = parse_decimal_field(data['totalAmount'], 'Total amount')
            if fields['total_amount'] is None:
                del fields['total_amount']
        if data.get('roomId'):
            fields['room'] = get_object_or_404(
                RetreatRoom, pk=parse_int_field(data['roomId'], 'Room ID'), facility__company=company
            )
        if 'status' in data:
            valid = [code for code, _ in RetreatBooking.STATUS_CHOICES]
            if data['status'] not in valid:
                raise ValidationError(f"Invalid status. Use one of: {', '.join(valid)}")
            fields['status'] = data['status']
        for key, field in (('specialRequests', 'special_requests'), ('notes', 'notes'),
                           ('paymentMethod', 'payment_method'), ('roomNumber', 'room_number')):
            if key in data:
                fields[field] = clean_text(data[key])
        return fields


# =============================================================================
# BOOKINGS
# =============================================================================

class BookingListView(BookingPayloadMixin, ApiView):
    """API: List and create bookings."""

    error_message = 'Failed to process bookings'

    def get(self, request, *args, **kwargs):
        service = BookingService(self.get_company())
        queryset = service.filter_bookings(
            status=request.GET.get('status'),
            search=request.GET.get('search'),
            start_date=self.parse_date(request.GET.get('startDate')),
            end_date=self.parse_date(request.GET.get('endDate')),
        )
        bookings, pagination = self.paginate(queryset)

        return self.json_response({
            'success': True,
            'bookings': [serialize_booking(b) for b in bookings],
            'stats': service.get_stats(),
            'pagination': pagination,
        })

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        company = self.get_company()

        if not data.get('retreatId'):
            return self.error_response('Retreat is required')
        if not data.get('checkInDate') or not data.get('checkOutDate'):
            return self.error_response('Check-in and check-out dates are required')

        fields = self.clean_booking_fields(data)
        fields.setdefault('number_of_guests', 1)

        guest = None
        if data.get('guestId'):
            guest = get_object_or_404(
                RetreatGuest, pk=parse_int_field(data['guestId'], 'Guest ID'), company=company
            )

        booking = BookingService(company).create_booking(
            retreat=fields.pop('retreat'),
            check_in=fields.pop('check_in_date'),
            check_out=fields.pop('check_out_date'),
            number_of_guests=fields.pop('number_of_guests'),
            guest=guest,
            guest_data=data.get('guestData'),
            total_amount=fields.pop('total_amount', None),
            **fields
        )

        return self.success_response(
            data=serialize_booking(booking),
            message=f'Booking {booking.confirmation_number} created successfully',
            status=201
        )


class BookingDetailView(BookingPayloadMixin, ApiView):
    """API: Retrieve, update or cancel a booking."""

    error_message = 'Failed to process booking'

    def get(self, request, *args, **kwargs):
        booking = self.get_booking(kwargs['pk'])
        return self.success_response(data=serialize_booking(booking))

    def put(self, request, *args, **kwargs):
        booking = self.get_booking(kwargs['pk'])
        data = self.parse_json_body()

        fields = self.clean_booking_fields(data)
        booking = BookingService(self.get_company()).update_booking(
            booking, guest_data=data.get('guestData'), **fields
        )
        return self.success_response(data=serialize_booking(booking), message='Booking updated successfully')

    def delete(self, request, *args, **kwargs):
        booking = self.get_booking(kwargs['pk'])
        if booking.status == 'CANCELLED':
            return self.error_response('Booking is already cancelled')

        reason = clean_text(request.GET.get('reason'))
        booking = BookingService(self.get_company()).cancel_booking(booking, reason=reason)
        return self.success_response(data=serialize_booking(booking), message='Booking cancelled successfully')


class BookingPaymentView(BookingPayloadMixin, ApiView):
    """API: Booking payment summary and payment updates."""

    error_message = 'Failed to process payment'

    def get(self, request, *args, **kwargs):
        booking = self.get_booking(kwargs['pk'])
        transactions = booking.transactions.order_by('-transaction_date')

        return self.success_response(data={
            'bookingId': booking.id,
            'confirmationNumber': booking.confirmation_number,
            'totalAmount': float(booking.total_amount),
            'paidAmount': float(booking.paid_amount),
            'balanceDue': float(booking.balance_due),
            'paymentStatus': booking.payment_status,
            'paymentMethod': booking.payment_method,
            'transactions': [{
                'id': t.id,
                'type': t.transaction_type,
                'category': t.category,
                'amount': float(t.amount),
                'status': t.status,
                'paymentMethod': t.payment_method,
                'date': t.transaction_date.isoformat(),
            } for t in transactions],
        })

    def put(self, request, *args, **kwargs):
        booking = self.get_booking(kwargs['pk'])
        data = self.parse_json_body()

        paid_amount = parse_decimal_field(data.get('paidAmount'), 'Paid amount', allow_none=False)
        booking, difference = BookingService(self.get_company()).update_payment(
            booking,
            paid_amount,
            payment_status=data.get('paymentStatus'),
            payment_method=clean_text(data.get('paymentMethod')),
            notes=clean_text(data.get('notes')),
        )

        return self.json_response({
            'success': True,
            'message': 'Payment updated successfully',
            'data': serialize_booking(booking),
            'paymentDifference': float(difference),
        })


# =============================================================================
# GUESTS
# =============================================================================

class GuestListView(ApiView):
    """API: List and create guests."""

    error_message = 'Failed to process guests'

    def get(self, request, *args, **kwargs):
        queryset = RetreatGuest.objects.filter(company=self.get_company())

        search = request.GET.get('search')
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )
        tier = request.GET.get('tier')
        if tier and tier != 'ALL':
            queryset = queryset.filter(loyalty_tier=tier)

        guests, pagination = self.paginate(queryset.order_by('last_name', 'first_name', 'id'))
        return self.json_response({
            'success': True,
            'guests': [serialize_guest(g, with_stats=True) for g in guests],
            'pagination': pagination,
        })

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        guest = BookingService(self.get_company()).create_guest(data)
        return self.success_response(
            data=serialize_guest(guest),
            message=f'Guest {guest.full_name} created successfully',
            status=201
        )


class GuestDetailView(ApiView):
    """API: Guest profile with booking history."""

    error_message = 'Failed to fetch guest'

    def get(self, request, *args, **kwargs):
        guest = get_object_or_404(RetreatGuest, pk=kwargs['pk'], company=self.get_company())
        bookings = guest.bookings.select_related('retreat', 'room').order_by('-check_in_date')

        data = serialize_guest(guest, with_stats=True)
        data['bookings'] = [{
            'id': b.id,
            'confirmationNumber': b.confirmation_number,
            'retreat': b.retreat.title,
            'checkInDate': b.check_in_date.isoformat(),
            'checkOutDate': b.check_out_date.isoformat(),
            'status': b.status,
            'totalAmount': float(b.total_amount),
        } for b in bookings]
        data['loyaltyTransactions'] = [{
            'points': t.points,
            'description': t.description,
            'createdAt': t.created_at.isoformat(),
        } for t in guest.loyalty_transactions.all()[:20]]

        return self.success_response(data=data)


# =============================================================================
# CHECK-IN / CHECK-OUT
# =============================================================================

class CheckInView(BookingPayloadMixin, ApiView):
    """API: Arrivals for a day and guest check-in."""

    error_message = 'Failed to process check-in'

    def get(self, request, *args, **kwargs):
        day = self.parse_date(request.GET.get('date')) or timezone.localdate()
        arrivals = GuestStayService(self.get_company()).arrivals(day)
        return self.json_response({
            'success': True,
            'date': day.isoformat(),
            'arrivals': [serialize_booking(b) for b in arrivals],
        })

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        if not data.get('bookingId'):
            return self.error_response('Booking ID is required')

        booking = self.get_booking(data['bookingId'])
        booking, points = GuestStayService(self.get_company()).check_in(
            booking,
            room_number=clean_text(data.get('roomNumber')),
            staff=clean_text(data.get('staffMember')),
            notes=clean_text(data.get('notes')),
        )

        return self.json_response({
            'success': True,
            'message': f'{booking.guest.full_name} checked in successfully',
            'data': serialize_booking(booking),
            'loyaltyPointsEarned': points,
        })


class CheckOutView(BookingPayloadMixin, ApiView):
    """API: Departures for a day and guest check-out."""

    error_message = 'Failed to process check-out'

    def get(self, request, *args, **kwargs):
        day = self.parse_date(request.GET.get('date')) or timezone.localdate()
        departures = GuestStayService(self.get_company()).departures(day)
        return self.json_response({
            'success': True,
            'date': day.isoformat(),
            'departures': [serialize_booking(b) for b in departures],
        })

    def clean_feedback(self, feedback):
        """Validate the optional check-out feedback object."""
        if feedback is None:
            return None
        if not isinstance(feedback, dict):
            raise ValidationError('Feedback must be an object')

        cleaned = {'rating': self.parse_rating(feedback.get('overallRating'), 'Overall rating') or 0}
        for key, field, label in [
            ('serviceRating', 'service_rating', 'Service rating'),
            ('facilitiesRating', 'facilities_rating', 'Facilities rating'),
            ('foodRating', 'food_rating', 'Food rating'),
        ]:
            cleaned[field] = self.parse_rating(feedback.get(key), label) or None
        cleaned['comment'] = clean_text(feedback.get('comments'))
        cleaned['would_recommend'] = parse_bool_field(feedback.get('wouldRecommend'), 'Would recommend')
        return cleaned

    @staticmethod
    def parse_rating(value, label):
        rating = parse_int_field(value, label, minimum=0)
        if rating is not None and rating > 5:
            raise ValidationError(f"{label} must be between 0 and 5")
        return rating

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        if not data.get('bookingId'):
            return self.error_response('Booking ID is required')

        booking = self.get_booking(data['bookingId'])
        booking, upgraded, review = GuestStayService(self.get_company()).check_out(
            booking,
            additional_charges=parse_decimal_field(data.get('additionalCharges'), 'Additional charges') or Decimal('0.00'),
            damage_charges=parse_decimal_field(data.get('damageCharges'), 'Damage charges') or Decimal('0.00'),
            payment_processed=parse_bool_field(data.get('paymentProcessed'), 'Payment processed'),
            staff=clean_text(data.get('staffMember')),
            notes=clean_text(data.get('notes')),
            feedback=self.clean_feedback(data.get('feedback')),
        )

        return self.json_response({
            'success': True,
            'message': f'{booking.guest.full_name} checked out successfully',
            'data': serialize_booking(booking),
            'loyaltyTier': booking.guest.loyalty_tier,
            'tierUpgraded': upgraded,
            'review': serialize_review(review) if review else None,
        })
