"""Retreat URL patterns: bookings, payments, guests, check-in/out."""

from django.urls import path
from backoffice.views import (
    BookingListView,
    BookingDetailView,
    BookingPaymentView,
    GuestListView,
    GuestDetailView,
    CheckInView,
    CheckOutView,
)

urlpatterns = [
    path('api/<slug:company_code>/bookings/', BookingListView.as_view(), name='booking_list'),
    path('api/<slug:company_code>/bookings/<int:pk>/', BookingDetailView.as_view(), name='booking_detail'),
    path('api/<slug:company_code>/bookings/<int:pk>/payment/', BookingPaymentView.as_view(), name='booking_payment'),

    path('api/<slug:company_code>/guests/', GuestListView.as_view(), name='guest_list'),
    path('api/<slug:company_code>/guests/check-in/', CheckInView.as_view(), name='guest_check_in'),
    path('api/<slug:company_code>/guests/check-out/', CheckOutView.as_view(), name='guest_check_out'),
    path('api/<slug:company_code>/guests/<int:pk>/', GuestDetailView.as_view(), name='guest_detail'),
]
