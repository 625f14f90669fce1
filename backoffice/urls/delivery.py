"""Delivery URL patterns: delivery charges and quotes."""

from django.urls import path
from backoffice.views import DeliveryChargeListView, DeliveryChargeDetailView, DeliveryQuoteView

urlpatterns = [
    path('api/<slug:company_code>/delivery-charges/', DeliveryChargeListView.as_view(), name='delivery_charge_list'),
    path('api/<slug:company_code>/delivery-charges/<int:pk>/', DeliveryChargeDetailView.as_view(), name='delivery_charge_detail'),
    path('api/<slug:company_code>/delivery-charges/<int:pk>/quote/', DeliveryQuoteView.as_view(), name='delivery_quote'),
]
