"""Core URL patterns: company overview, uploads."""

from django.urls import path
from backoffice.views import CompanyOverviewView, ImageUploadView

urlpatterns = [
    path('api/<slug:company_code>/', CompanyOverviewView.as_view(), name='company_overview'),
    path('api/<slug:company_code>/upload/', ImageUploadView.as_view(), name='image_upload'),
]
