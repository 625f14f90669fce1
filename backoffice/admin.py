"""
Back office admin configuration.

Supports:
- Company management with nested facilities
- Retreat data (facilities, rooms, retreats, guests, bookings, transactions)
- Delivery zones, employees and real-estate invoices
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    Company,
    RetreatFacility, RetreatRoom, Retreat, RetreatGuest, RetreatBooking,
    RetreatFinancialTransaction, RetreatLoyaltyTransaction, RetreatReview,
    DeliveryCharge, Employee,
    RealEstateProperty, Tenant, RentalAgreement, Invoice,
)


# =============================================================================
# COMPANY ADMIN
# =============================================================================

class RetreatFacilityInline(admin.TabularInline):
    """Inline for facilities within a company."""
    model = RetreatFacility
    extra = 0
    fields = ['name', 'facility_type', 'location', 'capacity', 'is_active']
    show_change_link = True


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'industry', 'currency', 'booking_count_display', 'is_active', 'created_at']
    list_filter = ['is_active', 'industry']
    search_fields = ['name', 'code']
    prepopulated_fields = {'code': ('name',)}
    ordering = ['name']
    inlines = [RetreatFacilityInline]

    def booking_count_display(self, obj):
        """Link to the company's bookings."""
        count = obj.bookings.count()
        if count > 0:
            url = reverse('admin:backoffice_retreatbooking_changelist') + f'?company__id__exact={obj.id}'
            return format_html('<a href="{}">{} bookings</a>', url, count)
        return '0'
    booking_count_display.short_description = 'Bookings'


# =============================================================================
# RETREAT ADMIN
# =============================================================================

class RetreatRoomInline(admin.TabularInline):
    model = RetreatRoom
    extra = 0
    fields = ['room_number', 'room_type', 'capacity', 'is_active']


@admin.register(RetreatFacility)
class RetreatFacilityAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'facility_type', 'location', 'capacity', 'is_active']
    list_filter = ['company', 'is_active']
    search_fields = ['name', 'location']
    inlines = [RetreatRoomInline]


@admin.register(Retreat)
class RetreatAdmin(admin.ModelAdmin):
    list_display = ['title', 'company', 'retreat_type', 'price', 'capacity', 'start_date', 'is_active']
    list_filter = ['company', 'retreat_type', 'is_active']
    search_fields = ['title', 'location']


@admin.register(RetreatGuest)
class RetreatGuestAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'company', 'email', 'loyalty_program_active', 'loyalty_points', 'loyalty_tier']
    list_filter = ['company', 'loyalty_tier', 'loyalty_program_active']
    search_fields = ['first_name', 'last_name', 'email']


@admin.register(RetreatBooking)
class RetreatBookingAdmin(admin.ModelAdmin):
    list_display = [
        'confirmation_number', 'guest', 'retreat', 'check_in_date', 'check_out_date',
        'number_of_guests', 'total_amount', 'paid_amount', 'status_badge', 'payment_status',
    ]
    list_filter = ['company', 'status', 'payment_status', 'retreat__retreat_type']
    search_fields = ['confirmation_number', 'guest__first_name', 'guest__last_name', 'guest__email']
    date_hierarchy = 'check_in_date'
    readonly_fields = ['confirmation_number', 'created_at', 'updated_at']
    raw_id_fields = ['guest']

    fieldsets = (
        (None, {
            'fields': ('company', 'confirmation_number', 'retreat', 'guest', 'room', 'room_number')
        }),
        ('Stay', {
            'fields': ('check_in_date', 'check_out_date', 'number_of_guests', 'status'),
        }),
        ('Payment', {
            'fields': ('total_amount', 'paid_amount', 'payment_status', 'payment_method'),
        }),
        ('Check-in / Check-out', {
            'fields': ('actual_check_in_time', 'check_in_staff', 'actual_check_out_time', 'check_out_staff'),
            'classes': ('collapse',),
        }),
        ('Notes', {
            'fields': ('special_requests', 'notes', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    STATUS_COLORS = {
        'PENDING': '#f59e0b',
        'CONFIRMED': '#2563eb',
        'COMPLETED': '#16a34a',
        'CANCELLED': '#dc2626',
    }

    def status_badge(self, obj):
        color = self.STATUS_COLORS.get(obj.status, '#6b7280')
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, obj.get_status_display())
    status_badge.short_description = 'Status'


@admin.register(RetreatFinancialTransaction)
class RetreatFinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ['transaction_date', 'company', 'transaction_type', 'category', 'department', 'amount', 'status']
    list_filter = ['company', 'transaction_type', 'status', 'category']
    search_fields = ['description', 'vendor_name', 'reference']
    date_hierarchy = 'transaction_date'
    raw_id_fields = ['booking']


@admin.register(RetreatLoyaltyTransaction)
class RetreatLoyaltyTransactionAdmin(admin.ModelAdmin):
    list_display = ['guest', 'points', 'description', 'created_at']
    search_fields = ['guest__first_name', 'guest__last_name', 'description']
    raw_id_fields = ['guest', 'booking']


@admin.register(RetreatReview)
class RetreatReviewAdmin(admin.ModelAdmin):
    list_display = ['retreat', 'guest', 'rating', 'would_recommend', 'created_at']
    list_filter = ['rating', 'would_recommend']
    search_fields = ['guest__first_name', 'guest__last_name', 'retreat__title', 'comment']
    raw_id_fields = ['guest', 'booking']


# =============================================================================
# DELIVERY & HR ADMIN
# =============================================================================

@admin.register(DeliveryCharge)
class DeliveryChargeAdmin(admin.ModelAdmin):
    list_display = ['zone', 'company', 'area', 'base_charge', 'per_km_charge', 'minimum_charge', 'maximum_charge', 'is_active']
    list_filter = ['company', 'is_active']
    search_fields = ['zone', 'area']


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'company', 'email', 'department', 'position', 'salary', 'status']
    list_filter = ['company', 'department', 'status']
    search_fields = ['first_name', 'last_name', 'email', 'position']


# =============================================================================
# REAL ESTATE ADMIN
# =============================================================================

@admin.register(RealEstateProperty)
class RealEstatePropertyAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'city', 'area']
    list_filter = ['company', 'city']
    search_fields = ['name', 'address']


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'company', 'email', 'phone']
    list_filter = ['company']
    search_fields = ['first_name', 'last_name', 'email']


@admin.register(RentalAgreement)
class RentalAgreementAdmin(admin.ModelAdmin):
    list_display = ['property', 'unit_number', 'tenant', 'monthly_rent', 'start_date', 'end_date', 'status']
    list_filter = ['status', 'property']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'agreement', 'total_amount', 'issue_date', 'due_date', 'paid_date', 'status']
    list_filter = ['status']
    search_fields = ['invoice_number', 'description']
    date_hierarchy = 'due_date'
