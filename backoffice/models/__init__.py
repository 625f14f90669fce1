"""
Back-office models package.

Re-exports all models so Django and existing imports work unchanged:
    from backoffice.models import Company, RetreatBooking, etc.
"""

# Core: tenants
from .core import Company

# Retreats: facilities, rooms, retreats, guests, bookings, finance
from .retreats import (
    ACTIVE_BOOKING_STATUSES,
    RetreatFacility,
    RetreatRoom,
    Retreat,
    RetreatGuest,
    RetreatBooking,
    RetreatFinancialTransaction,
    RetreatLoyaltyTransaction,
    RetreatReview,
)

# Delivery: zone pricing
from .delivery import DeliveryCharge

# HR: employees
from .hr import Employee

# Real estate: properties, tenants, agreements, invoices
from .real_estate import (
    RealEstateProperty,
    Tenant,
    RentalAgreement,
    Invoice,
)

__all__ = [
    # Core
    'Company',
    # Retreats
    'ACTIVE_BOOKING_STATUSES',
    'RetreatFacility', 'RetreatRoom', 'Retreat', 'RetreatGuest', 'RetreatBooking',
    'RetreatFinancialTransaction', 'RetreatLoyaltyTransaction', 'RetreatReview',
    # Delivery
    'DeliveryCharge',
    # HR
    'Employee',
    # Real estate
    'RealEstateProperty', 'Tenant', 'RentalAgreement', 'Invoice',
]
