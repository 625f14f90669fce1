"""
Retreat models: facilities, rooms, retreats, guests, bookings, transactions.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Sum, Count

from .core import Company

# Statuses that count as sold business in reports
ACTIVE_BOOKING_STATUSES = ['CONFIRMED', 'COMPLETED']


# =============================================================================
# FACILITIES & ROOMS
# =============================================================================

class RetreatFacility(models.Model):
    """
    Physical venue hosting retreats.
    COMPANY-SPECIFIC: each facility belongs to one company.
    """
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='facilities'
    )
    name = models.CharField(max_length=200)
    facility_type = models.CharField(
        max_length=50,
        blank=True,
        help_text="e.g., Lodge, Villa, Camp"
    )
    location = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(
        default=0,
        help_text="Maximum number of guests the facility can host"
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Retreat Facility"
        verbose_name_plural = "Retreat Facilities"

    def __str__(self):
        return f"{self.name} ({self.company.name})"


class RetreatRoom(models.Model):
    """Bookable room inside a facility."""
    facility = models.ForeignKey(
        RetreatFacility,
        on_delete=models.CASCADE,
        related_name='rooms'
    )
    room_number = models.CharField(max_length=20)
    room_type = models.CharField(
        max_length=50,
        default='Standard',
        help_text="e.g., Standard, Deluxe, Suite"
    )
    capacity = models.PositiveIntegerField(default=2)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['facility', 'room_number']
        unique_together = ['facility', 'room_number']
        verbose_name = "Retreat Room"
        verbose_name_plural = "Retreat Rooms"

    def __str__(self):
        return f"{self.facility.name} #{self.room_number} ({self.room_type})"


# =============================================================================
# RETREATS
# =============================================================================

class Retreat(models.Model):
    """A retreat programme guests can book."""
    TYPE_CHOICES = [
        ('WELLNESS', 'Wellness'),
        ('YOGA', 'Yoga'),
        ('MEDITATION', 'Meditation'),
        ('CORPORATE', 'Corporate'),
        ('DETOX', 'Detox'),
        ('ADVENTURE', 'Adventure'),
        ('CUSTOM', 'Custom'),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='retreats'
    )
    facility = models.ForeignKey(
        RetreatFacility,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='retreats'
    )
    title = models.CharField(max_length=200)
    retreat_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='WELLNESS', db_index=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
        help_text="Price per guest"
    )
    capacity = models.PositiveIntegerField(
        default=10,
        help_text="Maximum guests across overlapping bookings"
    )
    location = models.CharField(max_length=255, blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['title']
        verbose_name = "Retreat"
        verbose_name_plural = "Retreats"

    def __str__(self):
        return f"{self.title} ({self.get_retreat_type_display()})"


# =============================================================================
# GUESTS
# =============================================================================

class RetreatGuest(models.Model):
    """
    Guest record with loyalty programme state.
    COMPANY-SPECIFIC: guests are tracked per company.
    """
    TIER_CHOICES = [
        ('BRONZE', 'Bronze'),
        ('SILVER', 'Silver'),
        ('GOLD', 'Gold'),
        ('PLATINUM', 'Platinum'),
    ]

    # (tier, minimum points), highest first
    TIER_THRESHOLDS = [
        ('PLATINUM', 5000),
        ('GOLD', 2500),
        ('SILVER', 1000),
        ('BRONZE', 0),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='guests'
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    country = models.CharField(max_length=100, blank=True)

    loyalty_program_active = models.BooleanField(default=False)
    loyalty_points = models.PositiveIntegerField(default=0)
    loyalty_tier = models.CharField(max_length=10, choices=TIER_CHOICES, default='BRONZE')

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name']
        verbose_name = "Retreat Guest"
        verbose_name_plural = "Retreat Guests"
        indexes = [
            models.Index(fields=['company', 'email'], name='guest_company_email_idx'),
        ]

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def tier_for_points(cls, points):
        for tier, minimum in cls.TIER_THRESHOLDS:
            if points >= minimum:
                return tier
        return 'BRONZE'

    def refresh_tier(self):
        """
        Raise the loyalty tier to match current points.

        Tiers only move up; returns True when the tier changed.
        """
        ranks = [t for t, _ in reversed(self.TIER_THRESHOLDS)]
        earned = self.tier_for_points(self.loyalty_points)
        if ranks.index(earned) > ranks.index(self.loyalty_tier):
            self.loyalty_tier = earned
            return True
        return False

    def booking_stats(self):
        stats = self.bookings.filter(
            status__in=ACTIVE_BOOKING_STATUSES
        ).aggregate(
            count=Count('id'),
            spent=Sum('total_amount'),
        )
        return {
            'total_bookings': stats['count'] or 0,
            'total_spent': stats['spent'] or Decimal('0.00'),
        }


# =============================================================================
# BOOKINGS
# =============================================================================

class RetreatBooking(models.Model):
    """Guest booking for a retreat."""
    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('CONFIRMED', 'Confirmed'),
        ('COMPLETED', 'Completed'),
        ('CANCELLED', 'Cancelled'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('PARTIAL', 'Partial'),
        ('PAID', 'Paid'),
        ('REFUNDED', 'Refunded'),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='bookings'
    )
    retreat = models.ForeignKey(
        Retreat,
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    guest = models.ForeignKey(
        RetreatGuest,
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    room = models.ForeignKey(
        RetreatRoom,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bookings'
    )

    confirmation_number = models.CharField(max_length=20, unique=True, blank=True)
    check_in_date = models.DateField(db_index=True)
    check_out_date = models.DateField(db_index=True)
    number_of_guests = models.PositiveIntegerField(default=1)

    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    payment_method = models.CharField(max_length=50, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING', db_index=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='PENDING')

    room_number = models.CharField(max_length=20, blank=True)
    special_requests = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    actual_check_in_time = models.DateTimeField(null=True, blank=True)
    actual_check_out_time = models.DateTimeField(null=True, blank=True)
    check_in_staff = models.CharField(max_length=100, blank=True)
    check_out_staff = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Retreat Booking"
        verbose_name_plural = "Retreat Bookings"
        indexes = [
            models.Index(fields=['company', 'status', 'created_at'], name='booking_company_status_idx'),
        ]

    def __str__(self):
        return f"{self.confirmation_number} - {self.guest}"

    def save(self, *args, **kwargs):
        if not self.confirmation_number:
            self.confirmation_number = self.generate_confirmation_number()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_confirmation_number():
        return f"BR-{uuid.uuid4().hex[:8].upper()}"

    @property
    def nights(self):
        """Room nights for this stay (same-day stays count as one)."""
        return max((self.check_out_date - self.check_in_date).days, 1)

    @property
    def balance_due(self):
        return max(self.total_amount - self.paid_amount, Decimal('0.00'))

    def covers_night(self, day):
        return self.check_in_date <= day < self.check_out_date or (
            self.check_in_date == self.check_out_date == day
        )


# =============================================================================
# FINANCE
# =============================================================================

class RetreatFinancialTransaction(models.Model):
    """Income or expense line for the retreat business."""
    TYPE_CHOICES = [
        ('INCOME', 'Income'),
        ('EXPENSE', 'Expense'),
    ]

    STATUS_CHOICES = [
        ('PENDING', 'Pending'),
        ('APPROVED', 'Approved'),
        ('REJECTED', 'Rejected'),
        ('PROCESSED', 'Processed'),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='financial_transactions'
    )
    transaction_type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    category = models.CharField(
        max_length=50,
        db_index=True,
        help_text="e.g., RETREAT_BOOKING, STAFF, MAINTENANCE, FOOD_BEVERAGE, MARKETING"
    )
    department = models.CharField(max_length=50, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    description = models.TextField(blank=True)
    vendor_name = models.CharField(max_length=200, blank=True)
    reference = models.CharField(max_length=100, blank=True)
    payment_method = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING', db_index=True)
    transaction_date = models.DateTimeField(db_index=True)

    booking = models.ForeignKey(
        RetreatBooking,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    retreat = models.ForeignKey(
        Retreat,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    facility = models.ForeignKey(
        RetreatFacility,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )

    approved_by = models.CharField(max_length=100, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-transaction_date']
        verbose_name = "Financial Transaction"
        verbose_name_plural = "Financial Transactions"

    def __str__(self):
        return f"{self.get_transaction_type_display()} {self.category}: {self.amount}"


class RetreatLoyaltyTransaction(models.Model):
    """Points earned by a guest."""
    guest = models.ForeignKey(
        RetreatGuest,
        on_delete=models.CASCADE,
        related_name='loyalty_transactions'
    )
    booking = models.ForeignKey(
        RetreatBooking,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='loyalty_transactions'
    )
    points = models.IntegerField()
    description = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Loyalty Transaction"
        verbose_name_plural = "Loyalty Transactions"

    def __str__(self):
        return f"{self.guest}: {self.points:+d}"


class RetreatReview(models.Model):
    """Guest feedback left at check-out."""
    retreat = models.ForeignKey(
        Retreat,
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    guest = models.ForeignKey(
        RetreatGuest,
        on_delete=models.CASCADE,
        related_name='reviews'
    )
    booking = models.ForeignKey(
        RetreatBooking,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviews'
    )
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    title = models.CharField(max_length=255)
    comment = models.TextField(blank=True)
    service_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    facilities_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    food_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    # Rounded mean of the four ratings, missing ones counted as zero
    value_rating = models.PositiveSmallIntegerField(default=0)
    would_recommend = models.BooleanField(default=False)
    bonus_points = models.PositiveIntegerField(default=0, help_text="Loyalty points awarded for this review")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Retreat Review"
        verbose_name_plural = "Retreat Reviews"

    def __str__(self):
        return f"{self.retreat.title}: {self.rating}/5 by {self.guest}"
