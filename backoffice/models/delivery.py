"""
Delivery models: per-zone delivery charges.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .core import Company


class DeliveryCharge(models.Model):
    """
    Distance-based delivery pricing for one zone.
    COMPANY-SPECIFIC: zone names are unique within a company.
    """
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='delivery_charges'
    )
    zone = models.CharField(max_length=100)
    area = models.CharField(max_length=200, blank=True)

    base_charge = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
        help_text="Flat amount charged for every delivery"
    )
    per_km_charge = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
        help_text="Amount added per kilometre"
    )
    minimum_charge = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
    )
    maximum_charge = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Optional cap on the computed fee"
    )
    estimated_time = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Estimated delivery time in minutes"
    )

    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        unique_together = ['company', 'zone']
        verbose_name = "Delivery Charge"
        verbose_name_plural = "Delivery Charges"

    def __str__(self):
        return f"{self.zone} ({self.company.name})"

    def calculate_fee(self, distance_km):
        """
        Fee for a delivery of ``distance_km`` kilometres.

        base + per_km * distance, raised to the minimum and capped at the
        maximum when one is set.
        """
        fee = self.base_charge + self.per_km_charge * Decimal(str(distance_km))
        fee = max(fee, self.minimum_charge)
        if self.maximum_charge is not None:
            fee = min(fee, self.maximum_charge)
        return fee.quantize(Decimal('0.01'))
