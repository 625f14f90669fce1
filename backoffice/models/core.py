"""
Core models: Company (tenant).
"""

from django.db import models


class Company(models.Model):
    """
    Tenant that owns every back-office record.

    Example: "Bridge Retreats" runs retreats, "Marah" runs deliveries.
    """
    name = models.CharField(
        max_length=200,
        help_text="Company name (e.g., 'Bridge Retreats')"
    )
    code = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-friendly code (e.g., 'bridge-retreats')"
    )
    industry = models.CharField(
        max_length=100,
        blank=True,
        help_text="Industry label shown next to the company name"
    )

    # Settings
    currency = models.CharField(
        max_length=3,
        default='AED',
        help_text="Currency code used in reports and exports"
    )

    # Status
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this company is active"
    )

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Company"
        verbose_name_plural = "Companies"

    def __str__(self):
        return self.name

    @property
    def total_rooms(self):
        """Return count of active rooms across active facilities."""
        from .retreats import RetreatRoom
        return RetreatRoom.objects.filter(
            facility__company=self,
            facility__is_active=True,
            is_active=True,
        ).count()
