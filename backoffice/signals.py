"""
Signal handlers that expire cached revenue reports when their inputs change.
"""

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import (
    RetreatBooking, RetreatFinancialTransaction, Retreat, RetreatFacility, RetreatRoom,
)
from .services.revenue_service import invalidate_company_reports

logger = logging.getLogger(__name__)


@receiver(post_save, sender=RetreatBooking)
@receiver(post_delete, sender=RetreatBooking)
def expire_reports_on_booking_change(sender, instance, **kwargs):
    """Bookings feed revenue, room nights and forecasts."""
    invalidate_company_reports(instance.company_id)
    logger.debug("Revenue reports expired for company %s (booking %s)", instance.company_id, instance.pk)


@receiver(post_save, sender=RetreatFinancialTransaction)
@receiver(post_delete, sender=RetreatFinancialTransaction)
def expire_reports_on_transaction_change(sender, instance, **kwargs):
    """Expense transactions feed costs and profit."""
    invalidate_company_reports(instance.company_id)


@receiver(post_save, sender=Retreat)
@receiver(post_delete, sender=Retreat)
@receiver(post_save, sender=RetreatFacility)
@receiver(post_delete, sender=RetreatFacility)
def expire_reports_on_retreat_change(sender, instance, **kwargs):
    """Retreat types group revenue; active facilities count toward available rooms."""
    invalidate_company_reports(instance.company_id)


@receiver(post_save, sender=RetreatRoom)
@receiver(post_delete, sender=RetreatRoom)
def expire_reports_on_room_change(sender, instance, **kwargs):
    """Active rooms set the available room nights."""
    invalidate_company_reports(instance.facility.company_id)
