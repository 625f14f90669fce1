"""
Delivery services: DeliveryChargeService.
"""

import logging

from django.core.exceptions import ValidationError
from django.db.models import Q

from backoffice.models import DeliveryCharge
from backoffice.utils.validation import parse_decimal_field, parse_int_field, clean_text

logger = logging.getLogger(__name__)


class DeliveryChargeService:
    """
    Zone-based delivery charges for one company.

    A charge is defined either by a single legacy ``charge`` (flat fee) or by
    all of ``baseCharge``, ``perKmCharge`` and ``minimumCharge``.
    """

    # payload key -> (model field, label)
    AMOUNT_FIELDS = {
        'baseCharge': ('base_charge', 'Base charge'),
        'perKmCharge': ('per_km_charge', 'Per km charge'),
        'minimumCharge': ('minimum_charge', 'Minimum charge'),
        'maximumCharge': ('maximum_charge', 'Maximum charge'),
    }

    def __init__(self, company):
        self.company = company

    def filter_charges(self, search=None, zone=None, status=None):
        queryset = DeliveryCharge.objects.filter(company=self.company)
        if search:
            queryset = queryset.filter(
                Q(zone__icontains=search)
                | Q(area__icontains=search)
                | Q(notes__icontains=search)
            )
        if zone and zone != 'all':
            queryset = queryset.filter(zone=zone)
        if status == 'active':
            queryset = queryset.filter(is_active=True)
        elif status == 'inactive':
            queryset = queryset.filter(is_active=False)
        return queryset.order_by('-created_at')

    def _check_zone_available(self, zone, exclude_id=None):
        queryset = DeliveryCharge.objects.filter(company=self.company, zone=zone)
        if exclude_id:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise ValidationError('Delivery charge for this zone already exists')

    def _clean(self, data, partial=False):
        """Validate a payload and map it to model fields."""
        cleaned = {}

        if 'zone' in data or not partial:
            zone = clean_text(data.get('zone'))
            if not zone:
                raise ValidationError('Zone is required')
            cleaned['zone'] = zone

        amounts = {}
        for key, (field, label) in self.AMOUNT_FIELDS.items():
            if key in data:
                amounts[field] = parse_decimal_field(data[key], label, positive=True)
        charge = parse_decimal_field(data.get('charge'), 'Charge', positive=True)

        if not partial:
            tiered = all(amounts.get(f) for f in ('base_charge', 'per_km_charge', 'minimum_charge'))
            if charge is None and not tiered:
                raise ValidationError(
                    'Either charge or (baseCharge, perKmCharge, minimumCharge) must be provided'
                )

        if charge is not None:
            for field in ('base_charge', 'minimum_charge'):
                if amounts.get(field) is None:
                    amounts[field] = charge
        cleaned.update({k: v for k, v in amounts.items() if v is not None or k == 'maximum_charge'})

        if 'estimatedTime' in data:
            cleaned['estimated_time'] = parse_int_field(data['estimatedTime'], 'Estimated time', minimum=1)
        if 'area' in data:
            cleaned['area'] = clean_text(data['area'])
        if 'notes' in data:
            cleaned['notes'] = clean_text(data['notes'])
        if 'isActive' in data:
            cleaned['is_active'] = bool(data['isActive'])

        return cleaned

    def create_charge(self, data):
        cleaned = self._clean(data)
        self._check_zone_available(cleaned['zone'])
        charge = DeliveryCharge(company=self.company, **cleaned)
        self._check_bounds(charge)
        charge.save()
        logger.info("Created delivery zone %s for %s", charge.zone, self.company.code)
        return charge

    def update_charge(self, charge, data):
        cleaned = self._clean(data, partial=True)
        if 'zone' in cleaned and cleaned['zone'] != charge.zone:
            self._check_zone_available(cleaned['zone'], exclude_id=charge.pk)
        for field, value in cleaned.items():
            setattr(charge, field, value)
        self._check_bounds(charge)
        charge.save()
        return charge

    @staticmethod
    def _check_bounds(charge):
        if charge.maximum_charge is not None and charge.maximum_charge < charge.minimum_charge:
            raise ValidationError('Maximum charge cannot be less than minimum charge')

    @staticmethod
    def quote(charge, distance):
        """Fee for ``distance`` km in an active zone."""
        if not charge.is_active:
            raise ValidationError('Delivery zone is inactive')
        distance_km = parse_decimal_field(distance, 'Distance', allow_none=False)
        return charge.calculate_fee(distance_km)
