"""
Delivery views: delivery charge CRUD and fee quotes.
"""

import logging

from django.shortcuts import get_object_or_404

from backoffice.models import DeliveryCharge
from backoffice.services import DeliveryChargeService
from .mixins import ApiView

logger = logging.getLogger(__name__)


def serialize_charge(charge):
    return {
        'id': charge.id,
        'zone': charge.zone,
        'area': charge.area,
        'baseCharge': float(charge.base_charge),
        'perKmCharge': float(charge.per_km_charge),
        'minimumCharge': float(charge.minimum_charge),
        'maximumCharge': float(charge.maximum_charge) if charge.maximum_charge is not None else None,
        'estimatedTime': charge.estimated_time,
        'isActive': charge.is_active,
        'notes': charge.notes,
        'createdAt': charge.created_at.isoformat(),
        'updatedAt': charge.updated_at.isoformat(),
    }


class DeliveryChargeMixin:

    def get_charge(self, pk):
        return get_object_or_404(DeliveryCharge, pk=pk, company=self.get_company())


class DeliveryChargeListView(ApiView):
    """API: List and create delivery charges."""

    error_message = 'Failed to process delivery charges'

    def get(self, request, *args, **kwargs):
        queryset = DeliveryChargeService(self.get_company()).filter_charges(
            search=request.GET.get('search'),
            zone=request.GET.get('zone'),
            status=request.GET.get('status'),
        )
        charges, pagination = self.paginate(queryset)
        return self.json_response({
            'success': True,
            'deliveryCharges': [serialize_charge(c) for c in charges],
            'pagination': pagination,
        })

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        charge = DeliveryChargeService(self.get_company()).create_charge(data)
        return self.success_response(
            data=serialize_charge(charge),
            message=f'Delivery charge for {charge.zone} created',
            status=201
        )


class DeliveryChargeDetailView(DeliveryChargeMixin, ApiView):
    """API: Retrieve, update or delete a delivery charge."""

    error_message = 'Failed to process delivery charge'

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_charge(self.get_charge(kwargs['pk'])))

    def put(self, request, *args, **kwargs):
        charge = self.get_charge(kwargs['pk'])
        data = self.parse_json_body()
        charge = DeliveryChargeService(self.get_company()).update_charge(charge, data)
        return self.success_response(data=serialize_charge(charge), message='Delivery charge updated')

    def delete(self, request, *args, **kwargs):
        charge = self.get_charge(kwargs['pk'])
        zone = charge.zone
        charge.delete()
        logger.info("Deleted delivery zone %s for %s", zone, self.get_company().code)
        return self.success_response(message=f'Delivery charge for {zone} deleted')


class DeliveryQuoteView(DeliveryChargeMixin, ApiView):
    """API: Quote the fee for a distance. GET ?distance=<km>"""

    error_message = 'Failed to calculate delivery fee'

    def get(self, request, *args, **kwargs):
        charge = self.get_charge(kwargs['pk'])
        distance = request.GET.get('distance')
        fee = DeliveryChargeService.quote(charge, distance)
        return self.success_response(data={
            'zone': charge.zone,
            'distance': float(self.parse_decimal(distance)),
            'fee': float(fee),
            'estimatedTime': charge.estimated_time,
        })
