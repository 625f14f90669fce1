import json
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from backoffice.models import DeliveryCharge
from backoffice.services import DeliveryChargeService

pytestmark = pytest.mark.django_db

CHARGES_URL = '/api/acme/delivery-charges/'


@pytest.fixture
def downtown(company):
    return DeliveryCharge.objects.create(
        company=company, zone='Downtown', base_charge=Decimal('10.00'),
        per_km_charge=Decimal('2.00'), minimum_charge=Decimal('15.00'),
        maximum_charge=Decimal('40.00'), estimated_time=30,
    )


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


@pytest.mark.parametrize('distance, fee', [
    ('1', Decimal('15.00')),     # raised to the minimum
    ('5', Decimal('20.00')),
    ('12.5', Decimal('35.00')),
    ('50', Decimal('40.00')),    # capped at the maximum
])
def test_calculate_fee(downtown, distance, fee):
    assert downtown.calculate_fee(Decimal(distance)) == fee


def test_fee_without_maximum_is_uncapped(downtown):
    downtown.maximum_charge = None

    assert downtown.calculate_fee(100) == Decimal('210.00')


def test_create_with_tiered_amounts(company):
    charge = DeliveryChargeService(company).create_charge({
        'zone': 'Marina', 'baseCharge': 12, 'perKmCharge': '1.5', 'minimumCharge': 15,
        'estimatedTime': 45,
    })

    assert charge.base_charge == Decimal('12')
    assert charge.per_km_charge == Decimal('1.5')
    assert charge.estimated_time == 45


def test_create_with_legacy_flat_charge(company):
    charge = DeliveryChargeService(company).create_charge({'zone': 'Airport', 'charge': 25})
    charge.refresh_from_db()

    assert charge.base_charge == Decimal('25.00')
    assert charge.minimum_charge == Decimal('25.00')
    assert charge.per_km_charge == Decimal('0.00')
    assert charge.calculate_fee(10) == Decimal('25.00')


@pytest.mark.parametrize('payload, message', [
    ({'charge': 10}, 'Zone is required'),
    ({'zone': 'X'}, 'Either charge or (baseCharge, perKmCharge, minimumCharge) must be provided'),
    ({'zone': 'X', 'baseCharge': 5, 'perKmCharge': 1}, 'Either charge or (baseCharge, perKmCharge, minimumCharge) must be provided'),
    ({'zone': 'X', 'charge': -5}, 'Charge must be a positive number'),
    ({'zone': 'X', 'charge': 'ten'}, 'Charge must be a number'),
    ({'zone': 'X', 'charge': 10, 'maximumCharge': 5}, 'Maximum charge cannot be less than minimum charge'),
])
def test_create_validation(company, payload, message):
    with pytest.raises(ValidationError) as excinfo:
        DeliveryChargeService(company).create_charge(payload)

    assert excinfo.value.messages == [message]


def test_zone_is_unique_per_company(company, other_company, downtown):
    with pytest.raises(ValidationError, match='Delivery charge for this zone already exists'):
        DeliveryChargeService(company).create_charge({'zone': 'Downtown', 'charge': 10})

    assert DeliveryChargeService(other_company).create_charge({'zone': 'Downtown', 'charge': 10}).pk


def test_update_keeps_unspecified_fields(company, downtown):
    charge = DeliveryChargeService(company).update_charge(downtown, {'perKmCharge': 3, 'isActive': False})

    assert charge.per_km_charge == Decimal('3')
    assert charge.base_charge == Decimal('10.00')
    assert charge.is_active is False


def test_update_to_taken_zone_fails(company, downtown):
    marina = DeliveryChargeService(company).create_charge({'zone': 'Marina', 'charge': 10})

    with pytest.raises(ValidationError):
        DeliveryChargeService(company).update_charge(marina, {'zone': 'Downtown'})


def test_quote_inactive_zone(downtown):
    downtown.is_active = False

    with pytest.raises(ValidationError, match='Delivery zone is inactive'):
        DeliveryChargeService.quote(downtown, '5')


def test_filter_charges(company, downtown):
    DeliveryCharge.objects.create(company=company, zone='Marina', base_charge=5, is_active=False)
    service = DeliveryChargeService(company)

    assert [c.zone for c in service.filter_charges(status='active')] == ['Downtown']
    assert [c.zone for c in service.filter_charges(search='mar')] == ['Marina']
    assert service.filter_charges(zone='all').count() == 2


# =============================================================================
# API
# =============================================================================

def test_create_endpoint(client, company):
    response = post_json(client, CHARGES_URL, {'zone': 'Airport', 'charge': 25, 'area': 'Terminal 3'})
    body = response.json()

    assert response.status_code == 201
    assert body['data']['baseCharge'] == 25.0
    assert body['data']['area'] == 'Terminal 3'
    assert body['data']['maximumCharge'] is None


def test_create_endpoint_duplicate_zone(client, company, downtown):
    response = post_json(client, CHARGES_URL, {'zone': 'Downtown', 'charge': 25})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'Delivery charge for this zone already exists'}


def test_list_endpoint(client, company, downtown):
    body = client.get(CHARGES_URL + '?status=active').json()

    assert [c['zone'] for c in body['deliveryCharges']] == ['Downtown']
    assert body['pagination']['total'] == 1


def test_update_and_delete_endpoints(client, company, downtown):
    url = f'{CHARGES_URL}{downtown.pk}/'

    response = client.put(url, data=json.dumps({'minimumCharge': 18}), content_type='application/json')
    assert response.json()['data']['minimumCharge'] == 18.0

    response = client.delete(url)
    assert response.status_code == 200
    assert not DeliveryCharge.objects.filter(pk=downtown.pk).exists()


def test_quote_endpoint(client, company, downtown):
    response = client.get(f'{CHARGES_URL}{downtown.pk}/quote/?distance=5')

    assert response.status_code == 200
    assert response.json()['data'] == {'zone': 'Downtown', 'distance': 5.0, 'fee': 20.0, 'estimatedTime': 30}


@pytest.mark.parametrize('distance', ['-3', 'far', ''])
def test_quote_endpoint_rejects_bad_distance(client, company, downtown, distance):
    response = client.get(f'{CHARGES_URL}{downtown.pk}/quote/?distance={distance}')

    assert response.status_code == 400


def test_charge_of_other_company_is_404(client, other_company, downtown):
    assert client.get(f'/api/other/delivery-charges/{downtown.pk}/').status_code == 404
