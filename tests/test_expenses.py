import json
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from backoffice.models import RetreatFinancialTransaction
from backoffice.services import ExpenseService

pytestmark = pytest.mark.django_db

EXPENSES_URL = '/api/acme/expenses/'


@pytest.fixture
def expenses(company):
    service = ExpenseService(company)
    staff = service.create_expense('STAFF', Decimal('300.00'), 'Weekend cover', department='Kitchen')
    marketing = service.create_expense('MARKETING', Decimal('100.00'), 'Flyers')
    damaged = service.create_expense('STAFF', Decimal('100.00'), 'Overtime claim', department='Kitchen')
    ExpenseService.set_status(staff, 'APPROVED', approved_by='Finance')
    ExpenseService.set_status(damaged, 'REJECTED', approved_by='Audit')
    return [staff, marketing, damaged]


def test_create_expense_is_pending(company):
    expense = ExpenseService(company).create_expense('UTILITIES', Decimal('80.00'), vendor_name='DEWA')

    assert expense.status == 'PENDING'
    assert expense.transaction_type == 'EXPENSE'
    assert expense.vendor_name == 'DEWA'


@pytest.mark.parametrize('category, amount, extra, message', [
    ('', Decimal('10'), {}, 'Category is required'),
    ('STAFF', Decimal('0'), {}, 'Amount must be a positive number'),
    ('STAFF', Decimal('10'), {'tax_amount': Decimal('-1')}, 'Tax amount cannot be negative'),
])
def test_create_expense_validation(company, category, amount, extra, message):
    with pytest.raises(ValidationError) as excinfo:
        ExpenseService(company).create_expense(category, amount, **extra)

    assert excinfo.value.messages == [message]


def test_set_status(expenses):
    approved, pending, rejected = expenses

    assert approved.approved_by == 'Finance'
    assert approved.approved_at is not None
    assert rejected.approved_by == 'Audit'
    assert rejected.approved_at is not None

    reopened = ExpenseService.set_status(approved, 'PENDING')
    assert reopened.approved_by == ''
    assert reopened.approved_at is None

    with pytest.raises(ValidationError):
        ExpenseService.set_status(pending, 'LOST')


def test_summary_metrics(company, expenses):
    summary = ExpenseService(company).get_summary()
    metrics = summary['metrics']

    assert summary['period'] == '30d'
    assert metrics['totalExpenses'] == 500.0
    assert metrics['approvedExpenses'] == 300.0
    assert metrics['pendingExpenses'] == 100.0
    assert metrics['rejectedExpenses'] == 100.0
    assert metrics['totalCount'] == 3
    assert metrics['averageExpense'] == 166.67
    assert metrics['growthRate'] == 0.0


def test_summary_breakdowns(company, expenses, today):
    summary = ExpenseService(company).get_summary()
    categories = {c['category']: c for c in summary['categoryBreakdown']}
    departments = {d['department']: d for d in summary['departmentBreakdown']}

    assert categories['STAFF'] == {
        'category': 'STAFF', 'amount': 400.0, 'count': 2,
        'approved': 300.0, 'pending': 0.0, 'rejected': 100.0, 'percentage': 80.0,
    }
    assert categories['MARKETING']['percentage'] == 20.0
    assert departments['Kitchen']['amount'] == 400.0
    assert departments['UNASSIGNED']['count'] == 1
    assert summary['monthlyTrends'] == [{'month': today.strftime('%b %Y'), 'amount': 500.0, 'count': 3}]


def test_summary_filters(company, expenses):
    service = ExpenseService(company)

    assert service.get_summary(status='APPROVED')['metrics']['totalCount'] == 1
    assert service.get_summary(category='STAFF')['metrics']['totalExpenses'] == 400.0
    assert service.get_summary(department='ALL')['metrics']['totalCount'] == 3


def test_growth_against_previous_window(company, expenses, at_noon, today):
    RetreatFinancialTransaction.objects.create(
        company=company, transaction_type='EXPENSE', category='STAFF', amount=Decimal('250.00'),
        transaction_date=at_noon(today - timedelta(days=40)),
    )

    summary = ExpenseService(company).get_summary(period='30d')

    assert summary['metrics']['totalExpenses'] == 500.0
    assert summary['metrics']['growthRate'] == 100.0


def test_income_is_not_an_expense(company, expenses):
    RetreatFinancialTransaction.objects.create(
        company=company, transaction_type='INCOME', category='RETREAT_BOOKING',
        amount=Decimal('999.00'), transaction_date=expenses[0].transaction_date,
    )

    assert ExpenseService(company).get_summary()['metrics']['totalCount'] == 3


# =============================================================================
# API
# =============================================================================

def test_list_endpoint(client, company, expenses):
    body = client.get(EXPENSES_URL + '?period=7d&category=STAFF').json()

    assert body['success'] is True
    assert body['period'] == '7d'
    assert len(body['expenses']) == 2
    assert body['expenses'][0]['vendor'] == 'N/A'


def test_create_endpoint(client, company, retreat, today):
    payload = {
        'category': 'FOOD_BEVERAGE', 'amount': '450.75', 'taxAmount': '22.5',
        'description': 'Organic produce', 'vendorName': 'Farm Co', 'retreatId': retreat.pk,
        'date': today.isoformat(),
    }

    response = client.post(EXPENSES_URL, data=json.dumps(payload), content_type='application/json')
    body = response.json()

    assert response.status_code == 201
    assert body['data']['amount'] == 450.75
    assert body['data']['status'] == 'PENDING'
    assert body['data']['retreat']['id'] == retreat.pk
    assert body['data']['vendor'] == 'Farm Co'


@pytest.mark.parametrize('payload, error', [
    ({'category': 'STAFF'}, 'Amount is required'),
    ({'category': 'STAFF', 'amount': -4}, 'Amount must be a positive number'),
    ({'amount': 10}, 'Category is required'),
    ({'category': 'STAFF', 'amount': 10, 'retreatId': 'x'}, 'Retreat ID must be a whole number'),
])
def test_create_endpoint_validation(client, company, payload, error):
    response = client.post(EXPENSES_URL, data=json.dumps(payload), content_type='application/json')

    assert response.status_code == 400
    assert response.json()['error'] == error


def test_status_endpoint(client, company, expenses):
    pending = expenses[1]
    url = f'{EXPENSES_URL}{pending.pk}/status/'

    response = client.post(url, data=json.dumps({'status': 'APPROVED', 'approvedBy': 'CFO'}),
                           content_type='application/json')

    assert response.status_code == 200
    assert response.json()['message'] == 'Expense approved'
    assert response.json()['data']['approvedBy'] == 'CFO'

    missing = client.post(url, data=json.dumps({}), content_type='application/json')
    assert missing.json()['error'] == 'Status is required'
