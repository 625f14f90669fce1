import json
from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from backoffice.models import Employee
from backoffice.services import EmployeeService, PayrollService
from backoffice.services.employee_service import parse_skills

pytestmark = pytest.mark.django_db

EMPLOYEES_URL = '/api/acme/employees/'


def employee_payload(**overrides):
    payload = {
        'firstName': 'Aisha',
        'lastName': 'Rahman',
        'email': 'Aisha@Example.com',
        'department': 'Operations',
        'role': 'Manager',
        'startDate': '2023-04-01',
        'salary': '12000',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def staff(company):
    return [
        Employee.objects.create(
            company=company, first_name='Ravi', last_name='Patel', email='ravi@example.com',
            department='Kitchen', position='Chef', salary=Decimal('8000.00'),
            allowances=Decimal('500.00'), deductions=Decimal('200.00'), start_date=date(2022, 1, 10),
        ),
        Employee.objects.create(
            company=company, first_name='Nora', last_name='Ali', email='nora@example.com',
            department='Kitchen', position='Cook', salary=Decimal('6000.00'), start_date=date(2023, 6, 1),
        ),
        Employee.objects.create(
            company=company, first_name='Tom', last_name='Berg', email='tom@example.com',
            department='Spa', position='Therapist', salary=Decimal('7000.00'), start_date=date(2021, 3, 1),
            status='INACTIVE',
        ),
    ]


@pytest.mark.parametrize('value, expected', [
    ('Yoga, Reiki ,, Massage', ['Yoga', 'Reiki', 'Massage']),
    (['First aid', ' '], ['First aid']),
    (None, []),
])
def test_parse_skills(value, expected):
    assert parse_skills(value) == expected


def test_parse_skills_rejects_other_types():
    with pytest.raises(ValidationError):
        parse_skills(42)


def test_create_employee(company):
    employee = EmployeeService(company).create_employee(employee_payload(skills='Planning, Budgeting'))

    assert employee.email == 'aisha@example.com'
    assert employee.position == 'Manager'
    assert employee.salary == Decimal('12000')
    assert employee.skills == ['Planning', 'Budgeting']
    assert employee.status == 'ACTIVE'


@pytest.mark.parametrize('overrides, message', [
    ({'firstName': ''}, 'First name is required'),
    ({'role': None}, 'Role is required'),
    ({'email': 'not-an-email'}, 'Valid email is required'),
    ({'startDate': ''}, 'Start date is required'),
    ({'salary': 'lots'}, 'Salary must be a number'),
    ({'status': 'RETIRED'}, 'Invalid status. Use one of: ACTIVE, INACTIVE, ON_LEAVE'),
])
def test_create_employee_validation(company, overrides, message):
    with pytest.raises(ValidationError) as excinfo:
        EmployeeService(company).create_employee(employee_payload(**overrides))

    assert excinfo.value.messages == [message]


def test_duplicate_email_is_rejected(company, staff):
    with pytest.raises(ValidationError, match='Employee with this email already exists'):
        EmployeeService(company).create_employee(employee_payload(email='RAVI@example.com'))


def test_update_employee_partial(company, staff):
    employee = EmployeeService(company).update_employee(staff[0], {'salary': 9000, 'status': 'ON_LEAVE'})

    assert employee.salary == Decimal('9000')
    assert employee.status == 'ON_LEAVE'
    assert employee.first_name == 'Ravi'


def test_filter_and_sort(company, staff):
    service = EmployeeService(company)

    by_salary = service.filter_employees(sort_by='salary', sort_order='asc')
    assert [e.first_name for e in by_salary] == ['Nora', 'Tom', 'Ravi']
    assert [e.first_name for e in service.filter_employees(department='Spa')] == ['Tom']
    assert [e.first_name for e in service.filter_employees(search='chef')] == ['Ravi']


def test_payroll_totals_active_employees(company, staff):
    payroll = PayrollService(company).get_payroll()

    assert [e['name'] for e in payroll['employees']] == ['Nora Ali', 'Ravi Patel']
    assert payroll['employees'][1]['netSalary'] == 8300.0
    assert payroll['totals'] == {
        'baseSalary': 14000.0,
        'allowances': 500.0,
        'deductions': 200.0,
        'netSalary': 14300.0,
        'employees': 2,
        'averageSalary': 7000.0,
    }
    assert payroll['departments'] == [{
        'department': 'Kitchen', 'employees': 2, 'totalSalary': 14000.0,
        'averageSalary': 7000.0, 'totalNet': 14300.0,
    }]


def test_payroll_all_statuses(company, staff):
    payroll = PayrollService(company).get_payroll(status='ALL')

    assert payroll['totals']['employees'] == 3
    assert [d['department'] for d in payroll['departments']] == ['Kitchen', 'Spa']


# =============================================================================
# API
# =============================================================================

def test_create_employee_endpoint(client, company):
    response = client.post(EMPLOYEES_URL, data=json.dumps(employee_payload(skills=['Yoga'])),
                           content_type='application/json')
    body = response.json()

    assert response.status_code == 201
    assert body['data']['email'] == 'aisha@example.com'
    assert body['data']['skills'] == ['Yoga']
    assert body['data']['netSalary'] == 12000.0


def test_create_employee_endpoint_duplicate(client, company, staff):
    response = client.post(EMPLOYEES_URL, data=json.dumps(employee_payload(email='nora@example.com')),
                           content_type='application/json')

    assert response.status_code == 400
    assert response.json()['error'] == 'Employee with this email already exists'


def test_list_employees_endpoint(client, company, staff):
    body = client.get(EMPLOYEES_URL + '?status=ACTIVE&sortBy=lastName&sortOrder=asc').json()

    assert [e['lastName'] for e in body['employees']] == ['Ali', 'Patel']
    assert body['pagination']['total'] == 2


def test_employee_detail_endpoints(client, company, staff):
    url = f'{EMPLOYEES_URL}{staff[1].pk}/'

    updated = client.put(url, data=json.dumps({'role': 'Sous Chef'}), content_type='application/json')
    assert updated.json()['data']['role'] == 'Sous Chef'

    assert client.delete(url).status_code == 200
    assert client.get(url).status_code == 404


def test_payroll_endpoint(client, company, staff):
    body = client.get('/api/acme/payroll/?department=Spa&status=ALL').json()

    assert body['success'] is True
    assert body['data']['totals']['baseSalary'] == 7000.0
