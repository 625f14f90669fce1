"""
Employee services: EmployeeService.
"""

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db.models import Q

from backoffice.models import Employee
from backoffice.utils.validation import parse_decimal_field, parse_date_field, clean_text

logger = logging.getLogger(__name__)


def parse_skills(value):
    """Accept a list or a comma-separated string."""
    if value is None or value == '':
        return []
    if isinstance(value, str):
        return [skill.strip() for skill in value.split(',') if skill.strip()]
    if isinstance(value, (list, tuple)):
        return [str(skill).strip() for skill in value if str(skill).strip()]
    raise ValidationError('Skills must be a list or a comma-separated string')


class EmployeeService:
    """Employee directory maintenance for one company."""

    SORT_FIELDS = {
        'createdAt': 'created_at',
        'firstName': 'first_name',
        'lastName': 'last_name',
        'email': 'email',
        'department': 'department',
        'role': 'position',
        'salary': 'salary',
        'startDate': 'start_date',
        'status': 'status',
    }

    # payload key -> (model field, label, required)
    TEXT_FIELDS = [
        ('firstName', 'first_name', 'First name', True),
        ('lastName', 'last_name', 'Last name', True),
        ('department', 'department', 'Department', True),
        ('role', 'position', 'Role', True),
        ('phone', 'phone', 'Phone', False),
        ('location', 'location', 'Location', False),
        ('manager', 'manager', 'Manager', False),
    ]

    MONEY_FIELDS = [
        ('salary', 'salary', 'Salary'),
        ('allowances', 'allowances', 'Allowances'),
        ('deductions', 'deductions', 'Deductions'),
    ]

    def __init__(self, company):
        self.company = company

    def filter_employees(self, search=None, department=None, status=None, sort_by='createdAt', sort_order='desc'):
        queryset = Employee.objects.filter(company=self.company)
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
                | Q(position__icontains=search)
            )
        if department and department != 'ALL':
            queryset = queryset.filter(department=department)
        if status and status != 'ALL':
            queryset = queryset.filter(status=status)

        order_field = self.SORT_FIELDS.get(sort_by, 'created_at')
        if sort_order != 'asc':
            order_field = f"-{order_field}"
        return queryset.order_by(order_field, 'id')

    def _clean(self, data, partial=False):
        cleaned = {}

        for key, field, label, required in self.TEXT_FIELDS:
            if key in data or (required and not partial):
                value = clean_text(data.get(key))
                if required and not value:
                    raise ValidationError(f"{label} is required")
                cleaned[field] = value

        if 'email' in data or not partial:
            email = clean_text(data.get('email')).lower()
            try:
                validate_email(email)
            except ValidationError:
                raise ValidationError('Valid email is required')
            cleaned['email'] = email

        if 'startDate' in data or not partial:
            cleaned['start_date'] = parse_date_field(data.get('startDate'), 'Start date', allow_none=False)

        for key, field, label in self.MONEY_FIELDS:
            if key in data:
                value = parse_decimal_field(data[key], label)
                if value is not None:
                    cleaned[field] = value

        if 'status' in data:
            valid = [code for code, _ in Employee.STATUS_CHOICES]
            if data['status'] not in valid:
                raise ValidationError(f"Invalid status. Use one of: {', '.join(valid)}")
            cleaned['status'] = data['status']

        if 'skills' in data:
            cleaned['skills'] = parse_skills(data['skills'])

        return cleaned

    def _check_email_available(self, email, exclude_id=None):
        queryset = Employee.objects.filter(email__iexact=email)
        if exclude_id:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            raise ValidationError('Employee with this email already exists')

    def create_employee(self, data):
        cleaned = self._clean(data)
        self._check_email_available(cleaned['email'])
        employee = Employee.objects.create(company=self.company, **cleaned)
        logger.info("Created employee %s for %s", employee.email, self.company.code)
        return employee

    def update_employee(self, employee, data):
        cleaned = self._clean(data, partial=True)
        if 'email' in cleaned and cleaned['email'] != employee.email:
            self._check_email_available(cleaned['email'], exclude_id=employee.pk)
        for field, value in cleaned.items():
            setattr(employee, field, value)
        employee.save()
        return employee
