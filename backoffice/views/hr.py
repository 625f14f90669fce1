"""
HR views: employees and payroll.
"""

import logging

from django.shortcuts import get_object_or_404

from backoffice.models import Employee
from backoffice.services import EmployeeService, PayrollService
from .mixins import ApiView

logger = logging.getLogger(__name__)


def serialize_employee(employee):
    return {
        'id': employee.id,
        'firstName': employee.first_name,
        'lastName': employee.last_name,
        'fullName': employee.full_name,
        'email': employee.email,
        'phone': employee.phone,
        'department': employee.department,
        'role': employee.position,
        'salary': float(employee.salary),
        'allowances': float(employee.allowances),
        'deductions': float(employee.deductions),
        'netSalary': float(employee.net_salary),
        'startDate': employee.start_date.isoformat(),
        'status': employee.status,
        'location': employee.location,
        'manager': employee.manager,
        'skills': employee.skills,
        'createdAt': employee.created_at.isoformat(),
    }


class EmployeeListView(ApiView):
    """API: List and create employees."""

    error_message = 'Failed to process employees'

    def get(self, request, *args, **kwargs):
        queryset = EmployeeService(self.get_company()).filter_employees(
            search=request.GET.get('search'),
            department=request.GET.get('department'),
            status=request.GET.get('status'),
            sort_by=request.GET.get('sortBy') or 'createdAt',
            sort_order=request.GET.get('sortOrder') or 'desc',
        )
        employees, pagination = self.paginate(queryset)
        return self.json_response({
            'success': True,
            'employees': [serialize_employee(e) for e in employees],
            'pagination': pagination,
        })

    def post(self, request, *args, **kwargs):
        data = self.parse_json_body()
        employee = EmployeeService(self.get_company()).create_employee(data)
        return self.success_response(
            data=serialize_employee(employee),
            message=f'Employee {employee.full_name} created successfully',
            status=201
        )


class EmployeeDetailView(ApiView):
    """API: Retrieve, update or delete an employee."""

    error_message = 'Failed to process employee'

    def get_employee(self):
        return get_object_or_404(Employee, pk=self.kwargs['pk'], company=self.get_company())

    def get(self, request, *args, **kwargs):
        return self.success_response(data=serialize_employee(self.get_employee()))

    def put(self, request, *args, **kwargs):
        employee = self.get_employee()
        data = self.parse_json_body()
        employee = EmployeeService(self.get_company()).update_employee(employee, data)
        return self.success_response(data=serialize_employee(employee), message='Employee updated successfully')

    def delete(self, request, *args, **kwargs):
        employee = self.get_employee()
        name = employee.full_name
        employee.delete()
        return self.success_response(message=f'Employee {name} deleted')


class PayrollView(ApiView):
    """API: Payroll summary. GET ?status=ACTIVE|ALL&department="""

    error_message = 'Failed to fetch payroll'

    def get(self, request, *args, **kwargs):
        payroll = PayrollService(self.get_company()).get_payroll(
            status=request.GET.get('status') or 'ACTIVE',
            department=request.GET.get('department'),
        )
        return self.success_response(data=payroll)
