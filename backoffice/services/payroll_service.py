"""
Payroll services: PayrollService.
"""

import logging
from collections import OrderedDict
from decimal import Decimal

from backoffice.models import Employee
from .revenue_service import to_money

logger = logging.getLogger(__name__)


class PayrollService:
    """
    Monthly payroll summary for a company's employees.

    net = salary + allowances - deductions
    """

    def __init__(self, company):
        self.company = company

    def get_payroll(self, status='ACTIVE', department=None):
        """
        Build the payroll summary.

        Args:
            status: Employee status to include ('ALL' for everyone)
            department: Optional department filter

        Returns:
            Dict with employees, departments and totals
        """
        queryset = Employee.objects.filter(company=self.company).order_by('department', 'last_name')
        if status and status != 'ALL':
            queryset = queryset.filter(status=status)
        if department and department != 'ALL':
            queryset = queryset.filter(department=department)

        employees = []
        departments = OrderedDict()
        totals = {
            'baseSalary': Decimal('0.00'),
            'allowances': Decimal('0.00'),
            'deductions': Decimal('0.00'),
            'netSalary': Decimal('0.00'),
        }

        for employee in queryset:
            net = employee.net_salary
            employees.append({
                'id': employee.id,
                'name': employee.full_name,
                'department': employee.department,
                'position': employee.position,
                'status': employee.status,
                'baseSalary': to_money(employee.salary),
                'allowances': to_money(employee.allowances),
                'deductions': to_money(employee.deductions),
                'netSalary': to_money(net),
            })

            dept = departments.setdefault(employee.department, {
                'department': employee.department,
                'employees': 0,
                'totalSalary': Decimal('0.00'),
                'totalNet': Decimal('0.00'),
            })
            dept['employees'] += 1
            dept['totalSalary'] += employee.salary
            dept['totalNet'] += net

            totals['baseSalary'] += employee.salary
            totals['allowances'] += employee.allowances
            totals['deductions'] += employee.deductions
            totals['netSalary'] += net

        return {
            'employees': employees,
            'departments': [
                {
                    'department': d['department'],
                    'employees': d['employees'],
                    'totalSalary': to_money(d['totalSalary']),
                    'averageSalary': to_money(d['totalSalary'] / d['employees']),
                    'totalNet': to_money(d['totalNet']),
                }
                for d in departments.values()
            ],
            'totals': dict(
                {key: to_money(value) for key, value in totals.items()},
                employees=len(employees),
                averageSalary=to_money(totals['baseSalary'] / len(employees) if employees else 0),
            ),
        }
