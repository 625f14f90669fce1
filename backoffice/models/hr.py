"""
HR models: Employee.
"""

from decimal import Decimal

from django.db import models

from .core import Company


class Employee(models.Model):
    """Employee record with monthly salary components."""
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
        ('ON_LEAVE', 'On Leave'),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='employees'
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True)

    department = models.CharField(max_length=100, db_index=True)
    position = models.CharField(max_length=100)

    salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    allowances = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    deductions = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    start_date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='ACTIVE', db_index=True)
    location = models.CharField(max_length=200, blank=True)
    manager = models.CharField(max_length=200, blank=True)
    skills = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Employee"
        verbose_name_plural = "Employees"

    def __str__(self):
        return f"{self.full_name} ({self.position})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def net_salary(self):
        return self.salary + self.allowances - self.deductions
