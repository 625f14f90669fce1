"""
Expense services: ExpenseService.
"""

import logging
from collections import OrderedDict
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.utils import timezone

from backoffice.models import RetreatFinancialTransaction
from .revenue_service import to_money, percent, growth

logger = logging.getLogger(__name__)


class ExpenseService:
    """
    Expense (EXPENSE transaction) reporting and approval for one company.

    Periods are rolling windows ending today: 7d, 30d, 90d or 1y.
    """

    PERIOD_DAYS = {'7d': 7, '30d': 30, '90d': 90, '1y': 365}
    DEFAULT_PERIOD = '30d'

    def __init__(self, company, today=None):
        self.company = company
        self.today = today or timezone.localdate()

    def get_window(self, period):
        """Return (start, end) aware datetimes for the period."""
        days = self.PERIOD_DAYS.get(period, self.PERIOD_DAYS[self.DEFAULT_PERIOD])
        tz = timezone.get_current_timezone()
        start = timezone.make_aware(datetime.combine(self.today - timedelta(days=days), time.min), tz)
        end = timezone.make_aware(datetime.combine(self.today, time.max), tz)
        return start, end

    def _base_queryset(self):
        return RetreatFinancialTransaction.objects.filter(
            company=self.company,
            transaction_type='EXPENSE',
        )

    def get_summary(self, period=None, category=None, status=None, department=None):
        """
        Expense totals and breakdowns.

        Filters set to None or 'ALL' are ignored. Growth compares the unfiltered
        total of the window of equal length before this one.

        Returns:
            Dict with metrics, expenses (model instances), categoryBreakdown,
            departmentBreakdown, monthlyTrends and dateRange
        """
        period = period if period in self.PERIOD_DAYS else self.DEFAULT_PERIOD
        start, end = self.get_window(period)

        queryset = self._base_queryset().filter(
            transaction_date__gte=start,
            transaction_date__lte=end,
        ).select_related('retreat', 'facility', 'booking__guest')
        if category and category != 'ALL':
            queryset = queryset.filter(category=category)
        if status and status != 'ALL':
            queryset = queryset.filter(status=status)
        if department and department != 'ALL':
            queryset = queryset.filter(department=department)

        expenses = list(queryset.order_by('-transaction_date'))

        previous_start = start - (end - start)
        previous_total = sum(
            (e.amount for e in self._base_queryset().filter(
                transaction_date__gte=previous_start,
                transaction_date__lt=start,
            )),
            Decimal('0.00')
        )

        total = Decimal('0.00')
        by_status = {code: Decimal('0.00') for code, _ in RetreatFinancialTransaction.STATUS_CHOICES}
        categories = OrderedDict()
        departments = OrderedDict()
        months = OrderedDict()

        for expense in expenses:
            amount = expense.amount
            total += amount
            by_status[expense.status] += amount

            cat = categories.setdefault(expense.category, {
                'category': expense.category, 'amount': Decimal('0.00'), 'count': 0,
                'approved': Decimal('0.00'), 'pending': Decimal('0.00'), 'rejected': Decimal('0.00'),
            })
            cat['amount'] += amount
            cat['count'] += 1
            if expense.status in ('APPROVED', 'PENDING', 'REJECTED'):
                cat[expense.status.lower()] += amount

            dept = departments.setdefault(expense.department or 'UNASSIGNED', {
                'department': expense.department or 'UNASSIGNED', 'amount': Decimal('0.00'), 'count': 0,
            })
            dept['amount'] += amount
            dept['count'] += 1

            month_key = timezone.localtime(expense.transaction_date).strftime('%b %Y')
            month = months.setdefault(month_key, {'month': month_key, 'amount': Decimal('0.00'), 'count': 0})
            month['amount'] += amount
            month['count'] += 1

        def finish(rows):
            return [
                dict(
                    row,
                    **{k: to_money(v) for k, v in row.items() if isinstance(v, Decimal)},
                    percentage=float(percent(row['amount'], total)),
                )
                for row in rows
            ]

        return {
            'metrics': {
                'totalExpenses': to_money(total),
                'approvedExpenses': to_money(by_status['APPROVED']),
                'pendingExpenses': to_money(by_status['PENDING']),
                'rejectedExpenses': to_money(by_status['REJECTED']),
                'totalCount': len(expenses),
                'averageExpense': to_money(total / len(expenses) if expenses else 0),
                'growthRate': float(growth(total, previous_total)),
            },
            'expenses': expenses,
            'categoryBreakdown': finish(categories.values()),
            'departmentBreakdown': finish(departments.values()),
            'monthlyTrends': [
                dict(m, amount=to_money(m['amount'])) for m in reversed(list(months.values()))
            ],
            'period': period,
            'dateRange': {
                'start': timezone.localtime(start).date().isoformat(),
                'end': timezone.localtime(end).date().isoformat(),
            },
        }

    def create_expense(self, category, amount, description='', **extra):
        """
        Record a PENDING expense.

        Returns:
            RetreatFinancialTransaction
        """
        if not category:
            raise ValidationError('Category is required')
        if amount is None or amount <= 0:
            raise ValidationError('Amount must be a positive number')
        if extra.get('tax_amount') is not None and extra['tax_amount'] < 0:
            raise ValidationError('Tax amount cannot be negative')

        extra.setdefault('transaction_date', timezone.now())
        expense = RetreatFinancialTransaction.objects.create(
            company=self.company,
            transaction_type='EXPENSE',
            category=category,
            amount=amount,
            description=description,
            status='PENDING',
            **extra
        )
        logger.info("Recorded expense %s %s for %s", category, amount, self.company.code)
        return expense

    @staticmethod
    def set_status(expense, status, approved_by=''):
        """Approve, reject, process or reopen an expense."""
        valid = [code for code, _ in RetreatFinancialTransaction.STATUS_CHOICES]
        if status not in valid:
            raise ValidationError(f"Invalid status. Use one of: {', '.join(valid)}")

        expense.status = status
        if status in ('APPROVED', 'REJECTED'):
            expense.approved_by = approved_by
            expense.approved_at = timezone.now()
        elif status == 'PENDING':
            expense.approved_by = ''
            expense.approved_at = None
        expense.save()
        return expense
