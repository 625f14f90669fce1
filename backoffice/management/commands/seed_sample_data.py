"""
Management command to seed a company with sample back-office data.

Usage:
    python manage.py seed_sample_data bridge-retreats
    python manage.py seed_sample_data bridge-retreats --name "Bridge Retreats" --months 6
"""

import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone


class Command(BaseCommand):
    help = 'Seed a company with sample retreats, bookings, expenses, delivery zones, employees and invoices'

    def add_arguments(self, parser):
        parser.add_argument('company_code', help='Company slug, created if missing')
        parser.add_argument('--name', help='Company name (default: derived from the code)')
        parser.add_argument('--months', type=int, default=12, help='Months of booking history (default: 12)')
        parser.add_argument('--seed', type=int, default=42, help='Random seed for repeatable data')

    @transaction.atomic
    def handle(self, *args, **options):
        from backoffice.models import (
            Company, RetreatFacility, RetreatRoom, Retreat, RetreatGuest, RetreatBooking,
            RetreatFinancialTransaction, DeliveryCharge, Employee,
            RealEstateProperty, Tenant, RentalAgreement, Invoice,
        )

        if options['months'] < 1:
            raise CommandError('--months must be at least 1')

        rng = random.Random(options['seed'])
        code = options['company_code']
        company, created = Company.objects.get_or_create(
            code=code,
            defaults={'name': options['name'] or code.replace('-', ' ').title(), 'industry': 'Hospitality'}
        )
        if not created and company.bookings.exists():
            raise CommandError(f'Company "{code}" already has bookings; refusing to seed twice')

        # Facilities & rooms
        facility = RetreatFacility.objects.create(
            company=company, name='Desert Lodge', facility_type='Lodge', location='Hatta', capacity=40
        )
        room_types = [('Standard', 2), ('Deluxe', 2), ('Suite', 4)]
        for i in range(1, 13):
            room_type, capacity = room_types[i % len(room_types)]
            RetreatRoom.objects.create(
                facility=facility, room_number=f'{100 + i}', room_type=room_type, capacity=capacity
            )
        rooms = list(facility.rooms.all())

        # Retreats
        retreats = [
            Retreat.objects.create(
                company=company, facility=facility, title=title, retreat_type=retreat_type,
                price=Decimal(price), capacity=capacity, location='Hatta'
            )
            for title, retreat_type, price, capacity in [
                ('Desert Wellness Escape', 'WELLNESS', '1800.00', 20),
                ('Sunrise Yoga Week', 'YOGA', '1250.00', 16),
                ('Silent Meditation', 'MEDITATION', '950.00', 12),
                ('Leadership Offsite', 'CORPORATE', '2400.00', 30),
            ]
        ]

        # Guests
        first_names = ['Aisha', 'Omar', 'Lena', 'Ravi', 'Mei', 'Jonas', 'Sara', 'Karim', 'Nadia', 'Tom']
        last_names = ['Haddad', 'Khan', 'Novak', 'Patel', 'Chen', 'Berg', 'Lopez', 'Aziz', 'Rossi', 'Reid']
        guests = [
            RetreatGuest.objects.create(
                company=company,
                first_name=first,
                last_name=last,
                email=f'{first.lower()}.{last.lower()}@example.com',
                country=rng.choice(['AE', 'GB', 'IN', 'DE', 'US']),
                loyalty_program_active=rng.random() < 0.5,
            )
            for first, last in zip(first_names, last_names)
        ]

        # Bookings spread over the history window
        today = timezone.localdate()
        start = today.replace(day=1) - relativedelta(months=options['months'] - 1)
        booking_count = 0
        day = start
        while day <= today:
            for _ in range(rng.randint(0, 2)):
                retreat = rng.choice(retreats)
                guests_in_party = rng.randint(1, 2)
                check_in = day + timedelta(days=rng.randint(3, 30))
                booking = RetreatBooking.objects.create(
                    company=company,
                    retreat=retreat,
                    guest=rng.choice(guests),
                    room=rng.choice(rooms),
                    check_in_date=check_in,
                    check_out_date=check_in + timedelta(days=rng.randint(2, 7)),
                    number_of_guests=guests_in_party,
                    total_amount=retreat.price * guests_in_party,
                    status=rng.choice(['CONFIRMED', 'CONFIRMED', 'COMPLETED', 'PENDING', 'CANCELLED']),
                )
                # created_at is auto_now_add; backdate it to the booking day
                RetreatBooking.objects.filter(pk=booking.pk).update(
                    created_at=timezone.make_aware(datetime.combine(day, time(10, 0)))
                )
                booking_count += 1
            day += timedelta(days=3)

        # Monthly expenses
        expense_count = 0
        month = start
        while month <= today:
            for category, department, low, high in [
                ('STAFF', 'OPERATIONS', 8000, 12000),
                ('FOOD_BEVERAGE', 'KITCHEN', 3000, 6000),
                ('MAINTENANCE', 'FACILITIES', 500, 2500),
                ('MARKETING', 'SALES', 1000, 4000),
            ]:
                RetreatFinancialTransaction.objects.create(
                    company=company,
                    transaction_type='EXPENSE',
                    category=category,
                    department=department,
                    amount=Decimal(rng.randint(low, high)),
                    description=f'{category.replace("_", " ").title()} {month.strftime("%b %Y")}',
                    status='APPROVED',
                    facility=facility,
                    transaction_date=timezone.make_aware(datetime.combine(month + timedelta(days=14), time(9, 0))),
                )
                expense_count += 1
            month += relativedelta(months=1)

        # Delivery zones
        for zone, base, per_km, minimum in [
            ('Downtown', '10.00', '2.00', '15.00'),
            ('Marina', '12.00', '2.50', '18.00'),
            ('Airport', '20.00', '3.00', '30.00'),
        ]:
            DeliveryCharge.objects.get_or_create(
                company=company, zone=zone,
                defaults={
                    'base_charge': Decimal(base),
                    'per_km_charge': Decimal(per_km),
                    'minimum_charge': Decimal(minimum),
                    'estimated_time': 45,
                }
            )

        # Employees
        for i, (first, last, department, position, salary) in enumerate([
            ('Hana', 'Saleh', 'OPERATIONS', 'Retreat Manager', '18000'),
            ('Diego', 'Marin', 'KITCHEN', 'Head Chef', '14000'),
            ('Priya', 'Nair', 'WELLNESS', 'Yoga Instructor', '9000'),
            ('Yusuf', 'Ali', 'FACILITIES', 'Maintenance Lead', '7500'),
        ]):
            Employee.objects.get_or_create(
                email=f'{first.lower()}.{last.lower()}@{code}.example.com',
                defaults={
                    'company': company,
                    'first_name': first,
                    'last_name': last,
                    'department': department,
                    'position': position,
                    'salary': Decimal(salary),
                    'allowances': Decimal('1500'),
                    'deductions': Decimal('250') * i,
                    'start_date': date(2022, 1 + i, 1),
                    'skills': [department.title()],
                }
            )

        # Real estate
        prop = RealEstateProperty.objects.create(
            company=company, name='Palm Residences', address='12 Palm Street', city='Dubai', area='Jumeirah'
        )
        invoice_count = 0
        for unit in range(1, 4):
            tenant = Tenant.objects.create(
                company=company, first_name=f'Tenant{unit}', last_name='Sample',
                email=f'tenant{unit}@example.com'
            )
            agreement = RentalAgreement.objects.create(
                property=prop, tenant=tenant, unit_number=f'A{unit}0{unit}',
                monthly_rent=Decimal('6500.00'), start_date=start
            )
            for offset in range(3):
                issue = today.replace(day=1) - relativedelta(months=offset)
                paid = offset > 0
                Invoice.objects.create(
                    agreement=agreement,
                    invoice_number=f'{code.upper()[:4]}-{unit}{offset:02d}-{issue.strftime("%y%m")}',
                    amount=agreement.monthly_rent,
                    tax_amount=agreement.monthly_rent * Decimal('0.05'),
                    total_amount=agreement.monthly_rent * Decimal('1.05'),
                    issue_date=issue,
                    due_date=issue + timedelta(days=14),
                    paid_date=issue + timedelta(days=rng.randint(3, 20)) if paid else None,
                    status='PAID' if paid else 'PENDING',
                )
                invoice_count += 1

        self.stdout.write(self.style.SUCCESS(f'Seeded {company.name} ({company.code})'))
        self.stdout.write(f'  Rooms: {len(rooms)}, Retreats: {len(retreats)}, Guests: {len(guests)}')
        self.stdout.write(f'  Bookings: {booking_count}, Expenses: {expense_count}, Invoices: {invoice_count}')
