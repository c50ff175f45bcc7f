# jobs/management/commands/seed_job_tiers.py
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from jobs.models import JobTier

DEFAULT_TIERS = [
    {
        'name': 'Basic',
        'description': 'Basic job listing with essential features.',
        'price': Decimal('99.00'),
        'duration_days': 30,
        'featured': False,
        'max_applications': 100,
        'max_active_jobs': 1,
        'has_analytics': False,
    },
    {
        'name': 'Premium',
        'description': 'Premium job listing with enhanced visibility and more applications.',
        'price': Decimal('199.00'),
        'duration_days': 60,
        'featured': True,
        'max_applications': 300,
        'max_active_jobs': 3,
        'has_analytics': True,
    },
    {
        'name': 'Enterprise',
        'description': 'Enterprise job listing with maximum visibility, unlimited applications, and comprehensive analytics.',
        'price': Decimal('499.00'),
        'duration_days': 90,
        'featured': True,
        'max_applications': None,  # unlimited
        'max_active_jobs': 10,
        'has_analytics': True,
    },
]


class Command(BaseCommand):
    help = 'Create the default job tiers (Basic, Premium, Enterprise). Usage: manage.py seed_job_tiers [--update]'

    def add_arguments(self, parser):
        parser.add_argument('--update', action='store_true', help='Overwrite tiers that already exist (matched by name).')

    def handle(self, *args, **opts):
        update = opts['update']
        created = updated = skipped = 0

        with transaction.atomic():
            for data in DEFAULT_TIERS:
                values = {key: value for key, value in data.items() if key != 'name'}
                tier = JobTier.objects.filter(name=data['name']).first()
                if tier is None:
                    JobTier.objects.create(name=data['name'], **values)
                    created += 1
                elif update:
                    for field, value in values.items():
                        setattr(tier, field, value)
                    tier.save()
                    updated += 1
                else:
                    skipped += 1

        self.stdout.write(self.style.SUCCESS(
            f"Job tiers: Created={created} Updated={updated} Skipped={skipped}"
        ))
