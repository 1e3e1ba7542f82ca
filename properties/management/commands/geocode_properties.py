# properties/management/commands/geocode_properties.py
"""
Django management command to geocode property listings.

Usage:
    python manage.py geocode_properties
    python manage.py geocode_properties --force  # Re-geocode all listings
    python manage.py geocode_properties --id 12
"""

from django.core.management.base import BaseCommand
from django.db.models import Q

from properties.models import Property
from services import GeocodingServiceError
from services.geocoding import GeocodingService


class Command(BaseCommand):
    help = 'Geocode listing addresses and populate latitude/longitude fields'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Re-geocode all listings, even if they already have coordinates',
        )

        parser.add_argument(
            '--id',
            type=int,
            help='Geocode a specific listing by ID',
        )

        parser.add_argument(
            '--delay',
            type=float,
            default=0.2,
            help='Delay between geocoding requests in seconds (default: 0.2)',
        )

    def handle(self, *args, **options):
        force = options['force']
        property_id = options['id']
        delay = options['delay']

        if property_id:
            queryset = Property.objects.filter(id=property_id)
            if not queryset.exists():
                self.stdout.write(self.style.ERROR(f'Property with ID {property_id} not found'))
                return
        elif force:
            queryset = Property.objects.all()
            self.stdout.write(self.style.WARNING('Force mode: Re-geocoding ALL listings'))
        else:
            queryset = Property.objects.filter(
                Q(latitude__isnull=True) | Q(longitude__isnull=True)
            )

        total = queryset.count()

        if total == 0:
            self.stdout.write(self.style.SUCCESS('All listings already have coordinates'))
            return

        self.stdout.write(f'Found {total} listings to geocode')
        self.stdout.write(f'Using delay of {delay} seconds between requests')

        try:
            service = GeocodingService()
            results = service.batch_geocode_properties(queryset, delay=delay, force=force or bool(property_id))
        except GeocodingServiceError as e:
            self.stdout.write(self.style.ERROR(f'Geocoding unavailable: {e}'))
            return

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write('GEOCODING COMPLETE')
        self.stdout.write('=' * 60)
        self.stdout.write(f'Total listings:       {results["total"]}')
        self.stdout.write(self.style.SUCCESS(f'Successfully geocoded: {results["success"]}'))
        self.stdout.write(self.style.WARNING(f'Already had coords:    {results["skipped"]}'))

        if results['failed'] > 0:
            self.stdout.write(self.style.ERROR(f'Failed:                {results["failed"]}'))
            if results['failed_ids']:
                self.stdout.write(f'\nFailed listing IDs: {", ".join(map(str, results["failed_ids"]))}')

        self.stdout.write('=' * 60 + '\n')

        if results['success'] + results['failed'] > 0:
            success_rate = (results['success'] / (results['success'] + results['failed'])) * 100
            self.stdout.write(f'Success rate: {success_rate:.1f}%')
