# services/geocoding.py
"""
Google Maps Geocoding Service for DealFlow listings
Converts property addresses to lat/lng coordinates
"""

import time
import logging
from typing import Optional, Tuple
import requests
from django.conf import settings

from . import GeocodingServiceError

logger = logging.getLogger(__name__)


class GeocodingService:
    """
    Service for geocoding addresses using Google Maps Geocoding API.
    Handles rate limiting, error handling, and coordinate extraction.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else getattr(settings, 'GOOGLE_MAPS_API_KEY', '')
        self.base_url = "https://maps.googleapis.com/maps/api/geocode/json"
        self.rate_limit_delay = 0.2  # 200ms between requests (5 per second max)

    def geocode_address(self, address: str) -> Optional[Tuple[float, float]]:
        """
        Geocode a single address and return (latitude, longitude).

        Args:
            address: Full address string (e.g., "MG Road, Bengaluru, Karnataka 560001")

        Returns:
            Tuple of (latitude, longitude) or None if the address has no match

        Raises:
            GeocodingServiceError: If the API key is missing, the quota is
                exhausted or the request fails
        """
        if not self.api_key:
            raise GeocodingServiceError("GOOGLE_MAPS_API_KEY not configured")

        if not address or not address.strip():
            logger.warning("Cannot geocode: Empty address provided")
            return None

        try:
            response = requests.get(
                self.base_url,
                params={'address': address, 'key': self.api_key},
                timeout=10
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Network error during geocoding: {str(e)}")
            raise GeocodingServiceError(f"Network error during geocoding: {str(e)}")
        except ValueError as e:
            raise GeocodingServiceError(f"Error parsing geocoding response: {str(e)}")

        status = data.get('status')
        if status == 'OK' and data.get('results'):
            try:
                location = data['results'][0]['geometry']['location']
                lat = float(location['lat'])
                lng = float(location['lng'])
            except (KeyError, ValueError, TypeError) as e:
                raise GeocodingServiceError(f"Error parsing geocoding response: {str(e)}")

            logger.info(f"Successfully geocoded: {address} -> ({lat}, {lng})")
            return (lat, lng)

        if status == 'ZERO_RESULTS':
            logger.warning(f"No results found for address: {address}")
            return None

        if status == 'OVER_QUERY_LIMIT':
            raise GeocodingServiceError("Google Maps API query limit exceeded")

        raise GeocodingServiceError(f"Geocoding failed with status: {status}")

    def geocode_property(self, prop, force: bool = False) -> bool:
        """
        Geocode a Property instance and update its latitude/longitude.

        Args:
            prop: Property model instance
            force: Re-geocode even if coordinates are already present

        Returns:
            True if coordinates are present after the call, False otherwise
        """
        if not force and prop.latitude is not None and prop.longitude is not None:
            return True

        address = prop.full_address
        if not address:
            logger.warning(f"Cannot geocode {prop.title}: No address information")
            return False

        coordinates = self.geocode_address(address)
        if not coordinates:
            return False

        prop.latitude, prop.longitude = coordinates
        prop.save(update_fields=['latitude', 'longitude', 'updated_at'])
        logger.info(f"Updated coordinates for {prop.title}")
        return True

    def batch_geocode_properties(self, queryset, delay: float = None, force: bool = False) -> dict:
        """
        Geocode multiple listings with rate limiting.

        Args:
            queryset: QuerySet of Property objects to geocode
            delay: Optional custom delay between requests (seconds)
            force: Re-geocode listings that already have coordinates

        Returns:
            Dictionary with success/failure counts and details
        """
        if delay is None:
            delay = self.rate_limit_delay

        results = {
            'total': queryset.count(),
            'success': 0,
            'skipped': 0,
            'failed': 0,
            'failed_ids': []
        }

        logger.info(f"Starting batch geocoding of {results['total']} properties")

        for prop in queryset:
            if not force and prop.has_coordinates:
                results['skipped'] += 1
                continue

            try:
                success = self.geocode_property(prop, force=force)
            except GeocodingServiceError as e:
                logger.warning(f"Geocoding failed for property {prop.pk}: {str(e)}")
                success = False

            if success:
                results['success'] += 1
            else:
                results['failed'] += 1
                results['failed_ids'].append(prop.pk)

            if delay > 0:
                time.sleep(delay)

        logger.info(
            f"Batch geocoding complete: {results['success']} success, "
            f"{results['skipped']} skipped, {results['failed']} failed"
        )

        return results


def geocode_address(address: str) -> Optional[Tuple[float, float]]:
    """
    Module-level shortcut used by services.safe_geocode_address.
    """
    return GeocodingService().geocode_address(address)
