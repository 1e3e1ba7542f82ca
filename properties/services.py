"""
Listing workflows for the DealFlow platform.

Creation, editing and the admin verification workflow for property
listings. Views validate input with serializers and call into here.
"""

import logging
from typing import Any, Dict

from django.db import transaction
from django.db.models import F, Q

from services import InvalidTransitionError, PermissionDeniedError
from services.geocoding import GeocodingService

from .models import (
    STATUS_FOR_SALE,
    STATUS_PENDING,
    Property,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SCOPES
# =============================================================================

def visible_properties(user):
    """
    Listings a user may browse.

    Admins see everything; everyone else sees verified listings plus the
    pending ones they own.
    """
    queryset = Property.objects.select_related('property_type', 'owner')
    if user is not None and user.is_authenticated and user.is_platform_admin:
        return queryset
    public = ~Q(status=STATUS_PENDING)
    if user is not None and user.is_authenticated:
        return queryset.filter(public | owned_by_q(user))
    return queryset.filter(public)


def owned_by_q(user) -> Q:
    """A listing belongs to a user through its contact email or its owner."""
    return Q(contact_email__iexact=user.email) | Q(owner=user)


def owned_properties(user):
    return Property.objects.filter(owned_by_q(user)).select_related('property_type')


def is_owner(prop: Property, user) -> bool:
    return prop.owner_id == user.pk or prop.contact_email.lower() == (user.email or '').lower()


# =============================================================================
# CREATE AND EDIT
# =============================================================================

def create_property(data: Dict[str, Any], user) -> Property:
    """
    Create a listing.

    Listings created by sellers and partners always start pending
    verification; admins may publish directly.
    """
    data = dict(data)
    if user.is_platform_admin:
        data.setdefault('status', STATUS_FOR_SALE)
    else:
        data['status'] = STATUS_PENDING
        data['owner'] = user

    prop = Property.objects.create(**data)
    logger.info(f"Listing {prop.pk} '{prop.title}' created by {user.user_code} with status {prop.status}")
    return prop


def update_property(prop: Property, data: Dict[str, Any], user) -> Property:
    """
    Apply an edit.

    An owner's edit sends the listing back for verification and clears
    any outstanding modification request.
    """
    if not user.is_platform_admin:
        if not is_owner(prop, user):
            raise PermissionDeniedError("You can only edit your own listings.")
        data = dict(data)
        data.pop('status', None)
        data['status'] = STATUS_PENDING
        data['modification_notes'] = ''

    for field, value in data.items():
        setattr(prop, field, value)
    prop.save()
    logger.info(f"Listing {prop.pk} updated by {user.user_code}")
    return prop


def record_view(prop: Property) -> Property:
    Property.objects.filter(pk=prop.pk).update(views=F('views') + 1)
    prop.refresh_from_db(fields=['views'])
    return prop


# =============================================================================
# VERIFICATION WORKFLOW
# =============================================================================

def _lock(prop: Property) -> Property:
    return Property.objects.select_for_update().get(pk=prop.pk)


@transaction.atomic
def verify_property(prop: Property) -> Property:
    prop = _lock(prop)
    if prop.status != STATUS_PENDING:
        raise InvalidTransitionError(
            f"Only pending listings can be verified (status is '{prop.status}').", field='status'
        )
    prop.status = STATUS_FOR_SALE
    prop.modification_notes = ''
    prop.save(update_fields=['status', 'modification_notes', 'updated_at'])
    logger.info(f"Listing {prop.pk} verified and published")
    return prop


@transaction.atomic
def reject_property(prop: Property) -> None:
    """Rejected listings are removed."""
    prop = _lock(prop)
    if prop.status != STATUS_PENDING:
        raise InvalidTransitionError(
            f"Only pending listings can be rejected (status is '{prop.status}').", field='status'
        )
    pk, title = prop.pk, prop.title
    prop.delete()
    logger.info(f"Listing {pk} '{title}' rejected and deleted")


@transaction.atomic
def request_modification(prop: Property, notes: str) -> Property:
    prop = _lock(prop)
    prop.modification_notes = notes
    prop.status = STATUS_PENDING
    prop.save(update_fields=['modification_notes', 'status', 'updated_at'])
    logger.info(f"Modification requested on listing {prop.pk}")
    return prop


@transaction.atomic
def change_status(prop: Property, new_status: str) -> Property:
    prop = _lock(prop)
    if not prop.can_transition_to(new_status):
        raise InvalidTransitionError(
            f"Cannot move a listing from '{prop.status}' to '{new_status}'.", field='status'
        )
    old_status = prop.status
    prop.status = new_status
    prop.save(update_fields=['status', 'updated_at'])
    logger.info(f"Listing {prop.pk} status {old_status} -> {new_status}")
    return prop


def geocode(prop: Property, service: GeocodingService = None) -> bool:
    service = service or GeocodingService()
    return service.geocode_property(prop, force=True)
