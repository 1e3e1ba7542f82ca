# ===== LEAD WORKFLOWS =====
"""
Lead, deal and site-visit workflows for the DealFlow platform.

Scoping rules:
- Admins see every lead
- Sellers see leads on the listings they own
- Partners see the leads assigned to them
- Customers see the leads that name them

Forwarding, retaking and deal status changes touch more than one row and
run inside transaction.atomic with the rows locked first.
"""

import logging
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, Q
from django.db.models.functions import TruncMonth
from django.utils import timezone

from accounts.models import STATUS_ACTIVE, STATUS_INACTIVE, User
from properties.models import Property
from properties.services import is_owner, owned_by_q
from services import BusinessRuleError, InvalidTransitionError, PermissionDeniedError
from services.business_logic import PARTNER_ROLES, can_forward_leads
from wallet import services as wallet_services

from .models import (
    ACTIVE_DEAL_STAGES,
    DEAL_CANCELLED,
    LEAD_DEAL_CLOSED,
    LEAD_FORWARDED,
    LEAD_NEW,
    LEAD_VISIT_SCHEDULED,
    LEAD_VISITED,
    Appointment,
    Lead,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SCOPES
# =============================================================================

def leads_for(user):
    queryset = Lead.objects.select_related('property', 'partner', 'customer')
    if user.is_platform_admin:
        return queryset
    if user.is_seller:
        owned = Property.objects.filter(owned_by_q(user)).values('pk')
        return queryset.filter(property__in=owned)
    if user.is_partner:
        return queryset.filter(partner=user)
    return queryset.filter(customer=user)


def appointments_for(user):
    queryset = Appointment.objects.select_related('lead', 'property', 'partner', 'customer')
    if user.is_platform_admin:
        return queryset
    if user.is_seller:
        owned = Property.objects.filter(owned_by_q(user)).values('pk')
        return queryset.filter(property__in=owned)
    if user.is_partner:
        return queryset.filter(partner=user)
    return queryset.filter(customer=user)


def _can_manage(lead: Lead, user: User) -> bool:
    """Admins manage every lead; sellers manage leads on their listings."""
    if user.is_platform_admin:
        return True
    return user.is_seller and lead.property is not None and is_owner(lead.property, user)


def _lock(lead: Lead) -> Lead:
    return Lead.objects.select_for_update().get(pk=lead.pk)


# =============================================================================
# CREATE
# =============================================================================

def create_lead(data: Dict[str, Any], user: User) -> Lead:
    """Partners create leads for themselves; admins may assign any partner."""
    data = dict(data)
    if user.is_partner:
        data['partner'] = user
    elif not user.is_platform_admin:
        raise PermissionDeniedError("Only partners and admins can create leads.")

    lead = Lead.objects.create(**data)
    logger.info(f"Lead {lead.pk} created by {user.user_code}")
    return lead


# =============================================================================
# CONSULTANTS
# =============================================================================

def listing_seller(prop: Optional[Property]) -> Optional[User]:
    if prop is None:
        return None
    if prop.owner_id:
        return prop.owner
    if not prop.contact_email:
        return None
    return User.objects.filter(email__iexact=prop.contact_email).first()


def consultants_for(customer: User) -> Dict[str, Optional[User]]:
    """Partner and seller behind the customer's most recent lead."""
    lead = (
        Lead.objects.filter(customer=customer)
        .select_related('partner', 'property__owner')
        .order_by('-created_at')
        .first()
    )
    if lead is None:
        return {'partner': None, 'seller': None}
    return {'partner': lead.partner, 'seller': listing_seller(lead.property)}


@transaction.atomic
def reassign_customer_partner(customer: User, new_partner: User) -> int:
    """
    Move every lead of a customer to another partner.

    Returns:
        Number of leads updated (0 when the partner is already assigned)
    """
    if not new_partner.is_partner:
        raise BusinessRuleError("Leads can only be assigned to a partner.", field='partner_id')
    if new_partner.status != STATUS_ACTIVE:
        raise BusinessRuleError("The new partner must be active.", field='partner_id')

    lead_ids = list(
        Lead.objects.select_for_update().filter(customer=customer).values_list('pk', flat=True)
    )
    if not lead_ids:
        raise BusinessRuleError("This customer has no leads to reassign.", field='customer_id')

    updated = (
        Lead.objects.filter(pk__in=lead_ids)
        .exclude(partner=new_partner)
        .update(partner=new_partner, updated_at=timezone.now())
    )
    logger.info(f"{updated} leads of customer {customer.user_code} reassigned to {new_partner.user_code}")
    return updated


# =============================================================================
# STATUS UPDATES
# =============================================================================

@transaction.atomic
def update_lead_status(lead: Lead, new_status: str, user: User, sale_amount=None) -> Lead:
    """
    Change a lead's sales status.

    Closing the deal credits the partner's earning once.
    """
    if not _can_manage(lead, user):
        raise PermissionDeniedError("You cannot update this lead.")
    if new_status == LEAD_FORWARDED:
        raise InvalidTransitionError("Use the forward action to forward a lead.", field='status')

    lead = _lock(lead)
    if lead.is_forwarded:
        raise InvalidTransitionError("Forwarded leads are managed through their copy.", field='status')

    lead.status = new_status
    if sale_amount is not None:
        lead.sale_amount = sale_amount
    lead.save()
    logger.info(f"Lead {lead.pk} status -> {new_status} by {user.user_code}")

    if new_status == LEAD_DEAL_CLOSED and not lead.earning_credited:
        wallet_services.credit_earning(lead)
        lead.refresh_from_db()
    return lead


@transaction.atomic
def update_deal_status(lead: Lead, deal_status: str, user: User) -> Lead:
    """
    Change a lead's deal status and the linked customer's status together.

    The customer becomes active for every deal status except a
    cancelled booking, which makes them inactive.
    """
    if not _can_manage(lead, user):
        raise PermissionDeniedError("You cannot update this deal.")

    lead = _lock(lead)
    lead.deal_status = deal_status
    lead.save(update_fields=['deal_status', 'updated_at'])

    if lead.customer_id:
        customer = User.objects.select_for_update().get(pk=lead.customer_id)
        customer.status = STATUS_INACTIVE if deal_status == DEAL_CANCELLED else STATUS_ACTIVE
        customer.save(update_fields=['status', 'is_active', 'updated_at'])

    logger.info(f"Lead {lead.pk} deal status -> {deal_status} by {user.user_code}")
    return lead


# =============================================================================
# FORWARDING
# =============================================================================

@transaction.atomic
def forward_lead(lead: Lead, target: User, user: User) -> Lead:
    """
    Forward a lead to a team member.

    Creates a copy owned by the member and marks the original Forwarded.

    Returns:
        The copy
    """
    if not can_forward_leads(user.role):
        raise PermissionDeniedError("Only associate, channel and franchisee partners can forward leads.")

    lead = _lock(lead)
    if lead.partner_id != user.pk:
        raise PermissionDeniedError("You can only forward your own leads.")
    if lead.is_forwarded:
        raise InvalidTransitionError("This lead has already been forwarded.", field='status')
    if target.team_lead_id != user.pk:
        raise BusinessRuleError("Leads can only be forwarded to members of your team.", field='partner_id')

    copy = Lead.objects.create(
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        city=lead.city,
        state=lead.state,
        country=lead.country,
        notes=lead.notes,
        property=lead.property,
        customer=lead.customer,
        partner=target,
        deal_status=lead.deal_status,
        is_copy=True,
        original_lead=lead,
    )

    lead.status = LEAD_FORWARDED
    lead.forwarded_to = {
        'partner_id': target.user_code,
        'partner_name': target.display_name,
        'lead_copy_id': copy.pk,
    }
    lead.save(update_fields=['status', 'forwarded_to', 'updated_at'])
    logger.info(f"Lead {lead.pk} forwarded by {user.user_code} to {target.user_code} as {copy.pk}")
    return copy


@transaction.atomic
def retake_lead(lead: Lead, user: User) -> Lead:
    """Delete the forwarded copy and return the original to New lead."""
    lead = _lock(lead)
    if lead.partner_id != user.pk and not user.is_platform_admin:
        raise PermissionDeniedError("You can only retake your own leads.")
    if not lead.is_forwarded:
        raise InvalidTransitionError("This lead has not been forwarded.", field='status')

    copy_id = (lead.forwarded_to or {}).get('lead_copy_id')
    deleted, _ = Lead.objects.filter(pk=copy_id, original_lead=lead).delete() if copy_id else (0, None)

    lead.status = LEAD_NEW
    lead.forwarded_to = None
    lead.save(update_fields=['status', 'forwarded_to', 'updated_at'])
    logger.info(f"Lead {lead.pk} retaken by {user.user_code} (copy removed: {bool(deleted)})")
    return lead


# =============================================================================
# APPOINTMENTS
# =============================================================================

@transaction.atomic
def schedule_appointment(lead: Lead, visit_date, user: User, notes: str = '') -> Appointment:
    lead = _lock(lead)
    if not (user.is_platform_admin or lead.partner_id == user.pk):
        raise PermissionDeniedError("You can only schedule visits for your own leads.")
    if lead.is_forwarded:
        raise InvalidTransitionError("Forwarded leads cannot be scheduled.", field='status')
    if lead.property_id is None:
        raise BusinessRuleError("The lead has no property to visit.", field='property')
    if visit_date < timezone.now():
        raise BusinessRuleError("The visit date must be in the future.", field='visit_date')

    appointment = Appointment.objects.create(
        lead=lead,
        property_id=lead.property_id,
        partner_id=lead.partner_id,
        customer_id=lead.customer_id,
        visit_date=visit_date,
        notes=notes,
    )
    lead.status = LEAD_VISIT_SCHEDULED
    lead.save(update_fields=['status', 'updated_at'])
    logger.info(f"Visit {appointment.pk} scheduled for lead {lead.pk} on {visit_date}")
    return appointment


def _lock_appointment(appointment: Appointment) -> Appointment:
    return Appointment.objects.select_for_update().get(pk=appointment.pk)


@transaction.atomic
def submit_visit_proof(appointment: Appointment, proof, user: User) -> Appointment:
    appointment = _lock_appointment(appointment)
    if appointment.partner_id != user.pk:
        raise PermissionDeniedError("Only the assigned partner can submit visit proof.")
    if appointment.status not in (Appointment.STATUS_SCHEDULED, Appointment.STATUS_REJECTED):
        raise InvalidTransitionError(
            f"Cannot submit proof for a visit that is '{appointment.status}'.", field='status'
        )
    appointment.visit_proof = proof
    appointment.status = Appointment.STATUS_PENDING_VERIFICATION
    appointment.rejection_reason = ''
    appointment.save()
    logger.info(f"Visit proof submitted for appointment {appointment.pk}")
    return appointment


@transaction.atomic
def verify_appointment(appointment: Appointment, approve: bool, reason: str = '') -> Appointment:
    appointment = _lock_appointment(appointment)
    if appointment.status != Appointment.STATUS_PENDING_VERIFICATION:
        raise InvalidTransitionError("Only visits awaiting verification can be reviewed.", field='status')

    if approve:
        appointment.status = Appointment.STATUS_COMPLETED
        lead = _lock(appointment.lead)
        lead.status = LEAD_VISITED
        lead.save(update_fields=['status', 'updated_at'])
    else:
        appointment.status = Appointment.STATUS_REJECTED
        appointment.rejection_reason = reason
    appointment.save()
    logger.info(f"Appointment {appointment.pk} {'verified' if approve else 'rejected'}")
    return appointment


@transaction.atomic
def cancel_appointment(appointment: Appointment, user: User) -> Appointment:
    appointment = _lock_appointment(appointment)
    if not (user.is_platform_admin or appointment.partner_id == user.pk):
        raise PermissionDeniedError("You cannot cancel this visit.")
    if appointment.status not in (Appointment.STATUS_SCHEDULED, Appointment.STATUS_PENDING_VERIFICATION):
        raise InvalidTransitionError(f"Cannot cancel a visit that is '{appointment.status}'.", field='status')
    appointment.status = Appointment.STATUS_CANCELLED
    appointment.save(update_fields=['status', 'updated_at'])
    logger.info(f"Appointment {appointment.pk} cancelled by {user.user_code}")
    return appointment


# =============================================================================
# REPORTS
# =============================================================================

def visitors_report() -> List[Dict[str, Any]]:
    """Customers ranked by the number of distinct listings they have visited."""
    rows = (
        Appointment.objects
        .filter(lead__customer__isnull=False, property__isnull=False)
        .values('lead__customer')
        .annotate(visit_count=Count('property', distinct=True))
        .order_by('-visit_count')
    )
    customers = User.objects.in_bulk([row['lead__customer'] for row in rows])
    report = []
    for row in rows:
        customer = customers.get(row['lead__customer'])
        if customer is None:
            continue
        report.append({
            'id': customer.pk,
            'user_code': customer.user_code,
            'name': customer.display_name,
            'email': customer.email,
            'visit_count': row['visit_count'],
        })
    return report


def booking_leads(user):
    return leads_for(user).filter(deal_status__in=ACTIVE_DEAL_STAGES)


def partner_lead_report(partner: User, year: Optional[int] = None) -> Dict[str, Any]:
    """
    Monthly lead counts and a status breakdown for one partner.

    Returns:
        {'partner': user_code, 'year': 2026, 'total': 12,
         'monthly': [{'month': '2026-01', 'count': 3}, ...],
         'by_status': {'New lead': 4, ...}}
    """
    year = year or timezone.now().year
    leads = Lead.objects.filter(partner=partner)

    monthly = (
        leads.filter(created_at__year=year)
        .annotate(month=TruncMonth('created_at'))
        .values('month')
        .annotate(count=Count('id'))
        .order_by('month')
    )
    by_status = leads.values('status').annotate(count=Count('id')).order_by('status')

    return {
        'partner': partner.user_code,
        'year': year,
        'total': leads.count(),
        'monthly': [{'month': row['month'].strftime('%Y-%m'), 'count': row['count']} for row in monthly],
        'by_status': {row['status']: row['count'] for row in by_status},
    }


def leaderboard(limit: int = 10) -> List[Dict[str, Any]]:
    """Partners ranked by closed deals, then by total leads."""
    partners = (
        User.objects.filter(role__in=PARTNER_ROLES)
        .annotate(
            total_leads=Count('leads', distinct=True),
            closed_deals=Count('leads', filter=Q(leads__status=LEAD_DEAL_CLOSED), distinct=True),
        )
        .filter(total_leads__gt=0)
        .order_by('-closed_deals', '-total_leads', 'user_code')[:limit]
    )
    return [
        {
            'rank': position,
            'user_code': partner.user_code,
            'name': partner.display_name,
            'role': partner.role,
            'closed_deals': partner.closed_deals,
            'total_leads': partner.total_leads,
        }
        for position, partner in enumerate(partners, start=1)
    ]
