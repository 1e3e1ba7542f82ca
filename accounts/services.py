# ===== ACCOUNT WORKFLOWS =====
"""
Account workflows for the DealFlow platform.

Views validate input with serializers and then call into this module,
which owns every status transition on users:
- Registration (quick sign-up, customer OTP sign-up, partner and seller
  onboarding wizards, sub-admins)
- Registration fee payment and the gateway callback
- Partner lifecycle (deactivate, reactivate, suspend, unsuspend)
- Seller activation, customer verification and KYC review
- Upgrade requests
- Team building

Multi-row updates run inside transaction.atomic with the touched rows
locked through select_for_update().
"""

import logging
import time
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from administration.models import AppSetting
from services import (
    BusinessRuleError,
    DuplicateAccountError,
    InvalidTransitionError,
    PaymentGatewayError,
    PermissionDeniedError,
)
from services.business_logic import (
    ADMIN_PERMISSIONS,
    PARTNER_ROLES,
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_SELLER,
    decide_registration_payment,
    get_addable_roles,
    split_full_name,
    validate_upgrade,
)
from services.payments import PhonePeClient, PAYMENT_SUCCESS, build_merchant_transaction_id

from .models import (
    KYC_PENDING,
    KYC_REJECTED,
    KYC_VERIFIED,
    PAYMENT_FAILED,
    PAYMENT_NOT_REQUIRED,
    PAYMENT_PAID,
    PAYMENT_PENDING,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    STATUS_PENDING,
    STATUS_PENDING_UPGRADE,
    STATUS_PENDING_VERIFICATION,
    STATUS_SUSPENDED,
    RegistrationPayment,
    TeamRequest,
    User,
)

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def ensure_email_available(email: str) -> str:
    email = email.strip().lower()
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateAccountError("An account with this email already exists.", field='email')
    return email


def _lock(user: User) -> User:
    return User.objects.select_for_update().get(pk=user.pk)


def _require_status(user: User, allowed, action: str) -> None:
    if user.status not in allowed:
        raise InvalidTransitionError(
            f"Cannot {action} a user whose status is '{user.status}'.",
            field='status',
        )


def _require_partner(user: User) -> None:
    if not user.is_partner:
        raise BusinessRuleError("This operation only applies to partners.")


def _require_reason(reason: Optional[str]) -> str:
    reason = (reason or '').strip()
    if not reason:
        raise BusinessRuleError("A reason is required.", field='reason')
    return reason


# =============================================================================
# REGISTRATION
# =============================================================================

def register_quick(name: str, email: str, password: str, role: str) -> User:
    """
    Self sign-up with name, email, password and role.

    Partners are active immediately; sellers wait for admin activation.
    """
    if role not in PARTNER_ROLES and role != ROLE_SELLER:
        raise BusinessRuleError("Choose a partner role or seller.", field='role')

    email = ensure_email_available(email)
    first_name, last_name = split_full_name(name)
    user = User.objects.create_user(
        email=email,
        password=password,
        name=name.strip(),
        first_name=first_name,
        last_name=last_name,
        role=role,
        status=STATUS_PENDING if role == ROLE_SELLER else STATUS_ACTIVE,
    )
    logger.info(f"Self-registered {role} {user.user_code}")
    return user


def register_customer(data: Dict[str, Any], otp_service) -> User:
    """
    Create a customer after checking the emailed OTP.

    The account stays pending_verification until an admin approves it.
    """
    email = data['email'].strip().lower()
    if not otp_service.verify_otp(email, data['otp']):
        raise BusinessRuleError("Invalid or expired OTP.", field='otp', code='invalid_otp')

    email = ensure_email_available(email)
    first_name, last_name = split_full_name(data['name'])
    user = User.objects.create_user(
        email=email,
        password=data['password'],
        name=data['name'].strip(),
        first_name=first_name,
        last_name=last_name,
        phone=data.get('phone', ''),
        role=ROLE_CUSTOMER,
        status=STATUS_PENDING_VERIFICATION,
    )
    logger.info(f"Customer {user.user_code} registered, awaiting verification")
    return user


def verify_customer(customer: User, approve: bool) -> Optional[User]:
    """Approve (activate) or reject (delete) a customer awaiting verification."""
    if customer.role != ROLE_CUSTOMER:
        raise BusinessRuleError("Only customers can be verified here.")
    _require_status(customer, {STATUS_PENDING_VERIFICATION}, 'verify')

    if approve:
        customer.status = STATUS_ACTIVE
        customer.save(update_fields=['status', 'is_active', 'updated_at'])
        logger.info(f"Customer {customer.user_code} verified")
        return customer

    code = customer.user_code
    customer.delete()
    logger.info(f"Customer {code} rejected and deleted")
    return None


def create_sub_admin(data: Dict[str, Any]) -> User:
    permissions = list(dict.fromkeys(data.get('permissions') or []))
    if not permissions:
        raise BusinessRuleError("Select at least one permission.", field='permissions')
    unknown = [p for p in permissions if p not in ADMIN_PERMISSIONS]
    if unknown:
        raise BusinessRuleError(f"Unknown permissions: {', '.join(unknown)}", field='permissions')

    email = ensure_email_available(data['email'])
    first_name = data['first_name'].strip()
    last_name = data['last_name'].strip()
    user = User.objects.create_user(
        email=email,
        password=data['password'],
        first_name=first_name,
        last_name=last_name,
        name=f"{first_name} {last_name}".strip(),
        role=ROLE_ADMIN,
        status=STATUS_ACTIVE,
        permissions=permissions,
    )
    logger.info(f"Sub-admin {user.user_code} created with {permissions}")
    return user


# =============================================================================
# ONBOARDING WIZARDS
# =============================================================================

PROFILE_FIELDS = [
    'dob', 'gender', 'qualification', 'phone', 'whatsapp', 'address', 'city', 'state', 'pincode',
    'profile_image', 'business_name', 'business_logo', 'business_type', 'gstn', 'business_age',
    'area_covered', 'aadhar_number', 'aadhar_file', 'pan_number', 'pan_file', 'rera_number',
    'rera_certificate',
]


def _build_onboarded_user(data: Dict[str, Any], role: str, status: str) -> User:
    email = ensure_email_available(data['email'])
    full_name = data['full_name'].strip()
    first_name, last_name = split_full_name(full_name)

    user = User(
        email=email,
        name=full_name,
        first_name=first_name,
        last_name=last_name,
        role=role,
        status=status,
        kyc_status=KYC_PENDING,
    )
    for field in PROFILE_FIELDS:
        value = data.get(field)
        if value not in (None, ''):
            setattr(user, field, value)
    user.set_password(data['password'])
    return user


def onboard_partner(data: Dict[str, Any], request=None, client: Optional[PhonePeClient] = None) -> Dict[str, Any]:
    """
    Create a partner from the four-step wizard and branch on payment.

    The partner is saved with payment_status 'pending' first. When the
    role's registration fee is payable the partner stays 'pending' and a
    RegistrationPayment is opened with the gateway; otherwise the payment
    status becomes 'not_required' and the partner is active.

    Returns:
        {'partner': User, 'requires_payment': bool, 'redirect_url': str or None,
         'payment': RegistrationPayment or None}
    """
    role = data['partner_role']
    requires_payment, amount = decide_registration_payment(
        role, AppSetting.get_registration_fees(), settings.PAYMENT_ENABLED
    )

    with transaction.atomic():
        partner = _build_onboarded_user(data, role, STATUS_PENDING if requires_payment else STATUS_ACTIVE)
        partner.payment_status = PAYMENT_PENDING
        partner.save()

        if not requires_payment:
            partner.payment_status = PAYMENT_NOT_REQUIRED
            partner.save(update_fields=['payment_status', 'updated_at'])
            logger.info(f"Partner {partner.user_code} onboarded, no registration fee due")
            return {'partner': partner, 'requires_payment': False, 'redirect_url': None, 'payment': None}

        payment = RegistrationPayment.objects.create(
            user=partner,
            merchant_transaction_id=build_merchant_transaction_id(partner.user_code, int(time.time() * 1000)),
            amount=amount,
        )

    redirect_url = start_registration_payment(payment, client=client)
    return {'partner': partner, 'requires_payment': True, 'redirect_url': redirect_url, 'payment': payment}


def start_registration_payment(payment: RegistrationPayment, client: Optional[PhonePeClient] = None) -> str:
    """
    Ask the gateway for a pay page.

    On gateway failure the attempt is marked failed and the error is
    re-raised; the partner record is kept so the payment can be retried.
    """
    client = client or PhonePeClient()
    base = settings.PUBLIC_BASE_URL.rstrip('/')
    callback_url = f"{base}/api/v1/payments/callback/?merchantTransactionId={payment.merchant_transaction_id}"

    try:
        return client.initiate_payment(
            amount=payment.amount,
            merchant_transaction_id=payment.merchant_transaction_id,
            merchant_user_id=payment.user.user_code,
            redirect_url=callback_url,
            callback_url=callback_url,
        )
    except PaymentGatewayError:
        payment.status = RegistrationPayment.STATUS_FAILED
        payment.save(update_fields=['status', 'updated_at'])
        User.objects.filter(pk=payment.user_id).update(payment_status=PAYMENT_FAILED)
        raise


def retry_registration_payment(partner: User, client: Optional[PhonePeClient] = None) -> str:
    """Open a new payment attempt for a partner whose fee is still unpaid."""
    if partner.payment_status not in (PAYMENT_PENDING, PAYMENT_FAILED):
        raise InvalidTransitionError("This partner has no outstanding registration fee.")

    requires_payment, amount = decide_registration_payment(
        partner.role, AppSetting.get_registration_fees(), settings.PAYMENT_ENABLED
    )
    if not requires_payment:
        raise BusinessRuleError("Registration payments are currently disabled.")

    payment = RegistrationPayment.objects.create(
        user=partner,
        merchant_transaction_id=build_merchant_transaction_id(partner.user_code, int(time.time() * 1000)),
        amount=amount,
    )
    User.objects.filter(pk=partner.pk).update(payment_status=PAYMENT_PENDING)
    return start_registration_payment(payment, client=client)


def handle_payment_callback(merchant_transaction_id: Optional[str], payload: Dict[str, Any],
                            client: Optional[PhonePeClient] = None) -> Optional[RegistrationPayment]:
    """
    Apply a gateway callback.

    A callback reporting success is confirmed with the status API before
    the partner is marked paid. Repeated callbacks for a finished payment
    leave it unchanged.

    Returns:
        The RegistrationPayment, or None if the transaction is unknown
    """
    with transaction.atomic():
        payment = (
            RegistrationPayment.objects.select_for_update()
            .select_related('user')
            .filter(merchant_transaction_id=merchant_transaction_id or '')
            .first()
        )
        if payment is None:
            logger.warning(f"Payment callback for unknown transaction {merchant_transaction_id}")
            return None

        if payment.is_final:
            return payment

        code = payload.get('code')
        confirmed = False
        if code == PAYMENT_SUCCESS:
            try:
                confirmed = (client or PhonePeClient()).is_paid(payment.merchant_transaction_id)
            except PaymentGatewayError as e:
                logger.error(f"Could not confirm payment {payment.merchant_transaction_id}: {str(e)}")
                return payment

        payment.callback_payload = payload
        payment.provider_reference_id = payload.get('providerReferenceId') or ''
        payment.gateway_transaction_id = payload.get('transactionId') or ''
        partner = _lock(payment.user)

        if confirmed:
            payment.status = RegistrationPayment.STATUS_SUCCESS
            partner.payment_status = PAYMENT_PAID
            partner.status = STATUS_ACTIVE
            partner.payment_details = {
                'transaction_id': payment.gateway_transaction_id,
                'provider_reference_id': payment.provider_reference_id,
                'merchant_transaction_id': payment.merchant_transaction_id,
                'amount': str(payment.amount),
                'status': 'SUCCESS',
            }
            logger.info(f"Registration fee paid for {partner.user_code}")
        else:
            payment.status = RegistrationPayment.STATUS_FAILED
            partner.payment_status = PAYMENT_FAILED
            logger.warning(f"Registration payment {payment.merchant_transaction_id} failed with {code}")

        payment.save()
        partner.save()
        return payment


def onboard_seller(data: Dict[str, Any]) -> User:
    """Create a seller from the three-step wizard; activation is manual."""
    with transaction.atomic():
        seller = _build_onboarded_user(data, ROLE_SELLER, STATUS_PENDING)
        seller.save()
    logger.info(f"Seller {seller.user_code} onboarded, awaiting activation")
    return seller


# =============================================================================
# PARTNER LIFECYCLE
# =============================================================================

@transaction.atomic
def deactivate_partner(partner: User, reason: str) -> User:
    reason = _require_reason(reason)
    partner = _lock(partner)
    _require_partner(partner)
    _require_status(partner, {STATUS_ACTIVE}, 'deactivate')

    partner.status = STATUS_INACTIVE
    partner.deactivation_reason = reason
    partner.reactivation_reason = ''
    partner.save()
    logger.info(f"Partner {partner.user_code} deactivated")
    return partner


@transaction.atomic
def reactivate_partner(partner: User, reason: str) -> User:
    reason = _require_reason(reason)
    partner = _lock(partner)
    _require_partner(partner)
    _require_status(partner, {STATUS_INACTIVE}, 'reactivate')

    partner.status = STATUS_ACTIVE
    partner.reactivation_reason = reason
    partner.save()
    logger.info(f"Partner {partner.user_code} reactivated")
    return partner


@transaction.atomic
def suspend_partner(partner: User, reason: str) -> User:
    reason = _require_reason(reason)
    partner = _lock(partner)
    _require_partner(partner)
    _require_status(partner, {STATUS_ACTIVE}, 'suspend')

    partner.status = STATUS_SUSPENDED
    partner.suspension_reason = reason
    partner.save()
    logger.info(f"Partner {partner.user_code} suspended")
    return partner


@transaction.atomic
def unsuspend_partner(partner: User) -> User:
    partner = _lock(partner)
    _require_partner(partner)
    _require_status(partner, {STATUS_SUSPENDED}, 'unsuspend')

    partner.status = STATUS_ACTIVE
    partner.reactivation_reason = f"Unsuspended. Original reason: {partner.suspension_reason}"
    partner.suspension_reason = ''
    partner.save()
    logger.info(f"Partner {partner.user_code} unsuspended")
    return partner


@transaction.atomic
def set_seller_status(seller: User, new_status: str) -> User:
    if new_status not in (STATUS_ACTIVE, STATUS_INACTIVE):
        raise BusinessRuleError("Status must be 'active' or 'inactive'.", field='status')
    seller = _lock(seller)
    if not seller.is_seller:
        raise BusinessRuleError("This operation only applies to sellers.")
    if seller.status == new_status:
        raise InvalidTransitionError(f"Seller is already {new_status}.", field='status')

    seller.status = new_status
    seller.save()
    logger.info(f"Seller {seller.user_code} set to {new_status}")
    return seller


@transaction.atomic
def review_kyc(user: User, approve: bool, reason: str = '') -> User:
    user = _lock(user)
    if not (user.is_partner or user.is_seller):
        raise BusinessRuleError("KYC review applies to partners and sellers.")

    if approve:
        user.kyc_status = KYC_VERIFIED
        user.rejection_reason = ''
    else:
        user.kyc_status = KYC_REJECTED
        user.rejection_reason = _require_reason(reason)
    user.save()
    logger.info(f"KYC for {user.user_code} {'verified' if approve else 'rejected'}")
    return user


# =============================================================================
# UPGRADES
# =============================================================================

@transaction.atomic
def request_upgrade(partner: User, new_role: str) -> User:
    partner = _lock(partner)
    _require_partner(partner)
    _require_status(partner, {STATUS_ACTIVE}, 'request an upgrade for')
    validate_upgrade(partner.role, new_role)

    partner.status = STATUS_PENDING_UPGRADE
    partner.upgrade_request = {
        'new_role': new_role,
        'requested_at': timezone.now().isoformat(),
    }
    partner.save()
    logger.info(f"Partner {partner.user_code} requested upgrade to {new_role}")
    return partner


@transaction.atomic
def resolve_upgrade(partner: User, approve: bool) -> User:
    partner = _lock(partner)
    _require_status(partner, {STATUS_PENDING_UPGRADE}, 'resolve an upgrade for')
    if not partner.upgrade_request:
        raise InvalidTransitionError("No upgrade request to resolve.")

    new_role = partner.upgrade_request.get('new_role')
    if approve:
        validate_upgrade(partner.role, new_role)
        partner.role = new_role
    partner.status = STATUS_ACTIVE
    partner.upgrade_request = None
    partner.save()
    logger.info(f"Upgrade for {partner.user_code} to {new_role} {'approved' if approve else 'rejected'}")
    return partner


# =============================================================================
# TEAMS
# =============================================================================

def available_partners(lead: User):
    """Partners the lead may invite: unattached, not themselves, of an addable role."""
    return User.objects.filter(
        role__in=get_addable_roles(lead.role),
        team_lead__isnull=True,
    ).exclude(pk=lead.pk)


def send_team_request(lead: User, recipient: User) -> TeamRequest:
    if recipient.role not in get_addable_roles(lead.role):
        raise PermissionDeniedError("You cannot add this partner to your team.")
    if recipient.pk == lead.pk:
        raise BusinessRuleError("You cannot invite yourself.")
    if recipient.team_lead_id:
        raise BusinessRuleError("This partner already belongs to a team.")
    if TeamRequest.objects.filter(
        requester=lead, recipient=recipient, status=TeamRequest.STATUS_PENDING
    ).exists():
        raise BusinessRuleError("A request to this partner is already pending.", code='duplicate_request')

    team_request = TeamRequest.objects.create(requester=lead, recipient=recipient)
    logger.info(f"Team request {lead.user_code} -> {recipient.user_code}")
    return team_request


@transaction.atomic
def respond_to_team_request(team_request: TeamRequest, user: User, accept: bool) -> TeamRequest:
    """
    Accept or reject an incoming request.

    Acceptance marks the request and sets the recipient's team lead in one
    transaction.
    """
    team_request = TeamRequest.objects.select_for_update().get(pk=team_request.pk)
    if team_request.recipient_id != user.pk:
        raise PermissionDeniedError("This request was not sent to you.")
    if team_request.status != TeamRequest.STATUS_PENDING:
        raise InvalidTransitionError("This request has already been answered.")

    team_request.responded_at = timezone.now()
    if not accept:
        team_request.status = TeamRequest.STATUS_REJECTED
        team_request.save()
        return team_request

    recipient = _lock(user)
    if recipient.team_lead_id:
        raise BusinessRuleError("You already belong to a team.")

    team_request.status = TeamRequest.STATUS_ACCEPTED
    team_request.save()
    recipient.team_lead_id = team_request.requester_id
    recipient.save(update_fields=['team_lead', 'updated_at'])
    logger.info(f"{recipient.user_code} joined team of {team_request.requester.user_code}")
    return team_request
