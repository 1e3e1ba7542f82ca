"""
Business Logic Services for the DealFlow partner platform.

This module holds the platform rules that are shared between apps and
that do not belong to a single model:

Key Features:
- Role catalogue (partner tiers, ID prefixes, display names)
- Public user code generation (prefix + 6 random digits)
- Team building rules (which tiers a team lead may recruit)
- Upgrade paths and the feature list of each partner plan
- Earning calculation for the four earning rule types
- Registration payment decision for the onboarding wizard

Nothing here touches the database except generate_unique_user_code, which
needs a model to check collisions against.
"""

import logging
import random
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Dict, List, Optional, Tuple, Any
from dataclasses import dataclass

from . import BusinessRuleError

logger = logging.getLogger(__name__)


# =============================================================================
# ROLE CATALOGUE
# =============================================================================

ROLE_ADMIN = 'admin'
ROLE_SELLER = 'seller'
ROLE_CUSTOMER = 'customer'

ROLE_AFFILIATE = 'affiliate'
ROLE_SUPER_AFFILIATE = 'super_affiliate'
ROLE_ASSOCIATE = 'associate'
ROLE_CHANNEL = 'channel'
ROLE_FRANCHISEE = 'franchisee'

PARTNER_ROLES = [
    ROLE_AFFILIATE,
    ROLE_SUPER_AFFILIATE,
    ROLE_ASSOCIATE,
    ROLE_CHANNEL,
    ROLE_FRANCHISEE,
]

ROLE_DISPLAY_NAMES = {
    ROLE_AFFILIATE: 'Affiliate Partner',
    ROLE_SUPER_AFFILIATE: 'Super Affiliate Partner',
    ROLE_ASSOCIATE: 'Associate Partner',
    ROLE_CHANNEL: 'Channel Partner',
    ROLE_FRANCHISEE: 'Franchisee',
    ROLE_ADMIN: 'Admin',
    ROLE_SELLER: 'Seller',
    ROLE_CUSTOMER: 'Customer',
}

ROLE_ID_PREFIXES = {
    ROLE_AFFILIATE: 'PAF',
    ROLE_SUPER_AFFILIATE: 'PSF',
    ROLE_ASSOCIATE: 'PAS',
    ROLE_CHANNEL: 'PCH',
    ROLE_FRANCHISEE: 'PFR',
    ROLE_ADMIN: 'ADM',
    ROLE_SELLER: 'SEL',
    ROLE_CUSTOMER: 'CUS',
}

# Prefixes for non-user records
KIT_ID_PREFIX = 'KIT'
DOCUMENT_ID_PREFIX = 'DOC'
REWARD_ID_PREFIX = 'REWARD'

ADMIN_PERMISSIONS = [
    'manageLeads',
    'manageDeals',
    'manageListings',
    'managePartners',
    'manageSellers',
    'sendMessages',
]


def get_role_display_name(role: Optional[str]) -> str:
    return ROLE_DISPLAY_NAMES.get(role, role or '')


# =============================================================================
# USER CODE GENERATION
# =============================================================================

def generate_user_id(prefix: str) -> str:
    """
    Build a public identifier: prefix followed by six random digits.

    Example: generate_user_id('PAF') -> 'PAF482913'
    """
    return f"{prefix}{random.randint(100000, 999999)}"


def generate_unique_user_code(role: str, model, field: str = 'user_code', max_attempts: int = 20) -> str:
    """
    Generate a code for a role that is not yet used by any row of model.

    Args:
        role: Role whose prefix is used (falls back to the role upper-cased)
        model: Model class whose field must stay unique
        field: Name of the unique code field
        max_attempts: Collisions tolerated before giving up

    Raises:
        BusinessRuleError: If no free code was found
    """
    prefix = ROLE_ID_PREFIXES.get(role, role.upper())
    for _ in range(max_attempts):
        code = generate_user_id(prefix)
        if not model.objects.filter(**{field: code}).exists():
            return code
    logger.error(f"Could not allocate a unique {prefix} code after {max_attempts} attempts")
    raise BusinessRuleError("Could not allocate a unique identifier, please retry.")


def split_full_name(full_name: str) -> Tuple[str, str]:
    """
    Split a full name into (first_name, last_name).

    The first word becomes the first name; everything else the last name.
    """
    parts = (full_name or '').split()
    if not parts:
        return '', ''
    return parts[0], ' '.join(parts[1:])


# =============================================================================
# TEAM BUILDING AND UPGRADES
# =============================================================================

ADDABLE_ROLES: Dict[str, List[str]] = {
    ROLE_FRANCHISEE: [ROLE_CHANNEL, ROLE_ASSOCIATE, ROLE_SUPER_AFFILIATE, ROLE_AFFILIATE],
    ROLE_CHANNEL: [ROLE_ASSOCIATE, ROLE_SUPER_AFFILIATE, ROLE_AFFILIATE],
    ROLE_ASSOCIATE: [ROLE_SUPER_AFFILIATE, ROLE_AFFILIATE],
}

UPGRADE_PATHS: Dict[str, List[str]] = {
    ROLE_AFFILIATE: [ROLE_SUPER_AFFILIATE, ROLE_ASSOCIATE, ROLE_CHANNEL],
    ROLE_SUPER_AFFILIATE: [ROLE_ASSOCIATE, ROLE_CHANNEL],
    ROLE_ASSOCIATE: [ROLE_CHANNEL],
    ROLE_CHANNEL: [],
    ROLE_FRANCHISEE: [],
}

PLAN_FEATURES: Dict[str, List[str]] = {
    ROLE_SUPER_AFFILIATE: ["Higher commission rates", "Access to premium marketing kits", "Priority support"],
    ROLE_ASSOCIATE: ["Team building capabilities", "Advanced analytics dashboard", "Dedicated account manager"],
    ROLE_CHANNEL: ["Regional exclusivity options", "Co-branded marketing materials", "Direct line to leadership"],
    ROLE_FRANCHISEE: ["Full business model", "Brand usage rights", "Comprehensive training & support"],
}


def get_addable_roles(role: Optional[str]) -> List[str]:
    return ADDABLE_ROLES.get(role, [])


def can_build_team(role: Optional[str]) -> bool:
    """Only franchisee, channel and associate partners lead teams."""
    return bool(get_addable_roles(role))


def can_forward_leads(role: Optional[str]) -> bool:
    return can_build_team(role)


def get_upgrade_options(role: Optional[str]) -> List[Dict[str, Any]]:
    """
    Describe every plan the role may upgrade to.

    Returns:
        List of {'role', 'name', 'features'} dictionaries in upgrade order
    """
    return [
        {
            'role': target,
            'name': get_role_display_name(target),
            'features': PLAN_FEATURES.get(target, []),
        }
        for target in UPGRADE_PATHS.get(role, [])
    ]


def validate_upgrade(current_role: str, requested_role: str) -> None:
    """
    Raises:
        BusinessRuleError: If requested_role is not an upgrade of current_role
    """
    if requested_role not in UPGRADE_PATHS.get(current_role, []):
        raise BusinessRuleError(
            f"Cannot upgrade from {get_role_display_name(current_role)} "
            f"to {get_role_display_name(requested_role)}.",
            field='new_role',
        )


# =============================================================================
# EARNING RULES
# =============================================================================

EARNING_REWARD_POINTS = 'reward_points'
EARNING_COMMISSION_PERCENTAGE = 'commission_percentage'
EARNING_FLAT_AMOUNT = 'flat_amount'
EARNING_PER_SQ_FT = 'per_sq_ft'

EARNING_RULE_TYPES = [
    EARNING_REWARD_POINTS,
    EARNING_COMMISSION_PERCENTAGE,
    EARNING_FLAT_AMOUNT,
    EARNING_PER_SQ_FT,
]

TWO_PLACES = Decimal('0.01')


@dataclass
class EarningResult:
    """Outcome of applying an earning rule to a closed deal."""
    rule_type: str
    amount: Decimal
    reward_points: int

    @property
    def is_points(self) -> bool:
        return self.rule_type == EARNING_REWARD_POINTS


def _to_decimal(value: Any, field: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise BusinessRuleError(f"'{value}' is not a valid number.", field=field)


def validate_earning_rule(rule: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalise an earning rule dictionary.

    A rule looks like {'type': 'per_sq_ft', 'value': 10, 'total_sq_ft': 1200}.
    per_sq_ft rules must carry a positive total_sq_ft.

    Returns:
        The normalised rule with Decimal-compatible string values
    """
    rule_type = (rule or {}).get('type')
    if rule_type not in EARNING_RULE_TYPES:
        raise BusinessRuleError(f"Unknown earning rule type '{rule_type}'.", field='type')

    value = _to_decimal(rule.get('value', 0), 'value')
    if value < 0:
        raise BusinessRuleError("Earning value cannot be negative.", field='value')

    normalised = {'type': rule_type, 'value': str(value)}

    if rule_type == EARNING_PER_SQ_FT:
        total_sq_ft = _to_decimal(rule.get('total_sq_ft') or 0, 'total_sq_ft')
        if total_sq_ft <= 0:
            raise BusinessRuleError(
                "Total square feet must be greater than zero for per sq ft rules.",
                field='total_sq_ft',
            )
        normalised['total_sq_ft'] = str(total_sq_ft)

    return normalised


def calculate_earning(rule: Dict[str, Any], sale_amount: Any = 0,
                      area_sq_ft: Any = None) -> EarningResult:
    """
    Apply an earning rule to a sale.

    - reward_points: value points, no currency
    - commission_percentage: sale_amount * value / 100, rounded to 2 dp
    - flat_amount: value
    - per_sq_ft: value * square feet (area_sq_ft, or the rule's total_sq_ft)

    Args:
        rule: Earning rule dictionary (see validate_earning_rule)
        sale_amount: Deal value used for percentage commissions
        area_sq_ft: Overrides the rule's total_sq_ft for per sq ft rules

    Returns:
        EarningResult with the currency amount and reward points
    """
    if area_sq_ft is not None and (rule or {}).get('type') == EARNING_PER_SQ_FT:
        rule = dict(rule, total_sq_ft=area_sq_ft)

    normalised = validate_earning_rule(rule)
    rule_type = normalised['type']
    value = Decimal(normalised['value'])

    if rule_type == EARNING_REWARD_POINTS:
        return EarningResult(rule_type, Decimal('0.00'), int(value))

    if rule_type == EARNING_COMMISSION_PERCENTAGE:
        sale = _to_decimal(sale_amount or 0, 'sale_amount')
        amount = (sale * value / Decimal('100')).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        return EarningResult(rule_type, amount, 0)

    if rule_type == EARNING_FLAT_AMOUNT:
        return EarningResult(rule_type, value.quantize(TWO_PLACES), 0)

    total_sq_ft = Decimal(normalised['total_sq_ft'])
    amount = (value * total_sq_ft).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return EarningResult(rule_type, amount, 0)


def resolve_earning_rule(role: str, property_rules: Optional[Dict[str, Any]],
                         default_rules: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the earning rule for a partner role.

    Property-specific rules win over the platform defaults.
    """
    for rules in (property_rules or {}, default_rules or {}):
        rule = rules.get(role)
        if rule and rule.get('type'):
            return rule
    return None


# =============================================================================
# REGISTRATION PAYMENT
# =============================================================================

def decide_registration_payment(role: str, fees: Optional[Dict[str, Any]],
                                payment_enabled: bool) -> Tuple[bool, Decimal]:
    """
    Decide whether a new partner must pay a registration fee.

    Payment is required only when payments are enabled and the
    configured fee for the role is greater than zero.

    Returns:
        Tuple of (requires_payment, amount)
    """
    raw_fee = (fees or {}).get(role, 0) or 0
    try:
        amount = Decimal(str(raw_fee))
    except (InvalidOperation, ValueError):
        logger.warning(f"Ignoring invalid registration fee '{raw_fee}' for role {role}")
        amount = Decimal('0')

    if not payment_enabled or amount <= 0:
        return False, Decimal('0')
    return True, amount.quantize(TWO_PLACES)
