"""
Message delivery and ticket scoping.
"""

import logging

from django.db import transaction
from django.db.models import Q

from services import BusinessRuleError, PermissionDeniedError

from .models import (
    GROUP_ALL_PARTNERS,
    GROUP_ALL_SELLERS,
    GROUP_ALL_USERS,
    Message,
    SupportTicket,
)

logger = logging.getLogger(__name__)


def inbox_groups(user):
    """Recipient groups whose announcements reach the user."""
    if user.is_platform_admin:
        return [GROUP_ALL_PARTNERS, GROUP_ALL_SELLERS, GROUP_ALL_USERS]
    groups = [GROUP_ALL_USERS]
    if user.is_partner:
        groups.append(GROUP_ALL_PARTNERS)
    if user.is_seller:
        groups.append(GROUP_ALL_SELLERS)
    return groups


def inbox_for(user):
    """Direct messages plus announcements for the user's groups, newest first."""
    return Message.objects.filter(
        Q(recipient=user) | Q(recipient_group__in=inbox_groups(user))
    ).select_related('sender', 'recipient')


def sent_by(user):
    return Message.objects.filter(sender=user).select_related('recipient')


def send_message(sender, subject, body, recipient=None, group=''):
    """
    Send a direct message or a group announcement.

    Admins need the sendMessages permission; sellers may message a single
    partner. Nobody else sends messages.
    """
    if bool(recipient) == bool(group):
        raise BusinessRuleError("Choose either a recipient or a recipient group.", field='recipient_id')

    if sender.is_platform_admin:
        if not sender.has_admin_permission('sendMessages'):
            raise PermissionDeniedError("Admin permission 'sendMessages' required.")
    elif not (sender.is_seller and recipient is not None and recipient.is_partner):
        raise PermissionDeniedError("You are not allowed to send this message.")

    message = Message.objects.create(
        sender=sender,
        recipient=recipient,
        recipient_group=group or '',
        subject=subject,
        body=body,
        is_announcement=bool(group),
    )
    logger.info(f"Message {message.pk} sent by {sender.user_code} to {recipient.user_code if recipient else group}")
    return message


def mark_read(message, user):
    with transaction.atomic():
        message = Message.objects.select_for_update().get(pk=message.pk)
        read_by = dict(message.read_by or {})
        if not read_by.get(user.user_code):
            read_by[user.user_code] = True
            message.read_by = read_by
            message.save(update_fields=['read_by'])
    return message


def unread_count(user):
    return sum(1 for message in inbox_for(user).select_related(None).only('read_by') if not message.is_read_by(user))


def tickets_for(user):
    queryset = SupportTicket.objects.select_related('user')
    if user.is_platform_admin:
        return queryset
    return queryset.filter(user=user)
