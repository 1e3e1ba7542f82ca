# ===== SUPPORT APP TEST SUITE =====
"""
Test suite for the resource centre, tickets and messages
File: support/tests.py

Test Coverage:
- Message delivery rules and inbox scoping
- Read tracking and unread counts
- Support tickets and admin resolution
- Resource content validation
"""

from django.test import TestCase
from django.urls import reverse

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import User
from services import BusinessRuleError, PermissionDeniedError

from . import services as support_services
from .models import (
    GROUP_ALL_PARTNERS,
    GROUP_ALL_SELLERS,
    GROUP_ALL_USERS,
    Message,
    Resource,
    SupportTicket,
)


def make_user(email, role='affiliate', **extra):
    return User.objects.create_user(email=email, password='secret123', role=role, **extra)


# =============================================================================
# MESSAGE SERVICE TESTS
# =============================================================================

class MessageServiceTest(TestCase):
    """Test who may send what and who receives it"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.seller = make_user('sam@example.com', role='seller')
        self.partner = make_user('asha@example.com', role='affiliate')
        self.customer = make_user('cara@example.com', role='customer')

    def test_inbox_groups(self):
        self.assertEqual(support_services.inbox_groups(self.partner), [GROUP_ALL_USERS, GROUP_ALL_PARTNERS])
        self.assertEqual(support_services.inbox_groups(self.seller), [GROUP_ALL_USERS, GROUP_ALL_SELLERS])
        self.assertEqual(support_services.inbox_groups(self.customer), [GROUP_ALL_USERS])
        self.assertEqual(len(support_services.inbox_groups(self.admin)), 3)

    def test_announcement_reaches_group_only(self):
        support_services.send_message(self.admin, 'Launch', '<p>New project</p>', group=GROUP_ALL_PARTNERS)

        self.assertEqual(support_services.inbox_for(self.partner).count(), 1)
        self.assertEqual(support_services.inbox_for(self.seller).count(), 0)

    def test_exactly_one_target(self):
        with self.assertRaises(BusinessRuleError):
            support_services.send_message(self.admin, 'Hi', 'Body')
        with self.assertRaises(BusinessRuleError):
            support_services.send_message(
                self.admin, 'Hi', 'Body', recipient=self.partner, group=GROUP_ALL_USERS
            )

    def test_sub_admin_needs_send_permission(self):
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageLeads'])
        with self.assertRaises(PermissionDeniedError):
            support_services.send_message(sub_admin, 'Hi', 'Body', recipient=self.partner)

        allowed = make_user('sub2@example.com', role='admin', permissions=['sendMessages'])
        message = support_services.send_message(allowed, 'Hi', 'Body', recipient=self.partner)
        self.assertFalse(message.is_announcement)

    def test_seller_may_message_a_partner_only(self):
        message = support_services.send_message(self.seller, 'Visit', 'Tomorrow?', recipient=self.partner)
        self.assertEqual(message.recipient, self.partner)

        with self.assertRaises(PermissionDeniedError):
            support_services.send_message(self.seller, 'Hi', 'Body', recipient=self.customer)
        with self.assertRaises(PermissionDeniedError):
            support_services.send_message(self.seller, 'Hi', 'Body', group=GROUP_ALL_PARTNERS)

    def test_partners_cannot_send(self):
        with self.assertRaises(PermissionDeniedError):
            support_services.send_message(self.partner, 'Hi', 'Body', recipient=self.seller)

    def test_read_tracking_is_per_user(self):
        message = support_services.send_message(self.admin, 'All', 'Body', group=GROUP_ALL_USERS)
        self.assertEqual(support_services.unread_count(self.partner), 1)

        support_services.mark_read(message, self.partner)
        support_services.mark_read(message, self.partner)

        message.refresh_from_db()
        self.assertEqual(message.read_by, {self.partner.user_code: True})
        self.assertEqual(support_services.unread_count(self.partner), 0)
        self.assertEqual(support_services.unread_count(self.customer), 1)

    def test_unread_count_mixes_direct_and_group_messages(self):
        support_services.send_message(self.admin, 'Direct', 'Body', recipient=self.partner)
        support_services.send_message(self.admin, 'Partners', 'Body', group=GROUP_ALL_PARTNERS)
        support_services.send_message(self.admin, 'Sellers', 'Body', group=GROUP_ALL_SELLERS)

        self.assertEqual(support_services.unread_count(self.partner), 2)
        self.assertEqual(support_services.unread_count(self.seller), 1)


# =============================================================================
# MESSAGE API TESTS
# =============================================================================

class MessageAPITest(APITestCase):
    """Test the messages endpoints"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_send_and_read(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('support:message-send'), {
            'recipient_id': self.partner.user_code, 'subject': 'Welcome', 'body': '<p>Hello</p>',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        message_id = response.data['id']

        self.client.force_authenticate(user=self.partner)
        self.assertEqual(self.client.get(reverse('support:message-unread-count')).data['unread'], 1)

        response = self.client.post(reverse('support:message-mark-read', args=[message_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])
        self.assertEqual(self.client.get(reverse('support:message-unread-count')).data['unread'], 0)

    def test_send_requires_single_target(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('support:message-send'), {'subject': 'Hi', 'body': 'x'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('recipient_id', response.data)

    def test_partner_send_forbidden(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('support:message-send'), {
            'recipient_group': GROUP_ALL_USERS, 'subject': 'Hi', 'body': 'x',
        })
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_sent_list(self):
        support_services.send_message(self.admin, 'One', 'x', recipient=self.partner)
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('support:message-sent'))
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['recipient_name'], self.partner.display_name)


# =============================================================================
# TICKET TESTS
# =============================================================================

class SupportTicketAPITest(APITestCase):
    """Test raising and resolving support tickets"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate')
        self.other = make_user('ravi@example.com', role='channel')

    def _raise_ticket(self, user, subject='Cannot download brochure'):
        return SupportTicket.objects.create(
            user=user, category='Property', subject=subject, description='The link is broken.'
        )

    def test_create_ticket(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('support:ticket-list'), {
            'category': 'Video', 'subject': 'Video will not play', 'description': 'Buffering forever',
            'status': SupportTicket.STATUS_CLOSED,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user_code'], self.partner.user_code)
        self.assertEqual(response.data['status'], SupportTicket.STATUS_OPEN)

    def test_users_see_own_tickets(self):
        self._raise_ticket(self.partner)
        self._raise_ticket(self.other)
        self.client.force_authenticate(user=self.partner)
        self.assertEqual(self.client.get(reverse('support:ticket-list')).data['count'], 1)

        self.client.force_authenticate(user=self.admin)
        self.assertEqual(self.client.get(reverse('support:ticket-list')).data['count'], 2)

    def test_admin_resolves(self):
        ticket = self._raise_ticket(self.partner)
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(reverse('support:ticket-resolve', args=[ticket.pk]), {
            'status': SupportTicket.STATUS_CLOSED, 'resolution_details': 'Link fixed',
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ticket.refresh_from_db()
        self.assertEqual(ticket.status, SupportTicket.STATUS_CLOSED)

    def test_owner_cannot_resolve(self):
        ticket = self._raise_ticket(self.partner)
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(
            reverse('support:ticket-resolve', args=[ticket.pk]), {'status': SupportTicket.STATUS_CLOSED}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# =============================================================================
# RESOURCE CENTRE TESTS
# =============================================================================

class ResourceAPITest(APITestCase):
    """Test resource content validation and write permissions"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.partner = make_user('asha@example.com', role='affiliate')

    def test_video_needs_url(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('support:resource-list'), {'title': 'Site tour', 'content_type': 'video'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('video_url', response.data)

    def test_faq_resource(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('support:resource-list'), {
            'title': 'Payouts FAQ',
            'content_type': 'faq',
            'faqs': [{'question': 'When are payouts made?', 'answer': 'Every Friday.'}],
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Resource.objects.get().faqs[0]['answer'], 'Every Friday.')

    def test_partner_reads_but_cannot_write(self):
        Resource.objects.create(title='Guide', article_content='Read me')
        self.client.force_authenticate(user=self.partner)

        self.assertEqual(self.client.get(reverse('support:resource-list')).data['count'], 1)
        response = self.client.post(
            reverse('support:resource-list'), {'title': 'Mine', 'article_content': 'x'}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_partial_update_keeps_existing_content(self):
        resource = Resource.objects.create(title='Guide', article_content='Read me')
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(reverse('support:resource-detail', args=[resource.pk]), {'title': 'Guide v2'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
