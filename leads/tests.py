# ===== LEADS APP TEST SUITE =====
"""
Test suite for leads, deals and site visits
File: leads/tests.py

Test Coverage:
- Lead scoping per role
- Sales status updates and earning credit on closing
- Deal status and customer status sync
- Forwarding to team members and retaking
- Site visit scheduling, proof, review and cancellation
- Reports (partner report, leaderboard, visitors, bookings)
- Consultant lookup and partner reassignment
- API endpoints for leads, appointments, inquiries and requirements
"""

from datetime import timedelta
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from rest_framework.test import APITestCase
from rest_framework import status

from accounts.models import STATUS_ACTIVE, STATUS_INACTIVE, User
from administration.models import AppSetting, KEY_DEFAULT_EARNING_RULES
from properties.models import Property
from services import BusinessRuleError, InvalidTransitionError, PermissionDeniedError
from wallet.models import RewardTransaction, WalletTransaction
from wallet.services import get_wallet

from . import services as lead_services
from .models import (
    DEAL_BOOKING_FORM_FILLED,
    DEAL_CANCELLED,
    LEAD_CONTACTED,
    LEAD_DEAL_CLOSED,
    LEAD_FORWARDED,
    LEAD_NEW,
    LEAD_VISIT_SCHEDULED,
    LEAD_VISITED,
    Appointment,
    Inquiry,
    Lead,
    Requirement,
)


def make_user(email, role='affiliate', **extra):
    return User.objects.create_user(email=email, password='secret123', role=role, **extra)


def make_property(**overrides):
    data = {
        'title': '2BHK in Baner',
        'category': 'Residential',
        'city': 'Pune',
        'state': 'Maharashtra',
        'listing_price': Decimal('5000000'),
        'contact_name': 'Sam Seller',
        'contact_phone': '9876543210',
        'contact_email': 'sam@example.com',
        'status': 'For Sale',
    }
    data.update(overrides)
    return Property.objects.create(**data)


class LeadTestMixin:
    """Common users, a listing and a lead"""

    def setUp(self):
        self.admin = make_user('admin@example.com', role='admin')
        self.seller = make_user('sam@example.com', role='seller')
        self.partner = make_user('asha@example.com', role='affiliate')
        self.customer = make_user('cara@example.com', role='customer')
        self.property = make_property()
        self.lead = Lead.objects.create(
            name='Cara Customer', phone='9876500000', property=self.property,
            partner=self.partner, customer=self.customer,
        )


# =============================================================================
# MODEL TESTS
# =============================================================================

class LeadModelTest(LeadTestMixin, TestCase):
    """Test the Lead model"""

    def test_listing_link_and_forwarded_flag(self):
        self.assertEqual(self.lead.property, self.property)
        self.assertFalse(self.lead.is_forwarded)

        self.lead.status = LEAD_FORWARDED
        self.assertTrue(self.lead.is_forwarded)

    def test_str(self):
        self.assertEqual(str(self.lead), f"Cara Customer ({LEAD_NEW})")


# =============================================================================
# SCOPING TESTS
# =============================================================================

class LeadScopeTest(LeadTestMixin, TestCase):
    """Test which leads each role can see"""

    def setUp(self):
        super().setUp()
        other_property = make_property(contact_email='other@example.com')
        self.other_lead = Lead.objects.create(name='Other', phone='9876511111', property=other_property)

    def test_admin_sees_everything(self):
        self.assertEqual(lead_services.leads_for(self.admin).count(), 2)

    def test_seller_sees_leads_on_own_listings(self):
        self.assertEqual(list(lead_services.leads_for(self.seller)), [self.lead])

    def test_partner_sees_assigned_leads(self):
        self.assertEqual(list(lead_services.leads_for(self.partner)), [self.lead])

    def test_customer_sees_own_leads(self):
        self.assertEqual(list(lead_services.leads_for(self.customer)), [self.lead])

    def test_partner_create_is_forced_to_self(self):
        other = make_user('other@example.com', role='channel')
        lead = lead_services.create_lead({'name': 'X', 'phone': '9876522222', 'partner': other}, self.partner)
        self.assertEqual(lead.partner, self.partner)

    def test_seller_cannot_create_leads(self):
        with self.assertRaises(PermissionDeniedError):
            lead_services.create_lead({'name': 'X', 'phone': '9876522222'}, self.seller)


# =============================================================================
# STATUS AND EARNING TESTS
# =============================================================================

class LeadStatusTest(LeadTestMixin, TestCase):
    """Test sales status, deal status and earning credit"""

    def test_partner_cannot_change_status(self):
        with self.assertRaises(PermissionDeniedError):
            lead_services.update_lead_status(self.lead, LEAD_CONTACTED, self.partner)

    def test_seller_updates_status(self):
        lead = lead_services.update_lead_status(self.lead, LEAD_CONTACTED, self.seller)
        self.assertEqual(lead.status, LEAD_CONTACTED)

    def test_closing_credits_property_rule_once(self):
        self.property.earning_rules = {'affiliate': {'type': 'flat_amount', 'value': '5000'}}
        self.property.save()

        lead = lead_services.update_lead_status(self.lead, LEAD_DEAL_CLOSED, self.admin)
        self.assertTrue(lead.earning_credited)
        self.assertEqual(get_wallet(self.partner).balance, Decimal('5000.00'))

        lead_services.update_lead_status(lead, LEAD_DEAL_CLOSED, self.admin)
        self.assertEqual(get_wallet(self.partner).balance, Decimal('5000.00'))
        self.assertEqual(WalletTransaction.objects.filter(type=WalletTransaction.TYPE_EARNING).count(), 1)

    def test_commission_uses_sale_amount(self):
        AppSetting.set_value(KEY_DEFAULT_EARNING_RULES, {
            'affiliate': {'type': 'commission_percentage', 'value': '2'},
        })
        lead_services.update_lead_status(
            self.lead, LEAD_DEAL_CLOSED, self.admin, sale_amount=Decimal('4000000')
        )
        self.assertEqual(get_wallet(self.partner).balance, Decimal('80000.00'))

    def test_commission_falls_back_to_listing_price(self):
        AppSetting.set_value(KEY_DEFAULT_EARNING_RULES, {
            'affiliate': {'type': 'commission_percentage', 'value': '1'},
        })
        lead_services.update_lead_status(self.lead, LEAD_DEAL_CLOSED, self.admin)
        self.assertEqual(get_wallet(self.partner).balance, Decimal('50000.00'))

    def test_reward_point_rule_credits_points(self):
        self.property.earning_rules = {'affiliate': {'type': 'reward_points', 'value': '250'}}
        self.property.save()

        lead_services.update_lead_status(self.lead, LEAD_DEAL_CLOSED, self.admin)

        wallet = get_wallet(self.partner)
        self.assertEqual(wallet.reward_points, 250)
        self.assertEqual(wallet.balance, Decimal('0.00'))
        self.assertTrue(RewardTransaction.objects.filter(type=RewardTransaction.TYPE_EARNED).exists())

    def test_closing_without_rule_credits_nothing(self):
        lead = lead_services.update_lead_status(self.lead, LEAD_DEAL_CLOSED, self.admin)
        self.assertFalse(lead.earning_credited)
        self.assertEqual(get_wallet(self.partner).balance, Decimal('0.00'))

    def test_deal_cancelled_deactivates_customer(self):
        lead_services.update_deal_status(self.lead, DEAL_CANCELLED, self.admin)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.status, STATUS_INACTIVE)

        lead_services.update_deal_status(self.lead, DEAL_BOOKING_FORM_FILLED, self.admin)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.status, STATUS_ACTIVE)


# =============================================================================
# FORWARDING TESTS
# =============================================================================

class LeadForwardingTest(LeadTestMixin, TestCase):
    """Test forwarding leads to team members"""

    def setUp(self):
        super().setUp()
        self.lead_partner = make_user('lead@example.com', role='associate')
        self.member = make_user('member@example.com', role='affiliate', team_lead=None)
        self.member.team_lead = self.lead_partner
        self.member.save()
        self.own_lead = Lead.objects.create(
            name='Buyer', phone='9876533333', property=self.property, partner=self.lead_partner
        )

    def test_forward_creates_copy(self):
        copy = lead_services.forward_lead(self.own_lead, self.member, self.lead_partner)
        self.own_lead.refresh_from_db()

        self.assertTrue(copy.is_copy)
        self.assertEqual(copy.partner, self.member)
        self.assertEqual(copy.original_lead, self.own_lead)
        self.assertEqual(self.own_lead.status, LEAD_FORWARDED)
        self.assertEqual(self.own_lead.forwarded_to['lead_copy_id'], copy.pk)
        self.assertEqual(self.own_lead.forwarded_to['partner_id'], self.member.user_code)

    def test_forward_only_to_team_members(self):
        with self.assertRaises(BusinessRuleError):
            lead_services.forward_lead(self.own_lead, self.partner, self.lead_partner)

    def test_affiliates_cannot_forward(self):
        with self.assertRaises(PermissionDeniedError):
            lead_services.forward_lead(self.lead, self.member, self.partner)

    def test_forward_twice(self):
        lead_services.forward_lead(self.own_lead, self.member, self.lead_partner)
        with self.assertRaises(InvalidTransitionError):
            lead_services.forward_lead(self.own_lead, self.member, self.lead_partner)

    def test_forwarded_lead_status_is_frozen(self):
        lead_services.forward_lead(self.own_lead, self.member, self.lead_partner)
        with self.assertRaises(InvalidTransitionError):
            lead_services.update_lead_status(self.own_lead, LEAD_CONTACTED, self.admin)

    def test_retake_removes_copy(self):
        copy = lead_services.forward_lead(self.own_lead, self.member, self.lead_partner)
        lead = lead_services.retake_lead(self.own_lead, self.lead_partner)

        self.assertEqual(lead.status, LEAD_NEW)
        self.assertIsNone(lead.forwarded_to)
        self.assertFalse(Lead.objects.filter(pk=copy.pk).exists())

    def test_retake_requires_forwarded_lead(self):
        with self.assertRaises(InvalidTransitionError):
            lead_services.retake_lead(self.own_lead, self.lead_partner)


# =============================================================================
# APPOINTMENT TESTS
# =============================================================================

class AppointmentWorkflowTest(LeadTestMixin, TestCase):
    """Test site visit scheduling and proof review"""

    def _schedule(self):
        return lead_services.schedule_appointment(
            self.lead, timezone.now() + timedelta(days=2), self.partner, notes='Bring keys'
        )

    def test_schedule_moves_lead(self):
        appointment = self._schedule()
        self.lead.refresh_from_db()

        self.assertEqual(appointment.status, Appointment.STATUS_SCHEDULED)
        self.assertEqual(appointment.property, self.property)
        self.assertEqual(appointment.customer, self.customer)
        self.assertEqual(self.lead.status, LEAD_VISIT_SCHEDULED)

    def test_visit_date_must_be_future(self):
        with self.assertRaises(BusinessRuleError) as ctx:
            lead_services.schedule_appointment(self.lead, timezone.now() - timedelta(hours=1), self.partner)
        self.assertEqual(ctx.exception.field, 'visit_date')

    def test_lead_without_property(self):
        lead = Lead.objects.create(name='No listing', phone='9876544444', partner=self.partner)
        with self.assertRaises(BusinessRuleError):
            lead_services.schedule_appointment(lead, timezone.now() + timedelta(days=1), self.partner)

    def test_proof_then_verify(self):
        appointment = self._schedule()
        proof = SimpleUploadedFile('visit.jpg', b'\xff\xd8\xff\xe0fake', content_type='image/jpeg')

        appointment = lead_services.submit_visit_proof(appointment, proof, self.partner)
        self.assertEqual(appointment.status, Appointment.STATUS_PENDING_VERIFICATION)

        appointment = lead_services.verify_appointment(appointment, approve=True)
        self.lead.refresh_from_db()
        self.assertEqual(appointment.status, Appointment.STATUS_COMPLETED)
        self.assertEqual(self.lead.status, LEAD_VISITED)

    def test_rejected_proof_can_be_resubmitted(self):
        appointment = self._schedule()
        proof = SimpleUploadedFile('visit.jpg', b'\xff\xd8\xff\xe0fake', content_type='image/jpeg')
        appointment = lead_services.submit_visit_proof(appointment, proof, self.partner)
        appointment = lead_services.verify_appointment(appointment, approve=False, reason='Wrong site')

        self.assertEqual(appointment.status, Appointment.STATUS_REJECTED)
        self.assertEqual(appointment.rejection_reason, 'Wrong site')

        proof = SimpleUploadedFile('visit2.jpg', b'\xff\xd8\xff\xe0fake', content_type='image/jpeg')
        appointment = lead_services.submit_visit_proof(appointment, proof, self.partner)
        self.assertEqual(appointment.rejection_reason, '')

    def test_verify_requires_pending_proof(self):
        appointment = self._schedule()
        with self.assertRaises(InvalidTransitionError):
            lead_services.verify_appointment(appointment, approve=True)

    def test_cancel(self):
        appointment = self._schedule()
        appointment = lead_services.cancel_appointment(appointment, self.partner)
        self.assertEqual(appointment.status, Appointment.STATUS_CANCELLED)

        with self.assertRaises(InvalidTransitionError):
            lead_services.cancel_appointment(appointment, self.admin)


# =============================================================================
# REPORT TESTS
# =============================================================================

class LeadReportTest(LeadTestMixin, TestCase):
    """Test partner reports, leaderboard and visitor counts"""

    def test_partner_report(self):
        Lead.objects.create(name='Second', phone='9876555555', partner=self.partner, status=LEAD_DEAL_CLOSED)
        report = lead_services.partner_lead_report(self.partner)

        self.assertEqual(report['partner'], self.partner.user_code)
        self.assertEqual(report['total'], 2)
        self.assertEqual(report['by_status'], {LEAD_NEW: 1, LEAD_DEAL_CLOSED: 1})
        self.assertEqual(sum(row['count'] for row in report['monthly']), 2)

    def test_leaderboard_ranks_closed_deals_first(self):
        busy = make_user('busy@example.com', role='channel')
        for i in range(3):
            Lead.objects.create(name=f'L{i}', phone='9876566666', partner=busy)
        Lead.objects.create(name='Closed', phone='9876577777', partner=self.partner, status=LEAD_DEAL_CLOSED)

        board = lead_services.leaderboard()

        self.assertEqual([row['user_code'] for row in board], [self.partner.user_code, busy.user_code])
        self.assertEqual(board[0]['rank'], 1)
        self.assertEqual(board[0]['closed_deals'], 1)
        self.assertEqual(board[1]['total_leads'], 3)

    def test_visitors_count_distinct_listings(self):
        second = make_property(title='Second')
        when = timezone.now() + timedelta(days=1)
        Appointment.objects.create(lead=self.lead, property=self.property, visit_date=when)
        Appointment.objects.create(lead=self.lead, property=self.property, visit_date=when)
        Appointment.objects.create(lead=self.lead, property=second, visit_date=when)

        report = lead_services.visitors_report()

        self.assertEqual(len(report), 1)
        self.assertEqual(report[0]['user_code'], self.customer.user_code)
        self.assertEqual(report[0]['visit_count'], 2)

    def test_bookings_only_active_stages(self):
        Lead.objects.create(
            name='Booked', phone='9876588888', partner=self.partner, deal_status=DEAL_BOOKING_FORM_FILLED
        )
        self.assertEqual([lead.name for lead in lead_services.booking_leads(self.partner)], ['Booked'])


# =============================================================================
# CONSULTANT TESTS
# =============================================================================

class ConsultantTest(LeadTestMixin, TestCase):
    """Test the partner and seller shown to a customer, and reassignment"""

    def test_consultants_from_latest_lead(self):
        consultants = lead_services.consultants_for(self.customer)
        self.assertEqual(consultants['partner'], self.partner)
        self.assertEqual(consultants['seller'], self.seller)

    def test_listing_owner_is_preferred_seller(self):
        owner = make_user('owner@example.com', role='seller')
        self.property.owner = owner
        self.property.save()
        self.assertEqual(lead_services.consultants_for(self.customer)['seller'], owner)

    def test_customer_without_leads(self):
        lonely = make_user('lonely@example.com', role='customer')
        self.assertEqual(lead_services.consultants_for(lonely), {'partner': None, 'seller': None})

    def test_reassign_moves_every_lead(self):
        other_partner = make_user('omar@example.com', role='associate')
        Lead.objects.create(name='Cara again', phone='9876500001', partner=other_partner, customer=self.customer)
        new_partner = make_user('nina@example.com', role='channel')

        updated = lead_services.reassign_customer_partner(self.customer, new_partner)

        self.assertEqual(updated, 2)
        self.assertEqual(
            set(Lead.objects.filter(customer=self.customer).values_list('partner', flat=True)),
            {new_partner.pk}
        )

    def test_reassign_skips_leads_already_assigned(self):
        self.assertEqual(lead_services.reassign_customer_partner(self.customer, self.partner), 0)

    def test_reassign_rejects_inactive_or_non_partner(self):
        inactive = make_user('ivy@example.com', role='channel', status=STATUS_INACTIVE)
        with self.assertRaises(BusinessRuleError):
            lead_services.reassign_customer_partner(self.customer, inactive)
        with self.assertRaises(BusinessRuleError):
            lead_services.reassign_customer_partner(self.customer, self.seller)

    def test_reassign_needs_leads(self):
        lonely = make_user('lonely@example.com', role='customer')
        with self.assertRaises(BusinessRuleError):
            lead_services.reassign_customer_partner(lonely, self.partner)


class ConsultantAPITest(LeadTestMixin, APITestCase):
    """Test the consultant endpoints"""

    def test_customer_sees_own_consultants(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(reverse('leads:lead-consultant'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['partner']['user_code'], self.partner.user_code)
        self.assertEqual(response.data['seller']['user_code'], self.seller.user_code)

    def test_admin_looks_up_a_customer(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('leads:lead-consultant'), {'customer': self.customer.user_code})
        self.assertEqual(response.data['partner']['user_code'], self.partner.user_code)

    def test_partner_cannot_look_up_consultants(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get(reverse('leads:lead-consultant'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_reassigns(self):
        new_partner = make_user('nina@example.com', role='channel')
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(reverse('leads:lead-reassign-consultant'), {
            'customer_id': self.customer.user_code, 'partner_id': new_partner.user_code,
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'updated': 1})
        self.lead.refresh_from_db()
        self.assertEqual(self.lead.partner, new_partner)

    def test_reassign_needs_manage_leads(self):
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageDeals'])
        self.client.force_authenticate(user=sub_admin)

        response = self.client.post(reverse('leads:lead-reassign-consultant'), {
            'customer_id': self.customer.user_code, 'partner_id': self.partner.user_code,
        })

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


# =============================================================================
# API ENDPOINT TESTS
# =============================================================================

class LeadAPITest(LeadTestMixin, APITestCase):
    """Test lead endpoints and permissions"""

    def test_partner_lists_own_leads(self):
        Lead.objects.create(name='Someone else', phone='9876599999')
        self.client.force_authenticate(user=self.partner)

        response = self.client.get(reverse('leads:lead-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['partner_id'], self.partner.user_code)

    def test_partner_creates_lead(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('leads:lead-list'), {
            'name': 'New Buyer', 'phone': '98765 43210', 'property': self.property.pk,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data['partner_id'], self.partner.user_code)
        self.assertEqual(response.data['status'], LEAD_NEW)

    def test_short_phone_rejected(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('leads:lead-list'), {'name': 'New Buyer', 'phone': '12345'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data)

    def test_partner_cannot_call_status_action(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(
            reverse('leads:lead-status', args=[self.lead.pk]), {'status': LEAD_CONTACTED}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_seller_status_action(self):
        self.client.force_authenticate(user=self.seller)
        response = self.client.post(
            reverse('leads:lead-status', args=[self.lead.pk]), {'status': LEAD_CONTACTED}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], LEAD_CONTACTED)

    def test_sub_admin_needs_manage_deals(self):
        sub_admin = make_user('sub@example.com', role='admin', permissions=['manageLeads'])
        self.client.force_authenticate(user=sub_admin)
        response = self.client.post(
            reverse('leads:lead-deal-status', args=[self.lead.pk]), {'deal_status': DEAL_CANCELLED}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_forward_endpoint(self):
        lead_partner = make_user('lead@example.com', role='channel')
        member = make_user('member@example.com', role='affiliate', team_lead=lead_partner)
        lead = Lead.objects.create(name='Buyer', phone='9876533333', partner=lead_partner)
        self.client.force_authenticate(user=lead_partner)

        response = self.client.post(
            reverse('leads:lead-forward', args=[lead.pk]), {'partner_id': member.user_code}
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['is_copy'])
        self.assertEqual(response.data['partner_id'], member.user_code)

    def test_schedule_endpoint(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.post(reverse('leads:lead-schedule', args=[self.lead.pk]), {
            'visit_date': (timezone.now() + timedelta(days=3)).isoformat(),
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Appointment.STATUS_SCHEDULED)

    def test_report_for_admin_needs_partner(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('leads:lead-report'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(reverse('leads:lead-report'), {'partner': self.partner.user_code})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 1)

    def test_leaderboard_is_admin_only(self):
        self.client.force_authenticate(user=self.partner)
        response = self.client.get(reverse('leads:lead-leaderboard'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_review_reject_requires_reason(self):
        appointment = Appointment.objects.create(
            lead=self.lead, property=self.property, partner=self.partner,
            visit_date=timezone.now() + timedelta(days=1), status=Appointment.STATUS_PENDING_VERIFICATION,
        )
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            reverse('leads:appointment-review', args=[appointment.pk]), {'action': 'reject'}
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('reason', response.data)


class InquiryRequirementAPITest(LeadTestMixin, APITestCase):
    """Test inquiries and customer requirements"""

    def test_partner_sees_own_inquiries(self):
        Inquiry.objects.create(partner=self.partner, name='V', email='v@example.com', phone='1', message='Hi')
        other = make_user('other@example.com', role='channel')
        Inquiry.objects.create(partner=other, name='W', email='w@example.com', phone='2', message='Hello')
        self.client.force_authenticate(user=self.partner)

        response = self.client.get(reverse('leads:inquiry-list'))
        self.assertEqual(response.data['count'], 1)

    def test_inquiry_status_patch(self):
        inquiry = Inquiry.objects.create(
            partner=self.partner, name='V', email='v@example.com', phone='1', message='Hi'
        )
        self.client.force_authenticate(user=self.partner)
        response = self.client.patch(
            reverse('leads:inquiry-detail', args=[inquiry.pk]), {'status': Inquiry.STATUS_CONTACTED}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Inquiry.STATUS_CONTACTED)

    def test_customer_posts_requirement(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.post(reverse('leads:requirement-list'), {
            'name': 'Cara', 'email': 'cara@example.com', 'phone': '9876500000',
            'property_type': 'Apartment', 'preferred_location': 'Baner',
            'min_budget': '4000000', 'max_budget': '6000000', 'amenities': ['Gym'],
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Requirement.objects.get().user, self.customer)

    def test_requirement_budget_order(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.post(reverse('leads:requirement-list'), {
            'name': 'Cara', 'email': 'cara@example.com', 'phone': '9876500000',
            'property_type': 'Apartment', 'preferred_location': 'Baner',
            'min_budget': '7000000', 'max_budget': '6000000',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('max_budget', response.data)
