"""
Support models for the DealFlow platform.

- ResourceCategory / Resource: the resource centre (articles, videos, FAQs)
- SupportTicket: user tickets worked by admins
- Message: direct messages and group announcements with per-user read flags
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

logger = logging.getLogger(__name__)


# =============================================================================
# RESOURCE CENTRE
# =============================================================================

class ResourceCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Resource Category'
        verbose_name_plural = 'Resource Categories'

    def __str__(self):
        return self.name


class Resource(models.Model):
    """
    One resource centre entry.

    The content field used depends on content_type: article_content for
    articles, video_url for videos and faqs ([{question, answer}]) for FAQs.
    """

    TYPE_ARTICLE = 'article'
    TYPE_VIDEO = 'video'
    TYPE_FAQ = 'faq'

    TYPE_CHOICES = [
        (TYPE_ARTICLE, 'Article'),
        (TYPE_VIDEO, 'Video'),
        (TYPE_FAQ, 'FAQ'),
    ]

    title = models.CharField(max_length=200)
    category = models.ForeignKey(
        ResourceCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='resources'
    )
    content_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_ARTICLE)
    feature_image = models.FileField(upload_to='resources/', blank=True)
    article_content = models.TextField(blank=True)
    video_url = models.URLField(blank=True)
    faqs = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def clean(self):
        if self.content_type == self.TYPE_ARTICLE and not self.article_content.strip():
            raise ValidationError({'article_content': 'Article content is required.'})
        if self.content_type == self.TYPE_VIDEO and not self.video_url:
            raise ValidationError({'video_url': 'A video URL is required.'})
        if self.content_type == self.TYPE_FAQ and not self.faqs:
            raise ValidationError({'faqs': 'Add at least one question.'})


# =============================================================================
# SUPPORT TICKETS
# =============================================================================

class SupportTicket(models.Model):
    CATEGORY_CHOICES = [
        ('Article', 'Article'),
        ('Video', 'Video'),
        ('FAQs', 'FAQs'),
        ('T&C', 'T&C'),
        ('Property', 'Property'),
        ('Other', 'Other'),
    ]

    STATUS_OPEN = 'Open'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_CLOSED = 'Closed'

    STATUS_CHOICES = [
        (STATUS_OPEN, 'Open'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_CLOSED, 'Closed'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='support_tickets')
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    item_id = models.CharField(max_length=50, blank=True)
    item_title = models.CharField(max_length=255, blank=True)
    subject = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    resolution_details = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Support Ticket'
        verbose_name_plural = 'Support Tickets'

    def __str__(self):
        return f"#{self.pk} {self.subject} ({self.status})"


# =============================================================================
# MESSAGES
# =============================================================================

GROUP_ALL_PARTNERS = 'ALL_PARTNERS'
GROUP_ALL_SELLERS = 'ALL_SELLERS'
GROUP_ALL_USERS = 'ALL_USERS'

GROUP_CHOICES = [
    (GROUP_ALL_PARTNERS, 'All Partners'),
    (GROUP_ALL_SELLERS, 'All Sellers'),
    (GROUP_ALL_USERS, 'All Users'),
]


class Message(models.Model):
    """
    A message to one user or an announcement to a recipient group.

    Exactly one of recipient and recipient_group is set. read_by maps
    user codes to True once the user has opened the message.
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='sent_messages'
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='received_messages'
    )
    recipient_group = models.CharField(max_length=20, choices=GROUP_CHOICES, blank=True, db_index=True)
    subject = models.CharField(max_length=200)
    body = models.TextField(help_text="HTML body")
    is_announcement = models.BooleanField(default=False)
    read_by = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.subject

    @property
    def recipient_name(self):
        if self.recipient_id:
            return self.recipient.display_name
        return self.get_recipient_group_display()

    def is_read_by(self, user):
        return bool((self.read_by or {}).get(user.user_code))
