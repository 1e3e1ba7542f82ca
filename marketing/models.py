"""
Marketing models for the DealFlow platform.

- MarketingKit: downloadable poster/brochure bundles published by admins
- KitFile: one downloadable file of a kit
- PartnerWebsite: a partner's micro-site content, edited section by section
- WebsiteSlide: slideshow entries of a micro-site
"""

import logging

from django.conf import settings
from django.db import models

from services.business_logic import KIT_ID_PREFIX, generate_unique_user_code

logger = logging.getLogger(__name__)


MAX_FEATURED_PROPERTIES = 6

SOCIAL_NETWORKS = ['website', 'instagram', 'facebook', 'youtube', 'twitter', 'linkedin']


# =============================================================================
# MARKETING KITS
# =============================================================================

class MarketingKit(models.Model):
    TYPE_POSTER = 'Poster'
    TYPE_BROCHURE = 'Brochure'

    TYPE_CHOICES = [
        (TYPE_POSTER, 'Poster'),
        (TYPE_BROCHURE, 'Brochure'),
    ]

    kit_code = models.CharField(max_length=20, unique=True, blank=True)
    title = models.CharField(max_length=200)
    kit_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_POSTER)
    feature_image = models.FileField(upload_to='marketing/kits/', blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Marketing Kit'
        verbose_name_plural = 'Marketing Kits'

    def __str__(self):
        return f"{self.title} ({self.kit_code})"

    def save(self, *args, **kwargs):
        if not self.kit_code:
            self.kit_code = generate_unique_user_code(KIT_ID_PREFIX, MarketingKit, field='kit_code')
        super().save(*args, **kwargs)


class KitFile(models.Model):
    kit = models.ForeignKey(MarketingKit, on_delete=models.CASCADE, related_name='files')
    name = models.CharField(max_length=255, blank=True)
    file = models.FileField(upload_to='marketing/kit_files/')

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name or self.file.name

    def save(self, *args, **kwargs):
        if not self.name and self.file:
            self.name = self.file.name.rsplit('/', 1)[-1]
        super().save(*args, **kwargs)


# =============================================================================
# PARTNER MICRO-SITES
# =============================================================================

class PartnerWebsite(models.Model):
    """
    Micro-site content of one partner.

    Blank sections fall back to the platform's website defaults when the
    site is rendered (see marketing.services.render_site).
    """

    partner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='website'
    )

    # Business profile
    business_name = models.CharField(max_length=200, blank=True)
    business_logo = models.FileField(upload_to='marketing/logos/', blank=True)

    # Contact details
    contact_name = models.CharField(max_length=200, blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_address = models.TextField(blank=True)

    # About and legal
    about_text = models.TextField(blank=True)
    terms_file = models.FileField(upload_to='marketing/legal/', blank=True)
    privacy_file = models.FileField(upload_to='marketing/legal/', blank=True)
    disclaimer_file = models.FileField(upload_to='marketing/legal/', blank=True)

    social_links = models.JSONField(
        default=dict,
        blank=True,
        help_text="{network: url} for website, instagram, facebook, youtube, twitter, linkedin"
    )
    featured_catalog = models.JSONField(
        default=list,
        blank=True,
        help_text="Up to six property ids shown first on the micro-site"
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Partner Website'
        verbose_name_plural = 'Partner Websites'

    def __str__(self):
        return f"Website of {self.partner.user_code}"


class WebsiteSlide(models.Model):
    website = models.ForeignKey(PartnerWebsite, on_delete=models.CASCADE, related_name='slides')
    title = models.CharField(max_length=200)
    banner_image = models.FileField(upload_to='marketing/slides/', blank=True)
    link_url = models.URLField(blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return self.title
