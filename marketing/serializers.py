"""
API Serializers for marketing kits and partner micro-sites.
"""

from rest_framework import serializers

from properties.models import Property

from .models import (
    MAX_FEATURED_PROPERTIES,
    SOCIAL_NETWORKS,
    KitFile,
    MarketingKit,
    PartnerWebsite,
    WebsiteSlide,
)
from . import services as marketing_services


# =============================================================================
# MARKETING KITS
# =============================================================================

class KitFileSerializer(serializers.ModelSerializer):
    class Meta:
        model = KitFile
        fields = ['id', 'name', 'file']
        read_only_fields = ['id']


class MarketingKitSerializer(serializers.ModelSerializer):
    """
    Kit with its files.

    Files are uploaded alongside the kit as repeated 'uploaded_files' parts
    of a multipart request.
    """

    files = KitFileSerializer(many=True, read_only=True)
    uploaded_files = serializers.ListField(
        child=serializers.FileField(), write_only=True, required=False
    )

    class Meta:
        model = MarketingKit
        fields = ['id', 'kit_code', 'title', 'kit_type', 'feature_image', 'files', 'uploaded_files', 'created_at']
        read_only_fields = ['id', 'kit_code', 'created_at']

    def create(self, validated_data):
        uploads = validated_data.pop('uploaded_files', [])
        kit = MarketingKit.objects.create(**validated_data)
        for upload in uploads:
            KitFile.objects.create(kit=kit, file=upload)
        return kit


# =============================================================================
# MICRO-SITE SECTIONS
# =============================================================================

class WebsiteSlideSerializer(serializers.ModelSerializer):
    class Meta:
        model = WebsiteSlide
        fields = ['id', 'title', 'banner_image', 'link_url', 'position']
        read_only_fields = ['id']


class BusinessProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerWebsite
        fields = ['business_name', 'business_logo']


class ContactDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerWebsite
        fields = ['contact_name', 'contact_phone', 'contact_email', 'contact_address']


class AboutLegalSerializer(serializers.ModelSerializer):
    class Meta:
        model = PartnerWebsite
        fields = ['about_text', 'terms_file', 'privacy_file', 'disclaimer_file']


class SocialLinksSerializer(serializers.Serializer):
    """Each network is a valid URL or empty."""

    website = serializers.URLField(required=False, allow_blank=True, default='')
    instagram = serializers.URLField(required=False, allow_blank=True, default='')
    facebook = serializers.URLField(required=False, allow_blank=True, default='')
    youtube = serializers.URLField(required=False, allow_blank=True, default='')
    twitter = serializers.URLField(required=False, allow_blank=True, default='')
    linkedin = serializers.URLField(required=False, allow_blank=True, default='')

    def update(self, instance, validated_data):
        instance.social_links = {network: validated_data.get(network, '') for network in SOCIAL_NETWORKS}
        instance.save(update_fields=['social_links', 'updated_at'])
        return instance

    def to_representation(self, instance):
        links = instance.social_links if isinstance(instance, PartnerWebsite) else instance
        return {network: (links or {}).get(network, '') for network in SOCIAL_NETWORKS}


class FeaturedCatalogSerializer(serializers.Serializer):
    featured_catalog = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        max_length=MAX_FEATURED_PROPERTIES,
        allow_empty=True,
    )

    def validate_featured_catalog(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError("Featured properties must be unique.")
        found = set(Property.objects.filter(pk__in=value).values_list('pk', flat=True))
        missing = [pk for pk in value if pk not in found]
        if missing:
            raise serializers.ValidationError(f"Unknown property ids: {missing}")
        return value

    def update(self, instance, validated_data):
        instance.featured_catalog = validated_data['featured_catalog']
        instance.save(update_fields=['featured_catalog', 'updated_at'])
        return instance

    def to_representation(self, instance):
        return {'featured_catalog': instance.featured_catalog}


class PartnerWebsiteSerializer(serializers.ModelSerializer):
    slides = WebsiteSlideSerializer(many=True, read_only=True)
    site_url = serializers.SerializerMethodField()

    class Meta:
        model = PartnerWebsite
        fields = [
            'business_name', 'business_logo',
            'contact_name', 'contact_phone', 'contact_email', 'contact_address',
            'about_text', 'terms_file', 'privacy_file', 'disclaimer_file',
            'social_links', 'featured_catalog', 'slides', 'site_url', 'updated_at',
        ]
        read_only_fields = fields

    def get_site_url(self, obj):
        return marketing_services.site_url(obj.partner)


# =============================================================================
# PUBLIC SITE
# =============================================================================

class SiteContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    message = serializers.CharField()
