"""
Marketing Admin - DealFlow Backend
Django admin configuration for marketing kits and partner micro-sites.
"""

from django.contrib import admin

from .models import KitFile, MarketingKit, PartnerWebsite, WebsiteSlide


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class KitFileInline(admin.TabularInline):
    model = KitFile
    extra = 1
    fields = ['name', 'file']


class WebsiteSlideInline(admin.TabularInline):
    model = WebsiteSlide
    extra = 0
    fields = ['position', 'title', 'banner_image', 'link_url']


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(MarketingKit)
class MarketingKitAdmin(admin.ModelAdmin):
    list_display = ['kit_code', 'title', 'kit_type', 'file_count', 'created_at']
    list_filter = ['kit_type']
    search_fields = ['kit_code', 'title']
    readonly_fields = ['kit_code', 'created_by', 'created_at']
    inlines = [KitFileInline]

    def file_count(self, obj):
        return obj.files.count()
    file_count.short_description = 'Files'


@admin.register(PartnerWebsite)
class PartnerWebsiteAdmin(admin.ModelAdmin):
    list_display = ['partner', 'business_name', 'contact_email', 'updated_at']
    search_fields = ['partner__user_code', 'business_name', 'contact_email']
    raw_id_fields = ['partner']
    readonly_fields = ['updated_at']
    inlines = [WebsiteSlideInline]

    fieldsets = (
        ('Partner', {'fields': ('partner',)}),
        ('Business Profile', {'fields': ('business_name', 'business_logo')}),
        ('Contact Details', {'fields': ('contact_name', 'contact_phone', 'contact_email', 'contact_address')}),
        ('About & Legal', {'fields': ('about_text', 'terms_file', 'privacy_file', 'disclaimer_file')}),
        ('Links & Catalog', {'fields': ('social_links', 'featured_catalog')}),
        ('Timestamps', {'fields': ('updated_at',), 'classes': ('collapse',)}),
    )
