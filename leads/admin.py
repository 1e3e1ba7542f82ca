"""
Leads Admin - DealFlow Backend
Django admin configuration for leads, appointments, enquiries and requirements.
"""

from django.contrib import admin

from .models import Appointment, Inquiry, Lead, Requirement


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class AppointmentInline(admin.TabularInline):
    model = Appointment
    extra = 0
    fields = ['visit_date', 'status', 'visit_proof', 'rejection_reason']
    readonly_fields = ['visit_proof']


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'partner', 'property', 'status', 'deal_status', 'is_copy', 'created_at']
    list_filter = ['status', 'deal_status', 'is_copy', 'earning_credited']
    search_fields = ['name', 'email', 'phone', 'partner__user_code']
    readonly_fields = ['forwarded_to', 'is_copy', 'original_lead', 'earning_credited', 'created_at', 'updated_at']
    raw_id_fields = ['property', 'partner', 'customer']
    inlines = [AppointmentInline]

    fieldsets = (
        ('Contact', {'fields': ('name', 'email', 'phone', 'city', 'state', 'country', 'notes')}),
        ('Assignment', {'fields': ('property', 'partner', 'customer')}),
        ('Workflow', {'fields': ('status', 'deal_status', 'sale_amount', 'earning_credited')}),
        ('Forwarding', {'fields': ('forwarded_to', 'is_copy', 'original_lead'), 'classes': ('collapse',)}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['lead', 'property', 'partner', 'visit_date', 'status']
    list_filter = ['status', 'visit_date']
    search_fields = ['lead__name', 'partner__user_code', 'property__title']
    raw_id_fields = ['lead', 'property', 'partner', 'customer']


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'phone', 'partner', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'email', 'phone', 'partner__user_code']


@admin.register(Requirement)
class RequirementAdmin(admin.ModelAdmin):
    list_display = ['name', 'property_type', 'preferred_location', 'min_budget', 'max_budget', 'created_at']
    list_filter = ['furnishing']
    search_fields = ['name', 'email', 'preferred_location']
