"""
Accounts Admin - DealFlow Backend
Django admin configuration for users, registration payments and team requests.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html

from .models import RegistrationPayment, TeamRequest, User, UserDocument


# =============================================================================
# INLINE ADMIN CLASSES
# =============================================================================

class RegistrationPaymentInline(admin.TabularInline):
    """Registration fee attempts within the user admin"""
    model = RegistrationPayment
    extra = 0
    fields = ['merchant_transaction_id', 'amount', 'status', 'provider_reference_id', 'created_at']
    readonly_fields = fields
    can_delete = False


# =============================================================================
# MAIN ADMIN CLASSES
# =============================================================================

@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Admin interface for every platform user.

    Features:
    - Filtering by role, status, KYC and payment status
    - Search by code, name, email and phone
    - Inline registration payments
    """

    list_display = [
        'user_code',
        'display_name',
        'email',
        'role',
        'status_badge',
        'kyc_status',
        'payment_status',
        'created_at',
    ]

    list_filter = ['role', 'status', 'kyc_status', 'payment_status', 'created_at']
    search_fields = ['user_code', 'name', 'first_name', 'last_name', 'email', 'phone']
    ordering = ['-created_at']
    readonly_fields = ['user_code', 'last_login', 'date_joined', 'created_at', 'updated_at']

    fieldsets = (
        ('Identity', {
            'fields': ('user_code', 'email', 'password', 'name', 'first_name', 'last_name', 'role', 'status'),
            'classes': ('wide',)
        }),
        ('Contact', {
            'fields': ('phone', 'whatsapp', 'address', 'city', 'state', 'pincode'),
        }),
        ('Personal', {
            'fields': ('profile_image', 'dob', 'gender', 'qualification'),
            'classes': ('collapse',)
        }),
        ('Business', {
            'fields': ('business_name', 'business_logo', 'business_type', 'gstn', 'business_age', 'area_covered'),
            'classes': ('collapse',)
        }),
        ('KYC', {
            'fields': (
                'kyc_status', 'aadhar_number', 'aadhar_file', 'pan_number', 'pan_file',
                'rera_number', 'rera_certificate',
            ),
        }),
        ('Registration Fee', {
            'fields': ('payment_status', 'payment_details'),
        }),
        ('Lifecycle', {
            'fields': (
                'deactivation_reason', 'reactivation_reason', 'suspension_reason',
                'rejection_reason', 'team_lead', 'upgrade_request',
            ),
            'classes': ('collapse',)
        }),
        ('Access', {
            'fields': ('permissions', 'is_staff', 'is_superuser', 'groups'),
            'classes': ('collapse',)
        }),
        ('System Metadata', {
            'fields': ('last_login', 'date_joined', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'role', 'status', 'password1', 'password2'),
        }),
    )

    raw_id_fields = ['team_lead']
    inlines = [RegistrationPaymentInline]
    list_per_page = 25

    def status_badge(self, obj):
        colour = 'green' if obj.status == 'active' else 'orange' if obj.status.startswith('pending') else 'red'
        return format_html('<span style="color: {};">{}</span>', colour, obj.get_status_display())
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'


@admin.register(RegistrationPayment)
class RegistrationPaymentAdmin(admin.ModelAdmin):
    list_display = ['merchant_transaction_id', 'user', 'amount', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['merchant_transaction_id', 'user__user_code', 'user__email', 'provider_reference_id']
    readonly_fields = ['created_at', 'updated_at', 'callback_payload']
    raw_id_fields = ['user']


@admin.register(TeamRequest)
class TeamRequestAdmin(admin.ModelAdmin):
    list_display = ['requester', 'recipient', 'status', 'requested_at', 'responded_at']
    list_filter = ['status']
    search_fields = ['requester__user_code', 'recipient__user_code']
    raw_id_fields = ['requester', 'recipient']


@admin.register(UserDocument)
class UserDocumentAdmin(admin.ModelAdmin):
    list_display = ['document_code', 'title', 'user', 'file_type', 'uploaded_at']
    search_fields = ['document_code', 'title', 'user__user_code', 'user__email']
    readonly_fields = ['document_code', 'uploaded_at']
    raw_id_fields = ['user']


# =============================================================================
# ADMIN SITE CUSTOMIZATION
# =============================================================================

admin.site.site_header = 'DealFlow Administration'
admin.site.site_title = 'DealFlow Admin'
admin.site.index_title = 'Partner Platform Management'
