"""
Support Admin - DealFlow Backend
Django admin configuration for resources, tickets and messages.
"""

from django.contrib import admin

from .models import Message, Resource, ResourceCategory, SupportTicket


@admin.register(ResourceCategory)
class ResourceCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'content_type', 'created_at']
    list_filter = ['content_type', 'category']
    search_fields = ['title']


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ['id', 'subject', 'user', 'category', 'status', 'created_at']
    list_filter = ['status', 'category']
    search_fields = ['subject', 'description', 'user__user_code']
    readonly_fields = ['user', 'created_at', 'updated_at']


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['subject', 'sender', 'recipient', 'recipient_group', 'is_announcement', 'created_at']
    list_filter = ['is_announcement', 'recipient_group']
    search_fields = ['subject', 'sender__user_code', 'recipient__user_code']
    readonly_fields = ['read_by', 'created_at']
    raw_id_fields = ['sender', 'recipient']
