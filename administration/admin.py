from django.contrib import admin

from .models import AppSetting


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'updated_at']
    readonly_fields = ['updated_at']
    search_fields = ['key']
