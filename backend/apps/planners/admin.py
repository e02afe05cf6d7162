"""
Django admin for planner couples and shared vendors
"""
from django.contrib import admin

from apps.planners.models import PlannerCouple, SharedVendor


class SharedVendorInline(admin.TabularInline):
    model = SharedVendor
    extra = 0
    fields = ['vendor_name', 'vendor_type', 'couple_status', 'planner_note', 'couple_note']


@admin.register(PlannerCouple)
class PlannerCoupleAdmin(admin.ModelAdmin):
    """Admin for PlannerCouple model"""

    list_display = ['couple_names', 'wedding_date', 'venue_name', 'is_active', 'last_activity']
    list_filter = ['is_active']
    search_fields = ['couple_names', 'couple_email', 'venue_name']
    readonly_fields = ['id', 'share_link_id', 'created_at', 'updated_at']
    inlines = [SharedVendorInline]


@admin.register(SharedVendor)
class SharedVendorAdmin(admin.ModelAdmin):
    list_display = ['vendor_name', 'vendor_type', 'planner_couple', 'couple_status']
    list_filter = ['couple_status', 'vendor_type']
    search_fields = ['vendor_name', 'planner_couple__couple_names']
