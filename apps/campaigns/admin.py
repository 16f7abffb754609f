from django.contrib import admin

from .models import Campaign, CampaignHistory


class CampaignHistoryInline(admin.TabularInline):
    model = CampaignHistory
    extra = 0
    can_delete = False
    readonly_fields = ['action', 'actor', 'details', 'created_at']


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    """Admin interface for campaigns"""

    list_display = ['name', 'campaign_type', 'status', 'priority', 'start_date', 'end_date', 'points_multiplier']
    list_filter = ['campaign_type', 'status', 'target_audience']
    search_fields = ['name', 'description']
    readonly_fields = ['performance', 'created_by', 'created_at', 'updated_at']
    inlines = [CampaignHistoryInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'campaign_type', 'status', 'priority')
        }),
        ('Schedule', {
            'fields': ('start_date', 'end_date')
        }),
        ('Targeting', {
            'fields': ('target_audience', 'eligibility_rules')
        }),
        ('Rules', {
            'fields': ('allow_multiple_coupons', 'max_discount_percentage', 'points_multiplier')
        }),
        ('Components', {
            'fields': ('banners',)
        }),
        ('Statistics', {
            'fields': ('performance', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
