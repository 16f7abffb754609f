from django.contrib import admin

from .models import SpinWheel, SpinSegment, SpinResult


class SpinSegmentInline(admin.TabularInline):
    model = SpinSegment
    extra = 1


@admin.register(SpinWheel)
class SpinWheelAdmin(admin.ModelAdmin):
    list_display = ['name', 'campaign', 'is_active', 'max_spins_per_user', 'cooldown_hours', 'total_spins', 'rewards_given']
    list_filter = ['is_active']
    search_fields = ['name', 'title']
    readonly_fields = ['total_spins', 'rewards_given', 'conversions', 'created_at', 'updated_at']
    inlines = [SpinSegmentInline]


@admin.register(SpinResult)
class SpinResultAdmin(admin.ModelAdmin):
    list_display = ['member', 'wheel', 'reward_type', 'reward_value', 'coupon', 'redeemed', 'created_at']
    list_filter = ['reward_type', 'redeemed', 'wheel']
    search_fields = ['member__user__username']
    readonly_fields = ['created_at']
