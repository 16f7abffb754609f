from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Badge, LoyaltyTier, LoyaltyMember, MemberBadge, PointsTransaction, PurchaseRecord, TierUpgradeLog


@admin.register(LoyaltyTier)
class LoyaltyTierAdmin(admin.ModelAdmin):
    """Admin interface for loyalty tiers"""

    list_display = [
        'display_name', 'name', 'level', 'min_points', 'min_spending',
        'points_multiplier', 'discount_percentage', 'spin_multiplier', 'member_count'
    ]
    search_fields = ['name', 'display_name']
    ordering = ['level']
    readonly_fields = ['created_at', 'updated_at', 'member_count']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'display_name', 'level')
        }),
        ('Thresholds', {
            'fields': ('min_points', 'min_spending')
        }),
        ('Benefits', {
            'fields': ('points_multiplier', 'discount_percentage', 'spin_multiplier', 'benefits')
        }),
        ('Statistics', {
            'fields': ('member_count',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Count of members in this tier"""
        count = obj.members.count()
        if count > 0:
            url = reverse('admin:loyalty_loyaltymember_changelist')
            return format_html(
                '<a href="{}?tier__id__exact={}">{} members</a>',
                url, obj.id, count
            )
        return '0 members'
    member_count.short_description = 'Members'

    def has_delete_permission(self, request, obj=None):
        # Tiers with members cannot be removed
        if obj and obj.members.exists():
            return False
        return super().has_delete_permission(request, obj)


class PointsTransactionInline(admin.TabularInline):
    model = PointsTransaction
    extra = 0
    can_delete = False
    readonly_fields = ['transaction_type', 'amount', 'balance_after', 'description', 'reference_id', 'campaign', 'created_at']
    ordering = ['-created_at']


@admin.register(LoyaltyMember)
class LoyaltyMemberAdmin(admin.ModelAdmin):
    list_display = ['user', 'tier', 'points', 'lifetime_points', 'total_spent', 'orders_count', 'available_spins']
    list_filter = ['tier']
    search_fields = ['user__username', 'user__email']
    raw_id_fields = ['user']
    readonly_fields = ['lifetime_points', 'total_spent', 'orders_count', 'total_spins',
                       'spin_tokens_awarded', 'tier_updated_at', 'joined_at', 'updated_at']
    inlines = [PointsTransactionInline]


@admin.register(PointsTransaction)
class PointsTransactionAdmin(admin.ModelAdmin):
    list_display = ['member', 'transaction_type', 'amount', 'balance_after', 'reference_id', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['member__user__username', 'reference_id', 'description']
    readonly_fields = ['created_at']


@admin.register(PurchaseRecord)
class PurchaseRecordAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'member', 'subtotal', 'points_earned', 'tier_multiplier', 'boost_multiplier', 'created_at']
    search_fields = ['order_id', 'member__user__username']


@admin.register(TierUpgradeLog)
class TierUpgradeLogAdmin(admin.ModelAdmin):
    list_display = ['member', 'from_tier', 'to_tier', 'points_at_change', 'spent_at_change', 'reason', 'created_at']
    list_filter = ['to_tier', 'created_at']
    search_fields = ['member__user__username', 'reason']
    readonly_fields = ['created_at']


@admin.register(Badge)
class BadgeAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'category', 'rarity', 'created_at']
    list_filter = ['category', 'rarity']
    search_fields = ['code', 'name']


@admin.register(MemberBadge)
class MemberBadgeAdmin(admin.ModelAdmin):
    list_display = ['member', 'badge', 'earned_at']
    list_filter = ['badge']
    search_fields = ['member__user__username', 'badge__code']
    raw_id_fields = ['member']
