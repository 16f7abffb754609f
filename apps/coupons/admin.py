from django.contrib import admin

from .models import Coupon, CouponRedemption


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'coupon_type', 'value', 'campaign', 'usage_count', 'usage_limit', 'valid_until', 'is_active']
    list_filter = ['coupon_type', 'event_type', 'is_active', 'is_spin_generated']
    search_fields = ['code', 'name']
    raw_id_fields = ['generated_for']
    readonly_fields = ['usage_count', 'created_at', 'updated_at']


@admin.register(CouponRedemption)
class CouponRedemptionAdmin(admin.ModelAdmin):
    list_display = ['coupon', 'user', 'order_id', 'discount_amount', 'created_at']
    search_fields = ['coupon__code', 'order_id', 'user__username']
    readonly_fields = ['created_at']
