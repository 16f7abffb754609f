"""
Coupon serializers for shoppers and admin management.
"""
from decimal import Decimal

from rest_framework import serializers
from ..models import Coupon, CouponRedemption


class CouponPublicSerializer(serializers.ModelSerializer):
    """
    Serializer for coupons shown to shoppers.
    Used for: GET /api/coupons/available/
    """
    is_mini_coupon = serializers.BooleanField(read_only=True)

    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'name', 'description', 'coupon_type', 'value', 'minimum_order_amount',
            'maximum_discount', 'valid_from', 'valid_until', 'campaign', 'is_mini_coupon',
            'is_spin_generated', 'event_type', 'display_color', 'display_icon', 'display_message'
        ]
        read_only_fields = fields


class CouponSerializer(serializers.ModelSerializer):
    """
    Serializer for admin coupon management.
    Used for: /api/admin/coupons/
    """
    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'name', 'description', 'coupon_type', 'value', 'minimum_order_amount',
            'maximum_discount', 'valid_from', 'valid_until', 'usage_limit', 'usage_count',
            'per_user_limit', 'is_active', 'campaign', 'is_spin_generated', 'generated_for',
            'event_type', 'display_color', 'display_icon', 'display_message', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'usage_count', 'is_spin_generated', 'created_at', 'updated_at']

    def validate_code(self, value):
        code = value.strip().upper()
        duplicates = Coupon.objects.filter(code=code)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("A coupon with this code already exists")
        return code

    def validate(self, attrs):
        coupon_type = attrs.get('coupon_type', getattr(self.instance, 'coupon_type', None))
        value = attrs.get('value', getattr(self.instance, 'value', None))
        if coupon_type == 'percentage' and value is not None and value > 100:
            raise serializers.ValidationError({'value': 'Percentage discount cannot exceed 100'})

        valid_from = attrs.get('valid_from', getattr(self.instance, 'valid_from', None))
        valid_until = attrs.get('valid_until', getattr(self.instance, 'valid_until', None))
        if valid_from and valid_until and valid_from >= valid_until:
            raise serializers.ValidationError({'valid_until': 'Expiry must be after the start date'})
        return attrs


class CouponRedemptionSerializer(serializers.ModelSerializer):
    code = serializers.CharField(source='coupon.code', read_only=True)

    class Meta:
        model = CouponRedemption
        fields = ['id', 'code', 'order_id', 'discount_amount', 'created_at']
        read_only_fields = fields


class ValidateCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class QuoteRequestSerializer(serializers.Serializer):
    codes = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=False)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    campaign_id = serializers.IntegerField(required=False, allow_null=True)


class RedeemRequestSerializer(QuoteRequestSerializer):
    order_id = serializers.CharField(max_length=100)
