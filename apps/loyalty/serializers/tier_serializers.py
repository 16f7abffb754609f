"""
Loyalty tier serializers.
"""
from rest_framework import serializers
from ..models import LoyaltyTier, TierUpgradeLog


class LoyaltyTierSerializer(serializers.ModelSerializer):
    """
    Serializer for loyalty tier information.
    Used for nested serialization in member profiles and upgrade logs.
    """
    class Meta:
        model = LoyaltyTier
        fields = ['name', 'display_name', 'level', 'min_points', 'min_spending',
                  'points_multiplier', 'discount_percentage', 'spin_multiplier', 'benefits']
        read_only_fields = fields


class TierUpgradeLogSerializer(serializers.ModelSerializer):
    from_tier = serializers.CharField(source='from_tier.name', read_only=True, default=None)
    to_tier = serializers.CharField(source='to_tier.name', read_only=True)

    class Meta:
        model = TierUpgradeLog
        fields = ['from_tier', 'to_tier', 'points_at_change', 'spent_at_change', 'reason', 'created_at']
        read_only_fields = fields
