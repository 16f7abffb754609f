"""
Badge and leaderboard serializers.
"""
from rest_framework import serializers
from ..models import LoyaltyMember, MemberBadge


class MemberBadgeSerializer(serializers.ModelSerializer):
    code = serializers.CharField(source='badge.code', read_only=True)
    name = serializers.CharField(source='badge.name', read_only=True)
    description = serializers.CharField(source='badge.description', read_only=True)
    icon = serializers.CharField(source='badge.icon', read_only=True)
    category = serializers.CharField(source='badge.category', read_only=True)
    rarity = serializers.CharField(source='badge.rarity', read_only=True)

    class Meta:
        model = MemberBadge
        fields = ['code', 'name', 'description', 'icon', 'category', 'rarity', 'earned_at']
        read_only_fields = fields


class LeaderboardEntrySerializer(serializers.ModelSerializer):
    """
    Serializer for one leaderboard row.
    Used for: GET /api/loyalty/leaderboard/
    """
    username = serializers.CharField(source='user.username', read_only=True)
    avatar = serializers.CharField(source='user.avatar', read_only=True, default=None)
    tier = serializers.CharField(source='tier.name', read_only=True)
    badges = MemberBadgeSerializer(many=True, read_only=True)

    class Meta:
        model = LoyaltyMember
        fields = ['username', 'avatar', 'tier', 'lifetime_points', 'badges']
        read_only_fields = fields
