"""
Loyalty member serializers for profile, preferences and admin listing.
"""
from rest_framework import serializers
from ..models import LoyaltyMember
from .tier_serializers import LoyaltyTierSerializer
from .badge_serializers import MemberBadgeSerializer


class LoyaltyMemberListSerializer(serializers.ModelSerializer):
    """
    Serializer for member list view - minimal fields for list display.
    Used for: GET /api/loyalty/admin/members/
    """
    username = serializers.CharField(source='user.username', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    tier_name = serializers.CharField(source='tier.name', read_only=True)

    class Meta:
        model = LoyaltyMember
        fields = ['id', 'username', 'email', 'tier_name', 'points', 'lifetime_points',
                  'total_spent', 'orders_count', 'joined_at']
        read_only_fields = fields


class LoyaltyMemberSerializer(serializers.ModelSerializer):
    """
    Serializer for the member's own loyalty profile.
    Used for: GET /api/loyalty/profile/
    """
    tier = LoyaltyTierSerializer(read_only=True)
    badges = MemberBadgeSerializer(many=True, read_only=True)
    preferences = serializers.SerializerMethodField()

    class Meta:
        model = LoyaltyMember
        fields = ['tier', 'points', 'lifetime_points', 'total_spent', 'orders_count',
                  'available_spins', 'total_spins', 'last_spin_date', 'tier_updated_at',
                  'badges', 'preferences', 'joined_at']
        read_only_fields = fields

    def get_preferences(self, obj):
        return {
            'email_notifications': obj.email_notifications,
            'sms_notifications': obj.sms_notifications,
            'birthday_month': obj.birthday_month,
            'birthday_day': obj.birthday_day,
        }


class LoyaltyPreferencesSerializer(serializers.ModelSerializer):
    """
    Serializer for updating notification and birthday preferences.
    Used for: PUT /api/loyalty/preferences/
    """
    class Meta:
        model = LoyaltyMember
        fields = ['email_notifications', 'sms_notifications', 'birthday_month', 'birthday_day']

    def validate(self, attrs):
        month = attrs.get('birthday_month', getattr(self.instance, 'birthday_month', None))
        day = attrs.get('birthday_day', getattr(self.instance, 'birthday_day', None))
        if (month is None) != (day is None):
            raise serializers.ValidationError("Birthday month and day must be set together")
        return attrs
