"""
Campaign serializers for public listing and admin management.
"""
from rest_framework import serializers
from ..models import Campaign, CampaignHistory
from ..services.campaign_service import COMPONENT_METRICS, TOP_LEVEL_METRICS
from ..services.eligibility import EligibilityEvaluator

KNOWN_RULE_KEYS = set(EligibilityEvaluator.PREDICATES) - {'accountAge'} | {'minAccountAgeDays', 'maxAccountAgeDays'}


class CampaignPublicSerializer(serializers.ModelSerializer):
    """
    Serializer for shopper-facing campaign display.
    Used for: GET /api/promotions/active/
    """
    campaign_type_display = serializers.CharField(source='get_campaign_type_display', read_only=True)

    class Meta:
        model = Campaign
        fields = [
            'id', 'name', 'description', 'campaign_type', 'campaign_type_display',
            'start_date', 'end_date', 'priority', 'banners',
            'allow_multiple_coupons', 'max_discount_percentage', 'points_multiplier'
        ]
        read_only_fields = fields


class CampaignHistorySerializer(serializers.ModelSerializer):
    actor = serializers.CharField(source='actor.username', read_only=True, default=None)

    class Meta:
        model = CampaignHistory
        fields = ['action', 'actor', 'details', 'created_at']
        read_only_fields = fields


class CampaignSerializer(serializers.ModelSerializer):
    """
    Serializer for admin campaign management.
    Used for: /api/admin/campaigns/
    """
    created_by = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Campaign
        fields = [
            'id', 'name', 'description', 'campaign_type', 'status', 'start_date', 'end_date',
            'priority', 'target_audience', 'eligibility_rules', 'allow_multiple_coupons',
            'max_discount_percentage', 'points_multiplier', 'banners', 'performance',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'status', 'performance', 'created_by', 'created_at', 'updated_at']

    def validate_eligibility_rules(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Eligibility rules must be an object")
        unknown = set(value) - KNOWN_RULE_KEYS
        if unknown:
            raise serializers.ValidationError(f"Unknown eligibility rules: {', '.join(sorted(unknown))}")
        errors = EligibilityEvaluator.rule_errors(value)
        if errors:
            raise serializers.ValidationError(errors)
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and start >= end:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return attrs


class TrackEventSerializer(serializers.Serializer):
    metric = serializers.CharField(max_length=20)
    component = serializers.ChoiceField(choices=sorted(COMPONENT_METRICS), required=False, allow_null=True)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, default=1, min_value=0)

    def validate(self, attrs):
        component = attrs.get('component')
        metric = attrs['metric']
        if component:
            if metric not in COMPONENT_METRICS[component]:
                raise serializers.ValidationError({'metric': f'Unknown {component} metric'})
        elif metric not in TOP_LEVEL_METRICS:
            raise serializers.ValidationError({'metric': 'Unknown metric'})
        return attrs
