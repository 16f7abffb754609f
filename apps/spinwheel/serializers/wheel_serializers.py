"""
Spin wheel serializers with nested segments.
"""
from django.db import transaction
from rest_framework import serializers

from ..models import SpinWheel, SpinSegment, SpinResult
from ..services import SpinWheelResolver


class SpinSegmentSerializer(serializers.ModelSerializer):
    reward_label = serializers.CharField(read_only=True)

    class Meta:
        model = SpinSegment
        fields = ['id', 'name', 'reward_type', 'value', 'probability', 'color', 'icon', 'position', 'reward_label']
        read_only_fields = ['id', 'reward_label']


class SpinWheelSerializer(serializers.ModelSerializer):
    """
    Serializer for admin wheel management.
    Segments are replaced as a whole when supplied on update.
    """
    segments = SpinSegmentSerializer(many=True)
    total_probability = serializers.SerializerMethodField()

    class Meta:
        model = SpinWheel
        fields = [
            'id', 'name', 'title', 'description', 'campaign', 'is_active', 'max_spins_per_user',
            'cooldown_hours', 'start_date', 'end_date', 'segments', 'total_probability',
            'total_spins', 'rewards_given', 'conversions', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'total_spins', 'rewards_given', 'conversions', 'created_at', 'updated_at']

    def get_total_probability(self, obj):
        return obj.total_probability()

    def validate_segments(self, value):
        if not value:
            raise serializers.ValidationError("A wheel needs at least one segment")
        try:
            SpinWheelResolver.validate_probabilities([segment['probability'] for segment in value])
        except ValueError as e:
            raise serializers.ValidationError(str(e))
        return value

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and start >= end:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return attrs

    def _write_segments(self, wheel, segments):
        wheel.segments.all().delete()
        SpinSegment.objects.bulk_create([
            SpinSegment(wheel=wheel, **{'position': index, **segment})
            for index, segment in enumerate(segments)
        ])

    @transaction.atomic
    def create(self, validated_data):
        segments = validated_data.pop('segments')
        wheel = SpinWheel.objects.create(**validated_data)
        self._write_segments(wheel, segments)
        return wheel

    @transaction.atomic
    def update(self, instance, validated_data):
        segments = validated_data.pop('segments', None)
        instance = super().update(instance, validated_data)
        if segments is not None:
            self._write_segments(instance, segments)
        return instance


class SpinResultSerializer(serializers.ModelSerializer):
    """
    Serializer for a member's spin outcome.
    Used for: POST /api/loyalty/spin-wheel/spin/ and spin history
    """
    segment = SpinSegmentSerializer(read_only=True)
    wheel = serializers.CharField(source='wheel.name', read_only=True)
    coupon_code = serializers.CharField(source='coupon.code', read_only=True, default=None)
    coupon_expires_at = serializers.DateTimeField(source='coupon.valid_until', read_only=True, default=None)
    reward_label = serializers.CharField(read_only=True)
    is_no_win = serializers.BooleanField(read_only=True)

    class Meta:
        model = SpinResult
        fields = [
            'id', 'wheel', 'segment', 'reward_type', 'reward_value', 'reward_label', 'is_no_win',
            'coupon_code', 'coupon_expires_at', 'redeemed', 'created_at'
        ]
        read_only_fields = fields
