"""
Points transaction and request serializers.
"""
from decimal import Decimal

from rest_framework import serializers
from ..models import PointsTransaction


class PointsTransactionListSerializer(serializers.ModelSerializer):
    """
    Serializer for points transaction list view.
    Used for: GET /api/loyalty/points/history/
    """
    transaction_type_display = serializers.CharField(source='get_transaction_type_display', read_only=True)
    campaign = serializers.CharField(source='campaign.name', read_only=True, default=None)

    class Meta:
        model = PointsTransaction
        fields = [
            'id', 'transaction_type', 'transaction_type_display', 'amount',
            'balance_after', 'description', 'reference_id', 'campaign', 'created_at'
        ]
        read_only_fields = fields


class ProcessOrderSerializer(serializers.Serializer):
    order_id = serializers.CharField(max_length=100)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))


class RedeemPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=1)
    order_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class AwardPointsSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    points = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=200)
    transaction_type = serializers.ChoiceField(choices=['bonus', 'adjustment'], default='bonus')
    campaign_id = serializers.IntegerField(required=False, allow_null=True)
