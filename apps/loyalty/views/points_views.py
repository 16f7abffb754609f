"""
Points history, redemption and order accrual views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response, paginated_response
from ..models import PointsTransaction
from ..serializers import PointsTransactionListSerializer, ProcessOrderSerializer, RedeemPointsSerializer
from ..services import LoyaltyService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_points_history(request):
    """Get user's points transaction history"""
    member = LoyaltyService.get_or_create_member(request.user)
    transaction_type = request.GET.get('type')
    if transaction_type and transaction_type not in dict(PointsTransaction.TRANSACTION_TYPES):
        return error_response(f'Unknown transaction type: {transaction_type}')

    transactions = LoyaltyService.points_history(member, transaction_type)
    return paginated_response(transactions, PointsTransactionListSerializer, request)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_points(request):
    """Redeem points for an order discount"""
    serializer = RedeemPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    result = LoyaltyService.redeem_points(
        request.user,
        serializer.validated_data['points'],
        order_id=serializer.validated_data.get('order_id') or None,
    )
    return success_response(result, 'Points redeemed successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def process_order(request):
    """Credit loyalty points for a completed order"""
    serializer = ProcessOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid input', serializer.errors)

    result = LoyaltyService.process_order(
        request.user,
        serializer.validated_data['order_id'],
        serializer.validated_data['subtotal'],
    )
    message = 'Order already processed' if result['duplicate'] else 'Order processed successfully'
    return success_response(result, message)
