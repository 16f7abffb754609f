"""
Member-facing spin wheel views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response, paginated_response
from apps.spinwheel.models import SpinWheel
from apps.spinwheel.serializers import SpinResultSerializer
from apps.spinwheel.services import SpinService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_spin_eligibility(request):
    """Check whether the user can spin right now"""
    return success_response(SpinService.eligibility(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def spin_wheel(request):
    """Spin the requested wheel, or the current active wheel"""
    wheel = None
    wheel_id = request.data.get('wheel_id')
    if wheel_id:
        if not str(wheel_id).isdigit():
            return error_response('Spin wheel not found', status_code=404)
        wheel = SpinWheel.objects.filter(id=int(wheel_id)).first()
        if wheel is None:
            return error_response('Spin wheel not found', status_code=404)
    result = SpinService.spin(request.user, wheel=wheel)
    message = 'Better luck next time!' if result.is_no_win else f'You won: {result.reward_label}'
    return success_response(SpinResultSerializer(result).data, message)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_spin_history(request):
    """Get the user's past spins"""
    return paginated_response(SpinService.history(request.user), SpinResultSerializer, request)
