"""
Admin spin wheel management with RESTful API design.
"""
import logging

from rest_framework.decorators import action

from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response
from apps.common.viewsets import EnvelopeModelViewSet
from ..models import SpinWheel
from ..serializers import SpinWheelSerializer
from ..services import SpinService

logger = logging.getLogger(__name__)


class SpinWheelAdminViewSet(EnvelopeModelViewSet):
    """
    RESTful API for spin wheel management.

    Endpoints:
    - GET/POST /api/admin/spin-wheels/
    - GET/PUT/PATCH/DELETE /api/admin/spin-wheels/{id}/
    - POST /api/admin/spin-wheels/{id}/toggle/
    - GET /api/admin/spin-wheels/{id}/analytics/
    """
    serializer_class = SpinWheelSerializer
    permission_classes = [IsAdminRole]
    resource_name = 'Spin wheel'

    def get_queryset(self):
        return SpinWheel.objects.prefetch_related('segments').select_related('campaign')

    @action(detail=True, methods=['post'])
    def toggle(self, request, pk=None):
        wheel = self.get_object()
        wheel.is_active = not wheel.is_active
        wheel.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Spin wheel {wheel.id} {'activated' if wheel.is_active else 'deactivated'}")
        return success_response(self.get_serializer(wheel).data, 'Spin wheel updated successfully')

    @action(detail=True, methods=['get'])
    def analytics(self, request, pk=None):
        return success_response(SpinService.analytics(self.get_object()))
