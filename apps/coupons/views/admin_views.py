"""
Admin coupon management with RESTful API design.
"""
from django.db.models import Q

from apps.common.permissions import IsAdminRole
from apps.common.viewsets import EnvelopeModelViewSet
from ..models import Coupon
from ..serializers import CouponSerializer


class CouponAdminViewSet(EnvelopeModelViewSet):
    """
    RESTful API for coupon management.

    Endpoints:
    - GET/POST /api/admin/coupons/
    - GET/PUT/PATCH/DELETE /api/admin/coupons/{id}/
    """
    serializer_class = CouponSerializer
    permission_classes = [IsAdminRole]
    resource_name = 'Coupon'

    def get_queryset(self):
        queryset = Coupon.objects.select_related('campaign').order_by('-created_at')
        params = self.request.query_params
        if params.get('campaign'):
            queryset = queryset.filter(campaign_id=params['campaign'])
        if params.get('event_type'):
            queryset = queryset.filter(event_type=params['event_type'])
        if params.get('is_active') in ('true', 'false'):
            queryset = queryset.filter(is_active=params['is_active'] == 'true')
        if params.get('search'):
            queryset = queryset.filter(Q(code__icontains=params['search']) | Q(name__icontains=params['search']))
        return queryset
