"""
Admin campaign management with RESTful API design.
"""
from rest_framework.decorators import action

from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response
from apps.common.viewsets import EnvelopeModelViewSet
from ..models import Campaign
from ..serializers import CampaignSerializer
from ..services import CampaignService


class CampaignAdminViewSet(EnvelopeModelViewSet):
    """
    RESTful API for campaign management.

    Endpoints:
    - GET/POST /api/admin/campaigns/
    - GET/PUT/PATCH/DELETE /api/admin/campaigns/{id}/
    - POST /api/admin/campaigns/{id}/activate/
    - POST /api/admin/campaigns/{id}/pause/
    - POST /api/admin/campaigns/{id}/complete/
    - GET /api/admin/campaigns/{id}/analytics/
    """
    serializer_class = CampaignSerializer
    permission_classes = [IsAdminRole]
    resource_name = 'Campaign'

    def get_queryset(self):
        queryset = Campaign.objects.select_related('created_by')
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        campaign_type = self.request.query_params.get('type')
        if campaign_type:
            queryset = queryset.filter(campaign_type=campaign_type)
        return queryset

    def perform_create(self, serializer):
        campaign = serializer.save(created_by=self.request.user)
        campaign.record_history('created', self.request.user)

    def perform_update(self, serializer):
        campaign = serializer.save()
        campaign.record_history('updated', self.request.user, {'fields': sorted(serializer.validated_data)})

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        campaign = CampaignService.activate(self.get_object(), request.user)
        return success_response(self.get_serializer(campaign).data, 'Campaign activated successfully')

    @action(detail=True, methods=['post'])
    def pause(self, request, pk=None):
        campaign = CampaignService.pause(self.get_object(), request.user)
        return success_response(self.get_serializer(campaign).data, 'Campaign paused successfully')

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        campaign = CampaignService.complete(self.get_object(), request.user)
        return success_response(self.get_serializer(campaign).data, 'Campaign completed successfully')

    @action(detail=True, methods=['get'])
    def analytics(self, request, pk=None):
        return success_response(CampaignService.analytics(self.get_object()))
