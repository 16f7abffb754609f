"""
Campaign serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .campaign_serializers import (
    CampaignPublicSerializer, CampaignHistorySerializer,
    CampaignSerializer, TrackEventSerializer
)

__all__ = [
    'CampaignPublicSerializer',
    'CampaignHistorySerializer',
    'CampaignSerializer',
    'TrackEventSerializer',
]
