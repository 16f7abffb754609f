"""
Campaign models module.

All models are exported from this module to maintain backward compatibility.
"""
from .campaign import Campaign, default_performance
from .history import CampaignHistory

__all__ = [
    'Campaign',
    'CampaignHistory',
    'default_performance',
]
