"""
Campaign services module.

All services are exported from this module to maintain backward compatibility.
"""
from .eligibility import EligibilityContext, EligibilityResult, EligibilityEvaluator
from .campaign_service import CampaignService

__all__ = [
    'EligibilityContext',
    'EligibilityResult',
    'EligibilityEvaluator',
    'CampaignService',
]
