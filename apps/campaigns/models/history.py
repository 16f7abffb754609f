from django.conf import settings
from django.db import models


class CampaignHistory(models.Model):
    """Audit trail of campaign lifecycle changes"""
    ACTION_CHOICES = [
        ('created', 'Created'),
        ('updated', 'Updated'),
        ('activated', 'Activated'),
        ('paused', 'Paused'),
        ('completed', 'Completed'),
    ]

    campaign = models.ForeignKey('Campaign', on_delete=models.CASCADE, related_name='history')
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'campaign_history'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'campaign history'

    def __str__(self):
        return f"{self.campaign.name}: {self.action}"
