from django.db import models


class Badge(models.Model):
    """Achievement a member can earn once"""
    CATEGORY_CHOICES = [
        ('purchase', 'Purchase'),
        ('loyalty', 'Loyalty'),
        ('achievement', 'Achievement'),
        ('tier', 'Tier'),
        ('special', 'Special'),
    ]

    RARITY_CHOICES = [
        ('common', 'Common'),
        ('uncommon', 'Uncommon'),
        ('rare', 'Rare'),
        ('epic', 'Epic'),
        ('legendary', 'Legendary'),
    ]

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=200, blank=True)
    icon = models.CharField(max_length=50, blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='achievement')
    rarity = models.CharField(max_length=20, choices=RARITY_CHOICES, default='common')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_badges'
        ordering = ['code']

    def __str__(self):
        return self.name

    @classmethod
    def for_tier(cls, tier):
        """The badge for reaching `tier`, created on first use"""
        badge, _ = cls.objects.get_or_create(
            code=f'tier_{tier.name}',
            defaults={
                'name': f'{tier.display_name} Member',
                'description': f'Reached {tier.display_name} tier',
                'icon': 'trophy',
                'category': 'tier',
                'rarity': 'epic',
            },
        )
        return badge


class MemberBadge(models.Model):
    member = models.ForeignKey('LoyaltyMember', on_delete=models.CASCADE, related_name='badges')
    badge = models.ForeignKey('Badge', on_delete=models.CASCADE, related_name='awards')
    earned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_member_badges'
        ordering = ['-earned_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['member', 'badge'], name='unique_member_badge'),
        ]

    def __str__(self):
        return f"{self.member.user.username}: {self.badge.name}"
