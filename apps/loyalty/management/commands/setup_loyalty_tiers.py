from django.core.management.base import BaseCommand
from apps.loyalty.models import LoyaltyTier

TIERS = [
    {
        'name': 'bronze',
        'display_name': 'Bronze',
        'level': 1,
        'min_points': 0,
        'min_spending': 0,
        'points_multiplier': '1.00',
        'discount_percentage': '5.00',
        'spin_multiplier': 1,
        'benefits': {
            'free_shipping': False,
            'early_access': False,
            'priority_support': False,
            'exclusive_offers': False
        }
    },
    {
        'name': 'silver',
        'display_name': 'Silver',
        'level': 2,
        'min_points': 500,
        'min_spending': 200,
        'points_multiplier': '1.20',
        'discount_percentage': '10.00',
        'spin_multiplier': 1,
        'benefits': {
            'free_shipping': True,
            'early_access': False,
            'priority_support': False,
            'exclusive_offers': False
        }
    },
    {
        'name': 'gold',
        'display_name': 'Gold',
        'level': 3,
        'min_points': 1500,
        'min_spending': 500,
        'points_multiplier': '1.50',
        'discount_percentage': '15.00',
        'spin_multiplier': 2,
        'benefits': {
            'free_shipping': True,
            'early_access': True,
            'priority_support': False,
            'exclusive_offers': False
        }
    },
    {
        'name': 'platinum',
        'display_name': 'Platinum',
        'level': 4,
        'min_points': 3000,
        'min_spending': 1000,
        'points_multiplier': '2.00',
        'discount_percentage': '20.00',
        'spin_multiplier': 3,
        'benefits': {
            'free_shipping': True,
            'early_access': True,
            'priority_support': True,
            'exclusive_offers': False
        }
    },
    {
        'name': 'diamond',
        'display_name': 'Diamond',
        'level': 5,
        'min_points': 6000,
        'min_spending': 2500,
        'points_multiplier': '3.00',
        'discount_percentage': '25.00',
        'spin_multiplier': 4,
        'benefits': {
            'free_shipping': True,
            'early_access': True,
            'priority_support': True,
            'exclusive_offers': True
        }
    },
]


class Command(BaseCommand):
    help = 'Set up loyalty tiers with their points and spending thresholds'

    def handle(self, *args, **options):
        """Create or update loyalty tiers"""
        created_count = 0
        updated_count = 0

        for tier_data in TIERS:
            defaults = {key: value for key, value in tier_data.items() if key != 'name'}
            tier, created = LoyaltyTier.objects.update_or_create(
                name=tier_data['name'],
                defaults=defaults
            )

            if created:
                created_count += 1
                self.stdout.write(
                    self.style.SUCCESS(f'Created tier: {tier.display_name}')
                )
            else:
                updated_count += 1
                self.stdout.write(
                    self.style.WARNING(f'Updated tier: {tier.display_name}')
                )

        self.stdout.write(
            self.style.SUCCESS(
                f'Loyalty tiers setup complete: {created_count} created, {updated_count} updated'
            )
        )
