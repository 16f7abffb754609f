from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom User admin with loyalty summary"""
    list_display = [
        'username', 'email', 'role', 'country', 'loyalty_tier', 'is_staff', 'date_joined'
    ]
    list_filter = ['role', 'is_staff', 'is_active', 'loyalty_member__tier']
    search_fields = ['username', 'email', 'phone']
    ordering = ['-date_joined']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Storefront', {
            'fields': ('role', 'phone', 'country', 'avatar')
        }),
    )

    def loyalty_tier(self, obj):
        member = getattr(obj, 'loyalty_member', None)
        return member.tier.display_name if member else 'No membership'
    loyalty_tier.short_description = 'Tier'
