from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Storefront user with role and the profile fields promotions target on"""
    ROLE_CHOICES = [
        ('customer', 'Customer'),
        ('admin', 'Admin'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='customer')
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)
    country = models.CharField(max_length=64, blank=True, default='', help_text="Used for geographic campaign rules")
    avatar = models.URLField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username or self.email or f"User {self.id}"

    @property
    def is_admin(self):
        return self.is_staff or self.role == 'admin'

    def account_age_days(self, now=None):
        """Whole days since the account was created"""
        now = now or timezone.now()
        return max((now - self.date_joined).days, 0)
