"""
URL configuration for promo_server project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from rest_framework.routers import DefaultRouter

from apps.campaigns.views import CampaignAdminViewSet
from apps.coupons.views import CouponAdminViewSet
from apps.spinwheel.views import SpinWheelAdminViewSet

admin_router = DefaultRouter()
admin_router.register(r'campaigns', CampaignAdminViewSet, basename='admin-campaign')
admin_router.register(r'coupons', CouponAdminViewSet, basename='admin-coupon')
admin_router.register(r'spin-wheels', SpinWheelAdminViewSet, basename='admin-spin-wheel')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/users/', include('apps.users.urls')),
    path('api/loyalty/', include('apps.loyalty.urls')),
    path('api/promotions/', include('apps.campaigns.urls')),
    path('api/coupons/', include('apps.coupons.urls')),
    path('api/admin/', include(admin_router.urls)),
    path('api/', include('apps.common.urls')),  # Include common URLs under /api/ prefix
    # OpenAPI documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]

# Serve static files in development
if settings.DEBUG:
    from django.contrib.staticfiles.urls import staticfiles_urlpatterns
    urlpatterns += staticfiles_urlpatterns()
