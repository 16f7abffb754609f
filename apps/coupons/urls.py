from django.urls import path
from . import views

urlpatterns = [
    path('validate/', views.validate_coupon, name='coupon-validate'),
    path('available/', views.get_available_coupons, name='coupon-available'),
    path('quote/', views.quote_discounts, name='coupon-quote'),
    path('redeem/', views.redeem_coupons, name='coupon-redeem'),
]
