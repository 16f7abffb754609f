from django.urls import path
from . import views

urlpatterns = [
    path('profile/', views.get_loyalty_profile, name='loyalty-profile'),
    path('preferences/', views.update_preferences, name='loyalty-preferences'),
    path('tier/', views.get_tier_info, name='loyalty-tier'),
    path('leaderboard/', views.get_leaderboard, name='loyalty-leaderboard'),
    path('points/history/', views.get_points_history, name='points-history'),
    path('points/redeem/', views.redeem_points, name='points-redeem'),
    path('process-order/', views.process_order, name='process-order'),
    path('spin-wheel/eligibility/', views.get_spin_eligibility, name='spin-eligibility'),
    path('spin-wheel/spin/', views.spin_wheel, name='spin-wheel'),
    path('spin-wheel/history/', views.get_spin_history, name='spin-history'),
    path('admin/members/', views.list_members, name='loyalty-admin-members'),
    path('admin/award-points/', views.award_points, name='loyalty-admin-award-points'),
    path('admin/analytics/', views.loyalty_analytics, name='loyalty-admin-analytics'),
]
