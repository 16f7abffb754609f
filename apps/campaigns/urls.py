from django.urls import path
from . import views

urlpatterns = [
    path('active/', views.get_active_promotions, name='promotions-active'),
    path('personalized/', views.get_personalized_promotions, name='promotions-personalized'),
    path('campaigns/<int:campaign_id>/', views.get_campaign_detail, name='campaign-detail'),
    path('campaigns/<int:campaign_id>/eligibility/', views.check_campaign_eligibility, name='campaign-eligibility'),
    path('campaigns/<int:campaign_id>/track/', views.track_campaign_event, name='campaign-track'),
]
