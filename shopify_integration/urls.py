from django.urls import path
from . import views, webhooks

urlpatterns = [
    path('oauth/start/', views.start_oauth, name='shopify_oauth_start'),
    path('oauth/callback/', views.oauth_callback, name='shopify_oauth_callback'),
    path('webhooks/app_uninstalled/', webhooks.app_uninstalled, name='shopify_app_uninstalled'),
]
