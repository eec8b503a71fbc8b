from django.apps import AppConfig


class ShopifyIntegrationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'shopify_integration'
