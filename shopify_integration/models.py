from django.db import models


class Shop(models.Model):
    """
    A store that installed the app. The offline token is what every
    Admin API call made on the merchant's behalf authenticates with.
    """
    domain = models.CharField(max_length=255, unique=True)  # example.myshopify.com
    offline_token = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)
    installed_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.domain
