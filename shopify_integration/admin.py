from django.contrib import admin
from .models import Shop
# Register your models here.
@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ('domain', 'installed_at', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('domain',)
    readonly_fields = ('installed_at', 'updated_at')
