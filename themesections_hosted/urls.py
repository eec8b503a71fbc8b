from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('shopify/', include('shopify_integration.urls')),
    path('', include('sections.urls')),
]
