from django.urls import path
from . import views

urlpatterns = [
    path('', views.add_section, name='add_section'),
]
