"""
Parent dashboard URL configuration.
"""

from django.urls import path
from . import views

app_name = 'parent'

urlpatterns = [
    # GET /parent
    path('', views.dashboard, name='dashboard'),
]
