"""
Debug URL configuration.
"""

from django.urls import path
from .views import SupabaseConfigView

app_name = 'debug'

urlpatterns = [
    # GET /api/debug/supabase-config
    path('supabase-config', SupabaseConfigView.as_view(), name='supabase_config'),
]
