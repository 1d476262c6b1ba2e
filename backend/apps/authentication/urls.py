"""
Authentication URL configuration.
"""

from django.urls import path
from .views import (
    LoginView,
    AuthCallbackView,
    LogoutView,
)

app_name = 'authentication'

urlpatterns = [
    # GET/POST /auth/login
    # Email form; POST sends a magic link
    path('login', LoginView.as_view(), name='login'),

    # GET /auth/callback?code=...
    # Exchanges the code for a session, always redirects to the dashboard
    path('callback', AuthCallbackView.as_view(), name='callback'),

    # POST /auth/logout
    path('logout', LogoutView.as_view(), name='logout'),
]
