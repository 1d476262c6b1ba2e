"""
URL configuration for the Ada parent dashboard.
"""

from django.http import JsonResponse
from django.shortcuts import render
from django.urls import path, include

LANDING_FEATURES = [
    {
        'emoji': '💗',
        'title': 'Learn Emotions',
        'description': 'Practice identifying 7 different emotions through engaging stories',
        'card_class': 'border-pink-200',
    },
    {
        'emoji': '🧠',
        'title': 'Regulation Skills',
        'description': 'Try calming activities like breathing, grounding, and movement',
        'card_class': 'border-purple-200',
    },
    {
        'emoji': '✨',
        'title': 'Positive Feedback',
        'description': 'Get personalized praise and celebrate your progress!',
        'card_class': 'border-yellow-200',
    },
]


def health_check(request):
    """
    Health check endpoint
    """
    return JsonResponse({'status': 'ok'})


def home(request):
    """
    Landing page with the link to the parent dashboard
    """
    return render(request, 'home.html', {'features': LANDING_FEATURES})


urlpatterns = [
    path('', home, name='home'),

    # Health check
    path('health', health_check, name='health_check'),

    path('auth/', include('apps.authentication.urls')),
    path('parent', include('apps.parent.urls')),
    path('api/debug/', include('apps.debug.urls')),
]
