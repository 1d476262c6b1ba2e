"""
Debug views for development and deployment checks.
"""

import logging

from django.conf import settings
from rest_framework.views import APIView
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def is_local_url(url: str) -> bool:
    return '127.0.0.1' in url or 'localhost' in url


class SupabaseConfigView(APIView):
    """
    Report which Supabase settings are configured

    GET /api/debug/supabase-config
    Values are never echoed beyond a short key prefix.
    """
    permission_classes = []  # Allow unauthenticated for debugging

    def get(self, request):
        supabase_url = settings.SUPABASE_URL
        anon_key = settings.SUPABASE_ANON_KEY
        service_key = settings.SUPABASE_SERVICE_ROLE_KEY

        return Response({
            'success': True,
            'config': {
                'urlConfigured': bool(supabase_url),
                'url': supabase_url if supabase_url else 'NOT SET',
                'urlIsLocal': is_local_url(supabase_url) if supabase_url else False,
                'anonKeyConfigured': bool(anon_key),
                'serviceKeyConfigured': bool(service_key),
                'serviceKeyLength': len(service_key) if service_key else 0,
                'serviceKeyPrefix': service_key[:4] if service_key else 'NOT SET',
                'callbackUrl': request.build_absolute_uri('/auth/callback'),
            }
        })
