"""
Tests for the debug endpoint and the error envelope.
"""

import json

import pytest
from django.test import RequestFactory
from rest_framework.exceptions import NotFound, ValidationError

from apps.core.exceptions import AppError, ErrorHandlerMiddleware, custom_exception_handler
from apps.debug.views import is_local_url


class TestSupabaseConfigView:

    def test_configured(self, client, supabase_settings):
        response = client.get('/api/debug/supabase-config')

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        config = body['config']
        assert config['urlConfigured'] is True
        assert config['url'] == supabase_settings.SUPABASE_URL
        assert config['urlIsLocal'] is False
        assert config['anonKeyConfigured'] is True
        assert config['serviceKeyConfigured'] is True
        assert config['serviceKeyLength'] == len(supabase_settings.SUPABASE_SERVICE_ROLE_KEY)
        assert config['serviceKeyPrefix'] == supabase_settings.SUPABASE_SERVICE_ROLE_KEY[:4]
        assert config['callbackUrl'] == 'http://testserver/auth/callback'

    def test_not_configured(self, client, settings):
        settings.SUPABASE_URL = ''
        settings.SUPABASE_ANON_KEY = ''
        settings.SUPABASE_SERVICE_ROLE_KEY = ''

        config = client.get('/api/debug/supabase-config').json()['config']

        assert config['urlConfigured'] is False
        assert config['url'] == 'NOT SET'
        assert config['urlIsLocal'] is False
        assert config['serviceKeyLength'] == 0
        assert config['serviceKeyPrefix'] == 'NOT SET'

    def test_service_key_is_not_echoed(self, client, supabase_settings):
        response = client.get('/api/debug/supabase-config')

        assert supabase_settings.SUPABASE_SERVICE_ROLE_KEY.encode() not in response.content


@pytest.mark.parametrize('url, expected', [
    ('http://127.0.0.1:54321', True),
    ('http://localhost:54321', True),
    ('https://project.supabase.co', False),
])
def test_is_local_url(url, expected):
    assert is_local_url(url) is expected


class TestExceptionHandler:

    def test_app_error(self):
        error = AppError('Backend down', status_code=502, code='SUPABASE_ERROR', retryable=True)

        response = custom_exception_handler(error, {})

        assert response.status_code == 502
        assert response.data == {
            'error': {
                'code': 'SUPABASE_ERROR',
                'message': 'Backend down',
                'details': {},
                'retryable': True,
            }
        }

    def test_not_found(self):
        response = custom_exception_handler(NotFound('Nothing here'), {})

        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'
        assert response.data['error']['message'] == 'Nothing here'

    def test_validation_error(self):
        response = custom_exception_handler(ValidationError({'email': ['Required']}), {})

        assert response.status_code == 400
        assert response.data['error']['code'] == 'VALIDATION_ERROR'
        assert response.data['error']['retryable'] is False

    def test_unexpected_error(self):
        response = custom_exception_handler(RuntimeError('boom'), {})

        assert response.status_code == 500
        assert response.data['error']['message'] == 'An unexpected error occurred'


class TestErrorHandlerMiddleware:

    @pytest.fixture
    def middleware(self):
        return ErrorHandlerMiddleware(lambda request: None)

    def test_api_app_error(self, middleware):
        request = RequestFactory().get('/api/debug/supabase-config')

        response = middleware.process_exception(request, AppError('Nope', status_code=409, code='CONFLICT'))

        assert response.status_code == 409
        assert json.loads(response.content)['error']['code'] == 'CONFLICT'

    def test_api_unexpected_error(self, middleware):
        request = RequestFactory().get('/api/debug/supabase-config')

        response = middleware.process_exception(request, RuntimeError('boom'))

        assert response.status_code == 500
        assert json.loads(response.content)['error']['code'] == 'INTERNAL_ERROR'

    def test_html_pages_use_django_handling(self, middleware):
        request = RequestFactory().get('/parent')

        assert middleware.process_exception(request, RuntimeError('boom')) is None
