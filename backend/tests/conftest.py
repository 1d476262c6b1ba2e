"""
Shared fixtures for the dashboard tests.
"""

import time
from importlib import import_module

import pytest
from django.conf import settings as django_settings
from django.core.cache import cache


SUPABASE_URL = 'https://project-ref.supabase.co'
ANON_KEY = 'anon-key-for-tests'
SERVICE_KEY = 'service-role-key-for-tests-0123456789'


@pytest.fixture(autouse=True)
def clear_cache():
    """Rate limiter state must not leak between tests"""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def supabase_settings(settings):
    settings.SUPABASE_URL = SUPABASE_URL
    settings.SUPABASE_ANON_KEY = ANON_KEY
    settings.SUPABASE_SERVICE_ROLE_KEY = SERVICE_KEY
    return settings


@pytest.fixture
def auth_session_data():
    return {
        'access_token': 'access-token-123',
        'refresh_token': 'refresh-token-456',
        'expires_in': 3600,
        'expires_at': int(time.time()) + 3600,
        'token_type': 'bearer',
        'user': {'id': 'parent-uuid-1', 'email': 'parent@example.com'},
    }


def set_client_session(client, **values):
    """
    Write values into the test client's signed-cookie session

    Returns the stored session.
    """
    engine = import_module(django_settings.SESSION_ENGINE)
    session = engine.SessionStore()
    session.update(values)
    session.save()
    client.cookies[django_settings.SESSION_COOKIE_NAME] = session.session_key
    return session


@pytest.fixture
def signed_in_client(client, auth_session_data):
    set_client_session(client, supabase_session=auth_session_data)
    return client


@pytest.fixture
def set_session(client):
    def _set(**values):
        return set_client_session(client, **values)
    return _set
