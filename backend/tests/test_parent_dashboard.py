"""
Tests for the parent dashboard layout and home page.
"""

import time
from unittest.mock import patch

import pytest
from django.template import Context, Template
from django.template.loader import render_to_string

from apps.authentication.session import SESSION_KEY
from apps.core.services.supabase import SupabaseAuthError, SupabaseError

LOGIN_REDIRECT = '/auth/login?redirect=%2Fparent'

CHILDREN = [
    {
        'id': 'child-2',
        'parent_id': 'parent-uuid-1',
        'nickname': 'Robin',
        'age_band': '8-9',
        'avatar_emoji': '🦊',
        'created_at': '2024-10-18T10:00:00+00:00',
    },
    {
        'id': 'child-1',
        'parent_id': 'parent-uuid-1',
        'nickname': 'Sky',
        'age_band': '6-7',
        'avatar_emoji': None,
        'created_at': '2024-10-17T09:30:00+00:00',
    },
]


@pytest.fixture
def rest_client():
    with patch('apps.parent.views.get_rest_client') as factory:
        yield factory.return_value


class TestDashboardLayout:

    def test_layout_has_header_nav_and_footer(self):
        html = render_to_string('parent/layout.html')

        assert 'href="/parent"' in html
        assert 'Ada Parent Dashboard' in html
        assert 'href="/"' in html
        assert 'Home' in html
        assert 'Ada - Emotion Recognition &amp; Regulation for Children' in html
        assert 'Safe, Private, COPPA-Compliant' in html

    def test_content_slot_sits_between_header_and_footer(self):
        html = Template(
            '{% extends "parent/layout.html" %}'
            '{% block content %}<p id="slot">child content</p>{% endblock %}'
        ).render(Context())

        header_end = html.index('</header>')
        slot = html.index('<p id="slot">child content</p>')
        footer_start = html.index('<footer')
        assert header_end < slot < footer_start

    def test_sign_out_hidden_for_anonymous_visitors(self):
        html = render_to_string('parent/layout.html')

        assert 'Sign out' not in html


class TestDashboardPage:

    def test_requires_session(self, client):
        response = client.get('/parent')

        assert response.status_code == 302
        assert response['Location'] == LOGIN_REDIRECT

    def test_expired_session_is_cleared(self, client, set_session, auth_session_data):
        auth_session_data['expires_at'] = int(time.time()) - 10
        set_session(supabase_session=auth_session_data)

        response = client.get('/parent')

        assert response['Location'] == LOGIN_REDIRECT
        assert SESSION_KEY not in client.session

    def test_lists_children_for_parent(self, signed_in_client, rest_client):
        rest_client.select.return_value = CHILDREN

        response = signed_in_client.get('/parent')

        assert response.status_code == 200
        rest_client.select.assert_called_once_with(
            'children',
            access_token='access-token-123',
            filters={'parent_id': 'parent-uuid-1'},
            order='created_at.desc',
        )

        content = response.content.decode()
        assert 'My Children' in content
        assert content.index('Robin') < content.index('Sky')
        assert 'Ages 8-9' in content
        assert '😊' in content  # default avatar
        assert 'Total Children' in content
        assert 'Sign out' in content
        assert 'No Children Added Yet' not in content

        assert [stat['value'] for stat in response.context['stats']] == [2, 0, '--']

    def test_empty_state(self, signed_in_client, rest_client):
        rest_client.select.return_value = []

        response = signed_in_client.get('/parent')

        assert response.status_code == 200
        assert b'No Children Added Yet' in response.content
        assert b'Total Children' not in response.content
        assert b'Getting Started' in response.content

    def test_rejected_token_signs_parent_out(self, signed_in_client, rest_client):
        rest_client.select.side_effect = SupabaseAuthError('JWT expired', status_code=401)

        response = signed_in_client.get('/parent')

        assert response['Location'] == LOGIN_REDIRECT
        assert SESSION_KEY not in signed_in_client.session

    def test_backend_failure_renders_page_with_message(self, signed_in_client, rest_client):
        rest_client.select.side_effect = SupabaseError('Failed to query children: HTTP 503')

        response = signed_in_client.get('/parent')

        assert response.status_code == 200
        assert b'We could not load your children right now' in response.content


class TestLandingPage:

    def test_links_to_dashboard(self, client):
        response = client.get('/')

        assert response.status_code == 200
        assert b'Hi, I&apos;m Ada!' in response.content
        assert b'href="/parent"' in response.content

    def test_health(self, client):
        assert client.get('/health').json() == {'status': 'ok'}
