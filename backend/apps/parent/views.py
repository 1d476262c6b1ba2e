"""
Parent dashboard views.
"""

import logging
from typing import Dict, List

from django.shortcuts import render
from django.utils.dateparse import parse_datetime

from apps.authentication.session import (
    clear_auth_session,
    login_redirect,
    supabase_login_required,
)
from apps.core.services.supabase import (
    SupabaseAuthError,
    SupabaseError,
    get_rest_client,
)

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = '😊'


def _prepare_child(row: Dict) -> Dict:
    child = dict(row)
    child['avatar_emoji'] = row.get('avatar_emoji') or DEFAULT_AVATAR
    created_at = row.get('created_at')
    child['created_at'] = parse_datetime(created_at) if isinstance(created_at, str) else created_at
    return child


def build_stats(children: List[Dict]) -> List[Dict]:
    """Quick stats cards shown above the children grid"""
    return [
        {'title': 'Total Children', 'value': len(children), 'icon': '👥', 'hint': ''},
        {'title': 'Sessions This Week', 'value': 0, 'icon': '📅', 'hint': 'Coming soon'},
        {'title': 'Average Accuracy', 'value': '--', 'icon': '📈',
         'hint': 'Complete sessions to see stats'},
    ]


@supabase_login_required
def dashboard(request):
    """
    Parent dashboard home

    GET /parent
    """
    auth_session = request.auth_session
    load_error = None

    try:
        rows = get_rest_client().select(
            'children',
            access_token=auth_session.access_token,
            filters={'parent_id': auth_session.user_id},
            order='created_at.desc',
        )
    except SupabaseAuthError as e:
        logger.info(f'[parent] Stored session rejected, signing out: {e.message}')
        clear_auth_session(request)
        return login_redirect(request.path)
    except SupabaseError as e:
        logger.error(f'[parent] Failed to load children for {auth_session.user_id}: {e.message}')
        rows = []
        load_error = 'We could not load your children right now. Please refresh to try again.'

    children = [_prepare_child(row) for row in rows]

    return render(request, 'parent/dashboard.html', {
        'children': children,
        'stats': build_stats(children),
        'load_error': load_error,
        'user_email': auth_session.user.get('email'),
    })
