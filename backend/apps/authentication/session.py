"""
Helpers for keeping the Supabase session in the Django session.
"""

import logging
from functools import wraps
from typing import Optional
from urllib.parse import urlencode

from django.conf import settings
from django.shortcuts import redirect

from apps.core.services.supabase import AuthSession

logger = logging.getLogger(__name__)

SESSION_KEY = 'supabase_session'
CODE_VERIFIER_KEY = 'supabase_code_verifier'


def store_auth_session(request, auth_session: AuthSession) -> None:
    # New identity, new session id
    request.session.cycle_key()
    request.session[SESSION_KEY] = auth_session.to_dict()


def get_auth_session(request) -> Optional[AuthSession]:
    data = request.session.get(SESSION_KEY)
    if not data or not data.get('access_token'):
        return None

    try:
        return AuthSession.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f'Discarding malformed auth session: {e}')
        request.session.pop(SESSION_KEY, None)
        return None


def clear_auth_session(request) -> None:
    request.session.flush()


def store_code_verifier(request, code_verifier: str) -> None:
    request.session[CODE_VERIFIER_KEY] = code_verifier


def pop_code_verifier(request) -> Optional[str]:
    return request.session.pop(CODE_VERIFIER_KEY, None)


def login_redirect(next_path: str):
    query = urlencode({'redirect': next_path})
    return redirect(f'{settings.LOGIN_PATH}?{query}')


def supabase_login_required(view_func):
    """
    Require a stored, unexpired Supabase session

    The session is exposed to the view as ``request.auth_session``.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        auth_session = get_auth_session(request)

        if auth_session is None or auth_session.is_expired():
            if auth_session is not None:
                clear_auth_session(request)
            return login_redirect(request.path)

        request.auth_session = auth_session
        return view_func(request, *args, **kwargs)

    return wrapper
