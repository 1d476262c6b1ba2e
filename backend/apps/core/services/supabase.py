"""
Supabase service clients.

Thin HTTP clients for the two Supabase APIs the dashboard talks to:
GoTrue (``/auth/v1``) for sign-in, code exchange and sign-out, and
PostgREST (``/rest/v1``) for reading rows as the signed-in parent.
"""

import base64
import hashlib
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import requests
from django.conf import settings

from apps.core.exceptions import AppError

logger = logging.getLogger(__name__)


class SupabaseError(AppError):
    """Base error for Supabase calls"""

    def __init__(self, message: str, status_code: int = 502, code: str = 'SUPABASE_ERROR',
                 retryable: bool = True, details: dict = None):
        super().__init__(message, status_code=status_code, code=code,
                         retryable=retryable, details=details)


class SupabaseAuthError(SupabaseError):
    """GoTrue rejected the request (bad code, expired token, ...)"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        super().__init__(message, status_code=status_code, code='AUTH_ERROR',
                         retryable=False, details=details)


class SupabaseConfigError(SupabaseError):
    """Supabase URL or key is not configured"""

    def __init__(self, message: str):
        super().__init__(message, status_code=500, code='SUPABASE_NOT_CONFIGURED',
                         retryable=False)


@dataclass
class SupabaseConfig:
    """Supabase project configuration"""
    url: str
    anon_key: str
    service_role_key: str = ''
    timeout: int = 10

    @classmethod
    def from_settings(cls) -> 'SupabaseConfig':
        return cls(
            url=(settings.SUPABASE_URL or '').rstrip('/'),
            anon_key=settings.SUPABASE_ANON_KEY or '',
            service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY or '',
            timeout=settings.SUPABASE_TIMEOUT,
        )

    def require(self) -> None:
        if not self.url or not self.anon_key:
            raise SupabaseConfigError(
                'Missing Supabase configuration. Please check SUPABASE_URL and '
                'SUPABASE_ANON_KEY (or their NEXT_PUBLIC_ variants).'
            )


@dataclass
class AuthSession:
    """Session returned by GoTrue after a successful sign-in"""
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    token_type: Optional[str] = 'bearer'
    user: Dict = field(default_factory=dict)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get('id')

    def is_expired(self, leeway: int = 0) -> bool:
        if not self.expires_at:
            return False
        return self.expires_at - leeway <= int(time.time())

    def to_dict(self) -> Dict:
        # Only id/email of the user are kept; the session lives in a cookie.
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_in': self.expires_in,
            'expires_at': self.expires_at,
            'token_type': self.token_type,
            'user': {
                'id': self.user.get('id'),
                'email': self.user.get('email'),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'AuthSession':
        expires_at = data.get('expires_at')
        expires_in = data.get('expires_in')
        if expires_at is None and expires_in:
            expires_at = int(time.time()) + int(expires_in)

        return cls(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token'),
            expires_in=expires_in,
            expires_at=expires_at,
            token_type=data.get('token_type', 'bearer'),
            user=data.get('user') or {},
        )


def generate_pkce_pair() -> Tuple[str, str]:
    """
    Generate a PKCE code verifier and its S256 challenge

    Returns:
        (code_verifier, code_challenge)
    """
    code_verifier = secrets.token_urlsafe(64)
    digest = hashlib.sha256(code_verifier.encode('ascii')).digest()
    code_challenge = base64.urlsafe_b64encode(digest).rstrip(b'=').decode('ascii')
    return code_verifier, code_challenge


class _SupabaseBaseClient:
    """Shared session/header handling for the Supabase APIs"""

    def __init__(self, config: Optional[SupabaseConfig] = None):
        self.config = config or SupabaseConfig.from_settings()
        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    def _headers(self, access_token: Optional[str] = None, api_key: Optional[str] = None) -> Dict[str, str]:
        key = api_key or self.config.anon_key
        return {
            'apikey': key,
            'Authorization': f'Bearer {access_token or key}',
        }

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        self.config.require()
        url = f'{self.config.url}{path}'
        kwargs.setdefault('timeout', self.config.timeout)

        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f'[supabase] {method} {path} failed: {e}')
            raise SupabaseError(f'Supabase request failed: {e}')

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or f'HTTP {response.status_code}'

        if isinstance(data, dict):
            return (
                data.get('error_description')
                or data.get('msg')
                or data.get('message')
                or data.get('error')
                or f'HTTP {response.status_code}'
            )
        return str(data)


class SupabaseAuthClient(_SupabaseBaseClient):
    """
    Client for Supabase Auth (GoTrue)

    Uses the PKCE flow: the verifier is kept server-side by the caller,
    only the challenge is sent when the flow starts.
    """

    def sign_in_with_otp(self, email: str, redirect_to: str, code_challenge: str) -> None:
        """
        Send a magic link to the given email

        Args:
            email: Parent's email address
            redirect_to: Absolute URL of the auth callback
            code_challenge: S256 PKCE challenge

        Raises:
            SupabaseAuthError: If GoTrue rejects the request
        """
        response = self._request(
            'POST',
            '/auth/v1/otp',
            params={'redirect_to': redirect_to},
            json={
                'email': email,
                'create_user': True,
                'code_challenge': code_challenge,
                'code_challenge_method': 's256',
            },
            headers=self._headers(),
        )

        if not response.ok:
            message = self._error_message(response)
            logger.warning(f'[supabase] OTP sign-in failed for {email}: {message}')
            raise SupabaseAuthError(message, status_code=response.status_code)

    def exchange_code_for_session(self, auth_code: str, code_verifier: Optional[str] = None) -> AuthSession:
        """
        Exchange an authorization code for a session

        Args:
            auth_code: The ``code`` query parameter from the callback
            code_verifier: PKCE verifier stored when the flow started

        Returns:
            AuthSession

        Raises:
            SupabaseAuthError: If the code is invalid, expired or already used,
                or the token response carries no session
        """
        response = self._request(
            'POST',
            '/auth/v1/token',
            params={'grant_type': 'pkce'},
            json={
                'auth_code': auth_code,
                'code_verifier': code_verifier or '',
            },
            headers=self._headers(),
        )

        if not response.ok:
            message = self._error_message(response)
            raise SupabaseAuthError(message, status_code=response.status_code)

        try:
            data = response.json()
            if not isinstance(data, dict) or not data.get('access_token'):
                raise ValueError('no access_token in response')
            return AuthSession.from_dict(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f'[supabase] Unexpected token response: {e}')
            raise SupabaseAuthError(
                'Invalid session in token response',
                status_code=502,
                details={'status': response.status_code},
            )

    def sign_out(self, access_token: str) -> None:
        """
        Revoke the session's refresh tokens

        Raises:
            SupabaseAuthError: If GoTrue rejects the token
        """
        response = self._request(
            'POST',
            '/auth/v1/logout',
            params={'scope': 'global'},
            headers=self._headers(access_token=access_token),
        )

        # 401/404 mean the session is already gone
        if response.status_code in (401, 404):
            return
        if not response.ok:
            raise SupabaseAuthError(self._error_message(response), status_code=response.status_code)


class SupabaseRestClient(_SupabaseBaseClient):
    """Read-only PostgREST client acting as the signed-in user (RLS applies)"""

    def select(
        self,
        table: str,
        access_token: Optional[str] = None,
        filters: Optional[Dict[str, str]] = None,
        order: Optional[str] = None,
        columns: str = '*',
    ) -> List[Dict]:
        """
        Select rows from a table

        Args:
            table: Table name
            access_token: User's access token (anon key when omitted)
            filters: Column -> value equality filters
            order: PostgREST order expression, e.g. ``created_at.desc``
            columns: Column list

        Returns:
            List of rows

        Raises:
            SupabaseAuthError: On 401 (token rejected)
            SupabaseError: On any other failure
        """
        params = {'select': columns}
        for column, value in (filters or {}).items():
            params[column] = f'eq.{value}'
        if order:
            params['order'] = order

        response = self._request(
            'GET',
            f'/rest/v1/{table}',
            params=params,
            headers=self._headers(access_token=access_token),
        )

        if response.status_code == 401:
            raise SupabaseAuthError(self._error_message(response), status_code=401)
        if not response.ok:
            raise SupabaseError(
                f'Failed to query {table}: {self._error_message(response)}',
                details={'status': response.status_code},
            )

        return response.json()


def get_auth_client() -> SupabaseAuthClient:
    return SupabaseAuthClient()


def get_rest_client() -> SupabaseRestClient:
    return SupabaseRestClient()
