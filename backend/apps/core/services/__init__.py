"""
Core services module.
"""

from .supabase import (
    AuthSession,
    SupabaseAuthClient,
    SupabaseAuthError,
    SupabaseConfig,
    SupabaseConfigError,
    SupabaseError,
    SupabaseRestClient,
    generate_pkce_pair,
    get_auth_client,
    get_rest_client,
)

__all__ = [
    'AuthSession',
    'SupabaseAuthClient',
    'SupabaseAuthError',
    'SupabaseConfig',
    'SupabaseConfigError',
    'SupabaseError',
    'SupabaseRestClient',
    'generate_pkce_pair',
    'get_auth_client',
    'get_rest_client',
]
