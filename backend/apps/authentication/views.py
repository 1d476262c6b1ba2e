"""
Authentication views: magic-link sign in, auth callback and sign out.

Supabase does the actual authentication; these views only start the PKCE
flow, hand the returned code to Supabase and keep the resulting session.
"""

import logging

from django import forms
from django.conf import settings
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.core.services.supabase import (
    SupabaseError,
    generate_pkce_pair,
    get_auth_client,
)
from .session import (
    clear_auth_session,
    get_auth_session,
    pop_code_verifier,
    store_auth_session,
    store_code_verifier,
)

logger = logging.getLogger(__name__)


class LoginForm(forms.Form):
    email = forms.EmailField(
        max_length=254,
        widget=forms.EmailInput(attrs={'autocomplete': 'email', 'placeholder': 'you@example.com'}),
    )


class LoginView(View):
    """
    Start a magic-link sign in

    GET  /auth/login   render the email form
    POST /auth/login   send the link and show "check your email"
    """
    template_name = 'authentication/login.html'
    sent_template_name = 'authentication/check_email.html'

    def get(self, request):
        if get_auth_session(request) is not None:
            return redirect(settings.AUTH_REDIRECT_PATH)
        return render(request, self.template_name, {'form': LoginForm()})

    def post(self, request):
        form = LoginForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form}, status=400)

        email = form.cleaned_data['email']
        code_verifier, code_challenge = generate_pkce_pair()
        redirect_to = request.build_absolute_uri(reverse('authentication:callback'))

        try:
            get_auth_client().sign_in_with_otp(email, redirect_to, code_challenge)
        except SupabaseError as e:
            logger.warning(f'[auth] Magic link request failed: {e.message}')
            form.add_error(None, 'We could not send a sign-in link right now. Please try again.')
            return render(request, self.template_name, {'form': form}, status=e.status_code)

        store_code_verifier(request, code_verifier)
        return render(request, self.sent_template_name, {'email': email})


class AuthCallbackView(APIView):
    """
    Complete the sign in

    GET /auth/callback?code=...

    The code is forwarded to Supabase as-is. Whatever the outcome, the
    response is a redirect to the parent dashboard.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        code = request.query_params.get('code')

        if code:
            code_verifier = pop_code_verifier(request)

            try:
                auth_session = get_auth_client().exchange_code_for_session(code, code_verifier)
            except SupabaseError as e:
                logger.warning(f'[auth] Code exchange failed: {e.message}')
            else:
                store_auth_session(request, auth_session)
                logger.info(f'[auth] Session established for user {auth_session.user_id}')

        return redirect(request.build_absolute_uri(settings.AUTH_REDIRECT_PATH))


class LogoutView(View):
    """
    Sign out

    POST /auth/logout
    """
    http_method_names = ['post']

    def post(self, request):
        auth_session = get_auth_session(request)

        if auth_session is not None:
            try:
                get_auth_client().sign_out(auth_session.access_token)
            except SupabaseError as e:
                # The local session is cleared regardless
                logger.warning(f'[auth] Supabase sign out failed: {e.message}')

        clear_auth_session(request)
        return redirect(request.build_absolute_uri('/'))
