"""
Rate limiting middleware backed by the Django cache.
"""

import logging
import time
from datetime import datetime

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


def get_client_ip(request) -> str:
    """Client address, trusting the first X-Forwarded-For hop"""
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', 'unknown')


class RateLimitMiddleware(MiddlewareMixin):
    """
    Sliding window rate limiter for the sign-in endpoints

    Default: 100 requests per minute per client IP on RATE_LIMITED_PATHS.
    """
    key_prefix = 'ratelimit:auth'

    @property
    def window_ms(self) -> int:
        return settings.RATE_LIMIT_WINDOW * 1000

    @property
    def max_requests(self) -> int:
        return settings.RATE_LIMIT_MAX_REQUESTS

    def process_request(self, request):
        """
        Check rate limit before processing request
        """
        limited_paths = getattr(settings, 'RATE_LIMITED_PATHS', ('/auth/login', '/auth/logout'))
        if not any(request.path.startswith(path) for path in limited_paths):
            return None

        key = f'{self.key_prefix}:{get_client_ip(request)}'
        now = int(time.time() * 1000)
        window_start = now - self.window_ms

        try:
            requests_data = cache.get(key, [])
        except Exception as e:
            logger.warning(f'Rate limiter cache error: {e}')
            return None  # Allow request if the cache is down

        # Remove old entries outside the time window
        requests_data = [ts for ts in requests_data if ts > window_start]
        request_count = len(requests_data)

        if request_count >= self.max_requests:
            oldest_request = min(requests_data) if requests_data else now
            retry_after = max(int((oldest_request + self.window_ms - now) / 1000), 1)

            logger.warning(f'Rate limit exceeded for {key} on {request.path}')
            response = JsonResponse({
                'error': {
                    'code': 'RATE_LIMIT_EXCEEDED',
                    'message': 'Rate limit exceeded. Please try again later.',
                    'retryable': True,
                    'details': {
                        'limit': self.max_requests,
                        'windowMs': self.window_ms,
                        'retryAfter': retry_after,
                    }
                }
            }, status=429)

            response['X-RateLimit-Limit'] = str(self.max_requests)
            response['X-RateLimit-Remaining'] = '0'
            response['X-RateLimit-Reset'] = datetime.fromtimestamp((now + retry_after * 1000) / 1000).isoformat()
            response['Retry-After'] = str(retry_after)
            return response

        requests_data.append(now)

        try:
            cache.set(key, requests_data, timeout=int(self.window_ms / 1000) + 1)
        except Exception as e:
            logger.warning(f'Rate limiter cache error: {e}')
            return None

        request.rate_limit_remaining = self.max_requests - request_count - 1
        request.rate_limit_limit = self.max_requests
        return None

    def process_response(self, request, response):
        """
        Add rate limit headers to response
        """
        if hasattr(request, 'rate_limit_remaining'):
            response['X-RateLimit-Limit'] = str(request.rate_limit_limit)
            response['X-RateLimit-Remaining'] = str(request.rate_limit_remaining)
            response['X-RateLimit-Reset'] = datetime.fromtimestamp(
                (int(time.time() * 1000) + self.window_ms) / 1000
            ).isoformat()

        return response
