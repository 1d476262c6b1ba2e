"""
Custom exceptions and error handlers.
"""

from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.http import JsonResponse
import logging

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Custom application error class

    Carries everything needed to render the standard error envelope:
    {"error": {"code", "message", "details", "retryable"}}
    """
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = 'INTERNAL_ERROR',
        retryable: bool = False,
        details: dict = None
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.retryable = retryable
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details,
                'retryable': self.retryable,
            }
        }


def _error_code_for_status(status_code: int) -> tuple:
    if status_code == 401:
        return 'UNAUTHORIZED', False
    if status_code == 403:
        return 'FORBIDDEN', False
    if status_code == 404:
        return 'NOT_FOUND', False
    if status_code == 405:
        return 'METHOD_NOT_ALLOWED', False
    if status_code == 429:
        return 'RATE_LIMIT_EXCEEDED', True
    if status_code >= 500:
        return 'INTERNAL_ERROR', True
    return 'VALIDATION_ERROR', False


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF

    Args:
        exc: The exception instance
        context: The context in which the exception occurred

    Returns:
        Response object with error details
    """
    if isinstance(exc, AppError):
        return Response(exc.to_dict(), status=exc.status_code)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        error_code, retryable = _error_code_for_status(response.status_code)

        error_message = response.data
        if isinstance(error_message, dict):
            if 'detail' in error_message:
                error_message = error_message['detail']
            else:
                error_message = str(error_message)

        return Response({
            'error': {
                'code': error_code,
                'message': error_message,
                'retryable': retryable,
            }
        }, status=response.status_code)

    # Handle unexpected exceptions
    logger.error(f'Unexpected error: {exc}', exc_info=True)
    return Response({
        'error': {
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred',
            'retryable': False,
        }
    }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class ErrorHandlerMiddleware:
    """
    Middleware to format errors raised outside DRF views

    Only API paths get the JSON envelope; HTML pages fall back to
    Django's regular error handling.
    """
    api_prefixes = ('/api/',)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        return response

    def process_exception(self, request, exception):
        """Handle exceptions that occur during request processing"""
        if not request.path.startswith(self.api_prefixes):
            return None

        if isinstance(exception, AppError):
            return JsonResponse(exception.to_dict(), status=exception.status_code)

        # Log unexpected errors
        logger.error(f'Unexpected error: {exception}', exc_info=True)
        return JsonResponse({
            'error': {
                'code': 'INTERNAL_ERROR',
                'message': 'An unexpected error occurred',
                'retryable': False,
            }
        }, status=500)
