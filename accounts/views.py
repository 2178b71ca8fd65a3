# accounts/views.py
import json
import logging

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.utils import error_response, read_json_body
from .backends import AdminEmailBackend

logger = logging.getLogger(__name__)


@require_POST
def login_view(request):
    try:
        data = read_json_body(request)
    except (json.JSONDecodeError, ValueError):
        return error_response('Invalid JSON data.')

    email = (data.get('email') or '').strip()
    password = data.get('password') or ''

    if not email or not password:
        return error_response('Please enter both email and password')

    # Malformed addresses never reach the auth backend.
    try:
        validate_email(email)
    except ValidationError:
        return error_response('Please enter a valid email address')

    user = authenticate(request, email=email, password=password)
    if user is None:
        if AdminEmailBackend().is_unconfirmed(email, password):
            logger.info("Login refused for unconfirmed account %s", email)
            return error_response('Please confirm your email address before logging in.', status=403)
        logger.info("Failed login attempt for %s", email)
        return error_response('Invalid email or password. Please try again.', status=401)

    login(request, user)
    logger.info("Admin '%s' signed in", user.get_username())
    return JsonResponse({
        'status': 'success',
        'email': user.email,
        'is_admin': user.is_superuser,
        'session_timeout_seconds': settings.ADMIN_INACTIVITY_TIMEOUT,
    })


@require_POST
def logout_view(request):
    if request.user.is_authenticated:
        logger.info("Admin '%s' signed out", request.user.get_username())
    logout(request)
    return JsonResponse({'status': 'success'})


@require_GET
def session_view(request):
    if not request.user.is_authenticated:
        return JsonResponse({'authenticated': False})
    return JsonResponse({
        'authenticated': True,
        'email': request.user.email,
        'is_admin': request.user.is_superuser,
        'expires_in_seconds': request.session.get_expiry_age(),
    })
