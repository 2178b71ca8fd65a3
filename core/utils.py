# core/utils.py
import json
from decimal import Decimal

from django.http import JsonResponse

CENTS = Decimal('0.01')


def is_admin(user):
    return user.is_superuser


def parse_int(value, default=None):
    """
    Parses an int from a query/body value ('2024', 2024, ' 7 ').
    Returns ``default`` if parsing fails.
    """
    if value is None or value == '':
        return default
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return default


def format_money(value):
    """
    Two decimal places for money totals. Aggregates over DecimalFields come back
    unquantized on SQLite, and an empty aggregate (None) reads as 0.00.
    """
    return str(Decimal(value or 0).quantize(CENTS))


def read_json_body(request):
    """Decodes a JSON request body into a dict. Raises ValueError on bad input."""
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object.")
    return data


def client_ip(request):
    """
    Best-effort address of the caller: first hop of X-Forwarded-For, else REMOTE_ADDR.
    Returns the literal 'unknown' when neither is present.
    """
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        first_hop = forwarded.split(',')[0].strip()
        if first_hop:
            return first_hop
    return request.META.get('REMOTE_ADDR') or 'unknown'


def error_response(message, status=400, **extra):
    payload = {'status': 'error', 'message': message}
    payload.update(extra)
    return JsonResponse(payload, status=status)
