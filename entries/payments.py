"""
Stripe access for entry fees.

Checkout sessions are created through Stripe's REST API with form-encoded
bodies; webhook payloads are checked against the ``Stripe-Signature`` header
before anything reads them.
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Optional

import requests
from django.conf import settings
from django.utils.crypto import constant_time_compare

from .exceptions import PaymentGatewayError, WebhookSignatureError

logger = logging.getLogger(__name__)


class StripeGateway:
    """
    Thin client for the two Stripe calls the entry flow needs.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.base_url = (base_url or settings.STRIPE_API_BASE).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.STRIPE_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({
            'Authorization': f"Bearer {self.secret_key}",
            'User-Agent': 'awards-back-office/1.0',
        })

    def _request(self, method, path, data=None, headers=None):
        if not self.secret_key:
            raise PaymentGatewayError("Payment service is not configured.")

        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Stripe request %s %s failed: %s", method, path, e)
            raise PaymentGatewayError(f"Could not reach the payment service: {e}")

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            message = (payload.get('error') or {}).get('message') or (
                f"Payment service returned HTTP {response.status_code}"
            )
            logger.error("Stripe %s %s returned %s: %s", method, path, response.status_code, message)
            raise PaymentGatewayError(message)
        return payload

    def create_checkout_session(
        self,
        *,
        amount_minor: int,
        currency: str,
        product_name: str,
        description: str,
        success_url: str,
        cancel_url: str,
        customer_email: str = '',
        metadata: Optional[dict] = None,
        idempotency_key: str = '',
    ) -> dict:
        data = {
            'mode': 'payment',
            'payment_method_types[0]': 'card',
            'line_items[0][quantity]': 1,
            'line_items[0][price_data][currency]': currency,
            'line_items[0][price_data][unit_amount]': amount_minor,
            'line_items[0][price_data][product_data][name]': product_name,
            'line_items[0][price_data][product_data][description]': description,
            'success_url': success_url,
            'cancel_url': cancel_url,
        }
        if customer_email:
            data['customer_email'] = customer_email
        for key, value in (metadata or {}).items():
            data[f'metadata[{key}]'] = value
            # Copied onto the payment intent so failure/refund events can be traced back.
            data[f'payment_intent_data[metadata][{key}]'] = value
        headers = {'Idempotency-Key': idempotency_key} if idempotency_key else None
        return self._request('POST', '/checkout/sessions', data=data, headers=headers)

    def retrieve_checkout_session(self, session_id: str) -> dict:
        return self._request('GET', f'/checkout/sessions/{session_id}')


def compute_signature(payload: bytes, secret: str, timestamp) -> str:
    signed_payload = f"{timestamp}.".encode('utf-8') + payload
    return hmac.new(secret.encode('utf-8'), signed_payload, hashlib.sha256).hexdigest()


def verify_webhook_signature(payload: bytes, sig_header: str, secret: str, tolerance=None, now=None) -> dict:
    """
    Checks a ``Stripe-Signature`` header (``t=<ts>,v1=<hex>[,v1=...]``) and returns the decoded event.
    Raises WebhookSignatureError for a missing secret/header, a bad signature or a stale timestamp.
    """
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured.")
    if not sig_header:
        raise WebhookSignatureError("Missing Stripe-Signature header.")

    tolerance = settings.STRIPE_WEBHOOK_TOLERANCE if tolerance is None else tolerance

    timestamp = None
    signatures = []
    for item in sig_header.split(','):
        key, _, value = item.strip().partition('=')
        if key == 't':
            timestamp = value
        elif key == 'v1':
            signatures.append(value)

    if timestamp is None or not signatures:
        raise WebhookSignatureError("Unable to extract timestamp and signatures from header.")
    try:
        timestamp_value = int(timestamp)
    except ValueError:
        raise WebhookSignatureError("Invalid timestamp in Stripe-Signature header.")

    expected = compute_signature(payload, secret, timestamp)
    if not any(constant_time_compare(expected, candidate) for candidate in signatures):
        raise WebhookSignatureError("No signatures found matching the expected signature for payload.")

    current_time = time.time() if now is None else now
    if tolerance and timestamp_value < current_time - tolerance:
        raise WebhookSignatureError("Timestamp outside the tolerance zone.")

    try:
        return json.loads(payload.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        raise WebhookSignatureError("Invalid payload.")
