import logging

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import WebhookSignatureError
from .payments import verify_webhook_signature
from .webhooks import handle_event

logger = logging.getLogger(__name__)


class StripeWebhookView(APIView):
    """
    Endpoint Stripe posts payment events to.
    The Stripe-Signature header is verified against the raw body before any event is read.
    """
    authentication_classes = []  # Stripe cannot hold a session or token; the signature is the check
    permission_classes = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        sig_header = request.META.get('HTTP_STRIPE_SIGNATURE', '')

        try:
            event = verify_webhook_signature(payload, sig_header, settings.STRIPE_WEBHOOK_SECRET)
        except WebhookSignatureError as e:
            logger.warning("Rejected webhook: %s", e.message)
            return Response({"detail": f"Webhook Error: {e.message}"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            handle_event(event)
        except Exception:
            # A 5xx makes Stripe retry the delivery later.
            logger.exception("Error handling Stripe event %s (%s)", event.get('id'), event.get('type'))
            return Response({"detail": "Webhook handler failed"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"received": True}, status=status.HTTP_200_OK)
