# entries/notifications.py

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _send(subject, body, recipient):
    if not recipient:
        logger.warning("Cannot send '%s': no recipient address.", subject)
        return False
    try:
        send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [recipient])
        logger.info("Sent '%s' to %s", subject, recipient)
        return True
    except Exception as e:
        logger.error("Error sending '%s' to %s: %s", subject, recipient, e)
        return False


def send_entry_confirmation_email(entry):
    """Receipt and next steps once an entry fee has been paid."""
    site_name = getattr(settings, 'SITE_NAME', 'Awards')
    body = (
        f"Dear {entry.contact_name},\n\n"
        f"Thank you for entering {entry.award.award_name}.\n"
        f"Your entry number is {entry.entry_number} ('{entry.entry_title}').\n"
        f"We have received your payment of {entry.entry_fee} GBP and your entry is now submitted.\n\n"
        f"The judging panel will review all entries after the closing date.\n\n"
        f"{site_name}"
    )
    return _send(f"{site_name}: entry {entry.entry_number} confirmed", body, entry.contact_email)


def send_payment_failed_email(entry, error_message=''):
    site_name = getattr(settings, 'SITE_NAME', 'Awards')
    reason = f"\nReason given by the card issuer: {error_message}\n" if error_message else ''
    body = (
        f"Dear {entry.contact_name},\n\n"
        f"The payment for entry {entry.entry_number} did not go through.{reason}\n"
        f"You can retry the payment from the entry submission page.\n\n"
        f"{site_name}"
    )
    return _send(f"{site_name}: payment failed for entry {entry.entry_number}", body, entry.contact_email)


def send_refund_confirmation_email(entry):
    site_name = getattr(settings, 'SITE_NAME', 'Awards')
    body = (
        f"Dear {entry.contact_name},\n\n"
        f"The fee for entry {entry.entry_number} has been refunded to the original payment method.\n\n"
        f"{site_name}"
    )
    return _send(f"{site_name}: refund for entry {entry.entry_number}", body, entry.contact_email)
