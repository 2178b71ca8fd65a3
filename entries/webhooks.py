# entries/webhooks.py
"""
Handlers for verified Stripe events. Each handler receives the event's
``data.object`` and is safe to run more than once for the same event.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.models import ActivityLog
from core.utils import parse_int
from . import notifications
from .fees import calculate_fees
from .models import Entry, Invoice

logger = logging.getLogger(__name__)


def _metadata_entry_id(obj):
    """ The entry id we put in checkout metadata, or None when absent or unreadable. """
    raw = (obj.get('metadata') or {}).get('entry_id')
    entry_id = parse_int(raw)
    if raw and entry_id is None:
        logger.warning("Ignoring non-numeric entry_id %r on Stripe object %s", raw, obj.get('id'))
    return entry_id


def _entry_for_intent(intent):
    """Finds the entry behind a payment intent: metadata first, then the stored reference."""
    entry_id = _metadata_entry_id(intent)
    if entry_id is not None:
        entry = Entry.objects.select_related('award', 'organisation').filter(pk=entry_id).first()
        if entry:
            return entry
    intent_id = intent.get('payment_intent') or intent.get('id')
    if not intent_id:
        return None
    return Entry.objects.select_related('award', 'organisation').filter(payment_reference=intent_id).first()


def handle_checkout_completed(session):
    entry_id = _metadata_entry_id(session)
    if entry_id is None:
        logger.warning("Checkout session %s has no usable entry_id in metadata", session.get('id'))
        return None

    with transaction.atomic():
        entry = (
            Entry.objects.select_for_update()
            .select_related('award', 'organisation')
            .filter(pk=entry_id)
            .first()
        )
        if entry is None:
            logger.warning("Checkout session %s refers to unknown entry %s", session.get('id'), entry_id)
            return None
        if entry.payment_status == Entry.PaymentStatus.PAID:
            logger.info("Entry %s already marked paid; ignoring repeat event", entry.entry_number)
            return entry

        payment_intent = session.get('payment_intent') or session.get('id', '')
        paid_at = timezone.now()

        entry.payment_status = Entry.PaymentStatus.PAID
        entry.status = Entry.Status.SUBMITTED
        entry.submission_date = paid_at
        entry.payment_reference = payment_intent
        entry.save(update_fields=['payment_status', 'status', 'submission_date', 'payment_reference', 'updated_at'])

        amount_total = session.get('amount_total')
        if amount_total is not None:
            total = (Decimal(amount_total) / 100).quantize(Decimal('0.01'))
        else:
            total = calculate_fees(entry.entry_fee).total

        Invoice.objects.create(
            organisation=entry.organisation,
            entry=entry,
            invoice_type='entry_fee',
            status=Invoice.Status.PAID,
            total_amount=total,
            currency=(session.get('currency') or 'gbp').upper(),
            paid_date=paid_at,
            payment_method='stripe',
            payment_reference=payment_intent,
            notes=f"Entry fee for {entry.entry_number}",
        )
        ActivityLog.record(entry, 'payment_completed', details=f"Paid {total} via Stripe ({payment_intent})",
                           performed_by=entry.contact_email)

    logger.info("Entry %s paid and submitted", entry.entry_number)
    notifications.send_entry_confirmation_email(entry)
    return entry


def handle_payment_succeeded(intent):
    logger.info("Payment intent %s succeeded", intent.get('id'))


def handle_payment_failed(intent):
    entry = _entry_for_intent(intent)
    if entry is None:
        logger.warning("Failed payment intent %s does not match any entry", intent.get('id'))
        return None

    error_message = (intent.get('last_payment_error') or {}).get('message', '')
    ActivityLog.record(entry, 'payment_failed', details=error_message or 'Payment failed',
                       performed_by=entry.contact_email)
    logger.warning("Payment failed for entry %s: %s", entry.entry_number, error_message)
    notifications.send_payment_failed_email(entry, error_message)
    return entry


def handle_charge_refunded(charge):
    entry = _entry_for_intent(charge)
    if entry is None:
        logger.warning("Refunded charge %s does not match any entry", charge.get('id'))
        return None

    with transaction.atomic():
        entry.payment_status = Entry.PaymentStatus.REFUNDED
        entry.save(update_fields=['payment_status', 'updated_at'])
        entry.invoices.filter(status=Invoice.Status.PAID).update(status=Invoice.Status.REFUNDED)
        ActivityLog.record(entry, 'payment_refunded', details=f"Charge {charge.get('id', '')} refunded")

    logger.info("Entry %s refunded", entry.entry_number)
    notifications.send_refund_confirmation_email(entry)
    return entry


EVENT_HANDLERS = {
    'checkout.session.completed': handle_checkout_completed,
    'payment_intent.succeeded': handle_payment_succeeded,
    'payment_intent.payment_failed': handle_payment_failed,
    'charge.refunded': handle_charge_refunded,
}


def handle_event(event):
    """Dispatches a verified event. Returns False for event types we do not act on."""
    event_type = event.get('type', '')
    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info("Unhandled Stripe event type %s", event_type)
        return False
    handler((event.get('data') or {}).get('object') or {})
    return True
