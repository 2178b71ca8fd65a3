# entries/services.py
import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from awards.models import Award
from core.models import ActivityLog
from core.paging import load_all
from core.utils import format_money
from organisations.models import Organisation
from .exceptions import PaymentGatewayError
from .fees import calculate_fees
from .models import Entry, Invoice

logger = logging.getLogger(__name__)


def _existing_submission(submission_key):
    if not submission_key:
        return None
    return Entry.objects.select_related('organisation', 'award').filter(submission_key=submission_key).first()


def create_entry_records(details, submission_key=None):
    """
    Creates the organisation (when the entrant is a new company) and a draft
    entry awaiting payment, in one transaction.

    With a ``submission_key`` the call is repeatable: an entry already created
    under that key is returned instead of a second one. Returns ``(entry, created)``.
    """
    entry = _existing_submission(submission_key)
    if entry is not None:
        logger.info("Reusing entry %s for submission %s", entry.entry_number, submission_key)
        return entry, False

    try:
        with transaction.atomic():
            if details.get('organisation_id'):
                organisation = Organisation.objects.get(pk=details['organisation_id'])
            else:
                organisation = Organisation.objects.create(
                    company_name=details['new_company_name'],
                    website=details.get('new_company_website', ''),
                    description=details.get('new_company_description', ''),
                    email=details['contact_email'],
                    contact_name=details['contact_name'],
                    status=Organisation.Status.ACTIVE,
                )
                logger.info("Created organisation %s during entry submission", organisation.pk)

            award = Award.objects.get(pk=details['award_id'], is_active=True)
            fees = calculate_fees(award.effective_entry_fee)

            entry = Entry.objects.create(
                organisation=organisation,
                award=award,
                entry_title=details['entry_title'],
                entry_description=details.get('entry_description', ''),
                why_should_win=details['why_should_win'],
                supporting_information=details.get('supporting_information', ''),
                contact_name=details['contact_name'],
                contact_email=details['contact_email'],
                contact_phone=details.get('contact_phone', ''),
                contact_position=details.get('contact_position', ''),
                videos=details.get('videos', []),
                entry_fee=fees.entry_fee,
                status=Entry.Status.DRAFT,
                payment_status=Entry.PaymentStatus.PENDING,
                submission_key=submission_key or None,
            )
    except IntegrityError:
        # Another request with the same key committed first.
        entry = _existing_submission(submission_key)
        if entry is None:
            raise
        return entry, False

    logger.info("Entry %s created for award %s", entry.entry_number, award.pk)
    return entry, True


def void_entry(entry, reason=''):
    """ Compensates a submission whose checkout could not be started. """
    entry.status = Entry.Status.VOID
    entry.payment_status = Entry.PaymentStatus.FAILED
    entry.save(update_fields=['status', 'payment_status', 'updated_at'])
    ActivityLog.record(entry, 'checkout_failed', details=reason, performed_by=entry.contact_email)
    logger.warning("Entry %s voided: %s", entry.entry_number, reason)


def checkout_urls(entry):
    site_url = getattr(settings, 'APP_SITE_URL', 'http://127.0.0.1:8000').rstrip('/')
    success_url = f"{site_url}/submit-entry-success.html?session_id={{CHECKOUT_SESSION_ID}}&entry={entry.entry_number}"
    cancel_url = f"{site_url}/submit-entry.html?cancelled=true"
    return success_url, cancel_url


def start_checkout(entry, gateway):
    """
    Opens a checkout session for the entry's fee and stores its id on the entry.
    The session is keyed on the entry number, so calling this twice for one entry
    gets the same session back from Stripe.
    If the payment service fails the entry is voided and the error re-raised.
    """
    fees = calculate_fees(entry.entry_fee)
    success_url, cancel_url = checkout_urls(entry)
    try:
        session = gateway.create_checkout_session(
            amount_minor=fees.total_minor_units,
            currency=settings.PAYMENT_CURRENCY,
            product_name=settings.STRIPE_PRODUCT_NAME,
            description=f"Entry {entry.entry_number} - {entry.entry_title}",
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=entry.contact_email,
            metadata={'entry_id': str(entry.pk), 'entry_number': entry.entry_number},
            idempotency_key=f"checkout-{entry.entry_number}",
        )
    except PaymentGatewayError as e:
        void_entry(entry, reason=e.message)
        raise

    entry.payment_reference = session.get('id', '')
    entry.save(update_fields=['payment_reference', 'updated_at'])
    return session


# --- Admin listing ---

@dataclass(frozen=True)
class EntryFilters:
    status: str = ''
    payment_status: str = ''
    award_id: Optional[int] = None
    search: str = ''

    @classmethod
    def from_context(cls, ctx):
        return cls(
            status=ctx.text('status'),
            payment_status=ctx.text('payment_status'),
            award_id=ctx.integer('award'),
            search=ctx.text('search').lower(),
        )

    def matches(self, entry):
        if self.status and entry.status != self.status:
            return False
        if self.payment_status and entry.payment_status != self.payment_status:
            return False
        if self.award_id is not None and entry.award_id != self.award_id:
            return False
        if self.search:
            haystacks = (entry.entry_number, entry.entry_title, entry.organisation.company_name, entry.contact_name)
            if not any(self.search in (value or '').lower() for value in haystacks):
                return False
        return True


def load_entries():
    return load_all(Entry.objects.select_related('organisation', 'award').order_by('-created_at', '-id'))


def filter_entries(entries, filters):
    return [entry for entry in entries if filters.matches(entry)]


def entry_counts(entries):
    return {
        'total': len(entries),
        'submitted': sum(1 for e in entries if e.status in (Entry.Status.SUBMITTED, Entry.Status.UNDER_REVIEW)),
        'shortlisted': sum(1 for e in entries if e.status == Entry.Status.SHORTLISTED),
        'winner': sum(1 for e in entries if e.status == Entry.Status.WINNER),
    }


def set_entry_status(entry, status, performed_by=''):
    if status not in Entry.Status.values:
        raise ValueError(f"Unknown entry status '{status}'.")
    entry.status = status
    entry.save(update_fields=['status', 'updated_at'])
    ActivityLog.record(entry, 'status_changed', details=f"Status changed to {entry.get_status_display()}",
                       performed_by=performed_by)
    return entry


def set_voting_flags(entry, is_public=None, allow_public_voting=None):
    """ Expects real booleans; callers validate request values with VotingFlagsSerializer. """
    if is_public is not None:
        entry.is_public = is_public
    if allow_public_voting is not None:
        entry.allow_public_voting = allow_public_voting
    entry.save(update_fields=['is_public', 'allow_public_voting', 'updated_at'])
    return entry


def delete_entry(entry, performed_by=''):
    """
    Removes an entry and its votes. Invoices stay on file with the entry link cleared.
    """
    entry_number = entry.entry_number
    with transaction.atomic():
        ActivityLog.record(entry, 'deleted', details=f"Entry {entry_number} deleted", performed_by=performed_by)
        entry.delete()
    logger.info("Entry %s deleted by '%s'", entry_number, performed_by)


# --- Invoices ---

def _parse_day(value, name):
    if not value:
        return None
    try:
        day = parse_date(value)
    except ValueError:
        day = None
    if day is None:
        raise ValueError(f"'{name}' must be a date in YYYY-MM-DD format.")
    return day


def invoice_day(invoice):
    return timezone.localtime(invoice.paid_date or invoice.created_at).date()


@dataclass(frozen=True)
class InvoiceFilters:
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    organisation_id: Optional[int] = None
    status: str = ''

    @classmethod
    def from_context(cls, ctx):
        """ Raises ValueError for an unreadable or reversed date range. """
        filters = cls(
            date_from=_parse_day(ctx.text('start'), 'start'),
            date_to=_parse_day(ctx.text('end'), 'end'),
            organisation_id=ctx.integer('organisation'),
            status=ctx.text('status'),
        )
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            raise ValueError("'start' must not be after 'end'.")
        return filters

    def matches(self, invoice):
        if self.organisation_id is not None and invoice.organisation_id != self.organisation_id:
            return False
        if self.status and invoice.status != self.status:
            return False
        day = invoice_day(invoice)
        if self.date_from and day < self.date_from:
            return False
        if self.date_to and day > self.date_to:
            return False
        return True

    def matches_entry(self, entry):
        if self.organisation_id is not None and entry.organisation_id != self.organisation_id:
            return False
        day = timezone.localtime(entry.created_at).date()
        if self.date_from and day < self.date_from:
            return False
        if self.date_to and day > self.date_to:
            return False
        return True


def load_invoices():
    return load_all(Invoice.objects.select_related('organisation', 'entry').order_by('-created_at', '-id'))


def filter_invoices(invoices, filters):
    return [invoice for invoice in invoices if filters.matches(invoice)]


def outstanding_entries(filters):
    """ Entries whose checkout was opened but never paid. """
    entries = load_all(
        Entry.objects.filter(payment_status=Entry.PaymentStatus.PENDING)
        .exclude(status=Entry.Status.VOID)
        .select_related('organisation')
        .order_by('-created_at', '-id')
    )
    return [entry for entry in entries if filters.matches_entry(entry)]


def invoice_summary(invoices, outstanding):
    """
    Revenue, refunds and outstanding fees for the invoices report, plus a
    per-organisation breakdown of money received. Amounts are two-place strings.
    """
    received = Decimal('0')
    refunded = Decimal('0')
    by_organisation = {}
    for invoice in invoices:
        if invoice.status == Invoice.Status.REFUNDED:
            refunded += invoice.total_amount
            continue
        received += invoice.total_amount
        name = invoice.organisation.company_name if invoice.organisation else ''
        row = by_organisation.setdefault(invoice.organisation_id, {
            'organisation_id': invoice.organisation_id,
            'company_name': name,
            'invoices': 0,
            'total': Decimal('0'),
        })
        row['invoices'] += 1
        row['total'] += invoice.total_amount

    ranked = sorted(by_organisation.values(), key=lambda row: (-row['total'], row['company_name']))
    for row in ranked:
        row['total'] = format_money(row['total'])

    outstanding_total = sum((calculate_fees(e.entry_fee).total for e in outstanding), Decimal('0'))

    return {
        'invoices': len(invoices),
        'paid_invoices': sum(1 for i in invoices if i.status == Invoice.Status.PAID),
        'total_invoiced': format_money(sum((i.total_amount for i in invoices), Decimal('0'))),
        'total_received': format_money(received),
        'total_refunded': format_money(refunded),
        'outstanding_entries': len(outstanding),
        'total_outstanding': format_money(outstanding_total),
        'by_organisation': ranked,
    }
