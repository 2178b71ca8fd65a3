import json
import logging
from django.contrib.auth.decorators import login_required, user_passes_test
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from awards.models import Award
from awards.serializers import PublicAwardSerializer
from core.context import AdminContext
from core.exceptions import AwardsError
from core.paging import load_all
from core.utils import error_response, is_admin, parse_int, read_json_body
from organisations.models import Organisation
from .exceptions import PaymentGatewayError
from .models import Entry
from .payments import StripeGateway
from .serializers import (
    EntryDetailsSerializer, EntrySerializer, InvoiceReportSerializer, InvoiceSerializer, PaymentStatusSerializer,
    VotingFlagsSerializer,
)
from .submission import SubmissionWizard
from . import services

logger = logging.getLogger(__name__)


def _json_or_400(request):
    try:
        return read_json_body(request), None
    except (json.JSONDecodeError, ValueError):
        return None, error_response('Invalid JSON data.')


# --- Public submission wizard ---

@require_GET
@ensure_csrf_cookie
def submission_options(request):
    """ Choices for the entry form: active organisations and awards open for entries. """
    organisations = load_all(
        Organisation.objects.filter(status=Organisation.Status.ACTIVE).order_by('company_name')
    )
    awards = load_all(Award.objects.filter(is_active=True).order_by('award_name'))
    return JsonResponse({
        'organisations': [{'id': org.id, 'company_name': org.company_name} for org in organisations],
        'awards': PublicAwardSerializer(awards, many=True).data,
    })


@require_POST
def submission_details(request):
    data, error = _json_or_400(request)
    if error:
        return error
    serializer = EntryDetailsSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)

    wizard = SubmissionWizard.load(request.session)
    try:
        wizard.submit_details(dict(serializer.validated_data))
    except AwardsError as e:
        return error_response(e.message, status=e.status_code, state=wizard.state.value)
    wizard.save(request.session)
    return JsonResponse({'status': 'success', 'wizard': wizard.as_dict()})


@require_POST
def submission_back(request):
    wizard = SubmissionWizard.load(request.session)
    try:
        wizard.back()
    except AwardsError as e:
        return error_response(e.message, status=e.status_code, state=wizard.state.value)
    wizard.save(request.session)
    return JsonResponse({'status': 'success', 'wizard': wizard.as_dict()})


@require_POST
def submission_confirm(request):
    wizard = SubmissionWizard.load(request.session)
    try:
        entry = wizard.confirm(StripeGateway())
    except PaymentGatewayError as e:
        wizard.save(request.session)
        return error_response(
            f"Payment could not be started: {e.message}", status=e.status_code, state=wizard.state.value
        )
    except AwardsError as e:
        wizard.save(request.session)
        return error_response(e.message, status=e.status_code, state=wizard.state.value)

    wizard.save(request.session)
    return JsonResponse({
        'status': 'success',
        'entry_number': entry.entry_number,
        'checkout_url': wizard.checkout_url,
        'wizard': wizard.as_dict(),
    })


@require_GET
def submission_state(request):
    wizard = SubmissionWizard.load(request.session)
    return JsonResponse({'wizard': wizard.as_dict()})


# --- Payment status ---

@require_GET
def payment_status(request, entry_id):
    entry = get_object_or_404(Entry, pk=entry_id)
    return JsonResponse({'entry': PaymentStatusSerializer(entry).data})


@require_GET
def verify_payment(request, session_id):
    """ Looks up a checkout session with Stripe after the entrant is redirected back. """
    try:
        session = StripeGateway().retrieve_checkout_session(session_id)
    except PaymentGatewayError as e:
        return error_response(e.message, status=e.status_code)

    entry_id = parse_int((session.get('metadata') or {}).get('entry_id'))
    entry = Entry.objects.filter(pk=entry_id).first() if entry_id is not None else None
    return JsonResponse({
        'paid': session.get('payment_status') == 'paid',
        'payment_status': session.get('payment_status', ''),
        'entry': PaymentStatusSerializer(entry).data if entry else None,
    })


# --- Admin ---

@require_GET
@login_required
@user_passes_test(is_admin)
def entry_list(request):
    ctx = AdminContext.from_request(request)
    entries = services.load_entries()
    filtered = services.filter_entries(entries, services.EntryFilters.from_context(ctx))
    return JsonResponse({
        'count': len(filtered),
        'counts': services.entry_counts(entries),
        'entries': EntrySerializer(filtered, many=True).data,
    })


@require_GET
@login_required
@user_passes_test(is_admin)
def entry_detail(request, entry_id):
    entry = get_object_or_404(Entry.objects.select_related('organisation', 'award'), pk=entry_id)
    return JsonResponse({
        'entry': EntrySerializer(entry).data,
        'invoices': InvoiceSerializer(entry.invoices.all(), many=True).data,
    })


@require_POST
@login_required
@user_passes_test(is_admin)
def change_entry_status(request, entry_id):
    entry = get_object_or_404(Entry, pk=entry_id)
    data, error = _json_or_400(request)
    if error:
        return error
    try:
        services.set_entry_status(entry, data.get('status'), performed_by=request.user.email)
    except ValueError as e:
        return error_response(str(e))
    logger.info("Entry %s set to %s by %s", entry.entry_number, entry.status, request.user.get_username())
    return JsonResponse({'status': 'success', 'entry': EntrySerializer(entry).data})


@require_POST
@login_required
@user_passes_test(is_admin)
def update_voting_flags(request, entry_id):
    entry = get_object_or_404(Entry, pk=entry_id)
    data, error = _json_or_400(request)
    if error:
        return error
    serializer = VotingFlagsSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)
    services.set_voting_flags(entry, **serializer.validated_data)
    return JsonResponse({'status': 'success', 'entry': EntrySerializer(entry).data})


@require_POST
@login_required
@user_passes_test(is_admin)
def delete_entry(request, entry_id):
    entry = get_object_or_404(Entry, pk=entry_id)
    entry_number = entry.entry_number
    services.delete_entry(entry, performed_by=request.user.email)
    return JsonResponse({'status': 'success', 'message': f"Entry {entry_number} deleted."})


# --- Invoices ---

@require_GET
@login_required
@user_passes_test(is_admin)
def invoice_list(request):
    """
    Invoices in a date range (``start``/``end``, YYYY-MM-DD, inclusive) with
    optional ``organisation`` and ``status`` filters, plus report totals.
    """
    ctx = AdminContext.from_request(request)
    try:
        filters = services.InvoiceFilters.from_context(ctx)
    except ValueError as e:
        return error_response(str(e))

    invoices = services.filter_invoices(services.load_invoices(), filters)
    outstanding = services.outstanding_entries(filters)
    return JsonResponse({
        'count': len(invoices),
        'summary': services.invoice_summary(invoices, outstanding),
        'invoices': InvoiceReportSerializer(invoices, many=True).data,
        'outstanding': EntrySerializer(outstanding, many=True).data,
    })
