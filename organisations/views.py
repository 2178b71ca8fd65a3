import json
import logging
from django.contrib.auth.decorators import login_required, user_passes_test
from django.db.models import ProtectedError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from awards.models import Award
from core.context import AdminContext
from core.exceptions import AwardsError
from core.utils import error_response, is_admin, parse_int, read_json_body
from .models import Assignment, Organisation
from .serializers import AssignmentSerializer, OrganisationSerializer, WinnerSerializer
from . import services

logger = logging.getLogger(__name__)


def _json_or_400(request):
    try:
        return read_json_body(request), None
    except (json.JSONDecodeError, ValueError):
        return None, error_response('Invalid JSON data.')


# --- Organisations ---

@require_GET
@login_required
@user_passes_test(is_admin)
def organisation_list(request):
    ctx = AdminContext.from_request(request)
    organisations = services.load_organisations()
    filtered = services.filter_organisations(organisations, ctx.text('search'))
    return JsonResponse({
        'count': len(filtered),
        'total': len(organisations),
        'organisations': OrganisationSerializer(filtered, many=True).data,
    })


@require_POST
@login_required
@user_passes_test(is_admin)
def organisation_create(request):
    data, error = _json_or_400(request)
    if error:
        return error
    serializer = OrganisationSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)
    organisation = serializer.save()
    return JsonResponse({'status': 'success', 'organisation': OrganisationSerializer(organisation).data}, status=201)


@require_POST
@login_required
@user_passes_test(is_admin)
def organisation_update(request, organisation_id):
    organisation = get_object_or_404(Organisation, pk=organisation_id)
    data, error = _json_or_400(request)
    if error:
        return error
    serializer = OrganisationSerializer(organisation, data=data, partial=True)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)
    organisation = serializer.save()
    return JsonResponse({'status': 'success', 'organisation': OrganisationSerializer(organisation).data})


@require_POST
@login_required
@user_passes_test(is_admin)
def organisation_delete(request, organisation_id):
    organisation = get_object_or_404(Organisation, pk=organisation_id)
    try:
        organisation.delete()
    except ProtectedError:
        return error_response('This organisation has entries and cannot be deleted.', status=409)
    return JsonResponse({'status': 'success', 'message': 'Organisation deleted successfully'})


# --- Assignments ---

@require_GET
@login_required
@user_passes_test(is_admin)
def award_assignments(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    assignments = services.assignments_for_award(award)
    assigned_ids = {a.organisation_id for a in assignments}
    available = [org for org in services.load_organisations() if org.id not in assigned_ids]
    return JsonResponse({
        'award': {'id': award.id, 'award_name': award.award_name},
        'assignments': AssignmentSerializer(assignments, many=True).data,
        'available_organisations': [
            {'id': org.id, 'company_name': org.company_name, 'email': org.email, 'logo_url': org.logo_url}
            for org in available
        ],
    })


@require_POST
@login_required
@user_passes_test(is_admin)
def assign_organisation(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    data, error = _json_or_400(request)
    if error:
        return error
    organisation = get_object_or_404(Organisation, pk=parse_int(data.get('organisation_id')))
    try:
        assignment = services.assign_organisation(award, organisation, assigned_by=request.user.email)
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)
    return JsonResponse({
        'status': 'success',
        'message': f"{organisation.company_name} assigned successfully!",
        'assignment': AssignmentSerializer(assignment).data,
    }, status=201)


@require_POST
@login_required
@user_passes_test(is_admin)
def bulk_assign(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    data, error = _json_or_400(request)
    if error:
        return error
    organisation_ids = data.get('organisation_ids')
    if not isinstance(organisation_ids, list) or not organisation_ids:
        return error_response('organisation_ids must be a non-empty list.')
    created = services.bulk_assign(award, organisation_ids, assigned_by=request.user.email)
    return JsonResponse({'status': 'success', 'message': f"{created} companies assigned successfully!", 'created': created})


@require_POST
@login_required
@user_passes_test(is_admin)
def remove_assignment(request, assignment_id):
    assignment = get_object_or_404(Assignment, pk=assignment_id)
    services.remove_assignment(assignment)
    return JsonResponse({'status': 'success', 'message': 'Company removed from the award.'})


@require_POST
@login_required
@user_passes_test(is_admin)
def change_assignment_status(request, assignment_id):
    assignment = get_object_or_404(Assignment.objects.select_related('award', 'organisation'), pk=assignment_id)
    data, error = _json_or_400(request)
    if error:
        return error
    try:
        services.change_status(assignment, data.get('status'), performed_by=request.user.email)
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)
    return JsonResponse({
        'status': 'success',
        'message': f"Status changed to {assignment.get_status_display()}",
        'assignment': AssignmentSerializer(assignment).data,
    })


@require_POST
@login_required
@user_passes_test(is_admin)
def set_judge_score(request, assignment_id):
    assignment = get_object_or_404(Assignment, pk=assignment_id)
    data, error = _json_or_400(request)
    if error:
        return error
    try:
        services.set_judge_score(assignment, data.get('judge_score'))
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)
    return JsonResponse({'status': 'success', 'assignment': AssignmentSerializer(assignment).data})


# --- Winners ---

@require_GET
@login_required
@user_passes_test(is_admin)
def winner_list(request):
    ctx = AdminContext.from_request(request)
    winners = services.load_winners()
    filtered = services.filter_winners(winners, services.WinnerFilters.from_context(ctx))
    return JsonResponse({
        'count': len(filtered),
        'total': len(winners),
        'filters': services.winner_filter_options(winners),
        'winners': WinnerSerializer(filtered, many=True).data,
    })
