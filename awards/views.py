import json
import logging
from django.contrib.auth.decorators import login_required, user_passes_test
from django.db.models import ProtectedError
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from core.context import AdminContext
from core.utils import error_response, is_admin, read_json_body
from .models import Award
from .serializers import AwardSerializer
from . import services

logger = logging.getLogger(__name__)


@require_GET
@login_required
@user_passes_test(is_admin)
def award_list(request):
    ctx = AdminContext.from_request(request)
    filters = services.AwardFilters.from_context(ctx)

    awards = services.load_awards()
    filtered = services.filter_awards(awards, filters)

    return JsonResponse({
        'count': len(filtered),
        'total': len(awards),
        'awards': AwardSerializer(filtered, many=True).data,
        'filters': services.filter_options(awards),
    })


@require_POST
@login_required
@user_passes_test(is_admin)
def award_create(request):
    try:
        data = read_json_body(request)
    except (json.JSONDecodeError, ValueError):
        return error_response('Invalid JSON data.')

    serializer = AwardSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)
    award = serializer.save()
    logger.info("Award %s created by '%s'", award.pk, request.user.get_username())
    return JsonResponse({'status': 'success', 'award': AwardSerializer(award).data}, status=201)


@require_POST
@login_required
@user_passes_test(is_admin)
def award_update(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    try:
        data = read_json_body(request)
    except (json.JSONDecodeError, ValueError):
        return error_response('Invalid JSON data.')

    serializer = AwardSerializer(award, data=data, partial=True)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)
    award = serializer.save()
    return JsonResponse({'status': 'success', 'award': AwardSerializer(award).data})


@require_POST
@login_required
@user_passes_test(is_admin)
def approve_award(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    services.set_award_status(award, Award.Status.APPROVED)
    return JsonResponse({'status': 'success', 'message': 'Award approved successfully!'})


@require_POST
@login_required
@user_passes_test(is_admin)
def reject_award(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    services.set_award_status(award, Award.Status.REJECTED)
    return JsonResponse({'status': 'success', 'message': 'Award rejected.'})


@require_POST
@login_required
@user_passes_test(is_admin)
def delete_award(request, award_id):
    award = get_object_or_404(Award, pk=award_id)
    award_name = str(award)
    try:
        award.delete()
    except ProtectedError:
        return error_response('This award has entries and cannot be deleted.', status=409)
    logger.info("Award '%s' deleted by '%s'", award_name, request.user.get_username())
    return JsonResponse({'status': 'success', 'message': 'Award deleted successfully'})
