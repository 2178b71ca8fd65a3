import json
import logging
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from awards.models import Award
from awards.serializers import PublicAwardSerializer
from core.exceptions import AwardsError
from core.paging import load_all
from core.utils import client_ip, error_response, parse_int, read_json_body
from .serializers import CastVoteSerializer, VotableEntrySerializer
from . import services

logger = logging.getLogger(__name__)


@require_GET
@ensure_csrf_cookie
def voting_awards(request):
    awards = load_all(Award.objects.filter(is_active=True).order_by('award_name'))
    return JsonResponse({'awards': PublicAwardSerializer(awards, many=True).data})


@require_GET
def voting_entries(request):
    entries = services.votable_entries(award_id=parse_int(request.GET.get('award')))
    voted_ids = services.voted_entry_ids(request.GET.get('email'))
    return JsonResponse({
        'count': len(entries),
        'total_votes': services.total_votes(entries),
        'entries': VotableEntrySerializer(entries, many=True, context={'voted_ids': voted_ids}).data,
    })


@require_GET
def nominee_detail(request):
    entry_number = (request.GET.get('entry') or '').strip()
    entry_id = parse_int(request.GET.get('id'))
    if not entry_number and entry_id is None:
        return error_response('No entry specified.')
    try:
        entry = services.get_votable_entry(entry_id=entry_id, entry_number=entry_number)
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)
    voted_ids = services.voted_entry_ids(request.GET.get('email'))
    return JsonResponse({'entry': VotableEntrySerializer(entry, context={'voted_ids': voted_ids}).data})


@require_POST
def cast_vote(request):
    try:
        data = read_json_body(request)
    except (json.JSONDecodeError, ValueError):
        return error_response('Invalid JSON data.')

    serializer = CastVoteSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'status': 'error', 'errors': serializer.errors}, status=400)

    try:
        vote, public_votes = services.cast_vote(
            serializer.validated_data['entry_id'],
            serializer.validated_data['voter_email'],
            voter_name=serializer.validated_data['voter_name'],
            voter_ip=client_ip(request),
        )
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)

    return JsonResponse({
        'status': 'success',
        'message': "Thank you for voting! Please check your email to confirm your vote.",
        'entry_id': vote.entry_id,
        'public_votes': public_votes,
    }, status=201)


@require_GET
def verify_vote(request, token):
    try:
        vote = services.verify_vote(token)
    except AwardsError as e:
        return error_response(e.message, status=e.status_code)
    return JsonResponse({'status': 'success', 'message': 'Thank you, your vote has been confirmed.', 'entry_id': vote.entry_id})
