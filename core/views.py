import logging
from django.conf import settings
from django.contrib.auth.decorators import login_required, user_passes_test
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from .backup import backup_filename, build_backup_snapshot, dump_snapshot, table_counts
from .stats import dashboard_stats
from .utils import is_admin

logger = logging.getLogger(__name__)


@require_GET
@login_required
@user_passes_test(is_admin)
def dashboard_stats_view(request):
    return JsonResponse(dashboard_stats())


@require_GET
@login_required
@user_passes_test(is_admin)
def download_backup(request):
    snapshot = build_backup_snapshot()
    response = HttpResponse(dump_snapshot(snapshot), content_type='application/json')
    response['Content-Disposition'] = f'attachment; filename="{backup_filename()}"'
    logger.info("Backup downloaded by %s", request.user.get_username())
    return response


@require_GET
@login_required
@user_passes_test(is_admin)
def system_info(request):
    return JsonResponse({
        'site_name': settings.SITE_NAME,
        'debug': settings.DEBUG,
        'payments_configured': bool(settings.STRIPE_SECRET_KEY and settings.STRIPE_WEBHOOK_SECRET),
        'count_verified_votes_only': settings.VOTING_COUNT_VERIFIED_ONLY,
        'session_timeout_seconds': settings.ADMIN_INACTIVITY_TIMEOUT,
        'record_counts': table_counts(),
    })
