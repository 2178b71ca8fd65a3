# core/stats.py
from collections import Counter
from django.db.models import Count, Q, Sum

from awards.models import Award
from entries.models import Entry, Invoice
from organisations.models import Assignment, Organisation
from .models import ActivityLog
from .utils import format_money

TOP_CATEGORIES = 8
TOP_COMPANIES = 5
RECENT_ACTIVITY = 10


def _grouped(queryset, field, limit=None):
    rows = (
        queryset.exclude(**{field: ''})
        .values(field)
        .annotate(count=Count('id'))
        .order_by('-count', field)
    )
    if limit:
        rows = rows[:limit]
    return [{'name': row[field], 'count': row['count']} for row in rows]


def dashboard_stats():
    """
    Everything the admin dashboard shows in one dictionary.
    """
    awards = Award.objects.all()
    winners = Assignment.objects.filter(status=Assignment.Status.WINNER)

    totals = awards.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status__in=[Award.Status.DRAFT, Award.Status.PENDING])),
    )

    entry_counts = {status: 0 for status in Entry.Status.values}
    for row in Entry.objects.values('status').annotate(count=Count('id')):
        entry_counts[row['status']] = row['count']

    revenue = Invoice.objects.filter(status=Invoice.Status.PAID).aggregate(total=Sum('total_amount'))['total']

    winners_by_year = Counter(winners.values_list('award__year', flat=True))

    top_companies = (
        winners.values('organisation__company_name')
        .annotate(wins=Count('id'))
        .order_by('-wins', 'organisation__company_name')[:TOP_COMPANIES]
    )

    recent = ActivityLog.objects.all()[:RECENT_ACTIVITY]

    return {
        'totals': {
            'awards': totals['total'],
            'pending_awards': totals['pending'],
            'organisations': Organisation.objects.count(),
            'winners': winners.count(),
            'entries': sum(entry_counts.values()),
            'public_votes': Entry.objects.aggregate(total=Sum('public_votes'))['total'] or 0,
        },
        'entries_by_status': entry_counts,
        'revenue': format_money(revenue),
        'winners_by_year': [{'year': year, 'count': winners_by_year[year]} for year in sorted(winners_by_year)],
        'awards_by_category': _grouped(awards, 'category', limit=TOP_CATEGORIES),
        'awards_by_sector': _grouped(awards, 'sector'),
        'awards_by_region': _grouped(awards, 'region'),
        'top_companies': [
            {'company_name': row['organisation__company_name'], 'wins': row['wins']} for row in top_companies
        ],
        'recent_activity': [
            {
                'entity_type': log.entity_type,
                'entity_id': log.entity_id,
                'action': log.action,
                'details': log.details,
                'performed_by': log.performed_by,
                'created_at': log.created_at.isoformat(),
            }
            for log in recent
        ],
    }
