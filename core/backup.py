"""
Full JSON export of the back office data, used by the settings page download
and the ``export_backup`` management command. There is no restore path.
"""
import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

from awards.models import Award
from entries.models import Entry, Invoice
from organisations.models import Assignment, Organisation
from voting.models import Vote
from .models import ActivityLog
from .paging import load_all

logger = logging.getLogger(__name__)

BACKUP_VERSION = '1.0.0'

BACKUP_TABLES = {
    'awards': Award,
    'organisations': Organisation,
    'assignments': Assignment,
    'entries': Entry,
    'invoices': Invoice,
    'votes': Vote,
    'activity_log': ActivityLog,
}


def table_counts():
    return {name: model.objects.count() for name, model in BACKUP_TABLES.items()}


def build_backup_snapshot():
    tables = {}
    for name, model in BACKUP_TABLES.items():
        tables[name] = load_all(model.objects.order_by('pk').values())
    snapshot = {
        'version': BACKUP_VERSION,
        'exportDate': timezone.now().isoformat(),
        'tables': tables,
        'metadata': {
            'totalRecords': {name: len(rows) for name, rows in tables.items()},
        },
    }
    logger.info("Built backup snapshot: %s", snapshot['metadata']['totalRecords'])
    return snapshot


def dump_snapshot(snapshot, indent=2):
    return json.dumps(snapshot, cls=DjangoJSONEncoder, indent=indent)


def backup_filename(today=None):
    today = today or timezone.localdate()
    return f"awards_cms_backup_{today.isoformat()}.json"
