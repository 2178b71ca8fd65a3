# core/management/commands/export_backup.py

from django.core.management.base import BaseCommand

from core.backup import backup_filename, build_backup_snapshot, dump_snapshot


class Command(BaseCommand):
    help = 'Writes a JSON backup of all awards data (awards, organisations, entries, votes, activity log).'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            type=str,
            help='File to write the backup to. Defaults to awards_cms_backup_<date>.json in the current directory.',
        )

    def handle(self, *args, **options):
        output = options['output'] or backup_filename()
        snapshot = build_backup_snapshot()

        with open(output, 'w', encoding='utf-8') as backup_file:
            backup_file.write(dump_snapshot(snapshot))

        for table, count in snapshot['metadata']['totalRecords'].items():
            self.stdout.write(f"  {table}: {count}")
        self.stdout.write(self.style.SUCCESS(f"Backup written to {output}"))
