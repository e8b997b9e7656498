from django.core.management.base import BaseCommand

from records.collections import COLLECTIONS, get_collection
from records.serializers.records import serializer_for
from records.store import get_store


class Command(BaseCommand):
    help = "Print one collection as a table, most recent first."

    def add_arguments(self, parser):
        parser.add_argument('kind', choices=sorted(COLLECTIONS))

    def handle(self, *args, **options):
        kind = options['kind']
        collection = get_collection(kind)
        rows = get_store().list(kind)
        columns = list(serializer_for(kind)().fields)
        widths = {c: max([len(c)] + [len(str(r.get(c, ''))) for r in rows]) for c in columns}

        self.stdout.write(self.style.MIGRATE_HEADING(f'{collection.label} ({len(rows)})'))
        self.stdout.write('  '.join(c.ljust(widths[c]) for c in columns))
        self.stdout.write('  '.join('-' * widths[c] for c in columns))
        for r in rows:
            self.stdout.write('  '.join(str(r.get(c, '')).ljust(widths[c]) for c in columns))
