"""Management command to create the qr_codes table on a fresh database."""

from django.core.management.base import BaseCommand

from apps.qrcodes.store import QRCodeStore


class Command(BaseCommand):
    help = 'Create the qr_codes table if it does not exist (never alters it)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--database',
            default='default',
            help='Database alias to use',
        )

    def handle(self, *args, **options):
        store = QRCodeStore(using=options['database'])

        if store.ensure_schema():
            self.stdout.write(self.style.SUCCESS('Created qr_codes table'))
        else:
            self.stdout.write('qr_codes table already exists')
