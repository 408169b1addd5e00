"""
Management command to delete every QR code of a shop.

Run when a shop uninstalls the app and asks for its data to be removed
(shop/redact).
"""
from django.core.management.base import BaseCommand, CommandError

from apps.qrcodes.destinations import normalize_shop_url
from apps.qrcodes.exceptions import PersistenceError
from apps.qrcodes.store import QRCodeStore


class Command(BaseCommand):
    help = 'Delete all QR codes that belong to a shop'

    def add_arguments(self, parser):
        parser.add_argument('shop', help='Shop domain, e.g. example.myshopify.com')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only count the QR codes that would be deleted',
        )

    def handle(self, *args, **options):
        shop = normalize_shop_url(options['shop'])
        if not shop:
            raise CommandError('Shop domain is required')

        store = QRCodeStore()

        try:
            if options['dry_run']:
                count = len(store.list(shop))
                self.stdout.write(self.style.WARNING(f'DRY RUN: {count} QR codes would be deleted for {shop}'))
                return

            deleted = store.delete_for_shop(shop)
        except PersistenceError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f'Deleted {deleted} QR codes for {shop}'))
