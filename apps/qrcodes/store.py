"""
QR code persistence.

QRCodeStore is constructed once in urls.py and handed to the views, tests
build their own. The backing table is created on first use if it is missing
and is never altered afterwards.
"""
import logging
import threading
from contextlib import contextmanager
from typing import List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections
from django.db.models import F

from . import destinations
from .destinations import HostingConfig, normalize_shop_url
from .exceptions import NotFoundError, PersistenceError, ValidationError
from .models import QRCode

logger = logging.getLogger(__name__)


class QRCodeStore:
    """CRUD for QR codes, listing is scoped by shop domain."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS, hosting: Optional[HostingConfig] = None):
        self.using = using
        self._hosting = hosting
        self._schema_ready = False
        self._schema_lock = threading.Lock()

    @property
    def hosting(self) -> HostingConfig:
        # Read settings on every call so URLs follow the current SITE_URL
        return self._hosting or HostingConfig.from_settings()

    @property
    def objects(self):
        return QRCode.objects.using(self.using)

    # Schema

    def ensure_schema(self) -> bool:
        """Create the qr_codes table if it does not exist yet."""
        with self._schema_lock:
            with self._persistence('ensure schema'):
                connection = connections[self.using]
                if QRCode._meta.db_table in connection.introspection.table_names():
                    created = False
                else:
                    with connection.schema_editor() as editor:
                        editor.create_model(QRCode)
                    logger.info(f"Created table {QRCode._meta.db_table}")
                    created = True
            self._schema_ready = True
        return created

    def _ready(self):
        if not self._schema_ready:
            self.ensure_schema()

    # CRUD

    def create(self, shop_domain: str, fields: dict) -> int:
        """Insert a new QR code with zero scans and return its id."""
        self._ready()
        qrcode = QRCode(shop_domain=normalize_shop_url(shop_domain), scans=0)
        self._assign(qrcode, fields)
        self._validate(qrcode)

        with self._persistence('create'):
            qrcode.save(using=self.using, force_insert=True)

        logger.info(f"Created QR code {qrcode.pk} for {qrcode.shop_domain}")
        return qrcode.pk

    def read(self, qrcode_id) -> Optional[QRCode]:
        self._ready()
        pk = self._to_pk(qrcode_id)
        if pk is None:
            return None

        with self._persistence('read'):
            qrcode = self.objects.filter(pk=pk).first()

        return self._with_urls(qrcode) if qrcode else None

    def list(self, shop_domain: str) -> List[QRCode]:
        self._ready()
        with self._persistence('list'):
            qrcodes = list(
                self.objects.filter(shop_domain=normalize_shop_url(shop_domain)).order_by('pk')
            )
        return [self._with_urls(qrcode) for qrcode in qrcodes]

    def update(self, qrcode_id, fields: dict) -> QRCode:
        """Replace every mutable field of an existing QR code."""
        qrcode = self.read(qrcode_id)
        if qrcode is None:
            raise NotFoundError(qrcode_id)

        self._assign(qrcode, fields)
        self._validate(qrcode)

        values = {name: getattr(qrcode, name) for name in QRCode.MUTABLE_FIELDS}
        with self._persistence('update'):
            updated = self.objects.filter(pk=qrcode.pk).update(**values)
        # Deleted since it was read
        if not updated:
            raise NotFoundError(qrcode_id)

        return qrcode

    def delete(self, qrcode_id) -> None:
        """Hard delete. Unknown ids are ignored."""
        self._ready()
        pk = self._to_pk(qrcode_id)
        if pk is None:
            return

        with self._persistence('delete'):
            self.objects.filter(pk=pk).delete()

    def delete_for_shop(self, shop_domain: str) -> int:
        self._ready()
        with self._persistence('delete for shop'):
            deleted, _ = self.objects.filter(shop_domain=normalize_shop_url(shop_domain)).delete()
        logger.info(f"Deleted {deleted} QR codes for {shop_domain}")
        return deleted

    def increment_scan_count(self, qrcode_id) -> None:
        """Add one scan as a single UPDATE, so concurrent scans are not lost."""
        self._ready()
        pk = self._to_pk(qrcode_id)
        if pk is None:
            raise NotFoundError(qrcode_id)

        with self._persistence('increment scan count'):
            updated = self.objects.filter(pk=pk).update(scans=F('scans') + 1)
        if not updated:
            raise NotFoundError(qrcode_id)

    # Derived URLs

    def scan_url(self, qrcode_id) -> str:
        return destinations.scan_url(self.hosting, qrcode_id)

    def image_url(self, qrcode_id) -> str:
        return destinations.image_url(self.hosting, qrcode_id)

    # Helpers

    def _with_urls(self, qrcode: QRCode) -> QRCode:
        hosting = self.hosting
        qrcode.destination_url = destinations.scan_url(hosting, qrcode.pk)
        qrcode.image_url = destinations.image_url(hosting, qrcode.pk)
        return qrcode

    @staticmethod
    def _to_pk(qrcode_id) -> Optional[int]:
        """Integer ids and digit strings only, anything else is unknown."""
        if isinstance(qrcode_id, bool):
            return None
        if isinstance(qrcode_id, int):
            return qrcode_id
        if isinstance(qrcode_id, str) and qrcode_id.isascii() and qrcode_id.isdigit():
            return int(qrcode_id)
        return None

    @staticmethod
    def _assign(qrcode: QRCode, fields: dict) -> None:
        for name in QRCode.MUTABLE_FIELDS:
            value = fields.get(name)
            if isinstance(value, str):
                value = value.strip()
            if name in QRCode.OPTIONAL_FIELDS:
                value = value or None
            elif value is None:
                value = ''
            setattr(qrcode, name, value)

    @staticmethod
    def _validate(qrcode: QRCode) -> None:
        try:
            qrcode.full_clean(exclude=['scans', 'created_at'])
        except DjangoValidationError as e:
            raise ValidationError('Invalid QR code', e.message_dict) from e

    @contextmanager
    def _persistence(self, operation: str):
        try:
            yield
        except DatabaseError as e:
            logger.error(f"QR code store failed to {operation}: {e}")
            raise PersistenceError(f'Failed to {operation}: {e}') from e
