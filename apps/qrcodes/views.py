"""Public QR endpoints: scan redirect and image."""
import logging

from django.http import Http404, HttpResponse, HttpResponseRedirect, HttpResponseServerError
from django.views import View

from .destinations import resolve_destination
from .exceptions import QRCodeError, UnrecognizedDestinationError, ValidationError
from .services import QRImageService

logger = logging.getLogger(__name__)


class QRCodeStoreMixin:
    """The store is injected with as_view(store=...)."""

    store = None

    def get_qrcode(self, pk):
        qrcode = self.store.read(pk)
        if qrcode is None:
            raise Http404('QR code not found')
        return qrcode


class ScanView(QRCodeStoreMixin, View):
    """Count the scan and redirect to the product page or checkout"""

    def get(self, request, pk):
        qrcode = self.get_qrcode(pk)

        self.record_scan(qrcode)

        try:
            url = resolve_destination(qrcode)
        except UnrecognizedDestinationError as e:
            logger.error(f"QR code {qrcode.pk} has invalid data: {e}")
            return HttpResponseServerError(str(e))
        except ValidationError as e:
            logger.error(f"QR code {qrcode.pk} cannot build destination URL: {e}")
            return HttpResponseServerError(str(e))

        return HttpResponseRedirect(url)

    def record_scan(self, qrcode):
        # Best effort: a lost count must not block the redirect
        try:
            self.store.increment_scan_count(qrcode.pk)
        except QRCodeError:
            logger.exception(f"Failed to count scan for QR code {qrcode.pk}")


class ImageView(QRCodeStoreMixin, View):
    """PNG with the scan URL encoded"""

    def get(self, request, pk):
        qrcode = self.get_qrcode(pk)
        png = QRImageService.generate_png(self.store.scan_url(qrcode.pk))

        response = HttpResponse(png, content_type='image/png')
        response['Content-Disposition'] = f'inline; filename="qrcode_{qrcode.pk}.png"'
        return response
