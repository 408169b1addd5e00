"""
JSON API for managing a shop's QR codes.

The shop is taken from the X-Shopify-Shop-Domain header (or ?shop=), which
the platform layer in front of us sets after authenticating the session.
"""
import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .destinations import normalize_shop_url
from .exceptions import NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

SHOP_HEADER = 'HTTP_X_SHOPIFY_SHOP_DOMAIN'


def get_shop_domain(request):
    shop = request.META.get(SHOP_HEADER) or request.GET.get('shop', '')
    return normalize_shop_url(shop)


def parse_json(request):
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def error_response(message, status, **extra):
    return JsonResponse({'error': message, **extra}, status=status)


@method_decorator(csrf_exempt, name='dispatch')
class QRCodeAPIView(View):
    """Shared shop lookup and error mapping."""

    store = None

    def dispatch(self, request, *args, **kwargs):
        self.shop_domain = get_shop_domain(request)
        if not self.shop_domain:
            return error_response('Missing shop domain', 400)

        try:
            return super().dispatch(request, *args, **kwargs)
        except ValidationError as e:
            return error_response(str(e), 400, fields=e.fields)
        except NotFoundError:
            return error_response('QR code not found', 404)
        except PersistenceError:
            logger.exception('QR code API request failed')
            return error_response('Storage error', 500)

    def get_owned(self, pk):
        """Records of other shops are reported as missing."""
        qrcode = self.store.read(pk)
        if qrcode is None or qrcode.shop_domain != self.shop_domain:
            raise NotFoundError(pk)
        return qrcode


class QRCodeListView(QRCodeAPIView):

    def get(self, request):
        qrcodes = self.store.list(self.shop_domain)
        return JsonResponse({'qrcodes': [qrcode.to_dict() for qrcode in qrcodes]})

    def post(self, request):
        data = parse_json(request)
        if data is None:
            return error_response('Invalid JSON', 400)

        qrcode_id = self.store.create(self.shop_domain, data)
        return JsonResponse(self.store.read(qrcode_id).to_dict(), status=201)


class QRCodeDetailView(QRCodeAPIView):

    def get(self, request, pk):
        return JsonResponse(self.get_owned(pk).to_dict())

    def put(self, request, pk):
        data = parse_json(request)
        if data is None:
            return error_response('Invalid JSON', 400)

        self.get_owned(pk)
        qrcode = self.store.update(pk, data)
        return JsonResponse(qrcode.to_dict())

    patch = put

    def delete(self, request, pk):
        qrcode = self.store.read(pk)
        if qrcode is not None and qrcode.shop_domain == self.shop_domain:
            self.store.delete(pk)
        return JsonResponse({'success': True})
