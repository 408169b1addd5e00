"""
Destination URLs for QR codes.

Everything here is a pure function of its inputs: the record, the shop URL
and the hosting configuration. No database or network access.
"""
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urlencode, urlsplit

from django.conf import settings
from django.db import models

from .exceptions import (
    MalformedVariantIdError,
    UnrecognizedDestinationError,
    ValidationError,
)

DEFAULT_PURCHASE_QUANTITY = 1

VARIANT_GID_RE = re.compile(r'gid://shopify/ProductVariant/([0-9]+)')


class Destination(models.TextChoices):
    PRODUCT = 'product', 'Product page'
    CHECKOUT = 'checkout', 'Checkout'


@dataclass(frozen=True)
class HostingConfig:
    """Scheme and host the app is served from."""

    scheme: str
    host: str

    @classmethod
    def from_url(cls, url: str) -> 'HostingConfig':
        parts = urlsplit(url or '')
        if not parts.scheme or not parts.netloc:
            raise ValueError(f'Invalid hosting URL "{url}"')
        return cls(scheme=parts.scheme, host=parts.netloc)

    @classmethod
    def from_settings(cls) -> 'HostingConfig':
        return cls.from_url(getattr(settings, 'SITE_URL', 'http://localhost:8000'))

    @property
    def base_url(self) -> str:
        return f'{self.scheme}://{self.host}'


def scan_url(hosting: HostingConfig, qrcode_id) -> str:
    """Link encoded into the printed QR image."""
    return f'{hosting.base_url}/qrcodes/{qrcode_id}/scan'


def image_url(hosting: HostingConfig, qrcode_id) -> str:
    """Link to the rendered QR graphic."""
    return f'{hosting.base_url}/qrcodes/{qrcode_id}/image'


def normalize_shop_url(value: Optional[str]) -> str:
    """'shop.myshopify.com' -> 'https://shop.myshopify.com'"""
    value = (value or '').strip().rstrip('/')
    if value and '://' not in value:
        value = f'https://{value}'
    return value


def _shop_origin(shop_url: str) -> str:
    parts = urlsplit(normalize_shop_url(shop_url))
    if parts.scheme not in ('http', 'https') or not parts.netloc:
        raise ValidationError(
            f'Invalid shop URL "{shop_url}"',
            {'shop_domain': ['Expected an http(s) shop URL']},
        )
    return f'{parts.scheme}://{parts.netloc}'


def parse_variant_id(variant_id: str) -> str:
    """Numeric part of a product variant GID."""
    match = VARIANT_GID_RE.fullmatch(variant_id or '')
    if not match:
        raise MalformedVariantIdError(variant_id)
    return match.group(1)


@dataclass(frozen=True)
class ProductTarget:
    shop_url: str
    handle: str
    discount_code: Optional[str] = None

    def __post_init__(self):
        _shop_origin(self.shop_url)
        if not self.handle:
            raise ValidationError('Product handle is required', {'handle': ['This field is required.']})
        object.__setattr__(self, 'discount_code', self.discount_code or None)


@dataclass(frozen=True)
class CheckoutTarget:
    shop_url: str
    variant_id: str
    quantity: int = DEFAULT_PURCHASE_QUANTITY
    discount_code: Optional[str] = None

    def __post_init__(self):
        _shop_origin(self.shop_url)
        parse_variant_id(self.variant_id)
        if not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValidationError(
                f'Invalid quantity {self.quantity!r}',
                {'quantity': ['Quantity must be a positive integer']},
            )
        object.__setattr__(self, 'discount_code', self.discount_code or None)


def product_view_url(target: ProductTarget) -> str:
    """
    Product page URL.

    With a discount code the shop's /discount/<code> endpoint comes first and
    the product path is passed along as the redirect parameter.
    """
    origin = _shop_origin(target.shop_url)

    if target.discount_code:
        # urlencode does the escaping, the path goes in raw
        query = urlencode({'redirect': f'/products/{target.handle}'})
        return f"{origin}/discount/{quote(target.discount_code, safe='')}?{query}"

    return f'{origin}/products/{quote(target.handle)}'


def checkout_url(target: CheckoutTarget) -> str:
    """Cart permalink, which Shopify turns into a checkout."""
    origin = _shop_origin(target.shop_url)
    numeric_id = parse_variant_id(target.variant_id)
    url = f'{origin}/cart/{numeric_id}:{target.quantity}'

    if target.discount_code:
        url = f"{url}?{urlencode({'discount': target.discount_code})}"

    return url


def resolve_destination(qrcode, quantity: int = DEFAULT_PURCHASE_QUANTITY) -> str:
    """Where a scan of ``qrcode`` should redirect to."""
    try:
        destination = Destination(qrcode.destination)
    except ValueError:
        raise UnrecognizedDestinationError(qrcode.destination) from None

    if destination == Destination.PRODUCT:
        return product_view_url(ProductTarget(
            shop_url=qrcode.shop_domain,
            handle=qrcode.handle,
            discount_code=qrcode.discount_code,
        ))

    if destination == Destination.CHECKOUT:
        return checkout_url(CheckoutTarget(
            shop_url=qrcode.shop_domain,
            variant_id=qrcode.variant_id,
            quantity=quantity,
            discount_code=qrcode.discount_code,
        ))

    raise UnrecognizedDestinationError(qrcode.destination)
