"""Tests for destination URL building."""

from urllib.parse import parse_qs, urlsplit

from django.test import SimpleTestCase, override_settings

from apps.qrcodes.destinations import (
    CheckoutTarget,
    Destination,
    HostingConfig,
    ProductTarget,
    checkout_url,
    image_url,
    normalize_shop_url,
    parse_variant_id,
    product_view_url,
    resolve_destination,
    scan_url,
)
from apps.qrcodes.exceptions import (
    MalformedVariantIdError,
    UnrecognizedDestinationError,
    ValidationError,
)
from apps.qrcodes.models import QRCode

from .helpers import SHOP, qrcode_fields


def make_qrcode(**overrides):
    """Unsaved record, the resolver never touches the database."""
    return QRCode(pk=7, shop_domain=SHOP, **qrcode_fields(**overrides))


class ProductDestinationTests(SimpleTestCase):

    def test_product_without_discount(self):
        """Product QR goes straight to the product page."""
        url = resolve_destination(make_qrcode())
        self.assertEqual(url, f'{SHOP}/products/summer-shirt')

    def test_product_with_discount(self):
        """Discount path wins, product path moves into ?redirect=."""
        url = resolve_destination(make_qrcode(discount_code='SUMMER20'))
        self.assertEqual(url, f'{SHOP}/discount/SUMMER20?redirect=%2Fproducts%2Fsummer-shirt')

    def test_discount_redirect_encodes_handle_once(self):
        """The redirect parameter decodes back to the plain product path."""
        for handle in ('tee shirt', 'café-mug', 'a&b'):
            with self.subTest(handle=handle):
                url = resolve_destination(make_qrcode(handle=handle, discount_code='D'))
                query = parse_qs(urlsplit(url).query)
                self.assertEqual(query['redirect'], [f'/products/{handle}'])

    def test_product_path_escapes_handle(self):
        url = resolve_destination(make_qrcode(handle='tee shirt'))
        self.assertEqual(url, f'{SHOP}/products/tee%20shirt')

    def test_empty_discount_code_means_no_discount(self):
        url = resolve_destination(make_qrcode(discount_code=''))
        self.assertEqual(url, f'{SHOP}/products/summer-shirt')

    def test_shop_domain_without_scheme(self):
        """Bare shop domains are treated as https."""
        qrcode = make_qrcode()
        qrcode.shop_domain = 'red-shirts.myshopify.com'
        self.assertEqual(resolve_destination(qrcode), f'{SHOP}/products/summer-shirt')

    def test_product_target_requires_handle(self):
        with self.assertRaises(ValidationError):
            ProductTarget(shop_url=SHOP, handle='')

    def test_product_view_url_ignores_shop_path(self):
        target = ProductTarget(shop_url=f'{SHOP}/collections/all', handle='hat')
        self.assertEqual(product_view_url(target), f'{SHOP}/products/hat')


class CheckoutDestinationTests(SimpleTestCase):

    def test_checkout_without_discount(self):
        url = resolve_destination(make_qrcode(destination='checkout'))
        self.assertEqual(url, f'{SHOP}/cart/12345:1')

    def test_checkout_with_discount(self):
        url = resolve_destination(make_qrcode(destination='checkout', discount_code='SAVE10'))
        self.assertEqual(url, f'{SHOP}/cart/12345:1?discount=SAVE10')

    def test_checkout_quantity(self):
        url = resolve_destination(make_qrcode(destination='checkout'), quantity=3)
        self.assertEqual(url, f'{SHOP}/cart/12345:3')

    def test_checkout_rejects_zero_quantity(self):
        with self.assertRaises(ValidationError):
            CheckoutTarget(shop_url=SHOP, variant_id='gid://shopify/ProductVariant/1', quantity=0)

    def test_checkout_malformed_variant(self):
        """Variant ids must be product variant GIDs."""
        qrcode = make_qrcode(destination='checkout', variant_id='12345')
        with self.assertRaises(MalformedVariantIdError) as ctx:
            resolve_destination(qrcode)
        self.assertEqual(ctx.exception.variant_id, '12345')

    def test_checkout_url_builds_from_target(self):
        target = CheckoutTarget(shop_url=SHOP, variant_id='gid://shopify/ProductVariant/42')
        self.assertEqual(checkout_url(target), f'{SHOP}/cart/42:1')


class VariantIdTests(SimpleTestCase):

    def test_parse_numeric_suffix(self):
        self.assertEqual(parse_variant_id('gid://shopify/ProductVariant/987654321'), '987654321')

    def test_rejects_other_shapes(self):
        for value in (
            '',
            None,
            'gid://shopify/Product/12345',
            'gid://shopify/ProductVariant/',
            'gid://shopify/ProductVariant/12a',
            'gid://shopify/ProductVariant/123/extra',
        ):
            with self.subTest(value=value):
                with self.assertRaises(MalformedVariantIdError):
                    parse_variant_id(value)

    def test_malformed_variant_is_a_validation_error(self):
        with self.assertRaises(ValidationError):
            parse_variant_id('nope')


class UnrecognizedDestinationTests(SimpleTestCase):

    def test_unknown_destination_fails(self):
        """Unknown destinations never resolve to a URL."""
        with self.assertRaises(UnrecognizedDestinationError) as ctx:
            resolve_destination(make_qrcode(destination='banana'))
        self.assertEqual(ctx.exception.destination, 'banana')
        self.assertIn('banana', str(ctx.exception))

    def test_empty_destination_fails(self):
        with self.assertRaises(UnrecognizedDestinationError):
            resolve_destination(make_qrcode(destination=''))

    def test_destination_values(self):
        self.assertEqual(set(Destination.values), {'product', 'checkout'})


class HostingUrlTests(SimpleTestCase):

    def setUp(self):
        self.hosting = HostingConfig(scheme='https', host='qr.example.com')

    def test_scan_url(self):
        self.assertEqual(scan_url(self.hosting, 5), 'https://qr.example.com/qrcodes/5/scan')

    def test_image_url(self):
        self.assertEqual(image_url(self.hosting, 5), 'https://qr.example.com/qrcodes/5/image')

    def test_from_url_keeps_port(self):
        hosting = HostingConfig.from_url('http://localhost:8000/')
        self.assertEqual(hosting.scheme, 'http')
        self.assertEqual(hosting.host, 'localhost:8000')

    def test_from_url_rejects_garbage(self):
        with self.assertRaises(ValueError):
            HostingConfig.from_url('not a url')

    @override_settings(SITE_URL='https://codes.example.org')
    def test_from_settings(self):
        self.assertEqual(HostingConfig.from_settings().base_url, 'https://codes.example.org')


class NormalizeShopUrlTests(SimpleTestCase):

    def test_normalize(self):
        cases = [
            ('red-shirts.myshopify.com', SHOP),
            (f'{SHOP}/', SHOP),
            (f'  {SHOP} ', SHOP),
            ('http://localhost:3000', 'http://localhost:3000'),
            ('', ''),
            (None, ''),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(normalize_shop_url(value), expected)
