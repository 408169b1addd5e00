SHOP = 'https://red-shirts.myshopify.com'
OTHER_SHOP = 'https://blue-hats.myshopify.com'
SITE_URL = 'https://qr.example.com'


def qrcode_fields(**overrides):
    fields = {
        'title': 'Summer shirt',
        'product_id': 'gid://shopify/Product/111',
        'variant_id': 'gid://shopify/ProductVariant/12345',
        'handle': 'summer-shirt',
        'discount_id': None,
        'discount_code': None,
        'destination': 'product',
    }
    fields.update(overrides)
    return fields
