from django.core.exceptions import ValidationError
from django.db import models

from .destinations import VARIANT_GID_RE, Destination


def validate_variant_id(value):
    if not VARIANT_GID_RE.fullmatch(value or ''):
        raise ValidationError(
            'Expected gid://shopify/ProductVariant/<digits>, got %(value)s',
            params={'value': value},
        )


class QRCode(models.Model):
    """QR code pointing at a product page or a pre-filled checkout"""

    shop_domain = models.CharField('Shop domain', max_length=511)
    title = models.CharField('Title', max_length=511)
    product_id = models.CharField('Product ID', max_length=255)
    variant_id = models.CharField('Variant ID', max_length=255, validators=[validate_variant_id])
    handle = models.CharField('Product handle', max_length=255)

    # Optional discount, None when absent
    discount_id = models.CharField('Discount ID', max_length=255, blank=True, null=True)
    discount_code = models.CharField('Discount code', max_length=255, blank=True, null=True)

    destination = models.CharField('Destination', max_length=255, choices=Destination.choices)

    scans = models.PositiveIntegerField('Scans', default=0)
    created_at = models.DateTimeField('Created', auto_now_add=True)

    MUTABLE_FIELDS = (
        'title',
        'product_id',
        'variant_id',
        'handle',
        'discount_id',
        'discount_code',
        'destination',
    )
    OPTIONAL_FIELDS = ('discount_id', 'discount_code')

    class Meta:
        db_table = 'qr_codes'
        verbose_name = 'QR code'
        verbose_name_plural = 'QR codes'

    def __str__(self):
        return f'QR-{self.pk}: {self.title}'

    def to_dict(self):
        """Serialise for the JSON API, derived URLs included when attached."""
        return {
            'id': self.pk,
            'shop_domain': self.shop_domain,
            'title': self.title,
            'product_id': self.product_id,
            'variant_id': self.variant_id,
            'handle': self.handle,
            'discount_id': self.discount_id,
            'discount_code': self.discount_code,
            'destination': self.destination,
            'scans': self.scans,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'destination_url': getattr(self, 'destination_url', None),
            'image_url': getattr(self, 'image_url', None),
        }
