"""Errors raised by the QR code store and destination resolver."""


class QRCodeError(Exception):
    """Base class for QR code errors."""


class NotFoundError(QRCodeError):
    """The referenced QR code does not exist."""

    def __init__(self, qrcode_id):
        self.qrcode_id = qrcode_id
        super().__init__(f'QR code {qrcode_id} not found')


class ValidationError(QRCodeError):
    """A required field is missing or malformed."""

    def __init__(self, message, fields=None):
        self.fields = fields or {}
        super().__init__(message)


class MalformedVariantIdError(ValidationError):
    def __init__(self, variant_id):
        self.variant_id = variant_id
        super().__init__(
            f'Malformed variant id "{variant_id}"',
            {'variant_id': ['Expected gid://shopify/ProductVariant/<digits>']},
        )


class UnrecognizedDestinationError(QRCodeError):
    """A stored record points at a destination we do not know how to build."""

    def __init__(self, destination):
        self.destination = destination
        super().__init__(f'Unrecognized destination "{destination}"')


class PersistenceError(QRCodeError):
    """The underlying database call failed."""
