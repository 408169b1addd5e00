"""
QR image rendering.

Views stay thin, the PNG is produced here.
"""
import io

import qrcode
from PIL import Image


class QRImageService:
    """Renders scan URLs as PNG QR codes."""

    FILL_COLOR = 'black'
    BACK_COLOR = 'white'
    BOX_SIZE = 10
    BORDER = 4

    @classmethod
    def generate(cls, data: str) -> Image.Image:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=cls.BOX_SIZE,
            border=cls.BORDER,
        )
        qr.add_data(data)
        qr.make(fit=True)
        img = qr.make_image(fill_color=cls.FILL_COLOR, back_color=cls.BACK_COLOR)
        return img.get_image() if hasattr(img, 'get_image') else img

    @classmethod
    def generate_to_buffer(cls, data: str) -> io.BytesIO:
        img = cls.generate(data)
        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        buffer.seek(0)
        return buffer

    @classmethod
    def generate_png(cls, data: str) -> bytes:
        return cls.generate_to_buffer(data).getvalue()
