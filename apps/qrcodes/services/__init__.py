from .qr_image import QRImageService

__all__ = ['QRImageService']
