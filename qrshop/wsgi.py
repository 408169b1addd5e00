"""WSGI config for qrshop project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'qrshop.settings')

application = get_wsgi_application()
