"""URL configuration for qrshop project."""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin
    path('admin/', admin.site.urls),

    # Scan/image endpoints and the admin API
    path('', include('apps.qrcodes.urls', namespace='qrcodes')),
]
