from django.contrib import admin
from .models import QRCode


@admin.register(QRCode)
class QRCodeAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'shop_domain', 'destination', 'discount_code', 'scans', 'created_at')
    list_filter = ('destination', 'shop_domain')
    search_fields = ('title', 'shop_domain', 'handle', 'discount_code')
    readonly_fields = ('scans', 'created_at')
