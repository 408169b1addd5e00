from django.urls import path

from .api import QRCodeDetailView, QRCodeListView
from .store import QRCodeStore
from .views import ImageView, ScanView

app_name = 'qrcodes'

store = QRCodeStore()

urlpatterns = [
    # Public: printed QR codes point here
    path('qrcodes/<int:pk>/scan', ScanView.as_view(store=store), name='scan'),
    path('qrcodes/<int:pk>/image', ImageView.as_view(store=store), name='image'),

    # Admin API
    path('api/qrcodes', QRCodeListView.as_view(store=store), name='api_list'),
    path('api/qrcodes/<int:pk>', QRCodeDetailView.as_view(store=store), name='api_detail'),
]
