# vehicles/urls.py
from django.urls import path
from transfers.views import vehicle_transfer_view
from . import views

urlpatterns = [
    path("verify-qr/", views.verify_qr_view, name="vehicle_verify_qr"),
    path("<int:vehicle_id>/transfer/", vehicle_transfer_view, name="vehicle_transfer"),
]
