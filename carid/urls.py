# carid/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("accounts.urls")),
    path("vehicles/", include("vehicles.urls")),
    path("transfers/", include("transfers.urls")),
]
