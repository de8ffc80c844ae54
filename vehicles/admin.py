# vehicles/admin.py
from django.contrib import admin
from .models import Vehicle

@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("brand", "model", "year", "license_plate", "vin", "owner", "mileage_km")
    search_fields = ("brand", "model", "vin", "license_plate", "owner__email")
    list_filter = ("brand", "year", "color")
    readonly_fields = ("qr_code", "created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # o dono de um veículo existente só muda pela conclusão de um traspasso
        fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            fields.append("owner")
        return fields
