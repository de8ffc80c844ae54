# vehicles/models.py
from django.conf import settings
from django.db import models

from .qr import generate_qr_token


class Vehicle(models.Model):
    brand = models.CharField("Marca", max_length=50)
    model = models.CharField("Modelo", max_length=80)
    year = models.PositiveIntegerField("Ano")
    color = models.CharField("Cor", max_length=30)
    mileage_km = models.PositiveIntegerField("Quilometragem", default=0)
    license_plate = models.CharField("Placa", max_length=10, unique=True)
    vin = models.CharField("VIN/Chassi", max_length=32, unique=True)
    # só é reatribuído pela conclusão de um traspasso (transfers.services)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name="Proprietário",
        on_delete=models.PROTECT,
        related_name="vehicles",
    )
    qr_code = models.CharField("Código QR", max_length=40, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.brand} {self.model} {self.year}"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # o token depende do id, então só pode ser gerado depois do primeiro INSERT
        if not self.qr_code:
            self.qr_code = generate_qr_token(self.pk, self.vin)
            Vehicle.objects.filter(pk=self.pk).update(qr_code=self.qr_code)
