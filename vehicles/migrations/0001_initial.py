import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("brand", models.CharField(max_length=50, verbose_name="Marca")),
                ("model", models.CharField(max_length=80, verbose_name="Modelo")),
                ("year", models.PositiveIntegerField(verbose_name="Ano")),
                ("color", models.CharField(max_length=30, verbose_name="Cor")),
                ("mileage_km", models.PositiveIntegerField(default=0, verbose_name="Quilometragem")),
                ("license_plate", models.CharField(max_length=10, unique=True, verbose_name="Placa")),
                ("vin", models.CharField(max_length=32, unique=True, verbose_name="VIN/Chassi")),
                ("qr_code", models.CharField(blank=True, max_length=40, null=True, unique=True, verbose_name="Código QR")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="vehicles", to=settings.AUTH_USER_MODEL, verbose_name="Proprietário")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
