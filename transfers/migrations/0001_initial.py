import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("vehicles", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Transfer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PENDING_SELLER_DOCUMENTS", "Documentos do vendedor pendentes"), ("PENDING_BUYER_ACCEPTANCE", "Aguardando aceite do comprador"), ("PENDING_ADMIN_APPROVAL", "Aguardando aprovação administrativa"), ("COMPLETED", "Concluído"), ("CANCELLED", "Cancelado"), ("REJECTED", "Rejeitado")], default="PENDING_BUYER_ACCEPTANCE", max_length=32, verbose_name="Status")),
                ("sale_price", models.DecimalField(decimal_places=2, max_digits=14, verbose_name="Preço de venda")),
                ("notes", models.TextField(blank=True, verbose_name="Observações do vendedor")),
                ("admin_notes", models.TextField(blank=True, verbose_name="Observações do administrador")),
                ("transfer_date", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Data do traspasso")),
                ("completion_date", models.DateTimeField(blank=True, null=True, verbose_name="Data de conclusão")),
                ("rejected_at", models.DateTimeField(blank=True, null=True, verbose_name="Rejeitado em")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True, verbose_name="Cancelado em")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("approved_by_admin", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Aprovado por")),
                ("buyer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfers_as_buyer", to=settings.AUTH_USER_MODEL, verbose_name="Comprador")),
                ("buyer_profile", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="accounts.userprofile", verbose_name="Perfil do comprador")),
                ("cancelled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Cancelado por")),
                ("rejected_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Rejeitado por")),
                ("seller", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfers_as_seller", to=settings.AUTH_USER_MODEL, verbose_name="Vendedor")),
                ("seller_profile", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to="accounts.userprofile", verbose_name="Perfil do vendedor")),
                ("vehicle", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfers", to="vehicles.vehicle", verbose_name="Veículo")),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status__in=("PENDING_SELLER_DOCUMENTS", "PENDING_BUYER_ACCEPTANCE", "PENDING_ADMIN_APPROVAL")),
                        fields=("vehicle",),
                        name="unique_active_transfer_per_vehicle",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(sale_price__gt=0),
                        name="transfer_sale_price_positive",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(seller=models.F("buyer")),
                        name="transfer_seller_not_buyer",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TransferDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("document_type", models.CharField(choices=[("seller_id", "Documento do vendedor"), ("buyer_id", "Documento do comprador"), ("sale_contract", "Contrato de compra e venda"), ("other", "Outro")], max_length=20, verbose_name="Tipo")),
                ("file_url", models.CharField(max_length=500, verbose_name="URL do arquivo")),
                ("file_name", models.CharField(max_length=255, verbose_name="Nome do arquivo")),
                ("content_type", models.CharField(max_length=50, verbose_name="Tipo de conteúdo")),
                ("size", models.PositiveIntegerField(verbose_name="Tamanho (bytes)")),
                ("is_required", models.BooleanField(default=False, verbose_name="Obrigatório")),
                ("is_verified", models.BooleanField(default=False, verbose_name="Verificado")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                ("transfer", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="documents", to="transfers.transfer")),
                ("uploaded_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Enviado por")),
                ("verified_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL, verbose_name="Verificado por")),
            ],
            options={
                "ordering": ["-uploaded_at"],
            },
        ),
    ]
