# transfers/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone


class TransferStatus(models.TextChoices):
    # PENDING_SELLER_DOCUMENTS existe no vocabulário (filtros/listagens), mas a
    # criação entra direto em PENDING_BUYER_ACCEPTANCE
    PENDING_SELLER_DOCUMENTS = "PENDING_SELLER_DOCUMENTS", "Documentos do vendedor pendentes"
    PENDING_BUYER_ACCEPTANCE = "PENDING_BUYER_ACCEPTANCE", "Aguardando aceite do comprador"
    PENDING_ADMIN_APPROVAL = "PENDING_ADMIN_APPROVAL", "Aguardando aprovação administrativa"
    COMPLETED = "COMPLETED", "Concluído"
    CANCELLED = "CANCELLED", "Cancelado"
    REJECTED = "REJECTED", "Rejeitado"


ACTIVE_STATUSES = (
    TransferStatus.PENDING_SELLER_DOCUMENTS,
    TransferStatus.PENDING_BUYER_ACCEPTANCE,
    TransferStatus.PENDING_ADMIN_APPROVAL,
)

TERMINAL_STATUSES = (
    TransferStatus.COMPLETED,
    TransferStatus.CANCELLED,
    TransferStatus.REJECTED,
)

NEXT_STEPS = {
    TransferStatus.PENDING_SELLER_DOCUMENTS: "O vendedor deve enviar seus documentos",
    TransferStatus.PENDING_BUYER_ACCEPTANCE: "O comprador deve aceitar o traspasso",
    TransferStatus.PENDING_ADMIN_APPROVAL: "Aguardando aprovação administrativa",
    TransferStatus.COMPLETED: "Traspasso concluído com sucesso",
    TransferStatus.CANCELLED: "O traspasso foi cancelado",
    TransferStatus.REJECTED: "O traspasso foi rejeitado",
}


class DocumentType(models.TextChoices):
    SELLER_ID = "seller_id", "Documento do vendedor"
    BUYER_ID = "buyer_id", "Documento do comprador"
    SALE_CONTRACT = "sale_contract", "Contrato de compra e venda"
    OTHER = "other", "Outro"


REQUIRED_DOCUMENT_TYPES = (DocumentType.SELLER_ID, DocumentType.BUYER_ID)


class Transfer(models.Model):
    vehicle = models.ForeignKey(
        "vehicles.Vehicle", verbose_name="Veículo", on_delete=models.PROTECT, related_name="transfers"
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Vendedor", on_delete=models.PROTECT, related_name="transfers_as_seller"
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Comprador", on_delete=models.PROTECT, related_name="transfers_as_buyer"
    )
    # retratos do perfil legal usado no momento da abertura
    seller_profile = models.ForeignKey(
        "accounts.UserProfile", verbose_name="Perfil do vendedor", on_delete=models.PROTECT, related_name="+"
    )
    buyer_profile = models.ForeignKey(
        "accounts.UserProfile", verbose_name="Perfil do comprador", on_delete=models.PROTECT, related_name="+"
    )
    status = models.CharField(
        "Status", max_length=32, choices=TransferStatus.choices, default=TransferStatus.PENDING_BUYER_ACCEPTANCE
    )
    sale_price = models.DecimalField("Preço de venda", max_digits=14, decimal_places=2)
    notes = models.TextField("Observações do vendedor", blank=True)
    admin_notes = models.TextField("Observações do administrador", blank=True)
    transfer_date = models.DateTimeField("Data do traspasso", default=timezone.now)
    completion_date = models.DateTimeField("Data de conclusão", null=True, blank=True)
    approved_by_admin = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Aprovado por", null=True, blank=True,
        on_delete=models.SET_NULL, related_name="+",
    )
    rejected_at = models.DateTimeField("Rejeitado em", null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Rejeitado por", null=True, blank=True,
        on_delete=models.SET_NULL, related_name="+",
    )
    cancelled_at = models.DateTimeField("Cancelado em", null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Cancelado por", null=True, blank=True,
        on_delete=models.SET_NULL, related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["vehicle"],
                condition=models.Q(status__in=ACTIVE_STATUSES),
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
        ]

    def __str__(self):
        return f"Traspasso #{self.pk} - {self.vehicle} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def next_step(self) -> str:
        return NEXT_STEPS.get(self.status, "Estado desconhecido")

    def is_party(self, user) -> bool:
        return user is not None and user.pk in (self.seller_id, self.buyer_id)


class TransferDocument(models.Model):
    transfer = models.ForeignKey(Transfer, on_delete=models.CASCADE, related_name="documents")
    document_type = models.CharField("Tipo", max_length=20, choices=DocumentType.choices)
    file_url = models.CharField("URL do arquivo", max_length=500)
    file_name = models.CharField("Nome do arquivo", max_length=255)
    content_type = models.CharField("Tipo de conteúdo", max_length=50)
    size = models.PositiveIntegerField("Tamanho (bytes)")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Enviado por", on_delete=models.PROTECT, related_name="+"
    )
    is_required = models.BooleanField("Obrigatório", default=False)
    is_verified = models.BooleanField("Verificado", default=False)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, verbose_name="Verificado por", null=True, blank=True,
        on_delete=models.SET_NULL, related_name="+",
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-uploaded_at"]

    def __str__(self):
        return f"{self.get_document_type_display()} - {self.file_name}"
