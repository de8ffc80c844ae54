# transfers/services.py
"""
Orquestração do ciclo de vida do traspasso.

Toda mutação de um traspasso passa por aqui: abertura (`initiate_transfer`),
ações (`record_action`) e anotações do administrador (`annotate_transfer`).
As pré-condições são verificadas dentro de `transaction.atomic()` com as
linhas relevantes travadas; a gravação do status é um compare-and-swap, de
modo que duas ações concorrentes sobre o mesmo traspasso nunca são ambas
aplicadas. As notificações só são disparadas depois do commit.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from accounts.identity import is_admin, role_of
from accounts.models import User
from accounts.profiles import get_profile, is_profile_complete
from vehicles.models import Vehicle

from . import notifications
from .exceptions import (
    DuplicateActiveTransfer,
    InvalidTransition,
    NotFound,
    ProfileIncomplete,
    StorageFailure,
    TransferValidationError,
    Unauthorized,
)
from .models import ACTIVE_STATUSES, Transfer, TransferStatus
from .state_machine import apply_transition

logger = logging.getLogger(__name__)

MAX_SALE_PRICE = Decimal("999999999")
MAX_NOTES_LENGTH = 500


# -----------------------------
# Validação de entrada
# -----------------------------
def _clean_buyer_email(buyer_email) -> str:
    email = buyer_email.strip().lower() if isinstance(buyer_email, str) else ""
    if not email:
        raise TransferValidationError("O e-mail do comprador é obrigatório.")
    try:
        validate_email(email)
    except ValidationError:
        raise TransferValidationError("O e-mail do comprador é inválido.")
    return email


def _clean_sale_price(sale_price) -> Decimal:
    if sale_price is None or isinstance(sale_price, bool):
        raise TransferValidationError("O preço de venda é obrigatório.")
    try:
        price = Decimal(str(sale_price).strip())
    except (InvalidOperation, ValueError):
        raise TransferValidationError("O preço de venda deve ser numérico.")
    if not price.is_finite():
        raise TransferValidationError("O preço de venda deve ser numérico.")
    _check_price_range(price)
    # frações de centavo podem arredondar para zero ou passar do teto
    price = price.quantize(Decimal("0.01"))
    _check_price_range(price)
    return price


def _check_price_range(price: Decimal) -> None:
    if price <= 0:
        raise TransferValidationError("O preço de venda deve ser maior que zero.")
    if price > MAX_SALE_PRICE:
        raise TransferValidationError("O preço de venda é muito alto.")


def _clean_notes(notes) -> str:
    notes = str(notes).strip() if notes else ""
    if len(notes) > MAX_NOTES_LENGTH:
        raise TransferValidationError(f"As observações não podem ter mais de {MAX_NOTES_LENGTH} caracteres.")
    return notes


# -----------------------------
# Abertura
# -----------------------------
def _is_active_transfer_race(vehicle, exc: IntegrityError) -> bool:
    # só a constraint parcial de traspasso ativo é UNIQUE; as demais são CHECK
    if "unique" in str(exc).lower():
        return True
    return Transfer.objects.filter(vehicle=vehicle, status__in=ACTIVE_STATUSES).exists()


def initiate_transfer(vehicle_id, seller, buyer_email, sale_price, notes=None) -> Transfer:
    """
    Abre um traspasso do veículo `vehicle_id` de `seller` para o usuário
    cadastrado com `buyer_email`.

    Depois da validação dos dados (preço, e-mail, observações), as
    pré-condições são verificadas nesta ordem:
        1. o veículo existe e pertence ao vendedor (senão NotFound);
        2. não há traspasso ativo para o veículo;
        3. o comprador existe (por e-mail) e é proprietário;
        4. comprador e vendedor são pessoas diferentes;
        5. o perfil do vendedor está completo;
        6. o perfil do comprador está completo.
    """
    if role_of(seller) != User.Role.OWNER:
        raise Unauthorized("Apenas proprietários podem iniciar traspassos.")

    price = _clean_sale_price(sale_price)
    email = _clean_buyer_email(buyer_email)
    notes = _clean_notes(notes)

    try:
        with transaction.atomic():
            vehicle = (
                Vehicle.objects.select_for_update()
                .filter(pk=vehicle_id, owner=seller)
                .first()
            )
            if vehicle is None:
                raise NotFound("Veículo não encontrado ou não autorizado.")

            if Transfer.objects.filter(vehicle=vehicle, status__in=ACTIVE_STATUSES).exists():
                raise DuplicateActiveTransfer()

            buyer = User.objects.filter(email__iexact=email).first()
            if buyer is None:
                raise NotFound("Comprador não encontrado. Ele precisa estar cadastrado no sistema.")
            if role_of(buyer) != User.Role.OWNER:
                raise TransferValidationError("O comprador precisa ter perfil de proprietário.")

            if buyer.pk == seller.pk:
                raise TransferValidationError("Você não pode transferir um veículo para si mesmo.")

            seller_profile = get_profile(seller)
            if not is_profile_complete(seller_profile):
                raise ProfileIncomplete(
                    "Complete o seu perfil (documento de identidade e cidade) antes de iniciar um traspasso."
                )
            buyer_profile = get_profile(buyer)
            if not is_profile_complete(buyer_profile):
                raise ProfileIncomplete(
                    "O comprador precisa completar o perfil (documento de identidade e cidade)."
                )

            try:
                with transaction.atomic():
                    transfer = Transfer.objects.create(
                        vehicle=vehicle,
                        seller=seller,
                        buyer=buyer,
                        seller_profile=seller_profile,
                        buyer_profile=buyer_profile,
                        status=TransferStatus.PENDING_BUYER_ACCEPTANCE,
                        sale_price=price,
                        notes=notes,
                    )
            except IntegrityError as exc:
                if _is_active_transfer_race(vehicle, exc):
                    logger.warning("Traspasso concorrente detectado para o veículo %s", vehicle.pk)
                    raise DuplicateActiveTransfer()
                logger.exception("Registro de traspasso recusado pelo banco para o veículo %s", vehicle.pk)
                raise StorageFailure() from exc

            transaction.on_commit(lambda: notifications.notify_initiated(transfer))
    except DatabaseError as exc:
        logger.exception("Falha ao gravar traspasso do veículo %s", vehicle_id)
        raise StorageFailure() from exc

    logger.info(
        "Traspasso %s iniciado: veículo %s, vendedor %s, comprador %s",
        transfer.pk, transfer.vehicle_id, seller.pk, buyer.pk,
    )
    return transfer


# -----------------------------
# Ações
# -----------------------------
def _check_involved(transfer, actor) -> None:
    if not (transfer.is_party(actor) or is_admin(actor)):
        raise Unauthorized()


def reassign_vehicle_owner(transfer) -> None:
    """
    Passa o veículo ao comprador. Só grava se o dono ainda for o vendedor;
    qualquer outra situação aborta a transação inteira.
    """
    updated = Vehicle.objects.filter(pk=transfer.vehicle_id, owner_id=transfer.seller_id).update(
        owner_id=transfer.buyer_id, updated_at=timezone.now()
    )
    if updated != 1:
        logger.warning(
            "Veículo %s não pertence mais ao vendedor %s; aprovação abortada",
            transfer.vehicle_id, transfer.seller_id,
        )
        raise InvalidTransition("O veículo não pertence mais ao vendedor.")


def _persist_changes(transfer, changes: Dict) -> None:
    # o status só é gravado se ainda for o que foi lido
    values = {"updated_at": timezone.now()}
    for field, value in changes.items():
        if field in ("approved_by_admin", "rejected_by", "cancelled_by"):
            values[f"{field}_id"] = value.pk if value is not None else None
        else:
            values[field] = value
    updated = Transfer.objects.filter(pk=transfer.pk, status=transfer.status).update(**values)
    if updated != 1:
        raise InvalidTransition("O traspasso foi alterado por outra operação. Recarregue e tente novamente.")


def record_action(transfer_id, action: str, actor, notes: Optional[str] = None) -> Transfer:
    """
    Aplica `action` ao traspasso e devolve o registro atualizado.

    Em `admin_approve` a troca de dono do veículo acontece na mesma transação
    que a mudança de status: ou as duas gravam, ou nenhuma.
    """
    try:
        with transaction.atomic():
            transfer = Transfer.objects.select_for_update().filter(pk=transfer_id).first()
            if transfer is None:
                raise NotFound("Traspasso não encontrado.")
            _check_involved(transfer, actor)

            changes = apply_transition(transfer, action, actor, notes=notes)
            _persist_changes(transfer, changes)

            if changes["status"] == TransferStatus.COMPLETED:
                reassign_vehicle_owner(transfer)

            transfer.refresh_from_db()
            transaction.on_commit(lambda: notifications.notify_transition(transfer))
    except DatabaseError as exc:
        logger.exception("Falha ao gravar ação %s no traspasso %s", action, transfer_id)
        raise StorageFailure() from exc

    logger.info("Traspasso %s: %s por %s -> %s", transfer.pk, action, actor.pk, transfer.status)
    return transfer


def annotate_transfer(transfer_id, actor, admin_notes) -> Transfer:
    """
    Edita as observações do administrador. Permitido em qualquer estado; é o
    único campo mutável de um traspasso finalizado.
    """
    if not is_admin(actor):
        raise Unauthorized("Apenas administradores podem anotar traspassos.")
    admin_notes = str(admin_notes).strip() if admin_notes else ""
    try:
        with transaction.atomic():
            transfer = Transfer.objects.select_for_update().filter(pk=transfer_id).first()
            if transfer is None:
                raise NotFound("Traspasso não encontrado.")
            transfer.admin_notes = admin_notes
            transfer.save(update_fields=["admin_notes", "updated_at"])
    except DatabaseError as exc:
        logger.exception("Falha ao anotar traspasso %s", transfer_id)
        raise StorageFailure() from exc
    return transfer


# -----------------------------
# Leitura
# -----------------------------
def _base_queryset():
    return Transfer.objects.select_related("vehicle", "seller", "buyer", "seller_profile", "buyer_profile")


def get_transfer_for(actor, transfer_id) -> Transfer:
    transfer = _base_queryset().filter(pk=transfer_id).first()
    if transfer is None:
        raise NotFound("Traspasso não encontrado.")
    _check_involved(transfer, actor)
    return transfer


def list_transfers_for(actor, status: Optional[str] = None):
    """
    Traspassos em que o ator é vendedor ou comprador (todos, para
    administradores), do mais recente para o mais antigo.
    """
    qs = _base_queryset()
    if not is_admin(actor):
        qs = qs.filter(Q(seller=actor) | Q(buyer=actor))
    if status:
        if status not in TransferStatus.values:
            raise TransferValidationError(f"Status inválido: {status}.")
        qs = qs.filter(status=status)
    return qs.order_by("-created_at", "-pk")


def latest_transfer_for_vehicle(actor, vehicle_id) -> Optional[Transfer]:
    """
    Traspasso mais recente do veículo visível ao ator, ou None.
    """
    qs = _base_queryset().filter(vehicle_id=vehicle_id)
    if not is_admin(actor):
        qs = qs.filter(Q(seller=actor) | Q(buyer=actor))
    return qs.order_by("-created_at", "-pk").first()


def transfer_stats(qs) -> Dict[str, int]:
    stats = qs.aggregate(
        total=Count("pk"),
        pending=Count("pk", filter=Q(status__in=ACTIVE_STATUSES)),
        completed=Count("pk", filter=Q(status=TransferStatus.COMPLETED)),
        cancelled=Count("pk", filter=Q(status__in=[TransferStatus.CANCELLED, TransferStatus.REJECTED])),
    )
    return {key: value or 0 for key, value in stats.items()}
