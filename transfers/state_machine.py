# transfers/state_machine.py
"""
Máquina de estados do traspasso.

`apply_transition` é pura: recebe o traspasso, a ação e o ator e devolve o
dicionário de campos a gravar. Não toca no banco; a persistência (com
compare-and-swap sobre o status) fica em `transfers.services`.

Ordem das verificações:
    1. ação desconhecida           -> TransferValidationError
    2. traspasso em estado final   -> TransferFinalized
    3. papel/relação do ator       -> Unauthorized
    4. estado de origem            -> InvalidTransition
"""
from typing import Dict, List, Optional

from django.utils import timezone

from accounts.identity import is_admin

from .exceptions import InvalidTransition, TransferFinalized, TransferValidationError, Unauthorized
from .models import ACTIVE_STATUSES, TERMINAL_STATUSES, DocumentType, TransferStatus


class TransferAction:
    BUYER_ACCEPT = "buyer_accept"
    ADMIN_APPROVE = "admin_approve"
    ADMIN_REJECT = "admin_reject"
    CANCEL = "cancel"

    ALL = (BUYER_ACCEPT, ADMIN_APPROVE, ADMIN_REJECT, CANCEL)


# estados de origem aceitos por ação
ALLOWED_SOURCES = {
    TransferAction.BUYER_ACCEPT: (TransferStatus.PENDING_BUYER_ACCEPTANCE,),
    TransferAction.ADMIN_APPROVE: (TransferStatus.PENDING_ADMIN_APPROVAL,),
    TransferAction.ADMIN_REJECT: (TransferStatus.PENDING_ADMIN_APPROVAL,),
    TransferAction.CANCEL: ACTIVE_STATUSES,
}

CANCELLED_BY_SELLER = "Cancelado pelo vendedor"
CANCELLED_BY_ADMIN = "Cancelado pelo administrador"


def _clean_notes(notes: Optional[str]) -> str:
    return str(notes).strip() if notes else ""


def _check_actor(transfer, action: str, actor) -> None:
    if action == TransferAction.BUYER_ACCEPT:
        if actor is None or actor.pk != transfer.buyer_id:
            raise Unauthorized("Apenas o comprador pode aceitar o traspasso.")
    elif action in (TransferAction.ADMIN_APPROVE, TransferAction.ADMIN_REJECT):
        if not is_admin(actor):
            raise Unauthorized("Apenas administradores podem aprovar ou rejeitar traspassos.")
    elif action == TransferAction.CANCEL:
        if actor is None or not (actor.pk == transfer.seller_id or is_admin(actor)):
            raise Unauthorized("Apenas o vendedor ou um administrador pode cancelar o traspasso.")


def apply_transition(transfer, action: str, actor, notes: Optional[str] = None, at=None) -> Dict:
    """
    Valida a ação e devolve as mudanças de campos resultantes.

    Levanta TransferValidationError, TransferFinalized, Unauthorized ou
    InvalidTransition, nessa ordem de precedência.
    """
    if action not in TransferAction.ALL:
        raise TransferValidationError(f"Ação inválida: {action!r}.")

    if transfer.status in TERMINAL_STATUSES:
        raise TransferFinalized()

    _check_actor(transfer, action, actor)

    if transfer.status not in ALLOWED_SOURCES[action]:
        raise InvalidTransition(
            f"A ação {action} não é permitida a partir do estado {transfer.status}."
        )

    at = at or timezone.now()
    notes = _clean_notes(notes)

    if action == TransferAction.BUYER_ACCEPT:
        return {"status": TransferStatus.PENDING_ADMIN_APPROVAL}

    if action == TransferAction.ADMIN_APPROVE:
        changes = {
            "status": TransferStatus.COMPLETED,
            "completion_date": at,
            "approved_by_admin": actor,
        }
        if notes:
            changes["admin_notes"] = notes
        return changes

    if action == TransferAction.ADMIN_REJECT:
        changes = {
            "status": TransferStatus.REJECTED,
            "rejected_at": at,
            "rejected_by": actor,
        }
        if notes:
            changes["admin_notes"] = notes
        return changes

    # cancel
    if not notes:
        notes = CANCELLED_BY_SELLER if actor.pk == transfer.seller_id else CANCELLED_BY_ADMIN
    return {
        "status": TransferStatus.CANCELLED,
        "cancelled_at": at,
        "cancelled_by": actor,
        "admin_notes": notes,
    }


def can_apply(transfer, action: str, actor) -> bool:
    try:
        apply_transition(transfer, action, actor)
    except (TransferValidationError, InvalidTransition, Unauthorized):
        return False
    return True


def allowed_actions(transfer, actor) -> List[str]:
    return [action for action in TransferAction.ALL if can_apply(transfer, action, actor)]


def can_upload_document(transfer, document_type: str, actor) -> bool:
    """
    Documento do vendedor só pelo vendedor, do comprador só pelo comprador;
    contrato e outros por qualquer uma das partes ou por um administrador.
    Nada é aceito depois que o traspasso terminou.
    """
    if actor is None or transfer.status in TERMINAL_STATUSES:
        return False
    if document_type == DocumentType.SELLER_ID:
        return actor.pk == transfer.seller_id
    if document_type == DocumentType.BUYER_ID:
        return actor.pk == transfer.buyer_id
    if document_type in (DocumentType.SALE_CONTRACT, DocumentType.OTHER):
        return transfer.is_party(actor) or is_admin(actor)
    return False


def transfer_permissions(transfer, actor) -> Dict:
    is_seller = actor is not None and actor.pk == transfer.seller_id
    is_buyer = actor is not None and actor.pk == transfer.buyer_id
    return {
        "can_view": is_seller or is_buyer or is_admin(actor),
        "can_accept": can_apply(transfer, TransferAction.BUYER_ACCEPT, actor),
        "can_approve": can_apply(transfer, TransferAction.ADMIN_APPROVE, actor),
        "can_reject": can_apply(transfer, TransferAction.ADMIN_REJECT, actor),
        "can_cancel": can_apply(transfer, TransferAction.CANCEL, actor),
        "can_upload": {
            document_type: can_upload_document(transfer, document_type, actor)
            for document_type in DocumentType.values
        },
        "is_seller": is_seller,
        "is_buyer": is_buyer,
    }
