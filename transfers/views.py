# transfers/views.py
"""
Endpoints JSON do fluxo de traspasso.

As views só fazem a tradução HTTP: resolvem o ator, leem o payload e chamam
`services`/`documents`. Qualquer `TransferError` vira
`{"error": ..., "error_code": ...}` pelo decorator `json_errors`.
"""
from django.views.decorators.http import require_http_methods

from accounts.identity import is_admin, resolve_actor

from . import documents, services
from .exceptions import TransferValidationError, Unauthorized
from .http import json_errors, json_response, parse_json_body, text_field
from .models import Transfer
from .serializers import document_to_dict, transfer_to_dict
from .state_machine import TransferAction

# ações aceitas pelo painel administrativo -> ação da máquina de estados
ADMIN_ACTIONS = {
    "approve": TransferAction.ADMIN_APPROVE,
    "reject": TransferAction.ADMIN_REJECT,
    "cancel": TransferAction.CANCEL,
}


# -----------------------------
# Traspasso por veículo
# -----------------------------
@json_errors
@require_http_methods(["GET", "POST"])
def vehicle_transfer_view(request, vehicle_id):
    actor = resolve_actor(request)

    if request.method == "GET":
        transfer = services.latest_transfer_for_vehicle(actor, vehicle_id)
        payload = transfer_to_dict(transfer, actor, with_documents=True) if transfer else None
        return json_response({"transfer": payload})

    data = parse_json_body(request)
    transfer = services.initiate_transfer(
        vehicle_id,
        actor,
        buyer_email=data.get("buyer_email"),
        sale_price=data.get("sale_price"),
        notes=data.get("notes"),
    )
    return json_response(
        {"message": "Traspasso iniciado com sucesso.", "transfer": transfer_to_dict(transfer, actor)},
        status=201,
    )


# -----------------------------
# Traspassos do usuário
# -----------------------------
@json_errors
@require_http_methods(["GET"])
def transfer_list_view(request):
    actor = resolve_actor(request)
    qs = services.list_transfers_for(actor, status=request.GET.get("status") or None)
    return json_response({"transfers": [transfer_to_dict(t, actor) for t in qs]})


@json_errors
@require_http_methods(["GET", "PATCH", "POST"])
def transfer_detail_view(request, transfer_id):
    actor = resolve_actor(request)

    if request.method == "GET":
        transfer = services.get_transfer_for(actor, transfer_id)
        return json_response({"transfer": transfer_to_dict(transfer, actor, with_documents=True)})

    data = parse_json_body(request)
    action = text_field(data, "action")
    if not action:
        raise TransferValidationError("A ação é obrigatória.")
    transfer = services.record_action(transfer_id, action, actor, notes=data.get("notes"))
    return json_response({"message": "Traspasso atualizado.", "transfer": transfer_to_dict(transfer, actor)})


# -----------------------------
# Documentos
# -----------------------------
@json_errors
@require_http_methods(["GET", "POST"])
def transfer_documents_view(request, transfer_id):
    actor = resolve_actor(request)

    if request.method == "GET":
        docs = documents.list_documents(transfer_id, actor)
        return json_response({"documents": [document_to_dict(d) for d in docs]})

    document = documents.upload_document(
        transfer_id,
        request.POST.get("document_type"),
        request.FILES.get("file"),
        actor,
    )
    return json_response(
        {"message": "Documento enviado com sucesso.", "document": document_to_dict(document)},
        status=201,
    )


@json_errors
@require_http_methods(["PATCH"])
def document_verify_view(request, transfer_id, document_id):
    actor = resolve_actor(request)
    data = parse_json_body(request)
    document = documents.verify_document(transfer_id, document_id, data.get("is_verified"), actor)
    return json_response({"document": document_to_dict(document)})


# -----------------------------
# Painel administrativo
# -----------------------------
def _require_admin(actor) -> None:
    if not is_admin(actor):
        raise Unauthorized("Acesso restrito a administradores.")


@json_errors
@require_http_methods(["GET"])
def admin_transfer_list_view(request):
    actor = resolve_actor(request)
    _require_admin(actor)
    qs = services.list_transfers_for(actor, status=request.GET.get("status") or None)
    return json_response(
        {
            "transfers": [transfer_to_dict(t, actor) for t in qs],
            "stats": services.transfer_stats(Transfer.objects.all()),
        }
    )


@json_errors
@require_http_methods(["PATCH"])
def admin_transfer_action_view(request, transfer_id):
    actor = resolve_actor(request)
    _require_admin(actor)
    data = parse_json_body(request)
    action = text_field(data, "action")

    if action == "annotate":
        transfer = services.annotate_transfer(transfer_id, actor, data.get("notes"))
    elif action in ADMIN_ACTIONS:
        transfer = services.record_action(transfer_id, ADMIN_ACTIONS[action], actor, notes=data.get("notes"))
    else:
        raise TransferValidationError("Ação inválida.")

    return json_response({"message": "Traspasso atualizado.", "transfer": transfer_to_dict(transfer, actor)})
