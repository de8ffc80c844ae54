# vehicles/views.py
import logging
from typing import Dict

from django.views.decorators.http import require_http_methods

from accounts.identity import resolve_actor, role_of
from accounts.models import User
from transfers.exceptions import NotFound, TransferValidationError, Unauthorized
from transfers.http import json_errors, json_response, parse_json_body

from .models import Vehicle
from .qr import is_valid_qr_token, parse_qr_token

logger = logging.getLogger(__name__)

# papéis que podem consultar veículos pelo QR (oficina e administração)
QR_READER_ROLES = (User.Role.MECHANIC, User.Role.ADMIN)


# -----------------------------
# Utilidades
# -----------------------------
def vehicle_to_dict(v: Vehicle) -> Dict:
    """
    Serializa um veículo para o front (sem dados sensíveis do dono).
    """
    return {
        "id": v.pk,
        "brand": v.brand,
        "model": v.model,
        "year": v.year,
        "color": v.color,
        "mileage_km": v.mileage_km,
        "license_plate": v.license_plate,
        "vin": v.vin,
        "qr_code": v.qr_code,
        "owner": {
            "id": v.owner_id,
            "name": v.owner.get_full_name() or v.owner.username,
            "email": v.owner.email,
            "phone": v.owner.phone,
        },
    }


def find_vehicle_by_qr(qr_code: str) -> Vehicle:
    """
    Busca pelo token exato; se não achar, interpreta o conteúdo (token ou
    JSON antigo) e busca pelo id.
    """
    qs = Vehicle.objects.select_related("owner")
    vehicle = qs.filter(qr_code=qr_code).first()
    if vehicle is not None:
        return vehicle

    try:
        parsed = parse_qr_token(qr_code)
    except ValueError as exc:
        raise TransferValidationError(str(exc))

    lookup = {"pk": parsed["vehicle_id"]}
    if parsed["vin"]:
        lookup["vin"] = parsed["vin"]
    vehicle = qs.filter(**lookup).first()
    if vehicle is None:
        raise NotFound("Veículo não encontrado.")
    return vehicle


# -----------------------------
# Leitura de QR
# -----------------------------
@json_errors
@require_http_methods(["POST"])
def verify_qr_view(request):
    actor = resolve_actor(request)
    if role_of(actor) not in QR_READER_ROLES:
        raise Unauthorized()

    data = parse_json_body(request)
    raw = data.get("qr_code")
    qr_code = raw.strip() if isinstance(raw, str) else ""
    if not qr_code:
        raise TransferValidationError("Código QR obrigatório.")
    if not qr_code.startswith("{") and not is_valid_qr_token(qr_code):
        raise TransferValidationError("Formato de código QR inválido.")

    vehicle = find_vehicle_by_qr(qr_code)
    logger.info("Veículo %s consultado por QR por %s", vehicle.pk, actor.pk)
    return json_response({"vehicle": vehicle_to_dict(vehicle)})
