# accounts/views.py
import logging
from datetime import date
from typing import Dict, Optional

from django.db import transaction
from django.views.decorators.http import require_http_methods

from transfers.exceptions import TransferValidationError
from transfers.http import json_errors, json_response, parse_json_body, text_field

from .identity import resolve_actor
from .models import UserProfile
from .profiles import get_profile, is_profile_complete, missing_profile_fields

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "document_type",
    "document_number",
    "address",
    "city",
    "department",
    "emergency_contact",
    "emergency_phone",
)


def profile_to_dict(profile: Optional[UserProfile]) -> Optional[Dict]:
    if profile is None:
        return None
    return {
        "id": profile.pk,
        "document_type": profile.document_type,
        "document_number": profile.document_number,
        "address": profile.address,
        "city": profile.city,
        "department": profile.department,
        "country": profile.country,
        "birth_date": profile.birth_date.isoformat() if profile.birth_date else None,
        "emergency_contact": profile.emergency_contact,
        "emergency_phone": profile.emergency_phone,
    }


def _profile_payload(user, profile) -> Dict:
    return {
        "user": {
            "id": user.pk,
            "name": user.get_full_name() or user.username,
            "email": user.email,
            "phone": user.phone,
            "role": user.role,
        },
        "profile": profile_to_dict(profile),
        "is_complete": is_profile_complete(profile),
        "missing_fields": missing_profile_fields(profile),
    }


def _parse_birth_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise TransferValidationError("Data de nascimento inválida.")


@json_errors
@require_http_methods(["GET", "PUT"])
def profile_view(request):
    user = resolve_actor(request)

    if request.method == "GET":
        return json_response(_profile_payload(user, get_profile(user)))

    data = parse_json_body(request)
    name = text_field(data, "name")
    phone = text_field(data, "phone")
    if not name or not phone:
        raise TransferValidationError("Nome e telefone são obrigatórios.")

    values = {k: text_field(data, k) for k in PROFILE_FIELDS if k in data}
    document_number = values.get("document_number") or None
    if document_number and UserProfile.objects.filter(document_number=document_number).exclude(user=user).exists():
        raise TransferValidationError("Já existe um usuário com este número de documento.")

    if "document_number" in data:
        values["document_number"] = document_number
    if "document_type" in values and values["document_type"] not in UserProfile.DocumentType.values:
        raise TransferValidationError("Tipo de documento inválido.")
    if "city" in values:
        values["city"] = values["city"] or None
    if "birth_date" in data:
        values["birth_date"] = _parse_birth_date(data.get("birth_date"))

    with transaction.atomic():
        user.first_name = name
        user.phone = phone
        user.save(update_fields=["first_name", "phone"])
        profile, _ = UserProfile.objects.update_or_create(user=user, defaults=values)

    logger.info("Perfil do usuário %s atualizado (completo=%s)", user.pk, is_profile_complete(profile))
    payload = _profile_payload(user, profile)
    payload["message"] = "Perfil atualizado com sucesso."
    return json_response(payload)
