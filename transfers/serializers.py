# transfers/serializers.py
from typing import Dict, Optional

from .documents import required_documents_status
from .models import Transfer, TransferDocument
from .state_machine import allowed_actions, transfer_permissions


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def user_to_dict(user) -> Optional[Dict]:
    if user is None:
        return None
    return {
        "id": user.pk,
        "name": user.get_full_name() or user.username,
        "email": user.email,
    }


def vehicle_summary(vehicle) -> Dict:
    return {
        "id": vehicle.pk,
        "brand": vehicle.brand,
        "model": vehicle.model,
        "year": vehicle.year,
        "color": vehicle.color,
        "license_plate": vehicle.license_plate,
        "vin": vehicle.vin,
    }


def profile_summary(profile) -> Optional[Dict]:
    if profile is None:
        return None
    return {
        "document_type": profile.document_type,
        "document_number": profile.document_number,
        "city": profile.city,
        "department": profile.department,
    }


def document_to_dict(document: TransferDocument) -> Dict:
    return {
        "id": document.pk,
        "document_type": document.document_type,
        "document_type_label": document.get_document_type_display(),
        "file_name": document.file_name,
        "file_url": document.file_url,
        "content_type": document.content_type,
        "size": document.size,
        "is_required": document.is_required,
        "is_verified": document.is_verified,
        "uploaded_by": user_to_dict(document.uploaded_by),
        "verified_by": document.verified_by_id,
        "uploaded_at": _iso(document.uploaded_at),
    }


def transfer_to_dict(transfer: Transfer, actor=None, with_documents: bool = False) -> Dict:
    """
    Serializa um traspasso para o front.

    Com `actor`, inclui as permissões e ações disponíveis para ele; com
    `with_documents`, inclui os documentos e o estado dos obrigatórios.
    """
    data = {
        "id": transfer.pk,
        "status": transfer.status,
        "status_label": transfer.get_status_display(),
        "next_step": transfer.next_step,
        "vehicle": vehicle_summary(transfer.vehicle),
        "seller": user_to_dict(transfer.seller),
        "buyer": user_to_dict(transfer.buyer),
        "sale_price": str(transfer.sale_price),
        "notes": transfer.notes,
        "admin_notes": transfer.admin_notes,
        "transfer_date": _iso(transfer.transfer_date),
        "completion_date": _iso(transfer.completion_date),
        "approved_by_admin": transfer.approved_by_admin_id,
        "rejected_at": _iso(transfer.rejected_at),
        "rejected_by": transfer.rejected_by_id,
        "cancelled_at": _iso(transfer.cancelled_at),
        "cancelled_by": transfer.cancelled_by_id,
        "created_at": _iso(transfer.created_at),
        "updated_at": _iso(transfer.updated_at),
    }
    if actor is not None:
        data["permissions"] = transfer_permissions(transfer, actor)
        data["allowed_actions"] = allowed_actions(transfer, actor)
    if with_documents:
        data["seller_profile"] = profile_summary(transfer.seller_profile)
        data["buyer_profile"] = profile_summary(transfer.buyer_profile)
        data["documents"] = [
            document_to_dict(doc)
            for doc in transfer.documents.select_related("uploaded_by").order_by("-uploaded_at")
        ]
        data["required_documents"] = required_documents_status(transfer)
    return data
