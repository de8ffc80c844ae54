# transfers/documents.py
"""
Documentos anexados a um traspasso.

Os documentos são informativos: enviar, verificar ou deixar de enviar um
documento obrigatório nunca altera o status do traspasso.
"""
import logging
import os
import time
from typing import Dict, List

from django.conf import settings
from django.db import DatabaseError, transaction

from accounts.identity import is_admin

from . import storage
from .exceptions import (
    NotFound,
    StorageFailure,
    TransferError,
    TransferFinalized,
    TransferValidationError,
    Unauthorized,
)
from .models import REQUIRED_DOCUMENT_TYPES, DocumentType, Transfer, TransferDocument
from .state_machine import can_upload_document

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("application/pdf", "image/jpeg", "image/jpg", "image/png")


def _load_transfer(transfer_id) -> Transfer:
    transfer = Transfer.objects.filter(pk=transfer_id).first()
    if transfer is None:
        raise NotFound("Traspasso não encontrado.")
    return transfer


def _check_file(uploaded_file) -> None:
    if uploaded_file is None:
        raise TransferValidationError("Arquivo e tipo de documento são obrigatórios.")
    content_type = (getattr(uploaded_file, "content_type", "") or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise TransferValidationError("Tipo de arquivo inválido. Apenas PDF e imagens são permitidos.")
    max_size = settings.CARID_MAX_DOCUMENT_SIZE
    if uploaded_file.size > max_size:
        raise TransferValidationError(
            f"O arquivo é grande demais (máximo {max_size // (1024 * 1024)}MB)."
        )


def _check_upload(transfer, document_type, uploader) -> None:
    if not (transfer.is_party(uploader) or is_admin(uploader)):
        raise Unauthorized()
    if transfer.is_terminal:
        raise TransferFinalized("Não é possível enviar documentos para um traspasso finalizado.")
    if not can_upload_document(transfer, document_type, uploader):
        raise Unauthorized("Você não pode enviar este tipo de documento.")


def upload_document(transfer_id, document_type, uploaded_file, uploader) -> TransferDocument:
    """
    Grava o arquivo e registra o documento. As permissões são conferidas
    antes do envio ao storage e de novo, com o traspasso travado, na hora do
    INSERT; se o traspasso tiver sido finalizado nesse meio tempo o arquivo
    é apagado.
    """
    if document_type not in DocumentType.values:
        raise TransferValidationError("Arquivo e tipo de documento são obrigatórios.")

    transfer = _load_transfer(transfer_id)
    _check_upload(transfer, document_type, uploader)
    _check_file(uploaded_file)

    file_name = os.path.basename(uploaded_file.name or "documento")
    path = f"transfers/{transfer.pk}/{int(time.time() * 1000)}-{file_name}"
    try:
        file_url = storage.store(path, uploaded_file)
    except Exception as exc:
        logger.exception("Falha ao gravar arquivo do traspasso %s", transfer.pk)
        raise StorageFailure("Falha ao gravar o arquivo. Tente novamente.") from exc

    try:
        with transaction.atomic():
            locked = Transfer.objects.select_for_update().filter(pk=transfer.pk).first()
            if locked is None:
                raise NotFound("Traspasso não encontrado.")
            _check_upload(locked, document_type, uploader)
            document = TransferDocument.objects.create(
                transfer=locked,
                document_type=document_type,
                file_url=file_url,
                file_name=file_name,
                content_type=uploaded_file.content_type.lower(),
                size=uploaded_file.size,
                uploaded_by=uploader,
                is_required=document_type in REQUIRED_DOCUMENT_TYPES,
            )
    except TransferError:
        storage.delete(file_url)
        raise
    except DatabaseError as exc:
        # o registro não existe, então o arquivo ficaria órfão
        storage.delete(file_url)
        logger.exception("Falha ao registrar documento do traspasso %s", transfer.pk)
        raise StorageFailure() from exc

    logger.info("Documento %s (%s) enviado ao traspasso %s por %s", document.pk, document_type, transfer.pk, uploader.pk)
    return document


def verify_document(transfer_id, document_id, verified: bool, actor) -> TransferDocument:
    if not is_admin(actor):
        raise Unauthorized("Apenas administradores podem verificar documentos.")
    if not isinstance(verified, bool):
        raise TransferValidationError("O campo is_verified deve ser booleano.")

    transfer = _load_transfer(transfer_id)
    document = TransferDocument.objects.filter(pk=document_id, transfer=transfer).first()
    if document is None:
        raise NotFound("Documento não encontrado.")

    document.is_verified = verified
    document.verified_by = actor if verified else None
    try:
        document.save(update_fields=["is_verified", "verified_by"])
    except DatabaseError as exc:
        logger.exception("Falha ao verificar documento %s", document_id)
        raise StorageFailure() from exc
    return document


def list_documents(transfer_id, actor) -> List[TransferDocument]:
    transfer = _load_transfer(transfer_id)
    if not (transfer.is_party(actor) or is_admin(actor)):
        raise Unauthorized()
    return list(transfer.documents.select_related("uploaded_by", "verified_by").order_by("-uploaded_at"))


def required_documents_status(transfer) -> List[Dict]:
    """
    Para cada tipo obrigatório: se já foi enviado e se algum envio foi
    verificado.
    """
    documents = list(transfer.documents.all())
    result = []
    for document_type in REQUIRED_DOCUMENT_TYPES:
        of_type = [doc for doc in documents if doc.document_type == document_type]
        result.append({
            "document_type": document_type.value,
            "label": document_type.label,
            "uploaded": bool(of_type),
            "verified": any(doc.is_verified for doc in of_type),
        })
    return result
