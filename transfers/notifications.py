# transfers/notifications.py
"""
Notificações por e-mail do fluxo de traspasso.

O envio é best-effort: uma falha de e-mail é registrada no log e nunca desfaz
nem bloqueia a transição que a originou. Os chamadores agendam o envio com
`transaction.on_commit`, então nada é enviado para transações revertidas.
"""
import logging
from typing import Dict

from django.conf import settings
from django.core.mail import send_mail

from .models import TransferStatus

logger = logging.getLogger(__name__)

TEMPLATES = {
    "transfer_initiated": {
        "subject": "Novo traspasso de veículo",
        "body": (
            "Olá {name},\n\n"
            "{seller_name} iniciou o traspasso do veículo {vehicle} para você.\n"
            "Acesse o traspasso para aceitá-lo: {url}\n\n"
            "Obrigado por usar o CarID."
        ),
    },
    "transfer_approved": {
        "subject": "Traspasso aprovado",
        "body": (
            "Olá {name},\n\n"
            "O administrador aprovou o seu traspasso de veículo.\n"
            "Detalhes: {url}\n\n"
            "Obrigado por usar o CarID."
        ),
    },
    "transfer_rejected": {
        "subject": "Traspasso rejeitado",
        "body": (
            "Olá {name},\n\n"
            "O administrador rejeitou a sua solicitação de traspasso.\n"
            "{reason_line}"
            "Entre em contato com o suporte se precisar de mais informações.\n\n"
            "Obrigado por usar o CarID."
        ),
    },
    "transfer_update": {
        "subject": "Atualização de traspasso - {status_label}",
        "body": (
            "Olá {name},\n\n"
            "O estado do seu traspasso foi atualizado para: {status_label}.\n"
            "Detalhes: {url}\n\n"
            "Obrigado por usar o CarID."
        ),
    },
}


def transfer_url(transfer_id) -> str:
    return f"{settings.CARID_SITE_URL.rstrip('/')}/transfers/{transfer_id}/"


def render(template_kind: str, payload: Dict) -> Dict[str, str]:
    template = TEMPLATES[template_kind]
    context = {"reason_line": "", **payload}
    if payload.get("reason"):
        context["reason_line"] = f"Motivo: {payload['reason']}\n"
    return {
        "subject": template["subject"].format(**context),
        "body": template["body"].format(**context),
    }


def notify(recipient_email: str, template_kind: str, payload: Dict) -> bool:
    """
    Envia a notificação. Retorna False (sem levantar) se o envio falhar.
    """
    try:
        message = render(template_kind, payload)
        send_mail(
            message["subject"],
            message["body"],
            settings.DEFAULT_FROM_EMAIL,
            [recipient_email],
            fail_silently=False,
        )
    except Exception:
        logger.exception("Falha ao enviar notificação %s para %s", template_kind, recipient_email)
        return False
    logger.info("Notificação %s enviada para %s", template_kind, recipient_email)
    return True


def _display_name(user) -> str:
    return user.get_full_name() or user.username


def notify_initiated(transfer) -> None:
    notify(
        transfer.buyer.email,
        "transfer_initiated",
        {
            "name": _display_name(transfer.buyer),
            "seller_name": _display_name(transfer.seller),
            "vehicle": str(transfer.vehicle),
            "url": transfer_url(transfer.pk),
        },
    )


def notify_transition(transfer) -> None:
    """
    COMPLETED avisa as duas partes; REJECTED e CANCELLED avisam o vendedor.
    Aceite do comprador não gera e-mail.
    """
    url = transfer_url(transfer.pk)
    if transfer.status == TransferStatus.COMPLETED:
        for user in (transfer.seller, transfer.buyer):
            notify(user.email, "transfer_approved", {"name": _display_name(user), "url": url})
    elif transfer.status == TransferStatus.REJECTED:
        notify(
            transfer.seller.email,
            "transfer_rejected",
            {"name": _display_name(transfer.seller), "reason": transfer.admin_notes, "url": url},
        )
    elif transfer.status == TransferStatus.CANCELLED:
        notify(
            transfer.seller.email,
            "transfer_update",
            {
                "name": _display_name(transfer.seller),
                "status_label": TransferStatus.CANCELLED.label,
                "url": url,
            },
        )
