# transfers/http.py
"""
Utilidades HTTP compartilhadas pelas views JSON.
"""
import functools
import json
import logging
from typing import Dict

from django.http import JsonResponse

from .exceptions import TransferError, TransferValidationError

logger = logging.getLogger(__name__)


def json_response(payload: Dict, status: int = 200) -> JsonResponse:
    return JsonResponse(payload, status=status, json_dumps_params={"ensure_ascii": False})


def parse_json_body(request) -> Dict:
    """
    Lê o corpo JSON da requisição. Corpo vazio vira dict vazio.
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise TransferValidationError("Payload inválido.")
    if not isinstance(data, dict):
        raise TransferValidationError("Payload inválido.")
    return data


def text_field(data: Dict, key: str) -> str:
    """
    Campo textual do payload, sem espaços nas pontas. Ausente ou null vira "".
    """
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TransferValidationError(f"O campo {key} deve ser texto.")
    return value.strip()


def json_errors(view):
    """
    Converte `TransferError` levantado pela view em resposta JSON padronizada.
    """

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except TransferError as exc:
            if exc.status_code >= 500:
                logger.error("%s %s falhou: %s", request.method, request.path, exc.message)
            return json_response(exc.as_dict(), status=exc.status_code)

    return wrapper
