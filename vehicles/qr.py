# vehicles/qr.py
"""
Tokens de QR dos veículos.

Formato: "CAR_<id com 8 dígitos>_<16 hex>", onde o sufixo é um hash SHA-256
dos dados do veículo. O token só identifica o veículo; os dados completos vêm
sempre do banco. Também aceitamos o formato antigo em JSON
({"type": "CAR_ID", "carId": ..., "vin": ...}).
"""
import hashlib
import json
from typing import Dict, Optional

from django.utils.timezone import now

TOKEN_PREFIX = "CAR_"
QR_TYPE = "CAR_ID"


def generate_qr_token(vehicle_id: int, vin: str) -> str:
    data = {
        "type": QR_TYPE,
        "carId": str(vehicle_id),
        "vin": vin,
        "timestamp": now().isoformat(),
    }
    digest = hashlib.sha256(json.dumps(data, sort_keys=True).encode("utf-8")).hexdigest()
    return f"{TOKEN_PREFIX}{int(vehicle_id):08d}_{digest[:16].upper()}"


def is_valid_qr_token(token) -> bool:
    if not token or not isinstance(token, str):
        return False
    if not token.startswith(TOKEN_PREFIX):
        return False
    return len(token) >= 10


def extract_vehicle_fragment(token) -> Optional[str]:
    """
    Extrai o fragmento do id do veículo (para busca no banco).
    """
    if not is_valid_qr_token(token):
        return None
    parts = token.split("_")
    if len(parts) >= 2 and parts[1]:
        return parts[1]
    return None


def parse_qr_token(token: str) -> Dict:
    """
    Interpreta um QR lido pelo scanner.

    Retorna {"type", "vehicle_id", "vin"}; `vin` fica vazio no formato de
    token (precisa ser buscado no banco). Levanta ValueError se o conteúdo não
    for reconhecido.
    """
    token = (token or "").strip()

    if token.startswith(TOKEN_PREFIX):
        fragment = extract_vehicle_fragment(token)
        if fragment and fragment.isdigit() and len(token.split("_")) >= 3:
            return {"type": QR_TYPE, "vehicle_id": int(fragment), "vin": ""}
        raise ValueError("Código QR inválido ou formato não reconhecido")

    try:
        parsed = json.loads(token)
    except json.JSONDecodeError:
        raise ValueError("Código QR inválido ou formato não reconhecido")

    if not isinstance(parsed, dict) or parsed.get("type") != QR_TYPE or not parsed.get("carId") or not parsed.get("vin"):
        raise ValueError("Formato de QR inválido")

    try:
        vehicle_id = int(parsed["carId"])
    except (TypeError, ValueError):
        raise ValueError("Formato de QR inválido")
    return {"type": QR_TYPE, "vehicle_id": vehicle_id, "vin": parsed["vin"]}
