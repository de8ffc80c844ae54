# accounts/profiles.py
"""
Regras do perfil legal (ProfileGate).

Um perfil está completo quando tem número de documento e cidade. O teste é
puro: não consulta o banco além do próprio objeto recebido.
"""
from typing import Optional


def _filled(value: Optional[str]) -> bool:
    return bool(value and str(value).strip())


def is_profile_complete(profile) -> bool:
    if profile is None:
        return False
    return _filled(profile.document_number) and _filled(profile.city)


def missing_profile_fields(profile) -> list:
    """
    Lista os campos obrigatórios ausentes (para mensagens na interface).
    """
    if profile is None:
        return ["document_number", "city"]
    missing = []
    if not _filled(profile.document_number):
        missing.append("document_number")
    if not _filled(profile.city):
        missing.append("city")
    return missing


def get_profile(user):
    """
    Retorna o perfil do usuário ou None quando ainda não foi criado.
    """
    from .models import UserProfile

    if user is None or user.pk is None:
        return None
    try:
        return user.profile
    except UserProfile.DoesNotExist:
        return None
