# accounts/identity.py
"""
Resolução do ator (usuário + papel) a partir da requisição.

O restante do sistema recebe o ator explicitamente como parâmetro; apenas as
views chamam `resolve_actor`.
"""
from transfers.exceptions import Unauthenticated

from .models import User


def role_of(user) -> str:
    if user is None:
        return ""
    if user.is_superuser:
        return User.Role.ADMIN
    return user.role


def is_admin(user) -> bool:
    return role_of(user) == User.Role.ADMIN


def resolve_actor(request):
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        raise Unauthenticated()
    return user
