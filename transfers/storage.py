# transfers/storage.py
"""
Armazenamento dos arquivos anexados aos traspassos (sobre o default_storage).
"""
import logging

from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


def store(path: str, content) -> str:
    """
    Grava o conteúdo e devolve a URL pública. O nome final pode diferir de
    `path` se o storage precisar evitar colisão.
    """
    name = default_storage.save(path, content)
    return default_storage.url(name)


def _name_from_url(url: str) -> str:
    base = default_storage.base_url or ""
    if base and url.startswith(base):
        return url[len(base):]
    return url.lstrip("/")


def delete(url: str) -> None:
    """Remoção best-effort: falhas só vão para o log."""
    try:
        default_storage.delete(_name_from_url(url))
    except Exception:
        logger.exception("Falha ao remover arquivo %s", url)
