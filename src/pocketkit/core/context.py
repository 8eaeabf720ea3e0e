"""Contexto compartido del cliente: URL base, idioma y credencial activa.

Por qué un objeto aparte:
- Es la única fuente de verdad del token; todos los servicios reciben la
  misma referencia y nunca lo duplican.
- La credencial se reemplaza con una sola asignación de un objeto inmutable,
  así una petición en vuelo ve el token viejo o el nuevo, nunca uno a medias.
- La persistencia en el store va aparte (`save_credential` /
  `forget_credential`) y corre en un hilo, fuera del event loop.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from pocketkit.adapters.credential_store import MemoryCredentialStore
from pocketkit.core.domain.models import Credential
from pocketkit.core.errors import InvalidConfig
from pocketkit.core.interfaces.storage import CredentialStore

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> httpx.URL:
    """Parsea y normaliza la URL base (absoluta, http(s), path terminado en `/`)."""

    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidConfig(f"invalid base_url {base_url!r}: {exc}") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidConfig(f"base_url must be an absolute http(s) URL, got {base_url!r}")

    path = url.path if url.path.endswith("/") else url.path + "/"
    return url.copy_with(path=path)


class ClientContext:
    """Estado compartido por todos los servicios de un cliente.

    No es seguro mutarlo concurrentemente desde dos sitios sin sincronización
    externa; leer `credential` mientras otro task hace login sí lo es.
    """

    def __init__(
        self,
        base_url: str,
        locale: str = "en-US",
        *,
        store: CredentialStore | None = None,
    ) -> None:
        if not locale:
            raise InvalidConfig("locale must not be empty")
        self._base_url = normalize_base_url(base_url)
        self._locale = locale
        self._store = store if store is not None else MemoryCredentialStore()
        self._credential: Credential | None = self._store.load()

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def store(self) -> CredentialStore:
        return self._store

    @property
    def credential(self) -> Credential | None:
        return self._credential

    @property
    def is_authenticated(self) -> bool:
        return self._credential is not None

    def set_credential(self, credential: Credential) -> None:
        """Reemplaza la credencial en memoria (no toca el store)."""

        self._credential = credential
        logger.debug("Credential replaced (%s)", credential.kind.value)

    def clear_credential(self) -> None:
        self._credential = None
        logger.debug("Credential cleared")

    async def save_credential(self, credential: Credential) -> None:
        """`set_credential` + escritura en el store sin bloquear el loop."""

        self.set_credential(credential)
        await asyncio.to_thread(self._store.save, credential)

    async def forget_credential(self) -> None:
        self.clear_credential()
        await asyncio.to_thread(self._store.clear)
