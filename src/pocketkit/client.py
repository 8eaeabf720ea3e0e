"""Punto de entrada de la librería: `PocketBase`.

Por qué un objeto cliente:
- Construye una sola vez el contexto, el `httpx.AsyncClient` y la cadena de
  middlewares, y los comparte con cada servicio.
- Los accesores (`admin()`, `collection()`, `record()`...) son fábricas puras:
  no hacen I/O ni guardan estado propio.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Sequence

import httpx

from pocketkit.adapters.credential_store import FileCredentialStore
from pocketkit.adapters.http_client import build_async_client
from pocketkit.adapters.middleware import MiddlewareChain, build_default_chain
from pocketkit.core.config import ClientSettings
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.models import LogRequest, Record
from pocketkit.core.interfaces.middleware import Middleware
from pocketkit.core.interfaces.storage import CredentialStore
from pocketkit.core.services.admin import AdminService
from pocketkit.core.services.collection import CollectionService
from pocketkit.core.services.crud import CrudService
from pocketkit.core.services.health import HealthService
from pocketkit.core.services.record import RecordService
from pocketkit.core.services.settings import SettingsService


class PocketBase:
    """Cliente asíncrono del backend.

    Uso típico::

        async with PocketBase("https://example.pocketbase.io", "en") as pb:
            await pb.admin().auth_with_password("a@b.com", "pw")
            page = await pb.record("users").get_list()
    """

    def __init__(
        self,
        base_url: str,
        locale: str = "en-US",
        *,
        settings: ClientSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        store: CredentialStore | None = None,
        middlewares: Sequence[Middleware] = (),
    ) -> None:
        self._settings = settings or ClientSettings()
        self._context = ClientContext(base_url, locale, store=store)
        self._http = build_async_client(self._settings, transport=transport)
        self._chain = build_default_chain(self._context, self._http, extra=middlewares)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PocketBase:
        settings = settings or ClientSettings()
        store = FileCredentialStore(settings.credential_file) if settings.credential_file else None
        return cls(settings.base_url, settings.lang, settings=settings, transport=transport, store=store)

    @property
    def context(self) -> ClientContext:
        return self._context

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def chain(self) -> MiddlewareChain:
        return self._chain

    def admin(self) -> AdminService:
        return AdminService(self._context, self._chain, max_per_page=self._settings.max_per_page)

    def collection(self) -> CollectionService:
        return CollectionService(self._context, self._chain, max_per_page=self._settings.max_per_page)

    def record(self, name: str, model: Any = Record) -> RecordService[Any]:
        return RecordService(self._context, self._chain, name, model=model, max_per_page=self._settings.max_per_page)

    def logs(self) -> CrudService[LogRequest]:
        return CrudService(
            self._context,
            self._chain,
            base_path="api/logs/requests",
            model=LogRequest,
            requires_auth=True,
            max_per_page=self._settings.max_per_page,
        )

    def server_settings(self, model: Any = dict[str, Any]) -> SettingsService[Any]:
        """Ajustes del servidor; distinto de `settings`, que es la config local."""

        return SettingsService(self._context, self._chain, model=model)

    def health(self) -> HealthService:
        return HealthService(self._context, self._chain)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> PocketBase:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
