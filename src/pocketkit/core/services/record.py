"""Servicio de registros de una colección con nombre.

CRUD sobre `api/collections/<name>/records`; si la colección es de tipo auth,
las operaciones de autenticación usan `api/collections/<name>/...`.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar
from urllib.parse import quote

from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import AuthRefreshConfig, AuthWithPasswordConfig
from pocketkit.core.domain.models import AuthResponse, CredentialKind, Record
from pocketkit.core.errors import InvalidConfig
from pocketkit.core.services.auth import AuthService
from pocketkit.core.services.crud import CrudService

T = TypeVar("T")


def collection_path(name: str) -> str:
    if not name or not name.strip():
        raise InvalidConfig("collection name must not be empty")
    return f"api/collections/{quote(name.strip(), safe='')}"


class RecordService(CrudService[T], Generic[T]):
    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        name: str,
        *,
        model: Any = Record,
        max_per_page: int | None = None,
    ) -> None:
        base = collection_path(name)
        super().__init__(
            context,
            chain,
            base_path=f"{base}/records",
            model=model,
            max_per_page=max_per_page,
        )
        self._name = name.strip()
        self.auth: AuthService[T] = AuthService(
            context,
            chain,
            base_path=base,
            kind=CredentialKind.RECORD,
            identity_model=model,
            collection=self._name,
        )

    @property
    def name(self) -> str:
        return self._name

    async def auth_with_password(
        self,
        identity: str,
        password: str,
        config: AuthWithPasswordConfig | None = None,
    ) -> AuthResponse[T]:
        return await self.auth.auth_with_password(identity, password, config)

    async def auth_refresh(self, config: AuthRefreshConfig | None = None) -> AuthResponse[T]:
        return await self.auth.auth_refresh(config)

    async def logout(self) -> None:
        await self.auth.logout()

    async def request_password_reset(self, email: str) -> None:
        await self.auth.request_password_reset(email)

    async def confirm_password_reset(self, token: str, password: str, password_confirm: str) -> None:
        await self.auth.confirm_password_reset(token, password, password_confirm)
