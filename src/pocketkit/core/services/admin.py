"""Servicio de administradores: CRUD sobre `api/admins` + autenticación admin."""

from __future__ import annotations

from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import AuthRefreshConfig, AuthWithPasswordConfig
from pocketkit.core.domain.models import Admin, AuthResponse, CredentialKind
from pocketkit.core.services.auth import AuthService
from pocketkit.core.services.crud import CrudService

ADMINS_PATH = "api/admins"


class AdminService(CrudService[Admin]):
    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        *,
        max_per_page: int | None = None,
    ) -> None:
        super().__init__(
            context,
            chain,
            base_path=ADMINS_PATH,
            model=Admin,
            requires_auth=True,
            max_per_page=max_per_page,
        )
        self.auth: AuthService[Admin] = AuthService(
            context,
            chain,
            base_path=ADMINS_PATH,
            kind=CredentialKind.ADMIN,
            identity_model=Admin,
        )

    async def auth_with_password(
        self,
        identity: str,
        password: str,
        config: AuthWithPasswordConfig | None = None,
    ) -> AuthResponse[Admin]:
        return await self.auth.auth_with_password(identity, password, config)

    async def auth_refresh(self, config: AuthRefreshConfig | None = None) -> AuthResponse[Admin]:
        return await self.auth.auth_refresh(config)

    async def logout(self) -> None:
        await self.auth.logout()

    async def request_password_reset(self, email: str) -> None:
        await self.auth.request_password_reset(email)

    async def confirm_password_reset(self, token: str, password: str, password_confirm: str) -> None:
        await self.auth.confirm_password_reset(token, password, password_confirm)
