"""Servicio de autenticación (admins o colecciones auth).

Por qué separado del CRUD:
- Es el único que muta la credencial del contexto (login/refresh/logout).
- Es genérico sobre la forma de la identidad (`Admin`, `Record` o un tipo
  propio del llamador); solo exige que pydantic pueda validarla.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import AuthRefreshConfig, AuthWithPasswordConfig, iter_query_params
from pocketkit.core.domain.models import AuthResponse, Credential, CredentialKind
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import InvalidConfig, SerializationFailure, Unauthenticated, decode_json, serialization_failure_from
from pocketkit.core.services.base import BaseService

IdentityT = TypeVar("IdentityT")

logger = logging.getLogger(__name__)

_IDENTITY_KEYS = {CredentialKind.ADMIN: "admin", CredentialKind.RECORD: "record"}


class AuthService(BaseService, Generic[IdentityT]):
    """Operaciones de autenticación sobre `base_path`.

    - admins: `base_path="api/admins"`, `kind=ADMIN`.
    - registros: `base_path="api/collections/<name>"`, `kind=RECORD`.
    """

    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        *,
        base_path: str,
        kind: CredentialKind,
        identity_model: Any,
        collection: str | None = None,
    ) -> None:
        super().__init__(context, chain)
        if kind is CredentialKind.RECORD and not collection:
            raise InvalidConfig("record auth needs a collection name")
        self._base_path = base_path.strip("/")
        self._kind = kind
        self._collection = collection if kind is CredentialKind.RECORD else None
        self._adapter: TypeAdapter[AuthResponse[IdentityT]] = TypeAdapter(AuthResponse[identity_model])  # type: ignore[valid-type]

    def _owns(self, credential: Credential) -> bool:
        return credential.kind is self._kind and credential.collection == self._collection

    async def _authenticate(self, request: RequestDescriptor, *, save: bool) -> AuthResponse[IdentityT]:
        response = await self._send(request)
        payload = decode_json(response)
        try:
            auth = self._adapter.validate_python(payload)
        except ValidationError as exc:
            raise serialization_failure_from(exc, raw=response.content) from exc

        if save:
            identity = payload.get(_IDENTITY_KEYS[self._kind]) if isinstance(payload, dict) else None
            if not isinstance(identity, dict):
                raise SerializationFailure(
                    f"auth response has no {_IDENTITY_KEYS[self._kind]!r} object",
                    raw=response.content,
                    path=_IDENTITY_KEYS[self._kind],
                )
            await self._context.save_credential(
                Credential(
                    token=auth.token,
                    kind=self._kind,
                    collection=self._collection,
                    identity=identity,
                )
            )
            logger.info("Authenticated as %s via %s", self._kind.value, self._base_path)
        return auth

    async def auth_with_password(
        self,
        identity: str,
        password: str,
        config: AuthWithPasswordConfig | None = None,
    ) -> AuthResponse[IdentityT]:
        config = config or AuthWithPasswordConfig()
        config.validate()
        if not identity or not password:
            raise InvalidConfig("identity and password are required")

        request = RequestDescriptor(
            method="POST",
            path=f"{self._base_path}/auth-with-password",
            params=tuple(config.to_query()),
            json={**config.extra, "identity": identity, "password": password},
        )
        return await self._authenticate(request, save=config.save)

    async def auth_refresh(self, config: AuthRefreshConfig | None = None) -> AuthResponse[IdentityT]:
        """Cambia el token actual por uno nuevo; exige credencial de este ámbito."""

        config = config or AuthRefreshConfig()
        config.validate()
        credential = self._context.credential
        if credential is None:
            raise Unauthenticated("auth_refresh requires an active credential")
        if not self._owns(credential):
            raise Unauthenticated(f"the active credential was not issued by {self._base_path}")

        request = RequestDescriptor(
            method="POST",
            path=f"{self._base_path}/auth-refresh",
            params=tuple(config.to_query()),
            json=dict(config.extra),
            requires_auth=True,
        )
        return await self._authenticate(request, save=config.save)

    async def logout(self) -> None:
        """Reset local del estado de auth; no hay llamada de red."""

        await self._context.forget_credential()
        logger.info("Logged out")

    async def request_password_reset(self, email: str, *, query_params: Any = None) -> None:
        if not email:
            raise InvalidConfig("email is required")
        request = RequestDescriptor(
            method="POST",
            path=f"{self._base_path}/request-password-reset",
            params=tuple(iter_query_params(query_params)),
            json={"email": email},
        )
        await self._send(request)

    async def confirm_password_reset(
        self,
        token: str,
        password: str,
        password_confirm: str,
        *,
        query_params: Any = None,
    ) -> None:
        if not token:
            raise InvalidConfig("reset token is required")
        if password != password_confirm:
            raise InvalidConfig("password and password_confirm do not match")
        request = RequestDescriptor(
            method="POST",
            path=f"{self._base_path}/confirm-password-reset",
            params=tuple(iter_query_params(query_params)),
            json={"token": token, "password": password, "passwordConfirm": password_confirm},
        )
        await self._send(request)
