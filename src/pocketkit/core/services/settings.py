"""Ajustes del servidor (`api/settings`, solo admins).

El documento de ajustes es grande y cambia entre versiones del backend, así
que se decodifica con el modelo que pase el llamador (por defecto un dict).
"""

from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar

from pydantic import TypeAdapter

from pocketkit.adapters.encoding import encode_body
from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import QueryParams, iter_query_params
from pocketkit.core.domain.models import AppleClientSecret
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import InvalidConfig
from pocketkit.core.services.base import BaseService

T = TypeVar("T")

SETTINGS_PATH = "api/settings"

_APPLE_SECRET_ADAPTER: TypeAdapter[AppleClientSecret] = TypeAdapter(AppleClientSecret)


def _merge_body(extra: Mapping[str, Any] | None, fixed: dict[str, Any]) -> dict[str, Any]:
    extra = dict(extra or {})
    clashes = sorted(set(extra) & set(fixed))
    if clashes:
        raise InvalidConfig(f"extra body fields would override {', '.join(clashes)}")
    return {**extra, **fixed}


class SettingsService(BaseService, Generic[T]):
    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        *,
        model: Any = dict[str, Any],
    ) -> None:
        super().__init__(context, chain)
        self._adapter: TypeAdapter[T] = TypeAdapter(model)

    async def get_all(self, *, query_params: QueryParams | None = None) -> T:
        request = RequestDescriptor(
            method="GET",
            path=SETTINGS_PATH,
            params=tuple(iter_query_params(query_params)),
            requires_auth=True,
        )
        return self._decode(await self._send(request), self._adapter)

    async def update(self, body: Any, *, query_params: QueryParams | None = None) -> T:
        """PATCH parcial: solo se envían las claves presentes en `body`."""

        encoded = encode_body(body)
        if encoded.files:
            raise InvalidConfig("settings cannot contain file uploads")
        request = RequestDescriptor(
            method="PATCH",
            path=SETTINGS_PATH,
            params=tuple(iter_query_params(query_params)),
            json=encoded.json,
            requires_auth=True,
        )
        return self._decode(await self._send(request), self._adapter)

    async def test_s3(
        self,
        filesystem: str | None = None,
        *,
        extra: Mapping[str, Any] | None = None,
        query_params: QueryParams | None = None,
    ) -> None:
        fixed = {"filesystem": filesystem} if filesystem else {}
        request = RequestDescriptor(
            method="POST",
            path=f"{SETTINGS_PATH}/test/s3",
            params=tuple(iter_query_params(query_params)),
            json=_merge_body(extra, fixed),
            requires_auth=True,
        )
        await self._send(request)

    async def test_email(
        self,
        email: str,
        template: str,
        *,
        extra: Mapping[str, Any] | None = None,
        query_params: QueryParams | None = None,
    ) -> None:
        if not email or not template:
            raise InvalidConfig("email and template are required")
        request = RequestDescriptor(
            method="POST",
            path=f"{SETTINGS_PATH}/test/email",
            params=tuple(iter_query_params(query_params)),
            json=_merge_body(extra, {"email": email, "template": template}),
            requires_auth=True,
        )
        await self._send(request)

    async def generate_apple_client_secret(
        self,
        client_id: str,
        team_id: str,
        key_id: str,
        private_key: str,
        duration: int,
        *,
        extra: Mapping[str, Any] | None = None,
        query_params: QueryParams | None = None,
    ) -> AppleClientSecret:
        if not all((client_id, team_id, key_id, private_key)):
            raise InvalidConfig("client_id, team_id, key_id and private_key are required")
        if duration <= 0:
            raise InvalidConfig(f"duration must be a positive number of seconds, got {duration}")
        fixed = {
            "clientId": client_id,
            "teamId": team_id,
            "keyId": key_id,
            "privateKey": private_key,
            "duration": duration,
        }
        request = RequestDescriptor(
            method="POST",
            path=f"{SETTINGS_PATH}/apple/generate-client-secret",
            params=tuple(iter_query_params(query_params)),
            json=_merge_body(extra, fixed),
            requires_auth=True,
        )
        return self._decode(await self._send(request), _APPLE_SECRET_ADAPTER)
