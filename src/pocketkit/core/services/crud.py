"""Servicio CRUD genérico sobre un recurso REST.

Por qué genérico por composición:
- Un único camino de código para formas de registro heterogéneas; el tipo
  `T` se decodifica con `pydantic.TypeAdapter`, sin exigir una clase base.
- Cada operación es una petición independiente: no hay orden implícito entre
  llamadas concurrentes sobre la misma instancia.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar
from urllib.parse import quote

from pydantic import TypeAdapter

from pocketkit.adapters.encoding import encode_body
from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.configs import (
    CreateConfig,
    DeleteConfig,
    GetListConfig,
    GetOneConfig,
    UpdateConfig,
)
from pocketkit.core.domain.models import ListResult
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import InvalidConfig
from pocketkit.core.services.base import BaseService

T = TypeVar("T")

logger = logging.getLogger(__name__)


class CrudService(BaseService, Generic[T]):
    """List/view/create/update/delete sobre `base_path`.

    `requires_auth=True` hace que todas las operaciones fallen con
    `Unauthenticated` antes de tocar la red si no hay credencial.
    """

    def __init__(
        self,
        context: ClientContext,
        chain: MiddlewareChain,
        *,
        base_path: str,
        model: Any,
        requires_auth: bool = False,
        max_per_page: int | None = None,
    ) -> None:
        super().__init__(context, chain)
        self._base_path = base_path.strip("/")
        self._model = model
        self._requires_auth = requires_auth
        self._max_per_page = max_per_page
        self._item_adapter: TypeAdapter[T] = TypeAdapter(model)
        self._list_adapter: TypeAdapter[ListResult[T]] = TypeAdapter(ListResult[model])  # type: ignore[valid-type]

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def model(self) -> Any:
        return self._model

    def _item_path(self, record_id: str) -> str:
        if not record_id:
            raise InvalidConfig("id must not be empty")
        return f"{self._base_path}/{quote(record_id, safe='')}"

    def _request(self, method: str, path: str, params: list[tuple[str, str]], **kwargs: Any) -> RequestDescriptor:
        return RequestDescriptor(
            method=method,
            path=path,
            params=tuple(params),
            requires_auth=self._requires_auth,
            **kwargs,
        )

    async def get_list(self, config: GetListConfig | None = None) -> ListResult[T]:
        config = config or GetListConfig()
        config.validate(max_per_page=self._max_per_page)
        request = self._request("GET", self._base_path, config.to_query())
        response = await self._send(request)
        return self._decode(response, self._list_adapter)

    async def get_one(self, record_id: str, config: GetOneConfig | None = None) -> T:
        config = config or GetOneConfig()
        config.validate()
        request = self._request("GET", self._item_path(record_id), config.to_query())
        response = await self._send(request)
        return self._decode(response, self._item_adapter)

    async def create(self, config: CreateConfig) -> T:
        config.validate()
        encoded = encode_body(config.body)
        request = self._request(
            "POST",
            self._base_path,
            config.to_query(),
            json=encoded.json,
            data=encoded.data,
            files=encoded.files,
        )
        response = await self._send(request)
        return self._decode(response, self._item_adapter)

    async def update(self, record_id: str, config: UpdateConfig) -> T:
        config.validate()
        path = self._item_path(record_id)
        encoded = encode_body(config.body)
        request = self._request(
            "PATCH",
            path,
            config.to_query(),
            json=encoded.json,
            data=encoded.data,
            files=encoded.files,
        )
        response = await self._send(request)
        return self._decode(response, self._item_adapter)

    async def delete(self, record_id: str, config: DeleteConfig | None = None) -> None:
        config = config or DeleteConfig()
        config.validate()
        request = self._request("DELETE", self._item_path(record_id), config.to_query())
        await self._send(request)
        logger.debug("Deleted %s/%s", self._base_path, record_id)
