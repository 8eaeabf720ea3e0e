"""Base común de los servicios: envío por la cadena y decodificación tipada."""

from __future__ import annotations

from typing import TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from pocketkit.adapters.middleware import MiddlewareChain
from pocketkit.core.context import ClientContext
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import decode_json, raise_for_response, serialization_failure_from

R = TypeVar("R")


class BaseService:
    def __init__(self, context: ClientContext, chain: MiddlewareChain) -> None:
        self._context = context
        self._chain = chain

    @property
    def context(self) -> ClientContext:
        return self._context

    async def _send(self, request: RequestDescriptor) -> httpx.Response:
        """Pasa el descriptor por la cadena y mapea no-2xx a `ApiFailure`."""

        response = await self._chain.send(request)
        return raise_for_response(response)

    @staticmethod
    def _decode(response: httpx.Response, adapter: TypeAdapter[R]) -> R:
        payload = decode_json(response)
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise serialization_failure_from(exc, raw=response.content) from exc
