"""Cadena de middlewares alrededor del transporte httpx.

Orden fijo construido por el cliente:
1. `BaseUrlResolver`  - ruta relativa -> URL absoluta.
2. `LocaleInjector`   - `Accept-Language`.
3. `AuthInjector`     - `Authorization: Bearer <token>` si hay credencial.
4. `TransportInvoker` - terminal; ejecuta el intercambio real.

La cadena no reintenta: la política de reintentos es del llamador (puede
insertar su propio middleware antes del terminal).
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from pocketkit.core.context import ClientContext
from pocketkit.core.domain.request import RequestDescriptor
from pocketkit.core.errors import InvalidConfig, SerializationFailure, TransportFailure, Unauthenticated
from pocketkit.core.interfaces.middleware import CallNext, Middleware

logger = logging.getLogger(__name__)


class BaseUrlResolver:
    def __init__(self, context: ClientContext) -> None:
        self._context = context

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> httpx.Response:
        try:
            url = self._context.base_url.join(request.path.lstrip("/"))
        except httpx.InvalidURL as exc:
            raise InvalidConfig(f"cannot resolve path {request.path!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidConfig(f"resolved URL {url} is not an absolute http(s) URL")
        return await call_next(request.with_url(url))


class LocaleInjector:
    def __init__(self, context: ClientContext) -> None:
        self._context = context

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> httpx.Response:
        return await call_next(request.with_header("Accept-Language", self._context.locale))


class AuthInjector:
    """Adjunta el token activo; corta con `Unauthenticated` si la llamada lo exige."""

    def __init__(self, context: ClientContext) -> None:
        self._context = context

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> httpx.Response:
        # Single read: a concurrent login/logout swaps the whole object.
        credential = self._context.credential
        if credential is None:
            if request.requires_auth:
                raise Unauthenticated(f"{request.method} {request.path} requires authentication")
            return await call_next(request)
        return await call_next(request.with_header("Authorization", f"Bearer {credential.token}"))


class TransportInvoker:
    """Eslabón terminal: ejecuta la petición con `httpx.AsyncClient`."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> httpx.Response:
        if request.url is None:
            raise InvalidConfig(f"request for {request.path!r} reached the transport without an absolute URL")
        if self._client.is_closed:
            raise TransportFailure(f"{request.method} {request.url} failed: the client has been closed")

        started = time.perf_counter()
        try:
            response = await self._client.request(
                request.method,
                request.url,
                params=list(request.params) or None,
                headers=dict(request.headers),
                json=request.json,
                data=request.data,
                files=list(request.files) if request.files else None,
            )
        except httpx.DecodingError as exc:
            raise SerializationFailure(f"could not decode response body: {exc}") from exc
        except httpx.RequestError as exc:
            logger.debug("%s %s failed: %s", request.method, request.url, exc)
            raise TransportFailure(f"{request.method} {request.url} failed: {exc}", cause=exc) from exc

        logger.debug(
            "%s %s -> %s (%.1f ms)",
            request.method,
            response.url,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


class MiddlewareChain:
    """Lista ordenada y explícita de middlewares; el último debe ser terminal."""

    def __init__(self, middlewares: Sequence[Middleware]) -> None:
        if not middlewares:
            raise ValueError("a middleware chain needs at least a terminal transport")
        self._middlewares = tuple(middlewares)

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    async def send(self, request: RequestDescriptor) -> httpx.Response:
        return await self._dispatch(0, request)

    async def _dispatch(self, index: int, request: RequestDescriptor) -> httpx.Response:
        if index >= len(self._middlewares):
            raise RuntimeError("middleware chain ended without a terminal transport")
        middleware = self._middlewares[index]

        async def call_next(next_request: RequestDescriptor) -> httpx.Response:
            return await self._dispatch(index + 1, next_request)

        return await middleware.handle(request, call_next)


def build_default_chain(
    context: ClientContext,
    client: httpx.AsyncClient,
    *,
    extra: Sequence[Middleware] = (),
) -> MiddlewareChain:
    """Construye la cadena estándar; `extra` se inserta justo antes del transporte."""

    return MiddlewareChain(
        [
            BaseUrlResolver(context),
            LocaleInjector(context),
            AuthInjector(context),
            *extra,
            TransportInvoker(client),
        ]
    )
