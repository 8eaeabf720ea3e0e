"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y negociación de contenido para todas las
  peticiones del cliente.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from pocketkit.core.config import ClientSettings


def build_async_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los servicios se comporten igual.
    - El pooling, TLS y redirecciones quedan delegados a httpx.
    """

    settings = settings or ClientSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
