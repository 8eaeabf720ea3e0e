"""Contrato de middleware de la cadena de peticiones.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida: cualquier objeto
  con `handle` puede insertarse en la cadena.
- Permite que el llamador añada sus propios eslabones (p.ej. reintentos) sin
  registrar nada globalmente.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

import httpx

from pocketkit.core.domain.request import RequestDescriptor

CallNext = Callable[[RequestDescriptor], Awaitable[httpx.Response]]


@runtime_checkable
class Middleware(Protocol):
    """Transformador de un intercambio pendiente.

    Reglas de diseño:
    - Puede inspeccionar/reemplazar el `RequestDescriptor`, cortar la cadena
      lanzando un error del dominio, o delegar en `call_next`.
    - Debe ser idempotente: reintentar el mismo descriptor no acumula efectos.
    """

    async def handle(self, request: RequestDescriptor, call_next: CallNext) -> httpx.Response:
        """Procesa `request` y devuelve la respuesta (propia o de `call_next`)."""

        ...
