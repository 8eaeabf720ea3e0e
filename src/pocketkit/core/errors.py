"""Taxonomía de errores del cliente.

Por qué una jerarquía única:
- Cada operación pública devuelve un valor o lanza exactamente una de estas
  excepciones; el llamador puede capturar `PocketKitError` o una variante.
- Los errores de transporte, de HTTP y de payload de la API se normalizan aquí
  para que los servicios no conozcan detalles de `httpx` ni de pydantic.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from pocketkit.core.domain.models import ApiErrorPayload

logger = logging.getLogger(__name__)


class PocketKitError(Exception):
    """Base de todos los errores que expone la librería."""


class TransportFailure(PocketKitError):
    """Fallo de red (DNS, conexión, TLS, timeout) antes de tener respuesta."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class SerializationFailure(PocketKitError):
    """No se pudo codificar la petición o decodificar la respuesta."""

    def __init__(
        self,
        message: str,
        *,
        raw: bytes | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.raw = raw
        self.path = path


class ApiFailure(PocketKitError):
    """Respuesta no-2xx del servidor.

    `code` es siempre el status HTTP; `data` contiene el detalle de validación
    por campo tal como lo envía el servidor.
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: dict[str, Any] | None = None,
        *,
        payload: ApiErrorPayload | None = None,
    ) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.data = data or {}
        self.payload = payload


class Unauthenticated(PocketKitError):
    """La operación requiere credencial y el contexto no tiene ninguna."""


class InvalidConfig(PocketKitError):
    """Configuración del llamador inválida; se detecta antes de cualquier I/O."""


def _first_error_path(exc: ValidationError) -> str | None:
    errors = exc.errors()
    if not errors:
        return None
    loc = errors[0].get("loc") or ()
    return ".".join(str(part) for part in loc) or None


def serialization_failure_from(exc: ValidationError, *, raw: bytes | None = None) -> SerializationFailure:
    """Convierte un `ValidationError` de pydantic en `SerializationFailure`."""

    path = _first_error_path(exc)
    message = f"response does not match the expected shape at {path!r}" if path else "response does not match the expected shape"
    return SerializationFailure(message, raw=raw, path=path)


def api_failure_from_response(response: httpx.Response) -> ApiFailure:
    """Construye un `ApiFailure` a partir de una respuesta no-2xx.

    Si el cuerpo no es `{code, message, data}` se conserva el status y el texto
    crudo como mensaje; nunca se degrada a un error genérico de transporte.
    """

    body = response.content
    try:
        payload = ApiErrorPayload.model_validate_json(body)
    except ValidationError:
        logger.warning(
            "Error body for %s %s does not match the API error shape",
            response.request.method,
            response.request.url,
        )
        message = response.text.strip() or response.reason_phrase
        return ApiFailure(response.status_code, message)

    return ApiFailure(response.status_code, payload.message, payload.data, payload=payload)


def raise_for_response(response: httpx.Response) -> httpx.Response:
    """Devuelve la respuesta si es 2xx; si no, lanza `ApiFailure`."""

    if response.is_success:
        return response
    raise api_failure_from_response(response)


def decode_json(response: httpx.Response) -> Any:
    """Decodifica el cuerpo JSON o lanza `SerializationFailure` con los bytes crudos."""

    try:
        return json.loads(response.content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SerializationFailure(f"invalid JSON response: {exc}", raw=response.content) from exc
