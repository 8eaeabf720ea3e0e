"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de las respuestas del servidor sin acoplar el Core a
  `httpx`.
- Los alias camelCase del protocolo REST quedan declarados en un único sitio.

Nota:
- Estos modelos describen *qué* devuelve el backend, no *cómo* se obtiene.
- Los servicios son genéricos: cualquier tipo validable por pydantic sirve
  como `T`; estos modelos son solo los tipos por defecto.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import AliasChoices, BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

T = TypeVar("T")
IdentityT = TypeVar("IdentityT")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Record(_CamelModel):
    """Documento JSON perteneciente a una colección.

    Los campos propios de la colección se conservan como extras
    (`record.model_extra` / `record["title"]`).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(default="", description="Identificador del registro.")
    created: str = Field(default="", description="Fecha de creación (formato del servidor).")
    updated: str = Field(default="", description="Fecha de última modificación.")
    collection_id: str = Field(default="", description="Id de la colección dueña.")
    collection_name: str = Field(default="", description="Nombre de la colección dueña.")
    expand: dict[str, Record | list[Record]] | None = Field(
        default=None,
        description="Relaciones expandidas (`?expand=`), un registro o una lista.",
    )

    def __getitem__(self, key: str) -> Any:
        extra = self.model_extra or {}
        if key in extra:
            return extra[key]
        if key in type(self).model_fields:
            return getattr(self, key)
        raise KeyError(key)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default


class Admin(_CamelModel):
    """Administrador del backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = ""
    created: str = ""
    updated: str = ""
    avatar: int = 0
    email: str = ""


class CollectionType(str, Enum):
    BASE = "base"
    AUTH = "auth"
    VIEW = "view"


class SchemaField(_CamelModel):
    """Campo del esquema de una colección."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = ""
    name: str
    type: str
    system: bool = False
    required: bool = False
    options: dict[str, Any] = Field(default_factory=dict)


class Collection(_CamelModel):
    """Metadatos de una colección (análogo a una tabla)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = ""
    created: str = ""
    updated: str = ""
    name: str
    type: CollectionType = CollectionType.BASE
    system: bool = False
    schema_: list[SchemaField] = Field(
        default_factory=list,
        validation_alias=AliasChoices("schema", "fields"),
        serialization_alias="schema",
    )
    indexes: list[str] = Field(default_factory=list)
    list_rule: str | None = None
    view_rule: str | None = None
    create_rule: str | None = None
    update_rule: str | None = None
    delete_rule: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class LogRequest(_CamelModel):
    """Entrada del log de peticiones del servidor."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = ""
    created: str = ""
    updated: str = ""
    url: str = ""
    method: str = ""
    status: int = 0
    auth: str = ""
    remote_ip: str = ""
    user_ip: str = ""
    referer: str = ""
    user_agent: str = ""
    meta: dict[str, Any] = Field(default_factory=dict)


class HealthCheck(_CamelModel):
    """Respuesta de `GET /api/health`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    code: int = 200
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class AppleClientSecret(BaseModel):
    """Respuesta de `api/settings/apple/generate-client-secret`."""

    secret: str


class ListResult(_CamelModel, Generic[T]):
    """Página de resultados de un listado.

    Invariante: `total_pages == ceil(total_items / per_page)` cuando
    `per_page > 0` y el total es conocido.
    """

    page: int = Field(default=1, ge=0)
    per_page: int = Field(default=0, ge=0)
    total_items: int = Field(default=0, ge=-1)
    total_pages: int = Field(default=0, ge=-1)
    items: list[T] = Field(default_factory=list)

    @model_validator(mode="after")
    def _derive_total_pages(self) -> ListResult[T]:
        if self.per_page > 0 and self.total_items >= 0:
            self.total_pages = math.ceil(self.total_items / self.per_page)
        return self


class ApiErrorPayload(BaseModel):
    """Cuerpo de error estándar `{code, message, data}`."""

    code: int
    message: str
    data: dict[str, Any] = Field(default_factory=dict)


class CredentialKind(str, Enum):
    ADMIN = "admin"
    RECORD = "record"


class Credential(BaseModel):
    """Token de autenticación y la identidad para la que fue emitido.

    Inmutable: el contexto solo puede reemplazarlo completo, nunca campo a campo.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1)
    kind: CredentialKind
    collection: str | None = Field(
        default=None,
        description="Colección auth que emitió el token (solo para `record`).",
    )
    identity: dict[str, Any] = Field(
        default_factory=dict,
        description="Objeto admin/record tal como lo devolvió el servidor.",
    )


class AuthResponse(BaseModel, Generic[IdentityT]):
    """Respuesta de autenticación `{token, admin|record, ...}`.

    Genérica sobre la forma de la identidad; campos adicionales (p.ej. `meta`)
    se conservan como extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    token: str = Field(..., min_length=1)
    identity: IdentityT = Field(validation_alias=AliasChoices("admin", "record", "identity"))
