"""Configuración por llamada de las operaciones CRUD y de autenticación.

Por qué dataclasses (y no modelos pydantic):
- Son parámetros de entrada, no datos del dominio; se validan explícitamente
  con `validate()` para lanzar `InvalidConfig` antes de cualquier I/O.
- Todos los campos son opcionales con defaults documentados.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any, Mapping, Sequence, Union

from pocketkit.core.errors import InvalidConfig

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 30

QueryParams = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


@dataclass(frozen=True)
class SortField:
    """Campo de ordenación; `descending=True` se envía como `-field`."""

    field: str
    descending: bool = False

    def render(self) -> str:
        return f"-{self.field}" if self.descending else self.field


@dataclass(frozen=True)
class FileUpload:
    """Archivo a subir en un cuerpo multipart."""

    filename: str
    content: bytes | IO[bytes]
    content_type: str | None = None


def _render_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def iter_query_params(query_params: QueryParams | None) -> list[tuple[str, str]]:
    """Normaliza parámetros libres a pares ordenados (claves repetibles)."""

    if not query_params:
        return []
    items = query_params.items() if isinstance(query_params, Mapping) else query_params
    pairs: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _render_query_value(v)) for v in value)
        else:
            pairs.append((key, _render_query_value(value)))
    return pairs


def _join_names(names: Sequence[str] | str, *, option: str) -> str | None:
    if isinstance(names, str):
        names = [names]
    cleaned = [n.strip() for n in names]
    if any(not n for n in cleaned):
        raise InvalidConfig(f"{option} contains an empty name")
    return ",".join(cleaned) or None


def _check_query_params(query_params: QueryParams | None) -> None:
    if query_params is None or isinstance(query_params, Mapping):
        return
    for pair in query_params:
        if not isinstance(pair, tuple) or len(pair) != 2:
            raise InvalidConfig(f"query_params entries must be (key, value) pairs, got {pair!r}")


@dataclass
class GetListConfig:
    """Opciones de `get_list`.

    Defaults: page=1, per_page=30, sin sort/filter/expand. `filter` y `sort` se
    envían tal cual; la sintaxis la valida el servidor.
    """

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    sort: Sequence[SortField | str] = ()
    filter: str | None = None
    expand: Sequence[str] = ()
    fields: Sequence[str] = ()
    query_params: QueryParams | None = None

    def validate(self, *, max_per_page: int | None = None) -> None:
        if self.page < 1:
            raise InvalidConfig(f"page must be >= 1, got {self.page}")
        if self.per_page < 1:
            raise InvalidConfig(f"per_page must be >= 1, got {self.per_page}")
        if max_per_page is not None and self.per_page > max_per_page:
            raise InvalidConfig(f"per_page {self.per_page} exceeds the maximum of {max_per_page}")
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = [
            ("page", str(self.page)),
            ("perPage", str(self.per_page)),
        ]
        if self.sort:
            sort = [s.render() if isinstance(s, SortField) else s for s in self.sort]
            joined = _join_names(sort, option="sort")
            if joined:
                params.append(("sort", joined))
        if self.filter:
            params.append(("filter", self.filter))
        params.extend(_relation_params(self.expand, self.fields))
        params.extend(iter_query_params(self.query_params))
        return params


def _relation_params(expand: Sequence[str] | str, fields: Sequence[str] | str) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    if expand:
        joined = _join_names(expand, option="expand")
        if joined:
            params.append(("expand", joined))
    if fields:
        joined = _join_names(fields, option="fields")
        if joined:
            params.append(("fields", joined))
    return params


@dataclass
class GetOneConfig:
    expand: Sequence[str] = ()
    fields: Sequence[str] = ()
    query_params: QueryParams | None = None

    def validate(self) -> None:
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        return _relation_params(self.expand, self.fields) + iter_query_params(self.query_params)


@dataclass
class CreateConfig:
    """Opciones de `create`.

    `body` puede ser un mapping, un modelo pydantic o una dataclass. Si algún
    valor es binario (bytes, archivo, `FileUpload`) se envía como multipart.
    """

    body: Any = field(default_factory=dict)
    expand: Sequence[str] = ()
    fields: Sequence[str] = ()
    query_params: QueryParams | None = None

    def validate(self) -> None:
        if self.body is None:
            raise InvalidConfig("body is required for write operations")
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        return _relation_params(self.expand, self.fields) + iter_query_params(self.query_params)


@dataclass
class UpdateConfig(CreateConfig):
    """Opciones de `update`; mismas reglas de codificación que `create`."""


@dataclass
class DeleteConfig:
    query_params: QueryParams | None = None

    def validate(self) -> None:
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        return iter_query_params(self.query_params)


@dataclass
class AuthWithPasswordConfig:
    """Opciones extra de `auth_with_password`.

    `save=False` devuelve la respuesta sin tocar la credencial del contexto.
    """

    extra: Mapping[str, Any] = field(default_factory=dict)
    expand: Sequence[str] = ()
    query_params: QueryParams | None = None
    save: bool = True

    def validate(self) -> None:
        reserved = {"identity", "password"} & set(self.extra)
        if reserved:
            raise InvalidConfig(f"extra body must not override {sorted(reserved)}")
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        return _relation_params(self.expand, ()) + iter_query_params(self.query_params)


@dataclass
class AuthRefreshConfig:
    extra: Mapping[str, Any] = field(default_factory=dict)
    expand: Sequence[str] = ()
    query_params: QueryParams | None = None
    save: bool = True

    def validate(self) -> None:
        _check_query_params(self.query_params)

    def to_query(self) -> list[tuple[str, str]]:
        return _relation_params(self.expand, ()) + iter_query_params(self.query_params)
