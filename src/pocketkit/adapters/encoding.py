"""Codificación de cuerpos de escritura (JSON o multipart).

La elección depende de la forma del cuerpo, no de un método distinto: si
algún valor (o elemento de lista) es binario se usa `multipart/form-data`.
"""

from __future__ import annotations

import dataclasses
import io
import json
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from pocketkit.core.domain.configs import FileUpload
from pocketkit.core.errors import InvalidConfig, SerializationFailure

_BINARY_TYPES = (bytes, bytearray, memoryview, FileUpload, io.BufferedIOBase, io.RawIOBase)


@dataclass(frozen=True)
class EncodedBody:
    json: Any = None
    data: dict[str, Any] | None = None
    files: tuple[tuple[str, tuple[str, Any, str | None]], ...] | None = None


def body_to_mapping(body: Any) -> dict[str, Any]:
    """Convierte el cuerpo del llamador en un dict plano (sin pasar a JSON aún)."""

    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True)
    if dataclasses.is_dataclass(body) and not isinstance(body, type):
        return {f.name: getattr(body, f.name) for f in dataclasses.fields(body)}
    if isinstance(body, Mapping):
        return dict(body)
    raise InvalidConfig(f"unsupported body type {type(body).__name__}; use a mapping, dataclass or pydantic model")


def _reject_text_stream(value: Any) -> None:
    if isinstance(value, io.TextIOBase) or (isinstance(value, FileUpload) and isinstance(value.content, io.TextIOBase)):
        raise InvalidConfig("file uploads need a binary stream; open the file in 'rb' mode")


def is_binary(value: Any) -> bool:
    values = value if isinstance(value, (list, tuple)) else [value]
    for item in values:
        _reject_text_stream(item)
    return any(isinstance(v, _BINARY_TYPES) for v in values)


def _file_part(name: str, value: Any, index: int) -> tuple[str, Any, str | None]:
    if isinstance(value, FileUpload):
        return (value.filename, value.content, value.content_type)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return (f"{name}-{index}", bytes(value), "application/octet-stream")
    filename = getattr(value, "name", None)
    filename = filename.rsplit("/", 1)[-1] if isinstance(filename, str) else f"{name}-{index}"
    return (filename, value, None)


def _to_jsonable(value: Any, *, field: str | None = None) -> Any:
    try:
        return to_jsonable_python(value)
    except PydanticSerializationError as exc:
        raise SerializationFailure(f"cannot encode {field or 'body'}: {exc}", path=field) from exc


def _form_value(name: str, value: Any) -> str | list[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    return json.dumps(_to_jsonable(value, field=name))


def encode_body(body: Any) -> EncodedBody:
    fields = body_to_mapping(body)
    if not any(is_binary(v) for v in fields.values()):
        return EncodedBody(json=_to_jsonable(fields))

    data: dict[str, Any] = {}
    files: list[tuple[str, tuple[str, Any, str | None]]] = []
    for name, value in fields.items():
        if value is None:
            continue
        if is_binary(value):
            values = value if isinstance(value, (list, tuple)) else [value]
            for index, item in enumerate(values):
                if not isinstance(item, _BINARY_TYPES):
                    raise InvalidConfig(f"field {name!r} mixes binary and non-binary values")
                files.append((name, _file_part(name, item, index)))
        else:
            data[name] = _form_value(name, value)
    return EncodedBody(data=data, files=tuple(files))
