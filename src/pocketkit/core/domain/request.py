"""Descriptor inmutable de una petición saliente.

Los middlewares nunca lo mutan: producen copias con `with_header` / `with_url`
y las pasan al siguiente eslabón.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

import httpx


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    path: str
    params: tuple[tuple[str, str], ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any = None
    data: Mapping[str, Any] | None = None
    files: tuple[tuple[str, tuple[str, Any, str | None]], ...] | None = None
    requires_auth: bool = False
    # Absolute URL, set by the base URL resolver.
    url: httpx.URL | None = None

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)

    def with_header(self, name: str, value: str) -> RequestDescriptor:
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return replace(self, headers=headers)

    def with_url(self, url: httpx.URL) -> RequestDescriptor:
        return replace(self, url=url)
