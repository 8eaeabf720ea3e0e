"""Contrato de persistencia de la credencial activa."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pocketkit.core.domain.models import Credential


@runtime_checkable
class CredentialStore(Protocol):
    """Guarda la credencial entre ejecuciones (memoria, archivo, keyring...)."""

    def load(self) -> Credential | None: ...

    def save(self, credential: Credential) -> None: ...

    def clear(self) -> None: ...
