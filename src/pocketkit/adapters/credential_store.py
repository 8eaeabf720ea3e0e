"""Almacenes de credencial.

- `MemoryCredentialStore`: default; la credencial vive lo que vive el proceso.
- `FileCredentialStore`: JSON en disco (usado por la CLI entre comandos).
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from pocketkit.core.domain.models import Credential
from pocketkit.core.errors import SerializationFailure


class MemoryCredentialStore:
    def __init__(self, credential: Credential | None = None) -> None:
        self._credential = credential

    def load(self) -> Credential | None:
        return self._credential

    def save(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None


class FileCredentialStore:
    """Persiste la credencial como JSON UTF-8.

    La escritura pasa por un archivo temporal + `os.replace` para que un lector
    nunca vea un JSON a medio escribir.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Credential | None:
        if not self._path.exists():
            return None
        raw = self._path.read_bytes()
        try:
            return Credential.model_validate_json(raw)
        except ValidationError as exc:
            raise SerializationFailure(
                f"credential file {self._path} is corrupt",
                raw=raw,
            ) from exc

    def save(self, credential: Credential) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".credential-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(credential.model_dump_json(indent=2) + "\n")
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
