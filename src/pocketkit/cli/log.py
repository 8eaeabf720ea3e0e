"""Configuración de logging para la CLI (la librería solo usa `getLogger`)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", *, console: Console | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep the library's own DEBUG lines instead.
    logging.getLogger("httpx").setLevel(logging.WARNING)
