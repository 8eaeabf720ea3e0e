"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pocketkit.core.domain.models import HealthCheck, ListResult, Record
from pocketkit.core.errors import ApiFailure

_BASE_COLUMNS = ("id", "created", "updated")


def print_banner(console: Console, base_url: str) -> None:
    title = Text("pocketkit", style="bold cyan")
    subtitle = Text(base_url, style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _cell(value: Any, max_chars: int = 40) -> str:
    if value is None:
        return ""
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + "…"


def _record_columns(records: Iterable[Record], limit: int) -> list[str]:
    columns: list[str] = list(_BASE_COLUMNS)
    for record in records:
        for key in (record.model_extra or {}):
            if key not in columns:
                columns.append(key)
    return columns[:limit]


def build_records_table(collection: str, result: ListResult[Record], *, max_columns: int = 8) -> Table:
    """Tabla Rich con una página de registros."""

    table = Table(
        title=f"{collection} (page {result.page}/{max(result.total_pages, 1)}, {result.total_items} items)",
    )
    columns = _record_columns(result.items, max_columns)
    for index, column in enumerate(columns):
        table.add_column(column, style="cyan" if index == 0 else "white", no_wrap=index == 0)
    for record in result.items:
        table.add_row(*(_cell(record.get(column)) for column in columns))
    return table


def build_health_panel(health: HealthCheck) -> Panel:
    body = Text()
    body.append(f"{health.message or 'OK'}\n", style="bold")
    for key, value in sorted(health.data.items()):
        body.append(f"{key}: {_cell(value)}\n", style="dim")
    return Panel(body, title=Text(f"Health ({health.code})", style="bold green"), border_style="green")


def build_error_panel(error: ApiFailure) -> Panel:
    """Panel para un `ApiFailure` con el detalle de validación por campo."""

    body = Text()
    body.append(error.message + "\n")
    for field_name, detail in sorted(error.data.items()):
        body.append(f"- {field_name}: {_cell(detail, 80)}\n", style="dim")
    return Panel(body, title=Text(f"API error {error.code}", style="bold red"), border_style="red")
