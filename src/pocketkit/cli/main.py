"""CLI de desarrollo: health, login/logout, listado de registros y setup."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console

from pocketkit.adapters.credential_store import FileCredentialStore
from pocketkit.cli.log import setup_logging
from pocketkit.cli.ui_components import build_error_panel, build_health_panel, build_records_table, print_banner
from pocketkit.client import PocketBase
from pocketkit.core.config import ClientSettings, get_default_credential_file, write_user_env_vars
from pocketkit.core.domain.configs import GetListConfig
from pocketkit.core.errors import ApiFailure, PocketKitError

R = TypeVar("R")

app = typer.Typer(no_args_is_help=True, help="Developer tooling for PocketBase-style backends.")

_console = Console()


def load_settings() -> ClientSettings:
    settings = ClientSettings()
    if settings.credential_file is None:
        settings = settings.model_copy(update={"credential_file": get_default_credential_file()})
    return settings


def build_client(settings: ClientSettings) -> PocketBase:
    return PocketBase.from_settings(settings)


def _run(settings: ClientSettings, action: Callable[[PocketBase], Awaitable[R]]) -> R:
    async def runner() -> R:
        async with build_client(settings) as pb:
            return await action(pb)

    try:
        return asyncio.run(runner())
    except ApiFailure as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=1) from exc
    except PocketKitError as exc:
        _console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every HTTP exchange."),
) -> None:
    settings = load_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def health() -> None:
    """Check that the server answers `GET /api/health`."""

    settings = load_settings()
    print_banner(_console, settings.base_url)
    result = _run(settings, lambda pb: pb.health().check())
    _console.print(build_health_panel(result))


@app.command()
def login(
    email: str = typer.Argument(..., help="Admin email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Authenticate as admin and keep the token in the credential file."""

    settings = load_settings()
    auth = _run(settings, lambda pb: pb.admin().auth_with_password(email, password))
    _console.print(f"[green]Logged in as[/green] {auth.identity.email}")
    _console.print(f"[dim]Credential stored in {settings.credential_file}[/dim]")


@app.command()
def logout() -> None:
    """Forget the stored credential (local only)."""

    settings = load_settings()
    # No client: a corrupt credential file must still be removable.
    FileCredentialStore(settings.credential_file).clear()
    _console.print("[green]Logged out.[/green]")


@app.command()
def records(
    collection: str = typer.Argument(..., help="Collection name."),
    page: int = typer.Option(1, "--page", min=1),
    per_page: int = typer.Option(30, "--per-page", min=1),
    sort: Optional[str] = typer.Option(None, "--sort", help="Comma separated, e.g. -created,title"),
    filter_: Optional[str] = typer.Option(None, "--filter", help="Filter expression, passed verbatim."),
    expand: Optional[str] = typer.Option(None, "--expand", help="Comma separated relation names."),
) -> None:
    """List one page of records as a table."""

    settings = load_settings()
    config = GetListConfig(
        page=page,
        per_page=per_page,
        sort=[s for s in (sort or "").split(",") if s],
        filter=filter_,
        expand=[e for e in (expand or "").split(",") if e],
    )
    result = _run(settings, lambda pb: pb.record(collection).get_list(config))
    _console.print(build_records_table(collection, result))


@app.command()
def setup() -> None:
    """Interactive setup (stores base URL and locale in the user config .env)."""

    current = load_settings()
    base_url = typer.prompt("Base URL", default=current.base_url, show_default=True).strip()
    lang = typer.prompt("Locale", default=current.lang, show_default=True).strip()

    if not base_url or not lang:
        raise typer.BadParameter("base URL and locale are required")

    env_path = write_user_env_vars(
        {
            "POCKETKIT_BASE_URL": base_url,
            "POCKETKIT_LANG": lang,
        }
    )
    _console.print(f"[green]Saved config to:[/green] {env_path}")


def run() -> None:
    app()
