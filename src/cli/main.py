"""CLI principal (Typer).

Sustituye a la capa de presentación: cada comando construye el cliente de
API, delega en el Core y pinta el resultado con Rich.
"""

from __future__ import annotations

import typer

from cli import contacts, doctor, runtime
from cli.ui_components import build_options_panel, print_banner
from core.domain.models import Alias, UserOptions

app = typer.Typer(no_args_is_help=True, help="Client for an email alias / forwarding service.")
app.add_typer(contacts.app, name="contacts")
app.add_typer(doctor.app, name="doctor")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    settings = runtime.load_settings_or_exit()
    runtime.configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def banner() -> None:
    """Show the banner."""

    print_banner(runtime.console)


@app.command()
def options(
    hostname: str | None = typer.Option(None, "--hostname", help="Website the alias is meant for."),
) -> None:
    """Show alias creation options: suffixes, prefix suggestion and domains."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)

    async def _fetch() -> UserOptions:
        async with runtime.build_api(settings) as api:
            return await api.fetch_user_options(hostname=hostname)

    result = runtime.run_api_call(_fetch())
    runtime.console.print(build_options_panel(result))


@app.command(name="create-alias")
def create_alias(
    prefix: str = typer.Argument(..., help="Alias prefix."),
    suffix: str = typer.Argument(..., help="One of the suffixes listed by `options`."),
    note: str | None = typer.Option(None, "--note", help="Free text note."),
) -> None:
    """Create a custom alias."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)

    async def _create() -> Alias:
        async with runtime.build_api(settings) as api:
            return await api.create_alias(prefix, suffix, note=note)

    alias = runtime.run_api_call(_create())
    runtime.console.print(f"[green]Created alias[/green] {alias.email} (id {alias.id})")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
