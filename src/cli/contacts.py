"""Comandos `contacts`: listado paginado, alta, baja y reverse alias.

Todos pasan por `ContactListSynchronizer`; la CLI hace el papel del scroll
infinito llamando a `load_all()`.
"""

from __future__ import annotations

from pathlib import Path

import typer

from adapters.json_exporter import contacts_to_json, export_contacts_json
from cli import runtime
from cli.ui_components import build_contacts_table, build_reverse_alias_panel
from core.config import AppSettings
from core.domain.models import Contact
from core.services.contact_sync import ContactListSynchronizer

app = typer.Typer(no_args_is_help=True, help="List, create and delete the contacts of an alias.")


async def _load_contacts(settings: AppSettings, alias_id: int, max_pages: int) -> ContactListSynchronizer:
    async with runtime.build_api(settings) as api:
        sync = ContactListSynchronizer(api, alias_id)
        await sync.load_all(max_pages=max_pages)
        return sync


async def _refresh_first_page(settings: AppSettings, alias_id: int) -> ContactListSynchronizer:
    async with runtime.build_api(settings) as api:
        sync = ContactListSynchronizer(api, alias_id)
        await sync.refresh()
        return sync


def _find(sync: ContactListSynchronizer, contact_id: int) -> Contact | None:
    for contact in sync.items:
        if contact.id == contact_id:
            return contact
    return None


@app.command("list")
def list_contacts(
    alias_id: int = typer.Argument(..., help="Alias id."),
    max_pages: int | None = typer.Option(None, "--max-pages", min=1, help="Stop after this many pages."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the contacts as JSON to this file."),
) -> None:
    """Load every page of contacts of an alias and show them."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)
    limit = max_pages or settings.contacts_max_pages

    sync = runtime.run_api_call(_load_contacts(settings, alias_id, limit))

    if output is not None:
        path = export_contacts_json(contacts=sync.items, output_path=output)
        runtime.err_console.print(f"[green]Saved contacts to:[/green] {path}")

    if as_json:
        typer.echo(contacts_to_json(sync.items), nl=False)
        return

    if sync.is_empty:
        runtime.console.print("[yellow]This alias has no contacts yet.[/yellow]")
        return

    runtime.console.print(build_contacts_table(sync.items, title=f"Contacts of alias {alias_id}"))
    if sync.more_available:
        runtime.console.print(f"[dim]Stopped after {limit} page(s); more contacts may exist.[/dim]")


@app.command("create")
def create_contact(
    alias_id: int = typer.Argument(..., help="Alias id."),
    email: str = typer.Argument(..., help="Contact email address."),
) -> None:
    """Create a contact, then refresh the first page of the list."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)

    async def _create() -> Contact:
        async with runtime.build_api(settings) as api:
            return await api.create_contact(alias_id, email)

    contact = runtime.run_api_call(_create())
    runtime.console.print(f"[green]Created contact[/green] \"{contact.email}\"")
    runtime.console.print(build_reverse_alias_panel(contact))

    # El alta ya está hecha en el servidor: si el refresco falla solo se avisa.
    sync = runtime.run_optional_api_call(
        _refresh_first_page(settings, alias_id),
        context="contact created but the list could not be refreshed",
    )
    if sync is not None and not sync.is_empty:
        runtime.console.print(build_contacts_table(sync.items, title=f"Contacts of alias {alias_id}"))


@app.command("delete")
def delete_contact(
    alias_id: int = typer.Argument(..., help="Alias id."),
    contact_id: int = typer.Argument(..., help="Contact id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    max_pages: int | None = typer.Option(None, "--max-pages", min=1),
) -> None:
    """Delete a contact of an alias. This operation is irreversible."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)
    limit = max_pages or settings.contacts_max_pages

    sync = runtime.run_api_call(_load_contacts(settings, alias_id, limit))

    # Confirmación fuera del event loop: no hay cliente HTTP abierto mientras se espera al usuario.
    target = _find(sync, contact_id)
    label = target.email if target else f"#{contact_id}"
    if not yes and not typer.confirm(f"Delete \"{label}\"? This operation is irreversible."):
        raise typer.Abort()

    async def _delete() -> Contact | None:
        async with runtime.build_api(settings) as api:
            sync.rebind(api)
            return await sync.delete_item(contact_id)

    removed = runtime.run_api_call(_delete())
    if removed is not None:
        runtime.console.print(f"[green]Deleted contact[/green] \"{removed.email}\"")
    else:
        runtime.console.print(f"[green]Deleted contact[/green] #{contact_id}")


@app.command("reply")
def reply(
    alias_id: int = typer.Argument(..., help="Alias id."),
    contact_id: int = typer.Argument(..., help="Contact id."),
    alias_email: str | None = typer.Option(None, "--alias-email", help="Alias address shown as sender."),
    max_pages: int | None = typer.Option(None, "--max-pages", min=1),
) -> None:
    """Show how to write to a contact through its reverse alias."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)
    limit = max_pages or settings.contacts_max_pages

    sync = runtime.run_api_call(_load_contacts(settings, alias_id, limit))
    contact = _find(sync, contact_id)
    if contact is None:
        runtime.err_console.print(f"[red]Contact {contact_id} not found in alias {alias_id}.[/red]")
        raise typer.Exit(code=1)
    runtime.console.print(build_reverse_alias_panel(contact, alias_email=alias_email))


@app.command("refresh")
def refresh(
    alias_id: int = typer.Argument(..., help="Alias id."),
) -> None:
    """Fetch only the first page of contacts again."""

    settings = runtime.load_settings()
    runtime.require_api_key(settings)

    sync = runtime.run_api_call(_refresh_first_page(settings, alias_id))
    if sync.is_empty:
        runtime.console.print("[yellow]This alias has no contacts yet.[/yellow]")
        return
    runtime.console.print(build_contacts_table(sync.items, title=f"Contacts of alias {alias_id}"))
    runtime.console.print("[green]Up to date.[/green]")
