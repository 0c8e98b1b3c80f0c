"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Contact, UserOptions


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("alias-client", style="bold cyan")
    subtitle = Text("Alias • Contactos • Reverse aliases", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_timestamp(value: int | None) -> str:
    if value is None:
        return "-"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def build_contacts_table(contacts: Iterable[Contact], *, title: str = "Contacts") -> Table:
    """Tabla Rich con un contacto por fila, en el orden recibido."""

    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Contact", style="white")
    table.add_column("Reverse alias", style="magenta")
    table.add_column("Created", style="dim")
    table.add_column("Last email sent", style="dim")
    table.add_column("Blocked", style="red")
    for contact in contacts:
        table.add_row(
            str(contact.id),
            contact.email,
            contact.reverse_alias_address or contact.reverse_alias,
            format_timestamp(contact.creation_timestamp),
            format_timestamp(contact.last_email_sent_timestamp),
            "yes" if contact.block_forward else "",
        )
    return table


def build_options_panel(options: UserOptions) -> Panel:
    """Panel para `UserOptions` (sufijos y dominios derivados)."""

    body = Text()
    body.append("Can create: ", style="bold")
    body.append("yes\n" if options.can_create else "no\n", style="green" if options.can_create else "red")
    body.append("Prefix suggestion: ", style="bold")
    body.append(f"{options.prefix_suggestion or '-'}\n")
    if options.suffixes:
        body.append("\nSuffixes:\n", style="bold")
        for suffix in options.suffixes:
            body.append(f"- {suffix}\n")
    if options.domains:
        body.append("\nDomains:\n", style="bold")
        for domain in options.domains:
            body.append(f"- {domain}\n")
    return Panel(body, title=Text("Alias options", style="bold yellow"), border_style="yellow")


def build_reverse_alias_panel(contact: Contact, *, alias_email: str | None = None) -> Panel:
    """Instrucciones para escribir a un contacto sin exponer la dirección real."""

    body = Text()
    sender = alias_email or "your alias"
    body.append(f"To send an email from {sender} to {contact.email},\n")
    body.append("send it to this reverse alias instead:\n\n")
    body.append(contact.reverse_alias, style="bold magenta")
    return Panel(body, title=Text("Reply through reverse alias", style="bold cyan"), border_style="cyan")
