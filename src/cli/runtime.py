"""Piezas compartidas por los comandos de la CLI.

- Construcción del cliente de API (punto único que los tests sustituyen).
- Ejecución de corrutinas con traducción de `ApiError` a salida + exit code.
- Logging con `rich`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Coroutine, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.simplelogin_api import SimpleLoginApi
from core.config import AppSettings
from core.errors import ApiError, format_validation_error

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        handler = RichHandler(console=err_console, show_path=False, log_time_format="[%X]")
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)


def load_settings() -> AppSettings:
    return AppSettings()


def load_settings_or_exit() -> AppSettings:
    """Carga la configuración; un valor persistido inválido termina con exit code 2."""

    try:
        return load_settings()
    except ValidationError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {format_validation_error(exc)}")
        raise typer.Exit(code=2) from exc


def build_api(settings: AppSettings) -> SimpleLoginApi:
    return SimpleLoginApi(settings)


def require_api_key(settings: AppSettings) -> None:
    if not settings.api_key:
        err_console.print(
            "[red]No API key configured.[/red] Run `alias-client doctor set-api-key` "
            "or set ALIAS_CLIENT_API_KEY."
        )
        raise typer.Exit(code=2)


def run_api_call(coro: Coroutine[object, object, T]) -> T:
    """Ejecuta `coro` en un event loop nuevo; un `ApiError` termina con exit code 1."""

    try:
        return asyncio.run(coro)
    except ApiError as exc:
        err_console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc


def run_optional_api_call(coro: Coroutine[object, object, T], *, context: str) -> T | None:
    """Como `run_api_call`, pero un `ApiError` solo se avisa y devuelve `None`.

    Para pasos secundarios tras una operación que ya tuvo éxito en el servidor.
    """

    try:
        return asyncio.run(coro)
    except ApiError as exc:
        err_console.print(f"[yellow]Warning:[/yellow] {context}: {exc.message}")
        return None
