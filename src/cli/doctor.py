"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.table import Table

from adapters.http_client import build_async_client
from cli import runtime
from core.config import AppSettings, write_user_env_vars
from core.errors import ApiError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings, api_key="") as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


async def _check_api_key(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with runtime.build_api(settings) as api:
            options = await api.fetch_user_options()
        return True, f"{len(options.suffixes)} suffixes available"
    except ApiError as exc:
        return False, exc.message


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = runtime.load_settings()

    table = Table(title="alias-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base_url", "OK", settings.api_base_url)

    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    if settings.api_key:
        ok_key, detail_key = asyncio.run(_check_api_key(settings))
        table.add_row("API key", "OK" if ok_key else "FAIL", detail_key)
    else:
        table.add_row("API key", "MISSING", "Run `alias-client doctor set-api-key`")

    runtime.console.print(table)


@app.command(name="set-api-url")
def set_api_url(
    url: str = typer.Argument(..., help="Base URL, e.g. https://app.simplelogin.io or a self-hosted server."),
) -> None:
    """Point the client at another server (stored in the user config .env)."""

    url = url.strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise typer.BadParameter("URL must start with http:// or https://")

    env_path = write_user_env_vars({"ALIAS_CLIENT_API_BASE_URL": url})
    runtime.console.print(f"[green]Saved API URL to:[/green] {env_path}")


@app.command(name="set-api-key")
def set_api_key() -> None:
    """Interactive API key setup (stored in the user config .env)."""

    api_key = typer.prompt("API key", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("API key is required")

    env_path = write_user_env_vars({"ALIAS_CLIENT_API_KEY": api_key})
    runtime.console.print(f"[green]Saved API key to:[/green] {env_path}")
