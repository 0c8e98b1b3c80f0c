"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, timeouts y headers (incluida la API key) para todas
  las llamadas al servicio.
- Facilita testeo: se le puede pasar un `transport` (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

AUTH_HEADER = "Authentication"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    api_key: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando a `settings.api_base_url`.

    La API key explícita tiene prioridad sobre `settings.api_key`. Sin key no
    se envía la cabecera `Authentication` (útil para el chequeo de conectividad).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    key = api_key if api_key is not None else settings.api_key
    if key:
        headers[AUTH_HEADER] = key
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
