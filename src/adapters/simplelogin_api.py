"""Adaptador REST para el servicio de alias (API compatible con SimpleLogin).

Responsabilidad:
- Una operación = un round trip HTTP con la cabecera `Authentication`.
- Clasificar el status HTTP en la taxonomía cerrada de `core.errors`.
- Validar el cuerpo de éxito contra los modelos del dominio.

No reintenta nada: cualquier error es terminal para la operación.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import Alias, Contact, ContactPage, UserOptions
from core.errors import (
    BadGatewayError,
    DuplicateResourceError,
    InternalServerError,
    InvalidApiKeyError,
    ParseError,
    SerializationError,
    TransportError,
    UnknownResponseStatusError,
    UnknownStatusCodeError,
    format_validation_error,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

USER_OPTIONS_PATH = "/api/v3/alias/options"
CUSTOM_ALIAS_PATH = "/api/alias/custom/new"


class _HasStatus(Protocol):
    status_code: int | None


def raise_for_api_status(
    response: _HasStatus,
    *,
    expected: int | None,
    conflict_is_duplicate: bool = False,
) -> None:
    """Traduce el status HTTP a la taxonomía de errores.

    `expected=None` acepta cualquier 2xx (borrados). El 409 solo significa
    "duplicado" en operaciones de creación; en el resto cae en
    `UnknownStatusCodeError`.
    """

    status = response.status_code
    if not status:
        raise UnknownResponseStatusError()

    if expected is None and 200 <= status < 300:
        return
    if status == expected:
        return

    if status == 401:
        raise InvalidApiKeyError()
    if status == 409 and conflict_is_duplicate:
        raise DuplicateResourceError()
    if status == 500:
        raise InternalServerError()
    if status == 502:
        raise BadGatewayError()
    raise UnknownStatusCodeError(status)


def _log_response_error(method: str, url: str, response: httpx.Response) -> None:
    """Log HTTP error without sensitive data."""

    body = (response.text or "")[:500]
    logger.warning("%s %s -> %s body=%s", method, url, response.status_code, body)


def _decode_json(response: httpx.Response, target: type[BaseModel]) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise SerializationError(target) from exc


def _parse(model: type[ModelT], data: Any) -> ModelT:
    if not isinstance(data, dict):
        raise SerializationError(model)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ParseError(model, format_validation_error(exc)) from exc


class SimpleLoginApi:
    """Cliente asíncrono de la API.

    Uso típico:

        async with SimpleLoginApi(settings) as api:
            options = await api.fetch_user_options()

    Si se pasa `client`, el llamador es dueño de su ciclo de vida.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(
            self._settings,
            api_key=api_key,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url).rstrip("/")

    async def __aenter__(self) -> "SimpleLoginApi":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        expected: int | None,
        conflict_is_duplicate: bool = False,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc.__class__.__name__)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if response.status_code != expected and not (expected is None and response.is_success):
            _log_response_error(method, path, response)
        raise_for_api_status(
            response,
            expected=expected,
            conflict_is_duplicate=conflict_is_duplicate,
        )
        return response

    async def fetch_user_options(self, hostname: str | None = None) -> UserOptions:
        """GET opciones de creación de alias (sufijos disponibles, prefijo sugerido)."""

        params = {"hostname": hostname} if hostname else None
        response = await self._send("GET", USER_OPTIONS_PATH, expected=200, params=params)
        return _parse(UserOptions, _decode_json(response, UserOptions))

    async def create_alias(self, prefix: str, suffix: str, note: str | None = None) -> Alias:
        """POST alias personalizado. 409 significa que el alias ya existe."""

        payload: dict[str, Any] = {"alias_prefix": prefix, "alias_suffix": suffix}
        if note is not None:
            payload["note"] = note
        response = await self._send(
            "POST",
            CUSTOM_ALIAS_PATH,
            expected=201,
            conflict_is_duplicate=True,
            json=payload,
        )
        return _parse(Alias, _decode_json(response, Alias))

    async def fetch_contacts(self, alias_id: int, page: int) -> list[Contact]:
        """GET una página (base 0) de contactos del alias."""

        response = await self._send(
            "GET",
            f"/api/aliases/{alias_id}/contacts",
            expected=200,
            params={"page_id": page},
        )
        data = _decode_json(response, ContactPage)
        if isinstance(data, list):
            data = {"contacts": data}
        return list(_parse(ContactPage, data).contacts)

    async def create_contact(self, alias_id: int, email: str) -> Contact:
        """POST un contacto nuevo para el alias. 409 significa que ya existe."""

        response = await self._send(
            "POST",
            f"/api/aliases/{alias_id}/contacts",
            expected=201,
            conflict_is_duplicate=True,
            json={"contact": email},
        )
        return _parse(Contact, _decode_json(response, Contact))

    async def delete_contact(self, contact_id: int) -> None:
        """DELETE un contacto; cualquier 2xx es éxito y el cuerpo se ignora."""

        await self._send("DELETE", f"/api/contacts/{contact_id}", expected=None)
