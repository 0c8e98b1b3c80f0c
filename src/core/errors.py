"""Taxonomía cerrada de errores de la API.

Cada error es terminal para la operación que lo produjo: nadie reintenta.
La capa de presentación solo necesita `ApiError.message`.
"""

from __future__ import annotations

from pydantic import ValidationError


class ApiError(Exception):
    """Base de todos los errores que devuelve el cliente de la API."""

    default_message = "Unexpected API error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidApiKeyError(ApiError):
    default_message = "Invalid API key."


class DuplicateResourceError(ApiError):
    default_message = "The resource already exists."


class InternalServerError(ApiError):
    default_message = "Internal server error."


class BadGatewayError(ApiError):
    default_message = "Bad gateway error."


class UnknownResponseStatusError(ApiError):
    default_message = "Unknown response status code."


class UnknownStatusCodeError(ApiError):
    """Status HTTP fuera de la tabla conocida."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Unknown error with status code {status_code}.")


class TransportError(ApiError):
    """Fallo de red/transporte; la excepción original queda en `__cause__`."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Network error: {detail}")


class ParseError(ApiError):
    """JSON válido pero que no encaja con el modelo esperado."""

    def __init__(self, target: type, detail: str | None = None) -> None:
        self.target = target
        message = f"Failed to parse {target.__name__}"
        super().__init__(f"{message}: {detail}" if detail else f"{message}.")


class SerializationError(ApiError):
    """El cuerpo no es JSON, o su forma de primer nivel es la equivocada."""

    def __init__(self, target: type) -> None:
        self.target = target
        super().__init__(f"Failed to serialize JSON for {target.__name__}.")


def format_validation_error(exc: ValidationError) -> str:
    """Render a concise pydantic validation error with dotted field paths."""

    details: list[str] = []
    for item in exc.errors():
        path = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        details.append(f"{path}: {item.get('msg', 'invalid value')}")
    return "; ".join(details)
