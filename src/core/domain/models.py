"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- El parseo de la respuesta HTTP es validación de esquema: un campo ausente o
  de otro tipo falla de inmediato en lugar de propagarse como `None`.
- Los modelos describen *qué* devuelve el servicio, no *cómo* se obtiene.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, StrictBool, StrictStr, model_validator
from pydantic.config import ConfigDict

_DOMAIN_RE = re.compile(r"(?<=@).*")


class Alias(BaseModel):
    """Dirección de reenvío creada por el usuario."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., description="Identificador del alias en el servidor.")
    email: str = Field(..., min_length=3, description="Dirección completa del alias.")
    enabled: bool = Field(default=True, description="Si el alias reenvía correo.")
    note: str | None = Field(default=None, description="Nota libre del usuario.")
    creation_timestamp: int | None = Field(
        default=None,
        description="Momento de creación (epoch, segundos).",
    )


class Contact(BaseModel):
    """Corresponsal externo de un alias (reverse alias).

    En el wire la dirección del contacto llega como `contact`; el modelo la
    expone como `email`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int = Field(..., description="Identificador del contacto.")
    email: str = Field(
        ...,
        alias="contact",
        min_length=1,
        description="Dirección real del corresponsal.",
    )
    reverse_alias: str = Field(
        ...,
        description="Dirección proxy para responder sin exponer la dirección real.",
    )
    reverse_alias_address: str | None = Field(
        default=None,
        description="Solo la parte de dirección del reverse alias (sin display name).",
    )
    creation_timestamp: int | None = None
    last_email_sent_timestamp: int | None = None
    block_forward: bool = False


class ContactPage(BaseModel):
    """Sobre de la respuesta de listado: `{"contacts": [...]}`."""

    model_config = ConfigDict(extra="ignore")

    contacts: list[Contact] = Field(default_factory=list)


class UserOptions(BaseModel):
    """Opciones de creación de alias del usuario.

    `domains` se calcula al construir el modelo a partir de `suffixes`: para
    cada sufijo, lo que sigue a la primera `@`. Los sufijos sin `@` no aportan
    dominio, así que siempre `len(domains) <= len(suffixes)`.
    """

    model_config = ConfigDict(extra="ignore")

    can_create: StrictBool
    prefix_suggestion: StrictStr
    suffixes: list[StrictStr]
    domains: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _derive_domains(self) -> "UserOptions":
        domains: list[str] = []
        for suffix in self.suffixes:
            match = _DOMAIN_RE.search(suffix)
            if match and match.group(0):
                domains.append(match.group(0))
        self.domains = domains
        return self
