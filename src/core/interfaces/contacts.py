"""Contrato del gateway de contactos.

Por qué Protocol:
- El sincronizador depende de esta forma, no de `SimpleLoginApi`; en tests se
  sustituye por un fake en memoria.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Contact


@runtime_checkable
class ContactsGateway(Protocol):
    """Operaciones remotas que necesita el sincronizador.

    Reglas de diseño:
    - Ambas son asíncronas porque hacen I/O (HTTP).
    - Los fallos se señalan lanzando `core.errors.ApiError`.
    """

    async def fetch_contacts(self, alias_id: int, page: int) -> list[Contact]:
        """Devuelve la página `page` (base 0) de contactos del alias."""

        ...

    async def delete_contact(self, contact_id: int) -> None:
        """Borra el contacto en el servidor."""

        ...
