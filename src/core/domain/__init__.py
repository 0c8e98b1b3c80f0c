"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce HTTP ni CLI: solo alias, contactos y opciones.
"""

from core.domain.models import Alias, Contact, ContactPage, UserOptions

__all__ = ["Alias", "Contact", "ContactPage", "UserOptions"]
