"""Exportación JSON de contactos.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (`jq`, scripts).
- Usa los nombres del wire (`contact`, `reverse_alias`) para que la salida
  sea re-importable con los mismos modelos.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from core.domain.models import Contact


def contacts_to_json(contacts: Iterable[Contact]) -> str:
    """Serializa contactos a JSON UTF-8 con formato estable."""

    payload = {"contacts": [c.model_dump(mode="json", by_alias=True) for c in contacts]}
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_contacts_json(*, contacts: Iterable[Contact], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(contacts_to_json(contacts), encoding="utf-8")
    return output_path
