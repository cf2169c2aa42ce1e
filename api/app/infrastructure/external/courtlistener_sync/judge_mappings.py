"""
Mapeos CourtListener -> columnas de la tabla judges.

Este es el punto recomendado para tener “control total” sobre:
- qué columnas se derivan del payload
- cómo se elige la posición activa
- cómo se infiere la jurisdicción
- qué campos descriptivos agrega el enhancement

Funciones puras: no realizan I/O.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from .types import ExternalRecord, ensure_utc


def active_position(positions: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Posición activa: la primera sin fecha de término.
    Si todas están cerradas, la primera de la lista.
    """
    if not positions:
        return None
    for position in positions:
        if not position.get("date_termination"):
            return position
    return positions[0]


def _court(position: dict[str, Any]) -> dict[str, Any]:
    # En v4 `court` puede venir expandido (dict) o como URL; solo usamos el dict.
    court = position.get("court")
    return court if isinstance(court, dict) else {}


def court_display_name(position: dict[str, Any]) -> Optional[str]:
    court = _court(position)
    return court.get("full_name") or court.get("name") or None


def extract_jurisdiction(position: dict[str, Any]) -> str:
    """
    Código de región de la posición.

    Prioridad: `court.jurisdiction` explícito; si no, heurística por nombre
    de la corte; default "CA".
    """
    court = _court(position)
    if court.get("jurisdiction"):
        return str(court["jurisdiction"])

    court_name = court.get("full_name") or court.get("name") or ""
    if "California" in court_name or "CA " in court_name:
        return "CA"
    if "Federal" in court_name or "U.S." in court_name:
        return "US"
    return "CA"


def derive_assignment_fields(record: ExternalRecord, *, include_appointed: bool) -> dict[str, Any]:
    """
    Atributos relacionales derivados de la posición activa.

    `appointed_date` solo se siembra al crear (no se pisa en updates).
    """
    position = active_position(record.positions)
    if position is None:
        return {}

    fields: dict[str, Any] = {
        "court_name": court_display_name(position),
        "jurisdiction": extract_jurisdiction(position),
    }
    if include_appointed:
        fields["appointed_date"] = position.get("date_start")
    return fields


def build_update_fields(record: ExternalRecord, *, now: datetime) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "name": record.name,
        "courtlistener_data": record.raw,
        "updated_at": ensure_utc(now),
    }
    fields.update(derive_assignment_fields(record, include_appointed=False))
    return fields


def build_insert_fields(record: ExternalRecord, *, now: datetime) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "name": record.name,
        "courtlistener_id": record.external_id,
        "courtlistener_data": record.raw,
        "created_at": ensure_utc(now),
        "updated_at": ensure_utc(now),
    }
    fields.update(derive_assignment_fields(record, include_appointed=True))
    return fields


def build_profile_enhancement(record: ExternalRecord) -> dict[str, Any]:
    """
    Campos descriptivos secundarios (education, bio).

    Retorna dict vacío si el payload no trae nada que derivar.
    """
    enhancement: dict[str, Any] = {}

    if record.educations:
        enhancement["education"] = "; ".join(
            f"{(edu.get('school') or {}).get('name') or 'Unknown'} "
            f"({edu.get('degree') or 'Unknown degree'})"
            for edu in record.educations
        )

    if record.positions:
        enhancement["bio"] = "; ".join(
            f"{pos.get('position_type') or 'Judge'} at "
            f"{court_display_name(pos) or 'Unknown Court'}"
            for pos in record.positions
        )

    return enhancement
