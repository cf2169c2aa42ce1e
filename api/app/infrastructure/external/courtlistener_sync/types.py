"""
Tipos y utilidades puras para el motor de sync CourtListener -> Postgres.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Postgres puede devolver timestamptz en la zona de la sesión; normalizamos
    para comparar de forma consistente.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class ContinuationToken:
    """
    Cursor opaco de paginación upstream.

    El motor solo lo recibe y lo devuelve al cliente; nunca inspecciona `value`
    (en CourtListener es la URL `next`, pero eso es un detalle del transporte).
    """

    value: Any


@dataclass(frozen=True)
class ExternalRecord:
    """Juez tal como lo expone CourtListener (payload crudo + accesos tipados)."""

    external_id: str
    name: str
    positions: list[dict[str, Any]]
    educations: list[dict[str, Any]]
    raw: dict[str, Any]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ExternalRecord":
        raw_id = payload.get("id")
        if raw_id is None or raw_id == "":
            raise ValueError("CourtListener devolvió un juez sin 'id'")
        name = payload.get("name_full") or payload.get("name") or ""
        return cls(
            external_id=str(raw_id),
            name=str(name),
            positions=[p for p in (payload.get("positions") or []) if isinstance(p, dict)],
            educations=[e for e in (payload.get("educations") or []) if isinstance(e, dict)],
            raw=payload,
        )


@dataclass(frozen=True)
class UpstreamPage:
    """Una página del listado 'changed since'."""

    results: list[ExternalRecord]
    next: Optional[ContinuationToken] = None


@dataclass(frozen=True)
class LocalJudge:
    """Fila mínima de la tabla judges que necesita el motor."""

    id: Any
    name: str
    external_id: Optional[str]
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReconcileOutcome:
    updated: bool
    created: bool
    enhanced: bool


NOOP_OUTCOME = ReconcileOutcome(updated=False, created=False, enhanced=False)


@dataclass
class BatchStats:
    """Estadísticas agregadas de una pasada del Batch Processor."""

    processed: int = 0
    updated: int = 0
    created: int = 0
    enhanced: int = 0
    errors: list[str] = field(default_factory=list)
    limit_reached: bool = False

    def add_outcome(self, outcome: ReconcileOutcome) -> None:
        self.processed += 1
        if outcome.updated:
            self.updated += 1
        if outcome.created:
            self.created += 1
        if outcome.enhanced:
            self.enhanced += 1


@dataclass(frozen=True)
class SyncOptions:
    """
    Opciones de una invocación del orquestador.

    - judge_ids: si viene no vacío, solo se reconcilian esos ids (sync dirigido)
    - discover_cap: tope de ids nuevos a descubrir (mínimo efectivo 50)
    """

    batch_size: Optional[int] = None
    jurisdiction: Optional[str] = None
    force_refresh: bool = False
    judge_ids: tuple[str, ...] = ()
    discover_cap: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "SyncOptions":
        data = data or {}
        ids = data.get("judge_ids") or ()
        return cls(
            batch_size=data.get("batch_size"),
            jurisdiction=data.get("jurisdiction") or None,
            force_refresh=bool(data.get("force_refresh", False)),
            judge_ids=tuple(str(i) for i in ids),
            discover_cap=data.get("discover_cap"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["judge_ids"] = list(self.judge_ids)
        return data


@dataclass
class SyncResult:
    """Resultado agregado de una corrida completa."""

    processed: int = 0
    updated: int = 0
    created: int = 0
    enhanced: int = 0
    errors: list[str] = field(default_factory=list)
    duration_ms: int = 0
    success: bool = False

    def absorb(self, stats: BatchStats) -> None:
        self.processed += stats.processed
        self.updated += stats.updated
        self.created += stats.created
        self.enhanced += stats.enhanced
        self.errors.extend(stats.errors)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
