"""
Puertos (interfaces) del motor de sync.

Definen el contrato de los colaboradores externos para que el motor se pueda
ejecutar contra CourtListener/Postgres en producción y contra fakes en tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from .types import ContinuationToken, ExternalRecord, LocalJudge, UpstreamPage


class UpstreamJudgeClient(ABC):
    """Fuente autoritativa de jueces (paginada y con rate limit)."""

    @abstractmethod
    def list_changed(
        self,
        cursor: Optional[ContinuationToken] = None,
        *,
        ordering: str,
        filters: Optional[dict[str, Any]] = None,
    ) -> UpstreamPage:
        """
        Retorna una página del listado ordenado por `ordering`.

        Args:
            cursor: token de continuación de la página anterior (None = primera)
            ordering: orden upstream (p.ej. "-date_modified")
            filters: filtros adicionales del endpoint
        """

    @abstractmethod
    def get_by_id(self, external_id: str) -> Optional[ExternalRecord]:
        """Obtiene un juez por id externo. None si no existe upstream."""


class JudgeStore(ABC):
    """Tabla local de jueces."""

    @abstractmethod
    def find_by_external_id(self, external_id: str) -> Optional[LocalJudge]:
        pass

    @abstractmethod
    def select_stale(
        self,
        *,
        jurisdiction: Optional[str],
        updated_before: Optional[datetime],
        limit: int,
    ) -> list[LocalJudge]:
        """
        Jueces con id externo, filtrados opcionalmente por jurisdicción y por
        updated_at < updated_before (None = sin filtro de staleness).
        """

    @abstractmethod
    def list_known_external_ids(self, *, after: Optional[str], limit: int) -> list[str]:
        """
        Página de ids externos conocidos, ordenados ascendentemente (keyset).

        Args:
            after: último id de la página anterior (None = primera página)
            limit: tamaño de página
        """

    @abstractmethod
    def insert_judge(self, fields: dict[str, Any]) -> Optional[Any]:
        """
        Inserta un juez y retorna su id local.

        Retorna None si ya existía otro juez con el mismo id externo
        (conflicto de unicidad resuelto por el store).
        """

    @abstractmethod
    def update_judge(self, judge_id: Any, fields: dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        """Libera recursos (conexiones). Opcional."""


class SyncLogStore(ABC):
    """Tabla de auditoría sync_logs (append/update)."""

    @abstractmethod
    def insert_run(
        self,
        *,
        sync_id: str,
        sync_type: str,
        options: dict[str, Any],
        started_at: datetime,
    ) -> None:
        pass

    @abstractmethod
    def finish_run(
        self,
        *,
        sync_id: str,
        status: str,
        completed_at: datetime,
        duration_ms: int,
        result: Optional[dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        pass

    def close(self) -> None:
        """Libera recursos (conexiones). Opcional."""
