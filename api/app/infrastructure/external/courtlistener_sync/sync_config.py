"""
Configuración del motor de sync (presupuesto y ritmo).

La idea es que aquí tengas control total de:
- límites duros por invocación (procesados / creados)
- tamaño de batch y techo
- ventana de staleness y tope de selección
- delays de rate-limit entre batches y entre páginas

Este módulo no realiza I/O: solo define configuración.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional


@dataclass(frozen=True)
class SyncLimits:
    """
    Límites de una invocación.

    NOTA sobre los defaults:
    - Están calibrados para terminar holgadamente dentro del timeout de una
      función serverless (~5 min) con el rate limit de CourtListener.
    """

    default_batch_size: int = 10
    max_batch_size: int = 25
    per_run_entity_limit: int = 250
    per_run_create_limit: int = 150
    staleness_window: timedelta = timedelta(days=7)
    staleness_limit: int = 100
    known_ids_page_size: int = 1000
    discover_min: int = 50
    inter_batch_delay_s: float = 2.0
    page_delay_s: float = 1.0

    def clamp_batch_size(self, requested: Optional[int]) -> int:
        """clamp(requested, 1, max_batch_size); None usa el default."""
        size = self.default_batch_size if requested is None else int(requested)
        return max(1, min(size, self.max_batch_size))

    @classmethod
    def from_settings(cls, settings: Any) -> "SyncLimits":
        return cls(
            default_batch_size=settings.SYNC_BATCH_SIZE,
            max_batch_size=settings.SYNC_MAX_BATCH_SIZE,
            per_run_entity_limit=settings.SYNC_PER_RUN_ENTITY_LIMIT,
            per_run_create_limit=settings.SYNC_PER_RUN_CREATE_LIMIT,
            staleness_window=timedelta(days=settings.SYNC_STALENESS_DAYS),
            staleness_limit=settings.SYNC_STALENESS_LIMIT,
            known_ids_page_size=settings.SYNC_KNOWN_IDS_PAGE_SIZE,
            discover_min=settings.SYNC_DISCOVER_MIN,
            inter_batch_delay_s=settings.SYNC_INTER_BATCH_DELAY_S,
            page_delay_s=settings.SYNC_PAGE_DELAY_S,
        )
