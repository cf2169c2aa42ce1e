"""
Batch Processor: reconcilia una lista de ids en chunks secuenciales.

Reglas:
- Chunks de clamp(batch_size, 1, max_batch_size), nunca en paralelo.
- Tras cada intento (éxito o error) se consulta el presupuesto; si aborta y
  queda trabajo pendiente se agrega el marcador "run limit reached".
- Un error por entidad se stringifica en errors[] y se sigue con la próxima.
- Entre chunks se duerme inter_batch_delay_s (solo si queda trabajo).
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

from loguru import logger

from app.shared.constants.sync_constants import RUN_LIMIT_MARKER

from .reconciler import JudgeReconciler
from .run_budget import RunBudget, record_processed, should_abort
from .sync_config import SyncLimits
from .types import BatchStats


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class BatchProcessor:
    def __init__(
        self,
        *,
        reconciler: JudgeReconciler,
        limits: SyncLimits,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._reconciler = reconciler
        self._limits = limits
        self._sleep = sleep

    def process(
        self,
        external_ids: Sequence[str],
        budget: RunBudget,
        *,
        batch_size: Optional[int] = None,
    ) -> BatchStats:
        stats = BatchStats()
        if not external_ids:
            return stats

        size = self._limits.clamp_batch_size(batch_size)
        chunks = chunked(external_ids, size)
        total = len(external_ids)
        attempted = 0

        if should_abort(budget, self._limits):
            self._mark_limit(stats)
            return stats

        for index, chunk in enumerate(chunks, start=1):
            logger.debug(f"Procesando chunk {index}/{len(chunks)} ({len(chunk)} jueces)")

            for external_id in chunk:
                try:
                    outcome = self._reconciler.reconcile(external_id, budget)
                    record_processed(budget, self._limits)
                    stats.add_outcome(outcome)
                except Exception as e:
                    logger.error(f"Fallo al sincronizar juez {external_id}: {e}")
                    stats.errors.append(f"{external_id}: {e}")
                attempted += 1

                if should_abort(budget, self._limits):
                    if attempted < total:
                        self._mark_limit(stats)
                    return stats

            # Rate limiting entre chunks
            if index < len(chunks):
                self._sleep(self._limits.inter_batch_delay_s)

        return stats

    @staticmethod
    def _mark_limit(stats: BatchStats) -> None:
        logger.warning("Presupuesto de la corrida agotado; corte suave del batch")
        stats.limit_reached = True
        stats.errors.append(RUN_LIMIT_MARKER)
