"""
Discovery Cursor Walker: encuentra jueces upstream que aún no existen localmente.

Algoritmo:
1. Carga el set completo de ids externos conocidos (paginado, keyset). Debe
   terminar ANTES de comparar con upstream para no clasificar como "nuevo"
   algo que simplemente estaba en una página local no leída.
2. Recorre /people/ ordenado por más recientemente modificado, siguiendo el
   token de continuación; agrega los ids no conocidos (deduplicados, en orden).
3. Corta al llegar al cap, cuando no hay continuación o si el presupuesto aborta.

La salida se trunca a min(cap, creaciones restantes) para que la pasada de
creación posterior nunca supere per_run_create_limit.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from loguru import logger

from app.shared.constants.sync_constants import UPSTREAM_ORDERING

from .ports import JudgeStore, UpstreamJudgeClient
from .run_budget import RunBudget, remaining_creations, remaining_entities, should_abort
from .sync_config import SyncLimits
from .types import ContinuationToken


class DiscoveryWalker:
    def __init__(
        self,
        *,
        upstream: UpstreamJudgeClient,
        store: JudgeStore,
        limits: SyncLimits,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._upstream = upstream
        self._store = store
        self._limits = limits
        self._sleep = sleep

    def effective_cap(self, budget: RunBudget, requested_cap: Optional[int]) -> int:
        """max(discover_min, requested_cap o presupuesto restante de entidades)."""
        base = requested_cap if requested_cap else remaining_entities(budget, self._limits)
        return max(self._limits.discover_min, int(base))

    def load_known_ids(self) -> set[str]:
        known: set[str] = set()
        after: Optional[str] = None
        page_size = self._limits.known_ids_page_size

        while True:
            page = self._store.list_known_external_ids(after=after, limit=page_size)
            known.update(str(i) for i in page)
            if len(page) < page_size:
                break
            after = str(page[-1])

        logger.debug(f"Ids externos conocidos cargados: {len(known)}")
        return known

    def discover(
        self,
        budget: RunBudget,
        *,
        discover_cap: Optional[int] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[str]:
        cap = self.effective_cap(budget, discover_cap)
        known = self.load_known_ids()

        found: list[str] = []
        seen: set[str] = set()
        cursor: Optional[ContinuationToken] = None
        pages = 0

        while len(found) < cap and not should_abort(budget, self._limits):
            if pages > 0:
                self._sleep(self._limits.page_delay_s)

            page = self._upstream.list_changed(cursor, ordering=UPSTREAM_ORDERING, filters=filters)
            pages += 1

            for record in page.results:
                external_id = record.external_id
                if external_id in known or external_id in seen:
                    continue
                seen.add(external_id)
                found.append(external_id)
                if len(found) >= cap:
                    break

            if page.next is None:
                break
            cursor = page.next

        limit = min(cap, remaining_creations(budget, self._limits))
        logger.info(
            f"Discovery: {len(found)} ids nuevos en {pages} página(s); se entregan {min(len(found), limit)}"
        )
        return found[:limit]
