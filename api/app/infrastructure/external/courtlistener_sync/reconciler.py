"""
Entity Reconciler: fetch-by-id -> find-or-create -> enhance, para un juez.

Efectos por llamada: a lo sumo una escritura de fila (update o insert) más
una escritura de enhancement. No hay transacción que abarque ambas: un corte
entre medio deja el juez actualizado pero sin enhancement, que se reintenta en
el próximo refresh programado.
"""

from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from app.shared.exceptions.sync import ExternalRecordNotFound

from .judge_mappings import build_insert_fields, build_profile_enhancement, build_update_fields
from .ports import JudgeStore, UpstreamJudgeClient
from .run_budget import RunBudget, record_created, would_exceed_creations
from .sync_config import SyncLimits
from .types import NOOP_OUTCOME, ExternalRecord, ReconcileOutcome, utc_now


class JudgeReconciler:
    def __init__(
        self,
        *,
        upstream: UpstreamJudgeClient,
        store: JudgeStore,
        limits: SyncLimits,
        clock: Callable[[], Any] = utc_now,
    ) -> None:
        self._upstream = upstream
        self._store = store
        self._limits = limits
        self._clock = clock

    def reconcile(self, external_id: str, budget: RunBudget) -> ReconcileOutcome:
        """
        Sincroniza un juez desde CourtListener.

        Raises:
            ExternalRecordNotFound: el id no existe upstream (lo captura el batch).
            StoreError / UpstreamApiError: fallos de I/O (idem).
        """
        record = self._upstream.get_by_id(external_id)
        if record is None:
            raise ExternalRecordNotFound(external_id)

        existing = self._store.find_by_external_id(record.external_id)
        if existing is not None:
            return self._update_existing(existing.id, record)

        if would_exceed_creations(budget, self._limits):
            logger.debug(f"Presupuesto de creación agotado; se omite {record.external_id}")
            return NOOP_OUTCOME

        judge_id = self._store.insert_judge(build_insert_fields(record, now=self._clock()))
        if judge_id is None:
            # Otra invocación lo creó entre el find y el insert: se trata como update.
            logger.info(f"Juez {record.external_id} creado concurrentemente; se actualiza")
            concurrent = self._store.find_by_external_id(record.external_id)
            if concurrent is None:
                return NOOP_OUTCOME
            return self._update_existing(concurrent.id, record)

        record_created(budget, self._limits)
        enhanced = self._enhance(judge_id, record)
        logger.info(f"Juez creado: {record.name} ({record.external_id})")
        return ReconcileOutcome(updated=False, created=True, enhanced=enhanced)

    def _update_existing(self, judge_id: Any, record: ExternalRecord) -> ReconcileOutcome:
        self._store.update_judge(judge_id, build_update_fields(record, now=self._clock()))
        enhanced = self._enhance(judge_id, record)
        return ReconcileOutcome(updated=True, created=False, enhanced=enhanced)

    def _enhance(self, judge_id: Any, record: ExternalRecord) -> bool:
        """Enhancement best-effort: un fallo se loguea y retorna False."""
        try:
            enhancement = build_profile_enhancement(record)
            if not enhancement:
                return False
            self._store.update_judge(judge_id, enhancement)
            return True
        except Exception as e:
            logger.warning(f"No se pudo enriquecer el perfil del juez {judge_id}: {e}")
            return False
