"""
Audit Logger de corridas (tabla sync_logs) como puerto de observabilidad.

Toda llamada captura y descarta (logueando) sus propios fallos: la auditoría
nunca se convierte en un nuevo modo de falla de la corrida.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from loguru import logger

from app.shared.constants.sync_constants import SyncRunStatus

from .ports import SyncLogStore
from .types import SyncResult, utc_now


@dataclass(frozen=True)
class SyncRunEvent:
    sync_id: str
    status: SyncRunStatus
    at: datetime
    sync_type: Optional[str] = None
    options: dict[str, Any] = field(default_factory=dict)
    duration_ms: int = 0
    result: Optional[dict[str, Any]] = None
    error_message: Optional[str] = None


class SyncRunRecorder:
    """
    Registra start/complete/fail de un SyncRun.

    El store se construye perezosamente en el primer evento para que un error
    de conexión también quede absorbido aquí.
    """

    def __init__(
        self,
        store_factory: Callable[[], SyncLogStore],
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store_factory = store_factory
        self._store: Optional[SyncLogStore] = None
        self._clock = clock

    def start(self, sync_id: str, sync_type: str, options: dict[str, Any]) -> None:
        self.record(
            SyncRunEvent(
                sync_id=sync_id,
                status=SyncRunStatus.STARTED,
                at=self._clock(),
                sync_type=sync_type,
                options=options,
            )
        )

    def complete(self, sync_id: str, result: SyncResult) -> None:
        self.record(
            SyncRunEvent(
                sync_id=sync_id,
                status=SyncRunStatus.COMPLETED,
                at=self._clock(),
                duration_ms=result.duration_ms,
                result=result.to_dict(),
            )
        )

    def fail(self, sync_id: str, error: BaseException, duration_ms: int) -> None:
        self.record(
            SyncRunEvent(
                sync_id=sync_id,
                status=SyncRunStatus.FAILED,
                at=self._clock(),
                duration_ms=duration_ms,
                error_message=str(error)[:2000],
            )
        )

    def record(self, event: SyncRunEvent) -> None:
        try:
            store = self._get_store()
            if event.status == SyncRunStatus.STARTED:
                store.insert_run(
                    sync_id=event.sync_id,
                    sync_type=event.sync_type or "",
                    options=event.options,
                    started_at=event.at,
                )
            else:
                store.finish_run(
                    sync_id=event.sync_id,
                    status=event.status.value,
                    completed_at=event.at,
                    duration_ms=event.duration_ms,
                    result=event.result,
                    error_message=event.error_message,
                )
        except Exception as e:
            logger.warning(f"No se pudo registrar sync_log {event.sync_id} ({event.status.value}): {e}")

    def close(self) -> None:
        """Cierra el store si llegó a construirse; nunca lanza."""
        store, self._store = self._store, None
        if store is None:
            return
        try:
            store.close()
        except Exception as e:
            logger.warning(f"No se pudo cerrar el store de sync_logs: {e}")

    def _get_store(self) -> SyncLogStore:
        if self._store is None:
            self._store = self._store_factory()
        return self._store
