"""
Casos de uso para sincronización de jueces (CourtListener -> Postgres).
"""
import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dto.sync_dto import (
    JudgeSyncRequestDTO,
    JudgeSyncResultDTO,
    SyncRunDTO,
    SyncStatusDTO,
)
from app.infrastructure.external.courtlistener_sync.sync_service import JudgeSyncService, build_from_env
from app.infrastructure.external.courtlistener_sync.types import SyncOptions
from app.infrastructure.repositories.sync_status_repository import SyncStatusRepository
from app.shared.constants.sync_constants import SyncType
from app.shared.exceptions.sync import SyncRunNotFoundException


class JudgeSyncUseCases:
    """
    Dispara corridas del motor de sync y expone su estado.

    El motor es síncrono (requests + psycopg): se ejecuta en un thread
    separado para no bloquear el event loop.
    """

    def __init__(self, service_factory: Callable[[], JudgeSyncService] = build_from_env):
        self._service_factory = service_factory

    async def run_judge_sync(self, request: JudgeSyncRequestDTO) -> JudgeSyncResultDTO:
        options = SyncOptions.from_dict(request.model_dump())
        logger.info(
            f"Iniciando sync de jueces desde API "
            f"(judge_ids={len(options.judge_ids)}, jurisdiction={options.jurisdiction})"
        )

        started = datetime.now(timezone.utc)
        service = self._service_factory()
        result = await asyncio.to_thread(service.sync, options)
        api_duration_ms = int((datetime.now(timezone.utc) - started).total_seconds() * 1000)

        return JudgeSyncResultDTO(
            success=result.success,
            processed=result.processed,
            updated=result.updated,
            created=result.created,
            enhanced=result.enhanced,
            errors=result.errors,
            duration_ms=result.duration_ms,
            api_duration_ms=api_duration_ms,
            timestamp=datetime.now(timezone.utc),
        )


class SyncStatusUseCases:
    """Consulta de corridas recientes y frescura de la tabla judges."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = SyncStatusRepository(db)

    async def get_status(self, limit: int = 20) -> SyncStatusDTO:
        now = datetime.now(timezone.utc)
        runs = await self.repository.get_recent_runs(limit=limit, sync_type=SyncType.JUDGE.value)
        last_sync = await self.repository.get_last_judge_update()
        total = await self.repository.count_judges()

        hours_since: Optional[float] = None
        if last_sync is not None:
            # SQLite (tests) devuelve datetimes naive
            if last_sync.tzinfo is None:
                last_sync = last_sync.replace(tzinfo=timezone.utc)
            hours_since = round((now - last_sync).total_seconds() / 3600, 2)

        return SyncStatusDTO(
            timestamp=now,
            judges_total=total,
            judges_last_sync=last_sync,
            hours_since_last_sync=hours_since,
            recent_runs=[SyncRunDTO.model_validate(r) for r in runs],
        )

    async def get_run(self, sync_id: str) -> SyncRunDTO:
        """
        Detalle de una corrida.

        Raises:
            SyncRunNotFoundException: si el sync_id no existe
        """
        run = await self.repository.get_by_sync_id(sync_id)
        if run is None:
            raise SyncRunNotFoundException(sync_id)
        return SyncRunDTO.model_validate(run)
