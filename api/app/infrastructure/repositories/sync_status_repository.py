"""
Repositorio de lectura para el estado de sincronizacion.
Consulta sync_logs y la frescura de la tabla judges (SQLAlchemy async).
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.models import JudgeModel, SyncLogModel


class SyncStatusRepository:
    """Repositorio para consultar corridas de sync y frescura de datos."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_recent_runs(self, limit: int = 20, sync_type: Optional[str] = None) -> List[SyncLogModel]:
        """
        Obtiene las corridas mas recientes, ordenadas por inicio descendente.
        """
        query = select(SyncLogModel)
        if sync_type:
            query = query.where(SyncLogModel.sync_type == sync_type)
        query = query.order_by(SyncLogModel.started_at.desc()).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()
    
    async def get_by_sync_id(self, sync_id: str) -> Optional[SyncLogModel]:
        result = await self.db.execute(
            select(SyncLogModel).where(SyncLogModel.sync_id == sync_id)
        )
        return result.scalars().first()
    
    async def get_last_judge_update(self) -> Optional[datetime]:
        """Ultimo updated_at de un juez sincronizado desde CourtListener."""
        result = await self.db.execute(
            select(func.max(JudgeModel.updated_at)).where(JudgeModel.courtlistener_id.is_not(None))
        )
        return result.scalar_one_or_none()
    
    async def count_judges(self) -> int:
        result = await self.db.execute(select(func.count(JudgeModel.id)))
        return int(result.scalar_one() or 0)
