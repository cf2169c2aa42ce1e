"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.use_cases.sync_use_cases import JudgeSyncUseCases, SyncStatusUseCases
from app.infrastructure.database.session import get_db


def get_judge_sync_use_cases() -> JudgeSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sync de jueces.
    
    Returns:
        JudgeSyncUseCases: Instancia que construye el motor desde settings
    """
    return JudgeSyncUseCases()


def get_sync_status_use_cases(
    db: AsyncSession = Depends(get_db)
) -> SyncStatusUseCases:
    """
    Dependencia para obtener los casos de uso de estado de sync.
    
    Args:
        db: Sesión de base de datos
        
    Returns:
        SyncStatusUseCases: Instancia de casos de uso de estado
    """
    return SyncStatusUseCases(db)
