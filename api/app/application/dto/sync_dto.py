"""
DTOs relacionados con la sincronizacion de jueces.
Definen la estructura de datos para disparar un sync y consultar su estado.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field


class JudgeSyncRequestDTO(BaseModel):
    """DTO para disparar una sincronizacion de jueces."""
    
    batch_size: Optional[int] = Field(
        None,
        ge=1,
        description="Tamaño de batch solicitado (se acota a [1, SYNC_MAX_BATCH_SIZE])"
    )
    jurisdiction: Optional[str] = Field(
        None,
        max_length=20,
        description="Filtro de jurisdiccion (p.ej. 'CA', 'US')"
    )
    force_refresh: bool = Field(
        False,
        description="Si True, refresca jueces aunque no esten vencidos"
    )
    judge_ids: Optional[List[str]] = Field(
        None,
        description="Ids de CourtListener a sincronizar (sync dirigido)"
    )
    discover_cap: Optional[int] = Field(
        None,
        ge=1,
        description="Tope de jueces nuevos a descubrir (minimo efectivo 50)"
    )


class JudgeSyncResultDTO(BaseModel):
    """Resultado de una corrida de sync de jueces."""
    
    success: bool
    processed: int
    updated: int
    created: int
    enhanced: int
    errors: List[str] = Field(default_factory=list)
    duration_ms: int
    api_duration_ms: Optional[int] = None
    timestamp: datetime


class SyncRunDTO(BaseModel):
    """Fila de sync_logs expuesta por la API."""
    
    sync_id: str
    sync_type: str
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None
    error_message: Optional[str] = None
    result: Optional[Dict[str, Any]] = None

    class Config:
        """Configuración de Pydantic."""
        from_attributes = True


class SyncStatusDTO(BaseModel):
    """Estado agregado de la sincronizacion."""
    
    timestamp: datetime
    judges_total: int
    judges_last_sync: Optional[datetime] = None
    hours_since_last_sync: Optional[float] = None
    recent_runs: List[SyncRunDTO] = Field(default_factory=list)
