"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import (
    JudgeSyncRequestDTO,
    JudgeSyncResultDTO,
    SyncRunDTO,
    SyncStatusDTO,
)

__all__ = [
    "JudgeSyncRequestDTO",
    "JudgeSyncResultDTO",
    "SyncRunDTO",
    "SyncStatusDTO",
]
