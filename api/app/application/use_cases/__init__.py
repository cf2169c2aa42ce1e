"""
Casos de uso de la aplicacion.
"""
from .sync_use_cases import JudgeSyncUseCases, SyncStatusUseCases

__all__ = ["JudgeSyncUseCases", "SyncStatusUseCases"]
