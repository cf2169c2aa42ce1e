"""
Excepciones del motor de sincronización de jueces.

Taxonomía:
- ExternalRecordNotFound: el id externo no existe en CourtListener (por entidad, no fatal)
- StoreError: lectura/escritura local rechazada (por entidad, no fatal salvo en setup)
- SetupError: no se pudo construir el cliente o el store (fatal para la corrida)
- UpstreamApiError: error HTTP no recuperable contra CourtListener
"""
from typing import Any, Optional

from app.shared.exceptions.base import AppException


class SyncException(AppException):
    """Excepción base para errores de sincronización."""
    
    def __init__(
        self,
        message: str,
        error_code: str = "SYNC_ERROR",
        status_code: int = 500,
        details: Optional[dict] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details
        )


class ExternalRecordNotFound(SyncException):
    """El registro no existe en la fuente externa."""
    
    def __init__(self, external_id: Any):
        super().__init__(
            message=f"Judge not found upstream: {external_id}",
            error_code="EXTERNAL_RECORD_NOT_FOUND",
            status_code=404,
            details={"external_id": str(external_id)}
        )
        self.external_id = str(external_id)


class StoreError(SyncException):
    """Error de lectura/escritura en el store local."""
    
    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else None
        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            details=details
        )
        self.operation = operation


class SetupError(SyncException):
    """No se pudieron construir los colaboradores de la corrida (credenciales, DSN, etc.)."""
    
    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="SYNC_SETUP_ERROR"
        )


class UpstreamApiError(SyncException):
    """Error de integración con CourtListener."""
    
    def __init__(self, message: str, http_status: Optional[int] = None):
        details = {"http_status": http_status} if http_status is not None else None
        super().__init__(
            message=message,
            error_code="UPSTREAM_API_ERROR",
            status_code=502,
            details=details
        )
        self.http_status = http_status


class SyncRunNotFoundException(SyncException):
    """No existe un SyncRun con ese sync_id."""
    
    def __init__(self, sync_id: str):
        super().__init__(
            message=f"Sync run no encontrado: {sync_id}",
            error_code="SYNC_RUN_NOT_FOUND",
            status_code=404,
            details={"sync_id": sync_id}
        )
