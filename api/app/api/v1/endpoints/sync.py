"""
Endpoints para sincronizacion de jueces con CourtListener.
Permite disparar el motor de sync (cron / admin) y consultar su estado.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.v1.dependencies.use_case_deps import get_judge_sync_use_cases, get_sync_status_use_cases
from app.application.dto.sync_dto import JudgeSyncRequestDTO, JudgeSyncResultDTO, SyncRunDTO, SyncStatusDTO
from app.application.use_cases.sync_use_cases import JudgeSyncUseCases, SyncStatusUseCases
from app.core.config import settings
from app.shared.exceptions.auth import UnauthorizedException


router = APIRouter(prefix="/sync", tags=["Sync"])


def require_sync_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """
    Valida el header x-api-key contra SYNC_API_KEY.
    Sin SYNC_API_KEY configurada solo se permite el acceso en development.
    """
    if not settings.SYNC_API_KEY:
        if settings.is_development:
            return
        logger.warning("SYNC_API_KEY no configurada; endpoint de sync rechazado")
        raise UnauthorizedException()

    if x_api_key != settings.SYNC_API_KEY:
        logger.warning("Llamada a endpoint de sync sin API key valida")
        raise UnauthorizedException()


@router.post(
    "/judges",
    response_model=JudgeSyncResultDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar jueces desde CourtListener",
    dependencies=[Depends(require_sync_api_key)],
)
async def sync_judges(
    request: JudgeSyncRequestDTO,
    use_cases: JudgeSyncUseCases = Depends(get_judge_sync_use_cases),
):
    """
    Ejecuta una corrida del motor de sync de jueces.

    - Si judge_ids viene informado: sync dirigido de esos jueces
    - Si no: refresco de jueces vencidos + descubrimiento de nuevos

    Returns:
        200 si la corrida no tuvo errores, 207 si fue parcial
    """
    result = await use_cases.run_judge_sync(request)

    logger.info(
        f"Sync de jueces via API: processed={result.processed}, "
        f"created={result.created}, errors={len(result.errors)}"
    )

    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else status.HTTP_207_MULTI_STATUS,
        content=result.model_dump(mode="json"),
    )


@router.get(
    "/status",
    response_model=SyncStatusDTO,
    summary="Estado de la sincronizacion de jueces",
    dependencies=[Depends(require_sync_api_key)],
)
async def sync_status(
    limit: int = Query(default=20, ge=1, le=100, description="Cantidad de corridas recientes"),
    use_cases: SyncStatusUseCases = Depends(get_sync_status_use_cases),
) -> SyncStatusDTO:
    """Retorna las corridas recientes y la frescura de la tabla judges."""
    return await use_cases.get_status(limit=limit)


@router.get(
    "/status/{sync_id}",
    response_model=SyncRunDTO,
    summary="Detalle de una corrida de sync",
    dependencies=[Depends(require_sync_api_key)],
)
async def sync_run_detail(
    sync_id: str,
    use_cases: SyncStatusUseCases = Depends(get_sync_status_use_cases),
) -> SyncRunDTO:
    """Retorna una fila de sync_logs por sync_id (404 si no existe)."""
    return await use_cases.get_run(sync_id)
