"""
Constantes del motor de sincronización.
Define estados de corrida, tipos de sync y marcadores compartidos.
"""
from enum import Enum


class SyncRunStatus(str, Enum):
    """Estados posibles de un SyncRun (started -> completed | failed)."""
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncType(str, Enum):
    """Tipos de corrida registrados en sync_logs."""
    JUDGE = "judge"


# Marcador de corte suave agregado a errors[] cuando se agota el presupuesto.
RUN_LIMIT_MARKER = "run limit reached"

# Orden del listado upstream: más recientemente modificados primero.
UPSTREAM_ORDERING = "-date_modified"
