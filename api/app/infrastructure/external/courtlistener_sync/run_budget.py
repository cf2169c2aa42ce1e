"""
Run Governor: presupuesto en memoria de una invocación.

El estado (RunBudget) es un valor explícito que se pasa por referencia; las
decisiones se toman con funciones puras sobre (budget, limits). Nunca se persiste.

Invariantes:
- processed_count <= per_run_entity_limit
- created_count <= per_run_create_limit
"""

from __future__ import annotations

from dataclasses import dataclass

from .sync_config import SyncLimits


@dataclass
class RunBudget:
    processed_count: int = 0
    created_count: int = 0


def should_abort(budget: RunBudget, limits: SyncLimits) -> bool:
    return (
        budget.processed_count >= limits.per_run_entity_limit
        or budget.created_count >= limits.per_run_create_limit
    )


def remaining_entities(budget: RunBudget, limits: SyncLimits) -> int:
    return max(0, limits.per_run_entity_limit - budget.processed_count)


def remaining_creations(budget: RunBudget, limits: SyncLimits) -> int:
    return max(0, limits.per_run_create_limit - budget.created_count)


def would_exceed_creations(budget: RunBudget, limits: SyncLimits, count: int = 1) -> bool:
    return budget.created_count + count > limits.per_run_create_limit


def record_processed(budget: RunBudget, limits: SyncLimits) -> None:
    # El batch processor consulta should_abort antes de cada entidad,
    # por lo que aquí nunca se debería superar el límite.
    if budget.processed_count >= limits.per_run_entity_limit:
        raise RuntimeError("processed_count excedería per_run_entity_limit")
    budget.processed_count += 1


def record_created(budget: RunBudget, limits: SyncLimits) -> None:
    if would_exceed_creations(budget, limits):
        raise RuntimeError("created_count excedería per_run_create_limit")
    budget.created_count += 1
