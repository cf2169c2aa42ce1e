"""
Staleness Selector: jueces locales elegibles para refresco.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from .ports import JudgeStore
from .sync_config import SyncLimits
from .types import LocalJudge, utc_now


class StalenessSelector:
    def __init__(
        self,
        *,
        store: JudgeStore,
        limits: SyncLimits,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._limits = limits
        self._clock = clock

    def select(self, *, jurisdiction: Optional[str] = None, force_refresh: bool = False) -> list[LocalJudge]:
        """
        Jueces con id externo, filtrados por jurisdicción y, salvo force_refresh,
        con updated_at anterior a now - staleness_window. Tope: staleness_limit.
        """
        updated_before = None if force_refresh else self._clock() - self._limits.staleness_window
        judges = self._store.select_stale(
            jurisdiction=jurisdiction,
            updated_before=updated_before,
            limit=self._limits.staleness_limit,
        )
        logger.info(f"Jueces a refrescar: {len(judges)} (force_refresh={force_refresh})")
        return judges
