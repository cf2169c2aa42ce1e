"""
Configuración de fixtures para pytest.

Incluye fakes en memoria de los puertos del motor de sync (CourtListener,
tabla judges y tabla sync_logs) para testear sin red ni Postgres.
"""
import os

# Debe definirse antes de importar app.*: el engine async se crea al importar.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.infrastructure.database.session import Base
from app.infrastructure.external.courtlistener_sync.ports import (
    JudgeStore,
    SyncLogStore,
    UpstreamJudgeClient,
)
from app.infrastructure.external.courtlistener_sync.sync_config import SyncLimits
from app.infrastructure.external.courtlistener_sync.types import (
    ContinuationToken,
    ExternalRecord,
    LocalJudge,
    UpstreamPage,
)
from app.shared.exceptions.sync import StoreError


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


def make_person(
    person_id: Any,
    name: str = "Jane Doe",
    *,
    court: Optional[dict] = None,
    date_start: str = "2015-01-05",
    date_termination: Optional[str] = None,
    positions: Optional[list] = None,
    educations: Optional[list] = None,
) -> dict:
    """Payload mínimo de /people/{id}/ con una posición."""
    if positions is None:
        positions = [
            {
                "position_type": "Judge",
                "date_start": date_start,
                "date_termination": date_termination,
                "court": court or {"full_name": "Superior Court of California, County of Orange", "jurisdiction": "CA"},
            }
        ]
    return {
        "id": person_id,
        "name_full": name,
        "positions": positions,
        "educations": educations or [],
    }


class FakeUpstream(UpstreamJudgeClient):
    """CourtListener en memoria: detalle por id y listado paginado."""

    def __init__(self, people: Optional[dict] = None, pages: Optional[list] = None) -> None:
        self.people: dict[str, dict] = {str(k): v for k, v in (people or {}).items()}
        self.pages: list[list[dict]] = pages or []
        self.get_calls: list[str] = []
        self.list_calls: list[Any] = []

    def list_changed(self, cursor=None, *, ordering, filters=None) -> UpstreamPage:
        index = 0 if cursor is None else int(cursor.value)
        self.list_calls.append({"index": index, "ordering": ordering, "filters": filters})
        if index >= len(self.pages):
            return UpstreamPage(results=[], next=None)
        results = [ExternalRecord.from_payload(p) for p in self.pages[index]]
        has_next = index + 1 < len(self.pages)
        return UpstreamPage(results=results, next=ContinuationToken(index + 1) if has_next else None)

    def get_by_id(self, external_id: str) -> Optional[ExternalRecord]:
        self.get_calls.append(str(external_id))
        payload = self.people.get(str(external_id))
        return ExternalRecord.from_payload(payload) if payload else None


class FakeJudgeStore(JudgeStore):
    """Tabla judges en memoria con unicidad sobre courtlistener_id."""

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self._next_id = 1
        self.fail_updates_with: set[str] = set()
        self.fail_find_for: set[str] = set()
        self.known_id_page_calls = 0
        self.closed = False

    def seed(self, external_id: Optional[str], *, updated_at: datetime, jurisdiction: str = "CA", name: str = "Seed") -> int:
        judge_id = self._next_id
        self._next_id += 1
        self.rows[judge_id] = {
            "id": judge_id,
            "name": name,
            "courtlistener_id": external_id,
            "jurisdiction": jurisdiction,
            "updated_at": updated_at,
        }
        return judge_id

    def by_external_id(self, external_id: str) -> Optional[dict]:
        for row in self.rows.values():
            if row.get("courtlistener_id") == external_id:
                return row
        return None

    def find_by_external_id(self, external_id: str) -> Optional[LocalJudge]:
        if external_id in self.fail_find_for:
            raise StoreError("lectura rechazada", operation="find_by_external_id")
        row = self.by_external_id(external_id)
        if row is None:
            return None
        return LocalJudge(id=row["id"], name=row["name"], external_id=row["courtlistener_id"], updated_at=row.get("updated_at"))

    def select_stale(self, *, jurisdiction, updated_before, limit) -> list[LocalJudge]:
        rows = [r for r in self.rows.values() if r.get("courtlistener_id")]
        if jurisdiction:
            rows = [r for r in rows if r.get("jurisdiction") == jurisdiction]
        if updated_before is not None:
            rows = [r for r in rows if r["updated_at"] < updated_before]
        rows.sort(key=lambda r: r["updated_at"])
        return [
            LocalJudge(id=r["id"], name=r["name"], external_id=r["courtlistener_id"], updated_at=r["updated_at"])
            for r in rows[:limit]
        ]

    def list_known_external_ids(self, *, after, limit) -> list[str]:
        self.known_id_page_calls += 1
        ids = sorted(str(r["courtlistener_id"]) for r in self.rows.values() if r.get("courtlistener_id"))
        if after is not None:
            ids = [i for i in ids if i > after]
        return ids[:limit]

    def insert_judge(self, fields: dict) -> Optional[int]:
        if self.by_external_id(fields["courtlistener_id"]) is not None:
            return None
        judge_id = self._next_id
        self._next_id += 1
        self.rows[judge_id] = {"id": judge_id, **fields}
        return judge_id

    def update_judge(self, judge_id, fields: dict) -> None:
        if judge_id not in self.rows:
            raise StoreError(f"Juez {judge_id} no existe para update", operation="update_judge")
        if self.fail_updates_with & set(fields.keys()):
            raise StoreError("escritura rechazada", operation="update_judge")
        self.rows[judge_id].update(fields)

    def close(self) -> None:
        self.closed = True


class FakeSyncLogStore(SyncLogStore):
    def __init__(self, fail: bool = False) -> None:
        self.rows: dict[str, dict] = {}
        self.fail = fail
        self.close_calls = 0

    def insert_run(self, *, sync_id, sync_type, options, started_at) -> None:
        if self.fail:
            raise StoreError("sync_logs no disponible", operation="insert_run")
        self.rows[sync_id] = {
            "sync_id": sync_id,
            "sync_type": sync_type,
            "status": "started",
            "options": options,
            "started_at": started_at,
        }

    def finish_run(self, *, sync_id, status, completed_at, duration_ms, result=None, error_message=None) -> None:
        if self.fail:
            raise StoreError("sync_logs no disponible", operation="finish_run")
        row = self.rows[sync_id]
        if row["status"] != "started":
            return
        row.update(
            status=status,
            completed_at=completed_at,
            duration_ms=duration_ms,
            result=result,
            error_message=error_message,
        )

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def limits() -> SyncLimits:
    """Límites por defecto sin delays."""
    return SyncLimits(inter_batch_delay_s=0.0, page_delay_s=0.0)


@pytest.fixture
def judge_store() -> FakeJudgeStore:
    return FakeJudgeStore()


@pytest.fixture
def sync_log_store() -> FakeSyncLogStore:
    return FakeSyncLogStore()


@pytest.fixture
def upstream_factory():
    """Construye un FakeUpstream a partir de personas y páginas."""
    return FakeUpstream


@pytest.fixture
def person():
    return make_person


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def days_ago(fixed_now):
    return lambda n: fixed_now - timedelta(days=n)


@pytest.fixture
def sleeps() -> list:
    """Registro de llamadas a sleep (en lugar de dormir de verdad)."""
    return []


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    # Crear engine de prueba
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    # Crear tablas
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Crear session factory
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    # Proporcionar sesión
    async with async_session() as session:
        yield session

    # Limpiar
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
