"""
Repositorios Postgres (psycopg) para el motor de sync:
- tabla judges (lecturas por id externo / staleness / keyset de ids, insert, update)
- tabla sync_logs (auditoría de corridas)

Se usa psycopg (v3) en autocommit: cada operación es atómica por fila y no
hay transacciones multi-fila (un batch puede quedar parcialmente aplicado, lo
cual es aceptable porque cada reconciliación es idempotente).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.shared.exceptions.sync import StoreError

from .ports import JudgeStore, SyncLogStore
from .types import LocalJudge, ensure_utc

JUDGE_COLUMNS = (
    "name",
    "courtlistener_id",
    "courtlistener_data",
    "court_name",
    "jurisdiction",
    "appointed_date",
    "education",
    "bio",
    "created_at",
    "updated_at",
)

_JSON_COLUMNS = {"courtlistener_data"}


def _adapt(column: str, value: Any) -> Any:
    if column in _JSON_COLUMNS and value is not None:
        return Jsonb(value)
    if isinstance(value, datetime):
        return ensure_utc(value)
    return value


def _check_columns(fields: dict[str, Any]) -> list[str]:
    columns = list(fields.keys())
    unknown = [c for c in columns if c not in JUDGE_COLUMNS]
    if unknown:
        raise ValueError(f"Columnas desconocidas para judges: {unknown}")
    if not columns:
        raise ValueError("No hay columnas para escribir en judges")
    return columns


def build_insert_sql(columns: list[str]) -> str:
    """
    INSERT con ON CONFLICT sobre courtlistener_id (UNIQUE).

    Si otra invocación ya creó el juez, no se inserta nada y RETURNING no
    devuelve fila: el caller lo trata como "ya existía".
    """
    cols_sql = ", ".join(f'"{c}"' for c in columns)
    placeholders = ", ".join(["%s"] * len(columns))
    return (
        f'INSERT INTO "judges" ({cols_sql}) VALUES ({placeholders}) '
        f'ON CONFLICT ("courtlistener_id") DO NOTHING '
        f'RETURNING "id"'
    )


def build_update_sql(columns: list[str]) -> str:
    set_sql = ", ".join(f'"{c}" = %s' for c in columns)
    return f'UPDATE "judges" SET {set_sql} WHERE "id" = %s'


def _row_to_judge(row: dict[str, Any]) -> LocalJudge:
    updated_at = row.get("updated_at")
    return LocalJudge(
        id=row["id"],
        name=row.get("name") or "",
        external_id=row.get("courtlistener_id"),
        updated_at=ensure_utc(updated_at) if updated_at else None,
    )


class _PostgresBase:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._conn: Optional[psycopg.Connection] = None

    def connect(self) -> psycopg.Connection:
        """
        Abre (o reutiliza) una conexión en autocommit.
        """
        if self._conn is not None and not self._conn.closed:
            return self._conn
        try:
            self._conn = psycopg.connect(self._dsn, row_factory=dict_row, autocommit=True)
        except psycopg.OperationalError as e:
            raise StoreError(
                f"{e}\n"
                f"Sugerencia: verifica que DATABASE_URL sea accesible desde donde se ejecuta el sync.",
                operation="connect",
            ) from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None and not self._conn.closed:
            self._conn.close()
        self._conn = None

    def _execute(self, operation: str, sql: str, params: tuple = ()) -> psycopg.Cursor:
        conn = self.connect()
        try:
            cur = conn.cursor()
            cur.execute(sql, params)
            return cur
        except psycopg.Error as e:
            raise StoreError(f"Operación '{operation}' rechazada por Postgres: {e}", operation=operation) from e


class PostgresJudgeRepository(_PostgresBase, JudgeStore):
    def find_by_external_id(self, external_id: str) -> Optional[LocalJudge]:
        cur = self._execute(
            "find_by_external_id",
            """
            SELECT id, name, courtlistener_id, updated_at
            FROM judges
            WHERE courtlistener_id = %s
            LIMIT 1
            """,
            (external_id,),
        )
        row = cur.fetchone()
        return _row_to_judge(row) if row else None

    def select_stale(
        self,
        *,
        jurisdiction: Optional[str],
        updated_before: Optional[datetime],
        limit: int,
    ) -> list[LocalJudge]:
        clauses = ["courtlistener_id IS NOT NULL"]
        params: list[Any] = []
        if jurisdiction:
            clauses.append("jurisdiction = %s")
            params.append(jurisdiction)
        if updated_before is not None:
            clauses.append("updated_at < %s")
            params.append(ensure_utc(updated_before))
        params.append(limit)

        sql = (
            "SELECT id, name, courtlistener_id, updated_at FROM judges "
            f"WHERE {' AND '.join(clauses)} "
            "ORDER BY updated_at ASC NULLS FIRST "
            "LIMIT %s"
        )
        cur = self._execute("select_stale", sql, tuple(params))
        return [_row_to_judge(r) for r in cur.fetchall()]

    def list_known_external_ids(self, *, after: Optional[str], limit: int) -> list[str]:
        if after is None:
            cur = self._execute(
                "list_known_external_ids",
                """
                SELECT courtlistener_id FROM judges
                WHERE courtlistener_id IS NOT NULL
                ORDER BY courtlistener_id
                LIMIT %s
                """,
                (limit,),
            )
        else:
            cur = self._execute(
                "list_known_external_ids",
                """
                SELECT courtlistener_id FROM judges
                WHERE courtlistener_id IS NOT NULL
                  AND courtlistener_id > %s
                ORDER BY courtlistener_id
                LIMIT %s
                """,
                (after, limit),
            )
        return [str(r["courtlistener_id"]) for r in cur.fetchall()]

    def insert_judge(self, fields: dict[str, Any]) -> Optional[Any]:
        columns = _check_columns(fields)
        values = tuple(_adapt(c, fields[c]) for c in columns)
        cur = self._execute("insert_judge", build_insert_sql(columns), values)
        row = cur.fetchone()
        return row["id"] if row else None

    def update_judge(self, judge_id: Any, fields: dict[str, Any]) -> None:
        columns = _check_columns(fields)
        values = tuple(_adapt(c, fields[c]) for c in columns) + (judge_id,)
        cur = self._execute("update_judge", build_update_sql(columns), values)
        if cur.rowcount == 0:
            raise StoreError(f"Juez {judge_id} no existe para update", operation="update_judge")


class PostgresSyncLogRepository(_PostgresBase, SyncLogStore):
    def insert_run(
        self,
        *,
        sync_id: str,
        sync_type: str,
        options: dict[str, Any],
        started_at: datetime,
    ) -> None:
        self._execute(
            "insert_run",
            """
            INSERT INTO sync_logs (sync_id, sync_type, status, options, started_at)
            VALUES (%s, %s, 'started', %s, %s)
            """,
            (sync_id, sync_type, Jsonb(options), ensure_utc(started_at)),
        )

    def finish_run(
        self,
        *,
        sync_id: str,
        status: str,
        completed_at: datetime,
        duration_ms: int,
        result: Optional[dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        # Solo se transiciona desde 'started': un SyncRun tiene un único estado terminal.
        self._execute(
            "finish_run",
            """
            UPDATE sync_logs
            SET status = %s,
                result = %s,
                error_message = %s,
                completed_at = %s,
                duration_ms = %s,
                updated_at = now()
            WHERE sync_id = %s
              AND status = 'started'
            """,
            (
                status,
                Jsonb(result) if result is not None else None,
                error_message,
                ensure_utc(completed_at),
                duration_ms,
                sync_id,
            ),
        )
