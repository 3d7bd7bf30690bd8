"""Data Access Layer for stored quotes.

Responsibilities
----------------
- Own the process-wide SQLAlchemy engine and its connection pool.
- Append one row per quote and read the full history back.

The engine is created once by the app factory and disposed at shutdown;
request handlers receive it through a FastAPI dependency.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from cotacao.core.config import Settings
from cotacao.models import QuoteRecord
from . import schema


class Database:
    def __init__(
        self,
        db_path: Path,
        *,
        pool_size: int = 5,
        max_overflow: int = 20,
        pool_recycle: int = 300,
    ):
        self.db_path = Path(db_path)
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
        event.listen(self.engine, "connect", _set_sqlite_pragmas)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.db_path,  # type: ignore[arg-type]
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle_seconds,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    def init_schema(self) -> None:
        schema.init_db(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # Quotes
    def insert_quote(self, record: QuoteRecord) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(text(schema.INSERT_QUOTE_SQL), record.to_row())
            return int(result.lastrowid)

    def list_quotes(self) -> List[QuoteRecord]:
        with self.engine.connect() as conn:
            rows = conn.execute(text(schema.SELECT_QUOTES_SQL)).mappings().all()
        return [QuoteRecord.from_row(dict(r)) for r in rows]

    def count_quotes(self) -> int:
        with self.engine.connect() as conn:
            return int(conn.execute(text("SELECT COUNT(*) FROM currency_data")).scalar_one())


def _set_sqlite_pragmas(dbapi_conn, _record) -> None:
    # WAL: readers never block on an in-flight insert.
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL")
        cur.execute("PRAGMA busy_timeout=1000")
    finally:
        cur.close()
