"""Database schema DDL and initialization.

Tables:
  - currency_data: append-only log of USD/BRL quotes, one row per successful insert
"""

from __future__ import annotations
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

CURRENCY_DATA_DDL = """
CREATE TABLE IF NOT EXISTS currency_data (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL,
    codein TEXT NOT NULL,
    name TEXT NOT NULL,
    high REAL NOT NULL,
    low REAL NOT NULL,
    varBid REAL NOT NULL,
    pctChange REAL NOT NULL,
    bid REAL NOT NULL,
    ask REAL NOT NULL,
    timestamp INTEGER NOT NULL,
    create_date TEXT NOT NULL
);
"""

CURRENCY_DATA_TIMESTAMP_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_currency_data_timestamp ON currency_data(timestamp);"
)

DDL_ORDER: Sequence[str] = (
    CURRENCY_DATA_DDL,
    CURRENCY_DATA_TIMESTAMP_INDEX_DDL,
)

INSERT_QUOTE_SQL = """
INSERT INTO currency_data (
    code, codein, name, high, low, varBid, pctChange,
    bid, ask, timestamp, create_date
) VALUES (
    :code, :codein, :name, :high, :low, :varBid, :pctChange,
    :bid, :ask, :timestamp, :create_date
)
"""

SELECT_QUOTES_SQL = """
SELECT code, codein, name, high, low, varBid, pctChange,
       bid, ask, timestamp, create_date
FROM currency_data
ORDER BY id ASC
"""


def init_db(engine: Engine) -> None:
    """Create all tables idempotently."""
    with engine.begin() as conn:
        for ddl in DDL_ORDER:
            conn.execute(text(ddl))
