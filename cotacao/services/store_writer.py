from __future__ import annotations

"""Deadline-bounded persistence of quotes.

The insert runs on the loop's default thread-pool executor and is raced
against ``deadline`` with ``asyncio.wait_for``. On expiry only the wait is
abandoned: the worker thread keeps going and its eventual result (row or
error) is dropped.
"""
import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.exc import SQLAlchemyError

from cotacao.core.errors import StoreError
from cotacao.models import QuoteRecord

if TYPE_CHECKING:  # pragma: no cover
    from cotacao.db.dal import Database

logger = logging.getLogger("cotacao.store")


async def persist(db: Optional["Database"], record: QuoteRecord, deadline: float) -> int:
    """Insert ``record`` and return the new row id, or raise StoreError."""
    if db is None:
        raise StoreError("database connection is not initialized")

    snapshot = record.model_copy()
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, db.insert_quote, snapshot)
    try:
        row_id = await asyncio.wait_for(future, timeout=deadline)
    except asyncio.TimeoutError as e:
        raise StoreError(
            f"database insertion timed out after {deadline * 1000:.0f}ms", timed_out=True
        ) from e
    except SQLAlchemyError as e:
        raise StoreError(f"failed to insert data: {e}") from e
    except Exception as e:
        raise StoreError(f"failed to insert data: {type(e).__name__}: {e}") from e
    logger.debug("stored quote row %s", row_id, extra={"stage": "store"})
    return row_id
