from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette import status

from cotacao.core.config import Settings, get_settings
from cotacao.core.errors import StoreError, UpstreamError
from cotacao.db.dal import Database
from cotacao.models import BidOut, QuoteRecord
from cotacao.services.http_client import UpstreamClient
from cotacao.services.normalizer import normalize
from cotacao.services.store_writer import persist

"""Quote router.

Endpoints:
    - GET /cotacao   -> fetch upstream, normalize, persist (best effort), answer {"bid": ...}
    - GET /get-data  -> every stored quote, oldest first

Only an upstream failure turns /cotacao into an error response; a failed
or slow insert is logged and the bid is served anyway.
"""

router = APIRouter(tags=["quotes"])
logger = logging.getLogger("cotacao.quotes")


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_db(request: Request) -> Optional[Database]:
    return getattr(request.app.state, "db", None)


def get_upstream_client(
    request: Request, settings: Settings = Depends(get_app_settings)
) -> UpstreamClient:
    return UpstreamClient(str(settings.upstream_url), request.app.state.http_client)


@router.get(
    "/cotacao",
    response_model=BidOut,
    summary="Fetch the current USD/BRL bid",
    responses={500: {"description": "Upstream quote API unavailable"}},
)
async def get_quote(
    settings: Settings = Depends(get_app_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
    db: Optional[Database] = Depends(get_db),
):
    try:
        raw = await upstream.fetch(settings.upstream_timeout)
    except UpstreamError as e:
        logger.error(
            "Failed to fetch currency data: %s",
            e,
            extra={"stage": "upstream", "timed_out": e.timed_out},
        )
        return PlainTextResponse(
            "Failed to fetch currency data",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.debug(
        "Raw API response: %s", raw.decode("utf-8", errors="replace"), extra={"stage": "upstream"}
    )
    record = normalize(raw, settings.pair_key)
    logger.info("normalized quote", extra={"stage": "normalize", "bid": record.bid})

    try:
        await persist(db, record, settings.store_timeout)
    except StoreError as e:
        logger.warning(
            "Database insertion error: %s",
            e,
            extra={"stage": "store", "timed_out": e.timed_out, "bid": record.bid},
        )

    return BidOut(bid=record.bid)


@router.get(
    "/get-data",
    response_model=List[QuoteRecord],
    response_model_by_alias=True,
    summary="List every stored quote",
)
async def list_quotes(db: Optional[Database] = Depends(get_db)):
    if db is None:
        return PlainTextResponse(
            "Database connection is not initialized",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return db.list_quotes()
