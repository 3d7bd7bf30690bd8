from __future__ import annotations

"""Schema-tolerant decoding of upstream quote payloads.

The quote API has been seen answering with three shapes under the pair key
(``USDBRL``)::

    {"USDBRL": "5.50"}                          bare bid
    {"USDBRL": {"bid": "5.55", "high": ...}}    nested record
    {"bid": "5.55", "code": "USD", ...}         flat record, no pair key

``normalize`` maps each of them onto a ``QuoteRecord`` and falls back to an
all-defaults record for anything else. It never raises: an unrecognized
payload is served as ``bid="0"`` instead of failing the request.
"""
import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from cotacao.models import (
    DEFAULT_CODE,
    DEFAULT_CODEIN,
    DEFAULT_DECIMAL,
    DEFAULT_NAME,
    QuoteRecord,
)
from cotacao.models.quote import now_create_date, now_timestamp

logger = logging.getLogger("cotacao.normalizer")

DEFAULT_PAIR_KEY = "USDBRL"

_MISSING = object()


def normalize(raw: bytes | str, pair_key: str = DEFAULT_PAIR_KEY) -> QuoteRecord:
    record = _decode(raw, pair_key)
    if not record.bid:
        record.bid = DEFAULT_DECIMAL
    return record


def _decode(raw: bytes | str, pair_key: str) -> QuoteRecord:
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        logger.debug("upstream payload is not decodable JSON; using defaults")
        return QuoteRecord.default()
    if not isinstance(payload, dict):
        logger.debug("upstream payload is %s, not an object; using defaults", type(payload).__name__)
        return QuoteRecord.default()

    value = payload.get(pair_key, _MISSING)
    if isinstance(value, str):
        return QuoteRecord(bid=value)
    if isinstance(value, dict):
        return _from_nested(value)
    return _from_flat(payload)


def _from_nested(data: Dict[str, Any]) -> QuoteRecord:
    bid = data.get("bid")
    if not isinstance(bid, str):
        logger.debug("nested quote has no string bid; using defaults")
        return QuoteRecord.default()
    return QuoteRecord(
        code=_str_or_default(data, "code", DEFAULT_CODE),
        codein=_str_or_default(data, "codein", DEFAULT_CODEIN),
        name=_str_or_default(data, "name", DEFAULT_NAME),
        high=_str_or_default(data, "high", DEFAULT_DECIMAL),
        low=_str_or_default(data, "low", DEFAULT_DECIMAL),
        var_bid=_str_or_default(data, "varBid", DEFAULT_DECIMAL),
        pct_change=_str_or_default(data, "pctChange", DEFAULT_DECIMAL),
        bid=bid,
        ask=_str_or_default(data, "ask", DEFAULT_DECIMAL),
        timestamp=_str_or_default(data, "timestamp", now_timestamp()),
        create_date=_str_or_default(data, "create_date", now_create_date()),
    )


def _from_flat(payload: Dict[str, Any]) -> QuoteRecord:
    try:
        return QuoteRecord.model_validate(payload)
    except ValidationError as e:
        logger.debug("payload matches no known shape (%d errors); using defaults", e.error_count())
        return QuoteRecord.default()


def _str_or_default(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default
