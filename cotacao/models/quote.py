from __future__ import annotations
import time
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, StrictStr

DEFAULT_CODE = "USD"
DEFAULT_CODEIN = "BRL"
DEFAULT_NAME = "Dollar/Real"
DEFAULT_DECIMAL = "0"


def now_timestamp() -> str:
    """Unix seconds as text."""
    return str(int(time.time()))


def now_create_date() -> str:
    """RFC3339 local time with offset, e.g. 2025-01-06T17:59:56-03:00."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


class QuoteRecord(BaseModel):
    """Canonical USD/BRL quote, independent of the upstream payload shape.

    Field names follow the upstream wire format through aliases so the same
    model decodes upstream payloads and serializes ``/get-data`` rows.
    """

    model_config = ConfigDict(populate_by_name=True)

    code: StrictStr = DEFAULT_CODE
    codein: StrictStr = DEFAULT_CODEIN
    name: StrictStr = DEFAULT_NAME
    high: StrictStr = DEFAULT_DECIMAL
    low: StrictStr = DEFAULT_DECIMAL
    var_bid: StrictStr = Field(DEFAULT_DECIMAL, alias="varBid")
    pct_change: StrictStr = Field(DEFAULT_DECIMAL, alias="pctChange")
    bid: StrictStr
    ask: StrictStr = DEFAULT_DECIMAL
    timestamp: StrictStr = Field(default_factory=now_timestamp)
    create_date: StrictStr = Field(default_factory=now_create_date)

    @classmethod
    def default(cls) -> "QuoteRecord":
        return cls(bid=DEFAULT_DECIMAL)

    def to_row(self) -> dict:
        """Column mapping for the currency_data table."""
        return {
            "code": self.code,
            "codein": self.codein,
            "name": self.name,
            "high": self.high,
            "low": self.low,
            "varBid": self.var_bid,
            "pctChange": self.pct_change,
            "bid": self.bid,
            "ask": self.ask,
            "timestamp": self.timestamp,
            "create_date": self.create_date,
        }

    @classmethod
    def from_row(cls, row: dict) -> "QuoteRecord":
        values = {k: _as_text(row.get(k)) for k in cls.row_columns()}
        return cls.model_validate(values)

    @staticmethod
    def row_columns() -> tuple[str, ...]:
        return (
            "code",
            "codein",
            "name",
            "high",
            "low",
            "varBid",
            "pctChange",
            "bid",
            "ask",
            "timestamp",
            "create_date",
        )


class BidOut(BaseModel):
    bid: str


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
