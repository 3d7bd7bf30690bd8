"""Pydantic domain models for the quote service."""

from .quote import (
    DEFAULT_CODE,
    DEFAULT_CODEIN,
    DEFAULT_DECIMAL,
    DEFAULT_NAME,
    BidOut,
    QuoteRecord,
)  # re-export

__all__ = [
    "DEFAULT_CODE",
    "DEFAULT_CODEIN",
    "DEFAULT_DECIMAL",
    "DEFAULT_NAME",
    "BidOut",
    "QuoteRecord",
]
