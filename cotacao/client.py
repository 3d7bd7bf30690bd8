from __future__ import annotations

"""Polling client for the quote server.

Every ``poll_interval_seconds`` it asks ``/cotacao`` for the current bid,
writes ``"<label>: <bid>\\n"`` to ``output_file`` and then fetches the stored
history from ``/get-data``. Failures are logged and the loop carries on.

Usage:
    SERVER_URL=http://localhost:8080 python -m cotacao.client
"""
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from cotacao.core.config import ClientSettings
from cotacao.core.logging import init_logging

logger = logging.getLogger("cotacao.client")


class ClientError(Exception):
    pass


def fetch_bid(client: httpx.Client, url: str) -> str:
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise ClientError(f"failed to fetch data: {e}") from e
    if response.status_code != 200:
        raise ClientError(f"HTTP {response.status_code} from {url}: {response.text.strip()}")
    try:
        data = response.json()
    except ValueError as e:
        raise ClientError(f"failed to unmarshal JSON: {e}") from e
    bid = data.get("bid") if isinstance(data, dict) else None
    if not isinstance(bid, str) or not bid:
        raise ClientError(f"response from {url} has no bid: {data!r}")
    return bid


def fetch_stored(client: httpx.Client, url: str) -> List[Dict[str, Any]]:
    try:
        response = client.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ClientError(f"failed to fetch stored data: {e}") from e
    if not isinstance(data, list):
        raise ClientError(f"expected a list from {url}, got {type(data).__name__}")
    return data


def write_quote(path: Path, label: str, bid: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{label}: {bid}\n", encoding="utf-8")


def poll_once(client: httpx.Client, settings: ClientSettings) -> Optional[str]:
    """One polling round; returns the bid written, or None when /cotacao failed."""
    base = settings.server_url.rstrip("/")
    bid: Optional[str] = None
    try:
        bid = fetch_bid(client, f"{base}/cotacao")
        write_quote(settings.output_file, settings.label, bid)
        logger.info("fetched bid %s", bid)
    except (ClientError, OSError) as e:
        logger.error("Failed to fetch currency data: %s", e)

    try:
        stored = fetch_stored(client, f"{base}/get-data")
        logger.info("server holds %d stored quotes", len(stored))
    except ClientError as e:
        logger.error("Failed to fetch stored data: %s", e)
    return bid


def run_forever(settings: ClientSettings) -> None:
    logger.info("polling %s every %ss", settings.server_url, settings.poll_interval_seconds)
    with httpx.Client(timeout=settings.request_timeout_seconds) as client:
        while True:
            poll_once(client, settings)
            time.sleep(settings.poll_interval_seconds)


def main() -> None:
    settings = ClientSettings()
    init_logging(debug=settings.debug)
    try:
        run_forever(settings)
    except KeyboardInterrupt:
        logger.info("client stopped")


if __name__ == "__main__":
    main()
