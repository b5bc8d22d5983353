"""Tencent esports API client for VCT-CN match data."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

import requests

from vct_calendar import FetchFailure, FetchResult, FetchSuccess, MatchRecord

API_BASE = "https://val.native.game.qq.com/esports/v1/data/VAL_Match_"
USER_AGENT = "VCTCalendarBot/1.0 (GitHub Actions calendar feed)"
REQUEST_TIMEOUT = 5  # seconds


def endpoint_url(endpoint_id: int) -> str:
    return f"{API_BASE}{endpoint_id}.json"


def fetch_matches(endpoint_id: int, session=None, timeout: float = REQUEST_TIMEOUT) -> FetchResult:
    """Fetch the match list behind one endpoint ID.

    Every way this can go wrong (timeout, HTTP error, bad JSON, empty or
    missing ``msg``, anything else raised by the client) comes back as a
    FetchFailure instead of raising.
    """
    http = session or requests
    headers = {"User-Agent": USER_AGENT}

    try:
        response = http.get(endpoint_url(endpoint_id), headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout:
        return FetchFailure(endpoint_id, "timeout")
    except requests.RequestException as e:
        return FetchFailure(endpoint_id, f"request failed: {e}")
    except Exception as e:
        return FetchFailure(endpoint_id, f"unexpected error: {e}")

    try:
        data = response.json()
    except Exception:
        return FetchFailure(endpoint_id, "invalid JSON")

    matches = parse_payload(data)
    if not matches:
        return FetchFailure(endpoint_id, "no data")
    return FetchSuccess(endpoint_id, matches)


def parse_payload(data: object) -> list[MatchRecord]:
    """Extract the match list from an API body, or [] for any other shape."""
    if not isinstance(data, dict):
        return []
    msg = data.get("msg")
    if not isinstance(msg, list):
        return []
    return [m for m in msg if isinstance(m, dict)]


def fetch_all(ids: Iterable[int], session=None, timeout: float = REQUEST_TIMEOUT) -> dict[int, FetchResult]:
    """Fetch every ID concurrently and wait for all of them to settle."""
    ids = list(ids)
    if not ids:
        return {}

    with ThreadPoolExecutor(max_workers=len(ids)) as executor:
        results = list(
            executor.map(lambda i: fetch_matches(i, session=session, timeout=timeout), ids)
        )

    return dict(zip(ids, results))
