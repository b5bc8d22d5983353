"""One discovery cycle: probe endpoint IDs and reconcile the cache."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

from vct_calendar import (
    CacheEntry,
    CacheState,
    CycleResult,
    FetchResult,
    FetchSuccess,
)
from vct_calendar.fetcher import fetch_all
from vct_calendar.frontier import PROBE_AHEAD, build_probe_batch

MAX_FAIL_COUNT = 3

Fetcher = Callable[[Iterable[int]], Mapping[int, FetchResult]]


def apply_outcomes(
    state: CacheState,
    outcomes: Mapping[int, FetchResult],
    max_fail_count: int = MAX_FAIL_COUNT,
    keep_last_known: bool = False,
) -> CycleResult:
    """Apply every fetch outcome to a copy of the cache.

    Each ID only touches its own entry, so the order of ``outcomes`` does
    not matter. With ``keep_last_known`` a cached ID that fails still
    contributes its stored matches until it is evicted, after every fresh
    payload.
    """
    valid_ids = {
        endpoint_id: CacheEntry(entry.fail_count, list(entry.matches))
        for endpoint_id, entry in state.valid_ids.items()
    }
    max_id = state.max_id
    fresh: dict[int, list] = {}
    stale: dict[int, list] = {}
    evicted: list[int] = []

    for endpoint_id in sorted(outcomes):
        outcome = outcomes[endpoint_id]
        entry = valid_ids.get(endpoint_id)

        if isinstance(outcome, FetchSuccess):
            valid_ids[endpoint_id] = CacheEntry(fail_count=0, matches=list(outcome.matches))
            max_id = max(max_id, endpoint_id)
            fresh[endpoint_id] = outcome.matches
            print(f"  ✓ ID {endpoint_id}: {len(outcome.matches)} matches")
        elif entry is not None:
            entry.fail_count += 1
            if entry.fail_count >= max_fail_count:
                del valid_ids[endpoint_id]
                evicted.append(endpoint_id)
                print(f"  ✗ ID {endpoint_id}: removed after {max_fail_count} failures")
            else:
                print(f"  ✗ ID {endpoint_id}: fail count {entry.fail_count}/{max_fail_count} ({outcome.reason})")
                if keep_last_known and entry.matches:
                    stale[endpoint_id] = entry.matches
        # An unknown ID that fails leaves no trace.

    return CycleResult(
        state=CacheState(valid_ids=valid_ids, max_id=max_id),
        payloads=[fresh[i] for i in sorted(fresh)] + [stale[i] for i in sorted(stale)],
        evicted=evicted,
        succeeded=sorted(fresh),
        fallback=sorted(stale),
    )


def run_cycle(
    state: CacheState,
    fetch: Fetcher = fetch_all,
    probe_ahead: int = PROBE_AHEAD,
    max_fail_count: int = MAX_FAIL_COUNT,
    keep_last_known: bool = False,
) -> CycleResult:
    """Probe cached IDs plus the window above ``max_id`` and reconcile."""
    batch = build_probe_batch(state, probe_ahead)
    cached_count = len(state.valid_ids)
    print(
        f"  Fetching {cached_count} cached IDs + probing {len(batch) - cached_count} new IDs "
        f"({state.max_id + 1} - {state.max_id + probe_ahead})"
    )

    outcomes = fetch(batch)

    return apply_outcomes(
        state,
        outcomes,
        max_fail_count=max_fail_count,
        keep_last_known=keep_last_known,
    )
