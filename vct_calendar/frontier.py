"""Probe-window computation for endpoint ID discovery."""

from __future__ import annotations

from vct_calendar import CacheState

PROBE_AHEAD = 10


def next_batch(max_id: int, probe_ahead: int = PROBE_AHEAD) -> list[int]:
    """IDs directly above the highest known valid one."""
    return list(range(max_id + 1, max_id + 1 + max(probe_ahead, 0)))


def build_probe_batch(state: CacheState, probe_ahead: int = PROBE_AHEAD) -> list[int]:
    """Cached IDs (ascending) followed by the probe window, without repeats."""
    seen: set[int] = set()
    batch: list[int] = []
    for endpoint_id in [*sorted(state.valid_ids), *next_batch(state.max_id, probe_ahead)]:
        if endpoint_id not in seen:
            seen.add(endpoint_id)
            batch.append(endpoint_id)
    return batch
