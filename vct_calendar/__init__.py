"""VCT-CN Match Calendar — shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field

# Raw match object as returned by the upstream API. Never mutated.
MatchRecord = dict


@dataclass
class CacheEntry:
    """A known-valid endpoint ID."""

    fail_count: int = 0
    matches: list[MatchRecord] = field(default_factory=list)


@dataclass
class CacheState:
    """All known-valid IDs plus the highest ID ever confirmed valid."""

    valid_ids: dict[int, CacheEntry]
    max_id: int


@dataclass(frozen=True)
class FetchSuccess:
    """An endpoint that returned a non-empty match list."""

    endpoint_id: int
    matches: list[MatchRecord]


@dataclass(frozen=True)
class FetchFailure:
    """An endpoint that timed out, errored, or returned no usable data."""

    endpoint_id: int
    reason: str = "no data"


FetchResult = FetchSuccess | FetchFailure


@dataclass
class CycleResult:
    """Outcome of one discovery cycle.

    ``payloads`` lists fresh payloads (ascending endpoint ID) before any
    last-known fallbacks, so fresh records win the first-seen dedup.
    """

    state: CacheState
    payloads: list[list[MatchRecord]]
    evicted: list[int] = field(default_factory=list)
    succeeded: list[int] = field(default_factory=list)
    fallback: list[int] = field(default_factory=list)
