"""Persistent cache of known-valid endpoint IDs."""

from __future__ import annotations

import json
from pathlib import Path

from vct_calendar import CacheEntry, CacheState

CACHE_FILE = Path("api-cache.json")
DEFAULT_MAX_ID = 1000000


def empty_state(floor: int = DEFAULT_MAX_ID) -> CacheState:
    return CacheState(valid_ids={}, max_id=floor)


def load_cache(path: Path = CACHE_FILE, floor: int = DEFAULT_MAX_ID) -> CacheState:
    """Load the ID cache. Falls back to an empty state instead of raising."""
    if not path.exists():
        return empty_state(floor)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"  Warning: cache file {path} unreadable ({e}), starting fresh")
        return empty_state(floor)

    if not isinstance(data, dict) or not isinstance(data.get("validIds", {}), dict):
        print(f"  Warning: cache file {path} has an unexpected shape, starting fresh")
        return empty_state(floor)

    max_id = data.get("maxId", floor)
    if not isinstance(max_id, int) or isinstance(max_id, bool):
        max_id = floor

    valid_ids: dict[int, CacheEntry] = {}
    for key, raw in data.get("validIds", {}).items():
        entry = _parse_entry(raw)
        if entry is None:
            continue
        try:
            valid_ids[int(key)] = entry
        except ValueError:
            continue

    return CacheState(valid_ids=valid_ids, max_id=max_id)


def _parse_entry(raw: object) -> CacheEntry | None:
    if not isinstance(raw, dict):
        return None
    fail_count = raw.get("failCount", 0)
    if not isinstance(fail_count, int) or isinstance(fail_count, bool) or fail_count < 0:
        return None
    matches = raw.get("matches", [])
    if not isinstance(matches, list):
        matches = []
    return CacheEntry(fail_count=fail_count, matches=[m for m in matches if isinstance(m, dict)])


def save_cache(path: Path, state: CacheState) -> None:
    """Overwrite the cache file with the given state.

    Written to a sibling temp file first and renamed into place, so a
    reader never sees a partial file.
    """
    data = {
        "validIds": {
            str(endpoint_id): {"failCount": entry.fail_count, "matches": entry.matches}
            for endpoint_id, entry in sorted(state.valid_ids.items())
        },
        "maxId": state.max_id,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    tmp_path.replace(path)


def validate_ics(data: bytes) -> bool:
    """Basic validation that ICS data is well-formed."""
    text = data.decode("utf-8", errors="replace")
    return text.startswith("BEGIN:VCALENDAR") and "END:VCALENDAR" in text
