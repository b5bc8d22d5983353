#!/usr/bin/env python3
"""
VCT-CN Match Calendar Generator

Discovers live match endpoints on the Tencent esports API, keeps a local
cache of valid endpoint IDs, and writes ICS calendars of every VCT-CN match.
"""

from __future__ import annotations

import sys
from pathlib import Path

from vct_calendar import MatchRecord
from vct_calendar.cache import CACHE_FILE, load_cache, save_cache, validate_ics
from vct_calendar.calendar_gen import create_calendar
from vct_calendar.merge import merge_matches
from vct_calendar.notify import send_error_notification
from vct_calendar.reconcile import run_cycle

OUTPUT_DIR = Path(".")
# Fall back to a cached ID's last payload while it is still being retried
KEEP_LAST_KNOWN = True


def fetch_all_games(cache_path: Path = CACHE_FILE) -> list[MatchRecord]:
    """Run one discovery cycle, persist the cache, return unique matches."""
    state = load_cache(cache_path)
    result = run_cycle(state, keep_last_known=KEEP_LAST_KNOWN)
    save_cache(cache_path, result.state)

    print(
        f"  Found {len(result.succeeded)} valid endpoints "
        f"({len(result.fallback)} more from cache), maxId: {result.state.max_id}"
    )
    games = merge_matches(result.payloads)
    print(f"  Total unique matches: {len(games)}")
    return games


def build_calendar(games: list[MatchRecord], has_alarm: bool) -> bytes:
    """Render one ICS calendar. Raises ValueError on bad match data."""
    ics_bytes = create_calendar(games, has_alarm=has_alarm).to_ical()
    if not validate_ics(ics_bytes):
        raise ValueError("Generated ICS failed validation")
    return ics_bytes


def write_calendars(games: list[MatchRecord], output_dir: Path = OUTPUT_DIR) -> list[Path]:
    """Write the reminder and plain calendars, or neither if either fails."""
    rendered = {
        output_dir / f"vct-cn{'-alarm' if has_alarm else ''}.ics": build_calendar(games, has_alarm)
        for has_alarm in (True, False)
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    for ics_path, ics_bytes in rendered.items():
        ics_path.write_bytes(ics_bytes)
        print(f"  Saved {ics_path} with {len(games)} events")
    return list(rendered)


def main() -> int:
    print("Fetching VCT-CN matches from the Tencent esports API...")
    games = fetch_all_games()

    if not games:
        print("No games found from any API endpoint")
        return 0

    try:
        write_calendars(games)
    except ValueError as e:
        error_msg = f"Failed to generate calendar: {e}"
        print(f"  ERROR: {error_msg}")
        send_error_notification(error_msg)
        return 1

    print("Done — calendars generated successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
