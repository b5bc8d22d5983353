"""Tests for the persistent ID cache."""

from __future__ import annotations

import json
from pathlib import Path

from vct_calendar import CacheEntry, CacheState
from vct_calendar.cache import DEFAULT_MAX_ID, load_cache, save_cache, validate_ics

from fakes import make_match


class TestLoadCache:
    def test_missing_file_gives_fresh_state(self, tmp_path: Path) -> None:
        s = load_cache(tmp_path / "api-cache.json")
        assert s == CacheState(valid_ids={}, max_id=DEFAULT_MAX_ID)

    def test_custom_floor(self, tmp_path: Path) -> None:
        assert load_cache(tmp_path / "nope.json", floor=42).max_id == 42

    def test_corrupt_file_gives_fresh_state(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_cache(path) == CacheState(valid_ids={}, max_id=DEFAULT_MAX_ID)

    def test_wrong_shape_gives_fresh_state(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        assert load_cache(path).valid_ids == {}

    def test_reads_metadata_only_file(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        path.write_text(json.dumps({
            "validIds": {"1000003": {"failCount": 1}, "1000004": {"failCount": 0}},
            "maxId": 1000004,
        }), encoding="utf-8")

        s = load_cache(path)

        assert s.max_id == 1000004
        assert s.valid_ids == {1000003: CacheEntry(1), 1000004: CacheEntry(0)}

    def test_skips_malformed_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        path.write_text(json.dumps({
            "validIds": {
                "abc": {"failCount": 0},
                "7": {"failCount": -1},
                "8": "junk",
                "9": {"failCount": 2},
            },
            "maxId": 9,
        }), encoding="utf-8")
        assert list(load_cache(path).valid_ids) == [9]


class TestSaveCache:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        original = CacheState(
            valid_ids={
                1000001: CacheEntry(2),
                1000005: CacheEntry(0, [make_match("m1"), make_match(None)]),
            },
            max_id=1000005,
        )
        save_cache(path, original)
        assert load_cache(path) == original

    def test_save_of_load_is_stable(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        save_cache(path, CacheState({5: CacheEntry(1)}, 10))
        first = path.read_text(encoding="utf-8")

        save_cache(path, load_cache(path))

        assert path.read_text(encoding="utf-8") == first

    def test_file_format(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        save_cache(path, CacheState({5: CacheEntry(1)}, 10))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"validIds": {"5": {"failCount": 1, "matches": []}}, "maxId": 10}

    def test_overwrites_and_leaves_no_temp_file(self, tmp_path: Path) -> None:
        path = tmp_path / "api-cache.json"
        save_cache(path, CacheState({5: CacheEntry(1)}, 10))
        save_cache(path, CacheState({}, 12))
        assert load_cache(path) == CacheState({}, 12)
        assert [p.name for p in tmp_path.iterdir()] == ["api-cache.json"]


class TestValidateIcs:
    def test_valid(self) -> None:
        assert validate_ics(b"BEGIN:VCALENDAR\r\nEND:VCALENDAR")

    def test_invalid(self) -> None:
        assert not validate_ics(b"not a calendar")
