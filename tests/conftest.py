"""Shared fixtures."""

from __future__ import annotations

import pytest

from fakes import make_match


@pytest.fixture
def sample_matches() -> list[dict]:
    return [
        make_match("m1", "2025-03-15 17:00:00", "EDG", "FPX", "2", "1"),
        make_match("m2", "2025-03-16 17:00:00", "BLG", "TE"),
        make_match(None, "2025-03-17 19:00:00", "DRG", "NOVA"),
    ]
