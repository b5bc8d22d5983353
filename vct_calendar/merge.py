"""Merging and deduplication of match records from several endpoints."""

from __future__ import annotations

from typing import Iterable

from vct_calendar import MatchRecord


def _team_name(match: MatchRecord, side: str):
    team = match.get(side)
    if isinstance(team, dict):
        return team.get("teamSpName")
    return None


def match_key(match: MatchRecord) -> str:
    """Identity of a match: its matchId, or date + both team names."""
    match_id = match.get("matchId")
    if match_id:
        return str(match_id)
    return f"{match.get('matchDate')}_{_team_name(match, 'teamA')}_{_team_name(match, 'teamB')}"


def merge_matches(payloads: Iterable[Iterable[MatchRecord]]) -> list[MatchRecord]:
    """Flatten payloads into one list; the first record seen for a key wins.

    The same match is often listed under more than one endpoint ID.
    """
    merged: dict[str, MatchRecord] = {}
    for payload in payloads:
        for match in payload:
            merged.setdefault(match_key(match), match)
    return list(merged.values())
