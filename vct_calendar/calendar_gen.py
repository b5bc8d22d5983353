"""ICS calendar generation from VCT-CN match records."""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timedelta, timezone

from icalendar import Alarm, Calendar, Event, vCalAddress, vText

from vct_calendar import MatchRecord
from vct_calendar.merge import match_key

CALENDAR_NAME = "VCT-CN"
EVENT_DURATION = timedelta(hours=2)
# matchDate strings carry no offset. They are read as China Standard Time
# (the league's local time), not as the host's local time, so a runner in
# UTC still places matches correctly.
MATCH_TZ = timezone(timedelta(hours=8))
ORGANIZER_EMAIL = "vct@qq.com"
EVENT_URL = "https://web.haojiao.cc/h/t2Ud5pOQlscKLbRC/adPVjlSLS6j8ja7S"
EVENT_GEO = (30.0095, 120.2669)
EVENT_LOCATION = "Hangzhou, China"


def create_calendar(matches: list[MatchRecord], has_alarm: bool = True, cal_name: str = CALENDAR_NAME) -> Calendar:
    """Create an ICS calendar with one event per match.

    Raises ValueError if a match cannot be turned into an event.
    """
    cal = Calendar()
    cal.add("prodid", f"-//{cal_name} Match Calendar//val.native.game.qq.com//")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", cal_name)
    cal.add("x-wr-timezone", "Asia/Shanghai")
    # Refresh interval hint for calendar clients (4 hours)
    cal.add("x-published-ttl", "PT4H")

    for match in matches:
        cal.add_component(create_event(match, has_alarm))

    return cal


def create_event(match: MatchRecord, has_alarm: bool = True) -> Event:
    """Create a calendar event from a match record."""
    start = parse_match_date(match.get("matchDate")).astimezone(timezone.utc)
    has_result = bool(_parse_score(match.get("scoreA")) or _parse_score(match.get("scoreB")))

    event = Event()
    event.add("summary", event_title(match))
    event.add("dtstart", start)
    event.add("dtend", start + EVENT_DURATION)
    event.add("description", event_description(match))
    event.add("uid", _event_uid(match))
    event.add("url", EVENT_URL)
    event.add("status", "TENTATIVE")
    event.add("geo", EVENT_GEO)
    event.add("location", EVENT_LOCATION)

    organizer = vCalAddress(f"mailto:{ORGANIZER_EMAIL}")
    organizer.params["cn"] = vText(f"无畏契约{match.get('secondLevelGameName') or ''}")
    event.add("organizer", organizer)

    # Reminders only make sense before a result is in
    if has_alarm and not has_result:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("description", f"{_team(match, 'teamA')} vs {_team(match, 'teamB')} starts in 30 minutes!")
        alarm.add("trigger", timedelta(minutes=-30))
        event.add_component(alarm)

    if has_result:
        event.add("transp", "TRANSPARENT")

    return event


def event_title(match: MatchRecord) -> str:
    title = f"{_team(match, 'teamA')} vs {_team(match, 'teamB')}"
    score_a = _parse_score(match.get("scoreA"))
    score_b = _parse_score(match.get("scoreB"))
    if score_a or score_b:
        title += f" - {score_a} : {score_b}"
    return title


def event_description(match: MatchRecord) -> str:
    """Tier, stage and format labels, skipping any that are missing."""
    labels = (match.get(key) for key in ("secondLevelGameName", "bMatchName", "matchFormat"))
    return " ".join(str(label) for label in labels if label)


def parse_match_date(value: object) -> datetime:
    """Parse an API matchDate into an aware datetime."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Missing or invalid matchDate: {value!r}")

    text = value.strip()
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=MATCH_TZ)
        except ValueError:
            continue

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Unrecognised matchDate: {value!r}") from None
    return dt if dt.tzinfo else dt.replace(tzinfo=MATCH_TZ)


def _team(match: MatchRecord, side: str) -> str:
    team = match.get(side)
    name = team.get("teamSpName") if isinstance(team, dict) else None
    return name or "TBD"


def _parse_score(value: object) -> int:
    """Integer score, or 0 when absent or not numeric."""
    if isinstance(value, bool):
        return 0
    found = re.match(r"\s*(-?\d+)", str(value)) if value is not None else None
    return int(found.group(1)) if found else 0


def _event_uid(match: MatchRecord) -> str:
    # Team names are often non-ASCII, so hash the identity key
    digest = hashlib.sha1(match_key(match).encode("utf-8")).hexdigest()[:16]
    return f"vct-cn-{digest}@val.native.game.qq.com"
