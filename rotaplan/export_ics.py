"""
iCalendar (.ics) export.

We convert schedule entries into all-day calendar events that can be
imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Sequence

from rotaplan.model import ScheduleEntry


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def filter_by_occupants(entries: Sequence[ScheduleEntry], occupants: Iterable[str]) -> list[ScheduleEntry]:
    """
    Keep only entries whose displayed occupant is one of `occupants`.
    """
    wanted = {o.strip() for o in occupants if o.strip()}
    return [e for e in entries if e.occupant in wanted]


def export_schedule_to_ics(entries: Sequence[ScheduleEntry], out_path: str | Path) -> int:
    """
    Export entries to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//rotaplan//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for e in sorted(entries, key=lambda x: (x.date, x.occupant)):
        summary = f"{e.occupant} @ {e.station}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(e.id)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART;VALUE=DATE:{e.date.strftime('%Y%m%d')}")
        lines.append(f"DTEND;VALUE=DATE:{(e.date + timedelta(days=1)).strftime('%Y%m%d')}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if e.description:
            lines.append(f"DESCRIPTION:{_ics_escape(e.description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
