"""
Manual corrections on a generated schedule.

An override only replaces the displayed occupant of one entry. The entry
keeps its group_id, date and station, so occupant and group may disagree
afterwards; consumers must accept that.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from rotaplan.model import ScheduleEntry


def override_occupant(schedule: Sequence[ScheduleEntry], entry_id: str, label: str) -> list[ScheduleEntry]:
    """
    Return a copy of the schedule with the entry's occupant replaced and
    its editing flag cleared. Unknown ids leave the schedule unchanged.
    """
    return [replace(e, occupant=label, editing=False) if e.id == entry_id else e for e in schedule]


def toggle_editing(schedule: Sequence[ScheduleEntry], entry_id: str) -> list[ScheduleEntry]:
    return [replace(e, editing=not e.editing) if e.id == entry_id else e for e in schedule]
