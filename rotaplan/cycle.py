"""
Live rotation position: which station each group is at on a given day.

The position is pure arithmetic over the catalog's cycle length, so it keeps
cycling forever after the generated schedule runs out. Groups are staggered
by a phase offset of group_index * (cycle / group_count) days.

Remainders are taken with math.fmod, which keeps the sign of the dividend.
For days before the start date this yields a negative position that lands
on the first station with a day number <= 0, which is the established
behavior and is pinned by tests.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Sequence, Union

from rotaplan.catalog import cycle_length, find_station
from rotaplan.model import CurrentAssignment, Group, Station


def days_between(start: date, now: date) -> int:
    """
    Whole calendar days from start to now (negative if now is earlier).
    """
    return (now - start).days


def _as_number(x: float) -> Union[int, float]:
    return int(x) if float(x).is_integer() else x


def _locate(catalog: Sequence[Station], offset: float) -> tuple[int, float]:
    """
    Walk the catalog until the running total passes offset.
    Returns (station_index, days_before_that_station).
    """
    running = 0
    for i, station in enumerate(catalog):
        if running + station.days > offset:
            return i, running
        running += station.days
    return 0, running


def current_assignments(
    groups: Sequence[Group],
    catalog: Sequence[Station],
    start_date: date,
    now: date,
) -> list[CurrentAssignment]:
    """
    One CurrentAssignment per group, in group order.
    """
    total = cycle_length(catalog)
    if not groups or total <= 0:
        return []

    since_start = days_between(start_date, now)
    in_cycle = math.fmod(since_start, total)

    out: list[CurrentAssignment] = []
    for group_index, group in enumerate(groups):
        phase = group_index * (total / len(groups))
        offset = math.fmod(in_cycle + phase, total)

        idx, before = _locate(catalog, offset)
        out.append(
            CurrentAssignment(
                group_id=group.id,
                station=catalog[idx].name,
                date=now,
                day_number=_as_number(offset - before + 1),
            )
        )
    return out


def next_station(
    assignments: Sequence[CurrentAssignment],
    catalog: Sequence[Station],
    group_id: str,
) -> Station:
    """
    The station after the group's current one, wrapping to the first.
    Falls back to the first station if the group has no assignment.
    """
    current = next((a for a in assignments if a.group_id == group_id), None)
    if current is None:
        return catalog[0]

    idx = find_station(catalog, current.station)
    return catalog[(idx + 1) % len(catalog)]
