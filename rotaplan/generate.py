"""
Schedule generation.

Every group gets its own block of consecutive days, one block after the
other:

    group 0: start_date ... start_date + cycle - 1
    group 1: start_date + cycle ... start_date + 2*cycle - 1
    ...

Inside its block a group walks the station catalog in order and spends
station.days consecutive days at each station.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Callable, Optional, Sequence

from rotaplan.catalog import cycle_length
from rotaplan.errors import EmptyGroupSetError
from rotaplan.model import Group, ScheduleEntry, Station


# Entries per group are capped at 10 days no matter what the catalog adds
# up to. Pass day_cap=None to use the catalog's own cycle length instead.
DAY_CAP = 10


def _new_id() -> str:
    return uuid.uuid4().hex


def describe(group: Group, station: Station, day_in_station: int) -> str:
    return f"{group.name} at {station.name} - {station.description} (Day {day_in_station})"


def generate_schedule(
    groups: Sequence[Group],
    catalog: Sequence[Station],
    start_date: date,
    day_cap: Optional[int] = DAY_CAP,
    new_id: Callable[[], str] = _new_id,
) -> list[ScheduleEntry]:
    """
    Expand groups x catalog x start_date into a full list of dated entries.

    Entries come out grouped by group (in the given order), then by station
    (catalog order), then by date. Raises EmptyGroupSetError if there are
    no groups.
    """
    if not groups:
        raise EmptyGroupSetError()

    cycle = cycle_length(catalog)
    cap = cycle if day_cap is None else day_cap

    entries: list[ScheduleEntry] = []
    for group_index, group in enumerate(groups):
        window_start = start_date + timedelta(days=group_index * cycle)
        day = 0
        for station in catalog:
            for i in range(station.days):
                if day >= cap:
                    break
                entries.append(
                    ScheduleEntry(
                        id=new_id(),
                        station=station.name,
                        occupant=group.name,
                        group_id=group.id,
                        date=window_start + timedelta(days=day),
                        description=describe(group, station, i + 1),
                        day_in_station=i + 1,
                    )
                )
                day += 1

    return entries
