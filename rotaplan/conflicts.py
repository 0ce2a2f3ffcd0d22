"""
Station collision detection.

Groups are staggered so that they normally sit at different stations. When
the group count does not divide the cycle length the stagger becomes
fractional and two groups can land on the same station. That is allowed;
this module only reports it.
"""

from __future__ import annotations

from typing import Sequence

from rotaplan.model import CurrentAssignment, ScheduleEntry


def find_station_collisions(
    assignments: Sequence[CurrentAssignment],
) -> list[tuple[CurrentAssignment, CurrentAssignment]]:
    """
    Pairs (A, B) of groups currently at the same station, each pair once (i<j).
    """
    collisions: list[tuple[CurrentAssignment, CurrentAssignment]] = []
    for i in range(len(assignments)):
        a = assignments[i]
        for j in range(i + 1, len(assignments)):
            b = assignments[j]
            if a.station == b.station and a.date == b.date:
                collisions.append((a, b))
    return collisions


def find_schedule_collisions(
    entries: Sequence[ScheduleEntry],
) -> list[tuple[ScheduleEntry, ScheduleEntry]]:
    """
    Pairs of entries for the same station and date but different groups.

    Entries of the same group never collide with each other (the schedule
    is allowed to hold duplicates).
    """
    by_slot: dict[tuple, list[ScheduleEntry]] = {}
    for e in entries:
        by_slot.setdefault((e.date, e.station), []).append(e)

    collisions: list[tuple[ScheduleEntry, ScheduleEntry]] = []
    for slot_entries in by_slot.values():
        for i in range(len(slot_entries)):
            for j in range(i + 1, len(slot_entries)):
                if slot_entries[i].group_id != slot_entries[j].group_id:
                    collisions.append((slot_entries[i], slot_entries[j]))
    return collisions
