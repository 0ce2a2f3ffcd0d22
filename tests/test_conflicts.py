"""
Unit tests for station collision detection.

Definition used here:
- two groups collide if they are at the same station on the same date
- entries of the same group never collide with each other
"""

import unittest
from datetime import date

from rotaplan.catalog import PHARMACY_STATIONS
from rotaplan.conflicts import find_schedule_collisions, find_station_collisions
from rotaplan.cycle import current_assignments
from rotaplan.model import CurrentAssignment, Group, ScheduleEntry

D = date(2024, 1, 1)


def _entry(eid: str, group_id: str, station: str = "ART", day: date = D) -> ScheduleEntry:
    return ScheduleEntry(
        id=eid, station=station, occupant=group_id, group_id=group_id, date=day, description="", day_in_station=1
    )


class TestStationCollisions(unittest.TestCase):
    def test_same_station_collides(self) -> None:
        a = CurrentAssignment("g0", "ART", D, 1)
        b = CurrentAssignment("g1", "ART", D, 2)
        c = CurrentAssignment("g2", "MCH", D, 1)
        self.assertEqual(find_station_collisions([a, b, c]), [(a, b)])

    def test_uneven_group_count_can_collide(self) -> None:
        # 6 groups on a 10 day cycle: phase 1.67 days apart, G0 and G1 both start at ART
        groups = [Group(f"g{i}", f"G{i}", "#000") for i in range(6)]
        out = current_assignments(groups, PHARMACY_STATIONS, D, D)
        collisions = find_station_collisions(out)
        self.assertEqual(len(collisions), 1)
        self.assertEqual(collisions[0][0].station, collisions[0][1].station)

    def test_even_split_has_no_collisions(self) -> None:
        groups = [Group(f"g{i}", f"G{i}", "#000") for i in range(2)]
        out = current_assignments(groups, PHARMACY_STATIONS, D, D)
        self.assertEqual(find_station_collisions(out), [])


class TestScheduleCollisions(unittest.TestCase):
    def test_different_groups_same_slot(self) -> None:
        a, b = _entry("1", "g0"), _entry("2", "g1")
        self.assertEqual(find_schedule_collisions([a, b]), [(a, b)])

    def test_same_group_duplicates_ignored(self) -> None:
        self.assertEqual(find_schedule_collisions([_entry("1", "g0"), _entry("2", "g0")]), [])

    def test_different_day_or_station(self) -> None:
        entries = [_entry("1", "g0"), _entry("2", "g1", station="MCH"), _entry("3", "g2", day=date(2024, 1, 2))]
        self.assertEqual(find_schedule_collisions(entries), [])


if __name__ == "__main__":
    unittest.main()
